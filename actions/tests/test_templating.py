# Copyright (c) 2026 John Earle
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for best-effort parameter templating."""

import logging
from unittest.mock import MagicMock

from entra_actions.templating import resolve_templates


class TestResolveTemplates:

    def test_no_resolver_returns_copy(self):
        params = {"userPrincipalName": "{$.user.email}"}
        resolved = resolve_templates(params, {"user": {}})

        assert resolved == params
        assert resolved is not params

    def test_only_placeholder_strings_resolved(self):
        resolver = MagicMock(return_value="user@example.com")
        params = {
            "userPrincipalName": "{$.user.email}",
            "address": "https://graph.microsoft.com",
            "count": 3,
        }

        resolved = resolve_templates(params, {"user": {"email": "user@example.com"}}, resolver)

        assert resolved["userPrincipalName"] == "user@example.com"
        assert resolved["address"] == "https://graph.microsoft.com"
        assert resolved["count"] == 3
        resolver.assert_called_once()

    def test_resolver_error_logged_and_value_kept(self, caplog):
        resolver = MagicMock(side_effect=KeyError("user"))
        params = {"userPrincipalName": "{$.user.email}"}

        with caplog.at_level(logging.WARNING, logger="entra_actions.templating"):
            resolved = resolve_templates(params, {}, resolver)

        assert resolved["userPrincipalName"] == "{$.user.email}"
        assert "Template resolution failed for parameter 'userPrincipalName'" in caplog.text

    def test_missing_data_passes_empty_dict(self):
        resolver = MagicMock(return_value="x")
        resolve_templates({"a": "{$.b}"}, None, resolver)
        resolver.assert_called_once_with("{$.b}", {})

    def test_placeholder_containing_braces_is_resolved(self):
        resolver = MagicMock(return_value="user@example.com")
        value = "{$.users[?(@.tags == {\"vip\": true})].email}"

        resolved = resolve_templates({"userPrincipalName": value}, {"users": []}, resolver)

        resolver.assert_called_once_with(value, {"users": []})
        assert resolved["userPrincipalName"] == "user@example.com"

    def test_unterminated_placeholder_failure_is_logged(self, caplog):
        resolver = MagicMock(side_effect=ValueError("unterminated expression"))

        with caplog.at_level(logging.WARNING, logger="entra_actions.templating"):
            resolved = resolve_templates({"address": "{$.base"}, {}, resolver)

        assert resolved["address"] == "{$.base"
        assert "unterminated expression" in caplog.text
