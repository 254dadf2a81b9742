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

"""Tests for the Graph user client."""

from unittest.mock import patch

import httpx
import pytest

from entra_actions.errors import ApiError, ConfigurationError, NetworkError
from entra_actions.graph_client import disable_user_account, get_base_url, user_url
from entra_actions.models import ExecutionContext, InvocationParams

HEADERS = {
    "Authorization": "Bearer tok",
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class TestBaseUrl:
    """Test base URL precedence and normalisation."""

    def test_address_param_wins(self):
        params = InvocationParams(user_principal_name="a@b.com", address="https://override.example")
        ctx = ExecutionContext(environment={"ADDRESS": "https://graph.microsoft.com"})
        assert get_base_url(params, ctx) == "https://override.example"

    def test_environment_default(self):
        params = InvocationParams(user_principal_name="a@b.com")
        ctx = ExecutionContext(environment={"ADDRESS": "https://graph.microsoft.com"})
        assert get_base_url(params, ctx) == "https://graph.microsoft.com"

    def test_trailing_slash_stripped(self):
        params = InvocationParams(user_principal_name="a@b.com", address="https://graph.microsoft.com/")
        assert get_base_url(params, ExecutionContext()) == "https://graph.microsoft.com"

    def test_missing_raises(self):
        params = InvocationParams(user_principal_name="a@b.com")
        with pytest.raises(ConfigurationError, match="No base URL"):
            get_base_url(params, ExecutionContext())


class TestUserUrl:
    """The UPN must stay a single, percent-encoded path segment."""

    @pytest.mark.parametrize("upn,encoded", [
        ("user@example.com", "user%40example.com"),
        ("a/b@example.com", "a%2Fb%40example.com"),
        ("first last@example.com", "first%20last%40example.com"),
        ("o'brien@example.com", "o'brien%40example.com"),
    ])
    def test_encodes_reserved_characters(self, upn, encoded):
        url = user_url("https://graph.microsoft.com", upn)
        assert url == f"https://graph.microsoft.com/v1.0/users/{encoded}"

    def test_no_raw_reserved_characters_in_segment(self):
        url = user_url("https://graph.microsoft.com", "../x y@z/w?q#f")
        segment = url.rsplit("/v1.0/users/", 1)[1]
        for ch in "@/ ?#":
            assert ch not in segment


class TestDisableUserAccount:
    """Test the PATCH call and response classification."""

    @patch("entra_actions.graph_client.httpx.patch")
    def test_sends_patch(self, mock_patch):
        mock_patch.return_value = httpx.Response(204)

        disable_user_account("user@example.com", "https://graph.microsoft.com", HEADERS)

        mock_patch.assert_called_once()
        call = mock_patch.call_args
        assert call.args[0] == "https://graph.microsoft.com/v1.0/users/user%40example.com"
        assert call.kwargs["json"] == {"accountEnabled": False}
        assert call.kwargs["headers"]["Authorization"] == "Bearer tok"
        assert call.kwargs["headers"]["Content-Type"] == "application/json"
        assert call.kwargs["headers"]["Accept"] == "application/json"

    @patch("entra_actions.graph_client.httpx.patch")
    def test_204_reports_disabled(self, mock_patch):
        mock_patch.return_value = httpx.Response(204)
        assert disable_user_account("u@example.com", "https://g", HEADERS) is False

    @patch("entra_actions.graph_client.httpx.patch")
    def test_200_reads_body(self, mock_patch):
        mock_patch.return_value = httpx.Response(200, json={"accountEnabled": True})
        assert disable_user_account("u@example.com", "https://g", HEADERS) is True

    @patch("entra_actions.graph_client.httpx.patch")
    def test_200_without_field_defaults_false(self, mock_patch):
        mock_patch.return_value = httpx.Response(200, json={"id": "abc"})
        assert disable_user_account("u@example.com", "https://g", HEADERS) is False

    @patch("entra_actions.graph_client.httpx.patch")
    def test_200_empty_body_defaults_false(self, mock_patch):
        mock_patch.return_value = httpx.Response(200)
        assert disable_user_account("u@example.com", "https://g", HEADERS) is False

    @pytest.mark.parametrize("body", [
        [{"accountEnabled": True}],
        "disabled",
        {"accountEnabled": None},
    ])
    @patch("entra_actions.graph_client.httpx.patch")
    def test_200_non_object_or_null_body_defaults_false(self, mock_patch, body):
        mock_patch.return_value = httpx.Response(200, json=body)
        assert disable_user_account("u@example.com", "https://g", HEADERS) is False

    @patch("entra_actions.graph_client.httpx.patch")
    def test_non_2xx_raises_api_error(self, mock_patch):
        mock_patch.return_value = httpx.Response(
            404, text='{"error":{"code":"Request_ResourceNotFound"}}',
        )

        with pytest.raises(ApiError) as excinfo:
            disable_user_account("u@example.com", "https://g", HEADERS)

        err = excinfo.value
        assert err.status_code == 404
        assert err.status_text == "Not Found"
        assert "Request_ResourceNotFound" in err.body
        assert str(err).startswith("Failed to disable user: 404 Not Found. Details: ")

    @patch("entra_actions.graph_client.httpx.patch")
    def test_transport_error_raises_network_error(self, mock_patch):
        mock_patch.side_effect = httpx.ConnectError("connection refused")

        with pytest.raises(NetworkError, match="connection refused"):
            disable_user_account("u@example.com", "https://g", HEADERS)
