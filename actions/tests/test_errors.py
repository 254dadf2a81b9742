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

"""Tests for action error types surviving serialisation."""

import json
import pickle

import pytest
from celery.backends.base import BaseBackend

from entra_actions.celery_app import app
from entra_actions.errors import ApiError, MissingCredentialsError

MESSAGE = "Failed to disable user: 403 Forbidden. Details: nope"


@pytest.fixture
def backend():
    return BaseBackend(app, serializer="json")


class TestApiError:

    def test_message_and_fields(self):
        err = ApiError(403, "Forbidden", "nope")

        assert str(err) == MESSAGE
        assert err.status_code == 403
        assert err.status_text == "Forbidden"
        assert err.body == "nope"

    def test_pickle_keeps_structured_fields(self):
        err = pickle.loads(pickle.dumps(ApiError(403, "Forbidden", "nope")))

        assert err.status_code == 403
        assert err.status_text == "Forbidden"
        assert err.body == "nope"
        assert str(err) == MESSAGE

    def test_result_backend_keeps_structured_fields(self, backend):
        stored = json.loads(json.dumps(backend.prepare_exception(ApiError(429, "Too Many Requests", "slow"))))

        err = backend.exception_to_python(stored)

        assert isinstance(err, ApiError)
        assert err.status_code == 429
        assert str(err) == "Failed to disable user: 429 Too Many Requests. Details: slow"


class TestMissingCredentialsError:

    def test_result_backend_roundtrip(self, backend):
        stored = json.loads(json.dumps(backend.prepare_exception(MissingCredentialsError("No authentication configured"))))

        err = backend.exception_to_python(stored)

        assert isinstance(err, MissingCredentialsError)
        assert str(err) == "No authentication configured"
