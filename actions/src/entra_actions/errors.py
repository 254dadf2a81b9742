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

"""
Entra Actions — Error Types

Every failure an action raises derives from ``ActionError``. The job
runner decides retry vs fatal from these types (see
``DisableUserAction.error``).
"""


class ActionError(Exception):
    """Base class for action failures."""


class ValidationError(ActionError):
    """Invocation parameters are missing or malformed. Never retried."""


class ConfigurationError(ActionError):
    """Required configuration (e.g. base URL) is not available. Never retried."""


class AuthenticationError(ActionError):
    """No usable credential could be produced."""


class MissingCredentialsError(AuthenticationError):
    """No credential scheme is configured, or one is only partly configured.

    Never retried.
    """


class NetworkError(ActionError):
    """Transport-level failure (DNS, connection refused, timeout)."""


class ApiError(ActionError):
    """Non-2xx response from the directory service.

    The status code is kept as a structured field; the message still embeds
    code, status text and body so it stays readable in runner logs.

    ``args`` holds the constructor arguments so Celery result backends and
    pickle can rebuild the error with ``cls(*args)``.
    """

    def __init__(self, status_code: int, status_text: str = "", body: str = ""):
        super().__init__(status_code, status_text, body)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body

    def __str__(self) -> str:
        return (
            f"Failed to disable user: {self.status_code} {self.status_text}. "
            f"Details: {self.body}"
        )
