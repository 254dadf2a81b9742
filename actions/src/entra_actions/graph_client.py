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
Entra Actions — Graph User Client

API: PATCH /v1.0/users/{userPrincipalName}
Perm: User.EnableDisableAccount.All + User.Read.All (application)

One request per call. Retries are the job runner's business, and no
timeout is set here beyond httpx's own default.
"""
import logging
from urllib.parse import quote

import httpx

from entra_actions.errors import ApiError, ConfigurationError, NetworkError
from entra_actions.models import ExecutionContext, InvocationParams

logger = logging.getLogger(__name__)

BASE_URL_ENV = "ADDRESS"
USERS_PATH = "/v1.0/users"

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"

DISABLE_BODY = {"accountEnabled": False}


def get_base_url(params: InvocationParams, context: ExecutionContext) -> str:
    """Resolve the API root: explicit ``address`` wins over ``ADDRESS``.

    Raises:
        ConfigurationError: If neither is set.
    """
    base_url = params.address or (context.environment.get(BASE_URL_ENV) or "").strip()
    if not base_url:
        raise ConfigurationError(
            f"No base URL configured: pass 'address' or set {BASE_URL_ENV}"
        )
    return base_url.rstrip("/")


def user_url(base_url: str, user_principal_name: str) -> str:
    """Build the user resource URL with the UPN as one path segment."""
    encoded = quote(user_principal_name, safe=_URI_COMPONENT_SAFE)
    return f"{base_url}{USERS_PATH}/{encoded}"


def disable_user_account(
    user_principal_name: str,
    base_url: str,
    headers: dict[str, str],
) -> bool:
    """PATCH ``accountEnabled: false`` onto the user.

    Returns:
        The ``accountEnabled`` value reported by the service (False on 204).

    Raises:
        ApiError: On a non-2xx response.
        NetworkError: If the request never got a response.
    """
    url = user_url(base_url, user_principal_name)

    try:
        response = httpx.patch(url, json=DISABLE_BODY, headers=headers)
    except httpx.TransportError as exc:
        logger.error("Disable request failed: upn=%s error=%s", user_principal_name, exc)
        raise NetworkError(f"Request to {url} failed: {exc}") from exc

    if not response.is_success:
        logger.error(
            "Disable user failed: upn=%s status=%d body=%s",
            user_principal_name, response.status_code, response.text[:500],
        )
        raise ApiError(response.status_code, response.reason_phrase, response.text)

    if response.status_code == 204 or not response.content:
        return False

    body = response.json()
    account_enabled = body.get("accountEnabled") if isinstance(body, dict) else None
    return bool(account_enabled) if account_enabled is not None else False
