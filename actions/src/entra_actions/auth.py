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
Entra Actions — Authentication Headers

Builds the request headers for a Graph call from whichever credential the
execution context carries. Supported schemes, first match wins:

1. ``BEARER_AUTH_TOKEN`` secret (static token)
2. ``OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN`` secret (token obtained elsewhere)
3. OAuth2 client credentials (``OAUTH2_CLIENT_CREDENTIALS_*``)
"""
import logging
from typing import Optional

from entra_actions.errors import MissingCredentialsError
from entra_actions.models import ExecutionContext
from entra_actions.token_manager import AUTH_STYLE_IN_PARAMS, ClientCredentials, TokenManager

logger = logging.getLogger(__name__)

BEARER_TOKEN_SECRET = "BEARER_AUTH_TOKEN"
AUTH_CODE_TOKEN_SECRET = "OAUTH2_AUTHORIZATION_CODE_ACCESS_TOKEN"
CC_PREFIX = "OAUTH2_CLIENT_CREDENTIALS_"

# Shared across invocations in one worker process
_default_token_manager = TokenManager()


def _bearer(token: str) -> str:
    if token.startswith("Bearer "):
        return token
    return f"Bearer {token}"


def client_credentials_from_context(context: ExecutionContext) -> Optional[ClientCredentials]:
    """Read OAuth2 client credentials config from the context.

    Returns None when no client credentials are configured at all.

    Raises:
        MissingCredentialsError: If the configuration is only partly present.
    """
    env = context.environment
    token_url = env.get(f"{CC_PREFIX}TOKEN_URL", "")
    client_id = env.get(f"{CC_PREFIX}CLIENT_ID", "")
    client_secret = context.secrets.get(f"{CC_PREFIX}CLIENT_SECRET", "")

    if not (token_url or client_id or client_secret):
        return None

    missing = [
        name for name, value in (
            (f"{CC_PREFIX}TOKEN_URL", token_url),
            (f"{CC_PREFIX}CLIENT_ID", client_id),
            (f"{CC_PREFIX}CLIENT_SECRET", client_secret),
        ) if not value
    ]
    if missing:
        raise MissingCredentialsError(
            f"OAuth2 client credentials incomplete, missing: {', '.join(missing)}"
        )

    return ClientCredentials(
        token_url=token_url,
        client_id=client_id,
        client_secret=client_secret,
        scope=env.get(f"{CC_PREFIX}SCOPE", ""),
        audience=env.get(f"{CC_PREFIX}AUDIENCE", ""),
        auth_style=env.get(f"{CC_PREFIX}AUTH_STYLE", "") or AUTH_STYLE_IN_PARAMS,
    )


def create_auth_headers(
    context: ExecutionContext,
    token_manager: Optional[TokenManager] = None,
) -> dict[str, str]:
    """Return JSON request headers carrying a bearer credential.

    Raises:
        MissingCredentialsError: If no credential is configured.
        AuthenticationError: If the token endpoint rejects the request.
    """
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }

    static_token = context.secrets.get(BEARER_TOKEN_SECRET)
    if static_token:
        headers["Authorization"] = _bearer(static_token)
        return headers

    auth_code_token = context.secrets.get(AUTH_CODE_TOKEN_SECRET)
    if auth_code_token:
        headers["Authorization"] = _bearer(auth_code_token)
        return headers

    creds = client_credentials_from_context(context)
    if creds is not None:
        manager = token_manager or _default_token_manager
        headers["Authorization"] = _bearer(manager.get_token(creds))
        return headers

    raise MissingCredentialsError(
        "No authentication configured: set a bearer token, an authorization "
        "code access token, or OAuth2 client credentials"
    )
