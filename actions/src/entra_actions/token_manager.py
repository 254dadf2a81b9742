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
Entra Actions — OAuth2 Client Credentials Token Manager

Acquires and caches access tokens using the client credentials flow.
Tokens are cached per credential set (token URL, client, scope, audience)
so one worker can serve several directory connections.

Thread-safe: uses a lock per credential set to prevent thundering-herd
issues when multiple Celery threads need tokens simultaneously.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

import httpx

from entra_actions.errors import AuthenticationError

logger = logging.getLogger(__name__)

# How many seconds before expiry to proactively refresh
REFRESH_BUFFER_SECONDS = 300  # 5 minutes

AUTH_STYLE_IN_HEADER = "InHeader"
AUTH_STYLE_IN_PARAMS = "InParams"


@dataclass
class _CachedToken:
    """Internal cache entry for a single credential set's token."""
    access_token: str = ""
    expires_at: float = 0.0  # Unix timestamp

    @property
    def is_valid(self) -> bool:
        return bool(self.access_token) and time.time() < (self.expires_at - REFRESH_BUFFER_SECONDS)


@dataclass(frozen=True)
class ClientCredentials:
    """OAuth2 client credentials configuration."""
    token_url: str
    client_id: str
    client_secret: str
    scope: str = ""
    audience: str = ""
    auth_style: str = AUTH_STYLE_IN_PARAMS

    def __repr__(self) -> str:
        return f"ClientCredentials(token_url={self.token_url!r}, client_id={self.client_id!r})"

    @property
    def cache_key(self) -> tuple:
        return (self.token_url, self.client_id, self.scope, self.audience)


class TokenManager:
    """OAuth2 token manager using client credentials flow.

    Usage:
        manager = TokenManager()
        creds = ClientCredentials(
            token_url="https://login.microsoftonline.com/<tenant>/oauth2/v2.0/token",
            client_id="client-1",
            client_secret="secret-1",
            scope="https://graph.microsoft.com/.default",
        )
        token = manager.get_token(creds)
    """

    def __init__(self):
        self._tokens: dict[tuple, _CachedToken] = {}
        self._locks: dict[tuple, threading.Lock] = {}
        self._global_lock = threading.Lock()

    def _get_lock(self, key: tuple) -> threading.Lock:
        """Get or create a per-credential lock."""
        if key not in self._locks:
            with self._global_lock:
                if key not in self._locks:
                    self._locks[key] = threading.Lock()
        return self._locks[key]

    def get_token(self, creds: ClientCredentials) -> str:
        """Get a valid access token for the given credentials.

        Tokens are cached and refreshed automatically before expiry.

        Raises:
            AuthenticationError: If token acquisition fails.
        """
        key = creds.cache_key

        cached = self._tokens.get(key)
        if cached and cached.is_valid:
            return cached.access_token

        lock = self._get_lock(key)
        with lock:
            # Double-check after acquiring lock
            cached = self._tokens.get(key)
            if cached and cached.is_valid:
                return cached.access_token

            return self._refresh_token(creds)

    def invalidate(self, creds: Optional[ClientCredentials] = None) -> None:
        """Drop a cached token (or all of them)."""
        if creds is None:
            self._tokens.clear()
        else:
            self._tokens.pop(creds.cache_key, None)

    def _refresh_token(self, creds: ClientCredentials) -> str:
        """Acquire a fresh token from the token endpoint."""
        form = {"grant_type": "client_credentials"}
        if creds.scope:
            form["scope"] = creds.scope
        if creds.audience:
            form["audience"] = creds.audience

        auth = None
        if creds.auth_style == AUTH_STYLE_IN_HEADER:
            auth = (creds.client_id, creds.client_secret)
        else:
            form["client_id"] = creds.client_id
            form["client_secret"] = creds.client_secret

        try:
            with httpx.Client(timeout=30) as client:
                resp = client.post(creds.token_url, data=form, auth=auth)
                resp.raise_for_status()

            data = resp.json()
            access_token = data["access_token"]
            expires_in = int(data.get("expires_in", 3600))

        except httpx.HTTPStatusError as exc:
            raise AuthenticationError(
                f"Token acquisition failed for client {creds.client_id}: "
                f"HTTP {exc.response.status_code} — {exc.response.text}"
            ) from exc
        except Exception as exc:
            raise AuthenticationError(
                f"Token acquisition failed for client {creds.client_id}: {exc}"
            ) from exc

        self._tokens[creds.cache_key] = _CachedToken(
            access_token=access_token,
            expires_at=time.time() + expires_in,
        )

        logger.info(
            "Token refreshed for client %s (expires in %ds)",
            creds.client_id, expires_in,
        )
        return access_token
