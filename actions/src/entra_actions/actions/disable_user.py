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
Action: Disable User

Disables an Azure AD account by setting ``accountEnabled`` to false. The
user can no longer sign in; nothing else about the account changes, so it
can be re-enabled later. Disabling an already-disabled account is a no-op.

Failures are classified from the HTTP status code:
- 429, 502, 503, 504 and transport errors → retry
- 400, 401, 403, bad parameters, missing base URL or credentials → fatal
- anything else → retry
"""
import logging

from entra_actions.actions._base import BaseAction
from entra_actions.auth import create_auth_headers
from entra_actions.errors import (
    ActionError,
    ApiError,
    ConfigurationError,
    MissingCredentialsError,
    NetworkError,
    ValidationError,
)
from entra_actions.graph_client import disable_user_account, get_base_url
from entra_actions.models import DisableResult, ExecutionContext, InvocationParams
from entra_actions.templating import resolve_templates

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})
FATAL_STATUS_CODES = frozenset({400, 401, 403})

# Codes looked for in the text of errors that carry no structured status
MESSAGE_FATAL_STATUS_CODES = frozenset({401, 403})


def _error_message(error) -> str:
    if error is None:
        return ""
    if isinstance(error, dict):
        return str(error.get("message", ""))
    return str(error)


def _mentions(message: str, codes) -> bool:
    return any(str(code) in message for code in codes)


def is_retryable(error) -> bool:
    """Decide whether a failed invocation should be retried.

    ``ApiError`` is classified on its status code. Errors that arrive as a
    plain ``{"message": ...}`` mapping carry no code, so the message text
    is searched for the codes instead (retryable codes first).
    """
    if isinstance(error, (ValidationError, ConfigurationError, MissingCredentialsError)):
        return False
    if isinstance(error, NetworkError):
        return True

    if isinstance(error, ApiError):
        if error.status_code in RETRYABLE_STATUS_CODES:
            return True
        return error.status_code not in FATAL_STATUS_CODES

    message = _error_message(error)
    if _mentions(message, RETRYABLE_STATUS_CODES):
        return True
    return not _mentions(message, MESSAGE_FATAL_STATUS_CODES)


class DisableUserAction(BaseAction):
    """Set ``accountEnabled: false`` on an Azure AD user."""

    action_name = "disable_user"
    description = "Disables a user account in Azure Active Directory"

    def invoke(self, params: dict, context: ExecutionContext) -> dict:
        """Validate params, then PATCH the user.

        Raises:
            ValidationError: Missing or blank ``userPrincipalName``.
            ConfigurationError: No base URL.
            AuthenticationError: No usable credential.
            ApiError: Non-2xx response.
            NetworkError: No response at all.
        """
        resolved = resolve_templates(params, context.data, self.template_resolver)
        request = InvocationParams.from_dict(resolved)
        base_url = get_base_url(request, context)
        headers = create_auth_headers(context, self.token_manager)

        logger.info("Disabling user account: %s", request.user_principal_name)

        account_enabled = disable_user_account(
            request.user_principal_name, base_url, headers,
        )

        logger.info(
            "Successfully disabled user account: %s (accountEnabled=%s)",
            request.user_principal_name, account_enabled,
        )

        return DisableResult(
            user_principal_name=request.user_principal_name,
            account_enabled=account_enabled,
            address=base_url,
        ).to_dict()

    def error(self, params: dict, context: ExecutionContext) -> dict:
        """Ask for a retry on transient failures, rethrow the rest."""
        error = params.get("error")
        upn = params.get("userPrincipalName")
        logger.error("User disable failed for %s: %s", upn, _error_message(error))

        if is_retryable(error):
            logger.info("Requesting retry for %s", upn)
            return {"status": "retry_requested"}

        if isinstance(error, BaseException):
            raise error
        raise ActionError(_error_message(error))

    def halt(self, params: dict, context: ExecutionContext) -> dict:
        reason = params.get("reason")
        logger.info("User disable operation halted: %s", reason)

        return {
            "status": "halted",
            "userPrincipalName": params.get("userPrincipalName") or "unknown",
            "reason": reason,
        }
