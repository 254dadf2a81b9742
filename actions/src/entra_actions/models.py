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
Entra Actions — Data Models

Request-scoped values passed between the job runner and an action.
Nothing here is persisted.
"""
from dataclasses import dataclass, field
from typing import Any

from entra_actions.errors import ValidationError


@dataclass
class ExecutionContext:
    """Environment, secrets and job data supplied by the runner.

    ``environment`` and ``secrets`` are kept out of ``repr`` so a context
    can be logged without leaking credentials.
    """
    environment: dict = field(default_factory=dict, repr=False)
    secrets: dict = field(default_factory=dict, repr=False)
    data: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutionContext":
        """Deserialise from the runner payload."""
        data = data or {}
        return cls(
            environment=dict(data.get("environment") or {}),
            secrets=dict(data.get("secrets") or {}),
            data=dict(data.get("data") or {}),
        )


@dataclass
class InvocationParams:
    """Validated parameters for the disable-user action."""
    user_principal_name: str = ""
    address: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "InvocationParams":
        """Validate the raw job parameters.

        Raises:
            ValidationError: If ``userPrincipalName`` is missing, not a
                string, or blank.
        """
        upn = data.get("userPrincipalName")
        if not isinstance(upn, str) or not upn.strip():
            raise ValidationError(
                "userPrincipalName parameter is required and cannot be empty"
            )

        address = data.get("address") or ""
        return cls(
            user_principal_name=upn.strip(),
            address=address.strip() if isinstance(address, str) else "",
        )


@dataclass
class DisableResult:
    """Outcome of a successful disable call."""
    user_principal_name: str = ""
    account_enabled: bool = False
    address: str = ""
    status: str = "success"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "userPrincipalName": self.user_principal_name,
            "accountEnabled": self.account_enabled,
            "address": self.address,
        }
