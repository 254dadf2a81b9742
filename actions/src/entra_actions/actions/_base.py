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
Entra Actions — Action Base Class

To create a new action:
1. Create a new .py file in this folder
2. Inherit from BaseAction
3. Set action_name
4. Implement invoke() (and error()/halt() if the defaults don't fit)
5. Save and restart — that's it!
"""
from abc import ABC, abstractmethod
from typing import Optional

from entra_actions.models import ExecutionContext
from entra_actions.templating import TemplateResolver
from entra_actions.token_manager import TokenManager


class BaseAction(ABC):
    """
    Base class for all job actions.

    The job runner drives three lifecycle handlers:
    - ``invoke()``: do the work and return a result dict.
    - ``error()``: called with the original params plus ``error`` after
      ``invoke()`` failed. Return ``{"status": "retry_requested"}`` to ask
      for a retry, or raise to fail the job.
    - ``halt()``: called when the job is cancelled. Reporting only.

    Attributes:
        action_name: Unique identifier for this action (matches the job's action)
        description: What this action does
    """

    action_name: str = "unnamed"
    description: str = ""

    def __init__(
        self,
        token_manager: Optional[TokenManager] = None,
        template_resolver: Optional[TemplateResolver] = None,
    ):
        self.token_manager = token_manager
        self.template_resolver = template_resolver

    @abstractmethod
    def invoke(self, params: dict, context: ExecutionContext) -> dict:
        """
        Run the action.

        Args:
            params: Job input parameters.
            context: Environment, secrets and job data.

        Returns:
            A dict with the action result.
        """

    def error(self, params: dict, context: ExecutionContext) -> dict:
        """Default recovery: rethrow and leave classification to the runner."""
        error = params.get("error")
        if isinstance(error, BaseException):
            raise error
        if isinstance(error, dict):
            error = error.get("message", "")
        raise RuntimeError(str(error))

    def halt(self, params: dict, context: ExecutionContext) -> dict:
        """Default halt: report the reason."""
        return {"status": "halted", "reason": params.get("reason", "")}
