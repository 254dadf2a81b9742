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
Entra Actions Worker — Dispatcher

Routes a named job to the matching action's lifecycle handlers.
"""
import logging
from typing import Optional

from entra_actions.actions import discover_actions
from entra_actions.actions._base import BaseAction
from entra_actions.models import ExecutionContext
from entra_actions.templating import TemplateResolver
from entra_actions.token_manager import TokenManager

logger = logging.getLogger(__name__)


class Dispatcher:
    """Discover available actions and dispatch lifecycle calls to them."""

    def __init__(
        self,
        token_manager: Optional[TokenManager] = None,
        template_resolver: Optional[TemplateResolver] = None,
    ):
        self.actions: dict[str, BaseAction] = discover_actions(
            token_manager=token_manager,
            template_resolver=template_resolver,
        )
        logger.info("Dispatcher ready: %d action(s)", len(self.actions))

    def get_action(self, action_name: str) -> BaseAction:
        action = self.actions.get(action_name)
        if action is None:
            raise ValueError(f"No action registered with name '{action_name}'")
        return action

    def invoke(self, action_name: str, params: dict, context: ExecutionContext) -> dict:
        action = self.get_action(action_name)
        logger.info("Invoking action '%s'", action_name)
        return action.invoke(params, context)

    def recover(
        self,
        action_name: str,
        params: dict,
        error: BaseException,
        context: ExecutionContext,
    ) -> dict:
        """Hand a failed invocation to the action's error handler.

        Returns the handler's result (``retry_requested``) or lets its
        exception propagate.
        """
        action = self.get_action(action_name)
        return action.error({**params, "error": error}, context)

    def halt(self, action_name: str, params: dict, context: ExecutionContext) -> dict:
        action = self.get_action(action_name)
        logger.info("Halting action '%s': %s", action_name, params.get("reason"))
        return action.halt(params, context)
