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
Entra Actions Worker — Celery Tasks

Maps an action's lifecycle onto Celery:
1. run_action:       invoke; on failure ask the action's error handler,
                     which either fails the task or requests a retry
2. on_task_revoked:  revoked/expired/terminated tasks get a halt report

Celery owns retry timing (``max_retries``, ``default_retry_delay``).
"""
import logging
from typing import Optional

from celery.exceptions import SoftTimeLimitExceeded
from celery.signals import task_revoked

from entra_actions.celery_app import app
from entra_actions.dispatcher import Dispatcher
from entra_actions.models import ExecutionContext
from entra_actions.token_manager import TokenManager
from entra_shared.config import get_environment, get_secrets

logger = logging.getLogger(__name__)

# Lazy-initialised singleton (created on first use by each worker process)
_dispatcher = None


def _get_dispatcher() -> Dispatcher:
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = Dispatcher(token_manager=TokenManager())
    return _dispatcher


def _build_context(payload: Optional[dict]) -> ExecutionContext:
    """Overlay the job's context payload on the configured defaults."""
    payload = payload or {}
    return ExecutionContext(
        environment={**get_environment(), **(payload.get("environment") or {})},
        secrets={**get_secrets(), **(payload.get("secrets") or {})},
        data=dict(payload.get("data") or {}),
    )


@app.task(
    name="entra_actions.tasks.run_action",
    bind=True,
    max_retries=3,
    default_retry_delay=10,
    acks_late=True,
)
def run_action(self, action_name: str, params: dict, context: Optional[dict] = None):
    """
    Run one action invocation.

    Args:
        action_name: Registered action name, e.g. ``disable_user``.
        params: Job input parameters.
        context: Optional ``environment`` / ``secrets`` / ``data`` payload.
    """
    dispatcher = _get_dispatcher()
    dispatcher.get_action(action_name)  # unknown actions fail without retry
    ctx = _build_context(context)

    try:
        return dispatcher.invoke(action_name, params, ctx)

    except SoftTimeLimitExceeded:
        logger.warning("Action '%s' hit its soft time limit", action_name)
        return dispatcher.halt(action_name, {**params, "reason": "timeout"}, ctx)

    except Exception as exc:
        # Raises for fatal errors; returns retry_requested otherwise
        dispatcher.recover(action_name, params, exc, ctx)
        logger.warning(
            "Action '%s' failed, retry %d/%d: %s",
            action_name, self.request.retries + 1, self.max_retries, exc,
        )
        raise self.retry(exc=exc)


@task_revoked.connect
def on_task_revoked(sender=None, request=None, terminated=None, signum=None, expired=None, **kwargs):
    """Report a halt for revoked ``run_action`` tasks."""
    if request is None or getattr(sender, "name", None) != run_action.name:
        return None

    args = list(request.args or [])
    task_kwargs = dict(request.kwargs or {})
    action_name = args[0] if args else task_kwargs.get("action_name")
    params = args[1] if len(args) > 1 else task_kwargs.get("params") or {}
    context = args[2] if len(args) > 2 else task_kwargs.get("context")

    if expired:
        reason = "expired"
    elif terminated:
        reason = "terminated"
    else:
        reason = "revoked"

    result = _get_dispatcher().halt(
        action_name, {**params, "reason": reason}, _build_context(context),
    )
    logger.info("Action '%s' halted: %s", action_name, result)
    return result
