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
Entra Actions Worker — Celery Application Configuration

Single source of truth for Celery config in the actions service.
"""
import os
from celery import Celery

from entra_shared.celery_defaults import CELERY_DEFAULTS

# Seconds before a running action receives SoftTimeLimitExceeded (0 = none)
ACTION_SOFT_TIME_LIMIT = int(os.environ.get("ACTION_SOFT_TIME_LIMIT", "120"))

app = Celery("entra_actions")

app.config_from_object({
    **CELERY_DEFAULTS,

    # Task routing
    "task_routes": {
        "entra_actions.tasks.run_action": {"queue": "actions"},
    },

    "task_soft_time_limit": ACTION_SOFT_TIME_LIMIT or None,
})

app.autodiscover_tasks(["entra_actions"])
