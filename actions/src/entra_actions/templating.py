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
Best-effort parameter templating.

Job parameters may carry path-expression placeholders such as
``{$.user.email}`` that refer to the job's data context. The expression
engine itself is supplied by the host as a resolver callable; this module
only decides which values to hand it and what to do when it fails.
"""
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

TemplateResolver = Callable[[str, dict], str]

# Any value containing this is handed to the resolver, which owns the
# placeholder grammar (paths may themselves contain braces)
PLACEHOLDER_START = "{$"


def resolve_templates(
    params: dict,
    data: Optional[dict] = None,
    resolver: Optional[TemplateResolver] = None,
) -> dict[str, Any]:
    """Substitute placeholders in string parameter values.

    Resolution errors are logged as warnings and the value is left as-is;
    validation of the result happens afterwards.

    Args:
        params: Raw job parameters.
        data: Job-scoped values the placeholders refer to.
        resolver: ``(value, data) -> str``. If None, templating is skipped.

    Returns:
        A new dict with resolved values.
    """
    resolved = dict(params)
    if resolver is None:
        return resolved

    data = data or {}
    for key, value in params.items():
        if not isinstance(value, str) or PLACEHOLDER_START not in value:
            continue
        try:
            resolved[key] = resolver(value, data)
        except Exception as exc:
            logger.warning("Template resolution failed for parameter '%s': %s", key, exc)

    return resolved
