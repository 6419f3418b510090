# Copyright 2026 Firefly Software Solutions Inc.
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
"""Lifecycle hooks for async operations.

``instrument(obj)`` gives every public ``async def`` method of ``obj`` a
pair of events, ``onBegin<Name>`` and ``onAfter<Name>``, delivered through
the :class:`HookRegistry` found at ``obj.hooks``.
"""

from pysign.hooks.decorators import is_exempt, no_hook
from pysign.hooks.instrument import discover_operations, instrument, is_instrumented, operations
from pysign.hooks.naming import (
    AFTER_PREFIX,
    BEGIN_PREFIX,
    ERROR_EVENT,
    after_event,
    begin_event,
    capitalize_first,
    derive_name,
)
from pysign.hooks.registry import HookHandler, HookRegistry
from pysign.hooks.types import OperationDescriptor

__all__ = [
    "AFTER_PREFIX",
    "BEGIN_PREFIX",
    "ERROR_EVENT",
    "HookHandler",
    "HookRegistry",
    "OperationDescriptor",
    "after_event",
    "begin_event",
    "capitalize_first",
    "derive_name",
    "discover_operations",
    "instrument",
    "is_exempt",
    "is_instrumented",
    "no_hook",
    "operations",
]
