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
"""Hook decorators: @no_hook exemption marker."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

_NO_HOOK_ATTR = "__pysign_no_hook__"


def no_hook(fn: F) -> F:
    """Exclude an operation from hook generation.

    The mark is stored on the function object itself, so it is scoped to
    the class that declares it: a subclass overriding the method gets a
    fresh, unmarked function and is instrumented again unless it repeats
    ``@no_hook``.
    """
    setattr(fn, _NO_HOOK_ATTR, True)
    return fn


def is_exempt(member: Any) -> bool:
    """Return True if *member* was declared with ``@no_hook``."""
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return bool(getattr(member, _NO_HOOK_ATTR, False))
