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
"""Hook instrumentation: wraps async operations with onBegin*/onAfter* events."""

from __future__ import annotations

import functools
import inspect
from collections.abc import Iterable
from typing import Any, TypeVar

import structlog

from pysign.hooks.decorators import is_exempt
from pysign.hooks.naming import after_event, begin_event
from pysign.hooks.registry import HookRegistry
from pysign.hooks.types import OperationDescriptor
from pysign.kernel.exceptions import EventNameCollision, HooksNotInitialized

logger = structlog.get_logger("pysign.hooks")

T = TypeVar("T")

_OPERATIONS_ATTR = "__pysign_operations__"


def discover_operations(cls: type, exempt: Iterable[str] = ()) -> list[OperationDescriptor]:
    """Return descriptors for every hookable operation of *cls*.

    The MRO is walked once and only the most-derived definition of each
    name is considered, so a subclass override decides whether the name is
    an operation and whether it is exempt. An operation is a public
    ``async def`` method that is neither listed in *exempt* nor declared
    with ``@no_hook``. A single string in *exempt* names one operation.
    Members whose signature cannot be read are skipped with a
    ``hook_instrumentation_skipped`` warning.

    Raises:
        EventNameCollision: If two operations derive the same event name,
            e.g. ``create`` and ``Create``.
    """
    exempt = frozenset((exempt,) if isinstance(exempt, str) else exempt)
    seen: set[str] = set()
    owners: dict[str, str] = {}
    descriptors: list[OperationDescriptor] = []

    for klass in cls.__mro__:
        if klass is object:
            continue
        for name, member in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)

            if name.startswith("_"):
                continue
            if isinstance(member, (staticmethod, classmethod, property)):
                continue
            if not inspect.iscoroutinefunction(member):
                continue
            if name in exempt or is_exempt(member):
                logger.debug("hook_operation_exempt", operation=name, owner=klass.__qualname__)
                continue

            try:
                signature = inspect.signature(member)
            except (TypeError, ValueError) as exc:
                logger.warning(
                    "hook_instrumentation_skipped",
                    operation=name,
                    owner=klass.__qualname__,
                    reason=str(exc),
                )
                continue

            begin = begin_event(name)
            if begin in owners:
                raise EventNameCollision(
                    f"Operations '{owners[begin]}' and '{name}' of {cls.__qualname__} "
                    f"both map to hook event '{begin}'",
                    code="HOOKS_NAME_COLLISION",
                    context={"event": begin, "operations": [owners[begin], name]},
                )
            owners[begin] = name

            descriptors.append(
                OperationDescriptor(
                    name=name,
                    begin_event=begin,
                    after_event=after_event(name),
                    signature=signature,
                    owner=klass,
                )
            )

    return descriptors


def instrument(target: T, *, exempt: Iterable[str] = (), attribute: str = "hooks") -> T:
    """Wrap every operation of *target* with begin/after hook events.

    Wrappers are installed on the instance only; the class and other
    instances are left untouched. Each wrapper looks up the
    :class:`HookRegistry` stored at ``target.<attribute>`` on every call,
    fires ``onBegin<Name>`` with the call arguments, awaits the original
    method, fires ``onAfter<Name>`` with its result and returns that result
    unchanged. A failing operation propagates as-is and fires no event.

    *exempt* is frozen when this function runs. Instrumenting the same
    instance twice is a no-op.

    Raises:
        EventNameCollision: See :func:`discover_operations`.
    """
    if getattr(target, _OPERATIONS_ATTR, None) is not None:
        return target

    descriptors = discover_operations(type(target), exempt)
    for descriptor in descriptors:
        original = getattr(target, descriptor.name)
        setattr(target, descriptor.name, _build_wrapper(target, descriptor, original, attribute))

    setattr(target, _OPERATIONS_ATTR, tuple(descriptors))
    logger.debug(
        "hooks_instrumented",
        target=type(target).__qualname__,
        operations=[d.name for d in descriptors],
    )
    return target


def is_instrumented(target: Any) -> bool:
    return getattr(target, _OPERATIONS_ATTR, None) is not None


def operations(target: Any) -> tuple[OperationDescriptor, ...]:
    """Return the operations :func:`instrument` wrapped on *target*."""
    return getattr(target, _OPERATIONS_ATTR, ())


def _build_wrapper(
    target: Any,
    descriptor: OperationDescriptor,
    original: Any,
    attribute: str,
) -> Any:
    @functools.wraps(original)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        hooks = getattr(target, attribute, None)
        if not isinstance(hooks, HookRegistry):
            raise HooksNotInitialized(
                f"{type(target).__qualname__}.{descriptor.name} is instrumented but "
                f"'{attribute}' does not hold a HookRegistry",
                code="HOOKS_NOT_INITIALIZED",
                context={"operation": descriptor.name, "attribute": attribute},
            )

        hooks.fire(descriptor.begin_event, *args, **kwargs)
        result = await original(*args, **kwargs)
        hooks.fire(descriptor.after_event, result)
        return result

    return wrapper
