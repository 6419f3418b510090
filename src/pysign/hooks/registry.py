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
"""HookRegistry: per-instance map from event name to a single handler."""

from __future__ import annotations

import asyncio
import functools
import inspect
import threading
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from pysign.kernel.exceptions import InvalidHandler

logger = structlog.get_logger("pysign.hooks")

HookHandler = Callable[..., Any | Awaitable[Any]]


class HookRegistry:
    """Registry holding at most one handler per event name.

    Semantics:

    * ``register`` overwrites silently: the last registration for an event
      wins. This is intentional and not validated.
    * ``fire`` on an event without a handler is a no-op.
    * Exceptions raised by a synchronous handler propagate to the caller of
      ``fire``. Inside an instrumented operation this means a failing
      ``onBegin*`` handler aborts the call before the operation runs, and a
      failing ``onAfter*`` handler turns a successful call into a failure.
    * An asynchronous handler is scheduled on the running loop and not
      awaited. Its failures are logged as ``hook_handler_failed`` since no
      caller is left to receive them. Use :meth:`drain` to wait for them.

    Usage::

        hooks = HookRegistry()
        hooks.register("onAfterCreateSignatureRequest", lambda req: print(req["id"]))
        hooks.fire("onAfterCreateSignatureRequest", {"id": "abc"})
    """

    def __init__(self) -> None:
        self._handlers: dict[str, HookHandler] = {}
        self._lock = threading.RLock()
        self._tasks: set[asyncio.Future[Any]] = set()

    def register(self, event: str, handler: HookHandler) -> None:
        """Store *handler* under *event*, replacing any previous handler."""
        if not callable(handler):
            raise InvalidHandler(
                f"Hook handler for '{event}' must be callable, got {type(handler).__name__}",
                code="HOOKS_INVALID_HANDLER",
                context={"event": event},
            )
        with self._lock:
            # Copy-on-write so fire() can read without taking the lock.
            handlers = dict(self._handlers)
            handlers[event] = handler
            self._handlers = handlers

    def unregister(self, event: str) -> None:
        """Remove the handler for *event*. Unknown events are ignored."""
        with self._lock:
            if event in self._handlers:
                handlers = dict(self._handlers)
                del handlers[event]
                self._handlers = handlers

    def clear(self) -> None:
        with self._lock:
            self._handlers = {}

    def get(self, event: str) -> HookHandler | None:
        return self._handlers.get(event)

    def has(self, event: str) -> bool:
        return event in self._handlers

    def events(self) -> list[str]:
        """Return the names of all events with a registered handler, sorted."""
        return sorted(self._handlers)

    def fire(self, event: str, *args: Any, **kwargs: Any) -> None:
        """Invoke the handler registered for *event*, if any."""
        handler = self._handlers.get(event)
        if handler is None:
            return

        result = handler(*args, **kwargs)
        if inspect.isawaitable(result):
            self._schedule(event, result)

    @property
    def pending(self) -> int:
        """Number of asynchronous handler invocations still running."""
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait until every scheduled asynchronous handler has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _schedule(self, event: str, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            raise
        task = asyncio.ensure_future(awaitable, loop=loop)
        with self._lock:
            self._tasks.add(task)
        task.add_done_callback(functools.partial(self._on_task_done, event))

    def _on_task_done(self, event: str, task: asyncio.Future[Any]) -> None:
        with self._lock:
            self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "hook_handler_failed",
                hook_event=event,
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=exc,
            )
