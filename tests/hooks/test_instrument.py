"""Tests for hook instrumentation: discovery, wrapping and fail-fast behaviour."""

from __future__ import annotations

import inspect

import pytest
import structlog

from pysign.hooks.decorators import no_hook
from pysign.hooks.instrument import discover_operations, instrument, is_instrumented, operations
from pysign.hooks.registry import HookRegistry
from pysign.kernel.exceptions import EventNameCollision, HooksNotInitialized


# ---------------------------------------------------------------------------
# Helper classes
# ---------------------------------------------------------------------------


class ContractService:
    """Service with one operation, as a caller would write it."""

    def __init__(self) -> None:
        self.hooks = HookRegistry()
        self.calls = 0

    async def create(self, name: str) -> dict:
        self.calls += 1
        return {"id": "r-1"}


class Service:
    label = "data attribute"

    def __init__(self) -> None:
        self.hooks = HookRegistry()
        self.calls = 0

    async def submit(self, document: str, *, draft: bool = False) -> dict:
        self.calls += 1
        return {"document": document, "draft": draft}

    async def explode(self) -> None:
        self.calls += 1
        raise ValueError("boom")

    @no_hook
    async def ping(self) -> str:
        return "pong"

    def sync_helper(self) -> str:
        return "sync"

    async def _private(self) -> None: ...

    @property
    def status(self) -> str:
        return "ok"

    @staticmethod
    async def static_op() -> None: ...

    async def stream(self):
        yield 1


def _record(events: list, hooks: HookRegistry, *names: str) -> None:
    for name in names:
        hooks.register(name, lambda *a, _n=name, **kw: events.append((_n, a, kw)))


# ---------------------------------------------------------------------------
# discover_operations
# ---------------------------------------------------------------------------


class TestDiscoverOperations:
    def test_only_public_async_methods(self) -> None:
        names = [d.name for d in discover_operations(Service)]
        assert sorted(names) == ["explode", "submit"]

    def test_descriptor_fields(self) -> None:
        (descriptor,) = [d for d in discover_operations(Service) if d.name == "submit"]
        assert descriptor.begin_event == "onBeginSubmit"
        assert descriptor.after_event == "onAfterSubmit"
        assert descriptor.owner is Service
        assert list(descriptor.signature.parameters) == ["self", "document", "draft"]

    def test_declared_exemption_set(self) -> None:
        names = [d.name for d in discover_operations(Service, exempt={"explode"})]
        assert names == ["submit"]

    def test_single_string_exemption_names_one_operation(self) -> None:
        names = [d.name for d in discover_operations(Service, exempt="explode")]
        assert names == ["submit"]

    def test_inherited_operations_are_included(self) -> None:
        class Child(Service):
            async def archive(self) -> None: ...

        names = sorted(d.name for d in discover_operations(Child))
        assert names == ["archive", "explode", "submit"]

    def test_most_derived_definition_wins(self) -> None:
        class Child(Service):
            async def submit(self, document: str) -> dict:
                return {}

        (descriptor,) = [d for d in discover_operations(Child) if d.name == "submit"]
        assert descriptor.owner is Child
        assert list(descriptor.signature.parameters) == ["self", "document"]

    def test_override_with_data_attribute_hides_operation(self) -> None:
        class Child(Service):
            submit = None  # type: ignore[assignment]

        names = [d.name for d in discover_operations(Child)]
        assert "submit" not in names

    def test_exemption_is_not_inherited_by_override(self) -> None:
        class Child(Service):
            async def ping(self) -> str:
                return "child pong"

        names = [d.name for d in discover_operations(Child)]
        assert "ping" in names

    def test_reexempted_override_stays_exempt(self) -> None:
        class Child(Service):
            @no_hook
            async def ping(self) -> str:
                return "child pong"

        names = [d.name for d in discover_operations(Child)]
        assert "ping" not in names

    def test_first_letter_case_collision_rejected(self) -> None:
        class Clashing:
            async def create(self) -> None: ...

            async def Create(self) -> None: ...  # noqa: N802

        with pytest.raises(EventNameCollision, match="onBeginCreate") as exc_info:
            discover_operations(Clashing)
        assert sorted(exc_info.value.context["operations"]) == ["Create", "create"]

    def test_unreadable_signature_is_skipped_and_logged(self) -> None:
        class Odd:
            async def fine(self) -> None: ...

            async def weird(self) -> None: ...

            weird.__signature__ = "not a signature"  # type: ignore[attr-defined]

        with structlog.testing.capture_logs() as logs:
            names = [d.name for d in discover_operations(Odd)]

        assert names == ["fine"]
        skipped = [e for e in logs if e["event"] == "hook_instrumentation_skipped"]
        assert len(skipped) == 1
        assert skipped[0]["operation"] == "weird"


# ---------------------------------------------------------------------------
# instrument
# ---------------------------------------------------------------------------


class TestInstrument:
    @pytest.mark.asyncio
    async def test_end_to_end_create(self) -> None:
        service = instrument(ContractService())
        recorded: list[list[str]] = []
        service.hooks.register("onBeginCreate", lambda name: recorded.append(["create", name]))
        service.hooks.register("onAfterCreate", lambda result: recorded.append(["created", result["id"]]))

        result = await service.create("contract-1")

        assert recorded == [["create", "contract-1"], ["created", "r-1"]]
        assert result == {"id": "r-1"}

    @pytest.mark.asyncio
    async def test_begin_then_call_then_after(self) -> None:
        order: list[str] = []

        class Tracked:
            def __init__(self) -> None:
                self.hooks = HookRegistry()

            async def submit(self) -> str:
                order.append("call")
                return "ok"

        tracked = instrument(Tracked())
        tracked.hooks.register("onBeginSubmit", lambda: order.append("begin"))
        tracked.hooks.register("onAfterSubmit", lambda _r: order.append("after"))

        await tracked.submit()

        assert order == ["begin", "call", "after"]

    @pytest.mark.asyncio
    async def test_arguments_forwarded_to_begin_event(self) -> None:
        service = instrument(Service())
        events: list = []
        _record(events, service.hooks, "onBeginSubmit")

        await service.submit("doc-1", draft=True)

        assert events == [("onBeginSubmit", ("doc-1",), {"draft": True})]

    @pytest.mark.asyncio
    async def test_return_value_is_unchanged(self) -> None:
        plain = await Service().submit("doc-1")
        service = instrument(Service())
        seen: list = []
        service.hooks.register("onAfterSubmit", seen.append)

        result = await service.submit("doc-1")

        assert result == plain
        assert seen == [result]
        assert seen[0] is result

    @pytest.mark.asyncio
    async def test_each_event_fires_once_per_call(self) -> None:
        service = instrument(Service())
        events: list = []
        _record(events, service.hooks, "onBeginSubmit", "onAfterSubmit")

        await service.submit("a")
        await service.submit("b")

        assert [name for name, _, _ in events] == [
            "onBeginSubmit",
            "onAfterSubmit",
            "onBeginSubmit",
            "onAfterSubmit",
        ]

    @pytest.mark.asyncio
    async def test_exempt_operation_fires_nothing(self) -> None:
        service = instrument(Service())
        events: list = []
        _record(events, service.hooks, "onBeginPing", "onAfterPing")

        assert await service.ping() == "pong"
        assert events == []

    @pytest.mark.asyncio
    async def test_declared_exemption_fires_nothing(self) -> None:
        service = instrument(Service(), exempt={"submit"})
        events: list = []
        _record(events, service.hooks, "onBeginSubmit", "onAfterSubmit")

        await service.submit("doc-1")

        assert events == []

    @pytest.mark.asyncio
    async def test_exemption_frozen_at_instrumentation(self) -> None:
        exempt = {"explode"}
        service = instrument(Service(), exempt=exempt)
        exempt.add("submit")
        events: list = []
        _record(events, service.hooks, "onBeginSubmit")

        await service.submit("doc-1")

        assert len(events) == 1

    @pytest.mark.asyncio
    async def test_subclass_override_of_exempt_operation_is_wrapped(self) -> None:
        class Child(Service):
            async def ping(self) -> str:
                return "child pong"

        child = instrument(Child())
        events: list = []
        _record(events, child.hooks, "onBeginPing", "onAfterPing")

        assert await child.ping() == "child pong"
        assert [name for name, _, _ in events] == ["onBeginPing", "onAfterPing"]

    @pytest.mark.asyncio
    async def test_failure_propagates_without_after_event(self) -> None:
        service = instrument(Service())
        events: list = []
        _record(events, service.hooks, "onBeginExplode", "onAfterExplode")

        with pytest.raises(ValueError, match="boom"):
            await service.explode()

        assert [name for name, _, _ in events] == ["onBeginExplode"]

    @pytest.mark.asyncio
    async def test_failing_begin_handler_aborts_operation(self) -> None:
        service = instrument(Service())

        def veto(*_a, **_kw):
            raise PermissionError("vetoed")

        service.hooks.register("onBeginSubmit", veto)

        with pytest.raises(PermissionError, match="vetoed"):
            await service.submit("doc-1")
        assert service.calls == 0

    @pytest.mark.asyncio
    async def test_failing_after_handler_surfaces_to_caller(self) -> None:
        service = instrument(Service())

        def reject(_result):
            raise RuntimeError("after failed")

        service.hooks.register("onAfterSubmit", reject)

        with pytest.raises(RuntimeError, match="after failed"):
            await service.submit("doc-1")
        assert service.calls == 1

    @pytest.mark.asyncio
    async def test_no_handlers_is_transparent(self) -> None:
        service = instrument(Service())
        assert await service.submit("doc-1") == {"document": "doc-1", "draft": False}

    @pytest.mark.asyncio
    async def test_async_handlers_are_scheduled(self) -> None:
        service = instrument(Service())
        seen: list = []

        async def on_after(result: dict) -> None:
            seen.append(result["document"])

        service.hooks.register("onAfterSubmit", on_after)

        await service.submit("doc-1")
        await service.hooks.drain()

        assert seen == ["doc-1"]

    def test_wrapper_preserves_metadata(self) -> None:
        service = instrument(Service())
        assert service.submit.__name__ == "submit"
        assert list(inspect.signature(service.submit).parameters) == ["document", "draft"]
        assert inspect.iscoroutinefunction(service.submit)

    def test_class_is_not_mutated(self) -> None:
        instrument(Service())
        assert Service.__dict__["submit"].__qualname__ == "Service.submit"
        assert not is_instrumented(Service())

    @pytest.mark.asyncio
    async def test_instances_are_isolated(self) -> None:
        first = instrument(Service())
        second = instrument(Service())
        events: list = []
        _record(events, first.hooks, "onBeginSubmit")

        await second.submit("doc-2")

        assert events == []

    @pytest.mark.asyncio
    async def test_instrument_twice_is_noop(self) -> None:
        service = instrument(Service())
        wrapped = service.submit
        assert instrument(service) is service
        assert service.submit is wrapped

        events: list = []
        _record(events, service.hooks, "onBeginSubmit")
        await service.submit("doc-1")
        assert len(events) == 1

    def test_operations_introspection(self) -> None:
        service = instrument(Service())
        assert is_instrumented(service)
        assert sorted(d.name for d in operations(service)) == ["explode", "submit"]
        assert operations(object()) == ()


# ---------------------------------------------------------------------------
# Fail-fast without a registry
# ---------------------------------------------------------------------------


class Bare:
    def __init__(self) -> None:
        self.counter = 0

    async def submit(self) -> None:
        self.counter += 1

    async def cancel(self) -> None:
        self.counter += 1


class TestHooksNotInitialized:
    @pytest.mark.asyncio
    async def test_missing_registry_fails_before_operation(self) -> None:
        bare = instrument(Bare())

        with pytest.raises(HooksNotInitialized) as exc_info:
            await bare.submit()

        assert bare.counter == 0
        assert exc_info.value.code == "HOOKS_NOT_INITIALIZED"
        assert exc_info.value.context["operation"] == "submit"

    @pytest.mark.asyncio
    async def test_every_operation_fails_identically(self) -> None:
        bare = instrument(Bare())

        for op in (bare.submit, bare.cancel):
            with pytest.raises(HooksNotInitialized):
                await op()
        assert bare.counter == 0

    @pytest.mark.asyncio
    async def test_wrong_type_at_attribute_fails(self) -> None:
        bare = instrument(Bare())
        bare.hooks = {"onBeginSubmit": print}  # type: ignore[attr-defined]

        with pytest.raises(HooksNotInitialized):
            await bare.submit()
        assert bare.counter == 0

    @pytest.mark.asyncio
    async def test_registry_attached_later_is_used(self) -> None:
        bare = instrument(Bare())
        bare.hooks = HookRegistry()  # type: ignore[attr-defined]
        events: list = []
        _record(events, bare.hooks, "onAfterSubmit")

        await bare.submit()

        assert bare.counter == 1
        assert events == [("onAfterSubmit", (None,), {})]

    @pytest.mark.asyncio
    async def test_custom_attribute_name(self) -> None:
        bare = instrument(Bare(), attribute="events")
        bare.events = HookRegistry()  # type: ignore[attr-defined]

        await bare.submit()
        assert bare.counter == 1
