"""Tests for the dispatch server."""

import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest
from prometheus_client import REGISTRY

from actiondispatch.actions.base import Action
from actiondispatch.commons.constants import LifecycleEvent
from actiondispatch.commons.exceptions import (
    ActionNotFoundError,
    DependencyResolutionError,
    MissingErrorTargetError,
    RegistryFrozenError,
)
from actiondispatch.domain.events import DomainEvent, InMemoryEventBus
from actiondispatch.server.container import Container
from actiondispatch.server.request import Request
from actiondispatch.server.response import Data, Error, Redirect
from actiondispatch.server.server import Server
from actiondispatch.server.validation import Validator


class Echo(Action):
    def run(self) -> None:
        self.data["echo"] = self.request.get("value")


class Fails(Action):
    error_target = "index"

    def run(self) -> None:
        self.add_error("failed")


class Moves(Action):
    def run(self) -> None:
        self.redirect_to(Request("index"), "moved")


class Untargeted(Action):
    def run(self) -> None:
        self.add_error("lost")


class Pinged(DomainEvent):
    pass


class Emits(Action):
    def run(self) -> None:
        self.raise_event(Pinged())


class EmitsThenFails(Action):
    error_target = "index"

    def run(self) -> None:
        self.raise_event(Pinged())
        self.add_error("no")


class EmitsTwice(Action):
    def run(self) -> None:
        self.raise_event(Pinged())
        self.raise_event(Pinged())


class Crashes(Action):
    def run(self) -> None:
        raise RuntimeError("boom")


class BrokenBus:
    """Event bus whose broker is unreachable."""

    def __init__(self) -> None:
        self.attempts = 0

    def publish(self, event: DomainEvent) -> None:
        self.attempts += 1
        raise ConnectionError("broker down")


def sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class RejectAll(Validator):
    def rules(self, request: Request) -> list[str]:
        return ["rejected"]

    def error_request(self, request: Request) -> Request:
        return Request("form", {"retry": True})


class NeedsCollaborator(Action):
    def __init__(self, clock: "Clock") -> None:
        super().__init__()
        self.clock = clock

    def run(self) -> None:
        pass


class Clock:
    def __init__(self, tz: str) -> None:
        self.tz = tz


class TestDispatch:
    """Test end-to-end dispatch."""

    def test_data_dispatch(self) -> None:
        """Should return the payload run() wrote."""
        server = Server()
        server.register_action("echo", Echo)

        response = server.dispatch(Request("echo", {"value": "hi"}))

        assert response == Data({"echo": "hi"})

    def test_redirect_dispatch(self) -> None:
        server = Server()
        server.register_action("moves", Moves)

        response = server.dispatch(Request("moves"))

        assert response == Redirect(Request("index"), "moved")

    def test_error_dispatch(self) -> None:
        server = Server()
        server.register_action("fails", Fails)

        response = server.dispatch(Request("fails"))

        assert response == Error(Request("index"), ("failed",))

    def test_unknown_action_faults(self) -> None:
        """Should fault and run no handlers for an unregistered name."""
        server = Server()
        handler = MagicMock()
        for event in LifecycleEvent:
            server.subscribe(event, handler)

        with pytest.raises(ActionNotFoundError) as exc_info:
            server.dispatch(Request("nope"))

        assert exc_info.value.action_name == "nope"
        handler.assert_not_called()

    def test_missing_error_target_faults(self) -> None:
        server = Server()
        server.register_action("untargeted", Untargeted)

        with pytest.raises(MissingErrorTargetError):
            server.dispatch(Request("untargeted"))

    def test_factory_callable(self) -> None:
        """Should accept a (container) -> Action factory."""
        server = Server()
        factory = MagicMock(side_effect=lambda c: Echo())
        server.register_action("echo", factory)

        server.dispatch(Request("echo", {"value": 1}))
        server.dispatch(Request("echo", {"value": 2}))

        assert factory.call_count == 2

    def test_fresh_action_per_dispatch(self) -> None:
        """Should never reuse an action instance."""
        seen: list[Action] = []
        server = Server()
        server.register_action("echo", Echo)
        server.subscribe("before", seen.append)

        server.dispatch(Request("echo"))
        server.dispatch(Request("echo"))

        assert len(seen) == 2
        assert seen[0] is not seen[1]

    def test_last_registration_wins(self) -> None:
        server = Server()
        server.register_action("x", Echo)
        server.register_action("x", Moves)

        assert isinstance(server.dispatch(Request("x")), Redirect)

    def test_unresolvable_dependency_faults(self) -> None:
        server = Server()
        server.register_action("needs", NeedsCollaborator)

        with pytest.raises(DependencyResolutionError):
            server.dispatch(Request("needs"))

    def test_verify_surfaces_missing_dependency(self) -> None:
        """Should report missing collaborators before any request."""
        server = Server()
        server.register_action("needs", NeedsCollaborator)

        with pytest.raises(DependencyResolutionError):
            server.verify()

    def test_introspection(self) -> None:
        server = Server()
        server.register_action("echo", Echo)

        assert server.has_action("echo") is True
        assert server.list_actions() == ["echo"]


class TestValidatorChain:
    """Test that validators short-circuit dispatch."""

    def test_failing_validator_prevents_construction(self) -> None:
        """Should never build the action when validation fails."""
        server = Server()
        factory = MagicMock(side_effect=lambda c: Echo())
        server.register_action("echo", factory)
        server.register_validator("echo", RejectAll)

        response = server.dispatch(Request("echo"))

        assert response == Error(Request("form", {"retry": True}), ("rejected",))
        factory.assert_not_called()

    def test_failing_validator_without_action_returns_error(self) -> None:
        """Should answer with the validator's Error before looking up the action."""
        server = Server()
        server.register_validator("new_topic_handler", RejectAll)

        response = server.dispatch(Request("new_topic_handler"))

        assert response == Error(Request("form", {"retry": True}), ("rejected",))

    def test_validator_for_other_name_ignored(self) -> None:
        server = Server()
        server.register_action("echo", Echo)
        server.register_validator("other", RejectAll)

        assert isinstance(server.dispatch(Request("echo")), Data)


class TestSubscriptions:
    """Test server-level lifecycle subscriptions."""

    def test_success_fired_for_data(self) -> None:
        server = Server()
        server.register_action("echo", Echo)
        on_success, on_error = MagicMock(), MagicMock()
        server.subscribe("success", on_success, "extra")
        server.subscribe("error", on_error)

        server.dispatch(Request("echo"))

        on_success.assert_called_once()
        assert on_success.call_args.args[1] == "extra"
        on_error.assert_not_called()

    def test_error_fired_for_error(self) -> None:
        server = Server()
        server.register_action("fails", Fails)
        on_success, on_error = MagicMock(), MagicMock()
        server.subscribe("success", on_success)
        server.subscribe("error", on_error)

        server.dispatch(Request("fails"))

        on_error.assert_called_once()
        on_success.assert_not_called()

    def test_order_before_after_success(self) -> None:
        """Should fire success after the after handlers."""
        calls: list[str] = []
        server = Server()
        server.register_action("echo", Echo)
        server.subscribe("success", lambda a: calls.append("success"))
        server.subscribe("after", lambda a: calls.append("after"))
        server.subscribe("before", lambda a: calls.append("before"))

        server.dispatch(Request("echo"))

        assert calls == ["before", "after", "success"]

    def test_subscription_scoped_to_action(self) -> None:
        server = Server()
        server.register_action("echo", Echo)
        server.register_action("moves", Moves)
        handler = MagicMock()
        server.subscribe("before", handler, action="moves")

        server.dispatch(Request("echo"))
        handler.assert_not_called()

        server.dispatch(Request("moves"))
        handler.assert_called_once()

    def test_validator_failure_fires_no_action_handlers(self) -> None:
        server = Server()
        server.register_action("echo", Echo)
        server.register_validator("echo", RejectAll)
        handler = MagicMock()
        server.subscribe("error", handler)

        server.dispatch(Request("echo"))

        handler.assert_not_called()


class TestFreeze:
    """Test the read-only registry after setup."""

    def test_freeze_blocks_registration(self) -> None:
        server = Server()
        server.register_action("echo", Echo)
        server.freeze()

        with pytest.raises(RegistryFrozenError):
            server.register_action("moves", Moves)
        with pytest.raises(RegistryFrozenError):
            server.register_validator("echo", RejectAll)
        with pytest.raises(RegistryFrozenError):
            server.subscribe("before", MagicMock())

        assert isinstance(server.dispatch(Request("echo")), Data)


class TestDomainEvents:
    """Test release of events recorded by actions."""

    def test_events_published_on_success(self) -> None:
        bus = InMemoryEventBus()
        listener = MagicMock()
        bus.subscribe(Pinged, listener)
        server = Server(event_bus=bus)
        server.register_action("emits", Emits)

        server.dispatch(Request("emits"))

        listener.assert_called_once()
        assert isinstance(listener.call_args.args[0], Pinged)

    def test_events_dropped_on_error(self) -> None:
        """Should not publish events of a failed action."""
        bus = InMemoryEventBus()
        listener = MagicMock()
        bus.subscribe(Pinged, listener)
        server = Server(event_bus=bus)
        server.register_action("emits", EmitsThenFails)

        server.dispatch(Request("emits"))

        listener.assert_not_called()

    def test_event_bus_resolved_from_container(self) -> None:
        from actiondispatch.domain.contracts import EventBus

        bus = InMemoryEventBus()
        listener = MagicMock()
        bus.subscribe(DomainEvent, listener)
        container = Container()
        container.instance(EventBus, bus)
        server = Server(container)
        server.register_action("emits", Emits)

        server.dispatch(Request("emits"))

        listener.assert_called_once()

    def test_no_bus_does_not_fail(self) -> None:
        server = Server()
        server.register_action("emits", Emits)

        assert isinstance(server.dispatch(Request("emits")), Data)

    def test_publish_failure_keeps_success_response(self) -> None:
        """Should log broker failures and still return the action's response."""
        bus = BrokenBus()
        on_success = MagicMock()
        server = Server(event_bus=bus)
        server.register_action("emits", EmitsTwice)
        server.subscribe("success", on_success)
        captured: list[Action] = []
        server.subscribe("after", captured.append)

        response = server.dispatch(Request("emits"))

        assert response == Data({})
        on_success.assert_called_once()
        assert bus.attempts == 2
        assert captured[0].pending_events == []


class TestConcurrency:
    """Test isolation of concurrent dispatches."""

    def test_concurrent_dispatches_are_isolated(self) -> None:
        """Should never mix errors or data across concurrent requests."""
        barrier = threading.Barrier(8)

        class Slow(Action):
            error_target = "index"

            def run(self) -> None:
                value = self.request.get("value")
                self.data["value"] = value
                barrier.wait(timeout=5)
                if value % 2:
                    self.add_error(f"odd {value}")

        server = Server()
        server.register_action("slow", Slow)
        server.freeze()

        with ThreadPoolExecutor(max_workers=8) as pool:
            responses = list(
                pool.map(lambda v: server.dispatch(Request("slow", {"value": v})), range(8))
            )

        for value, response in enumerate(responses):
            if value % 2:
                assert response == Error(Request("index"), (f"odd {value}",))
            else:
                assert response == Data({"value": value})


class TestMetrics:
    """Test the dispatch counters."""

    def test_dispatch_total_counts_response_kind(self) -> None:
        labels = {"action": "metrics_fails", "kind": "error"}
        before = sample("actiondispatch_dispatch_total", labels)
        server = Server()
        server.register_action("metrics_fails", Fails)

        server.dispatch(Request("metrics_fails"))
        server.dispatch(Request("metrics_fails"))

        assert sample("actiondispatch_dispatch_total", labels) == before + 2

    def test_faults_counted_by_error_type(self) -> None:
        """Should count a fault and re-raise it."""
        labels = {"action": "metrics_crashes", "error_type": "RuntimeError"}
        before = sample("actiondispatch_dispatch_faults_total", labels)
        server = Server()
        server.register_action("metrics_crashes", Crashes)

        with pytest.raises(RuntimeError, match="boom"):
            server.dispatch(Request("metrics_crashes"))

        assert sample("actiondispatch_dispatch_faults_total", labels) == before + 1
        completed = {"action": "metrics_crashes", "kind": "data"}
        assert sample("actiondispatch_dispatch_total", completed) == 0.0

    def test_fault_logged_with_traceback(self) -> None:
        server = Server()
        server.register_action("metrics_crashes", Crashes)

        with patch("actiondispatch.server.server.logger") as logger:
            with pytest.raises(RuntimeError):
                server.dispatch(Request("metrics_crashes"))

        log = logger.bind.return_value
        log.exception.assert_called_once_with(
            "dispatch_fault", error="boom", error_type="RuntimeError"
        )
        log.error.assert_not_called()
