"""Dispatch server - the single entry point from the transport layer.

Resolves a request name to a fresh action, runs the validator chain and the
action pipeline, fires success/error subscribers and releases the domain
events the action recorded.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from actiondispatch.commons.constants import LifecycleEvent
from actiondispatch.commons.exceptions import ActionNotFoundError, RegistryFrozenError
from actiondispatch.commons.observability import (
    DISPATCH_DURATION,
    DISPATCH_FAULTS,
    DISPATCH_TOTAL,
    get_logger,
)
from actiondispatch.domain.contracts import EventBus
from actiondispatch.server.container import Container
from actiondispatch.server.registry import FactoryLike, FactoryRegistry
from actiondispatch.server.request import Request
from actiondispatch.server.response import Response
from actiondispatch.server.validation import RequestValidator

if TYPE_CHECKING:
    from actiondispatch.actions.base import Action

logger = get_logger(__name__)


@dataclass(frozen=True)
class Subscription:
    """Server-level lifecycle callback attached to freshly built actions."""

    event: LifecycleEvent
    callback: Callable[..., None]
    args: tuple[Any, ...] = ()
    action: str | None = None  # None = every action

    def applies_to(self, name: str) -> bool:
        return self.action is None or self.action == name


class Server:
    """Maps request names to actions and validators and dispatches requests.

    Usage:
        server = Server(container)
        server.register_action("logout", Logout)
        server.register_validator("reply_handler", PostValidator)
        server.freeze()

        response = server.dispatch(Request("logout"))
    """

    def __init__(
        self,
        container: Container | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self.container = container or Container()
        self.actions: FactoryRegistry[Action] = FactoryRegistry("actions")
        self.validator = RequestValidator(self.container)
        self.subscriptions: list[Subscription] = []
        self._event_bus = event_bus

    # Registration

    def register_action(self, name: str, factory: FactoryLike) -> None:
        """Register an action class or ``(container) -> Action`` factory."""
        self.actions.register(name, factory)

    def register_validator(self, name: str, factory: FactoryLike) -> None:
        """Register a validator class or factory for an action name."""
        self.validator.register_validator(name, factory)

    def subscribe(
        self,
        event: LifecycleEvent | str,
        callback: Callable[..., None],
        *args: Any,
        action: str | None = None,
    ) -> None:
        """Attach ``callback(action, *args)`` to the lifecycle of every action.

        Args:
            event: before, after, success or error
            callback: The handler
            *args: Extra arguments passed after the action
            action: Restrict to one request name
        """
        if self.actions.frozen:
            raise RegistryFrozenError("subscriptions", action or LifecycleEvent(event).value)
        self.subscriptions.append(Subscription(LifecycleEvent(event), callback, args, action))

    def freeze(self) -> None:
        """Seal the registries; later registration raises RegistryFrozenError."""
        self.actions.freeze()
        self.validator.freeze()

    def verify(self) -> None:
        """Build every registered action and validator once.

        Surfaces DependencyResolutionError at startup rather than on the
        first request. The built instances are discarded.
        """
        for name in self.actions.names():
            self.actions.create(name, self.container)
        for name in self.validator.validators.names():
            self.validator.validators.create(name, self.container)

    def has_action(self, name: str) -> bool:
        return self.actions.has(name)

    def list_actions(self) -> list[str]:
        return self.actions.names()

    @property
    def event_bus(self) -> EventBus | None:
        if self._event_bus is None and self.container.has(EventBus):
            self._event_bus = self.container.make(EventBus)
        return self._event_bus

    # Dispatch

    def dispatch(self, request: Request) -> Response:
        """Dispatch a request end-to-end.

        Args:
            request: The request to handle

        Returns:
            The response produced by the validator chain or the action

        Raises:
            ActionNotFoundError: If no action is registered for the name
            DispatchException: For other fatal configuration faults
        """
        started = time.perf_counter()
        log = logger.bind(action=request.name)
        log.debug("dispatch_started", parameters=sorted(request.parameters))

        try:
            outcome = self.validator.validate(request)
            if not outcome.ok:
                log.info("validation_failed", errors=list(outcome.errors))
                response: Response = outcome.to_response()
            else:
                response = self._run_action(request)
        except Exception as e:
            DISPATCH_FAULTS.labels(action=request.name, error_type=type(e).__name__).inc()
            log.exception("dispatch_fault", error=str(e), error_type=type(e).__name__)
            raise

        duration = time.perf_counter() - started
        DISPATCH_TOTAL.labels(action=request.name, kind=response.kind.value).inc()
        DISPATCH_DURATION.labels(action=request.name).observe(duration)
        log.info("dispatch_completed", kind=response.kind.value, duration=round(duration, 6))
        return response

    def make_action(self, name: str) -> Action:
        """Build a fresh action for ``name`` with server subscriptions attached.

        Raises:
            ActionNotFoundError: If no action is registered for the name
        """
        if not self.actions.has(name):
            raise ActionNotFoundError(name)
        action = self.actions.create(name, self.container)
        for subscription in self.subscriptions:
            if subscription.applies_to(name):
                action.register_handler(
                    subscription.event, subscription.callback, *subscription.args
                )
        return action

    def _run_action(self, request: Request) -> Response:
        action = self.make_action(request.name)
        response = action.handle(request)

        if response.is_success:
            action.call_handlers(LifecycleEvent.SUCCESS)
            self._release_events(action)
        else:
            action.call_handlers(LifecycleEvent.ERROR)
        return response

    def _release_events(self, action: Action) -> None:
        if not action.pending_events:
            return
        events = list(action.pending_events)
        action.pending_events.clear()

        bus = self.event_bus
        if bus is None:
            logger.warning(
                "events_dropped",
                action=action.name,
                count=len(events),
                reason="no event bus bound",
            )
            return
        for event in events:
            try:
                bus.publish(event)
            except Exception as e:
                logger.exception(
                    "event_publish_failed",
                    action=action.name,
                    event_type=event.name,
                    error=str(e),
                )
