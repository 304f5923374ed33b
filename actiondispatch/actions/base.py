"""Base action definition.

This module defines the abstract base class every action inherits from. The
base owns the execution pipeline: it runs the lifecycle handlers, calls the
action's ``run()`` and turns the collected state into exactly one response.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any

from actiondispatch.commons.constants import LifecycleEvent
from actiondispatch.commons.exceptions import (
    ActionReusedError,
    MissingErrorTargetError,
    ValidationException,
)
from actiondispatch.domain.events import DomainEvent
from actiondispatch.server.request import Request
from actiondispatch.server.response import Data, Error, Redirect, Response

Handler = Callable[..., None]


class Action(ABC):
    """Single-use unit of business logic bound to one request name.

    An instance is built per dispatch, handles exactly one request and is
    then discarded, so its error/data/redirect state never leaks between
    requests.

    Subclasses implement ``run()``, which ends in one of three ways:
    - leaves errors empty and optionally fills ``self.data``
    - leaves errors empty and calls ``redirect_to()``
    - calls ``add_error()`` / ``merge_errors()`` (or raises
      ValidationException) after declaring a target with
      ``on_error_redirect_to()``

    Routing can also be declared on the class:
    - error_target: request name used as the error target
    - redirect_target: request name redirected to on success
    - redirect_message: message sent along with the redirect

    Example:
        class Logout(Action):
            redirect_target = "index"

            def __init__(self, auth: AuthProvider) -> None:
                super().__init__()
                self.auth = auth

            def run(self) -> None:
                self.auth.logout()
    """

    error_target: str | None = None
    redirect_target: str | None = None
    redirect_message: str = ""

    def __init__(self) -> None:
        self.request: Request | None = None
        self.data: dict[str, Any] = {}
        self.errors: list[str] = []
        self.next_request: Request | None = None
        self.error_request: Request | None = None
        self.handlers: dict[LifecycleEvent, list[tuple[Handler, tuple[Any, ...]]]] = {}
        self.pending_events: list[DomainEvent] = []
        self._handled = False

    @property
    def name(self) -> str:
        return type(self).__name__

    def handle(self, request: Request) -> Response:
        """Turn a request into a response.

        Only ValidationException is recovered from; anything else raised by
        ``run()`` or a handler propagates and skips the ``after`` handlers.

        Args:
            request: The request that led to this action

        Returns:
            Data, Redirect or Error response

        Raises:
            ActionReusedError: If the instance already handled a request
            MissingErrorTargetError: If errors were collected without a target
        """
        if self._handled:
            raise ActionReusedError(self.name)
        self._handled = True

        self.request = request
        self._apply_declared_routing()
        self.call_handlers(LifecycleEvent.BEFORE)

        try:
            self.run()
        except ValidationException as e:
            self.merge_errors(e.errors)

        response = self.make_response()

        self.call_handlers(LifecycleEvent.AFTER)

        return response

    @abstractmethod
    def run(self) -> None:
        """Run the action's business logic."""

    def make_response(self) -> Response:
        """Create a response based on the action's state."""
        if self.has_errors():
            return self.make_error_response(self.errors)
        if self.next_request is not None:
            return Redirect(next=self.next_request, message=self.redirect_message)
        return Data(payload=self.data)

    def make_error_response(self, errors: Iterable[str]) -> Error:
        """Create an error response for the given errors.

        Raises:
            MissingErrorTargetError: If no error target was declared
        """
        errors = list(errors)
        if self.error_request is None:
            raise MissingErrorTargetError(self.name, errors)
        return Error(target=self.error_request, errors=tuple(errors))

    def _apply_declared_routing(self) -> None:
        if self.error_target and self.error_request is None:
            self.error_request = Request(self.error_target)
        if self.redirect_target and self.next_request is None:
            self.next_request = Request(self.redirect_target)

    # Routing

    def redirect_to(self, next_request: Request, message: str = "") -> None:
        """Set another request to be executed after this action."""
        self.next_request = next_request
        self.redirect_message = message

    def on_error_redirect_to(self, request: Request) -> None:
        """Set the request to be executed in case of an error."""
        self.error_request = request

    # State

    def has_data(self) -> bool:
        return bool(self.data)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def add_error(self, error: str) -> Action:
        """Add another error message."""
        self.errors.append(str(error))
        return self

    def merge_errors(self, errors: Iterable[str] | Any) -> Action:
        """Add every message of an externally produced error collection.

        Accepts any iterable of messages, or an object exposing an ``errors``
        attribute such as a ValidationOutcome.
        """
        if hasattr(errors, "errors"):
            errors = errors.errors
        if isinstance(errors, str):
            errors = [errors]
        for error in errors:
            self.add_error(error)
        return self

    def get_errors(self) -> tuple[str, ...]:
        return tuple(self.errors)

    def raise_event(self, event: DomainEvent) -> None:
        """Record a domain event, published by the server on success."""
        self.pending_events.append(event)

    # Lifecycle handlers

    def before(self, callback: Handler, *args: Any) -> Action:
        """Register a callback executed before running the action."""
        self.register_handler(LifecycleEvent.BEFORE, callback, *args)
        return self

    def after(self, callback: Handler, *args: Any) -> Action:
        """Register a callback executed after the response was built."""
        self.register_handler(LifecycleEvent.AFTER, callback, *args)
        return self

    def on_success(self, callback: Handler, *args: Any) -> Action:
        """Register a callback executed when the action succeeds."""
        self.register_handler(LifecycleEvent.SUCCESS, callback, *args)
        return self

    def on_error(self, callback: Handler, *args: Any) -> Action:
        """Register a callback executed when the action ends in an error."""
        self.register_handler(LifecycleEvent.ERROR, callback, *args)
        return self

    def register_handler(self, event: LifecycleEvent | str, callback: Handler, *args: Any) -> None:
        """Register a callback for a lifecycle event.

        The callback is later called as ``callback(action, *args)``.
        """
        if not callable(callback):
            raise TypeError(f"Handler for {event} must be callable")
        self.handlers.setdefault(LifecycleEvent(event), []).append((callback, args))

    def call_handlers(self, event: LifecycleEvent | str) -> None:
        """Execute all handlers of the given event in registration order."""
        for callback, args in list(self.handlers.get(LifecycleEvent(event), [])):
            callback(self, *args)

    def __repr__(self) -> str:
        request_name = self.request.name if self.request else None
        return f"{self.__class__.__name__}(request='{request_name}')"
