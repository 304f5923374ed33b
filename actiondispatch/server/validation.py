"""Validator chain run before an action is constructed.

Validators are keyed by action name, independent of the action registered
under that name. A failing validator short-circuits dispatch into an Error
response whose target is chosen by the validator itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass

from actiondispatch.server.container import Container
from actiondispatch.server.registry import FactoryLike, FactoryRegistry
from actiondispatch.server.request import Request
from actiondispatch.server.response import Error


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating a request: pass, or fail with errors and a target."""

    errors: tuple[str, ...] = ()
    target: Request | None = None

    def __post_init__(self) -> None:
        """Validate outcome state."""
        object.__setattr__(self, "errors", tuple(self.errors))
        if self.errors and self.target is None:
            raise ValueError("A failed outcome requires a target Request")

    @classmethod
    def passed(cls) -> ValidationOutcome:
        return cls()

    @classmethod
    def failed(cls, errors: Iterable[str], target: Request) -> ValidationOutcome:
        errors = tuple(errors)
        if not errors:
            raise ValueError("A failed outcome requires at least one error")
        return cls(errors=errors, target=target)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_response(self) -> Error:
        """Build the Error response for a failed outcome."""
        if self.ok or self.target is None:
            raise ValueError("Only a failed outcome can be turned into an Error response")
        return Error(target=self.target, errors=self.errors)


class Validator(ABC):
    """Base class for request validators.

    Subclasses implement ``rules()`` returning error messages and
    ``error_request()`` naming where failures route.

    Example:
        class TopicValidator(Validator):
            def rules(self, request: Request) -> list[str]:
                return [] if request.get("subject") else ["Subject is required"]

            def error_request(self, request: Request) -> Request:
                return Request("new_topic", {"fid": request.get("fid")})
    """

    @abstractmethod
    def rules(self, request: Request) -> list[str]:
        """Check the request.

        Args:
            request: The inbound request

        Returns:
            List of validation error messages. Empty if valid.
        """

    @abstractmethod
    def error_request(self, request: Request) -> Request:
        """Request the caller should display errors against."""

    def validate(self, request: Request) -> ValidationOutcome:
        errors = self.rules(request)
        if not errors:
            return ValidationOutcome.passed()
        return ValidationOutcome.failed(errors, self.error_request(request))


class RequestValidator:
    """Runs the validator registered for a request's action name, if any."""

    def __init__(self, container: Container) -> None:
        self.container = container
        self.validators: FactoryRegistry[Validator] = FactoryRegistry("validators")

    def register_validator(self, name: str, factory: FactoryLike) -> None:
        self.validators.register(name, factory)

    def has_validator(self, name: str) -> bool:
        return self.validators.has(name)

    def validate(self, request: Request) -> ValidationOutcome:
        """Validate a request against the validator registered for its name.

        Requests whose name has no validator always pass. A fresh validator
        is built for every call.
        """
        validator = self.validators.create(request.name, self.container)
        if validator is None:
            return ValidationOutcome.passed()
        return validator.validate(request)

    def freeze(self) -> None:
        self.validators.freeze()
