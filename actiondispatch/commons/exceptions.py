"""Custom exceptions for actiondispatch."""

from collections.abc import Iterable
from typing import Any


class DispatchException(Exception):
    """Base exception for all fatal dispatch faults.

    These signal configuration or programming defects and are never turned
    into a response.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ActionNotFoundError(DispatchException):
    """No action is registered under the requested name."""

    def __init__(self, action_name: str) -> None:
        super().__init__(
            f"Action not found: {action_name}",
            details={"action_name": action_name},
        )
        self.action_name = action_name


class MissingErrorTargetError(DispatchException):
    """An action collected errors but never declared where they route."""

    def __init__(self, action: str, errors: list[str] | None = None) -> None:
        super().__init__(
            f"Cannot handle error, no error target declared by {action}",
            details={"action": action, "errors": errors or []},
        )
        self.action = action


class DependencyResolutionError(DispatchException):
    """The container could not build a requested object."""

    def __init__(self, key: Any, reason: str) -> None:
        key_name = getattr(key, "__qualname__", None) or str(key)
        super().__init__(
            f"Unable to resolve {key_name}: {reason}",
            details={"key": key_name, "reason": reason},
        )
        self.key = key


class RegistryFrozenError(DispatchException):
    """Registration was attempted after the registry was sealed."""

    def __init__(self, registry: str, name: str) -> None:
        super().__init__(
            f"Registry {registry} is frozen, cannot register {name}",
            details={"registry": registry, "name": name},
        )
        self.registry = registry
        self.name = name


class ActionReusedError(DispatchException):
    """An action instance was asked to handle a second request."""

    def __init__(self, action: str) -> None:
        super().__init__(
            f"Action {action} has already handled a request",
            details={"action": action},
        )
        self.action = action


class ValidationException(Exception):
    """Recoverable validation failure raised from inside an action's run().

    The action pipeline catches this kind only and merges ``errors`` into the
    action's error state.
    """

    def __init__(self, errors: Iterable[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        if not self.errors:
            raise ValueError("ValidationException requires at least one error message")
        super().__init__("; ".join(self.errors))
