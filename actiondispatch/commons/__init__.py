"""Commons module - shared utilities, config, and constants."""

from actiondispatch.commons.config import settings
from actiondispatch.commons.constants import (
    Environment,
    LifecycleEvent,
    LogLevel,
    ResponseKind,
)
from actiondispatch.commons.exceptions import (
    ActionNotFoundError,
    ActionReusedError,
    DependencyResolutionError,
    DispatchException,
    MissingErrorTargetError,
    RegistryFrozenError,
    ValidationException,
)

__all__ = [
    "settings",
    "Environment",
    "LifecycleEvent",
    "LogLevel",
    "ResponseKind",
    "DispatchException",
    "ActionNotFoundError",
    "ActionReusedError",
    "DependencyResolutionError",
    "MissingErrorTargetError",
    "RegistryFrozenError",
    "ValidationException",
]
