"""Constants and enums for actiondispatch."""

from enum import Enum


class Environment(str, Enum):
    """Deployment environment the dispatcher runs in."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log levels accepted by the logging configuration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ResponseKind(str, Enum):
    """Discriminator of the closed response set."""

    DATA = "data"
    REDIRECT = "redirect"
    ERROR = "error"


class LifecycleEvent(str, Enum):
    """Points in an action's life that callbacks can subscribe to."""

    BEFORE = "before"  # Before run()
    AFTER = "after"  # After the response is built
    SUCCESS = "success"  # Fired by the server for Data / Redirect
    ERROR = "error"  # Fired by the server for Error
