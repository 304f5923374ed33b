"""Request validators registered by action name."""

from actiondispatch.validators.post import PostValidator

__all__ = ["PostValidator"]
