"""Request value passed into the dispatcher."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

TRUTHY_VALUES = frozenset({"1", "true", "on", "yes"})


@dataclass(frozen=True)
class Request:
    """Immutable named invocation of an action.

    Used both for inbound dispatch and by actions to describe follow-up or
    error targets. A redirect is always a new Request, never an edit.

    Example:
        Request("conversation", {"id": 12})
    """

    name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate the name and freeze the parameter bag."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Request name must be a non-empty string")
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def get(self, key: str, default: Any = None) -> Any:
        """Get a parameter value, or ``default`` when absent."""
        return self.parameters.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Read a checkbox-style parameter.

        Only ``1``, ``true``, ``on`` and ``yes`` (any case) read as true;
        native booleans are returned as given.
        """
        value = self.parameters.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUTHY_VALUES

    def has(self, key: str) -> bool:
        """Check whether a parameter is present."""
        return key in self.parameters

    def with_parameters(self, **parameters: Any) -> Request:
        """Return a new request with the given parameters merged in."""
        return Request(self.name, {**self.parameters, **parameters})

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "parameters": dict(self.parameters)}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Request):
            return NotImplemented
        return self.name == other.name and dict(self.parameters) == dict(other.parameters)

    def __hash__(self) -> int:
        return hash((self.name, tuple(sorted(self.parameters, key=str))))

    def __repr__(self) -> str:
        return f"Request(name={self.name!r}, parameters={dict(self.parameters)!r})"
