"""Response definitions.

A dispatch always ends in exactly one of three responses:

- Data: success, carries the payload the action produced
- Redirect: success, the caller should dispatch ``next``
- Error: failure, the caller should dispatch ``target`` and show ``errors``
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar

from actiondispatch.commons.constants import ResponseKind
from actiondispatch.server.request import Request


@dataclass(frozen=True)
class Response:
    """Base of the closed response set. Not instantiated directly."""

    kind: ClassVar[ResponseKind]

    def __post_init__(self) -> None:
        if type(self) is Response:
            raise TypeError("Response is abstract, use Data, Redirect or Error")

    @property
    def is_success(self) -> bool:
        return self.kind is not ResponseKind.ERROR


@dataclass(frozen=True)
class Data(Response):
    """Successful response carrying a payload."""

    kind: ClassVar[ResponseKind] = ResponseKind.DATA

    payload: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__post_init__()
        object.__setattr__(self, "payload", MappingProxyType(dict(self.payload)))

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]


@dataclass(frozen=True)
class Redirect(Response):
    """Successful response asking the caller to dispatch another request."""

    kind: ClassVar[ResponseKind] = ResponseKind.REDIRECT

    next: Request
    message: str = ""

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.next, Request):
            raise ValueError("Redirect requires a next Request")


@dataclass(frozen=True)
class Error(Response):
    """Failed response routing the user to ``target`` with error messages."""

    kind: ClassVar[ResponseKind] = ResponseKind.ERROR

    target: Request
    errors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        super().__post_init__()
        if not isinstance(self.target, Request):
            raise ValueError("Error response requires a target Request")
        errors: Iterable[str] = self.errors
        object.__setattr__(self, "errors", tuple(str(e) for e in errors))
        if not self.errors:
            raise ValueError("Error response requires at least one error message")
