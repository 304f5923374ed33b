"""Collaborator contracts consumed by actions.

Each collaborator is an opaque capability; the dispatcher only relies on
the methods declared here.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from actiondispatch.domain.models import Conversation, Post, User

if TYPE_CHECKING:
    from actiondispatch.domain.events import DomainEvent


@runtime_checkable
class AuthProvider(Protocol):
    """Authentication capability used by the login/logout actions."""

    def attempt(self, credentials: Mapping[str, Any], remember: bool = False) -> bool: ...

    def logout(self) -> None: ...

    def user(self) -> User: ...


@runtime_checkable
class ConversationRepository(Protocol):
    """Access to conversations and their posts."""

    def find_by_id(self, conversation_id: int) -> Conversation | None: ...

    def find_post(self, post_id: int) -> Post | None: ...

    def all(self) -> list[Conversation]: ...

    def add_reply(self, conversation: Conversation, post: Post) -> Post: ...


@runtime_checkable
class EventBus(Protocol):
    """Outbound channel for domain events recorded by actions."""

    def publish(self, event: DomainEvent) -> None: ...
