"""Forum domain: collaborator contracts, models and domain events."""

from actiondispatch.domain.contracts import AuthProvider, ConversationRepository, EventBus
from actiondispatch.domain.events import DomainEvent, InMemoryEventBus, UserHasPosted
from actiondispatch.domain.models import Conversation, Post, User

__all__ = [
    "AuthProvider",
    "ConversationRepository",
    "EventBus",
    "DomainEvent",
    "UserHasPosted",
    "InMemoryEventBus",
    "Conversation",
    "Post",
    "User",
]
