"""Pytest configuration and fixtures for actiondispatch tests."""

from collections.abc import Mapping
from typing import Any

import pytest

from actiondispatch.commons.config import AppConfig
from actiondispatch.domain.contracts import AuthProvider, ConversationRepository, EventBus
from actiondispatch.domain.events import InMemoryEventBus
from actiondispatch.domain.models import Conversation, Post, User
from actiondispatch.server.container import Container
from actiondispatch.server.provider import ServiceProvider
from actiondispatch.server.server import Server

# ============ Fake collaborators ============


class FakeAuth:
    """Auth provider accepting a single username/password pair."""

    def __init__(self, username: str = "bob", password: str = "secret") -> None:
        self.username = username
        self.password = password
        self.current: User = User.guest()
        self.attempts: list[tuple[dict[str, Any], bool]] = []
        self.logout_calls = 0

    def attempt(self, credentials: Mapping[str, Any], remember: bool = False) -> bool:
        self.attempts.append((dict(credentials), remember))
        if credentials.get("username") == self.username and credentials.get("password") == self.password:
            self.current = User(id=2, username=self.username)
            return True
        return False

    def logout(self) -> None:
        self.logout_calls += 1
        self.current = User.guest()

    def user(self) -> User:
        return self.current


class InMemoryConversations:
    """Conversation repository backed by dicts."""

    def __init__(self) -> None:
        self.conversations: dict[int, Conversation] = {}
        self.posts: dict[int, Post] = {}
        self._next_post_id = 1

    def add_conversation(self, conversation_id: int, title: str) -> Conversation:
        conversation = Conversation(id=conversation_id, title=title)
        self.conversations[conversation_id] = conversation
        return conversation

    def find_by_id(self, conversation_id: Any) -> Conversation | None:
        try:
            return self.conversations.get(int(conversation_id))
        except (TypeError, ValueError):
            return None

    def find_post(self, post_id: Any) -> Post | None:
        try:
            return self.posts.get(int(post_id))
        except (TypeError, ValueError):
            return None

    def all(self) -> list[Conversation]:
        return list(self.conversations.values())

    def add_reply(self, conversation: Conversation, post: Post) -> Post:
        post.id = self._next_post_id
        post.conversation_id = conversation.id
        self._next_post_id += 1
        conversation.posts.append(post)
        self.posts[post.id] = post
        return post


# ============ Fixtures ============


@pytest.fixture
def auth() -> FakeAuth:
    return FakeAuth()


@pytest.fixture
def conversations() -> InMemoryConversations:
    repository = InMemoryConversations()
    repository.add_conversation(12, "Welcome to the forum")
    return repository


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(post_min_length=2, post_max_length=50, freeze_registry_on_boot=True)


@pytest.fixture
def container(
    auth: FakeAuth, conversations: InMemoryConversations, event_bus: InMemoryEventBus
) -> Container:
    container = Container()
    container.instance(AuthProvider, auth)
    container.instance(ConversationRepository, conversations)
    container.instance(EventBus, event_bus)
    return container


@pytest.fixture
def server(container: Container, config: AppConfig) -> Server:
    """Default forum server with fake collaborators, frozen."""
    return ServiceProvider(container, config).register()
