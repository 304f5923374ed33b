"""Plain forum models exchanged with collaborators."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class User:
    """An authenticated forum member."""

    id: int
    username: str
    is_guest: bool = False

    @classmethod
    def guest(cls) -> User:
        return cls(id=1, username="Guest", is_guest=True)


@dataclass
class Post:
    """A single message inside a conversation."""

    poster: str
    poster_id: int
    message: str
    posted: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: int | None = None
    conversation_id: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "conversation_id": self.conversation_id,
            "poster": self.poster,
            "poster_id": self.poster_id,
            "message": self.message,
            "posted": self.posted.isoformat(),
        }


@dataclass
class Conversation:
    """A discussion thread."""

    id: int
    title: str
    posts: list[Post] = field(default_factory=list)

    @property
    def num_replies(self) -> int:
        return max(len(self.posts) - 1, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "num_replies": self.num_replies,
        }
