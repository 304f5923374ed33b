"""Read-only page actions producing data payloads."""

from __future__ import annotations

from actiondispatch.actions.base import Action
from actiondispatch.domain.contracts import ConversationRepository


class Home(Action):
    """Forum index listing all conversations."""

    def __init__(self, conversations: ConversationRepository) -> None:
        super().__init__()
        self.conversations = conversations

    def run(self) -> None:
        self.data["conversations"] = [c.to_dict() for c in self.conversations.all()]


class LoginPage(Action):
    def run(self) -> None:
        self.data["remember"] = self.request.get_bool("remember")


class ViewConversation(Action):
    """Show a conversation with its posts."""

    error_target = "index"

    def __init__(self, conversations: ConversationRepository) -> None:
        super().__init__()
        self.conversations = conversations

    def run(self) -> None:
        conversation = self.conversations.find_by_id(self.request.get("id"))
        if conversation is None:
            self.add_error("The conversation you requested does not exist")
            return

        self.data["conversation"] = conversation.to_dict()
        self.data["posts"] = [p.to_dict() for p in conversation.posts]


class ViewPost(Action):
    """Show a single post."""

    error_target = "index"

    def __init__(self, conversations: ConversationRepository) -> None:
        super().__init__()
        self.conversations = conversations

    def run(self) -> None:
        post = self.conversations.find_post(self.request.get("id"))
        if post is None:
            self.add_error("The post you requested does not exist")
            return

        self.data["post"] = post.to_dict()
