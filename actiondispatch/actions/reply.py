"""Reply action: add a post to an existing conversation."""

from __future__ import annotations

from actiondispatch.actions.base import Action
from actiondispatch.domain.contracts import AuthProvider, ConversationRepository
from actiondispatch.domain.events import UserHasPosted
from actiondispatch.domain.models import Post
from actiondispatch.server.request import Request


class Reply(Action):
    """Store a reply and send the user to the new post.

    Expects ``id`` (conversation id) and ``message`` parameters. The message
    itself is checked beforehand by the post validator.
    """

    error_target = "index"

    def __init__(self, conversations: ConversationRepository, auth: AuthProvider) -> None:
        super().__init__()
        self.conversations = conversations
        self.auth = auth

    def run(self) -> None:
        conversation = self.conversations.find_by_id(self.request.get("id"))
        if conversation is None:
            self.add_error("The conversation you are replying to does not exist")
            return

        self.on_error_redirect_to(Request("conversation", {"id": conversation.id}))

        creator = self.auth.user()
        if creator.is_guest:
            self.add_error("You must be logged in to post a reply")
            return

        post = Post(
            poster=creator.username,
            poster_id=creator.id,
            message=self.request.get("message", ""),
        )
        post = self.conversations.add_reply(conversation, post)

        self.raise_event(UserHasPosted(user=creator, post=post))

        self.redirect_to(Request("viewpost", {"id": post.id}), "Post added.")
