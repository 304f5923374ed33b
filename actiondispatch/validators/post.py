"""Validator for actions that create or edit posts."""

from __future__ import annotations

from actiondispatch.commons.config import AppConfig, settings
from actiondispatch.server.request import Request
from actiondispatch.server.validation import Validator


class PostValidator(Validator):
    """Check the ``message`` parameter against the configured length bounds."""

    def __init__(self, config: AppConfig = settings) -> None:
        self.config = config

    def rules(self, request: Request) -> list[str]:
        errors: list[str] = []
        message = request.get("message")

        if message is None or not str(message).strip():
            errors.append("You must enter a message")
            return errors

        length = len(str(message).strip())
        if length < self.config.post_min_length:
            errors.append(
                f"Messages must be at least {self.config.post_min_length} characters long"
            )
        if length > self.config.post_max_length:
            errors.append(
                f"Messages cannot be longer than {self.config.post_max_length} characters"
            )
        return errors

    def error_request(self, request: Request) -> Request:
        conversation_id = request.get("id")
        if conversation_id is not None:
            return Request("conversation", {"id": conversation_id})
        return Request("index")
