"""Login and logout actions."""

from __future__ import annotations

from actiondispatch.actions.base import Action
from actiondispatch.domain.contracts import AuthProvider
from actiondispatch.server.request import Request


class Login(Action):
    """Authenticate the user with the submitted credentials."""

    error_target = "login"

    def __init__(self, auth: AuthProvider) -> None:
        super().__init__()
        self.auth = auth

    def run(self) -> None:
        credentials = {
            "username": self.request.get("req_username", self.request.get("username")),
            "password": self.request.get("req_password", self.request.get("password")),
        }
        remember = self.request.get_bool("remember")

        if not self.auth.attempt(credentials, remember):
            self.add_error("Invalid username / password combination")
            return

        self.redirect_to(Request("index"), "Logged in successfully.")


class Logout(Action):
    """End the current user's session."""

    def __init__(self, auth: AuthProvider) -> None:
        super().__init__()
        self.auth = auth

    def run(self) -> None:
        self.auth.logout()
        self.redirect_to(Request("index"), "Logged out.")
