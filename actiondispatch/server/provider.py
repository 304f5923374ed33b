"""Service provider wiring the forum's actions and validators into a server."""

from __future__ import annotations

from actiondispatch.actions import (
    Home,
    Login,
    LoginPage,
    Logout,
    Reply,
    ViewConversation,
    ViewPost,
)
from actiondispatch.commons.config import AppConfig, settings
from actiondispatch.commons.observability import configure_structlog, get_logger
from actiondispatch.domain.contracts import EventBus
from actiondispatch.domain.events import InMemoryEventBus
from actiondispatch.server.container import Container
from actiondispatch.server.server import Server
from actiondispatch.server.validation import RequestValidator
from actiondispatch.validators import PostValidator

logger = get_logger(__name__)


class ServiceProvider:
    """Builds the default server.

    Collaborators the actions depend on (AuthProvider,
    ConversationRepository) must be bound on the container by the host
    application before ``register()`` is called.
    """

    def __init__(self, container: Container, config: AppConfig | None = None) -> None:
        self.container = container
        self.config = config or settings

    def register(self, verify: bool = True) -> Server:
        """Create the server, register actions and validators.

        Args:
            verify: Build every registered factory once so missing
                dependencies fail at startup instead of on first request

        Returns:
            The configured server, frozen if configured so
        """
        if not self.container.has(EventBus):
            self.container.singleton(EventBus, lambda c: InMemoryEventBus())
        self.container.instance(AppConfig, self.config)

        server = Server(self.container)
        self.container.instance(Server, server)

        self.register_actions(server)
        self.register_validators(server.validator)

        if verify:
            server.verify()
        if self.config.freeze_registry_on_boot:
            server.freeze()

        logger.info(
            "server_registered",
            actions=len(server.actions),
            validators=len(server.validator.validators),
            frozen=server.actions.frozen,
        )
        return server

    def register_actions(self, server: Server) -> None:
        """Register the actions with the server."""
        server.register_action("index", Home)
        server.register_action("login", LoginPage)
        server.register_action("handle_login", Login)
        server.register_action("logout", Logout)
        server.register_action("conversation", ViewConversation)
        server.register_action("viewpost", ViewPost)
        server.register_action("reply_handler", Reply)

    def register_validators(self, validator: RequestValidator) -> None:
        """Register all validators with the request validator."""
        validator.register_validator("reply_handler", PostValidator)


def build_server(container: Container, config: AppConfig | None = None) -> Server:
    """Configure logging and build the default server.

    Entry point for host applications; equivalent to
    ``ServiceProvider(container, config).register()`` after logging setup.
    """
    configure_structlog()
    return ServiceProvider(container, config).register()
