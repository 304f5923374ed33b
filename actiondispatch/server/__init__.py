"""Request, response, validation and dispatch primitives."""

from actiondispatch.server.container import Container
from actiondispatch.server.registry import FactoryRegistry
from actiondispatch.server.request import Request
from actiondispatch.server.response import Data, Error, Redirect, Response
from actiondispatch.server.server import Server, Subscription
from actiondispatch.server.validation import RequestValidator, ValidationOutcome, Validator

__all__ = [
    "Container",
    "FactoryRegistry",
    "Request",
    "Response",
    "Data",
    "Redirect",
    "Error",
    "Server",
    "Subscription",
    "RequestValidator",
    "ValidationOutcome",
    "Validator",
]
