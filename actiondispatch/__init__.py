"""Request-dispatch layer that routes named requests to single-use actions."""

from actiondispatch.server.request import Request
from actiondispatch.server.response import Data, Error, Redirect, Response
from actiondispatch.server.server import Server

__all__ = [
    "Request",
    "Response",
    "Data",
    "Redirect",
    "Error",
    "Server",
]
