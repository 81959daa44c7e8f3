"""Gateway module - HTTP serving around the router."""

from roadrouter_core.gateway.request import MalformedRequestError, Request, Response
from roadrouter_core.gateway.server import Server, ServerConfig

__all__ = [
    "Server",
    "ServerConfig",
    "Request",
    "Response",
    "MalformedRequestError",
]
