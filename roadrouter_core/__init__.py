"""RoadRouter - Path routing core with a minimal HTTP server.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

RoadRouter resolves request paths against an ordered table of path
patterns such as ``/users/:userid/invoices``, extracts the named path
variables and hands back the handler registered for the route.

Architecture Overview:
┌─────────────────────────────────────────────────────────────────────┐
│                             RoadRouter                              │
├─────────────────────────────────────────────────────────────────────┤
│                                                                     │
│  ┌───────────────────────────────────────────────────────────────┐  │
│  │                       Request Pipeline                        │  │
│  │  Client ──▶ Server ──▶ Router ──▶ Handler ──▶ Response ──▶   │  │
│  └───────────────────────────────────────────────────────────────┘  │
│                                                                     │
│  ┌─────────────────┐  ┌─────────────────┐  ┌─────────────────────┐  │
│  │    Routing      │  │    Gateway      │  │       Utils         │  │
│  │                 │  │                 │  │                     │  │
│  │ - Patterns      │  │ - Server        │  │ - Config            │  │
│  │ - Route table   │  │ - Request       │  │ - Handler loading   │  │
│  │ - First match   │  │ - Response      │  │ - Logging           │  │
│  └─────────────────┘  └─────────────────┘  └─────────────────────┘  │
│                                                                     │
└─────────────────────────────────────────────────────────────────────┘

Request Flow:
1. Server reads a request and splits off the query string
2. Router tries each route in registration order
3. First matching route wins, its path variables become request.params
4. Handler fills the response, unmatched paths get a 404

Usage:
    from roadrouter_core import Router

    router = Router()
    router.add_route("/foo/:userid", show_user)
    router.add_route("/bar", show_bar)

    result = router.match_route("/foo/4711")
    result.params  # {"userid": "4711"}
"""

__version__ = "0.1.0"
__author__ = "BlackRoad OS, Inc."

# Routing
from roadrouter_core.routing.patterns import (
    CompileError,
    CompiledPattern,
    compile_pattern,
    extract_variables,
)
from roadrouter_core.routing.router import (
    Route,
    RouteResult,
    Router,
    RouterFrozenError,
)

# Gateway
from roadrouter_core.gateway.request import Request, Response
from roadrouter_core.gateway.server import Server, ServerConfig

# Utils
from roadrouter_core.utils.config import Config, load_config
from roadrouter_core.utils.loader import HandlerImportError, build_router
from roadrouter_core.utils.logging import configure_logging

__all__ = [
    # Version
    "__version__",
    # Routing
    "Router",
    "Route",
    "RouteResult",
    "RouterFrozenError",
    "CompileError",
    "CompiledPattern",
    "compile_pattern",
    "extract_variables",
    # Gateway
    "Server",
    "ServerConfig",
    "Request",
    "Response",
    # Utils
    "Config",
    "load_config",
    "HandlerImportError",
    "build_router",
    "configure_logging",
]
