"""Routing module - Pattern compilation and route resolution."""

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

__all__ = [
    "Router",
    "Route",
    "RouteResult",
    "RouterFrozenError",
    "CompileError",
    "CompiledPattern",
    "compile_pattern",
    "extract_variables",
]
