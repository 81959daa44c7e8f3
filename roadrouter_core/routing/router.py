"""Router - Route table and path resolution.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from roadrouter_core.routing.patterns import CompiledPattern, compile_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Route:
    """Route definition.

    Binds a pattern to its compiled matcher, its variable index and the
    handler supplied at registration. The handler is only stored and
    handed back, never called here.
    """

    pattern: str
    handler: Any
    matcher: CompiledPattern = field(repr=False)
    variables: Dict[str, int] = field(default_factory=dict)
    name: str = ""

    @classmethod
    def compile(
        cls,
        pattern: str,
        handler: Any,
        name: str = "",
        reject_duplicates: bool = False,
    ) -> "Route":
        """Build a route, compiling its pattern."""
        matcher = compile_pattern(pattern, reject_duplicates=reject_duplicates)
        return cls(
            pattern=pattern,
            handler=handler,
            matcher=matcher,
            variables=dict(matcher.variables),
            name=name,
        )

    def extract(self, path: str) -> Optional[Dict[str, str]]:
        """Extract path parameters.

        Returns:
            Dict of path parameters if the path matches, None otherwise.
            The dict is empty when the captures cannot be lined up with
            the variable index.
        """
        if not self.matcher.matches(path):
            return None

        captures = self.matcher.captures(path)
        if not captures:
            if self.variables:
                logger.warning(
                    f"Route {self.pattern!r} matched {path!r} without captures"
                )
            return {}

        params = {}
        for name, position in self.variables.items():
            if position >= len(captures):
                logger.warning(
                    f"Route {self.pattern!r} has no capture at position "
                    f"{position} for {name!r}"
                )
                return {}
            params[name] = captures[position]

        return params


@dataclass
class RouteResult:
    """Outcome of a successful resolve."""

    route: Route
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def handler(self) -> Any:
        return self.route.handler

    @property
    def pattern(self) -> str:
        return self.route.pattern


class RouterFrozenError(RuntimeError):
    """Raised when registering a route on a frozen router."""
    pass


class Router:
    """Request Router.

    Routes are tried in registration order and the first match wins.
    There is no priority or specificity scoring, and duplicate or
    shadowed patterns are accepted as they are.

    Registration is meant to finish before traffic starts. Calling
    ``freeze()`` closes the table; ``match_route`` only reads it.

    Usage:
        router = Router()
        router.add_route("/users/:userid", get_user)
        router.add_route("/health", health)

        result = router.match_route("/users/4711")
        if result:
            result.handler(request, response)
    """

    def __init__(self, reject_duplicate_variables: bool = False):
        self.reject_duplicate_variables = reject_duplicate_variables
        self._routes: List[Route] = []
        self._frozen = False
        self._lock = threading.Lock()

    @property
    def frozen(self) -> bool:
        return self._frozen

    def add_route(self, pattern: str, handler: Any, name: str = "") -> Route:
        """Add a route.

        Args:
            pattern: URL pattern, e.g. "/users/:userid"
            handler: Handler stored with the route
            name: Optional route name

        Returns:
            The registered Route

        Raises:
            CompileError: If the pattern cannot be compiled
            RouterFrozenError: If the router has been frozen
        """
        route = Route.compile(
            pattern,
            handler,
            name=name,
            reject_duplicates=self.reject_duplicate_variables,
        )

        with self._lock:
            if self._frozen:
                raise RouterFrozenError(
                    f"Cannot add route {pattern!r}: router is frozen"
                )
            self._routes.append(route)

        logger.debug(f"Registered route #{len(self._routes)} {pattern!r}")
        return route

    def match_route(self, path: str) -> Optional[RouteResult]:
        """Resolve a path to the first matching route.

        Args:
            path: Request path, used verbatim

        Returns:
            RouteResult if a route matches, None otherwise
        """
        for route in self._routes:
            params = route.extract(path)
            if params is not None:
                return RouteResult(route=route, params=params)

        return None

    def freeze(self) -> "Router":
        """Close the route table for registration."""
        with self._lock:
            self._frozen = True
        logger.debug(f"Router frozen with {len(self._routes)} routes")
        return self

    def find(self, name: str) -> Optional[Route]:
        """Get the first route registered under a name."""
        for route in self._routes:
            if route.name == name:
                return route
        return None

    def get_routes(self) -> List[Route]:
        """Get all routes."""
        return self._routes.copy()

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes.copy())


__all__ = [
    "Router",
    "Route",
    "RouteResult",
    "RouterFrozenError",
]
