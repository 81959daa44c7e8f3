"""Handler Loader - Build a router from configured routes.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from roadrouter_core.routing.router import Router
from roadrouter_core.utils.config import Config

logger = logging.getLogger(__name__)


class HandlerImportError(ImportError):
    """Raised when a handler reference cannot be resolved."""
    pass


def import_handler(reference: str) -> Any:
    """Resolve a "package.module:attr" reference.

    The attribute part may be dotted ("module:Class.method").
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise HandlerImportError(
            f"Invalid handler reference {reference!r}, expected 'module:attr'"
        )

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise HandlerImportError(
            f"Cannot import module {module_name!r} for {reference!r}: {e}"
        ) from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as e:
            raise HandlerImportError(
                f"Module {module_name!r} has no attribute {attr_path!r}"
            ) from e

    if not callable(target):
        raise HandlerImportError(f"Handler {reference!r} is not callable")

    return target


def build_router(config: Config) -> Router:
    """Create a router with every configured route, in order.

    Raises:
        CompileError: If a configured pattern cannot be compiled
        HandlerImportError: If a handler reference cannot be resolved
    """
    router = Router(reject_duplicate_variables=config.reject_duplicate_variables)

    for index, entry in enumerate(config.routes):
        try:
            pattern = entry["pattern"]
            reference = entry["handler"]
        except (KeyError, TypeError) as e:
            raise ValueError(
                f"Route #{index} needs 'pattern' and 'handler': {entry!r}"
            ) from e

        handler = import_handler(reference)
        router.add_route(pattern, handler, name=entry.get("name", ""))
        logger.debug(f"Loaded route {pattern!r} -> {reference}")

    return router


__all__ = [
    "HandlerImportError",
    "import_handler",
    "build_router",
]
