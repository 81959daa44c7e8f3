"""Utils module - Configuration, handler loading and logging."""

from roadrouter_core.utils.config import Config, load_config
from roadrouter_core.utils.loader import (
    HandlerImportError,
    build_router,
    import_handler,
)
from roadrouter_core.utils.logging import JSONFormatter, configure_logging

__all__ = [
    "Config",
    "load_config",
    "HandlerImportError",
    "build_router",
    "import_handler",
    "JSONFormatter",
    "configure_logging",
]
