"""Command line entry point.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from roadrouter_core.gateway.server import Server, ServerConfig
from roadrouter_core.routing.patterns import CompileError
from roadrouter_core.utils.config import Config, load_config
from roadrouter_core.utils.loader import HandlerImportError, build_router
from roadrouter_core.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roadrouter",
        description="Serve handlers from a route table",
    )
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--host", help="Override listen host")
    parser.add_argument("--port", type=int, help="Override listen port")
    parser.add_argument("--log-level", help="Override log level")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Load and compile the route table, print it and exit",
    )
    return parser


def server_config(config: Config) -> ServerConfig:
    return ServerConfig(
        host=config.host,
        port=config.port,
        max_request_size=config.max_request_size,
        read_timeout=config.read_timeout,
        access_log=config.access_log,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"error: cannot load config: {e}", file=sys.stderr)
        return 2

    if args.host:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_level:
        config.log_level = args.log_level

    configure_logging(config.log_level, config.log_format)

    try:
        router = build_router(config)
    except CompileError as e:
        print(f"error: route pattern {e.pattern!r} rejected: {e.reason}", file=sys.stderr)
        return 2
    except (HandlerImportError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logger.info(f"Loaded {len(router)} routes")

    if args.check:
        for index, route in enumerate(router):
            variables = ", ".join(route.variables) or "-"
            print(f"{index:>3}  {route.pattern}  [{variables}]  {route.name}".rstrip())
        return 0

    server = Server(router, server_config(config))
    server.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
