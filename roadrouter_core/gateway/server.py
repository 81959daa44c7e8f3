"""Server - Request dispatch and HTTP serving.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from roadrouter_core.gateway.request import MalformedRequestError, Request, Response
from roadrouter_core.routing.router import Route, Router

logger = logging.getLogger(__name__)

Handler = Callable[[Request, Response], Optional[Response]]


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    max_request_size: int = 1024 * 1024  # 1MB
    read_timeout: float = 30.0
    access_log: bool = True


class Server:
    """HTTP server dispatching requests through a Router.

    Handlers are called as ``handler(request, response)``. They fill the
    response sink, or return a Response of their own to replace it.
    Unmatched paths get a 404.

    Usage:
        server = Server()

        @server.route("/users/:userid")
        def get_user(request, response):
            response.write(f"user {request.params['userid']}")

        server.run(port=8080)
    """

    def __init__(
        self,
        router: Optional[Router] = None,
        config: Optional[ServerConfig] = None,
    ):
        self.router = router if router is not None else Router()
        self.config = config or ServerConfig()
        self._server: Optional[asyncio.AbstractServer] = None
        self._stats = {"requests": 0, "not_found": 0, "errors": 0}
        self._stats_lock = threading.Lock()

    def route(self, pattern: str, name: str = "") -> Callable[[Handler], Handler]:
        """Register the decorated function as a route handler."""

        def decorator(handler: Handler) -> Handler:
            self.router.add_route(pattern, handler, name=name)
            return handler

        return decorator

    def add_route(self, pattern: str, handler: Handler, name: str = "") -> Route:
        """Add a route to the underlying router."""
        return self.router.add_route(pattern, handler, name=name)

    def dispatch(self, request: Request) -> Response:
        """Route a request and run its handler.

        Args:
            request: Incoming request

        Returns:
            Response from the handler, 404 or 500
        """
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        if self.config.access_log:
            logger.info(f"[{request_id}] --> {request.method} {request.path}")

        response = self._dispatch(request)

        if self.config.access_log:
            duration_ms = (time.time() - start_time) * 1000
            logger.info(f"[{request_id}] <-- {response.status} ({duration_ms:.2f}ms)")

        return response

    def _dispatch(self, request: Request) -> Response:
        self._count("requests")

        result = self.router.match_route(request.path)
        if result is None:
            self._count("not_found")
            return Response.error(404)

        request.params = dict(result.params)
        response = Response()

        try:
            returned = result.handler(request, response)
        except Exception:
            self._count("errors")
            logger.exception(f"Handler for {result.pattern!r} failed on {request.path!r}")
            return Response.error(500)

        if isinstance(returned, Response):
            return returned
        return response

    def _count(self, key: str) -> None:
        with self._stats_lock:
            self._stats[key] += 1

    async def handle_connection(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Serve a single request on a client connection."""
        peer = writer.get_extra_info("peername")
        remote_addr = peer[0] if peer else ""

        try:
            response = await self._read_and_dispatch(reader, remote_addr)
            try:
                data = response.to_bytes()
            except UnicodeEncodeError:
                logger.exception(f"Cannot encode response headers for {remote_addr}")
                data = Response.error(500).to_bytes()
            writer.write(data)
            await writer.drain()
        except ConnectionError as e:
            logger.debug(f"Connection from {remote_addr} lost: {e}")
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError:
                pass

    async def _read_and_dispatch(
        self,
        reader: asyncio.StreamReader,
        remote_addr: str,
    ) -> Response:
        timeout = self.config.read_timeout

        try:
            head = await asyncio.wait_for(reader.readuntil(b"\r\n\r\n"), timeout)
            request = Request.from_raw(head, remote_addr=remote_addr)

            length = request.content_length
            if length > self.config.max_request_size:
                return Response.error(413)
            if length > 0:
                request.body = await asyncio.wait_for(
                    reader.readexactly(length), timeout
                )
        except asyncio.TimeoutError:
            return Response.error(408)
        except asyncio.LimitOverrunError:
            return Response.error(413)
        except (asyncio.IncompleteReadError, MalformedRequestError) as e:
            logger.debug(f"Bad request from {remote_addr}: {e}")
            return Response.error(400)

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.dispatch, request)

    async def start(self) -> None:
        """Freeze the router and start listening."""
        self.router.freeze()
        self._server = await asyncio.start_server(
            self.handle_connection,
            self.config.host,
            self.config.port,
            limit=self.config.max_request_size,
        )
        logger.info(
            f"Serving {len(self.router)} routes on "
            f"{self.config.host}:{self.bound_port}"
        )

    async def serve(self) -> None:
        """Start listening and serve until stopped."""
        await self.start()
        async with self._server:
            await self._server.wait_closed()
        logger.info("Server stopped")

    @property
    def bound_port(self) -> Optional[int]:
        """Port the listening socket is bound to."""
        if not self._server or not self._server.sockets:
            return None
        return self._server.sockets[0].getsockname()[1]

    def run(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
    ) -> None:
        """Start the server and block until interrupted.

        Args:
            host: Override host
            port: Override port
        """
        if host:
            self.config.host = host
        if port is not None:
            self.config.port = port

        try:
            asyncio.run(self.serve())
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down")

    def stop(self) -> None:
        """Stop listening."""
        if self._server:
            self._server.close()

    def get_stats(self) -> Dict[str, Any]:
        """Get server statistics."""
        with self._stats_lock:
            stats = dict(self._stats)
        stats["routes"] = len(self.router)
        stats["frozen"] = self.router.frozen
        stats["listening"] = self.bound_port is not None
        return stats


__all__ = [
    "Server",
    "ServerConfig",
    "Handler",
]
