"""Request/Response - HTTP request and response objects.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qsl


class MalformedRequestError(ValueError):
    """Raised when raw request data cannot be parsed."""
    pass


@dataclass
class Request:
    """HTTP Request object.

    ``path`` is the request target without its query string. ``params``
    holds the path variables of the matched route.
    """

    method: str
    path: str
    headers: Dict[str, str] = field(default_factory=dict)
    query: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    remote_addr: str = ""
    protocol: str = "HTTP/1.1"
    timestamp: float = field(default_factory=time.time)
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def content_type(self) -> str:
        """Get Content-Type header."""
        return self.get_header("Content-Type")

    @property
    def content_length(self) -> int:
        """Get Content-Length header."""
        try:
            return int(self.get_header("Content-Length", "0"))
        except ValueError:
            return 0

    def json(self) -> Any:
        """Parse body as JSON."""
        return json.loads(self.body.decode())

    def text(self) -> str:
        """Get body as text."""
        return self.body.decode()

    def get_header(self, name: str, default: str = "") -> str:
        """Get header value (case-insensitive)."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return default

    @classmethod
    def from_raw(cls, data: bytes, remote_addr: str = "") -> "Request":
        """Parse request from raw HTTP data.

        Raises:
            MalformedRequestError: If the request line or a header is invalid
        """
        head, _, body = data.partition(b"\r\n\r\n")
        lines = head.split(b"\r\n")

        if not lines[0]:
            raise MalformedRequestError("Empty request")

        request_line = lines[0].decode("latin-1")
        parts = request_line.split(" ")
        if len(parts) != 3 or not parts[0] or not parts[1]:
            raise MalformedRequestError(f"Invalid request line: {request_line!r}")
        method, target, protocol = parts

        # Query string is split off; the path itself is kept verbatim
        path, _, query_string = target.partition("?")
        query = dict(parse_qsl(query_string, keep_blank_values=True))

        headers = {}
        for line in lines[1:]:
            if not line:
                continue
            if b":" not in line:
                raise MalformedRequestError(f"Invalid header line: {line!r}")
            key, value = line.decode("latin-1").split(":", 1)
            headers[key.strip()] = value.strip()

        request = cls(
            method=method.upper(),
            path=path,
            headers=headers,
            query=query,
            body=body,
            remote_addr=remote_addr,
            protocol=protocol,
        )

        length = request.get_header("Content-Length")
        if length and not length.isdigit():
            raise MalformedRequestError(f"Invalid Content-Length: {length!r}")

        return request


@dataclass
class Response:
    """HTTP Response object.

    Handlers receive one of these as their response sink and fill it
    through ``write`` and ``set_header``.
    """

    status: int = 200
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    STATUS_MESSAGES = {
        200: "OK",
        201: "Created",
        204: "No Content",
        301: "Moved Permanently",
        302: "Found",
        304: "Not Modified",
        400: "Bad Request",
        401: "Unauthorized",
        403: "Forbidden",
        404: "Not Found",
        405: "Method Not Allowed",
        408: "Request Timeout",
        413: "Payload Too Large",
        500: "Internal Server Error",
        503: "Service Unavailable",
    }

    @property
    def status_message(self) -> str:
        """Get status message."""
        return self.STATUS_MESSAGES.get(self.status, "Unknown")

    @property
    def is_error(self) -> bool:
        """Check if response is error (4xx or 5xx)."""
        return self.status >= 400

    def write(self, data: Union[str, bytes]) -> "Response":
        """Append data to the body."""
        if isinstance(data, str):
            data = data.encode()
        self.body += data
        return self

    def set_header(self, name: str, value: str) -> "Response":
        """Set header value."""
        self.headers[name] = value
        return self

    def to_bytes(self) -> bytes:
        """Convert to raw HTTP response."""
        lines = [f"HTTP/1.1 {self.status} {self.status_message}"]

        headers = dict(self.headers)
        headers["Content-Length"] = str(len(self.body))
        headers.setdefault("Connection", "close")

        for key, value in headers.items():
            lines.append(f"{key}: {value}")

        lines.append("")
        header_bytes = "\r\n".join(lines).encode("latin-1")

        return header_bytes + b"\r\n" + self.body

    @classmethod
    def json(
        cls,
        data: Any,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Response":
        """Create JSON response."""
        body = json.dumps(data).encode()
        resp_headers = dict(headers or {})
        resp_headers["Content-Type"] = "application/json"
        return cls(status=status, body=body, headers=resp_headers)

    @classmethod
    def text(
        cls,
        text: str,
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> "Response":
        """Create text response."""
        resp_headers = dict(headers or {})
        resp_headers["Content-Type"] = "text/plain; charset=utf-8"
        return cls(status=status, body=text.encode(), headers=resp_headers)

    @classmethod
    def error(cls, status: int, message: Optional[str] = None) -> "Response":
        """Create error response."""
        msg = message or cls.STATUS_MESSAGES.get(status, "Error")
        return cls.json({"error": msg}, status=status)


__all__ = [
    "Request",
    "Response",
    "MalformedRequestError",
]
