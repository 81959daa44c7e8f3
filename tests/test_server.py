"""Server and request/response tests."""

import asyncio
import json

import pytest
from roadrouter_core.gateway.request import MalformedRequestError, Request, Response
from roadrouter_core.gateway.server import Server, ServerConfig
from roadrouter_core.routing.router import Router, RouterFrozenError


def make_server():
    server = Server(config=ServerConfig(port=0, access_log=False))

    @server.route("/foo/:userid", name="user")
    def get_user(request, response):
        response.write(f"user {request.params['userid']}")

    @server.route("/json/:id")
    def get_json(request, response):
        return Response.json({"id": request.params["id"], "q": request.query})

    @server.route("/boom")
    def boom(request, response):
        raise RuntimeError("handler failure")

    @server.route("/echo")
    def echo(request, response):
        response.set_header("Content-Type", "text/plain")
        response.write(request.body)

    return server


async def roundtrip(server, raw):
    await server.start()
    try:
        reader, writer = await asyncio.open_connection("127.0.0.1", server.bound_port)
        writer.write(raw)
        await writer.drain()
        data = await reader.read()
        writer.close()
        await writer.wait_closed()
    finally:
        server.stop()
    return data


class TestRequest:
    """Test Request class."""

    def test_from_raw(self):
        """Test parsing a raw request."""
        request = Request.from_raw(
            b"GET /foo/4711?page=1&q=a%20b HTTP/1.1\r\n"
            b"Host: localhost\r\n"
            b"X-Trace: abc\r\n\r\n"
        )

        assert request.method == "GET"
        assert request.path == "/foo/4711"
        assert request.query == {"page": "1", "q": "a b"}
        assert request.get_header("x-trace") == "abc"
        assert request.body == b""

    def test_path_kept_verbatim(self):
        """Test the path is not decoded or normalized."""
        request = Request.from_raw(b"GET /foo/a%2Fb/ HTTP/1.1\r\n\r\n")

        assert request.path == "/foo/a%2Fb/"

    def test_body_and_content_length(self):
        """Test body and Content-Length parsing."""
        request = Request.from_raw(
            b"POST /echo HTTP/1.1\r\nContent-Length: 7\r\n\r\n{\"a\":1}"
        )

        assert request.content_length == 7
        assert request.json() == {"a": 1}

    @pytest.mark.parametrize("raw", [
        b"",
        b"GET\r\n\r\n",
        b"GET /path HTTP/1.1\r\nBadHeader\r\n\r\n",
        b"POST /echo HTTP/1.1\r\nContent-Length: -5\r\n\r\n",
        b"POST /echo HTTP/1.1\r\nContent-Length: ten\r\n\r\n",
    ])
    def test_malformed(self, raw):
        """Test malformed requests are rejected."""
        with pytest.raises(MalformedRequestError):
            Request.from_raw(raw)


class TestResponse:
    """Test Response class."""

    def test_write(self):
        """Test writing into the response sink."""
        response = Response()
        response.write("hello ").write(b"world")

        assert response.body == b"hello world"

    def test_to_bytes(self):
        """Test serializing a response."""
        data = Response.text("OK").to_bytes()

        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Length: 2\r\n" in data
        assert data.endswith(b"\r\n\r\nOK")

    def test_error(self):
        """Test error response."""
        response = Response.error(404)

        assert response.status == 404
        assert response.is_error
        assert json.loads(response.body) == {"error": "Not Found"}


class TestDispatch:
    """Test request dispatch."""

    def test_dispatch_with_params(self):
        """Test matched handler receives path params."""
        server = make_server()

        response = server.dispatch(Request(method="GET", path="/foo/4711"))

        assert response.status == 200
        assert response.body == b"user 4711"

    def test_handler_can_return_response(self):
        """Test a returned Response replaces the sink."""
        server = make_server()

        response = server.dispatch(
            Request(method="GET", path="/json/7", query={"a": "b"})
        )

        assert json.loads(response.body) == {"id": "7", "q": {"a": "b"}}

    def test_not_found(self):
        """Test unmatched path gets 404."""
        server = make_server()

        response = server.dispatch(Request(method="GET", path="/foo"))

        assert response.status == 404
        assert server.get_stats()["not_found"] == 1

    def test_handler_error(self, caplog):
        """Test handler exceptions become 500."""
        server = make_server()

        response = server.dispatch(Request(method="GET", path="/boom"))

        assert response.status == 500
        assert server.get_stats()["errors"] == 1
        assert "handler failure" in caplog.text

    def test_access_log(self, caplog):
        """Test access log lines."""
        server = make_server()
        server.config.access_log = True

        with caplog.at_level("INFO", logger="roadrouter_core"):
            server.dispatch(Request(method="GET", path="/foo/1"))

        assert "--> GET /foo/1" in caplog.text
        assert "<-- 200" in caplog.text

    def test_shared_router(self):
        """Test server uses a router passed in."""
        router = Router()
        router.add_route("/ping", lambda request, response: response.write("pong"))
        server = Server(router, ServerConfig(access_log=False))

        assert server.dispatch(Request(method="GET", path="/ping")).body == b"pong"
        assert server.get_stats()["routes"] == 1


class TestServe:
    """Test serving over a socket."""

    def test_roundtrip(self):
        """Test a request through the socket server."""
        server = make_server()

        data = asyncio.run(roundtrip(
            server, b"GET /foo/4711 HTTP/1.1\r\nHost: localhost\r\n\r\n"
        ))

        assert data.startswith(b"HTTP/1.1 200 OK\r\n")
        assert data.endswith(b"user 4711")

    def test_roundtrip_body(self):
        """Test a request body is read by Content-Length."""
        server = make_server()

        data = asyncio.run(roundtrip(
            server, b"POST /echo HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"
        ))

        assert data.endswith(b"\r\n\r\nhello")

    def test_roundtrip_not_found(self):
        """Test unmatched path over the socket."""
        server = make_server()

        data = asyncio.run(roundtrip(server, b"GET /nope HTTP/1.1\r\n\r\n"))

        assert data.startswith(b"HTTP/1.1 404 Not Found\r\n")

    def test_roundtrip_bad_request(self):
        """Test malformed request line gets 400."""
        server = make_server()

        data = asyncio.run(roundtrip(server, b"NONSENSE\r\n\r\n"))

        assert data.startswith(b"HTTP/1.1 400 Bad Request\r\n")

    def test_roundtrip_too_large(self):
        """Test oversized body gets 413."""
        server = make_server()
        server.config.max_request_size = 1024

        data = asyncio.run(roundtrip(
            server, b"POST /echo HTTP/1.1\r\nContent-Length: 4096\r\n\r\n"
        ))

        assert data.startswith(b"HTTP/1.1 413 Payload Too Large\r\n")

    def test_start_freezes_router(self):
        """Test routes cannot be added once serving."""
        server = make_server()

        asyncio.run(roundtrip(server, b"GET /foo/1 HTTP/1.1\r\n\r\n"))

        assert server.router.frozen
        with pytest.raises(RouterFrozenError):
            server.add_route("/late", lambda request, response: None)

    def test_roundtrip_negative_content_length(self):
        """Test a negative Content-Length gets 400."""
        server = make_server()

        data = asyncio.run(roundtrip(
            server, b"POST /echo HTTP/1.1\r\nContent-Length: -5\r\n\r\n"
        ))

        assert data.startswith(b"HTTP/1.1 400 Bad Request\r\n")

    def test_roundtrip_read_timeout(self):
        """Test an unfinished request head gets 408."""
        server = make_server()
        server.config.read_timeout = 0.05

        data = asyncio.run(roundtrip(server, b"GET /foo/1 HTTP/1.1\r\nHost: x\r\n"))

        assert data.startswith(b"HTTP/1.1 408 Request Timeout\r\n")

    def test_roundtrip_unencodable_header(self, caplog):
        """Test a header value outside latin-1 gets 500."""
        server = make_server()

        def greet(request, response):
            response.set_header("X-Greeting", "こんにちは")
            response.write("hi")

        server.add_route("/greet", greet)

        data = asyncio.run(roundtrip(server, b"GET /greet HTTP/1.1\r\n\r\n"))

        assert data.startswith(b"HTTP/1.1 500 Internal Server Error\r\n")
        assert "Cannot encode response headers" in caplog.text
