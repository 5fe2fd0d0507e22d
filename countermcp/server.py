"""HTTP server exposing the counter service over streamable HTTP."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid
from dataclasses import dataclass
from typing import Any

from aiohttp import web

from countermcp.counter import Counter, MockDataService

BIND_ADDRESS = "127.0.0.1:3000"
DEFAULT_KEEP_ALIVE = 15.0
SESSION_HEADER = "Mcp-Session-Id"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppState:
    """Plain application state shown by the hello route."""

    data: str = "state"


class ExternalA:
    """External state variant A."""

    def get_value(self) -> str:
        return "A"


class ExternalB:
    """External state variant B."""

    def get_value(self) -> str:
        return "B"


class StreamableHttpApp:
    """Session-aware HTTP handlers for JSON-RPC messages to a counter service."""

    def __init__(self, counter: Counter, keep_alive: float = DEFAULT_KEEP_ALIVE) -> None:
        self.counter = counter
        self.keep_alive = keep_alive
        self._sessions: dict[str, asyncio.Event] = {}

    def _session(self, request: web.Request) -> tuple[str, asyncio.Event]:
        session_id = request.headers.get(SESSION_HEADER)
        if not session_id:
            raise web.HTTPBadRequest(text="missing session id")
        if session_id not in self._sessions:
            raise web.HTTPNotFound(text="session not found")
        return session_id, self._sessions[session_id]

    def _close_sessions(self) -> None:
        for closed in self._sessions.values():
            closed.set()
        self._sessions.clear()

    @staticmethod
    def _reply(request: web.Request, payload: Any, session_id: str | None = None) -> web.Response:
        headers = {SESSION_HEADER: session_id} if session_id else {}
        if "text/event-stream" in request.headers.get("Accept", ""):
            return web.Response(
                text=f"data: {json.dumps(payload)}\n\n", content_type="text/event-stream", headers=headers
            )
        return web.json_response(payload, headers=headers)

    async def handle_get(self, request: web.Request) -> web.StreamResponse:
        """Open an event stream for a session, sending keep-alive comments."""
        session_id, closed = self._session(request)
        logger.info("get_handler")
        response = web.StreamResponse(
            headers={"Content-Type": "text/event-stream", "Cache-Control": "no-cache", SESSION_HEADER: session_id}
        )
        await response.prepare(request)
        try:
            while not closed.is_set():
                try:
                    await asyncio.wait_for(closed.wait(), self.keep_alive)
                except asyncio.TimeoutError:
                    await response.write(b":ping\n\n")
        except ConnectionResetError:
            pass
        return response

    async def handle_post(self, request: web.Request) -> web.Response:
        """Accept a JSON-RPC message or batch and answer it."""
        logger.info("post_handler")
        try:
            message = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise web.HTTPBadRequest(text="invalid JSON body") from error

        is_initialize = isinstance(message, dict) and message.get("method") == "initialize" and "id" in message
        if is_initialize and SESSION_HEADER not in request.headers:
            session_id = uuid.uuid4().hex
            self._sessions[session_id] = asyncio.Event()
            return self._reply(request, await self.counter.handle_message(message), session_id)

        self._session(request)
        batch = isinstance(message, list)
        messages = message if batch else [message]
        if not messages:
            raise web.HTTPBadRequest(text="empty batch")
        replies = [reply for item in messages if (reply := await self.counter.handle_message(item)) is not None]
        if not replies:
            return web.Response(status=202)
        return self._reply(request, replies if batch else replies[0])

    async def handle_delete(self, request: web.Request) -> web.Response:
        """End a session and close its event stream."""
        logger.info("delete_handler")
        session_id, closed = self._session(request)
        del self._sessions[session_id]
        closed.set()
        return web.Response(status=202)


def create_app(
    counter: Counter | None = None,
    app_state: AppState | None = None,
    keep_alive: float = DEFAULT_KEEP_ALIVE,
) -> web.Application:
    """Build the web application with the hello route and the MCP endpoint."""
    state = app_state if app_state is not None else AppState()
    mcp = StreamableHttpApp(counter if counter is not None else Counter(), keep_alive)

    async def hello_world(request: web.Request) -> web.Response:
        return web.Response(text="Hello world! " + state.data)

    async def close_sessions(app: web.Application) -> None:
        mcp._close_sessions()

    app = web.Application()
    app.router.add_get("/hello", hello_world)
    for path in ("/mcp", "/mcp/"):
        app.router.add_get(path, mcp.handle_get)
        app.router.add_post(path, mcp.handle_post)
        app.router.add_delete(path, mcp.handle_delete)
    app.on_shutdown.append(close_sessions)
    return app


def main(argv: list[str] | None = None) -> None:
    """Run the server until interrupted."""
    parser = argparse.ArgumentParser(description="Counter MCP server over streamable HTTP.")
    parser.add_argument("--bind", default=BIND_ADDRESS, help="address to listen on, as host:port")
    args = parser.parse_args(argv)
    host, _, port_text = args.bind.rpartition(":")
    if not host or not port_text.isdigit():
        parser.error(f"invalid bind address: {args.bind}")

    logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    logger.info("Starting MCP server")
    app = create_app(Counter(0, MockDataService()), AppState("state"), DEFAULT_KEEP_ALIVE)
    web.run_app(app, host=host, port=int(port_text), print=None)