"""
Per-session Streamable HTTP transport.

A SessionTransport answers POSTed JSON-RPC messages with JSON bodies and
carries server-initiated messages on a single SSE push stream opened by GET.
"""

import enum
import json
import logging
import time
from collections.abc import AsyncIterator, Callable
from typing import Any

import anyio
from sse_starlette import EventSourceResponse
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response

from ..constants import ErrorMessages, TransportConfig
from .dispatcher import RpcDispatcher
from .protocol import (
    INVALID_REQUEST,
    PARSE_ERROR,
    JSONRPCMessage,
    JSONRPCRequest,
    error_response,
    parse_message,
)

logger = logging.getLogger(__name__)

SessionCallback = Callable[["SessionTransport"], None]


class SessionState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    CLOSED = "closed"


def _raw_id(raw: Any) -> Any:
    if isinstance(raw, dict) and isinstance(raw.get("id"), (int, str)):
        return raw["id"]
    return None


class SessionTransport:
    """One client session: protocol state, log level and push stream."""

    def __init__(
        self,
        session_id: str,
        dispatcher: RpcDispatcher,
        on_initialized: SessionCallback | None = None,
        on_close: SessionCallback | None = None,
        buffer_size: int = TransportConfig.PUSH_BUFFER_SIZE,
        ping_interval: int = TransportConfig.PING_INTERVAL_SECONDS,
    ):
        self.session_id = session_id
        self.log_level: str | None = None
        self.last_activity = time.monotonic()
        self._dispatcher = dispatcher
        self._on_initialized = on_initialized
        self._on_close = on_close
        self._ping_interval = ping_interval
        self._state = SessionState.UNINITIALIZED
        self._stream_open = False
        self._send_stream, self._receive_stream = anyio.create_memory_object_stream[dict[str, Any]](
            buffer_size
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_closed(self) -> bool:
        return self._state is SessionState.CLOSED

    @property
    def is_stream_open(self) -> bool:
        return self._stream_open

    def touch(self) -> None:
        self.last_activity = time.monotonic()

    # --- HTTP verbs ---

    async def handle_post(self, request: Request) -> Response:
        """Process a POSTed message or batch and answer with JSON."""
        self.touch()
        body = await request.body()
        try:
            raw = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.info("Unparseable body on session %s: %s", self.session_id, e)
            return JSONResponse(error_response(None, PARSE_ERROR, ErrorMessages.PARSE_ERROR.format(e)))

        is_batch = isinstance(raw, list)
        items = raw if is_batch else [raw]
        if not items:
            return JSONResponse(
                error_response(None, INVALID_REQUEST, ErrorMessages.INVALID_REQUEST.format("empty batch"))
            )

        responses = []
        request_ids = []
        for item in items:
            try:
                message = parse_message(item)
            except ValueError as e:
                responses.append(
                    error_response(_raw_id(item), INVALID_REQUEST, ErrorMessages.INVALID_REQUEST.format(e))
                )
                continue
            if isinstance(message, JSONRPCRequest):
                request_ids.append(message.id)
            response = await self._process(message, is_batch)
            if response is not None:
                responses.append(response)

        if self.is_closed:
            # Closed while the call was in flight; the results are discarded
            terminated = [
                error_response(rid, INVALID_REQUEST, ErrorMessages.SESSION_TERMINATED) for rid in request_ids
            ] or [error_response(None, INVALID_REQUEST, ErrorMessages.SESSION_TERMINATED)]
            return JSONResponse(terminated if is_batch else terminated[0])

        if not responses:
            return Response(status_code=202)

        headers = {}
        if self._state is SessionState.ACTIVE:
            headers[TransportConfig.SESSION_HEADER] = self.session_id
        return JSONResponse(responses if is_batch else responses[0], headers=headers)

    async def handle_get(self, request: Request) -> Response:
        """Open the push stream for server-initiated messages."""
        if self._stream_open:
            return PlainTextResponse(ErrorMessages.STREAM_CONFLICT, status_code=409)
        self._stream_open = True
        self.touch()
        logger.debug("Push stream opened for session %s", self.session_id)
        return EventSourceResponse(
            self._event_stream(),
            ping=self._ping_interval,
            headers={TransportConfig.SESSION_HEADER: self.session_id},
        )

    async def handle_delete(self, request: Request) -> Response:
        logger.info("Session %s terminated by client", self.session_id)
        self.close()
        return Response(status_code=200)

    # --- Push stream ---

    async def send(self, message: dict[str, Any]) -> bool:
        """Queue a server-initiated message for the push stream.

        Returns:
            False if the message was dropped
        """
        if self.is_closed:
            return False
        try:
            self._send_stream.send_nowait(message)
        except anyio.WouldBlock:
            logger.warning(
                "Push buffer full for session %s, dropping %s", self.session_id, message.get("method")
            )
            return False
        except (anyio.BrokenResourceError, anyio.ClosedResourceError):
            return False
        return True

    async def _event_stream(self) -> AsyncIterator[dict[str, str]]:
        try:
            async with self._receive_stream:
                async for message in self._receive_stream:
                    yield {"event": "message", "data": json.dumps(message)}
        finally:
            self._stream_open = False
            if not self.is_closed:
                logger.warning("Push stream for session %s dropped, closing session", self.session_id)
                self.close()

    # --- Lifecycle ---

    def close(self) -> None:
        """Close the session. Safe to call more than once."""
        if self.is_closed:
            return
        self._state = SessionState.CLOSED
        self._send_stream.close()
        if not self._stream_open:
            self._receive_stream.close()
        logger.debug("Session %s closed", self.session_id)
        if self._on_close is not None:
            self._on_close(self)

    async def _process(self, message: JSONRPCMessage, in_batch: bool) -> dict[str, Any] | None:
        is_request = isinstance(message, JSONRPCRequest)

        if is_request and message.method == "initialize":
            if in_batch:
                return error_response(message.id, INVALID_REQUEST, ErrorMessages.BATCHED_INITIALIZE)
            if self._state is not SessionState.UNINITIALIZED:
                return error_response(message.id, INVALID_REQUEST, ErrorMessages.SESSION_ALREADY_INITIALIZED)
            response = await self._dispatcher.handle_message(message, self)
            if response is not None and "result" in response and self._state is SessionState.UNINITIALIZED:
                self._state = SessionState.ACTIVE
                if self._on_initialized is not None:
                    self._on_initialized(self)
            return response

        if self._state is SessionState.UNINITIALIZED:
            if is_request:
                return error_response(message.id, INVALID_REQUEST, ErrorMessages.SESSION_NOT_INITIALIZED)
            return None

        return await self._dispatcher.handle_message(message, self)
