"""
Session table for the Streamable HTTP endpoint.

Routes each request to the SessionTransport named by its mcp-session-id
header, creating transports for initialising POSTs. The table is only
mutated by synchronous callbacks, so no mutation spans an await.
"""

import contextlib
import logging
import time
from collections.abc import AsyncIterator
from uuid import uuid4

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from ..constants import ErrorMessages, TransportConfig
from .dispatcher import RpcDispatcher
from .errors import InvalidSessionError
from .transport import SessionState, SessionTransport

logger = logging.getLogger(__name__)


class SessionManager:
    """Owns every live session for one server.

    Args:
        dispatcher: Dispatcher shared by all sessions
        unknown_session_policy: What a POST naming an unknown session gets:
            "create" starts a fresh session, "reject" answers 400
        session_idle_timeout: Seconds without activity after which a session
            with no open push stream is closed (0 disables)
    """

    def __init__(
        self,
        dispatcher: RpcDispatcher,
        unknown_session_policy: str = TransportConfig.UNKNOWN_SESSION_CREATE,
        session_idle_timeout: float = TransportConfig.SESSION_IDLE_TIMEOUT_SECONDS,
    ):
        if unknown_session_policy not in TransportConfig.UNKNOWN_SESSION_POLICIES:
            raise ValueError(
                f"Unknown session policy '{unknown_session_policy}': must be one of "
                f"{', '.join(TransportConfig.UNKNOWN_SESSION_POLICIES)}"
            )
        self._dispatcher = dispatcher
        self._unknown_session_policy = unknown_session_policy
        self._session_idle_timeout = session_idle_timeout
        self._sessions: dict[str, SessionTransport] = {}
        self._has_started = False
        self._shutting_down = False

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    @property
    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def get_session(self, session_id: str | None) -> SessionTransport:
        """Look up a live session.

        Raises:
            InvalidSessionError: If the id is missing or names no live session
        """
        transport = self._sessions.get(session_id) if session_id else None
        if transport is None:
            raise InvalidSessionError(ErrorMessages.INVALID_SESSION)
        return transport

    # --- Request handling ---

    async def handle_post(self, request: Request) -> Response:
        if self._shutting_down:
            return self._unavailable()
        self._reap_idle()

        session_id = request.headers.get(TransportConfig.SESSION_HEADER)
        transport = self._sessions.get(session_id) if session_id else None
        if transport is not None:
            return await transport.handle_post(request)

        if session_id and self._unknown_session_policy == TransportConfig.UNKNOWN_SESSION_REJECT:
            logger.info("Rejected POST for unknown session %s", session_id)
            return self._bad_request(ErrorMessages.INVALID_SESSION)

        transport = SessionTransport(
            uuid4().hex,
            self._dispatcher,
            on_initialized=self._register,
            on_close=self._unregister,
        )
        response = await transport.handle_post(request)
        if transport.state is SessionState.UNINITIALIZED:
            transport.close()
        return response

    async def handle_get(self, request: Request) -> Response:
        if self._shutting_down:
            return self._unavailable()
        self._reap_idle()
        try:
            transport = self.get_session(request.headers.get(TransportConfig.SESSION_HEADER))
        except InvalidSessionError as e:
            return self._bad_request(str(e))
        return await transport.handle_get(request)

    async def handle_delete(self, request: Request) -> Response:
        if self._shutting_down:
            return self._unavailable()
        self._reap_idle()
        try:
            transport = self.get_session(request.headers.get(TransportConfig.SESSION_HEADER))
        except InvalidSessionError as e:
            return self._bad_request(str(e))
        return await transport.handle_delete(request)

    # --- Table maintenance ---

    def _register(self, transport: SessionTransport) -> None:
        self._sessions[transport.session_id] = transport
        logger.info("Session %s initialized (%d active)", transport.session_id, len(self._sessions))

    def _unregister(self, transport: SessionTransport) -> None:
        if self._sessions.pop(transport.session_id, None) is not None:
            logger.info("Session %s removed (%d active)", transport.session_id, len(self._sessions))

    def _reap_idle(self) -> None:
        if not self._session_idle_timeout:
            return
        cutoff = time.monotonic() - self._session_idle_timeout
        expired = [
            t for t in self._sessions.values() if not t.is_stream_open and t.last_activity < cutoff
        ]
        for transport in expired:
            logger.info("Session %s expired after %.0fs idle", transport.session_id, self._session_idle_timeout)
            transport.close()

    @contextlib.asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        """Serve sessions until the context exits, then close them all.

        Can only be entered once per instance.
        """
        if self._has_started:
            raise RuntimeError("SessionManager.run() can only be called once per instance")
        self._has_started = True
        logger.info("Session manager started")
        try:
            yield
        finally:
            logger.info("Session manager shutting down, closing %d session(s)", len(self._sessions))
            self._shutting_down = True
            for transport in list(self._sessions.values()):
                try:
                    transport.close()
                except Exception:
                    logger.exception("Failed to close session %s", transport.session_id)
            self._sessions.clear()

    @staticmethod
    def _bad_request(message: str) -> Response:
        return PlainTextResponse(message, status_code=400)

    @staticmethod
    def _unavailable() -> Response:
        return PlainTextResponse(ErrorMessages.SHUTTING_DOWN, status_code=503)
