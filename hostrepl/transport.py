"""Single-client TCP listener with line framing.

The Listener owns the bound socket and at most one connected client. All
socket operations use the configured timeout (0 means non-blocking), so none
of them stall the caller's tick. Received bytes are buffered and handed out
one complete line per `receive_line` call.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional, Tuple

from hostrepl.config import ReplConfig
from hostrepl.errors import BindError


logger = logging.getLogger(__name__)


class Listener:

    def __init__(self, config: ReplConfig):
        self.config = config
        self._server: Optional[socket.socket] = None
        self._client: Optional[socket.socket] = None
        self._buffer = b""

    @property
    def bound(self) -> bool:
        return self._server is not None

    @property
    def has_client(self) -> bool:
        return self._client is not None

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        """Actual (host, port) the listener is bound to, or None."""
        if self._server is None:
            return None
        host, port = self._server.getsockname()[:2]
        return host, port

    def _apply_timeout(self, sock: socket.socket) -> None:
        sock.settimeout(self.config.timeout or 0.0)

    def bind(self) -> None:
        """Bind and listen. Raises BindError; idempotent once bound."""
        if self._server is not None:
            return
        host, port = self.config.host, self.config.port
        try:
            s = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as ex:
            raise BindError(f"Cannot create socket: {ex}") from ex
        try:
            s.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            s.bind((host, port))
            s.listen(self.config.backlog)
            self._apply_timeout(s)
        except OSError as ex:
            s.close()
            raise BindError(f"Failed to bind to {host}:{port}: {ex}") from ex
        self._server = s

    def accept_if_none(self) -> bool:
        """Accept one pending connection if no client is held.

        Returns True only when a new client was stored.
        """
        if self._server is None or self._client is not None:
            return False
        try:
            conn, addr = self._server.accept()
        except OSError:
            # BlockingIOError / timeout: nobody is waiting
            return False
        try:
            self._apply_timeout(conn)
        except OSError as ex:
            logger.debug("Dropping connection from %s:%s: %s", *addr[:2], ex)
            conn.close()
            return False
        self._client = conn
        self._buffer = b""
        logger.info("Client connected from %s:%s", *addr[:2])
        return True

    def _pop_line(self) -> Optional[str]:
        if b"\n" not in self._buffer:
            return None
        line, self._buffer = self._buffer.split(b"\n", 1)
        return line.rstrip(b"\r").decode("utf-8", errors="replace")

    def _drop_client(self) -> None:
        if self._client is not None:
            try:
                self._client.close()
            except OSError:
                pass
        self._client = None
        self._buffer = b""

    def receive_line(self) -> Optional[str]:
        """Return the next complete line, or None if there is none yet.

        A closed connection clears the client so the next call to
        `accept_if_none` can take a new one. Lines already buffered are served
        before the socket is read again, one per call. A client whose
        unterminated line grows past `max_line` bytes is dropped.
        """
        if self._client is None:
            return None
        line = self._pop_line()
        if line is not None:
            return line
        try:
            chunk = self._client.recv(self.config.recv_size)
        except ConnectionError:
            chunk = b""
        except OSError:
            return None
        if not chunk:
            logger.info("Client disconnected")
            self._drop_client()
            return None
        self._buffer += chunk
        line = self._pop_line()
        if line is None and len(self._buffer) > self.config.max_line:
            logger.warning("Dropping client: line exceeds %d bytes", self.config.max_line)
            self._drop_client()
        return line

    def send(self, data: bytes) -> bool:
        """Write `data` to the client. Failures are swallowed and reported as False."""
        if self._client is None:
            return False
        try:
            self._client.sendall(data)
        except OSError as ex:
            # Dead connections are noticed by the next receive_line
            logger.debug("Send failed: %s", ex)
            return False
        return True

    def close(self) -> None:
        self._drop_client()
        if self._server is not None:
            self._server.close()
            self._server = None
