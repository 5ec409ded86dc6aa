"""Blocking line client for a hostrepl server.

The counterpart of ReplServer for tooling and tests. Note that the server
only makes progress when its host ticks it, so a client talking to a server
in the same thread must interleave ticks with its reads (see `poll`).
"""

from __future__ import annotations

import json
import socket
import time
from typing import Any, Callable, Optional

from hostrepl.errors import ReplTimeout
from hostrepl.protocol import encode_request


class ReplClient:

    def __init__(self, host: str = "127.0.0.1", port: int = 8172, timeout: float = 5.0):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.sock: Optional[socket.socket] = None
        self._buffer = b""

    def connect(self) -> None:
        self.sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        self._buffer = b""

    def close(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def send_line(self, line: str) -> None:
        self.sock.sendall(line.encode("utf-8") + b"\n")

    def send_expression(self, expression: str) -> None:
        self.sock.sendall(encode_request(expression))

    def _pop_message(self) -> Optional[dict[str, Any]]:
        if b"\n" not in self._buffer:
            return None
        line, self._buffer = self._buffer.split(b"\n", 1)
        return json.loads(line.decode("utf-8"))

    def read_message(self) -> dict[str, Any]:
        """Block until one message arrives. Raises ReplTimeout or ConnectionError."""
        while (msg := self._pop_message()) is None:
            try:
                chunk = self.sock.recv(4096)
            except socket.timeout as ex:
                raise ReplTimeout(f"No message within {self.timeout}s") from ex
            if not chunk:
                raise ConnectionError("Server closed the connection")
            self._buffer += chunk
        return msg

    def poll(self, tick: Callable[[], None], timeout: Optional[float] = None, interval: float = 0.01) -> dict[str, Any]:
        """Call `tick` until a message arrives; for servers ticked by this thread."""
        timeout = self.timeout if timeout is None else timeout
        deadline = time.monotonic() + timeout
        self.sock.settimeout(interval)
        try:
            while (msg := self._pop_message()) is None:
                if time.monotonic() > deadline:
                    raise ReplTimeout(f"No message within {timeout}s")
                tick()
                try:
                    chunk = self.sock.recv(4096)
                except socket.timeout:
                    continue
                if not chunk:
                    raise ConnectionError("Server closed the connection")
                self._buffer += chunk
            return msg
        finally:
            self.sock.settimeout(self.timeout)

    def evaluate(self, expression: str) -> dict[str, Any]:
        self.send_expression(expression)
        return self.read_message()

    def __enter__(self) -> ReplClient:
        self.connect()
        return self

    def __exit__(self, *exc) -> None:
        self.close()
