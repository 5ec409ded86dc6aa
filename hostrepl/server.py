"""
Tick-driven REPL server.

Protocol: JSON per line over TCP (see hostrepl.protocol).
- Request: {"type": "evaluate", "expression": "1 + 1"}
- Response: {"type": "eval_result", "success": true, "result": "2"}

The server never blocks and owns no thread. The host calls `tick()` on a
steady cadence; each tick does at most one accept, one line read and one
evaluation. Evaluated code runs against a single EvaluationContext, so
definitions persist across requests.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from hostrepl.config import ReplConfig
from hostrepl.context import EvaluationContext
from hostrepl.errors import BindError, RequestError
from hostrepl.evaluator import Evaluator
from hostrepl.protocol import EvaluationResponse, decode_request, encode_response
from hostrepl.transport import Listener


logger = logging.getLogger(__name__)


class ReplServer:
    def __init__(self, config: Optional[ReplConfig] = None, context: Optional[EvaluationContext] = None):
        self.config = config if config is not None else ReplConfig()
        self.evaluator = Evaluator(context)
        self.listener = Listener(self.config)
        self.running = False

    @property
    def context(self) -> EvaluationContext:
        return self.evaluator.context

    @property
    def address(self) -> Optional[Tuple[str, int]]:
        return self.listener.address

    def is_running(self) -> bool:
        return self.running

    def start(self) -> bool:
        """Bind the listener. Returns False (and logs) if binding fails."""
        if self.running:
            return True
        try:
            self.listener.bind()
        except BindError as ex:
            logger.error("%s", ex)
            return False
        self.running = True
        host, port = self.listener.address
        logger.info("REPL server started on %s:%s", host, port)
        return True

    def stop(self) -> None:
        if self.running:
            logger.debug("REPL server stopping")
        self.listener.close()
        self.running = False

    def send(self, response: EvaluationResponse) -> bool:
        return self.listener.send(encode_response(response))

    def handle_line(self, line: str) -> Optional[EvaluationResponse]:
        """Decode and evaluate one line; None means the line is ignored."""
        if not line:
            return None
        try:
            request = decode_request(line)
        except RequestError:
            return None
        return self.evaluator.evaluate(request.expression)

    def tick(self) -> None:
        if not self.running:
            return
        if self.listener.accept_if_none():
            self.send(EvaluationResponse.connected(self.config.banner))
        line = self.listener.receive_line()
        if line is None:
            return
        response = self.handle_line(line)
        if response is not None:
            self.send(response)

