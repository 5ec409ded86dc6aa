"""
Wire protocol for the hostrepl server.

JSON object per line over TCP, UTF-8, newline terminated.
- Request: {"type": "evaluate", "expression": "<source text>"}
- Response on accept: {"type": "connected", "message": "<banner>"}
- Response on evaluation: {"type": "eval_result", "success": true|false, "result": "<text>"}

Server messages are flat: values are strings or booleans, anything else is
sent as its str(). Failed evaluations use the same `result` key as successful
ones; `success` tells them apart.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Literal, Mapping

from hostrepl.errors import RequestError


CONNECTED = "connected"
EVAL_RESULT = "eval_result"
EVALUATE = "evaluate"

COMPILE_ERROR_PREFIX = "Compile error: "
RUNTIME_ERROR_PREFIX = "Error: "


@dataclass(frozen=True)
class EvaluationRequest:
    expression: str


@dataclass(frozen=True)
class EvaluationResponse:
    kind: Literal["connected", "eval_result"]
    payload: str
    success: bool = True

    @classmethod
    def connected(cls, message: str) -> EvaluationResponse:
        return cls(CONNECTED, message)

    @classmethod
    def ok(cls, result: str) -> EvaluationResponse:
        return cls(EVAL_RESULT, result, True)

    @classmethod
    def failed(cls, result: str) -> EvaluationResponse:
        return cls(EVAL_RESULT, result, False)

    def to_message(self) -> dict[str, Any]:
        if self.kind == CONNECTED:
            return {"type": CONNECTED, "message": self.payload}
        return {"type": EVAL_RESULT, "success": self.success, "result": self.payload}


def decode_request(line: str) -> EvaluationRequest:
    """Decode one client line into an EvaluationRequest.

    Raises RequestError for anything that is not a JSON object with
    "type" == "evaluate" and a string "expression".
    """
    try:
        obj = json.loads(line)
    except ValueError as ex:
        raise RequestError(f"Invalid JSON: {ex}") from ex
    if not isinstance(obj, dict):
        raise RequestError("Request is not an object")
    if obj.get("type") != EVALUATE:
        raise RequestError(f"Unknown request type: {obj.get('type')!r}")
    expression = obj.get("expression")
    if not isinstance(expression, str):
        raise RequestError("Missing or non-string 'expression'")
    return EvaluationRequest(expression)


def _flatten(value: Any) -> str | bool:
    if isinstance(value, (str, bool)):
        return value
    return str(value)


def encode_message(message: Mapping[str, Any]) -> bytes:
    """Serialize a flat message to one newline-terminated UTF-8 line."""
    flat = {str(k): _flatten(v) for k, v in message.items()}
    # json escapes quotes and CR/LF inside strings, so the result is a single line
    text = json.dumps(flat, ensure_ascii=False, separators=(",", ":"))
    return (text + "\n").encode("utf-8", errors="replace")


def encode_response(response: EvaluationResponse) -> bytes:
    return encode_message(response.to_message())


def encode_request(expression: str) -> bytes:
    return encode_message({"type": EVALUATE, "expression": expression})
