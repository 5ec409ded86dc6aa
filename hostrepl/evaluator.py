"""Two-phase evaluation of client source text.

Text is first compiled as an expression so that its value can be returned.
If that fails it is compiled again as a statement sequence. Both phases
compile against the same EvaluationContext, and the compiled unit runs
with full read/write access to the context namespace. Nothing is sandboxed.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import CodeType
from typing import Any, Literal

from hostrepl.context import EvaluationContext
from hostrepl.errors import CompileError
from hostrepl.protocol import (
    COMPILE_ERROR_PREFIX,
    RUNTIME_ERROR_PREFIX,
    EvaluationResponse,
)


@dataclass(frozen=True)
class CompiledUnit:
    code: CodeType
    mode: Literal["eval", "exec"]


def describe_error(ex: BaseException) -> str:
    """One-line description of an exception, e.g. `NameError: name 'x' is not defined`."""
    message = str(ex)
    name = type(ex).__name__
    return f"{name}: {message}" if message else name


class Evaluator:
    """Compiles and runs client code against a shared EvaluationContext."""

    def __init__(self, context: EvaluationContext | None = None):
        self.context = context if context is not None else EvaluationContext()

    def compile(self, text: str) -> CompiledUnit:
        filename = self.context.filename
        try:
            return CompiledUnit(compile(text, filename, "eval"), "eval")
        except Exception:
            pass  # not an expression, retry as statements
        try:
            return CompiledUnit(compile(text, filename, "exec"), "exec")
        except Exception as ex:
            # Only the statement-mode diagnostic is reported
            raise CompileError(str(ex)) from ex

    def run(self, unit: CompiledUnit) -> Any:
        """Run a compiled unit; statement units always produce None."""
        namespace = self.context.namespace
        if unit.mode == "eval":
            return eval(unit.code, namespace)
        exec(unit.code, namespace)
        return None

    def evaluate(self, text: str) -> EvaluationResponse:
        try:
            unit = self.compile(text)
        except CompileError as ex:
            return EvaluationResponse.failed(COMPILE_ERROR_PREFIX + ex.diagnostic)

        try:
            value = self.run(unit)
            # A broken __repr__ is a runtime fault of the evaluated code too
            return EvaluationResponse.ok(repr(value))
        except KeyboardInterrupt:
            raise
        except BaseException as ex:
            return EvaluationResponse.failed(RUNTIME_ERROR_PREFIX + describe_error(ex))
