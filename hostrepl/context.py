"""Evaluation context shared between the REPL and its host.

An EvaluationContext wraps the namespace dict that client code is compiled
and run against. Production wiring binds it to the host's `__main__` module
so that evaluated code sees (and can change) live host state; tests pass an
isolated dict instead.
"""

from __future__ import annotations

import sys
from typing import Any, Optional


class EvaluationContext:
    """Mutable global namespace used for every evaluation."""

    __slots__ = ("namespace", "filename")

    def __init__(self, namespace: Optional[dict[str, Any]] = None, filename: str = "<repl>"):
        self.namespace: dict[str, Any] = {} if namespace is None else namespace
        self.filename = filename

    @classmethod
    def host(cls) -> EvaluationContext:
        """Context bound to the `__main__` module of the running process."""
        main = sys.modules.get("__main__")
        if main is None:
            return cls()
        return cls(vars(main))

    def define(self, name: str, value: Any) -> None:
        self.namespace[name] = value

    def lookup(self, name: str) -> Any:
        """Look up `name`, raising KeyError if it is not bound."""
        return self.namespace[name]

    def update(self, mapping: dict[str, Any]) -> None:
        self.namespace.update(mapping)

    def __contains__(self, name: str) -> bool:
        return name in self.namespace

    def __repr__(self) -> str:
        names = ", ".join(k for k in self.namespace if not k.startswith("__"))
        return f"<EvaluationContext {self.filename}: {names}>"
