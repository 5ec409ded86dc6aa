from __future__ import annotations
from typing import Any, Mapping, Optional

from hostrepl.config import ReplConfig, make_config
from hostrepl.context import EvaluationContext
from hostrepl.server import ReplServer

# NOTE: process-global, like the host state it exposes. tick() must only be
# called from one thread at a time.
_server: Optional[ReplServer] = None


def start(
    config: ReplConfig | Mapping[str, Any] | None = None,
    *,
    context: EvaluationContext | None = None,
    **overrides: Any,
) -> bool:
    """Start the process-wide REPL server.

    Options are merged over the defaults (port 8172, non-blocking). Calling
    this while the server is running returns True and changes nothing.
    The default context is the host's `__main__` namespace.
    """
    global _server
    if _server is not None and _server.running:
        return True
    cfg = make_config(config, **overrides)
    server = ReplServer(cfg, context if context is not None else EvaluationContext.host())
    if not server.start():
        return False
    _server = server
    return True


def stop() -> None:
    global _server
    if _server is not None:
        _server.stop()
        _server = None


def is_running() -> bool:
    return _server is not None and _server.running


def tick() -> None:
    """Run one non-blocking server step; no-op when not running."""
    if _server is not None:
        _server.tick()


def get_server() -> Optional[ReplServer]:
    return _server
