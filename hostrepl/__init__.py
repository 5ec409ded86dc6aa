# Live execution REPL for a running Python process.
#
# A host calls start() once, then tick() on a steady cadence (e.g. every
# 100 ms of its frame loop). Each tick accepts at most one client, reads at
# most one request line and answers it. Evaluated code runs in the host's
# __main__ namespace unless another EvaluationContext is injected.

from hostrepl.config import ReplConfig, make_config
from hostrepl.context import EvaluationContext
from hostrepl.errors import ReplError, ConfigError, BindError, RequestError, CompileError, ReplTimeout
from hostrepl.evaluator import Evaluator
from hostrepl.lifecycle import start, stop, is_running, tick, get_server
from hostrepl.protocol import EvaluationRequest, EvaluationResponse
from hostrepl.server import ReplServer

__all__ = [
    "ReplConfig",
    "make_config",
    "EvaluationContext",
    "Evaluator",
    "EvaluationRequest",
    "EvaluationResponse",
    "ReplServer",
    "start",
    "stop",
    "is_running",
    "tick",
    "get_server",
    "ReplError",
    "ConfigError",
    "BindError",
    "RequestError",
    "CompileError",
    "ReplTimeout",
]
