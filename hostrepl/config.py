from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from hostrepl.errors import ConfigError


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 8172
DEFAULT_BANNER = "UE4SS REPL ready!"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class ReplConfig:
    """Settings for a REPL server. A timeout of 0 means non-blocking sockets."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: float = 0
    banner: str = DEFAULT_BANNER
    backlog: int = 5
    recv_size: int = 4096
    max_line: int = 1 << 20

    def __post_init__(self):
        if not _is_int(self.port) or not 0 <= self.port <= 65535:
            raise ConfigError(f"Invalid port {self.port!r}")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)) or self.timeout < 0:
            raise ConfigError(f"Invalid timeout {self.timeout!r}")
        if not _is_int(self.backlog) or self.backlog < 0:
            raise ConfigError(f"Invalid backlog {self.backlog!r}")
        if not _is_int(self.recv_size) or self.recv_size <= 0:
            raise ConfigError(f"Invalid recv_size {self.recv_size!r}")
        if not _is_int(self.max_line) or self.max_line < self.recv_size:
            raise ConfigError(f"Invalid max_line {self.max_line!r}, must be at least recv_size")

    def merged(self, overrides: Mapping[str, Any] | None) -> ReplConfig:
        """Return a copy with `overrides` applied on top of this config."""
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(unknown)}")
        return replace(self, **overrides)


def make_config(config: ReplConfig | Mapping[str, Any] | None = None, **overrides: Any) -> ReplConfig:
    # Merge order: defaults, then `config`, then keyword overrides
    if isinstance(config, ReplConfig):
        base = config
    else:
        base = ReplConfig().merged(config)
    return base.merged(overrides)
