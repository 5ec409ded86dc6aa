from __future__ import annotations

import time
from typing import Callable, Optional

from hostrepl import lifecycle


DEFAULT_INTERVAL = 0.1


class TickDriver:
    """
    Calls a tick function on a fixed cadence in the current thread.

    For hosts without a frame loop of their own. Hosts that already have one
    should call `hostrepl.tick()` from it instead.
    """

    def __init__(self, tick: Callable[[], None] = lifecycle.tick, interval: float = DEFAULT_INTERVAL,
                 sleep: Callable[[float], None] = time.sleep, clock: Callable[[], float] = time.monotonic):
        if interval < 0:
            raise ValueError(f"interval must be non-negative, got {interval!r}")
        self.tick = tick
        self.interval = interval
        self.ticks = 0
        self._sleep = sleep
        self._clock = clock
        self._stopped = False

    def step(self) -> None:
        self.tick()
        self.ticks += 1

    def stop(self) -> None:
        self._stopped = True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Tick until `stop()` is called or `max_ticks` ticks ran. Returns ticks run."""
        self._stopped = False
        ran = 0
        while not self._stopped and (max_ticks is None or ran < max_ticks):
            started = self._clock()
            self.step()
            ran += 1
            if self._stopped or (max_ticks is not None and ran >= max_ticks):
                break
            remaining = self.interval - (self._clock() - started)
            if remaining > 0:
                self._sleep(remaining)
        return ran
