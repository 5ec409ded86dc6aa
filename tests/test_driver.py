import pytest

from hostrepl.driver import TickDriver


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_runs_max_ticks_on_cadence():
    clock = FakeClock()
    calls = []
    driver = TickDriver(lambda: calls.append(clock.now), interval=0.1, sleep=clock.sleep, clock=clock)
    assert driver.run(max_ticks=3) == 3
    assert calls == pytest.approx([0.0, 0.1, 0.2])
    assert clock.sleeps == pytest.approx([0.1, 0.1])
    assert driver.ticks == 3


def test_time_spent_ticking_is_subtracted():
    clock = FakeClock()

    def slow_tick():
        clock.now += 0.03

    driver = TickDriver(slow_tick, interval=0.1, sleep=clock.sleep, clock=clock)
    driver.run(max_ticks=2)
    assert clock.sleeps == pytest.approx([0.07])


def test_overlong_tick_does_not_sleep():
    clock = FakeClock()

    def slow_tick():
        clock.now += 0.5

    driver = TickDriver(slow_tick, interval=0.1, sleep=clock.sleep, clock=clock)
    driver.run(max_ticks=3)
    assert clock.sleeps == []


def test_stop_from_inside_tick():
    clock = FakeClock()
    driver = TickDriver(lambda: None, interval=0.1, sleep=clock.sleep, clock=clock)

    def tick():
        if driver.ticks == 4:
            driver.stop()

    driver.tick = tick
    assert driver.run() == 5


def test_step():
    calls = []
    driver = TickDriver(lambda: calls.append(1))
    driver.step()
    assert calls == [1]
    assert driver.ticks == 1


def test_negative_interval():
    with pytest.raises(ValueError):
        TickDriver(lambda: None, interval=-1)
