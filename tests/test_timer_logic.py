"""Tests for the countdown state and tick driver."""

import pytest

from timer_logic import EXPIRED, IDLE, RUNNING, TimerLogic, format_remaining


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rendered():
    return []


@pytest.fixture
def alerts():
    return []


@pytest.fixture
def timer(clock, rendered, alerts):
    return TimerLogic(
        on_update=rendered.append,
        on_finish=lambda: alerts.append(True),
        clock=clock,
    )


class TestFormatRemaining:
    """Text rendering of remaining seconds."""

    def test_minutes_and_padded_seconds(self):
        assert format_remaining(90) == "1:30"
        assert format_remaining(5) == "0:05"
        assert format_remaining(0) == "0:00"
        assert format_remaining(1500) == "25:00"

    def test_custom_template(self):
        assert format_remaining(125, "{minutes:02d}m{seconds:02d}s") == "02m05s"

    def test_matches_divmod_for_range(self):
        for d in range(0, 3700, 37):
            assert format_remaining(d) == f"{d // 60}:{d % 60:02d}"


class TestStart:
    """The start action resets the timer unconditionally."""

    def test_initial_state(self, timer):
        assert timer.remaining == 0
        assert timer.running is False
        assert timer.state == IDLE

    def test_start_renders_immediately(self, timer, rendered):
        timer.start(90)
        assert rendered == ["1:30"]
        assert timer.remaining == 90
        assert timer.running is True
        assert timer.state == RUNNING

    def test_start_sets_last_tick_to_now(self, timer, clock):
        timer.start(10)
        assert timer.last_tick == int(clock.now)

    def test_start_zero_is_expired_without_alert(self, timer, clock, alerts):
        timer.start(0)
        clock.advance(5)
        timer.tick()
        assert timer.state == EXPIRED
        assert alerts == []

    def test_custom_template_used_for_render(self, clock, rendered):
        timer = TimerLogic(on_update=rendered.append, template="{minutes} min {seconds} s",
                           clock=clock)
        timer.start(61)
        assert rendered == ["1 min 1 s"]


class TestTick:
    """Wall-clock driven countdown."""

    def test_tick_before_start_is_noop(self, timer, clock, rendered, alerts):
        clock.advance(10)
        assert timer.tick() is True
        assert rendered == []
        assert alerts == []

    def test_sub_second_tick_does_nothing(self, timer, clock, rendered):
        timer.start(5)
        clock.advance(0.4)
        timer.tick()
        assert timer.remaining == 5
        assert rendered == ["0:05"]

    def test_subtracts_real_elapsed_time(self, timer, clock, rendered):
        timer.start(5)
        clock.advance(3)
        timer.tick()
        assert timer.remaining == 2
        assert rendered[-1] == "0:02"

    def test_scenario_crossing_zero(self, timer, clock, rendered, alerts):
        timer.start(5)
        clock.advance(3)
        timer.tick()
        assert timer.remaining == 2
        assert rendered[-1] == "0:02"

        clock.advance(10)
        timer.tick()
        assert timer.remaining == 0
        assert rendered[-1] == "0:00"
        assert alerts == [True]
        assert timer.state == EXPIRED

    def test_alert_fires_on_exact_zero(self, timer, clock, alerts):
        timer.start(3)
        clock.advance(3)
        timer.tick()
        assert timer.remaining == 0
        assert alerts == [True]

    def test_ticks_after_expiry_are_idempotent(self, timer, clock, rendered, alerts):
        timer.start(2)
        clock.advance(5)
        timer.tick()
        seen = list(rendered)

        for _ in range(5):
            clock.advance(7)
            assert timer.tick() is True

        assert timer.remaining == 0
        assert rendered == seen
        assert alerts == [True]

    def test_remaining_monotonic_and_non_negative(self, timer, clock):
        timer.start(30)
        previous = timer.remaining
        for step in [0.3, 1, 0.9, 2.5, 4, 0.1, 7, 13, 9]:
            clock.advance(step)
            timer.tick()
            assert 0 <= timer.remaining <= previous
            previous = timer.remaining
        assert timer.remaining == 0

    def test_one_second_ticks_count_down_by_one(self, timer, clock, rendered):
        timer.start(3)
        for _ in range(3):
            clock.advance(1)
            timer.tick()
        assert rendered == ["0:03", "0:02", "0:01", "0:00"]

    def test_delayed_tick_catches_up(self, timer, clock, rendered):
        timer.start(1500)
        clock.advance(125)
        timer.tick()
        assert timer.remaining == 1375
        assert rendered[-1] == "22:55"

    def test_not_running_is_noop(self, timer, clock, rendered):
        timer.start(10)
        timer.running = False
        clock.advance(4)
        timer.tick()
        assert timer.remaining == 10
        assert rendered == ["0:10"]


class TestRestart:
    """A new start discards the in-flight interval."""

    def test_restart_discards_previous_interval(self, timer, clock, alerts):
        timer.start(5)
        clock.advance(3)
        timer.tick()
        timer.start(300)
        clock.advance(4)
        timer.tick()
        assert timer.remaining == 296
        assert alerts == []

    def test_restart_after_expiry_runs_again(self, timer, clock, alerts):
        timer.start(1)
        clock.advance(2)
        timer.tick()
        timer.start(2)
        assert timer.state == RUNNING
        clock.advance(2)
        timer.tick()
        assert alerts == [True, True]

    def test_restart_resets_last_tick(self, timer, clock):
        timer.start(60)
        clock.advance(30)
        timer.start(60)
        clock.advance(0.5)
        timer.tick()
        assert timer.remaining == 60
