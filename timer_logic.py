"""
Countdown logic for the pomodoro clock.

The timer is advanced by wall-clock delta instead of a fixed decrement per
tick, so a delayed or skipped tick never makes the display drift.
"""

import logging
import time

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "{minutes}:{seconds:02d}"

IDLE = "idle"
RUNNING = "running"
EXPIRED = "expired"


def format_remaining(seconds, template=DEFAULT_TEMPLATE):
    """Render seconds as minutes:seconds (90 -> '1:30')"""
    mins, secs = divmod(seconds, 60)
    return template.format(minutes=mins, seconds=secs)


class TimerLogic:
    """Single countdown advanced by elapsed wall-clock seconds"""
    def __init__(self, on_update=None, on_finish=None, template=DEFAULT_TEMPLATE,
                 clock=None):
        self.remaining = 0
        self.running = False
        self.last_tick = None
        self.template = template
        self.on_update = on_update
        self.on_finish = on_finish
        self._clock = clock or time.monotonic

    @property
    def state(self):
        if self.last_tick is None:
            return IDLE
        if self.remaining == 0:
            return EXPIRED
        return RUNNING

    def text(self):
        return format_remaining(self.remaining, self.template)

    def _now(self):
        # whole seconds, like the display
        return int(self._clock())

    def start(self, seconds):
        """Overwrite any in-flight interval and start counting from seconds"""
        self.remaining = seconds
        self.running = True
        self.last_tick = self._now()
        logger.info("Interval started: %s", self.text())
        if self.on_update:
            self.on_update(self.text())

    def tick(self):
        """Advance by the time elapsed since the last decrement.

        Always returns True so the caller keeps scheduling ticks.
        """
        if self.remaining == 0:
            return True
        if not self.running:
            return True

        now = self._now()
        if now - self.last_tick >= 1:
            self.remaining -= now - self.last_tick
            self.last_tick = now

            if self.remaining <= 0:
                self.remaining = 0
                logger.info("Interval finished")
                if self.on_finish:
                    self.on_finish()

            if self.on_update:
                self.on_update(self.text())
        return True
