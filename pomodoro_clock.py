#!/usr/bin/env python3
"""
Pomodoro Clock - work/break countdown with an audible alert
Two buttons start a work interval or a break; a chime plays at zero.
"""

import logging
import sys
import tkinter as tk

from config_manager import ConfigError, parse_args
from sound_manager import SoundError, SoundManager
from timer_logic import TimerLogic

logger = logging.getLogger("pomodoro_clock")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_HANDLER_NAME = "pomodoro_clock.stderr"


def setup_logging(verbose=False):
    """Attach the stderr handler once; later calls only change the level"""
    root = logging.getLogger()
    if not any(h.get_name() == LOG_HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(LOG_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


# ===================== MAIN APP =====================

class PomodoroClock:
    def __init__(self, root, config, sound_mgr):
        self.root = root
        self.root.title("Pomodoro Clock")
        self.root.resizable(False, False)

        self.config = config
        self.sound_mgr = sound_mgr
        self.timer = TimerLogic(
            on_update=self.on_timer_update,
            on_finish=self.on_timer_finish,
            template=config.text_template,
        )
        self._tick_job = None

        self._setup_ui()
        self._setup_keybindings()
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self._schedule_tick()

    def _setup_ui(self):
        main = tk.Frame(self.root)
        main.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)

        self.time_lbl = tk.Label(main, text=self.timer.text(),
                                 font=('Arial', self.config.font_size, 'bold'))
        self.time_lbl.pack(pady=(0, 6))

        btn_f = tk.Frame(main)
        btn_f.pack()

        self.work_btn = tk.Button(btn_f, text="New pomodoro", command=self.start_work,
                                  font=('Arial', 10), padx=10, pady=2)
        self.work_btn.pack(side=tk.LEFT, padx=2)

        self.break_btn = tk.Button(btn_f, text="Break", command=self.start_break,
                                   font=('Arial', 10), padx=10, pady=2)
        self.break_btn.pack(side=tk.LEFT, padx=2)

    def _setup_keybindings(self):
        self.root.bind('w', lambda e: self.start_work())
        self.root.bind('b', lambda e: self.start_break())
        self.root.bind('p', lambda e: self.sound_mgr.play())
        self.root.bind('<Escape>', lambda e: self.close())

    def start_work(self):
        self.timer.start(self.config.work_seconds)

    def start_break(self):
        self.timer.start(self.config.break_seconds)

    def _schedule_tick(self):
        self.timer.tick()
        self._tick_job = self.root.after(self.config.tick_ms, self._schedule_tick)

    def on_timer_update(self, text):
        self.time_lbl.config(text=text)

    def on_timer_finish(self):
        self.sound_mgr.play()

    def close(self):
        if self._tick_job is not None:
            self.root.after_cancel(self._tick_job)
            self._tick_job = None
        self.sound_mgr.close()
        self.root.destroy()


def main(argv=None):
    """Run the app; returns the process exit status"""
    try:
        config, verbose = parse_args(argv)
    except ConfigError as e:
        setup_logging()
        logger.error("Configuration error: %s", e)
        return 2

    setup_logging(verbose)

    try:
        sound_mgr = SoundManager(config.sound_path)
    except SoundError as e:
        logger.error("Sound error: %s", e)
        return 1

    try:
        root = tk.Tk()
    except tk.TclError as e:
        logger.error("Cannot open window: %s", e)
        sound_mgr.close()
        return 1

    PomodoroClock(root, config, sound_mgr)
    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
