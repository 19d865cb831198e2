# -*- coding: utf-8 -*-

import logging
import queue
import tkinter as tk
from tkinter import ttk
from typing import Optional

from core.time_format import ACCEPTED_PATTERNS
from domain.models import TimerConfig, TimerSnapshot
from services.timer_service import CountdownTimer
from ui.tk_scheduler import TkScheduler

logger = logging.getLogger(__name__)

POLL_MS = 50


class CountdownWidget(ttk.Frame):
    """
    Demo front end. Acts as the timer's listener; notifications are queued
    and drained on the Tk thread, since after the move to the background
    context they arrive from the worker thread.
    """

    def __init__(self, master, config: TimerConfig):
        super().__init__(master)

        self._events: "queue.Queue[tuple]" = queue.Queue()
        self._poll_job = None

        self.timer = CountdownTimer.from_config(
            config, self, scheduler=TkScheduler(self)
        )

        self._build_ui()
        self._render(self.timer.snapshot())
        self._update_buttons()

        self._poll_job = self.after(POLL_MS, self._drain_events)
        self.bind("<Destroy>", self._on_destroy, add="+")

    def _build_ui(self):
        self.columnconfigure(0, weight=1)

        self.time_var = tk.StringVar(value="")
        self.info_var = tk.StringVar(value="Ready")
        self.pattern_var = tk.StringVar(value=self.timer.display_format)

        title = ttk.Label(self, text="Countdown", font=("Sans", 12, "bold"))
        title.grid(row=0, column=0, sticky="w", pady=(0, 6))

        self.time_label = ttk.Label(
            self, textvariable=self.time_var, font=("Sans", 32, "bold")
        )
        self.time_label.grid(row=1, column=0, sticky="w", pady=(8, 4))

        self.info_label = ttk.Label(self, textvariable=self.info_var)
        self.info_label.grid(row=2, column=0, sticky="w", pady=(0, 10))

        btns = ttk.Frame(self)
        btns.grid(row=3, column=0, sticky="w")

        self.start_btn = ttk.Button(btns, text="Start", command=self._start)
        self.pause_btn = ttk.Button(btns, text="Pause", command=self._pause)
        self.resume_btn = ttk.Button(btns, text="Resume", command=self._resume)
        self.background_btn = ttk.Button(
            btns, text="Background", command=self._move_to_background
        )

        self.start_btn.grid(row=0, column=0, padx=(0, 6))
        self.pause_btn.grid(row=0, column=1, padx=(0, 6))
        self.resume_btn.grid(row=0, column=2, padx=(0, 6))
        self.background_btn.grid(row=0, column=3)

        self.pattern_box = ttk.Combobox(
            self,
            textvariable=self.pattern_var,
            values=list(ACCEPTED_PATTERNS),
            width=8,
        )
        self.pattern_box.grid(row=4, column=0, sticky="w", pady=(8, 0))
        self.pattern_box.bind("<<ComboboxSelected>>", self._apply_pattern)
        self.pattern_box.bind("<Return>", self._apply_pattern)

    def _update_buttons(self):
        snap = self.timer.snapshot()

        if snap.is_running:
            self.start_btn.state(["disabled"])
            self.pause_btn.state(["!disabled"])
            self.resume_btn.state(["disabled"])
        else:
            self.start_btn.state(["!disabled"])
            self.pause_btn.state(["disabled"])
            # nothing to resume once finished
            if snap.is_finished:
                self.resume_btn.state(["disabled"])
            else:
                self.resume_btn.state(["!disabled"])

        if snap.in_background:
            self.background_btn.state(["disabled"])
        else:
            self.background_btn.state(["!disabled"])

    # ---- Button handlers ----
    def _start(self):
        self.timer.start()
        self._update_buttons()

    def _pause(self):
        self.timer.pause()
        self.info_var.set("Paused")
        self._update_buttons()

    def _resume(self):
        self.timer.start(resume=True)
        self._update_buttons()

    def _move_to_background(self):
        self.timer.move_to_background_context()
        self._update_buttons()

    def _apply_pattern(self, _event=None):
        if not self.timer.set_format(self.pattern_var.get()):
            self.pattern_var.set(self.timer.display_format)
        self._render(self.timer.snapshot())

    # ---- Listener (may be called off the Tk thread) ----
    def on_tick(self, display: str) -> None:
        self._events.put(("tick", display))

    def on_finished(self) -> None:
        self._events.put(("finished", None))

    def _drain_events(self):
        if self._poll_job is not None:
            self.after_cancel(self._poll_job)
            self._poll_job = None
        while True:
            try:
                kind, display = self._events.get_nowait()
            except queue.Empty:
                break
            if kind == "tick":
                self.time_var.set(display)
                self.info_var.set("Running...")
            else:
                self.time_var.set("Finished")
                self.info_var.set("Done")
            self._update_buttons()
        self._poll_job = self.after(POLL_MS, self._drain_events)

    def _render(self, snap: TimerSnapshot):
        self.time_var.set(snap.display)

    def _on_destroy(self, event):
        if event.widget is not self:
            return
        if self._poll_job is not None:
            self.after_cancel(self._poll_job)
            self._poll_job = None
        self.timer.close()


def run_app(config: TimerConfig, root: Optional[tk.Tk] = None) -> None:
    root = root or tk.Tk()
    root.title("Countdown Timer")
    widget = CountdownWidget(root, config)
    widget.pack(fill="both", expand=True, padx=10, pady=10)
    logger.info(
        "Countdown window ready (%d:%02d, every %ss)",
        widget.timer.total_minutes,
        widget.timer.total_seconds,
        widget.timer.tick_interval,
    )
    root.mainloop()
