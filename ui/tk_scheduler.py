# -*- coding: utf-8 -*-

import tkinter as tk
from typing import Any, Callable

from core.scheduler import Scheduler


class TkScheduler(Scheduler):
    """Runs callbacks on the Tk main loop via widget.after()."""

    name = "tk-mainloop"

    def __init__(self, widget: tk.Misc):
        self.widget = widget

    def call_later(self, delay: float, fn: Callable[[], None]) -> Any:
        return self.widget.after(max(0, int(round(delay * 1000))), fn)

    def cancel(self, handle: Any) -> None:
        if handle is None:
            return
        try:
            self.widget.after_cancel(handle)
        except tk.TclError:
            # widget already destroyed
            pass
