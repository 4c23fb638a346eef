"""Phase timing for a single dispatcher invocation."""

import sys
import time
from typing import Optional, TextIO


SHOW_TIMINGS_FLAG = "-show-timings"


class Timers:
    """Named phases mapped to their start instant.

    One instance is built by main() and handed to everything that needs it,
    including the exit hook that reports the TOTAL phase.
    """

    def __init__(self, should_print: bool = False, label: str = "main",
                 out: Optional[TextIO] = None):
        self.should_print = should_print
        self.label = label
        self.out = out
        self.starts: dict[str, float] = {}

    def start(self, name: str) -> None:
        self.starts[name] = time.perf_counter()

    def measure(self, name: str) -> float:
        """Return milliseconds elapsed since start(name), or 0.0 if never started."""
        began = self.starts.get(name)
        if began is None:
            return 0.0
        return (time.perf_counter() - began) * 1000.0

    def show(self, name: str) -> float:
        ms = self.measure(name)
        if self.should_print:
            print(format_timing(ms, name), file=self.out or sys.stdout)
        return ms


def format_timing(ms: float, name: str) -> str:
    return f"{ms:8.3f} ms {name}"


def timings_enabled(args: list[str], time_v: bool) -> bool:
    """Printing is on for the debug-timing variant or when -show-timings is given."""
    return time_v or SHOW_TIMINGS_FLAG in args


class ExitReport:
    """Exit hook that shows one phase exactly once, however the process ends."""

    def __init__(self, timers: Timers, name: str = "TOTAL"):
        self.timers = timers
        self.name = name
        self.done = False

    def __call__(self) -> None:
        if self.done:
            return
        self.done = True
        self.timers.show(self.name)
