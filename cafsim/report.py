# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# report.py
# -----------------------------------------------------------------------------
# Purpose:
#   Reporter hooks the engine calls with per-minute snapshots and the final
#   report, plus a console renderer for them.
#
# Design notes:
#   - Reporter methods are no-ops so callers override only what they need.
#   - Lines are numbered from 1 in the text output.
#
# Usage:
#   from cafsim.report import TextReporter
#   run_simulation(cfg, reporter=TextReporter())
# -----------------------------------------------------------------------------

from __future__ import annotations
import sys
from typing import List, TextIO

class Reporter:
    """Base reporter; the engine calls on_minute each minute and on_finish once."""
    def on_minute(self, snapshot):
        pass

    def on_finish(self, report):
        pass

class TextReporter(Reporter):
    """
    Print minute snapshots and end-of-run statistics in the classic console
    layout. Set verbose=False to print only the final statistics.
    """
    def __init__(self, stream: TextIO | None = None, verbose: bool = True):
        self.stream = stream if stream is not None else sys.stdout
        self.verbose = verbose

    def _print(self, text: str = ""):
        print(text, file=self.stream)

    def on_minute(self, snapshot):
        if not self.verbose:
            return
        self._print(f"\nMinute {snapshot.minute}:")
        self._print(f"Arrivals this minute: {snapshot.arrivals}")
        for idx, occ in snapshot.occupancy:
            self._print(f"Line {idx + 1} length: {occ}")

    def on_finish(self, report):
        self._print("\nEnd of simulation:")
        for ls in report.lines:
            self._print(f"Line {ls.line + 1}:")
            self._print(f"  Number of students left in line: {ls.occupancy}")
            self._print(f"  Average wait time: {ls.average_wait:.2f} seconds")

class RecordingReporter(Reporter):
    """Keep every snapshot and the final report in memory."""
    def __init__(self):
        self.minutes: List = []
        self.report = None

    def on_minute(self, snapshot):
        self.minutes.append(snapshot)

    def on_finish(self, report):
        self.report = report
