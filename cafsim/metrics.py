# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Collect and summarize KPIs: per-minute arrivals and line lengths, and the
#   end-of-run residual occupancy, throughput and average wait per line.
#
# Design notes:
#   - Keep side-effect methods (note_*) for instrumentation from the engine.
#   - Arrivals per minute are counted as they are released, never by
#     re-scanning the arrival list.
#   - Summaries return JSON-serializable dicts for easy tabulation.
#
# Usage:
#   M = Metrics(cfg); ...; M.summary()
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Sequence, Tuple
from .config import SimulationConfig
from .entities import Customer
from .lines import Line

SECONDS_PER_MINUTE = 60

@dataclass(frozen=True)
class MinuteSnapshot:
    minute: int                             # 1-based index of the completed minute
    arrivals: int                           # customers released during that minute
    occupancy: Tuple[Tuple[int, int], ...]  # (line index, occupancy) pairs

@dataclass(frozen=True)
class LineSummary:
    line: int
    occupancy: int          # residual customers (queued + in service)
    served: int
    average_wait: float     # seconds
    utilization: float = 0.0
    max_occupancy: int = 0

@dataclass
class FinalReport:
    lines: List[LineSummary]
    generated: int
    released: int
    duration_seconds: int
    minutes: List[MinuteSnapshot] = field(default_factory=list)

    @property
    def total_served(self) -> int:
        return sum(ls.served for ls in self.lines)

    @property
    def total_residual(self) -> int:
        return sum(ls.occupancy for ls in self.lines)

    @property
    def average_wait(self) -> float:
        """Wait averaged over every served customer across all lines."""
        served = self.total_served
        if served == 0:
            return 0.0
        return sum(ls.average_wait * ls.served for ls in self.lines) / served

class Metrics:
    def __init__(self, cfg: SimulationConfig):
        self.cfg = cfg
        self.released = 0
        self.window_arrivals = 0
        self.released_by_line = [0] * cfg.line_count
        self.minutes: List[MinuteSnapshot] = []
        self.report: Optional[FinalReport] = None

    def note_release(self, customer: Customer):
        self.released += 1
        self.window_arrivals += 1
        self.released_by_line[customer.line] += 1

    def note_minute(self, t: int, lines: Sequence[Line]) -> MinuteSnapshot:
        """Close the minute ending at tick t and start counting the next one."""
        snap = MinuteSnapshot(
            minute=(t + 1) // SECONDS_PER_MINUTE,
            arrivals=self.window_arrivals,
            occupancy=tuple((ln.index, ln.occupancy()) for ln in lines),
        )
        self.window_arrivals = 0
        self.minutes.append(snap)
        return snap

    def note_finish(self, lines: Sequence[Line], generated: int, elapsed: int) -> FinalReport:
        summaries = []
        for ln in lines:
            served, avg = ln.statistics()
            summaries.append(LineSummary(
                line=ln.index,
                occupancy=ln.occupancy(),
                served=served,
                average_wait=avg,
                utilization=ln.utilization(elapsed),
                max_occupancy=ln.max_occupancy,
            ))
        self.report = FinalReport(
            lines=summaries,
            generated=generated,
            released=self.released,
            duration_seconds=elapsed,
            minutes=list(self.minutes),
        )
        return self.report

    def summary(self) -> Dict:
        if self.report is None:
            raise RuntimeError("summary() requested before the run finished")
        rep = self.report
        return {
            "generated": rep.generated,
            "released": rep.released,
            "served": rep.total_served,
            "residual": rep.total_residual,
            "avg_wait_seconds": rep.average_wait,
            "served_by_line": {ls.line: ls.served for ls in rep.lines},
            "avg_wait_by_line": {ls.line: ls.average_wait for ls in rep.lines},
            "residual_by_line": {ls.line: ls.occupancy for ls in rep.lines},
            "utilization_by_line": {ls.line: ls.utilization for ls in rep.lines},
            "max_occupancy_by_line": {ls.line: ls.max_occupancy for ls in rep.lines},
            "arrivals_by_line": dict(enumerate(self.released_by_line)),
            # Per-minute series for plotting line lengths over the run
            "time_series": [
                {
                    "minute": snap.minute,
                    "arrivals": snap.arrivals,
                    "occupancy": {idx: occ for idx, occ in snap.occupancy},
                }
                for snap in rep.minutes
            ],
            "lines": [asdict(ls) for ls in rep.lines],
        }
