# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# engine.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication ("one hour of lunch"): build the lines,
#   release arrivals second by second, tick every line, and hand minute
#   snapshots and the final report to a reporter.
#
# Design notes:
#   - Fixed-increment clock: each step releases the arrivals for instant t,
#     then ticks every line in index order, then reports. Reporting always
#     sees the state after all lines have ticked for t.
#   - An Engine runs once; afterwards it is FINISHED and rejects new runs.
#
# Usage:
#   from cafsim.engine import run_simulation
#   report = run_simulation(cfg, reporter=TextReporter())
#   results = run_one_replication(load_config())
# -----------------------------------------------------------------------------

from __future__ import annotations
import enum, logging, random
from typing import Dict, List, Optional, Sequence
from .arrivals import generate_arrivals
from .config import SimulationConfig
from .entities import Customer
from .lines import Line
from .metrics import FinalReport, Metrics, SECONDS_PER_MINUTE
from .report import Reporter

logger = logging.getLogger(__name__)

class EngineState(enum.Enum):
    RUNNING = "running"
    FINISHED = "finished"

class Engine:
    """Fixed-step multi-line cafeteria simulator.

    Attributes
    ----------
    t : int
        Next tick to process; equals duration_seconds once finished.
    lines : list[Line]
        One single-server line per configured food line.
    metrics : Metrics
        Streaming counters and the snapshots produced so far.
    """
    def __init__(self, cfg: SimulationConfig, reporter: Optional[Reporter] = None):
        self.cfg = cfg
        self.reporter = reporter if reporter is not None else Reporter()
        self.lines: List[Line] = [Line(i, cfg.service_seconds) for i in range(cfg.line_count)]
        self.metrics = Metrics(cfg)
        self.state = EngineState.RUNNING
        self.t: int = 0

    def _check_arrivals(self, arrivals: Sequence[Customer]):
        prev = 0
        for cust in arrivals:
            if cust.arrival_time < 0:
                raise ValueError(f"customer {cust.cid} arrives before t=0")
            if cust.arrival_time < prev:
                raise ValueError(
                    f"arrivals must be sorted by arrival_time (customer {cust.cid} at "
                    f"{cust.arrival_time} follows {prev})"
                )
            if not 0 <= cust.line < len(self.lines):
                raise ValueError(f"customer {cust.cid} chose unknown line {cust.line}")
            prev = cust.arrival_time

    def run(self, arrivals: Sequence[Customer]) -> FinalReport:
        """Run the whole horizon over `arrivals` and return the final report."""
        if self.state is EngineState.FINISHED:
            raise RuntimeError("engine already finished; create a new Engine per run")
        self._check_arrivals(arrivals)
        logger.info(
            "running %d lines for %ds with %d arrivals",
            len(self.lines), self.cfg.duration_seconds, len(arrivals),
        )
        nxt = 0
        for t in range(self.cfg.duration_seconds):
            self.t = t
            # Release everyone arriving now, in sequence order
            while nxt < len(arrivals) and arrivals[nxt].arrival_time == t:
                self._release(arrivals[nxt], t)
                nxt += 1
            for line in self.lines:
                line.tick(t)
            if (t + 1) % SECONDS_PER_MINUTE == 0:
                self.reporter.on_minute(self.metrics.note_minute(t, self.lines))

        self.t = self.cfg.duration_seconds
        report = self.metrics.note_finish(self.lines, len(arrivals), self.cfg.duration_seconds)
        self.state = EngineState.FINISHED
        self.reporter.on_finish(report)
        logger.info(
            "finished: served %d, residual %d, avg wait %.2fs",
            report.total_served, report.total_residual, report.average_wait,
        )
        return report

    def _release(self, customer: Customer, t: int):
        customer.join_time = t
        self.lines[customer.line].enqueue(customer)
        self.metrics.note_release(customer)

def run_simulation(
    cfg: SimulationConfig,
    reporter: Optional[Reporter] = None,
    arrivals: Optional[Sequence[Customer]] = None,
    rng: Optional[random.Random] = None,
) -> FinalReport:
    """Generate arrivals (unless supplied) and run one replication."""
    if arrivals is None:
        arrivals = generate_arrivals(cfg, rng)
    return Engine(cfg, reporter).run(arrivals)

def run_one_replication(cfg: Dict, reporter: Optional[Reporter] = None) -> Dict:
    """Run one seeded replication from a parsed YAML dict and return the KPI summary."""
    sim_cfg = SimulationConfig.from_dict(cfg)
    engine = Engine(sim_cfg, reporter)
    engine.run(generate_arrivals(sim_cfg, random.Random(sim_cfg.seed)))
    return engine.metrics.summary()
