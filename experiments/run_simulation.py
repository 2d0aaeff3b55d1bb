"""
experiments/run_simulation.py

Run one replication from a YAML config and print the minute-by-minute line
lengths followed by the end-of-simulation statistics.

Run with:  python -m experiments.run_simulation [path/to/config.yaml] [--quiet]
"""

from __future__ import annotations
import logging, sys
from typing import List, Optional

from cafsim.config import SimulationConfig, load_config
from cafsim.engine import run_simulation
from cafsim.report import TextReporter

def main(argv: Optional[List[str]] = None):
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    argv = sys.argv[1:] if argv is None else argv
    quiet = "--quiet" in argv
    paths = [a for a in argv if a != "--quiet"]
    cfg = SimulationConfig.from_dict(load_config(paths[0] if paths else None))
    return run_simulation(cfg, reporter=TextReporter(verbose=not quiet))

if __name__ == "__main__":
    main()
