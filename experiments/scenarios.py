"""
experiments/scenarios.py

Holds scenario definitions (decision variables) to sweep during experiments.
Add line counts, service times, demand levels, and popularity mixes here.
"""

from __future__ import annotations

BASELINE = {
    "name": "baseline",
    "overrides": {},  # override config keys here per scenario
}

# One popular line takes half the demand
SKEWED_POPULARITY = {
    "name": "skewed_popularity",
    "overrides": {
        "cafeteria": {
            "popularity": [0.5, 0.125, 0.125, 0.125, 0.125],
        },
    },
}

# Extra line opened for the same demand
SIX_LINES = {
    "name": "six_lines",
    "overrides": {
        "cafeteria": {
            "lines": 6,
            "popularity": [1 / 6] * 6,
        },
    },
}

# Lunch rush: more students and slower service
HIGH_LOAD = {
    "name": "high_load",
    "overrides": {
        "cafeteria": {
            "customers": 800,
            "service_seconds": 25,
        },
        "sim": {
            "seed": 3,
        },
    },
}

SCENARIOS = [BASELINE, SKEWED_POPULARITY, SIX_LINES, HIGH_LOAD]
