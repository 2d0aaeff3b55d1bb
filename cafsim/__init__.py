"""
cafsim package initializer.

This package contains the fixed-step simulation engine, the single-server
food line primitive, arrival generation, metric collection and reporting
used by the multi-line cafeteria queue model.
"""
__all__ = [
    "entities", "lines", "config", "arrivals",
    "metrics", "report", "engine",
]
