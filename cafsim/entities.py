# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Entity definitions for the cafeteria simulation: Customer.
#   A Customer carries its chosen line and the timestamps needed for waits.
#
# Design notes:
#   - arrival_time and line are fixed when the arrival generator creates the
#     customer; the remaining timestamps are filled in by the engine/line.
#   - All times are integer seconds on the simulation clock.
#
# Usage:
#   from cafsim.entities import Customer
# -----------------------------------------------------------------------------

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass
class Customer:
    cid: int
    arrival_time: int
    line: int                                   # index of the chosen food line
    join_time: Optional[int] = None             # set by the engine on release
    service_start_time: Optional[int] = None    # reached the head of the line
    departure_time: Optional[int] = None        # left the server

    @property
    def wait_time(self) -> Optional[int]:
        """Seconds spent queued before service started (None until served)."""
        if self.join_time is None or self.service_start_time is None:
            return None
        return self.service_start_time - self.join_time
