# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# lines.py
# -----------------------------------------------------------------------------
# Purpose:
#   Food line primitive: one FIFO queue in front of a single server with a
#   deterministic service time, advanced one clock tick at a time.
#
# Design notes:
#   - The server slot is either None (idle) or the Customer being served.
#   - A completion and the next service start may happen in the same tick,
#     so a busy line never idles while work is waiting.
#   - Waits are accumulated when service completes, not when it starts.
#
# Usage:
#   from cafsim.lines import Line
#   line = Line(0, service_seconds=20)
#   line.enqueue(customer); line.tick(now)
# -----------------------------------------------------------------------------

from __future__ import annotations
from collections import deque
from typing import Deque, Optional, Tuple
from .entities import Customer

class Line:
    """Single-server FIFO food line.

    Parameters
    ----------
    index : int
        Zero-based line number used for routing and reporting.
    service_seconds : int
        Ticks the customer at the head of the line occupies the server.

    Attributes
    ----------
    queue : deque[Customer]
        Customers waiting behind the server, front first.
    in_service : Customer | None
        Customer currently at the server, or None when idle.
    remaining : int
        Ticks left for the customer in service (0 when idle).
    served : int
        Customers whose service has completed.
    total_wait : int
        Sum of (service start - join time) over completed customers.
    """
    def __init__(self, index: int, service_seconds: int):
        if service_seconds <= 0:
            raise ValueError(f"service_seconds must be positive, got {service_seconds}")
        self.index = index
        self.service_seconds = int(service_seconds)
        self.queue: Deque[Customer] = deque()
        self.in_service: Optional[Customer] = None
        self.remaining: int = 0
        self.served: int = 0
        self.total_wait: int = 0
        # Supplemental counters for diagnostics and utilization
        self.enqueued: int = 0
        self.busy_ticks: int = 0
        self.max_occupancy: int = 0

    def __repr__(self) -> str:
        return (f"Line(index={self.index}, queued={len(self.queue)}, "
                f"busy={self.busy}, served={self.served})")

    @property
    def busy(self) -> bool:
        return self.in_service is not None

    def enqueue(self, customer: Customer):
        assert customer.join_time is not None, "join_time must be set before enqueue"
        self.queue.append(customer)
        self.enqueued += 1
        self.max_occupancy = max(self.max_occupancy, self.occupancy())

    def tick(self, now: int):
        """Advance service by one second at clock time `now`."""
        if self.in_service is not None:
            self.remaining -= 1
            if self.remaining == 0:
                self._complete(now)
        if self.in_service is None and self.queue:
            self._start_service(now)
        if self.in_service is not None:
            self.busy_ticks += 1
        self._check_invariants()

    def occupancy(self) -> int:
        """Customers in the line, including the one being served."""
        return len(self.queue) + (1 if self.in_service is not None else 0)

    def statistics(self) -> Tuple[int, float]:
        """Return (customers served, average wait in seconds)."""
        avg = self.total_wait / self.served if self.served > 0 else 0.0
        return self.served, avg

    def utilization(self, elapsed: int) -> float:
        """Fraction of `elapsed` ticks the server spent occupied."""
        return self.busy_ticks / elapsed if elapsed > 0 else 0.0

    def _complete(self, now: int):
        job = self.in_service
        job.departure_time = now
        wait = job.wait_time
        assert wait is not None and wait >= 0, f"negative wait on line {self.index}: {job}"
        self.total_wait += wait
        self.served += 1
        self.in_service = None

    def _start_service(self, now: int):
        job = self.queue.popleft()
        job.service_start_time = now
        self.in_service = job
        self.remaining = self.service_seconds

    def _check_invariants(self):
        # Idle server <=> no ticks remaining
        assert (self.in_service is None) == (self.remaining == 0), (
            f"line {self.index}: in_service={self.in_service!r} remaining={self.remaining}"
        )
        assert 0 <= self.remaining <= self.service_seconds
        assert self.occupancy() + self.served == self.enqueued
