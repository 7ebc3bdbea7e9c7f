"""
Parameter payloads for sample-size planning.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SampleSizeParams:
    """Per-arm sample sizes, rounded up.

    ``ratio`` is n2 / n1; ``n1_exact`` is the unrounded group 1 size the
    formula produced.
    """

    n1: int
    n2: int
    total: int
    n1_exact: float
    alpha: float
    power: float
    ratio: float
    method: str


@dataclass(frozen=True)
class EventsParams:
    """Required number of events for a time-to-event comparison.

    ``total_n`` is None unless an overall event probability was given.
    """

    events: int
    events_exact: float
    total_n: int | None
    hazard_ratio: float
    alpha: float
    power: float
    ratio: float
