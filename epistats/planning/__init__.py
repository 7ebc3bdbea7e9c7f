"""
Sample size and power for two-arm trials.

Public API:
    sample_size_two_proportions(p1, p2, alpha, power, ratio, method)
    sample_size_two_means(delta, sd1, sd2, alpha, power, ratio)
    schoenfeld_events(hazard_ratio, alpha, power, ratio, p_event)
    power_two_proportions(p1, p2, n1, alpha, ratio)
    power_two_means(delta, sd, n1, alpha, ratio)
    power_logrank(hazard_ratio, events, alpha, ratio)
"""

from epistats.planning._common import EventsParams, SampleSizeParams
from epistats.planning._sample_size import (
    sample_size_two_proportions,
    sample_size_two_means,
    schoenfeld_events,
)
from epistats.planning._power import (
    power_two_proportions,
    power_two_means,
    power_logrank,
)

__all__ = [
    "SampleSizeParams",
    "EventsParams",
    "sample_size_two_proportions",
    "sample_size_two_means",
    "schoenfeld_events",
    "power_two_proportions",
    "power_two_means",
    "power_logrank",
]
