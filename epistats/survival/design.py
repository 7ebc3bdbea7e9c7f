"""
SurvivalDesign: immutable container for time-to-event data.

Wraps time, event indicator and optional group labels. Validates inputs
at construction time; all downstream code trusts clean data. Input order
does not matter, the estimators sort internally.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable, Sequence

import numpy as np
from numpy.typing import NDArray

from epistats.core.exceptions import DataError, DimensionError, DomainError, ValidationError
from epistats.core.validation import check_1d, check_array, check_consistent_length, check_finite


@dataclass(frozen=True)
class SurvivalObservation:
    """One subject: follow-up time, event flag (1 event, 0 censored), group."""

    time: float
    event: int
    group: Hashable | None = None

    def __post_init__(self) -> None:
        if not (math.isfinite(self.time) and self.time >= 0):
            raise DomainError(
                f"time must be a finite non-negative number, got {self.time}",
                name="time", value=self.time, valid_range="[0, inf)",
            )
        if self.event not in (0, 1):
            raise DomainError(
                f"event must be 0 or 1, got {self.event}",
                name="event", value=self.event, valid_range="{0, 1}",
            )


def observations_to_arrays(
    observations: Sequence[SurvivalObservation],
) -> tuple[NDArray, NDArray, NDArray | None]:
    """Split observations into (time, event, group) arrays.

    ``group`` is None when no observation carries a group.

    Raises
    ------
    ValidationError
        If only some observations carry a group.
    """
    observations = list(observations)
    time = np.array([o.time for o in observations], dtype=np.float64)
    event = np.array([o.event for o in observations], dtype=np.float64)
    labelled = [o.group is not None for o in observations]
    if not any(labelled):
        return time, event, None
    if not all(labelled):
        raise ValidationError("either every observation has a group or none does")
    group = np.array([o.group for o in observations])
    return time, event, group


@dataclass(frozen=True)
class SurvivalDesign:
    """Immutable survival data container.

    Parameters
    ----------
    time : NDArray
        Time to event or censoring. Non-negative.
    event : NDArray
        Event indicator: 1 = event observed, 0 = censored.
    group : NDArray or None
        Group labels as strings.
    group_order : tuple of str or None
        Distinct labels sorted by their original values, so numeric
        labels order numerically (2 before 10) after the string cast.
    """

    time: NDArray
    event: NDArray
    group: NDArray | None
    group_order: tuple[str, ...] | None = None

    @classmethod
    def for_survival(cls, time, event, group=None) -> SurvivalDesign:
        """Create and validate survival data.

        Raises
        ------
        DataError
            If there are no observations.
        DomainError
            If a time is negative or an event flag is not 0/1.
        DimensionError
            If the arrays differ in length.
        """
        time = check_array(time, "time").ravel()
        event = check_array(event, "event").ravel()
        check_1d(time, "time")
        check_finite(time, "time")
        check_consistent_length(time, event, names=("time", "event"))

        if time.shape[0] == 0:
            raise DataError(
                "survival data needs at least one observation",
                required="n >= 1", actual="n = 0",
            )
        if np.any(time < 0):
            bad = float(time[time < 0][0])
            raise DomainError(
                f"time must be non-negative, got {bad}",
                name="time", value=bad, valid_range="[0, inf)",
            )
        if not np.all(np.isin(event, (0.0, 1.0))):
            raise DomainError(
                f"event must contain only 0 and 1, got unique values {np.unique(event)}",
                name="event", value=np.unique(event), valid_range="{0, 1}",
            )

        group_arr = None
        group_order = None
        if group is not None:
            group_arr = np.asarray(group).ravel()
            if group_arr.shape[0] != time.shape[0]:
                raise DimensionError(
                    f"group must have {time.shape[0]} elements to match time, "
                    f"got {group_arr.shape[0]}"
                )
            group_order = tuple(str(g) for g in np.unique(group_arr))
            group_arr = group_arr.astype(str)

        return cls(time=time, event=event, group=group_arr, group_order=group_order)

    @classmethod
    def from_observations(cls, observations: Sequence[SurvivalObservation]) -> SurvivalDesign:
        time, event, group = observations_to_arrays(observations)
        return cls.for_survival(time, event, group)

    @property
    def n(self) -> int:
        """Number of observations."""
        return len(self.time)

    @property
    def n_events(self) -> int:
        return int(np.sum(self.event))

    @property
    def group_labels(self) -> tuple[str, ...]:
        """Sorted distinct group labels ('all' when ungrouped)."""
        if self.group is None:
            return ("all",)
        if self.group_order is not None:
            return self.group_order
        return tuple(str(g) for g in np.unique(self.group))

    def subset(self, label: str) -> tuple[NDArray, NDArray]:
        """(time, event) for one group."""
        if self.group is None:
            return self.time, self.event
        mask = self.group == label
        return self.time[mask], self.event[mask]
