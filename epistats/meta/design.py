"""
Meta-analysis design.

StudyEffect is one study's point estimate and sampling variance; ratio
measures are on the log scale. MetaDesign is a validated, immutable set
of at least two studies with numpy views for the pooling routines.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from epistats.core.exceptions import DataError, DomainError
from epistats.core.validation import (
    check_1d,
    check_array,
    check_consistent_length,
    check_finite,
    check_positive,
)
from epistats.distributions import z_for_conf_level


@dataclass(frozen=True)
class StudyEffect:
    """One study: a name, an effect estimate and its variance (> 0)."""

    name: str
    effect: float
    variance: float

    def __post_init__(self) -> None:
        if not math.isfinite(self.effect):
            raise DomainError(
                f"study {self.name!r}: effect must be finite, got {self.effect}",
                name="effect", value=self.effect, valid_range="(-inf, inf)",
            )
        if not (math.isfinite(self.variance) and self.variance > 0):
            raise DomainError(
                f"study {self.name!r}: variance must be positive, got {self.variance}",
                name="variance", value=self.variance, valid_range="(0, inf)",
            )

    @property
    def se(self) -> float:
        return math.sqrt(self.variance)

    @classmethod
    def from_se(cls, name: str, effect: float, se: float) -> StudyEffect:
        check_positive(se, "se")
        return cls(name=name, effect=effect, variance=se * se)

    @classmethod
    def from_ratio_ci(
        cls,
        name: str,
        ratio: float,
        lower: float,
        upper: float,
        conf_level: float = 0.95,
    ) -> StudyEffect:
        """Log-scale study effect from a reported ratio and its CI.

        SE(log ratio) = (ln upper - ln lower) / (2 z).
        """
        check_positive(ratio, "ratio")
        check_positive(lower, "lower")
        check_positive(upper, "upper")
        se = (math.log(upper) - math.log(lower)) / (2.0 * z_for_conf_level(conf_level))
        return cls.from_se(name, math.log(ratio), se)


@dataclass(frozen=True)
class MetaDesign:
    """
    Validated set of studies for pooling.

    Construction:
        MetaDesign.for_studies(studies)
        MetaDesign.from_arrays(effects, variances, names=None)
    """

    studies: tuple[StudyEffect, ...]

    @classmethod
    def for_studies(cls, studies: Sequence[StudyEffect], min_k: int = 2) -> MetaDesign:
        """
        Raises
        ------
        DataError
            If fewer than ``min_k`` studies are given.
        """
        studies = tuple(studies)
        if len(studies) < min_k:
            raise DataError(
                f"meta-analysis needs at least {min_k} studies, got {len(studies)}",
                required=f"k >= {min_k}", actual=f"k = {len(studies)}",
            )
        return cls(studies=studies)

    @classmethod
    def from_arrays(
        cls,
        effects: ArrayLike,
        variances: ArrayLike,
        names: Sequence[str] | None = None,
        min_k: int = 2,
    ) -> MetaDesign:
        effects = check_array(effects, "effects")
        variances = check_array(variances, "variances")
        check_1d(effects, "effects")
        check_1d(variances, "variances")
        check_consistent_length(effects, variances, names=("effects", "variances"))
        check_finite(effects, "effects")
        if names is None:
            names = [f"Study {i + 1}" for i in range(effects.shape[0])]
        elif len(names) != effects.shape[0]:
            raise DataError(
                f"names has {len(names)} entries for {effects.shape[0]} studies",
                required=f"len(names) = {effects.shape[0]}", actual=f"len(names) = {len(names)}",
            )
        studies = [
            StudyEffect(name=str(n), effect=float(e), variance=float(v))
            for n, e, v in zip(names, effects, variances)
        ]
        return cls.for_studies(studies, min_k=min_k)

    @property
    def k(self) -> int:
        return len(self.studies)

    @property
    def effects(self) -> NDArray[np.float64]:
        return np.array([s.effect for s in self.studies], dtype=np.float64)

    @property
    def variances(self) -> NDArray[np.float64]:
        return np.array([s.variance for s in self.studies], dtype=np.float64)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self.studies)


def as_design(studies, min_k: int = 2) -> MetaDesign:
    """Accept a MetaDesign or a sequence of StudyEffect."""
    if isinstance(studies, MetaDesign):
        studies = studies.studies
    return MetaDesign.for_studies(studies, min_k=min_k)
