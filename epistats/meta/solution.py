"""
Solution wrappers for meta-analysis results.
"""

from __future__ import annotations

import math

from epistats.core.result import Result
from epistats.meta._common import PooledParams, SensitivityParams
from epistats.meta.design import MetaDesign


class MetaSolution:
    """Pooled meta-analysis.

    Properties mirror the output of R's meta::metagen(). Effects stay on
    the scale they were given in; call exp() on ``pooled`` and ``ci`` for
    ratio measures pooled on the log scale.
    """

    __slots__ = ('_result', '_design')

    def __init__(self, _result: Result[PooledParams], _design: MetaDesign) -> None:
        self._result = _result
        self._design = _design

    @property
    def params(self) -> PooledParams:
        return self._result.params

    @property
    def studies(self):
        return self._design.studies

    @property
    def k(self) -> int:
        return self._result.params.k

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def hksj(self) -> bool:
        return self._result.params.hksj

    @property
    def pooled(self) -> float:
        return self._result.params.pooled

    @property
    def ci(self):
        return self._result.params.ci

    @property
    def se(self) -> float:
        return self._result.params.se

    @property
    def statistic(self) -> float:
        return self._result.params.statistic

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def estimate(self):
        return self._result.params.estimate

    @property
    def Q(self) -> float:
        return self._result.params.Q

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_het(self) -> float:
        return self._result.params.p_het

    @property
    def I2(self) -> float:
        return self._result.params.I2

    @property
    def I2_ci(self):
        return self._result.params.I2_ci

    @property
    def H2(self) -> float:
        return self._result.params.H2

    @property
    def tau2(self) -> float:
        return self._result.params.tau2

    @property
    def pred_interval(self):
        return self._result.params.pred_interval

    @property
    def weights(self):
        """Study weights in percent."""
        return self._result.params.weights

    @property
    def fixed(self):
        """Inverse-variance fixed-effect estimate."""
        return self._result.params.fixed

    @property
    def mantel_haenszel(self):
        """Mantel-Haenszel estimate when pooled from 2x2 tables, else None."""
        return self._result.info.get("mantel_haenszel")

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """Text summary in the layout of meta::metagen()."""
        p = self._result.params
        lines = []
        lines.append("Call: meta_analysis()")
        lines.append("")
        lines.append(f"  {'study':<24s} {'effect':>10s} {'se':>10s} {'weight %':>10s}")
        for study, w in zip(self._design.studies, p.weights):
            lines.append(
                f"  {study.name:<24s} {study.effect:10.4f} {math.sqrt(study.variance):10.4f} {w:10.2f}"
            )
        lines.append("")
        model = "Random effects (DerSimonian-Laird)" if p.method == "random" else "Fixed effect"
        if p.hksj:
            model += ", Hartung-Knapp adjustment"
        label = "t" if p.hksj else "z"
        lines.append(f"  {model}")
        lines.append(
            f"  pooled = {p.pooled:.4f}  [{p.ci.lower:.4f}; {p.ci.upper:.4f}]  "
            f"{label} = {p.statistic:.3f}, p = {p.p_value:.4g}"
        )
        if p.pred_interval is not None:
            lines.append(
                f"  prediction interval [{p.pred_interval.lower:.4f}; {p.pred_interval.upper:.4f}]"
            )
        lines.append("")
        lines.append("  Quantifying heterogeneity:")
        i2_ci = ""
        if p.I2_ci is not None:
            i2_ci = f" [{100 * p.I2_ci.lower:.1f}%; {100 * p.I2_ci.upper:.1f}%]"
        lines.append(
            f"  tau^2 = {p.tau2:.4f}; I^2 = {100 * p.I2:.1f}%{i2_ci}; H^2 = {p.H2:.3f}"
        )
        lines.append(f"  Q = {p.Q:.2f}, df = {p.df}, p = {p.p_het:.4g}")
        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MetaSolution(k={self.k}, method={self.method!r}, "
            f"pooled={self.pooled:.4f}, I2={self.I2:.3f})"
        )


class SensitivitySolution:
    """Leave-one-out or cumulative meta-analysis."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[SensitivityParams]) -> None:
        self._result = _result

    @property
    def kind(self) -> str:
        return self._result.params.kind

    @property
    def rows(self):
        return self._result.params.rows

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(r.label for r in self.rows)

    @property
    def pooled(self) -> tuple[float, ...]:
        return tuple(r.pooled.pooled for r in self.rows)

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self):
        return self._result.timing

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self):
        return iter(self.rows)

    def summary(self) -> str:
        heading = "omitting" if self.kind == "leave_one_out" else "adding"
        lines = [f"Call: {self.kind}()", ""]
        lines.append(
            f"  {heading:<24s} {'k':>4s} {'pooled':>10s} {'lower':>10s} {'upper':>10s} {'I^2':>7s} {'tau^2':>8s}"
        )
        for r in self.rows:
            p = r.pooled
            lines.append(
                f"  {r.label:<24s} {r.n_studies:4d} {p.pooled:10.4f} {p.ci.lower:10.4f} "
                f"{p.ci.upper:10.4f} {100 * p.I2:6.1f}% {p.tau2:8.4f}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"SensitivitySolution(kind={self.kind!r}, runs={len(self.rows)})"
