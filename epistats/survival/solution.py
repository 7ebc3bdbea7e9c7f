"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with R-style summary() methods.
"""

from __future__ import annotations

import numpy as np

from epistats.core.result import Result, is_degenerate
from epistats.survival._common import KMGroupParams, KMParams, LogRankParams
from epistats.survival._km import survival_at


def _fmt_time(x) -> str:
    return str(x) if is_degenerate(x) else f"{x:.4g}"


class KMSolution:
    """Kaplan-Meier survival curves, one per group.

    Properties mirror R's survfit() output. With a single group the
    per-group accessors can be called without a label.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[KMParams]) -> None:
        self._result = _result

    @property
    def groups(self) -> dict[str, KMGroupParams]:
        return self._result.params.groups

    @property
    def group_labels(self) -> tuple[str, ...]:
        return tuple(self.groups)

    def group(self, label: str | None = None) -> KMGroupParams:
        """Estimate for one group; ``label`` may be omitted when there is one."""
        if label is None:
            if len(self.groups) != 1:
                raise KeyError(
                    f"several groups present {self.group_labels}; pass a label"
                )
            return next(iter(self.groups.values()))
        return self.groups[label]

    def table(self, label: str | None = None):
        return self.group(label).table

    def time(self, label: str | None = None) -> np.ndarray:
        return np.array([r.time for r in self.table(label)])

    def survival(self, label: str | None = None) -> np.ndarray:
        return np.array([r.survival for r in self.table(label)])

    def ci_lower(self, label: str | None = None) -> np.ndarray:
        return np.array([r.ci_lower for r in self.table(label)])

    def ci_upper(self, label: str | None = None) -> np.ndarray:
        return np.array([r.ci_upper for r in self.table(label)])

    def median(self, label: str | None = None):
        """Median survival time, or NOT_REACHED."""
        return self.group(label).median

    def median_ci(self, label: str | None = None):
        return self.group(label).median_ci

    def survival_at(self, t: float, label: str | None = None) -> float:
        return survival_at(self.group(label), t)

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def conf_type(self) -> str:
        return self._result.params.conf_type

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """R-style summary of Kaplan-Meier fit."""
        lines = []
        lines.append("Call: kaplan_meier()")
        ci_pct = int(round(self.conf_level * 100))
        for label, km in self.groups.items():
            lines.append("")
            lines.append(f"  group={label}: n={km.n}, events={km.n_events}")
            lines.append(
                f"  median survival = {_fmt_time(km.median)} "
                f"({ci_pct}% CI {_fmt_time(km.median_ci.lower)} to {_fmt_time(km.median_ci.upper)})"
            )
            lines.append(
                f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  {'n.cens':>8s}  "
                f"{'survival':>10s}  {'se':>10s}  "
                f"{f'lower {ci_pct}%':>10s}  {f'upper {ci_pct}%':>10s}"
            )
            # Show up to 20 rows
            rows = km.table
            for r in rows[:20]:
                lines.append(
                    f"  {r.time:8.4g}  {r.n_risk:8d}  {r.events:8d}  {r.censored:8d}  "
                    f"{r.survival:10.6f}  {r.se:10.6f}  "
                    f"{r.ci_lower:10.6f}  {r.ci_upper:10.6f}"
                )
            if len(rows) > 20:
                lines.append(f"  ... ({len(rows) - 20} more rows)")
        return "\n".join(lines)

    def __repr__(self) -> str:
        medians = ", ".join(f"{k}={_fmt_time(v.median)}" for k, v in self.groups.items())
        return f"KMSolution(groups={len(self.groups)}, median: {medians})"


class LogRankSolution:
    """Log-rank test solution.

    Properties mirror R's survdiff() output, plus the O/E hazard ratio.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def statistic(self) -> float:
        return self._result.params.statistic

    @property
    def df(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def observed(self) -> tuple[int, int]:
        return self._result.params.observed

    @property
    def expected(self) -> tuple[float, float]:
        return self._result.params.expected

    @property
    def variance(self) -> float:
        return self._result.params.variance

    @property
    def n_per_group(self) -> tuple[int, int]:
        return self._result.params.n_per_group

    @property
    def group_labels(self) -> tuple[str, str]:
        return self._result.params.group_labels

    @property
    def hazard_ratio(self):
        """O/E hazard ratio of group 1 vs group 2 (not a Cox estimate)."""
        return self._result.params.hazard_ratio

    @property
    def peto_hazard_ratio(self):
        return self._result.params.peto_hazard_ratio

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        """R-style summary of log-rank test."""
        lines = []
        lines.append("Call: logrank_test()")
        lines.append("")

        lines.append(f"  {'':>12s}  {'N':>6s}  {'Observed':>10s}  {'Expected':>10s}  {'(O-E)^2/E':>10s}")
        for i in range(2):
            o, e = self.observed[i], self.expected[i]
            oe = (o - e) ** 2 / e if e > 0 else 0.0
            lines.append(
                f"  {self.group_labels[i]:>12s}  {self.n_per_group[i]:6d}  "
                f"{o:10.1f}  {e:10.2f}  {oe:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.statistic:.4f} on {self.df} degrees of freedom, "
            f"p= {self.p_value:.4g}"
        )
        hr = self.hazard_ratio
        if is_degenerate(hr):
            lines.append(f"  HR (O/E) = {hr}")
        else:
            lines.append(
                f"  HR (O/E) = {hr.value:.4f} ({hr.lower:.4f}, {hr.upper:.4f})"
            )
        peto = self.peto_hazard_ratio
        lines.append(f"  HR (Peto) = {peto.value:.4f} ({peto.lower:.4f}, {peto.upper:.4f})")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.statistic:.4f}, "
            f"df={self.df}, p={self.p_value:.4g})"
        )
