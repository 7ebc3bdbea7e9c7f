"""
Solution wrappers for contingency-table results.

Each Solution wraps a Result[Params] and exposes user-friendly properties
with an epitools-style summary() method.
"""

from __future__ import annotations

from epistats.contingency._common import MantelHaenszelParams, TwoByTwoParams
from epistats.contingency.design import ContingencyTable
from epistats.core.result import Result


def _fmt_estimate(label: str, est) -> str:
    return f"  {label:<24s} {est.value:10.4f}  ({est.lower:.4f}, {est.upper:.4f})"


class TwoByTwoSolution:
    """All measures of association for a single 2x2 table.

    Properties mirror the output of R's epitools::epitab() and
    epiR::epi.2by2().
    """

    __slots__ = ('_result', '_table')

    def __init__(self, _result: Result[TwoByTwoParams], _table: ContingencyTable) -> None:
        self._result = _result
        self._table = _table

    @property
    def table(self) -> ContingencyTable:
        return self._table

    @property
    def p1(self) -> float:
        """Risk in the exposed row."""
        return self._result.params.p1

    @property
    def p2(self) -> float:
        """Risk in the unexposed row."""
        return self._result.params.p2

    @property
    def risk_ratio(self):
        return self._result.params.risk_ratio

    @property
    def odds_ratio(self):
        return self._result.params.odds_ratio

    @property
    def risk_difference(self):
        """Risk difference with Wald interval."""
        return self._result.params.risk_difference

    @property
    def risk_difference_newcombe(self):
        """Risk difference with Newcombe hybrid score interval."""
        return self._result.params.risk_difference_newcombe

    @property
    def nnt(self):
        return self._result.params.nnt

    @property
    def chisq(self):
        return self._result.params.chisq

    @property
    def chisq_yates(self):
        return self._result.params.chisq_yates

    @property
    def fisher(self):
        return self._result.params.fisher

    @property
    def af_exposed(self) -> float:
        return self._result.params.af_exposed

    @property
    def paf(self) -> float:
        return self._result.params.paf

    @property
    def continuity_corrected(self) -> bool:
        return self._result.params.continuity_corrected

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

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
        """Text summary of the 2x2 analysis."""
        t = self._table
        pct = int(round(self.conf_level * 100))
        lines = []
        lines.append("Call: two_by_two()")
        lines.append("")
        lines.append(f"  {'':<12s} {'event':>8s} {'no event':>9s} {'total':>8s}")
        lines.append(f"  {'exposed':<12s} {t.a:8d} {t.b:9d} {t.n1:8d}")
        lines.append(f"  {'unexposed':<12s} {t.c:8d} {t.d:9d} {t.n2:8d}")
        lines.append("")
        lines.append(f"  {'measure':<24s} {'estimate':>10s}  {pct}% CI")
        lines.append(_fmt_estimate("Risk ratio", self.risk_ratio))
        lines.append(_fmt_estimate("Odds ratio", self.odds_ratio))
        lines.append(_fmt_estimate("Risk difference (Wald)", self.risk_difference))
        lines.append(_fmt_estimate("Risk difference (Newcombe)", self.risk_difference_newcombe))
        lines.append(f"  {'NNT':<24s} {str(self.nnt.value):>10s}  {self.nnt.altman()}")
        lines.append("")
        if self.chisq is None:
            lines.append("  Chisq undefined (empty outcome column)")
        else:
            lines.append(
                f"  Chisq = {self.chisq.statistic:.4f}, df = 1, p = {self.chisq.p_value:.4g}"
            )
            lines.append(
                f"  Chisq (Yates) = {self.chisq_yates.statistic:.4f}, df = 1, "
                f"p = {self.chisq_yates.p_value:.4g}"
            )
        lines.append(f"  Fisher exact p = {self.fisher.p_value:.4g}")
        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"  Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"TwoByTwoSolution(RR={self.risk_ratio.value:.4f}, "
            f"OR={self.odds_ratio.value:.4f}, "
            f"RD={self.risk_difference.value:.4f})"
        )


class MantelHaenszelSolution:
    """Mantel-Haenszel pooled estimate across strata."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[MantelHaenszelParams]) -> None:
        self._result = _result

    @property
    def measure(self) -> str:
        return self._result.params.measure

    @property
    def estimate(self):
        return self._result.params.estimate

    @property
    def stratum_estimates(self) -> tuple[float, ...]:
        return self._result.params.stratum_estimates

    @property
    def breslow_day(self):
        """Homogeneity test (odds ratio only, None otherwise)."""
        return self._result.params.breslow_day

    @property
    def n_strata(self) -> int:
        return self._result.params.n_strata

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    @property
    def timing(self):
        return self._result.timing

    def summary(self) -> str:
        lines = []
        lines.append("Call: mantel_haenszel()")
        lines.append("")
        lines.append(f"  strata = {self.n_strata}")
        lines.append(_fmt_estimate(f"MH {self.measure}", self.estimate))
        bd = self.breslow_day
        if bd is not None:
            lines.append(
                f"  Breslow-Day X-squared = {bd.statistic:.4f}, df = {bd.df}, "
                f"p = {bd.p_value:.4g}"
            )
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"MantelHaenszelSolution({self.measure}={self.estimate.value:.4f}, "
            f"strata={self.n_strata})"
        )
