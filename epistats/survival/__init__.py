"""
Survival analysis.

Public API:
    kaplan_meier(time, event, group)            -> KMSolution
    logrank_test(time, event, group)            -> LogRankSolution
    restricted_mean_survival(km_group, tau)     -> RMSTParams
    rmst_difference(a, b)                       -> (Estimate, p-value)
    observations_to_arrays(observations)        -> (time, event, group)
"""

from epistats.survival.design import SurvivalDesign, SurvivalObservation, observations_to_arrays
from epistats.survival.solvers import kaplan_meier, logrank_test, restricted_mean_survival
from epistats.survival._km import rmst_difference
from epistats.survival._common import KMRow, KMGroupParams, KMParams, LogRankParams, RMSTParams
from epistats.survival.solution import KMSolution, LogRankSolution

__all__ = [
    "SurvivalDesign",
    "SurvivalObservation",
    "observations_to_arrays",
    "kaplan_meier",
    "logrank_test",
    "restricted_mean_survival",
    "rmst_difference",
    "KMRow",
    "KMGroupParams",
    "KMParams",
    "LogRankParams",
    "RMSTParams",
    "KMSolution",
    "LogRankSolution",
]
