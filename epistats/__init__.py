"""
epistats: statistics engine for clinical-research calculators.

Textbook-exact interval estimates, 2x2 table analysis, meta-analysis and
survival analysis, cross-checked against R's epiR, meta and survival
packages.

Submodules:
    distributions: Normal, t, chi-squared, F and discrete primitives
    intervals: Binomial, difference-of-proportions and Poisson intervals
    contingency: 2x2 tables, NNT, fragility index, Mantel-Haenszel
    conversions: OR, RR, Cohen's d, Hedges' g and log-scale transforms
    meta: Fixed and random effects, HKSJ, Egger, sensitivity analyses
    survival: Kaplan-Meier, log-rank, restricted mean survival
    planning: Sample size and power for two-arm trials
"""

__version__ = "0.1.0"

from epistats import distributions
from epistats import intervals
from epistats import contingency
from epistats import conversions
from epistats import meta
from epistats import survival
from epistats import planning

__all__ = [
    "__version__",
    "distributions",
    "intervals",
    "contingency",
    "conversions",
    "meta",
    "survival",
    "planning",
]
