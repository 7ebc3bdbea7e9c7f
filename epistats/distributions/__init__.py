"""
Numeric primitives.

Pure, deterministic distribution functions shared by every engine:

    normal_quantile(p)        - Acklam approximation + Halley step
    normal_cdf(x), normal_pdf(x)
    chi2_cdf, chi2_sf, chi2_quantile
    t_cdf, t_quantile, t_two_sided_p
    f_quantile
    log_gamma, log_beta, regularized_incomplete_beta, regularized_lower_gamma
    log_choose, binomial_pmf, binomial_cdf, poisson_cdf, hypergeometric_pmf
"""

from epistats.distributions._normal import (
    normal_cdf,
    normal_pdf,
    normal_quantile,
    z_for_conf_level,
)
from epistats.distributions._continuous import (
    chi2_cdf,
    chi2_sf,
    chi2_quantile,
    t_cdf,
    t_quantile,
    t_two_sided_p,
    f_quantile,
)
from epistats.distributions._special import (
    log_gamma,
    log_beta,
    log_choose,
    regularized_incomplete_beta,
    regularized_lower_gamma,
)
from epistats.distributions._discrete import (
    binomial_pmf,
    binomial_cdf,
    poisson_cdf,
    hypergeometric_pmf,
)

__all__ = [
    "normal_cdf",
    "normal_pdf",
    "normal_quantile",
    "z_for_conf_level",
    "chi2_cdf",
    "chi2_sf",
    "chi2_quantile",
    "t_cdf",
    "t_quantile",
    "t_two_sided_p",
    "f_quantile",
    "log_gamma",
    "log_beta",
    "log_choose",
    "regularized_incomplete_beta",
    "regularized_lower_gamma",
    "binomial_pmf",
    "binomial_cdf",
    "poisson_cdf",
    "hypergeometric_pmf",
]
