"""
Tolerance tiers for numerical validation.

Defines precision expectations for the different kinds of reference
values the test suite compares against:
- EXACT: closed-form results recomputed in double precision
- REFERENCE: values published by R (meta, survival, epiR) to ~7 digits
- TABLE_3SF: printed statistical tables (3 significant figures)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance tier for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


EXACT = ToleranceTier(
    rtol=1e-10,
    atol=1e-12,
    name='exact',
    description='Closed-form double precision: round-trips and identities',
)

REFERENCE = ToleranceTier(
    rtol=1e-6,
    atol=1e-8,
    name='reference',
    description='Published reference software output (R meta/survival/epiR)',
)

TABLE_3SF = ToleranceTier(
    rtol=5e-3,
    atol=1e-4,
    name='table_3sf',
    description='Printed distribution tables, three significant figures',
)


def get_tolerance(name: str) -> ToleranceTier:
    """Look up a tolerance tier by name."""
    tiers = {t.name: t for t in (EXACT, REFERENCE, TABLE_3SF)}
    if name not in tiers:
        raise ValueError(
            f"Unknown tolerance tier {name!r}. Choose from {sorted(tiers)}"
        )
    return tiers[name]
