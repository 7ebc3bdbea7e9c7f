"""
Tests for the epistats exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via EpiStatsError)
    - Diagnostic attributes on DomainError and DataError
    - Default attribute values (None for optional attributes)
"""

import pytest

from epistats.core.exceptions import (
    DataError,
    DimensionError,
    DomainError,
    EpiStatsError,
    NumericalError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via EpiStatsError."""

    def test_validation_error_is_epistats_error(self):
        with pytest.raises(EpiStatsError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_domain_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DomainError("p out of range", name="p", value=2.0)

    def test_data_error_is_epistats_error(self):
        with pytest.raises(EpiStatsError):
            raise DataError("too few studies")

    def test_data_error_is_not_validation_error(self):
        """Insufficient data is a different failure from malformed input."""
        err = DataError("too few studies")
        assert not isinstance(err, ValidationError)

    def test_numerical_error_is_epistats_error(self):
        with pytest.raises(EpiStatsError):
            raise NumericalError("root finder failed")


# ═══════════════════════════════════════════════════════════════════════
# DomainError
# ═══════════════════════════════════════════════════════════════════════


class TestDomainError:

    def test_all_attributes(self):
        err = DomainError(
            "p must be in (0, 1), got 1.5",
            name="p", value=1.5, valid_range="(0, 1)",
        )
        assert str(err) == "p must be in (0, 1), got 1.5"
        assert err.name == "p"
        assert err.value == 1.5
        assert err.valid_range == "(0, 1)"

    def test_defaults_are_none(self):
        err = DomainError("bad")
        assert err.name is None
        assert err.value is None
        assert err.valid_range is None


# ═══════════════════════════════════════════════════════════════════════
# DataError
# ═══════════════════════════════════════════════════════════════════════


class TestDataError:

    def test_all_attributes(self):
        err = DataError("meta-analysis needs two studies", required="k >= 2", actual="k = 1")
        assert "two studies" in str(err)
        assert err.required == "k >= 2"
        assert err.actual == "k = 1"

    def test_defaults_are_none(self):
        err = DataError("bad")
        assert err.required is None
        assert err.actual is None

    def test_raised_from_engine(self):
        """A real engine call surfaces the diagnostic attributes."""
        from epistats.intervals import incidence_rate

        with pytest.raises(DataError) as exc_info:
            incidence_rate(3, 0.0)
        assert exc_info.value.required == "person_time > 0"
