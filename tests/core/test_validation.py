"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype coercion, object rejection
    - check_finite / check_1d / check_consistent_length / check_min_samples
    - check_probability / check_open_unit / check_conf_level / check_positive
    - check_nonnegative_count: integral counts only
"""

import math

import numpy as np
import pytest

from epistats.core.exceptions import DataError, DimensionError, DomainError, ValidationError
from epistats.core.validation import (
    check_1d,
    check_array,
    check_conf_level,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_nonnegative_count,
    check_open_unit,
    check_positive,
    check_probability,
)


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "time")
        assert isinstance(result, np.ndarray)
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_bool_promoted_to_float(self):
        result = check_array([True, False], "event")
        np.testing.assert_array_equal(result, [1.0, 0.0])

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "time")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b"], "time")


class TestShapeChecks:

    def test_check_finite(self):
        check_finite(np.array([1.0, 2.0]), "x")
        with pytest.raises(ValidationError, match="1 NaN"):
            check_finite(np.array([1.0, np.nan]), "x")

    def test_check_1d(self):
        check_1d(np.zeros(3), "x")
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((2, 2)), "x")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(3), np.zeros(3), names=("time", "event"))
        with pytest.raises(DimensionError, match="time=3, event=2"):
            check_consistent_length(np.zeros(3), np.zeros(2), names=("time", "event"))

    def test_consistent_length_name_mismatch(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(3), names=("a", "b"))

    def test_min_samples(self):
        check_min_samples(np.zeros(2), 2, "effects")
        with pytest.raises(DataError) as exc_info:
            check_min_samples(np.zeros(1), 2, "effects")
        assert exc_info.value.required == "n >= 2"
        assert exc_info.value.actual == "n = 1"


class TestScalarChecks:

    @pytest.mark.parametrize("p", [0.0, 0.3, 1.0])
    def test_probability_accepts_closed_unit(self, p):
        check_probability(p, "p")

    @pytest.mark.parametrize("p", [-0.1, 1.1, math.nan])
    def test_probability_rejects(self, p):
        with pytest.raises(DomainError) as exc_info:
            check_probability(p, "p")
        assert exc_info.value.valid_range == "[0, 1]"

    @pytest.mark.parametrize("p", [0.0, 1.0])
    def test_open_unit_rejects_endpoints(self, p):
        with pytest.raises(DomainError):
            check_open_unit(p, "alpha")

    def test_conf_level(self):
        check_conf_level(0.95)
        with pytest.raises(DomainError):
            check_conf_level(95)

    @pytest.mark.parametrize("x", [0.0, -1.0, math.inf, math.nan])
    def test_positive_rejects(self, x):
        with pytest.raises(DomainError):
            check_positive(x, "variance")


class TestCheckNonnegativeCount:

    def test_integral_float_accepted(self):
        assert check_nonnegative_count(3.0, "a") == 3
        assert isinstance(check_nonnegative_count(np.int64(4), "a"), int)

    @pytest.mark.parametrize("x", [-1, 2.5, math.inf])
    def test_rejects_non_counts(self, x):
        with pytest.raises(DomainError):
            check_nonnegative_count(x, "a")

    def test_rejects_non_numeric(self):
        with pytest.raises(ValidationError):
            check_nonnegative_count("three", "a")
