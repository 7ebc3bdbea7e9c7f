"""
Input validation utilities for epistats.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - No default handling of edge cases
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from epistats.core.exceptions import DataError, DimensionError, DomainError, ValidationError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data).

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if result.dtype == bool:
        result = result.astype(np.float64)

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array is 1-dimensional.

    Raises:
        DimensionError: If array is not 1D
    """
    if array.ndim != 1:
        raise DimensionError(
            f"{name}: expected 1D array, got {array.ndim}D with shape {array.shape}"
        )


def check_consistent_length(
    *arrays: NDArray[Any],
    names: tuple[str, ...]
) -> None:
    """
    Verify all arrays have the same length (first dimension).

    Raises:
        ValueError: If number of names doesn't match number of arrays
        DimensionError: If arrays have inconsistent lengths
    """
    if len(arrays) != len(names):
        raise ValueError(
            f"Number of arrays ({len(arrays)}) must match number of names ({len(names)})"
        )

    if len(arrays) < 2:
        return

    lengths = [arr.shape[0] for arr in arrays]
    if len(set(lengths)) > 1:
        details = ", ".join(f"{name}={length}" for name, length in zip(names, lengths))
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[Any], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        DataError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise DataError(
            f"{name}: requires at least {min_samples} samples, got {n}",
            required=f"n >= {min_samples}",
            actual=f"n = {n}",
        )


def check_probability(p: float, name: str) -> None:
    """
    Verify p lies in the closed interval [0, 1].

    Raises:
        DomainError: If p is NaN or outside [0, 1]
    """
    if not (0.0 <= p <= 1.0):
        raise DomainError(
            f"{name} must be in [0, 1], got {p}",
            name=name, value=p, valid_range="[0, 1]",
        )


def check_open_unit(p: float, name: str) -> None:
    """
    Verify p lies in the open interval (0, 1).

    Raises:
        DomainError: If p is NaN or outside (0, 1)
    """
    if not (0.0 < p < 1.0):
        raise DomainError(
            f"{name} must be in (0, 1), got {p}",
            name=name, value=p, valid_range="(0, 1)",
        )


def check_conf_level(conf_level: float) -> None:
    """Verify a confidence level lies in (0, 1)."""
    check_open_unit(conf_level, "conf_level")


def check_positive(x: float, name: str) -> None:
    """
    Verify x is a finite number greater than zero.

    Raises:
        DomainError: If x <= 0, NaN or infinite
    """
    if not (math.isfinite(x) and x > 0):
        raise DomainError(
            f"{name} must be a positive finite number, got {x}",
            name=name, value=x, valid_range="(0, inf)",
        )


def check_nonnegative_count(x: Any, name: str) -> int:
    """
    Verify x is a non-negative integer count and return it as int.

    Floats with an integral value (e.g. 3.0) are accepted.

    Raises:
        DomainError: If x is negative or not integral
    """
    try:
        as_float = float(x)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: expected an integer count, got {x!r}") from e
    if not math.isfinite(as_float) or as_float != int(as_float) or as_float < 0:
        raise DomainError(
            f"{name} must be a non-negative integer, got {x}",
            name=name, value=x, valid_range="{0, 1, 2, ...}",
        )
    return int(as_float)
