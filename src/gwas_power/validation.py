"""Input checks shared by the power-grid entry points."""

from __future__ import annotations

import numbers
from typing import Any

import numpy as np


class InvalidParameter(ValueError):
    """Raised when an argument is missing, mis-shaped or out of range."""

    def __init__(self, parameter: str, message: str) -> None:
        super().__init__(message)
        self.parameter = parameter


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, (bool, np.bool_))


def as_vector(value: Any, name: str) -> np.ndarray:
    """Return ``value`` as a non-empty 1-D numeric array or raise."""
    if value is None:
        raise InvalidParameter(name, f"Parameter {name} not found.")
    if isinstance(value, (str, bytes)):
        raise InvalidParameter(name, f"Parameter {name} not a numeric vector.")
    try:
        arr = np.asarray(value)
    except ValueError as exc:  # ragged nested sequences
        raise InvalidParameter(name, f"Parameter {name} not a numeric vector.") from exc
    if arr.dtype.kind == "O" and arr.ndim == 1 and all(_is_real(v) for v in arr):
        # integers beyond int64 come through as Python objects
        arr = arr.astype(float)
    if arr.ndim != 1 or arr.size == 0 or arr.dtype.kind not in "iuf":
        raise InvalidParameter(name, f"Parameter {name} not a numeric vector.")
    return arr


def as_scalar(value: Any, name: str) -> float:
    """Return ``value`` as a float, accepting one-element sequences."""
    if value is None:
        raise InvalidParameter(name, f"Parameter {name} not found.")
    if _is_real(value):
        return float(value)
    if isinstance(value, (str, bytes)):
        raise InvalidParameter(name, f"Parameter {name} not a numeric scalar.")
    try:
        arr = np.asarray(value)
    except ValueError as exc:
        raise InvalidParameter(name, f"Parameter {name} not a numeric scalar.") from exc
    if arr.size != 1 or arr.ndim > 1 or arr.dtype.kind not in "iuf":
        raise InvalidParameter(name, f"Parameter {name} not a numeric scalar.")
    return float(arr.reshape(-1)[0])


def check_vector_range(
    values: np.ndarray,
    name: str,
    lower: float | None = None,
    upper: float | None = None,
) -> None:
    """All values must be finite and within the closed interval [lower, upper]."""
    bad = ~np.isfinite(values)
    if lower is not None:
        bad |= values < lower
    if upper is not None:
        bad |= values > upper
    if bad.any():
        raise InvalidParameter(name, f"Parameter {name} has unacceptable values.")


def check_sample_size(n: float, name: str = "n") -> None:
    if not np.isfinite(n) or n < 0:
        raise InvalidParameter(name, f"Parameter {name} has unacceptable value.")


def check_pval(pval: float, name: str = "pval") -> None:
    # open interval; 0 and 1 give degenerate thresholds
    if not np.isfinite(pval) or pval <= 0 or pval >= 1:
        raise InvalidParameter(name, f"Parameter {name} has unacceptable value.")
