"""Pagination parameter validation."""
from __future__ import annotations

import math
from typing import Any

_INTEGRAL = frozenset({"start", "length"})


def is_nan_or_missing(*values: Any) -> bool:
    """True if any value is ``None`` or NaN."""
    return any(v is None or (isinstance(v, float) and math.isnan(v)) for v in values)


def invalid_parameters(**named: Any) -> list[str]:
    """Names of the implicated parameters, in argument order.

    ``start`` and ``length`` must also be integral.
    """
    invalid = []
    for name, value in named.items():
        if is_nan_or_missing(value):
            invalid.append(name)
        elif name in _INTEGRAL and isinstance(value, float) and not value.is_integer():
            invalid.append(name)
    return invalid


__all__ = ["invalid_parameters", "is_nan_or_missing"]
