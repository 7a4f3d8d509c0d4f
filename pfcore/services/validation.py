from __future__ import annotations

import math
from typing import Any, List, Optional

from pfcore.domain.errors import ConstraintViolation


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def check_positive_int(field: str, value: Any, issues: List[ConstraintViolation]) -> None:
    if not is_int(value):
        issues.append(ConstraintViolation(field, "integer", f"expected an integer, got {value!r}"))
    elif value <= 0:
        issues.append(ConstraintViolation(field, "positive", f"must be greater than 0, got {value}"))


def check_int(field: str, value: Any, issues: List[ConstraintViolation]) -> None:
    if not is_int(value):
        issues.append(ConstraintViolation(field, "integer", f"expected an integer, got {value!r}"))


def check_range(
    field: str,
    value: Any,
    issues: List[ConstraintViolation],
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> None:
    if not is_number(value):
        issues.append(ConstraintViolation(field, "number", f"expected a finite number, got {value!r}"))
        return
    if minimum is not None and value < minimum:
        issues.append(ConstraintViolation(field, "min", f"must be >= {minimum:g}, got {value:g}"))
    if maximum is not None and value > maximum:
        issues.append(ConstraintViolation(field, "max", f"must be <= {maximum:g}, got {value:g}"))
