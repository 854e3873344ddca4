from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import math
import numbers
from typing import Any

from chart_layout.points import DataPoint, Series


_MISSING = object()


@dataclass(frozen=True)
class ValidationReport:
    errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors


def field_of(item: Any, name: str) -> Any:
    """Read `name` from a mapping or from one of the point/series dataclasses."""

    if isinstance(item, Mapping):
        return item.get(name, _MISSING)
    if isinstance(item, (DataPoint, Series)):
        return getattr(item, name, _MISSING)
    return _MISSING


def is_missing(value: Any) -> bool:
    return value is _MISSING


def is_object(item: Any) -> bool:
    return isinstance(item, (Mapping, DataPoint, Series))


def is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def check_container(data: Any) -> list[str]:
    if not is_sequence(data):
        return ["Data must be an array"]
    if len(data) == 0:
        return ["Data array cannot be empty"]
    return []


def check_point(item: Any, prefix: str) -> list[str]:
    """Return the problems of one point-like item, all of them at once."""

    errors: list[str] = []
    x = field_of(item, "x")
    y = field_of(item, "y")
    if is_missing(x):
        errors.append(f"{prefix}: missing 'x' property")
    if is_missing(y):
        errors.append(f"{prefix}: missing 'y' property")
    elif not is_number(y):
        errors.append(f"{prefix}: 'y' must be a number")
    elif not math.isfinite(y):
        errors.append(f"{prefix}: 'y' must be a finite number")
    return errors


def validate_points(data: Any) -> ValidationReport:
    errors = check_container(data)
    if errors:
        return ValidationReport(errors=tuple(errors))
    for index, item in enumerate(data):
        if not is_object(item):
            errors.append(f"Data item at index {index} must be an object")
            continue
        errors.extend(check_point(item, f"Data item at index {index}"))
    return ValidationReport(errors=tuple(errors))
