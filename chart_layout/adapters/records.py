from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
import logging
import math
import numbers
from typing import Any, Literal

from chart_layout.errors import ChartConfigError, ChartDataError
from chart_layout.points import DataPoint
from chart_layout.validation import ValidationReport, validate_points


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


LOGGER = logging.getLogger(__name__)

AggregationKind = Literal["sum", "average", "count"]
SortBy = Literal["value", "label", "custom"]
SortOrder = Literal["asc", "desc"]

_AGGREGATIONS = ("sum", "average", "count")


def transform_records(
    raw: Any,
    x_key: str = "x",
    y_key: str = "y",
    label_key: str | None = None,
) -> list[DataPoint]:
    records = _resolve_records(raw)
    points: list[DataPoint] = []
    for index, record in enumerate(records):
        item: Mapping[str, Any] = record if isinstance(record, Mapping) else {}
        x = item.get(x_key)
        if x is None:
            x = index
        label = item.get(label_key) if label_key is not None else str(x)
        raw_id = item.get("id")
        points.append(
            DataPoint(
                x=x,
                y=_coerce_number(item.get(y_key), index=index),
                label=None if label is None else str(label),
                id=str(raw_id) if raw_id is not None else f"data-{index}",
                metadata=dict(item),
            )
        )
    return points


def check_records(data: Any) -> ValidationReport:
    """Soft-validate raw point records; every problem is reported, nothing raises."""
    return validate_points(data)


def aggregate_points(points: Sequence[DataPoint], kind: AggregationKind = "sum") -> list[DataPoint]:
    if kind not in _AGGREGATIONS:
        raise ChartConfigError(f"unsupported aggregation type: {kind}")

    groups: dict[str, list[DataPoint]] = {}
    for point in points:
        groups.setdefault(point.key, []).append(point)

    out: list[DataPoint] = []
    for key, items in groups.items():
        if kind == "count":
            value = float(len(items))
        else:
            value = math.fsum(p.y for p in items)
            if kind == "average":
                value /= len(items)
        out.append(
            DataPoint(
                x=key,
                y=value,
                label=items[0].label or key,
                id=f"aggregated-{key}",
                metadata={
                    "aggregation_type": kind,
                    "item_count": len(items),
                    "original_items": tuple(items),
                },
            )
        )
    return out


def normalize_points(points: Sequence[DataPoint]) -> Sequence[DataPoint]:
    """Rescale y values to percentages of the summed absolute magnitude.

    A zero total returns `points` itself, untouched.
    """

    total = math.fsum(abs(p.y) for p in points)
    if total == 0:
        return points
    out: list[DataPoint] = []
    for point in points:
        pct = point.y / total * 100.0
        out.append(
            DataPoint(
                x=point.x,
                y=pct,
                label=point.label,
                id=point.id,
                metadata={**point.metadata, "original_value": point.y, "percentage": pct},
            )
        )
    return out


def sort_points(
    points: Sequence[DataPoint],
    sort_by: SortBy = "custom",
    sort_order: SortOrder = "asc",
) -> list[DataPoint]:
    if sort_by not in ("value", "label", "custom"):
        raise ChartConfigError(f"unsupported sort key: {sort_by}")
    if sort_order not in ("asc", "desc"):
        raise ChartConfigError(f"unsupported sort order: {sort_order}")
    out = list(points)
    reverse = sort_order == "desc"
    if sort_by == "value":
        out.sort(key=lambda p: p.y, reverse=reverse)
    elif sort_by == "label":
        out.sort(key=lambda p: p.key, reverse=reverse)
    return out


def _resolve_records(raw: Any) -> Sequence[Any]:
    if pd is not None and isinstance(raw, pd.DataFrame):
        return raw.to_dict(orient="records")
    if isinstance(raw, Sequence) and not isinstance(raw, (str, bytes, bytearray)):
        return raw
    raise ChartDataError(f"records must be a sequence, got {type(raw)!r}")


def _coerce_number(raw: Any, *, index: int) -> float:
    value: float
    if isinstance(raw, (numbers.Real, Decimal)):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        try:
            value = float(Decimal(text)) if text else 0.0
        except (InvalidOperation, ValueError):
            value = math.nan
    else:
        value = math.nan

    if not math.isfinite(value):
        LOGGER.debug("record %d: y value %r is not a finite number, using 0", index, raw)
        return 0.0
    return value
