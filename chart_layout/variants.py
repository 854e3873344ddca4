from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import logging
from typing import Any, Literal, Union

from chart_layout.config import (
    VARIANTS,
    GroupedChartConfig,
    SimpleChartConfig,
    StackedChartConfig,
    merge_config,
)
from chart_layout.errors import UnsupportedVariantError
from chart_layout.points import DataPoint, Series
from chart_layout.registry import series_tag
from chart_layout.validation import (
    ValidationReport,
    check_container,
    check_point,
    field_of,
    is_missing,
    is_object,
    is_sequence,
)


LOGGER = logging.getLogger(__name__)

ChartVariantName = Literal["simple", "grouped", "stacked"]
ChartType = Literal["bar", "column"]
VariantConfig = Union[SimpleChartConfig, GroupedChartConfig, StackedChartConfig]

_DEFAULT_CONFIGS: dict[str, type] = {
    "simple": SimpleChartConfig,
    "grouped": GroupedChartConfig,
    "stacked": StackedChartConfig,
}

_COMPONENTS: dict[str, dict[str, str]] = {
    "bar": {"simple": "SimpleBarChart", "grouped": "GroupedBarChart", "stacked": "StackedBarChart"},
    "column": {"simple": "SimpleColumnChart", "grouped": "GroupedColumnChart", "stacked": "StackedColumnChart"},
}

# Points per series above which stacking reads better than side-by-side groups.
STACKED_POINTS_PER_SERIES = 5


@dataclass(frozen=True)
class ChartVariant:
    variant: ChartVariantName
    config: VariantConfig
    data: Sequence[DataPoint] | Sequence[Series]


def create_chart_variant(
    variant: str,
    data: Sequence[DataPoint] | Sequence[Series],
    custom_config: Mapping[str, Any] | None = None,
) -> ChartVariant:
    config_cls = _DEFAULT_CONFIGS.get(variant)
    if config_cls is None:
        raise UnsupportedVariantError(f"Unsupported chart variant: {variant}")
    config = merge_config(config_cls(), custom_config)
    LOGGER.debug("created %s chart variant for %d item(s)", variant, len(data))
    return ChartVariant(variant=variant, config=config, data=data)  # type: ignore[arg-type]


def get_variant_component(chart_type: str, variant: str) -> str:
    component = _COMPONENTS.get(chart_type, {}).get(variant)
    if component is None:
        raise UnsupportedVariantError(f"No component found for {chart_type} chart with {variant} variant")
    return component


def validate_variant_data(variant: str, data: Any) -> ValidationReport:
    errors = check_container(data)
    if errors:
        return ValidationReport(errors=tuple(errors))
    if variant not in VARIANTS:
        return ValidationReport(errors=(f"Unsupported chart variant: {variant}",))

    if variant != "simple" and _looks_like_series(data[0]):
        for index, series in enumerate(data):
            errors.extend(_check_series(series, index))
    else:
        for index, item in enumerate(data):
            if not is_object(item):
                errors.append(f"Data item at index {index} must be an object")
                continue
            errors.extend(check_point(item, f"Item {index}"))
    return ValidationReport(errors=tuple(errors))


def get_recommended_variant(data: Sequence[DataPoint], series_key: str = "series") -> ChartVariantName:
    """Pick a variant from how many series the points are tagged with.

    A point's series is `metadata[series_key]`, else `metadata["category"]`;
    `DataSeriesManager.from_flat_data(data, series_key, "category")` buckets
    them the same way.
    """

    tags = [series_tag(p, series_key, "category") for p in data]
    if not any(tags):
        return "simple"
    distinct = {str(tag) if tag else "default" for tag in tags}
    if len(distinct) <= 1:
        return "simple"
    if len(data) / len(distinct) > STACKED_POINTS_PER_SERIES:
        return "stacked"
    return "grouped"


def _looks_like_series(item: Any) -> bool:
    if isinstance(item, Series):
        return True
    if not isinstance(item, Mapping):
        return False
    return bool(item.get("id")) and bool(item.get("label")) and is_sequence(item.get("data"))


def _check_series(series: Any, index: int) -> list[str]:
    if not is_object(series):
        return [f"Series {index} must be an object"]
    errors: list[str] = []
    if not _present(field_of(series, "id")):
        errors.append(f"Series {index}: missing 'id' property")
    if not _present(field_of(series, "label")):
        errors.append(f"Series {index}: missing 'label' property")
    points = field_of(series, "data")
    if not is_sequence(points):
        errors.append(f"Series {index}: 'data' must be an array")
        return errors
    for item_index, item in enumerate(points):
        prefix = f"Series {index}, item {item_index}"
        if not is_object(item):
            errors.append(f"{prefix}: must be an object")
            continue
        errors.extend(check_point(item, prefix))
    return errors


def _present(value: Any) -> bool:
    return not is_missing(value) and bool(value)
