from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from chart_layout.adapters import transform_records
from chart_layout.layout import (
    calculate_bar_dimensions,
    calculate_grouped_layout,
    calculate_value_scale,
    get_bar_position,
    get_grouped_bar_position,
)
from chart_layout.orientation import DEFAULT_CONTAINER_HEIGHT, DEFAULT_CONTAINER_WIDTH, get_optimal_orientation
from chart_layout.points import Orientation, Rect
from chart_layout.registry import DataSeriesManager
from chart_layout.scales import BandScale, LinearScale
from chart_layout.stacking import calculate_stacked_layout, get_stacked_bar_position
from chart_layout.variants import ChartVariant, create_chart_variant, get_recommended_variant


@dataclass(frozen=True)
class BarGeometry:
    series_id: str | None
    category: str
    rect: Rect


@dataclass(frozen=True)
class ChartGeometry:
    chart: ChartVariant
    orientation: Orientation
    band_scale: BandScale
    value_scale: LinearScale
    bars: tuple[BarGeometry, ...]


def chart_geometry(
    records: Any,
    *,
    x_key: str = "x",
    y_key: str = "y",
    label_key: str | None = None,
    series_key: str = "series",
    variant: str | None = None,
    orientation: Orientation | None = None,
    width: float = DEFAULT_CONTAINER_WIDTH,
    height: float = DEFAULT_CONTAINER_HEIGHT,
    custom_config: Mapping[str, Any] | None = None,
) -> ChartGeometry:
    """Run raw records through the whole engine and return bar rectangles."""

    points = transform_records(records, x_key=x_key, y_key=y_key, label_key=label_key)
    name = variant or get_recommended_variant(points, series_key)
    chart = create_chart_variant(name, points, custom_config)
    resolved = orientation or get_optimal_orientation(points, width, height)

    if chart.variant == "simple":
        band = calculate_bar_dimensions(points, width, height, None, resolved)
        values = calculate_value_scale(points, width, height, resolved)
        bars = tuple(
            BarGeometry(series_id=None, category=p.key, rect=get_bar_position(p, band, values, resolved))
            for p in points
        )
        return ChartGeometry(chart=chart, orientation=resolved, band_scale=band, value_scale=values, bars=bars)

    series = DataSeriesManager.from_flat_data(points, series_key, "category").get_visible_series()
    if chart.variant == "grouped":
        grouped = calculate_grouped_layout(
            series,
            width,
            height,
            chart.config.group_padding,  # type: ignore[union-attr]
            chart.config.series_padding,  # type: ignore[union-attr]
            resolved,
        )
        bars = tuple(
            BarGeometry(series_id=s.id, category=p.key, rect=get_grouped_bar_position(p, s.id, grouped, resolved))
            for s in series
            for p in s.data
        )
        return ChartGeometry(
            chart=chart,
            orientation=resolved,
            band_scale=grouped.group_scale,
            value_scale=grouped.value_scale,
            bars=bars,
        )

    stacked = calculate_stacked_layout(
        series,
        width,
        height,
        order=chart.config.stack_order,  # type: ignore[union-attr]
        offset=chart.config.stack_offset,  # type: ignore[union-attr]
        orientation=resolved,
    )
    bars = tuple(
        BarGeometry(
            series_id=layer.series_id,
            category=seg.category,
            rect=get_stacked_bar_position(seg.category, layer.series_id, stacked, resolved),
        )
        for layer in stacked.stack.layers
        for seg in layer.segments
    )
    return ChartGeometry(
        chart=chart,
        orientation=resolved,
        band_scale=stacked.band_scale,
        value_scale=stacked.value_scale,
        bars=bars,
    )
