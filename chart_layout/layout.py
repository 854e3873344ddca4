from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from chart_layout.config import DEFAULT_SERIES_COLORS, BarChartConfig, ColumnChartConfig
from chart_layout.errors import ChartConfigError
from chart_layout.points import DataPoint, Orientation, Rect, Series
from chart_layout.scales import BandScale, LinearScale, build_value_scale


# Ten-color categorical palette used once the base colors run out.
CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


@dataclass(frozen=True)
class GroupedLayout:
    group_scale: BandScale
    series_scale: BandScale
    value_scale: LinearScale

    @property
    def group_bandwidth(self) -> float:
        return self.group_scale.bandwidth

    @property
    def series_bandwidth(self) -> float:
        return self.series_scale.bandwidth


def _check_orientation(orientation: str) -> None:
    if orientation not in ("horizontal", "vertical"):
        raise ChartConfigError(f"unsupported orientation: {orientation}")


def category_extent(width: float, height: float, orientation: Orientation) -> tuple[float, float]:
    # Horizontal bars list categories bottom-up.
    return (0.0, float(width)) if orientation == "vertical" else (float(height), 0.0)


def value_extent(width: float, height: float, orientation: Orientation) -> tuple[float, float]:
    return (float(height), 0.0) if orientation == "vertical" else (0.0, float(width))


def calculate_bar_dimensions(
    data: Sequence[DataPoint],
    width: float,
    height: float,
    config: BarChartConfig | None = None,
    orientation: Orientation = "vertical",
) -> BandScale:
    _check_orientation(orientation)
    padding = (config or BarChartConfig()).bar_padding
    return BandScale.from_padding((p.key for p in data), category_extent(width, height, orientation), padding)


def calculate_value_scale(
    data: Sequence[DataPoint],
    width: float,
    height: float,
    orientation: Orientation = "vertical",
) -> LinearScale:
    _check_orientation(orientation)
    return build_value_scale([p.y for p in data], value_extent(width, height, orientation))


def calculate_column_dimensions(
    data: Sequence[DataPoint],
    width: float,
    height: float,
    config: ColumnChartConfig | None = None,
) -> BandScale:
    padding = (config or ColumnChartConfig()).column_padding
    return BandScale.from_padding((p.key for p in data), (0.0, float(width)), padding)


def calculate_column_value_scale(data: Sequence[DataPoint], width: float, height: float) -> LinearScale:
    return build_value_scale([p.y for p in data], (float(height), 0.0))


def bar_rect(
    band_start: float,
    bandwidth: float,
    value: float,
    value_scale: LinearScale,
    orientation: Orientation,
) -> Rect:
    """Rectangle for one bar anchored at the zero baseline of `value_scale`."""

    zero = value_scale(0.0)
    pos = value_scale(value)
    if orientation == "vertical":
        return Rect(x=band_start, y=min(zero, pos), width=bandwidth, height=abs(pos - zero))
    return Rect(x=min(zero, pos), y=band_start, width=abs(pos - zero), height=bandwidth)


def get_bar_position(
    point: DataPoint,
    band_scale: BandScale,
    value_scale: LinearScale,
    orientation: Orientation = "vertical",
) -> Rect:
    _check_orientation(orientation)
    return bar_rect(band_scale(point.key), band_scale.bandwidth, point.y, value_scale, orientation)


def get_column_position(point: DataPoint, band_scale: BandScale, value_scale: LinearScale) -> Rect:
    return bar_rect(band_scale(point.key), band_scale.bandwidth, point.y, value_scale, "vertical")


def calculate_grouped_layout(
    series: Sequence[Series],
    width: float,
    height: float,
    group_padding: float = 0.05,
    series_padding: float = 0.02,
    orientation: Orientation = "vertical",
) -> GroupedLayout:
    _check_orientation(orientation)
    categories = sorted({p.key for s in series for p in s.data})
    group_scale = BandScale.from_padding(categories, category_extent(width, height, orientation), group_padding)
    series_scale = BandScale.from_padding((s.id for s in series), (0.0, group_scale.bandwidth), series_padding)
    values = [p.y for s in series for p in s.data]
    value_scale = build_value_scale(values, value_extent(width, height, orientation))
    return GroupedLayout(group_scale=group_scale, series_scale=series_scale, value_scale=value_scale)


def get_grouped_scale(
    series: Sequence[Series],
    container: tuple[float, float],
    orientation: Orientation = "vertical",
) -> GroupedLayout:
    width, height = container
    return calculate_grouped_layout(series, width, height, 0.05, 0.02, orientation)


def get_grouped_bar_position(
    point: DataPoint,
    series_id: str,
    layout: GroupedLayout,
    orientation: Orientation = "vertical",
) -> Rect:
    _check_orientation(orientation)
    start = layout.group_scale(point.key) + layout.series_scale(series_id)
    return bar_rect(start, layout.series_bandwidth, point.y, layout.value_scale, orientation)


def get_grouped_color_scheme(count: int, base_colors: Sequence[str] = DEFAULT_SERIES_COLORS) -> list[str]:
    if count < 0:
        raise ValueError("count must be >= 0")
    if count <= len(base_colors):
        return list(base_colors[:count])
    extra = count - len(base_colors)
    return list(base_colors) + [CATEGORY10[i % len(CATEGORY10)] for i in range(extra)]
