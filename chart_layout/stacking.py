"""Stacked layouts for multi-series bar and column charts.

Series are stacked per category. Missing categories count as 0. The stack
order decides which series sits at the bottom. The stack offset decides
where each category's baseline is.

Orders
    none        input order.
    ascending   stable sort by the per-series sum of values, smallest at the
                bottom.
    descending  the exact reverse of ascending.
    inside-out  series ranked by descending sum (ties keep input order); each
                one joins whichever side, top or bottom, has the smaller running
                sum (bottom on ties). The two largest end up adjacent in the
                middle.

Offsets
    none        baseline 0, plain cumulative stacking.
    expand      every category rescaled to a total of 1 (zero totals untouched).
    diverging   positive values stack up from 0 and negative values stack down
                from 0, independently.
    silhouette  baseline at -total / 2 so the stack is centred on 0.
    wiggle      minimal-wiggle streamgraph baseline: the first category starts
                at 0 and each following baseline moves by the value-weighted
                mean slope of the layer boundaries.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

import numpy as np

from chart_layout.config import STACK_OFFSETS, STACK_ORDERS, StackOffset, StackOrder
from chart_layout.errors import ChartConfigError, StackLookupError
from chart_layout.points import DataPoint, Orientation, Rect, Series
from chart_layout.scales import BandScale, LinearScale


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackSegment:
    category: str
    baseline: float
    top: float
    value: float

    @property
    def height(self) -> float:
        return self.top - self.baseline


@dataclass(frozen=True)
class StackedLayer:
    series_id: str
    stack_index: int
    segments: tuple[StackSegment, ...]
    _by_category: dict[str, StackSegment] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_category", {seg.category: seg for seg in self.segments})

    def segment(self, category: str) -> StackSegment:
        try:
            return self._by_category[str(category)]
        except KeyError:
            raise StackLookupError(f"category {category!r} not in stacked layer {self.series_id!r}") from None


@dataclass(frozen=True)
class StackLayout:
    categories: tuple[str, ...]
    layers: tuple[StackedLayer, ...]
    order: tuple[str, ...]
    offset: str = "none"
    _by_id: dict[str, StackedLayer] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_id", {layer.series_id: layer for layer in self.layers})

    def layer(self, series_id: str) -> StackedLayer:
        try:
            return self._by_id[series_id]
        except KeyError:
            raise StackLookupError(f"series {series_id!r} has no stacked layer") from None

    def segment(self, category: str, series_id: str) -> StackSegment:
        return self.layer(series_id).segment(category)

    def bounds(self) -> np.ndarray:
        """Array of shape (series, categories, 2) holding (baseline, top), input order."""
        out = np.zeros((len(self.layers), len(self.categories), 2), dtype=np.float64)
        for i, layer in enumerate(self.layers):
            for j, seg in enumerate(layer.segments):
                out[i, j, 0] = seg.baseline
                out[i, j, 1] = seg.top
        return out

    def extent(self) -> tuple[float, float]:
        """Value-axis domain `[min(0, lowest edge), highest edge]`."""
        b = self.bounds()
        if b.size == 0:
            return (0.0, 0.0)
        return (min(0.0, float(b.min())), float(b.max()))


@dataclass(frozen=True)
class StackedChartLayout:
    band_scale: BandScale
    value_scale: LinearScale
    stack: StackLayout
    totals: dict[str, float]

    @property
    def bandwidth(self) -> float:
        return self.band_scale.bandwidth


def stack_categories(series: Sequence[Series]) -> list[str]:
    return sorted({p.key for s in series for p in s.data})


def stack_values(series: Sequence[Series], categories: Sequence[str]) -> np.ndarray:
    column = {key: j for j, key in enumerate(categories)}
    values = np.zeros((len(series), len(categories)), dtype=np.float64)
    for i, s in enumerate(series):
        seen: set[str] = set()
        for point in s.data:
            key = point.key
            if key not in column:
                continue
            if key in seen:
                LOGGER.warning("series %r repeats category %r; keeping the first value", s.id, key)
                continue
            seen.add(key)
            values[i, column[key]] = point.y
    return values


def order_series(values: np.ndarray, order: StackOrder = "none") -> list[int]:
    """Row indices of `values` from the bottom of the stack to the top."""

    if order not in STACK_ORDERS:
        raise ChartConfigError(f"unsupported stack order: {order}")
    n = values.shape[0]
    sums = [float(v) for v in values.sum(axis=1)] if n else []
    if order == "none":
        return list(range(n))
    ascending = sorted(range(n), key=lambda i: sums[i])
    if order == "ascending":
        return ascending
    if order == "descending":
        return ascending[::-1]

    ranked = sorted(range(n), key=lambda i: (-sums[i], i))
    top = bottom = 0.0
    tops: list[int] = []
    bottoms: list[int] = []
    for i in ranked:
        if top < bottom:
            top += sums[i]
            tops.append(i)
        else:
            bottom += sums[i]
            bottoms.append(i)
    return bottoms[::-1] + tops


def stack_bounds(ordered: np.ndarray, offset: StackOffset = "none") -> np.ndarray:
    """(baseline, top) per row and category for rows already in stack order."""

    if offset not in STACK_OFFSETS:
        raise ChartConfigError(f"unsupported stack offset: {offset}")
    n, m = ordered.shape
    out = np.zeros((n, m, 2), dtype=np.float64)
    if n == 0 or m == 0:
        return out

    if offset == "diverging":
        return _diverging(ordered)

    values = ordered
    baseline = np.zeros(m, dtype=np.float64)
    if offset == "expand":
        totals = ordered.sum(axis=0)
        zero = totals == 0
        if np.any(zero):
            LOGGER.warning("expand offset: %d categor(ies) sum to zero and are left unscaled", int(zero.sum()))
        values = ordered / np.where(zero, 1.0, totals)
    elif offset == "silhouette":
        baseline = -ordered.sum(axis=0) / 2.0
    elif offset == "wiggle":
        baseline = _wiggle_baseline(ordered)

    tops = baseline + np.cumsum(values, axis=0)
    out[:, :, 1] = tops
    out[0, :, 0] = baseline
    out[1:, :, 0] = tops[:-1]
    return out


def _diverging(values: np.ndarray) -> np.ndarray:
    pos = np.where(values > 0, values, 0.0)
    neg = np.where(values < 0, values, 0.0)
    up = np.cumsum(pos, axis=0)
    down = np.cumsum(neg, axis=0)
    up_prev = np.vstack([np.zeros((1, values.shape[1])), up[:-1]])
    down_prev = np.vstack([np.zeros((1, values.shape[1])), down[:-1]])

    out = np.zeros(values.shape + (2,), dtype=np.float64)
    out[:, :, 0] = np.where(values > 0, up_prev, np.where(values < 0, down, 0.0))
    out[:, :, 1] = np.where(values > 0, up, np.where(values < 0, down_prev, 0.0))
    return out


def _wiggle_baseline(values: np.ndarray) -> np.ndarray:
    m = values.shape[1]
    baseline = np.zeros(m, dtype=np.float64)
    y = 0.0
    for j in range(1, m):
        cur = values[:, j]
        slope = cur - values[:, j - 1]
        # Half of a layer's own slope plus the full slope of every layer below it.
        s3 = np.cumsum(slope) - slope / 2.0
        s1 = float(cur.sum())
        if s1:
            y -= float((s3 * cur).sum()) / s1
        baseline[j] = y
    return baseline


def stack_series(
    series: Sequence[Series],
    order: StackOrder = "none",
    offset: StackOffset = "none",
    categories: Sequence[str] | None = None,
) -> StackLayout:
    keys = list(dict.fromkeys(str(c) for c in categories)) if categories is not None else stack_categories(series)
    values = stack_values(series, keys)
    rows = order_series(values, order)
    bounds = stack_bounds(values[np.asarray(rows, dtype=np.intp)], offset)

    layers: list[StackedLayer | None] = [None] * len(series)
    for stack_index, row in enumerate(rows):
        segments = tuple(
            StackSegment(
                category=key,
                baseline=float(bounds[stack_index, j, 0]),
                top=float(bounds[stack_index, j, 1]),
                value=float(values[row, j]),
            )
            for j, key in enumerate(keys)
        )
        layers[row] = StackedLayer(series_id=series[row].id, stack_index=stack_index, segments=segments)
    return StackLayout(
        categories=tuple(keys),
        layers=tuple(layer for layer in layers if layer is not None),
        order=tuple(series[row].id for row in rows),
        offset=offset,
    )


def calculate_stack_totals(series: Sequence[Series]) -> dict[str, float]:
    """Per-category sums of the raw, unstacked values."""

    keys = stack_categories(series)
    totals = stack_values(series, keys).sum(axis=0)
    return {key: float(total) for key, total in zip(keys, totals)}


def calculate_stacked_layout(
    series: Sequence[Series],
    width: float,
    height: float,
    padding: float = 0.1,
    order: StackOrder = "none",
    offset: StackOffset = "none",
    orientation: Orientation = "vertical",
) -> StackedChartLayout:
    if orientation not in ("horizontal", "vertical"):
        raise ChartConfigError(f"unsupported orientation: {orientation}")
    stack = stack_series(series, order=order, offset=offset)
    if orientation == "vertical":
        band_range, value_range = (0.0, float(width)), (float(height), 0.0)
    else:
        band_range, value_range = (float(height), 0.0), (0.0, float(width))
    band_scale = BandScale.from_padding(stack.categories, band_range, padding)
    value_scale = LinearScale(domain=stack.extent(), pixel_range=value_range).nice()
    return StackedChartLayout(
        band_scale=band_scale,
        value_scale=value_scale,
        stack=stack,
        totals=calculate_stack_totals(series),
    )


def get_stacked_bar_position(
    category: str,
    series_id: str,
    layout: StackedChartLayout,
    orientation: Orientation = "vertical",
) -> Rect:
    if orientation not in ("horizontal", "vertical"):
        raise ChartConfigError(f"unsupported orientation: {orientation}")
    seg = layout.stack.segment(str(category), series_id)
    start = layout.band_scale(seg.category)
    v0 = layout.value_scale(seg.baseline)
    v1 = layout.value_scale(seg.top)
    if orientation == "vertical":
        return Rect(x=start, y=min(v0, v1), width=layout.bandwidth, height=abs(v1 - v0))
    return Rect(x=min(v0, v1), y=start, width=abs(v1 - v0), height=layout.bandwidth)


def stacked_points(layout: StackedChartLayout, series: Sequence[Series]) -> list[DataPoint]:
    """Flatten a stack into points whose y is the segment height."""

    out: list[DataPoint] = []
    for s in series:
        layer = layout.stack.layer(s.id)
        by_key: dict[str, DataPoint] = {}
        for p in s.data:
            by_key.setdefault(p.key, p)
        for seg in layer.segments:
            point = by_key.get(seg.category)
            if point is None:
                continue
            out.append(
                DataPoint(
                    x=point.x,
                    y=seg.height,
                    label=point.label,
                    id=point.id,
                    metadata={
                        **point.metadata,
                        "series": s.id,
                        "stack_bottom": seg.baseline,
                        "stack_top": seg.top,
                        "stack_height": seg.height,
                        "total": layout.totals.get(seg.category, 0.0),
                    },
                )
            )
    return out
