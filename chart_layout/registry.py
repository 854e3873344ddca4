from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, replace
import logging
import math

from chart_layout.errors import SeriesLookupError
from chart_layout.points import DataPoint, Series


LOGGER = logging.getLogger(__name__)

Listener = Callable[[], None]


@dataclass(frozen=True)
class SeriesStatistics:
    min: float
    max: float
    avg: float
    count: int


@dataclass(frozen=True)
class ValueRange:
    min: float
    max: float


class DataSeriesManager:
    """Owns a set of named series and tells subscribers when it changes.

    Stored series are replaced, never mutated, and listeners run synchronously
    after the change is in place. A listener must not call back into the
    mutating method that triggered it.
    """

    def __init__(self, initial_series: Iterable[Series] = ()) -> None:
        self._series: dict[str, Series] = {}
        self._listeners: list[Listener] = []
        for series in initial_series:
            self.add_series(series)

    @property
    def series_count(self) -> int:
        return len(self._series)

    def add_series(self, series: Series) -> None:
        # Re-adding an id keeps its original position.
        self._series[series.id] = replace(series, data=_detached(series.data))
        self._notify()

    def remove_series(self, series_id: str) -> bool:
        if series_id not in self._series:
            return False
        del self._series[series_id]
        self._notify()
        return True

    def update_series_data(self, series_id: str, data: Sequence[DataPoint]) -> None:
        current = self._require(series_id)
        self._series[series_id] = replace(current, data=_detached(data))
        self._notify()

    def toggle_series_visibility(self, series_id: str) -> None:
        current = self._require(series_id)
        self._series[series_id] = replace(current, visible=not current.is_visible)
        self._notify()

    def clear_all(self) -> None:
        self._series = {}
        self._notify()

    def get_series(self, series_id: str) -> Series | None:
        return self._series.get(series_id)

    def has_series(self, series_id: str) -> bool:
        return series_id in self._series

    def get_all_series(self) -> list[Series]:
        return list(self._series.values())

    def get_visible_series(self) -> list[Series]:
        return [s for s in self._series.values() if s.is_visible]

    def flatten_series_data(self) -> list[DataPoint]:
        out: list[DataPoint] = []
        for series in self.get_visible_series():
            for point in series.data:
                out.append(point.with_metadata(series=series.id, series_label=series.label, series_color=series.color))
        return out

    def group_series_data_by_x(self) -> dict[str, dict[str, DataPoint]]:
        grouped: dict[str, dict[str, DataPoint]] = {}
        for series in self.get_visible_series():
            for point in series.data:
                grouped.setdefault(point.key, {})[series.id] = point
        return grouped

    def get_series_statistics(self) -> dict[str, SeriesStatistics]:
        stats: dict[str, SeriesStatistics] = {}
        for series in self._series.values():
            values = [p.y for p in series.data]
            if not values:
                stats[series.id] = SeriesStatistics(min=0.0, max=0.0, avg=0.0, count=0)
                continue
            stats[series.id] = SeriesStatistics(
                min=min(values),
                max=max(values),
                avg=math.fsum(values) / len(values),
                count=len(values),
            )
        return stats

    def get_combined_value_range(self) -> ValueRange:
        values = [p.y for s in self.get_visible_series() for p in s.data]
        if not values:
            return ValueRange(min=0.0, max=0.0)
        return ValueRange(min=min(values), max=max(values))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _require(self, series_id: str) -> Series:
        try:
            return self._series[series_id]
        except KeyError:
            raise SeriesLookupError(f"series not registered: {series_id!r}") from None

    def _notify(self) -> None:
        listeners = tuple(self._listeners)
        LOGGER.debug("series registry changed; notifying %d listener(s)", len(listeners))
        for listener in listeners:
            listener()

    @classmethod
    def from_flat_data(
        cls,
        data: Sequence[DataPoint],
        series_key: str = "series",
        fallback_key: str | None = None,
    ) -> "DataSeriesManager":
        return cls(group_points_by_series(data, series_key, fallback_key))


def series_tag(point: DataPoint, series_key: str = "series", fallback_key: str | None = None) -> object:
    """The series a flat point belongs to, or None when it carries no tag."""

    tag = point.metadata.get(series_key)
    if not tag and fallback_key is not None:
        tag = point.metadata.get(fallback_key)
    return tag or None


def group_points_by_series(
    data: Sequence[DataPoint],
    series_key: str = "series",
    fallback_key: str | None = None,
) -> list[Series]:
    """Bucket flat points into series by `metadata[series_key]`, in first-seen order.

    Points without that tag use `metadata[fallback_key]` when a fallback key is
    given, and land in the `default` bucket otherwise.
    """

    buckets: dict[str, list[DataPoint]] = {}
    for point in data:
        series_id = series_tag(point, series_key, fallback_key) or "default"
        buckets.setdefault(str(series_id), []).append(point)
    return [
        Series(id=series_id, label=series_id[:1].upper() + series_id[1:], data=tuple(points), visible=True)
        for series_id, points in buckets.items()
    ]


def _detached(data: Iterable[DataPoint]) -> tuple[DataPoint, ...]:
    # Stored points own their metadata dicts; callers keep theirs.
    return tuple(replace(point, metadata=dict(point.metadata)) for point in data)
