from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
import math
from typing import Any

import numpy as np

from chart_layout.errors import ChartConfigError, ScaleLookupError


# Tick-increment thresholds: sqrt(50), sqrt(10), sqrt(2).
_E10 = math.sqrt(50.0)
_E5 = math.sqrt(10.0)
_E2 = math.sqrt(2.0)


@dataclass(frozen=True)
class BandScale:
    """Discrete keys mapped to equal-width, padded bands of a pixel range.

    With the default outer padding (half the inner padding) each key owns a
    slot of `extent / n` pixels and its band sits centred in that slot, so the
    gap between neighbours is one `padding_inner` fraction of a step and the
    outer edges get half of it. A reversed range puts the first key at the
    far end.
    """

    domain: tuple[str, ...]
    range_start: float
    range_stop: float
    padding_inner: float = 0.1
    padding_outer: float | None = None
    align: float = 0.5
    _offsets: dict[str, float] = field(init=False, repr=False, compare=False)
    _step: float = field(init=False, repr=False, compare=False)
    _bandwidth: float = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not 0.0 <= self.padding_inner < 1.0:
            raise ChartConfigError("padding_inner must be in [0, 1)")
        if self.padding_outer is not None and self.padding_outer < 0.0:
            raise ChartConfigError("padding_outer must be >= 0")
        if not 0.0 <= self.align <= 1.0:
            raise ChartConfigError("align must be in [0, 1]")
        keys = tuple(dict.fromkeys(str(key) for key in self.domain))
        object.__setattr__(self, "domain", keys)

        outer = self.padding_inner * 0.5 if self.padding_outer is None else self.padding_outer
        lo = min(self.range_start, self.range_stop)
        hi = max(self.range_start, self.range_stop)
        n = len(keys)
        step = (hi - lo) / max(1.0, n - self.padding_inner + 2.0 * outer)
        start = lo + (hi - lo - step * (n - self.padding_inner)) * self.align
        values = [start + step * i for i in range(n)]
        if self.range_stop < self.range_start:
            values.reverse()
        object.__setattr__(self, "_offsets", dict(zip(keys, values)))
        object.__setattr__(self, "_step", step)
        object.__setattr__(self, "_bandwidth", step * (1.0 - self.padding_inner))

    @classmethod
    def from_padding(
        cls,
        keys: Iterable[Any],
        extent: tuple[float, float],
        padding: float,
    ) -> "BandScale":
        return cls(domain=tuple(str(k) for k in keys), range_start=extent[0], range_stop=extent[1], padding_inner=padding)

    @property
    def bandwidth(self) -> float:
        return self._bandwidth

    @property
    def step(self) -> float:
        return self._step

    def __call__(self, key: Any) -> float:
        try:
            return self._offsets[str(key)]
        except KeyError:
            raise ScaleLookupError(f"category not in band scale domain: {key!r}") from None

    def __contains__(self, key: object) -> bool:
        return str(key) in self._offsets

    def get(self, key: Any, default: float | None = None) -> float | None:
        return self._offsets.get(str(key), default)

    def offsets(self) -> dict[str, float]:
        return dict(self._offsets)


@dataclass(frozen=True)
class LinearScale:
    domain: tuple[float, float]
    pixel_range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.pixel_range
        if d1 == d0:
            return (r0 + r1) * 0.5
        return r0 + (float(value) - d0) * (r1 - r0) / (d1 - d0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.pixel_range
        if r1 == r0:
            return (d0 + d1) * 0.5
        return d0 + (float(pixel) - r0) * (d1 - d0) / (r1 - r0)

    def map_values(self, values: np.ndarray) -> np.ndarray:
        arr = np.asarray(values, dtype=np.float64)
        d0, d1 = self.domain
        r0, r1 = self.pixel_range
        if d1 == d0:
            return np.full(arr.shape, (r0 + r1) * 0.5, dtype=np.float64)
        return r0 + (arr - d0) * ((r1 - r0) / (d1 - d0))

    def nice(self, count: int = 10) -> "LinearScale":
        return LinearScale(domain=nice_domain(self.domain[0], self.domain[1], count), pixel_range=self.pixel_range)

    def ticks(self, count: int = 10) -> np.ndarray:
        lo, hi = sorted(self.domain)
        return generate_nice_ticks(lo, hi, count)

    def tick_labels(self, count: int = 10) -> list[str]:
        return format_ticks_for_axis(self.ticks(count))


def value_domain(values: Iterable[float]) -> tuple[float, float]:
    """Value-axis domain `[min(0, lowest), highest]`; `(0, 0)` for no values."""

    vals = [float(v) for v in values]
    if not vals:
        return (0.0, 0.0)
    return (min(0.0, min(vals)), max(vals))


def build_value_scale(values: Sequence[float], pixel_range: tuple[float, float], *, nice: bool = True) -> LinearScale:
    scale = LinearScale(domain=value_domain(values), pixel_range=pixel_range)
    return scale.nice() if nice else scale


def nice_domain(start: float, stop: float, count: int = 10) -> tuple[float, float]:
    """Round a domain outward to tick-increment multiples, until stable."""

    if count <= 0:
        raise ValueError("count must be > 0")
    reverse = stop < start
    lo, hi = (stop, start) if reverse else (start, stop)
    prestep: float | None = None
    for _ in range(10):
        step = _tick_increment(lo, hi, count)
        if step == prestep:
            break
        if step > 0:
            lo = math.floor(lo / step) * step
            hi = math.ceil(hi / step) * step
        elif step < 0:
            lo = math.ceil(lo * step) / step
            hi = math.floor(hi * step) / step
        else:
            break
        prestep = step
    return (hi, lo) if reverse else (lo, hi)


def _tick_increment(start: float, stop: float, count: int) -> float:
    # Negative results encode 1/step for sub-unit steps to avoid float drift.
    span = stop - start
    if span <= 0 or not math.isfinite(span):
        return 0.0
    step = span / count
    power = math.floor(math.log10(step))
    error = step / (10.0**power)
    if error >= _E10:
        factor = 10.0
    elif error >= _E5:
        factor = 5.0
    elif error >= _E2:
        factor = 2.0
    else:
        factor = 1.0
    if power >= 0:
        return factor * (10.0**power)
    return -(10.0 ** (-power)) / factor


def generate_nice_ticks(vmin: float, vmax: float, target: int) -> np.ndarray:
    """Multiples of the tick increment of `[vmin, vmax]` that fall inside it.

    Uses the same 1/2/5 increment as `nice_domain`, so a niced domain starts
    and ends on a tick.
    """

    if target <= 0:
        raise ValueError("target must be > 0")
    if vmin == vmax:
        return np.asarray([vmin], dtype=np.float64)
    lo, hi = min(vmin, vmax), max(vmin, vmax)
    step = _tick_increment(lo, hi, target)
    if step > 0:
        index = np.arange(math.ceil(lo / step), math.floor(hi / step) + 1, dtype=np.float64)
        return index * step
    if step < 0:
        inverse = -step
        index = np.arange(math.ceil(lo * inverse), math.floor(hi * inverse) + 1, dtype=np.float64)
        return index / inverse
    return np.asarray([lo], dtype=np.float64)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not math.isfinite(value):
        return str(value)
    if step is not None and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    if value and (abs(value) >= 1e6 or abs(value) < 1e-6):
        return f"{value:.4e}"
    text = f"{value:.{_decimals_from_step(step)}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    """Labels for evenly spaced ticks, all printed to the precision of the spacing."""

    if ticks.size == 0:
        return []
    step = float(abs(ticks[1] - ticks[0])) if ticks.size > 1 else None
    return [format_tick(float(v), step=step) for v in ticks]


def _decimals_from_step(step: float | None) -> int:
    if step is None or not (step > 0 and math.isfinite(step)):
        return 6
    exponent = Decimal(repr(step)).normalize().as_tuple().exponent
    return min(12, max(0, -int(exponent)))
