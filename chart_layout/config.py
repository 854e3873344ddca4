from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass, replace
from pathlib import Path
import re
import tomllib
from typing import Any, Literal, TypeVar

from chart_layout.errors import ChartConfigError


_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}([0-9a-fA-F]{2})?$")

StackOrder = Literal["none", "ascending", "descending", "inside-out"]
StackOffset = Literal["none", "expand", "diverging", "silhouette", "wiggle"]

STACK_ORDERS: tuple[str, ...] = ("none", "ascending", "descending", "inside-out")
STACK_OFFSETS: tuple[str, ...] = ("none", "expand", "diverging", "silhouette", "wiggle")
VARIANTS: tuple[str, ...] = ("simple", "grouped", "stacked")

DEFAULT_SERIES_COLORS: tuple[str, ...] = ("#3b82f6", "#ef4444", "#10b981", "#f59e0b", "#8b5cf6")

ConfigT = TypeVar("ConfigT")


@dataclass(frozen=True)
class ThemeColors:
    primary: str = "#3b82f6"
    secondary: str = "#64748b"
    background: str = "#ffffff"
    text: str = "#1f2937"
    grid: str = "#e5e7eb"


@dataclass(frozen=True)
class FontSizes:
    small: float = 12.0
    medium: float = 14.0
    large: float = 16.0


@dataclass(frozen=True)
class ThemeFonts:
    family: str = "Inter, system-ui, sans-serif"
    size: FontSizes = field(default_factory=FontSizes)


@dataclass(frozen=True)
class ThemeSpacing:
    small: float = 4.0
    medium: float = 8.0
    large: float = 16.0


@dataclass(frozen=True)
class ThemeConfig:
    colors: ThemeColors = field(default_factory=ThemeColors)
    fonts: ThemeFonts = field(default_factory=ThemeFonts)
    spacing: ThemeSpacing = field(default_factory=ThemeSpacing)


@dataclass(frozen=True)
class AnimationConfig:
    duration: int = 750
    easing: str = "ease-in-out"
    stagger: int = 50
    enabled: bool = True


@dataclass(frozen=True)
class AccessibilityConfig:
    enabled: bool = True
    keyboard_navigation: bool = True
    screen_reader_support: bool = True
    high_contrast: bool = False


@dataclass(frozen=True)
class ChartBaseConfig:
    """Theme, animation and accessibility defaults shared by every chart."""

    theme: ThemeConfig = field(default_factory=ThemeConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    accessibility: AccessibilityConfig = field(default_factory=AccessibilityConfig)


@dataclass(frozen=True)
class BarChartConfig(ChartBaseConfig):
    bar_padding: float = 0.1
    group_padding: float = 0.05
    show_labels: bool = True
    label_position: Literal["inside", "outside", "center"] = "outside"
    sort_by: Literal["value", "label", "custom"] = "custom"
    sort_order: Literal["asc", "desc"] = "asc"


@dataclass(frozen=True)
class ColumnChartConfig(ChartBaseConfig):
    column_padding: float = 0.1
    group_padding: float = 0.05
    show_labels: bool = True
    label_position: Literal["inside", "outside", "center"] = "outside"
    sort_by: Literal["value", "label", "custom"] = "custom"
    sort_order: Literal["asc", "desc"] = "asc"


@dataclass(frozen=True)
class SimpleChartConfig(ChartBaseConfig):
    show_values: bool = True
    value_position: Literal["inside", "outside", "end"] = "end"


@dataclass(frozen=True)
class GroupedChartConfig(ChartBaseConfig):
    group_padding: float = 0.05
    series_padding: float = 0.02
    show_legend: bool = True
    legend_position: Literal["top", "bottom", "left", "right"] = "top"
    color_scheme: tuple[str, ...] = DEFAULT_SERIES_COLORS


@dataclass(frozen=True)
class StackedChartConfig(ChartBaseConfig):
    stack_order: StackOrder = "none"
    stack_offset: StackOffset = "none"
    show_totals: bool = False
    total_position: Literal["top", "inside"] = "top"


_CHOICES: dict[str, tuple[str, ...]] = {
    "label_position": ("inside", "outside", "center"),
    "value_position": ("inside", "outside", "end"),
    "legend_position": ("top", "bottom", "left", "right"),
    "total_position": ("top", "inside"),
    "sort_by": ("value", "label", "custom"),
    "sort_order": ("asc", "desc"),
    "stack_order": STACK_ORDERS,
    "stack_offset": STACK_OFFSETS,
}
_PADDINGS = ("bar_padding", "column_padding", "group_padding", "series_padding")
_COLOR_FIELDS = ("primary", "secondary", "background", "text", "grid")


def merge_config(base: ConfigT, overrides: Mapping[str, Any] | None = None, *, path: str = "") -> ConfigT:
    """Return `base` with `overrides` applied; nested mappings merge into sections.

    Unknown keys and invalid values raise `ChartConfigError` naming the dotted key.
    """

    if overrides is None:
        return base
    if not isinstance(overrides, Mapping):
        raise ChartConfigError(f"config overrides for `{path or 'root'}` must be a mapping")
    known = {f.name for f in fields(base)}  # type: ignore[arg-type]
    changes: dict[str, Any] = {}
    for key, value in overrides.items():
        dotted = f"{path}.{key}" if path else str(key)
        if key not in known:
            raise ChartConfigError(f"Unknown config option: {dotted}")
        current = getattr(base, key)
        if is_dataclass(current):
            changes[key] = merge_config(current, value, path=dotted)
        else:
            changes[key] = _check_value(key, dotted, value)
    return replace(base, **changes)  # type: ignore[type-var]


def _check_value(key: str, dotted: str, value: Any) -> Any:
    if key in _CHOICES and value not in _CHOICES[key]:
        allowed = ", ".join(_CHOICES[key])
        raise ChartConfigError(f"Config option `{dotted}` must be one of: {allowed}")
    if key in _PADDINGS:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= float(value) < 1.0:
            raise ChartConfigError(f"Config option `{dotted}` must be a number in [0, 1)")
        return float(value)
    if key == "color_scheme":
        colors = tuple(value) if isinstance(value, (list, tuple)) else ()
        if not colors or not all(isinstance(c, str) and _HEX_COLOR.match(c) for c in colors):
            raise ChartConfigError(f"Config option `{dotted}` must be a non-empty list of hex colors")
        return colors
    if key in _COLOR_FIELDS and dotted.startswith("theme.colors."):
        if not isinstance(value, str) or not _HEX_COLOR.match(value):
            raise ChartConfigError(f"Config option `{dotted}` must be a hex color (#RRGGBB or #RRGGBBAA)")
    return value


def default_bar_config() -> BarChartConfig:
    return BarChartConfig()


def default_column_config() -> ColumnChartConfig:
    return ColumnChartConfig()


def load_config_overrides(path: str | Path) -> dict[str, dict[str, Any]]:
    """Read per-variant overrides from a TOML file (`[simple]`, `[grouped]`, `[stacked]`)."""

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ChartConfigError(f"invalid chart config {config_path}: {exc}") from exc
    out: dict[str, dict[str, Any]] = {}
    for name, table in raw.items():
        if name not in VARIANTS:
            raise ChartConfigError(f"Unknown chart variant table in {config_path.name}: [{name}]")
        if not isinstance(table, dict):
            raise ChartConfigError(f"`{name}` in {config_path.name} must be a table")
        out[name] = table
    return out
