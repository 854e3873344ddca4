from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from chart_layout.errors import ChartConfigError
from chart_layout.points import DataPoint, Orientation


LABEL_CHAR_WIDTH_PX = 8.0
MAX_VERTICAL_POINTS = 15
WIDE_ASPECT_RATIO = 2.0
MAX_LABEL_LENGTH = 20
DEFAULT_CONTAINER_WIDTH = 400
DEFAULT_CONTAINER_HEIGHT = 300

HORIZONTAL_ROW_PX = 30
VERTICAL_COLUMN_PX = 50
SIZE_MARGIN_PX = 100
MIN_HORIZONTAL_HEIGHT = 300
MAX_HORIZONTAL_HEIGHT = 800
MIN_VERTICAL_WIDTH = 400
MAX_VERTICAL_WIDTH = 1200
FALLBACK_WIDTH = 800
FALLBACK_HEIGHT = 400


@dataclass(frozen=True)
class LabelRotation:
    should_rotate: bool
    rotation: int


def average_label_length(data: Sequence[DataPoint]) -> float:
    if not data:
        return 0.0
    return sum(len(p.display_label) for p in data) / len(data)


def estimated_label_width(data: Sequence[DataPoint], *, char_width_px: float = LABEL_CHAR_WIDTH_PX) -> float:
    return average_label_length(data) * char_width_px


def get_optimal_orientation(
    data: Sequence[DataPoint],
    container_width: float = DEFAULT_CONTAINER_WIDTH,
    container_height: float = DEFAULT_CONTAINER_HEIGHT,
    *,
    char_width_px: float = LABEL_CHAR_WIDTH_PX,
    max_vertical_points: int = MAX_VERTICAL_POINTS,
    wide_aspect_ratio: float = WIDE_ASPECT_RATIO,
) -> Orientation:
    if not data:
        return "vertical"
    # An unmeasured container has no room for vertical labels.
    if container_width <= 0 or container_height <= 0:
        return "horizontal"
    per_item = container_width / len(data)
    if estimated_label_width(data, char_width_px=char_width_px) > per_item or len(data) > max_vertical_points:
        return "horizontal"
    if container_width / container_height > wide_aspect_ratio:
        return "horizontal"
    return "vertical"


def should_use_horizontal(
    data: Sequence[DataPoint],
    *,
    container_width: float = FALLBACK_WIDTH,
    container_height: float = FALLBACK_HEIGHT,
    max_label_length: int = MAX_LABEL_LENGTH,
    max_data_points: int = MAX_VERTICAL_POINTS,
    wide_aspect_ratio: float = WIDE_ASPECT_RATIO,
) -> bool:
    if not data:
        return False
    if container_width <= 0 or container_height <= 0:
        return True
    has_long_labels = any(len(p.display_label) > max_label_length for p in data)
    too_many_points = len(data) > max_data_points
    is_wide = container_width / container_height > wide_aspect_ratio
    return has_long_labels or too_many_points or is_wide


def should_rotate_labels(
    data: Sequence[DataPoint],
    available_width: float,
    *,
    char_width_px: float = LABEL_CHAR_WIDTH_PX,
) -> LabelRotation:
    if not data:
        return LabelRotation(should_rotate=False, rotation=0)
    label_w = estimated_label_width(data, char_width_px=char_width_px)
    per_label = available_width / len(data)
    if label_w <= per_label:
        return LabelRotation(should_rotate=False, rotation=0)
    # A 45 degree label projects onto cos(45) of its length.
    if label_w * math.cos(math.pi / 4.0) <= per_label:
        return LabelRotation(should_rotate=True, rotation=-45)
    return LabelRotation(should_rotate=True, rotation=-90)


def get_recommended_dimensions(
    data: Sequence[DataPoint],
    orientation: Orientation,
    container_width: int | None = None,
    container_height: int | None = None,
) -> tuple[int, int]:
    count = len(data)
    if orientation == "horizontal":
        height = max(MIN_HORIZONTAL_HEIGHT, count * HORIZONTAL_ROW_PX + SIZE_MARGIN_PX)
        return (container_width or FALLBACK_WIDTH, min(height, MAX_HORIZONTAL_HEIGHT))
    if orientation == "vertical":
        width = max(MIN_VERTICAL_WIDTH, count * VERTICAL_COLUMN_PX + SIZE_MARGIN_PX)
        return (min(width, MAX_VERTICAL_WIDTH), container_height or FALLBACK_HEIGHT)
    raise ChartConfigError(f"unsupported orientation: {orientation}")
