from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal, TypeAlias


Orientation = Literal["horizontal", "vertical"]
XValue: TypeAlias = str | int | float


@dataclass(frozen=True)
class DataPoint:
    x: XValue
    y: float
    label: str | None = None
    id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        """Grouping and lookup key for the category axis."""
        return str(self.x)

    @property
    def display_label(self) -> str:
        return self.label or str(self.x)

    def with_metadata(self, **extra: Any) -> "DataPoint":
        return replace(self, metadata={**self.metadata, **extra})


@dataclass(frozen=True)
class Series:
    id: str
    label: str
    data: tuple[DataPoint, ...] = ()
    color: str | None = None
    visible: bool | None = True

    def __post_init__(self) -> None:
        if not isinstance(self.data, tuple):
            object.__setattr__(self, "data", tuple(self.data))

    @property
    def is_visible(self) -> bool:
        # Unset visibility counts as visible.
        return self.visible is not False


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("Rect width/height must be >= 0")
