from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple


class InvalidOccupancyError(ValueError):
    """Occupancy data that does not match its declared region."""


class CellState(Enum):
    EMPTY = 0
    USED = 1
    COVERED = 2


def _norm_token(value: str) -> str:
    return str(value).strip().lower().replace("_", "").replace("-", "").replace(" ", "")


class OverlapPolicy(Enum):
    ALLOWED = "Allowed"
    NOT_ALLOWED = "NotAllowed"

    @classmethod
    def parse(cls, value) -> "OverlapPolicy":
        if isinstance(value, cls):
            return value
        token = _norm_token(value)
        for member in cls:
            if token in (_norm_token(member.value), _norm_token(member.name)):
                return member
        raise ValueError(f"unknown overlap policy: {value!r}")


class ColliderTarget(Enum):
    USE_HOST_OBJECT = "UseHostObject"
    CREATE_CHILD_CONTAINER = "CreateChildContainer"

    @classmethod
    def parse(cls, value) -> "ColliderTarget":
        if isinstance(value, cls):
            return value
        token = _norm_token(value)
        aliases = {
            "host": cls.USE_HOST_OBJECT,
            "thisgameobject": cls.USE_HOST_OBJECT,
            "child": cls.CREATE_CHILD_CONTAINER,
        }
        if token in aliases:
            return aliases[token]
        for member in cls:
            if token in (_norm_token(member.value), _norm_token(member.name)):
                return member
        raise ValueError(f"unknown collider target: {value!r}")


@dataclass(frozen=True)
class Rect:
    """Grid-local rectangle in cell units; (x, y) is the minimum corner."""

    x: int
    y: int
    w: int
    h: int

    def __post_init__(self):
        if self.w < 1 or self.h < 1:
            raise ValueError(f"degenerate rect {self.w}x{self.h}")

    @property
    def area(self) -> int:
        return self.w * self.h

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h

    def cells(self) -> Iterator[Tuple[int, int]]:
        for x in range(self.x, self.x + self.w):
            for y in range(self.y, self.y + self.h):
                yield x, y


@dataclass(frozen=True)
class Bounds:
    x: int
    y: int
    w: int
    h: int

    @property
    def area(self) -> int:
        return self.w * self.h

    def label(self) -> str:
        return f"{self.w} × {self.h} cells @ ({self.x},{self.y})"


@dataclass(frozen=True)
class BoxShape:
    offset_x: float
    offset_y: float
    size_x: float
    size_y: float

    @classmethod
    def from_rect(cls, rect: Rect, bounds: Bounds, cell_size: float = 1.0) -> "BoxShape":
        return cls(
            offset_x=(bounds.x + rect.x + rect.w / 2.0) * cell_size,
            offset_y=(bounds.y + rect.y + rect.h / 2.0) * cell_size,
            size_x=rect.w * cell_size,
            size_y=rect.h * cell_size,
        )

    def to_tuple(self):
        return (self.offset_x, self.offset_y, self.size_x, self.size_y)
