# tilemap.py: occupancy sources (flat tile blocks, sparse cells, text maps)
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from config import CFG
from models import Bounds, InvalidOccupancyError


class OccupancySource:
    """A rectangular tile region plus a row-major block of tiles.

    ``tiles`` is indexed ``x + y * width``; any truthy entry is an occupant,
    matching how a tile block reports ``None`` for empty cells.
    """

    def __init__(self, bounds: Bounds, tiles: Sequence[Any]):
        if bounds.w < 0 or bounds.h < 0:
            raise InvalidOccupancyError(f"negative region size {bounds.w}x{bounds.h}")
        if len(tiles) != bounds.w * bounds.h:
            raise InvalidOccupancyError(
                f"region is {bounds.w}x{bounds.h} ({bounds.area} cells) "
                f"but {len(tiles)} tiles were supplied"
            )
        self.bounds = bounds
        self._occupied: List[bool] = [bool(t) for t in tiles]

    @property
    def width(self) -> int:
        return self.bounds.w

    @property
    def height(self) -> int:
        return self.bounds.h

    @property
    def is_empty(self) -> bool:
        return self.bounds.area == 0

    @property
    def occupied_count(self) -> int:
        return sum(self._occupied)

    def occupied(self, x: int, y: int) -> bool:
        return self._occupied[x + y * self.bounds.w]

    def occupied_cells(self) -> List[Tuple[int, int]]:
        w = self.bounds.w
        return [(i % w, i // w) for i, flag in enumerate(self._occupied) if flag]

    # ---------- constructors ----------

    @classmethod
    def from_flat(cls, origin: Tuple[int, int], size: Tuple[int, int], tiles: Sequence[Any]) -> "OccupancySource":
        return cls(Bounds(int(origin[0]), int(origin[1]), int(size[0]), int(size[1])), tiles)

    @classmethod
    def from_cells(cls, points: Iterable[Tuple[int, int]]) -> "OccupancySource":
        """Tight bounds around world-space occupied cells."""
        pts = {(int(x), int(y)) for x, y in points}
        if not pts:
            return cls(Bounds(0, 0, 0, 0), [])
        x_min = min(x for x, _ in pts)
        y_min = min(y for _, y in pts)
        w = max(x for x, _ in pts) - x_min + 1
        h = max(y for _, y in pts) - y_min + 1
        tiles = [False] * (w * h)
        for x, y in pts:
            tiles[(x - x_min) + (y - y_min) * w] = True
        return cls(Bounds(x_min, y_min, w, h), tiles)

    @classmethod
    def from_text(
        cls,
        text: str,
        origin: Tuple[int, int] = (0, 0),
        occupied_chars: Optional[str] = None,
    ) -> "OccupancySource":
        """
        Parse an ASCII tile map. The first line is the top row; the last line
        is y = 0, and ``origin`` is the world cell of its first character
        (the bottom-left corner of the text).
        The region is shrunk to the occupied cells, like :meth:`from_cells`.
        """
        chars = set(occupied_chars if occupied_chars is not None else CFG.OCCUPIED_CHARS)
        lines = [ln.rstrip("\r") for ln in (text or "").split("\n")]
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()

        h = len(lines)
        w = max((len(ln) for ln in lines), default=0)
        if w * h > CFG.MAX_CELLS:
            raise InvalidOccupancyError(f"tile map is {w}x{h}, over the {CFG.MAX_CELLS} cell limit")

        ox, oy = int(origin[0]), int(origin[1])
        points: List[Tuple[int, int]] = []
        for row, ln in enumerate(lines):
            y = h - 1 - row
            for x, ch in enumerate(ln):
                if ch in chars:
                    points.append((ox + x, oy + y))
        return cls.from_cells(points)


__all__ = ["OccupancySource"]
