# generator.py: host-facing collider generation over a capability interface
from __future__ import annotations

import time
from contextlib import suppress
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config import CFG
from models import Bounds, BoxShape, ColliderTarget, OverlapPolicy, Rect
from progress import log_event, reset, set_counts, set_done, set_grid, set_policy, set_status, start_timer
from solver.cover import cover_cells
from tilemap import OccupancySource


class ColliderHost(ABC):
    """
    What the generator needs from the surrounding engine: a root object that
    owns the tile map, named child containers, and box colliders on containers.
    """

    @abstractmethod
    def root(self) -> Any: ...

    @abstractmethod
    def find_child(self, name: str) -> Optional[Any]: ...

    @abstractmethod
    def create_child(self, name: str) -> Any: ...

    @abstractmethod
    def destroy(self, container: Any) -> None: ...

    @abstractmethod
    def boxes(self, container: Any) -> List[Any]: ...

    @abstractmethod
    def add_box(self, container: Any, shape: BoxShape) -> Any: ...

    @abstractmethod
    def remove_box(self, container: Any, box: Any) -> None: ...

    @abstractmethod
    def occupancy(self) -> OccupancySource:
        """Current tile region; its bounds origin is the world cell of tile (0, 0)."""


@dataclass
class Container:
    name: str
    boxes: List[BoxShape] = field(default_factory=list)
    children: Dict[str, "Container"] = field(default_factory=dict)
    parent: Optional["Container"] = None


class MemoryHost(ColliderHost):
    """In-process host: containers are plain objects, boxes are BoxShape values."""

    def __init__(self, source: Optional[OccupancySource] = None, name: str = "Tilemap"):
        self._root = Container(name)
        self.source = source if source is not None else OccupancySource.from_cells([])

    def root(self) -> Container:
        return self._root

    def find_child(self, name: str) -> Optional[Container]:
        return self._root.children.get(name)

    def create_child(self, name: str) -> Container:
        child = Container(name, parent=self._root)
        # A host may hold several same-named children; the latest one wins lookup.
        self._root.children[name] = child
        return child

    def destroy(self, container: Container) -> None:
        parent = container.parent
        if parent is None:
            raise ValueError("cannot destroy the host root")
        if parent.children.get(container.name) is container:
            del parent.children[container.name]
        container.parent = None

    def boxes(self, container: Container) -> List[BoxShape]:
        return list(container.boxes)

    def add_box(self, container: Container, shape: BoxShape) -> BoxShape:
        container.boxes.append(shape)
        return shape

    def remove_box(self, container: Container, box: BoxShape) -> None:
        container.boxes.remove(box)

    def occupancy(self) -> OccupancySource:
        return self.source

    def all_boxes(self) -> List[BoxShape]:
        out = list(self._root.boxes)
        for child in self._root.children.values():
            out.extend(child.boxes)
        return out


@dataclass
class GenerateResult:
    bounds: Bounds
    rects: List[Rect]
    shapes: List[BoxShape]
    container: Any
    used_cells: int = 0
    elapsed_sec: float = 0.0

    @property
    def ok(self) -> bool:
        return len(self.rects) > 0


class ColliderGenerator:
    def __init__(
        self,
        host: ColliderHost,
        overlap: Any = None,
        target: Any = None,
        container_name: Optional[str] = None,
        cell_size: Optional[float] = None,
    ):
        self.host = host
        self.overlap = OverlapPolicy.parse(overlap if overlap is not None else CFG.OVERLAP)
        self.target = ColliderTarget.parse(target if target is not None else CFG.TARGET)
        self.container_name = container_name or CFG.CONTAINER_NAME
        self.cell_size = float(cell_size if cell_size is not None else CFG.CELL_SIZE)

    def remove_all(self) -> int:
        """Drop boxes on the host root and the generated child container. Returns boxes removed."""
        root = self.host.root()
        removed = 0
        for box in self.host.boxes(root):
            self.host.remove_box(root, box)
            removed += 1

        child = self.host.find_child(self.container_name)
        if child is not None:
            removed += len(self.host.boxes(child))
            self.host.destroy(child)
        if removed:
            log_event("Colliders removed", count=removed)
        return removed

    def _collider_target(self) -> Any:
        if self.target is ColliderTarget.USE_HOST_OBJECT:
            return self.host.root()
        return self.host.create_child(self.container_name)

    def _discard(self, container: Any, boxes: List[Any]) -> None:
        """Best-effort removal of boxes added by a run that failed partway."""
        for box in reversed(boxes):
            with suppress(Exception):
                self.host.remove_box(container, box)
        if boxes:
            log_event("Partial colliders discarded", count=len(boxes))

    def generate(self) -> GenerateResult:
        reset()
        start_timer()
        set_status("Generating")
        set_policy(self.overlap, self.target)
        t0 = time.time()
        container = None
        added: List[Any] = []
        shapes: List[BoxShape] = []

        try:
            self.remove_all()
            container = self._collider_target()

            source = self.host.occupancy()
            bounds = source.bounds
            set_grid(bounds.label())

            if source.is_empty or source.occupied_count == 0:
                set_counts(0, 0)
                set_done(True, reason="no tiles")
                return GenerateResult(bounds, [], [], container, 0, time.time() - t0)

            used = source.occupied_count
            rects = cover_cells(source, self.overlap)

            for rect in rects:
                shape = BoxShape.from_rect(rect, bounds, self.cell_size)
                added.append(self.host.add_box(container, shape))
                shapes.append(shape)
        except Exception as e:
            set_done(False, reason=f"{type(e).__name__}: {e}")
            self._discard(container, added)
            raise

        set_counts(used, len(rects))
        set_done(True, reason=f"{len(rects)} colliders for {used} tiles")
        return GenerateResult(bounds, rects, shapes, container, used, time.time() - t0)


__all__ = ["ColliderHost", "MemoryHost", "Container", "ColliderGenerator", "GenerateResult"]
