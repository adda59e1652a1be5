from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional

from .grid import Coordinate, GameGrid


# Exploration order fixes which of several shortest paths is returned:
# right, left, down, up.
NEIGHBOR_OFFSETS = ((0, 1), (0, -1), (1, 0), (-1, 0))


@dataclass
class PathResult:
    path: List[Coordinate] = field(default_factory=list)
    found: bool = False

    @property
    def length(self) -> int:
        """Number of steps; -1 when no path exists."""
        return len(self.path) - 1 if self.found else -1


def _neighbors(grid: GameGrid, coord: Coordinate) -> List[Coordinate]:
    row, col = coord
    out: List[Coordinate] = []
    for dr, dc in NEIGHBOR_OFFSETS:
        r, c = row + dr, col + dc
        if grid.is_inside(r, c):
            out.append((r, c))
    return out


def find_path(grid: GameGrid, start: Coordinate, end: Coordinate) -> PathResult:
    """Breadth-first search from ``start`` to ``end`` through empty cells.

    ``start`` is the BFS root even though it holds the marker being moved.
    Returns one shortest path, start and end inclusive. ``start == end``
    yields a single-cell path.
    """
    start = (int(start[0]), int(start[1]))
    end = (int(end[0]), int(end[1]))
    if not grid.is_within_bounds(start) or not grid.is_within_bounds(end):
        return PathResult()

    parents: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    queue: Deque[Coordinate] = deque([start])
    while queue:
        current = queue.popleft()
        if current == end:
            path: List[Coordinate] = []
            node: Optional[Coordinate] = current
            while node is not None:
                path.append(node)
                node = parents[node]
            path.reverse()
            return PathResult(path=path, found=True)
        for nxt in _neighbors(grid, current):
            if nxt in parents or not grid.is_empty(nxt):
                continue
            parents[nxt] = current
            queue.append(nxt)
    return PathResult()


def is_movable(grid: GameGrid, coord: Coordinate) -> bool:
    """True if at least one orthogonal neighbour of ``coord`` is empty."""
    return any(grid.is_empty(n) for n in _neighbors(grid, coord))


def reachable_cells(grid: GameGrid, start: Coordinate) -> List[Coordinate]:
    """All empty cells connected to ``start`` by a corridor, in BFS order."""
    seen = {start}
    queue: Deque[Coordinate] = deque([start])
    out: List[Coordinate] = []
    while queue:
        current = queue.popleft()
        for nxt in _neighbors(grid, current):
            if nxt in seen or not grid.is_empty(nxt):
                continue
            seen.add(nxt)
            out.append(nxt)
            queue.append(nxt)
    return out
