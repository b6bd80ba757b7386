"""Read-only view over a snapshot plus the lookup indices rules rely on."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Set, Tuple

from .model import (
    Angle,
    AngleKey,
    Circle,
    Point,
    PointId,
    Snapshot,
    Triangle,
    angle_key,
    get_angle_value,
    triangle_key,
)

logger = logging.getLogger(__name__)


class GeometryGraph:
    """Topology of one diagram and the angle records measured on it.

    Points, adjacency, lines, circles and triangles are shared and never
    mutated.  ``angles`` is the only mutable part: rules change
    ``Angle.value`` through the guard.  Indices are built once, in the
    constructor, and stay valid because the engine never creates or removes
    angles.
    """

    def __init__(
        self,
        points: Sequence[Point],
        adjacency: Mapping[PointId, Set[PointId]],
        lines: Sequence[Sequence[PointId]],
        circles: Sequence[Circle],
        triangles: Sequence[Triangle],
        angles: List[Angle],
    ) -> None:
        self.points = list(points)
        self.adjacency = adjacency
        self.lines = [list(line) for line in lines]
        self.circles = list(circles)
        self.triangles = list(triangles)
        self.angles = angles

        self._angles_by_vertex: Dict[PointId, List[Angle]] = defaultdict(list)
        self._angles_by_key: Dict[AngleKey, Angle] = {}
        self._triangle_index: Dict[Tuple[PointId, PointId, PointId], Triangle] = {}
        self._line_positions: List[Dict[PointId, int]] = []
        self._build_indices()

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, angles: Optional[List[Angle]] = None) -> "GeometryGraph":
        return cls(
            snapshot.points,
            snapshot.adjacency,
            snapshot.lines,
            snapshot.circles,
            snapshot.triangles,
            snapshot.angles if angles is None else angles,
        )

    def with_cloned_angles(self) -> "GeometryGraph":
        """Return a graph sharing this topology over copies of the angles."""

        clones = [replace(angle) for angle in self.angles]
        return GeometryGraph(
            self.points,
            self.adjacency,
            self.lines,
            self.circles,
            self.triangles,
            clones,
        )

    def _build_indices(self) -> None:
        for angle in self.angles:
            self._angles_by_vertex[angle.vertex].append(angle)
            key = angle.key
            if key in self._angles_by_key:
                logger.warning(
                    "Duplicate angle record for %s (%s and %s); keeping the first",
                    angle.name,
                    self._angles_by_key[key].id,
                    angle.id,
                )
                continue
            self._angles_by_key[key] = angle
        for triangle in self.triangles:
            if len(triangle) != 3:
                logger.warning("Ignoring malformed triangle %s", sorted(triangle))
                continue
            self._triangle_index[triangle_key(*triangle)] = triangle
        self._line_positions = [
            {point: idx for idx, point in enumerate(line)} for line in self.lines
        ]
        logger.debug(
            "Indexed %d angles over %d vertices and %d triangles",
            len(self.angles),
            len(self._angles_by_vertex),
            len(self._triangle_index),
        )

    # -- lookups -----------------------------------------------------------

    def angles_at(self, vertex: PointId) -> List[Angle]:
        return self._angles_by_vertex.get(vertex, [])

    def find_angle(self, vertex: PointId, n1: PointId, n2: PointId) -> Optional[Angle]:
        return self._angles_by_key.get(angle_key(vertex, n1, n2))

    def triangle(self, p1: PointId, p2: PointId, p3: PointId) -> Optional[Triangle]:
        return self._triangle_index.get(triangle_key(p1, p2, p3))

    def triangle_angles(self, triangle: Triangle) -> Optional[Tuple[Angle, Angle, Angle]]:
        """Return the interior angles of ``triangle`` or ``None`` if one is missing."""

        a, b, c = sorted(triangle)
        first = self.find_angle(a, b, c)
        second = self.find_angle(b, a, c)
        third = self.find_angle(c, a, b)
        if first is None or second is None or third is None:
            return None
        return first, second, third

    def neighbors(self, point: PointId) -> Set[PointId]:
        return self.adjacency.get(point, set())

    def is_adjacent(self, a: PointId, b: PointId) -> bool:
        return b in self.neighbors(a) or a in self.neighbors(b)

    def has_edges(self, p1: PointId, p2: PointId, p3: PointId) -> bool:
        return self.is_adjacent(p1, p2) and self.is_adjacent(p1, p3) and self.is_adjacent(p2, p3)

    def iter_lines_with(self, *points: PointId) -> Iterator[Tuple[List[PointId], Dict[PointId, int]]]:
        """Yield ``(line, positions)`` for every line containing all ``points``."""

        for line, positions in zip(self.lines, self._line_positions):
            if all(point in positions for point in points):
                yield line, positions

    def line_positions(self, *points: PointId) -> Optional[Dict[PointId, int]]:
        """Return the position map of the first line containing all ``points``."""

        for _, positions in self.iter_lines_with(*points):
            return positions
        return None

    def label_groups(self) -> Dict[str, List[Angle]]:
        groups: Dict[str, List[Angle]] = {}
        for angle in self.angles:
            label = angle.clean_label
            if label is not None:
                groups.setdefault(label, []).append(angle)
        return groups

    def point_ids(self) -> List[PointId]:
        return [point.id for point in self.points]

    # -- summaries ---------------------------------------------------------

    def unknown_angles(self) -> List[Angle]:
        return [angle for angle in self.angles if get_angle_value(angle) is None]

    def solved_count(self) -> int:
        return sum(1 for angle in self.angles if get_angle_value(angle) is not None)


__all__ = ["GeometryGraph"]
