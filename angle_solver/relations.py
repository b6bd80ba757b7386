"""Topological relations between angle records.

Everything here answers questions from adjacency, line order and shared rays
alone.  A line is an ordered list of collinear points, so "between" and
"same side" reduce to comparing positions in that list.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple

from .graph import GeometryGraph
from .logging_utils import apply_debug_logging
from .model import Angle, PointId

logger = logging.getLogger(__name__)


def shared_ray(a: Angle, b: Angle) -> Optional[Tuple[PointId, PointId, PointId]]:
    """Return ``(common, other_a, other_b)`` when the angles share exactly one ray."""

    if a.vertex != b.vertex:
        return None
    common = set(a.rays) & set(b.rays)
    if len(common) != 1:
        return None
    (ray,) = common
    other_a = a.other_ray(ray)
    other_b = b.other_ray(ray)
    if other_a is None or other_b is None or other_a == other_b:
        return None
    return ray, other_a, other_b


def shares_edge(a: Angle, b: Angle) -> bool:
    """Same vertex and exactly one common ray, whatever the collinearity."""

    if a is b:
        return False
    return shared_ray(a, b) is not None


def has_disjoint_rays(a: Angle, b: Angle) -> bool:
    return a.vertex == b.vertex and not set(a.rays) & set(b.rays)


def _same_side(positions, pivot: PointId, p1: PointId, p2: PointId) -> bool:
    pivot_idx = positions[pivot]
    i1 = positions[p1]
    i2 = positions[p2]
    return (i1 < pivot_idx and i2 < pivot_idx) or (i1 > pivot_idx and i2 > pivot_idx)


def _opposite_sides(positions, pivot: PointId, p1: PointId, p2: PointId) -> bool:
    pivot_idx = positions[pivot]
    i1 = positions[p1]
    i2 = positions[p2]
    return (i1 < pivot_idx < i2) or (i2 < pivot_idx < i1)


def is_linear_pair(graph: GeometryGraph, a: Angle, b: Angle) -> bool:
    """True when the non-shared rays run in opposite directions along a line.

    Such a pair sums to 180°.  Only the first line holding the vertex and both
    non-shared ray points is consulted.
    """

    shape = shared_ray(a, b)
    if shape is None:
        return False
    _, other_a, other_b = shape
    positions = graph.line_positions(a.vertex, other_a, other_b)
    if positions is None:
        return False
    return _opposite_sides(positions, a.vertex, other_a, other_b)


def is_overlapping(graph: GeometryGraph, a: Angle, b: Angle) -> bool:
    """True when two records with one shared ray denote the same angle.

    The first line holding both non-shared points decides.  If the vertex is
    on it, the non-shared points must sit on the same side of the vertex.
    Otherwise the shared ray's point must be on it too, and the non-shared
    points must sit on the same side of that point.  Overlapping angles are
    forced equal, never summed.
    """

    shape = shared_ray(a, b)
    if shape is None:
        return False
    common, other_a, other_b = shape
    for _, positions in graph.iter_lines_with(other_a, other_b):
        if a.vertex in positions:
            return _same_side(positions, a.vertex, other_a, other_b)
        if common in positions:
            return _same_side(positions, common, other_a, other_b)
    return False


def is_same_ray(graph: GeometryGraph, vertex: PointId, p1: PointId, p2: PointId) -> bool:
    """True when ``vertex->p1`` and ``vertex->p2`` point the same way."""

    if p1 == p2:
        return True
    for _, positions in graph.iter_lines_with(vertex, p1, p2):
        if _same_side(positions, vertex, p1, p2):
            return True
    return False


def same_rays(graph: GeometryGraph, a: Angle, b: Angle) -> bool:
    """True when both records at one vertex span the same pair of directions."""

    if a.vertex != b.vertex:
        return False
    a1, a2 = a.rays
    b1, b2 = b.rays
    v = a.vertex
    return (is_same_ray(graph, v, a1, b1) and is_same_ray(graph, v, a2, b2)) or (
        is_same_ray(graph, v, a1, b2) and is_same_ray(graph, v, a2, b1)
    )


def are_collinear(graph: GeometryGraph, *points: PointId) -> bool:
    return graph.line_positions(*points) is not None


def is_ray_between(graph: GeometryGraph, ray: PointId, extreme1: PointId, extreme2: PointId) -> bool:
    """True when ``ray`` lies strictly between the two extremes on a line."""

    if ray == extreme1 or ray == extreme2:
        return False
    positions = graph.line_positions(extreme1, extreme2, ray)
    if positions is None:
        return False
    low, high = sorted((positions[extreme1], positions[extreme2]))
    return low < positions[ray] < high


def is_opposite_ray(graph: GeometryGraph, vertex: PointId, p1: PointId, p2: PointId) -> bool:
    """True when ``p1`` and ``p2`` lie on a line through ``vertex`` on opposite sides."""

    for _, positions in graph.iter_lines_with(vertex, p1, p2):
        if _opposite_sides(positions, vertex, p1, p2):
            return True
    return False


def find_angles_in_sector(
    graph: GeometryGraph, vertex: PointId, line_n1: PointId, line_n2: PointId
) -> List[Angle]:
    """Return the angles at ``vertex`` that partition the sector ``line_n1``..``line_n2``.

    Boundary angles touch one of the two extreme rays; interior angles join two
    points that boundary angles reach.  The angle spanning both extremes is
    the straight angle itself and is left out.
    """

    extremes = {line_n1, line_n2}
    result: List[Angle] = []
    for angle in graph.angles_at(vertex):
        if set(angle.rays) == extremes:
            continue
        if extremes & set(angle.rays):
            result.append(angle)

    interior: Set[PointId] = set()
    for boundary in result:
        interior.update(ray for ray in boundary.rays if ray not in extremes)

    taken = {id(angle) for angle in result}
    for angle in graph.angles_at(vertex):
        if id(angle) in taken:
            continue
        if angle.rays[0] in interior and angle.rays[1] in interior:
            result.append(angle)
    return result


def line_neighbor_pairs(graph: GeometryGraph, point: PointId, line: List[PointId]) -> List[Tuple[PointId, PointId]]:
    """Consecutive pairs of ``point``'s neighbours on ``line`` that straddle it."""

    positions = {p: idx for idx, p in enumerate(line)}
    if point not in positions:
        return []
    on_line = sorted(
        (n for n in graph.neighbors(point) if n in positions),
        key=lambda n: positions[n],
    )
    pairs: List[Tuple[PointId, PointId]] = []
    for first, second in zip(on_line, on_line[1:]):
        if positions[first] < positions[point] < positions[second]:
            pairs.append((first, second))
    return pairs


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "shared_ray",
    "shares_edge",
    "has_disjoint_rays",
    "is_linear_pair",
    "is_overlapping",
    "is_same_ray",
    "same_rays",
    "are_collinear",
    "is_ray_between",
    "is_opposite_ray",
    "find_angles_in_sector",
    "line_neighbor_pairs",
]
