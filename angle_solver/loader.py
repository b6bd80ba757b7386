"""Build snapshots from JSON data written by the diagram editor.

Two shapes are accepted.  The engine shape names everything the solver
needs explicitly (``adjacentPoints``, ``rayPair``, ``centerPointId``...).
The editor export shape carries drawing data instead: segments are ``edges``,
angles are keyed by their vertex, circles list their centre under ``id`` or
``centerPoint``.  For that shape adjacency is rebuilt from the edges and
triangles are every pairwise-joined, non-collinear point triple.
"""

from __future__ import annotations

import json
import logging
from itertools import combinations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from .model import Angle, AngleValue, Circle, Point, PointId, Snapshot, Triangle, make_triangle

logger = logging.getLogger(__name__)


class SnapshotFormatError(ValueError):
    pass


def _is_engine_shape(data: Mapping[str, Any]) -> bool:
    if "adjacentPoints" in data:
        return True
    angles = data.get("angles") or []
    return any(isinstance(angle, Mapping) and "rayPair" in angle for angle in angles)


def _point_ids(raw_points: Iterable[Any]) -> List[Point]:
    points: List[Point] = []
    for raw in raw_points:
        if isinstance(raw, Mapping):
            point_id = raw.get("id") or raw.get("name")
        else:
            point_id = raw
        if point_id is None:
            raise SnapshotFormatError(f"point without id: {raw!r}")
        points.append(Point(str(point_id)))
    return points


def _value(raw: Any) -> AngleValue:
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, str):
        return raw
    raise SnapshotFormatError(f"angle value must be a number or string, got {raw!r}")


def _lock(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise SnapshotFormatError(f"constraint value must be numeric, got {raw!r}") from exc


def _lines(raw_lines: Iterable[Any]) -> List[List[PointId]]:
    lines: List[List[PointId]] = []
    for raw in raw_lines:
        if isinstance(raw, Mapping):
            raw = raw.get("points") or []
        lines.append([str(p) for p in raw])
    return lines


def _circle(raw: Mapping[str, Any]) -> Circle:
    center = (
        raw.get("centerPointId")
        or raw.get("centerPoint")
        or raw.get("point1")
        or raw.get("id")
    )
    if center is None:
        raise SnapshotFormatError(f"circle without a centre: {raw!r}")
    members: List[PointId] = []
    for key in ("pointsOnLine", "p", "points"):
        for point in raw.get(key) or []:
            if str(point) not in members:
                members.append(str(point))
    for key in ("radiusPointId", "point2"):
        point = raw.get(key)
        if point is not None and str(point) not in members:
            members.append(str(point))
    return Circle(center=str(center), points=members)


def _adjacency_from_edges(points: Sequence[Point], raw_edges: Iterable[Any]) -> Dict[PointId, Set[PointId]]:
    adjacency: Dict[PointId, Set[PointId]] = {point.id: set() for point in points}
    for raw in raw_edges:
        if isinstance(raw, Mapping):
            pair = raw.get("p") or raw.get("points")
            if not pair and raw.get("point1") and raw.get("point2"):
                pair = [raw["point1"], raw["point2"]]
        else:
            pair = raw
        if not pair or len(pair) != 2:
            logger.warning("Skipping malformed edge %r", raw)
            continue
        a, b = str(pair[0]), str(pair[1])
        adjacency.setdefault(a, set()).add(b)
        adjacency.setdefault(b, set()).add(a)
    return adjacency


def enumerate_triangles(
    adjacency: Mapping[PointId, Set[PointId]], lines: Sequence[Sequence[PointId]]
) -> List[Triangle]:
    """Every triple of pairwise-joined points that does not lie on one line."""

    def joined(a: PointId, b: PointId) -> bool:
        return b in adjacency.get(a, ()) or a in adjacency.get(b, ())

    triangles: List[Triangle] = []
    for p1, p2, p3 in combinations(list(adjacency), 3):
        if not (joined(p1, p2) and joined(p1, p3) and joined(p2, p3)):
            continue
        if any(p1 in line and p2 in line and p3 in line for line in lines):
            continue
        triangles.append(make_triangle((p1, p2, p3)))
    return triangles


def _engine_snapshot(data: Mapping[str, Any]) -> Snapshot:
    points = _point_ids(data.get("points") or [])
    adjacency: Dict[PointId, Set[PointId]] = {}
    for point, neighbours in (data.get("adjacentPoints") or {}).items():
        adjacency[str(point)] = {str(n) for n in neighbours}
    lines = _lines(data.get("lines") or [])
    circles = [_circle(raw) for raw in data.get("circles") or []]
    if "triangles" in data:
        triangles = [make_triangle([str(p) for p in raw]) for raw in data.get("triangles") or []]
    else:
        triangles = enumerate_triangles(adjacency, lines)

    angles: List[Angle] = []
    for idx, raw in enumerate(data.get("angles") or []):
        rays = raw.get("rayPair") or raw.get("neighborPoints") or []
        if len(rays) != 2:
            raise SnapshotFormatError(f"angle #{idx} needs exactly two rays, got {rays!r}")
        if raw.get("vertex") is None:
            raise SnapshotFormatError(f"angle #{idx} has no vertex")
        vertex = str(raw["vertex"])
        angles.append(
            Angle(
                id=str(raw.get("id") or f"{rays[0]}{vertex}{rays[1]}"),
                vertex=vertex,
                rays=(str(rays[0]), str(rays[1])),
                value=_value(raw.get("value")),
                label=raw.get("label") or None,
                constraint_value=_lock(raw.get("constraintValue")),
                name=raw.get("name"),
            )
        )
    return Snapshot(points, adjacency, lines, circles, triangles, angles)


def _editor_snapshot(data: Mapping[str, Any]) -> Snapshot:
    points = _point_ids(data.get("points") or [])
    adjacency = _adjacency_from_edges(points, data.get("edges") or [])
    lines = _lines(data.get("lines") or [])
    circles = [_circle(raw) for raw in data.get("circles") or []]
    if data.get("triangles"):
        triangles = [make_triangle([str(p) for p in raw]) for raw in data["triangles"]]
    else:
        triangles = enumerate_triangles(adjacency, lines)

    angles: List[Angle] = []
    seen: Set[str] = set()
    for idx, raw in enumerate(data.get("angles") or []):
        vertex = raw.get("pointId") or raw.get("vertexId") or raw.get("id")
        rays = raw.get("p") or raw.get("sidepoints") or raw.get("sidePoints")
        if not rays and raw.get("point1Id") and raw.get("point2Id"):
            rays = [raw["point1Id"], raw["point2Id"]]
        if vertex is None or not rays or len(rays) != 2:
            raise SnapshotFormatError(f"angle #{idx} needs a vertex and two side points: {raw!r}")
        vertex = str(vertex)
        first, second = str(rays[0]), str(rays[1])
        angle_id = f"{first}{vertex}{second}"
        if angle_id in seen:
            angle_id = f"{angle_id}#{idx}"
        seen.add(angle_id)
        value = raw.get("v", raw.get("value"))
        label = raw.get("l", raw.get("label"))
        angles.append(
            Angle(
                id=angle_id,
                vertex=vertex,
                rays=(first, second),
                value=_value(value),
                label=label or None,
            )
        )
    return Snapshot(points, adjacency, lines, circles, triangles, angles)


def snapshot_from_dict(data: Mapping[str, Any]) -> Snapshot:
    """Build a :class:`Snapshot` from either JSON shape."""

    if not isinstance(data, Mapping):
        raise SnapshotFormatError(f"snapshot must be a JSON object, got {type(data).__name__}")
    if _is_engine_shape(data):
        snapshot = _engine_snapshot(data)
    else:
        snapshot = _editor_snapshot(data)
    logger.debug(
        "Loaded snapshot: %d points, %d angles, %d triangles",
        len(snapshot.points),
        len(snapshot.angles),
        len(snapshot.triangles),
    )
    return snapshot


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    with open(path, encoding="utf-8") as fin:
        data = json.load(fin)
    logger.info("Loaded diagram from %s", path)
    return snapshot_from_dict(data)


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    """Engine-shape JSON for ``snapshot``."""

    return {
        "points": [{"id": point.id} for point in snapshot.points],
        "adjacentPoints": {point: sorted(neighbours) for point, neighbours in snapshot.adjacency.items()},
        "lines": [list(line) for line in snapshot.lines],
        "circles": [
            {"centerPointId": circle.center, "pointsOnLine": list(circle.points)} for circle in snapshot.circles
        ],
        "triangles": [sorted(triangle) for triangle in snapshot.triangles],
        "angles": [
            {
                "id": angle.id,
                "vertex": angle.vertex,
                "rayPair": list(angle.rays),
                "value": angle.value,
                "label": angle.label,
                "constraintValue": angle.constraint_value,
                "name": angle.name,
            }
            for angle in snapshot.angles
        ],
    }


__all__ = [
    "SnapshotFormatError",
    "enumerate_triangles",
    "load_snapshot",
    "snapshot_from_dict",
    "snapshot_to_dict",
]
