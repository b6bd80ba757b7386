"""Core data structures handed to the angle solver by the diagram editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Set, Tuple, Union

PointId = str
Triangle = FrozenSet[PointId]
RayPair = Tuple[PointId, PointId]
AngleKey = Tuple[PointId, RayPair]
AngleValue = Union[float, str, None]

STRAIGHT_ANGLE = 180.0
RIGHT_ANGLE = 90.0
FULL_ANGLE = 360.0
UNKNOWN_SENTINEL = "?"


@dataclass
class Point:
    id: PointId


@dataclass
class Circle:
    """Equal-radius proxy: every point in ``points`` is equidistant from ``center``."""

    center: PointId
    points: List[PointId] = field(default_factory=list)


@dataclass
class Angle:
    """Angle at ``vertex`` between the rays towards ``rays[0]`` and ``rays[1]``.

    ``rays`` is unordered.  ``constraint_value`` marks a user lock: no rule may
    change ``value`` while it is set.  Rendering handles never live here; the
    editor re-attaches visuals by ``id``.
    """

    id: str
    vertex: PointId
    rays: RayPair
    value: AngleValue = None
    label: Optional[str] = None
    constraint_value: Optional[float] = None
    is_subdivision_result: bool = False
    name: Optional[str] = None

    def __post_init__(self) -> None:
        self.rays = (self.rays[0], self.rays[1])
        if not self.name:
            self.name = f"∠{self.rays[0]}{self.vertex}{self.rays[1]}"

    @property
    def key(self) -> AngleKey:
        return angle_key(self.vertex, self.rays[0], self.rays[1])

    @property
    def clean_label(self) -> Optional[str]:
        if self.label is None:
            return None
        stripped = self.label.strip()
        return stripped or None

    @property
    def is_locked(self) -> bool:
        return self.constraint_value is not None

    def has_ray(self, point: PointId) -> bool:
        return point in self.rays

    def other_ray(self, point: PointId) -> Optional[PointId]:
        if self.rays[0] == point:
            return self.rays[1]
        if self.rays[1] == point:
            return self.rays[0]
        return None

    def __repr__(self) -> str:  # pragma: no cover - debug formatting
        value = get_angle_value(self)
        shown = UNKNOWN_SENTINEL if value is None else f"{value:g}"
        lock = "!" if self.is_locked else ""
        return f"{self.name}={shown}{lock}"


@dataclass
class Snapshot:
    """Everything the editor hands over for one solve call."""

    points: List[Point] = field(default_factory=list)
    adjacency: Dict[PointId, Set[PointId]] = field(default_factory=dict)
    lines: List[List[PointId]] = field(default_factory=list)
    circles: List[Circle] = field(default_factory=list)
    triangles: List[Triangle] = field(default_factory=list)
    angles: List[Angle] = field(default_factory=list)

    def point_ids(self) -> Set[PointId]:
        return {point.id for point in self.points}


def angle_key(vertex: PointId, ray1: PointId, ray2: PointId) -> AngleKey:
    """Return the canonical ``(vertex, sorted rays)`` key for an angle."""

    if ray2 < ray1:
        ray1, ray2 = ray2, ray1
    return vertex, (ray1, ray2)


def triangle_key(p1: PointId, p2: PointId, p3: PointId) -> Tuple[PointId, PointId, PointId]:
    a, b, c = sorted((p1, p2, p3))
    return a, b, c


def make_triangle(points: Sequence[PointId]) -> Triangle:
    return frozenset(points)


def get_angle_value(angle: Angle) -> Optional[float]:
    """Return the numeric value of ``angle`` or ``None`` when it is unknown.

    ``None``, the ``"?"`` sentinel and blank strings all count as unknown.
    """

    value = angle.value
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text or text == UNKNOWN_SENTINEL:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return float(value)


def is_known(angle: Angle) -> bool:
    return get_angle_value(angle) is not None


__all__ = [
    "PointId",
    "Triangle",
    "RayPair",
    "AngleKey",
    "AngleValue",
    "STRAIGHT_ANGLE",
    "RIGHT_ANGLE",
    "FULL_ANGLE",
    "UNKNOWN_SENTINEL",
    "Point",
    "Circle",
    "Angle",
    "Snapshot",
    "angle_key",
    "triangle_key",
    "make_triangle",
    "get_angle_value",
    "is_known",
]
