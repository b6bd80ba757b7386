"""Triangle rules: angle sum, isosceles and equilateral triangles, bisectors."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..model import Angle, Circle, PointId, RIGHT_ANGLE, STRAIGHT_ANGLE, get_angle_value
from .base import TheoremContext, pairs

logger = logging.getLogger(__name__)

EQUILATERAL_ANGLE = 60.0
EQUILATERAL_CENTRAL_ANGLE = 120.0
HALF_RIGHT_ANGLE = 45.0


def apply_triangle_angle_sum(ctx: TheoremContext) -> bool:
    """Two known interior angles fix the third."""

    changed = False
    graph = ctx.graph
    for triangle in graph.triangles:
        if len(triangle) != 3:
            continue
        angles = graph.triangle_angles(triangle)
        if angles is None:
            continue
        values = [get_angle_value(angle) for angle in angles]
        unknown = [angle for angle, value in zip(angles, values) if value is None]
        if len(unknown) != 1:
            continue
        known_sum = sum(value for value in values if value is not None)
        remaining = STRAIGHT_ANGLE - known_sum
        if 0 < remaining < STRAIGHT_ANGLE:
            changed |= ctx.write(
                unknown[0],
                remaining,
                f"Triangle sum (180° - {known_sum:g}°)",
                "Triangle Angle Sum",
            )
    return changed


def _is_triangle(ctx: TheoremContext, p1: PointId, p2: PointId, p3: PointId) -> bool:
    return ctx.graph.triangle(p1, p2, p3) is not None or ctx.graph.has_edges(p1, p2, p3)


def _isosceles(ctx: TheoremContext, circle: Circle, p1: PointId, p2: PointId) -> bool:
    graph = ctx.graph
    center = circle.center
    base1 = graph.find_angle(p1, center, p2)
    base2 = graph.find_angle(p2, center, p1)
    if base1 is None or base2 is None:
        return False
    apex = graph.find_angle(center, p1, p2)

    changed = False
    value1 = get_angle_value(base1)
    value2 = get_angle_value(base2)
    apex_value = get_angle_value(apex) if apex is not None else None
    theorem = "Isosceles Triangle"

    if apex_value is not None and value1 is None and value2 is None:
        base = (STRAIGHT_ANGLE - apex_value) / 2
        if 0 < base < STRAIGHT_ANGLE:
            reason = f"Isosceles base from apex {apex_value:g}°"
            changed |= ctx.write(base1, base, reason, theorem)
            changed |= ctx.write(base2, base, reason, theorem)
    elif value1 is not None and value2 is None:
        changed |= ctx.write(base2, value1, f"Isosceles: equal to {base1.name}", theorem)
    elif value2 is not None and value1 is None:
        changed |= ctx.write(base1, value2, f"Isosceles: equal to {base2.name}", theorem)
    elif value1 is not None and value2 is not None and abs(value1 - value2) > ctx.tolerance:
        changed |= ctx.write(base2, value1, f"Corrected: isosceles, equal to {base1.name}", theorem)

    if apex is not None:
        value1 = get_angle_value(base1)
        value2 = get_angle_value(base2)
        if value1 is not None and value2 is not None:
            target = round(STRAIGHT_ANGLE - value1 - value2, ctx.config.value_decimals)
            if ctx.differs(get_angle_value(apex), target):
                changed |= ctx.write(apex, target, f"Isosceles apex (180° - {value1:g}° - {value2:g}°)", theorem)
    return changed


def apply_isosceles_triangles(ctx: TheoremContext) -> bool:
    """Two radii of one circle make an isosceles triangle with equal base angles."""

    changed = False
    for circle in ctx.graph.circles:
        for p1, p2 in pairs(circle.points):
            if not _is_triangle(ctx, circle.center, p1, p2):
                continue
            changed |= _isosceles(ctx, circle, p1, p2)
    return changed


def _bisector_candidates(
    ctx: TheoremContext, apex: Angle, base1: PointId, base2: PointId
) -> List[Tuple[Angle, PointId, PointId]]:
    graph = ctx.graph
    found: List[Tuple[Angle, PointId, PointId]] = []
    for angle in graph.angles_at(apex.vertex):
        if angle is apex:
            continue
        common = set(angle.rays) & set(apex.rays)
        if len(common) != 1:
            continue
        (shared,) = common
        foot = angle.other_ray(shared)
        if foot is None or foot in apex.rays:
            continue
        if graph.is_adjacent(base1, foot) or graph.is_adjacent(base2, foot):
            found.append((angle, foot, shared))
    return found


def _bisected_apex(ctx: TheoremContext, circle: Circle, base1: PointId, base2: PointId) -> bool:
    graph = ctx.graph
    center = circle.center
    apex = graph.find_angle(center, base1, base2)
    if apex is None:
        return False
    candidates = _bisector_candidates(ctx, apex, base1, base2)
    if len(candidates) != 2:
        return False

    (half1, foot1, _), (half2, foot2, _) = candidates
    if foot1 != foot2:
        return False
    foot = foot1

    value1 = get_angle_value(half1)
    value2 = get_angle_value(half2)
    same_label = bool(half1.clean_label) and half1.clean_label == half2.clean_label
    same_value = value1 is not None and value2 is not None and abs(value1 - value2) < ctx.tolerance
    if not (same_label or same_value):
        return False

    changed = False
    if same_label and value1 is not None and value2 is not None and abs(value1 - value2) > ctx.tolerance:
        if half1.is_locked:
            target = value1
        elif half2.is_locked:
            target = value2
        else:
            target = min(value1, value2)
        for half, value in ((half1, value1), (half2, value2)):
            if abs(value - target) > ctx.tolerance:
                changed |= ctx.write(half, target, f"Same label '{half1.clean_label}' bisector half", "Same Label")

        new_apex = target * 2
        apex_value = get_angle_value(apex)
        if apex_value is not None and abs(apex_value - new_apex) > ctx.tolerance:
            changed |= ctx.write(apex, new_apex, f"{half1.name} + {half2.name}", "Angle Addition")
        base_value = (STRAIGHT_ANGLE - new_apex) / 2
        for vertex, other in ((base1, base2), (base2, base1)):
            base = graph.find_angle(vertex, center, other)
            if base is None:
                continue
            current = get_angle_value(base)
            if current is not None and abs(current - base_value) > ctx.tolerance:
                changed |= ctx.write(base, base_value, f"Isosceles base from apex {new_apex:g}°", "Isosceles Triangle")

    for base in (base1, base2):
        right = graph.find_angle(foot, base, center)
        if right is not None and ctx.differs(get_angle_value(right), RIGHT_ANGLE):
            changed |= ctx.write(
                right,
                RIGHT_ANGLE,
                f"Apex bisector of isosceles {center}{base1}{base2} is perpendicular",
                "Isosceles Bisector ⊥",
            )
    return changed


def apply_isosceles_bisector_perpendicular(ctx: TheoremContext) -> bool:
    """The bisector of an isosceles apex meets the base at 90°.

    The apex sits at a circle centre, the two equal sides are radii, and the
    bisector is recognised by its halves sharing a label or a value.
    """

    changed = False
    for circle in ctx.graph.circles:
        for base1, base2 in pairs(circle.points):
            changed |= _bisected_apex(ctx, circle, base1, base2)
    return changed


def apply_right_angle_bisector(ctx: TheoremContext) -> bool:
    """A right angle split by two equal (or blank) halves gives 45° each."""

    changed = False
    graph = ctx.graph
    for angle in graph.angles:
        value = get_angle_value(angle)
        if value is None or abs(value - RIGHT_ANGLE) >= ctx.tolerance:
            continue
        halves = []
        for other in graph.angles_at(angle.vertex):
            if other is angle:
                continue
            common = set(other.rays) & set(angle.rays)
            if len(common) != 1:
                continue
            (shared,) = common
            if other.other_ray(shared) not in angle.rays:
                halves.append(other)
        if len(halves) != 2:
            continue

        half1, half2 = halves
        same_label = bool(half1.clean_label) and half1.clean_label == half2.clean_label
        blank = all(
            get_angle_value(half) is None and not half.clean_label for half in halves
        )
        if not (same_label or blank):
            continue
        for half in halves:
            if ctx.differs(get_angle_value(half), HALF_RIGHT_ANGLE):
                changed |= ctx.write(half, HALF_RIGHT_ANGLE, f"Bisects right angle {angle.name}", "Right Angle Bisector")
    return changed


def _central_angles_equilateral(ctx: TheoremContext, circle: Circle, points: Tuple[PointId, ...]) -> bool:
    graph = ctx.graph
    p1, p2, p3 = points
    centrals: List[Optional[Angle]] = [
        graph.find_angle(circle.center, p1, p2),
        graph.find_angle(circle.center, p2, p3),
        graph.find_angle(circle.center, p3, p1),
    ]
    values: List[float] = []
    for angle in centrals:
        value = get_angle_value(angle) if angle is not None else None
        if value is None:
            return False
        values.append(value)
    if max(values) - min(values) > ctx.tolerance:
        return False
    return all(abs(value - EQUILATERAL_CENTRAL_ANGLE) <= ctx.tolerance for value in values)


def apply_equilateral_triangle(ctx: TheoremContext) -> bool:
    """A triangle inscribed with three equal 120° central angles has 60° angles."""

    changed = False
    graph = ctx.graph
    for triangle in graph.triangles:
        if len(triangle) != 3:
            continue
        points = tuple(sorted(triangle))
        if not any(
            all(p in circle.points for p in points) and _central_angles_equilateral(ctx, circle, points)
            for circle in graph.circles
        ):
            continue
        angles = graph.triangle_angles(triangle)
        if angles is None:
            continue
        for angle in angles:
            if ctx.differs(get_angle_value(angle), EQUILATERAL_ANGLE):
                changed |= ctx.write(angle, EQUILATERAL_ANGLE, "Equilateral triangle", "Equilateral Triangle")
    return changed


__all__ = [
    "apply_triangle_angle_sum",
    "apply_isosceles_triangles",
    "apply_isosceles_bisector_perpendicular",
    "apply_right_angle_bisector",
    "apply_equilateral_triangle",
]
