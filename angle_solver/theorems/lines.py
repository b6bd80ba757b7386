"""Rules for angles along lines and around a single vertex."""

from __future__ import annotations

import logging
from typing import Dict, List

from ..model import Angle, FULL_ANGLE, RIGHT_ANGLE, STRAIGHT_ANGLE, get_angle_value
from ..relations import (
    are_collinear,
    has_disjoint_rays,
    is_ray_between,
    is_linear_pair,
    is_overlapping,
    same_rays,
    shared_ray,
    shares_edge,
)
from .base import TheoremContext, copy_known, pairs

logger = logging.getLogger(__name__)


def _vertex_groups(ctx: TheoremContext) -> Dict[str, List[Angle]]:
    groups: Dict[str, List[Angle]] = {}
    for angle in ctx.graph.angles:
        groups.setdefault(angle.vertex, []).append(angle)
    return groups


def apply_supplementary_angles(ctx: TheoremContext) -> bool:
    """Overlapping records are equal; linear pairs sum to 180°.

    When both members of a linear pair are known and disagree, the second
    one is corrected.
    """

    changed = False
    for angles in _vertex_groups(ctx).values():
        for first, second in pairs(angles):
            if is_overlapping(ctx.graph, first, second):
                changed |= copy_known(
                    ctx, first, second, "Same angle as {source}", "Overlapping Angles"
                )
                continue
            if not is_linear_pair(ctx.graph, first, second):
                continue

            value1 = get_angle_value(first)
            value2 = get_angle_value(second)
            if value1 is not None and value2 is None:
                changed |= ctx.write(
                    second, STRAIGHT_ANGLE - value1, f"Supplementary to {first.name}", "Supplementary Angles"
                )
            elif value2 is not None and value1 is None:
                changed |= ctx.write(
                    first, STRAIGHT_ANGLE - value2, f"Supplementary to {second.name}", "Supplementary Angles"
                )
            elif value1 is not None and value2 is not None:
                if abs(value1 + value2 - STRAIGHT_ANGLE) > ctx.tolerance:
                    changed |= ctx.write(
                        second,
                        STRAIGHT_ANGLE - value1,
                        f"Corrected: supplementary to {first.name}",
                        "Supplementary Angles",
                    )
    return changed


def apply_linear_pairs(ctx: TheoremContext) -> bool:
    """At an interior point of a line, a known angle fixes its linear partner."""

    changed = False
    graph = ctx.graph
    for line in graph.lines:
        if len(line) < 3:
            continue
        for point in line[1:-1]:
            for first, second in pairs(graph.angles_at(point)):
                if not is_linear_pair(graph, first, second):
                    continue
                value1 = get_angle_value(first)
                value2 = get_angle_value(second)
                if value1 is not None and value2 is None:
                    changed |= ctx.write(
                        second, STRAIGHT_ANGLE - value1, f"Linear pair with {first.name}", "Linear Pair"
                    )
                elif value2 is not None and value1 is None:
                    changed |= ctx.write(
                        first, STRAIGHT_ANGLE - value2, f"Linear pair with {second.name}", "Linear Pair"
                    )
    return changed


def apply_vertical_angles(ctx: TheoremContext) -> bool:
    """At a crossing of four or more segments, angles with disjoint rays are equal."""

    changed = False
    graph = ctx.graph
    for point in graph.adjacency:
        if len(graph.neighbors(point)) < 4:
            continue
        for first, second in pairs(graph.angles_at(point)):
            if has_disjoint_rays(first, second):
                changed |= copy_known(ctx, first, second, "Vertical to {source}", "Vertical Angles")
    return changed


def apply_complementary_angles(ctx: TheoremContext) -> bool:
    """Adjacent angles summing to 90° are reported but never written.

    Nothing in the topology marks a right angle as split by a shared ray, so
    no value can be derived here yet.
    """

    if not logger.isEnabledFor(logging.DEBUG):
        return False
    for angles in _vertex_groups(ctx).values():
        for first, second in pairs(angles):
            if not shares_edge(first, second):
                continue
            value1 = get_angle_value(first)
            value2 = get_angle_value(second)
            if value1 is not None and value2 is not None and abs(value1 + value2 - RIGHT_ANGLE) <= ctx.tolerance:
                logger.debug("%s and %s look complementary", first.name, second.name)
    return False


def _splits_other_way(ctx: TheoremContext, value1: float, value2: float, whole: float) -> bool:
    """True when one of the two "parts" is already the sum of the other two angles."""

    return (
        abs(value1 - (value2 + whole)) <= ctx.tolerance
        or abs(value2 - (value1 + whole)) <= ctx.tolerance
    )


def apply_angle_addition(ctx: TheoremContext) -> bool:
    """Two angles sharing a ray make up the angle spanning their outer rays.

    Topology alone cannot tell which of three angles around one vertex is
    the whole.  A registered line through the three ray points settles it;
    otherwise a known triple that already adds up another way is left alone.
    Without a line an unknown angle takes whatever role the first matching
    pair gives it: with ∠ABD = 30° and ∠DBC = 40° known, an unknown ∠ABC
    paired with ∠ABD is read as a part of ∠DBC and gets 10°, not 70°.
    """

    changed = False
    graph = ctx.graph
    for point in graph.adjacency:
        if len(graph.neighbors(point)) < 3:
            continue
        angles = graph.angles_at(point)
        if len(angles) < 2:
            continue
        for first, second in pairs(angles):
            shape = shared_ray(first, second)
            if shape is None:
                continue
            middle, outer1, outer2 = shape
            whole = graph.find_angle(point, outer1, outer2)
            if whole is None:
                continue
            # a known line order must put the middle ray inside the whole
            if are_collinear(graph, middle, outer1, outer2) and not is_ray_between(
                graph, middle, outer1, outer2
            ):
                continue

            value1 = get_angle_value(first)
            value2 = get_angle_value(second)
            whole_value = get_angle_value(whole)

            if value1 is not None and value2 is not None:
                if whole.is_subdivision_result:
                    continue
                total = value1 + value2
                if total >= FULL_ANGLE:
                    continue
                if whole_value is None:
                    changed |= ctx.write(
                        whole, total, f"{first.name} + {second.name}", "Angle Addition"
                    )
                elif abs(whole_value - total) > ctx.tolerance and not _splits_other_way(
                    ctx, value1, value2, whole_value
                ):
                    changed |= ctx.write(
                        whole, total, f"Corrected: {first.name} + {second.name}", "Angle Addition"
                    )
            elif whole_value is not None and value1 is not None and value2 is None:
                if second.is_subdivision_result:
                    continue
                diff = whole_value - value1
                if 0 < diff < FULL_ANGLE:
                    changed |= ctx.write(
                        second, diff, f"{whole.name} - {first.name}", "Angle Addition"
                    )
            elif whole_value is not None and value2 is not None and value1 is None:
                if first.is_subdivision_result:
                    continue
                diff = whole_value - value2
                if 0 < diff < FULL_ANGLE:
                    changed |= ctx.write(
                        first, diff, f"{whole.name} - {second.name}", "Angle Addition"
                    )
    return changed


def apply_collinear_point_angles(ctx: TheoremContext) -> bool:
    """Records at one vertex whose rays point the same ways are equal.

    Collinear points on a registered line make different ray targets
    interchangeable: from a vertex on the line, every line point on one side
    gives the same direction.  Only known to unknown copies are made.
    """

    changed = False
    graph = ctx.graph
    for vertex, angles in _vertex_groups(ctx).items():
        if len(angles) < 2 or not any(vertex in line for line in graph.lines):
            continue
        for first, second in pairs(angles):
            if first.key == second.key or not same_rays(graph, first, second):
                continue
            changed |= copy_known(
                ctx, first, second, "Collinear points: same as {source}", "Collinear Points"
            )
    return changed


__all__ = [
    "apply_supplementary_angles",
    "apply_linear_pairs",
    "apply_vertical_angles",
    "apply_complementary_angles",
    "apply_angle_addition",
    "apply_collinear_point_angles",
]
