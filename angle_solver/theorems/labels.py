"""Rules driven by user labels: equal labels, subdivided angles, split straight angles."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..model import Angle, PointId, STRAIGHT_ANGLE, get_angle_value
from ..relations import find_angles_in_sector, is_ray_between, line_neighbor_pairs
from .base import TheoremContext

logger = logging.getLogger(__name__)


def _label_source(group: List[Angle]) -> Optional[Angle]:
    for angle in group:
        if angle.is_locked and get_angle_value(angle) is not None:
            return angle
    for angle in group:
        if get_angle_value(angle) is not None:
            return angle
    return None


def apply_same_label_angles(ctx: TheoremContext) -> bool:
    """Angles carrying the same label take the value of one known member.

    A locked member wins over an unlocked one.  Every other member that is
    unknown or off by more than the tolerance is overwritten.
    """

    changed = False
    for label, group in ctx.graph.label_groups().items():
        if len(group) < 2:
            continue
        source = _label_source(group)
        if source is None:
            continue
        known = get_angle_value(source)
        assert known is not None
        for angle in group:
            if angle is source:
                continue
            if ctx.differs(get_angle_value(angle), known):
                changed |= ctx.write(
                    angle,
                    known,
                    f"Same label '{label}' as {source.name}",
                    "Same Label",
                )
    return changed


def _subdivisions(ctx: TheoremContext, large: Angle) -> List[Angle]:
    graph = ctx.graph
    ray1, ray2 = large.rays
    found: List[Angle] = []
    for angle in graph.angles_at(large.vertex):
        if angle is large:
            continue
        if angle.has_ray(ray1) or angle.has_ray(ray2):
            shared = ray1 if angle.has_ray(ray1) else ray2
            extreme = ray2 if shared == ray1 else ray1
            other = angle.other_ray(shared)
            if other is None or other in (ray1, ray2):
                continue
            positions = graph.line_positions(shared, extreme, other)
            if positions is None:
                found.append(angle)
                continue
            low, high = sorted((positions[shared], positions[extreme]))
            if low < positions[other] < high:
                found.append(angle)
        elif is_ray_between(graph, angle.rays[0], ray1, ray2) and is_ray_between(
            graph, angle.rays[1], ray1, ray2
        ):
            found.append(angle)
    return found


def apply_angle_subdivision(ctx: TheoremContext) -> bool:
    """Split a known angle evenly among its same-labelled unknown parts.

    ``(large - known unlabelled parts) / n`` goes to each of the ``n``
    labelled unknown parts; the written angles are flagged as subdivision
    results so angle addition does not feed them back into the whole.
    """

    changed = False
    graph = ctx.graph
    for vertex in graph.adjacency:
        for large in graph.angles_at(vertex):
            large_value = get_angle_value(large)
            if large_value is None:
                continue
            parts = _subdivisions(ctx, large)
            if not parts:
                continue

            labelled = [a for a in parts if a.clean_label and get_angle_value(a) is None]
            known = [a for a in parts if not a.clean_label and get_angle_value(a) is not None]
            if not labelled:
                continue
            labels = {a.clean_label for a in labelled}
            if len(labels) != 1:
                continue

            remaining = large_value - sum(get_angle_value(a) or 0.0 for a in known)
            if remaining <= 0:
                continue
            each = remaining / len(labelled)
            if not 0 < each < STRAIGHT_ANGLE:
                continue
            for angle in labelled:
                if ctx.write(
                    angle,
                    each,
                    f"Subdivision of {large.name} ({large_value:g}° / {len(labelled)})",
                    "Angle Subdivision",
                ):
                    angle.is_subdivision_result = True
                    changed = True
    return changed


def _propagate_label(ctx: TheoremContext, label: str, value: float, skip: List[Angle]) -> bool:
    changed = False
    skipped = {id(angle) for angle in skip}
    for angle in ctx.graph.angles:
        if id(angle) in skipped or angle.clean_label != label:
            continue
        if get_angle_value(angle) is None:
            changed |= ctx.write(angle, value, f"Same label '{label}' ({value:.1f}°)", "Same Label")
    return changed


def _divide_sector(ctx: TheoremContext, point: PointId, first: PointId, second: PointId) -> bool:
    sector = find_angles_in_sector(ctx.graph, point, first, second)
    if len(sector) < 2:
        return False

    known = [a for a in sector if get_angle_value(a) is not None]
    unknown = [a for a in sector if get_angle_value(a) is None]
    if not unknown:
        return False

    known_sum = sum(get_angle_value(a) or 0.0 for a in known)
    remaining = STRAIGHT_ANGLE - known_sum
    if remaining < 0 or remaining > STRAIGHT_ANGLE:
        return False

    groups: Dict[str, List[Angle]] = {}
    for angle in unknown:
        label = angle.clean_label
        if label is not None:
            groups.setdefault(label, []).append(angle)

    changed = False
    if known_sum == 0:
        for label, group in groups.items():
            if len(group) < 3:
                continue
            value = STRAIGHT_ANGLE / len(group)
            for angle in group:
                changed |= ctx.write(
                    angle,
                    value,
                    f"Straight angle at {point} split into {len(group)} '{label}'",
                    "Linear Angle Division",
                )
            changed |= _propagate_label(ctx, label, value, group)
            return changed

    if len(groups) == 1 and all(a.clean_label for a in unknown):
        (label,) = groups
        value = remaining / len(unknown)
        if 0 < value < STRAIGHT_ANGLE:
            for angle in unknown:
                changed |= ctx.write(
                    angle,
                    value,
                    f"Linear division (180° - {known_sum:g}°) / {len(unknown)}",
                    "Linear Angle Division",
                )
            changed |= _propagate_label(ctx, label, value, unknown)
    return changed


def apply_linear_angle_division(ctx: TheoremContext) -> bool:
    """Angles filling a straight angle on a line split what is left of 180°.

    Works per point on a line, over each pair of its line neighbours that
    straddle it.  All unknown parts must share one label.
    """

    changed = False
    graph = ctx.graph
    for line in graph.lines:
        if len(line) < 2:
            continue
        for point in line:
            if len(graph.angles_at(point)) < 2:
                continue
            for first, second in line_neighbor_pairs(graph, point, line):
                changed |= _divide_sector(ctx, point, first, second)
    return changed


__all__ = [
    "apply_same_label_angles",
    "apply_angle_subdivision",
    "apply_linear_angle_division",
]
