"""Circle rules: inscribed versus central angles, angles at the centre."""

from __future__ import annotations

import logging
from typing import List

from ..model import Angle, get_angle_value
from .base import TheoremContext, pairs

logger = logging.getLogger(__name__)


def apply_inscribed_angle(ctx: TheoremContext) -> bool:
    """An inscribed angle is half the central angle on the same arc."""

    changed = False
    graph = ctx.graph
    for circle in graph.circles:
        for a1, a2 in pairs(circle.points):
            central = graph.find_angle(circle.center, a1, a2)
            if central is None:
                continue
            for vertex in circle.points:
                if vertex in (a1, a2):
                    continue
                inscribed = graph.find_angle(vertex, a1, a2)
                if inscribed is None:
                    continue
                central_value = get_angle_value(central)
                inscribed_value = get_angle_value(inscribed)
                if central_value is not None and inscribed_value is None:
                    changed |= ctx.write(
                        inscribed,
                        central_value / 2,
                        f"Half of central {central.name}",
                        "Inscribed Angle",
                    )
                elif inscribed_value is not None and central_value is None:
                    changed |= ctx.write(
                        central,
                        inscribed_value * 2,
                        f"Twice inscribed {inscribed.name}",
                        "Inscribed Angle",
                    )
    return changed


def apply_circle_radius_angles(ctx: TheoremContext) -> bool:
    """Angles at a centre between radii to joined on-circle points are equal.

    One record per on-circle point is considered: the first angle at the
    centre with a ray to that point whose other ray is also a joined
    on-circle point.
    """

    changed = False
    graph = ctx.graph
    for circle in graph.circles:
        center = circle.center
        joined = [p for p in circle.points if graph.is_adjacent(center, p)]
        if len(joined) < 2:
            continue
        on_circle = set(joined)

        radius_angles: List[Angle] = []
        for point in joined:
            for angle in graph.angles_at(center):
                other = angle.other_ray(point)
                if other is not None and other in on_circle:
                    if all(angle is not seen for seen in radius_angles):
                        radius_angles.append(angle)
                    break
        if len(radius_angles) < 2:
            continue

        source = next((a for a in radius_angles if get_angle_value(a) is not None), None)
        if source is None:
            continue
        known = get_angle_value(source)
        assert known is not None
        for angle in radius_angles:
            if get_angle_value(angle) is None:
                changed |= ctx.write(angle, known, f"Equal radii angle as {source.name}", "Circle Radius")
    return changed


__all__ = ["apply_inscribed_angle", "apply_circle_radius_angles"]
