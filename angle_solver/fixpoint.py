"""The fixed-point loop shared by real solves and dry runs, plus triangle checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .config import SolverConfig
from .graph import GeometryGraph
from .guard import AngleWriter
from .logging_utils import apply_debug_logging
from .model import Angle, STRAIGHT_ANGLE, Triangle, get_angle_value
from .theorems import THEOREMS, TheoremContext

logger = logging.getLogger(__name__)


@dataclass
class TriangleReport:
    valid: int = 0
    invalid: int = 0
    incomplete: int = 0
    contradictions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "valid": self.valid,
            "invalid": self.invalid,
            "incomplete": self.incomplete,
            "contradictions": list(self.contradictions),
        }


def triangle_name(triangle: Triangle) -> str:
    return "".join(sorted(triangle))


def _complete_triangles(graph: GeometryGraph) -> List[Tuple[Triangle, Tuple[Angle, Angle, Angle]]]:
    found = []
    for triangle in graph.triangles:
        if len(triangle) != 3:
            continue
        angles = graph.triangle_angles(triangle)
        if angles is not None:
            found.append((triangle, angles))
    return found


def all_angles_known(graph: GeometryGraph) -> bool:
    return all(get_angle_value(angle) is not None for angle in graph.angles)


def all_triangles_valid(graph: GeometryGraph, tolerance: float) -> bool:
    """True when at least one triangle has all three records and each such triangle closes.

    A triangle with all three records closes when every value is known and
    the sum is within ``tolerance`` of 180°.
    """

    complete = _complete_triangles(graph)
    if not complete:
        return False
    for _, angles in complete:
        total = 0.0
        for angle in angles:
            value = get_angle_value(angle)
            if value is None:
                return False
            total += value
        if abs(total - STRAIGHT_ANGLE) > tolerance:
            return False
    return True


def validate_triangles(graph: GeometryGraph, tolerance: float) -> TriangleReport:
    """Tally valid, invalid and incomplete triangles without touching any value."""

    report = TriangleReport()
    for triangle in graph.triangles:
        name = triangle_name(triangle)
        angles = graph.triangle_angles(triangle) if len(triangle) == 3 else None
        if angles is None:
            logger.debug("Triangle %s: missing angle records", name)
            report.incomplete += 1
            continue
        values = [get_angle_value(angle) for angle in angles]
        if any(value is None for value in values):
            logger.debug(
                "Triangle %s: incomplete (%s)",
                name,
                ", ".join("?" if value is None else f"{value:g}°" for value in values),
            )
            report.incomplete += 1
            continue
        total = sum(value for value in values if value is not None)
        if abs(total - STRAIGHT_ANGLE) <= tolerance:
            report.valid += 1
        else:
            report.invalid += 1
            report.contradictions.append(f"△{name}: {total:.1f}° ≠ 180°")
            logger.info("Triangle %s sums to %.1f°", name, total)
    return report


def run_theorems(
    graph: GeometryGraph, writer: AngleWriter, config: SolverConfig, *, quiet: bool = False
) -> int:
    """Apply every theorem in order until nothing changes; return the iteration count."""

    ctx = TheoremContext(graph=graph, writer=writer, config=config)
    iterations = 0
    changed = True
    while changed and iterations < config.max_iterations:
        iterations += 1
        if all_angles_known(graph):
            logger.debug("All angles known after %d iteration(s)", iterations)
            break
        if all_triangles_valid(graph, config.tolerance):
            logger.debug("All triangles close after %d iteration(s)", iterations)
            break
        changed = False
        for theorem in THEOREMS:
            changed |= theorem(ctx)

    if changed and iterations >= config.max_iterations:
        log = logger.debug if quiet else logger.warning
        log(
            "Stopped after %d iterations with %d angle(s) unknown",
            iterations,
            len(graph.unknown_angles()),
        )
    return iterations


def find_contradictions(graph: GeometryGraph, tolerance: float) -> List[str]:
    return validate_triangles(graph, tolerance).contradictions


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "TriangleReport",
    "all_angles_known",
    "all_triangles_valid",
    "find_contradictions",
    "run_theorems",
    "triangle_name",
    "validate_triangles",
]
