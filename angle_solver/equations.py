"""Linear-equation cross-check of the rule engine.

Every relation the diagram states is a linear equation over the angle
values.  Stacking them into ``A x = b`` and solving by least squares tells
which angles the diagram determines at all, independent of the order the
rules happen to fire in.  An angle is determined when its coordinate does
not move along the null space of ``A``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
from scipy.linalg import null_space

from .config import SolverConfig, resolve_config
from .graph import GeometryGraph
from .guard import AngleWriter
from .logging_utils import apply_debug_logging
from .model import Angle, FULL_ANGLE, STRAIGHT_ANGLE, get_angle_value
from .relations import (
    has_disjoint_rays,
    is_linear_pair,
    is_opposite_ray,
    is_ray_between,
    same_rays,
    shared_ray,
)

logger = logging.getLogger(__name__)

_NULL_EPS = 1e-9


@dataclass
class AngleEquation:
    """``sum(coef * angle) == constant`` keyed by angle id."""

    coefficients: Dict[str, float]
    constant: float
    source: str

    def key(self) -> Tuple[Tuple[Tuple[str, float], ...], float]:
        return tuple(sorted(self.coefficients.items())), round(self.constant, 6)

    def render(self, names: Mapping[str, str]) -> str:
        parts: List[str] = []
        for angle_id, coef in self.coefficients.items():
            name = names.get(angle_id, angle_id)
            if coef == 1:
                term = name
            elif coef == -1:
                term = f"-{name}"
            else:
                term = f"{coef:g}*{name}"
            if parts and not term.startswith("-"):
                term = "+" + term
            parts.append(term)
        return f"{''.join(parts)}={self.constant:g}"


@dataclass
class EquationReport:
    values: Dict[str, float] = field(default_factory=dict)
    free: List[str] = field(default_factory=list)
    consistent: bool = True
    max_residual: float = 0.0
    equations: List[AngleEquation] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "values": dict(self.values),
            "free": list(self.free),
            "consistent": self.consistent,
            "maxResidual": self.max_residual,
            "equations": len(self.equations),
        }


class _Collector:
    def __init__(self, graph: GeometryGraph) -> None:
        self.graph = graph
        self.equations: List[AngleEquation] = []
        self._seen: set = set()

    def add(self, terms: List[Tuple[Angle, float]], constant: float, source: str) -> None:
        coefficients: Dict[str, float] = {}
        for angle, coef in terms:
            angle = self.graph.find_angle(angle.vertex, *angle.rays) or angle
            coefficients[angle.id] = coefficients.get(angle.id, 0.0) + coef
        coefficients = {key: coef for key, coef in coefficients.items() if coef != 0}
        if not coefficients:
            return
        equation = AngleEquation(coefficients, float(constant), source)
        key = equation.key()
        if key in self._seen:
            return
        self._seen.add(key)
        self.equations.append(equation)


def _canonical(graph: GeometryGraph) -> List[Angle]:
    return [angle for angle in graph.angles if graph.find_angle(angle.vertex, *angle.rays) is angle]


def _vertex_pairs(angles: List[Angle]):
    by_vertex: Dict[str, List[Angle]] = {}
    for angle in angles:
        by_vertex.setdefault(angle.vertex, []).append(angle)
    for group in by_vertex.values():
        for i, first in enumerate(group):
            for second in group[i + 1:]:
                yield first, second


def _is_vertical(graph: GeometryGraph, a: Angle, b: Angle) -> bool:
    if not has_disjoint_rays(a, b):
        return False
    v = a.vertex
    a1, a2 = a.rays
    b1, b2 = b.rays
    return (is_opposite_ray(graph, v, a1, b1) and is_opposite_ray(graph, v, a2, b2)) or (
        is_opposite_ray(graph, v, a1, b2) and is_opposite_ray(graph, v, a2, b1)
    )


def extract_equations(graph: GeometryGraph) -> List[AngleEquation]:
    """Collect the linear relations the diagram states, deduplicated."""

    angles = _canonical(graph)
    out = _Collector(graph)

    for triangle in graph.triangles:
        if len(triangle) != 3:
            continue
        found = graph.triangle_angles(triangle)
        if found is not None:
            out.add([(angle, 1.0) for angle in found], STRAIGHT_ANGLE, f"Triangle {''.join(sorted(triangle))}")

    for first, second in _vertex_pairs(angles):
        if is_linear_pair(graph, first, second):
            out.add([(first, 1.0), (second, 1.0)], STRAIGHT_ANGLE, f"Linear pair at {first.vertex}")
        elif same_rays(graph, first, second):
            out.add([(first, 1.0), (second, -1.0)], 0.0, f"Same rays at {first.vertex}")
        elif _is_vertical(graph, first, second):
            out.add([(first, 1.0), (second, -1.0)], 0.0, f"Vertical angles at {first.vertex}")

        shape = shared_ray(first, second)
        if shape is not None:
            middle, outer1, outer2 = shape
            whole = graph.find_angle(first.vertex, outer1, outer2)
            if whole is not None and is_ray_between(graph, middle, outer1, outer2):
                out.add(
                    [(whole, 1.0), (first, -1.0), (second, -1.0)],
                    0.0,
                    f"Angle addition at {first.vertex}",
                )

    for label, group in graph.label_groups().items():
        head = group[0]
        for angle in group[1:]:
            out.add([(head, 1.0), (angle, -1.0)], 0.0, f"Label '{label}'")

    for circle in graph.circles:
        center = circle.center
        points = circle.points
        for i, p1 in enumerate(points):
            for p2 in points[i + 1:]:
                base1 = graph.find_angle(p1, center, p2)
                base2 = graph.find_angle(p2, center, p1)
                if base1 is not None and base2 is not None and (
                    graph.triangle(center, p1, p2) is not None or graph.has_edges(center, p1, p2)
                ):
                    out.add([(base1, 1.0), (base2, -1.0)], 0.0, f"Isosceles {center}{p1}{p2}")
                central = graph.find_angle(center, p1, p2)
                if central is None:
                    continue
                for vertex in points:
                    if vertex in (p1, p2):
                        continue
                    inscribed = graph.find_angle(vertex, p1, p2)
                    if inscribed is not None:
                        out.add(
                            [(central, 1.0), (inscribed, -2.0)],
                            0.0,
                            f"Inscribed angle at {vertex}",
                        )

    for angle in angles:
        value = get_angle_value(angle)
        if value is not None:
            out.add([(angle, 1.0)], value, f"Known {angle.name}")

    logger.debug("Extracted %d equations over %d angles", len(out.equations), len(angles))
    return out.equations


def solve_equations(
    graph: GeometryGraph,
    equations: Optional[List[AngleEquation]] = None,
    config: Optional[SolverConfig] = None,
) -> EquationReport:
    """Least-squares solve of the stacked system; report what it pins down."""

    cfg = resolve_config(config)
    if equations is None:
        equations = extract_equations(graph)
    angles = _canonical(graph)
    columns = {angle.id: idx for idx, angle in enumerate(angles)}
    if not equations or not columns:
        return EquationReport(free=list(columns), equations=list(equations))

    A = np.zeros((len(equations), len(columns)), dtype=float)
    b = np.zeros(len(equations), dtype=float)
    for row, equation in enumerate(equations):
        for angle_id, coef in equation.coefficients.items():
            col = columns.get(angle_id)
            if col is not None:
                A[row, col] += coef
        b[row] = equation.constant

    x, *_ = np.linalg.lstsq(A, b, rcond=None)
    residual = A @ x - b
    max_residual = float(np.max(np.abs(residual))) if residual.size else 0.0
    basis = null_space(A)

    values: Dict[str, float] = {}
    free: List[str] = []
    for angle_id, col in columns.items():
        if basis.size == 0 or float(np.max(np.abs(basis[col]))) < _NULL_EPS:
            values[angle_id] = round(float(x[col]), cfg.value_decimals)
        else:
            free.append(angle_id)

    report = EquationReport(
        values=values,
        free=free,
        consistent=max_residual <= cfg.tolerance,
        max_residual=max_residual,
        equations=list(equations),
    )
    logger.info(
        "Linear system: %d equation(s), %d determined, %d free, max residual %.3g",
        len(equations),
        len(values),
        len(free),
        max_residual,
    )
    return report


def apply_equation_solution(graph: GeometryGraph, writer: AngleWriter, report: EquationReport) -> bool:
    """Write the determined values of still-unknown angles through ``writer``."""

    if not report.consistent:
        logger.warning("Linear system is inconsistent (residual %.3g); nothing written", report.max_residual)
        return False
    changed = False
    for angle in graph.angles:
        if get_angle_value(angle) is not None:
            continue
        canonical = graph.find_angle(angle.vertex, *angle.rays)
        value = report.values.get(canonical.id if canonical is not None else angle.id)
        if value is None or not 0 < value < FULL_ANGLE:
            continue
        changed |= writer.set_angle_value(
            angle,
            value,
            f"Solved from {len(report.equations)} equations",
            "Linear Equations",
        )
    return changed


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "AngleEquation",
    "EquationReport",
    "apply_equation_solution",
    "extract_equations",
    "solve_equations",
]
