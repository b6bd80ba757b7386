"""Theorem rules applied by the solver loop, in priority order."""

from __future__ import annotations

from typing import Tuple

from .base import Theorem, TheoremContext
from .circles import apply_circle_radius_angles, apply_inscribed_angle
from .labels import apply_angle_subdivision, apply_linear_angle_division, apply_same_label_angles
from .lines import (
    apply_angle_addition,
    apply_collinear_point_angles,
    apply_complementary_angles,
    apply_linear_pairs,
    apply_supplementary_angles,
    apply_vertical_angles,
)
from .triangles import (
    apply_equilateral_triangle,
    apply_isosceles_bisector_perpendicular,
    apply_isosceles_triangles,
    apply_right_angle_bisector,
    apply_triangle_angle_sum,
)

THEOREMS: Tuple[Theorem, ...] = (
    Theorem("Same Label", apply_same_label_angles),
    Theorem("Angle Subdivision", apply_angle_subdivision),
    Theorem("Supplementary Angles", apply_supplementary_angles),
    Theorem("Linear Pairs", apply_linear_pairs),
    Theorem("Linear Angle Division", apply_linear_angle_division),
    Theorem("Vertical Angles", apply_vertical_angles),
    Theorem("Complementary Angles", apply_complementary_angles),
    Theorem("Triangle Angle Sum", apply_triangle_angle_sum),
    Theorem("Angle Addition", apply_angle_addition),
    Theorem("Isosceles Triangles", apply_isosceles_triangles),
    Theorem("Isosceles Angle Bisector Perpendicular", apply_isosceles_bisector_perpendicular),
    Theorem("Right Angle Bisector", apply_right_angle_bisector),
    Theorem("Equilateral Triangle", apply_equilateral_triangle),
    Theorem("Inscribed Angle", apply_inscribed_angle),
    Theorem("Circle Radius Angles", apply_circle_radius_angles),
    Theorem("Collinear Point Angles", apply_collinear_point_angles),
)


def get_theorem(name: str) -> Theorem:
    for theorem in THEOREMS:
        if theorem.name == name:
            return theorem
    raise KeyError(name)


__all__ = [
    "THEOREMS",
    "Theorem",
    "TheoremContext",
    "get_theorem",
    "apply_same_label_angles",
    "apply_angle_subdivision",
    "apply_supplementary_angles",
    "apply_linear_pairs",
    "apply_linear_angle_division",
    "apply_vertical_angles",
    "apply_complementary_angles",
    "apply_triangle_angle_sum",
    "apply_angle_addition",
    "apply_isosceles_triangles",
    "apply_isosceles_bisector_perpendicular",
    "apply_right_angle_bisector",
    "apply_equilateral_triangle",
    "apply_inscribed_angle",
    "apply_circle_radius_angles",
    "apply_collinear_point_angles",
]
