import pytest

from angle_solver.config import SolverConfig
from angle_solver.graph import GeometryGraph
from angle_solver.guard import ConstraintGuard
from angle_solver.theorems import THEOREMS, TheoremContext, get_theorem

from diagrams import angle, cevian_triangle, diagram, values


def apply(name, snapshot, config=None):
    config = config or SolverConfig()
    guard = ConstraintGuard(config=config)
    ctx = TheoremContext(GeometryGraph.from_snapshot(snapshot), guard, config)
    changed = get_theorem(name)(ctx)
    return changed, guard.history


def by_id(snapshot):
    return {a.id: a for a in snapshot.angles}


def test_theorems_run_in_priority_order():
    assert [theorem.name for theorem in THEOREMS] == [
        "Same Label",
        "Angle Subdivision",
        "Supplementary Angles",
        "Linear Pairs",
        "Linear Angle Division",
        "Vertical Angles",
        "Complementary Angles",
        "Triangle Angle Sum",
        "Angle Addition",
        "Isosceles Triangles",
        "Isosceles Angle Bisector Perpendicular",
        "Right Angle Bisector",
        "Equilateral Triangle",
        "Inscribed Angle",
        "Circle Radius Angles",
        "Collinear Point Angles",
    ]


def test_get_theorem_unknown_name():
    with pytest.raises(KeyError):
        get_theorem("Pythagoras")


def test_same_label_copies_known_value():
    snapshot = diagram("AB AC DE DF", [angle("BAC", 40, label="x"), angle("EDF", label=" x ")])

    changed, history = apply("Same Label", snapshot)

    assert changed
    assert values(snapshot)["EDF"] == 40.0
    assert history[0]["reason"] == "Same label 'x' as ∠BAC"


def test_same_label_prefers_locked_member():
    snapshot = diagram(
        "AB AC DE DF",
        [angle("BAC", 30, label="x"), angle("EDF", 50, label="x", lock=50)],
    )

    apply("Same Label", snapshot)

    assert values(snapshot) == {"BAC": 50.0, "EDF": 50}


def test_subdivision_splits_known_angle_between_labelled_parts():
    snapshot = cevian_triangle(bac=60, bad=None)
    angles = by_id(snapshot)
    angles["BAD"].label = "x"
    angles["DAC"].label = "x"

    changed, history = apply("Angle Subdivision", snapshot)

    assert changed
    assert angles["BAD"].value == 30.0
    assert angles["DAC"].value == 30.0
    assert angles["BAD"].is_subdivision_result
    assert {entry["theorem"] for entry in history} == {"Angle Subdivision"}


def test_supplementary_fills_linear_partner():
    snapshot = diagram("AB BC BD", [angle("ABD", 110), angle("DBC")], lines=["ABC"])

    changed, history = apply("Supplementary Angles", snapshot)

    assert changed
    assert values(snapshot)["DBC"] == 70.0
    assert history[0]["theorem"] == "Supplementary Angles"


def test_supplementary_corrects_second_member():
    snapshot = diagram("AB BC BD", [angle("ABD", 110), angle("DBC", 80)], lines=["ABC"])

    apply("Supplementary Angles", snapshot)

    assert values(snapshot) == {"ABD": 110, "DBC": 70.0}


def test_overlapping_records_are_equal():
    snapshot = diagram("AB BD DC", [angle("ABD", 50), angle("ABC")], lines=["BDC"])

    changed, history = apply("Supplementary Angles", snapshot)

    assert changed
    assert values(snapshot)["ABC"] == 50.0
    assert history[0]["theorem"] == "Overlapping Angles"


def test_overlapping_records_along_line_missing_the_vertex():
    snapshot = diagram("AB AD AC BD DC", [angle("BAD", 30), angle("BAC")], lines=["BDC"])

    changed, history = apply("Supplementary Angles", snapshot)

    assert changed
    assert values(snapshot)["BAC"] == 30.0
    assert history[0]["reason"] == "Same angle as ∠BAD"


def test_linear_pair_at_interior_line_point():
    snapshot = diagram("AB BC BD", [angle("ABD"), angle("DBC", 35)], lines=["ABC"])

    changed, history = apply("Linear Pairs", snapshot)

    assert changed
    assert values(snapshot)["ABD"] == 145.0
    assert history[0]["theorem"] == "Linear Pair"


def test_vertical_angles_need_four_segments():
    angles = [angle("AOB", 35), angle("BOC"), angle("COD"), angle("DOA")]
    snapshot = diagram("OA OB OC OD", angles)

    apply("Vertical Angles", snapshot)

    assert values(snapshot) == {"AOB": 35, "BOC": None, "COD": 35.0, "DOA": None}


def test_vertical_angles_skip_three_segment_vertex():
    snapshot = diagram("OA OB OC", [angle("AOB", 35), angle("BOC")])

    changed, _ = apply("Vertical Angles", snapshot)

    assert not changed


def test_complementary_never_writes():
    snapshot = diagram("OA OB OC", [angle("AOB", 30), angle("BOC", 60), angle("AOC")])

    changed, history = apply("Complementary Angles", snapshot)

    assert not changed
    assert history == []


def test_triangle_sum_fills_third_angle():
    snapshot = diagram("AB BC CA", [angle("BAC", 50), angle("ABC", 60), angle("ACB")])

    changed, history = apply("Triangle Angle Sum", snapshot)

    assert changed
    assert values(snapshot)["ACB"] == 70.0
    assert history[0]["reason"] == "Triangle sum (180° - 110°)"


def test_triangle_sum_ignores_impossible_remainder():
    snapshot = diagram("AB BC CA", [angle("BAC", 100), angle("ABC", 90), angle("ACB")])

    changed, _ = apply("Triangle Angle Sum", snapshot)

    assert not changed
    assert values(snapshot)["ACB"] is None


def test_angle_addition_builds_whole_from_parts():
    snapshot = cevian_triangle(bac=None, bad=20)
    by_id(snapshot)["DAC"].value = 40

    changed, history = apply("Angle Addition", snapshot)

    assert changed
    assert values(snapshot)["BAC"] == 60.0
    assert history[0]["reason"] == "∠BAD + ∠DAC"


def test_angle_addition_subtracts_known_part():
    snapshot = cevian_triangle(bac=70, bad=30)

    apply("Angle Addition", snapshot)

    assert values(snapshot)["DAC"] == 40.0
    # the whole is never mistaken for a part
    assert values(snapshot)["BAD"] == 30


def test_angle_addition_without_line_keeps_first_pair_roles():
    snapshot = diagram("BA BC BD", [angle("ABC"), angle("ABD", 30), angle("DBC", 40)])

    apply("Angle Addition", snapshot)

    # ABC is read as a part of DBC, and the known triple then adds up another way
    assert values(snapshot) == {"ABC": 10.0, "ABD": 30, "DBC": 40}


def test_angle_addition_respects_line_order():
    # C lies between B and D, so BAC is a part of BAD and not the whole
    snapshot = diagram(
        "AB AC AD BC CD",
        [angle("BAC", 20), angle("CAD", 30), angle("BAD")],
        lines=["BCD"],
    )

    apply("Angle Addition", snapshot)

    assert values(snapshot)["BAD"] == 50.0


def test_isosceles_base_angles_from_apex():
    snapshot = diagram(
        "AB BC CA",
        [angle("BAC", 40), angle("ABC"), angle("ACB")],
        circles=["ABC"],
    )

    changed, history = apply("Isosceles Triangles", snapshot)

    assert changed
    assert values(snapshot) == {"BAC": 40, "ABC": 70.0, "ACB": 70.0}
    assert {entry["theorem"] for entry in history} == {"Isosceles Triangle"}


def test_isosceles_base_angle_fixes_other_base_and_apex():
    snapshot = diagram(
        "AB BC CA",
        [angle("BAC"), angle("ABC", 70), angle("ACB")],
        circles=["ABC"],
    )

    apply("Isosceles Triangles", snapshot)

    assert values(snapshot) == {"BAC": 40.0, "ABC": 70, "ACB": 70.0}


def test_isosceles_apex_from_both_bases():
    snapshot = diagram(
        "AB BC CA",
        [angle("BAC"), angle("ABC", 70), angle("ACB", 70)],
        circles=["ABC"],
    )

    changed, history = apply("Isosceles Triangles", snapshot)

    assert changed
    assert values(snapshot) == {"BAC": 40.0, "ABC": 70, "ACB": 70}
    assert [entry["angleId"] for entry in history] == ["BAC"]


def test_isosceles_corrects_disagreeing_base():
    snapshot = diagram(
        "AB BC CA",
        [angle("BAC"), angle("ABC", 70), angle("ACB", 60)],
        circles=["ABC"],
    )

    changed, history = apply("Isosceles Triangles", snapshot)

    assert changed
    assert values(snapshot) == {"BAC": 40.0, "ABC": 70, "ACB": 70.0}
    assert history[0]["reason"] == "Corrected: isosceles, equal to ∠ABC"


def test_isosceles_bisector_is_perpendicular():
    snapshot = diagram(
        "AB AC BC AD BD DC",
        [
            angle("BAC"),
            angle("BAD", label="x"),
            angle("DAC", label="x"),
            angle("ADB"),
            angle("ADC"),
        ],
        lines=["BDC"],
        circles=["ABC"],
    )

    changed, history = apply("Isosceles Angle Bisector Perpendicular", snapshot)

    assert changed
    assert values(snapshot)["ADB"] == 90.0
    assert values(snapshot)["ADC"] == 90.0
    assert history[0]["theorem"] == "Isosceles Bisector ⊥"


def test_right_angle_bisector_with_labelled_halves():
    snapshot = diagram(
        "OA OB OM",
        [angle("AOB", 90), angle("AOM", label="h"), angle("MOB", label="h")],
    )

    apply("Right Angle Bisector", snapshot)

    assert values(snapshot) == {"AOB": 90, "AOM": 45.0, "MOB": 45.0}


def test_right_angle_bisector_needs_matching_halves():
    snapshot = diagram(
        "OA OB OM",
        [angle("AOB", 90), angle("AOM", label="h"), angle("MOB", label="k")],
    )

    changed, _ = apply("Right Angle Bisector", snapshot)

    assert not changed


def test_equilateral_triangle_from_central_angles():
    snapshot = diagram(
        "OA OB OC AB BC CA",
        [
            angle("AOB", 120),
            angle("BOC", 120),
            angle("COA", 120),
            angle("BAC"),
            angle("ABC"),
            angle("ACB"),
        ],
        circles=["OABC"],
        triangles=["ABC"],
    )

    apply("Equilateral Triangle", snapshot)

    assert [values(snapshot)[key] for key in ("BAC", "ABC", "ACB")] == [60.0, 60.0, 60.0]


def test_inscribed_angle_is_half_the_central():
    snapshot = diagram("OA OB CA CB", [angle("AOB", 100), angle("ACB")], circles=["OABC"])

    changed, history = apply("Inscribed Angle", snapshot)

    assert changed
    assert values(snapshot)["ACB"] == 50.0
    assert history[0]["theorem"] == "Inscribed Angle"


def test_central_angle_is_twice_the_inscribed():
    snapshot = diagram("OA OB CA CB", [angle("AOB"), angle("ACB", 35)], circles=["OABC"])

    apply("Inscribed Angle", snapshot)

    assert values(snapshot)["AOB"] == 70.0


def test_circle_radius_angles_are_equal():
    snapshot = diagram("OA OB OC", [angle("AOB", 50), angle("BOC")], circles=["OABC"])

    changed, history = apply("Circle Radius Angles", snapshot)

    assert changed
    assert values(snapshot)["BOC"] == 50.0
    assert history[0]["theorem"] == "Circle Radius"


def test_collinear_points_give_the_same_angle():
    snapshot = diagram(
        "VP PQ VR RS",
        [angle("PVR", 40), angle("QVS")],
        lines=["VPQ", "VRS"],
    )

    changed, history = apply("Collinear Point Angles", snapshot)

    assert changed
    assert values(snapshot)["QVS"] == 40.0
    assert history[0]["theorem"] == "Collinear Points"


def test_linear_division_splits_straight_angle_evenly():
    snapshot = diagram(
        "AO OB OC OD",
        [angle("AOC", label="t"), angle("COD", label="t"), angle("DOB", label="t")],
        lines=["AOB"],
    )

    changed, history = apply("Linear Angle Division", snapshot)

    assert changed
    assert values(snapshot) == {"AOC": 60.0, "COD": 60.0, "DOB": 60.0}
    assert {entry["theorem"] for entry in history} == {"Linear Angle Division"}


def test_linear_division_shares_remainder():
    snapshot = diagram(
        "AO OB OC OD",
        [angle("AOC", 80), angle("COD", label="t"), angle("DOB", label="t")],
        lines=["AOB"],
    )

    apply("Linear Angle Division", snapshot)

    assert values(snapshot) == {"AOC": 80, "COD": 50.0, "DOB": 50.0}


def test_linear_division_needs_one_label():
    snapshot = diagram(
        "AO OB OC OD",
        [angle("AOC", 80), angle("COD", label="t"), angle("DOB")],
        lines=["AOB"],
    )

    changed, _ = apply("Linear Angle Division", snapshot)

    assert not changed
