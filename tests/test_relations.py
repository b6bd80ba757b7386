from angle_solver.graph import GeometryGraph
from angle_solver.relations import (
    find_angles_in_sector,
    has_disjoint_rays,
    is_linear_pair,
    is_opposite_ray,
    is_overlapping,
    is_ray_between,
    is_same_ray,
    line_neighbor_pairs,
    same_rays,
    shared_ray,
    shares_edge,
)

from diagrams import angle, cevian_triangle, diagram


def graph_of(snapshot):
    return GeometryGraph.from_snapshot(snapshot)


def test_shared_ray_returns_common_and_outer_points():
    a = angle("ABD")
    b = angle("DBC")
    assert shared_ray(a, b) == ("D", "A", "C")
    assert shares_edge(a, b)


def test_shared_ray_rejects_other_vertices_and_identical_rays():
    assert shared_ray(angle("ABD"), angle("ACD")) is None
    assert shared_ray(angle("ABD"), angle("DBA")) is None
    assert not shares_edge(angle("ABD"), angle("CBE"))


def test_disjoint_rays():
    assert has_disjoint_rays(angle("AOB"), angle("COD"))
    assert not has_disjoint_rays(angle("AOB"), angle("BOC"))


def test_linear_pair_needs_opposite_sides_on_a_line():
    snapshot = diagram("AB BC BD", [angle("ABD"), angle("DBC")], lines=["ABC"])
    graph = graph_of(snapshot)
    first, second = snapshot.angles
    assert is_linear_pair(graph, first, second)
    assert not is_overlapping(graph, first, second)


def test_overlapping_when_outer_rays_run_the_same_way():
    snapshot = diagram("AB BC CD AD", [angle("ABD"), angle("ABC")], lines=["BDC"])
    graph = graph_of(snapshot)
    first, second = snapshot.angles
    assert is_overlapping(graph, first, second)
    assert not is_linear_pair(graph, first, second)


def test_overlapping_along_line_missing_the_vertex():
    snapshot = diagram("AB AD AC BD DC", [angle("BAD", 30), angle("BAC")], lines=["BDC"])
    graph = graph_of(snapshot)
    bad, bac = snapshot.angles
    assert is_overlapping(graph, bad, bac)
    assert not is_linear_pair(graph, bad, bac)


def test_cevian_halves_straddle_the_shared_point():
    graph = graph_of(cevian_triangle())
    bac = graph.find_angle("A", "B", "C")
    bad = graph.find_angle("A", "B", "D")
    dac = graph.find_angle("A", "D", "C")
    assert is_overlapping(graph, bac, bad)
    assert is_overlapping(graph, bac, dac)
    assert not is_overlapping(graph, bad, dac)
    assert not is_linear_pair(graph, bad, dac)


def test_first_line_through_outer_points_decides_overlap():
    # B, D and C lie on a line that misses A, but the shared point E is elsewhere
    snapshot = diagram("AB AC AE", [angle("BAE"), angle("CAE")], lines=["BDC"])
    graph = graph_of(snapshot)
    first, second = snapshot.angles
    assert not is_overlapping(graph, first, second)


def test_same_ray_and_opposite_ray():
    snapshot = diagram("AB BC", [], lines=["ABCD"])
    graph = graph_of(snapshot)
    assert is_same_ray(graph, "A", "B", "D")
    assert is_same_ray(graph, "B", "C", "D")
    assert not is_same_ray(graph, "B", "A", "C")
    assert is_opposite_ray(graph, "B", "A", "D")
    assert not is_opposite_ray(graph, "A", "B", "C")


def test_same_rays_across_two_lines():
    snapshot = diagram("VP PQ VR RS", [angle("PVR"), angle("QVS")], lines=["VPQ", "VRS"])
    graph = graph_of(snapshot)
    first, second = snapshot.angles
    assert same_rays(graph, first, second)


def test_ray_between_uses_line_order():
    graph = graph_of(cevian_triangle())
    assert is_ray_between(graph, "D", "B", "C")
    assert not is_ray_between(graph, "B", "D", "C")
    assert not is_ray_between(graph, "A", "B", "C")


def test_sector_collects_boundary_and_interior_angles():
    snapshot = diagram(
        "AO OB OC OD",
        [angle("AOC"), angle("COD"), angle("DOB"), angle("AOB")],
        lines=["AOB"],
    )
    graph = graph_of(snapshot)
    sector = find_angles_in_sector(graph, "O", "A", "B")
    assert sorted(a.id for a in sector) == ["AOC", "COD", "DOB"]


def test_line_neighbor_pairs_only_straddling_pairs():
    snapshot = diagram("AO OB OC", [], lines=["AOB"])
    graph = graph_of(snapshot)
    assert line_neighbor_pairs(graph, "O", ["A", "O", "B"]) == [("A", "B")]
    assert line_neighbor_pairs(graph, "A", ["A", "O", "B"]) == []
