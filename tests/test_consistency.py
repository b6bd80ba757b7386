from angle_solver.consistency import check_consistency
from angle_solver.model import make_triangle

from diagrams import angle, cevian_triangle, diagram


def test_complete_diagram_has_no_warnings():
    assert check_consistency(cevian_triangle()) == []


def test_angle_without_segments_emits_warning():
    snapshot = diagram('AB', [angle('BAC')])

    warnings = check_consistency(snapshot)

    assert warnings
    warning = warnings[0]
    assert warning.kind == 'angle_ray'
    assert 'A-C' in warning.message
    assert warning.hotfixes == ['add edge A-C']


def test_triangle_missing_side():
    snapshot = diagram('AB BC', [], triangles=['ABC'])

    warnings = check_consistency(snapshot)

    assert [w.kind for w in warnings] == ['triangle_edge']
    assert warnings[0].hotfixes == ['add edge A-C']


def test_collinear_triangle():
    snapshot = diagram('AB BC CA', [], lines=['ABC'], triangles=['ABC'])

    warnings = check_consistency(snapshot)

    assert [w.kind for w in warnings] == ['triangle_collinear']
    assert warnings[0].hotfixes == ['remove triangle ABC']


def test_circle_point_not_joined_to_centre():
    snapshot = diagram('OA AB', [], circles=['OAB'])

    warnings = check_consistency(snapshot)

    assert [w.kind for w in warnings] == ['circle_radius']
    assert warnings[0].hotfixes == ['add edge B-O']


def test_point_only_on_line():
    snapshot = diagram('AB', [], lines=['AXB'])

    warnings = check_consistency(snapshot)

    assert [w.kind for w in warnings] == ['line_point']
    assert warnings[0].hotfixes == ['remove X from line A-X-B']


def test_triangle_check_skips_malformed_triangles():
    snapshot = diagram('AB', [])
    snapshot.triangles.append(make_triangle('AB'))

    assert check_consistency(snapshot) == []
