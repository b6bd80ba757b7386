import pytest

from angle_solver.model import Circle, make_triangle
from angle_solver.validate import ValidationError, validate_snapshot

from diagrams import angle, diagram


def test_validate_accepts_valid_snapshot():
    snapshot = diagram(
        'AB BC CA AD BD DC',
        [angle('BAC', 70), angle('ABC', '50'), angle('ACB', '?'), angle('BAD', lock=30)],
        lines=['BDC'],
        circles=['ABC'],
    )

    validate_snapshot(snapshot)


@pytest.mark.parametrize(
    'spec, message_part',
    [('AAB', 'vertex must differ'), ('BAB', 'two distinct rays')],
)
def test_angle_rays_must_be_distinct(spec, message_part):
    snapshot = diagram('AB', [angle(spec)])

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert message_part in str(exc.value)


def test_angle_recorded_twice_is_rejected():
    snapshot = diagram('AB AC', [angle('BAC'), angle('CAB')])

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'recorded twice' in str(exc.value)


def test_non_numeric_value_is_rejected():
    snapshot = diagram('AB AC', [angle('BAC', 'forty')])

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'non-numeric value' in str(exc.value)


def test_non_numeric_lock_is_rejected():
    snapshot = diagram('AB AC', [angle('BAC', lock='x')])

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'non-numeric lock' in str(exc.value)


def test_line_with_repeated_point_is_rejected():
    snapshot = diagram('AB', [], lines=['ABA'])

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'lists a point twice' in str(exc.value)


def test_circle_listing_its_centre_is_rejected():
    snapshot = diagram('OA', [])
    snapshot.circles.append(Circle(center='O', points=['A', 'O']))

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'its own centre' in str(exc.value)


def test_unknown_points_are_rejected():
    snapshot = diagram('AB BC CA', [])
    snapshot.triangles.append(make_triangle('ABZ'))

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'unknown point(s) Z' in str(exc.value)


def test_degenerate_triangle_is_rejected():
    snapshot = diagram('AB', [])
    snapshot.triangles.append(make_triangle('AB'))

    with pytest.raises(ValidationError) as exc:
        validate_snapshot(snapshot)

    assert 'three distinct vertices' in str(exc.value)
