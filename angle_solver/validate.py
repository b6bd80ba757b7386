from typing import Dict, List, Set

from .model import Angle, AngleKey, Snapshot, UNKNOWN_SENTINEL


class ValidationError(ValueError):
    pass


def _ensure_known(ids: List[str], known: Set[str], what: str) -> None:
    missing = [point for point in ids if point not in known]
    if missing:
        raise ValidationError(f'{what} references unknown point(s) {", ".join(missing)}')


def _ensure_numeric(angle: Angle) -> None:
    value = angle.value
    if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
        return
    if isinstance(value, str):
        text = value.strip()
        if not text or text == UNKNOWN_SENTINEL:
            return
        try:
            float(text)
        except ValueError:
            raise ValidationError(f'angle {angle.name} has non-numeric value {value!r}') from None
        return
    raise ValidationError(f'angle {angle.name} has value of type {type(value).__name__}')


def validate_snapshot(snapshot: Snapshot) -> None:
    """Reject malformed input before any rule runs."""

    known = snapshot.point_ids()
    check_points = bool(known)

    for idx, line in enumerate(snapshot.lines):
        if len(set(line)) != len(line):
            raise ValidationError(f'line #{idx} lists a point twice: {"-".join(line)}')
        if check_points:
            _ensure_known(list(line), known, f'line #{idx}')

    for triangle in snapshot.triangles:
        if len(triangle) != 3:
            raise ValidationError(f'triangle must have three distinct vertices, got {sorted(triangle)}')
        if check_points:
            _ensure_known(sorted(triangle), known, f'triangle {"".join(sorted(triangle))}')

    for circle in snapshot.circles:
        if circle.center in circle.points:
            raise ValidationError(f'circle centred at {circle.center} lists its own centre')
        if check_points:
            _ensure_known([circle.center, *circle.points], known, f'circle {circle.center}')

    if check_points:
        for point, neighbours in snapshot.adjacency.items():
            _ensure_known([point, *sorted(neighbours)], known, f'adjacency of {point}')

    seen: Dict[AngleKey, Angle] = {}
    for angle in snapshot.angles:
        r1, r2 = angle.rays
        if angle.vertex in (r1, r2):
            raise ValidationError(f'angle {angle.id} vertex must differ from its rays')
        if r1 == r2:
            raise ValidationError(f'angle {angle.id} needs two distinct rays')
        if check_points:
            _ensure_known([angle.vertex, r1, r2], known, f'angle {angle.name}')
        key = angle.key
        if key in seen:
            raise ValidationError(f'angle {angle.name} is recorded twice ({seen[key].id} and {angle.id})')
        seen[key] = angle
        _ensure_numeric(angle)
        if angle.constraint_value is not None and not isinstance(angle.constraint_value, (int, float)):
            raise ValidationError(f'angle {angle.name} has non-numeric lock {angle.constraint_value!r}')
