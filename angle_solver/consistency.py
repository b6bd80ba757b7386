from dataclasses import dataclass, field
from typing import List, Set, Tuple

from .model import PointId, Snapshot

Edge = Tuple[PointId, PointId]


@dataclass
class ConsistencyWarning:
    kind: str
    message: str
    hotfixes: List[str] = field(default_factory=list)

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        return self.message


def _edge(a: PointId, b: PointId) -> Edge:
    return (a, b) if a <= b else (b, a)


def _edges(snapshot: Snapshot) -> Set[Edge]:
    edges: Set[Edge] = set()
    for point, neighbours in snapshot.adjacency.items():
        for other in neighbours:
            edges.add(_edge(point, other))
    return edges


def _format_edge(edge: Edge) -> str:
    return f'{edge[0]}-{edge[1]}'


def _missing_ray_edges(snapshot: Snapshot, edges: Set[Edge]) -> List[ConsistencyWarning]:
    warnings: List[ConsistencyWarning] = []
    for angle in snapshot.angles:
        missing = [_edge(angle.vertex, ray) for ray in angle.rays if _edge(angle.vertex, ray) not in edges]
        if not missing:
            continue
        warnings.append(
            ConsistencyWarning(
                kind='angle_ray',
                message=(
                    f'angle {angle.name} uses ray(s) without a segment: '
                    f'{", ".join(_format_edge(edge) for edge in missing)}'
                ),
                hotfixes=[f'add edge {_format_edge(edge)}' for edge in missing],
            )
        )
    return warnings


def _triangle_gaps(snapshot: Snapshot, edges: Set[Edge]) -> List[ConsistencyWarning]:
    warnings: List[ConsistencyWarning] = []
    for triangle in snapshot.triangles:
        if len(triangle) != 3:
            continue
        a, b, c = sorted(triangle)
        name = f'{a}{b}{c}'
        missing = [edge for edge in (_edge(a, b), _edge(a, c), _edge(b, c)) if edge not in edges]
        if missing:
            warnings.append(
                ConsistencyWarning(
                    kind='triangle_edge',
                    message=f'triangle {name} is missing side(s) {", ".join(_format_edge(e) for e in missing)}',
                    hotfixes=[f'add edge {_format_edge(edge)}' for edge in missing],
                )
            )
        for line in snapshot.lines:
            if a in line and b in line and c in line:
                warnings.append(
                    ConsistencyWarning(
                        kind='triangle_collinear',
                        message=f'triangle {name} has collinear vertices on line {"-".join(line)}',
                        hotfixes=[f'remove triangle {name}'],
                    )
                )
                break
    return warnings


def _unjoined_radii(snapshot: Snapshot, edges: Set[Edge]) -> List[ConsistencyWarning]:
    warnings: List[ConsistencyWarning] = []
    for circle in snapshot.circles:
        loose = [p for p in circle.points if _edge(circle.center, p) not in edges]
        if loose:
            warnings.append(
                ConsistencyWarning(
                    kind='circle_radius',
                    message=(
                        f'circle {circle.center}: point(s) {", ".join(loose)} not joined to the centre'
                    ),
                    hotfixes=[f'add edge {_format_edge(_edge(circle.center, p))}' for p in loose],
                )
            )
    return warnings


def _line_only_points(snapshot: Snapshot, edges: Set[Edge]) -> List[ConsistencyWarning]:
    used: Set[PointId] = set()
    for edge in edges:
        used.update(edge)
    for angle in snapshot.angles:
        used.add(angle.vertex)
        used.update(angle.rays)
    for circle in snapshot.circles:
        used.add(circle.center)
        used.update(circle.points)

    warnings: List[ConsistencyWarning] = []
    reported: Set[PointId] = set()
    for line in snapshot.lines:
        for point in line:
            if point in used or point in reported:
                continue
            reported.add(point)
            warnings.append(
                ConsistencyWarning(
                    kind='line_point',
                    message=f'point {point} appears only on line {"-".join(line)}',
                    hotfixes=[f'remove {point} from line {"-".join(line)}'],
                )
            )
    return warnings


def check_consistency(snapshot: Snapshot) -> List[ConsistencyWarning]:
    edges = _edges(snapshot)
    warnings: List[ConsistencyWarning] = []
    warnings.extend(_missing_ray_edges(snapshot, edges))
    warnings.extend(_triangle_gaps(snapshot, edges))
    warnings.extend(_unjoined_radii(snapshot, edges))
    warnings.extend(_line_only_points(snapshot, edges))
    return warnings
