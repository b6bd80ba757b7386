"""Example pipeline: compare the rule engine with the linear equation system."""

from angle_solver import (
    ConstraintGuard,
    GeometryGraph,
    apply_equation_solution,
    snapshot_from_dict,
    solve_angles,
    solve_equations,
)

DIAGRAM = {
    "points": [{"id": "A"}, {"id": "B"}, {"id": "C"}],
    "edges": [{"p": ["A", "C"]}, {"p": ["C", "B"]}, {"p": ["B", "A"]}],
    "angles": [
        {"id": "C", "p": ["A", "B"], "l": "α"},
        {"id": "B", "p": ["C", "A"], "l": "α"},
        {"id": "A", "p": ["C", "B"], "v": "92"},
    ],
}


def main() -> None:
    snapshot = snapshot_from_dict(DIAGRAM)
    summary = solve_angles(snapshot)
    print("Rules solved:", summary.solved_count, "of", len(snapshot.angles))

    graph = GeometryGraph.from_snapshot(snapshot)
    report = solve_equations(graph)
    print("Consistent:", report.consistent, "free:", report.free)

    guard = ConstraintGuard()
    apply_equation_solution(graph, guard, report)
    for entry in guard.history:
        print(f"{entry['angleName']} = {entry['value']} [{entry['theorem']}]")


if __name__ == "__main__":
    main()
