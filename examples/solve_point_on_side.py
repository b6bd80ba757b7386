"""Example pipeline: load an editor export and infer the missing angles."""

from angle_solver import AngleSolver, EventHub, ANGLE_VALUE_CALCULATED, snapshot_from_dict, validate_snapshot

DIAGRAM = {
    "points": [{"id": "A"}, {"id": "B"}, {"id": "C"}, {"id": "D"}],
    "edges": [
        {"p": ["A", "B"]},
        {"p": ["A", "D"]},
        {"p": ["D", "B"]},
        {"p": ["C", "A"]},
        {"p": ["C", "D"]},
        {"p": ["C", "B"]},
    ],
    "angles": [
        {"id": "A", "p": ["D", "C"]},
        {"id": "C", "p": ["A", "D"], "v": "55"},
        {"id": "D", "p": ["B", "C"], "v": "130"},
        {"id": "D", "p": ["A", "C"]},
        {"id": "C", "p": ["A", "B"]},
        {"id": "C", "p": ["D", "B"]},
        {"id": "B", "p": ["D", "C"], "v": "29"},
    ],
    "lines": [["A", "D", "B"]],
}


def main() -> None:
    snapshot = snapshot_from_dict(DIAGRAM)
    validate_snapshot(snapshot)

    events = EventHub()
    events.subscribe(
        ANGLE_VALUE_CALCULATED,
        lambda data: print(f"  {data['angleId']} -> {data['newValue']} ({data['reason']})"),
    )
    solver = AngleSolver(events=events)
    solver.update_data(snapshot)

    print("Dry run:", solver.can_be_solved().reason)
    summary = solver.solve()
    print("Iterations:", summary.iterations)
    print("Contradictions:", summary.triangle_report.contradictions)
    for angle in snapshot.angles:
        print(f"{angle.name}: {angle.value}")


if __name__ == "__main__":
    main()
