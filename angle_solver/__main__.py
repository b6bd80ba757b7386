import argparse
import json
import logging
import sys
from typing import List, Optional, Sequence

from angle_solver import (
    AngleSolver,
    ConsistencyWarning,
    ConstraintGuard,
    GeometryGraph,
    SnapshotFormatError,
    SolverConfig,
    ValidationError,
    apply_equation_solution,
    check_consistency,
    get_solver_config,
    load_snapshot,
    solve_equations,
    validate_snapshot,
)
from angle_solver.logging_utils import truncate

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _build_config(args: argparse.Namespace) -> SolverConfig:
    config = get_solver_config()
    if args.max_iterations is not None:
        config.max_iterations = args.max_iterations
    if args.tolerance is not None:
        config.tolerance = args.tolerance
    if args.lock_supplied:
        config.lock_supplied_values = True
    return config


def _print_warnings(warnings: List[ConsistencyWarning]) -> None:
    print("Warnings:")
    if not warnings:
        print("  (none)")
        return
    for warning in warnings:
        print(f"  - {warning}")
        for hotfix in warning.hotfixes:
            print(f"    hotfix: {hotfix}")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Infer unknown angles of a geometry diagram")
    parser.add_argument("path", help="Path to a diagram snapshot (JSON)")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only report whether the diagram can be fully solved",
    )
    parser.add_argument(
        "--equations",
        action="store_true",
        help="Cross-check with the linear equation system after solving",
    )
    parser.add_argument(
        "--lock-supplied",
        action="store_true",
        help="Lock every angle that comes with a value",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        help="Iteration cap for the rule loop (default: 100)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        help="Angle comparison tolerance in degrees (default: 0.5)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)
    config = _build_config(args)

    try:
        snapshot = load_snapshot(args.path)
        validate_snapshot(snapshot)
    except (SnapshotFormatError, ValidationError) as exc:
        logger.error("Invalid diagram: %s", exc)
        raise SystemExit(1)
    logger.info("Validation succeeded")

    warnings = check_consistency(snapshot)
    for warning in warnings:
        logger.warning("Consistency warning: %s", warning)
        for hotfix in warning.hotfixes:
            logger.info("Suggested hotfix: %s", hotfix)

    solver = AngleSolver(config=config)
    solver.update_data(snapshot)

    if args.dry_run:
        verdict = solver.can_be_solved()
        if args.json:
            print(json.dumps(verdict.to_dict(), ensure_ascii=False, indent=2))
        else:
            _print_warnings(warnings)
            print(f"Solvable: {verdict.solvable}")
            print(f"Reason: {verdict.reason}")
        return

    outcome = solver.solve()
    if not outcome.ok:
        if args.json:
            print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(f"Solve failed: {outcome.to_dict()['error']}")
        raise SystemExit(1)

    payload = outcome.to_dict()
    if args.equations and solver.graph is not None:
        graph: GeometryGraph = solver.graph
        report = solve_equations(graph, config=config)
        guard = ConstraintGuard(config=config)
        apply_equation_solution(graph, guard, report)
        payload["equations"] = report.to_dict()
        payload["equationHistory"] = [dict(entry) for entry in guard.history]

    if args.json:
        payload["angles"] = {angle.id: angle.value for angle in snapshot.angles}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    _print_warnings(warnings)
    print(f"Iterations: {payload['iterations']}")
    print(f"Solved: {payload['solvedCount']}/{len(snapshot.angles)}")
    report_dict = payload["triangleReport"]
    print(
        f"Triangles: {report_dict['valid']} valid, {report_dict['invalid']} invalid, "
        f"{report_dict['incomplete']} incomplete"
    )
    print("History:")
    for entry in payload["solvingHistory"]:
        reason = truncate(entry["reason"], config.reason_max_length)
        print(f"  {entry['angleName']} = {entry['value']}° [{entry['theorem']}] {reason}")
    if "equations" in payload:
        eq = payload["equations"]
        print(f"Equations: consistent={eq['consistent']} max residual={eq['maxResidual']:.3g}")
        for entry in payload["equationHistory"]:
            print(f"  {entry['angleName']} = {entry['value']}° [{entry['theorem']}]")
    print("Angles:")
    for angle in snapshot.angles:
        shown = "?" if angle.value in (None, "", "?") else angle.value
        print(f"  {angle.name}: {shown}")


if __name__ == "__main__":
    main(sys.argv[1:])
