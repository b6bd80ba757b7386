"""Solve driver: runs the theorem rules over live angle data and reports the result."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Union

from .config import SolverConfig, resolve_config
from .events import ANGLE_SOLVE_COMPLETED, ANGLE_SOLVE_FAILED, EventHub
from .fixpoint import TriangleReport, run_theorems, validate_triangles
from .graph import GeometryGraph
from .guard import ConstraintGuard, HistoryEntry
from .logging_utils import truncate
from .model import Snapshot, get_angle_value
from .solvability import SolvabilityResult, check_solvability

logger = logging.getLogger(__name__)


@dataclass
class SolveSummary:
    iterations: int
    solved_count: int
    solving_history: List[HistoryEntry]
    execution_time_ms: float
    triangle_report: TriangleReport = field(default_factory=TriangleReport)

    ok = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iterations": self.iterations,
            "solvedCount": self.solved_count,
            "solvingHistory": [dict(entry) for entry in self.solving_history],
            "executionTimeMs": self.execution_time_ms,
            "triangleReport": self.triangle_report.to_dict(),
        }


@dataclass
class SolveFailure:
    error: str

    ok = False

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error}


SolveOutcome = Union[SolveSummary, SolveFailure]


def prepare_angles(snapshot: Snapshot, config: SolverConfig) -> None:
    """Bring locked angles in line with their lock before solving.

    With ``lock_supplied_values`` every angle that arrives with a value is
    locked at that value.
    """

    for angle in snapshot.angles:
        if config.lock_supplied_values and angle.constraint_value is None:
            value = get_angle_value(angle)
            if value is not None:
                angle.constraint_value = value
        if angle.constraint_value is not None:
            angle.value = float(angle.constraint_value)


class AngleSolver:
    """Deduce unknown angle values of one diagram.

    ``update_data`` replaces the working snapshot; ``solve`` mutates the
    angle values in place; ``can_be_solved`` answers the same question on a
    copy of the angles and leaves the live data alone.
    """

    def __init__(self, events: Optional[EventHub] = None, config: Optional[SolverConfig] = None) -> None:
        self.events = events
        self.config = resolve_config(config)
        self.snapshot: Optional[Snapshot] = None
        self.graph: Optional[GeometryGraph] = None
        self.guard = ConstraintGuard(events=events, config=self.config)
        self._lock = threading.Lock()

    def update_data(self, snapshot: Snapshot) -> None:
        prepare_angles(snapshot, self.config)
        self.snapshot = snapshot
        self.graph = GeometryGraph.from_snapshot(snapshot)
        logger.debug(
            "Loaded %d points, %d angles, %d triangles, %d lines, %d circles",
            len(snapshot.points),
            len(snapshot.angles),
            len(snapshot.triangles),
            len(snapshot.lines),
            len(snapshot.circles),
        )

    @property
    def solving_history(self) -> List[HistoryEntry]:
        return self.guard.history

    def solve(self) -> SolveOutcome:
        with self._lock:
            return self._solve()

    def _solve(self) -> SolveOutcome:
        start = time.perf_counter()
        self.guard.reset()
        try:
            if self.graph is None:
                raise RuntimeError("No diagram data loaded")
            graph = self.graph
            iterations = run_theorems(graph, self.guard, self.config)
            report = validate_triangles(graph, self.config.tolerance)
        except Exception as exc:
            logger.exception("Angle solve failed")
            failure = SolveFailure(error=str(exc))
            if self.events is not None:
                self.events.emit(ANGLE_SOLVE_FAILED, failure.to_dict())
            return failure

        elapsed_ms = (time.perf_counter() - start) * 1000.0
        summary = SolveSummary(
            iterations=iterations,
            solved_count=graph.solved_count(),
            solving_history=list(self.guard.history),
            execution_time_ms=round(elapsed_ms, 3),
            triangle_report=report,
        )
        self._log_summary(summary, len(graph.angles))
        if self.events is not None:
            self.events.emit(ANGLE_SOLVE_COMPLETED, summary.to_dict())
        return summary

    def _log_summary(self, summary: SolveSummary, total: int) -> None:
        logger.info(
            "Solved %d/%d angles in %d iteration(s), %.1f ms",
            summary.solved_count,
            total,
            summary.iterations,
            summary.execution_time_ms,
        )
        for entry in summary.solving_history:
            logger.info(
                "  %s = %s° [%s] %s",
                entry["angleName"],
                entry["value"],
                entry["theorem"],
                truncate(entry["reason"], self.config.reason_max_length),
            )
        report = summary.triangle_report
        if report.invalid:
            logger.warning(
                "%d valid, %d invalid, %d incomplete triangle(s)",
                report.valid,
                report.invalid,
                report.incomplete,
            )

    def can_be_solved(self) -> SolvabilityResult:
        if self.graph is None:
            return SolvabilityResult(
                solvable=False,
                reason="Error during validation: No diagram data loaded",
                details={"error": "No diagram data loaded"},
            )
        return check_solvability(self.graph, self.config)

    def validate_triangles(self) -> TriangleReport:
        if self.graph is None:
            return TriangleReport()
        return validate_triangles(self.graph, self.config.tolerance)


def solve_angles(
    snapshot: Snapshot, *, events: Optional[EventHub] = None, config: Optional[SolverConfig] = None
) -> SolveOutcome:
    solver = AngleSolver(events=events, config=config)
    solver.update_data(snapshot)
    return solver.solve()


def can_be_solved(snapshot: Snapshot, *, config: Optional[SolverConfig] = None) -> SolvabilityResult:
    """Dry-run ``snapshot``; its angle values are never changed."""

    cfg = resolve_config(config)
    if cfg.lock_supplied_values or any(angle.constraint_value is not None for angle in snapshot.angles):
        snapshot = Snapshot(
            points=snapshot.points,
            adjacency=snapshot.adjacency,
            lines=snapshot.lines,
            circles=snapshot.circles,
            triangles=snapshot.triangles,
            angles=[replace(angle) for angle in snapshot.angles],
        )
        prepare_angles(snapshot, cfg)
    return check_solvability(GeometryGraph.from_snapshot(snapshot), cfg)


__all__ = [
    "AngleSolver",
    "SolveFailure",
    "SolveOutcome",
    "SolveSummary",
    "can_be_solved",
    "prepare_angles",
    "solve_angles",
]
