"""Dry run: would the rules fully and consistently solve this diagram?"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import SolverConfig, resolve_config
from .fixpoint import find_contradictions, run_theorems
from .graph import GeometryGraph
from .guard import ConstraintGuard

logger = logging.getLogger(__name__)


@dataclass
class SolvabilityResult:
    solvable: bool
    reason: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "solvable": self.solvable,
            "reason": self.reason,
            "details": dict(self.details),
        }


def check_solvability(graph: GeometryGraph, config: Optional[SolverConfig] = None) -> SolvabilityResult:
    """Run the fixed-point loop over copies of the angles of ``graph``.

    The trial graph shares points, adjacency, lines, circles and triangles
    with ``graph``; only the angle records are copied, and the guard used
    here has its own history and no event hub.  ``graph`` is left exactly
    as it was, whatever happens.
    """

    cfg = resolve_config(config)
    try:
        trial = graph.with_cloned_angles()
        guard = ConstraintGuard(events=None, config=cfg)
        iterations = run_theorems(trial, guard, cfg, quiet=True)

        total = len(trial.angles)
        solved = trial.solved_count()
        contradictions = find_contradictions(trial, cfg.tolerance)
    except Exception as exc:
        logger.exception("Dry run failed")
        return SolvabilityResult(
            solvable=False,
            reason=f"Error during validation: {exc}",
            details={"error": str(exc)},
        )

    all_solved = solved == total
    has_contradictions = bool(contradictions)
    if has_contradictions:
        reason = "Contradictions found: " + "; ".join(contradictions)
    elif not all_solved:
        reason = f"{total - solved} unsolved angle(s)"
    else:
        reason = "All angles solved, no contradictions"

    logger.debug("Dry run after %d iteration(s): %s", iterations, reason)
    return SolvabilityResult(
        solvable=all_solved and not has_contradictions,
        reason=reason,
        details={
            "iterations": iterations,
            "solvedAngles": solved,
            "totalAngles": total,
            "hasContradictions": has_contradictions,
            "contradictions": contradictions,
        },
    )


__all__ = ["SolvabilityResult", "check_solvability"]
