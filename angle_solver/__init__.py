from .model import Angle, Circle, Point, Snapshot, angle_key, get_angle_value, make_triangle
from .config import SolverConfig, get_solver_config, set_solver_config
from .events import (
    ANGLE_SOLVE_COMPLETED,
    ANGLE_SOLVE_FAILED,
    ANGLE_VALUE_CALCULATED,
    AngleChangedEvent,
    EventHub,
)
from .graph import GeometryGraph
from .guard import AngleWriter, ConstraintGuard, HistoryEntry
from .theorems import THEOREMS, Theorem, TheoremContext
from .fixpoint import TriangleReport, run_theorems, validate_triangles
from .solvability import SolvabilityResult, check_solvability
from .solver import AngleSolver, SolveFailure, SolveSummary, can_be_solved, solve_angles
from .equations import AngleEquation, EquationReport, apply_equation_solution, extract_equations, solve_equations
from .loader import SnapshotFormatError, load_snapshot, snapshot_from_dict, snapshot_to_dict
from .validate import validate_snapshot, ValidationError
from .consistency import check_consistency, ConsistencyWarning

__all__ = [
    'Angle',
    'Circle',
    'Point',
    'Snapshot',
    'angle_key',
    'get_angle_value',
    'make_triangle',
    'SolverConfig',
    'get_solver_config',
    'set_solver_config',
    'ANGLE_SOLVE_COMPLETED',
    'ANGLE_SOLVE_FAILED',
    'ANGLE_VALUE_CALCULATED',
    'AngleChangedEvent',
    'EventHub',
    'GeometryGraph',
    'AngleWriter',
    'ConstraintGuard',
    'HistoryEntry',
    'THEOREMS',
    'Theorem',
    'TheoremContext',
    'TriangleReport',
    'run_theorems',
    'validate_triangles',
    'SolvabilityResult',
    'check_solvability',
    'AngleSolver',
    'SolveFailure',
    'SolveSummary',
    'can_be_solved',
    'solve_angles',
    'AngleEquation',
    'EquationReport',
    'apply_equation_solution',
    'extract_equations',
    'solve_equations',
    'SnapshotFormatError',
    'load_snapshot',
    'snapshot_from_dict',
    'snapshot_to_dict',
    'validate_snapshot',
    'ValidationError',
    'check_consistency',
    'ConsistencyWarning',
]
