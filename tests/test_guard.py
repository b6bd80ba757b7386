from angle_solver.config import SolverConfig
from angle_solver.events import ANGLE_VALUE_CALCULATED, EventHub
from angle_solver.guard import ConstraintGuard

from diagrams import angle


def test_guard_writes_rounded_value_and_records_history():
    events = EventHub()
    seen = []
    events.subscribe(ANGLE_VALUE_CALCULATED, seen.append)
    guard = ConstraintGuard(events=events)
    target = angle("BAC")

    assert guard.set_angle_value(target, 70.04, "Triangle sum", "Triangle Angle Sum")

    assert target.value == 70.0
    assert guard.history == [
        {
            "angleId": "BAC",
            "angleName": "∠BAC",
            "value": 70.0,
            "theorem": "Triangle Angle Sum",
            "reason": "Triangle sum",
        }
    ]
    assert seen == [{"angleId": "BAC", "newValue": 70.0, "reason": "Triangle sum"}]


def test_guard_never_touches_locked_angle():
    guard = ConstraintGuard(events=None)
    locked = angle("BAC", 50.0, lock=50.0)

    assert not guard.set_angle_value(locked, 80.0, "anything")

    assert locked.value == 50.0
    assert guard.history == []


def test_guard_skips_values_within_tolerance():
    guard = ConstraintGuard(config=SolverConfig(tolerance=0.5))
    target = angle("BAC", 60.0)

    assert not guard.set_angle_value(target, 60.3, "close enough")
    assert target.value == 60.0
    assert guard.set_angle_value(target, 61.0, "real change")
    assert target.value == 61.0


def test_guard_treats_sentinel_as_unknown():
    guard = ConstraintGuard()
    target = angle("BAC", "?")

    assert guard.set_angle_value(target, 45, "from somewhere")
    assert target.value == 45.0
    assert guard.history[0]["theorem"] == "Unknown"


def test_reset_clears_history():
    guard = ConstraintGuard()
    guard.set_angle_value(angle("BAC"), 30.0, "first")
    guard.reset()
    assert guard.history == []
