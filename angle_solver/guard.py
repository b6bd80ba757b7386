"""The single place where angle values change."""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, TypedDict

from .config import SolverConfig, resolve_config
from .events import ANGLE_VALUE_CALCULATED, AngleChangedEvent, EventHub
from .model import Angle, get_angle_value

logger = logging.getLogger(__name__)


class HistoryEntry(TypedDict):
    angleId: str
    angleName: str
    value: float
    theorem: str
    reason: str


class AngleWriter(Protocol):
    """Port through which theorem rules commit values."""

    def set_angle_value(self, angle: Angle, value: float, reason: str, theorem: str = "Unknown") -> bool:
        ...


class ConstraintGuard:
    """Write funnel enforcing locks and recording an audit trail.

    ``set_angle_value`` returns ``True`` only when it actually stored a new
    value.  Locked angles and values already within tolerance are skipped.
    """

    def __init__(self, events: Optional[EventHub] = None, config: Optional[SolverConfig] = None) -> None:
        self.events = events
        self.config = resolve_config(config)
        self.history: List[HistoryEntry] = []

    def set_angle_value(self, angle: Angle, value: float, reason: str, theorem: str = "Unknown") -> bool:
        numeric = float(value)

        if angle.constraint_value is not None:
            logger.debug(
                "Skipping %s: locked at %s° (%s proposed %.2f°)",
                angle.name,
                angle.constraint_value,
                theorem,
                numeric,
            )
            return False

        existing = get_angle_value(angle)
        if existing is not None:
            if abs(existing - numeric) < self.config.tolerance:
                return False
            logger.info("Changing %s: %s° -> %.2f° (%s)", angle.name, existing, numeric, theorem)

        new_value = round(numeric, self.config.value_decimals)
        angle.value = new_value
        self.history.append(
            HistoryEntry(
                angleId=angle.id,
                angleName=angle.name or angle.id,
                value=new_value,
                theorem=theorem,
                reason=reason,
            )
        )
        if self.events is not None:
            self.events.emit(
                ANGLE_VALUE_CALCULATED,
                AngleChangedEvent(angleId=angle.id, newValue=new_value, reason=reason),
            )
        return True

    def reset(self) -> None:
        self.history = []


__all__ = ["AngleWriter", "ConstraintGuard", "HistoryEntry"]
