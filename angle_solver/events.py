"""Publish/subscribe hub used to notify the editor about solver progress."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypedDict

logger = logging.getLogger(__name__)

ANGLE_VALUE_CALCULATED = "angle:valueCalculated"
ANGLE_SOLVE_COMPLETED = "angle:solveCompleted"
ANGLE_SOLVE_FAILED = "angle:solveFailed"

Callback = Callable[[Any], None]


class AngleChangedEvent(TypedDict):
    angleId: str
    newValue: float
    reason: str


class EventHub:
    """Minimal message hub; subscribers are called in registration order."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callback]] = {}

    def subscribe(self, message_type: str, callback: Callback) -> Callable[[], None]:
        self._subscribers.setdefault(message_type, []).append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(message_type)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def once(self, message_type: str, callback: Callback) -> Callable[[], None]:
        def wrapper(data: Any) -> None:
            unsubscribe()
            callback(data)

        unsubscribe = self.subscribe(message_type, wrapper)
        return unsubscribe

    def emit(self, message_type: str, data: Any = None) -> None:
        for callback in list(self._subscribers.get(message_type, ())):
            try:
                callback(data)
            except Exception:
                logger.exception("Subscriber for %s failed", message_type)

    def clear(self, message_type: Optional[str] = None) -> None:
        if message_type is None:
            self._subscribers.clear()
        else:
            self._subscribers.pop(message_type, None)

    def subscriber_count(self, message_type: str) -> int:
        return len(self._subscribers.get(message_type, ()))


__all__ = [
    "ANGLE_VALUE_CALCULATED",
    "ANGLE_SOLVE_COMPLETED",
    "ANGLE_SOLVE_FAILED",
    "AngleChangedEvent",
    "EventHub",
]
