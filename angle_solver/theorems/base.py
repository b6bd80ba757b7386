from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from ..config import SolverConfig
from ..graph import GeometryGraph
from ..guard import AngleWriter
from ..logging_utils import debug_log_call
from ..model import Angle, get_angle_value

logger = logging.getLogger(__name__)


@dataclass
class TheoremContext:
    """Everything a rule may read, plus the port it writes through."""

    graph: GeometryGraph
    writer: AngleWriter
    config: SolverConfig

    @property
    def tolerance(self) -> float:
        return self.config.tolerance

    def write(self, angle: Angle, value: float, reason: str, theorem: str) -> bool:
        return self.writer.set_angle_value(angle, value, reason, theorem)

    def differs(self, current: Optional[float], target: float) -> bool:
        """True when ``current`` is unknown or off ``target`` by more than the tolerance."""

        return current is None or abs(current - target) > self.tolerance


@dataclass
class Theorem:
    name: str
    apply: Callable[[TheoremContext], bool]

    def __post_init__(self) -> None:
        theorem_logger = logger.getChild(f"Theorem[{self.name}]")
        self.apply = debug_log_call(theorem_logger, name=f"{self.name}.apply")(self.apply)

    def __call__(self, ctx: TheoremContext) -> bool:
        return bool(self.apply(ctx))


def pairs(angles: Sequence[Angle]) -> Iterator[Tuple[Angle, Angle]]:
    for i, first in enumerate(angles):
        for second in angles[i + 1:]:
            yield first, second


def copy_known(ctx: TheoremContext, first: Angle, second: Angle, reason: str, theorem: str) -> bool:
    """Copy a known value onto an unknown partner, in whichever direction applies."""

    value1 = get_angle_value(first)
    value2 = get_angle_value(second)
    if value1 is not None and value2 is None:
        return ctx.write(second, value1, reason.format(source=first.name), theorem)
    if value2 is not None and value1 is None:
        return ctx.write(first, value2, reason.format(source=second.name), theorem)
    return False


def known_values(angles: Sequence[Angle]) -> List[Optional[float]]:
    return [get_angle_value(angle) for angle in angles]
