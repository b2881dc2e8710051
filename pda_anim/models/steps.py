from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from pda_core.animation import AnimationCommand


@dataclass(frozen=True)
class SceneStep:
    idx: int
    duration: float
    commands: List[AnimationCommand]


def batch_duration_ms(batch: Sequence[AnimationCommand]) -> float:
    """Time a batch needs to settle: its longest command."""
    return max((c.duration_ms for c in batch), default=0.0)
