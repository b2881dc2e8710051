"""
Animation commands exchanged between the trace stepper and the scheduler.

A command is either a line growing from its start to its end point or a label
being revealed. The payload is a tagged variant: consumers match on the
payload class and must handle both.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .enums import AnimationKind
from .tree import Box
from .vector import Vec2

# Completions this close to 1 count as finished; repeated float division
# otherwise leaves e.g. 0.9999999999999999 after six 50 ms ticks of 300 ms.
COMPLETION_EPSILON = 1e-9


@dataclass(frozen=True)
class LinePayload:
    start: Vec2
    end: Vec2


@dataclass(frozen=True)
class TextPayload:
    label: str
    box: Box
    font: str


Payload = Union[LinePayload, TextPayload]


@dataclass
class AnimationCommand:
    """
    A time-boxed animation.

    Attributes:
        payload: What is drawn
        duration_ms: Time the animation takes to complete
        completion: Fraction in ``[0, 1]``; never decreases and stays at 1 once reached
    """

    payload: Payload
    duration_ms: float
    completion: float = 0.0

    @property
    def kind(self) -> AnimationKind:
        if isinstance(self.payload, LinePayload):
            return AnimationKind.LINE
        if isinstance(self.payload, TextPayload):
            return AnimationKind.TEXT
        raise TypeError(f"unknown animation payload {type(self.payload).__name__}")

    @property
    def done(self) -> bool:
        return self.completion >= 1.0

    def advance(self, delta_ms: float) -> float:
        """Advance by ``delta_ms`` of elapsed time and return the new completion."""
        if self.done:
            return self.completion
        if self.duration_ms <= 0:
            self.completion = 1.0
            return self.completion

        completion = self.completion + max(0.0, delta_ms) / self.duration_ms
        if completion >= 1.0 - COMPLETION_EPSILON:
            completion = 1.0
        self.completion = completion
        return completion
