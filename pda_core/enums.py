"""
Enumerations shared across the pdaviz core.
"""

from enum import Enum, auto


class ActionType(Enum):
    """
    Kinds of parser actions found in a trace.

    - SHIFT: consume one input character and push it as a leaf
    - REDUCE: pop a number of stack entries and push them under a new symbol
    - FINISH: end of the parse run
    """

    SHIFT = auto()
    REDUCE = auto()
    FINISH = auto()

    @classmethod
    def from_wire(cls, name: str) -> "ActionType":
        """Map the lowercase wire name (``"shift"``, ...) to a member."""
        return cls[name.upper()]


class StepperState(Enum):
    """
    Lifecycle of a parse trace stepper.

    - RUNNING: actions are still being consumed
    - FINISHED: a finish action was consumed or the action stream ran out
    - HALTED: a malformed action stopped the replay
    """

    RUNNING = auto()
    FINISHED = auto()
    HALTED = auto()


class AnimationKind(Enum):
    """Kinds of animation commands emitted by the stepper."""

    LINE = auto()
    """A line growing from its start point towards its end point."""

    TEXT = auto()
    """A label revealed at its baseline origin."""
