"""
Frame-driven animation scheduler.

The scheduler owns one batch of in-flight animation commands and the list of
commands that already finished. Every frame it advances the active batch by
the elapsed time and draws everything: settled commands first, active ones on
top. Once every active command is complete the batch is promoted to settled,
which is the signal its owner uses to produce the next batch.
"""

from __future__ import annotations

from typing import List, Sequence

from .animation import AnimationCommand
from .errors import UnsettledBatch
from .surface import RenderSurface, draw_command


class AnimationScheduler:
    """
    Attributes:
        active: Commands still animating (completion < 1 for at least one)
        settled: Finished commands, redrawn unchanged every frame
        color: Stroke/fill color for every command
    """

    def __init__(self, color: str = "#000000"):
        self.active: List[AnimationCommand] = []
        self.settled: List[AnimationCommand] = []
        self.color = color

    @property
    def is_settled(self) -> bool:
        return not self.active

    def submit(self, batch: Sequence[AnimationCommand]) -> None:
        """
        Start animating a new batch.

        Raises:
            UnsettledBatch: If the previous batch has not settled yet; use
                `clear` first to discard it deliberately
        """
        if self.active:
            raise UnsettledBatch(
                f"{len(self.active)} command(s) of the previous batch are still animating"
            )
        self.active = list(batch)

    def clear(self) -> None:
        """Discard all animation state, in-flight commands included."""
        self.active = []
        self.settled = []

    def tick(self, delta_ms: float, surface: RenderSurface | None = None) -> bool:
        """
        Advance the active batch by ``delta_ms`` and draw a frame.

        Args:
            delta_ms: Time elapsed since the previous tick
            surface: Where to draw; None only advances

        Returns:
            Whether the batch is settled after this tick (an empty batch is)
        """
        for command in self.active:
            command.advance(delta_ms)

        if surface is not None:
            for command in self.settled:
                draw_command(surface, command, self.color)
            for command in self.active:
                draw_command(surface, command, self.color)

        if all(command.done for command in self.active):
            self.settled.extend(self.active)
            self.active = []
            return True
        return False
