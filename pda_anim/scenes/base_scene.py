from __future__ import annotations

from typing import Iterable, List

from manim import Animation, Create, VGroup, Write

from pda_core.animation import LinePayload
from pda_core.config import EdgeStyle
from pda_core.edges import Primitive

from pda_anim.models.steps import SceneStep
from pda_anim.utils.mobjects import CanvasFrame, command_to_mobject, primitive_to_mobject


class PdaSceneMixin:
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)  # type: ignore[misc]
        self._automaton: VGroup | None = None

    def build_automaton(self, primitives: Iterable[Primitive], frame: CanvasFrame, style: EdgeStyle | None = None) -> VGroup:
        group = VGroup(*[primitive_to_mobject(p, frame, style) for p in primitives])
        self._automaton = group
        self.add(group)  # type: ignore[attr-defined]
        return group

    def apply_step(self, step: SceneStep, frame: CanvasFrame, time_scale: float = 1.0) -> List[Animation]:
        anims: List[Animation] = []
        scale = max(1e-6, float(time_scale))
        for command in step.commands:
            mob = command_to_mobject(command, frame)
            run_time = max(command.duration_ms / 1000.0 / scale, 1e-3)
            # Links grow from the child towards the parent, labels are written out
            if isinstance(command.payload, LinePayload):
                anims.append(Create(mob, run_time=run_time))
            else:
                anims.append(Write(mob, run_time=run_time))
        return anims

    def run_script(self, script: Iterable[SceneStep], frame: CanvasFrame, time_scale: float = 1.0) -> None:
        for step in script:
            anims = self.apply_step(step, frame, time_scale)
            if anims:
                self.play(*anims)  # type: ignore[attr-defined]
            else:
                self.wait(step.duration)  # type: ignore[attr-defined]
