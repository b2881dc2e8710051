from __future__ import annotations

from manim import MovingCameraScene

from pda_core.config import SessionConfig
from pda_core.loader import SessionDocument
from pda_core.session import Session

from pda_anim.scenes.base_scene import PdaSceneMixin
from pda_anim.script.compiler import compile_trace_to_steps
from pda_anim.utils.mobjects import CanvasFrame


class ParseTraceScene(PdaSceneMixin, MovingCameraScene):
    def construct(self):
        document: SessionDocument = getattr(self, "_document", None) or SessionDocument()
        config: SessionConfig = getattr(self, "_session_config", None) or SessionConfig()
        time_scale = float(getattr(self, "_time_scale", 1.0))

        self.camera.background_color = config.background

        # Automaton on the left half, parse tree on the right half
        graph_frame = CanvasFrame(config.width, config.height, scene_width=6.5, center=(-3.5, 0.0))
        tree_frame = CanvasFrame(config.width, config.height, scene_width=6.5, center=(3.5, 0.0))

        session = Session(config, document.trace, document.adjacency)
        if session.graph is not None:
            self.build_automaton(session.primitives, graph_frame, config.edges)

        if session.stepper is not None:
            steps = compile_trace_to_steps(session.stepper, time_scale)
            self.run_script(steps, tree_frame, time_scale)

        self.wait(1.0)
