from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from manim import DL, BLACK, RED, Arc, Dot, Line, Mobject, Polygon, Text

from pda_core.animation import AnimationCommand, LinePayload, TextPayload
from pda_core.config import EdgeStyle
from pda_core.edges import Arc as ArcPrimitive
from pda_core.edges import Marker, Primitive, Segment, Triangle
from pda_core.surface import parse_font
from pda_core.vector import Vec2

# Manim font_size that renders one scene unit tall text
FONT_SIZE_PER_UNIT = 96.0


@dataclass(frozen=True)
class CanvasFrame:
    """Maps a ``width x height`` pixel canvas (y down) onto a scene region (y up).

    The canvas is scaled to ``scene_width`` units and centred on ``center``.
    """

    width: float
    height: float
    scene_width: float = 6.5
    center: tuple = (0.0, 0.0)

    @property
    def scale(self) -> float:
        return self.scene_width / self.width

    def to_point(self, v: Vec2) -> np.ndarray:
        x = (v.x - self.width / 2) * self.scale + self.center[0]
        y = (self.height / 2 - v.y) * self.scale + self.center[1]
        return np.array([x, y, 0.0])


def primitive_to_mobject(primitive: Primitive, frame: CanvasFrame, style: EdgeStyle | None = None) -> Mobject:
    style = style or EdgeStyle()
    if isinstance(primitive, Segment):
        return Line(frame.to_point(primitive.start), frame.to_point(primitive.end), color=BLACK, stroke_width=2)
    if isinstance(primitive, ArcPrimitive):
        # Canvas angles run clockwise on screen; flipping y negates them, and a
        # canvas counter-clockwise sweep becomes a positive manim sweep.
        sweep = primitive.span if primitive.counter_clockwise else -primitive.span
        return Arc(
            radius=primitive.radius * frame.scale,
            start_angle=-primitive.start_angle,
            angle=sweep,
            arc_center=frame.to_point(primitive.center),
            color=BLACK,
            stroke_width=2,
        )
    if isinstance(primitive, Triangle):
        return Polygon(
            frame.to_point(primitive.a),
            frame.to_point(primitive.b),
            frame.to_point(primitive.c),
            color=BLACK,
            fill_color=BLACK,
            fill_opacity=1.0,
            stroke_width=1,
        )
    if isinstance(primitive, Marker):
        return Dot(frame.to_point(primitive.center), radius=primitive.radius * frame.scale, color=RED)
    raise TypeError(f"cannot convert {type(primitive).__name__} to a mobject")


def command_to_mobject(command: AnimationCommand, frame: CanvasFrame) -> Mobject:
    payload = command.payload
    if isinstance(payload, LinePayload):
        return Line(frame.to_point(payload.start), frame.to_point(payload.end), color=BLACK, stroke_width=3)
    if isinstance(payload, TextPayload):
        size, family = parse_font(payload.font)
        text = Text(payload.label, font=family, font_size=size * frame.scale * FONT_SIZE_PER_UNIT, color=BLACK)
        text.move_to(frame.to_point(payload.box.origin), aligned_edge=DL)
        return text
    raise TypeError(f"cannot convert payload {type(payload).__name__} to a mobject")
