"""
The render-surface contract and the drawing routines built on it.

A render surface is any object offering canvas-like path primitives in a 2D
coordinate space with y growing downward. The core never depends on a
particular drawing backend: it hands primitives and animation commands to
`draw_primitive` / `draw_command`, which translate them into surface calls.

`RecordingSurface` is a headless surface that records every call; it backs
the tests and the command line replay.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Protocol, Tuple

from .animation import AnimationCommand, LinePayload, TextPayload
from .config import EdgeStyle
from .edges import Arc, Marker, Primitive, Segment, Triangle


@dataclass(frozen=True)
class TextMetrics:
    width: float
    ascent: float
    descent: float

    @property
    def height(self) -> float:
        return self.ascent + self.descent


class TextMeasurer(Protocol):
    def measure_text(self, text: str, font: str) -> TextMetrics:
        ...


class RenderSurface(TextMeasurer, Protocol):
    def clear(self, color: str) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def arc(self, cx: float, cy: float, radius: float, start_angle: float, end_angle: float, counter_clockwise: bool = False) -> None:
        ...

    def close_path(self) -> None:
        ...

    def stroke(self, color: str, width: float = 1.0) -> None:
        ...

    def fill(self, color: str) -> None:
        ...

    def fill_text(self, text: str, x: float, y: float, font: str, color: str = "#000000") -> None:
        ...


_FONT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)px\s+(.+?)\s*$")


def parse_font(font: str) -> Tuple[float, str]:
    """
    Split a CSS-style font string into size and family.

    ``"40px Ubuntu Mono"`` -> ``(40.0, "Ubuntu Mono")``

    Raises:
        ValueError: If the string is not ``<size>px <family>``
    """
    m = _FONT_RE.match(font)
    if m is None:
        raise ValueError(f"unsupported font specification: {font!r}")
    return float(m.group(1)), m.group(2)


class RecordingSurface:
    """
    Headless render surface.

    Every call is appended to ``ops`` as ``(name, args)``. Text is measured as
    a monospace font whose advance is ``char_width`` times the font size, with
    ascent/descent at 0.8/0.2 of the size.
    """

    def __init__(self, width: float = 800.0, height: float = 600.0, char_width: float = 0.5):
        self.width = width
        self.height = height
        self.char_width = char_width
        self.ops: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.ops.append((name, args))

    def reset(self) -> None:
        self.ops.clear()

    def calls(self, name: str) -> List[Tuple[Any, ...]]:
        """Arguments of every recorded call named ``name``."""
        return [args for op, args in self.ops if op == name]

    def measure_text(self, text: str, font: str) -> TextMetrics:
        size, _ = parse_font(font)
        return TextMetrics(width=len(text) * size * self.char_width, ascent=size * 0.8, descent=size * 0.2)

    def clear(self, color: str) -> None:
        self.ops.clear()
        self._record("clear", color)

    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)

    def arc(self, cx: float, cy: float, radius: float, start_angle: float, end_angle: float, counter_clockwise: bool = False) -> None:
        self._record("arc", cx, cy, radius, start_angle, end_angle, counter_clockwise)

    def close_path(self) -> None:
        self._record("close_path")

    def stroke(self, color: str, width: float = 1.0) -> None:
        self._record("stroke", color, width)

    def fill(self, color: str) -> None:
        self._record("fill", color)

    def fill_text(self, text: str, x: float, y: float, font: str, color: str = "#000000") -> None:
        self._record("fill_text", text, x, y, font, color)


def draw_primitive(surface: RenderSurface, primitive: Primitive, style: EdgeStyle | None = None) -> None:
    """
    Draw one edge-geometry primitive.

    Raises:
        TypeError: For anything that is not a known primitive
    """
    style = style or EdgeStyle()
    if isinstance(primitive, Segment):
        surface.begin_path()
        surface.move_to(primitive.start.x, primitive.start.y)
        surface.line_to(primitive.end.x, primitive.end.y)
        surface.stroke(style.edge_color)
    elif isinstance(primitive, Arc):
        surface.begin_path()
        surface.arc(
            primitive.center.x,
            primitive.center.y,
            primitive.radius,
            primitive.start_angle,
            primitive.end_angle,
            primitive.counter_clockwise,
        )
        surface.stroke(style.edge_color)
    elif isinstance(primitive, Triangle):
        surface.begin_path()
        surface.move_to(primitive.a.x, primitive.a.y)
        surface.line_to(primitive.b.x, primitive.b.y)
        surface.line_to(primitive.c.x, primitive.c.y)
        surface.close_path()
        surface.fill(style.edge_color)
    elif isinstance(primitive, Marker):
        surface.begin_path()
        surface.arc(primitive.center.x, primitive.center.y, primitive.radius, 0.0, 2 * math.pi)
        surface.fill(style.node_color)
    else:
        raise TypeError(f"cannot draw {type(primitive).__name__}")


def draw_primitives(surface: RenderSurface, primitives: Iterable[Primitive], style: EdgeStyle | None = None) -> None:
    for primitive in primitives:
        draw_primitive(surface, primitive, style)


def draw_command(surface: RenderSurface, command: AnimationCommand, color: str = "#000000") -> None:
    """
    Draw an animation command at its current completion.

    Lines are drawn from their start point for ``completion`` of their length;
    labels show the first ``ceil(completion * len)`` characters.
    """
    payload = command.payload
    if isinstance(payload, LinePayload):
        tip = payload.start + (payload.end - payload.start) * command.completion
        surface.begin_path()
        surface.move_to(payload.start.x, payload.start.y)
        surface.line_to(tip.x, tip.y)
        surface.stroke(color, 2.0)
    elif isinstance(payload, TextPayload):
        shown = math.ceil(command.completion * len(payload.label))
        if shown > 0:
            surface.fill_text(payload.label[:shown], payload.box.x, payload.box.y, payload.font, color)
    else:
        raise TypeError(f"cannot draw payload {type(payload).__name__}")

