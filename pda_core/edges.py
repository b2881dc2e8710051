"""
Geometry for drawing automaton edges.

One-way edges become a straight segment with an arrowhead. When the reverse
edge also exists the two would overlap, so each direction is drawn as a
circular arc bulging to its own side. All functions here are pure: they take
positions and return drawable primitives, leaving the actual drawing to a
render surface.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Union

from .config import EdgeStyle
from .graph import Graph
from .vector import EPSILON, Vec2, magnitude

TAU = 2 * math.pi


@dataclass(frozen=True)
class Segment:
    start: Vec2
    end: Vec2


@dataclass(frozen=True)
class Arc:
    """
    Circular arc in canvas coordinates.

    ``counter_clockwise`` follows the canvas convention: with y growing downward
    a counter-clockwise arc runs from ``start_angle`` towards decreasing angles.
    """

    center: Vec2
    radius: float
    start_angle: float
    end_angle: float
    counter_clockwise: bool

    def point_at(self, angle: float) -> Vec2:
        return self.center + Vec2(math.cos(angle), math.sin(angle)) * self.radius

    @property
    def span(self) -> float:
        """Angle swept when travelling from ``start_angle`` to ``end_angle``."""
        if self.counter_clockwise:
            return (self.start_angle - self.end_angle) % TAU
        return (self.end_angle - self.start_angle) % TAU


@dataclass(frozen=True)
class Triangle:
    a: Vec2
    b: Vec2
    c: Vec2


@dataclass(frozen=True)
class Marker:
    """Filled disc marking an automaton state."""

    center: Vec2
    radius: float


Primitive = Union[Segment, Arc, Triangle, Marker]


def arc_through_three_points(a: Vec2, b: Vec2, c: Vec2) -> Arc:
    """
    The arc from ``a`` to ``c`` passing through ``b``.

    The centre is where the perpendicular bisectors of ``ab`` and ``bc`` meet;
    the orientation is the sign of ``cross(ab, bc)``.

    Raises:
        ValueError: If the three points are collinear
    """
    ac = c - a
    ab = b - a
    bc = c - b
    cross = ab.cross(bc)
    if abs(cross) < EPSILON:
        raise ValueError("points are collinear; no circle passes through them")

    lam = ac.dot(ab) / cross
    center = (b + c + bc.perpendicular() * lam) * 0.5

    a_center = a - center
    radius = magnitude(a_center, 0.0)
    start_angle = math.atan2(a_center.y, a_center.x)
    end_angle = math.atan2(c.y - center.y, c.x - center.x)
    return Arc(center, radius, start_angle, end_angle, cross < 0)


def make_arrow_head(apex: Vec2, back_dir: Vec2, width: float, length: float) -> Triangle:
    """
    Isosceles arrowhead with its tip at ``apex``.

    ``back_dir`` is a unit vector pointing from the tip back along the edge;
    the base sits ``length`` away along it and is ``width`` wide.
    """
    half_base = apex + back_dir * length
    side = back_dir.perpendicular() * (width / 2)
    return Triangle(apex, half_base + side, half_base - side)


def arrow_head_on_arc_end(arc: Arc, width: float, length: float) -> Triangle:
    """Arrowhead whose tip sits on ``arc`` at its end angle, aligned with the tangent."""
    tangent = Vec2(-math.sin(arc.end_angle), math.cos(arc.end_angle))
    apex = arc.point_at(arc.end_angle)

    # The tangent points towards increasing angles; a clockwise arc arrives
    # travelling that way, so the head must point back against it.
    if not arc.counter_clockwise:
        tangent = -tangent

    return make_arrow_head(apex, tangent, width, length)


def arc_between_two_points(start: Vec2, end: Vec2, style: EdgeStyle) -> List[Primitive]:
    """
    Arc with an arrowhead from ``start`` to ``end``, bulging ``arc_height`` to one side.

    Both ends are pulled in by a tenth of the complementary angle so the arc
    clears the node markers, and the arc body stops short of the arrowhead.
    """
    chord = end - start
    offset = chord.perpendicular()
    middle = (start + end) * 0.5 + offset * (style.arc_height / magnitude(offset, 1.0))

    arc = arc_through_three_points(start, middle, end)

    margin = arc.end_angle - arc.start_angle
    if margin > 0:
        margin = TAU - margin
    else:
        margin = -margin
    margin /= 10

    arc = Arc(
        arc.center,
        arc.radius,
        arc.start_angle - margin,
        arc.end_angle + margin,
        arc.counter_clockwise,
    )

    head = arrow_head_on_arc_end(arc, style.arrow_width, style.arrow_length)

    shorten = min(style.arrow_length / arc.radius, arc.span)
    body_end = arc.end_angle + shorten if arc.counter_clockwise else arc.end_angle - shorten
    body = Arc(arc.center, arc.radius, arc.start_angle, body_end, arc.counter_clockwise)
    return [body, head]


def line_between_two_points(start: Vec2, end: Vec2, style: EdgeStyle) -> List[Primitive]:
    """Straight edge with an arrowhead, trimmed at both ends by ``end_trim`` of its length."""
    trim = (end - start) * style.end_trim
    start = start + trim
    end = end - trim

    back = (start - end).normalized()
    head = make_arrow_head(end, back, style.arrow_width, style.arrow_length)

    shorten = min(style.arrow_length, magnitude(end - start, 0.0))
    body = Segment(start, end + back * shorten)
    return [body, head]


def render_edge(graph: Graph, src: int, dst: int, style: EdgeStyle | None = None) -> List[Primitive]:
    """
    Primitives for the edge ``src -> dst``.

    A mutual edge (``dst -> src`` also present) is drawn as an arc, anything
    else as a straight line. Edges whose endpoints coincide, self-loops
    included, produce no primitives.
    """
    style = style or EdgeStyle()
    a = graph.nodes[src].position
    b = graph.nodes[dst].position
    if magnitude(b - a, 0.0) == 0.0:
        return []

    if graph.are_connected(dst, src):
        return arc_between_two_points(a, b, style)
    return line_between_two_points(a, b, style)


def render_graph(graph: Graph, style: EdgeStyle | None = None) -> List[Primitive]:
    """Every edge of ``graph`` followed by one marker per node, markers drawn last."""
    style = style or EdgeStyle()
    primitives: List[Primitive] = []
    for src, dst in graph.edge_pairs():
        primitives.extend(render_edge(graph, src, dst, style))
    for node in graph.nodes:
        primitives.append(Marker(node.position, style.node_radius))
    return primitives
