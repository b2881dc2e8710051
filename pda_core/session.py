"""
Visualization sessions.

A `Session` owns everything one loaded document needs: the laid-out automaton
graph, the trace stepper and the animation scheduler. Nothing is shared
between sessions. Loading a new document never mutates the running session;
`SessionHandle.reset` builds a complete replacement first and then swaps the
single reference, so a tick always sees either the old or the new session,
never a mix.

Each tick draws the automaton, advances the scheduler and, once the previous
animation batch has settled, pulls exactly one action from the stepper.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .config import SessionConfig
from .edges import Primitive, render_graph
from .errors import DegenerateLayout, TraceError
from .graph import Graph, graph_from_adjacency_list, make_rng, randomly_distribute_nodes, resize
from .layout import layout_nodes
from .loader import SessionDocument
from .scheduler import AnimationScheduler
from .stepper import ParseTraceStepper
from .surface import RecordingSurface, RenderSurface, TextMeasurer, draw_primitives
from .trace import Trace

logger = logging.getLogger(__name__)


def build_automaton(adjacency: Sequence[Sequence[int]], config: SessionConfig) -> Graph:
    """
    Build and lay out the automaton graph for a canvas.

    Nodes are seeded at random inside the canvas margins, relaxed by the force
    layout and fitted back into the margins. A degenerate result is reseeded
    up to ``config.max_reseed_attempts`` times; after that the unfitted
    positions are kept.

    Raises:
        InvalidIndex: If the adjacency list references a missing state
    """
    graph = graph_from_adjacency_list(adjacency)
    rng = make_rng(config.seed)
    bounds_x = (config.margin_x / 2, config.width - config.margin_x / 2)
    bounds_y = (config.margin_y / 2, config.height - config.margin_y / 2)

    attempts = config.max_reseed_attempts + 1
    for attempt in range(1, attempts + 1):
        randomly_distribute_nodes(graph, config.width, config.height, config.margin_x, config.margin_y, rng)
        layout_nodes(graph, config.layout)
        if graph.node_count < 2:
            break
        try:
            resize(graph, bounds_x, bounds_y)
            break
        except DegenerateLayout as exc:
            logger.warning("degenerate layout (attempt %d/%d): %s", attempt, attempts, exc)
    else:
        logger.warning("keeping unfitted layout after %d attempts", attempts)
    return graph


class Session:
    """
    One loaded trace and/or automaton with its animation state.

    Attributes:
        config: Canvas, layout, edge and stepper settings
        trace: The replayed trace, or None
        adjacency: The automaton adjacency list, or None
        graph: Laid-out automaton, or None without an adjacency list
        primitives: Drawable edges and markers of ``graph``
        stepper: Trace stepper, or None without a trace
        scheduler: Animation scheduler for the parse tree
        error: Trace error that halted the session, if any
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        trace: Trace | None = None,
        adjacency: Sequence[Sequence[int]] | None = None,
        measurer: TextMeasurer | None = None,
    ):
        self.config = config or SessionConfig()
        self.trace = trace
        self.adjacency = adjacency
        self.measurer = measurer or RecordingSurface(self.config.width, self.config.height)

        self.graph: Optional[Graph] = None
        self.primitives: List[Primitive] = []
        if adjacency is not None:
            self.graph = build_automaton(adjacency, self.config)
            self.primitives = render_graph(self.graph, self.config.edges)

        self.stepper: Optional[ParseTraceStepper] = None
        if trace is not None:
            self.stepper = ParseTraceStepper.from_trace(trace, self.measurer, self.config.stepper)

        self.scheduler = AnimationScheduler()
        self.error: Optional[TraceError] = None
        self.elapsed_ms = 0.0

    @property
    def halted(self) -> bool:
        return self.error is not None

    @property
    def finished(self) -> bool:
        """Nothing left to animate: the stepper stopped and the last batch settled."""
        stepper_done = self.stepper is None or not self.stepper.running
        return stepper_done and self.scheduler.is_settled

    def tick(
        self,
        delta_ms: float,
        execution_surface: RenderSurface | None = None,
        graph_surface: RenderSurface | None = None,
    ) -> bool:
        """
        Draw one frame and, if the previous batch settled, advance the trace.

        Args:
            delta_ms: Time elapsed since the previous frame
            execution_surface: Surface for the parse tree animation
            graph_surface: Surface for the automaton graph

        Returns:
            Whether the animation batch had settled during this frame
        """
        self.elapsed_ms += delta_ms
        if execution_surface is not None:
            execution_surface.clear(self.config.background)
        if graph_surface is not None:
            graph_surface.clear(self.config.background)
            draw_primitives(graph_surface, self.primitives, self.config.edges)

        settled = self.scheduler.tick(delta_ms, execution_surface)
        if settled:
            self._advance()
        return settled

    def _advance(self) -> None:
        if self.halted or self.stepper is None or not self.stepper.running:
            return
        try:
            batch = self.stepper.step()
        except TraceError as exc:
            self.error = exc
            logger.error("trace halted after %d actions: %s", self.stepper.cursor.position, exc)
            return
        if batch:
            self.scheduler.submit(batch)


class SessionHandle:
    """
    The single swappable reference to the current session.

    Attributes:
        config: Settings for every session created through this handle
        measurer: Text measurer handed to each new session's stepper
        current: The live session, None before the first reset
    """

    def __init__(self, config: SessionConfig | None = None, measurer: TextMeasurer | None = None):
        self.config = config or SessionConfig()
        self.measurer = measurer
        self.current: Optional[Session] = None

    def reset(self, trace: Trace | None = None, adjacency: Sequence[Sequence[int]] | None = None) -> Session:
        """
        Replace the current session with a fresh one.

        Inputs passed as None are taken over from the previous session, which
        restarts them from scratch (new layout, empty tree). If building the new
        session fails the previous one stays current.
        """
        previous = self.current
        if previous is not None:
            if trace is None:
                trace = previous.trace
            if adjacency is None:
                adjacency = previous.adjacency

        session = Session(self.config, trace, adjacency, self.measurer)
        self.current = session
        logger.info(
            "session reset: trace=%s, automaton=%s",
            "yes" if trace is not None else "no",
            f"{len(adjacency)} states" if adjacency is not None else "no",
        )
        return session

    def load(self, document: SessionDocument) -> Session:
        return self.reset(document.trace, document.adjacency)

    def tick(
        self,
        delta_ms: float,
        execution_surface: RenderSurface | None = None,
        graph_surface: RenderSurface | None = None,
    ) -> bool:
        session = self.current
        if session is None:
            return True
        return session.tick(delta_ms, execution_surface, graph_surface)
