"""
Graph model for automaton state-transition diagrams.

This module defines the positioned graph the force layout works on:
- GraphNode: a node position plus a per-iteration force accumulator
- Graph: ordered nodes and a set of directed edges packed into integer keys
- Builders and placement helpers (random seeding, affine rescaling)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Set, Tuple

import networkx as nx
import numpy as np

from .errors import DegenerateLayout, InvalidIndex, TraceFormatError
from .vector import Vec2

logger = logging.getLogger(__name__)


@dataclass
class GraphNode:
    """
    A positioned automaton state.

    Attributes:
        position: Current position in canvas coordinates (y grows downward)
        force: Force accumulated during the current layout iteration; reset to
            zero once the iteration has been applied
    """

    position: Vec2 = field(default_factory=Vec2)
    force: Vec2 = field(default_factory=Vec2)


class Graph:
    """
    Directed graph over positioned nodes.

    Edges are stored as integer keys ``src * node_count + dst`` so membership
    tests are a single set lookup. The node count is fixed at construction;
    every key satisfies ``0 <= src, dst < node_count``.

    Attributes:
        nodes: Ordered list of nodes; a node's index is its automaton state id
        edges: Set of packed ``(src, dst)`` keys
    """

    def __init__(self, nodes: List[GraphNode] | None = None, edges: Set[int] | None = None):
        self.nodes: List[GraphNode] = list(nodes or [])
        self.edges: Set[int] = set(edges or ())

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_key(self, src: int, dst: int) -> int:
        return src * len(self.nodes) + dst

    def add_edge(self, src: int, dst: int) -> None:
        """
        Add a directed edge between existing nodes.

        Raises:
            InvalidIndex: If either endpoint is outside ``[0, node_count)``
        """
        n = len(self.nodes)
        for idx in (src, dst):
            if isinstance(idx, bool) or not isinstance(idx, (int, np.integer)) or not 0 <= idx < n:
                raise InvalidIndex(f"node index {idx!r} outside [0, {n})")
        self.edges.add(self.edge_key(int(src), int(dst)))

    def are_connected(self, src: int, dst: int) -> bool:
        """Whether the directed edge ``src -> dst`` exists; false for indices outside the graph."""
        n = len(self.nodes)
        if not (0 <= src < n and 0 <= dst < n):
            return False
        return self.edge_key(src, dst) in self.edges

    def is_mutual(self, src: int, dst: int) -> bool:
        """Whether both ``src -> dst`` and ``dst -> src`` exist."""
        return self.are_connected(src, dst) and self.are_connected(dst, src)

    def edge_pairs(self) -> List[Tuple[int, int]]:
        """All edges as ``(src, dst)`` pairs in ascending key order."""
        n = len(self.nodes)
        return [divmod(key, n) for key in sorted(self.edges)]

    def positions(self) -> List[Vec2]:
        return [node.position for node in self.nodes]

    def bounding_box(self) -> Tuple[float, float, float, float]:
        """
        Axis-aligned bounding box of all node positions.

        Returns:
            ``(min_x, min_y, max_x, max_y)``

        Raises:
            ValueError: If the graph has no nodes
        """
        if not self.nodes:
            raise ValueError("bounding box of an empty graph")
        xs = [node.position.x for node in self.nodes]
        ys = [node.position.y for node in self.nodes]
        return min(xs), min(ys), max(xs), max(ys)

    def to_networkx(self) -> "nx.DiGraph":
        """
        Convert the graph to a NetworkX DiGraph for export/analysis.

        Nodes carry their ``x``/``y`` position; edges carry a ``mutual`` flag
        telling whether the reverse edge exists.
        """
        G = nx.DiGraph()
        for idx, node in enumerate(self.nodes):
            G.add_node(idx, x=float(node.position.x), y=float(node.position.y))
        for src, dst in self.edge_pairs():
            G.add_edge(src, dst, mutual=self.are_connected(dst, src))
        return G

    def export_graphml(self, filepath: str) -> None:
        """
        Export the graph, including the current layout, to GraphML.

        Args:
            filepath: Path where to save the GraphML file
        """
        nx.write_graphml(self.to_networkx(), filepath)


def graph_from_adjacency_list(adjacency_list: Sequence[Iterable[int]]) -> Graph:
    """
    Build a graph from an adjacency list.

    Entry ``i`` lists the destinations reachable from state ``i``. The graph has
    one node per entry, all at the origin, and one edge per listed destination
    (duplicates collapse).

    Args:
        adjacency_list: For each source index, an iterable of destination indices

    Returns:
        Graph with ``len(adjacency_list)`` nodes

    Raises:
        InvalidIndex: If a destination is outside ``[0, len(adjacency_list))``
        TraceFormatError: If an entry is not an iterable of destinations
    """
    graph = Graph([GraphNode() for _ in adjacency_list])
    for src, neighbors in enumerate(adjacency_list):
        if isinstance(neighbors, (str, bytes)) or not isinstance(neighbors, Iterable):
            raise TraceFormatError(f"adjacency entry {src} must be a list of destinations, got {neighbors!r}")
        for dst in neighbors:
            graph.add_edge(src, dst)
    return graph


def make_rng(seed: int | None = None) -> np.random.Generator:
    """Random source for node placement; a fixed seed reproduces the layout."""
    return np.random.default_rng(seed)


def randomly_distribute_nodes(
    graph: Graph,
    width: float,
    height: float,
    x_margin: float,
    y_margin: float,
    rng: np.random.Generator | None = None,
) -> None:
    """
    Place every node uniformly at random inside the canvas shrunk by the margins.

    Half of each margin is kept free on both sides, so positions fall in
    ``[x_margin/2, width - x_margin/2] x [y_margin/2, height - y_margin/2]``.
    """
    rng = rng if rng is not None else make_rng()
    samples = rng.random((len(graph.nodes), 2))
    for node, (u, v) in zip(graph.nodes, samples):
        x = float(u) * (width - x_margin) + x_margin / 2
        y = float(v) * (height - y_margin) + y_margin / 2
        node.position = Vec2(x, y)


def resize(graph: Graph, bounds_x: Tuple[float, float], bounds_y: Tuple[float, float]) -> None:
    """
    Affinely rescale all positions from their bounding box into new bounds.

    Relative placement is preserved: the node with the smallest x lands on
    ``bounds_x[0]``, the one with the largest x on ``bounds_x[1]``, and the same
    for y.

    Args:
        graph: Graph whose positions are rescaled in place
        bounds_x: Target ``(min_x, max_x)``
        bounds_y: Target ``(min_y, max_y)``

    Raises:
        DegenerateLayout: If the bounding box has zero width or height; positions
            are left unchanged
    """
    if not graph.nodes:
        return
    min_x, min_y, max_x, max_y = graph.bounding_box()
    span_x = max_x - min_x
    span_y = max_y - min_y
    if span_x == 0 or span_y == 0:
        raise DegenerateLayout(
            f"cannot rescale a layout with extent {span_x} x {span_y}"
        )

    sx = (bounds_x[1] - bounds_x[0]) / span_x
    sy = (bounds_y[1] - bounds_y[0]) / span_y
    for node in graph.nodes:
        p = node.position
        node.position = Vec2(
            bounds_x[0] + (p.x - min_x) * sx,
            bounds_y[0] + (p.y - min_y) * sy,
        )
    logger.debug("resized %d nodes into %s x %s", len(graph.nodes), bounds_x, bounds_y)
