"""
Force-directed layout for automaton graphs.

Connected nodes are pulled together by logarithmic springs with rest length
``ideal_length``; unconnected nodes push each other apart with an
inverse-square force. The step size cools exponentially with the iteration
number, so early iterations move nodes a lot and late ones barely at all.

The simulation runs for a fixed iteration budget. It is a plain sequential
double loop over node pairs; force summation is commutative, so the pair order
does not affect the result.
"""

from __future__ import annotations

import logging
import math
from typing import List

from .config import LayoutConfig
from .graph import Graph
from .vector import Vec2, magnitude

logger = logging.getLogger(__name__)


def pair_force(graph: Graph, i: int, j: int, config: LayoutConfig) -> Vec2:
    """
    Force exerted on node ``i`` by node ``j`` (node ``j`` receives the negation).

    Positive magnitudes point from ``i`` towards ``j``. Coincident nodes fall
    back to ``config.min_distance`` instead of dividing by zero; their unit
    direction is then the zero vector.
    """
    disp = graph.nodes[j].position - graph.nodes[i].position
    dist = magnitude(disp, config.min_distance)
    unit = disp / dist

    if graph.are_connected(i, j) or graph.are_connected(j, i):
        factor = config.attractive_constant * math.log(dist / config.ideal_length)
    else:
        factor = -config.repulsive_constant / (dist * dist)
    return unit * factor


def accumulate_forces(graph: Graph, config: LayoutConfig) -> None:
    """Add the pairwise forces of one iteration into every node's accumulator."""
    nodes = graph.nodes
    n = len(nodes)
    for i in range(n):
        for j in range(i + 1, n):
            f = pair_force(graph, i, j, config)
            nodes[i].force = nodes[i].force + f
            nodes[j].force = nodes[j].force - f


def cooling_step(iteration: int, config: LayoutConfig) -> float:
    """Step size applied to the forces of the given iteration."""
    return config.initial_step * math.exp(-iteration * config.cooling_rate)


def apply_forces(graph: Graph, delta: float) -> float:
    """
    Move every node by ``delta * force`` and reset the accumulators.

    Returns:
        The largest distance any node moved
    """
    largest = 0.0
    for node in graph.nodes:
        move = node.force * delta
        node.position = node.position + move
        node.force = Vec2()
        largest = max(largest, magnitude(move, 0.0))
    return largest


def measure_forces(graph: Graph, config: LayoutConfig) -> float:
    """
    Mean force magnitude per node at the current positions.

    Nothing moves; accumulators are left at zero afterwards.
    """
    if not graph.nodes:
        return 0.0
    accumulate_forces(graph, config)
    total = sum(magnitude(node.force, 0.0) for node in graph.nodes)
    for node in graph.nodes:
        node.force = Vec2()
    return total / len(graph.nodes)


class ForceLayout:
    """
    Iterative force simulation over a graph.

    The iteration counter lives on the object, so the budget can be spent in
    one call (`run`) or spread over several calls (`step`) without changing
    the cooling schedule.

    Attributes:
        graph: Graph whose node positions are updated in place
        config: Layout constants and iteration budget
        iteration: Number of iterations applied so far
        converged: Set once an iteration moved no node farther than
            ``config.convergence_threshold``
    """

    def __init__(self, graph: Graph, config: LayoutConfig | None = None):
        self.graph = graph
        self.config = config or LayoutConfig()
        self.iteration = 0
        self.converged = False

    @property
    def done(self) -> bool:
        return self.converged or self.iteration >= self.config.iterations

    def step(self, n: int = 1) -> int:
        """
        Apply up to ``n`` iterations, never exceeding the budget.

        Returns:
            Number of iterations actually applied
        """
        applied = 0
        threshold = self.config.convergence_threshold
        while applied < n and not self.done:
            accumulate_forces(self.graph, self.config)
            moved = apply_forces(self.graph, cooling_step(self.iteration, self.config))
            self.iteration += 1
            applied += 1
            if threshold is not None and moved < threshold:
                self.converged = True
                logger.debug("layout converged after %d iterations", self.iteration)
        return applied

    def run(self) -> int:
        """Spend the remaining iteration budget."""
        return self.step(self.config.iterations - self.iteration)


def layout_nodes(graph: Graph, config: LayoutConfig | None = None) -> List[Vec2]:
    """
    Run the full force layout on ``graph``.

    Returns:
        The final node positions
    """
    layout = ForceLayout(graph, config)
    applied = layout.run()
    logger.info("layout: %d nodes, %d iterations", len(graph.nodes), applied)
    return graph.positions()
