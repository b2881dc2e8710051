"""
Unit tests for the force-directed layout.

These tests cover the pairwise force law, the cooling schedule, the iteration
budget and early convergence, and the stability of a full layout run.
"""

import math

import pytest

from pda_core.config import LayoutConfig, SessionConfig
from pda_core.graph import Graph, GraphNode, graph_from_adjacency_list, make_rng, randomly_distribute_nodes
from pda_core.layout import (
    ForceLayout,
    accumulate_forces,
    apply_forces,
    cooling_step,
    layout_nodes,
    measure_forces,
    pair_force,
)
from pda_core.vector import Vec2


def _seeded_path(n=4, seed=7):
    g = graph_from_adjacency_list([[i + 1] for i in range(n - 1)] + [[]])
    cfg = SessionConfig()
    randomly_distribute_nodes(g, cfg.width, cfg.height, cfg.margin_x, cfg.margin_y, make_rng(seed))
    return g


class TestPairForce:
    """Test the attraction/repulsion law between two nodes."""

    def test_connected_nodes_attract_beyond_ideal_length(self):
        g = graph_from_adjacency_list([[1], []])
        g.nodes[1].position = Vec2(80.0, 0.0)
        cfg = LayoutConfig()

        f = pair_force(g, 0, 1, cfg)

        assert f.x == pytest.approx(math.log(80.0 / 40.0))
        assert f.y == pytest.approx(0.0)

    def test_connected_nodes_push_apart_below_ideal_length(self):
        g = graph_from_adjacency_list([[], [0]])
        g.nodes[1].position = Vec2(20.0, 0.0)

        f = pair_force(g, 0, 1, LayoutConfig())

        # Edge direction does not matter; ln(0.5) < 0 points away from node 1
        assert f.x < 0

    def test_unconnected_nodes_repel_inverse_square(self):
        g = Graph([GraphNode(Vec2(0, 0)), GraphNode(Vec2(0, 10))])

        f = pair_force(g, 0, 1, LayoutConfig())

        assert f.x == pytest.approx(0.0)
        assert f.y == pytest.approx(-1000.0 / 100.0)

    def test_coincident_nodes_produce_no_nan(self):
        g = Graph([GraphNode(), GraphNode()])

        f = pair_force(g, 0, 1, LayoutConfig())

        assert f == Vec2(0.0, 0.0)

    def test_forces_are_equal_and_opposite(self):
        g = Graph([GraphNode(Vec2(0, 0)), GraphNode(Vec2(30, 40))])
        accumulate_forces(g, LayoutConfig())

        total = g.nodes[0].force + g.nodes[1].force
        assert total.x == pytest.approx(0.0)
        assert total.y == pytest.approx(0.0)


class TestCooling:
    """Test the exponential step-size schedule."""

    def test_cooling_schedule(self):
        cfg = LayoutConfig()

        assert cooling_step(0, cfg) == pytest.approx(2.0)
        assert cooling_step(1000, cfg) == pytest.approx(2.0 * math.exp(-1.0))

    def test_apply_forces_moves_and_resets(self):
        g = Graph([GraphNode(Vec2(1, 1), force=Vec2(3, 4))])

        moved = apply_forces(g, 2.0)

        assert moved == pytest.approx(10.0)
        assert g.nodes[0].position == Vec2(7, 9)
        assert g.nodes[0].force == Vec2()


class TestForceLayout:
    """Test the iteration budget and determinism of a layout run."""

    def test_runs_exactly_the_budget(self):
        g = _seeded_path()
        layout = ForceLayout(g, LayoutConfig(iterations=25))

        assert layout.run() == 25
        assert layout.done
        assert layout.step() == 0

    def test_step_spreads_budget(self):
        g1 = _seeded_path()
        g2 = _seeded_path()
        cfg = LayoutConfig(iterations=30)

        ForceLayout(g1, cfg).run()
        split = ForceLayout(g2, cfg)
        split.step(10)
        split.step(10)
        split.step(100)

        assert split.iteration == 30
        assert g1.positions() == g2.positions()

    def test_same_seed_same_layout(self):
        g1 = _seeded_path(seed=3)
        g2 = _seeded_path(seed=3)

        assert layout_nodes(g1) == layout_nodes(g2)

    def test_convergence_threshold_stops_early(self):
        g = _seeded_path()
        layout = ForceLayout(g, LayoutConfig(convergence_threshold=1e-2))

        applied = layout.run()

        assert layout.converged
        assert applied < 1024

    def test_layout_reduces_residual_force(self):
        early = _seeded_path()
        ForceLayout(early, LayoutConfig(iterations=10)).run()

        full = _seeded_path()
        layout_nodes(full, LayoutConfig())

        cfg = LayoutConfig()
        assert measure_forces(full, cfg) < measure_forces(early, cfg)

    def test_measure_forces_leaves_accumulators_clear(self):
        g = _seeded_path()
        measure_forces(g, LayoutConfig())

        assert all(node.force == Vec2() for node in g.nodes)

    def test_empty_graph(self):
        assert layout_nodes(Graph()) == []
        assert measure_forces(Graph(), LayoutConfig()) == 0.0
