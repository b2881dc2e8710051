"""
Unit tests for the shift-reduce trace stepper.

These tests replay small traces against a RecordingSurface, whose monospace
metrics (20px advance, 32px ascent, 8px descent at 40px) make every label
position predictable.
"""

import pytest

from pda_core.animation import LinePayload, TextPayload
from pda_core.config import StepperConfig
from pda_core.enums import AnimationKind, StepperState
from pda_core.errors import ExhaustedInput, IncompleteParse, StackUnderflow, TraceError
from pda_core.stepper import ParseTraceStepper
from pda_core.surface import RecordingSurface
from pda_core.trace import Finish, Reduce, Shift, Trace
from pda_core.tree import Box

ABOBA = Trace(
    "aboba",
    [Shift(), Shift(), Shift(), Reduce("<B>", 2), Shift(), Shift(), Reduce("<A>", 4), Finish(1)],
)


def _stepper(trace=ABOBA, config=None):
    return ParseTraceStepper.from_trace(trace, RecordingSurface(), config)


class TestShift:
    """Test leaf placement on shifts."""

    def test_first_leaf_at_origin(self):
        s = _stepper()
        node = s.shift()

        assert node.label == "a"
        assert node.box == Box(10.0, 40.0, 20.0, 40.0)
        assert s.consumed == 1
        assert s.node_start.x == 10.0 + 20.0 + 50.0

    def test_leaves_advance_left_to_right(self):
        s = _stepper()
        xs = [s.shift().box.x for _ in range(3)]

        assert xs == [10.0, 80.0, 150.0]

    def test_shift_past_end(self):
        s = _stepper(Trace("a", []))
        s.shift()

        with pytest.raises(ExhaustedInput):
            s.shift()


class TestReduce:
    """Test internal node placement on reduces."""

    def test_parent_centered_below_children(self):
        s = _stepper()
        for _ in range(3):
            s.shift()
        node = s.reduce("<B>", 2)

        # children "b" [80, 100] and "o" [150, 170] -> centre 125, label width 60
        assert node.box.x == pytest.approx(95.0)
        assert node.box.y == pytest.approx(40.0 + 40.0 + 38.0)
        assert [c.label for c in node.children] == ["b", "o"]
        assert [n.label for n in s.stack] == ["a", "<B>"]

    def test_reduce_with_no_children(self):
        s = _stepper()
        s.shift()
        start = s.node_start
        node = s.reduce("eps", 0)

        assert node.children == []
        assert node.box.x == start.x
        assert len(s.stack) == 2

    def test_underflow_on_one_node_stack(self):
        s = _stepper()
        s.shift()

        with pytest.raises(StackUnderflow):
            s.reduce("<X>", 2)
        # Stack untouched
        assert [n.label for n in s.stack] == ["a"]


class TestFinish:
    def test_accepted_with_single_root(self):
        s = _stepper(Trace("a", []))
        s.shift()
        s.finish(Finish(1))

        assert s.accepted is True
        assert s.state is StepperState.FINISHED

    def test_accepted_with_residual_stack(self):
        s = _stepper(Trace("ab", []))
        s.shift()
        s.shift()

        with pytest.raises(IncompleteParse):
            s.finish(Finish(1))

    def test_rejected_ignores_stack_depth(self):
        s = _stepper(Trace("ab", []))
        s.shift()
        s.shift()
        s.finish(Finish(0))

        assert s.accepted is False
        assert s.state is StepperState.FINISHED


class TestReplay:
    """Test full replays through step()."""

    def test_aboba_tree(self):
        s = _stepper()
        s.run()

        assert s.state is StepperState.FINISHED
        assert s.accepted is True
        assert len(s.roots) == 1

        root = s.roots[0]
        assert root.label == "<A>"
        assert [c.label for c in root.children] == ["a", "<B>", "b", "a"]
        assert [c.label for c in root.children[1].children] == ["b", "o"]
        assert "".join(leaf.label for leaf in root.leaves()) == "aboba"

    def test_aboba_root_position(self):
        s = _stepper()
        s.run()
        root = s.roots[0]

        # children span [10, 295], label width 60, two rows below the leaves
        assert root.box.x == pytest.approx(122.5)
        assert root.box.y == pytest.approx(40.0 + 2 * 78.0)

    def test_batches(self):
        s = _stepper()
        batches = s.run()

        # 5 shifts and 2 reduces; finish yields nothing
        assert len(batches) == 7
        assert [len(b) for b in batches] == [1, 1, 1, 3, 1, 1, 5]

        reduce_batch = batches[3]
        assert reduce_batch[0].kind is AnimationKind.TEXT
        assert isinstance(reduce_batch[0].payload, TextPayload)
        assert reduce_batch[0].payload.label == "<B>"
        assert reduce_batch[0].duration_ms == 500.0
        assert all(isinstance(c.payload, LinePayload) for c in reduce_batch[1:])
        assert all(c.duration_ms == 800.0 for c in reduce_batch[1:])

    def test_link_endpoints(self):
        s = _stepper()
        batches = s.run()
        b_node = s.roots[0].children[1]
        link = batches[3][1].payload

        child = b_node.children[0]
        assert link.start.x == pytest.approx(child.box.center_x)
        assert link.start.y == pytest.approx(child.box.y + 10.0)
        assert link.end.x == pytest.approx(b_node.box.center_x)
        assert link.end.y == pytest.approx(b_node.box.y - b_node.box.height - 10.0)

    def test_stream_without_finish(self):
        s = _stepper(Trace("a", [Shift()]))

        assert len(s.step()) == 1
        assert s.step() == []
        assert s.state is StepperState.FINISHED
        assert s.accepted is None

    def test_error_halts_stepper(self):
        s = _stepper(Trace("a", [Shift(), Reduce("<X>", 3), Shift()]))
        s.step()

        with pytest.raises(StackUnderflow):
            s.step()
        assert s.state is StepperState.HALTED
        assert isinstance(s.error, TraceError)
        # Halted steppers stay quiet
        assert s.step() == []

    def test_custom_durations_and_font(self):
        cfg = StepperConfig(font_size=20, text_duration_ms=100, line_duration_ms=200)
        s = _stepper(Trace("a", [Shift(), Reduce("S", 1)]), cfg)
        batches = s.run()

        assert s.font == "20px Ubuntu Mono"
        assert batches[0][0].duration_ms == 100
        assert batches[1][1].duration_ms == 200
        assert batches[0][0].payload.box.height == pytest.approx(20.0)
