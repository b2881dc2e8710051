"""
Unit tests for the trace wire format and the action cursor.
"""

import pytest

from pda_core.enums import ActionType
from pda_core.errors import TraceError, TraceFormatError
from pda_core.trace import (
    ActionCursor,
    Finish,
    Reduce,
    Shift,
    Trace,
    action_from_dict,
    trace_from_dict,
    trace_to_dict,
)

ABOBA = {
    "string": "aboba",
    "actions": [
        {"type": "shift"},
        {"type": "shift"},
        {"type": "shift"},
        {"type": "reduce", "to": {"symbol": "<B>", "size": 2}},
        {"type": "shift"},
        {"type": "shift"},
        {"type": "reduce", "to": {"symbol": "<A>", "size": 4}},
        {"type": "finish", "result": 1},
    ],
}


class TestActionDecoding:
    """Test decoding of individual wire actions."""

    def test_shift(self):
        action = action_from_dict({"type": "shift"})
        assert action == Shift()
        assert action.type is ActionType.SHIFT

    def test_reduce(self):
        action = action_from_dict({"type": "reduce", "to": {"symbol": "E", "size": 3}})
        assert action == Reduce("E", 3)
        assert action.type is ActionType.REDUCE

    def test_finish_result(self):
        assert action_from_dict({"type": "finish", "result": 1}).accepted
        assert not action_from_dict({"type": "finish", "result": 0}).accepted
        # Missing result means accepted
        assert action_from_dict({"type": "finish"}) == Finish(1)

    def test_type_is_case_insensitive(self):
        assert action_from_dict({"type": "SHIFT"}) == Shift()

    @pytest.mark.parametrize(
        "obj",
        [
            {"type": "jump"},
            {},
            {"type": "reduce"},
            {"type": "reduce", "to": {"symbol": "E"}},
            {"type": "reduce", "to": {"symbol": "E", "size": -1}},
            {"type": "reduce", "to": {"symbol": 5, "size": 1}},
            {"type": "finish", "result": "yes"},
            ["shift"],
        ],
    )
    def test_malformed_actions(self, obj):
        with pytest.raises(TraceFormatError):
            action_from_dict(obj)

    def test_error_names_the_action_index(self):
        with pytest.raises(TraceFormatError, match="action 3"):
            action_from_dict({"type": "bogus"}, 3)


class TestTraceDecoding:
    """Test whole-trace decoding and encoding."""

    def test_aboba(self):
        trace = trace_from_dict(ABOBA)

        assert trace.string == "aboba"
        assert len(trace.actions) == 8
        assert trace.actions[3] == Reduce("<B>", 2)
        assert trace.actions[-1] == Finish(1)

    def test_encode_matches_wire_format(self):
        assert trace_to_dict(trace_from_dict(ABOBA)) == ABOBA

    def test_missing_actions_is_empty(self):
        assert trace_from_dict({"string": "x"}) == Trace("x", [])

    def test_string_must_be_text(self):
        with pytest.raises(TraceFormatError):
            trace_from_dict({"string": 12, "actions": []})

    def test_format_error_is_trace_and_value_error(self):
        with pytest.raises(TraceError):
            trace_from_dict({"string": "x", "actions": "shift"})
        with pytest.raises(ValueError):
            trace_from_dict({"string": "x", "actions": "shift"})


class TestActionCursor:
    """Test the pull-based cursor."""

    def test_cursor_walks_actions(self):
        cursor = ActionCursor([Shift(), Finish()])

        assert len(cursor) == 2
        assert cursor.next() == Shift()
        assert cursor.position == 1
        assert cursor.next() == Finish()
        assert not cursor.has_next()

    def test_cursor_past_end(self):
        cursor = ActionCursor([])
        with pytest.raises(StopIteration):
            cursor.next()
