"""
Shift-reduce traces: the action model and its wire format.

Wire format::

    {
      "string": "aboba",
      "actions": [
        {"type": "shift"},
        {"type": "reduce", "to": {"symbol": "<B>", "size": 2}},
        {"type": "finish", "result": 1}
      ]
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence, Union

from .enums import ActionType
from .errors import TraceFormatError


@dataclass(frozen=True)
class Shift:
    type = ActionType.SHIFT


@dataclass(frozen=True)
class Reduce:
    symbol: str
    size: int
    type = ActionType.REDUCE


@dataclass(frozen=True)
class Finish:
    # 1 when the parser accepted the input
    result: int = 1
    type = ActionType.FINISH

    @property
    def accepted(self) -> bool:
        return bool(self.result)


Action = Union[Shift, Reduce, Finish]


@dataclass(frozen=True)
class Trace:
    string: str
    actions: List[Action] = field(default_factory=list)


def action_from_dict(obj: Dict[str, Any], index: int = 0) -> Action:
    """
    Decode one wire action.

    Raises:
        TraceFormatError: On an unknown type or a malformed reduce target
    """
    if not isinstance(obj, dict):
        raise TraceFormatError(f"action {index}: expected a mapping, got {type(obj).__name__}")
    name = obj.get("type")
    try:
        kind = ActionType.from_wire(str(name))
    except KeyError:
        raise TraceFormatError(f"action {index}: unknown action type {name!r}") from None

    if kind is ActionType.SHIFT:
        return Shift()
    if kind is ActionType.FINISH:
        result = obj.get("result", 1)
        if isinstance(result, bool) or not isinstance(result, int):
            raise TraceFormatError(f"action {index}: finish result must be an integer")
        return Finish(result)

    target = obj.get("to")
    if not isinstance(target, dict):
        raise TraceFormatError(f"action {index}: reduce needs a 'to' mapping")
    symbol = target.get("symbol")
    size = target.get("size")
    if not isinstance(symbol, str):
        raise TraceFormatError(f"action {index}: reduce symbol must be a string")
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise TraceFormatError(f"action {index}: reduce size must be a non-negative integer")
    return Reduce(symbol, size)


def trace_from_dict(obj: Dict[str, Any]) -> Trace:
    """
    Decode a wire trace.

    Raises:
        TraceFormatError: If ``string`` is not a string or an action is malformed
    """
    if not isinstance(obj, dict):
        raise TraceFormatError("trace must be a mapping")
    string = obj.get("string")
    if not isinstance(string, str):
        raise TraceFormatError("trace 'string' must be a string")
    raw_actions = obj.get("actions") or []
    if not isinstance(raw_actions, list):
        raise TraceFormatError("trace 'actions' must be a list")
    return Trace(string, [action_from_dict(a, i) for i, a in enumerate(raw_actions)])


def trace_to_dict(trace: Trace) -> Dict[str, Any]:
    """Encode a trace back into its wire format."""
    actions: List[Dict[str, Any]] = []
    for action in trace.actions:
        if isinstance(action, Reduce):
            actions.append({"type": "reduce", "to": {"symbol": action.symbol, "size": action.size}})
        elif isinstance(action, Finish):
            actions.append({"type": "finish", "result": action.result})
        else:
            actions.append({"type": "shift"})
    return {"string": trace.string, "actions": actions}


class ActionCursor:
    """
    Pull-based cursor over a sequence of actions.

    The stepper pulls one action per settled animation batch; the cursor only
    records how far it got.
    """

    def __init__(self, actions: Sequence[Action]):
        self._actions = list(actions)
        self.position = 0

    def __len__(self) -> int:
        return len(self._actions)

    def has_next(self) -> bool:
        return self.position < len(self._actions)

    def next(self) -> Action:
        if not self.has_next():
            raise StopIteration
        action = self._actions[self.position]
        self.position += 1
        return action
