"""
Shift-reduce trace stepper.

The stepper replays a parser's action trace one action at a time. It keeps the
parser's symbol stack, grows the parse tree with canvas coordinates for every
label, and returns the batch of animation commands that visualizes each action.

Leaves are laid out left to right on the first row; every reduce places its
new symbol one row further down, centred under the span of its children.

The stepper does not pace itself. Its owner must only call `step` once the
previous batch has fully settled, which gives every action exactly one visual
beat regardless of frame rate.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .animation import AnimationCommand, LinePayload, TextPayload
from .config import StepperConfig
from .enums import StepperState
from .errors import ExhaustedInput, IncompleteParse, StackUnderflow, TraceError
from .surface import TextMeasurer
from .trace import Action, ActionCursor, Finish, Reduce, Shift, Trace
from .tree import Box, ParseTreeNode, tree_link
from .vector import Vec2

logger = logging.getLogger(__name__)


class ParseTraceStepper:
    """
    State machine replaying a shift/reduce/finish action stream.

    Attributes:
        string: Input text consumed by shifts
        stack: Parser stack; the last element is the top
        consumed: Number of input characters shifted so far
        node_start: Baseline origin where the next label is placed
        state: RUNNING until a finish action or the end of the stream
            (FINISHED) or a malformed action (HALTED)
        accepted: Result of the finish action, None until one is consumed
        error: The trace error that halted the replay, if any
    """

    def __init__(
        self,
        string: str,
        actions: Sequence[Action],
        measurer: TextMeasurer,
        config: StepperConfig | None = None,
    ):
        self.string = string
        self.cursor = ActionCursor(actions)
        self.measurer = measurer
        self.config = config or StepperConfig()
        self.font = self.config.font

        self.stack: List[ParseTreeNode] = []
        self.consumed = 0
        self.node_start = Vec2(self.config.origin_x, self.config.origin_y)

        self.state = StepperState.RUNNING
        self.accepted: Optional[bool] = None
        self.error: Optional[TraceError] = None

    @classmethod
    def from_trace(cls, trace: Trace, measurer: TextMeasurer, config: StepperConfig | None = None) -> "ParseTraceStepper":
        return cls(trace.string, trace.actions, measurer, config)

    @property
    def roots(self) -> List[ParseTreeNode]:
        """Current stack bottom to top; after an accepted parse it holds the single root."""
        return list(self.stack)

    @property
    def running(self) -> bool:
        return self.state is StepperState.RUNNING

    def _measure(self, label: str, x: float, y: float) -> Box:
        metrics = self.measurer.measure_text(label, self.font)
        return Box(x, y, metrics.width, metrics.ascent + metrics.descent)

    # ----- actions -----
    def shift(self) -> ParseTreeNode:
        """
        Push the next input character as a leaf.

        Raises:
            ExhaustedInput: If the whole input has already been consumed
        """
        if self.consumed >= len(self.string):
            raise ExhaustedInput(
                f"shift past end of input {self.string!r} (consumed {self.consumed})"
            )
        label = self.string[self.consumed]
        self.consumed += 1

        box = self._measure(label, self.node_start.x, self.node_start.y)
        node = ParseTreeNode(label, box, [])
        self.stack.append(node)
        self.node_start = Vec2(box.x + box.width + self.config.x_spacing, self.node_start.y)
        return node

    def reduce(self, symbol: str, size: int) -> ParseTreeNode:
        """
        Replace the top ``size`` stack entries by a new node labelled ``symbol``.

        The popped entries become the new node's children in stack order. The
        new node is centred over the horizontal span of its children, one row
        below the previous row.

        Raises:
            StackUnderflow: If the stack holds fewer than ``size`` entries
        """
        if size > len(self.stack):
            raise StackUnderflow(
                f"reduce to {symbol!r} needs {size} entries, stack holds {len(self.stack)}"
            )
        children = self.stack[len(self.stack) - size:]
        del self.stack[len(self.stack) - size:]

        width = self.measurer.measure_text(symbol, self.font).width
        if children:
            left = min(c.box.x for c in children)
            right = max(c.box.x + c.box.width for c in children)
            x = left + (right - left) / 2 - width / 2
        else:
            x = self.node_start.x
        y = self.node_start.y + self.config.font_size + self.config.y_spacing

        box = self._measure(symbol, x, y)
        node = ParseTreeNode(symbol, box, children)
        self.stack.append(node)
        self.node_start = Vec2(x + box.width + self.config.x_spacing, y)
        return node

    def finish(self, action: Finish) -> None:
        """
        Consume a finish action.

        Raises:
            IncompleteParse: If the parse was accepted but the stack does not
                hold exactly one node
        """
        if action.accepted and len(self.stack) != 1:
            raise IncompleteParse(
                f"accepted parse left {len(self.stack)} entries on the stack"
            )
        self.accepted = action.accepted
        self.state = StepperState.FINISHED

    # ----- animation -----
    def _text(self, node: ParseTreeNode) -> AnimationCommand:
        return AnimationCommand(TextPayload(node.label, node.box, self.font), self.config.text_duration_ms)

    def _links(self, node: ParseTreeNode) -> List[AnimationCommand]:
        commands = []
        for child in node.children:
            start, end = tree_link(node, child, self.config.anchor_gap)
            commands.append(AnimationCommand(LinePayload(start, end), self.config.line_duration_ms))
        return commands

    def step(self) -> List[AnimationCommand]:
        """
        Consume the next action and return its animation batch.

        A shift yields the reveal of the new leaf; a reduce yields the reveal of
        the new symbol followed by one growing link per child. A finish action,
        the end of the stream, or a stepper that is no longer running yields an
        empty batch.

        Raises:
            TraceError: If the action is inconsistent with the stack or input;
                the stepper is HALTED afterwards
        """
        if not self.running:
            return []
        if not self.cursor.has_next():
            logger.debug("action stream exhausted after %d actions", self.cursor.position)
            self.state = StepperState.FINISHED
            return []

        action = self.cursor.next()
        try:
            if isinstance(action, Shift):
                node = self.shift()
                logger.debug("shift %r", node.label)
                return [self._text(node)]
            if isinstance(action, Reduce):
                node = self.reduce(action.symbol, action.size)
                logger.debug("reduce %r (%d children)", node.label, len(node.children))
                return [self._text(node)] + self._links(node)
            if isinstance(action, Finish):
                self.finish(action)
                logger.debug("finish, accepted=%s", self.accepted)
                return []
            raise TypeError(f"unknown action {action!r}")
        except TraceError as exc:
            self.state = StepperState.HALTED
            self.error = exc
            raise

    def run(self) -> List[List[AnimationCommand]]:
        """Step until the stepper stops running; returns every non-empty batch."""
        batches = []
        while self.running:
            batch = self.step()
            if batch:
                batches.append(batch)
        return batches
