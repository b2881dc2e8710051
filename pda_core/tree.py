"""
Parse tree nodes built by the trace stepper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from .vector import Vec2


@dataclass(frozen=True)
class Box:
    """
    Bounding rectangle of a rendered label.

    ``(x, y)`` is the text baseline origin; the glyphs extend ``height`` above
    it (canvas y grows downward) and ``width`` to the right.
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Vec2:
        return Vec2(self.x, self.y)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2


@dataclass
class ParseTreeNode:
    """
    A node of the incrementally built parse tree.

    Leaves are created by shifts, internal nodes by reduces. Once a reduce has
    adopted a node as a child the child is never touched again.
    """

    label: str
    box: Box
    children: List["ParseTreeNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def leaves(self) -> List["ParseTreeNode"]:
        if self.is_leaf:
            return [self]
        result: List[ParseTreeNode] = []
        for child in self.children:
            result.extend(child.leaves())
        return result


def tree_link(parent: ParseTreeNode, child: ParseTreeNode, anchor_gap: float) -> Tuple[Vec2, Vec2]:
    """
    End points of the link between a child label and its parent label.

    The link leaves the child just below its baseline and enters the parent
    just above its top edge.
    """
    start = Vec2(child.box.center_x, child.box.y + anchor_gap)
    end = Vec2(parent.box.center_x, parent.box.y - parent.box.height - anchor_gap)
    return start, end


def tree_to_dict(node: ParseTreeNode) -> Dict[str, Any]:
    """Nested plain-dict form of a tree, suitable for JSON output."""
    return {
        "label": node.label,
        "box": {"x": node.box.x, "y": node.box.y, "width": node.box.width, "height": node.box.height},
        "children": [tree_to_dict(c) for c in node.children],
    }
