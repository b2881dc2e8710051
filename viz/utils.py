"""
Lightweight visualization utilities decoupled from any viewer to enable testing.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pda_core.graph import Graph


def build_cytoscape_elements(graph: Graph, labels: List[str] | None = None) -> List[Dict[str, Any]]:
    """Convert a laid-out Graph into Cytoscape-compatible elements.

    Node ids are ``"s<index>"``; each node carries its layout position. Edges
    carry a ``mutual`` flag so a viewer can curve bidirectional transitions.

    Args:
        graph: Automaton graph, usually after layout
        labels: Optional display label per node (defaults to the node id)
    """
    elements: List[Dict[str, Any]] = []

    # Nodes
    for idx, node in enumerate(graph.nodes):
        node_id = f"s{idx}"
        label = labels[idx] if labels is not None and idx < len(labels) else node_id
        elements.append({
            "data": {"id": node_id, "label": label, "index": idx},
            "position": {"x": float(node.position.x), "y": float(node.position.y)},
        })

    # Edges
    for src, dst in graph.edge_pairs():
        elements.append({
            "data": {
                "id": f"s{src}->s{dst}",
                "source": f"s{src}",
                "target": f"s{dst}",
                "mutual": graph.is_mutual(src, dst),
                "loop": src == dst,
            }
        })

    return elements
