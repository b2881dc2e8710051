"""
Loader for visualization documents.

A document bundles the two inputs a session needs, both optional:

    string: aboba
    actions:
      - {type: shift}
      - {type: reduce, to: {symbol: <B>, size: 2}}
      - {type: finish, result: 1}
    automaton:
      - [1, 2]
      - [0]
      - []

``string``/``actions`` form the shift-reduce trace (see `pda_core.trace`);
``automaton`` is the adjacency list of the parsing automaton, entry ``i``
listing the states reachable from state ``i``. Documents are read from JSON or
YAML files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .errors import TraceFormatError
from .trace import Trace, trace_from_dict


@dataclass(frozen=True)
class SessionDocument:
    trace: Optional[Trace] = None
    adjacency: Optional[List[List[int]]] = None


def _adjacency_from_obj(obj: Any) -> List[List[int]]:
    if not isinstance(obj, list):
        raise TraceFormatError("'automaton' must be a list of destination lists")
    adjacency: List[List[int]] = []
    for src, neighbors in enumerate(obj):
        if not isinstance(neighbors, list):
            raise TraceFormatError(f"automaton entry {src} must be a list")
        for dst in neighbors:
            if isinstance(dst, bool) or not isinstance(dst, int):
                raise TraceFormatError(f"automaton entry {src}: destination {dst!r} is not an integer")
        adjacency.append(list(neighbors))
    return adjacency


def document_from_dict(data: Dict[str, Any]) -> SessionDocument:
    """
    Build a `SessionDocument` from a parsed JSON/YAML mapping.

    The trace part is present when the mapping has a ``string`` key; the
    automaton part when it has an ``automaton`` key.

    Raises:
        TraceFormatError: If either part is malformed
    """
    if not isinstance(data, dict):
        raise TraceFormatError("document must be a mapping")

    trace = trace_from_dict(data) if "string" in data else None
    adjacency = _adjacency_from_obj(data["automaton"]) if "automaton" in data else None
    return SessionDocument(trace=trace, adjacency=adjacency)


def document_from_json(text: str) -> SessionDocument:
    """Load a document from JSON text."""
    return document_from_dict(json.loads(text))


def document_from_yaml(text: str) -> SessionDocument:
    """Load a document from YAML text."""
    data = yaml.safe_load(text) or {}
    return document_from_dict(data)


def load_document(path: str) -> SessionDocument:
    """
    Load a document from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        ValueError: For any other file suffix
    """
    suffix = Path(path).suffix.lower()
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    if suffix == ".json":
        return document_from_json(txt)
    if suffix in (".yaml", ".yml"):
        return document_from_yaml(txt)
    raise ValueError(f"unsupported document format: {path}")
