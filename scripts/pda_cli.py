#!/usr/bin/env python3
"""
pdaviz CLI

Usage modes:
- Default run: load a document, lay out the automaton, replay the trace
  headlessly frame by frame, print or write a JSON summary
- Layout only: skip the trace replay
- Export: write the laid-out automaton as GraphML
- Utility: list bundled sample documents, show version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from glob import glob
from pathlib import Path
from typing import Any, Dict, List

import yaml

from pda_anim.adapters.jsonl import JsonlTraceSource
from pda_core import __version__ as pdaviz_version
from pda_core.config import SessionConfig, load_config
from pda_core.errors import InvalidIndex, TraceFormatError
from pda_core.loader import SessionDocument, load_document
from pda_core.session import Session
from pda_core.surface import RecordingSurface
from pda_core.trace import trace_to_dict
from pda_core.tree import tree_to_dict


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Lay out a parsing automaton and replay its shift-reduce trace",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Utilities / meta
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    p.add_argument("--list-samples", action="store_true", help="List bundled sample documents and exit")

    # Primary input
    p.add_argument("document", nargs="?", help="Path to a JSON/YAML document or a JSONL trace (e.g., samples/aboba.yaml)")
    p.add_argument("--config", type=str, default="", help="Optional YAML session config")

    # Execution
    p.add_argument("--seed", type=int, default=None, help="Seed for node placement")
    p.add_argument("--iterations", type=int, default=None, help="Layout iteration budget")
    p.add_argument("--frame-ms", type=float, default=1000.0 / 60.0, help="Simulated frame interval for the replay")
    p.add_argument("--layout-only", action="store_true", help="Lay out the automaton; do not replay the trace")
    p.add_argument("--out", type=str, default="", help="Optional output JSON file path")

    # Export
    p.add_argument("--export-graphml", type=str, default="", help="Export the laid-out automaton to GraphML at given path")

    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> SessionConfig:
    cfg = load_config(args.config) if args.config else SessionConfig()
    if args.seed is not None:
        cfg.seed = int(args.seed)
    if args.iterations is not None:
        cfg.layout.iterations = int(args.iterations)
    cfg.validate()
    return cfg


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def find_sample_documents() -> List[str]:
    # Search relative to repo root and this script location
    here = Path(__file__).resolve()
    repo_root = here.parent.parent
    candidates = []
    for base in [repo_root / "samples", here.parent]:
        for pattern in ("*.yaml", "*.yml", "*.json", "*.jsonl"):
            candidates.extend(sorted(glob(str(base / pattern))))
    # Deduplicate while preserving order
    seen = set()
    result = []
    for c in candidates:
        if c not in seen:
            seen.add(c)
            result.append(c)
    return result


def read_document(path: str) -> SessionDocument:
    """Load a JSON/YAML document, or a JSONL trace stream as a trace-only document."""
    if path.endswith(".jsonl"):
        return SessionDocument(trace=JsonlTraceSource(path).load())
    return load_document(path)


def replay(session: Session, frame_ms: float) -> int:
    """Tick ``session`` with a fixed frame interval until it finishes or halts; returns the frame count."""
    surface = RecordingSurface(session.config.width, session.config.height)
    frames = 0
    while not session.finished and not session.halted:
        session.tick(frame_ms, surface)
        frames += 1
    return frames


def summarize(session: Session, frames: int) -> Dict[str, Any]:
    summary: Dict[str, Any] = {}
    if session.graph is not None:
        summary["automaton"] = {
            "nodes": [{"x": p.x, "y": p.y} for p in session.graph.positions()],
            "edges": [list(pair) for pair in session.graph.edge_pairs()],
        }
    if session.stepper is not None:
        stepper = session.stepper
        summary["trace"] = {
            "input": trace_to_dict(session.trace),
            "state": stepper.state.name,
            "accepted": stepper.accepted,
            "actions_consumed": stepper.cursor.position,
            "tree": [tree_to_dict(node) for node in stepper.roots],
            "frames": frames,
            "elapsed_ms": session.elapsed_ms,
            "error": str(session.error) if session.error is not None else None,
        }
    return summary


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.version:
        print(pdaviz_version)
        return 0

    if args.list_samples:
        print(json.dumps(find_sample_documents(), indent=2))
        return 0

    if not args.document:
        print("error: missing document path (try --list-samples)", file=sys.stderr)
        return 2
    if args.frame_ms <= 0:
        print("error: --frame-ms must be positive", file=sys.stderr)
        return 2

    cfg = build_config(args)

    logging.info("Loading document from %s", args.document)
    try:
        document = read_document(args.document)
        trace = None if args.layout_only else document.trace
        session = Session(cfg, trace, document.adjacency)
    except (TraceFormatError, InvalidIndex) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"error: cannot read {args.document}: {exc}", file=sys.stderr)
        return 2

    if args.export_graphml:
        if session.graph is None:
            print("error: document has no automaton to export", file=sys.stderr)
            return 2
        logging.info("Exporting GraphML to %s", args.export_graphml)
        session.graph.export_graphml(args.export_graphml)

    frames = replay(session, args.frame_ms) if session.stepper is not None else 0
    summary = summarize(session, frames)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2)
    else:
        print(json.dumps(summary, indent=2))

    return 1 if session.halted else 0


if __name__ == "__main__":
    raise SystemExit(main())
