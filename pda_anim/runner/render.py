from __future__ import annotations

import argparse
import logging
from typing import Type

from manim import config as manim_config

from pda_core.config import SessionConfig, load_config
from pda_core.loader import SessionDocument, load_document

from pda_anim.adapters.jsonl import JsonlTraceSource
from pda_anim.scenes.parse_trace import ParseTraceScene

logger = logging.getLogger(__name__)


def render_scene(
    scene_cls: Type[ParseTraceScene],
    document_path: str,
    config_path: str | None = None,
    quality: str = "ql",
    preview: bool = True,
    time_scale: float = 1.0,
    seed: int | None = None,
):
    if document_path.endswith(".jsonl"):
        document = SessionDocument(trace=JsonlTraceSource(document_path).load())
    else:
        document = load_document(document_path)

    session_config = load_config(config_path) if config_path else SessionConfig()
    if seed is not None:
        session_config.seed = seed

    # Configure manim (quality shortcuts)
    if quality == "ql":
        manim_config.quality = "low_quality"
    elif quality == "qh":
        manim_config.quality = "high_quality"
    else:
        manim_config.quality = quality
    manim_config.preview = preview

    logger.info("rendering %s with %s", document_path, scene_cls.__name__)
    scene = scene_cls()
    setattr(scene, "_document", document)
    setattr(scene, "_session_config", session_config)
    setattr(scene, "_time_scale", float(time_scale))
    scene.render()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render a shift-reduce trace and its automaton with manim")
    parser.add_argument("document", help="JSON/YAML document or JSONL trace")
    parser.add_argument("--scene", default="ParseTraceScene")
    parser.add_argument("--config", help="YAML session config")
    parser.add_argument("--quality", default="ql", help="manim quality: ql/qh")
    parser.add_argument("--preview", action="store_true")
    parser.add_argument("--time-scale", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args(argv)

    scene_map = {
        "ParseTraceScene": ParseTraceScene,
    }

    scene_cls = scene_map.get(args.scene)
    if scene_cls is None:
        raise SystemExit(f"Unknown scene: {args.scene}")

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    render_scene(
        scene_cls,
        args.document,
        config_path=args.config,
        quality=args.quality,
        preview=args.preview,
        time_scale=args.time_scale,
        seed=args.seed,
    )


if __name__ == "__main__":  # pragma: no cover
    main()
