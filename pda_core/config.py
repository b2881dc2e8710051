"""
Configuration objects for the pdaviz core.

Exposes tunable parameters for the force layout, the edge geometry, the trace
stepper and the session canvas, enabling experiments without editing core
logic. Defaults give an 800x600 canvas with labels in 40px Ubuntu Mono.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

import yaml


@dataclass
class LayoutConfig:
    """
    Constants of the force-directed layout.

    The spring force between connected nodes is
    ``attractive_constant * ln(dist / ideal_length)``; unconnected nodes repel
    with ``-repulsive_constant / dist**2``. Each iteration moves nodes by
    ``initial_step * exp(-t * cooling_rate)`` times their force.
    """

    repulsive_constant: float = 1000.0
    attractive_constant: float = 1.0
    ideal_length: float = 40.0

    # Fixed iteration budget; no early exit unless convergence_threshold is set
    iterations: int = 1024
    initial_step: float = 2.0
    cooling_rate: float = 0.001

    # Distance used when two nodes coincide; must stay nonzero
    min_distance: float = 1e-3

    # Optional early exit: stop once no node moves farther than this in an iteration
    convergence_threshold: Optional[float] = None

    def validate(self) -> None:
        if self.iterations < 0:
            raise ValueError("layout.iterations must be >= 0")
        if self.ideal_length <= 0:
            raise ValueError("layout.ideal_length must be > 0")
        if self.min_distance <= 0:
            raise ValueError("layout.min_distance must be > 0")
        if self.convergence_threshold is not None and self.convergence_threshold <= 0:
            raise ValueError("layout.convergence_threshold must be > 0 when set")


@dataclass
class EdgeStyle:
    """Geometry and colors used when turning automaton edges into primitives."""

    # Offset of the arc midpoint from the chord for mutual edges
    arc_height: float = 12.0
    arrow_width: float = 8.0
    arrow_length: float = 8.0
    # Fraction of a straight edge trimmed from each end
    end_trim: float = 0.1
    node_radius: float = 4.0
    edge_color: str = "#000000"
    node_color: str = "rgb(255, 0, 0)"

    def validate(self) -> None:
        if not 0.0 <= self.end_trim < 0.5:
            raise ValueError("edges.end_trim must be in [0, 0.5)")
        if self.arrow_length < 0 or self.arrow_width < 0:
            raise ValueError("edges.arrow_length and edges.arrow_width must be >= 0")
        if self.node_radius < 0:
            raise ValueError("edges.node_radius must be >= 0")


@dataclass
class StepperConfig:
    """Placement and timing of the parse tree drawn by the trace stepper."""

    font_family: str = "Ubuntu Mono"
    font_size: float = 40.0
    x_spacing: float = 50.0
    y_spacing: float = 38.0

    # Baseline origin of the first leaf
    origin_x: float = 10.0
    origin_y: float = 40.0

    # Gap between a label and the end of a tree link
    anchor_gap: float = 10.0

    text_duration_ms: float = 500.0
    line_duration_ms: float = 800.0

    @property
    def font(self) -> str:
        """CSS-style font string, e.g. ``"40px Ubuntu Mono"``."""
        size = int(self.font_size) if float(self.font_size).is_integer() else self.font_size
        return f"{size}px {self.font_family}"

    def validate(self) -> None:
        if self.font_size <= 0:
            raise ValueError("stepper.font_size must be > 0")
        if self.text_duration_ms < 0 or self.line_duration_ms < 0:
            raise ValueError("stepper durations must be >= 0")


@dataclass
class SessionConfig:
    """
    Canvas and lifecycle settings for a visualization session.

    The automaton is laid out inside ``width x height`` minus the margins
    (half of each margin on every side).
    """

    width: float = 800.0
    height: float = 600.0
    margin_x: float = 50.0
    margin_y: float = 50.0

    # Seed for node placement; None draws fresh entropy on every reset
    seed: Optional[int] = None

    background: str = "#E6E6E6"

    # How often a degenerate layout is reseeded before giving up on the fit
    max_reseed_attempts: int = 3

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    edges: EdgeStyle = field(default_factory=EdgeStyle)
    stepper: StepperConfig = field(default_factory=StepperConfig)

    def validate(self) -> None:
        if self.width <= self.margin_x or self.height <= self.margin_y:
            raise ValueError("canvas must be larger than its margins")
        if self.max_reseed_attempts < 0:
            raise ValueError("max_reseed_attempts must be >= 0")
        self.layout.validate()
        self.edges.validate()
        self.stepper.validate()


_SECTIONS = {
    "layout": LayoutConfig,
    "edges": EdgeStyle,
    "stepper": StepperConfig,
}


def _build_section(cls, data: Dict[str, Any], prefix: str):
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown {prefix} option(s): {', '.join(unknown)}")
    return cls(**data)


def config_from_dict(data: Dict[str, Any] | None) -> SessionConfig:
    """
    Build a validated `SessionConfig` from a parsed YAML/JSON mapping.

    Top-level keys map to `SessionConfig` fields; the nested sections
    ``layout``, ``edges`` and ``stepper`` map to their own dataclasses.

    Raises:
        ValueError: On unknown keys or invalid values
    """
    data = dict(data or {})
    sections = {}
    for name, cls in _SECTIONS.items():
        section = data.pop(name, None) or {}
        if not isinstance(section, dict):
            raise ValueError(f"{name} section must be a mapping")
        sections[name] = _build_section(cls, section, name)

    cfg = _build_section(SessionConfig, data, "session")
    cfg.layout = sections["layout"]
    cfg.edges = sections["edges"]
    cfg.stepper = sections["stepper"]
    cfg.validate()
    return cfg


def load_config(path: str) -> SessionConfig:
    """Load a `SessionConfig` from a YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return config_from_dict(data)
