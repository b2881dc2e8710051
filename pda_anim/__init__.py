"""
pdaviz + Manim integration package.

This package provides:
- Trace sources reading actions from JSONL streams
- A script compiler turning stepper batches into timed scene steps
- Mobject builders mapping canvas primitives into scene coordinates
- The parse trace scene and a command line renderer
"""

__all__ = [
    # Subpackages will be imported lazily by users
]
