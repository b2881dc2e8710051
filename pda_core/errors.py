"""
Error kinds raised by the pdaviz core.

Malformed-input errors (InvalidIndex, TraceError and its subclasses) describe a
contract violation by whoever produced the automaton or the trace. They are not
recoverable mid-trace: the stepper halts and the owning session stops advancing.
DegenerateLayout is recoverable by reseeding the layout and trying again.
"""

from __future__ import annotations


class PdaVizError(Exception):
    """Base class for every error raised by the pdaviz core."""


class InvalidIndex(PdaVizError, IndexError):
    """An adjacency list references a node index outside ``[0, n)``."""


class DegenerateLayout(PdaVizError, ValueError):
    """All node positions coincide along an axis, so the layout cannot be rescaled."""


class TraceError(PdaVizError):
    """Base class for malformed shift/reduce traces."""


class ExhaustedInput(TraceError):
    """A shift was requested after the whole input string was consumed."""


class StackUnderflow(TraceError):
    """A reduce asked for more stack entries than the stack holds."""


class IncompleteParse(TraceError):
    """An accepting finish was reached with a stack depth other than one."""


class TraceFormatError(TraceError, ValueError):
    """A trace or automaton document does not follow the wire format."""


class UnsettledBatch(PdaVizError, RuntimeError):
    """A new animation batch was submitted while the previous one was still animating."""
