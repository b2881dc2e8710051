"""
pdaviz Core Package.

This package contains the engine of the shift-reduce automaton visualizer:

- Graph model and force-directed layout of automaton states
- Edge geometry (straight arrows, arcs for mutual transitions)
- Trace model, loader and the shift-reduce trace stepper
- Animation commands, the frame-driven scheduler and the render-surface contract
- Sessions tying everything to a frame clock
"""

__version__ = "0.1.0"

from .animation import AnimationCommand, LinePayload, TextPayload
from .config import EdgeStyle, LayoutConfig, SessionConfig, StepperConfig, config_from_dict, load_config
from .edges import Arc, Marker, Segment, Triangle, render_edge, render_graph
from .enums import ActionType, AnimationKind, StepperState
from .errors import (
    DegenerateLayout,
    ExhaustedInput,
    IncompleteParse,
    InvalidIndex,
    PdaVizError,
    StackUnderflow,
    TraceError,
    TraceFormatError,
    UnsettledBatch,
)
from .graph import Graph, GraphNode, graph_from_adjacency_list, make_rng, randomly_distribute_nodes, resize
from .layout import ForceLayout, layout_nodes, measure_forces
from .loader import SessionDocument, document_from_dict, load_document
from .scheduler import AnimationScheduler
from .session import Session, SessionHandle, build_automaton
from .stepper import ParseTraceStepper
from .surface import RecordingSurface, RenderSurface, TextMetrics, draw_command, draw_primitive
from .trace import ActionCursor, Finish, Reduce, Shift, Trace, trace_from_dict
from .tree import Box, ParseTreeNode, tree_to_dict
from .vector import Vec2, magnitude
