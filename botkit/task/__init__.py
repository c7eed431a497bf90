"""
Task composition core.

This package contains the build/rebuild protocol:
- Task contract, Unit and FromFn tasks, state-tree nodes
- Sequential composition (Then)
- Injected clocks
"""

from .base import (
    Context, StateNode, UnitState, PairState, ShapeMismatchError,
    Task, Unit, FromFn, from_fn, state_shape, leaf_states,
)
from .then import Then
from .clock import Clock, MonotonicClock, ManualClock, elapsed_ms

__all__ = [
    # Contract
    'Context', 'Task', 'Unit', 'FromFn', 'from_fn', 'Then',
    # State tree
    'StateNode', 'UnitState', 'PairState', 'ShapeMismatchError',
    'state_shape', 'leaf_states',
    # Time
    'Clock', 'MonotonicClock', 'ManualClock', 'elapsed_ms',
]
