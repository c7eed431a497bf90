"""
botkit: declarative composition of stateful control-loop stages.

Usage:
    from botkit import System, pid_controller, PendulumPlant

    def app(model):
        return (pid_controller(model.state, 0., 0.5, 0.1, 0.2)
                .then(lambda _, control: PendulumPlant(control))
                .then(lambda model, angle: setattr(model, "state", angle)))

    system = System(Model(), app)
    system.build()
    system.rebuild()
"""

from .task import (
    Context, Task, Unit, FromFn, from_fn, Then,
    StateNode, UnitState, PairState, ShapeMismatchError, state_shape, leaf_states,
    Clock, MonotonicClock, ManualClock,
)
from .leaves import (
    PidController, PidControllerState, pid_controller,
    PendulumPlant, PendulumPlantState,
    mix_motor_commands, motor_commands,
)
from .runtime import System, SimpleRecorder, load_config, BotkitConfig
from .observability import setup_logging, MetricsCollector

__all__ = [
    # Core
    'Context', 'Task', 'Unit', 'FromFn', 'from_fn', 'Then',
    'StateNode', 'UnitState', 'PairState', 'ShapeMismatchError', 'state_shape', 'leaf_states',
    'Clock', 'MonotonicClock', 'ManualClock',
    # Leaves
    'PidController', 'PidControllerState', 'pid_controller',
    'PendulumPlant', 'PendulumPlantState',
    'mix_motor_commands', 'motor_commands',
    # Runtime
    'System', 'SimpleRecorder', 'load_config', 'BotkitConfig',
    'setup_logging', 'MetricsCollector',
]

__version__ = "0.1.0"
