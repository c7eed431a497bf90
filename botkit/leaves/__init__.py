"""
Example leaf tasks.

- PID control law
- Pendulum plant simulator
- Quadrotor motor mixing (stateless)
"""

from .pid import PidController, PidControllerState, pid_controller
from .pendulum import PendulumPlant, PendulumPlantState
from .quadrotor import mix_motor_commands, motor_commands, motor_commands_from_params

__all__ = [
    'PidController', 'PidControllerState', 'pid_controller',
    'PendulumPlant', 'PendulumPlantState',
    'mix_motor_commands', 'motor_commands', 'motor_commands_from_params',
]
