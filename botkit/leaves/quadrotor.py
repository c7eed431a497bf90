# botkit/leaves/quadrotor.py
"""Quadrotor motor mixing as a stateless task."""
from __future__ import annotations
from typing import TYPE_CHECKING

import numpy as np

from ..task import FromFn, from_fn

if TYPE_CHECKING:
    from ..runtime.schemas import QuadrotorParams


def mix_motor_commands(collective_thrust_cmd: float, moment_cmd, l: float, kappa: float) -> np.ndarray:
    """
    Distribute collective thrust and a 3-axis moment over four motors.

    ``kappa``: drag/thrust ratio. ``l``: arm length (X configuration).
    """
    moment = np.asarray(moment_cmd, dtype=np.float64)
    if moment.shape != (3,):
        raise ValueError(f"moment_cmd must have shape (3,), got {moment.shape}")

    length = l / np.sqrt(2.0)
    a = moment[0] / length
    b = moment[1] / length
    c = -1.0 * moment[2] / kappa
    d = float(collective_thrust_cmd)
    return np.array([
        (a + b + c + d) / 4.0,
        (-a + b - c + d) / 4.0,
        (a - b - c + d) / 4.0,
        (-a - b + c + d) / 4.0,
    ], dtype=np.float64)


def motor_commands(collective_thrust_cmd: float, moment_cmd, l: float, kappa: float) -> FromFn:
    cmds = mix_motor_commands(collective_thrust_cmd, moment_cmd, l, kappa)
    return from_fn(lambda _model: cmds.copy())


def motor_commands_from_params(collective_thrust_cmd: float, moment_cmd, params: QuadrotorParams) -> FromFn:
    return motor_commands(collective_thrust_cmd, moment_cmd, params.arm_length, params.kappa)
