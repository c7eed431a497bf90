# botkit/leaves/pendulum.py
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ..task import Context, StateNode, Task, elapsed_ms

if TYPE_CHECKING:
    from ..runtime.schemas import PendulumParams

OBSERVABLES = ("angle", "angular_velocity")


@dataclass
class PendulumPlantState(StateNode):
    angle: float
    angular_velocity: float
    last_instant: float


class PendulumPlant(Task):
    """
    Damped pendulum driven by a torque input.

    Integrated with one forward-Euler step per tick, dt in milliseconds.
    Only stable for small dt; the trajectory is approximate.
    """
    state_type = PendulumPlantState

    def __init__(self, torque: float, length: float = 10.0, gravity: float = 9.81,
                 damping: float = 0.5, observe: str = "angle"):
        if observe not in OBSERVABLES:
            raise ValueError(f"Unknown observable: {observe}")
        self.torque = float(torque)
        self.length = float(length)
        self.gravity = float(gravity)
        self.damping = float(damping)
        self.observe = observe

    @classmethod
    def from_params(cls, torque: float, params: PendulumParams, observe: str = "angle") -> "PendulumPlant":
        return cls(torque, params.length, params.gravity, params.damping, observe=observe)

    def update(self, state: PendulumPlantState, dt: float) -> None:
        # a diverged angle yields nan instead of raising
        with np.errstate(invalid="ignore"):
            sin_angle = float(np.sin(state.angle))
        angular_acceleration = (
            -self.gravity / self.length * sin_angle
            - self.damping * state.angular_velocity
            + self.torque
        ) / self.length

        state.angular_velocity += angular_acceleration * dt
        state.angle += state.angular_velocity * dt

    def build(self, cx: Context, model):
        # nonzero initial velocity so the plant moves without input
        state = PendulumPlantState(angle=0.0, angular_velocity=1.0,
                                   last_instant=cx.clock.now_ms())
        return 0.0, state

    def rebuild(self, cx: Context, model, state: PendulumPlantState) -> float:
        now = cx.clock.now_ms()
        dt = elapsed_ms(now, state.last_instant)
        state.last_instant = now

        self.update(state, dt)
        return getattr(state, self.observe)
