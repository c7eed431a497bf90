# botkit/leaves/pid.py
from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from ..task import Context, StateNode, Task, elapsed_ms

if TYPE_CHECKING:
    from ..runtime.schemas import PidGains


@dataclass
class PidControllerState(StateNode):
    total_error: float = 0.0
    last_error: float = 0.0
    last_instant: Optional[float] = None


class PidController(Task):
    """
    PID control law over millisecond intervals.

    Output is unbounded; actuator limits are the caller's concern.
    """
    state_type = PidControllerState

    def __init__(self, value: float, target: float, kp: float, ki: float, kd: float):
        self.value = float(value)
        self.target = float(target)
        self.kp = float(kp)
        self.ki = float(ki)
        self.kd = float(kd)

    @classmethod
    def from_gains(cls, value: float, target: float, gains: PidGains) -> "PidController":
        return cls(value, target, gains.kp, gains.ki, gains.kd)

    def build(self, cx: Context, model):
        # no control action before the first measured interval
        return 0.0, PidControllerState()

    def rebuild(self, cx: Context, model, state: PidControllerState) -> float:
        now = cx.clock.now_ms()
        dt = elapsed_ms(now, state.last_instant)

        error = self.target - self.value
        error_delta = (error - state.last_error) / dt
        state.total_error += error * dt
        state.last_error = error
        state.last_instant = now

        p = self.kp * error
        i = self.ki * state.total_error
        d = self.kd * error_delta
        return p + i + d

    def __repr__(self) -> str:
        return (f"PidController(value={self.value}, target={self.target}, "
                f"kp={self.kp}, ki={self.ki}, kd={self.kd})")


def pid_controller(value: float, target: float, kp: float, ki: float, kd: float) -> PidController:
    return PidController(value, target, kp, ki, kd)
