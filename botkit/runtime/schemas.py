"""Pydantic schemas for leaf parameters and loop settings."""

from pydantic import BaseModel, Field
from typing import Literal, Optional


class PidGains(BaseModel):
    """Proportional, integral and derivative gains."""
    kp: float = 0.5
    ki: float = 0.1
    kd: float = 0.2


class PendulumParams(BaseModel):
    """Physical constants of the pendulum plant."""
    length: float = Field(10.0, gt=0)
    gravity: float = 9.81
    damping: float = Field(0.5, ge=0)


class QuadrotorParams(BaseModel):
    """Motor-mixing geometry: arm length and drag/thrust ratio."""
    arm_length: float = Field(0.25, gt=0)
    kappa: float = Field(0.016, gt=0)


class LoopSettings(BaseModel):
    """Driver loop and ambient settings."""
    log_level: str = "INFO"
    log_format: Literal["structured", "simple"] = "structured"
    ticks: int = Field(1000, ge=0)
    log_interval: int = Field(100, gt=0)
    record: bool = False
    record_format: Literal["csv", "jsonl"] = "jsonl"
    output: Optional[str] = None


class BotkitConfig(BaseModel):
    """Top-level configuration document."""
    loop: LoopSettings = Field(default_factory=LoopSettings)
    pid: PidGains = Field(default_factory=PidGains)
    pendulum: PendulumParams = Field(default_factory=PendulumParams)
    quadrotor: QuadrotorParams = Field(default_factory=QuadrotorParams)
