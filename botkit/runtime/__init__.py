"""
Runtime components for driving task trees.

This package contains the driver loop, tick recording and configuration.
"""

from .schemas import PidGains, PendulumParams, QuadrotorParams, LoopSettings, BotkitConfig
from .config import load_config
from .recorder import SimpleRecorder
from .system import System

__all__ = [
    'System', 'SimpleRecorder', 'load_config',
    'PidGains', 'PendulumParams', 'QuadrotorParams', 'LoopSettings', 'BotkitConfig',
]
