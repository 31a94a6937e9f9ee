"""
Click tracking module.
Implements Strategy Pattern for how counter increments are scheduled.
"""

from .strategies import HitScheduler, BackgroundHitScheduler, InlineHitScheduler
from .factory import HitSchedulerFactory, HitSchedulerType

__all__ = [
    "HitScheduler",
    "BackgroundHitScheduler",
    "InlineHitScheduler",
    "HitSchedulerFactory",
    "HitSchedulerType",
]
