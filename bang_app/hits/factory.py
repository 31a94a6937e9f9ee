"""
Factory for creating hit scheduler instances.
"""

from enum import Enum

from .strategies import HitScheduler, BackgroundHitScheduler, InlineHitScheduler


class HitSchedulerType(Enum):
    """Available hit schedulers"""
    BACKGROUND = "background"
    INLINE = "inline"


class HitSchedulerFactory:
    """Simple factory for creating hit schedulers"""

    @classmethod
    def create(cls, scheduler_type: HitSchedulerType) -> HitScheduler:
        """
        Create a hit scheduler.

        Raises:
            ValueError: If scheduler_type is unknown
        """
        if scheduler_type == HitSchedulerType.BACKGROUND:
            return BackgroundHitScheduler()
        elif scheduler_type == HitSchedulerType.INLINE:
            return InlineHitScheduler()
        raise ValueError(f"Unknown hit scheduler: {scheduler_type}")
