"""Frame scheduling for the simulation.

The mounting entry point lives in :mod:`forcegraph.host.lifecycle`.
"""

from forcegraph.host.scheduler import AsyncioFrameScheduler, FrameScheduler, ManualFrameScheduler, TimerHandle

__all__ = ["AsyncioFrameScheduler", "FrameScheduler", "ManualFrameScheduler", "TimerHandle"]
