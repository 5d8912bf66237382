"""Frame schedulers driving the periodic simulation callback."""
from __future__ import annotations

import asyncio
import logging
from typing import Callable, List, Optional

from typing_extensions import Protocol

LOGGER = logging.getLogger(__name__)


class TimerHandle(Protocol):
    """Handle returned for a repeating callback."""

    @property
    def cancelled(self) -> bool:
        """Return whether the callback has been cancelled."""

    def cancel(self) -> None:
        """Stop invoking the callback; repeated calls are no-ops."""


class FrameScheduler(Protocol):
    """Protocol for anything that can invoke a callback once per frame."""

    def call_repeatedly(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Invoke ``callback`` every ``interval`` seconds until cancelled."""


class _RepeatingCall:
    """Repeating callback re-armed on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop, interval: float, callback: Callable[[], None]) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle: Optional[asyncio.TimerHandle] = loop.call_soon(self._run)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        if self._cancelled:
            return
        self._callback()
        if not self._cancelled:
            self._handle = self._loop.call_later(self._interval, self._run)

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class AsyncioFrameScheduler:
    """Schedule frame callbacks on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_repeatedly(self, interval: float, callback: Callable[[], None]) -> _RepeatingCall:
        loop = self._loop or asyncio.get_running_loop()
        return _RepeatingCall(loop, interval, callback)


class _ManualCall:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ManualFrameScheduler:
    """Scheduler advanced explicitly, for tests and headless hosts."""

    def __init__(self) -> None:
        self._calls: List[_ManualCall] = []
        self.frames = 0

    def call_repeatedly(self, interval: float, callback: Callable[[], None]) -> _ManualCall:
        call = _ManualCall(callback)
        self._calls.append(call)
        return call

    @property
    def active(self) -> int:
        """Return the number of callbacks that are still scheduled."""

        self._calls = [call for call in self._calls if not call.cancelled]
        return len(self._calls)

    def advance(self, frames: int = 1) -> int:
        """Run every active callback once per frame.

        Args:
            frames: Number of frames to run.

        Returns:
            int: Number of frames in which at least one callback ran.
        """

        ran = 0
        for _ in range(frames):
            calls = [call for call in self._calls if not call.cancelled]
            if not calls:
                break
            for call in calls:
                if not call.cancelled:
                    call.callback()
            self.frames += 1
            ran += 1
        self._calls = [call for call in self._calls if not call.cancelled]
        return ran


__all__ = [
    "AsyncioFrameScheduler",
    "FrameScheduler",
    "ManualFrameScheduler",
    "TimerHandle",
]
