"""Single-slot frame schedulers driving the render loop."""

from __future__ import annotations

from typing import Callable, Protocol

FrameCallback = Callable[[], None]


class FrameScheduler(Protocol):
    """Queues at most one frame callback for the next display refresh."""

    @property
    def pending(self) -> bool:
        ...

    def schedule(self, callback: FrameCallback) -> None:
        ...

    def cancel(self) -> None:
        ...


class ManualScheduler:
    """Scheduler whose frames are fired explicitly by the caller.

    Used for headless runs and tests; scheduling a second callback while one
    is pending is a programming error.
    """

    def __init__(self) -> None:
        self._callback: FrameCallback | None = None
        self.scheduled_count = 0

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, callback: FrameCallback) -> None:
        if self._callback is not None:
            raise RuntimeError("A frame is already scheduled")
        self._callback = callback
        self.scheduled_count += 1

    def cancel(self) -> None:
        self._callback = None

    def fire(self) -> bool:
        """Run the pending frame, if any. Returns whether a frame ran."""
        callback = self._callback
        if callback is None:
            return False
        self._callback = None
        callback()
        return True

    def run(self, max_frames: int) -> int:
        """Fire frames until none is pending or ``max_frames`` ran."""
        frames = 0
        while frames < max_frames and self.fire():
            frames += 1
        return frames
