"""Frame scheduler backed by a single-shot ``QTimer``."""

from __future__ import annotations

from PySide6.QtCore import QObject, QTimer

from core.scheduling import FrameCallback


class QtFrameScheduler:
    """Queues one frame callback on the Qt event loop."""

    def __init__(self, interval_ms: int = 16, parent: QObject | None = None) -> None:
        self._callback: FrameCallback | None = None
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(max(0, int(interval_ms)))
        self._timer.timeout.connect(self._dispatch)

    @property
    def pending(self) -> bool:
        return self._callback is not None

    @property
    def interval_ms(self) -> int:
        return int(self._timer.interval())

    def schedule(self, callback: FrameCallback) -> None:
        if self._callback is not None:
            raise RuntimeError("A frame is already scheduled")
        self._callback = callback
        self._timer.start()

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    def _dispatch(self) -> None:
        callback = self._callback
        self._callback = None
        if callback is not None:
            callback()
