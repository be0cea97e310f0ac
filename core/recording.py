"""Recording drawing surface and readout sink for headless runs and tests."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from core.coordinates import SurfaceGeometry
from core.renderer import Color
from core.world_state import Readouts


class RecordingSurface:
    """Surface that records every drawing call as ``(name, args)``."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.fill_color: Color | None = None

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.calls.append(("clear_rect", (x, y, width, height)))

    def begin_path(self) -> None:
        self.calls.append(("begin_path", ()))

    def move_to(self, x: float, y: float) -> None:
        self.calls.append(("move_to", (x, y)))

    def line_to(self, x: float, y: float) -> None:
        self.calls.append(("line_to", (x, y)))

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        self.calls.append(("arc", (x, y, radius, start_angle, end_angle)))

    def set_fill_color(self, color: Color) -> None:
        self.fill_color = color
        self.calls.append(("set_fill_color", (color,)))

    def fill(self) -> None:
        self.calls.append(("fill", ()))

    def count(self, name: str) -> int:
        return sum(1 for call, _ in self.calls if call == name)

    def named(self, name: str) -> list[tuple[Any, ...]]:
        return [args for call, args in self.calls if call == name]

    def reset(self) -> None:
        self.calls.clear()
        self.fill_color = None


class RecordingCanvas:
    """Canvas handing out one ``RecordingSurface`` for every frame."""

    def __init__(self, geometry: SurfaceGeometry) -> None:
        self.surface_geometry = geometry
        self.surface = RecordingSurface()
        self.frames = 0

    @contextmanager
    def open_surface(self) -> Iterator[RecordingSurface]:
        yield self.surface
        self.frames += 1


class RecordingReadouts:
    """Readout sink keeping every update in order."""

    def __init__(self) -> None:
        self.history: list[Readouts] = []

    def show_readouts(self, readouts: Readouts) -> None:
        self.history.append(readouts)

    @property
    def latest(self) -> Readouts | None:
        return self.history[-1] if self.history else None
