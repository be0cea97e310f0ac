"""Drawing primitives for birds and food.

The primitives only talk to a small canvas-like ``Surface`` protocol, so the
same code drives the Qt painter surface and the recording surface used by
headless runs.
"""

from __future__ import annotations

import math
from typing import Protocol

Color = tuple[int, int, int]

FOOD_COLOR: Color = (0, 255, 128)
LEAD_BIRD_COLOR: Color = (255, 0, 0)
BIRD_COLOR: Color = (255, 255, 255)
BACKGROUND_COLOR: Color = (24, 24, 24)

FOOD_RADIUS_FACTOR = 0.01 / 2.0
BIRD_SIZE_FACTOR = 0.01

NOSE_LENGTH = 1.5


class SurfaceUnavailableError(RuntimeError):
    """Raised when no drawing surface can be obtained."""


class Surface(Protocol):
    """Path-based 2D drawing context in logical units."""

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        ...

    def begin_path(self) -> None:
        ...

    def move_to(self, x: float, y: float) -> None:
        ...

    def line_to(self, x: float, y: float) -> None:
        ...

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        ...

    def set_fill_color(self, color: Color) -> None:
        ...

    def fill(self) -> None:
        ...


def agent_vertices(x: float, y: float, size: float, rotation: float) -> list[tuple[float, float]]:
    """Return nose, two tail points and the nose again for a bird triangle.

    ``rotation = 0`` puts the nose at ``(x, y + 1.5 * size)``; the heading
    turns with ``rotation`` under the ``(sin, cos)`` offset convention.
    """
    points = []
    for angle, distance in (
        (-rotation, size * NOSE_LENGTH),
        (-rotation + 2.0 / 3.0 * math.pi, size),
        (-rotation + 4.0 / 3.0 * math.pi, size),
        (-rotation, size * NOSE_LENGTH),
    ):
        points.append((x + math.sin(angle) * distance, y + math.cos(angle) * distance))
    return points


def draw_agent(surface: Surface, x: float, y: float, size: float, rotation: float, color: Color) -> None:
    """Fill a rotation-oriented isosceles triangle centered on ``(x, y)``."""
    nose, *rest = agent_vertices(x, y, size, rotation)
    surface.begin_path()
    surface.move_to(*nose)
    for point in rest:
        surface.line_to(*point)
    surface.set_fill_color(color)
    surface.fill()


def draw_food(surface: Surface, x: float, y: float, radius: float, color: Color = FOOD_COLOR) -> None:
    """Fill a circle centered on ``(x, y)``."""
    surface.begin_path()
    surface.arc(x, y, radius, 0.0, 2.0 * math.pi)
    surface.set_fill_color(color)
    surface.fill()
