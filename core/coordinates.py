"""Normalized world coordinates to logical drawing coordinates."""

from __future__ import annotations

from dataclasses import dataclass


def to_device(
    normalized_x: float,
    normalized_y: float,
    logical_width: float,
    logical_height: float,
) -> tuple[float, float]:
    """Map a ``[0, 1]`` world position onto the logical viewport.

    The device pixel ratio is absorbed by the surface transform, so the result
    is expressed in logical units. Values outside ``[0, 1]`` are not clamped.
    """
    return normalized_x * logical_width, normalized_y * logical_height


@dataclass(frozen=True)
class SurfaceGeometry:
    """Logical viewport size plus the pixel ratio of its backing buffer."""

    logical_width: int
    logical_height: int
    pixel_ratio: float = 1.0

    def __post_init__(self) -> None:
        if self.logical_width <= 0 or self.logical_height <= 0:
            raise ValueError("viewport size must be > 0")
        if self.pixel_ratio < 1.0:
            raise ValueError("pixel_ratio must be >= 1.0")

    @classmethod
    def from_device(cls, width: int, height: int, pixel_ratio: float | None) -> "SurfaceGeometry":
        """Build geometry, treating a missing or sub-1 ratio as ``1.0``."""
        ratio = float(pixel_ratio or 1.0)
        return cls(logical_width=int(width), logical_height=int(height), pixel_ratio=max(1.0, ratio))

    @property
    def physical_width(self) -> int:
        return int(round(self.logical_width * self.pixel_ratio))

    @property
    def physical_height(self) -> int:
        return int(round(self.logical_height * self.pixel_ratio))

    def to_device(self, normalized_x: float, normalized_y: float) -> tuple[float, float]:
        return to_device(normalized_x, normalized_y, self.logical_width, self.logical_height)
