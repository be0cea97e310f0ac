"""Qt viewport widget and the painter-backed drawing surface."""

from __future__ import annotations

import math
from contextlib import contextmanager
from typing import Any, Iterator

from PySide6.QtCore import QPointF, QRectF, QSize
from PySide6.QtGui import QBrush, QColor, QImage, QPainter, QPainterPath
from PySide6.QtWidgets import QWidget

from core.coordinates import SurfaceGeometry
from core.renderer import BACKGROUND_COLOR, Color, SurfaceUnavailableError


class QtPainterSurface:
    """``Surface`` implementation over an active ``QPainter``."""

    def __init__(self, painter: QPainter) -> None:
        self.painter = painter
        self._path = QPainterPath()
        self._color = QColor(0, 0, 0)

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.painter.save()
        self.painter.setCompositionMode(QPainter.CompositionMode.CompositionMode_Clear)
        self.painter.fillRect(QRectF(x, y, width, height), QColor(0, 0, 0, 0))
        self.painter.restore()

    def begin_path(self) -> None:
        self._path = QPainterPath()

    def move_to(self, x: float, y: float) -> None:
        self._path.moveTo(x, y)

    def line_to(self, x: float, y: float) -> None:
        self._path.lineTo(x, y)

    def arc(self, x: float, y: float, radius: float, start_angle: float, end_angle: float) -> None:
        if abs(end_angle - start_angle) >= 2.0 * math.pi:
            self._path.addEllipse(QPointF(x, y), radius, radius)
            return
        # Qt measures degrees counter-clockwise on screen; canvas radians run clockwise.
        rect = QRectF(x - radius, y - radius, radius * 2.0, radius * 2.0)
        start = -math.degrees(start_angle)
        sweep = -math.degrees(end_angle - start_angle)
        self._path.arcMoveTo(rect, start)
        self._path.arcTo(rect, start, sweep)

    def set_fill_color(self, color: Color) -> None:
        self._color = QColor(*color)

    def fill(self) -> None:
        self.painter.fillPath(self._path, QBrush(self._color))


class ViewportCanvas(QWidget):
    """Fixed-size viewport painting a back buffer rendered at device resolution.

    The buffer is ``logical size x pixel ratio`` pixels. Each frame's painter
    is scaled by the ratio, so draw calls use logical units.
    """

    def __init__(self, geometry: SurfaceGeometry, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.surface_geometry = geometry
        self.setFixedSize(QSize(geometry.logical_width, geometry.logical_height))
        self._buffer = QImage(
            geometry.physical_width,
            geometry.physical_height,
            QImage.Format.Format_ARGB32_Premultiplied,
        )
        if self._buffer.isNull():
            raise SurfaceUnavailableError(
                f"Could not allocate a {geometry.physical_width}x{geometry.physical_height} drawing buffer"
            )
        self._buffer.fill(QColor(0, 0, 0, 0))
        self.frames = 0

    @property
    def buffer(self) -> QImage:
        return self._buffer

    @contextmanager
    def open_surface(self) -> Iterator[QtPainterSurface]:
        painter = QPainter()
        if not painter.begin(self._buffer):
            raise SurfaceUnavailableError("Could not open a painter on the viewport buffer")
        try:
            painter.setRenderHint(QPainter.RenderHint.Antialiasing)
            painter.scale(self.surface_geometry.pixel_ratio, self.surface_geometry.pixel_ratio)
            yield QtPainterSurface(painter)
        finally:
            painter.end()
        self.frames += 1
        self.update()

    def paintEvent(self, _event: Any) -> None:  # type: ignore[override]
        painter = QPainter(self)
        target = QRectF(0, 0, self.surface_geometry.logical_width, self.surface_geometry.logical_height)
        painter.fillRect(target, QColor(*BACKGROUND_COLOR))
        painter.drawImage(target, self._buffer, QRectF(self._buffer.rect()))
        painter.end()
