"""Main viewer window: viewport, run controls and fitness readouts."""

from __future__ import annotations

import logging

from PySide6.QtWidgets import (
    QCheckBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from configs.loader import ViewerConfig
from core.coordinates import SurfaceGeometry
from core.engine import EngineFactory, EngineFault
from core.lifecycle import LifecycleController
from core.world_state import Readouts, RunStatistics
from gui.canvas import ViewportCanvas
from gui.scheduler import QtFrameScheduler

LOGGER = logging.getLogger(__name__)


class SimulationWindow(QMainWindow):
    """Wires the pause/restart/train controls to the lifecycle controller."""

    def __init__(
        self,
        config: ViewerConfig,
        engine_factory: EngineFactory,
        pixel_ratio: float | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Flock Viewer")

        ratio = config.pixel_ratio if config.pixel_ratio is not None else pixel_ratio
        if ratio is None:
            ratio = self.devicePixelRatioF()
        geometry = SurfaceGeometry.from_device(config.viewport_width, config.viewport_height, ratio)

        self.canvas = ViewportCanvas(geometry)
        self.scheduler = QtFrameScheduler(interval_ms=config.frame_interval_ms, parent=self)

        self.pause_checkbox = QCheckBox("Pause")
        self.restart_btn = QPushButton("Restart")
        self.train_btn = QPushButton("Next Generation")

        self.generation_label = QLabel()
        self.min_fitness_label = QLabel()
        self.max_fitness_label = QLabel()
        self.avg_fitness_label = QLabel()
        self.show_readouts(Readouts.from_statistics(RunStatistics()))

        center = QWidget()
        root = QHBoxLayout(center)
        root.addWidget(self.canvas)

        side = QVBoxLayout()
        side.addWidget(self.pause_checkbox)
        side.addWidget(self.restart_btn)
        side.addWidget(self.train_btn)
        side.addSpacing(12)
        side.addWidget(self.generation_label)
        side.addWidget(self.min_fitness_label)
        side.addWidget(self.max_fitness_label)
        side.addWidget(self.avg_fitness_label)
        side.addStretch(1)
        root.addLayout(side)
        self.setCentralWidget(center)

        self.controller = LifecycleController(
            engine_factory=engine_factory,
            canvas=self.canvas,
            scheduler=self.scheduler,
            readouts=self,
            steps_per_frame=config.steps_per_frame,
        )
        self.pause_checkbox.setChecked(self.controller.paused)
        self.controller.on_fault = self._on_loop_fault

        self.pause_checkbox.toggled.connect(self._on_pause_toggled)
        self.restart_btn.clicked.connect(self._on_restart)
        self.train_btn.clicked.connect(self._on_train)

    def start(self) -> None:
        """Run the first frame and start the render loop."""
        self.controller.bootstrap()

    def show_readouts(self, readouts: Readouts) -> None:
        self.generation_label.setText(readouts.generation)
        self.min_fitness_label.setText(readouts.min_fitness)
        self.max_fitness_label.setText(readouts.max_fitness)
        self.avg_fitness_label.setText(readouts.avg_fitness)

    def _on_pause_toggled(self, checked: bool) -> None:
        self.controller.set_paused(checked)

    def _on_restart(self) -> None:
        try:
            self.controller.restart()
        except EngineFault as exc:
            LOGGER.exception("Restart failed: %s", exc)
            self.statusBar().showMessage(f"Restart failed: {exc}")
            return
        self.statusBar().showMessage("Simulation restarted")

    def _on_train(self) -> None:
        try:
            stats = self.controller.train()
        except EngineFault as exc:
            LOGGER.exception("Training failed: %s", exc)
            self.statusBar().showMessage(f"Training failed: {exc}")
            return
        self.statusBar().showMessage(f"Trained {stats.describe()}")

    def _on_loop_fault(self, exc: Exception) -> None:
        self.pause_checkbox.blockSignals(True)
        self.pause_checkbox.setChecked(True)
        self.pause_checkbox.blockSignals(False)
        self.statusBar().showMessage(f"Render loop stopped: {exc}")

    def closeEvent(self, event):  # type: ignore[override]
        self.controller.set_paused(True)
        return super().closeEvent(event)
