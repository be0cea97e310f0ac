"""Desktop entrypoint for the flock viewer."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from configs.loader import ConfigLoader, ViewerConfig
from core.engine import load_engine_factory
from gui.main_window import SimulationWindow

LOGGER = logging.getLogger(__name__)


def load_config(config_path: str | Path | None) -> ViewerConfig:
    if config_path is None:
        return ConfigLoader.defaults()
    return ConfigLoader.load(config_path)


def main(config_path: str | Path | None = None) -> int:
    config = load_config(config_path)
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))

    app = QApplication.instance() or QApplication(sys.argv)
    engine_factory = load_engine_factory(config.engine)
    LOGGER.info("Using engine %s", config.engine)

    window = SimulationWindow(config=config, engine_factory=engine_factory)
    window.show()
    window.start()
    return int(app.exec())


if __name__ == "__main__":
    raise SystemExit(main())
