"""Command-line entry points for the viewer window, headless runs and training."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

# Allow `python cli/main.py ...` execution from IDEs by adding repo root to sys.path.
if __package__ in {None, ""}:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

from configs.loader import ConfigLoader, ViewerConfig
from core.coordinates import SurfaceGeometry
from core.engine import load_engine_factory
from core.lifecycle import LifecycleController
from core.recording import RecordingCanvas, RecordingReadouts
from core.scheduling import ManualScheduler

LOGGER = logging.getLogger(__name__)


def _load_config(path: str | None) -> ViewerConfig:
    if path is None:
        return ConfigLoader.defaults()
    return ConfigLoader.load(path)


def run_headless(config: ViewerConfig, ticks: int) -> RecordingReadouts:
    """Run ``ticks`` frames against a recording canvas and return the readouts."""
    geometry = SurfaceGeometry.from_device(config.viewport_width, config.viewport_height, config.pixel_ratio)
    canvas = RecordingCanvas(geometry)
    readouts = RecordingReadouts()
    scheduler = ManualScheduler()
    controller = LifecycleController(
        engine_factory=load_engine_factory(config.engine),
        canvas=canvas,
        scheduler=scheduler,
        readouts=readouts,
        steps_per_frame=config.steps_per_frame,
    )
    if ticks <= 0:
        return readouts
    controller.bootstrap()
    scheduler.run(ticks - 1)
    controller.set_paused(True)
    LOGGER.info("Headless run finished after %d ticks", controller.driver.ticks)
    return readouts


def run_training(config: ViewerConfig, generations: int) -> list[str]:
    """Train ``generations`` generations without rendering and describe each."""
    controller = LifecycleController(
        engine_factory=load_engine_factory(config.engine),
        canvas=RecordingCanvas(SurfaceGeometry.from_device(config.viewport_width, config.viewport_height, 1.0)),
        scheduler=ManualScheduler(),
        readouts=RecordingReadouts(),
        steps_per_frame=config.steps_per_frame,
        paused=True,
    )
    return [controller.train().describe() for _ in range(max(0, generations))]


def run_cli(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="flock-viewer")
    parser.add_argument("--config", default=None, help="YAML or JSON viewer config")
    sub = parser.add_subparsers(dest="command", required=False)

    sub.add_parser("gui")

    headless_cmd = sub.add_parser("headless")
    headless_cmd.add_argument("--ticks", type=int, default=60)

    train_cmd = sub.add_parser("train")
    train_cmd.add_argument("--generations", type=int, default=1)

    args = parser.parse_args(argv)
    config = _load_config(args.config)
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))

    if args.command in {None, "gui"}:
        from gui.app import main as gui_main

        return int(gui_main(args.config))

    if args.command == "headless":
        readouts = run_headless(config, args.ticks)
        if readouts.latest is not None:
            print("\n".join(readouts.latest.as_tuple()))
        return 0

    if args.command == "train":
        for line in run_training(config, args.generations):
            print(line)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(run_cli())
