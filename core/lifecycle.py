"""Ownership of the live simulation, the pause flag, and training requests."""

from __future__ import annotations

import logging
from typing import Callable

from core.engine import EngineFactory, SimulationEngine, call_engine
from core.frame_driver import Canvas, FrameDriver, LoopState, ReadoutSink, read_statistics
from core.scheduling import FrameScheduler
from core.world_state import Readouts, RunStatistics

LOGGER = logging.getLogger(__name__)


class LifecycleController:
    """Single owner of the simulation handle and the render loop state.

    All entry points are expected to run on the same (UI) thread as the frame
    ticks, so no locking is done here.
    """

    def __init__(
        self,
        engine_factory: EngineFactory,
        canvas: Canvas,
        scheduler: FrameScheduler,
        readouts: ReadoutSink,
        steps_per_frame: int = 1,
        paused: bool = False,
    ) -> None:
        self.engine_factory = engine_factory
        self.readouts = readouts
        self._paused = bool(paused)
        self._simulation = self._create_simulation()
        self.driver = FrameDriver(
            canvas=canvas,
            scheduler=scheduler,
            readouts=readouts,
            simulation_provider=lambda: self._simulation,
            is_paused=lambda: self._paused,
            steps_per_frame=steps_per_frame,
        )
        self.on_fault: Callable[[Exception], None] | None = None
        self.driver.on_fault = self._on_loop_fault

    @property
    def simulation(self) -> SimulationEngine:
        return self._simulation

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def loop_state(self) -> LoopState:
        return self.driver.state

    def bootstrap(self) -> None:
        """Render the first frame; the loop keeps going unless paused."""
        LOGGER.info("Starting render loop (paused=%s)", self._paused)
        self.driver.enter()

    def restart(self) -> None:
        """Replace the simulation with a freshly created one.

        The loop state is left alone: a running loop draws the new simulation
        on its next tick, a paused one keeps it inert until resumed.
        """
        self._simulation = self._create_simulation()
        LOGGER.info("Simulation restarted")
        if self._paused:
            self._publish(read_statistics(self._simulation, self._current_generation()))

    def set_paused(self, value: bool) -> None:
        """Pause or resume the render loop.

        Resuming re-enters the frame driver only on a paused -> running change,
        so exactly one loop is ever active.
        """
        value = bool(value)
        if value == self._paused:
            return
        self._paused = value
        if value:
            self.driver.halt()
            LOGGER.info("Render loop paused after %d ticks", self.driver.ticks)
        else:
            LOGGER.info("Render loop resumed")
            self.driver.enter()

    def toggle_paused(self) -> None:
        self.set_paused(not self._paused)

    def train(self) -> RunStatistics:
        """Run the current generation to completion and report its statistics."""
        summary = call_engine("train", self._simulation.train)
        if summary is None:
            stats = read_statistics(self._simulation, self._current_generation())
        else:
            stats = RunStatistics.from_summary(summary)
        LOGGER.info("Trained %s", stats.describe())
        self._publish(stats)
        return stats

    def _on_loop_fault(self, exc: Exception) -> None:
        # A halted loop reads as paused, so resuming starts exactly one new loop.
        self._paused = True
        if self.on_fault is not None:
            self.on_fault(exc)

    def _current_generation(self) -> int:
        # Not part of the engine contract; engines without it report 0.
        return int(getattr(self._simulation, "generation", 0))

    def _publish(self, stats: RunStatistics) -> None:
        self.readouts.show_readouts(Readouts.from_statistics(stats))

    def _create_simulation(self) -> SimulationEngine:
        return call_engine("create", self.engine_factory)
