"""Cooperative render loop: one tick per display frame."""

from __future__ import annotations

import enum
import logging
from typing import Callable, ContextManager, Protocol

from core.coordinates import SurfaceGeometry
from core.engine import EngineFault, SimulationEngine, call_engine
from core.renderer import (
    BIRD_COLOR,
    BIRD_SIZE_FACTOR,
    FOOD_COLOR,
    FOOD_RADIUS_FACTOR,
    LEAD_BIRD_COLOR,
    Surface,
    draw_agent,
    draw_food,
)
from core.scheduling import FrameScheduler
from core.world_state import Readouts, RunStatistics, WorldSnapshot

LOGGER = logging.getLogger(__name__)


class LoopState(str, enum.Enum):
    """Whether a tick is queued for the next frame."""

    IDLE = "idle"
    SCHEDULED = "scheduled"


class Canvas(Protocol):
    """Drawing target that opens a surface for the duration of one tick."""

    surface_geometry: SurfaceGeometry

    def open_surface(self) -> ContextManager[Surface]:
        ...


class ReadoutSink(Protocol):
    def show_readouts(self, readouts: Readouts) -> None:
        ...


class FrameDriver:
    """Runs render ticks and keeps at most one tick queued.

    The engine is fetched from ``simulation_provider`` at the start of every
    tick, so a restart between ticks is picked up without touching the loop.
    ``is_paused`` is consulted once, after drawing, to decide whether to queue
    the next tick.
    """

    def __init__(
        self,
        canvas: Canvas,
        scheduler: FrameScheduler,
        readouts: ReadoutSink,
        simulation_provider: Callable[[], SimulationEngine],
        is_paused: Callable[[], bool],
        steps_per_frame: int = 1,
    ) -> None:
        if steps_per_frame < 1:
            raise ValueError("steps_per_frame must be >= 1")
        self.canvas = canvas
        self.scheduler = scheduler
        self.readouts = readouts
        self.simulation_provider = simulation_provider
        self.is_paused = is_paused
        self.steps_per_frame = int(steps_per_frame)
        self.ticks = 0
        self.on_fault: Callable[[Exception], None] | None = None
        self._state = LoopState.IDLE

    @property
    def state(self) -> LoopState:
        return self._state

    def enter(self) -> bool:
        """Run a tick now unless one is already queued. Returns whether it ran."""
        if self._state is LoopState.SCHEDULED:
            return False
        self.tick()
        return True

    def halt(self) -> None:
        """Drop the queued tick, if any. An executing tick is never interrupted."""
        self.scheduler.cancel()
        self._state = LoopState.IDLE

    def _on_frame(self) -> None:
        self._state = LoopState.IDLE
        self.tick()

    def tick(self) -> None:
        """Clear, read, step, draw, update labels, then maybe reschedule."""
        try:
            self._render_frame()
        except Exception as exc:
            self._state = LoopState.IDLE
            LOGGER.error("Render loop halted after %d ticks", self.ticks, exc_info=True)
            if self.on_fault is not None:
                self.on_fault(exc)
            raise

        self.ticks += 1
        if self.is_paused():
            self._state = LoopState.IDLE
            LOGGER.debug("Tick %d done; loop idle", self.ticks)
            return
        self._state = LoopState.SCHEDULED
        self.scheduler.schedule(self._on_frame)

    def _render_frame(self) -> None:
        simulation = self.simulation_provider()
        geometry = self.canvas.surface_geometry
        width = geometry.logical_width
        height = geometry.logical_height

        with self.canvas.open_surface() as surface:
            surface.clear_rect(0, 0, width, height)

            # Drawn positions are read before stepping and lag by steps_per_frame.
            snapshot = WorldSnapshot.from_payload(call_engine("world", simulation.world))
            generation = 0
            for _ in range(self.steps_per_frame):
                generation = call_engine("step", simulation.step)

            food_radius = FOOD_RADIUS_FACTOR * width
            for food in snapshot.foods:
                x, y = geometry.to_device(food.x, food.y)
                draw_food(surface, x, y, food_radius, FOOD_COLOR)

            bird_size = BIRD_SIZE_FACTOR * width
            for index, bird in enumerate(snapshot.birds):
                x, y = geometry.to_device(bird.x, bird.y)
                color = LEAD_BIRD_COLOR if index == 0 else BIRD_COLOR
                draw_agent(surface, x, y, bird_size, bird.rotation, color)

        stats = read_statistics(simulation, generation)
        self.readouts.show_readouts(Readouts.from_statistics(stats))


def read_statistics(simulation: SimulationEngine, generation: int) -> RunStatistics:
    """Collect the fitness accessors of ``simulation`` under ``generation``."""
    try:
        generation = int(generation)
    except (TypeError, ValueError) as exc:
        raise EngineFault(f"engine.step returned a non-integer generation: {generation!r}") from exc
    return RunStatistics(
        generation=generation,
        min_fitness=call_engine("min_fitness", simulation.min_fitness),
        max_fitness=call_engine("max_fitness", simulation.max_fitness),
        avg_fitness=call_engine("avg_fitness", simulation.avg_fitness),
    )
