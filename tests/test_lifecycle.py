"""Tests for pause/resume, restart and train handling of the lifecycle controller."""

from __future__ import annotations

import math

import pytest

from core.coordinates import SurfaceGeometry
from core.engine import EngineFault
from core.frame_driver import LoopState
from core.lifecycle import LifecycleController
from core.recording import RecordingCanvas, RecordingReadouts
from core.scheduling import ManualScheduler
from core.world_state import RunStatistics


class _CountingEngine:
    """Engine double with a generation counter and scripted train summaries."""

    created = 0

    def __init__(self) -> None:
        type(self).created += 1
        self.serial = type(self).created
        self.generation = 0
        self.step_calls = 0
        self.fitness = (math.nan, math.nan, math.nan)
        self.on_step = None

    def step(self) -> int:
        self.step_calls += 1
        if self.on_step is not None:
            self.on_step()
        return self.generation

    def world(self):
        return {"foods": [], "birds": [{"x": 0.1, "y": 0.2, "rotation": 0.0}]}

    def train(self):
        self.generation += 1
        self.fitness = (1.0, 5.0, 2.5)
        return {
            "generation": self.generation,
            "min_fitness": self.fitness[0],
            "max_fitness": self.fitness[1],
            "avg_fitness": self.fitness[2],
        }

    def min_fitness(self) -> float:
        return self.fitness[0]

    def max_fitness(self) -> float:
        return self.fitness[1]

    def avg_fitness(self) -> float:
        return self.fitness[2]


def _build_controller(factory=_CountingEngine, paused: bool = False):
    scheduler = ManualScheduler()
    readouts = RecordingReadouts()
    controller = LifecycleController(
        engine_factory=factory,
        canvas=RecordingCanvas(SurfaceGeometry(logical_width=800, logical_height=600)),
        scheduler=scheduler,
        readouts=readouts,
        paused=paused,
    )
    return controller, scheduler, readouts


def test_bootstrap_schedules_next_tick() -> None:
    controller, scheduler, _ = _build_controller()
    controller.bootstrap()

    assert controller.loop_state is LoopState.SCHEDULED
    assert scheduler.pending is True
    assert controller.driver.ticks == 1


def test_bootstrap_while_paused_draws_one_frame_and_idles() -> None:
    controller, scheduler, readouts = _build_controller(paused=True)
    controller.bootstrap()

    assert controller.loop_state is LoopState.IDLE
    assert scheduler.pending is False
    assert len(readouts.history) == 1


def test_pausing_twice_is_same_as_once() -> None:
    controller, scheduler, _ = _build_controller()
    controller.bootstrap()

    controller.set_paused(True)
    first = (controller.paused, controller.loop_state, scheduler.pending)
    controller.set_paused(True)

    assert (controller.paused, controller.loop_state, scheduler.pending) == first == (True, LoopState.IDLE, False)


def test_resume_after_pause_starts_exactly_one_loop() -> None:
    controller, scheduler, _ = _build_controller()
    controller.bootstrap()
    controller.set_paused(True)
    ticks_before = controller.driver.ticks
    scheduled_before = scheduler.scheduled_count

    controller.set_paused(False)

    assert controller.driver.ticks == ticks_before + 1
    assert scheduler.scheduled_count == scheduled_before + 1
    assert controller.loop_state is LoopState.SCHEDULED


def test_resume_when_not_paused_is_a_no_op() -> None:
    controller, scheduler, _ = _build_controller()
    controller.bootstrap()

    controller.set_paused(False)

    assert controller.driver.ticks == 1
    assert scheduler.scheduled_count == 1


def test_pause_requested_mid_tick_lets_tick_finish() -> None:
    controller, scheduler, readouts = _build_controller()
    controller.bootstrap()
    controller.simulation.on_step = lambda: controller.set_paused(True)

    scheduler.fire()

    assert controller.driver.ticks == 2
    assert len(readouts.history) == 2
    assert controller.loop_state is LoopState.IDLE
    assert scheduler.pending is False


def test_toggle_paused_flips_flag() -> None:
    controller, _, _ = _build_controller()
    controller.bootstrap()
    controller.toggle_paused()
    assert controller.paused is True
    controller.toggle_paused()
    assert controller.paused is False


def test_restart_replaces_simulation_and_keeps_loop_running() -> None:
    controller, scheduler, readouts = _build_controller()
    controller.bootstrap()
    controller.train()
    old = controller.simulation

    controller.restart()
    new = controller.simulation
    assert new is not old
    assert new.generation == 0
    assert controller.loop_state is LoopState.SCHEDULED

    scheduler.fire()
    assert new.step_calls == 1
    assert readouts.latest.generation == "Generation: 0"


def test_restart_while_paused_does_not_resume() -> None:
    controller, scheduler, readouts = _build_controller()
    controller.bootstrap()
    controller.train()
    controller.set_paused(True)

    controller.restart()

    assert controller.paused is True
    assert scheduler.pending is False
    assert controller.simulation.step_calls == 0
    assert readouts.latest.as_tuple() == (
        "Generation: 0",
        "Minimum Fitness: N/A",
        "Maximum Fitness: N/A",
        "Average Fitness: N/A",
    )


def test_train_reports_completed_generation() -> None:
    controller, _, readouts = _build_controller(paused=True)

    stats = controller.train()

    assert stats == RunStatistics(generation=1, min_fitness=1.0, max_fitness=5.0, avg_fitness=2.5)
    sim = controller.simulation
    assert (sim.min_fitness(), sim.max_fitness(), sim.avg_fitness()) == (1.0, 5.0, 2.5)
    assert readouts.latest.generation == "Generation: 1"
    assert readouts.latest.max_fitness == "Maximum Fitness: 5.0000"


def test_train_without_summary_reads_accessors() -> None:
    class _SilentTrainer(_CountingEngine):
        def train(self):
            super().train()
            return None

    controller, _, _ = _build_controller(factory=_SilentTrainer, paused=True)

    stats = controller.train()

    assert stats.generation == 1
    assert stats.avg_fitness == 2.5


def test_train_failure_is_engine_fault() -> None:
    class _BrokenTrainer(_CountingEngine):
        def train(self):
            raise RuntimeError("selection failed")

    controller, _, _ = _build_controller(factory=_BrokenTrainer, paused=True)

    with pytest.raises(EngineFault, match="engine.train failed"):
        controller.train()


def test_engine_factory_failure_is_engine_fault() -> None:
    def factory():
        raise RuntimeError("no brains")

    with pytest.raises(EngineFault, match="engine.create failed"):
        _build_controller(factory=factory)


def test_loop_fault_marks_controller_paused_and_resume_restarts_one_loop() -> None:
    controller, scheduler, _ = _build_controller()
    faults: list[Exception] = []
    controller.on_fault = faults.append
    controller.bootstrap()

    def explode() -> None:
        raise RuntimeError("nan in weights")

    controller.simulation.on_step = explode
    with pytest.raises(EngineFault, match="nan in weights"):
        scheduler.fire()

    assert controller.paused is True
    assert controller.loop_state is LoopState.IDLE
    assert len(faults) == 1

    controller.restart()
    fresh = controller.simulation
    controller.set_paused(False)

    assert fresh.step_calls == 1
    assert scheduler.pending is True
    assert controller.loop_state is LoopState.SCHEDULED

