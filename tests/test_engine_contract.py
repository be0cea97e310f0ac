"""Tests for world payload coercion, engine loading and the drift engine."""

from __future__ import annotations

import math
from collections import namedtuple

import pytest

from core.engine import EngineFault, EngineNotFoundError, SimulationEngine, load_engine_factory
from core.world_state import Bird, Food, Readouts, RunStatistics, WorldSnapshot, format_fitness
from engine.drift import BIRD_COUNT, FOOD_COUNT, DriftSimulation


def test_world_snapshot_from_mapping_payload() -> None:
    snapshot = WorldSnapshot.from_payload(
        {"foods": [{"x": 0.1, "y": 0.2}], "birds": [{"x": 0.3, "y": 0.4, "rotation": 1.5}]}
    )
    assert snapshot.foods == (Food(x=0.1, y=0.2),)
    assert snapshot.birds == (Bird(x=0.3, y=0.4, rotation=1.5),)


def test_world_snapshot_passthrough_and_bad_type() -> None:
    snapshot = WorldSnapshot()
    assert WorldSnapshot.from_payload(snapshot) is snapshot
    with pytest.raises(EngineFault, match="unsupported payload"):
        WorldSnapshot.from_payload(42)


FoodRecord = namedtuple("FoodRecord", ["x", "y"])


class _SlottedBird:
    __slots__ = ("x", "y", "rotation")

    def __init__(self, x: float, y: float, rotation: float) -> None:
        self.x = x
        self.y = y
        self.rotation = rotation


def test_world_snapshot_accepts_namedtuple_and_slotted_entries() -> None:
    snapshot = WorldSnapshot.from_payload(
        {"foods": [FoodRecord(0.25, 0.75)], "birds": [_SlottedBird(0.5, 0.5, 3.0)]}
    )
    assert snapshot.foods == (Food(x=0.25, y=0.75),)
    assert snapshot.birds == (Bird(x=0.5, y=0.5, rotation=3.0),)


def test_world_snapshot_entry_missing_coordinate_is_engine_fault() -> None:
    with pytest.raises(EngineFault, match="malformed"):
        WorldSnapshot.from_payload({"foods": [object()]})


def test_run_statistics_from_summary_mapping() -> None:
    stats = RunStatistics.from_summary({"generation": 3, "min_fitness": 0, "max_fitness": 4, "avg_fitness": None})
    assert stats == RunStatistics(generation=3, min_fitness=0.0, max_fitness=4.0, avg_fitness=None)
    assert "avg=N/A" in stats.describe()


@pytest.mark.parametrize(("value", "expected"), [(None, "N/A"), (math.nan, "N/A"), (0.0, "0.0000"), (3.14159, "3.1416")])
def test_format_fitness(value, expected) -> None:
    assert format_fitness(value) == expected


def test_default_readouts_before_any_generation() -> None:
    assert Readouts.from_statistics(RunStatistics()).as_tuple() == (
        "Generation: 0",
        "Minimum Fitness: N/A",
        "Maximum Fitness: N/A",
        "Average Fitness: N/A",
    )


def test_load_engine_factory_resolves_drift_engine() -> None:
    factory = load_engine_factory("engine.drift:DriftSimulation")
    assert factory is DriftSimulation
    assert isinstance(factory(), SimulationEngine)


@pytest.mark.parametrize(
    ("path", "message"),
    [
        ("engine.drift", "must look like"),
        ("engine.missing_module:Thing", "could not be imported"),
        ("engine.drift:Missing", "not found"),
        ("engine.drift:BIRD_COUNT", "not found"),
    ],
)
def test_load_engine_factory_errors(path, message) -> None:
    with pytest.raises(EngineNotFoundError, match=message):
        load_engine_factory(path)


def test_drift_engine_world_shape_and_bounds() -> None:
    sim = DriftSimulation(seed=3)
    world = sim.world()

    assert len(world.birds) == BIRD_COUNT
    assert len(world.foods) == FOOD_COUNT
    for _ in range(50):
        sim.step()
    for bird in sim.world().birds:
        assert 0.0 <= bird.x < 1.0
        assert 0.0 <= bird.y < 1.0


def test_drift_engine_is_deterministic_for_seed() -> None:
    first = DriftSimulation(seed=9)
    second = DriftSimulation(seed=9)
    for _ in range(10):
        first.step()
        second.step()
    assert first.world() == second.world()


def test_drift_engine_statistics_undefined_until_first_generation() -> None:
    sim = DriftSimulation(seed=1, generation_length=5)
    assert math.isnan(sim.min_fitness())
    assert math.isnan(sim.avg_fitness())

    generations = [sim.step() for _ in range(5)]

    assert generations == [0, 0, 0, 0, 1]
    assert sim.min_fitness() <= sim.avg_fitness() <= sim.max_fitness()


def test_drift_engine_train_completes_current_generation() -> None:
    sim = DriftSimulation(seed=2, generation_length=7)
    sim.step()

    stats = sim.train()

    assert stats.generation == 1
    assert sim.generation == 1
    assert sim.age == 0
    assert stats.max_fitness == sim.max_fitness()
