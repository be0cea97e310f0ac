"""Placeholder simulation engine with drifting birds and respawning food.

Birds have no brains and nothing is selected between generations: each bird
keeps a random heading with a little jitter, and fitness is simply the amount
of food it happened to fly over. It exists so the viewer runs without an
external engine.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass

from core.world_state import Bird, Food, RunStatistics, WorldSnapshot

BIRD_COUNT = 40
FOOD_COUNT = 60
BIRD_SPEED = 0.002
HEADING_JITTER = 0.05
EAT_DISTANCE = 0.01
GENERATION_LENGTH = 2500


@dataclass
class _DriftingBird:
    x: float
    y: float
    rotation: float
    satiation: int = 0


class DriftSimulation:
    """Simulation engine implementing the viewer's engine contract."""

    def __init__(self, seed: int | None = None, generation_length: int = GENERATION_LENGTH) -> None:
        if generation_length < 1:
            raise ValueError("generation_length must be >= 1")
        self.rng = random.Random(seed)
        self.generation_length = int(generation_length)
        self.generation = 0
        self.age = 0
        self.last_statistics = RunStatistics(generation=0, min_fitness=math.nan, max_fitness=math.nan, avg_fitness=math.nan)
        self.birds = [self._random_bird() for _ in range(BIRD_COUNT)]
        self.foods = [self._random_point() for _ in range(FOOD_COUNT)]

    def step(self) -> int:
        for bird in self.birds:
            bird.rotation = (bird.rotation + self.rng.uniform(-HEADING_JITTER, HEADING_JITTER)) % (2.0 * math.pi)
            # Heading 0 moves along +y, matching the renderer's nose direction.
            bird.x = (bird.x - math.sin(bird.rotation) * BIRD_SPEED) % 1.0
            bird.y = (bird.y + math.cos(bird.rotation) * BIRD_SPEED) % 1.0

        for bird in self.birds:
            for index, (fx, fy) in enumerate(self.foods):
                if math.hypot(bird.x - fx, bird.y - fy) <= EAT_DISTANCE:
                    bird.satiation += 1
                    self.foods[index] = self._random_point()

        self.age += 1
        if self.age >= self.generation_length:
            self._evolve()
        return self.generation

    def world(self) -> WorldSnapshot:
        return WorldSnapshot(
            foods=tuple(Food(x=x, y=y) for x, y in self.foods),
            birds=tuple(Bird(x=b.x, y=b.y, rotation=b.rotation) for b in self.birds),
        )

    def train(self) -> RunStatistics:
        target = self.generation + 1
        while self.generation < target:
            self.step()
        return self.last_statistics

    def min_fitness(self) -> float:
        return float(self.last_statistics.min_fitness)

    def max_fitness(self) -> float:
        return float(self.last_statistics.max_fitness)

    def avg_fitness(self) -> float:
        return float(self.last_statistics.avg_fitness)

    def _evolve(self) -> None:
        fitness = [float(bird.satiation) for bird in self.birds]
        self.generation += 1
        self.age = 0
        self.last_statistics = RunStatistics(
            generation=self.generation,
            min_fitness=min(fitness),
            max_fitness=max(fitness),
            avg_fitness=sum(fitness) / len(fitness),
        )
        self.birds = [self._random_bird() for _ in range(BIRD_COUNT)]

    def _random_bird(self) -> _DriftingBird:
        x, y = self._random_point()
        return _DriftingBird(x=x, y=y, rotation=self.rng.uniform(0.0, 2.0 * math.pi))

    def _random_point(self) -> tuple[float, float]:
        return self.rng.random(), self.rng.random()
