"""Immutable world snapshot and run statistics read from a simulation engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from core.engine import EngineFault

FITNESS_PLACEHOLDER = "N/A"
_ENTRY_FIELDS = ("x", "y", "rotation")


@dataclass(frozen=True)
class Food:
    """Food item position in normalized world space."""

    x: float
    y: float


@dataclass(frozen=True)
class Bird:
    """Agent position in normalized world space and heading in radians."""

    x: float
    y: float
    rotation: float


@dataclass(frozen=True)
class WorldSnapshot:
    """Point-in-time read of all food and bird positions.

    Valid for one frame only; the engine keeps moving after it is taken.
    """

    foods: tuple[Food, ...] = ()
    birds: tuple[Bird, ...] = ()

    @classmethod
    def from_payload(cls, payload: Any) -> "WorldSnapshot":
        """Coerce an engine ``world()`` result into a snapshot.

        Accepts a ``WorldSnapshot`` as-is or the serialized mapping form
        ``{"birds": [{"x", "y", "rotation"}], "foods": [{"x", "y"}]}``.
        """
        if isinstance(payload, WorldSnapshot):
            return payload
        if not isinstance(payload, Mapping):
            raise EngineFault(f"world() returned unsupported payload type {type(payload).__name__}")
        try:
            foods = tuple(
                Food(x=float(item["x"]), y=float(item["y"]))
                for item in _items(payload.get("foods", ()))
            )
            birds = tuple(
                Bird(x=float(item["x"]), y=float(item["y"]), rotation=float(item.get("rotation", 0.0)))
                for item in _items(payload.get("birds", ()))
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise EngineFault(f"world() returned malformed payload: {exc}") from exc
        return cls(foods=foods, birds=birds)


def _items(raw: Any) -> Sequence[Mapping[str, Any]]:
    if not isinstance(raw, (list, tuple)):
        raise TypeError("expected a list of mappings")
    return [_as_mapping(item) for item in raw]


def _as_mapping(item: Any) -> Mapping[str, Any]:
    """Read a world entry given as a mapping, a namedtuple or any object with attributes."""
    if isinstance(item, Mapping):
        return item
    if hasattr(item, "_asdict"):
        return item._asdict()
    return {name: getattr(item, name) for name in _ENTRY_FIELDS if hasattr(item, name)}


@dataclass(frozen=True)
class RunStatistics:
    """Generation counter and fitness aggregates of the last completed generation."""

    generation: int = 0
    min_fitness: float | None = None
    max_fitness: float | None = None
    avg_fitness: float | None = None

    @classmethod
    def from_summary(cls, summary: Any) -> "RunStatistics":
        """Coerce an engine ``train()`` summary."""
        if isinstance(summary, RunStatistics):
            return summary
        if not isinstance(summary, Mapping):
            raise EngineFault(f"train() returned unsupported summary type {type(summary).__name__}")
        try:
            return cls(
                generation=int(summary.get("generation", 0)),
                min_fitness=_optional_float(summary.get("min_fitness")),
                max_fitness=_optional_float(summary.get("max_fitness")),
                avg_fitness=_optional_float(summary.get("avg_fitness")),
            )
        except (TypeError, ValueError) as exc:
            raise EngineFault(f"train() returned malformed summary: {exc}") from exc

    def describe(self) -> str:
        return (
            f"generation {self.generation}: "
            f"min={format_fitness(self.min_fitness)} "
            f"max={format_fitness(self.max_fitness)} "
            f"avg={format_fitness(self.avg_fitness)}"
        )


def _optional_float(value: Any) -> float | None:
    if value is None:
        return None
    return float(value)


def format_fitness(value: float | None) -> str:
    """Format a fitness readout, using a placeholder while it is undefined."""
    if value is None:
        return FITNESS_PLACEHOLDER
    value = float(value)
    if math.isnan(value):
        return FITNESS_PLACEHOLDER
    return f"{value:.4f}"


@dataclass(frozen=True)
class Readouts:
    """The four status label texts shown next to the viewport."""

    generation: str
    min_fitness: str
    max_fitness: str
    avg_fitness: str

    @classmethod
    def from_statistics(cls, stats: RunStatistics) -> "Readouts":
        return cls(
            generation=f"Generation: {stats.generation}",
            min_fitness=f"Minimum Fitness: {format_fitness(stats.min_fitness)}",
            max_fitness=f"Maximum Fitness: {format_fitness(stats.max_fitness)}",
            avg_fitness=f"Average Fitness: {format_fitness(stats.avg_fitness)}",
        )

    def as_tuple(self) -> tuple[str, str, str, str]:
        return (self.generation, self.min_fitness, self.max_fitness, self.avg_fitness)
