"""Simulation engine contract, fault type, and engine factory loading."""

from __future__ import annotations

import importlib
from typing import Any, Callable, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


class EngineFault(RuntimeError):
    """Raised when a simulation engine call fails or returns unusable data."""


class EngineNotFoundError(LookupError):
    """Raised when a configured engine factory cannot be resolved."""


@runtime_checkable
class SimulationEngine(Protocol):
    """Operations the viewer consumes from a simulation.

    Implementations are constructed without arguments and own their initial
    population, food distribution and agent brains.
    """

    def step(self) -> int:
        """Advance one discrete unit and return the current generation index."""

    def world(self) -> Any:
        """Return a ``WorldSnapshot`` or its serialized mapping form."""

    def train(self) -> Any:
        """Finish the current generation and return its summary statistics."""

    def min_fitness(self) -> float:
        ...

    def max_fitness(self) -> float:
        ...

    def avg_fitness(self) -> float:
        ...


EngineFactory = Callable[[], SimulationEngine]


def call_engine(operation: str, fn: Callable[..., T], *args: Any) -> T:
    """Invoke one engine operation, converting failures into ``EngineFault``."""
    try:
        return fn(*args)
    except EngineFault:
        raise
    except Exception as exc:
        raise EngineFault(f"engine.{operation} failed: {exc}") from exc


def load_engine_factory(path: str) -> EngineFactory:
    """Resolve ``"package.module:Attribute"`` to a zero-argument engine factory."""
    module_name, sep, attr_name = str(path).partition(":")
    if not sep or not module_name or not attr_name:
        raise EngineNotFoundError(f"Engine path '{path}' must look like 'package.module:Factory'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise EngineNotFoundError(f"Engine module '{module_name}' could not be imported: {exc}") from exc

    factory = getattr(module, attr_name, None)
    if factory is None or not callable(factory):
        raise EngineNotFoundError(f"Engine factory '{attr_name}' not found in module '{module_name}'")
    return factory
