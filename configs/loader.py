"""Configuration loading and validation for the viewer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping

import yaml

DEFAULT_ENGINE = "engine.drift:DriftSimulation"
DEFAULT_CONFIG_PATH = Path(__file__).with_name("default.yaml")

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


@dataclass(frozen=True)
class ViewerConfig:
    """Validated viewer configuration container.

    Provides typed field access for known settings and dictionary-style
    access for extra keys carried along from the config file.
    """

    steps_per_frame: int = 1
    viewport_width: int = 800
    viewport_height: int = 600
    frame_interval_ms: int = 16
    engine: str = DEFAULT_ENGINE
    pixel_ratio: float | None = None
    log_level: str = "INFO"
    extras: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a configuration value by key.

        Args:
            key: Configuration key name.
            default: Value to return if key does not exist.

        Returns:
            Value associated with ``key`` or ``default``.
        """
        if key != "extras" and hasattr(self, key):
            return getattr(self, key)
        return self.extras.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        """Return a full dictionary view of the configuration."""
        payload = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "extras"}
        payload.update(self.extras)
        return payload


class ConfigLoader:
    """Load and validate viewer configuration files (YAML or JSON)."""

    @staticmethod
    def load(path: str | Path) -> ViewerConfig:
        """Load a viewer config from ``path``.

        Keys missing from the file keep their defaults.
        """
        payload = _read_config_payload(path)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError("Config file must contain a mapping object.")
        return _validate_and_build(payload)

    @staticmethod
    def defaults() -> ViewerConfig:
        return _validate_and_build({})


def _read_config_payload(path: str | Path) -> Any:
    """Read raw config payload from JSON or YAML file."""
    config_path = Path(path)
    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        return json.loads(content)
    if suffix in {".yaml", ".yml"}:
        return yaml.safe_load(content)
    raise ValueError(f"Unsupported config extension: {suffix}")


def _validate_and_build(payload: Mapping[str, Any]) -> ViewerConfig:
    """Validate raw mapping and build ``ViewerConfig``."""
    base = ViewerConfig()

    steps_per_frame = _int_field(payload, "steps_per_frame", base.steps_per_frame)
    viewport_width = _int_field(payload, "viewport_width", base.viewport_width)
    viewport_height = _int_field(payload, "viewport_height", base.viewport_height)
    frame_interval_ms = _int_field(payload, "frame_interval_ms", base.frame_interval_ms)
    engine = str(payload.get("engine", base.engine)).strip()
    raw_ratio = payload.get("pixel_ratio", base.pixel_ratio)
    pixel_ratio = None if raw_ratio is None else _float_field(payload, "pixel_ratio", raw_ratio)
    log_level = str(payload.get("log_level", base.log_level)).upper()

    if steps_per_frame < 1:
        raise ValueError("steps_per_frame must be >= 1")
    if viewport_width <= 0 or viewport_height <= 0:
        raise ValueError("viewport_width and viewport_height must be > 0")
    if frame_interval_ms < 0:
        raise ValueError("frame_interval_ms must be >= 0")
    if ":" not in engine:
        raise ValueError("engine must look like 'package.module:Factory'")
    if pixel_ratio is not None and pixel_ratio < 1.0:
        raise ValueError("pixel_ratio must be >= 1.0 or null")
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(sorted(_LOG_LEVELS))}")

    known = {f.name for f in fields(ViewerConfig)} - {"extras"}
    extras = {str(k): v for k, v in payload.items() if k not in known}

    return ViewerConfig(
        steps_per_frame=steps_per_frame,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        frame_interval_ms=frame_interval_ms,
        engine=engine,
        pixel_ratio=pixel_ratio,
        log_level=log_level,
        extras=extras,
    )


def _int_field(payload: Mapping[str, Any], key: str, default: int) -> int:
    """Read a whole-number field, rejecting nulls, lists and fractional values."""
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{key} must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def _float_field(payload: Mapping[str, Any], key: str, default: float) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValueError(f"{key} must be a number, got {value!r}")
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc
