"""Runtime configuration for the obstacle preview."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable
import logging

from .utils import FPS, SCREEN_HEIGHT, SCREEN_WIDTH, SETTINGS_FILE, load_json

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(slots=True)
class SpawnSettings:
    """Spawn cadence and speed ramp for the obstacle field."""

    spawn_interval: float = 1.2
    speed_min: float = 100.0
    speed_max: float = 250.0
    speed_increase_interval: float = 10.0
    speed_increase_amount: float = 20.0
    max_speed: float = 500.0


@dataclass(slots=True)
class PreviewSettings:
    """Window, randomness and logging options."""

    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    fps: int = FPS
    seed: int | None = None
    log_level: str = "INFO"
    spawn: SpawnSettings = field(default_factory=SpawnSettings)


class SettingsManager:
    """Load preview settings with safe defaults."""

    def __init__(self, path: Path = SETTINGS_FILE) -> None:
        self.path = path
        self.settings = self.load()

    def load(self) -> PreviewSettings:
        """Load settings from disk, keeping defaults for anything invalid."""
        raw = load_json(self.path, {})
        settings = PreviewSettings()
        if not isinstance(raw, dict):
            logger.warning("Ignoring settings file %s: expected an object", self.path)
            return settings

        settings.screen_width = _read(raw, "screen_width", _as_int, settings.screen_width, _positive)
        settings.screen_height = _read(raw, "screen_height", _as_int, settings.screen_height, _positive)
        settings.fps = _read(raw, "fps", _as_int, settings.fps, _positive)
        if raw.get("seed") is not None:
            settings.seed = _read(raw, "seed", _as_int, None)

        level = str(raw.get("log_level", settings.log_level)).upper()
        if level in LOG_LEVELS:
            settings.log_level = level
        else:
            logger.warning("Unknown log level %r, using %s", level, settings.log_level)

        spawn = raw.get("spawn", {})
        if isinstance(spawn, dict):
            defaults = settings.spawn
            settings.spawn = SpawnSettings(
                spawn_interval=_read(spawn, "spawn_interval", _as_float, defaults.spawn_interval, _positive),
                speed_min=_read(spawn, "speed_min", _as_float, defaults.speed_min),
                speed_max=_read(spawn, "speed_max", _as_float, defaults.speed_max),
                speed_increase_interval=_read(
                    spawn, "speed_increase_interval", _as_float, defaults.speed_increase_interval, _positive
                ),
                speed_increase_amount=_read(spawn, "speed_increase_amount", _as_float, defaults.speed_increase_amount),
                max_speed=_read(spawn, "max_speed", _as_float, defaults.max_speed),
            )
            if settings.spawn.speed_min > settings.spawn.speed_max:
                logger.warning("speed_min exceeds speed_max, using default speed range")
                settings.spawn.speed_min = defaults.speed_min
                settings.spawn.speed_max = defaults.speed_max
        return settings


def _positive(value: float) -> bool:
    return value > 0


def _as_int(value: Any) -> int:
    """Accept ints and integral numbers only; booleans and fractions are rejected."""
    if isinstance(value, bool):
        raise TypeError("boolean is not an integer setting")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("fractional value for an integer setting")
    return int(value)


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError("boolean is not a numeric setting")
    return float(value)


def _read(
    payload: dict[str, Any],
    key: str,
    cast: Callable[[Any], Any],
    default: Any,
    valid: Callable[[Any], bool] | None = None,
) -> Any:
    if key not in payload:
        return default
    try:
        value = cast(payload[key])
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r", key, payload[key])
        return default
    if valid is not None and not valid(value):
        logger.warning("Out of range value for %s: %r", key, value)
        return default
    return value
