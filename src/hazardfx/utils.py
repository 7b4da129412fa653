"""Shared constants and utility helpers for hazardfx."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Tuple
import json
import logging
import random

logger = logging.getLogger(__name__)

SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
FPS = 60
OFFSCREEN_MARGIN = 200

BG_COLOR = (30, 30, 46)
TEXT_COLOR = (220, 238, 255)

Color = Tuple[int, int, int, int]
Vector = Tuple[float, float]

TRANSPARENT: Color = (0, 0, 0, 0)

DATA_DIR = Path(".hazardfx")
SETTINGS_FILE = DATA_DIR / "settings.json"

_shared_rng = random.Random()


def shared_rng() -> random.Random:
    """Return the process-wide generator used when none is injected."""
    return _shared_rng


def set_shared_rng(rng: random.Random) -> None:
    """Swap the process-wide generator, e.g. for a seeded one in tests."""
    global _shared_rng
    _shared_rng = rng


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp a value into a closed interval."""
    return max(minimum, min(maximum, value))


def with_alpha(color: Color, alpha: int) -> Color:
    return (color[0], color[1], color[2], int(clamp(alpha, 0, 255)))


def scale_color(color: Color, factor: float) -> Color:
    """Scale every RGBA channel by factor, truncating to ints."""
    return (
        int(color[0] * factor),
        int(color[1] * factor),
        int(color[2] * factor),
        int(color[3] * factor),
    )


def load_json(path: Path, default: Any) -> Any:
    """Load JSON data, returning default when missing or malformed."""
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, OSError):
        logger.warning("Could not read %s, using defaults", path)
        return default
