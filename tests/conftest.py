"""Shared fixtures for headless hazardfx tests."""

from __future__ import annotations

import os
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def canvas() -> pygame.Surface:
    """Fully transparent surface large enough for an obstacle and its bursts."""
    surface = pygame.Surface((800, 600), pygame.SRCALPHA)
    surface.fill((0, 0, 0, 0))
    return surface


def has_output(surface: pygame.Surface) -> bool:
    return surface.get_bounding_rect().width > 0
