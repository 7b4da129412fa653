"""Reference owner of a falling obstacle collection: spawning, speed ramp and cleanup."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
import pygame

from .obstacle import CORE_RADIUS, ObstacleParticle, random_obstacle_type
from .settings import SpawnSettings
from .utils import OFFSCREEN_MARGIN, SCREEN_HEIGHT, SCREEN_WIDTH, shared_rng

logger = logging.getLogger(__name__)

SPAWN_Y = -50.0


@dataclass(slots=True)
class SpeedRamp:
    """Obstacle speed range that grows at a fixed interval."""

    settings: SpawnSettings
    speed_min: float = 0.0
    speed_max: float = 0.0
    level: int = 0
    timer: float = 0.0

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.speed_min = self.settings.speed_min
        self.speed_max = self.settings.speed_max
        self.level = 0
        self.timer = 0.0

    def advance(self, dt: float) -> bool:
        """Advance the ramp timer, returning True when the range was raised."""
        self.timer += dt
        if self.timer < self.settings.speed_increase_interval:
            return False
        self.timer = 0.0
        self.level += 1
        self.speed_min += self.settings.speed_increase_amount
        self.speed_max += self.settings.speed_increase_amount
        if self.speed_max > self.settings.max_speed:
            self.speed_max = self.settings.max_speed
            self.speed_min = min(self.speed_min, self.settings.max_speed - 50)
        logger.info("Speed level %d: obstacle speed %.0f-%.0f", self.level, self.speed_min, self.speed_max)
        return True


class ObstacleField:
    """Spawns, updates, draws and removes obstacles."""

    def __init__(
        self,
        settings: SpawnSettings | None = None,
        width: int = SCREEN_WIDTH,
        height: int = SCREEN_HEIGHT,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings or SpawnSettings()
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else shared_rng()
        self.obstacles: list[ObstacleParticle] = []
        self.ramp = SpeedRamp(self.settings)
        self.spawn_timer = 0.0

    def reset(self) -> None:
        self.obstacles.clear()
        self.ramp.reset()
        self.spawn_timer = 0.0

    def spawn(self) -> ObstacleParticle:
        """Add one obstacle above the top edge with a random type and speed."""
        x = self.rng.uniform(CORE_RADIUS, max(CORE_RADIUS, self.width - CORE_RADIUS))
        speed = self.rng.uniform(self.ramp.speed_min, self.ramp.speed_max)
        kind = random_obstacle_type(self.rng)
        obstacle = ObstacleParticle(x, SPAWN_Y, speed, kind, rng=self.rng)
        self.obstacles.append(obstacle)
        logger.debug("Spawned %s obstacle at x=%.0f speed=%.0f", kind.value, x, speed)
        return obstacle

    def update(self, dt: float) -> None:
        self.ramp.advance(dt)

        self.spawn_timer += dt
        if self.spawn_timer >= self.settings.spawn_interval:
            self.spawn_timer = 0.0
            self.spawn()

        for obstacle in self.obstacles:
            obstacle.update(dt)

        limit = self.height + OFFSCREEN_MARGIN
        self.obstacles = [
            obstacle
            for obstacle in self.obstacles
            if not (obstacle.is_off_screen(limit) or obstacle.should_remove())
        ]

    def draw(self, surface: pygame.Surface) -> None:
        for obstacle in self.obstacles:
            obstacle.draw(surface)

    def obstacles_at(self, point: tuple[int, int]) -> list[ObstacleParticle]:
        """Live obstacles whose bounds contain point."""
        return [
            obstacle
            for obstacle in self.obstacles
            if obstacle.is_active and obstacle.get_bounds().collidepoint(point)
        ]
