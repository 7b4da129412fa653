"""Preview window that drives an obstacle field frame by frame."""

from __future__ import annotations

import logging
import random
import pygame

from .field import ObstacleField
from .settings import PreviewSettings
from .utils import BG_COLOR, TEXT_COLOR

logger = logging.getLogger(__name__)


class HazardPreview:
    """Opens a window and shows falling obstacles with their effects."""

    def __init__(self, settings: PreviewSettings) -> None:
        pygame.init()
        pygame.font.init()

        self.settings = settings
        self.screen = pygame.display.set_mode((settings.screen_width, settings.screen_height))
        pygame.display.set_caption("hazardfx - obstacle particles")
        self.clock = pygame.time.Clock()
        self.small_font = pygame.font.SysFont("consolas", 16)

        rng = random.Random(settings.seed)
        self.field = ObstacleField(
            settings.spawn,
            width=settings.screen_width,
            height=settings.screen_height,
            rng=rng,
        )

    def run(self) -> None:
        """Main event/update/render loop."""
        logger.info("Preview started (%dx%d)", self.settings.screen_width, self.settings.screen_height)
        running = True
        while running:
            dt = self.clock.tick(self.settings.fps) / 1000.0
            running = self._handle_events()
            if not running:
                break
            self.field.update(dt)
            self._render()

        pygame.quit()
        logger.info("Preview closed")

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_click(event.pos, event.button)
        return True

    def _handle_click(self, pos: tuple[int, int], button: int) -> None:
        # left click plays a projectile hit, right click an ambient collision
        for obstacle in self.field.obstacles_at(pos):
            if button == 1:
                obstacle.destroy_immediately()
            elif button == 3:
                obstacle.trigger_collision_effect()
                obstacle.trigger_destroy_effect()

    def _render(self) -> None:
        self.screen.fill(BG_COLOR)
        self.field.draw(self.screen)

        lines = [
            f"Obstacles: {len(self.field.obstacles)}",
            f"Speed level: {self.field.ramp.level}",
            "Left click: projectile hit | Right click: collision | ESC: quit",
        ]
        for idx, line in enumerate(lines):
            text = self.small_font.render(line, True, TEXT_COLOR)
            self.screen.blit(text, (12, 10 + idx * 20))
        pygame.display.flip()
