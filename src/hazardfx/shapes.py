"""Drawable body shapes for obstacle particles."""

from __future__ import annotations

import pygame

from .utils import Color, TRANSPARENT, Vector


class Shape:
    """Position, rotation (degrees) and uniform scale shared by body shapes."""

    def __init__(self, position: Vector) -> None:
        self.position = pygame.math.Vector2(position)
        self.rotation = 0.0
        self.scale = 1.0

    def set_position(self, position: Vector) -> None:
        self.position.update(position)

    def draw(self, surface: pygame.Surface) -> None:
        raise NotImplementedError


class CoreShape(Shape):
    """Filled circle forming the solid body of an obstacle."""

    def __init__(self, position: Vector, radius: float, color: Color = TRANSPARENT) -> None:
        super().__init__(position)
        self.radius = radius
        self.fill_color = color
        self.image: pygame.Surface | None = None
        self._image_key: tuple[int, Color] | None = None

    def get_bounds(self) -> pygame.Rect:
        """Axis-aligned bounds of the untransformed circle."""
        diameter = int(round(self.radius * 2))
        rect = pygame.Rect(0, 0, diameter, diameter)
        rect.center = (int(round(self.position.x)), int(round(self.position.y)))
        return rect

    def draw(self, surface: pygame.Surface) -> None:
        radius = max(1, int(round(self.radius * self.scale)))
        key = (radius, self.fill_color)
        if self.image is None or self._image_key != key:
            # rebuilt only when the pulse changes the pixel radius or the color changes
            self.image = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
            pygame.draw.circle(self.image, self.fill_color, (radius, radius), radius)
            self._image_key = key
        surface.blit(self.image, (int(self.position.x) - radius, int(self.position.y) - radius))


class OutlineShape(Shape):
    """Hollow square drawn around the core and rotated independently."""

    def __init__(self, position: Vector, size: float, thickness: int, color: Color = TRANSPARENT) -> None:
        super().__init__(position)
        self.size = size
        self.thickness = thickness
        self.outline_color = color

    def corners(self) -> list[pygame.math.Vector2]:
        """Corner points after scale and rotation, in screen space."""
        half = self.size * self.scale / 2
        local = [(-half, -half), (half, -half), (half, half), (-half, half)]
        return [self.position + pygame.math.Vector2(point).rotate(self.rotation) for point in local]

    def draw(self, surface: pygame.Surface) -> None:
        points = self.corners()
        min_x = min(p.x for p in points) - self.thickness
        min_y = min(p.y for p in points) - self.thickness
        width = int(max(p.x for p in points) - min_x) + self.thickness + 1
        height = int(max(p.y for p in points) - min_y) + self.thickness + 1
        image = pygame.Surface((width, height), pygame.SRCALPHA)
        local = [(p.x - min_x, p.y - min_y) for p in points]
        pygame.draw.polygon(image, self.outline_color, local, self.thickness)
        surface.blit(image, (int(min_x), int(min_y)))
