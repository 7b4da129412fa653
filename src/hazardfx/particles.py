"""Particle leaves, motion rules and the pooling emitter."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Callable, Dict
import math
import random
import pygame

from .utils import Color, Vector, scale_color, shared_rng, with_alpha

FADE_THRESHOLD = 0.3
ROTATION_SPEED_RANGE = (-180.0, 180.0)


class ParticleState(Enum):
    """Lifecycle of a single particle."""

    ACTIVE = auto()
    FADING = auto()
    DEAD = auto()


class MotionProfile(Enum):
    """Named spatial behaviours that can replace default kinematics."""

    DEFAULT = auto()
    FLICKER = auto()
    DRIFT = auto()
    ARC_PULSE = auto()


class Particle(pygame.sprite.Sprite):
    """Single animated point with life-driven color and size decay."""

    def __init__(self) -> None:
        super().__init__()
        self.position = pygame.math.Vector2()
        self.velocity = pygame.math.Vector2()
        self.original_color: Color = (255, 255, 255, 255)
        self.color: Color = self.original_color
        self.original_size = 5.0
        self.size = 5.0
        self.lifetime = 0.0
        self.max_lifetime = 1.0
        self.rotation = 0.0
        self.rotation_speed = 0.0
        self.motion = MotionProfile.DEFAULT
        self.state = ParticleState.DEAD
        self.image: pygame.Surface | None = None

    def init(
        self,
        position: Vector,
        velocity: Vector,
        lifetime: float,
        color: Color,
        size: float,
    ) -> None:
        """Reset every field and bring the particle to life."""
        lifetime = max(0.0, lifetime)
        self.position = pygame.math.Vector2(position)
        self.velocity = pygame.math.Vector2(velocity)
        self.original_color = color
        self.color = color
        self.original_size = size
        self.size = size
        self.lifetime = lifetime
        self.max_lifetime = lifetime
        self.rotation = 0.0
        self.rotation_speed = 0.0
        self.motion = MotionProfile.DEFAULT
        self.state = ParticleState.ACTIVE

    def is_alive(self) -> bool:
        return self.state != ParticleState.DEAD

    def life_ratio(self) -> float:
        """Return remaining lifetime as a fraction of the spawn lifetime."""
        if self.max_lifetime <= 0:
            return 0.0
        return self.lifetime / self.max_lifetime

    def update(self, dt: float, phase: float = 0.0) -> None:
        """Advance the particle by dt seconds."""
        if not self.is_alive():
            return

        self.lifetime = max(0.0, self.lifetime - dt)
        if self.lifetime <= 0:
            self.state = ParticleState.DEAD
            self.kill()
            return

        if self.lifetime < FADE_THRESHOLD and self.state == ParticleState.ACTIVE:
            self.state = ParticleState.FADING

        rule = MOTION_RULES.get(self.motion)
        if rule is not None:
            rule(self, dt, phase)
        else:
            self.position += self.velocity * dt
            self.rotation += self.rotation_speed * dt

        ratio = self.life_ratio()
        self.color = scale_color(self.original_color, ratio)
        self.size = self.original_size * (0.5 + 0.5 * ratio)

    def draw_color(self) -> Color:
        """Color used for rendering, including the fade-out alpha."""
        if self.state == ParticleState.FADING:
            return with_alpha(self.color, int(self.color[3] * (self.lifetime / FADE_THRESHOLD)))
        return self.color

    def draw(self, surface: pygame.Surface) -> None:
        if not self.is_alive():
            return
        radius = max(1, int(round(self.size)))
        if self.image is None or self.image.get_width() != radius * 2:
            self.image = pygame.Surface((radius * 2, radius * 2), pygame.SRCALPHA)
        else:
            self.image.fill((0, 0, 0, 0))
        pygame.draw.circle(self.image, self.draw_color(), (radius, radius), radius)
        surface.blit(self.image, (int(self.position.x) - radius, int(self.position.y) - radius))


MotionRule = Callable[[Particle, float, float], None]


def _flicker(particle: Particle, dt: float, phase: float) -> None:
    # flame sway while rising
    particle.position.x += math.sin(particle.life_ratio() * 10) * 10 * dt
    particle.position.y -= 50 * dt


def _drift(particle: Particle, dt: float, phase: float) -> None:
    particle.position.y += 20 * dt


def _arc_pulse(particle: Particle, dt: float, phase: float) -> None:
    t = phase * 5
    particle.position.x += math.sin(t) * 50 * dt
    particle.position.y += math.cos(t) * 50 * dt


MOTION_RULES: Dict[MotionProfile, MotionRule] = {
    MotionProfile.FLICKER: _flicker,
    MotionProfile.DRIFT: _drift,
    MotionProfile.ARC_PULSE: _arc_pulse,
}


@dataclass(slots=True)
class EmitterConfig:
    """Randomized spawn ranges and emission cadence for a ParticleSystem."""

    position: Vector = (0.0, 0.0)
    position_variance: Vector = (10.0, 10.0)
    velocity: Vector = (0.0, 100.0)
    velocity_variance: Vector = (50.0, 50.0)
    start_color: Color = (255, 100, 50, 255)
    end_color: Color = (255, 200, 100, 0)
    min_size: float = 2.0
    max_size: float = 8.0
    min_lifetime: float = 0.5
    max_lifetime: float = 2.0
    emission_rate: float = 20.0
    max_particles: int = 500
    continuous: bool = True

    @property
    def emission_interval(self) -> float | None:
        """Seconds between continuous spawns, None when emission is inert."""
        if not self.continuous or self.max_particles <= 0:
            return None
        if not math.isfinite(self.emission_rate) or self.emission_rate <= 0:
            return None
        interval = 1.0 / self.emission_rate
        return interval if interval > 0 else None

    @property
    def lifetime_range_empty(self) -> bool:
        return self.max_lifetime < self.min_lifetime or self.max_lifetime <= 0


class ParticleSystem:
    """Owns a bounded particle pool plus the emitter that fills it."""

    def __init__(self, config: EmitterConfig | None = None, rng: random.Random | None = None) -> None:
        self._particles = pygame.sprite.Group()
        self.config = replace(config) if config is not None else EmitterConfig()
        self.rng = rng if rng is not None else shared_rng()
        self.motion = MotionProfile.DEFAULT
        self.motion_phase = 0.0
        self.is_emitting = False
        self.emission_timer = 0.0
        self.emitted_count = 0

    def __len__(self) -> int:
        return len(self._particles)

    def set_emitter(self, config: EmitterConfig) -> None:
        """Replace the emitter configuration; live particles are untouched."""
        self.config = replace(config)

    def set_emitter_position(self, position: Vector) -> None:
        self.config.position = (float(position[0]), float(position[1]))

    def set_motion(self, motion: MotionProfile) -> None:
        """Motion profile given to particles spawned from now on."""
        self.motion = motion

    def start(self) -> None:
        self.is_emitting = True

    def stop(self) -> None:
        self.is_emitting = False

    def clear(self) -> None:
        self._particles.empty()

    def particles(self) -> list[Particle]:
        """Live particles in insertion order."""
        return self._particles.sprites()

    def active_count(self) -> int:
        return len(self._particles)

    def has_active_particles(self) -> bool:
        return len(self._particles) > 0

    def burst(self, count: int) -> int:
        """Spawn up to count particles immediately, never exceeding the cap."""
        room = self.config.max_particles - len(self._particles)
        spawned = 0
        for _ in range(min(count, room)):
            self._particles.add(self._spawn())
            spawned += 1
        self.emitted_count += spawned
        return spawned

    def update(self, dt: float) -> None:
        """Run continuous emission, then advance and cull every particle."""
        interval = self.config.emission_interval
        if self.is_emitting and interval is not None:
            self.emission_timer += dt
            while self.emission_timer >= interval and len(self._particles) < self.config.max_particles:
                self.burst(1)
                self.emission_timer -= interval
            if self.emission_timer >= interval:
                # pool is full, spawns owed beyond the cap are dropped
                self.emission_timer %= interval

        # dead particles kill() themselves out of the group
        self._particles.update(dt, self.motion_phase)

    def draw(self, surface: pygame.Surface) -> None:
        """Draw particles oldest first."""
        for particle in self._particles.sprites():
            particle.draw(surface)

    def _spawn(self) -> Particle:
        cfg = self.config
        position = (
            cfg.position[0] + self._uniform(-cfg.position_variance[0], cfg.position_variance[0]),
            cfg.position[1] + self._uniform(-cfg.position_variance[1], cfg.position_variance[1]),
        )
        velocity = (
            cfg.velocity[0] + self._uniform(-cfg.velocity_variance[0], cfg.velocity_variance[0]),
            cfg.velocity[1] + self._uniform(-cfg.velocity_variance[1], cfg.velocity_variance[1]),
        )
        # empty range: particles expire on their first update
        lifetime = 0.0 if cfg.lifetime_range_empty else self._uniform(cfg.min_lifetime, cfg.max_lifetime)
        size = self._uniform(cfg.min_size, cfg.max_size)
        color = self._random_color(cfg.start_color, cfg.end_color)

        particle = Particle()
        particle.init(position, velocity, lifetime, color, size)
        particle.rotation_speed = self._uniform(*ROTATION_SPEED_RANGE)
        particle.motion = self.motion
        return particle

    def _uniform(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def _random_color(self, low: Color, high: Color) -> Color:
        return (
            int(self._uniform(low[0], high[0])),
            int(self._uniform(low[1], high[1])),
            int(self._uniform(low[2], high[2])),
            int(self._uniform(low[3], high[3])),
        )
