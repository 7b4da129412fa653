"""Obstacle particle entity: body shapes, layered effects and destruction lifecycle."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto
import logging
import math
import random
import pygame

from .particles import EmitterConfig, MotionProfile, ParticleSystem
from .shapes import CoreShape, OutlineShape
from .utils import OFFSCREEN_MARGIN, SCREEN_HEIGHT, Color, Vector, shared_rng, with_alpha

logger = logging.getLogger(__name__)

CORE_RADIUS = 20.0
OUTLINE_SIZE = 40.0
OUTLINE_THICKNESS = 3
MAX_DESTROY_TIME = 0.3
COLLISION_BURST = 30
DESTROY_BURST = 80


class ObstacleType(str, Enum):
    """Visual families of obstacles."""

    FIRE = "fire"
    ICE = "ice"
    ELECTRIC = "electric"
    POISON = "poison"
    RANDOM = "random"


CONCRETE_TYPES: tuple[ObstacleType, ...] = (
    ObstacleType.FIRE,
    ObstacleType.ICE,
    ObstacleType.ELECTRIC,
    ObstacleType.POISON,
)


class Lifecycle(Enum):
    LIVE = auto()
    DESTROYING = auto()
    REMOVED = auto()


def random_obstacle_type(rng: random.Random | None = None) -> ObstacleType:
    """Uniformly pick one of the concrete obstacle types."""
    return (rng or shared_rng()).choice(CONCRETE_TYPES)


def resolve_type(kind: ObstacleType, rng: random.Random | None = None) -> ObstacleType:
    """Turn RANDOM into a concrete type; other types pass through."""
    if kind == ObstacleType.RANDOM:
        return random_obstacle_type(rng)
    return kind


@dataclass(frozen=True)
class ObstacleProfile:
    """Fixed look and behaviour of one obstacle type."""

    core_color: Color
    outline_color: Color
    swing_amplitude: float = 0.0
    trail: EmitterConfig | None = None
    aura: EmitterConfig | None = None
    trail_motion: MotionProfile = MotionProfile.DEFAULT
    aura_motion: MotionProfile = MotionProfile.DEFAULT
    # upward trail velocity as a fraction of the obstacle speed
    trail_lift: float = 0.0


PROFILES: dict[ObstacleType, ObstacleProfile] = {
    ObstacleType.FIRE: ObstacleProfile(
        core_color=(255, 100, 50, 200),
        outline_color=(255, 200, 100, 100),
        swing_amplitude=30.0,
        trail=EmitterConfig(
            position_variance=(5, 5),
            velocity=(0, 0),
            velocity_variance=(20, 10),
            start_color=(255, 150, 50, 255),
            end_color=(255, 50, 0, 0),
            min_size=3.0,
            max_size=8.0,
            min_lifetime=0.3,
            max_lifetime=0.8,
            emission_rate=30.0,
            max_particles=100,
        ),
        aura=EmitterConfig(
            position_variance=(25, 25),
            velocity=(0, 0),
            velocity_variance=(10, 10),
            start_color=(255, 200, 100, 100),
            end_color=(255, 100, 0, 0),
            min_size=1.0,
            max_size=4.0,
            min_lifetime=0.5,
            max_lifetime=1.0,
            emission_rate=40.0,
            max_particles=150,
        ),
        trail_motion=MotionProfile.FLICKER,
        trail_lift=0.3,
    ),
    ObstacleType.ICE: ObstacleProfile(
        core_color=(100, 200, 255, 200),
        outline_color=(150, 230, 255, 100),
        trail=EmitterConfig(
            position_variance=(3, 3),
            velocity=(0, -10),
            velocity_variance=(5, 5),
            start_color=(150, 230, 255, 200),
            end_color=(100, 180, 255, 0),
            min_size=2.0,
            max_size=6.0,
            min_lifetime=0.5,
            max_lifetime=1.5,
            emission_rate=20.0,
            max_particles=80,
        ),
        trail_motion=MotionProfile.DRIFT,
    ),
    ObstacleType.ELECTRIC: ObstacleProfile(
        core_color=(150, 100, 255, 200),
        outline_color=(200, 150, 255, 100),
        swing_amplitude=20.0,
        aura=EmitterConfig(
            position_variance=(20, 20),
            velocity=(0, 0),
            velocity_variance=(30, 30),
            start_color=(200, 150, 255, 150),
            end_color=(100, 50, 200, 0),
            min_size=1.0,
            max_size=3.0,
            min_lifetime=0.2,
            max_lifetime=0.5,
            emission_rate=80.0,
            max_particles=200,
        ),
        aura_motion=MotionProfile.ARC_PULSE,
    ),
    ObstacleType.POISON: ObstacleProfile(
        core_color=(100, 255, 100, 200),
        outline_color=(200, 255, 100, 100),
        trail=EmitterConfig(
            position_variance=(8, 8),
            velocity=(0, -5),
            velocity_variance=(15, 5),
            start_color=(100, 255, 100, 150),
            end_color=(50, 150, 50, 0),
            min_size=4.0,
            max_size=10.0,
            min_lifetime=0.8,
            max_lifetime=1.5,
            emission_rate=15.0,
            max_particles=60,
        ),
    ),
}


class ObstacleParticle:
    """Falling hazard made of a pulsing body plus trail, aura and collision effects."""

    def __init__(
        self,
        x: float,
        y: float,
        speed: float,
        kind: ObstacleType = ObstacleType.RANDOM,
        rng: random.Random | None = None,
    ) -> None:
        self.rng = rng if rng is not None else shared_rng()
        self.position = pygame.math.Vector2(x, y)
        self.speed = speed
        self.rotation = 0.0
        self.rotation_speed = self.rng.uniform(-180.0, 180.0)
        self.pulse_phase = 0.0
        self.pulse_speed = self.rng.uniform(1.0, 3.0)

        self.is_active = True
        self.is_destroying = False
        self.hit_by_bullet = False
        self.destroy_timer = 0.0
        self.max_destroy_time = MAX_DESTROY_TIME

        self.core_shape = CoreShape(self.position, CORE_RADIUS)
        self.outline_shape = OutlineShape(self.position, OUTLINE_SIZE, OUTLINE_THICKNESS)

        self.trail_system = ParticleSystem(rng=self.rng)
        self.aura_system = ParticleSystem(rng=self.rng)
        self.collision_system = ParticleSystem(rng=self.rng)

        self.kind = resolve_type(kind, self.rng)
        self.core_color: Color = (0, 0, 0, 0)
        self.outline_color: Color = (0, 0, 0, 0)
        self.profile = PROFILES[self.kind]
        self._apply_profile()

    # -- profile ---------------------------------------------------------

    def set_type(self, kind: ObstacleType) -> None:
        """Switch to another type's look and emitters."""
        self.kind = resolve_type(kind, self.rng)
        self.profile = PROFILES[self.kind]
        self._apply_profile()

    def _apply_profile(self) -> None:
        profile = self.profile
        self.core_color = profile.core_color
        self.outline_color = profile.outline_color
        self.core_shape.fill_color = profile.core_color
        self.outline_shape.outline_color = profile.outline_color

        trail = profile.trail
        if trail is not None and profile.trail_lift:
            trail = replace(trail, velocity=(trail.velocity[0], -self.speed * profile.trail_lift))
        self._configure(self.trail_system, trail, profile.trail_motion)
        self._configure(self.aura_system, profile.aura, profile.aura_motion)

    def _configure(self, system: ParticleSystem, config: EmitterConfig | None, motion: MotionProfile) -> None:
        system.set_motion(motion)
        if config is None:
            system.stop()
            return
        system.set_emitter(replace(config, position=(self.position.x, self.position.y)))
        if self.is_destroying:
            system.stop()
        else:
            system.start()

    # -- simulation ------------------------------------------------------

    def update(self, dt: float) -> None:
        """Advance body, lifecycle and all owned particle systems."""
        if not self.is_active:
            if not self.hit_by_bullet:
                # body is gone but the last burst still plays out
                self.collision_system.update(dt)
            return

        if self.hit_by_bullet:
            self.is_active = False
            self.is_destroying = True
            self._stop_emitters()
            return

        if self.is_destroying:
            self.destroy_timer += dt
            if self.destroy_timer >= self.max_destroy_time:
                self.is_active = False
                logger.debug("%s obstacle finished destroying", self.kind.value)
            self._stop_emitters()
        else:
            self._update_position(dt)
            self._update_rotation(dt)
            self._update_pulse(dt)

        self.trail_system.motion_phase = self.pulse_phase
        self.aura_system.motion_phase = self.pulse_phase
        self.trail_system.update(dt)
        self.aura_system.update(dt)
        self.collision_system.update(dt)

        anchor = (self.position.x, self.position.y)
        self.trail_system.set_emitter_position(anchor)
        self.aura_system.set_emitter_position(anchor)

    def _update_position(self, dt: float) -> None:
        self.position.y += self.speed * dt
        amplitude = self.profile.swing_amplitude
        if amplitude > 0:
            self.position.x += math.sin(self.pulse_phase * 2) * amplitude * dt
        self.core_shape.set_position(self.position)
        self.outline_shape.set_position(self.position)

    def _update_rotation(self, dt: float) -> None:
        self.rotation += self.rotation_speed * dt
        self.core_shape.rotation = self.rotation
        self.outline_shape.rotation = -self.rotation * 0.5

    def _update_pulse(self, dt: float) -> None:
        self.pulse_phase += dt * self.pulse_speed
        pulse = 1.0 + 0.1 * math.sin(self.pulse_phase)
        self.core_shape.scale = pulse
        self.outline_shape.scale = pulse

    def _stop_emitters(self) -> None:
        self.trail_system.stop()
        self.aura_system.stop()

    # -- events ----------------------------------------------------------

    def trigger_collision_effect(self) -> None:
        """Fire a one-shot burst in the core color at the current position."""
        self.collision_system.set_emitter(
            EmitterConfig(
                position=(self.position.x, self.position.y),
                position_variance=(20, 20),
                velocity=(0, 0),
                velocity_variance=(200, 200),
                start_color=self.core_color,
                end_color=with_alpha(self.core_color, 0),
                min_size=3.0,
                max_size=10.0,
                min_lifetime=0.2,
                max_lifetime=0.8,
                emission_rate=0.0,
                max_particles=50,
                continuous=False,
            )
        )
        self.collision_system.burst(COLLISION_BURST)

    def trigger_destroy_effect(self) -> None:
        """Start the ambient destruction: stop emitting and throw a large burst."""
        if self.hit_by_bullet:
            return
        self.is_destroying = True
        self._stop_emitters()
        self.collision_system.set_emitter(
            EmitterConfig(
                position=(self.position.x, self.position.y),
                position_variance=(30, 30),
                velocity=(0, 0),
                velocity_variance=(300, 300),
                start_color=self.core_color,
                end_color=with_alpha(self.core_color, 0),
                min_size=5.0,
                max_size=15.0,
                min_lifetime=0.5,
                max_lifetime=1.0,
                emission_rate=0.0,
                max_particles=100,
                continuous=False,
            )
        )
        self.collision_system.burst(DESTROY_BURST)
        logger.debug("%s obstacle destroying at (%.0f, %.0f)", self.kind.value, self.position.x, self.position.y)

    def destroy_immediately(self) -> None:
        """Projectile hit: remove the body at once, leaving only a small burst."""
        self.hit_by_bullet = True
        self.is_active = False
        self.is_destroying = True
        self._stop_emitters()
        self.trigger_collision_effect()
        logger.debug("%s obstacle hit by projectile", self.kind.value)

    # -- queries ---------------------------------------------------------

    def should_remove(self) -> bool:
        if self.hit_by_bullet:
            return True
        return not self.is_active and not self.collision_system.has_active_particles()

    @property
    def lifecycle(self) -> Lifecycle:
        if self.should_remove():
            return Lifecycle.REMOVED
        if self.is_destroying or not self.is_active:
            return Lifecycle.DESTROYING
        return Lifecycle.LIVE

    def get_bounds(self) -> pygame.Rect:
        return self.core_shape.get_bounds()

    def get_position(self) -> Vector:
        return (self.position.x, self.position.y)

    def get_speed(self) -> float:
        return self.speed

    def set_speed(self, speed: float) -> None:
        self.speed = speed

    def adjust_speed(self, multiplier: float) -> None:
        self.speed *= multiplier

    def get_type(self) -> ObstacleType:
        return self.kind

    def is_off_screen(self, limit: float = SCREEN_HEIGHT + OFFSCREEN_MARGIN) -> bool:
        return self.position.y > limit

    # -- rendering -------------------------------------------------------

    def draw(self, surface: pygame.Surface) -> None:
        """Draw back to front: aura, trail, outline, core, collision burst."""
        if self.hit_by_bullet:
            return
        if not self.is_active:
            self.collision_system.draw(surface)
            return
        self.aura_system.draw(surface)
        self.trail_system.draw(surface)
        self.outline_shape.draw(surface)
        self.core_shape.draw(surface)
        self.collision_system.draw(surface)
