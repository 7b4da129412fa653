from __future__ import annotations

import random

import pygame
import pytest

from conftest import has_output
from hazardfx.obstacle import (
    CONCRETE_TYPES,
    PROFILES,
    Lifecycle,
    ObstacleParticle,
    ObstacleType,
    random_obstacle_type,
)
from hazardfx.particles import MotionProfile


def _obstacle(kind: ObstacleType = ObstacleType.ICE, speed: float = 100.0, seed: int = 3) -> ObstacleParticle:
    return ObstacleParticle(400.0, 300.0, speed, kind, rng=random.Random(seed))


def _run(obstacle: ObstacleParticle, seconds: float, dt: float = 1 / 60) -> None:
    for _ in range(int(round(seconds / dt))):
        obstacle.update(dt)


@pytest.mark.parametrize("seed", range(25))
def test_random_type_resolves_to_concrete_type(seed: int) -> None:
    obstacle = ObstacleParticle(0, 0, 50, ObstacleType.RANDOM, rng=random.Random(seed))
    assert obstacle.get_type() in CONCRETE_TYPES
    assert obstacle.profile is PROFILES[obstacle.get_type()]


def test_random_type_distribution_covers_all_types() -> None:
    rng = random.Random(0)
    seen = {random_obstacle_type(rng) for _ in range(200)}
    assert seen == set(CONCRETE_TYPES)


def test_construction_randomizes_rotation_and_pulse() -> None:
    obstacle = _obstacle()
    assert -180.0 <= obstacle.rotation_speed <= 180.0
    assert 1.0 <= obstacle.pulse_speed <= 3.0
    assert obstacle.lifecycle == Lifecycle.LIVE


def test_profiles_choose_trail_and_aura() -> None:
    fire = _obstacle(ObstacleType.FIRE)
    assert fire.trail_system.is_emitting and fire.aura_system.is_emitting
    assert fire.trail_system.motion == MotionProfile.FLICKER
    assert fire.trail_system.config.velocity[1] == pytest.approx(-30.0)

    ice = _obstacle(ObstacleType.ICE)
    assert ice.trail_system.is_emitting and not ice.aura_system.is_emitting
    assert ice.trail_system.motion == MotionProfile.DRIFT

    electric = _obstacle(ObstacleType.ELECTRIC)
    assert electric.aura_system.is_emitting and not electric.trail_system.is_emitting
    assert electric.aura_system.motion == MotionProfile.ARC_PULSE

    poison = _obstacle(ObstacleType.POISON)
    assert poison.core_color == (100, 255, 100, 200)
    assert poison.trail_system.motion == MotionProfile.DEFAULT


def test_set_type_switches_profile() -> None:
    obstacle = _obstacle(ObstacleType.FIRE)
    obstacle.set_type(ObstacleType.ICE)
    assert obstacle.get_type() == ObstacleType.ICE
    assert obstacle.core_color == PROFILES[ObstacleType.ICE].core_color
    assert not obstacle.aura_system.is_emitting
    assert obstacle.trail_system.motion == MotionProfile.DRIFT


def test_flight_moves_down_and_emits() -> None:
    obstacle = _obstacle(ObstacleType.ICE, speed=100.0)
    _run(obstacle, 0.5)
    x, y = obstacle.get_position()
    assert x == pytest.approx(400.0)
    assert y == pytest.approx(350.0)
    assert obstacle.trail_system.active_count() > 0
    assert obstacle.trail_system.config.position == pytest.approx((x, y))


def test_fire_swings_horizontally() -> None:
    obstacle = _obstacle(ObstacleType.FIRE)
    _run(obstacle, 1.0)
    assert obstacle.get_position()[0] != pytest.approx(400.0)


def test_shapes_track_rotation_and_pulse() -> None:
    obstacle = _obstacle()
    _run(obstacle, 0.5)
    assert obstacle.core_shape.rotation == pytest.approx(obstacle.rotation)
    assert obstacle.outline_shape.rotation == pytest.approx(-obstacle.rotation * 0.5)
    assert 0.9 <= obstacle.core_shape.scale <= 1.1
    assert obstacle.core_shape.scale == obstacle.outline_shape.scale


def test_bounds_ignore_pulse_scale() -> None:
    obstacle = ObstacleParticle(100.0, 200.0, 0.0, ObstacleType.ICE, rng=random.Random(1))
    assert obstacle.get_bounds() == pygame.Rect(80, 180, 40, 40)
    _run(obstacle, 0.7)
    assert obstacle.get_bounds() == pygame.Rect(80, 180, 40, 40)


def test_live_obstacle_draws(canvas) -> None:
    obstacle = _obstacle()
    obstacle.draw(canvas)
    assert has_output(canvas)
    assert not obstacle.should_remove()


def test_destroy_immediately_removes_at_once(canvas) -> None:
    obstacle = _obstacle()
    _run(obstacle, 0.2)
    position = obstacle.get_position()
    obstacle.destroy_immediately()

    assert obstacle.should_remove()
    assert obstacle.hit_by_bullet and not obstacle.is_active and obstacle.is_destroying
    assert obstacle.collision_system.active_count() == 30
    assert not obstacle.trail_system.is_emitting

    obstacle.draw(canvas)
    assert not has_output(canvas)

    obstacle.update(0.1)
    assert obstacle.get_position() == position
    assert obstacle.lifecycle == Lifecycle.REMOVED


def test_destroy_effect_skipped_after_projectile_hit() -> None:
    obstacle = _obstacle()
    obstacle.destroy_immediately()
    obstacle.trigger_destroy_effect()
    assert obstacle.collision_system.active_count() == 30


def test_collision_burst_stays_at_impact_point() -> None:
    obstacle = _obstacle(ObstacleType.ICE, speed=100.0)
    obstacle.trigger_collision_effect()
    impact = obstacle.collision_system.config.position
    assert obstacle.collision_system.active_count() == 30

    _run(obstacle, 0.2)
    assert obstacle.collision_system.config.position == impact
    assert obstacle.trail_system.config.position != impact
    assert obstacle.is_active


def test_collision_effect_stacks() -> None:
    obstacle = _obstacle()
    obstacle.trigger_collision_effect()
    obstacle.trigger_collision_effect()
    assert obstacle.collision_system.active_count() == 50
    assert obstacle.collision_system.config.end_color == (*obstacle.core_color[:3], 0)


def test_ambient_destruction_lets_burst_finish(canvas) -> None:
    obstacle = _obstacle()
    _run(obstacle, 0.1)
    obstacle.trigger_collision_effect()
    obstacle.trigger_destroy_effect()
    position = obstacle.get_position()
    assert obstacle.lifecycle == Lifecycle.DESTROYING
    assert not obstacle.trail_system.is_emitting

    obstacle.update(0.2)
    assert obstacle.is_active
    obstacle.update(0.2)
    assert not obstacle.is_active
    assert obstacle.is_destroying
    assert obstacle.get_position() == position

    assert obstacle.collision_system.has_active_particles()
    assert not obstacle.should_remove()
    obstacle.draw(canvas)
    assert has_output(canvas)

    for _ in range(10):
        obstacle.update(0.2)
    assert not obstacle.collision_system.has_active_particles()
    assert obstacle.should_remove()
    assert obstacle.is_destroying


def test_destroying_never_restarts_emitters() -> None:
    obstacle = _obstacle(ObstacleType.FIRE)
    obstacle.trigger_destroy_effect()
    obstacle.set_type(ObstacleType.POISON)
    assert not obstacle.trail_system.is_emitting
    obstacle.update(0.1)
    assert not obstacle.trail_system.is_emitting


def test_speed_helpers_and_off_screen() -> None:
    obstacle = ObstacleParticle(10.0, 790.0, 100.0, ObstacleType.POISON, rng=random.Random(2))
    obstacle.adjust_speed(1.5)
    assert obstacle.get_speed() == pytest.approx(150.0)
    obstacle.set_speed(200.0)
    assert not obstacle.is_off_screen()
    obstacle.update(0.1)
    assert obstacle.is_off_screen()
    assert obstacle.is_off_screen(limit=900.0) is False


def test_shared_generator_is_swappable() -> None:
    from hazardfx import utils

    previous = utils.shared_rng()
    try:
        utils.set_shared_rng(random.Random(11))
        first = ObstacleParticle(0, 0, 10)
        utils.set_shared_rng(random.Random(11))
        second = ObstacleParticle(0, 0, 10)
    finally:
        utils.set_shared_rng(previous)
    assert first.get_type() == second.get_type()
    assert first.rotation_speed == second.rotation_speed
    assert first.rng is not previous


def test_emitters_share_pulse_phase_and_follow_body() -> None:
    obstacle = _obstacle(ObstacleType.ELECTRIC, speed=120.0)
    _run(obstacle, 0.5)
    assert obstacle.pulse_phase > 0
    assert obstacle.trail_system.motion_phase == obstacle.pulse_phase
    assert obstacle.aura_system.motion_phase == obstacle.pulse_phase
    assert obstacle.aura_system.config.position == pytest.approx(obstacle.get_position())
    assert obstacle.aura_system.active_count() > 0


def test_draw_layers_back_to_front(canvas, monkeypatch) -> None:
    obstacle = _obstacle(ObstacleType.FIRE)
    order: list[str] = []
    layers = {
        "aura": obstacle.aura_system,
        "trail": obstacle.trail_system,
        "outline": obstacle.outline_shape,
        "core": obstacle.core_shape,
        "collision": obstacle.collision_system,
    }
    for name, layer in layers.items():
        monkeypatch.setattr(layer, "draw", lambda surface, name=name: order.append(name))

    obstacle.draw(canvas)
    assert order == ["aura", "trail", "outline", "core", "collision"]


def test_core_shape_reuses_image_until_radius_changes(canvas) -> None:
    core = _obstacle().core_shape
    core.draw(canvas)
    image = core.image
    core.draw(canvas)
    assert core.image is image

    core.scale = 1.1
    core.draw(canvas)
    assert core.image is not image
    assert core.image.get_width() == 44
