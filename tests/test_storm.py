"""
Tests for the RainStorm control surface and frame tick.
"""

import pytest

from rainfx.effects import Drop, MIN_DENSITY, StormConfig, is_out_of_bounds
from rainfx.lightning import FlashingPhase, IdlePhase
from rainfx.renderer import RAIN_COLOR
from rainfx.storm import MIN_GRAVITY, RainStorm, normalize_options


class TestNormalizeOptions:
    def test_drops_unknown_and_non_numeric(self):
        clean = normalize_options({
            "density": "lots",
            "wind": True,
            "speed": 5,
            "baseDim": None,
            "gravity": float("nan"),
        })
        assert clean == {}

    @pytest.mark.parametrize("key", ["density", "wind", "gravity", "base_dim", "baseDim"])
    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), 10 ** 400])
    def test_drops_non_finite_values(self, key, value):
        assert normalize_options({key: value}) == {}

    def test_camel_case_alias(self):
        assert normalize_options({"baseDim": 0.3}) == {"base_dim": 0.3}

    def test_clamps(self):
        clean = normalize_options({"density": -1, "gravity": 100, "base_dim": 1.5, "wind": -80})
        assert clean == {"density": MIN_DENSITY, "gravity": MIN_GRAVITY, "base_dim": 1.0, "wind": -80.0}


class TestLifecycle:
    def test_constructed_running(self, storm):
        assert storm.running
        assert storm.surface is not None
        assert storm.surface.get_size() == (1000, 800)

    def test_start_when_running_is_noop(self, storm):
        drops = list(storm.drops)
        assert storm.start() is False
        assert storm.drops == drops

    def test_stop_twice_is_safe(self, storm):
        assert storm.stop() is True
        assert storm.stop() is False
        assert not storm.running
        assert storm.surface is None

    def test_restart_reacquires_surface(self, storm):
        storm.stop()
        assert storm.start() is True
        assert storm.running
        assert storm.surface.get_size() == (1000, 800)

    def test_tick_when_stopped_does_nothing(self, storm):
        storm.stop()
        positions = [(d.x, d.y) for d in storm.drops]
        assert storm.tick(16) is None
        assert [(d.x, d.y) for d in storm.drops] == positions


class TestSet:
    def test_density_reseeds(self, storm):
        applied = storm.set({"density": 0.0002})
        assert applied == {"density": 0.0002}
        assert len(storm.drops) == 160

    def test_density_floor(self, storm):
        storm.set(density=-5)
        assert storm.config.density == MIN_DENSITY
        assert len(storm.drops) == 150

    def test_gravity_floor(self, storm):
        storm.set({"gravity": 100})
        assert storm.config.gravity == 300

    def test_base_dim_clamped_and_overlay_updated(self, storm):
        storm.set({"baseDim": 1.5})
        assert storm.config.base_dim == 1.0
        assert storm.flash.state.base_dim == 1.0
        assert storm.overlay.opacity == 1.0
        cue = storm.tick(16)
        assert cue.opacity == 1.0

    def test_invalid_fields_are_ignored(self, storm):
        before = storm.to_options()
        drops = list(storm.drops)
        assert storm.set({"density": "heavy", "wind": None, "colour": 3}) == {}
        assert storm.to_options() == before
        assert all(a is b for a, b in zip(drops, storm.drops))

    def test_infinite_density_is_ignored(self, storm):
        before = storm.to_options()
        assert storm.set(density=float("inf"), gravity=float("-inf")) == {}
        assert storm.to_options() == before
        storm.resize(640, 480)
        assert len(storm.drops) == 150

    def test_infinite_option_at_construction_is_ignored(self, rng):
        storm = RainStorm(1000, 800, options={"density": float("inf"), "wind": 30}, rng=rng)
        assert storm.config.density == StormConfig().density
        assert storm.config.wind == 30.0

    def test_set_without_options(self, storm):
        assert storm.set() == {}

    def test_wind_steers_live_drops(self, storm):
        storm.set(wind=200)
        for d in storm.drops:
            assert d.vx == pytest.approx(200 + d.jitter)

    def test_options_at_construction(self, rng):
        storm = RainStorm(1000, 800, options={"density": 0.0002, "gravity": 10, "fps": 30}, rng=rng)
        assert len(storm.drops) == 160
        assert storm.config.gravity == 300

    def test_base_dim_while_flashing_keeps_flash(self, storm):
        storm.flash_now()
        storm.set(base_dim=0.9)
        assert isinstance(storm.flash.phase, FlashingPhase)
        assert storm.overlay.target == pytest.approx(0.18)


class TestResize:
    def test_resize_reseeds_and_resizes_surface(self, storm):
        old = list(storm.drops)
        storm.resize(400, 300)
        assert storm.viewport.width == 400
        assert len(storm.drops) == 150
        assert all(d not in old for d in storm.drops[:5])
        assert storm.surface.get_size() == (400, 300)

    def test_resize_with_pixel_scale(self, storm):
        storm.resize(400, 300, pixel_scale=2)
        assert storm.surface.get_size() == (800, 600)

    @pytest.mark.parametrize("scale, expected", [(0.5, 1.0), (1.5, 1.5), (3, 2.0), ("x", 1.0)])
    def test_pixel_scale_clamped(self, rng, scale, expected):
        storm = RainStorm(200, 100, pixel_scale=scale, rng=rng)
        assert storm.viewport.pixel_scale == expected

    def test_resize_while_stopped_keeps_surface_released(self, storm):
        storm.stop()
        storm.resize(320, 240)
        assert storm.surface is None
        storm.start()
        assert storm.surface.get_size() == (320, 240)


class TestTick:
    def test_tick_draws_drops(self, storm):
        storm.state.drops = [Drop(x=10, y=50, vx=0, vy=0, length=20, thickness=1, alpha=0.8)]
        storm.tick(0)
        pixel = storm.surface.get_at((10, 40))
        assert tuple(pixel)[:3] == RAIN_COLOR
        assert pixel[3] == 204

    def test_tick_clamps_dt(self, storm):
        before = {id(d): d.y for d in storm.drops}
        storm.tick(10_000)
        for d in storm.drops:
            if id(d) in before:
                assert d.y - before[id(d)] <= d.vy * 0.05 + 1e-6

    def test_no_out_of_bounds_drop_survives_a_tick(self, storm):
        storm.set(wind=-500)
        for _ in range(200):
            storm.tick(16.7)
            assert not any(is_out_of_bounds(d, storm.viewport) for d in storm.drops)

    def test_flash_cycle_returns_overlay_to_base(self, storm):
        storm.flash_now()
        opacities = []
        for _ in range(40):
            cue = storm.tick(50)
            opacities.append(storm.overlay.opacity)
            assert 0.0 <= cue.opacity <= 1.0
        assert isinstance(storm.flash.phase, IdlePhase)
        assert min(opacities) < 0.58
        assert storm.overlay.opacity == pytest.approx(0.58)
