# storm.py

import random

from rainfx.effects import (
    MIN_DENSITY, RainState, StormConfig, Viewport,
    apply_wind, clamp_dt, seed_drops, step_drops
)
from rainfx.lightning import FlashScheduler
from rainfx.renderer import DimOverlay, RainRenderer
from rainfx.utils import clamp, is_number

MIN_GRAVITY = 300.0
PIXEL_SCALE_RANGE = (1.0, 2.0)

# Accepted option names -> StormConfig field
OPTION_KEYS = {
    "density": "density",
    "wind": "wind",
    "gravity": "gravity",
    "base_dim": "base_dim",
    "baseDim": "base_dim",
}


def normalize_options(options):
    """
    Filters and clamps a raw option mapping.

    Unknown keys and values that are not plain numbers are dropped silently.

    Returns:
        dict: StormConfig field name -> clamped value.
    """
    clean = {}
    for key, value in (options or {}).items():
        field_name = OPTION_KEYS.get(key)
        if field_name is None or not is_number(value):
            continue

        value = float(value)
        if field_name == "density":
            value = max(MIN_DENSITY, value)
        elif field_name == "gravity":
            value = max(MIN_GRAVITY, value)
        elif field_name == "base_dim":
            value = clamp(value, 0.0, 1.0)
        clean[field_name] = value
    return clean


class RainStorm:
    """
    One rain-with-lightning simulation. The host owns the refresh loop and calls
    tick() once per frame; the storm never schedules itself.
    """

    def __init__(self, width, height, pixel_scale=1.0, options=None, rng=None):
        self.rng = rng if rng is not None else random
        self.state = RainState(
            config=StormConfig(),
            viewport=Viewport(int(width), int(height), self._clamp_scale(pixel_scale))
        )

        # Initial options are applied before the first seed
        for name, value in normalize_options(options).items():
            setattr(self.state.config, name, value)

        seed_drops(self.state, self.rng)
        self.flash = FlashScheduler(self.state.config.base_dim, self.rng)
        self.overlay = DimOverlay(self.state.config.base_dim)
        self.renderer = RainRenderer(self.state.viewport)
        self.running = True

    @staticmethod
    def _clamp_scale(pixel_scale):
        if not is_number(pixel_scale):
            return PIXEL_SCALE_RANGE[0]
        return clamp(float(pixel_scale), *PIXEL_SCALE_RANGE)

    # --- Read-only views ---

    @property
    def config(self):
        return self.state.config

    @property
    def viewport(self):
        return self.state.viewport

    @property
    def drops(self):
        return self.state.drops

    @property
    def surface(self):
        return self.renderer.surface

    # --- Control surface ---

    def start(self):
        """Begins or resumes the simulation. Returns False if it was already running."""
        if self.running:
            return False

        if self.renderer.released:
            self.renderer.resize(self.state.viewport)
        self.running = True
        return True

    def stop(self):
        """Halts the simulation and releases the drawing surface. Safe to call repeatedly."""
        if not self.running and self.renderer.released:
            return False

        self.running = False
        self.renderer.release()
        return True

    def set(self, options=None, **kwargs):
        """
        Updates the configuration in one step.

        Recognised options: density, wind, gravity, base_dim (or baseDim).
        Anything else, or any non-numeric value, is ignored.

        Returns:
            dict: The options that were actually applied.
        """
        merged = dict(options or {})
        merged.update(kwargs)
        changes = normalize_options(merged)
        if not changes:
            return changes

        config = self.state.config
        for name, value in changes.items():
            setattr(config, name, value)

        if "density" in changes:
            seed_drops(self.state, self.rng)
        if "wind" in changes:
            apply_wind(self.state)
        if "base_dim" in changes:
            self.flash.set_base_dim(config.base_dim)
            if not self.flash.flashing:
                self.overlay.snap(config.base_dim)

        return changes

    def resize(self, width, height, pixel_scale=None):
        """Applies a new viewport immediately: reseeds the pool and reallocates the surface."""
        viewport = self.state.viewport
        viewport.width = int(width)
        viewport.height = int(height)
        if pixel_scale is not None:
            viewport.pixel_scale = self._clamp_scale(pixel_scale)

        seed_drops(self.state, self.rng)
        if not self.renderer.released:
            self.renderer.resize(viewport)

    def tick(self, dt_ms):
        """
        Runs one frame: integrate, draw, then advance the lightning scheduler.

        Returns:
            FlashCue or None: The overlay cue for this frame, None when stopped.
        """
        if not self.running:
            return None

        dt_ms = clamp_dt(dt_ms)

        step_drops(self.state, dt_ms, self.rng)
        self.renderer.draw(self.state.drops)

        cue = self.flash.update(dt_ms)
        self.overlay.apply(cue.opacity, cue.duration_ms)
        self.overlay.advance(dt_ms)
        return cue

    def flash_now(self):
        """Triggers a lightning flash immediately."""
        cue = self.flash.trigger()
        self.overlay.apply(cue.opacity, cue.duration_ms)
        return cue

    def to_options(self):
        config = self.state.config
        return {
            "density": config.density,
            "wind": config.wind,
            "gravity": config.gravity,
            "base_dim": config.base_dim,
        }
