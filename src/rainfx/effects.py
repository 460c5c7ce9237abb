# effects.py
# Rain particle pool and integrator. Every function takes the shared RainState
# explicitly so the simulation can run without a window.

import math
import random
from dataclasses import dataclass, field
from typing import List

# Pool sizing
MIN_DROP_COUNT = 150
MIN_DENSITY = 0.00002

# Integration
MAX_DT_MS = 50.0
RECYCLE_MARGIN = 50.0  # px outside the left/right edges before a drop is recycled

# Per-drop randomisation ranges
SPEED_RANGE = (0.8, 1.2)       # multiples of gravity
LENGTH_RANGE = (8.0, 16.0)     # px at nominal speed
THICKNESS_RANGE = (0.75, 1.8)
ALPHA_RANGE = (0.35, 0.8)
WIND_JITTER = 40.0             # px/s


@dataclass
class Drop:
    """Represents a single particle in the rain effect."""
    x: float
    y: float
    vx: float
    vy: float
    length: float
    thickness: float
    alpha: float
    jitter: float = 0.0


@dataclass
class Viewport:
    width: int
    height: int
    pixel_scale: float = 1.0

    @property
    def area(self):
        return self.width * self.height


@dataclass
class StormConfig:
    density: float = 0.00012   # drops per screen pixel
    wind: float = 0.0          # horizontal drift (px/s)
    gravity: float = 1400.0    # base fall speed (px/s)
    base_dim: float = 0.58     # normal darkness [0..1] where 1 is fully black


@dataclass
class RainState:
    """Simulation state shared by the pool, the integrator and the renderer."""
    config: StormConfig
    viewport: Viewport
    drops: List[Drop] = field(default_factory=list)


def clamp_dt(dt_ms):
    """Bounds a frame step to [0, MAX_DT_MS] so a stalled frame cannot teleport drops."""
    return max(0.0, min(MAX_DT_MS, float(dt_ms)))


def target_drop_count(viewport, density):
    return max(MIN_DROP_COUNT, int(math.floor(viewport.area * density)))


def make_drop(state, rng=random, spawn_anywhere=False):
    """
    Creates a fresh drop with randomised speed, length, thickness and alpha.

    Args:
        state (RainState): Current simulation state (viewport and config are read).
        rng: Source of randomness exposing uniform(); the random module by default.
        spawn_anywhere (bool): Spread the drop over the whole viewport height
            instead of placing it above the top edge. Used when seeding so the
            first frame already looks like rain in progress.

    Returns:
        Drop: The new drop.
    """
    w, h = state.viewport.width, state.viewport.height
    config = state.config

    speed = rng.uniform(*SPEED_RANGE) * config.gravity
    length = rng.uniform(*LENGTH_RANGE) * (speed / config.gravity)
    jitter = rng.uniform(-WIND_JITTER, WIND_JITTER)

    # Spawn slightly outside the viewport, but never past the recycle margin
    x_min = max(-w * 0.1, -RECYCLE_MARGIN)
    x_max = min(w * 1.1, w + RECYCLE_MARGIN)

    if spawn_anywhere:
        y = rng.uniform(-h, h)
    else:
        y = rng.uniform(-h, -10)

    return Drop(
        x=rng.uniform(x_min, x_max),
        y=y,
        vx=config.wind + jitter,
        vy=speed,
        length=length,
        thickness=rng.uniform(*THICKNESS_RANGE),
        alpha=rng.uniform(*ALPHA_RANGE),
        jitter=jitter,
    )


def seed_drops(state, rng=random):
    """Replaces the whole pool with max(150, area * density) drops."""
    count = target_drop_count(state.viewport, state.config.density)
    state.drops = [make_drop(state, rng, spawn_anywhere=True) for _ in range(count)]
    return count


def recycle_drop(state, index, rng=random):
    """Replaces the drop at index with a new one above the top edge."""
    drop = make_drop(state, rng, spawn_anywhere=False)
    state.drops[index] = drop
    return drop


def apply_wind(state):
    """Re-steers every live drop after a wind change, keeping each drop's jitter."""
    wind = state.config.wind
    for drop in state.drops:
        drop.vx = wind + drop.jitter


def advance_drop(drop, dt_ms):
    """Moves one drop by its velocity over dt_ms milliseconds."""
    drop.x += drop.vx * dt_ms / 1000.0
    drop.y += drop.vy * dt_ms / 1000.0


def is_out_of_bounds(drop, viewport):
    return (drop.y - drop.length > viewport.height
            or drop.x < -RECYCLE_MARGIN
            or drop.x > viewport.width + RECYCLE_MARGIN)


def step_drops(state, dt_ms, rng=random):
    """
    Advances every drop and recycles the ones that left the viewport.

    Returns:
        int: Number of drops recycled during this step.
    """
    dt_ms = clamp_dt(dt_ms)
    viewport = state.viewport
    recycled = 0

    for i, drop in enumerate(state.drops):
        advance_drop(drop, dt_ms)
        if is_out_of_bounds(drop, viewport):
            recycle_drop(state, i, rng)
            recycled += 1

    return recycled
