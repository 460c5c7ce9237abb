# lightning.py

import random
from collections import namedtuple
from dataclasses import dataclass, field
from typing import List, Tuple

from rainfx.utils import clamp

FLASH_INTERVAL_MS = (6000.0, 18000.0)  # random every 6-18 seconds
IDLE_TRANSITION_MS = 50.0
RESTORE_TRANSITION_MS = 80.0

# A cue tells the overlay which opacity to head for and how long to take.
FlashCue = namedtuple("FlashCue", ["opacity", "duration_ms"])


@dataclass
class FlashState:
    base_dim: float
    pattern: List[Tuple[float, float]] = field(default_factory=list)
    index: int = 0
    timer_ms: float = 0.0
    next_flash_in: float = 0.0

    @property
    def flashing(self):
        return len(self.pattern) > 0


def build_flash_pattern(base):
    """
    Builds the flicker: a few quick dips, then the main flash, then back to base.
    Each entry is (opacity target, duration ms). Lower opacity means a brighter flash.
    """
    steps = [
        (max(0.10, base - 0.40), 60.0),
        (base, 90.0),
        (max(0.06, base - 0.50), 70.0),
        (base, 110.0),
        (max(0.02, base - 0.56), 120.0),  # main flash
        (base, 260.0),
    ]
    return [(clamp(opacity, 0.0, 1.0), duration) for opacity, duration in steps]


def schedule_next_flash(state, rng=random):
    """Resets the idle countdown to a fresh value in [6000, 18000) ms."""
    state.next_flash_in = rng.uniform(*FLASH_INTERVAL_MS)
    state.timer_ms = 0.0
    state.pattern = []
    state.index = 0
    return state.next_flash_in


class LightningPhase:
    """Base class for the scheduler's phases."""

    def __init__(self, scheduler):
        self.scheduler = scheduler

    @property
    def state(self):
        return self.scheduler.state

    def enter(self):
        pass

    def exit(self):
        pass

    def update(self, dt_ms):
        """Advances the phase by dt_ms and returns the cue for this frame."""
        raise NotImplementedError


class IdlePhase(LightningPhase):
    """Waiting for the next flash while holding the overlay at base_dim."""

    def enter(self):
        schedule_next_flash(self.state, self.scheduler.rng)
        self.scheduler.cue = FlashCue(self.state.base_dim, IDLE_TRANSITION_MS)

    def update(self, dt_ms):
        state = self.state
        state.timer_ms += dt_ms

        if state.timer_ms >= state.next_flash_in:
            self.scheduler.change_phase(FlashingPhase(self.scheduler))
            return self.scheduler.cue

        # Hold base dim when idle
        self.scheduler.cue = FlashCue(state.base_dim, self.scheduler.cue.duration_ms)
        return self.scheduler.cue


class FlashingPhase(LightningPhase):
    """Stepping through the six-step flicker pattern."""

    def enter(self):
        state = self.state
        state.pattern = build_flash_pattern(state.base_dim)
        state.index = 0
        state.timer_ms = 0.0
        self.scheduler.cue = FlashCue(*state.pattern[0])
        self.scheduler.flash_count += 1

    def update(self, dt_ms):
        state = self.state
        state.timer_ms += dt_ms

        _, duration = state.pattern[state.index]
        if state.timer_ms < duration:
            return self.scheduler.cue

        state.timer_ms = 0.0
        state.index += 1

        if state.index >= len(state.pattern):
            # Done flashing
            self.scheduler.change_phase(IdlePhase(self.scheduler))
            self.scheduler.cue = FlashCue(state.base_dim, RESTORE_TRANSITION_MS)
        else:
            self.scheduler.cue = FlashCue(*state.pattern[state.index])

        return self.scheduler.cue


class FlashScheduler:
    """
    Timed state machine that decides the overlay's target opacity.

    It never interpolates; every update returns a FlashCue (target opacity,
    transition duration) that the presentation layer eases towards.
    """

    def __init__(self, base_dim, rng=random):
        self.rng = rng
        self.state = FlashState(base_dim=clamp(base_dim, 0.0, 1.0))
        self.cue = FlashCue(self.state.base_dim, IDLE_TRANSITION_MS)
        self.flash_count = 0
        self.phase = None
        self.change_phase(IdlePhase(self))

    @property
    def flashing(self):
        return isinstance(self.phase, FlashingPhase)

    def change_phase(self, new_phase):
        """Switches to a new phase."""
        if self.phase is not None:
            self.phase.exit()

        self.phase = new_phase
        self.phase.enter()

    def update(self, dt_ms):
        return self.phase.update(max(0.0, dt_ms))

    def set_base_dim(self, value):
        """Changes the idle darkness. A flash already in progress keeps its generated steps."""
        self.state.base_dim = clamp(value, 0.0, 1.0)
        if not self.flashing:
            self.cue = FlashCue(self.state.base_dim, self.cue.duration_ms)
        return self.state.base_dim

    def trigger(self):
        """Starts a flash right away, skipping the rest of the idle countdown."""
        if not self.flashing:
            self.change_phase(FlashingPhase(self))
        return self.cue
