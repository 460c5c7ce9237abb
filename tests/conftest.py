"""Shared fixtures. pygame runs against SDL's dummy drivers so no display is needed."""

import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pytest

from rainfx.effects import RainState, StormConfig, Viewport
from rainfx.storm import RainStorm


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def state():
    return RainState(config=StormConfig(), viewport=Viewport(1000, 800))


@pytest.fixture
def storm(rng):
    return RainStorm(1000, 800, rng=rng)
