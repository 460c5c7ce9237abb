# driver.py

import pygame

from rainfx.effects import MAX_DT_MS


def compute_dt(now, last):
    """Elapsed ms between two timestamps, clamped to [0, MAX_DT_MS]."""
    return max(0.0, min(MAX_DT_MS, float(now - last)))


class FrameDriver:
    """
    Turns the host's refresh signal into storm ticks.

    Args:
        storm (RainStorm): The simulation to drive.
        clock (callable): Returns the current time in milliseconds.
            Defaults to pygame.time.get_ticks.
    """

    def __init__(self, storm, clock=None):
        self.storm = storm
        self.clock = clock or pygame.time.get_ticks
        self.last_t = self.clock()
        self.last_dt = 0.0

    @property
    def running(self):
        return self.storm.running

    def start(self):
        """Resumes the storm. The timestamp is reset so the pause is not integrated."""
        started = self.storm.start()
        if started:
            self.last_t = self.clock()
        return started

    def stop(self):
        return self.storm.stop()

    def toggle(self):
        if self.running:
            self.stop()
        else:
            self.start()
        return self.running

    def frame(self, now=None):
        """Called once per display refresh. Returns the storm's FlashCue, or None when stopped."""
        if not self.storm.running:
            return None

        if now is None:
            now = self.clock()
        self.last_dt = compute_dt(now, self.last_t)
        self.last_t = now
        return self.storm.tick(self.last_dt)
