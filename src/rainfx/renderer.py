# renderer.py

import pygame

from rainfx.utils import clamp

RAIN_COLOR = (168, 193, 255)  # #a8c1ff
DIM_COLOR = (0, 0, 0)
DEFAULT_TRANSITION_MS = 50.0


class RainRenderer:
    """Draws the drop set onto a transparent raster surface sized to viewport x pixel scale."""

    def __init__(self, viewport):
        self.viewport = viewport
        self.surface = None
        self.resize(viewport)

    @property
    def scale(self):
        return self.viewport.pixel_scale

    def resize(self, viewport):
        """Reallocates the drawing surface for a new viewport."""
        self.viewport = viewport
        width = int(viewport.width * viewport.pixel_scale)
        height = int(viewport.height * viewport.pixel_scale)
        self.surface = pygame.Surface((max(1, width), max(1, height)), pygame.SRCALPHA)

    def release(self):
        self.surface = None

    @property
    def released(self):
        return self.surface is None

    def draw(self, drops):
        """
        Clears the surface and redraws every drop as a single line segment.

        pygame's draw functions write the colour (alpha included) straight into
        the target pixels, so overlapping drops overwrite each other.
        """
        if self.surface is None:
            return None

        self.surface.fill((0, 0, 0, 0))
        s = self.scale

        for drop in drops:
            color = (*RAIN_COLOR, int(round(clamp(drop.alpha, 0.0, 1.0) * 255)))
            width = max(1, int(round(drop.thickness * s)))
            pygame.draw.line(
                self.surface,
                color,
                (drop.x * s, (drop.y - drop.length) * s),
                (drop.x * s, drop.y * s),
                width
            )

        return self.surface


class DimOverlay:
    """
    The translucent darkening layer. The flash scheduler only hands out
    (target, duration) cues; this class does the linear interpolation towards them.
    """

    def __init__(self, opacity):
        self.opacity = clamp(opacity, 0.0, 1.0)
        self.target = self.opacity
        self.duration_ms = DEFAULT_TRANSITION_MS
        self._start = self.opacity
        self._elapsed = 0.0

    def apply(self, target, duration_ms):
        """Starts a transition towards target. Re-applying the current target is a no-op."""
        target = clamp(target, 0.0, 1.0)
        if target == self.target:
            return False

        self._start = self.opacity
        self.target = target
        self.duration_ms = max(0.0, float(duration_ms))
        self._elapsed = 0.0
        if self.duration_ms == 0:
            self.opacity = target
        return True

    def snap(self, value):
        """Jumps to value with no transition."""
        self.apply(value, 0)
        self.opacity = self.target

    def advance(self, dt_ms):
        if self.opacity == self.target:
            return self.opacity

        self._elapsed += dt_ms
        if self.duration_ms <= 0 or self._elapsed >= self.duration_ms:
            self.opacity = self.target
        else:
            t = self._elapsed / self.duration_ms
            self.opacity = self._start + (self.target - self._start) * t

        self.opacity = clamp(self.opacity, 0.0, 1.0)
        return self.opacity

    def draw(self, surface):
        """Blends the black dim layer over surface at the current opacity."""
        alpha = int(round(self.opacity * 255))
        if alpha <= 0:
            return
        layer = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        layer.fill((*DIM_COLOR, alpha))
        surface.blit(layer, (0, 0))
