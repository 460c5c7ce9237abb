"""Rain-with-lightning overlay: particle rain plus a flickering dim layer."""

from rainfx.storm import RainStorm
from rainfx.driver import FrameDriver

__all__ = ["RainStorm", "FrameDriver"]
