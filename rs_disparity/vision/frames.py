"""Sensor-independent frame containers passed between session, converter and loop."""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

DEPTH_WIDTH = 640
DEPTH_HEIGHT = 480
DEPTH_FPS = 30


@dataclass(frozen=True)
class StreamConfig:
    """Depth stream request. Fixed before the session starts."""

    width: int = DEPTH_WIDTH
    height: int = DEPTH_HEIGHT
    fps: int = DEPTH_FPS
    stream: str = "depth"
    format: str = "z16"


@dataclass(frozen=True)
class DepthFrame:
    """Depth samples in millimeters, int16 of shape (height, width)."""

    width: int
    height: int
    data: Optional[np.ndarray]
    handle: Any = None  # vendor frame object, opaque to the loop

    @property
    def empty(self) -> bool:
        return self.data is None or self.data.size == 0


@dataclass(frozen=True)
class DisparityFrame:
    """Disparity samples, float32 of shape (height, width)."""

    width: int
    height: int
    data: Optional[np.ndarray]
    baseline: float = 0.0

    @property
    def empty(self) -> bool:
        return self.data is None or self.data.size == 0
