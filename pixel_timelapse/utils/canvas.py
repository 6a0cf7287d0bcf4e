#!/usr/bin/env python3
"""
Raster Canvas for Pixel Timelapse
=================================
Persistent RGBA pixel buffer that placements are painted onto.
The same buffer is reused for the whole run, so every snapshot shows the
cumulative drawing, not just the latest batch.
"""

import numpy as np
from typing import Tuple

from pixel_timelapse.config import ALPHA, CANVAS_SIZE, CHANNELS
from pixel_timelapse.utils.csv_parser import PlacementEvent


class RasterCanvas:
    """Square RGBA canvas, initialised to opaque white."""

    def __init__(self, size: int = CANVAS_SIZE):
        self.size = size
        # Flat pixel-major buffer: (y * size + x) * 4 -> R, G, B, A
        self.buffer = np.full(size * size * CHANNELS, 255, dtype=np.uint8)

    def apply_event(self, event: PlacementEvent) -> None:
        """Paint one placement. Bounds are guaranteed by the parser."""
        index = (event.y * self.size + event.x) * CHANNELS
        r, g, b = event.color
        self.buffer[index:index + CHANNELS] = (r, g, b, ALPHA)

    def snapshot(self) -> np.ndarray:
        """
        Current canvas as a (height, width, 4) RGBA view.

        No copy is made; later placements show up in the returned array.
        """
        return self.buffer.reshape(self.size, self.size, CHANNELS)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        index = (y * self.size + x) * CHANNELS
        return tuple(int(v) for v in self.buffer[index:index + CHANNELS])
