#!/usr/bin/env python3
"""
Pixel Timelapse - Frame Renderer
================================
Replays sorted placements onto the canvas in fixed-size batches and
streams a PNG snapshot of the canvas to the encoder after each batch.

Only one encoded frame exists at a time; the blocking write to the
encoder is what paces rendering.
"""

import math
from typing import List, Optional, Sequence

import cv2
import numpy as np

from pixel_timelapse.config import DEFAULT_PIXELS_PER_FRAME
from pixel_timelapse.encoder import EncoderBridge
from pixel_timelapse.errors import FrameEncodeError
from pixel_timelapse.utils.canvas import RasterCanvas
from pixel_timelapse.utils.csv_parser import PlacementEvent
from pixel_timelapse.utils.progress import ProgressReporter


def frame_count(n_events: int, pixels_per_frame: int) -> int:
    """Number of frames a run of n_events will produce."""
    return math.ceil(n_events / pixels_per_frame) if n_events > 0 else 0


def encode_frame(rgba: np.ndarray) -> bytes:
    """
    Encode an RGBA raster as PNG.

    Args:
        rgba: (height, width, 4) uint8 array in R, G, B, A order

    Returns:
        PNG file bytes
    """
    try:
        # OpenCV expects BGRA
        bgra = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGRA)
        ok, png = cv2.imencode(".png", bgra)
    except cv2.error as exc:
        raise FrameEncodeError(f"PNG encoding failed: {exc}") from exc
    if not ok:
        raise FrameEncodeError("PNG encoding failed")
    return png.tobytes()


class FrameEmitter:
    """Paints batches of placements and hands each snapshot to the encoder."""

    def __init__(
        self,
        bridge: EncoderBridge,
        pixels_per_frame: int = DEFAULT_PIXELS_PER_FRAME,
        canvas: Optional[RasterCanvas] = None,
        progress: Optional[ProgressReporter] = None,
    ):
        if pixels_per_frame < 1:
            raise ValueError(f"pixels_per_frame must be >= 1, got {pixels_per_frame}")
        self.bridge = bridge
        self.pixels_per_frame = pixels_per_frame
        self.canvas = canvas if canvas is not None else RasterCanvas()
        self.progress = progress

    def emit(self, events: Sequence[PlacementEvent]) -> int:
        """
        Render every batch and write it to the encoder, then close its input.

        On any failure the encoder's stdin is closed before the error
        propagates, so FFmpeg is not left waiting for more frames.

        Returns:
            Number of frames written
        """
        if self.progress is not None:
            self.progress.start(len(events))

        frames = 0
        try:
            for start in range(0, len(events), self.pixels_per_frame):
                batch: List[PlacementEvent] = events[start:start + self.pixels_per_frame]
                for event in batch:
                    self.canvas.apply_event(event)

                frame = encode_frame(self.canvas.snapshot())
                self.bridge.write_frame(frame)
                frames += 1

                if self.progress is not None:
                    self.progress.advance(len(batch))
        except Exception:
            self.bridge.close_input()
            raise

        self.bridge.close_input()
        if self.progress is not None:
            self.progress.finish()
        return frames
