"""Tests for RasterCanvas: in-place painting and snapshots."""

import numpy as np

from pixel_timelapse.utils.canvas import RasterCanvas
from pixel_timelapse.utils.csv_parser import PlacementEvent


RED = (255, 0, 0)
BLUE = (0, 0, 255)


def test_starts_opaque_white():
    canvas = RasterCanvas(size=4)
    assert canvas.buffer.shape == (4 * 4 * 4,)
    assert np.all(canvas.buffer == 255)


def test_apply_event_writes_rgba_at_offset():
    canvas = RasterCanvas(size=4)
    canvas.apply_event(PlacementEvent(1, x=2, y=1, color=(10, 20, 30)))

    offset = (1 * 4 + 2) * 4
    assert list(canvas.buffer[offset:offset + 4]) == [10, 20, 30, 255]
    assert canvas.pixel(2, 1) == (10, 20, 30, 255)
    assert canvas.pixel(1, 2) == (255, 255, 255, 255)


def test_last_write_wins():
    canvas = RasterCanvas(size=2)
    canvas.apply_event(PlacementEvent(1, 0, 0, RED))
    canvas.apply_event(PlacementEvent(2, 0, 0, BLUE))
    assert canvas.pixel(0, 0) == BLUE + (255,)


def test_snapshot_is_row_major_view():
    canvas = RasterCanvas(size=3)
    canvas.apply_event(PlacementEvent(1, x=2, y=0, color=RED))

    snap = canvas.snapshot()
    assert snap.shape == (3, 3, 4)
    assert tuple(snap[0, 2]) == RED + (255,)


def test_snapshot_tracks_later_mutations():
    canvas = RasterCanvas(size=2)
    snap = canvas.snapshot()
    canvas.apply_event(PlacementEvent(1, 1, 1, BLUE))

    assert np.shares_memory(snap, canvas.buffer)
    assert tuple(snap[1, 1]) == BLUE + (255,)
