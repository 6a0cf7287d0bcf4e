#!/usr/bin/env python3
"""
Pixel Timelapse - Build Script
==============================
One-command build: parses the placement log, renders frames, encodes video.

Usage:
    python3 -m pixel_timelapse.build_timelapse [pixels_per_frame] [--input data/pixels.csv]

Requires: ffmpeg installed (sudo apt install ffmpeg)
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from pixel_timelapse.config import (
    DEFAULT_PIXELS_PER_FRAME,
    FPS,
    INPUT_CSV,
    OUTPUT_VIDEO,
)
from pixel_timelapse.encoder import EncoderBridge, build_ffmpeg_command, check_ffmpeg
from pixel_timelapse.errors import EncoderFailedError, TimelapseError
from pixel_timelapse.renderer import FrameEmitter, frame_count
from pixel_timelapse.utils.csv_parser import load_sorted_events, parse_int
from pixel_timelapse.utils.progress import ProgressReporter


def parse_pixels_per_frame(raw: Optional[str]) -> int:
    """Batch size from the command line; falls back to the default if unusable."""
    value = parse_int(raw)
    if value is None:
        return DEFAULT_PIXELS_PER_FRAME
    return value if value >= 1 else DEFAULT_PIXELS_PER_FRAME


def run_timelapse(
    input_path: Path,
    pixels_per_frame: int = DEFAULT_PIXELS_PER_FRAME,
    command: Optional[List[str]] = None,
) -> int:
    """
    Parse, render and encode a timelapse.

    Args:
        input_path: Placement CSV
        pixels_per_frame: Placements drawn between snapshots
        command: Encoder command line (defaults to the FFmpeg invocation)

    Returns:
        Number of frames written

    Raises:
        TimelapseError: encoder could not be started, fed or finished cleanly
    """
    if command is None:
        command = build_ffmpeg_command()

    print("[PARSER] Parsing and sorting CSV...")
    events, stats = load_sorted_events(input_path, ProgressReporter("PARSER"))
    print(f"[PARSER] Loaded {stats.accepted} placements "
          f"({stats.rejected} of {stats.total_lines} lines skipped)")

    expected = frame_count(len(events), pixels_per_frame)
    print(f"[RENDER] Generating timelapse: {expected} frames, "
          f"{pixels_per_frame} pixels/frame, {expected / FPS:.1f}s @ {FPS} FPS")

    with EncoderBridge(command) as bridge:
        emitter = FrameEmitter(bridge, pixels_per_frame, progress=ProgressReporter("RENDER"))
        frames = emitter.emit(events)
        bridge.wait()

    return frames


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Pixel Timelapse Builder")
    parser.add_argument("pixels_per_frame", nargs="?", default=None,
                        help=f"Placements drawn per frame (default {DEFAULT_PIXELS_PER_FRAME})")
    parser.add_argument("--input", type=str, default=str(INPUT_CSV), help="Placement CSV")
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    pixels_per_frame = parse_pixels_per_frame(args.pixels_per_frame)

    print("=" * 60)
    print("PIXEL TIMELAPSE BUILDER")
    print("=" * 60)
    print(f"Input: {input_path}")
    print(f"Output: {OUTPUT_VIDEO}")
    print(f"Pixels per frame: {pixels_per_frame}")
    print("=" * 60)

    if not input_path.exists():
        print(f"[ERROR] Input not found: {input_path}")
        return 1

    if not check_ffmpeg():
        print("[ERROR] FFmpeg not found! Install with: apt install ffmpeg")
        return 1

    try:
        frames = run_timelapse(input_path, pixels_per_frame)
    except EncoderFailedError as exc:
        print(f"[ERROR] {exc}")
        return exc.returncode if exc.returncode > 0 else 1
    except (TimelapseError, OSError) as exc:
        print(f"[ERROR] {exc}")
        return 1

    print("\n" + "=" * 60)
    print("BUILD COMPLETE")
    print("=" * 60)
    print(f"Frames: {frames}")
    print(f"Timelapse saved to {OUTPUT_VIDEO}")
    if OUTPUT_VIDEO.exists():
        size_mb = OUTPUT_VIDEO.stat().st_size / (1024 * 1024)
        print(f"Size: {size_mb:.1f} MB")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
