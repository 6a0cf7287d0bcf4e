"""
Pixel Timelapse - Configuration
===============================
Fixed constants shared by the parser, canvas, renderer and encoder.
"""

from pathlib import Path


# ============================================================================
# CONFIGURATION
# ============================================================================

# Canvas (square, RGBA)
CANVAS_SIZE = 1000
CHANNELS = 4
ALPHA = 255

# Video settings
FPS = 60
CODEC = "libx264"
PRESET = "ultrafast"
PIXEL_FORMAT = "yuv420p"
FFMPEG_BIN = "ffmpeg"

# Input / output
INPUT_CSV = Path("data") / "pixels.csv"
OUTPUT_VIDEO = Path("timelapse.mkv")

# Batching
DEFAULT_PIXELS_PER_FRAME = 2

# CSV field positions (0-indexed)
FIELD_ID = 0
FIELD_X = 2
FIELD_Y = 3
FIELD_COLOR = 6
