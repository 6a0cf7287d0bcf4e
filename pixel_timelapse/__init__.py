"""
Pixel Timelapse
===============
Replays a CSV log of pixel placements onto a canvas and pipes the
snapshots into FFmpeg to build a timelapse video.
"""

__version__ = "0.1.0"
