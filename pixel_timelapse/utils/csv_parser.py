#!/usr/bin/env python3
"""
CSV Parser for Pixel Timelapse
==============================
Decodes pixel placement records and collates them into drawing order.

Record layout (comma-delimited, no header):
    0: sequence id    2: x    3: y    6: color token

Parsing is deliberately lenient: a bad sequence id falls back to 1, and a
record with bad coordinates or an unreadable color is skipped without
raising.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from pixel_timelapse.config import (
    CANVAS_SIZE,
    FIELD_COLOR,
    FIELD_ID,
    FIELD_X,
    FIELD_Y,
)
from pixel_timelapse.utils.progress import ProgressReporter


# Leading integer, as the exporting tool wrote it ("12", " -3", "7px")
_INT_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
# \x21 style byte escapes embedded in color tokens
_HEX_ESCAPE = re.compile(r"\\x([0-9a-fA-F]{2})")
_NON_HEX = re.compile(r"[^0-9a-fA-F]")


@dataclass(frozen=True)
class PlacementEvent:
    """Single decoded pixel placement."""
    sequence_id: int
    x: int
    y: int
    color: Tuple[int, int, int]  # r, g, b


@dataclass
class ParseStats:
    """Line counters for the run summary."""
    total_lines: int = 0
    accepted: int = 0
    rejected: int = 0


def parse_int(text: Optional[str]) -> Optional[int]:
    """Read a leading integer from a field, or None if there is none."""
    if text is None:
        return None
    match = _INT_PREFIX.match(text)
    if match is None:
        return None
    return int(match.group(1))


def normalize_color(token: str) -> Optional[Tuple[int, int, int]]:
    """
    Convert a raw color token into an (r, g, b) tuple.

    Escapes like ``\\x21`` are unwrapped to their two hex digits, every
    remaining non-hex character is dropped, and exactly six digits must be
    left over.

    Returns:
        (r, g, b) with values 0-255, or None if the token is unusable
    """
    digits = _HEX_ESCAPE.sub(lambda m: m.group(1), token)
    digits = _NON_HEX.sub("", digits)
    if len(digits) != 6:
        return None
    return (
        int(digits[0:2], 16),
        int(digits[2:4], 16),
        int(digits[4:6], 16),
    )


def _field(parts: List[str], index: int) -> Optional[str]:
    return parts[index] if index < len(parts) else None


def parse_record(line: str, canvas_size: int = CANVAS_SIZE) -> Optional[PlacementEvent]:
    """
    Parse a single CSV line into a PlacementEvent.

    Returns None for records that should be skipped.
    """
    parts = line.split(",")

    sequence_id = parse_int(_field(parts, FIELD_ID))
    if sequence_id is None or sequence_id < 1:
        sequence_id = 1

    x = parse_int(_field(parts, FIELD_X))
    y = parse_int(_field(parts, FIELD_Y))
    if x is None or y is None:
        return None
    if not (0 <= x < canvas_size and 0 <= y < canvas_size):
        return None

    token = (_field(parts, FIELD_COLOR) or "").strip()
    if not token:
        return None

    color = normalize_color(token)
    if color is None:
        return None

    return PlacementEvent(sequence_id=sequence_id, x=x, y=y, color=color)


def _read_lines(filepath: Path):
    with open(filepath, "r", encoding="utf-8", errors="replace", newline="") as f:
        for line in f:
            yield line.rstrip("\r\n")


def count_records(filepath: Path) -> int:
    """Count lines in the input (first pass, for progress)."""
    return sum(1 for _ in _read_lines(filepath))


def load_sorted_events(
    filepath: Path,
    progress: Optional[ProgressReporter] = None,
    canvas_size: int = CANVAS_SIZE,
) -> Tuple[List[PlacementEvent], ParseStats]:
    """
    Load every valid placement and sort it into drawing order.

    The file is read twice: once to count lines, once to decode them.
    The sort is stable, so placements sharing a sequence id keep their
    file order.

    Args:
        filepath: CSV file (must be re-readable)
        progress: Optional reporter; its total is set from the first pass
        canvas_size: Width/height used for the bounds check

    Returns:
        (events sorted by sequence_id, parse statistics)
    """
    filepath = Path(filepath)
    stats = ParseStats(total_lines=count_records(filepath))
    if progress is not None:
        progress.start(stats.total_lines)

    events: List[PlacementEvent] = []
    for line in _read_lines(filepath):
        event = parse_record(line, canvas_size)
        if event is None:
            stats.rejected += 1
        else:
            events.append(event)
            stats.accepted += 1
        if progress is not None:
            progress.advance()

    if progress is not None:
        progress.finish()

    events.sort(key=lambda e: e.sequence_id)
    return events, stats
