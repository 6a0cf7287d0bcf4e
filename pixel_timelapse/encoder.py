#!/usr/bin/env python3
"""
Pixel Timelapse - Encoder
=========================
Streams PNG frames into FFmpeg over stdin.

FFmpeg reads concatenated PNGs (image2pipe) at a fixed frame rate and
writes a single H.264 video. Writes to stdin block while FFmpeg's pipe
buffer is full, which throttles frame production to the encoder's pace.
"""

import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pixel_timelapse.config import (
    CODEC,
    FFMPEG_BIN,
    FPS,
    OUTPUT_VIDEO,
    PIXEL_FORMAT,
    PRESET,
)
from pixel_timelapse.errors import (
    EncoderFailedError,
    EncoderPipeError,
    EncoderSpawnError,
    EncoderStateError,
)


class BridgeState(Enum):
    PENDING = "pending"
    SPAWNED = "spawned"
    WRITING = "writing"
    CLOSED = "closed"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def check_ffmpeg(ffmpeg_bin: str = FFMPEG_BIN) -> bool:
    """Check if FFmpeg is available."""
    try:
        result = subprocess.run(
            [ffmpeg_bin, '-version'],
            capture_output=True,
            text=True
        )
        return result.returncode == 0
    except OSError:
        return False


def build_ffmpeg_command(
    output_path: Path = OUTPUT_VIDEO,
    fps: int = FPS,
    ffmpeg_bin: str = FFMPEG_BIN
) -> List[str]:
    """
    Build the FFmpeg command line for piped PNG input.

    Args:
        output_path: Video file to write (overwritten without prompting)
        fps: Input and output frame rate
        ffmpeg_bin: FFmpeg executable

    Returns:
        Argument list for subprocess
    """
    return [
        ffmpeg_bin,
        '-y',  # Overwrite output
        '-f', 'image2pipe',
        '-framerate', str(fps),
        '-i', 'pipe:0',
        '-pix_fmt', PIXEL_FORMAT,  # Compatibility
        '-r', str(fps),
        '-c:v', CODEC,
        '-preset', PRESET,
        str(output_path),
    ]


class EncoderBridge:
    """
    Owns one FFmpeg process and its stdin.

    Lifecycle: PENDING -> SPAWNED -> WRITING -> CLOSED -> SUCCEEDED | FAILED.
    Used as a context manager, stdin is closed on every exit path.
    """

    def __init__(self, command: List[str]):
        self.command = list(command)
        self.process: Optional[subprocess.Popen] = None
        self.state = BridgeState.PENDING
        self.frames_written = 0
        self.returncode: Optional[int] = None
        self._pipe_error: Optional[EncoderPipeError] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> "EncoderBridge":
        """Spawn the encoder. May only be called once."""
        if self.state is not BridgeState.PENDING:
            raise EncoderStateError(f"encoder already started (state: {self.state.value})")

        print(f"[ENCODER] Running: {' '.join(self.command)}")
        try:
            self.process = subprocess.Popen(self.command, stdin=subprocess.PIPE)
        except OSError as exc:
            self.state = BridgeState.FAILED
            raise EncoderSpawnError(f"could not start {self.command[0]}: {exc}") from exc

        self.state = BridgeState.SPAWNED
        return self

    def write_frame(self, data: bytes) -> None:
        """Write one encoded frame. Blocks while FFmpeg's input is full."""
        if self.state not in (BridgeState.SPAWNED, BridgeState.WRITING):
            raise EncoderStateError(f"cannot write frame in state {self.state.value}")

        self.state = BridgeState.WRITING
        try:
            self.process.stdin.write(data)
            self.process.stdin.flush()
        except OSError as exc:
            self._pipe_error = EncoderPipeError(f"error writing to ffmpeg stdin: {exc}")
            raise self._pipe_error from exc
        self.frames_written += 1

    def close_input(self) -> None:
        """Signal end of input. Safe to call more than once."""
        if self.state not in (BridgeState.SPAWNED, BridgeState.WRITING):
            return

        self.state = BridgeState.CLOSED
        stdin = self.process.stdin
        if stdin is None or stdin.closed:
            return
        try:
            stdin.close()
        except OSError as exc:
            # A failed write already reported this pipe as broken
            if self._pipe_error is None:
                self._pipe_error = EncoderPipeError(f"error closing ffmpeg stdin: {exc}")
                raise self._pipe_error from exc

    def wait(self) -> int:
        """
        Close input if still open and wait for FFmpeg to exit.

        Returns:
            0 on success

        Raises:
            EncoderFailedError: FFmpeg exited with a non-zero status
        """
        if self.state is BridgeState.PENDING:
            raise EncoderStateError("encoder was never started")
        if self.state in (BridgeState.SUCCEEDED, BridgeState.FAILED):
            return self._finished()

        self.close_input()
        self.returncode = self.process.wait()
        if self.returncode == 0:
            self.state = BridgeState.SUCCEEDED
        else:
            self.state = BridgeState.FAILED
        return self._finished()

    def _finished(self) -> int:
        if self.returncode is None:
            raise EncoderStateError("encoder failed before producing an exit status")
        if self.returncode != 0:
            raise EncoderFailedError(self.returncode)
        return self.returncode

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "EncoderBridge":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close_input()
            return
        # Error path: never leave FFmpeg waiting on an open pipe
        try:
            self.close_input()
        except EncoderPipeError:
            pass  # the in-flight exception is the one to report
        if self.process is not None and self.returncode is None:
            self.returncode = self.process.wait()
            self.state = BridgeState.SUCCEEDED if self.returncode == 0 else BridgeState.FAILED
