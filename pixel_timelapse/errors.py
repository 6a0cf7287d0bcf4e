"""
Pixel Timelapse - Errors
========================
Pipeline failures that abort a run. Malformed CSV records never raise;
they are dropped by the parser.
"""


class TimelapseError(RuntimeError):
    """Base class for failures that abort a timelapse run."""


class EncoderSpawnError(TimelapseError):
    """FFmpeg could not be started."""


class EncoderPipeError(TimelapseError):
    """Writing to or closing FFmpeg's stdin failed (usually a broken pipe)."""


class EncoderStateError(TimelapseError):
    """The encoder was used out of order (e.g. write after close)."""


class EncoderFailedError(TimelapseError):
    """FFmpeg exited with a non-zero status."""

    def __init__(self, returncode: int):
        super().__init__(f"ffmpeg process exited with code {returncode}")
        self.returncode = returncode


class FrameEncodeError(TimelapseError):
    """A canvas snapshot could not be encoded as PNG."""
