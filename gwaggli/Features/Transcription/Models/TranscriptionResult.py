from dataclasses import dataclass


@dataclass(frozen=True)
class TranscriptionResult:
    """Text recognized for one frame of the stream."""

    text: str

    # Zero-based index of the frame in the stream
    frame_index: int

    # Offset of the frame's first sample in the concatenated stream
    start_sample: int

    # Frame start in nanoseconds since the UNIX epoch
    timestamp: int = 0
