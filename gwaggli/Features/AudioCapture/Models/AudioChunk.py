from dataclasses import dataclass
import time
from typing import Optional

import numpy as np

NANOS_PER_SECOND = 1_000_000_000
PCM16_SCALE = 32768.0
MAX_SAMPLE_RATE = 2 ** 32 - 1


@dataclass(frozen=True, eq=False)
class AudioChunk:
    """
    A captured span of mono audio.

    Immutable after creation: the sample buffer is made read-only so that every
    subscriber of the event carrying this chunk sees the same data.
    """

    # Normalized float32 amplitudes in [-1.0, 1.0]
    samples: np.ndarray

    # Sample rate in Hz
    sample_rate: int

    # Chunk start in nanoseconds since the UNIX epoch
    timestamp: int = 0

    def __post_init__(self):
        if not 0 < self.sample_rate <= MAX_SAMPLE_RATE:
            raise ValueError(f"Sample rate must be between 1 and {MAX_SAMPLE_RATE}, got {self.sample_rate}")
        if self.timestamp < 0:
            raise ValueError(f"Timestamp cannot be negative, got {self.timestamp}")

        samples = np.asarray(self.samples, dtype=np.float32)
        if samples.ndim != 1:
            raise ValueError(f"Samples must be one-dimensional, got shape {samples.shape}")
        if samples.flags.writeable:
            samples = samples.copy()
            samples.flags.writeable = False
        object.__setattr__(self, 'samples', samples)

    @property
    def duration(self) -> int:
        """Duration in nanoseconds, derived from length and sample rate."""
        return len(self.samples) * NANOS_PER_SECOND // self.sample_rate

    def __len__(self) -> int:
        return len(self.samples)

    @classmethod
    def from_pcm16(cls, raw_data: bytes, sample_rate: int,
                   captured_at: Optional[int] = None) -> 'AudioChunk':
        """
        Build a chunk from 16-bit signed little-endian PCM bytes.

        The chunk start is approximated as `captured_at - duration`, assuming
        zero capture latency.

        Args:
            raw_data: Interleaved PCM bytes of a single channel
            sample_rate: Sample rate in Hz
            captured_at: Time the buffer became available (ns since epoch), defaults to now
        """
        if captured_at is None:
            captured_at = time.time_ns()

        samples = np.frombuffer(raw_data, dtype='<i2').astype(np.float32) / PCM16_SCALE
        samples.flags.writeable = False
        duration = len(samples) * NANOS_PER_SECOND // sample_rate
        return cls(
            samples=samples,
            sample_rate=sample_rate,
            timestamp=max(captured_at - duration, 0),
        )

    def __repr__(self) -> str:
        return (f"AudioChunk({len(self.samples)} samples, sample_rate={self.sample_rate} samples/s, "
                f"timestamp={self.timestamp}, duration={self.duration}ns)")
