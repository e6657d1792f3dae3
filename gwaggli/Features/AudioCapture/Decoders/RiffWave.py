"""
RIFF/WAVE container decoding.

Layout reference: EBU Tech 3285 (BWF). All header fields are little-endian.
The first 12 bytes hold "RIFF", the size of the rest of the file and "WAVE".
Sub-chunks follow from offset 12, each a 4-byte ASCII id, a 4-byte length and
that many payload bytes (padded to an even length). Only the "fmt " and "data"
sub-chunks are interpreted; everything else is skipped.
"""

import struct
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

import numpy as np

from gwaggli.Core.Common.errors import FormatError
from gwaggli.Features.AudioCapture.Models.AudioChunk import PCM16_SCALE

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8
FMT_MIN_SIZE = 16


class AudioFormat(Enum):
    PCM = 1


class Channels(Enum):
    Mono = 1
    Stereo = 2

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class WaveFormat:
    """Contents of the "fmt " sub-chunk."""

    audio_format: AudioFormat
    num_channels: Channels
    # Samples per second per channel
    sample_rate: int
    # Bytes per second of the waveform data
    byte_rate: int
    # Bytes per sample frame including all channels
    block_align: int
    # Bits per sample of a single channel
    bits_per_sample: int


@dataclass(frozen=True)
class RiffWave:
    """A decoded RIFF/WAVE file: header fields plus raw PCM payload."""

    chunk_id: str
    chunk_size: int
    format_id: str
    format: WaveFormat
    data: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> 'RiffWave':
        """
        Decode a complete RIFF/WAVE container.

        Raises:
            FormatError: If the container is malformed or uses an unsupported encoding
        """
        if len(data) < RIFF_HEADER_SIZE:
            raise FormatError(f"Data too short for a RIFF header: {len(data)} bytes")

        chunk_id = data[0:4]
        chunk_size, = struct.unpack_from('<I', data, 4)
        format_id = data[8:12]

        if chunk_id != b'RIFF':
            raise FormatError(f"Not a RIFF container: chunk id {chunk_id!r}")
        if format_id != b'WAVE':
            raise FormatError(f"Not a WAVE file: format {format_id!r}")

        wave_format = None
        payload = None
        offset = RIFF_HEADER_SIZE

        while offset + CHUNK_HEADER_SIZE <= len(data):
            sub_id = data[offset:offset + 4]
            sub_size, = struct.unpack_from('<I', data, offset + 4)
            start = offset + CHUNK_HEADER_SIZE
            end = start + sub_size
            if end > len(data):
                raise FormatError(
                    f"Sub-chunk {sub_id!r} at offset {offset} claims {sub_size} bytes, "
                    f"only {len(data) - start} available")

            if sub_id == b'fmt ':
                wave_format = _parse_format(data[start:end])
            elif sub_id == b'data':
                payload = bytes(data[start:end])

            # Sub-chunks are word aligned
            offset = end + (sub_size & 1)

        if wave_format is None:
            raise FormatError("Missing 'fmt ' sub-chunk")
        if payload is None:
            raise FormatError("Missing 'data' sub-chunk")

        return cls(
            chunk_id=chunk_id.decode('ascii'),
            chunk_size=chunk_size,
            format_id=format_id.decode('ascii'),
            format=wave_format,
            data=payload,
        )

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'RiffWave':
        with open(path, 'rb') as f:
            return cls.from_bytes(f.read())

    @property
    def num_frames(self) -> int:
        """Number of sample frames (one sample per channel each)."""
        return len(self.data) // self.format.block_align if self.format.block_align else 0

    @property
    def duration_seconds(self) -> float:
        return self.num_frames / self.format.sample_rate if self.format.sample_rate else 0.0

    def samples(self) -> np.ndarray:
        """
        Convert the payload to normalized float32 samples (interleaved).

        Raises:
            FormatError: If the payload is not 16-bit PCM
        """
        if self.format.bits_per_sample != 16:
            raise FormatError(
                f"Unsupported bits per sample: {self.format.bits_per_sample} (only 16-bit PCM is supported)")
        usable = len(self.data) - (len(self.data) % 2)
        return np.frombuffer(self.data[:usable], dtype='<i2').astype(np.float32) / PCM16_SCALE

    def channel(self, index: int) -> np.ndarray:
        """Normalized float32 samples of a single channel."""
        channels = self.format.num_channels.value
        if not 0 <= index < channels:
            raise ValueError(f"Channel index {index} out of range for {channels} channels")
        samples = self.samples()
        usable = len(samples) - (len(samples) % channels)
        return samples[:usable].reshape(-1, channels)[:, index]


def _parse_format(payload: bytes) -> WaveFormat:
    if len(payload) < FMT_MIN_SIZE:
        raise FormatError(f"'fmt ' sub-chunk too short: {len(payload)} bytes")

    (audio_format, num_channels, sample_rate, byte_rate,
     block_align, bits_per_sample) = struct.unpack_from('<HHIIHH', payload, 0)

    try:
        audio_format = AudioFormat(audio_format)
    except ValueError:
        raise FormatError(f"Unsupported audio format: {audio_format} (only PCM is supported)")

    try:
        channels = Channels(num_channels)
    except ValueError:
        raise FormatError(f"Unsupported number of channels: {num_channels}")

    return WaveFormat(
        audio_format=audio_format,
        num_channels=channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
    )
