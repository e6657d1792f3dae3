import logging
import time
from math import gcd
from pathlib import Path
from typing import Union

import numpy as np
from scipy.signal import resample_poly

from gwaggli.Core.Common.Interfaces.audio_source import IAudioSource
from gwaggli.Core.Events.event_bus import EventPublisher
from gwaggli.Features.AudioCapture.Decoders.RiffWave import RiffWave
from gwaggli.Features.AudioCapture.Events.AudioChunkCapturedEvent import AudioChunkCapturedEvent
from gwaggli.Features.AudioCapture.Models.AudioChunk import NANOS_PER_SECOND, AudioChunk

logger = logging.getLogger(__name__)


class FileAudioSource(IAudioSource):
    """
    Source that replays a WAVE file as a stream of audio chunk events.

    The first channel is used, audio is resampled to the target rate when the
    file differs, and the final chunk is flagged with is_last=True.
    """

    def __init__(
            self,
            file_path: Union[str, Path],
            target_samplerate: int = 16000,
            chunk_size: int = 512,
            realtime: bool = False,
            start_timestamp: int = 0,
        ):
        """
        Decode the file up front.

        Args:
            file_path: Path to a 16-bit PCM WAVE file
            target_samplerate: Sample rate of the published chunks in Hz
            chunk_size: Samples per published chunk
            realtime: Sleep one chunk duration between chunks to simulate capture
            start_timestamp: Timestamp (ns) of the first chunk

        Raises:
            FormatError: If the file is not a supported WAVE file
        """
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be at least 1, got {chunk_size}")

        self.file_path = Path(file_path)
        self.target_samplerate = target_samplerate
        self.chunk_size = chunk_size
        self.realtime = realtime
        self.start_timestamp = start_timestamp

        wave = RiffWave.from_file(self.file_path)
        self.file_sample_rate = wave.format.sample_rate
        audio = wave.channel(0)

        if self.file_sample_rate != target_samplerate:
            divisor = gcd(self.file_sample_rate, target_samplerate)
            audio = resample_poly(audio, target_samplerate // divisor, self.file_sample_rate // divisor)
            audio = np.clip(audio, -1.0, 1.0).astype(np.float32)

        self._audio_data = audio
        logger.debug(f"Loaded {self.file_path} ({wave.format.num_channels}, {self.file_sample_rate} Hz), "
                     f"{len(audio)} samples at {target_samplerate} Hz")

    @property
    def num_samples(self) -> int:
        return len(self._audio_data)

    def produce(self, publisher: EventPublisher) -> None:
        """Publish every chunk of the file, in order, before returning."""
        total = len(self._audio_data)
        position = 0

        while True:
            chunk_samples = self._audio_data[position:position + self.chunk_size]
            is_last = position + self.chunk_size >= total
            timestamp = self.start_timestamp + position * NANOS_PER_SECOND // self.target_samplerate

            chunk = AudioChunk(samples=chunk_samples, sample_rate=self.target_samplerate, timestamp=timestamp)
            publisher.publish(AudioChunkCapturedEvent(audio_chunk=chunk, is_last=is_last))

            if is_last:
                break
            position += self.chunk_size

            if self.realtime:
                time.sleep(chunk.duration / NANOS_PER_SECOND)

        logger.debug(f"Finished publishing {self.file_path}")
