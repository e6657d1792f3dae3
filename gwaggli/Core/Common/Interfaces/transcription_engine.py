"""
Transcription Engine interface.

This module defines the ITranscriptionEngine interface that abstracts the
speech-recognition backend. The streaming pipeline only depends on this
contract.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import numpy as np

from gwaggli.Core.Common.errors import UnsupportedChannelCountError, UnsupportedSampleRateError

if TYPE_CHECKING:
    from gwaggli.Features.AudioCapture.Decoders.RiffWave import RiffWave

REQUIRED_SAMPLE_RATE = 16000


class ITranscriptionEngine(ABC):
    """
    Interface for speech-to-text backends.

    Input is always 16 kHz mono float32 audio normalized to [-1.0, 1.0].
    """

    @abstractmethod
    def load(self) -> None:
        """
        Prepare the backend (load model weights etc.).

        Raises:
            TransientIOError: If model files could not be fetched
            TranscriptionError: If the backend failed to initialize
        """
        pass

    @property
    @abstractmethod
    def is_ready(self) -> bool:
        """True once load() has completed."""
        pass

    @abstractmethod
    def transcribe_raw(self, samples: np.ndarray) -> str:
        """
        Transcribe a 16 kHz mono sample buffer.

        Raises:
            BackendNotInitializedError: If load() was not called
            TranscriptionError: If the backend failed on this input
        """
        pass

    def transcribe(self, wave: 'RiffWave') -> str:
        """
        Transcribe a fully decoded utterance.

        Raises:
            UnsupportedSampleRateError: If the audio is not 16 kHz
            UnsupportedChannelCountError: If the audio is not mono
        """
        if wave.format.sample_rate != REQUIRED_SAMPLE_RATE:
            raise UnsupportedSampleRateError(wave.format.sample_rate, REQUIRED_SAMPLE_RATE)
        if wave.format.num_channels.value != 1:
            raise UnsupportedChannelCountError(wave.format.num_channels.value)
        return self.transcribe_raw(wave.samples())
