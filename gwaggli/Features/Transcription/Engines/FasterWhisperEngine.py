"""
Whisper transcription through faster-whisper (CTranslate2).

Model files are resolved through the local model cache; the engine never
downloads on its own.
"""

import logging
import threading
from typing import Optional

import numpy as np

from gwaggli.Core.Common.Interfaces.transcription_engine import ITranscriptionEngine
from gwaggli.Core.Common.errors import BackendNotInitializedError, ConfigurationError, TranscriptionError
from gwaggli.Features.Transcription.Models.WhisperModel import WhisperModel
from gwaggli.Infrastructure.Configuration.AppConfig import WhisperConfig
from gwaggli.Infrastructure.Environment.downloader import ModelDownloader


class FasterWhisperEngine(ITranscriptionEngine):
    """Transcription engine backed by a faster-whisper WhisperModel."""

    def __init__(self, config: WhisperConfig, downloader: ModelDownloader):
        self.logger = logging.getLogger(__name__)
        self.config = config
        try:
            self.whisper_model = WhisperModel.from_name(config.model)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
        self.downloader = downloader
        self.model = None
        self._lock = threading.Lock()

    def load(self) -> None:
        if self.model is not None:
            return

        try:
            from faster_whisper import WhisperModel as FasterWhisperModel
        except ImportError as e:
            raise TranscriptionError(
                "faster-whisper is not installed, install with 'pip install Gwaggli_STT[whisper]'") from e

        model_dir = self.downloader.ensure(self.whisper_model.repo_id, self.whisper_model.model_name)

        self.logger.info(f"Loading Whisper {self.whisper_model.value} on {self.config.device} "
                         f"with {self.config.compute_type}...")
        try:
            self.model = FasterWhisperModel(
                str(model_dir),
                device=self.config.device,
                compute_type=self.config.compute_type,
                cpu_threads=self.config.n_threads,
            )
        except (RuntimeError, ValueError) as e:
            raise TranscriptionError(f"Failed to load Whisper model {self.whisper_model.value}: {e}") from e
        self.logger.info(f"Whisper {self.whisper_model.value} model loaded")

    @property
    def is_ready(self) -> bool:
        return self.model is not None

    def transcribe_raw(self, samples: np.ndarray, language: Optional[str] = None) -> str:
        if self.model is None:
            raise BackendNotInitializedError("Whisper model not loaded, call load() first")

        audio = np.ascontiguousarray(samples, dtype=np.float32)
        if audio.size == 0:
            return ""

        # One transcription at a time per engine
        with self._lock:
            try:
                segments, _info = self.model.transcribe(
                    audio,
                    beam_size=self.config.beam_size,
                    language=language or self.config.language,
                )
                return "".join(segment.text for segment in segments)
            except (RuntimeError, ValueError) as e:
                raise TranscriptionError(f"Whisper transcription failed: {e}") from e
