import numpy as np

from gwaggli.Core.Common.Interfaces.transcription_engine import ITranscriptionEngine
from gwaggli.Core.Common.errors import BackendNotInitializedError


class FakeTranscriptionEngine(ITranscriptionEngine):
    """Engine that reports the input length instead of recognizing speech."""

    def __init__(self, auto_load: bool = True):
        self._loaded = auto_load
        self.calls = 0

    def load(self) -> None:
        self._loaded = True

    @property
    def is_ready(self) -> bool:
        return self._loaded

    def transcribe_raw(self, samples: np.ndarray) -> str:
        if not self._loaded:
            raise BackendNotInitializedError("Fake engine not loaded")
        self.calls += 1
        return f"No real transcription, but returning some data. Length={len(samples)}"
