from .FakeTranscriptionEngine import FakeTranscriptionEngine
from .FasterWhisperEngine import FasterWhisperEngine

__all__ = ['FakeTranscriptionEngine', 'FasterWhisperEngine']
