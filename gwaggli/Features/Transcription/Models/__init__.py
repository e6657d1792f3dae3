from .TranscriptionResult import TranscriptionResult
from .WhisperModel import Quality, WhisperModel

__all__ = ['Quality', 'TranscriptionResult', 'WhisperModel']
