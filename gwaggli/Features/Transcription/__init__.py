"""
Transcription feature: engines behind ITranscriptionEngine, model descriptions
and the batch transcription path.
"""

from .Events import TranscriptionUpdatedEvent
from .Models import Quality, TranscriptionResult, WhisperModel
from .TranscriptionModule import TranscriptionModule

__all__ = ['Quality', 'TranscriptionModule', 'TranscriptionResult', 'TranscriptionUpdatedEvent', 'WhisperModel']
