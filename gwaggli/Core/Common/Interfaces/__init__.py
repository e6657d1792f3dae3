"""
Interfaces for the pluggable capabilities of the system.
"""

from .audio_source import IAudioSource
from .transcription_engine import ITranscriptionEngine

__all__ = [
    'IAudioSource',
    'ITranscriptionEngine'
]
