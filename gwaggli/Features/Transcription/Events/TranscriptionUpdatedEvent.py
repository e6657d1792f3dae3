from dataclasses import dataclass

from gwaggli.Core.Events.event import Event
from gwaggli.Features.Transcription.Models.TranscriptionResult import TranscriptionResult


@dataclass
class TranscriptionUpdatedEvent(Event):
    """Event published each time a frame of the live stream was transcribed."""

    result: TranscriptionResult
