from dataclasses import dataclass

from gwaggli.Core.Events.event import Event
from gwaggli.Features.AudioCapture.Models.AudioChunk import AudioChunk


@dataclass
class AudioChunkCapturedEvent(Event):
    """
    Published by audio sources for every span of captured audio.

    Finite sources (files, fixed events) flag their final chunk with
    is_last so that consumers can end the stream; live devices never do.
    """

    audio_chunk: AudioChunk

    is_last: bool = False

    @property
    def sample_rate(self) -> int:
        return self.audio_chunk.sample_rate
