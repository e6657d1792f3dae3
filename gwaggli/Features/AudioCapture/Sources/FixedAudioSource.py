import logging

from gwaggli.Core.Common.Interfaces.audio_source import IAudioSource
from gwaggli.Core.Events.event_bus import EventPublisher
from gwaggli.Features.AudioCapture.Events.AudioChunkCapturedEvent import AudioChunkCapturedEvent

logger = logging.getLogger(__name__)


class FixedAudioSource(IAudioSource):
    """
    Source that publishes a single pre-built event.

    Owns no external resources; used to drive the pipeline deterministically
    without audio hardware.
    """

    def __init__(self, event: AudioChunkCapturedEvent):
        self.event = event

    def produce(self, publisher: EventPublisher) -> None:
        delivered = publisher.publish(self.event)
        logger.debug(f"Published fixed {self.event.audio_chunk!r} to {delivered} subscribers")
