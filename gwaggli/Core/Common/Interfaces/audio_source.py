"""
Audio Source interface.

This module defines the IAudioSource interface that abstracts where audio chunk
events originate: a live capture device, a file, or a single pre-built event.
"""

from abc import ABC, abstractmethod

from gwaggli.Core.Events.event_bus import EventPublisher


class IAudioSource(ABC):
    """
    Interface for components that turn captured audio into
    AudioChunkCapturedEvents and publish them.

    Implementations are injected where a source is needed, so tests can swap a
    deterministic source in without touching production code paths.
    """

    @abstractmethod
    def produce(self, publisher: EventPublisher) -> None:
        """
        Start publishing audio chunk events.

        Device-backed sources return immediately and keep publishing from their
        capture thread; finite sources may publish everything before returning.

        Args:
            publisher: Publish handle of the event bus
        """
        pass

    def close(self) -> None:
        """Release any external resources held by the source."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
