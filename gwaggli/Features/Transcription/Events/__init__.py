from .TranscriptionUpdatedEvent import TranscriptionUpdatedEvent

__all__ = ['TranscriptionUpdatedEvent']
