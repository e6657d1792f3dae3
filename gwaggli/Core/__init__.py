"""
Core module for Gwaggli.

This module provides the core infrastructure components for the vertical slice architecture,
including events, errors, and interfaces for the system's components.
"""

# Re-export core components
from .Events import Event, EventBus, EventPublisher, IEventBus, Subscription
from .Common.Interfaces import IAudioSource, ITranscriptionEngine
from .Common import errors

__all__ = [
    # Events
    'Event',
    'EventBus',
    'EventPublisher',
    'IEventBus',
    'Subscription',

    # Feature interfaces
    'IAudioSource',
    'ITranscriptionEngine',

    'errors'
]
