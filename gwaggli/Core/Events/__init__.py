"""
Events module for Gwaggli.

This module provides event-related functionality for the event-driven architecture,
including the base Event class and the EventBus implementation.
"""

from .event import Event
from .event_bus import (
    EventBus,
    EventPublisher,
    IEventBus,
    Subscription,
    get_event_bus,
    recv_with_timeout,
    reset_event_bus,
)

__all__ = [
    'Event',
    'EventBus',
    'EventPublisher',
    'IEventBus',
    'Subscription',
    'get_event_bus',
    'recv_with_timeout',
    'reset_event_bus'
]
