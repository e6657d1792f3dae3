"""
Base Event class for the event-driven architecture.

Events are immutable facts published on the EventBus. Subclasses are
dataclasses that add their own payload fields.
"""

import time
import uuid
from dataclasses import dataclass


@dataclass
class Event:
    """
    Base class for all domain events.

    Every event receives a unique id, a creation time in nanoseconds since the
    epoch and a name (the class name unless a subclass sets one).
    """

    def __post_init__(self):
        self.id = str(uuid.uuid4())
        self.created_at = time.time_ns()
        if getattr(self, 'name', None) is None:
            self.name = type(self).__name__
