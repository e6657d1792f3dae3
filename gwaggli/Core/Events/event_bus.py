"""
EventBus implementation for publish/subscribe fan-out of domain events.

Producers publish from any thread (including the real-time audio callback
thread); consumers receive from asyncio tasks through Subscription objects.

Delivery is LOSSY by contract: each subscription owns a bounded queue. When a
subscription falls more than `capacity` events behind, its oldest unread
events are dropped and the next receive raises SubscriptionLaggedError with the
number of missed events. The receive after that continues with the oldest
retained event.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, List, Optional, Tuple, Type

from gwaggli.Core.Common.errors import ChannelClosedError, SubscriptionLaggedError
from gwaggli.Core.Events.event import Event

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


class IEventBus(ABC):
    """Interface for the event bus."""

    @abstractmethod
    def publish(self, event: Event) -> int:
        """
        Publish an event to every live subscription.

        Returns:
            int: Number of subscriptions the event was delivered to
        """
        pass

    @abstractmethod
    def subscribe(self, event_type: Type[Event] = Event) -> 'Subscription':
        """
        Create a subscription observing events published after this call.

        Args:
            event_type: Only events that are instances of this type are delivered
        """
        pass


class Subscription:
    """
    Per-consumer view of the bus.

    Only observes events published after it was created. Not shared between
    consumers: one task should receive from a subscription at a time.
    """

    def __init__(self, bus: 'EventBus', event_type: Type[Event], capacity: int):
        self._bus = bus
        self.event_type = event_type
        self.capacity = capacity
        self._queue: Deque[Event] = deque()
        self._lock = threading.Lock()
        self._missed = 0
        self.missed_total = 0
        self._closed = False
        self._waiter: Optional[Tuple[asyncio.AbstractEventLoop, asyncio.Future]] = None

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    @property
    def closed(self) -> bool:
        return self._closed

    def _deliver(self, event: Event) -> bool:
        """Called by the bus with the bus lock held. Returns False if filtered out."""
        if not isinstance(event, self.event_type):
            return False

        with self._lock:
            if self._closed:
                return False
            if len(self._queue) >= self.capacity:
                self._queue.popleft()
                self._missed += 1
                self.missed_total += 1
            self._queue.append(event)
            self._wake_locked()
        return True

    def _shutdown(self) -> None:
        with self._lock:
            self._closed = True
            self._wake_locked()

    def _wake_locked(self) -> None:
        if self._waiter is None:
            return
        loop, future = self._waiter
        self._waiter = None
        try:
            loop.call_soon_threadsafe(_resolve, future)
        except RuntimeError:
            # Loop already closed; the receiver is gone.
            logger.debug("Dropping wake-up for a closed event loop")

    def try_recv(self) -> Optional[Event]:
        """
        Receive without waiting.

        Returns:
            Optional[Event]: The next event, or None if nothing is queued

        Raises:
            SubscriptionLaggedError: If events were dropped since the last receive
            ChannelClosedError: If the bus is closed and the queue is drained
        """
        with self._lock:
            return self._take_locked()

    def _take_locked(self) -> Optional[Event]:
        if self._missed:
            missed, self._missed = self._missed, 0
            raise SubscriptionLaggedError(missed)
        if self._queue:
            return self._queue.popleft()
        if self._closed:
            raise ChannelClosedError("Event bus subscription is closed")
        return None

    async def recv(self) -> Event:
        """
        Wait for the next event.

        Raises:
            SubscriptionLaggedError: If events were dropped since the last receive
            ChannelClosedError: If the bus is closed and the queue is drained
        """
        loop = asyncio.get_running_loop()
        while True:
            with self._lock:
                event = self._take_locked()
                if event is not None:
                    return event
                future = loop.create_future()
                self._waiter = (loop, future)
            try:
                await future
            finally:
                with self._lock:
                    if self._waiter is not None and self._waiter[1] is future:
                        self._waiter = None

    def __aiter__(self):
        return self

    async def __anext__(self) -> Event:
        while True:
            try:
                return await self.recv()
            except SubscriptionLaggedError as e:
                logger.warning(f"{e}; continuing with oldest retained event")
            except ChannelClosedError:
                raise StopAsyncIteration

    def close(self) -> None:
        """Unsubscribe; queued events are discarded."""
        self._bus._unsubscribe(self)
        with self._lock:
            self._queue.clear()
        self._shutdown()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def _resolve(future: asyncio.Future) -> None:
    if not future.done():
        future.set_result(None)


class EventPublisher:
    """Lightweight publish handle; share it freely between producers."""

    __slots__ = ('_bus',)

    def __init__(self, bus: 'EventBus'):
        self._bus = bus

    def publish(self, event: Event) -> int:
        return self._bus.publish(event)


class EventBus(IEventBus):
    """
    Multi-producer, multi-consumer broadcast bus with bounded, lossy
    per-subscription queues.

    Args:
        capacity: Maximum unread events per subscription before the oldest are dropped
        require_subscribers: If True, publishing with no live subscription raises
            ChannelClosedError; otherwise it is a no-op returning 0
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, require_subscribers: bool = False):
        if capacity < 1:
            raise ValueError(f"Capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.require_subscribers = require_subscribers
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    @property
    def dropped_total(self) -> int:
        """Events dropped across all live subscriptions because of lag."""
        with self._lock:
            return sum(s.missed_total for s in self._subscriptions)

    @property
    def closed(self) -> bool:
        return self._closed

    def publisher(self) -> EventPublisher:
        return EventPublisher(self)

    def subscribe(self, event_type: Type[Event] = Event) -> Subscription:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("Cannot subscribe to a closed event bus")
            subscription = Subscription(self, event_type, self.capacity)
            self._subscriptions.append(subscription)
        logger.debug(f"New subscription for {event_type.__name__}")
        return subscription

    def publish(self, event: Event) -> int:
        with self._lock:
            if self._closed:
                raise ChannelClosedError("Cannot publish on a closed event bus")
            if not self._subscriptions:
                if self.require_subscribers:
                    raise ChannelClosedError(
                        f"No active subscriptions to receive {type(event).__name__}")
                logger.debug(f"Dropping {type(event).__name__}: no subscribers")
                return 0

            delivered = 0
            for subscription in self._subscriptions:
                if subscription._deliver(event):
                    delivered += 1
        return delivered

    def _unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)
                if subscription.missed_total:
                    logger.warning(
                        f"Subscription for {subscription.event_type.__name__} closed after "
                        f"dropping {subscription.missed_total} events")

    def close(self) -> None:
        """Close the bus; subscriptions drain what is queued, then report closure."""
        with self._lock:
            self._closed = True
            subscriptions = list(self._subscriptions)
        for subscription in subscriptions:
            subscription._shutdown()


_default_bus: Optional[EventBus] = None
_default_bus_lock = threading.Lock()


def get_event_bus() -> EventBus:
    """Return the process-wide event bus, creating it on first use."""
    global _default_bus
    with _default_bus_lock:
        if _default_bus is None or _default_bus.closed:
            _default_bus = EventBus()
        return _default_bus


def reset_event_bus() -> None:
    """Close and forget the process-wide event bus."""
    global _default_bus
    with _default_bus_lock:
        if _default_bus is not None:
            _default_bus.close()
        _default_bus = None


async def recv_with_timeout(subscription: Subscription, timeout: float = 10.0) -> Event:
    """
    Receive one event or fail after `timeout` seconds.

    Meant for test harnesses that expect at least one event within a deadline.

    Raises:
        asyncio.TimeoutError: If nothing arrived in time
    """
    return await asyncio.wait_for(subscription.recv(), timeout)
