"""
Tests for the EventBus publish/subscribe fan-out.

Covers ordering, exactly-once delivery, late subscribers, lossy lag handling
and closing behaviour, from both synchronous and asyncio receivers.
"""

import asyncio
import os
import sys
import threading
import unittest
from dataclasses import dataclass

# Add project root to path so we can import the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gwaggli.Core.Common.errors import ChannelClosedError, SubscriptionLaggedError
from gwaggli.Core.Events.event import Event
from gwaggli.Core.Events.event_bus import EventBus, get_event_bus, recv_with_timeout, reset_event_bus


@dataclass
class NumberEvent(Event):
    value: int = 0


@dataclass
class OtherEvent(Event):
    pass


class EventTest(unittest.TestCase):
    """Tests for the Event base class"""

    def test_event_metadata(self):
        """Events get a unique id, a creation time and their class name"""
        first = NumberEvent(value=1)
        second = NumberEvent(value=2)

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(first.name, "NumberEvent")
        self.assertGreater(first.created_at, 0)


class EventBusTest(unittest.TestCase):
    """Synchronous tests for EventBus and Subscription.try_recv"""

    def setUp(self):
        self.bus = EventBus(capacity=4)

    def drain(self, subscription):
        values = []
        while True:
            event = subscription.try_recv()
            if event is None:
                return values
            values.append(event.value)

    def test_events_arrive_in_publish_order(self):
        """A single producer's events are observed in publish order"""
        subscription = self.bus.subscribe()
        for i in range(4):
            self.bus.publish(NumberEvent(value=i))

        self.assertEqual(self.drain(subscription), [0, 1, 2, 3])

    def test_every_subscription_receives_each_event_once(self):
        """Each event reaches every subscription exactly once"""
        first = self.bus.subscribe()
        second = self.bus.subscribe()

        delivered = self.bus.publish(NumberEvent(value=7))

        self.assertEqual(delivered, 2)
        self.assertEqual(self.drain(first), [7])
        self.assertEqual(self.drain(second), [7])

    def test_late_subscriber_sees_only_later_events(self):
        """A subscription never observes events published before it existed"""
        early = self.bus.subscribe()
        self.bus.publish(NumberEvent(value=1))
        late = self.bus.subscribe()
        self.bus.publish(NumberEvent(value=2))

        self.assertEqual(self.drain(early), [1, 2])
        self.assertEqual(self.drain(late), [2])

    def test_subscription_filters_by_event_type(self):
        """Subscriptions only receive instances of their event type"""
        numbers = self.bus.subscribe(NumberEvent)
        everything = self.bus.subscribe()

        self.bus.publish(OtherEvent())
        self.bus.publish(NumberEvent(value=3))

        self.assertEqual(self.drain(numbers), [3])
        self.assertEqual(everything.pending, 2)

    def test_lagging_subscription_reports_missed_events(self):
        """Overflow drops the oldest events and reports the count once"""
        subscription = self.bus.subscribe()
        for i in range(6):
            self.bus.publish(NumberEvent(value=i))

        with self.assertRaises(SubscriptionLaggedError) as context:
            subscription.try_recv()
        self.assertEqual(context.exception.missed, 2)

        # Continues with the oldest retained event
        self.assertEqual(self.drain(subscription), [2, 3, 4, 5])
        self.assertEqual(subscription.missed_total, 2)
        self.assertEqual(self.bus.dropped_total, 2)

    def test_publish_without_subscribers_is_a_no_op(self):
        """Publishing to nobody returns 0 by default"""
        self.assertEqual(self.bus.publish(NumberEvent(value=1)), 0)

    def test_publish_without_subscribers_in_strict_mode(self):
        """Strict buses refuse to publish into the void"""
        bus = EventBus(require_subscribers=True)
        with self.assertRaises(ChannelClosedError):
            bus.publish(NumberEvent(value=1))

    def test_closed_bus_drains_then_reports_closure(self):
        """After close() queued events are still delivered, then ChannelClosedError"""
        subscription = self.bus.subscribe()
        self.bus.publish(NumberEvent(value=1))
        self.bus.close()

        self.assertEqual(subscription.try_recv().value, 1)
        with self.assertRaises(ChannelClosedError):
            subscription.try_recv()
        with self.assertRaises(ChannelClosedError):
            self.bus.publish(NumberEvent(value=2))
        with self.assertRaises(ChannelClosedError):
            self.bus.subscribe()

    def test_closing_subscription_unsubscribes(self):
        """A closed subscription no longer counts as a subscriber"""
        with self.bus.subscribe():
            self.assertEqual(self.bus.subscriber_count, 1)
        self.assertEqual(self.bus.subscriber_count, 0)

    def test_invalid_capacity(self):
        """Capacity must be positive"""
        with self.assertRaises(ValueError):
            EventBus(capacity=0)

    def test_default_bus_is_shared(self):
        """get_event_bus returns one bus until it is reset"""
        try:
            self.assertIs(get_event_bus(), get_event_bus())
            first = get_event_bus()
            reset_event_bus()
            self.assertTrue(first.closed)
            self.assertIsNot(get_event_bus(), first)
        finally:
            reset_event_bus()


class AsyncEventBusTest(unittest.IsolatedAsyncioTestCase):
    """Tests for asyncio receivers"""

    async def test_recv_wakes_on_publish_from_another_thread(self):
        """Events published from a plain thread wake an awaiting receiver"""
        bus = EventBus()
        subscription = bus.subscribe(NumberEvent)

        def produce():
            for i in range(100):
                bus.publish(NumberEvent(value=i))

        thread = threading.Thread(target=produce)
        thread.start()

        values = [(await recv_with_timeout(subscription, 5.0)).value for _ in range(100)]
        thread.join()

        self.assertEqual(values, list(range(100)))

    async def test_async_iteration_stops_on_close(self):
        """Iterating a subscription ends once the bus is closed and drained"""
        bus = EventBus()
        subscription = bus.subscribe(NumberEvent)
        bus.publish(NumberEvent(value=1))
        bus.publish(NumberEvent(value=2))
        bus.close()

        values = [event.value async for event in subscription]
        self.assertEqual(values, [1, 2])

    async def test_recv_raises_when_closed_while_waiting(self):
        """A waiting receiver is released with ChannelClosedError on close"""
        bus = EventBus()
        subscription = bus.subscribe()

        receiver = asyncio.ensure_future(subscription.recv())
        await asyncio.sleep(0)
        bus.close()

        with self.assertRaises(ChannelClosedError):
            await asyncio.wait_for(receiver, 5.0)

    async def test_recv_with_timeout_expires(self):
        """recv_with_timeout fails when nothing is published"""
        bus = EventBus()
        subscription = bus.subscribe()

        with self.assertRaises(asyncio.TimeoutError):
            await recv_with_timeout(subscription, 0.05)


if __name__ == "__main__":
    unittest.main()
