import threading
import pytest
from enum import Enum, auto
from voxelcore.core.events import EventBus, Event

class MockEvent(Enum):
    TEST_EVENT = auto()
    OTHER_EVENT = auto()

def test_event_bus_subscribe_publish(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT, data="test")

    assert len(received) == 1
    assert received[0].type == MockEvent.TEST_EVENT
    assert received[0].data["data"] == "test"
    assert received[0]["data"] == "test"

def test_event_bus_unsubscribe(event_bus):
    received = []
    def handler(event):
        received.append(event)

    event_bus.subscribe(MockEvent.TEST_EVENT, handler)
    event_bus.unsubscribe(MockEvent.TEST_EVENT, handler)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 0

def test_event_priority(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("low"), priority=1, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("high"), priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("normal"), priority=5, weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["high", "normal", "low"]

def test_equal_priority_keeps_subscription_order(event_bus):
    order = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("first"), weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: order.append("second"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["first", "second"]

def test_event_consumption(event_bus):
    received = []

    def consumer(event):
        received.append("consumer")
        event.consume()

    def later_handler(event):
        received.append("later")

    event_bus.subscribe(MockEvent.TEST_EVENT, consumer, priority=10)
    event_bus.subscribe(MockEvent.TEST_EVENT, later_handler, priority=5)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert received == ["consumer"]

def test_one_shot_handler(event_bus):
    received = []

    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append(e), one_shot=True, weak=False)
    event_bus.publish(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1
    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)

def test_handler_error_does_not_stop_dispatch(event_bus, caplog):
    received = []

    def broken(event):
        raise RuntimeError("boom")

    event_bus.subscribe(MockEvent.TEST_EVENT, broken, priority=10, weak=False)
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: received.append(e), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert len(received) == 1
    assert "Error in event handler" in caplog.text

def test_nested_publish_is_queued(event_bus):
    order = []

    def on_test(event):
        order.append("test-start")
        event_bus.publish(MockEvent.OTHER_EVENT)
        order.append("test-end")

    event_bus.subscribe(MockEvent.TEST_EVENT, on_test, weak=False)
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: order.append("other"), weak=False)

    event_bus.publish(MockEvent.TEST_EVENT)

    assert order == ["test-start", "test-end", "other"]

def test_weak_handler_removed_when_collected(event_bus):
    class Listener:
        def __init__(self):
            self.calls = 0

        def on_event(self, event):
            self.calls += 1

    listener = Listener()
    event_bus.subscribe(MockEvent.TEST_EVENT, listener.on_event)
    assert event_bus.has_subscribers(MockEvent.TEST_EVENT)

    del listener
    import gc
    gc.collect()

    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)
    event_bus.publish(MockEvent.TEST_EVENT)

def test_clear(event_bus):
    event_bus.subscribe(MockEvent.TEST_EVENT, lambda e: None, weak=False)
    event_bus.subscribe(MockEvent.OTHER_EVENT, lambda e: None, weak=False)

    event_bus.clear(MockEvent.TEST_EVENT)
    assert not event_bus.has_subscribers(MockEvent.TEST_EVENT)
    assert event_bus.has_subscribers(MockEvent.OTHER_EVENT)

    event_bus.clear()
    assert not event_bus.has_subscribers(MockEvent.OTHER_EVENT)

def test_event_get_default():
    event = Event(type=MockEvent.TEST_EVENT, data={"a": 1})
    assert event.get("a") == 1
    assert event.get("missing", 5) == 5

def test_publish_from_another_thread_is_not_queued(event_bus):
    delivered = []
    seen_during_handler = []

    def on_test(event):
        worker = threading.Thread(
            target=event_bus.publish, args=(MockEvent.OTHER_EVENT,), name="worker"
        )
        worker.start()
        worker.join(timeout=5)
        seen_during_handler.append(list(delivered))

    event_bus.subscribe(MockEvent.TEST_EVENT, on_test, weak=False)
    event_bus.subscribe(
        MockEvent.OTHER_EVENT,
        lambda e: delivered.append(threading.current_thread().name),
        weak=False,
    )

    event_bus.publish(MockEvent.TEST_EVENT)

    assert seen_during_handler == [["worker"]]
    assert delivered == ["worker"]
