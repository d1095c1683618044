"""Tests for event bus."""

from earforge.core.events import EventBus, EventType


def test_subscribe_publish():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.SCAN_PROGRESS, lambda **kw: received.append(kw))
    bus.publish(EventType.SCAN_PROGRESS, progress=40, ready=False)
    assert len(received) == 1
    assert received[0] == {"progress": 40, "ready": False}


def test_unsubscribe():
    bus = EventBus()
    received = []
    handler = lambda **kw: received.append(kw)
    bus.subscribe(EventType.SCAN_PROGRESS, handler)
    bus.unsubscribe(EventType.SCAN_PROGRESS, handler)
    bus.publish(EventType.SCAN_PROGRESS, progress=40, ready=False)
    assert len(received) == 0


def test_multiple_subscribers():
    bus = EventBus()
    a, b = [], []
    bus.subscribe(EventType.SCAN_RESET, lambda **kw: a.append(1))
    bus.subscribe(EventType.SCAN_RESET, lambda **kw: b.append(1))
    bus.publish(EventType.SCAN_RESET)
    assert len(a) == 1
    assert len(b) == 1


def test_different_events_independent():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.CAPTURE_COMPLETE, lambda **kw: received.append("capture"))
    bus.publish(EventType.SCAN_RESET)
    assert len(received) == 0


def test_handler_may_unsubscribe_during_publish():
    bus = EventBus()
    calls = []

    def once(**kw):
        calls.append(1)
        bus.unsubscribe(EventType.SCAN_RESET, once)

    bus.subscribe(EventType.SCAN_RESET, once)
    bus.publish(EventType.SCAN_RESET)
    bus.publish(EventType.SCAN_RESET)
    assert calls == [1]


def test_clear():
    bus = EventBus()
    bus.subscribe(EventType.SCAN_RESET, lambda **kw: None)
    bus.clear()
    # Should not raise
    bus.publish(EventType.SCAN_RESET)
