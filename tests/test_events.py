"""
Tests for the event bus and event log.
"""

from boardsim.events import EventBus, EventType


def test_emit_records_and_delivers():
    bus = EventBus()
    received = []
    bus.subscribe(received.append)

    event = bus.emit(EventType.TURN_START, player_id=1, turn=0)

    assert received == [event]
    assert bus.event_log.get_events() == [event]
    assert event.details == {"turn": 0}


def test_unsubscribe():
    bus = EventBus()
    received = []
    unsubscribe = bus.subscribe(received.append)
    unsubscribe()
    unsubscribe()

    bus.emit(EventType.GAME_START)
    assert received == []
    assert bus.subscriber_count == 0


def test_failing_subscriber_does_not_stop_delivery():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("listener crashed")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    bus.emit(EventType.GAME_START)
    assert len(received) == 1
    assert len(bus.event_log.events) == 1


def test_log_queries():
    bus = EventBus()
    for turn in range(12):
        bus.emit(EventType.TURN_START, player_id=turn % 2, turn=turn)
    bus.emit(EventType.GAME_END)

    log = bus.event_log
    assert len(log.get_recent_events(5)) == 5
    assert log.get_recent_events(1)[0].event_type == EventType.GAME_END
    assert len(log.of_type(EventType.TURN_START)) == 12

    log.clear()
    assert log.get_events() == []
