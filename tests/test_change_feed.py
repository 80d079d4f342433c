import json

from bloodcamp.services.change_feed import ChangeFeed, format_sse, stream_events


def test_publish_reaches_every_subscriber():
    feed = ChangeFeed()
    first, second = feed.subscribe(), feed.subscribe()

    delivered = feed.publish_insert({"id": "r1"})

    assert delivered == 2
    assert first.get_nowait()["record"] == {"id": "r1"}
    assert second.get_nowait()["type"] == "INSERT"


def test_unsubscribed_queue_gets_nothing():
    feed = ChangeFeed()
    q = feed.subscribe()
    feed.unsubscribe(q)

    assert feed.publish_insert({"id": "r1"}) == 0
    assert q.empty()
    assert feed.subscriber_count == 0


def test_full_subscriber_drops_event(caplog):
    caplog.set_level("WARNING", logger="bloodcamp.feed")
    feed = ChangeFeed(maxsize=1)
    q = feed.subscribe()

    feed.publish_insert({"id": "r1"})
    delivered = feed.publish_insert({"id": "r2"})

    assert delivered == 0
    assert q.get_nowait()["record"]["id"] == "r1"
    assert any("[FEED-DROP]" in m for m in caplog.messages)


def test_format_sse_keeps_unicode():
    frame = format_sse({"type": "INSERT", "table": "blood_donations", "record": {"full_name": "राम"}})

    assert frame.startswith("event: INSERT\ndata: ")
    assert frame.endswith("\n\n")
    assert "राम" in frame
    payload = json.loads(frame.split("data: ", 1)[1])
    assert payload["record"]["full_name"] == "राम"


def test_stream_yields_events_then_unsubscribes():
    feed = ChangeFeed()
    stream = stream_events(feed, keepalive=0.01, max_events=1)

    assert next(stream) == ": connected\n\n"
    assert feed.subscriber_count == 1
    assert next(stream) == ": keepalive\n\n"

    feed.publish_insert({"id": "r1"})
    frame = next(stream)
    assert frame.startswith("event: INSERT")
    assert list(stream) == []
    assert feed.subscriber_count == 0


def test_closing_stream_unsubscribes():
    feed = ChangeFeed()
    stream = stream_events(feed, keepalive=0.01)
    next(stream)
    stream.close()

    assert feed.subscriber_count == 0
