import pytest

from core.services.event_service import EventService
from tests.helpers import VIEWER_ID, envelope


def event(event_id, **fields):
    return {"_id": event_id, "name": f"Event {event_id}", "chat": [], "participants": [], **fields}


@pytest.fixture
def events(make_store, channel):
    store = make_store(EventService)
    store.attach(channel)
    return store


async def test_get_events_uses_page_limit(events, server):
    server.add("GET", "/events", envelope([event("e1"), event("e2")]))

    result = await events.get_events()

    assert [e.id for e in result.data] == ["e1", "e2"]
    assert server.requests[0].url.params["limit"] == "10"
    assert "category" not in server.requests[0].url.params


async def test_created_event_is_not_duplicated_by_its_broadcast(events, server, channel, viewer, notifier):
    server.add("POST", "/events", envelope(event("e9", name="Park Run")))

    result = await events.create_event({"name": "Park Run", "date": "2026-11-01"})
    channel.push("newEvent", event("e9", name="Park Run"))

    assert result.success
    assert [e.id for e in events.events] == ["e9"]
    assert notifier.messages("success") == ["Event created successfully"]


async def test_create_event_requires_login(events, server, notifier):
    result = await events.create_event({"name": "Park Run"})

    assert not result.success
    assert server.requests == []
    assert notifier.messages("error") == ["Please login to create events"]


async def test_join_event_replaces_held_copies(events, server, viewer):
    server.add("GET", "/events/e1", envelope(event("e1")))
    await events.get_event_by_id("e1")
    server.add("POST", "/events/e1/join", envelope(event("e1", participants=[VIEWER_ID])))

    result = await events.join_event("e1")

    assert result.success
    assert events.current_event.participants == [VIEWER_ID]


async def test_rest_chat_appends_bare_entry(events, server, viewer):
    server.add("GET", "/events/e1", envelope(event("e1")))
    await events.get_event_by_id("e1")
    server.add("POST", "/events/e1/chat", {"_id": "m1", "user": VIEWER_ID, "message": "On my way"})

    result = await events.send_message("e1", "On my way")

    assert result.success
    assert events.current_event.chat == [{"_id": "m1", "user": VIEWER_ID, "message": "On my way"}]


async def test_new_message_push_is_deduplicated(events, server, channel):
    server.add("GET", "/events/e1", envelope(event("e1")))
    await events.get_event_by_id("e1")
    message = {"_id": "m1", "message": "Warm-up at 9"}

    channel.push("newMessage", message)
    channel.push("newMessage", {**message, "eventId": "e1"})

    assert [m["_id"] for m in events.current_event.chat] == ["m1"]


async def test_socket_rooms_need_a_connection(events, channel, viewer):
    closed = await events.join_event_room("e1")
    assert not closed.success
    assert channel.emitted == []

    await channel.connect(VIEWER_ID)
    await events.join_event_room("e1")
    await events.send_event_message("e1", "Bring water")
    await events.leave_event_room("e1")

    assert channel.emitted == [
        ("join_event", "e1"),
        ("event_message", {"eventId": "e1", "message": "Bring water"}),
        ("leave_event", "e1"),
    ]
    assert events.rooms == []


async def test_updated_and_deleted_pushes(events, server, channel):
    server.add("GET", "/events", envelope([event("e1"), event("e2")]))
    server.add("GET", "/events/e2", envelope(event("e2")))
    await events.get_events()
    await events.get_event_by_id("e2")

    channel.push("eventUpdated", event("e1", status="cancelled"))
    channel.push("eventDeleted", "e2")

    assert events.events[0].status == "cancelled"
    assert [e.id for e in events.events] == ["e1"]
    assert events.current_event is None


async def test_reset_filters_is_idempotent(events):
    events.set_filters(category="running", search="5k")

    assert events.reset_filters() == events.reset_filters()
    assert events.filters.category == "all"
