import pytest

from core.services.notification_service import NotificationService
from tests.helpers import VIEWER_ID, envelope


def notification(notification_id, read=False, **fields):
    return {"_id": notification_id, "type": "follow", "message": f"Note {notification_id}", "read": read, **fields}


@pytest.fixture
def notifications(make_store, channel):
    store = make_store(NotificationService)
    store.attach(channel)
    return store


@pytest.fixture
async def inbox(notifications, server, viewer):
    server.add("GET", "/auth/notifications", envelope([notification("n1"), notification("n2", read=True)]))
    await notifications.fetch_notifications()
    return notifications


async def test_fetch_counts_unread(inbox):
    assert [n.id for n in inbox.notifications] == ["n1", "n2"]
    assert inbox.unread_count == 1


async def test_fetch_without_session_is_a_no_op(notifications, server):
    result = await notifications.fetch_notifications()

    assert not result.success
    assert server.requests == []


async def test_mark_as_read_over_socket(inbox, channel, server):
    await channel.connect(VIEWER_ID)
    before = len(server.requests)

    result = await inbox.mark_as_read("n1")

    assert result.success
    assert channel.emitted == [("markNotificationAsRead", {"userId": VIEWER_ID, "notificationId": "n1"})]
    assert len(server.requests) == before
    assert inbox.unread_count == 0


async def test_mark_as_read_falls_back_to_rest(inbox, server):
    server.add("PUT", "/auth/notifications/n1", envelope([notification("n1", read=True), notification("n2", read=True)]))

    result = await inbox.mark_as_read("n1")

    assert result.success
    assert len(server.calls("PUT", "/auth/notifications/n1")) == 1
    assert all(n.read for n in inbox.notifications)
    assert inbox.unread_count == 0


async def test_mark_all_as_read_over_socket(inbox, channel):
    await channel.connect(VIEWER_ID)

    await inbox.mark_all_as_read()

    assert channel.emitted == [("markAllNotificationsAsRead", VIEWER_ID)]
    assert inbox.unread_count == 0


async def test_notification_push_prepends_and_toasts(inbox, channel, notifier):
    channel.push("notification", notification("n3", message="Ann followed you", **{"from": "u-ann"}))

    assert inbox.notifications[0].id == "n3"
    assert inbox.notifications[0].sender == "u-ann"
    assert inbox.unread_count == 2
    assert notifier.messages("info") == ["Ann followed you"]


async def test_notifications_push_replaces_and_recounts(inbox, channel):
    channel.push("notifications", [notification("n7"), notification("n8"), notification("n9", read=True)])

    assert [n.id for n in inbox.notifications] == ["n7", "n8", "n9"]
    assert inbox.unread_count == 2
