import pytest

from infrastructure.realtime import ListenerRegistry, MemoryChannel


class Owner:
    def __init__(self):
        self.seen = []

    def handle(self, payload):
        self.seen.append(payload)


def test_same_owner_and_handler_registered_once():
    registry = ListenerRegistry()
    owner = Owner()

    assert registry.add("newEvent", owner.handle, owner) is True
    assert registry.add("newEvent", owner.handle, owner) is False
    assert registry.count("newEvent") == 1


def test_remove_by_owner_leaves_other_owners():
    registry = ListenerRegistry()
    first, second = Owner(), Owner()
    registry.add("newEvent", first.handle, first)
    registry.add("newEvent", second.handle, second)

    assert registry.remove("newEvent", owner=first) == 1
    assert registry.handlers("newEvent") == [second.handle]
    assert registry.remove("newEvent") == 1
    assert registry.events() == []


def test_failing_handler_does_not_starve_the_rest():
    registry = ListenerRegistry()
    owner = Owner()

    def broken(payload):
        raise ValueError("bad payload")

    registry.add("notification", broken)
    registry.add("notification", owner.handle, owner)

    assert registry.dispatch("notification", {"_id": "n1"}) == 2
    assert owner.seen == [{"_id": "n1"}]


def test_async_handler_is_refused_at_registration():
    channel = MemoryChannel()

    async def handle(payload):
        pass

    with pytest.raises(TypeError):
        channel.on("notification", handle)

    assert channel.push("notification", {"_id": "n1"}) == 0


async def test_emit_while_disconnected_is_dropped():
    channel = MemoryChannel()

    await channel.emit("getNotifications", "u1")
    await channel.connect("u1")
    await channel.emit("getNotifications", "u1")

    assert channel.emitted == [("getNotifications", "u1")]
