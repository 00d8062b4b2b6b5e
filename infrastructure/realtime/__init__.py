from infrastructure.realtime.registry import ListenerRegistry
from infrastructure.realtime.memory_channel import MemoryChannel
from infrastructure.realtime.socketio_channel import SocketIOChannel

__all__ = [
    "ListenerRegistry",
    "MemoryChannel",
    "SocketIOChannel",
]
