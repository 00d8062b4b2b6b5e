"""
Loopback realtime channel.
Used when realtime is disabled and in tests: nothing leaves the process,
emits are recorded and incoming events are injected with `push`.
"""

import logging
from typing import Any, List, Optional, Tuple

from core.interfaces.realtime import Handler, IRealtimeChannel
from infrastructure.realtime.registry import ListenerRegistry

logger = logging.getLogger(__name__)


class MemoryChannel(IRealtimeChannel):
    def __init__(self):
        self.registry = ListenerRegistry()
        self.emitted: List[Tuple[str, Any]] = []
        self.user_id: Optional[str] = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self, user_id: str) -> None:
        self.user_id = user_id
        self._connected = True
        logger.debug(f"[REALTIME] Loopback channel open for user {user_id}")

    async def disconnect(self) -> None:
        self._connected = False
        self.user_id = None

    def on(self, event: str, handler: Handler, owner: Optional[object] = None) -> None:
        self.registry.add(event, handler, owner)

    def off(self, event: str, handler: Optional[Handler] = None, owner: Optional[object] = None) -> int:
        return self.registry.remove(event, handler, owner)

    async def emit(self, event: str, payload: Any = None) -> None:
        if not self._connected:
            logger.warning(f"[REALTIME] Dropped emit '{event}': channel not connected")
            return
        self.emitted.append((event, payload))

    def listener_count(self, event: Optional[str] = None) -> int:
        return self.registry.count(event)

    def push(self, event: str, payload: Any = None) -> int:
        """Deliver an incoming event as if the server had sent it"""
        return self.registry.dispatch(event, payload)
