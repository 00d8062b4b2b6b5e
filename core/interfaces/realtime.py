"""
Realtime channel interface - push transport consumed by the domain stores.
Delivery is fire-and-forget: no acks, no backpressure.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

Handler = Callable[[Any], None]


class IRealtimeChannel(ABC):
    """Socket-like handle shared (subscribe-only) by every store"""

    @property
    @abstractmethod
    def connected(self) -> bool:
        pass

    @abstractmethod
    async def connect(self, user_id: str) -> None:
        """Open the channel for an authenticated user; raises RealtimeError on failure"""
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        pass

    @abstractmethod
    def on(self, event: str, handler: Handler, owner: Optional[object] = None) -> None:
        """Attach a handler; `owner` scopes it for a later symmetric `off`"""
        pass

    @abstractmethod
    def off(self, event: str, handler: Optional[Handler] = None, owner: Optional[object] = None) -> int:
        """
        Detach handlers for `event`.
        With neither handler nor owner every handler of the event goes.
        Returns the number of handlers removed.
        """
        pass

    @abstractmethod
    async def emit(self, event: str, payload: Any = None) -> None:
        pass

    @abstractmethod
    def listener_count(self, event: Optional[str] = None) -> int:
        pass
