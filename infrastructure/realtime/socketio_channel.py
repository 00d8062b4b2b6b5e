"""
Socket.IO realtime channel.

python-socketio AsyncClient over an aiohttp session that carries the REST
session cookies. Exactly one Socket.IO handler is wired per event name; it
fans out to the store handlers held in the ListenerRegistry, so store
attach/detach never touches the socket itself.
"""

import logging
from typing import Any, Callable, Dict, Optional, Set

import aiohttp
import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from config.features import features
from config.settings import settings
from core.domain.exceptions import RealtimeError
from core.interfaces.realtime import Handler, IRealtimeChannel
from infrastructure.realtime.registry import ListenerRegistry

logger = logging.getLogger(__name__)


class SocketIOChannel(IRealtimeChannel):
    def __init__(
        self,
        url: Optional[str] = None,
        cookies: Optional[Callable[[], Dict[str, str]]] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url or settings.socket_url
        self.timeout = timeout or settings.request_timeout
        self._cookies = cookies or (lambda: {})
        self.registry = ListenerRegistry()
        self._sio: Optional[socketio.AsyncClient] = None
        self._http: Optional[aiohttp.ClientSession] = None
        self._wired: Set[str] = set()
        self.user_id: Optional[str] = None

    @property
    def connected(self) -> bool:
        return self._sio is not None and self._sio.connected

    # === LIFECYCLE ===

    async def connect(self, user_id: str) -> None:
        if self.connected and self.user_id == user_id:
            return
        await self.disconnect()

        self._http = aiohttp.ClientSession(cookies=self._cookies())
        self._sio = socketio.AsyncClient(
            reconnection=True,
            logger=False,
            engineio_logger=False,
            http_session=self._http,
        )
        self._sio.on("connect", self._on_connect)
        self._sio.on("disconnect", self._on_disconnect)
        self._sio.on("connect_error", self._on_connect_error)
        self._wired = set()
        for event in self.registry.events():
            self._wire(event)

        self.user_id = user_id
        logger.info(f"[REALTIME] Connecting to {self.url} as {user_id}")
        try:
            await self._sio.connect(
                self.url,
                auth={"userId": user_id},
                transports=["websocket", "polling"],
                wait_timeout=self.timeout,
            )
        except SocketConnectionError as e:
            await self._close_http()
            self._sio = None
            self.user_id = None
            raise RealtimeError(f"Could not connect to {self.url}: {e}") from e

    async def disconnect(self) -> None:
        if self._sio is not None:
            if self._sio.connected:
                await self._sio.disconnect()
            self._sio = None
            logger.info("[REALTIME] Disconnected")
        await self._close_http()
        self.user_id = None

    async def _close_http(self) -> None:
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None

    async def _on_connect(self) -> None:
        logger.info("[REALTIME] Connected")

    async def _on_disconnect(self, *args) -> None:
        logger.info("[REALTIME] Connection dropped")

    async def _on_connect_error(self, data: Any = None) -> None:
        logger.warning(f"[REALTIME] Connect error: {data}")

    # === SUBSCRIPTIONS ===

    def _wire(self, event: str) -> None:
        if self._sio is None or event in self._wired:
            return

        async def fan_out(*args):
            payload = args[0] if args else None
            if features.LOG_REALTIME_EVENTS:
                logger.info(f"[REALTIME] <- {event}: {payload}")
            self.registry.dispatch(event, payload)

        self._sio.on(event, fan_out)
        self._wired.add(event)

    def on(self, event: str, handler: Handler, owner: Optional[object] = None) -> None:
        self.registry.add(event, handler, owner)
        self._wire(event)

    def off(self, event: str, handler: Optional[Handler] = None, owner: Optional[object] = None) -> int:
        # The socket handler stays wired; with no listeners it dispatches to nobody
        return self.registry.remove(event, handler, owner)

    def listener_count(self, event: Optional[str] = None) -> int:
        return self.registry.count(event)

    async def emit(self, event: str, payload: Any = None) -> None:
        if not self.connected:
            logger.warning(f"[REALTIME] Dropped emit '{event}': not connected")
            return
        logger.debug(f"[REALTIME] -> {event}")
        await self._sio.emit(event, payload)
