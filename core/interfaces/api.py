"""
REST API interface - abstraction over the HTTP egress used by every store.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

from core.utils.form_data import FormPayload


class IApiClient(ABC):
    """Single point of HTTP egress. Returns the decoded JSON envelope or raises ApiError."""

    @abstractmethod
    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def post(
        self,
        path: str,
        json: Optional[Any] = None,
        form: Optional[FormPayload] = None,
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def put(
        self,
        path: str,
        json: Optional[Any] = None,
        form: Optional[FormPayload] = None,
    ) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def delete(self, path: str, json: Optional[Any] = None) -> Dict[str, Any]:
        pass

    @abstractmethod
    def on_unauthorized(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a coroutine run after a 401 redirect"""
        pass

    @abstractmethod
    def cookies(self) -> Dict[str, str]:
        """Session cookies, shared with the realtime handshake"""
        pass

    @abstractmethod
    async def aclose(self) -> None:
        pass
