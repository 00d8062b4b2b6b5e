"""
API error taxonomy.
Raised by the REST client; caught at store action boundaries.
"""

from typing import Any, Optional

import httpx


class ApiError(Exception):
    """Non-2xx response or failed round trip"""

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, payload: Any = None):
        super().__init__(message or f"API error (status={status})")
        self.message = message
        self.status = status
        self.payload = payload

    @staticmethod
    def extract_message(payload: Any) -> Optional[str]:
        if not isinstance(payload, dict):
            return None
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            return ", ".join(str(e) for e in errors)
        message = payload.get("message")
        return str(message) if message else None

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        try:
            payload = response.json()
        except ValueError:
            payload = None
        error_cls = UnauthorizedError if response.status_code == 401 else cls
        return error_cls(
            message=cls.extract_message(payload),
            status=response.status_code,
            payload=payload,
        )

    @classmethod
    def from_transport(cls, exc: httpx.RequestError) -> "ApiError":
        # No server message for connection failures; callers fall back to their own text
        return cls(message=None, status=None, payload={"detail": str(exc)})


class UnauthorizedError(ApiError):
    """401 - session missing or expired"""


class RealtimeError(Exception):
    """Realtime channel could not be opened"""
