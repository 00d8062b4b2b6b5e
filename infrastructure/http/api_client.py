"""
REST client - the single point of HTTP egress for every store.

One httpx.AsyncClient per instance: base URL, timeout and cookie jar are fixed
at construction, so the session cookie rides along on every request.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from config.settings import settings
from core.domain.exceptions import ApiError
from core.interfaces.api import IApiClient
from core.interfaces.messaging import INavigator
from core.utils.form_data import FormPayload

logger = logging.getLogger(__name__)

BODY_METHODS = ("POST", "PUT", "PATCH", "DELETE")
JSON_CONTENT_TYPE = "application/json"


class ApiClient(IApiClient):
    """httpx-based implementation of IApiClient"""

    def __init__(
        self,
        navigator: Optional[INavigator] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        login_path: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.navigator = navigator
        self.base_url = base_url or settings.api_base_url
        self.login_path = login_path or settings.login_path
        self._unauthorized_callbacks: List[Callable[[], Awaitable[None]]] = []
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.request_timeout,
            headers={"Accept": JSON_CONTENT_TYPE},
            event_hooks={
                "request": [self._on_request],
                "response": [self._on_response],
            },
            transport=transport,
        )

    # === HOOKS ===

    async def _on_request(self, request: httpx.Request) -> None:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            # Boundary was set by the encoder; a JSON type here would break the upload
            logger.debug(f"[API] {request.method} {request.url.path} (multipart)")
            return
        if request.method in BODY_METHODS and not content_type:
            request.headers["Content-Type"] = JSON_CONTENT_TYPE
        logger.debug(f"[API] {request.method} {request.url.path}")

    async def _on_response(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return
        logger.warning(f"[API] 401 on {response.request.url.path}, redirecting to {self.login_path}")
        if self.navigator:
            await self.navigator.redirect(self.login_path)
        for callback in self._unauthorized_callbacks:
            await callback()

    def on_unauthorized(self, callback: Callable[[], Awaitable[None]]) -> None:
        self._unauthorized_callbacks.append(callback)

    # === REQUESTS ===

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"[API] {method} {path} failed: {e}")
            raise ApiError.from_transport(e) from e

        if response.is_error:
            raise ApiError.from_response(response)

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(message=None, status=response.status_code, payload=response.text) from e

        # Some endpoints answer 200 with {success: false, message}
        if isinstance(body, dict) and body.get("success") is False:
            raise ApiError(
                message=ApiError.extract_message(body),
                status=response.status_code,
                payload=body,
            )
        return body if isinstance(body, dict) else {"success": True, "data": body}

    @staticmethod
    def _body(json: Optional[Any], form: Optional[FormPayload]) -> Dict[str, Any]:
        if form is not None:
            return {"files": form.parts()}
        if json is not None:
            return {"json": json}
        return {}

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None, form: Optional[FormPayload] = None) -> Dict[str, Any]:
        return await self._request("POST", path, **self._body(json, form))

    async def put(self, path: str, json: Optional[Any] = None, form: Optional[FormPayload] = None) -> Dict[str, Any]:
        return await self._request("PUT", path, **self._body(json, form))

    async def delete(self, path: str, json: Optional[Any] = None) -> Dict[str, Any]:
        return await self._request("DELETE", path, **self._body(json, None))

    # === SESSION ===

    def cookies(self) -> Dict[str, str]:
        return {cookie.name: cookie.value for cookie in self._client.cookies.jar}

    async def aclose(self) -> None:
        await self._client.aclose()
