"""
Base store - shared plumbing for every domain store.

A store owns one slice of server-mirrored state. This base gives it:
- an in-flight counter behind `loading` (overlapping actions never clear each other's flag)
- per-slice request sequence numbers so only the latest response is applied
- uniform failure mapping to ActionResult + toast + durable `error`
- realtime listeners scoped to the store instance (attach/detach are symmetric)
"""

import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.domain.exceptions import ApiError
from core.domain.models import ActionResult, MirrorModel, Pagination
from core.interfaces import IApiClient, INotifier, IRealtimeChannel, Handler
from core.utils.form_data import encode_payload
from locales import t

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Errors a store action absorbs; anything else is a bug and propagates
ACTION_ERRORS = (ApiError, ValidationError)


class SessionReader(Protocol):
    """Read-only view of the authenticated session"""

    @property
    def viewer_id(self) -> Optional[str]:
        ...


class DomainStore:
    """Owns one slice of mirrored state and the actions that read or mutate it."""

    name = "STORE"

    def __init__(
        self,
        api: IApiClient,
        notifier: INotifier,
        session: Optional[SessionReader] = None,
        channel: Optional[IRealtimeChannel] = None,
    ):
        self.api = api
        self.notifier = notifier
        self.session = session
        self.channel = channel
        self.error: Optional[str] = None
        self._inflight = 0
        self._sequences: Dict[str, int] = defaultdict(int)
        self._attached_events: List[str] = []

    # === LOADING ===

    @property
    def loading(self) -> bool:
        return self._inflight > 0

    @asynccontextmanager
    async def busy(self) -> AsyncIterator[None]:
        """Mark the store loading for the duration of one action"""
        self._inflight += 1
        try:
            yield
        finally:
            self._inflight -= 1

    # === LATEST-WINS GUARD ===

    def _issue(self, slice_name: str) -> int:
        self._sequences[slice_name] += 1
        return self._sequences[slice_name]

    def _is_latest(self, slice_name: str, token: int) -> bool:
        return self._sequences[slice_name] == token

    # === SESSION ===

    @property
    def viewer_id(self) -> Optional[str]:
        return self.session.viewer_id if self.session else None

    def is_viewer(self, user_id: Any) -> bool:
        return self.viewer_id is not None and user_id is not None and str(user_id) == self.viewer_id

    def _require_login(self, action_key: str) -> Optional[ActionResult]:
        """Failure result (and toast) when nobody is logged in; None otherwise"""
        if self.viewer_id:
            return None
        message = t("login_required", action=t(action_key))
        logger.info(f"[{self.name}] Blocked '{action_key}' without a session")
        self.notifier.error(message)
        return ActionResult.fail(message)

    # === FAILURES ===

    def _fail(
        self,
        exc: Exception,
        fallback_key: str,
        *,
        record: bool = False,
        toast: bool = True,
        data: Any = None,
    ) -> ActionResult:
        message = getattr(exc, "message", None) or t(fallback_key)
        status = getattr(exc, "status", None)
        if isinstance(exc, ValidationError):
            logger.error(f"[{self.name}] Unexpected payload for '{fallback_key}': {exc}")
        else:
            logger.warning(f"[{self.name}] {message} (status={status})")
        if record:
            self.error = message
        if toast:
            self.notifier.error(message)
        return ActionResult.fail(message, data=data)

    # === REQUESTS ===

    async def _call(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Issue one request; payloads with uploads or nested values go multipart"""
        if method == "get":
            return await self.api.get(path, params=params)
        if isinstance(payload, MirrorModel):
            payload = payload.to_payload()
        json_body, form = encode_payload(payload)
        if method == "delete":
            return await self.api.delete(path, json=json_body)
        sender = self.api.post if method == "post" else self.api.put
        return await sender(path, json=json_body, form=form)

    @staticmethod
    def _parse_many(model: Type[M], raw: Any) -> List[M]:
        return [model.model_validate(item) for item in raw or []]

    @staticmethod
    def _pagination(body: Dict[str, Any], count: int, params: Dict[str, Any]) -> Pagination:
        defaults = {k: params[k] for k in ("limit",) if k in params}
        raw = body.get("pagination")
        if isinstance(raw, dict):
            return Pagination.model_validate({**defaults, **raw})
        return Pagination.single_page(
            total=count,
            limit=params.get("limit", count or 1),
            page=params.get("page", 1),
        )

    async def _load_page(
        self,
        slice_name: str,
        path: str,
        params: Dict[str, Any],
        model: Type[M],
        fallback_key: str,
        *,
        toast: bool = True,
    ) -> ActionResult:
        """
        GET one list page under the latest-wins guard.
        The caller applies `data` to state only when the result is not stale.
        """
        token = self._issue(slice_name)
        self.error = None
        async with self.busy():
            try:
                body = await self._call("get", path, params=params)
                items = self._parse_many(model, body.get("data"))
            except ACTION_ERRORS as e:
                if not self._is_latest(slice_name, token):
                    return ActionResult(success=False, data=[], stale=True)
                return self._fail(e, fallback_key, record=True, toast=toast, data=[])

        meta = {k: body[k] for k in ("stats", "period", "creator", "filters") if k in body}
        meta["pagination"] = self._pagination(body, len(items), params)
        if not self._is_latest(slice_name, token):
            logger.debug(f"[{self.name}] Dropped stale '{slice_name}' response (token={token})")
            return ActionResult(success=True, data=items, stale=True, meta=meta)
        return ActionResult.ok(items, **meta)

    async def _load_one(
        self,
        slice_name: str,
        path: str,
        model: Type[M],
        fallback_key: str,
        *,
        toast: bool = False,
    ) -> ActionResult:
        """GET one entity under the latest-wins guard"""
        token = self._issue(slice_name)
        self.error = None
        async with self.busy():
            try:
                body = await self._call("get", path)
                entity = model.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                if not self._is_latest(slice_name, token):
                    return ActionResult(success=False, stale=True)
                return self._fail(e, fallback_key, record=True, toast=toast)
        if not self._is_latest(slice_name, token):
            return ActionResult(success=True, data=entity, stale=True)
        return ActionResult.ok(entity)

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        """Event name -> handler; stores with push reconciliation override this"""
        return {}

    @property
    def attached(self) -> bool:
        return bool(self._attached_events)

    def attach(self, channel: Optional[IRealtimeChannel] = None) -> None:
        """Subscribe this store's handlers; a second attach is a no-op"""
        if channel is not None:
            self.channel = channel
        if self.channel is None or self.attached:
            return
        for event, handler in self.realtime_handlers().items():
            self.channel.on(event, handler, owner=self)
            self._attached_events.append(event)
        if self._attached_events:
            logger.debug(f"[{self.name}] Attached {len(self._attached_events)} realtime handlers")

    def detach(self) -> None:
        """Remove exactly the handlers this store attached"""
        if self.channel is None:
            return
        for event in self._attached_events:
            self.channel.off(event, owner=self)
        self._attached_events = []
