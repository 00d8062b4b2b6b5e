"""
Events store - event listings, participation, teams, ratings and event chat.

Chat has two paths: REST (`send_message`, persisted) and the socket room
(`join_event_room` + `send_event_message`, broadcast to the room as newMessage).
"""

import logging
from typing import Any, Dict, List, Optional

from core.domain.constants import (
    EMIT_EVENT_MESSAGE,
    EMIT_JOIN_EVENT,
    EMIT_LEAVE_EVENT,
    EVT_EVENT_DELETED,
    EVT_EVENT_UPDATED,
    EVT_NEW_EVENT,
    EVT_NEW_MESSAGE,
)
from core.domain.models import ActionResult, Event, EventFilters, Pagination
from core.domain.state import find_by_id, is_current, merge_page, prepend, remove_by_id, replace_by_id, update_by_id
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from core.utils.query import build_query
from locales import t

logger = logging.getLogger(__name__)


def _entry_id(entry: Any) -> Optional[str]:
    if isinstance(entry, dict):
        return entry.get("_id") or entry.get("id")
    return None


class EventService(DomainStore):
    name = "EVENTS"

    def __init__(self, *args, page_limit: int = 10, **kwargs):
        super().__init__(*args, **kwargs)
        self.events: List[Event] = []
        self.current_event: Optional[Event] = None
        self.user_events: List[Event] = []
        self.pagination = Pagination(limit=page_limit)
        self.filters = EventFilters()
        self.rooms: List[str] = []

    # === FILTERS ===

    def set_filters(self, **changes) -> EventFilters:
        self.filters = self.filters.model_copy(update=changes)
        return self.filters

    def reset_filters(self) -> EventFilters:
        self.filters = EventFilters()
        return self.filters

    def clear_current_event(self) -> None:
        self.current_event = None

    def _replace_event(self, event: Event) -> None:
        self.events = replace_by_id(self.events, event)
        self.user_events = replace_by_id(self.user_events, event)
        if is_current(self.current_event, event.id):
            self.current_event = event

    def _remove_event(self, event_id: str) -> None:
        self.events = remove_by_id(self.events, event_id)
        self.user_events = remove_by_id(self.user_events, event_id)
        if is_current(self.current_event, event_id):
            self.current_event = None

    def _append_chat(self, event_id: str, entry: Any) -> None:
        def append(event: Event) -> Event:
            entry_id = _entry_id(entry)
            if entry_id and any(_entry_id(m) == entry_id for m in event.chat):
                return event
            return event.model_copy(update={"chat": [*event.chat, entry]})

        self.events = update_by_id(self.events, event_id, append)
        if is_current(self.current_event, event_id):
            self.current_event = append(self.current_event)

    # === QUERIES ===

    async def get_events(self, filters: Optional[EventFilters] = None, page: int = 1) -> ActionResult:
        if filters is not None:
            self.filters = filters
        params = build_query(self.filters, page=page, limit=self.pagination.limit)
        result = await self._load_page("events", "/events", params, Event, "events_fetch_failed")
        if result.success and not result.stale:
            self.events = merge_page(self.events, result.data, page)
            self.pagination = result.meta["pagination"]
        return result

    async def get_event_by_id(self, event_id: str) -> ActionResult:
        result = await self._load_one("current", f"/events/{event_id}", Event, "event_fetch_failed")
        if result.success and not result.stale:
            self.current_event = result.data
        return result

    async def get_user_events(self) -> ActionResult:
        result = await self._load_page("user_events", "/events/user", {}, Event, "user_events_fetch_failed")
        if result.success and not result.stale:
            self.user_events = result.data
        return result

    # === MUTATIONS ===

    async def create_event(self, event_data: Dict[str, Any]) -> ActionResult:
        denied = self._require_login("action_create_event")
        if denied:
            return denied
        async with self.busy():
            try:
                body = await self._call("post", "/events", event_data)
                event = Event.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "event_create_failed")
        # The server also broadcasts newEvent; keep a single copy
        self.events = prepend(remove_by_id(self.events, event.id), event)
        self.notifier.success(t("event_created"))
        return ActionResult.ok(event)

    async def update_event(self, event_id: str, event_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("put", f"/events/{event_id}", event_data)
                event = Event.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "event_update_failed")
        self._replace_event(event)
        self.notifier.success(t("event_updated"))
        return ActionResult.ok(event)

    async def delete_event(self, event_id: str) -> ActionResult:
        async with self.busy():
            try:
                await self._call("delete", f"/events/{event_id}")
            except ACTION_ERRORS as e:
                return self._fail(e, "event_delete_failed")
        self._remove_event(event_id)
        self.notifier.success(t("event_deleted"))
        return ActionResult.ok()

    async def _event_action(self, path: str, payload: Optional[Dict[str, Any]],
                            fallback_key: str, success_key: str) -> ActionResult:
        """POST that answers with the updated event"""
        async with self.busy():
            try:
                body = await self._call("post", path, payload)
                event = Event.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, fallback_key)
        self._replace_event(event)
        self.notifier.success(t(success_key))
        return ActionResult.ok(event)

    async def join_event(self, event_id: str) -> ActionResult:
        denied = self._require_login("action_join_event")
        if denied:
            return denied
        return await self._event_action(f"/events/{event_id}/join", None, "event_join_failed", "event_joined")

    async def leave_event(self, event_id: str) -> ActionResult:
        denied = self._require_login("action_leave_event")
        if denied:
            return denied
        return await self._event_action(f"/events/{event_id}/leave", None, "event_leave_failed", "event_left")

    async def add_team(self, event_id: str, team_data: Dict[str, Any]) -> ActionResult:
        return await self._event_action(f"/events/{event_id}/teams", team_data, "team_add_failed", "team_added")

    async def add_rating(self, event_id: str, rating_data: Dict[str, Any]) -> ActionResult:
        denied = self._require_login("action_rate_event")
        if denied:
            return denied
        return await self._event_action(f"/events/{event_id}/ratings", rating_data, "rating_add_failed", "rating_added")

    async def send_message(self, event_id: str, message: str) -> ActionResult:
        """Persisted chat message; the route answers with the bare chat entry"""
        denied = self._require_login("action_chat")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/events/{event_id}/chat", {"message": message})
        except ACTION_ERRORS as e:
            return self._fail(e, "message_send_failed")
        entry = body.get("data", body)
        self._append_chat(event_id, entry)
        return ActionResult.ok(entry)

    # === SOCKET ROOMS ===

    async def join_event_room(self, event_id: str) -> ActionResult:
        if self.channel is None or not self.channel.connected:
            return ActionResult.fail(t("realtime_unavailable"))
        await self.channel.emit(EMIT_JOIN_EVENT, event_id)
        if event_id not in self.rooms:
            self.rooms.append(event_id)
        return ActionResult.ok(event_id)

    async def leave_event_room(self, event_id: str) -> ActionResult:
        if self.channel is None or not self.channel.connected:
            return ActionResult.fail(t("realtime_unavailable"))
        await self.channel.emit(EMIT_LEAVE_EVENT, event_id)
        self.rooms = [room for room in self.rooms if room != event_id]
        return ActionResult.ok(event_id)

    async def send_event_message(self, event_id: str, message: str) -> ActionResult:
        """Broadcast to the event room; the echo arrives as newMessage"""
        denied = self._require_login("action_chat")
        if denied:
            return denied
        if self.channel is None or not self.channel.connected:
            return ActionResult.fail(t("realtime_unavailable"))
        payload = {"eventId": event_id, "message": message}
        await self.channel.emit(EMIT_EVENT_MESSAGE, payload)
        return ActionResult.ok(payload)

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_NEW_EVENT: self.on_new_event,
            EVT_EVENT_UPDATED: self.on_event_updated,
            EVT_EVENT_DELETED: self.on_event_deleted,
            EVT_NEW_MESSAGE: self.on_new_message,
        }

    def on_new_event(self, payload: Dict[str, Any]) -> None:
        event = Event.model_validate(payload)
        if find_by_id(self.events, event.id) is not None:
            self._replace_event(event)
            return
        self.events = prepend(self.events, event)

    def on_event_updated(self, payload: Dict[str, Any]) -> None:
        self._replace_event(Event.model_validate(payload))

    def on_event_deleted(self, payload: Any) -> None:
        if isinstance(payload, dict):
            payload = payload.get("eventId") or payload.get("_id") or payload.get("id")
        if payload:
            self._remove_event(str(payload))

    def on_new_message(self, payload: Dict[str, Any]) -> None:
        event_id = payload.get("eventId")
        if not event_id:
            # REST-originated broadcasts carry only the chat entry
            if self.current_event is None:
                return
            event_id = self.current_event.id
        self._append_chat(str(event_id), payload)
