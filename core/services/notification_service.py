"""
Notifications store - the viewer's notification feed and unread counter.

Read state goes over the socket when it is open and falls back to the REST
routes otherwise; either way the local flag flips immediately.
"""

import logging
from typing import Any, Dict, List

from core.domain.constants import (
    EMIT_GET_NOTIFICATIONS,
    EMIT_MARK_ALL_NOTIFICATIONS_READ,
    EMIT_MARK_NOTIFICATION_READ,
    EVT_NOTIFICATION,
    EVT_NOTIFICATIONS,
)
from core.domain.models import ActionResult, Notification
from core.domain.state import patch_by_id, prepend
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from locales import t

logger = logging.getLogger(__name__)


class NotificationService(DomainStore):
    name = "NOTIFICATIONS"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.notifications: List[Notification] = []
        self.unread_count = 0

    def _recount(self) -> None:
        self.unread_count = sum(1 for n in self.notifications if not n.read)

    def _socket_ready(self) -> bool:
        return self.channel is not None and self.channel.connected

    def clear(self) -> None:
        self.notifications = []
        self.unread_count = 0

    async def fetch_notifications(self) -> ActionResult:
        """REST load of the feed; failures are logged, not toasted"""
        if not self.viewer_id:
            return ActionResult.fail(None, data=[])
        async with self.busy():
            try:
                body = await self._call("get", "/auth/notifications")
                notifications = self._parse_many(Notification, body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "notifications_fetch_failed", toast=False, data=[])
        self.notifications = notifications
        self._recount()
        return ActionResult.ok(notifications)

    async def request_notifications(self) -> ActionResult:
        """Ask the socket to push the feed back as a `notifications` event"""
        if not self.viewer_id or not self._socket_ready():
            return ActionResult.fail(t("realtime_unavailable"))
        await self.channel.emit(EMIT_GET_NOTIFICATIONS, self.viewer_id)
        return ActionResult.ok()

    async def mark_as_read(self, notification_id: str) -> ActionResult:
        if not self.viewer_id:
            return ActionResult.fail(t("login_required", action=t("action_notifications")))

        if self._socket_ready():
            await self.channel.emit(
                EMIT_MARK_NOTIFICATION_READ,
                {"userId": self.viewer_id, "notificationId": notification_id},
            )
        else:
            try:
                body = await self._call("put", f"/auth/notifications/{notification_id}")
            except ACTION_ERRORS as e:
                return self._fail(e, "mark_read_failed")
            # The REST route answers with the whole refreshed feed
            if isinstance(body.get("data"), list):
                self.notifications = self._parse_many(Notification, body["data"])
                self._recount()
                return ActionResult.ok(notification_id)

        self.notifications = patch_by_id(self.notifications, notification_id, read=True)
        self._recount()
        return ActionResult.ok(notification_id)

    async def mark_all_as_read(self) -> ActionResult:
        if not self.viewer_id:
            return ActionResult.fail(t("login_required", action=t("action_notifications")))
        if self._socket_ready():
            await self.channel.emit(EMIT_MARK_ALL_NOTIFICATIONS_READ, self.viewer_id)
        else:
            try:
                await self._call("put", "/auth/notifications/read-all")
            except ACTION_ERRORS as e:
                return self._fail(e, "mark_read_failed")
        self.notifications = [n.model_copy(update={"read": True}) for n in self.notifications]
        self.unread_count = 0
        return ActionResult.ok()

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_NOTIFICATION: self.on_notification,
            EVT_NOTIFICATIONS: self.on_notifications,
        }

    def on_notification(self, payload: Dict[str, Any]) -> None:
        notification = Notification.model_validate(payload)
        self.notifications = prepend(self.notifications, notification)
        if not notification.read:
            self.unread_count += 1
        self.notifier.info(notification.message or t("new_notification"))

    def on_notifications(self, payload: Any) -> None:
        self.notifications = self._parse_many(Notification, payload)
        self._recount()
