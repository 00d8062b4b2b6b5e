"""
Auth service - owns the session and is the lifecycle anchor for every other store.
Other stores read `viewer_id` from here and never write to it.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from core.domain.models import ActionResult, AuthUser
from core.interfaces import IApiClient, INotifier
from core.services.base_store import ACTION_ERRORS, DomainStore
from locales import t

logger = logging.getLogger(__name__)

SessionListener = Callable[[Optional[AuthUser]], Awaitable[None]]


class AuthService(DomainStore):
    name = "AUTH"

    def __init__(self, api: IApiClient, notifier: INotifier):
        super().__init__(api, notifier)
        self.session = self
        self.user: Optional[AuthUser] = None
        self._listeners: List[SessionListener] = []

    @property
    def viewer_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def on_session_change(self, listener: SessionListener) -> None:
        """Run `listener(user)` whenever the session user changes (None on logout)"""
        self._listeners.append(listener)

    async def _set_user(self, user: Optional[AuthUser]) -> None:
        previous = self.viewer_id
        self.user = user
        if (user.id if user else None) == previous:
            return
        logger.info(f"[AUTH] Session changed: {previous} -> {self.viewer_id}")
        for listener in self._listeners:
            await listener(user)

    @staticmethod
    def _user_from(body: Dict[str, Any]) -> AuthUser:
        # login/register answer with `user`, the rest with `data`
        return AuthUser.model_validate(body.get("user") or body.get("data"))

    async def check_auth(self) -> ActionResult:
        """Restore the session from the cookie; a failure just means logged out"""
        async with self.busy():
            try:
                body = await self._call("get", "/auth/me")
                user = self._user_from(body)
            except ACTION_ERRORS as e:
                logger.info(f"[AUTH] No active session ({getattr(e, 'status', None)})")
                await self._set_user(None)
                return ActionResult.fail(getattr(e, "message", None))
        await self._set_user(user)
        return ActionResult.ok(user)

    async def register(self, user_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("post", "/auth/register", user_data)
                user = self._user_from(body)
            except ACTION_ERRORS as e:
                return self._fail(e, "register_failed", record=True)
        await self._set_user(user)
        self.notifier.success(t("register_success"))
        return ActionResult.ok(user)

    async def login(self, credentials: Dict[str, Any]) -> ActionResult:
        self.error = None
        async with self.busy():
            try:
                body = await self._call("post", "/auth/login", credentials)
                user = self._user_from(body)
            except ACTION_ERRORS as e:
                return self._fail(e, "login_failed", record=True)
        await self._set_user(user)
        self.notifier.success(t("login_success"))
        return ActionResult.ok(user)

    async def logout(self) -> ActionResult:
        try:
            await self._call("post", "/auth/logout")
        except ACTION_ERRORS as e:
            # Server text is not shown here; the session may still be alive
            logger.warning(f"[AUTH] Logout failed: {e}")
            self.notifier.error(t("logout_failed"))
            return ActionResult.fail(t("logout_failed"))
        await self._set_user(None)
        self.notifier.success(t("logout_success"))
        return ActionResult.ok()

    async def clear_session(self) -> None:
        """Drop the local session without a round trip (401 path)"""
        await self._set_user(None)

    async def update_profile(self, profile_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("put", "/auth/profile", profile_data)
                user = self._user_from(body)
            except ACTION_ERRORS as e:
                return self._fail(e, "profile_update_failed")
        await self._set_user(user)
        self.notifier.success(t("profile_updated"))
        return ActionResult.ok(user)

    async def update_password(self, password_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                await self._call("put", "/auth/password", password_data)
            except ACTION_ERRORS as e:
                return self._fail(e, "password_update_failed")
        self.notifier.success(t("password_updated"))
        return ActionResult.ok()

    async def add_achievement(self, achievement_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("post", "/auth/achievements", achievement_data)
            except ACTION_ERRORS as e:
                return self._fail(e, "achievement_add_failed")
        achievements = body.get("data") or []
        if self.user is not None:
            self.user = self.user.model_copy(update={"achievements": achievements})
        self.notifier.success(t("achievement_added"))
        return ActionResult.ok(achievements)
