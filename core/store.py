"""
AppStore - one typed store holding every domain store.

Stores read the session from AuthService and never write each other's state.
The realtime channel follows the session: login connects, logout or 401
disconnects and clears notifications.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

from config.settings import Settings, settings as default_settings
from core.domain.exceptions import RealtimeError
from core.domain.models import AuthUser
from core.interfaces import IApiClient, INavigator, INotifier, IRealtimeChannel
from core.services.athlete_service import AthleteService
from core.services.auth_service import AuthService
from core.services.base_store import DomainStore
from core.services.community_service import CommunityService
from core.services.event_service import EventService
from core.services.leaderboard_service import LeaderboardService
from core.services.notification_service import NotificationService
from core.services.venue_service import VenueService

logger = logging.getLogger(__name__)


class AppStore:
    def __init__(
        self,
        api: IApiClient,
        channel: IRealtimeChannel,
        notifier: INotifier,
        navigator: Optional[INavigator] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or default_settings
        self.api = api
        self.channel = channel
        self.notifier = notifier
        self.navigator = navigator

        self.auth = AuthService(api, notifier)
        shared = {"notifier": notifier, "session": self.auth, "channel": channel}
        self.athletes = AthleteService(api, page_limit=settings.athletes_page_limit, **shared)
        self.community = CommunityService(api, page_limit=settings.community_page_limit, **shared)
        self.leaderboard = LeaderboardService(api, page_limit=settings.leaderboard_page_limit, **shared)
        self.events = EventService(api, page_limit=settings.events_page_limit, **shared)
        self.venues = VenueService(api, page_limit=settings.venues_page_limit, **shared)
        self.notifications = NotificationService(api, **shared)

        self._mounted = False
        self.auth.on_session_change(self._on_session_change)
        api.on_unauthorized(self.auth.clear_session)

    @property
    def stores(self) -> List[DomainStore]:
        return [
            self.auth,
            self.athletes,
            self.community,
            self.leaderboard,
            self.events,
            self.venues,
            self.notifications,
        ]

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    # === SESSION ===

    async def _connect(self, user_id: str) -> bool:
        try:
            await self.channel.connect(user_id)
        except RealtimeError as e:
            # REST keeps working without push updates
            logger.warning(f"[STORE] Realtime unavailable: {e}")
            return False
        await self.notifications.request_notifications()
        return True

    async def _on_session_change(self, user: Optional[AuthUser]) -> None:
        if user is None:
            self.notifications.clear()
            await self.channel.disconnect()
            return
        if self._mounted:
            await self._connect(user.id)
        await self.notifications.fetch_notifications()

    # === LIFECYCLE ===

    @asynccontextmanager
    async def mounted(self) -> AsyncIterator["AppStore"]:
        """Attach every store's realtime handlers for the duration of the block"""
        for store in self.stores:
            store.attach(self.channel)
        self._mounted = True
        logger.info(f"[STORE] Mounted ({self.channel.listener_count()} realtime handlers)")
        try:
            if self.auth.viewer_id:
                await self._connect(self.auth.viewer_id)
            yield self
        finally:
            self._mounted = False
            for store in self.stores:
                store.detach()
            await self.channel.disconnect()
            logger.info("[STORE] Unmounted")

    async def aclose(self) -> None:
        await self.channel.disconnect()
        await self.api.aclose()
