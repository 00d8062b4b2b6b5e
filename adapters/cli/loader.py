"""
CLI loader - wires the HTTP client, realtime channel, toasts and the AppStore.
"""

from typing import Optional

from config.features import features
from config.settings import Settings, settings as default_settings

# Infrastructure
from infrastructure.http import ApiClient
from infrastructure.notifications import LogNotifier
from infrastructure.realtime import MemoryChannel, SocketIOChannel

# Core
from core.interfaces import IRealtimeChannel
from core.store import AppStore

from adapters.cli.navigator import LogNavigator


def build_store(settings: Optional[Settings] = None) -> AppStore:
    settings = settings or default_settings

    # === TRANSPORT ===
    navigator = LogNavigator()
    api = ApiClient(
        navigator=navigator,
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
        login_path=settings.login_path,
    )

    # === REALTIME ===
    if features.REALTIME_ENABLED:
        channel: IRealtimeChannel = SocketIOChannel(
            url=settings.socket_url,
            cookies=api.cookies,
            timeout=settings.request_timeout,
        )
    else:
        channel = MemoryChannel()

    # === STORES ===
    return AppStore(
        api=api,
        channel=channel,
        notifier=LogNotifier(),
        navigator=navigator,
        settings=settings,
    )
