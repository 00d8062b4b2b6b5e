from core.interfaces.api import IApiClient
from core.interfaces.realtime import IRealtimeChannel, Handler
from core.interfaces.messaging import INotifier, INavigator

__all__ = [
    # REST
    "IApiClient",
    # Realtime
    "IRealtimeChannel",
    "Handler",
    # User-facing side effects
    "INotifier",
    "INavigator",
]
