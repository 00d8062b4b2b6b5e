"""
Feature Flags - Easy on/off toggle for features.
Change values here to enable/disable functionality.
"""

import os


class Features:
    """Feature toggles - set via env vars or defaults"""

    # === REALTIME ===
    # When off, stores attach to a loopback channel and never open a socket
    REALTIME_ENABLED: bool = os.getenv("REALTIME_ENABLED", "true").lower() == "true"
    LOG_REALTIME_EVENTS: bool = os.getenv("LOG_REALTIME_EVENTS", "false").lower() == "true"

    # === TOASTS ===
    TOASTS_ENABLED: bool = os.getenv("TOASTS_ENABLED", "true").lower() == "true"

    # === DEBUG ===
    DEBUG_MODE: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def to_dict(cls) -> dict:
        """Get all features as dict (useful for logging)"""
        return {
            "realtime_enabled": cls.REALTIME_ENABLED,
            "log_realtime_events": cls.LOG_REALTIME_EVENTS,
            "toasts_enabled": cls.TOASTS_ENABLED,
            "debug_mode": cls.DEBUG_MODE,
        }


# Shortcut
features = Features()
