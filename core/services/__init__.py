from core.services.base_store import DomainStore
from core.services.auth_service import AuthService
from core.services.athlete_service import AthleteService
from core.services.community_service import CommunityService
from core.services.leaderboard_service import LeaderboardService
from core.services.event_service import EventService
from core.services.venue_service import VenueService
from core.services.notification_service import NotificationService

__all__ = [
    "DomainStore",
    "AuthService",
    "AthleteService",
    "CommunityService",
    "LeaderboardService",
    "EventService",
    "VenueService",
    "NotificationService",
]
