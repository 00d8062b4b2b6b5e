"""
Domain constants - socket event names, limits and filter sentinels.
Centralized here so stores and the channel agree on the wire names.
"""

# === Incoming realtime events ===
EVT_ATHLETE_UPDATED = "athleteUpdated"
EVT_NEW_ACHIEVEMENT = "newAchievement"
EVT_FOLLOW_UPDATE = "followUpdate"

EVT_NEW_COMMUNITY_POST = "newCommunityPost"
EVT_COMMUNITY_POST_UPDATED = "communityPostUpdated"
EVT_COMMUNITY_POST_DELETED = "communityPostDeleted"
EVT_COMMUNITY_POST_LIKED = "communityPostLiked"
EVT_NEW_COMMENT = "newComment"

EVT_LEADERBOARD_UPDATE = "leaderboardUpdate"
EVT_POINTS_UPDATE = "pointsUpdate"

EVT_NEW_EVENT = "newEvent"
EVT_EVENT_UPDATED = "eventUpdated"
EVT_EVENT_DELETED = "eventDeleted"
EVT_NEW_MESSAGE = "newMessage"

EVT_VENUE_BOOKED = "venueBooked"
EVT_VENUE_REVIEWED = "venueReviewed"

EVT_NOTIFICATION = "notification"
EVT_NOTIFICATIONS = "notifications"

# === Outgoing realtime events ===
EMIT_GET_NOTIFICATIONS = "getNotifications"
EMIT_MARK_NOTIFICATION_READ = "markNotificationAsRead"
EMIT_MARK_ALL_NOTIFICATIONS_READ = "markAllNotificationsAsRead"
EMIT_JOIN_EVENT = "join_event"
EMIT_LEAVE_EVENT = "leave_event"
EMIT_EVENT_MESSAGE = "event_message"

# === Filters ===
# Filter value meaning "no filtering"; never sent to the server
FILTER_ANY = "all"

# === Limits ===
MIN_SEARCH_LENGTH = 2
DEFAULT_TOP_ATHLETES = 10
DEFAULT_SIMILAR_ATHLETES = 5
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_VENUE_SEARCH_LIMIT = 20
DEFAULT_NEARBY_RADIUS_KM = 10
DEFAULT_TRENDING_LIMIT = 10
DEFAULT_MEMBERS_LIMIT = 20
DEFAULT_REVIEWS_LIMIT = 10
NEARBY_COMPETITOR_RANGE = 3
