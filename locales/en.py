"""English strings for toasts and fallback error messages."""

EN_STRINGS = {
    # === AUTH ===
    "login_required": "Please login to {action}",
    "login_success": "Logged in successfully",
    "login_failed": "Login failed",
    "register_success": "Registration successful",
    "register_failed": "Registration failed",
    "logout_success": "Logged out successfully",
    "logout_failed": "Logout failed",
    "profile_updated": "Profile updated successfully",
    "profile_update_failed": "Failed to update profile",
    "password_updated": "Password updated successfully",
    "password_update_failed": "Failed to update password",
    "achievement_added": "Achievement added successfully",
    "achievement_add_failed": "Failed to add achievement",

    # === ACTION LABELS (used inside login_required) ===
    "action_follow": "follow athletes",
    "action_like": "like posts",
    "action_post": "create posts",
    "action_comment": "comment",
    "action_create_community": "create a community",
    "action_join_community": "join communities",
    "action_leave_community": "leave communities",
    "action_create_event": "create events",
    "action_join_event": "join events",
    "action_leave_event": "leave events",
    "action_rate_event": "rate events",
    "action_chat": "send messages",
    "action_review": "add a review",
    "action_book": "book venues",
    "action_favorite": "save favorites",
    "action_notifications": "manage notifications",

    # === SEARCH ===
    "search_too_short": "Search query must be at least {min} characters",

    # === ATHLETES ===
    "athletes_fetch_failed": "Failed to fetch athletes",
    "athlete_fetch_failed": "Failed to fetch athlete",
    "top_athletes_fetch_failed": "Failed to fetch top athletes",
    "athlete_search_failed": "Failed to search athletes",
    "achievements_fetch_failed": "Failed to fetch achievements",
    "athletes_by_sport_failed": "Failed to fetch athletes for this sport",
    "athlete_stats_failed": "Failed to fetch athlete stats",
    "similar_athletes_failed": "Failed to fetch similar athletes",
    "follow_failed": "Failed to update follow status",
    "athlete_followed": "Athlete followed",
    "athlete_unfollowed": "Athlete unfollowed",
    "achievement_unlocked": "New achievement unlocked: {title}",

    # === COMMUNITY POSTS ===
    "posts_fetch_failed": "Failed to fetch posts",
    "post_fetch_failed": "Failed to fetch post",
    "post_create_failed": "Failed to create post",
    "post_update_failed": "Failed to update post",
    "post_delete_failed": "Failed to delete post",
    "post_created": "Post created successfully",
    "post_updated": "Post updated successfully",
    "post_deleted": "Post deleted successfully",
    "post_removed": "A post was removed",
    "new_post": "New post in the community",
    "like_failed": "Failed to update like",
    "comment_failed": "Failed to add comment",
    "trending_fetch_failed": "Failed to fetch trending posts",
    "following_fetch_failed": "Failed to fetch posts from people you follow",
    "community_stats_failed": "Failed to fetch community stats",
    "share_failed": "Failed to share post",

    # === COMMENTS ===
    "comment_like_failed": "Failed to like comment",
    "reply_failed": "Failed to add reply",
    "reply_added": "Reply added",
    "comment_update_failed": "Failed to update comment",
    "comment_updated": "Comment updated",
    "comment_delete_failed": "Failed to delete comment",
    "comment_deleted": "Comment deleted",

    # === COMMUNITIES ===
    "communities_fetch_failed": "Failed to fetch communities",
    "my_communities_fetch_failed": "Failed to fetch your communities",
    "community_fetch_failed": "Failed to fetch community",
    "community_create_failed": "Failed to create community",
    "community_update_failed": "Failed to update community",
    "community_delete_failed": "Failed to delete community",
    "community_join_failed": "Failed to join community",
    "community_leave_failed": "Failed to leave community",
    "community_created": "Community created successfully",
    "community_updated": "Community updated successfully",
    "community_deleted": "Community deleted successfully",
    "community_joined": "Joined community",
    "community_left": "Left community",
    "members_fetch_failed": "Failed to fetch members",
    "join_requests_failed": "Failed to fetch join requests",
    "join_request_failed": "Failed to handle join request",
    "join_request_handled": "Join request handled",
    "member_role_failed": "Failed to update member role",
    "member_role_updated": "Member role updated",
    "member_remove_failed": "Failed to remove member",
    "member_removed": "Member removed",

    # === LEADERBOARD ===
    "leaderboard_fetch_failed": "Failed to fetch leaderboard",
    "sport_leaderboard_fetch_failed": "Failed to fetch sport leaderboard",
    "monthly_leaderboard_fetch_failed": "Failed to fetch monthly leaderboard",
    "user_ranking_fetch_failed": "Failed to fetch user ranking",
    "user_stats_fetch_failed": "Failed to fetch user stats",
    "trophies_fetch_failed": "Failed to fetch trophies",
    "categories_fetch_failed": "Failed to fetch categories",
    "leaderboard_stats_fetch_failed": "Failed to fetch leaderboard stats",
    "score_update_failed": "Failed to update score",
    "score_updated": "Score updated successfully",
    "ranking_updated": "Your ranking updated! New position: #{rank}",
    "points_earned": "+{points} points earned!",

    # === EVENTS ===
    "events_fetch_failed": "Failed to fetch events",
    "event_fetch_failed": "Failed to fetch event",
    "user_events_fetch_failed": "Failed to fetch your events",
    "event_create_failed": "Failed to create event",
    "event_update_failed": "Failed to update event",
    "event_delete_failed": "Failed to delete event",
    "event_created": "Event created successfully",
    "event_updated": "Event updated successfully",
    "event_deleted": "Event deleted successfully",
    "event_join_failed": "Failed to join event",
    "event_leave_failed": "Failed to leave event",
    "event_joined": "Joined event",
    "event_left": "Left event",
    "team_add_failed": "Failed to add team",
    "team_added": "Team added",
    "rating_add_failed": "Failed to add rating",
    "rating_added": "Rating added",
    "message_send_failed": "Failed to send message",

    # === VENUES ===
    "venues_fetch_failed": "Failed to fetch venues",
    "venue_fetch_failed": "Failed to fetch venue",
    "nearby_venues_failed": "Failed to fetch nearby venues",
    "venue_search_failed": "Failed to search venues",
    "venues_by_category_failed": "Failed to fetch venues for this category",
    "reviews_fetch_failed": "Failed to fetch reviews",
    "bookings_fetch_failed": "Failed to fetch bookings",
    "venue_create_failed": "Failed to create venue",
    "venue_update_failed": "Failed to update venue",
    "venue_delete_failed": "Failed to delete venue",
    "venue_created": "Venue created successfully",
    "venue_updated": "Venue updated successfully",
    "venue_deleted": "Venue deleted successfully",
    "review_add_failed": "Failed to add review",
    "review_added": "Review added successfully",
    "booking_failed": "Failed to book venue",
    "venue_booked_success": "Venue booked successfully",
    "venue_booked": 'Venue "{name}" has been booked!',
    "favorite_failed": "Failed to update favorites",
    "favorite_added": "Added to favorites",
    "favorite_removed": "Removed from favorites",

    # === NOTIFICATIONS ===
    "notifications_fetch_failed": "Failed to fetch notifications",
    "mark_read_failed": "Failed to mark notification as read",
    "new_notification": "You have a new notification",
    "realtime_unavailable": "Realtime connection is not available",
}
