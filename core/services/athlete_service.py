"""
Athletes store - athlete directory, top athletes, profiles, follow graph.
"""

import logging
from typing import Any, Dict, List, Optional

from core.domain.constants import (
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_SIMILAR_ATHLETES,
    DEFAULT_TOP_ATHLETES,
    EVT_ATHLETE_UPDATED,
    EVT_FOLLOW_UPDATE,
    EVT_NEW_ACHIEVEMENT,
    MIN_SEARCH_LENGTH,
)
from core.domain.models import Achievement, ActionResult, Athlete, AthleteFilters, Pagination
from core.domain.state import (
    find_by_id,
    is_current,
    is_following,
    merge_page,
    prepend,
    replace_by_id,
    restore,
    set_follow,
    update_by_id,
)
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from core.utils.query import build_query
from locales import t

logger = logging.getLogger(__name__)


class AthleteService(DomainStore):
    name = "ATHLETES"

    def __init__(self, *args, page_limit: int = 12, **kwargs):
        super().__init__(*args, **kwargs)
        self.athletes: List[Athlete] = []
        self.top_athletes: List[Athlete] = []
        self.current_athlete: Optional[Athlete] = None
        self.athlete_achievements: List[Achievement] = []
        self.pagination = Pagination(limit=page_limit)
        self.filters = AthleteFilters()

    # === FILTERS ===

    def set_filters(self, **changes) -> AthleteFilters:
        self.filters = self.filters.model_copy(update=changes)
        return self.filters

    def reset_filters(self) -> AthleteFilters:
        self.filters = AthleteFilters()
        return self.filters

    def clear_current_athlete(self) -> None:
        self.current_athlete = None
        self.athlete_achievements = []

    # === QUERIES ===

    async def get_all_athletes(self, filters: Optional[AthleteFilters] = None, page: int = 1) -> ActionResult:
        """List athletes; page 1 replaces the list, later pages append"""
        if filters is not None:
            self.filters = filters
        params = build_query(self.filters, page=page, limit=self.pagination.limit)
        result = await self._load_page("athletes", "/athletes", params, Athlete, "athletes_fetch_failed")
        if result.success and not result.stale:
            self.athletes = merge_page(self.athletes, result.data, page)
            self.pagination = result.meta["pagination"]
        return result

    async def get_athlete_by_id(self, athlete_id: str) -> ActionResult:
        result = await self._load_one("current", f"/athletes/{athlete_id}", Athlete, "athlete_fetch_failed")
        if result.success and not result.stale:
            self.current_athlete = result.data
        return result

    async def get_top_athletes(self, limit: int = DEFAULT_TOP_ATHLETES, category: str = "overall") -> ActionResult:
        result = await self._load_page(
            "top", "/athletes/top", {"limit": limit, "category": category},
            Athlete, "top_athletes_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.top_athletes = result.data
        return result

    async def search_athletes(self, query: str, limit: int = DEFAULT_SEARCH_LIMIT) -> ActionResult:
        """Search never touches held lists; short queries are rejected locally"""
        if not query or len(query.strip()) < MIN_SEARCH_LENGTH:
            message = t("search_too_short", min=MIN_SEARCH_LENGTH)
            self.notifier.error(message)
            return ActionResult.fail(message, data=[])
        return await self._load_page(
            "search", "/athletes/search", {"q": query.strip(), "limit": limit},
            Athlete, "athlete_search_failed", toast=False,
        )

    async def get_athlete_achievements(self, athlete_id: str) -> ActionResult:
        result = await self._load_page(
            "achievements", f"/athletes/{athlete_id}/achievements", {},
            Achievement, "achievements_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.athlete_achievements = result.data
        return result

    async def get_athletes_by_sport(self, sport: str, page: int = 1, limit: Optional[int] = None) -> ActionResult:
        """Sport listing for callers that keep their own list; store lists are untouched"""
        return await self._load_page(
            "by_sport", "/athletes", {"sport": sport, "page": page, "limit": limit or self.pagination.limit},
            Athlete, "athletes_by_sport_failed", toast=False,
        )

    async def get_athlete_stats(self, athlete_id: str) -> ActionResult:
        try:
            body = await self._call("get", f"/athletes/{athlete_id}/stats")
        except ACTION_ERRORS as e:
            return self._fail(e, "athlete_stats_failed", toast=False)
        return ActionResult.ok(body.get("data"))

    async def get_similar_athletes(self, athlete_id: str, limit: int = DEFAULT_SIMILAR_ATHLETES) -> ActionResult:
        try:
            body = await self._call("get", f"/athletes/{athlete_id}/similar", params={"limit": limit})
            athletes = self._parse_many(Athlete, body.get("data"))
        except ACTION_ERRORS as e:
            return self._fail(e, "similar_athletes_failed", toast=False, data=[])
        return ActionResult.ok(athletes)

    # === FOLLOW ===

    def _apply_follow(self, athlete_id: str, follower_id: str, follow: bool) -> None:
        by_viewer = self.is_viewer(follower_id)

        def apply(athlete: Athlete) -> Athlete:
            return set_follow(athlete, follower_id, follow, by_viewer=by_viewer)

        self.athletes = update_by_id(self.athletes, athlete_id, apply)
        if is_current(self.current_athlete, athlete_id):
            self.current_athlete = apply(self.current_athlete)

    async def toggle_follow_athlete(self, athlete_id: str) -> ActionResult:
        """
        Optimistic follow/unfollow. The flip lands before the request is sent;
        on failure the affected athlete is put back from the snapshot.
        """
        denied = self._require_login("action_follow")
        if denied:
            return denied

        viewer_id = self.viewer_id
        snapshot = find_by_id(self.athletes, athlete_id)
        current_snapshot = self.current_athlete if is_current(self.current_athlete, athlete_id) else None
        base = snapshot or current_snapshot
        target = not is_following(base, viewer_id) if base else True
        self._apply_follow(athlete_id, viewer_id, target)

        try:
            body = await self._call("post", f"/athletes/{athlete_id}/follow")
        except ACTION_ERRORS as e:
            self.athletes = restore(self.athletes, snapshot)
            if current_snapshot is not None and is_current(self.current_athlete, athlete_id):
                self.current_athlete = current_snapshot
            return self._fail(e, "follow_failed")

        data = body.get("data") or {}
        confirmed = bool(data.get("isFollowing", target))
        if confirmed != target:
            self._apply_follow(athlete_id, viewer_id, confirmed)
        self.notifier.success(t("athlete_followed" if confirmed else "athlete_unfollowed"))
        return ActionResult.ok(
            {"is_following": confirmed, "followers_count": data.get("followersCount")},
        )

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_ATHLETE_UPDATED: self.on_athlete_updated,
            EVT_FOLLOW_UPDATE: self.on_follow_update,
            EVT_NEW_ACHIEVEMENT: self.on_new_achievement,
        }

    def on_athlete_updated(self, payload: Dict[str, Any]) -> None:
        athlete = Athlete.model_validate(payload)
        self.athletes = replace_by_id(self.athletes, athlete)
        if is_current(self.current_athlete, athlete.id):
            self.current_athlete = athlete

    def on_follow_update(self, payload: Dict[str, Any]) -> None:
        athlete_id = payload.get("userId")
        follower_id = payload.get("followerId") or self.viewer_id
        if not athlete_id or not follower_id:
            logger.debug(f"[ATHLETES] followUpdate without a follower, ignored: {payload}")
            return
        self._apply_follow(str(athlete_id), str(follower_id), bool(payload.get("isFollowing")))

    def on_new_achievement(self, payload: Dict[str, Any]) -> None:
        user_id = payload.get("userId")
        if not self.is_viewer(user_id):
            return
        # Payload is either the achievement itself or {userId, achievement}
        achievement = Achievement.model_validate(payload.get("achievement") or payload)
        self.notifier.success(t("achievement_unlocked", title=achievement.title or ""))
        if is_current(self.current_athlete, str(user_id)):
            self.athlete_achievements = prepend(self.athlete_achievements, achievement)

