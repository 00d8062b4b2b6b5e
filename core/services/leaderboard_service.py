"""
Leaderboard store - ranked entries per timeframe/sport/month, the viewer's
ranking and stats, achievements and trophies.

A held leaderboard is always rank-ordered; push updates re-sort after patching.
"""

import logging
from typing import Any, Dict, List, Optional

from core.domain.constants import (
    EVT_LEADERBOARD_UPDATE,
    EVT_NEW_ACHIEVEMENT,
    EVT_POINTS_UPDATE,
    NEARBY_COMPETITOR_RANGE,
)
from core.domain.models import ActionResult, LeaderboardEntry, Pagination
from core.domain.state import find_by_id, leaderboard_user_id, merge_page, prepend, sort_by_rank, update_by_id
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from core.utils.query import build_query
from locales import t

logger = logging.getLogger(__name__)


class LeaderboardService(DomainStore):
    name = "LEADERBOARD"

    def __init__(self, *args, page_limit: int = 50, **kwargs):
        super().__init__(*args, **kwargs)
        self.default_limit = page_limit
        self.leaderboard: List[LeaderboardEntry] = []
        self.sport_leaderboards: Dict[str, List[LeaderboardEntry]] = {}
        self.monthly_leaderboard: List[LeaderboardEntry] = []
        self.user_ranking: Optional[Dict[str, Any]] = None
        self.user_stats: Optional[Dict[str, Any]] = None
        self.achievements: List[Any] = []
        self.trophies: List[Any] = []
        self.categories: List[Any] = []
        self.leaderboard_stats: Optional[Dict[str, Any]] = None
        self.pagination = Pagination(limit=page_limit)

    # === QUERIES ===

    async def get_leaderboard(self, timeframe: str = "all", page: int = 1, limit: Optional[int] = None) -> ActionResult:
        params = {"timeframe": timeframe, "page": page, "limit": limit or self.default_limit}
        result = await self._load_page(
            "leaderboard", "/leaderboard", params, LeaderboardEntry, "leaderboard_fetch_failed",
        )
        if result.success and not result.stale:
            self.leaderboard = merge_page(self.leaderboard, result.data, page)
            self.pagination = result.meta["pagination"]
        return result

    async def get_leaderboard_by_sport(
        self,
        sport: str,
        timeframe: str = "all",
        page: int = 1,
        limit: Optional[int] = None,
    ) -> ActionResult:
        params = {"timeframe": timeframe, "page": page, "limit": limit or self.default_limit}
        result = await self._load_page(
            f"sport:{sport}", f"/leaderboard/sport/{sport}", params, LeaderboardEntry,
            "sport_leaderboard_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.sport_leaderboards = {**self.sport_leaderboards, sport: result.data}
        return result

    async def get_monthly_leaderboard(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        category: str = "overall",
    ) -> ActionResult:
        params = build_query(month=month, year=year, category=category)
        result = await self._load_page(
            "monthly", "/leaderboard/monthly", params, LeaderboardEntry,
            "monthly_leaderboard_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.monthly_leaderboard = result.data
        return result

    async def _get_data(self, path: str, fallback_key: str, params: Optional[Dict[str, Any]] = None,
                        empty: Any = None, record: bool = True) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("get", path, params=params)
            except ACTION_ERRORS as e:
                return self._fail(e, fallback_key, record=record, toast=False, data=empty)
        data = body.get("data")
        return ActionResult.ok(data if data is not None else empty)

    async def get_user_ranking(self, user_id: str, category: str = "overall") -> ActionResult:
        result = await self._get_data(
            f"/leaderboard/user/{user_id}/ranking", "user_ranking_fetch_failed", {"category": category},
        )
        if result.success:
            self.user_ranking = result.data
        return result

    async def get_user_stats(self, user_id: str) -> ActionResult:
        result = await self._get_data(f"/leaderboard/user/{user_id}/stats", "user_stats_fetch_failed")
        if result.success:
            self.user_stats = result.data
        return result

    async def get_achievements(self, user_id: Optional[str] = None) -> ActionResult:
        path = f"/leaderboard/achievements/{user_id}" if user_id else "/leaderboard/achievements"
        result = await self._get_data(path, "achievements_fetch_failed", empty=[])
        if result.success:
            self.achievements = result.data
        return result

    async def get_trophies(self, user_id: Optional[str] = None) -> ActionResult:
        result = await self._get_data(
            "/leaderboard/trophies", "trophies_fetch_failed", build_query(userId=user_id), empty=[],
        )
        if result.success:
            self.trophies = result.data
        return result

    async def get_categories(self) -> ActionResult:
        result = await self._get_data("/leaderboard/categories", "categories_fetch_failed", empty=[], record=False)
        if result.success:
            self.categories = result.data
        return result

    async def get_leaderboard_stats(self) -> ActionResult:
        result = await self._get_data("/leaderboard/stats", "leaderboard_stats_fetch_failed", record=False)
        if result.success:
            self.leaderboard_stats = result.data
        return result

    async def update_user_score(self, user_id: str, points: int, category: str = "overall",
                                reason: str = "") -> ActionResult:
        """Admin-only on the server side"""
        try:
            body = await self._call(
                "post", f"/leaderboard/user/{user_id}/score",
                {"points": points, "category": category, "reason": reason},
            )
        except ACTION_ERRORS as e:
            return self._fail(e, "score_update_failed")
        data = body.get("data") or {}
        if self.is_viewer(user_id) and self.user_stats is not None and "newPoints" in data:
            self.user_stats = {**self.user_stats, "points": data["newPoints"]}
        self.notifier.success(t("score_updated"))
        return ActionResult.ok(data)

    # === LOCAL LOOKUPS ===

    def get_user_position(self, user_id: str, entries: Optional[List[LeaderboardEntry]] = None) -> Optional[int]:
        entries = self.leaderboard if entries is None else entries
        entry = find_by_id(entries, user_id, key=leaderboard_user_id)
        return entry.rank if entry else None

    def get_nearby_competitors(
        self,
        user_id: str,
        spread: int = NEARBY_COMPETITOR_RANGE,
        entries: Optional[List[LeaderboardEntry]] = None,
    ) -> List[LeaderboardEntry]:
        """The user's entry plus up to `spread` entries on each side"""
        entries = self.leaderboard if entries is None else entries
        for index, entry in enumerate(entries):
            if entry.user_id == user_id:
                return list(entries[max(0, index - spread):index + spread + 1])
        return []

    def clear_leaderboard_data(self) -> None:
        self.leaderboard = []
        self.sport_leaderboards = {}
        self.monthly_leaderboard = []
        self.user_ranking = None
        self.user_stats = None

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_LEADERBOARD_UPDATE: self.on_leaderboard_update,
            EVT_NEW_ACHIEVEMENT: self.on_new_achievement,
            EVT_POINTS_UPDATE: self.on_points_update,
        }

    def on_leaderboard_update(self, payload: Dict[str, Any]) -> None:
        user_id = payload.get("userId")
        if not user_id:
            return
        user_id = str(user_id)
        changes = {}
        if payload.get("newPoints") is not None:
            changes["points"] = payload["newPoints"]
        if payload.get("newRank") is not None:
            changes["rank"] = payload["newRank"]
        self.leaderboard = sort_by_rank(update_by_id(
            self.leaderboard, user_id,
            lambda e: e.model_copy(update=changes),
            key=leaderboard_user_id,
        ))
        if self.is_viewer(user_id) and "rank" in changes:
            self.notifier.success(t("ranking_updated", rank=changes["rank"]))

    def on_new_achievement(self, payload: Dict[str, Any]) -> None:
        if not self.is_viewer(payload.get("userId")):
            return
        # The athletes store owns the toast for this event
        self.achievements = prepend(self.achievements, payload.get("achievement") or {})

    def on_points_update(self, payload: Dict[str, Any]) -> None:
        if not self.is_viewer(payload.get("userId")):
            return
        if self.user_stats is not None:
            self.user_stats = {
                **self.user_stats,
                "points": payload.get("newPoints"),
                "level": payload.get("newLevel"),
            }
        added = payload.get("pointsAdded") or 0
        if added > 0:
            self.notifier.success(t("points_earned", points=added))
