"""
Venues store - venue directory, nearby search, reviews, bookings, favorites.
"""

import logging
from typing import Any, Dict, List, Optional

from core.domain.constants import (
    DEFAULT_NEARBY_RADIUS_KM,
    DEFAULT_REVIEWS_LIMIT,
    DEFAULT_VENUE_SEARCH_LIMIT,
    EVT_VENUE_BOOKED,
    EVT_VENUE_REVIEWED,
    FILTER_ANY,
    MIN_SEARCH_LENGTH,
)
from core.domain.models import ActionResult, Pagination, Venue, VenueFilters
from core.domain.state import is_current, merge_page, prepend, remove_by_id, replace_by_id
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from core.utils.query import build_query
from locales import t

logger = logging.getLogger(__name__)


class VenueService(DomainStore):
    name = "VENUES"

    def __init__(self, *args, page_limit: int = 12, **kwargs):
        super().__init__(*args, **kwargs)
        self.venues: List[Venue] = []
        self.current_venue: Optional[Venue] = None
        self.nearby_venues: List[Venue] = []
        self.favorite_venues: List[str] = []
        self.venue_bookings: List[Any] = []
        self.pagination = Pagination(limit=page_limit)
        self.filters = VenueFilters()

    # === FILTERS ===

    def set_filters(self, **changes) -> VenueFilters:
        self.filters = self.filters.model_copy(update=changes)
        return self.filters

    def reset_filters(self) -> VenueFilters:
        self.filters = VenueFilters()
        return self.filters

    def clear_current_venue(self) -> None:
        self.current_venue = None

    def is_favorite(self, venue_id: str) -> bool:
        return venue_id in self.favorite_venues

    # === QUERIES ===

    async def get_venues(self, filters: Optional[VenueFilters] = None, page: int = 1) -> ActionResult:
        if filters is not None:
            self.filters = filters
        params = build_query(self.filters, page=page, limit=self.pagination.limit)
        result = await self._load_page("venues", "/venues", params, Venue, "venues_fetch_failed")
        if result.success and not result.stale:
            self.venues = merge_page(self.venues, result.data, page)
            self.pagination = result.meta["pagination"]
        return result

    async def get_venue_by_id(self, venue_id: str) -> ActionResult:
        result = await self._load_one("current", f"/venues/{venue_id}", Venue, "venue_fetch_failed")
        if result.success and not result.stale:
            self.current_venue = result.data
        return result

    async def get_nearby_venues(self, lat: float, lng: float, radius: float = DEFAULT_NEARBY_RADIUS_KM) -> ActionResult:
        result = await self._load_page(
            "nearby", "/venues/nearby", {"lat": lat, "lng": lng, "radius": radius},
            Venue, "nearby_venues_failed", toast=False,
        )
        if result.success and not result.stale:
            self.nearby_venues = result.data
        return result

    async def search_venues(self, query: str, limit: int = DEFAULT_VENUE_SEARCH_LIMIT) -> ActionResult:
        if not query or len(query.strip()) < MIN_SEARCH_LENGTH:
            message = t("search_too_short", min=MIN_SEARCH_LENGTH)
            self.notifier.error(message)
            return ActionResult.fail(message, data=[])
        return await self._load_page(
            "search", "/venues/search", {"q": query.strip(), "limit": limit},
            Venue, "venue_search_failed", toast=False,
        )

    async def get_venues_by_category(self, category: str, page: int = 1, limit: int = 20) -> ActionResult:
        return await self._load_page(
            "by_category", f"/venues/category/{category}", {"page": page, "limit": limit},
            Venue, "venues_by_category_failed", toast=False,
        )

    async def get_venue_reviews(
        self,
        venue_id: str,
        page: int = 1,
        limit: int = DEFAULT_REVIEWS_LIMIT,
        sort_by: str = "date:desc",
    ) -> ActionResult:
        params = {"page": page, "limit": limit, "sortBy": sort_by}
        async with self.busy():
            try:
                body = await self._call("get", f"/venues/{venue_id}/reviews", params=params)
            except ACTION_ERRORS as e:
                return self._fail(e, "reviews_fetch_failed", record=True, toast=False, data=[])
        reviews = body.get("data") or []
        return ActionResult.ok(
            reviews,
            stats=body.get("stats"),
            pagination=self._pagination(body, len(reviews), params),
        )

    async def get_venue_bookings(
        self,
        venue_id: str,
        status: str = FILTER_ANY,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> ActionResult:
        """Owner/admin only on the server side"""
        params = build_query(status=status, startDate=start_date, endDate=end_date)
        async with self.busy():
            try:
                body = await self._call("get", f"/venues/{venue_id}/bookings", params=params)
            except ACTION_ERRORS as e:
                return self._fail(e, "bookings_fetch_failed", record=True, toast=False, data=[])
        self.venue_bookings = body.get("data") or []
        return ActionResult.ok(self.venue_bookings, stats=body.get("stats"))

    # === MUTATIONS ===

    async def create_venue(self, venue_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("post", "/venues", venue_data)
                venue = Venue.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "venue_create_failed")
        self.venues = prepend(self.venues, venue)
        self.notifier.success(t("venue_created"))
        return ActionResult.ok(venue)

    async def update_venue(self, venue_id: str, update_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("put", f"/venues/{venue_id}", update_data)
                venue = Venue.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "venue_update_failed")
        self.venues = replace_by_id(self.venues, venue)
        self.nearby_venues = replace_by_id(self.nearby_venues, venue)
        if is_current(self.current_venue, venue.id):
            self.current_venue = venue
        self.notifier.success(t("venue_updated"))
        return ActionResult.ok(venue)

    async def delete_venue(self, venue_id: str) -> ActionResult:
        try:
            await self._call("delete", f"/venues/{venue_id}")
        except ACTION_ERRORS as e:
            return self._fail(e, "venue_delete_failed")
        self.venues = remove_by_id(self.venues, venue_id)
        self.nearby_venues = remove_by_id(self.nearby_venues, venue_id)
        if is_current(self.current_venue, venue_id):
            self.current_venue = None
        self.notifier.success(t("venue_deleted"))
        return ActionResult.ok()

    async def add_venue_review(self, venue_id: str, rating: int, review: str) -> ActionResult:
        denied = self._require_login("action_review")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/venues/{venue_id}/reviews", {"rating": rating, "review": review})
        except ACTION_ERRORS as e:
            return self._fail(e, "review_add_failed")
        # Rating aggregates are computed server-side; reload the venue
        await self.get_venue_by_id(venue_id)
        self.notifier.success(t("review_added"))
        return ActionResult.ok(body.get("data"))

    async def book_venue(self, venue_id: str, booking_data: Dict[str, Any]) -> ActionResult:
        denied = self._require_login("action_book")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/venues/{venue_id}/book", booking_data)
        except ACTION_ERRORS as e:
            return self._fail(e, "booking_failed")
        self.notifier.success(t("venue_booked_success"))
        return ActionResult.ok(body.get("data"))

    async def toggle_venue_favorite(self, venue_id: str) -> ActionResult:
        denied = self._require_login("action_favorite")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/venues/{venue_id}/favorite")
        except ACTION_ERRORS as e:
            return self._fail(e, "favorite_failed")
        # Flag sits at the envelope top level, not under data
        favorite = bool(body.get("isFavorite", (body.get("data") or {}).get("isFavorite")))
        if favorite:
            if venue_id not in self.favorite_venues:
                self.favorite_venues = [*self.favorite_venues, venue_id]
            self.notifier.success(t("favorite_added"))
        else:
            self.favorite_venues = [v for v in self.favorite_venues if v != venue_id]
            self.notifier.success(t("favorite_removed"))
        return ActionResult.ok({"is_favorite": favorite})

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_VENUE_BOOKED: self.on_venue_booked,
            EVT_VENUE_REVIEWED: self.on_venue_reviewed,
        }

    def on_venue_booked(self, payload: Dict[str, Any]) -> None:
        self.notifier.success(t("venue_booked", name=payload.get("venueName", "")))
        venue_id = payload.get("venueId")
        if venue_id and is_current(self.current_venue, str(venue_id)):
            venue = self.current_venue
            self.current_venue = venue.model_copy(update={"total_bookings": venue.total_bookings + 1})

    def on_venue_reviewed(self, payload: Dict[str, Any]) -> None:
        venue_id = payload.get("venueId")
        if not venue_id or not is_current(self.current_venue, str(venue_id)):
            return
        venue = self.current_venue
        changes = {"total_reviews": venue.total_reviews + 1}
        if payload.get("newAverageRating") is not None:
            changes["average_rating"] = payload["newAverageRating"]
        self.current_venue = venue.model_copy(update=changes)
