import pytest

from core.services.venue_service import VenueService
from tests.helpers import envelope


def venue(venue_id, **fields):
    return {"_id": venue_id, "name": f"Venue {venue_id}", **fields}


@pytest.fixture
def venues(make_store, channel):
    store = make_store(VenueService)
    store.attach(channel)
    return store


@pytest.fixture
async def court(venues, server):
    server.add("GET", "/venues/v1", envelope(venue("v1", name="Court 1", totalReviews=4, averageRating=4.0)))
    await venues.get_venue_by_id("v1")
    return venues


async def test_default_filters_skip_unset_values(venues, server):
    server.add("GET", "/venues", envelope([venue("v1")]))

    await venues.get_venues()

    params = dict(server.requests[0].url.params)
    assert params == {"sortBy": "createdAt:desc", "page": "1", "limit": "12"}


async def test_nearby_sends_coordinates(venues, server):
    server.add("GET", "/venues/nearby", envelope([venue("v2")]))

    await venues.get_nearby_venues(52.52, 13.40, radius=5)

    assert [v.id for v in venues.nearby_venues] == ["v2"]
    params = server.requests[0].url.params
    assert (params["lat"], params["lng"], params["radius"]) == ("52.52", "13.4", "5")


async def test_favorite_flag_is_read_from_envelope(venues, server, viewer, notifier):
    server.add("POST", "/venues/v1/favorite", {"success": True, "isFavorite": True})
    added = await venues.toggle_venue_favorite("v1")

    server.add("POST", "/venues/v1/favorite", {"success": True, "isFavorite": False})
    removed = await venues.toggle_venue_favorite("v1")

    assert added.data == {"is_favorite": True}
    assert removed.data == {"is_favorite": False}
    assert venues.favorite_venues == []
    assert notifier.messages("success") == ["Added to favorites", "Removed from favorites"]


async def test_booking_requires_login(venues, server, notifier):
    result = await venues.book_venue("v1", {"date": "2026-11-01"})

    assert not result.success
    assert server.requests == []
    assert notifier.messages("error") == ["Please login to book venues"]


async def test_review_reloads_the_venue(court, server, viewer):
    server.add("POST", "/venues/v1/reviews", envelope({"rating": 5}))
    server.add("GET", "/venues/v1", envelope(venue("v1", totalReviews=5, averageRating=4.2)))

    result = await court.add_venue_review("v1", 5, "Great surface")

    assert result.success
    assert court.current_venue.total_reviews == 5
    assert len(server.calls("GET", "/venues/v1")) == 2


async def test_booked_and_reviewed_pushes(court, channel, notifier):
    channel.push("venueBooked", {"venueId": "v1", "venueName": "Court 1"})
    channel.push("venueReviewed", {"venueId": "v1", "newAverageRating": 4.5})
    channel.push("venueReviewed", {"venueId": "v-other", "newAverageRating": 1.0})

    assert court.current_venue.total_bookings == 1
    assert court.current_venue.total_reviews == 5
    assert court.current_venue.average_rating == 4.5
    assert notifier.messages("success") == ['Venue "Court 1" has been booked!']


async def test_short_search_is_rejected(venues, server):
    result = await venues.search_venues(" x ")

    assert not result.success
    assert server.requests == []
