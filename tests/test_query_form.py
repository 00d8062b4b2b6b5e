from core.domain.models import AthleteFilters, VenueFilters
from core.utils.form_data import encode_payload, needs_multipart
from core.utils.query import build_query


def test_default_filters_send_only_meaningful_values():
    params = build_query(AthleteFilters(), page=1, limit=12)

    assert params == {"sortBy": "joinedDate:desc", "page": 1, "limit": 12}


def test_active_filters_use_server_names():
    filters = AthleteFilters(search="ann", sport="tennis", skill_level="all", location=" ")

    params = build_query(filters)

    assert params == {"search": "ann", "sport": "tennis", "sortBy": "joinedDate:desc"}


def test_false_flags_are_skipped():
    assert "verified" not in build_query(VenueFilters())
    assert build_query(VenueFilters(verified=True))["verified"] is True


def test_extras_follow_the_same_rules():
    assert build_query(page=2, status="all", startDate=None, endDate="2026-01-01") == {
        "page": 2,
        "endDate": "2026-01-01",
    }


def test_flat_payload_stays_json():
    json_body, form = encode_payload({"name": "Sunday 5k", "maxParticipants": 20, "notes": None})

    assert form is None
    assert json_body == {"name": "Sunday 5k", "maxParticipants": 20}


def test_arrays_switch_to_multipart_as_json_strings():
    json_body, form = encode_payload({"content": "Hi", "tags": ["run", "trail"], "public": True})

    assert json_body is None
    assert form.fields == {"content": "Hi", "tags": '["run", "trail"]', "public": "true"}
    assert form.files == []


def test_file_values_become_file_parts():
    payload = {"name": "Court 1", "images": [("a.jpg", b"1"), b"2"]}

    assert needs_multipart(payload)
    _, form = encode_payload(payload)

    assert form.files == [("images", ("a.jpg", b"1")), ("images", ("images-1", b"2"))]
    assert form.parts()[0] == ("name", (None, "Court 1"))


def test_empty_payload_has_no_body():
    assert encode_payload(None) == (None, None)
    assert encode_payload({}) == (None, None)
