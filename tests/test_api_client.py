import httpx
import pytest

from core.domain.exceptions import ApiError, UnauthorizedError
from core.utils.form_data import to_form
from tests.helpers import envelope


async def test_get_returns_envelope(api, server):
    server.add("GET", "/athletes", envelope([{"_id": "a1"}], pagination={"page": 1, "pages": 1}))

    body = await api.get("/athletes", params={"page": 1})

    assert body["data"] == [{"_id": "a1"}]
    assert server.requests[0].url.params["page"] == "1"


async def test_unauthorized_redirects_once_and_still_raises(api, server, navigator):
    server.add("GET", "/auth/me", {"success": False, "message": "Not authorized"}, status=401)
    dropped = []

    async def drop_session():
        dropped.append(True)

    api.on_unauthorized(drop_session)

    with pytest.raises(UnauthorizedError) as exc_info:
        await api.get("/auth/me")

    assert exc_info.value.status == 401
    assert exc_info.value.message == "Not authorized"
    assert navigator.history == ["/login"]
    assert dropped == [True]


async def test_error_status_carries_server_errors(api, server, navigator):
    server.add("POST", "/events", {"success": False, "errors": ["name is required", "date is required"]}, status=400)

    with pytest.raises(ApiError) as exc_info:
        await api.post("/events", json={})

    assert not isinstance(exc_info.value, UnauthorizedError)
    assert exc_info.value.status == 400
    assert exc_info.value.message == "name is required, date is required"
    assert navigator.history == []


async def test_success_false_envelope_is_an_error(api, server):
    server.add("POST", "/community/1/join", {"success": False, "message": "Already a member"})

    with pytest.raises(ApiError) as exc_info:
        await api.post("/community/1/join")

    assert exc_info.value.status == 200
    assert exc_info.value.message == "Already a member"


async def test_transport_failure_has_no_status(api, server):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    server.handle("GET", "/venues", refuse)

    with pytest.raises(ApiError) as exc_info:
        await api.get("/venues")

    assert exc_info.value.status is None
    assert exc_info.value.message is None


async def test_json_content_type_on_bodyless_post(api, server):
    server.add("POST", "/community/posts/p1/like", envelope({"isLiked": True}))

    await api.post("/community/posts/p1/like")

    assert server.requests[0].headers["content-type"] == "application/json"


async def test_multipart_keeps_boundary(api, server):
    server.add("POST", "/community/posts", envelope({"_id": "p1"}))
    form = to_form({"content": "Morning run", "images": [("run.jpg", b"\xff\xd8")]})

    await api.post("/community/posts", form=form)

    content_type = server.requests[0].headers["content-type"]
    assert content_type.startswith("multipart/form-data; boundary=")
    body = server.requests[0].content
    assert b'name="content"' in body
    assert b'filename="run.jpg"' in body


async def test_bare_json_body_is_wrapped(api, server):
    server.add("GET", "/leaderboard/categories", ["overall", "running"])

    body = await api.get("/leaderboard/categories")

    assert body == {"success": True, "data": ["overall", "running"]}
