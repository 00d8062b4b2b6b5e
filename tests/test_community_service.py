import json

import httpx
import pytest

from core.services.community_service import CommunityService
from tests.helpers import VIEWER_ID, envelope, post


@pytest.fixture
def community(make_store, channel):
    store = make_store(CommunityService)
    store.attach(channel)
    return store


@pytest.fixture
async def feed(community, server):
    server.add("GET", "/community/posts", envelope([post("p1", likesCount=2), post("p2")]))
    server.add("GET", "/community/posts/trending", envelope([post("p1", likesCount=2)]))
    server.add("GET", "/community/posts/p1", envelope(post("p1", likesCount=2)))
    await community.get_community_posts()
    await community.get_trending_posts()
    await community.get_community_post_by_id("p1")
    return community


async def test_created_post_is_first_with_server_id(community, server, viewer, notifier):
    server.add("GET", "/community/posts", envelope([post("p1")]))
    await community.get_community_posts()
    server.add("POST", "/community/posts", envelope(post("srv-42", content="Hill repeats")))

    result = await community.create_community_post({"content": "Hill repeats", "tags": ["hills"]})

    assert result.success
    assert community.posts[0].id == "srv-42"
    assert [p.id for p in community.posts] == ["srv-42", "p1"]
    assert notifier.messages("success") == ["Post created successfully"]
    sent = server.calls("POST", "/community/posts")[0]
    assert sent.headers["content-type"].startswith("multipart/form-data")


async def test_create_failure_returns_message(community, server, viewer):
    server.add("POST", "/community/posts", {"success": False, "message": "Content is required"}, status=400)

    result = await community.create_community_post({"content": ""})

    assert not result.success
    assert result.message == "Content is required"
    assert community.posts == []


async def test_deleted_push_removes_exactly_one_and_clears_current(feed, channel, notifier):
    channel.push("communityPostDeleted", "p1")

    assert [p.id for p in feed.posts] == ["p2"]
    assert feed.trending_posts == []
    assert feed.current_post is None
    assert notifier.messages("success") == ["A post was removed"]


async def test_deleted_push_for_other_post_keeps_current(feed, channel):
    channel.push("communityPostDeleted", {"postId": "p2"})

    assert [p.id for p in feed.posts] == ["p1"]
    assert feed.current_post.id == "p1"


async def test_like_is_optimistic_everywhere_and_rolled_back(feed, server, viewer, notifier):
    seen = {}

    def reject(request):
        seen["list"] = (feed.posts[0].is_liked, feed.posts[0].likes_count)
        seen["trending"] = feed.trending_posts[0].likes_count
        seen["current"] = feed.current_post.likes_count
        return httpx.Response(500, json={"success": False})

    server.handle("POST", "/community/posts/p1/like", reject)

    result = await feed.toggle_like_post("p1")

    assert seen == {"list": (True, 3), "trending": 3, "current": 3}
    assert not result.success
    assert (feed.posts[0].is_liked, feed.posts[0].likes_count) == (False, 2)
    assert feed.trending_posts[0].likes_count == 2
    assert feed.current_post.likes_count == 2
    assert notifier.messages("error") == ["Failed to update like"]


async def test_like_takes_server_confirmed_count(feed, server, viewer):
    server.add("POST", "/community/posts/p1/like", envelope({"isLiked": True, "likesCount": 9}))

    result = await feed.toggle_like_post("p1")

    assert result.success
    assert (feed.posts[0].is_liked, feed.posts[0].likes_count) == (True, 9)
    assert feed.current_post.likes_count == 9


async def test_like_without_session(feed, server, notifier):
    before = len(server.requests)

    result = await feed.toggle_like_post("p1")

    assert not result.success
    assert len(server.requests) == before
    assert notifier.messages("error") == ["Please login to like posts"]


async def test_new_post_push_prepends_and_toasts(feed, channel, notifier):
    channel.push("newCommunityPost", post("p9"))

    assert [p.id for p in feed.posts] == ["p9", "p1", "p2"]
    assert notifier.messages("success") == ["New post in the community"]


async def test_liked_push_patches_counts(feed, channel):
    channel.push("communityPostLiked", {"postId": "p1", "likesCount": 5})

    assert feed.posts[0].likes_count == 5
    assert feed.trending_posts[0].likes_count == 5
    assert feed.current_post.likes_count == 5
    assert feed.posts[0].is_liked is False


async def test_new_comment_push(feed, channel):
    channel.push("newComment", {"postId": "p1", "comment": {"_id": "c1", "content": "Nice pace"}})

    assert feed.posts[0].comments_count == 1
    assert [c.content for c in feed.current_post.comments] == ["Nice pace"]


async def test_add_and_delete_comment(feed, server, viewer):
    server.add("POST", "/community/posts/p1/comments", envelope({"_id": "c7", "content": "See you Sunday"}))
    server.add("DELETE", "/community/posts/p1/comments/c7", envelope())

    added = await feed.add_comment_to_post("p1", "See you Sunday")
    assert added.success
    assert feed.current_post.comments_count == 1
    assert feed.posts[0].comments_count == 1

    deleted = await feed.delete_comment("p1", "c7")
    assert deleted.success
    assert feed.current_post.comments == []
    assert feed.current_post.comments_count == 0


async def test_join_community_refreshes_my_communities(community, server, viewer, notifier):
    server.add("POST", "/community/c1/join", envelope(message="Join request sent"))
    server.add("GET", "/community/my-communities", envelope([{"_id": "c1", "name": "Trail Crew"}]))

    result = await community.join_community("c1")

    assert result.success
    assert result.message == "Join request sent"
    assert [c.id for c in community.my_communities] == ["c1"]
    assert notifier.messages("success") == ["Join request sent"]


async def test_members_carry_creator_and_pagination(community, server):
    server.add("GET", "/community/c1/members", envelope(
        [{"user": {"_id": VIEWER_ID}, "role": "admin"}],
        creator={"_id": VIEWER_ID},
        pagination={"currentPage": 1, "totalPages": 1, "total": 1},
    ))

    result = await community.get_community_members("c1", role="admin")

    assert result.meta["creator"] == {"_id": VIEWER_ID}
    assert result.meta["pagination"].total == 1
    assert server.requests[0].url.params["role"] == "admin"
    assert "search" not in server.requests[0].url.params


async def test_delete_community_sends_confirmation(community, server, viewer):
    server.add("DELETE", "/community/c1", envelope())

    await community.delete_community("c1")

    assert json.loads(server.requests[0].content) == {"confirmDelete": True}
