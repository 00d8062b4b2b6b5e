"""
Community store - community posts (feed, trending, following), comments,
and the communities themselves with their membership management.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from core.domain.constants import (
    DEFAULT_MEMBERS_LIMIT,
    DEFAULT_TRENDING_LIMIT,
    EVT_COMMUNITY_POST_DELETED,
    EVT_COMMUNITY_POST_LIKED,
    EVT_COMMUNITY_POST_UPDATED,
    EVT_NEW_COMMENT,
    EVT_NEW_COMMUNITY_POST,
)
from core.domain.models import (
    ActionResult,
    Comment,
    Community,
    CommunityFilters,
    CommunityPost,
    Pagination,
)
from core.domain.state import (
    find_by_id,
    is_current,
    merge_page,
    prepend,
    remove_by_id,
    replace_by_id,
    restore,
    set_like,
    update_by_id,
)
from core.interfaces import Handler
from core.services.base_store import ACTION_ERRORS, DomainStore
from core.utils.query import build_query
from locales import t

logger = logging.getLogger(__name__)


class CommunityService(DomainStore):
    name = "COMMUNITY"

    def __init__(self, *args, page_limit: int = 12, **kwargs):
        super().__init__(*args, **kwargs)
        # Posts
        self.posts: List[CommunityPost] = []
        self.trending_posts: List[CommunityPost] = []
        self.following_posts: List[CommunityPost] = []
        self.current_post: Optional[CommunityPost] = None
        self.pagination = Pagination(limit=page_limit)
        self.filters = CommunityFilters()
        # Communities
        self.communities: List[Community] = []
        self.my_communities: List[Community] = []
        self.current_community: Optional[Community] = None
        self.community_pagination = Pagination(limit=page_limit)

    # === FILTERS ===

    def set_filters(self, **changes) -> CommunityFilters:
        self.filters = self.filters.model_copy(update=changes)
        return self.filters

    def reset_filters(self) -> CommunityFilters:
        self.filters = CommunityFilters()
        return self.filters

    def clear_current_post(self) -> None:
        self.current_post = None

    # === POST HELPERS ===

    def _update_post(self, post_id: str, fn: Callable[[CommunityPost], CommunityPost]) -> None:
        """Apply `fn` to the post wherever it is held"""
        self.posts = update_by_id(self.posts, post_id, fn)
        self.trending_posts = update_by_id(self.trending_posts, post_id, fn)
        self.following_posts = update_by_id(self.following_posts, post_id, fn)
        if is_current(self.current_post, post_id):
            self.current_post = fn(self.current_post)

    def _remove_post(self, post_id: str) -> None:
        self.posts = remove_by_id(self.posts, post_id)
        self.trending_posts = remove_by_id(self.trending_posts, post_id)
        self.following_posts = remove_by_id(self.following_posts, post_id)
        if is_current(self.current_post, post_id):
            self.current_post = None

    def _held_post(self, post_id: str) -> Optional[CommunityPost]:
        for items in (self.posts, self.trending_posts, self.following_posts):
            post = find_by_id(items, post_id)
            if post is not None:
                return post
        return self.current_post if is_current(self.current_post, post_id) else None

    # === POSTS ===

    async def get_community_posts(self, filters: Optional[CommunityFilters] = None, page: int = 1) -> ActionResult:
        if filters is not None:
            self.filters = filters
        params = build_query(self.filters, page=page, limit=self.pagination.limit)
        result = await self._load_page("posts", "/community/posts", params, CommunityPost, "posts_fetch_failed")
        if result.success and not result.stale:
            self.posts = merge_page(self.posts, result.data, page)
            self.pagination = result.meta["pagination"]
        return result

    async def get_community_post_by_id(self, post_id: str) -> ActionResult:
        result = await self._load_one("current_post", f"/community/posts/{post_id}", CommunityPost, "post_fetch_failed")
        if result.success and not result.stale:
            self.current_post = result.data
        return result

    async def create_community_post(self, post_data: Dict[str, Any]) -> ActionResult:
        denied = self._require_login("action_post")
        if denied:
            return denied
        async with self.busy():
            try:
                body = await self._call("post", "/community/posts", post_data)
                post = CommunityPost.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "post_create_failed")
        self.posts = prepend(self.posts, post)
        self.notifier.success(t("post_created"))
        return ActionResult.ok(post)

    async def update_community_post(self, post_id: str, update_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("put", f"/community/posts/{post_id}", update_data)
                post = CommunityPost.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "post_update_failed")
        self._update_post(post_id, lambda _: post)
        self.notifier.success(t("post_updated"))
        return ActionResult.ok(post)

    async def delete_community_post(self, post_id: str) -> ActionResult:
        try:
            await self._call("delete", f"/community/posts/{post_id}")
        except ACTION_ERRORS as e:
            return self._fail(e, "post_delete_failed")
        self._remove_post(post_id)
        self.notifier.success(t("post_deleted"))
        return ActionResult.ok()

    async def toggle_like_post(self, post_id: str) -> ActionResult:
        """Optimistic like/unlike; server-confirmed counts win, failures roll back"""
        denied = self._require_login("action_like")
        if denied:
            return denied

        snapshot = self._held_post(post_id)
        snapshots = {
            "posts": find_by_id(self.posts, post_id),
            "trending_posts": find_by_id(self.trending_posts, post_id),
            "following_posts": find_by_id(self.following_posts, post_id),
        }
        current_snapshot = self.current_post if is_current(self.current_post, post_id) else None
        if snapshot is not None:
            liked = not snapshot.is_liked
            self._update_post(post_id, lambda p: set_like(p, liked))

        try:
            body = await self._call("post", f"/community/posts/{post_id}/like")
        except ACTION_ERRORS as e:
            for attr, before in snapshots.items():
                setattr(self, attr, restore(getattr(self, attr), before))
            if current_snapshot is not None and is_current(self.current_post, post_id):
                self.current_post = current_snapshot
            return self._fail(e, "like_failed")

        data = body.get("data") or {}
        if "isLiked" in data:
            confirmed = bool(data["isLiked"])
            self._update_post(post_id, lambda p: set_like(p, confirmed, data.get("likesCount")))
        return ActionResult.ok({"is_liked": data.get("isLiked"), "likes_count": data.get("likesCount")})

    async def add_comment_to_post(self, post_id: str, content: str) -> ActionResult:
        denied = self._require_login("action_comment")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/community/posts/{post_id}/comments", {"content": content})
            comment = Comment.model_validate(body.get("data"))
        except ACTION_ERRORS as e:
            return self._fail(e, "comment_failed")
        self.posts = update_by_id(
            self.posts, post_id,
            lambda p: p.model_copy(update={"comments_count": p.comments_count + 1}),
        )
        if is_current(self.current_post, post_id):
            post = self.current_post
            self.current_post = post.model_copy(update={
                "comments": [*post.comments, comment],
                "comments_count": post.comments_count + 1,
            })
        return ActionResult.ok(comment)

    async def get_trending_posts(self, timeframe: str = "week", limit: int = DEFAULT_TRENDING_LIMIT) -> ActionResult:
        result = await self._load_page(
            "trending", "/community/posts/trending", {"timeframe": timeframe, "limit": limit},
            CommunityPost, "trending_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.trending_posts = result.data
        return result

    async def get_following_posts(self, page: int = 1, limit: int = 10) -> ActionResult:
        result = await self._load_page(
            "following", "/community/posts/following/feed", {"page": page, "limit": limit},
            CommunityPost, "following_fetch_failed", toast=False,
        )
        if result.success and not result.stale:
            self.following_posts = merge_page(self.following_posts, result.data, page)
        return result

    async def get_community_stats(self) -> ActionResult:
        try:
            body = await self._call("get", "/community/stats")
        except ACTION_ERRORS as e:
            return self._fail(e, "community_stats_failed", toast=False)
        return ActionResult.ok(body.get("data"))

    async def increment_post_view(self, post_id: str) -> ActionResult:
        try:
            await self._call("post", f"/community/posts/{post_id}/view")
        except ACTION_ERRORS as e:
            logger.debug(f"[COMMUNITY] View not counted for {post_id}: {e}")
            return ActionResult.fail(getattr(e, "message", None))
        return ActionResult.ok()

    async def share_post(self, post_id: str) -> ActionResult:
        try:
            body = await self._call("post", f"/community/posts/{post_id}/share")
        except ACTION_ERRORS as e:
            return self._fail(e, "share_failed", toast=False)
        return ActionResult.ok(body.get("data"), message=body.get("message"))

    # === COMMENTS ===

    def _update_comments(self, post_id: str, fn: Callable[[List[Comment]], List[Comment]]) -> None:
        if is_current(self.current_post, post_id):
            post = self.current_post
            comments = fn(post.comments)
            self.current_post = post.model_copy(update={"comments": comments})

    async def like_comment(self, post_id: str, comment_id: str) -> ActionResult:
        denied = self._require_login("action_like")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/community/posts/{post_id}/comments/{comment_id}/like")
        except ACTION_ERRORS as e:
            return self._fail(e, "comment_like_failed")
        return ActionResult.ok(body.get("data"))

    async def reply_to_comment(self, post_id: str, comment_id: str, content: str) -> ActionResult:
        denied = self._require_login("action_comment")
        if denied:
            return denied
        try:
            body = await self._call(
                "post", f"/community/posts/{post_id}/comments/{comment_id}/replies", {"content": content},
            )
        except ACTION_ERRORS as e:
            return self._fail(e, "reply_failed")
        reply = body.get("data")
        self._update_comments(post_id, lambda comments: update_by_id(
            comments, comment_id, lambda c: c.model_copy(update={"replies": [*c.replies, reply]}),
        ))
        self.notifier.success(t("reply_added"))
        return ActionResult.ok(reply)

    async def update_comment(self, post_id: str, comment_id: str, content: str) -> ActionResult:
        try:
            body = await self._call(
                "put", f"/community/posts/{post_id}/comments/{comment_id}", {"content": content},
            )
        except ACTION_ERRORS as e:
            return self._fail(e, "comment_update_failed")
        self._update_comments(post_id, lambda comments: update_by_id(
            comments, comment_id, lambda c: c.model_copy(update={"content": content}),
        ))
        self.notifier.success(t("comment_updated"))
        return ActionResult.ok(body.get("data"))

    async def delete_comment(self, post_id: str, comment_id: str) -> ActionResult:
        try:
            await self._call("delete", f"/community/posts/{post_id}/comments/{comment_id}")
        except ACTION_ERRORS as e:
            return self._fail(e, "comment_delete_failed")

        def decrement(p: CommunityPost) -> CommunityPost:
            return p.model_copy(update={"comments_count": max(0, p.comments_count - 1)})

        self.posts = update_by_id(self.posts, post_id, decrement)
        if is_current(self.current_post, post_id):
            post = decrement(self.current_post)
            self.current_post = post.model_copy(update={"comments": remove_by_id(post.comments, comment_id)})
        self.notifier.success(t("comment_deleted"))
        return ActionResult.ok()

    # === COMMUNITIES ===

    def _replace_community(self, community: Community) -> None:
        self.communities = replace_by_id(self.communities, community)
        self.my_communities = replace_by_id(self.my_communities, community)
        if is_current(self.current_community, community.id):
            self.current_community = community

    async def get_communities(self, filters: Optional[CommunityFilters] = None, page: int = 1) -> ActionResult:
        if filters is not None:
            self.filters = filters
        params = build_query(self.filters, page=page, limit=self.community_pagination.limit)
        result = await self._load_page("communities", "/community", params, Community, "communities_fetch_failed")
        if result.success and not result.stale:
            self.communities = merge_page(self.communities, result.data, page)
            self.community_pagination = result.meta["pagination"]
        return result

    async def get_my_communities(self) -> ActionResult:
        result = await self._load_page(
            "my_communities", "/community/my-communities", {}, Community, "my_communities_fetch_failed",
        )
        if result.success and not result.stale:
            self.my_communities = result.data
        return result

    async def fetch_community(self, community_id: str) -> ActionResult:
        result = await self._load_one(
            "current_community", f"/community/{community_id}", Community, "community_fetch_failed",
        )
        if result.success and not result.stale:
            self.current_community = result.data
        return result

    async def create_community(self, community_data: Dict[str, Any]) -> ActionResult:
        denied = self._require_login("action_create_community")
        if denied:
            return denied
        async with self.busy():
            try:
                body = await self._call("post", "/community", community_data)
                community = Community.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "community_create_failed")
        self.communities = prepend(self.communities, community)
        self.my_communities = prepend(self.my_communities, community)
        self.notifier.success(t("community_created"))
        return ActionResult.ok(community)

    async def update_community(self, community_id: str, update_data: Dict[str, Any]) -> ActionResult:
        async with self.busy():
            try:
                body = await self._call("put", f"/community/{community_id}", update_data)
                community = Community.model_validate(body.get("data"))
            except ACTION_ERRORS as e:
                return self._fail(e, "community_update_failed")
        self._replace_community(community)
        self.notifier.success(t("community_updated"))
        return ActionResult.ok(community)

    async def delete_community(self, community_id: str) -> ActionResult:
        try:
            await self._call("delete", f"/community/{community_id}", {"confirmDelete": True})
        except ACTION_ERRORS as e:
            return self._fail(e, "community_delete_failed")
        self.communities = remove_by_id(self.communities, community_id)
        self.my_communities = remove_by_id(self.my_communities, community_id)
        if is_current(self.current_community, community_id):
            self.current_community = None
        self.notifier.success(t("community_deleted"))
        return ActionResult.ok()

    async def join_community(self, community_id: str) -> ActionResult:
        denied = self._require_login("action_join_community")
        if denied:
            return denied
        try:
            body = await self._call("post", f"/community/{community_id}/join")
        except ACTION_ERRORS as e:
            return self._fail(e, "community_join_failed")
        # Private communities answer with a pending request message instead of membership
        self.notifier.success(body.get("message") or t("community_joined"))
        await self.get_my_communities()
        return ActionResult.ok(body.get("data"), message=body.get("message"))

    async def leave_community(self, community_id: str) -> ActionResult:
        denied = self._require_login("action_leave_community")
        if denied:
            return denied
        try:
            await self._call("post", f"/community/{community_id}/leave")
        except ACTION_ERRORS as e:
            return self._fail(e, "community_leave_failed")
        self.my_communities = remove_by_id(self.my_communities, community_id)
        self.notifier.success(t("community_left"))
        return ActionResult.ok()

    # === MEMBERSHIP MANAGEMENT ===

    async def get_community_members(
        self,
        community_id: str,
        search: str = "",
        role: str = "",
        page: int = 1,
        limit: int = DEFAULT_MEMBERS_LIMIT,
    ) -> ActionResult:
        params = build_query(page=page, limit=limit, search=search, role=role)
        try:
            body = await self._call("get", f"/community/{community_id}/members", params=params)
        except ACTION_ERRORS as e:
            return self._fail(e, "members_fetch_failed", data=[])
        return ActionResult.ok(
            body.get("data") or [],
            creator=body.get("creator"),
            pagination=self._pagination(body, len(body.get("data") or []), params),
        )

    async def get_join_requests(self, community_id: str) -> ActionResult:
        try:
            body = await self._call("get", f"/community/{community_id}/join-requests")
        except ACTION_ERRORS as e:
            return self._fail(e, "join_requests_failed", data=[])
        return ActionResult.ok(body.get("data") or [])

    async def handle_join_request(self, community_id: str, request_id: str, action: str) -> ActionResult:
        """`action` is "approve" or "reject" """
        try:
            body = await self._call(
                "post", f"/community/{community_id}/join-requests/{request_id}", {"action": action},
            )
        except ACTION_ERRORS as e:
            return self._fail(e, "join_request_failed")
        self.notifier.success(body.get("message") or t("join_request_handled"))
        return ActionResult.ok(body.get("data"), message=body.get("message"))

    async def update_member_role(self, community_id: str, member_id: str, role: str) -> ActionResult:
        try:
            body = await self._call(
                "put", f"/community/{community_id}/members/{member_id}/role", {"role": role},
            )
        except ACTION_ERRORS as e:
            return self._fail(e, "member_role_failed")
        self.notifier.success(body.get("message") or t("member_role_updated"))
        return ActionResult.ok(body.get("data"), message=body.get("message"))

    async def remove_member(self, community_id: str, member_id: str) -> ActionResult:
        try:
            body = await self._call("delete", f"/community/{community_id}/members/{member_id}")
        except ACTION_ERRORS as e:
            return self._fail(e, "member_remove_failed")
        self.notifier.success(body.get("message") or t("member_removed"))
        return ActionResult.ok(body.get("data"), message=body.get("message"))

    # === REALTIME ===

    def realtime_handlers(self) -> Dict[str, Handler]:
        return {
            EVT_NEW_COMMUNITY_POST: self.on_new_post,
            EVT_COMMUNITY_POST_UPDATED: self.on_post_updated,
            EVT_COMMUNITY_POST_DELETED: self.on_post_deleted,
            EVT_COMMUNITY_POST_LIKED: self.on_post_liked,
            EVT_NEW_COMMENT: self.on_new_comment,
        }

    def on_new_post(self, payload: Dict[str, Any]) -> None:
        # Prepended as is, even when it echoes a post this viewer just created
        post = CommunityPost.model_validate(payload)
        self.posts = prepend(self.posts, post)
        self.notifier.success(t("new_post"))

    def on_post_updated(self, payload: Dict[str, Any]) -> None:
        post = CommunityPost.model_validate(payload)
        self._update_post(post.id, lambda _: post)

    def on_post_deleted(self, payload: Any) -> None:
        # Server sends the bare id; tolerate {_id} / {postId} as well
        if isinstance(payload, dict):
            payload = payload.get("postId") or payload.get("_id") or payload.get("id")
        if not payload:
            return
        self._remove_post(str(payload))
        self.notifier.success(t("post_removed"))

    def on_post_liked(self, payload: Dict[str, Any]) -> None:
        post_id = payload.get("postId")
        if not post_id:
            return
        changes = {}
        if "likesCount" in payload:
            changes["likes_count"] = payload["likesCount"]
        if "isLiked" in payload:
            changes["is_liked"] = bool(payload["isLiked"])
        self._update_post(str(post_id), lambda p: p.model_copy(update=changes))

    def on_new_comment(self, payload: Dict[str, Any]) -> None:
        post_id = payload.get("postId")
        if not post_id:
            return
        post_id = str(post_id)
        self.posts = update_by_id(
            self.posts, post_id,
            lambda p: p.model_copy(update={"comments_count": p.comments_count + 1}),
        )
        raw_comment = payload.get("comment")
        if raw_comment and is_current(self.current_post, post_id):
            comment = Comment.model_validate(raw_comment)
            self.current_post = self.current_post.model_copy(update={
                "comments": [*self.current_post.comments, comment],
            })
