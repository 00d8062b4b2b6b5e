"""
Pure state transitions shared by the domain stores.

Every function returns new lists / entity copies and never mutates its
inputs, so a snapshot taken before an optimistic update stays valid and
rollback is just putting the snapshot back.
"""

from typing import Any, Callable, List, Optional, Sequence, TypeVar

from core.domain.models import Athlete, CommunityPost, LeaderboardEntry

E = TypeVar("E")


def _entity_id(entity: Any) -> Optional[str]:
    return getattr(entity, "id", None)


def find_by_id(items: Sequence[E], entity_id: str, key: Callable[[E], Any] = _entity_id) -> Optional[E]:
    for item in items:
        if key(item) == entity_id:
            return item
    return None


def replace_by_id(items: Sequence[E], entity: E, key: Callable[[E], Any] = _entity_id) -> List[E]:
    """Swap the item with the same id for `entity`; no-op when absent."""
    target = key(entity)
    return [entity if key(item) == target else item for item in items]


def patch_by_id(items: Sequence[E], entity_id: str, key: Callable[[E], Any] = _entity_id, **changes) -> List[E]:
    return [item.model_copy(update=changes) if key(item) == entity_id else item for item in items]


def update_by_id(items: Sequence[E], entity_id: str, fn: Callable[[E], E],
                 key: Callable[[E], Any] = _entity_id) -> List[E]:
    return [fn(item) if key(item) == entity_id else item for item in items]


def remove_by_id(items: Sequence[E], entity_id: str, key: Callable[[E], Any] = _entity_id) -> List[E]:
    return [item for item in items if key(item) != entity_id]


def prepend(items: Sequence[E], entity: E) -> List[E]:
    return [entity, *items]


def merge_page(items: Sequence[E], page_items: Sequence[E], page: int) -> List[E]:
    """Page 1 replaces the list, later pages append in server order."""
    if page <= 1:
        return list(page_items)
    return [*items, *page_items]


def is_current(current: Any, entity_id: Optional[str]) -> bool:
    return current is not None and entity_id is not None and _entity_id(current) == entity_id


# === FOLLOW ===

def is_following(athlete: Athlete, viewer_id: Optional[str]) -> bool:
    if viewer_id and viewer_id in athlete.followers:
        return True
    return athlete.is_following


def set_follow(athlete: Athlete, follower_id: Optional[str], follow: bool, by_viewer: bool = True) -> Athlete:
    """
    Put `follower_id` in (or out of) the follower list; count always tracks the list.
    `is_following` is the viewer's own flag and only moves when the viewer follows.
    """
    followers = [f for f in athlete.followers if f != follower_id]
    if follow and follower_id:
        followers.append(follower_id)
    changes = {"followers": followers, "followers_count": len(followers)}
    if by_viewer:
        changes["is_following"] = follow
    return athlete.model_copy(update=changes)


def toggle_follow(athlete: Athlete, viewer_id: Optional[str]) -> Athlete:
    return set_follow(athlete, viewer_id, not is_following(athlete, viewer_id))


# === LIKE ===

def set_like(post: CommunityPost, liked: bool, likes_count: Optional[int] = None) -> CommunityPost:
    if likes_count is None:
        delta = 0 if liked == post.is_liked else (1 if liked else -1)
        likes_count = max(0, post.likes_count + delta)
    return post.model_copy(update={"is_liked": liked, "likes_count": likes_count})


def toggle_like(post: CommunityPost) -> CommunityPost:
    return set_like(post, not post.is_liked)


# === ROLLBACK ===

def restore(items: Sequence[E], snapshot: Optional[E]) -> List[E]:
    """Inverse of an optimistic update: put the pre-action entity back by id."""
    if snapshot is None:
        return list(items)
    return replace_by_id(items, snapshot)


# === LEADERBOARD ===

def leaderboard_user_id(entry: LeaderboardEntry) -> str:
    return entry.user.id


def sort_by_rank(entries: Sequence[LeaderboardEntry]) -> List[LeaderboardEntry]:
    # Stable sort keeps server order for equal ranks
    return sorted(entries, key=lambda e: e.rank)
