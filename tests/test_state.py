from core.domain.models import Athlete, CommunityPost, LeaderboardEntry
from core.domain.state import (
    is_following,
    merge_page,
    patch_by_id,
    remove_by_id,
    restore,
    set_follow,
    set_like,
    sort_by_rank,
    toggle_follow,
    toggle_like,
)
from tests.helpers import VIEWER_ID, athlete, entry, post


def test_merge_page_replaces_on_first_page_and_appends_after():
    held = ["a", "b"]

    assert merge_page(held, ["c"], 1) == ["c"]
    assert merge_page(held, ["c", "d"], 2) == ["a", "b", "c", "d"]
    assert held == ["a", "b"]


def test_toggle_follow_keeps_count_equal_to_followers():
    ann = Athlete.model_validate(athlete("a1", followers=["u-other"], followersCount=1))

    followed = toggle_follow(ann, VIEWER_ID)
    assert followed.is_following is True
    assert followed.followers == ["u-other", VIEWER_ID]
    assert followed.followers_count == 2

    unfollowed = toggle_follow(followed, VIEWER_ID)
    assert unfollowed.is_following is False
    assert unfollowed.followers == ["u-other"]
    assert unfollowed.followers_count == 1
    # Inputs are never mutated
    assert ann.followers == ["u-other"]


def test_follow_by_someone_else_leaves_viewer_flag():
    ann = Athlete.model_validate(athlete("a1"))

    updated = set_follow(ann, "u-other", True, by_viewer=False)

    assert updated.followers_count == 1
    assert updated.is_following is False
    assert is_following(updated, VIEWER_ID) is False


def test_populated_followers_are_flattened_to_ids():
    ann = Athlete.model_validate(athlete("a1", followers=[{"_id": "u1", "name": "One"}, "u2"]))

    assert ann.followers == ["u1", "u2"]


def test_like_toggle_adjusts_count_and_never_goes_negative():
    liked = toggle_like(CommunityPost.model_validate(post("p1", likesCount=3)))
    assert (liked.is_liked, liked.likes_count) == (True, 4)

    broken = CommunityPost.model_validate(post("p2", likesCount=0, isLiked=True))
    assert toggle_like(broken).likes_count == 0

    confirmed = set_like(liked, True, likes_count=10)
    assert confirmed.likes_count == 10


def test_restore_puts_snapshot_back_by_id():
    posts = [CommunityPost.model_validate(post(pid)) for pid in ("p1", "p2")]
    snapshot = posts[1]
    mutated = [posts[0], toggle_like(posts[1])]

    restored = restore(mutated, snapshot)

    assert restored[1] is snapshot
    assert restored[0] is posts[0]
    assert restore(mutated, None) == mutated


def test_patch_and_remove_by_id():
    posts = [CommunityPost.model_validate(post(pid)) for pid in ("p1", "p2", "p3")]

    patched = patch_by_id(posts, "p2", likes_count=7)
    assert [p.likes_count for p in patched] == [0, 7, 0]

    assert [p.id for p in remove_by_id(posts, "p2")] == ["p1", "p3"]


def test_sort_by_rank_is_stable():
    entries = [LeaderboardEntry.model_validate(e) for e in (entry(3), entry(1), entry(2))]
    tied = entries[0].model_copy(update={"rank": 1})

    ordered = sort_by_rank([tied, *entries[1:]])

    assert [e.user_id for e in ordered] == ["u3", "u1", "u2"]
