"""Tests for the two-pass playability filter."""

from catalog_ingest.services.playability import PlayabilityFilter, is_likely_members_only

from conftest import make_video


def test_blocked_region_excluded_for_target():
    video = make_video("v1", blocked=["IN"])

    assert PlayabilityFilter("IN").is_playable(video) is False
    assert PlayabilityFilter("US").is_playable(video) is True


def test_allow_list_must_contain_region():
    video = make_video("v1", allowed=["JP", "in"])

    assert PlayabilityFilter("IN").is_playable(video) is True
    assert PlayabilityFilter("US").is_playable(video) is False


def test_both_region_lists_apply():
    blocked_and_allowed = make_video("v1", allowed=["IN"], blocked=["IN"])
    blocked_elsewhere_not_allowed = make_video("v2", allowed=["JP"], blocked=["US"])
    blocked_elsewhere_allowed = make_video("v3", allowed=["IN", "JP"], blocked=["US"])

    flt = PlayabilityFilter("IN")
    assert flt.is_playable(blocked_and_allowed) is False
    assert flt.is_playable(blocked_elsewhere_not_allowed) is False
    assert flt.is_playable(blocked_elsewhere_allowed) is True


def test_private_and_not_embeddable_rejected():
    flt = PlayabilityFilter("IN")

    assert flt.is_playable(make_video("v1", privacy_status="private")) is False
    assert flt.is_playable(make_video("v2", privacy_status="unlisted")) is False
    assert flt.is_playable(make_video("v3", embeddable=False)) is False


def test_members_only_heuristic():
    assert is_likely_members_only(make_video("v1", title="Episode 3 (Members Only)"))
    assert is_likely_members_only(make_video("v2", description="Only for members of the channel"))
    assert not is_likely_members_only(make_video("v3", title="Episode 3"))


def test_strict_pass_sufficient_keeps_order():
    videos = [make_video(f"v{i}") for i in range(4)]

    result = PlayabilityFilter("IN", min_playable=3).apply(videos)

    assert result.relaxed is False
    assert [v.video_id for v in result.episodes] == ["v0", "v1", "v2", "v3"]


def test_relaxation_used_when_strict_is_short():
    videos = [
        make_video("v1", title="Episode 1"),
        make_video("v2", title="Episode 2 members"),
        make_video("v3", title="Episode 3"),
        make_video("v4", title="Episode 4 members-only"),
        make_video("v5", title="Episode 5", embeddable=False),
    ]

    result = PlayabilityFilter("IN", min_playable=3).apply(videos)

    assert result.strict_count == 2
    assert result.relaxed is True
    assert [v.video_id for v in result.episodes] == ["v1", "v2", "v3", "v4"]


def test_relaxation_discarded_when_still_short():
    videos = [
        make_video("v1", title="Episode 1"),
        make_video("v2", title="Episode 2 members"),
        make_video("v3", title="Episode 3", privacy_status="private"),
    ]

    result = PlayabilityFilter("IN", min_playable=3).apply(videos)

    assert result.relaxed is False
    assert [v.video_id for v in result.episodes] == ["v1"]


def test_relaxation_never_admits_private_or_blocked():
    videos = [
        make_video("v1", title="members 1", privacy_status="private"),
        make_video("v2", title="members 2", blocked=["IN"]),
        make_video("v3", title="members 3", embeddable=False),
    ]

    result = PlayabilityFilter("IN", min_playable=1).apply(videos)

    assert result.episodes == []
    assert result.relaxed is False
