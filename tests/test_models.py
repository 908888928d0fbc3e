"""Tests for catalog and YouTube record models."""

from catalog_ingest.models.catalog import Episode, Series
from catalog_ingest.models.youtube import RegionRestriction


def test_region_restriction_checks_both_lists():
    assert RegionRestriction().is_eligible("IN") is True
    assert RegionRestriction(blocked=["PK"]).is_eligible("in") is True
    assert RegionRestriction(blocked=["IN"]).is_eligible("IN") is False
    assert RegionRestriction(allowed=["JP"]).is_eligible("IN") is False
    assert RegionRestriction(allowed=["JP"], blocked=["US"]).is_eligible("IN") is False
    assert RegionRestriction(allowed=["IN"], blocked=["US"]).is_eligible("IN") is True


def test_episode_keeps_privacy_value_from_api():
    episode = Episode.model_validate({"youtubeId": "a", "title": "Ep", "privacyStatus": "unlisted"})

    assert episode.privacy_status == "unlisted"
    assert episode.model_dump(by_alias=True)["privacyStatus"] == "unlisted"


def test_series_document_round_trip_keeps_episode_index():
    series = Series(name="Show", videos=[Episode(youtube_id="a", title="Ep 1")])

    document = series.to_document()
    restored = Series.from_document(document)

    assert document["episodeIds"] == ["a"]
    assert document["source"] == "youtube"
    assert restored.episode_ids == ["a"]
