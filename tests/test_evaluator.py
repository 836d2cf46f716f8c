"""Tests for single-channel evaluation against the filter chain."""

import logging

import pytest

from channel_discovery.config import DiscoveryConfig
from channel_discovery.evaluator import evaluate_channel
from channel_discovery.youtube_api import ApiRequestError

from conftest import CHANNEL_ID, NOW, http_error, make_channel_item, make_video_item


def config(**overrides):
    values = dict(
        api_key="key",
        min_subscribers=10000,
        avg_views_min=5000,
        avg_views_max=20000,
        recent_video_within_days=30,
        sample_size=12,
        include_keywords=("coach",),
        exclude_keywords=("guru",),
    )
    values.update(overrides)
    return DiscoveryConfig(**values)


def setup_channel(fake_youtube, channel=None, videos=None):
    channel = channel or make_channel_item()
    if videos is None:
        videos = [make_video_item("v0", published_days_ago=5)] + [
            make_video_item(f"v{i}", published_days_ago=5 + i * 10) for i in range(1, 12)
        ]
    fake_youtube.set_channels([channel])
    fake_youtube.set_playlist([v["id"] for v in videos])
    fake_youtube.set_videos(videos)


def test_passing_channel_produces_record(service, fake_youtube):
    setup_channel(fake_youtube)
    evaluation = evaluate_channel(service, CHANNEL_ID, config(), now=NOW)
    assert evaluation.passed
    record = evaluation.record
    assert record["channelId"] == CHANNEL_ID
    assert record["avgViews"] == 8000
    assert record["shortsRatio"] == 0
    assert record["sampleSize"] == 12
    assert record["subscriberCount"] == 50000
    assert record["channelUrl"] == f"https://www.youtube.com/channel/{CHANNEL_ID}"
    assert record["lastScrapedAt"] == "2026-03-01T12:00:00Z"
    assert record["sampleVideos"][0]["videoId"] == "v0"
    assert record["sampleVideos"][0]["url"] == "https://www.youtube.com/watch?v=v0"


def test_no_channel_details(service, fake_youtube, caplog):
    fake_youtube.set_channels([])
    evaluation = evaluate_channel(service, CHANNEL_ID, config(), now=NOW)
    assert not evaluation.passed
    assert evaluation.skip_reason == "no channel details returned"
    assert "No channel details returned" in caplog.text


def test_country_checked_before_subscribers(service, fake_youtube):
    setup_channel(fake_youtube, channel=make_channel_item(country="GB", subscribers="10"))
    evaluation = evaluate_channel(service, CHANNEL_ID, config(country="US"), now=NOW)
    assert evaluation.skip_reason.startswith("country mismatch")
    assert fake_youtube.playlist_items_resource.calls == []


def test_hidden_subscribers_skipped(service, fake_youtube):
    setup_channel(fake_youtube, channel=make_channel_item(hidden=True))
    evaluation = evaluate_channel(service, CHANNEL_ID, config(), now=NOW)
    assert "hidden" in evaluation.skip_reason


def test_no_uploads_playlist(service, fake_youtube):
    setup_channel(fake_youtube, channel=make_channel_item(uploads=None))
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason == "no uploads playlist"


def test_empty_playlist(service, fake_youtube):
    setup_channel(fake_youtube, videos=[])
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason == "no recent videos found"


def test_no_video_details(service, fake_youtube):
    setup_channel(fake_youtube)
    fake_youtube.set_videos([])
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason == "no video details"


def test_sample_is_sorted_and_truncated(service, fake_youtube):
    videos = [make_video_item(f"v{i}", published_days_ago=30 - i) for i in range(5)]
    setup_channel(fake_youtube, videos=videos)
    evaluation = evaluate_channel(service, CHANNEL_ID, config(sample_size=3), now=NOW)
    assert [v["videoId"] for v in evaluation.record["sampleVideos"]] == ["v2", "v1", "v0"]
    assert evaluation.record["sampleSize"] == 3


def test_no_recent_video(service, fake_youtube):
    videos = [make_video_item(f"v{i}", published_days_ago=100 + i) for i in range(3)]
    setup_channel(fake_youtube, videos=videos)
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason.startswith("no video within")


def test_recency_disabled(service, fake_youtube):
    videos = [make_video_item(f"v{i}", published_days_ago=400 + i) for i in range(3)]
    setup_channel(fake_youtube, videos=videos)
    assert evaluate_channel(service, CHANNEL_ID, config(recent_video_within_days=0), now=NOW).passed


def test_single_short_disqualifies(service, fake_youtube):
    videos = [make_video_item(f"v{i}") for i in range(11)] + [make_video_item("s", duration="PT30S")]
    setup_channel(fake_youtube, videos=videos)
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason.startswith("shorts present")


def test_shorts_allowed(service, fake_youtube):
    videos = [make_video_item(f"v{i}") for i in range(11)] + [make_video_item("s", duration="PT30S")]
    setup_channel(fake_youtube, videos=videos)
    evaluation = evaluate_channel(service, CHANNEL_ID, config(allow_shorts=True), now=NOW)
    assert evaluation.passed
    assert evaluation.record["shortsRatio"] == pytest.approx(1 / 12)


def test_exclude_keyword_in_description(service, fake_youtube):
    setup_channel(fake_youtube, channel=make_channel_item(description="The business coach Guru"))
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).skip_reason == "excluded by negative keyword"


def test_include_keyword_missing(service, fake_youtube):
    setup_channel(fake_youtube, channel=make_channel_item(title="Kitchen", description="Recipes"))
    evaluation = evaluate_channel(service, CHANNEL_ID, config(), now=NOW)
    assert evaluation.skip_reason == "includeKeywords supplied but none matched"


def test_include_keyword_found_in_video_title(service, fake_youtube):
    videos = [make_video_item(f"v{i}") for i in range(11)] + [make_video_item("c", title="Ask a coach")]
    setup_channel(fake_youtube, channel=make_channel_item(title="Kitchen", description="Recipes"), videos=videos)
    assert evaluate_channel(service, CHANNEL_ID, config(), now=NOW).passed


def test_average_views_bounds(service, fake_youtube):
    setup_channel(fake_youtube)
    assert evaluate_channel(service, CHANNEL_ID, config(avg_views_min=9000), now=NOW).skip_reason.startswith("avgViews below")
    assert evaluate_channel(service, CHANNEL_ID, config(avg_views_max=7000), now=NOW).skip_reason.startswith("avgViews above")


def test_skip_logged_only_when_verbose(service, fake_youtube, caplog):
    setup_channel(fake_youtube, channel=make_channel_item(subscribers="10"))
    caplog.set_level(logging.INFO)

    evaluate_channel(service, CHANNEL_ID, config(verbose=False), now=NOW)
    assert "Skipping channel" not in caplog.text

    evaluate_channel(service, CHANNEL_ID, config(verbose=True), now=NOW)
    assert "Skipping channel" in caplog.text


def test_api_failure_propagates(service, fake_youtube):
    fake_youtube.channels_resource.failures = [http_error(503)] * 4
    with pytest.raises(ApiRequestError):
        evaluate_channel(service, CHANNEL_ID, config(), now=NOW)
