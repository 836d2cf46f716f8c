"""Tests for the individual filters and the ordered filter chain."""

from channel_discovery.config import DiscoveryConfig
from channel_discovery.filters import (
    CHANNEL_FILTERS,
    SAMPLE_FILTERS,
    check_average_views,
    check_country,
    check_exclude_keywords,
    check_include_keywords,
    check_recency,
    check_shorts,
    check_subscribers,
    combined_text,
    matches_any_keyword,
    run_filters,
)
from channel_discovery.models import ChannelMetrics, ChannelSnapshot, VideoSample


def snapshot(**overrides):
    values = dict(channel_id="UC" + "a" * 22, title="Coach Channel", description="Business coaching",
                  country="US", subscriber_count=50000, uploads_playlist_id="UUabc")
    values.update(overrides)
    return ChannelSnapshot(**values)


def metrics(**overrides):
    values = dict(avg_views=8000, shorts_ratio=0.0, has_recent_within=True, sample_size=12,
                  keyword_text="coach channel business coaching")
    values.update(overrides)
    return ChannelMetrics(**values)


def config(**overrides):
    values = dict(api_key="key", exclude_keywords=())
    values.update(overrides)
    return DiscoveryConfig(**values)


# ---------- country ----------


class TestCountry:
    def test_disabled_when_not_configured(self):
        assert check_country(snapshot(country=None), None, config(country="")) is None

    def test_missing_channel_country_fails(self):
        assert check_country(snapshot(country=None), None, config(country="US"))

    def test_case_insensitive_containment(self):
        assert check_country(snapshot(country="US"), None, config(country="us")) is None

    def test_mismatch(self):
        assert check_country(snapshot(country="GB"), None, config(country="US"))


# ---------- subscribers ----------


class TestSubscribers:
    def test_hidden_count_fails_with_minimum(self):
        assert check_subscribers(snapshot(subscriber_count=None), None, config(min_subscribers=1))

    def test_hidden_count_passes_without_minimum(self):
        assert check_subscribers(snapshot(subscriber_count=None), None, config(min_subscribers=0)) is None

    def test_below_minimum(self):
        assert check_subscribers(snapshot(subscriber_count=9999), None, config(min_subscribers=10000))

    def test_at_minimum(self):
        assert check_subscribers(snapshot(subscriber_count=10000), None, config(min_subscribers=10000)) is None


# ---------- sample filters ----------


class TestRecencyAndShorts:
    def test_recency_fails_without_recent_video(self):
        assert check_recency(snapshot(), metrics(has_recent_within=False), config(recent_video_within_days=30))

    def test_recency_disabled(self):
        assert check_recency(snapshot(), metrics(has_recent_within=False), config(recent_video_within_days=0)) is None

    def test_any_short_disqualifies(self):
        assert check_shorts(snapshot(), metrics(shorts_ratio=0.01), config(allow_shorts=False))

    def test_shorts_allowed(self):
        assert check_shorts(snapshot(), metrics(shorts_ratio=1.0), config(allow_shorts=True)) is None


class TestKeywords:
    def test_exclude_matches_any_case(self):
        text = combined_text(snapshot(description="Your favourite Guru"), [])
        assert check_exclude_keywords(snapshot(), metrics(keyword_text=text), config(exclude_keywords=("guru",)))

    def test_exclude_wins_over_include(self):
        text = combined_text(snapshot(description="Guru and coach"), [])
        cfg = config(exclude_keywords=("guru",), include_keywords=("coach",))
        assert check_include_keywords(snapshot(), metrics(keyword_text=text), cfg) is None
        assert run_filters(SAMPLE_FILTERS, snapshot(), metrics(keyword_text=text), cfg) == "excluded by negative keyword"

    def test_include_requires_a_match(self):
        text = combined_text(snapshot(title="Cooking", description="Recipes"), [])
        assert check_include_keywords(snapshot(), metrics(keyword_text=text), config(include_keywords=("coach",)))

    def test_include_empty_never_rejects(self):
        assert check_include_keywords(snapshot(), metrics(keyword_text=""), config(include_keywords=())) is None

    def test_include_matches_video_description(self):
        videos = [VideoSample(video_id="v1", title="Episode 1", description="with a sales COACH")]
        text = combined_text(snapshot(title="Podcast", description=""), videos)
        assert check_include_keywords(snapshot(), metrics(keyword_text=text), config(include_keywords=("coach",))) is None

    def test_empty_keywords_are_ignored(self):
        assert not matches_any_keyword("anything", ["", ""])


class TestAverageViews:
    def test_below_min(self):
        assert check_average_views(snapshot(), metrics(avg_views=4999), config(avg_views_min=5000))

    def test_above_max(self):
        assert check_average_views(snapshot(), metrics(avg_views=20001), config(avg_views_max=20000))

    def test_within_bounds(self):
        assert check_average_views(snapshot(), metrics(avg_views=8000),
                                   config(avg_views_min=5000, avg_views_max=20000)) is None

    def test_no_max(self):
        assert check_average_views(snapshot(), metrics(avg_views=10 ** 9), config(avg_views_max=None)) is None


# ---------- chain ordering ----------


class TestFilterChain:
    def test_order(self):
        assert CHANNEL_FILTERS == [check_country, check_subscribers]
        assert SAMPLE_FILTERS == [check_recency, check_shorts, check_exclude_keywords,
                                  check_include_keywords, check_average_views]

    def test_first_failure_wins(self):
        cfg = config(country="US", min_subscribers=100000)
        reason = run_filters(CHANNEL_FILTERS, snapshot(country="GB", subscriber_count=10), None, cfg)
        assert reason.startswith("country mismatch")

    def test_all_pass(self):
        assert run_filters(CHANNEL_FILTERS, snapshot(), None, config()) is None
        assert run_filters(SAMPLE_FILTERS, snapshot(), metrics(), config()) is None
