"""
Filtering Functions

The channel filter chain. Each filter is an independent predicate over
(snapshot, metrics, config) that returns None when the channel passes
and a skip reason when it does not.

Filters run in a fixed order and the first failure wins, so the order
of CHANNEL_FILTERS and SAMPLE_FILTERS is part of the observable behavior.
"""

from typing import Callable, Iterable, List, Optional, Sequence

from .config import DiscoveryConfig
from .models import ChannelMetrics, ChannelSnapshot, VideoSample

Filter = Callable[[ChannelSnapshot, Optional[ChannelMetrics], DiscoveryConfig], Optional[str]]


# ============================================================================
# KEYWORD MATCHING
# ============================================================================

def combined_text(snapshot: ChannelSnapshot, videos: Sequence[VideoSample]) -> str:
    """
    Lower-cased text the keyword filters search.

    Channel title and description, plus every sample video's title and description.
    """
    parts = [snapshot.title, snapshot.description]
    parts.extend(f"{v.title} {v.description}" for v in videos)
    return ' '.join(parts).lower()


def matches_any_keyword(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match of any non-empty keyword."""
    lowered = (text or '').lower()
    return any(kw and kw.lower() in lowered for kw in keywords)


# ============================================================================
# CHANNEL FILTERS (before the video sample is fetched)
# ============================================================================

def check_country(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """Require the channel country to contain the configured one, when a country is configured."""
    if not config.country:
        return None
    if not snapshot.country:
        return "country requested but not found on channel"
    if config.country.lower() not in snapshot.country.lower():
        return f"country mismatch ({snapshot.country})"
    return None


def check_subscribers(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """
    Require at least min_subscribers subscribers.

    A hidden subscriber count fails whenever min_subscribers > 0.
    """
    if snapshot.subscriber_count is None:
        if config.min_subscribers > 0:
            return "subscriber count is hidden and minSubscribers > 0"
        return None
    if snapshot.subscriber_count < config.min_subscribers:
        return f"subscriber count below min ({snapshot.subscriber_count} < {config.min_subscribers})"
    return None


# ============================================================================
# SAMPLE FILTERS (need the video sample and its metrics)
# ============================================================================

def check_recency(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    if config.recent_video_within_days > 0 and not metrics.has_recent_within:
        return f"no video within the last {config.recent_video_within_days} days"
    return None


def check_shorts(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """Any short in the sample disqualifies the channel unless shorts are allowed."""
    if not config.allow_shorts and metrics.shorts_ratio > 0:
        return f"shorts present in recent videos (ratio {metrics.shorts_ratio:.2f})"
    return None


def check_exclude_keywords(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """Any exclude keyword in the channel or sample text disqualifies the channel."""
    if matches_any_keyword(metrics.keyword_text, config.exclude_keywords):
        return "excluded by negative keyword"
    return None


def check_include_keywords(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """Require one include keyword match; never rejects when no include keywords are configured."""
    if config.include_keywords and not matches_any_keyword(metrics.keyword_text, config.include_keywords):
        return "includeKeywords supplied but none matched"
    return None


def check_average_views(snapshot: ChannelSnapshot, metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    if metrics.avg_views < config.avg_views_min:
        return f"avgViews below min ({metrics.avg_views} < {config.avg_views_min})"
    if config.avg_views_max is not None and metrics.avg_views > config.avg_views_max:
        return f"avgViews above max ({metrics.avg_views} > {config.avg_views_max})"
    return None


CHANNEL_FILTERS: List[Filter] = [
    check_country,
    check_subscribers,
]


SAMPLE_FILTERS: List[Filter] = [
    check_recency,
    check_shorts,
    check_exclude_keywords,
    check_include_keywords,
    check_average_views,
]


def run_filters(filters: Iterable[Filter], snapshot: ChannelSnapshot,
                metrics: Optional[ChannelMetrics], config: DiscoveryConfig) -> Optional[str]:
    """
    Run filters in order and stop at the first failure.

    Returns:
        Skip reason of the first failing filter, or None if all pass
    """
    for check in filters:
        reason = check(snapshot, metrics, config)
        if reason:
            return reason
    return None
