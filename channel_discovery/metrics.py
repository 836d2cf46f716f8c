"""
Metrics Calculations

Functions for parsing API values and calculating the metrics a channel's
recent video sample is judged on: average views, shorts ratio and recency.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from .config import SHORTS_MAX_SECONDS
from .models import ChannelMetrics, VideoSample

_DURATION_PATTERN = re.compile(
    r'^P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?)?$'
)

# Sort key for videos without a publish date: oldest possible
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


# ============================================================================
# PARSING
# ============================================================================

def parse_iso8601_duration(duration: Optional[str]) -> int:
    """
    Parse ISO 8601 duration (PT1H23M45S) to seconds.

    Args:
        duration: ISO 8601 duration string

    Returns:
        Duration in seconds, 0 for empty or malformed input
    """
    if not duration or not isinstance(duration, str):
        return 0

    match = _DURATION_PATTERN.match(duration.strip())
    if not match:
        return 0

    days = int(match.group(1) or 0)
    hours = int(match.group(2) or 0)
    minutes = int(match.group(3) or 0)
    seconds = int(match.group(4) or 0)

    return days * 86400 + hours * 3600 + minutes * 60 + seconds


def parse_published_at(value: Optional[str]) -> Optional[datetime]:
    """Parse an API timestamp (2024-01-31T12:00:00Z) into an aware datetime."""
    if not value:
        return None
    try:
        published_at = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=timezone.utc)
    return published_at


def parse_count(value) -> int:
    """Parse a statistics counter (sent as a string); missing or invalid counts are 0."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def format_timestamp(value: datetime) -> str:
    """Format an aware datetime as ISO 8601 UTC with a Z suffix."""
    return value.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


# ============================================================================
# SAMPLE METRICS
# ============================================================================

def select_recent_sample(videos: Sequence[VideoSample], sample_size: int) -> List[VideoSample]:
    """Sort videos by publish time (newest first) and keep the first sample_size."""
    ordered = sorted(videos, key=lambda v: v.published_at or _EPOCH, reverse=True)
    return ordered[:sample_size]


def calculate_average_views(videos: Sequence[VideoSample]) -> int:
    """
    Calculate the mean view count of a sample, rounded half up to an integer.

    Returns:
        Average views, 0 for an empty sample
    """
    if not videos:
        return 0
    total = sum(v.view_count for v in videos)
    count = len(videos)
    return (2 * total + count) // (2 * count)


def is_short(video: VideoSample) -> bool:
    """
    Shorts heuristic: under a minute long, or "short" in the title.

    A zero duration means the API did not report one and does not count.
    """
    if 0 < video.duration_seconds < SHORTS_MAX_SECONDS:
        return True
    return 'short' in (video.title or '').lower()


def calculate_shorts_ratio(videos: Sequence[VideoSample]) -> float:
    """Fraction of the sample classified as shorts (0.0 for an empty sample)."""
    if not videos:
        return 0.0
    return sum(1 for v in videos if is_short(v)) / len(videos)


def has_recent_video(videos: Sequence[VideoSample], within_days: int, now: Optional[datetime] = None) -> bool:
    """
    Check that at least one video was published within the last within_days days.

    A window of 0 disables the check, so any sample (even an empty one) passes.
    """
    if not within_days or within_days <= 0:
        return True

    now = now or datetime.now(timezone.utc)
    threshold = now - timedelta(days=within_days)
    return any(v.published_at is not None and v.published_at >= threshold for v in videos)


def calculate_channel_metrics(videos: Sequence[VideoSample], recent_within_days: int,
                              now: Optional[datetime] = None, keyword_text: str = '') -> ChannelMetrics:
    """
    Calculate all derived metrics for a channel's video sample.

    Args:
        videos: The channel's recent video sample
        recent_within_days: Recency window in days (0 disables)
        now: Reference time for the recency check (defaults to current UTC time)
        keyword_text: Combined text for the keyword filters

    Returns:
        ChannelMetrics
    """
    return ChannelMetrics(
        avg_views=calculate_average_views(videos),
        shorts_ratio=calculate_shorts_ratio(videos),
        has_recent_within=has_recent_video(videos, recent_within_days, now),
        sample_size=len(videos),
        keyword_text=keyword_text,
    )
