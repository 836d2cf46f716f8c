"""
Data Model

Channel snapshots, video samples and derived metrics passed between
the API client, the evaluator and the filter chain.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ChannelSnapshot:
    """Channel metadata fetched once per candidate."""

    channel_id: str
    title: str = ''
    description: str = ''
    country: Optional[str] = None
    subscriber_count: Optional[int] = None  # None when the channel hides it
    uploads_playlist_id: Optional[str] = None


@dataclass(frozen=True)
class VideoSample:
    """One of a channel's recent uploads, with statistics and duration."""

    video_id: str
    title: str = ''
    description: str = ''
    published_at: Optional[datetime] = None
    view_count: int = 0
    duration_seconds: int = 0


@dataclass(frozen=True)
class ChannelMetrics:
    """Metrics derived from a channel's video sample."""

    avg_views: int
    shorts_ratio: float
    has_recent_within: bool
    sample_size: int
    keyword_text: str = ''  # lower-cased channel + sample text searched by keyword filters
