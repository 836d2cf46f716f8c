"""
Channel Evaluation

Fetches one candidate channel, its recent video sample and the derived
metrics, and runs the filter chain to decide whether it is collected.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

from .aggregation import build_output_record
from .config import DiscoveryConfig
from .filters import CHANNEL_FILTERS, SAMPLE_FILTERS, combined_text, run_filters
from .metrics import calculate_channel_metrics, select_recent_sample
from .youtube_api import YouTubeService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Evaluation:
    """Outcome for one candidate: a record when it passed, a skip reason otherwise."""

    channel_id: str
    record: Optional[Dict] = None
    skip_reason: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.record is not None


def _skip(channel_id: str, title: str, reason: str, config: DiscoveryConfig) -> Evaluation:
    if config.verbose:
        logger.warning(f"Skipping channel '{title or channel_id}' ({channel_id}): {reason}")
    return Evaluation(channel_id=channel_id, skip_reason=reason)


def evaluate_channel(
    service: YouTubeService,
    channel_id: str,
    config: DiscoveryConfig,
    now: Optional[datetime] = None,
) -> Evaluation:
    """
    Evaluate one candidate channel against the filter chain.

    Steps: channel details, channel filters (country, subscribers), uploads
    playlist, recent video IDs, video details, sample selection, metrics,
    sample filters (recency, shorts, keywords, average views).

    Args:
        service: YouTubeService instance
        channel_id: Candidate channel ID
        config: Run configuration
        now: Evaluation time (defaults to current UTC time)

    Returns:
        Evaluation with the output record, or with the first skip reason

    Raises:
        ApiRequestError: If an API call fails after all retries
    """
    now = now or datetime.now(timezone.utc)

    details = service.get_channel_details([channel_id])
    if not details:
        logger.warning(f"No channel details returned for {channel_id}")
        return Evaluation(channel_id=channel_id, skip_reason="no channel details returned")

    snapshot = details[0]
    title = snapshot.title

    reason = run_filters(CHANNEL_FILTERS, snapshot, None, config)
    if reason:
        return _skip(channel_id, title, reason, config)

    if not snapshot.uploads_playlist_id:
        return _skip(channel_id, title, "no uploads playlist", config)

    video_ids = service.get_uploads_video_ids(snapshot.uploads_playlist_id, config.sample_size)
    if not video_ids:
        return _skip(channel_id, title, "no recent videos found", config)

    videos = service.get_video_details(video_ids)
    if not videos:
        return _skip(channel_id, title, "no video details", config)

    sample = select_recent_sample(videos, config.sample_size)
    metrics = calculate_channel_metrics(
        sample,
        config.recent_video_within_days,
        now=now,
        keyword_text=combined_text(snapshot, sample),
    )

    reason = run_filters(SAMPLE_FILTERS, snapshot, metrics, config)
    if reason:
        return _skip(channel_id, title, reason, config)

    record = build_output_record(snapshot, sample, metrics, config, scraped_at=now)
    return Evaluation(channel_id=channel_id, record=record)
