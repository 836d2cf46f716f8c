"""
Output Shaping and Export

Functions for building output records and the run summary,
and exporting results to a flat table.
"""

import logging
from datetime import datetime
from typing import Dict, List, Sequence

import pandas as pd

from .config import DiscoveryConfig
from .identifiers import channel_url, video_url
from .metrics import format_timestamp
from .models import ChannelMetrics, ChannelSnapshot, VideoSample

logger = logging.getLogger(__name__)


def build_output_record(
    snapshot: ChannelSnapshot,
    videos: Sequence[VideoSample],
    metrics: ChannelMetrics,
    config: DiscoveryConfig,
    scraped_at: datetime,
) -> Dict:
    """
    Assemble the output record for a channel that passed every filter.

    Args:
        snapshot: Channel metadata
        videos: The channel's sample videos, newest first
        metrics: Derived metrics for the sample
        config: Run configuration (keyword lists and recency window are echoed)
        scraped_at: Evaluation time

    Returns:
        Record dict in the dataset's camelCase format
    """
    return {
        'channelId': snapshot.channel_id,
        'channelName': snapshot.title,
        'channelUrl': channel_url(snapshot.channel_id),
        'subscriberCount': snapshot.subscriber_count,
        'avgViews': metrics.avg_views,
        'sampleSize': len(videos),
        'shortsRatio': metrics.shorts_ratio,
        'recentVideoWithinDays': config.recent_video_within_days,
        'includeKeywords': list(config.include_keywords),
        'excludeKeywords': list(config.exclude_keywords),
        'country': snapshot.country or '',
        'description': snapshot.description,
        'lastScrapedAt': format_timestamp(scraped_at),
        'sampleVideos': [
            {
                'videoId': v.video_id,
                'title': v.title,
                'publishedAt': format_timestamp(v.published_at) if v.published_at else None,
                'viewCount': v.view_count,
                'durationSeconds': v.duration_seconds,
                'url': video_url(v.video_id),
            }
            for v in videos
        ],
    }


def build_run_summary(results: List[Dict], config: DiscoveryConfig, timestamp: datetime) -> Dict:
    """
    Build the aggregate summary written once at the end of a run.

    Args:
        results: Output records in the order they were collected
        config: Run configuration
        timestamp: Summary time

    Returns:
        Dict with an "info" block and the full "results" list
    """
    return {
        'info': {
            'collected': len(results),
            'timestamp': format_timestamp(timestamp),
            'filters': config.filters_summary(),
            'maxChannels': config.max_channels,
            'seedChannels': len(config.seed_channels),
            'searchQueries': len(config.search_queries),
        },
        'results': list(results),
    }


# ============================================================================
# TABLE EXPORT
# ============================================================================

TABLE_COLUMNS = [
    'channelName',
    'channelUrl',
    'subscriberCount',
    'avgViews',
    'shortsRatio',
    'sampleSize',
    'country',
    'latestVideoAt',
    'channelId',
]


def records_to_dataframe(records: List[Dict]) -> pd.DataFrame:
    """
    Flatten output records into one row per channel.

    The nested sample videos are reduced to the newest publish date.
    """
    rows = []
    for record in records:
        published = [v['publishedAt'] for v in record.get('sampleVideos', []) if v.get('publishedAt')]
        rows.append({
            'channelName': record.get('channelName', ''),
            'channelUrl': record.get('channelUrl', ''),
            'subscriberCount': record.get('subscriberCount'),
            'avgViews': record.get('avgViews', 0),
            'shortsRatio': record.get('shortsRatio', 0.0),
            'sampleSize': record.get('sampleSize', 0),
            'country': record.get('country', ''),
            'latestVideoAt': max(published) if published else None,
            'channelId': record.get('channelId', ''),
        })
    return pd.DataFrame(rows, columns=TABLE_COLUMNS)


def export_records_to_csv(records: List[Dict], output_file: str) -> bool:
    """
    Write output records to a CSV file.

    Args:
        records: Output records
        output_file: CSV filename

    Returns:
        True if the file was written
    """
    try:
        records_to_dataframe(records).to_csv(output_file, index=False)
    except OSError as e:
        logger.warning(f"Error writing to {output_file}: {e}")
        return False

    logger.info(f"Results saved to {output_file}")
    return True
