"""
Channel Discovery Service

A batch job for discovering YouTube channels that match business-relevance
criteria: subscriber count, average recent views, posting recency, shorts,
keyword signals and country.

Usage:
    from channel_discovery import DiscoveryConfig, run_discovery

    config = DiscoveryConfig.from_input({
        "apiKey": api_key,
        "searchQueries": ["business coach"],
        "includeKeywords": ["coach"],
        "minSubscribers": 10000,
    })
    summary = run_discovery(config)
"""

# Configuration
from .config import (
    BATCH_SIZE,
    DEFAULT_EXCLUDE_KEYWORDS,
    OUTPUT_KEY,
    ConfigError,
    DiscoveryConfig,
    load_config,
    setup_logging,
)

# Data model
from .models import ChannelMetrics, ChannelSnapshot, VideoSample

# Identifiers
from .identifiers import channel_url, is_channel_id, normalize_channel_reference, video_url

# YouTube API client
from .retry import RetryPolicy, call_with_retry
from .youtube_api import ApiRequestError, YouTubeService

# Metrics
from .metrics import (
    calculate_average_views,
    calculate_channel_metrics,
    calculate_shorts_ratio,
    has_recent_video,
    is_short,
    parse_iso8601_duration,
)

# Filter chain
from .filters import CHANNEL_FILTERS, SAMPLE_FILTERS, run_filters

# Collection, evaluation and output
from .collector import collect_candidates
from .evaluator import Evaluation, evaluate_channel
from .aggregation import build_output_record, build_run_summary, export_records_to_csv, records_to_dataframe
from .storage import JsonKeyValueStore, JsonlDataset, open_storage

# Pipeline
from .pipeline import run_discovery

__all__ = [
    # Config
    "BATCH_SIZE",
    "DEFAULT_EXCLUDE_KEYWORDS",
    "OUTPUT_KEY",
    "ConfigError",
    "DiscoveryConfig",
    "load_config",
    "setup_logging",
    # Models
    "ChannelMetrics",
    "ChannelSnapshot",
    "VideoSample",
    # Identifiers
    "channel_url",
    "is_channel_id",
    "normalize_channel_reference",
    "video_url",
    # API
    "ApiRequestError",
    "RetryPolicy",
    "YouTubeService",
    "call_with_retry",
    # Metrics
    "calculate_average_views",
    "calculate_channel_metrics",
    "calculate_shorts_ratio",
    "has_recent_video",
    "is_short",
    "parse_iso8601_duration",
    # Filters
    "CHANNEL_FILTERS",
    "SAMPLE_FILTERS",
    "run_filters",
    # Collection and evaluation
    "Evaluation",
    "collect_candidates",
    "evaluate_channel",
    # Output
    "JsonKeyValueStore",
    "JsonlDataset",
    "build_output_record",
    "build_run_summary",
    "export_records_to_csv",
    "open_storage",
    "records_to_dataframe",
    # Pipeline
    "run_discovery",
]
