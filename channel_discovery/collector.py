"""
Candidate Collection

Builds the deduplicated list of candidate channel IDs from seed
channels and search queries.
"""

import logging
from typing import List

from .config import QUERY_SEARCH_LIMIT, SEED_SEARCH_LIMIT, DiscoveryConfig
from .identifiers import is_channel_id, normalize_channel_reference
from .youtube_api import YouTubeService

logger = logging.getLogger(__name__)


def _add_unique(candidates: List[str], seen: set, channel_ids: List[str]):
    for channel_id in channel_ids:
        if channel_id not in seen:
            seen.add(channel_id)
            candidates.append(channel_id)


def collect_candidates(service: YouTubeService, config: DiscoveryConfig) -> List[str]:
    """
    Collect candidate channel IDs from seeds, then from search queries.

    Seeds that normalize to a channel ID are added directly; other seeds
    (handles, vanity URLs, names) are resolved with a small channel search.
    A failing seed or query is logged and skipped.

    Args:
        service: YouTubeService instance
        config: Run configuration

    Returns:
        Unique channel IDs in discovery order, at most config.max_channels
    """
    candidates: List[str] = []
    seen: set = set()

    for seed in config.seed_channels:
        normalized = normalize_channel_reference(seed)
        if not normalized:
            continue

        if is_channel_id(normalized):
            _add_unique(candidates, seen, [normalized])
            continue

        try:
            found = service.search_channels(normalized, SEED_SEARCH_LIMIT)
        except Exception as e:
            logger.warning(f"Could not resolve seed channel '{seed}': {e}")
            continue
        _add_unique(candidates, seen, found)

    for query in config.search_queries:
        if not query or not query.strip():
            continue
        try:
            found = service.search_channels(query, QUERY_SEARCH_LIMIT)
        except Exception as e:
            logger.warning(f"Channel search failed for query '{query}': {e}")
            continue
        _add_unique(candidates, seen, found)

    if config.verbose:
        logger.info(f"Initial candidate channel count: {len(candidates)}")

    return candidates[:max(config.max_channels, 0)]
