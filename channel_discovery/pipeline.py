"""
Discovery Pipeline

High-level orchestration that ties together candidate collection,
channel evaluation and result storage for one discovery run.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from .aggregation import build_run_summary
from .collector import collect_candidates
from .config import DEFAULT_STORAGE_DIR, OUTPUT_KEY, DiscoveryConfig
from .evaluator import evaluate_channel
from .storage import JsonKeyValueStore, JsonlDataset, open_storage
from .youtube_api import YouTubeService

logger = logging.getLogger(__name__)


def run_discovery(
    config: DiscoveryConfig,
    service: Optional[YouTubeService] = None,
    dataset: Optional[JsonlDataset] = None,
    store: Optional[JsonKeyValueStore] = None,
    now: Optional[Callable[[], datetime]] = None,
    on_progress: Optional[Callable[[str], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict:
    """
    Execute a full discovery run.

    Args:
        config: Run configuration
        service: YouTubeService instance (built from config.api_key when omitted)
        dataset: Record sink each passing channel is pushed to as soon as it is found
        store: Key-value store the run summary is written to under OUTPUT_KEY
        now: Clock returning the current UTC time (optional)
        on_progress: Callback for progress updates (optional)
        sleep: Function used for pacing between candidates (seconds)

    Returns:
        The run summary dict

    Raises:
        ConfigError: If no API key is configured (before any network call)
    """
    def progress(msg: str):
        if on_progress:
            on_progress(msg)

    clock = now or (lambda: datetime.now(timezone.utc))

    config.require_api_key()

    if dataset is None or store is None:
        default_dataset, default_store = open_storage(DEFAULT_STORAGE_DIR)
        if dataset is None:
            dataset = default_dataset
        if store is None:
            store = default_store

    if service is None:
        service = YouTubeService(config.api_key, sleep_ms=config.sleep_ms, sleep=sleep)

    # Step 1: Collect candidates
    progress("Collecting candidate channels...")
    candidates = collect_candidates(service, config)
    progress(f"Found {len(candidates)} candidate channels")

    # Step 2: Evaluate each candidate until max_channels results
    results: List[Dict] = []
    processed = set()
    pause_seconds = max(config.sleep_ms, 0) / 1000.0

    for index, channel_id in enumerate(candidates, start=1):
        if len(results) >= config.max_channels:
            break
        if channel_id in processed:
            continue
        processed.add(channel_id)

        progress(f"Evaluating channel {index}/{len(candidates)}: {channel_id}")
        _evaluate_and_store(service, channel_id, config, clock(), results, dataset)

        # Be respectful with API calls
        sleep(pause_seconds)

    # Step 3: Save summary
    summary = build_run_summary(results, config, clock())
    store.set_value(OUTPUT_KEY, summary)
    logger.info(f"Finished run, collected {len(results)} channels")
    progress(f"Collected {len(results)} channels")

    return summary


def _evaluate_and_store(service: YouTubeService, channel_id: str, config: DiscoveryConfig,
                        now: datetime, results: List[Dict], dataset: JsonlDataset):
    """Evaluate one candidate; any failure is logged and only abandons this channel."""
    try:
        evaluation = evaluate_channel(service, channel_id, config, now=now)
        if not evaluation.passed:
            return

        # Keep the record even if the sink write below fails
        results.append(evaluation.record)
        dataset.push_record(evaluation.record)

        if config.verbose:
            record = evaluation.record
            logger.info(
                f"Saved channel '{record['channelName']}' ({channel_id}): "
                f"avgViews={record['avgViews']}, subscribers={record['subscriberCount']}"
            )
    except Exception as e:
        logger.warning(f"Error processing channel {channel_id}: {e}")
