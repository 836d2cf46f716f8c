"""
Configuration and Defaults

Central configuration for the Channel Discovery job.
All tunable values, filter defaults, and the run configuration are defined here.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from dotenv import load_dotenv

# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

BATCH_SIZE = 50  # Max IDs per channels/videos request
SEARCH_PAGE_LIMIT = 50  # YouTube API max for search.list
SEED_SEARCH_LIMIT = 5
QUERY_SEARCH_LIMIT = 50
REQUEST_TIMEOUT_SECONDS = 30

MAX_RETRIES = 3
RETRY_BASE_DELAY = 1.0
RETRY_MULTIPLIER = 2.0

SHORTS_MAX_SECONDS = 60

API_KEY_ENV_VAR = "YOUTUBE_API_KEY"
DEFAULT_INPUT_FILE = "INPUT.json"
DEFAULT_STORAGE_DIR = "storage"
OUTPUT_KEY = "OUTPUT"

# ============================================================================
# FILTER DEFAULTS
# ============================================================================

DEFAULT_MIN_SUBSCRIBERS = 1000
DEFAULT_AVG_VIEWS_MIN = 0
DEFAULT_RECENT_VIDEO_WITHIN_DAYS = 30
DEFAULT_SAMPLE_SIZE = 12
DEFAULT_MAX_CHANNELS = 200
DEFAULT_SLEEP_MS = 200

DEFAULT_EXCLUDE_KEYWORDS = (
    "entrepreneur",
    "marketing",
    "guru",
    "growth",
    "7-figure",
    "funnel",
    "agency",
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Exception raised when the run configuration is missing or invalid."""
    pass


# ============================================================================
# LOGGING SETUP
# ============================================================================

def setup_logging(level: int = logging.INFO):
    """Configure root logging for the job."""
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


# ============================================================================
# RUN CONFIGURATION
# ============================================================================

# Input key -> (attribute name, default)
_INPUT_FIELDS = {
    'apiKey': ('api_key', ''),
    'minSubscribers': ('min_subscribers', DEFAULT_MIN_SUBSCRIBERS),
    'avgViewsMin': ('avg_views_min', DEFAULT_AVG_VIEWS_MIN),
    'avgViewsMax': ('avg_views_max', None),
    'recentVideoWithinDays': ('recent_video_within_days', DEFAULT_RECENT_VIDEO_WITHIN_DAYS),
    'sampleSize': ('sample_size', DEFAULT_SAMPLE_SIZE),
    'allowShorts': ('allow_shorts', False),
    'includeKeywords': ('include_keywords', ()),
    'excludeKeywords': ('exclude_keywords', DEFAULT_EXCLUDE_KEYWORDS),
    'country': ('country', ''),
    'maxChannels': ('max_channels', DEFAULT_MAX_CHANNELS),
    'seedChannels': ('seed_channels', ()),
    'searchQueries': ('search_queries', ()),
    'sleepMs': ('sleep_ms', DEFAULT_SLEEP_MS),
    'verbose': ('verbose', True),
}


@dataclass(frozen=True)
class DiscoveryConfig:
    """
    Immutable configuration for one discovery run.

    Use DiscoveryConfig.from_input() to build one from the camelCase input
    object; defaults apply to omitted or null keys.
    """

    api_key: str = field(default='', repr=False)
    min_subscribers: int = DEFAULT_MIN_SUBSCRIBERS
    avg_views_min: int = DEFAULT_AVG_VIEWS_MIN
    avg_views_max: Optional[int] = None
    recent_video_within_days: int = DEFAULT_RECENT_VIDEO_WITHIN_DAYS
    sample_size: int = DEFAULT_SAMPLE_SIZE
    allow_shorts: bool = False
    include_keywords: Tuple[str, ...] = ()
    exclude_keywords: Tuple[str, ...] = DEFAULT_EXCLUDE_KEYWORDS
    country: str = ''
    max_channels: int = DEFAULT_MAX_CHANNELS
    seed_channels: Tuple[str, ...] = ()
    search_queries: Tuple[str, ...] = ()
    sleep_ms: int = DEFAULT_SLEEP_MS
    verbose: bool = True

    @classmethod
    def from_input(cls, data: Optional[Dict[str, Any]] = None) -> 'DiscoveryConfig':
        """
        Build a config from an input object.

        Args:
            data: Dict with camelCase keys (apiKey, minSubscribers, ...)

        Returns:
            DiscoveryConfig with defaults applied

        Raises:
            ConfigError: If a value has the wrong type or is out of range
        """
        data = data or {}
        values = {}
        for key, (attr, default) in _INPUT_FIELDS.items():
            value = data.get(key)
            values[attr] = default if value is None else value

        try:
            config = cls(
                api_key=str(values['api_key']).strip(),
                min_subscribers=_as_int(values['min_subscribers'], 'minSubscribers'),
                avg_views_min=_as_int(values['avg_views_min'], 'avgViewsMin'),
                avg_views_max=(
                    None if values['avg_views_max'] is None
                    else _as_int(values['avg_views_max'], 'avgViewsMax')
                ),
                recent_video_within_days=_as_int(values['recent_video_within_days'], 'recentVideoWithinDays'),
                sample_size=_as_int(values['sample_size'], 'sampleSize', minimum=1),
                allow_shorts=_as_bool(values['allow_shorts'], 'allowShorts'),
                include_keywords=_as_strings(values['include_keywords'], 'includeKeywords'),
                exclude_keywords=_as_strings(values['exclude_keywords'], 'excludeKeywords'),
                country=str(values['country']).strip(),
                max_channels=_as_int(values['max_channels'], 'maxChannels'),
                seed_channels=_as_strings(values['seed_channels'], 'seedChannels'),
                search_queries=_as_strings(values['search_queries'], 'searchQueries'),
                sleep_ms=_as_int(values['sleep_ms'], 'sleepMs'),
                verbose=_as_bool(values['verbose'], 'verbose'),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(str(e)) from e

        return config

    def require_api_key(self):
        """
        Abort the run when no usable API key is configured.

        Raises:
            ConfigError: If api_key is missing or blank
        """
        if not self.api_key or not self.api_key.strip():
            logger.error(f"You must provide a valid YouTube Data API key as \"apiKey\" or {API_KEY_ENV_VAR}.")
            raise ConfigError("Missing YouTube Data API key (input.apiKey)")

    def filters_summary(self) -> Dict[str, Any]:
        """Echo of the filter settings, as written to the run summary."""
        return {
            'minSubscribers': self.min_subscribers,
            'avgViewsMin': self.avg_views_min,
            'avgViewsMax': self.avg_views_max,
            'recentVideoWithinDays': self.recent_video_within_days,
            'sampleSize': self.sample_size,
            'allowShorts': self.allow_shorts,
            'includeKeywords': list(self.include_keywords),
            'excludeKeywords': list(self.exclude_keywords),
            'country': self.country,
        }

    def to_input(self) -> Dict[str, Any]:
        """Convert back to the camelCase input shape, without the API key."""
        values = asdict(self)
        out = {}
        for key, (attr, _) in _INPUT_FIELDS.items():
            if attr == 'api_key':
                continue
            value = values[attr]
            out[key] = list(value) if isinstance(value, tuple) else value
        return out


def _as_int(value: Any, name: str, minimum: int = 0) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if number < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {number}")
    return number


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def _as_strings(value: Any, name: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        raise ValueError(f"{name} must be a list of strings, got a single string")
    try:
        return tuple(str(item) for item in value if item is not None)
    except TypeError:
        raise ValueError(f"{name} must be a list of strings, got {value!r}")


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> DiscoveryConfig:
    """
    Load the run configuration from a JSON input file and the environment.

    The API key falls back to the YOUTUBE_API_KEY environment variable
    (a .env file in the working directory is loaded first).

    Args:
        path: JSON input file; DEFAULT_INPUT_FILE is used when it exists and no path is given
        overrides: camelCase values that replace what the file holds

    Returns:
        DiscoveryConfig

    Raises:
        ConfigError: If the file cannot be read or holds invalid values
    """
    load_dotenv()

    data: Dict[str, Any] = {}
    if path is None and Path(DEFAULT_INPUT_FILE).is_file():
        path = DEFAULT_INPUT_FILE

    if path is not None:
        try:
            with open(path, encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigError(f"Cannot read input file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Input file {path} must contain a JSON object")

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    if not data.get('apiKey'):
        data['apiKey'] = os.getenv(API_KEY_ENV_VAR, '')

    return DiscoveryConfig.from_input(data)
