"""
Channel Identifiers

Normalizes seed channel references (raw IDs, channel URLs, handles,
vanity names) and builds canonical channel and video URLs.
"""

import re
from typing import Optional
from urllib.parse import urlparse

CHANNEL_ID_PATTERN = re.compile(r'^UC[A-Za-z0-9_-]{20,}$')

CHANNEL_URL_PREFIX = "https://www.youtube.com/channel/"
VIDEO_URL_PREFIX = "https://www.youtube.com/watch?v="


def is_channel_id(value: Optional[str]) -> bool:
    """Check whether a string has the shape of a canonical channel ID (UC...)."""
    return bool(value) and CHANNEL_ID_PATTERN.match(value) is not None


def normalize_channel_reference(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a channel reference into a channel ID when possible.

    Accepts a raw channel ID, a full channel URL (https://www.youtube.com/channel/UC...),
    or a custom handle / vanity URL / plain name.

    Args:
        raw: Channel reference as given in the input

    Returns:
        The channel ID for IDs and /channel/<id> URLs, the stripped original
        string for anything else (to be used as a search query), or None if blank
    """
    if raw is None:
        return None

    value = raw.strip()
    if not value:
        return None

    if is_channel_id(value):
        return value

    try:
        parsed = urlparse(value)
    except ValueError:
        # Malformed URL (e.g. bad IPv6 netloc) - use it as a search query
        return value

    if not parsed.scheme or not parsed.netloc:
        return value

    parts = [p for p in parsed.path.split('/') if p]
    if len(parts) >= 2 and parts[0] == 'channel':
        return parts[1]

    # /c/<name>, /user/<name>, /@handle: resolved later through search
    return value


def channel_url(channel_id: str) -> str:
    """Canonical URL for a channel ID."""
    return f"{CHANNEL_URL_PREFIX}{channel_id}"


def video_url(video_id: str) -> str:
    """Canonical watch URL for a video ID."""
    return f"{VIDEO_URL_PREFIX}{video_id}"
