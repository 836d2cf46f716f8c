"""
YouTube API Client

Service class for interacting with the YouTube Data API v3.
Handles channel search, channel details, uploads playlist paging
and video details, with retry/backoff and request pacing.
"""

import logging
import time
from typing import Callable, Dict, List, Optional

import httplib2
from googleapiclient.discovery import build

from .config import BATCH_SIZE, DEFAULT_SLEEP_MS, REQUEST_TIMEOUT_SECONDS, SEARCH_PAGE_LIMIT
from .metrics import parse_count, parse_iso8601_duration, parse_published_at
from .models import ChannelSnapshot, VideoSample
from .retry import RetryExhausted, RetryPolicy, call_with_retry, http_status

logger = logging.getLogger(__name__)


class ApiRequestError(Exception):
    """Exception raised when a YouTube API call still fails after all retries."""
    pass


class YouTubeService:
    """Service class for interacting with YouTube Data API v3."""

    def __init__(
        self,
        api_key: str,
        sleep_ms: int = DEFAULT_SLEEP_MS,
        retry_policy: Optional[RetryPolicy] = None,
        youtube=None,
        sleep: Callable[[float], None] = time.sleep,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
    ):
        """
        Initialize YouTube API client.

        Args:
            api_key: YouTube Data API v3 key
            sleep_ms: Pause after every successful call, in milliseconds
            retry_policy: Backoff policy for failed calls (defaults to RetryPolicy())
            youtube: Prebuilt API resource (built from api_key when omitted)
            sleep: Function used for pacing and backoff waits (seconds)
            timeout: Per-request HTTP timeout in seconds

        Raises:
            ValueError: If api_key is empty or None
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key is required")

        self._api_key = api_key
        self._pause_seconds = max(sleep_ms, 0) / 1000.0
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

        if youtube is None:
            youtube = build(
                'youtube', 'v3',
                developerKey=api_key,
                http=httplib2.Http(timeout=timeout),
                cache_discovery=False,
            )
        self._youtube = youtube
        logger.info("YouTube service initialized successfully")

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _describe_error(self, error: BaseException) -> str:
        """Loggable error message with the API key scrubbed out."""
        status = http_status(error)
        if status is not None:
            reason = getattr(error, 'reason', '') or ''
            message = f"YouTube API error {status}: {reason}" if reason else f"YouTube API error {status}"
        else:
            message = f"{type(error).__name__}: {error}"
        return message.replace(self._api_key, '***')

    def _execute(self, endpoint: str, make_request: Callable) -> Dict:
        """
        Execute one API request with retry, then pause before the next call.

        Args:
            endpoint: Endpoint name for log and error messages
            make_request: Zero-argument callable returning a googleapiclient request

        Returns:
            Parsed JSON response

        Raises:
            ApiRequestError: If the request fails after all retries
        """
        try:
            response = call_with_retry(
                lambda: make_request().execute(),
                self._retry_policy,
                self._sleep,
                describe=self._describe_error,
            )
        except RetryExhausted as e:
            raise ApiRequestError(
                f"{endpoint} request failed after {e.attempts} attempts: {self._describe_error(e.last_error)}"
            ) from None

        # Be respectful with API calls
        self._sleep(self._pause_seconds)
        return response or {}

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def search_channels(self, query: str, limit: int = SEARCH_PAGE_LIMIT) -> List[str]:
        """
        Search YouTube for channels matching a query.

        Args:
            query: Search text (keywords, channel name, handle or URL)
            limit: Max results (YouTube API max is 50)

        Returns:
            List of channel IDs in result order
        """
        max_results = max(1, min(limit, SEARCH_PAGE_LIMIT))
        response = self._execute('search', lambda: self._youtube.search().list(
            part='snippet',
            q=query,
            type='channel',
            maxResults=max_results,
        ))

        channel_ids = []
        for item in response.get('items') or []:
            channel_id = (item.get('snippet') or {}).get('channelId') or (item.get('id') or {}).get('channelId')
            if channel_id:
                channel_ids.append(channel_id)

        logger.info(f"Found {len(channel_ids)} channels for query '{query}'")
        return channel_ids

    def get_channel_details(self, channel_ids: List[str]) -> List[ChannelSnapshot]:
        """
        Fetch snippet, statistics and uploads playlist for channels.

        Args:
            channel_ids: List of channel IDs

        Returns:
            ChannelSnapshot for every channel the API returned
        """
        snapshots = []

        # Batch requests - max 50 channel IDs per request
        for i in range(0, len(channel_ids), BATCH_SIZE):
            batch = channel_ids[i:i + BATCH_SIZE]
            response = self._execute('channels', lambda: self._youtube.channels().list(
                part='snippet,statistics,contentDetails',
                id=','.join(batch),
                maxResults=len(batch),
            ))

            for item in response.get('items') or []:
                snapshots.append(parse_channel_item(item))

        return snapshots

    def get_uploads_video_ids(self, playlist_id: str, limit: int) -> List[str]:
        """
        Fetch the most recent video IDs from an uploads playlist.

        Follows nextPageToken until limit IDs are collected or pages run out.

        Args:
            playlist_id: The channel's uploads playlist ID
            limit: Maximum number of video IDs to return

        Returns:
            Up to limit video IDs, newest first as the playlist orders them
        """
        video_ids: List[str] = []
        if not playlist_id or limit <= 0:
            return video_ids

        page_token = None
        while len(video_ids) < limit:
            page_size = min(BATCH_SIZE, limit - len(video_ids))
            response = self._execute('playlistItems', lambda: self._youtube.playlistItems().list(
                part='contentDetails,snippet',
                playlistId=playlist_id,
                maxResults=page_size,
                pageToken=page_token,
            ))

            for item in response.get('items') or []:
                video_id = (item.get('contentDetails') or {}).get('videoId')
                if video_id:
                    video_ids.append(video_id)
                if len(video_ids) >= limit:
                    break

            page_token = response.get('nextPageToken')
            if not page_token:
                break

        return video_ids

    def get_video_details(self, video_ids: List[str]) -> List[VideoSample]:
        """
        Fetch snippet, statistics and duration for videos.

        Args:
            video_ids: List of video IDs (requested in chunks of 50)

        Returns:
            VideoSample for every video the API returned
        """
        videos = []

        for i in range(0, len(video_ids), BATCH_SIZE):
            chunk = video_ids[i:i + BATCH_SIZE]
            response = self._execute('videos', lambda: self._youtube.videos().list(
                part='snippet,statistics,contentDetails',
                id=','.join(chunk),
                maxResults=len(chunk),
            ))

            for item in response.get('items') or []:
                if item.get('id'):
                    videos.append(parse_video_item(item))

        return videos


def parse_channel_item(item: Dict) -> ChannelSnapshot:
    """Convert a channels.list item into a ChannelSnapshot; missing fields become empty/None."""
    snippet = item.get('snippet') or {}
    statistics = item.get('statistics') or {}
    content_details = item.get('contentDetails') or {}

    subscriber_count = None
    if not statistics.get('hiddenSubscriberCount') and statistics.get('subscriberCount') is not None:
        try:
            subscriber_count = int(statistics['subscriberCount'])
        except (TypeError, ValueError):
            subscriber_count = None

    return ChannelSnapshot(
        channel_id=item.get('id') or '',
        title=snippet.get('title', '') or '',
        description=snippet.get('description', '') or '',
        country=snippet.get('country') or None,
        subscriber_count=subscriber_count,
        uploads_playlist_id=(content_details.get('relatedPlaylists') or {}).get('uploads') or None,
    )


def parse_video_item(item: Dict) -> VideoSample:
    """Convert a videos.list item into a VideoSample; missing counts and durations become 0."""
    snippet = item.get('snippet') or {}
    statistics = item.get('statistics') or {}
    content_details = item.get('contentDetails') or {}

    return VideoSample(
        video_id=item['id'],
        title=snippet.get('title', '') or '',
        description=snippet.get('description', '') or '',
        published_at=parse_published_at(snippet.get('publishedAt')),
        view_count=parse_count(statistics.get('viewCount')),
        duration_seconds=parse_iso8601_duration(content_details.get('duration', '')),
    )
