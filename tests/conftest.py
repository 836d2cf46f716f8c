"""Shared fixtures: a fake googleapiclient resource and API payload builders."""

from datetime import datetime, timedelta, timezone

import httplib2
import pytest
from googleapiclient.errors import HttpError

from channel_discovery.youtube_api import YouTubeService

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

CHANNEL_ID = "UC" + "a" * 22
OTHER_CHANNEL_ID = "UC" + "b" * 22
THIRD_CHANNEL_ID = "UC" + "c" * 22


def iso(dt: datetime) -> str:
    return dt.isoformat().replace("+00:00", "Z")


def days_ago(n: int) -> datetime:
    return NOW - timedelta(days=n)


def http_error(status: int, message: str = "boom", key: str = "secret-key") -> HttpError:
    content = ('{"error": {"code": %d, "message": "%s"}}' % (status, message)).encode()
    return HttpError(
        httplib2.Response({"status": status}),
        content,
        uri=f"https://youtube.googleapis.com/youtube/v3/search?key={key}&alt=json",
    )


def make_channel_item(channel_id=CHANNEL_ID, title="Coach Channel", description="I am a business coach",
                      country="US", subscribers="50000", hidden=False, uploads="UU" + "a" * 22):
    statistics = {"hiddenSubscriberCount": hidden}
    if subscribers is not None:
        statistics["subscriberCount"] = subscribers
    item = {
        "id": channel_id,
        "snippet": {"title": title, "description": description},
        "statistics": statistics,
        "contentDetails": {"relatedPlaylists": {"uploads": uploads} if uploads else {}},
    }
    if country:
        item["snippet"]["country"] = country
    return item


def make_video_item(video_id, published_days_ago=5, views=8000, duration="PT10M", title=None, description=""):
    return {
        "id": video_id,
        "snippet": {
            "title": title if title is not None else f"Lesson {video_id}",
            "description": description,
            "publishedAt": iso(days_ago(published_days_ago)),
        },
        "statistics": {"viewCount": str(views)},
        "contentDetails": {"duration": duration},
    }


class FakeRequest:
    def __init__(self, resource, kwargs):
        self.resource = resource
        self.kwargs = kwargs

    def execute(self):
        return self.resource.respond(self.kwargs)


class FakeResource:
    """One endpoint (search, channels, playlistItems, videos) of the fake API."""

    def __init__(self, handler=None):
        self.handler = handler or (lambda kwargs: {"items": []})
        self.calls = []
        self.failures = []  # exceptions raised by the next executions, in order

    def list(self, **kwargs):
        return FakeRequest(self, kwargs)

    def respond(self, kwargs):
        self.calls.append(kwargs)
        if self.failures:
            raise self.failures.pop(0)
        return self.handler(kwargs)


class FakeYouTube:
    """Stand-in for the resource returned by googleapiclient.discovery.build."""

    def __init__(self):
        self.search_resource = FakeResource()
        self.channels_resource = FakeResource()
        self.playlist_items_resource = FakeResource()
        self.videos_resource = FakeResource()

    def search(self):
        return self.search_resource

    def channels(self):
        return self.channels_resource

    def playlistItems(self):
        return self.playlist_items_resource

    def videos(self):
        return self.videos_resource

    # Convenience setters for static data

    def set_search_results(self, results_by_query):
        def handler(kwargs):
            ids = results_by_query.get(kwargs["q"], [])
            return {"items": [{"id": {"kind": "youtube#channel", "channelId": cid},
                               "snippet": {"channelId": cid}} for cid in ids][:kwargs["maxResults"]]}
        self.search_resource.handler = handler

    def set_channels(self, items):
        by_id = {item["id"]: item for item in items}

        def handler(kwargs):
            return {"items": [by_id[cid] for cid in kwargs["id"].split(",") if cid in by_id]}
        self.channels_resource.handler = handler

    def set_playlist(self, video_ids, page_size=None):
        def handler(kwargs):
            size = page_size or kwargs["maxResults"]
            start = int(kwargs.get("pageToken") or 0)
            page = video_ids[start:start + size]
            response = {"items": [{"contentDetails": {"videoId": vid}} for vid in page]}
            if start + size < len(video_ids):
                response["nextPageToken"] = str(start + size)
            return response
        self.playlist_items_resource.handler = handler

    def set_videos(self, items):
        by_id = {item["id"]: item for item in items}

        def handler(kwargs):
            return {"items": [by_id[vid] for vid in kwargs["id"].split(",") if vid in by_id]}
        self.videos_resource.handler = handler


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


class MemoryDataset:
    def __init__(self, fail=False):
        self.records = []
        self.fail = fail

    def push_record(self, record):
        if self.fail:
            raise OSError("disk full")
        self.records.append(record)


class MemoryStore:
    def __init__(self):
        self.values = {}

    def set_value(self, key, value):
        self.values[key] = value


@pytest.fixture
def fake_youtube():
    return FakeYouTube()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def service(fake_youtube, sleeper):
    return YouTubeService("secret-key", sleep_ms=0, youtube=fake_youtube, sleep=sleeper)
