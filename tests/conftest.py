"""
Shared fixtures for the Spotify PKCE client tests
"""
import pytest

from utils.storage import MemorySessionStore

CLIENT_ID = "test-client-id"
REDIRECT_URI = "http://localhost:5173/callback"
SCOPES = ["user-read-private", "user-read-recently-played"]
START_TIME = 1_700_000_000.0


class FakeClock:
    """Controllable replacement for time.time"""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


USER_JSON = {
    "id": "user-123",
    "display_name": "Test Listener",
    "email": "listener@example.com",
    "country": "DE",
    "followers": {"total": 42, "href": None},
    "images": [
        {"url": "https://i.scdn.co/image/large", "height": 640, "width": 640},
        {"url": "https://i.scdn.co/image/small", "height": 64, "width": 64},
    ],
    "external_urls": {"spotify": "https://open.spotify.com/user/user-123"},
    "type": "user",
    "uri": "spotify:user:user-123",
    "product": "premium",
}


def make_track_json(track_id: str, name: str, played_at: str) -> dict:
    return {
        "track": {
            "id": track_id,
            "name": name,
            "artists": [
                {"id": "artist-1", "name": "First Artist", "uri": "spotify:artist:artist-1"},
                {"id": "artist-2", "name": "Second Artist", "uri": "spotify:artist:artist-2"},
            ],
            "album": {
                "id": "album-1",
                "name": "Some Album",
                "images": [{"url": "https://i.scdn.co/image/album", "height": 300, "width": 300}],
                "release_date": "2020-01-01",
            },
            "duration_ms": 215000,
            "preview_url": None,
            "external_urls": {"spotify": f"https://open.spotify.com/track/{track_id}"},
            "explicit": False,
            "popularity": 55,
        },
        "played_at": played_at,
        "context": None,
    }


RECENTLY_PLAYED_JSON = {
    "items": [
        make_track_json("track-1", "Latest Song", "2024-05-01T12:30:00.123Z"),
        make_track_json("track-2", "Earlier Song", "2024-05-01T12:25:00.000Z"),
    ],
    "next": None,
    "cursors": {"after": "1714566600123", "before": "1714566300000"},
    "limit": 20,
    "href": "https://api.spotify.com/v1/me/player/recently-played?limit=20",
}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemorySessionStore()
