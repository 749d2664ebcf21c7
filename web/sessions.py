"""
Per-browser sessions for the web surface.

Each browser gets a cookie naming its own in-memory session store, so one
visitor's verifier or token is never visible to another. Sessions are only
created by routes that need one, live only as long as the process, and are
dropped after sitting idle for SESSION_IDLE_TTL seconds.
"""
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from fastapi import Request

import settings
from spotify_api import SpotifyApiClient
from spotify_oauth import SpotifyOAuthManager
from utils.storage import MemorySessionStore

logger = logging.getLogger(__name__)

SESSION_COOKIE = "spotify_session"


@dataclass
class BrowserSession:
    """Everything one browser's requests share"""
    session_id: str
    oauth: SpotifyOAuthManager
    api: SpotifyApiClient
    last_seen: float


class SessionRegistry:
    """Creates, looks up and expires browser sessions by cookie value"""

    def __init__(
        self,
        manager_factory: Callable[[MemorySessionStore], SpotifyOAuthManager],
        api_factory: Callable[[SpotifyOAuthManager], SpotifyApiClient],
        idle_ttl: float = settings.SESSION_IDLE_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self._manager_factory = manager_factory
        self._api_factory = api_factory
        self.idle_ttl = idle_ttl
        self.clock = clock
        self._sessions: Dict[str, BrowserSession] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str]) -> Optional[BrowserSession]:
        """Return a live session and mark it used, or None"""
        self.evict_idle()
        session = self._sessions.get(session_id) if session_id else None
        if session is not None:
            session.last_seen = self.clock()
        return session

    def create(self) -> BrowserSession:
        """Start a session under a fresh random id"""
        self.evict_idle()
        oauth = self._manager_factory(MemorySessionStore())
        session = BrowserSession(
            session_id=secrets.token_urlsafe(32),
            oauth=oauth,
            api=self._api_factory(oauth),
            last_seen=self.clock(),
        )
        self._sessions[session.session_id] = session
        logger.debug("Created new browser session")
        return session

    def evict_idle(self) -> int:
        """Drop sessions idle for longer than idle_ttl

        Returns:
            Number of sessions removed
        """
        cutoff = self.clock() - self.idle_ttl
        expired = [sid for sid, session in self._sessions.items() if session.last_seen < cutoff]
        for sid in expired:
            self._sessions.pop(sid).oauth.cancel_pending()
        if expired:
            logger.debug(f"Evicted {len(expired)} idle browser session(s)")
        return len(expired)

    def cancel_all(self) -> int:
        """Cancel in-flight token exchanges across all sessions"""
        return sum(session.oauth.cancel_pending() for session in self._sessions.values())


async def session_cookie_middleware(request: Request, call_next):
    """Set the session cookie when a route started a new session"""
    request.state.new_session_id = None

    response = await call_next(request)

    session_id = request.state.new_session_id
    if session_id:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


async def get_session(request: Request) -> BrowserSession:
    """FastAPI dependency returning the caller's browser session

    An unknown or expired cookie value is never adopted; the caller gets a
    new session and the middleware sends its cookie.
    """
    registry: SessionRegistry = request.app.state.sessions
    session = registry.get(request.cookies.get(SESSION_COOKIE))
    if session is None:
        session = registry.create()
        request.state.new_session_id = session.session_id
    return session
