"""
FastAPI application initialization and configuration.
"""
import logging
import time
from contextlib import asynccontextmanager
from typing import Callable, Iterable, Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

import settings
from spotify_api import SpotifyApiClient, SpotifyApiError
from spotify_oauth import SpotifyOAuthManager
from .endpoints import auth_router, dashboard_router, health_router
from .middleware import log_requests_middleware
from .sessions import SessionRegistry, session_cookie_middleware

logger = logging.getLogger(__name__)


async def spotify_api_error_handler(request: Request, exc: SpotifyApiError):
    """Map Spotify API failures onto the response status"""
    # status 0 means Spotify never answered
    status_code = exc.status if exc.status >= 400 else 502
    return JSONResponse(
        status_code=status_code,
        content={"error": {"status": exc.status, "message": exc.message}},
    )


def create_app(
    client_id: Optional[str] = None,
    redirect_uri: Optional[str] = None,
    scopes: Optional[Iterable[str]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock: Callable[[], float] = time.time,
    timeout: float = settings.REQUEST_TIMEOUT,
    redirect_delay: int = settings.REDIRECT_DELAY_SECONDS,
    session_idle_ttl: float = settings.SESSION_IDLE_TTL,
) -> FastAPI:
    """Build the web app; arguments default to values from settings

    Args:
        client_id: Spotify application client ID
        redirect_uri: Callback URL registered with Spotify (served at /callback)
        scopes: Requested OAuth scopes
        transport: Optional httpx transport for all outbound calls
        clock: Returns the current time in epoch seconds
        timeout: Outbound request timeout in seconds
        redirect_delay: Seconds before the callback page returns to /
        session_idle_ttl: Seconds of inactivity before a browser session is dropped
    """

    def manager_factory(store):
        return SpotifyOAuthManager(
            store=store,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=scopes,
            transport=transport,
            clock=clock,
            timeout=timeout,
        )

    def api_factory(oauth: SpotifyOAuthManager) -> SpotifyApiClient:
        return SpotifyApiClient(oauth.credentials, transport=transport, timeout=timeout)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        cancelled = app.state.sessions.cancel_all()
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending token exchange(s) on shutdown")

    app = FastAPI(title="Spotify PKCE Client", version="1.0.0", lifespan=lifespan)
    app.state.sessions = SessionRegistry(manager_factory, api_factory, idle_ttl=session_idle_ttl, clock=clock)
    app.state.redirect_delay = redirect_delay

    # Add middleware (the last one added runs first)
    app.middleware("http")(session_cookie_middleware)
    app.middleware("http")(log_requests_middleware)

    app.add_exception_handler(SpotifyApiError, spotify_api_error_handler)

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(dashboard_router)

    logger.debug("FastAPI application initialized with all routers and middleware")
    return app
