"""
Login, OAuth callback, logout and status endpoints.
"""
import html
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from spotify_oauth import ExchangeResult
from ..sessions import BrowserSession, get_session

logger = logging.getLogger(__name__)

router = APIRouter()


def _success_page(delay: int) -> str:
    return f"""
    <html>
        <head><meta http-equiv="refresh" content="{delay};url=/"></head>
        <body>
            <h1>Successfully authenticated!</h1>
            <p>Redirecting to dashboard...</p>
        </body>
    </html>
    """


def _failure_page(result: ExchangeResult) -> str:
    reason = result.reason.value if result.reason else "unknown"
    return f"""
    <html>
        <body>
            <h1>Authentication failed</h1>
            <p>Failed to authenticate. Please try again.</p>
            <p>Reason: {html.escape(reason)}</p>
            <p><a href="/">Return to home</a></p>
        </body>
    </html>
    """


@router.get("/login")
async def login(session: BrowserSession = Depends(get_session)):
    """Persist a verifier and send the browser to Spotify's consent page"""
    try:
        auth_url = session.oauth.get_authorize_url()
    except ValueError as e:
        logger.error(f"Cannot start login: {e}")
        return JSONResponse(status_code=500, content={"error": {"message": str(e)}})
    return RedirectResponse(auth_url, status_code=307)


@router.get("/callback", response_class=HTMLResponse)
async def callback(request: Request, session: BrowserSession = Depends(get_session)):
    """Redirect target: exchange the authorization code for a token"""
    result = await session.oauth.handle_callback(request.url.query)

    if not result.ok:
        if result.status_code is not None:
            logger.warning(f"Spotify login failed: {result.reason.value} (HTTP {result.status_code})")
        else:
            logger.warning(f"Spotify login failed: {result.reason.value}")
        logger.debug(f"Login failure detail: {result.detail}")
        return HTMLResponse(_failure_page(result), status_code=400)

    return HTMLResponse(_success_page(request.app.state.redirect_delay))


@router.post("/logout")
async def logout(session: BrowserSession = Depends(get_session)):
    """Forget the credential and any pending login"""
    session.oauth.logout()
    return {"status": "logged_out"}


@router.get("/auth/status")
async def auth_status(session: BrowserSession = Depends(get_session)):
    """Get credential status without exposing secrets"""
    return session.oauth.credentials.get_status()
