"""OAuth authorization URL construction"""

import logging
import webbrowser
from typing import Iterable, Optional
from urllib.parse import urlencode

import settings
from .pkce import PKCEManager

logger = logging.getLogger(__name__)


def build_authorization_url(
    client_id: str,
    redirect_uri: str,
    scopes: Iterable[str],
    challenge: str,
    auth_endpoint: str = settings.AUTH_ENDPOINT,
) -> str:
    """Assemble the Spotify authorize URL for a PKCE challenge

    Args:
        client_id: Spotify application client ID
        redirect_uri: Callback URL registered with the application
        scopes: Requested scopes, joined with spaces
        challenge: S256 code challenge

    Returns:
        Full authorization URL
    """
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "code_challenge_method": "S256",
        "code_challenge": challenge,
        "scope": " ".join(scopes),
    }
    return f"{auth_endpoint}?{urlencode(params)}"


class AuthorizationURLBuilder:
    """Builds OAuth authorization URLs with PKCE"""

    def __init__(
        self,
        pkce_manager: PKCEManager,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scopes: Optional[Iterable[str]] = None,
    ):
        self.pkce = pkce_manager
        self.client_id = settings.SPOTIFY_CLIENT_ID if client_id is None else client_id
        self.redirect_uri = redirect_uri or settings.SPOTIFY_REDIRECT_URI
        self.scopes = list(settings.SPOTIFY_SCOPES if scopes is None else scopes)

    def get_authorize_url(self) -> str:
        """Generate a verifier, persist it and construct the authorize URL

        Returns:
            Full authorization URL

        Raises:
            ValueError: If no client ID is configured
        """
        if not self.client_id:
            raise ValueError("SPOTIFY_CLIENT_ID is not configured")

        codes = self.pkce.generate_pkce()

        # Must be stored before navigating away; the page state is lost on redirect
        self.pkce.save_verifier(codes.code_verifier)

        return build_authorization_url(
            self.client_id,
            self.redirect_uri,
            self.scopes,
            codes.code_challenge,
        )

    def start_login_flow(self) -> str:
        """Start the OAuth login flow by opening browser

        Returns:
            Authorization URL that was opened
        """
        auth_url = self.get_authorize_url()

        if not webbrowser.open(auth_url):
            logger.info("Could not open a browser automatically")

        return auth_url
