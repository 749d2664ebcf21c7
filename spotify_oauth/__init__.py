"""Spotify OAuth (Authorization Code with PKCE) package"""

import time
from typing import Callable, Iterable, Optional

import httpx

import settings
from utils.storage import MemorySessionStore, SessionStore
from .authorization import AuthorizationURLBuilder, build_authorization_url
from .credentials import CredentialStore
from .models import AccessCredential, ExchangeResult, FailureReason, PkceCodes
from .pkce import PKCEManager, derive_challenge, generate_verifier
from .token_exchange import CallbackInput, TokenExchanger, parse_callback_query


class SpotifyOAuthManager:
    """OAuth PKCE flow implementation

    This class orchestrates the authentication flow over one session store:
    - PKCE generation and verifier persistence
    - Authorization URL construction
    - Callback handling and token exchange
    - Credential lookup and logout
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        scopes: Optional[Iterable[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], float] = time.time,
        timeout: float = settings.REQUEST_TIMEOUT,
    ):
        self.store = store if store is not None else MemorySessionStore()
        self.credentials = CredentialStore(self.store, clock=clock)
        self.pkce = PKCEManager(self.store)
        self.auth_builder = AuthorizationURLBuilder(
            self.pkce,
            client_id=client_id,
            redirect_uri=redirect_uri,
            scopes=scopes,
        )
        self.exchanger = TokenExchanger(
            self.credentials,
            self.pkce,
            client_id=self.auth_builder.client_id,
            redirect_uri=self.auth_builder.redirect_uri,
            transport=transport,
            timeout=timeout,
        )

    # Authorization URLs
    def get_authorize_url(self) -> str:
        """Persist a fresh verifier and return the authorization URL"""
        return self.auth_builder.get_authorize_url()

    def start_login_flow(self) -> str:
        """Start the OAuth login flow by opening browser

        Returns:
            Authorization URL that was opened
        """
        return self.auth_builder.start_login_flow()

    # Token exchange
    async def handle_callback(self, callback: CallbackInput) -> ExchangeResult:
        """Exchange the code carried by an OAuth redirect

        Args:
            callback: Redirect URL, query string, or parsed query parameters

        Returns:
            ExchangeResult with the credential or a failure reason
        """
        return await self.exchanger.handle_callback(callback)

    def cancel_pending(self) -> int:
        return self.exchanger.cancel_pending()

    # Token retrieval
    def get_access_token(self) -> Optional[str]:
        return self.credentials.get_access_token()

    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated()

    def logout(self) -> None:
        """Cancel pending exchanges, then clear token, expiry and verifier"""
        self.exchanger.cancel_pending()
        self.credentials.logout()


__all__ = [
    "SpotifyOAuthManager",
    "AccessCredential",
    "AuthorizationURLBuilder",
    "CredentialStore",
    "ExchangeResult",
    "FailureReason",
    "PKCEManager",
    "PkceCodes",
    "TokenExchanger",
    "build_authorization_url",
    "derive_challenge",
    "generate_verifier",
    "parse_callback_query",
]
