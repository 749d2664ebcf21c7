"""OAuth callback handling and code-for-token exchange"""

import asyncio
import logging
from typing import Dict, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qs, urlencode, urlparse

import httpx

import settings
from .credentials import CredentialStore
from .models import AccessCredential, ExchangeResult, FailureReason
from .pkce import PKCEManager

logger = logging.getLogger(__name__)

CallbackInput = Union[str, Mapping[str, str]]


def parse_callback_query(callback: CallbackInput) -> Dict[str, str]:
    """Extract query parameters from a callback URL, query string or mapping

    Only the first value of a repeated parameter is kept.

    Args:
        callback: Full redirect URL, "?code=..." query string, or parameters

    Returns:
        Dict of parameter name to value
    """
    if isinstance(callback, Mapping):
        return {str(k): str(v) for k, v in callback.items() if v is not None}

    text = (callback or "").strip()
    if "://" in text or text.startswith("/"):
        query = urlparse(text).query
    else:
        query = text.lstrip("?")

    params = parse_qs(query, keep_blank_values=True)
    return {key: values[0] for key, values in params.items() if values}


class TokenExchanger:
    """Turns an OAuth redirect into a stored access credential

    Each authorization code gets one exchange task. Handling the same code
    again while the task runs awaits that task. A code that already
    succeeded yields the stored credential only while that credential is
    still live; after logout or expiry it is handled like any other code.
    """

    def __init__(
        self,
        credentials: CredentialStore,
        pkce_manager: PKCEManager,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        token_endpoint: str = settings.TOKEN_ENDPOINT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = settings.REQUEST_TIMEOUT,
    ):
        """Initialize token exchanger

        Args:
            credentials: Where a successful exchange stores the token
            pkce_manager: Holds the pending code verifier
            client_id: Spotify application client ID
            redirect_uri: Must equal the one sent with the authorize request
            token_endpoint: Token endpoint URL
            transport: Optional httpx transport (tests use MockTransport)
            timeout: Request timeout in seconds
        """
        self.credentials = credentials
        self.pkce = pkce_manager
        self.client_id = settings.SPOTIFY_CLIENT_ID if client_id is None else client_id
        self.redirect_uri = redirect_uri or settings.SPOTIFY_REDIRECT_URI
        self.token_endpoint = token_endpoint
        self.transport = transport
        self.timeout = timeout
        # In-flight exchanges only; entries are dropped when their task finishes
        self._tasks: Dict[str, "asyncio.Task[ExchangeResult]"] = {}
        self._last_success: Optional[Tuple[str, AccessCredential]] = None

    async def handle_callback(self, callback: CallbackInput) -> ExchangeResult:
        """Validate the callback parameters and exchange the code

        Args:
            callback: Redirect URL, query string, or parsed parameters

        Returns:
            ExchangeResult carrying the credential or the failure reason
        """
        params = parse_callback_query(callback)

        error = params.get("error")
        if error:
            return ExchangeResult.failure(FailureReason.AUTHORIZATION_ERROR, detail=error)

        code = params.get("code")
        if not code:
            return ExchangeResult.failure(
                FailureReason.MISSING_CODE,
                detail="No authorization code found in callback URL",
            )

        task = self._tasks.get(code)
        if task is None:
            replayed = self._replay(code)
            if replayed is not None:
                logger.debug("Authorization code already exchanged, returning the stored credential")
                return replayed

            code_verifier = self.pkce.load_verifier()
            if not code_verifier:
                return ExchangeResult.failure(
                    FailureReason.MISSING_VERIFIER,
                    detail="Code verifier not found in session storage",
                )

            task = asyncio.ensure_future(self._exchange(code, code_verifier))
            task.add_done_callback(lambda t, c=code: self._forget(c, t))
            self._tasks[code] = task
        else:
            logger.debug("Authorization code already being exchanged, reusing its result")

        # A caller going away must not cancel an exchange other callers share
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
            return ExchangeResult.failure(
                FailureReason.CANCELLED,
                detail="Token exchange was cancelled before it completed",
            )

    def _replay(self, code: str) -> Optional[ExchangeResult]:
        """Success for a code already exchanged, while its credential is live"""
        if self._last_success is None:
            return None
        last_code, credential = self._last_success
        if last_code != code or self.credentials.get_credential() != credential:
            return None
        return ExchangeResult.success(credential)

    def _forget(self, code: str, task: "asyncio.Task[ExchangeResult]") -> None:
        if self._tasks.get(code) is task:
            del self._tasks[code]

    def cancel_pending(self) -> int:
        """Cancel in-flight exchanges so late responses store nothing

        Returns:
            Number of exchanges cancelled
        """
        cancelled = 0
        for task in list(self._tasks.values()):
            if not task.done():
                task.cancel()
                cancelled += 1
        if cancelled:
            logger.debug(f"Cancelled {cancelled} pending token exchange(s)")
        return cancelled

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def _exchange(self, code: str, code_verifier: str) -> ExchangeResult:
        """POST the code and verifier to the token endpoint (single attempt)"""
        data = {
            "client_id": self.client_id,
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": self.redirect_uri,
            "code_verifier": code_verifier,
        }

        logger.debug(f"Exchanging authorization code for tokens at {self.token_endpoint}")

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
                response = await client.post(
                    self.token_endpoint,
                    content=urlencode(data),
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except httpx.TimeoutException as e:
            return ExchangeResult.failure(
                FailureReason.NETWORK_ERROR,
                detail=f"Token exchange timed out after {self.timeout} seconds: {e}",
            )
        except httpx.RequestError as e:
            return ExchangeResult.failure(FailureReason.NETWORK_ERROR, detail=f"Token exchange request failed: {e}")

        if not response.is_success:
            return ExchangeResult.failure(
                FailureReason.HTTP_ERROR,
                detail=response.text,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            return ExchangeResult.failure(
                FailureReason.INVALID_RESPONSE,
                detail=f"Failed to parse token exchange response: {e}",
                status_code=response.status_code,
            )

        access_token = payload.get("access_token") if isinstance(payload, dict) else None
        expires_in = payload.get("expires_in") if isinstance(payload, dict) else None
        if not access_token or isinstance(expires_in, bool) or not isinstance(expires_in, (int, float)):
            return ExchangeResult.failure(
                FailureReason.INVALID_RESPONSE,
                detail="Token exchange response missing access_token or expires_in",
                status_code=response.status_code,
            )

        credential = self.credentials.save_credential(access_token, expires_in)
        self._last_success = (code, credential)

        # Single use: a verifier must never back a second exchange
        self.pkce.clear_verifier()

        logger.info("Successfully exchanged authorization code for an access token")
        return ExchangeResult.success(credential)
