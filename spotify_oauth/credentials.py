"""Access credential storage with expiry tracking"""

import datetime
import logging
import time
from typing import Any, Callable, Dict, Optional

from utils.storage import ACCESS_TOKEN_KEY, CODE_VERIFIER_KEY, TOKEN_EXPIRY_KEY, SessionStore
from .models import AccessCredential

logger = logging.getLogger(__name__)


class CredentialStore:
    """Holds the bearer token and its expiry in a session store

    An expired credential is never handed out: the read that notices the
    expiry clears it and reports absence.
    """

    def __init__(self, store: SessionStore, clock: Callable[[], float] = time.time):
        """Initialize credential store

        Args:
            store: Session store holding the token slots
            clock: Returns the current time in epoch seconds
        """
        self.store = store
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def save_credential(self, access_token: str, expires_in: float) -> AccessCredential:
        """Store a token issued now with a lifetime in seconds"""
        credential = AccessCredential(
            access_token=access_token,
            expires_at_ms=self._now_ms() + int(expires_in * 1000),
        )
        self.store.set(ACCESS_TOKEN_KEY, credential.access_token)
        self.store.set(TOKEN_EXPIRY_KEY, str(credential.expires_at_ms))
        return credential

    def _clear_credential(self) -> None:
        self.store.remove(ACCESS_TOKEN_KEY)
        self.store.remove(TOKEN_EXPIRY_KEY)

    def get_credential(self) -> Optional[AccessCredential]:
        """Return the live credential, clearing it if expired or incomplete"""
        token = self.store.get(ACCESS_TOKEN_KEY)
        expiry = self.store.get(TOKEN_EXPIRY_KEY)

        if not token or not expiry:
            self._clear_credential()
            return None

        try:
            credential = AccessCredential(access_token=token, expires_at_ms=int(expiry))
        except ValueError:
            logger.warning("Discarding credential with unreadable expiry")
            self._clear_credential()
            return None

        if credential.is_expired(self._now_ms()):
            logger.debug("Access token expired, clearing credential")
            self._clear_credential()
            return None

        return credential

    def get_access_token(self) -> Optional[str]:
        """Get the current access token if valid"""
        credential = self.get_credential()
        return credential.access_token if credential else None

    def is_authenticated(self) -> bool:
        return self.get_access_token() is not None

    def logout(self) -> None:
        """Remove token, expiry and any pending verifier"""
        self._clear_credential()
        self.store.remove(CODE_VERIFIER_KEY)

    def get_status(self) -> Dict[str, Any]:
        """Get credential status without exposing the token"""
        credential = self.get_credential()
        if credential is None:
            return {
                "authenticated": False,
                "expires_at": None,
                "time_until_expiry": None,
                "expires_in_seconds": None,
            }

        remaining = max(0, (credential.expires_at_ms - self._now_ms()) // 1000)
        hours = remaining // 3600
        minutes = (remaining % 3600) // 60
        time_str = f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"

        expires_at = datetime.datetime.fromtimestamp(
            credential.expires_at_ms / 1000,
            datetime.timezone.utc,
        )

        return {
            "authenticated": True,
            "expires_at": expires_at.isoformat(),
            "time_until_expiry": time_str,
            "expires_in_seconds": remaining,
        }
