"""Data models for Spotify OAuth authentication"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass
class PkceCodes:
    """PKCE (Proof Key for Code Exchange) codes for OAuth flow

    Attributes:
        code_verifier: Random string kept by the client until token exchange
        code_challenge: base64url(SHA-256(code_verifier)), sent in auth request
    """
    code_verifier: str
    code_challenge: str


@dataclass(frozen=True)
class AccessCredential:
    """Bearer token with its absolute expiry

    Attributes:
        access_token: Opaque bearer string
        expires_at_ms: Expiry instant in epoch milliseconds
    """
    access_token: str
    expires_at_ms: int

    def is_expired(self, now_ms: int) -> bool:
        return now_ms >= self.expires_at_ms


class FailureReason(str, Enum):
    """Why a callback did not produce a credential"""
    AUTHORIZATION_ERROR = "authorization_error"
    MISSING_CODE = "missing_code"
    MISSING_VERIFIER = "missing_verifier"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    INVALID_RESPONSE = "invalid_response"
    CANCELLED = "cancelled"

    @property
    def is_local(self) -> bool:
        """True for failures detected before any network call"""
        return self in (
            FailureReason.AUTHORIZATION_ERROR,
            FailureReason.MISSING_CODE,
            FailureReason.MISSING_VERIFIER,
        )


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of handling one OAuth callback

    Exactly one of ``credential`` and ``reason`` is set.
    """
    credential: Optional[AccessCredential] = None
    reason: Optional[FailureReason] = None
    detail: Optional[str] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, credential: AccessCredential) -> "ExchangeResult":
        return cls(credential=credential)

    @classmethod
    def failure(
        cls,
        reason: FailureReason,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> "ExchangeResult":
        return cls(reason=reason, detail=detail, status_code=status_code)

    @property
    def ok(self) -> bool:
        return self.credential is not None

    @property
    def access_token(self) -> Optional[str]:
        return self.credential.access_token if self.credential else None
