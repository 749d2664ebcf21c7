"""PKCE (Proof Key for Code Exchange) generation and management"""

import base64
import hashlib
import secrets
import string
from typing import Optional

import settings
from utils.storage import CODE_VERIFIER_KEY, SessionStore
from .models import PkceCodes

# RFC 3986 unreserved letters and digits
VERIFIER_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


def generate_verifier(length: int = settings.VERIFIER_LENGTH) -> str:
    """Generate a random code verifier

    Each byte from the OS CSPRNG is mapped modulo the alphabet size.

    Args:
        length: Number of characters to produce

    Returns:
        Verifier string of exactly ``length`` characters
    """
    if length < 0:
        raise ValueError(f"Verifier length must not be negative, got {length}")

    random_bytes = secrets.token_bytes(length)
    return "".join(VERIFIER_ALPHABET[b % len(VERIFIER_ALPHABET)] for b in random_bytes)


def derive_challenge(verifier: str) -> str:
    """Compute the S256 code challenge for a verifier

    Args:
        verifier: Code verifier string

    Returns:
        base64url-encoded SHA-256 digest without '=' padding
    """
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


class PKCEManager:
    """Manages PKCE code generation and the pending verifier

    The verifier has to survive the authorization redirect, so it lives in
    the session store rather than on this object.
    """

    def __init__(self, store: SessionStore, verifier_length: int = settings.VERIFIER_LENGTH):
        """Initialize PKCE manager

        Args:
            store: Session store holding the pending verifier
            verifier_length: Length of generated verifiers
        """
        self.store = store
        self.verifier_length = verifier_length

    def generate_pkce(self) -> PkceCodes:
        """Generate a fresh verifier and its challenge

        Returns:
            PkceCodes with code_verifier and code_challenge
        """
        code_verifier = generate_verifier(self.verifier_length)
        return PkceCodes(code_verifier=code_verifier, code_challenge=derive_challenge(code_verifier))

    def save_verifier(self, code_verifier: str) -> None:
        self.store.set(CODE_VERIFIER_KEY, code_verifier)

    def load_verifier(self) -> Optional[str]:
        return self.store.get(CODE_VERIFIER_KEY) or None

    def clear_verifier(self) -> None:
        self.store.remove(CODE_VERIFIER_KEY)
