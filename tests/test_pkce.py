"""
Tests for verifier generation and challenge derivation
"""
import base64
import hashlib
import string
from unittest.mock import patch

import pytest

from spotify_oauth.pkce import VERIFIER_ALPHABET, PKCEManager, derive_challenge, generate_verifier
from utils.storage import CODE_VERIFIER_KEY


class TestGenerateVerifier:
    """Tests for generate_verifier"""

    @pytest.mark.parametrize("length", [1, 43, 64, 128])
    def test_exact_length_and_alphabet(self, length):
        verifier = generate_verifier(length)
        assert len(verifier) == length
        assert set(verifier) <= set(string.ascii_letters + string.digits)

    def test_default_length_is_64(self):
        assert len(generate_verifier()) == 64

    def test_repeated_calls_differ(self):
        verifiers = {generate_verifier(64) for _ in range(20)}
        assert len(verifiers) == 20

    def test_zero_length(self):
        assert generate_verifier(0) == ""

    def test_negative_length_rejected(self):
        with pytest.raises(ValueError):
            generate_verifier(-1)

    def test_bytes_map_modulo_alphabet(self):
        """Each random byte selects alphabet[byte % 62]"""
        with patch("spotify_oauth.pkce.secrets.token_bytes", return_value=bytes([0, 25, 26, 61, 62, 255])) as mock_bytes:
            verifier = generate_verifier(6)

        mock_bytes.assert_called_once_with(6)
        assert verifier == "AZa9AH"
        assert len(VERIFIER_ALPHABET) == 62


class TestDeriveChallenge:
    """Tests for derive_challenge"""

    def test_rfc7636_vector(self):
        verifier = "dBjftJeZ4CVP-mB92K27uhbUJU1p1r_wW1gFWFOEjXk"
        assert derive_challenge(verifier) == "E9Melhoa2OwvFrEMTJguCHaoeK1t8URWbuGJSstw-cM"

    def test_deterministic(self):
        verifier = generate_verifier(64)
        assert derive_challenge(verifier) == derive_challenge(verifier)

    def test_padded_looking_verifier_gives_unpadded_challenge(self):
        verifier = "abc" + "x" * 58 + "==="
        assert len(verifier) == 64

        challenge = derive_challenge(verifier)

        assert len(challenge) == 43
        for forbidden in "+/=":
            assert forbidden not in challenge

    def test_matches_sha256_base64url_no_pad(self):
        verifier = generate_verifier(64)
        digest = hashlib.sha256(verifier.encode("utf-8")).digest()
        expected = base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")
        assert derive_challenge(verifier) == expected

    def test_no_url_unsafe_characters_across_many_verifiers(self):
        for _ in range(200):
            challenge = derive_challenge(generate_verifier(64))
            assert "+" not in challenge
            assert "/" not in challenge
            assert "=" not in challenge


class TestPKCEManager:
    """Tests for PKCEManager verifier persistence"""

    def test_generate_pkce_pairs_verifier_and_challenge(self, store):
        codes = PKCEManager(store).generate_pkce()
        assert len(codes.code_verifier) == 64
        assert codes.code_challenge == derive_challenge(codes.code_verifier)

    def test_generate_does_not_store(self, store):
        PKCEManager(store).generate_pkce()
        assert store.get(CODE_VERIFIER_KEY) is None

    def test_custom_length(self, store):
        codes = PKCEManager(store, verifier_length=100).generate_pkce()
        assert len(codes.code_verifier) == 100

    def test_save_load_clear(self, store):
        manager = PKCEManager(store)
        manager.save_verifier("verifier-value")
        assert store.get(CODE_VERIFIER_KEY) == "verifier-value"
        assert manager.load_verifier() == "verifier-value"

        manager.clear_verifier()
        assert manager.load_verifier() is None

    def test_clear_when_missing_is_safe(self, store):
        PKCEManager(store).clear_verifier()
        assert len(store) == 0
