"""
Tests for authorization URL construction
"""
from unittest.mock import patch
from urllib.parse import parse_qs, urlparse

import pytest

from conftest import CLIENT_ID, REDIRECT_URI, SCOPES
from spotify_oauth.authorization import AuthorizationURLBuilder, build_authorization_url
from spotify_oauth.pkce import PKCEManager, derive_challenge
from utils.storage import CODE_VERIFIER_KEY


def _query(url):
    parsed = urlparse(url)
    return parsed, {key: values[0] for key, values in parse_qs(parsed.query).items()}


class TestBuildAuthorizationUrl:
    """Tests for build_authorization_url"""

    def test_fixed_keys_and_endpoint(self):
        url = build_authorization_url(CLIENT_ID, REDIRECT_URI, SCOPES, "challenge-value")
        parsed, params = _query(url)

        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://accounts.spotify.com/authorize"
        assert params == {
            "client_id": CLIENT_ID,
            "response_type": "code",
            "redirect_uri": REDIRECT_URI,
            "code_challenge_method": "S256",
            "code_challenge": "challenge-value",
            "scope": "user-read-private user-read-recently-played",
        }

    def test_scopes_are_space_joined(self):
        url = build_authorization_url(CLIENT_ID, REDIRECT_URI, ["a", "b", "c"], "x")
        _, params = _query(url)
        assert params["scope"] == "a b c"

    def test_custom_endpoint(self):
        url = build_authorization_url(CLIENT_ID, REDIRECT_URI, SCOPES, "x", auth_endpoint="https://auth.example/authorize")
        assert url.startswith("https://auth.example/authorize?")


class TestAuthorizationURLBuilder:
    """Tests for AuthorizationURLBuilder"""

    def test_persists_verifier_matching_challenge(self, store):
        builder = AuthorizationURLBuilder(PKCEManager(store), CLIENT_ID, REDIRECT_URI, SCOPES)

        url = builder.get_authorize_url()
        _, params = _query(url)

        verifier = store.get(CODE_VERIFIER_KEY)
        assert verifier is not None
        assert len(verifier) == 64
        assert params["code_challenge"] == derive_challenge(verifier)
        assert verifier not in url

    def test_each_login_attempt_replaces_verifier(self, store):
        builder = AuthorizationURLBuilder(PKCEManager(store), CLIENT_ID, REDIRECT_URI, SCOPES)

        builder.get_authorize_url()
        first = store.get(CODE_VERIFIER_KEY)
        builder.get_authorize_url()

        assert store.get(CODE_VERIFIER_KEY) != first

    def test_missing_client_id_raises(self, store):
        builder = AuthorizationURLBuilder(PKCEManager(store), "", REDIRECT_URI, SCOPES)
        with pytest.raises(ValueError):
            builder.get_authorize_url()
        assert store.get(CODE_VERIFIER_KEY) is None

    def test_start_login_flow_opens_browser(self, store):
        builder = AuthorizationURLBuilder(PKCEManager(store), CLIENT_ID, REDIRECT_URI, SCOPES)

        with patch("spotify_oauth.authorization.webbrowser.open", return_value=True) as mock_open:
            url = builder.start_login_flow()

        mock_open.assert_called_once_with(url)
        assert store.get(CODE_VERIFIER_KEY) is not None
