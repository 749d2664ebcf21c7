"""
Tests for the credential store and session storage backends
"""
import json
import os
import platform

import pytest

from spotify_oauth.credentials import CredentialStore
from utils.storage import (
    ACCESS_TOKEN_KEY,
    CODE_VERIFIER_KEY,
    TOKEN_EXPIRY_KEY,
    FileSessionStore,
    MemorySessionStore,
)


@pytest.fixture
def credentials(store, clock):
    return CredentialStore(store, clock=clock)


class TestCredentialStore:
    """Tests for CredentialStore"""

    def test_save_stores_epoch_millisecond_expiry(self, credentials, store, clock):
        credential = credentials.save_credential("token-abc", 3600)

        assert store.get(ACCESS_TOKEN_KEY) == "token-abc"
        assert store.get(TOKEN_EXPIRY_KEY) == str(int(clock.now * 1000) + 3_600_000)
        assert credential.expires_at_ms == int(clock.now * 1000) + 3_600_000

    def test_token_available_before_expiry(self, credentials, clock):
        credentials.save_credential("token-abc", 3600)

        clock.advance(3599.999)
        assert credentials.get_access_token() == "token-abc"
        assert credentials.is_authenticated()

    def test_token_absent_at_expiry(self, credentials, store, clock):
        credentials.save_credential("token-abc", 3600)

        clock.advance(3600)
        assert credentials.get_access_token() is None
        assert store.get(ACCESS_TOKEN_KEY) is None
        assert store.get(TOKEN_EXPIRY_KEY) is None

    def test_token_absent_after_expiry(self, credentials, clock):
        credentials.save_credential("token-abc", 60)
        clock.advance(3600)
        assert credentials.get_access_token() is None

    def test_expired_one_ms_ago_clears_storage(self, credentials, store, clock):
        store.set(ACCESS_TOKEN_KEY, "stale")
        store.set(TOKEN_EXPIRY_KEY, str(int(clock.now * 1000) - 1))

        assert credentials.is_authenticated() is False
        assert ACCESS_TOKEN_KEY not in store
        assert TOKEN_EXPIRY_KEY not in store

    def test_expiry_read_keeps_pending_verifier(self, credentials, store, clock):
        store.set(ACCESS_TOKEN_KEY, "stale")
        store.set(TOKEN_EXPIRY_KEY, str(int(clock.now * 1000) - 1))
        store.set(CODE_VERIFIER_KEY, "pending")

        assert credentials.get_access_token() is None
        assert store.get(CODE_VERIFIER_KEY) == "pending"

    def test_missing_expiry_clears_token(self, credentials, store):
        store.set(ACCESS_TOKEN_KEY, "orphan")
        assert credentials.get_access_token() is None
        assert ACCESS_TOKEN_KEY not in store

    def test_missing_token_clears_expiry(self, credentials, store, clock):
        store.set(TOKEN_EXPIRY_KEY, str(int(clock.now * 1000) + 10_000))
        assert credentials.get_access_token() is None
        assert TOKEN_EXPIRY_KEY not in store

    def test_unparsable_expiry_clears(self, credentials, store):
        store.set(ACCESS_TOKEN_KEY, "token")
        store.set(TOKEN_EXPIRY_KEY, "not-a-number")
        assert credentials.get_access_token() is None
        assert len(store) == 0

    def test_logout_clears_everything(self, credentials, store):
        credentials.save_credential("token", 3600)
        store.set(CODE_VERIFIER_KEY, "verifier")

        credentials.logout()

        assert len(store) == 0
        assert credentials.get_access_token() is None

    def test_logout_is_idempotent(self, credentials):
        credentials.logout()
        credentials.logout()
        assert credentials.get_access_token() is None

    def test_status_unauthenticated(self, credentials):
        status = credentials.get_status()
        assert status == {
            "authenticated": False,
            "expires_at": None,
            "time_until_expiry": None,
            "expires_in_seconds": None,
        }

    def test_status_authenticated_hides_token(self, credentials, clock):
        credentials.save_credential("secret-token", 2 * 3600 + 15 * 60)

        status = credentials.get_status()

        assert status["authenticated"] is True
        assert status["time_until_expiry"] == "2h 15m"
        assert status["expires_in_seconds"] == 2 * 3600 + 15 * 60
        assert status["expires_at"].endswith("+00:00")
        assert "secret-token" not in json.dumps(status)

    def test_status_minutes_only(self, credentials):
        credentials.save_credential("token", 5 * 60)
        assert credentials.get_status()["time_until_expiry"] == "5m"


class TestMemorySessionStore:
    """Tests for MemorySessionStore"""

    def test_get_set_remove(self):
        store = MemorySessionStore()
        assert store.get("key") is None
        store.set("key", "value")
        assert store.get("key") == "value"
        store.remove("key")
        assert store.get("key") is None

    def test_remove_missing_is_safe(self):
        MemorySessionStore().remove("missing")

    def test_sessions_are_isolated(self):
        first, second = MemorySessionStore(), MemorySessionStore()
        first.set(ACCESS_TOKEN_KEY, "one")
        assert second.get(ACCESS_TOKEN_KEY) is None


class TestFileSessionStore:
    """Tests for FileSessionStore"""

    def test_values_survive_new_instance(self, tmp_path):
        path = tmp_path / "session.json"
        FileSessionStore(str(path)).set(CODE_VERIFIER_KEY, "verifier")

        assert FileSessionStore(str(path)).get(CODE_VERIFIER_KEY) == "verifier"

    def test_removing_last_value_deletes_file(self, tmp_path):
        path = tmp_path / "session.json"
        store = FileSessionStore(str(path))
        store.set(ACCESS_TOKEN_KEY, "token")
        assert path.exists()

        store.remove(ACCESS_TOKEN_KEY)
        assert not path.exists()

    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "session.json"
        store = FileSessionStore(str(path))
        store.set(ACCESS_TOKEN_KEY, "token")
        assert path.exists()
        assert store.session_file == path

    @pytest.mark.skipif(platform.system() == "Windows", reason="POSIX permissions")
    def test_file_is_private(self, tmp_path):
        path = tmp_path / "session.json"
        FileSessionStore(str(path)).set(ACCESS_TOKEN_KEY, "token")
        assert os.stat(path).st_mode & 0o777 == 0o600

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        store = FileSessionStore(str(path))

        assert store.get(ACCESS_TOKEN_KEY) is None
        store.set(ACCESS_TOKEN_KEY, "token")
        assert store.get(ACCESS_TOKEN_KEY) == "token"

    def test_credential_store_over_file(self, tmp_path, clock):
        path = tmp_path / "session.json"
        CredentialStore(FileSessionStore(str(path)), clock=clock).save_credential("token", 60)

        reopened = CredentialStore(FileSessionStore(str(path)), clock=clock)
        assert reopened.get_access_token() == "token"

        clock.advance(61)
        assert reopened.get_access_token() is None
        assert not path.exists()
