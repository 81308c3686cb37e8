"""
Tests for API key storage and cached validation.
"""

from mindful_chat.capabilities import MemoryKeyValueStore
from mindful_chat.credentials import API_KEY_STORE_KEY, CredentialService
from mindful_chat.models import ValidationState


class TestCredentialService:
    """Test suite for CredentialService validation caching."""

    async def test_validation_is_cached(self, credentials, remote):
        """Two validity checks without a key change issue one remote call."""
        assert credentials.state is ValidationState.UNCHECKED
        assert await credentials.is_valid()
        assert await credentials.is_valid()

        assert len(remote.generate_calls) == 1
        assert remote.prompts() == ["test"]
        assert credentials.state is ValidationState.VALID

    async def test_invalid_key_is_cached(self, credentials, remote):
        remote.reply = 400

        assert not await credentials.is_valid()
        assert not await credentials.is_valid()
        assert len(remote.generate_calls) == 1
        assert credentials.state is ValidationState.INVALID
        assert await credentials.client() is None

    async def test_blank_key_skips_network(self, http, remote):
        credentials = CredentialService(MemoryKeyValueStore(), http, default_key="  ")

        assert not credentials.has_credential()
        assert not await credentials.validate()
        assert remote.generate_calls == []
        assert credentials.state is ValidationState.INVALID

    async def test_set_credential_resets_state(self, credentials, key_store, remote):
        remote.reply = 403
        assert not await credentials.is_valid()

        credentials.set_credential("new-key")
        assert credentials.state is ValidationState.UNCHECKED
        assert key_store.get(API_KEY_STORE_KEY) == "new-key"

        remote.reply = "ok"
        assert await credentials.is_valid()
        assert len(remote.generate_calls) == 2

    async def test_update_credential_validates(self, credentials, remote):
        assert await credentials.update_credential("another-key")
        assert credentials.credential == "another-key"
        assert await credentials.client() is not None
        assert len(remote.generate_calls) == 1

    async def test_blank_update_does_not_restore_default(self, credentials, remote):
        assert not await credentials.update_credential("")

        assert credentials.credential == ""
        assert credentials.state is ValidationState.INVALID
        assert remote.generate_calls == []

        credentials.clear_credential()
        assert credentials.credential == "test-key"

    async def test_stored_key_wins_over_default(self, http):
        store = MemoryKeyValueStore({API_KEY_STORE_KEY: "stored"})
        credentials = CredentialService(store, http, default_key="from-env")
        assert credentials.credential == "stored"

        credentials.clear_credential()
        assert credentials.credential == "from-env"
        assert store.get(API_KEY_STORE_KEY) is None

    async def test_malformed_validation_response_is_invalid(self, credentials, remote):
        remote.reply = 200  # a 200 whose body has no candidates
        assert not await credentials.is_valid()
