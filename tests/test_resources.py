"""Tests for revocable resource handles."""
import pytest

from traceify.resources import ResourceStore


class TestResourceStore:
    """Test cases for ResourceStore."""

    def test_create_and_read(self):
        store = ResourceStore()
        handle = store.create(b"abc", "image/png")

        assert handle.uri.startswith("blob:traceify/")
        assert handle.media_type == "image/png"
        assert handle.size == 3
        assert store.read(handle) == b"abc"
        assert store.live_count == 1

    def test_unique_uris(self):
        store = ResourceStore()
        assert store.create(b"", "a").uri != store.create(b"", "a").uri

    def test_revoke(self):
        """Revoked handles can no longer be read."""
        store = ResourceStore()
        handle = store.create(b"abc", "image/png")

        store.revoke(handle)

        assert not store.is_live(handle)
        assert store.live_count == 0
        with pytest.raises(KeyError):
            store.read(handle)

    def test_revoke_is_idempotent(self):
        store = ResourceStore()
        handle = store.create(b"abc", "image/png")

        store.revoke(handle)
        store.revoke(handle)
        store.revoke(None)

        assert store.live_count == 0
