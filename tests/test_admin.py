"""
Tests for the admin check.
"""

import pytest

from chuk_mcp_curriculum.auth import is_admin
from chuk_mcp_curriculum.errors import StoreError
from chuk_mcp_curriculum.store import MemoryDocumentStore


class BrokenStore(MemoryDocumentStore):
    """Store whose reads fail."""

    def __init__(self, error: Exception):
        super().__init__()
        self.error = error

    async def get(self, collection, doc_id):
        raise self.error


@pytest.fixture
def admins_store() -> MemoryDocumentStore:
    return MemoryDocumentStore(
        {
            "admins": {
                "alice": {"role": "admin"},
                "bob": {"role": "editor"},
                "carol": {},
            }
        }
    )


class TestIsAdmin:
    """Tests for is_admin."""

    @pytest.mark.asyncio
    async def test_admin(self, admins_store: MemoryDocumentStore) -> None:
        """role 'admin' grants access."""
        assert await is_admin(admins_store, "alice") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("uid", ["bob", "carol", "dave", "", None])
    async def test_denied(self, admins_store: MemoryDocumentStore, uid) -> None:
        """Other roles, no role, no document and no uid are denied."""
        assert await is_admin(admins_store, uid) is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [StoreError("unavailable"), OSError("disk")])
    async def test_read_failure_denies(self, error: Exception) -> None:
        """A failed lookup is treated as not-admin."""
        assert await is_admin(BrokenStore(error), "alice") is False
