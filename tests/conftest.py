"""
Pytest configuration and shared fixtures.
"""

import tempfile
from pathlib import Path

import pytest

from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.references import RudimentCatalog
from chuk_mcp_curriculum.store import NO_RETRY, MemoryDocumentStore

FIXED_NOW = "2026-01-01T00:00:00+00:00"


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def catalog() -> RudimentCatalog:
    """Small global catalog."""
    return RudimentCatalog.from_mapping({"paradiddle-1": "Paradiddle", "flam-tap": "Flam Tap"})


@pytest.fixture
def store() -> MemoryDocumentStore:
    """Empty in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def manager(store: MemoryDocumentStore, catalog: RudimentCatalog) -> CurriculumManager:
    """Manager over the in-memory store with a fixed clock."""
    return CurriculumManager(store, catalog=catalog, retry=NO_RETRY, clock=lambda: FIXED_NOW)
