"""
Document store - the persistence collaborator.

Collections are slash paths ('courses', 'courses/{id}/rudiments',
'lessons', 'admins'). Documents are flat field mappings; a merge write
replaces the given top-level fields and keeps the rest.

Two implementations ship with the package:
- MemoryDocumentStore: dict-backed, supports atomic batches
- YamlDocumentStore: one YAML file per document on disk
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable
from uuid import uuid4

import yaml

from chuk_mcp_curriculum.constants import DOCUMENT_ID_LENGTH

logger = logging.getLogger(__name__)

# Equality filter: (field, value)
Where = tuple[str, Any]


@dataclass(frozen=True)
class DocumentSnapshot:
    """A document as read from the store."""

    id: str
    data: dict[str, Any]


@dataclass(frozen=True)
class SetWrite:
    """One write of a batch."""

    collection: str
    doc_id: str
    data: dict[str, Any] = field(default_factory=dict)
    merge: bool = True


@runtime_checkable
class DocumentStore(Protocol):
    """Async per-collection CRUD with equality filters and ordering."""

    supports_transactions: bool

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        """Point read. None if the document does not exist."""
        ...

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Create a document with a generated ID and return the ID."""
        ...

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = True
    ) -> None:
        """Write a document, merging into an existing one by default."""
        ...

    async def delete(self, collection: str, doc_id: str) -> None:
        """Delete a document. Deleting a missing document is not an error."""
        ...

    async def query(
        self,
        collection: str,
        where: Where | None = None,
        order_by: str | None = None,
    ) -> list[DocumentSnapshot]:
        """List a collection, optionally filtered and ordered by one field."""
        ...

    async def commit(self, writes: Sequence[SetWrite]) -> None:
        """Apply a batch of writes (all-or-nothing when supports_transactions)."""
        ...


def new_document_id() -> str:
    """Generate a document ID."""
    return uuid4().hex[:DOCUMENT_ID_LENGTH]


def _field_sort_key(snapshot: DocumentSnapshot, field_name: str) -> tuple[int, float, str]:
    """Numeric values first in ascending order, then everything else; ID breaks ties."""
    value = snapshot.data.get(field_name)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, float(value), snapshot.id)
    return (1, 0.0, snapshot.id)


def _select(
    snapshots: list[DocumentSnapshot], where: Where | None, order_by: str | None
) -> list[DocumentSnapshot]:
    if where is not None:
        field_name, value = where
        snapshots = [s for s in snapshots if s.data.get(field_name) == value]
    if order_by is not None:
        snapshots = sorted(snapshots, key=lambda s: _field_sort_key(s, order_by))
    return snapshots


def _merged(existing: dict[str, Any] | None, data: dict[str, Any], merge: bool) -> dict[str, Any]:
    if merge and existing is not None:
        return {**existing, **data}
    return dict(data)


class MemoryDocumentStore:
    """
    In-memory document store.

    Reads and writes copy documents so callers never alias stored state.
    Batches are applied to a copy and swapped in, so they are atomic.
    """

    supports_transactions = True

    def __init__(self, initial: dict[str, dict[str, dict[str, Any]]] | None = None):
        """
        Initialize the store.

        Args:
            initial: Optional {collection: {doc_id: data}} seed
        """
        self._collections: dict[str, dict[str, dict[str, Any]]] = copy.deepcopy(initial or {})

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        data = self._collections.get(collection, {}).get(doc_id)
        if data is None:
            return None
        return DocumentSnapshot(id=doc_id, data=copy.deepcopy(data))

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        await self.set(collection, doc_id, data, merge=False)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = True
    ) -> None:
        docs = self._collections.setdefault(collection, {})
        docs[doc_id] = _merged(docs.get(doc_id), copy.deepcopy(data), merge)
        logger.debug(f"set {collection}/{doc_id} (merge={merge})")

    async def delete(self, collection: str, doc_id: str) -> None:
        self._collections.get(collection, {}).pop(doc_id, None)
        logger.debug(f"delete {collection}/{doc_id}")

    async def query(
        self,
        collection: str,
        where: Where | None = None,
        order_by: str | None = None,
    ) -> list[DocumentSnapshot]:
        snapshots = [
            DocumentSnapshot(id=doc_id, data=copy.deepcopy(data))
            for doc_id, data in self._collections.get(collection, {}).items()
        ]
        return _select(snapshots, where, order_by)

    async def commit(self, writes: Sequence[SetWrite]) -> None:
        staged = copy.deepcopy(self._collections)
        for write in writes:
            docs = staged.setdefault(write.collection, {})
            docs[write.doc_id] = _merged(
                docs.get(write.doc_id), copy.deepcopy(write.data), write.merge
            )
        self._collections = staged
        logger.debug(f"committed batch of {len(writes)} writes")

    def dump(self) -> dict[str, dict[str, dict[str, Any]]]:
        """Copy of the raw contents, for inspection."""
        return copy.deepcopy(self._collections)


class YamlDocumentStore:
    """
    File-backed document store.

    Each document is <root>/<collection>/<doc_id>.yaml, so nested
    collections become nested directories. Batches are written one
    file at a time and are not atomic.
    """

    supports_transactions = False

    def __init__(self, root: Path):
        """
        Initialize the store.

        Args:
            root: Directory holding the collection directories
        """
        self.root = root

    def _doc_path(self, collection: str, doc_id: str) -> Path:
        """Get the file path for a document."""
        if not doc_id or "/" in doc_id or doc_id in (".", ".."):
            raise ValueError(f"Invalid document ID: {doc_id!r}")
        parts = [p for p in collection.split("/") if p]
        if not parts or any(p in (".", "..") for p in parts):
            raise ValueError(f"Invalid collection path: {collection!r}")
        return self.root.joinpath(*parts) / f"{doc_id}.yaml"

    def _read(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        with open(path) as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}

    def _write(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    async def get(self, collection: str, doc_id: str) -> DocumentSnapshot | None:
        data = self._read(self._doc_path(collection, doc_id))
        if data is None:
            return None
        return DocumentSnapshot(id=doc_id, data=data)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc_id = new_document_id()
        await self.set(collection, doc_id, data, merge=False)
        return doc_id

    async def set(
        self, collection: str, doc_id: str, data: dict[str, Any], merge: bool = True
    ) -> None:
        path = self._doc_path(collection, doc_id)
        self._write(path, _merged(self._read(path), data, merge))
        logger.debug(f"wrote {path}")

    async def delete(self, collection: str, doc_id: str) -> None:
        path = self._doc_path(collection, doc_id)
        if path.exists():
            path.unlink()
            logger.debug(f"removed {path}")

    async def query(
        self,
        collection: str,
        where: Where | None = None,
        order_by: str | None = None,
    ) -> list[DocumentSnapshot]:
        directory = self.root.joinpath(*[p for p in collection.split("/") if p])
        if not directory.exists():
            return []

        snapshots = []
        for path in sorted(directory.glob("*.yaml")):
            data = self._read(path)
            if data is not None:
                snapshots.append(DocumentSnapshot(id=path.stem, data=data))
        return _select(snapshots, where, order_by)

    async def commit(self, writes: Sequence[SetWrite]) -> None:
        for write in writes:
            await self.set(write.collection, write.doc_id, write.data, write.merge)
