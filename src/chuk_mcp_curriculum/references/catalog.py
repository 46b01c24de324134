"""
Global rudiment catalog - the fixed table behind GlobalRef.

The catalog is configuration, not stored data. It is handed to the
resolver at construction so tests and deployments can swap it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from chuk_mcp_curriculum.constants import ErrorMessages
from chuk_mcp_curriculum.models.reference import GlobalRef
from chuk_mcp_curriculum.references.resolver import parse_ref

DEFAULT_CATALOG_PATH = Path(__file__).parent / "library" / "catalog.yaml"


class CatalogEntry(BaseModel):
    """One globally catalogued rudiment."""

    id: str = Field(..., min_length=1, description="Catalog key")
    label: str = Field(..., description="Display name")

    model_config = {"frozen": True}


class RudimentCatalog:
    """
    Lookup table from catalog ID to display label.

    Entry order is kept so pickers list rudiments the way the
    configuration lists them.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: dict[str, CatalogEntry] = {}
        for entry in entries:
            # A key shaped like course:<id>:<id> could never be addressed
            if not isinstance(parse_ref(entry.id), GlobalRef):
                raise ValueError(ErrorMessages.RESERVED_CATALOG_ID.format(catalog_id=entry.id))
            self._entries[entry.id] = entry

    @classmethod
    def from_mapping(cls, mapping: dict[str, str]) -> RudimentCatalog:
        """Build a catalog from {id: label}."""
        return cls(CatalogEntry(id=k, label=v) for k, v in mapping.items())

    @classmethod
    def from_yaml(cls, path: Path) -> RudimentCatalog:
        """
        Load a catalog from a YAML file.

        Args:
            path: File with a top-level 'rudiments' list of {id, label}

        Returns:
            The loaded catalog
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(
            CatalogEntry(id=str(item["id"]), label=str(item.get("label", item["id"])))
            for item in data.get("rudiments", [])
        )

    @classmethod
    def default(cls) -> RudimentCatalog:
        """The catalog bundled with the package."""
        return cls.from_yaml(DEFAULT_CATALOG_PATH)

    def get(self, catalog_id: str) -> CatalogEntry | None:
        """Get an entry by ID, or None if the catalog has no such key."""
        return self._entries.get(catalog_id)

    def __contains__(self, catalog_id: object) -> bool:
        return catalog_id in self._entries

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"RudimentCatalog({list(self._entries)!r})"
