"""
Rudiment references.

- RudimentCatalog: Global catalog configuration
- parse_ref / serialize_ref: Stored string <-> tagged reference
- ReferenceResolver: Reference -> display data
"""

from chuk_mcp_curriculum.references.catalog import (
    DEFAULT_CATALOG_PATH,
    CatalogEntry,
    RudimentCatalog,
)
from chuk_mcp_curriculum.references.resolver import ReferenceResolver, parse_ref, serialize_ref

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "CatalogEntry",
    "ReferenceResolver",
    "RudimentCatalog",
    "parse_ref",
    "serialize_ref",
]
