"""
Storage layer.

- DocumentStore: Async document store protocol (memory and YAML implementations)
- OrderedEntityStore: Ordered listing and adjacent-swap reordering
- RetryConfig / with_retry: Bounded retry for transient store failures
"""

from chuk_mcp_curriculum.store.documents import (
    DocumentSnapshot,
    DocumentStore,
    MemoryDocumentStore,
    SetWrite,
    YamlDocumentStore,
    new_document_id,
)
from chuk_mcp_curriculum.store.ordering import (
    ConsistencyMode,
    Direction,
    OrderedEntityStore,
    OrderScope,
    OrderWrite,
    ReorderPlan,
    find_order_conflicts,
    move_adjacent,
    renumber,
    sort_entities,
)
from chuk_mcp_curriculum.store.retry import NO_RETRY, RetryConfig, with_retry

__all__ = [
    "NO_RETRY",
    "ConsistencyMode",
    "Direction",
    "DocumentSnapshot",
    "DocumentStore",
    "MemoryDocumentStore",
    "OrderScope",
    "OrderWrite",
    "OrderedEntityStore",
    "ReorderPlan",
    "RetryConfig",
    "SetWrite",
    "YamlDocumentStore",
    "find_order_conflicts",
    "move_adjacent",
    "new_document_id",
    "renumber",
    "sort_entities",
    "with_retry",
]
