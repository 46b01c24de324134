"""
Error types for the curriculum core.

Missing documents and dangling references are not errors - they come back
as None. Only document store I/O fails.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chuk_mcp_curriculum.constants import ErrorMessages

if TYPE_CHECKING:
    from chuk_mcp_curriculum.store.ordering import OrderWrite


class CurriculumError(Exception):
    """Base class for curriculum errors."""


class StoreError(CurriculumError):
    """A document store read or write failed."""


class TransientStoreError(StoreError):
    """A store failure that may succeed when retried (timeouts, contention)."""


class PartialReorderError(CurriculumError):
    """
    The second write of an adjacent swap failed after the first succeeded.

    The scope is left with two siblings holding the same order value.
    Listing stays deterministic through the id tie-break; callers can
    detect the state with find_order_conflicts and retry the failed write.
    """

    def __init__(self, completed: OrderWrite, failed: OrderWrite, cause: BaseException):
        self.completed = completed
        self.failed = failed
        self.cause = cause
        super().__init__(
            ErrorMessages.PARTIAL_REORDER.format(
                first=completed.doc_id,
                second=failed.doc_id,
                order=completed.order,
            )
        )


class StaleOrderError(CurriculumError):
    """
    A reorder was planned from a list that no longer matches the store.

    Raised in atomic mode before anything is written, so the scope is
    unchanged.
    """

    def __init__(self, doc_id: str, expected: int, found: int | None):
        self.doc_id = doc_id
        self.expected = expected
        self.found = found
        super().__init__(
            ErrorMessages.STALE_ORDER.format(
                doc_id=doc_id,
                expected=expected,
                found="nothing" if found is None else found,
            )
        )
