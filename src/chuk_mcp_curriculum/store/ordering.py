"""
Manual ordering - stable sibling order via adjacent swaps.

Courses, the lessons of a course and the rudiments of a course are each
an ordering scope. Listing sorts by the integer `order` field with the
document ID as tie-break, so two siblings that end up sharing an order
value (a half-applied swap) still list the same way every time.

Moving an entity exchanges its order value with its neighbour in the
list the caller currently holds; no fresh read is made.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Protocol, TypeVar

from chuk_mcp_curriculum.constants import ErrorMessages
from chuk_mcp_curriculum.errors import PartialReorderError, StaleOrderError
from chuk_mcp_curriculum.normalization.schema import FIELD_ORDER, now_iso, order_patch
from chuk_mcp_curriculum.store.documents import DocumentStore, SetWrite, Where
from chuk_mcp_curriculum.store.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class Orderable(Protocol):
    """An entity with an ID and a position."""

    id: str
    order: int

    def model_copy(self, *, update: dict[str, Any] | None = None, deep: bool = False) -> Any: ...


E = TypeVar("E", bound=Orderable)


class Direction(str, Enum):
    """Which neighbour to swap with."""

    UP = "up"
    DOWN = "down"

    @classmethod
    def parse(cls, value: str | Direction) -> Direction:
        """Parse a direction, raising ValueError for anything else."""
        try:
            return cls(value.lower() if isinstance(value, str) else value)
        except ValueError:
            raise ValueError(ErrorMessages.INVALID_DIRECTION.format(direction=value)) from None


class ConsistencyMode(str, Enum):
    """
    How the two writes of a swap reach the store.

    SEQUENTIAL: two independent writes, the second only after the first
        succeeded. A failure in between leaves duplicate order values.
    ATOMIC: every target is re-read under the scope lock and the move is
        refused if its order changed since the list was read; then one
        all-or-nothing batch. Without store transactions the checked
        writes are issued sequentially.
    """

    SEQUENTIAL = "sequential"
    ATOMIC = "atomic"


@dataclass(frozen=True)
class OrderWrite:
    """Set one entity's order value."""

    doc_id: str
    order: int
    previous: int


@dataclass(frozen=True)
class OrderScope:
    """A set of siblings ordered together."""

    collection: str
    where: Where | None = None

    @property
    def key(self) -> str:
        if self.where is None:
            return self.collection
        return f"{self.collection}?{self.where[0]}={self.where[1]}"


@dataclass(frozen=True)
class ReorderPlan(Generic[E]):
    """Result of a local reorder: the new list and the writes that persist it."""

    entities: list[E]
    writes: tuple[OrderWrite, ...] = field(default_factory=tuple)

    @property
    def is_noop(self) -> bool:
        return not self.writes


def sort_entities(entities: Sequence[E]) -> list[E]:
    """Canonical listing order: ascending order, then ascending ID."""
    return sorted(entities, key=lambda e: (e.order, e.id))


def find_order_conflicts(entities: Sequence[E]) -> dict[int, list[str]]:
    """
    Find siblings sharing an order value.

    Returns:
        {order: [ids...]} for every order value held by more than one
        entity, IDs in listing order. Empty when the scope is consistent.
    """
    groups: dict[int, list[str]] = defaultdict(list)
    for entity in sort_entities(entities):
        groups[entity.order].append(entity.id)
    return {order: ids for order, ids in groups.items() if len(ids) > 1}


def move_adjacent(current: Sequence[E], target_id: str, direction: Direction) -> ReorderPlan[E]:
    """
    Swap an entity with its neighbour in the held list.

    Args:
        current: The ordered list the caller holds
        target_id: Entity to move
        direction: UP swaps with the previous entry, DOWN with the next

    Returns:
        The reordered list (both order fields already swapped) and the two
        writes exchanging the stored values. Moving past either end, or an
        ID not in the list, is a no-op with no writes.
    """
    entities = list(current)
    index = next((i for i, e in enumerate(entities) if e.id == target_id), None)
    if index is None:
        return ReorderPlan(entities=entities)

    neighbour_index = index - 1 if direction == Direction.UP else index + 1
    if neighbour_index < 0 or neighbour_index >= len(entities):
        return ReorderPlan(entities=entities)

    target = entities[index]
    neighbour = entities[neighbour_index]
    writes = (
        OrderWrite(doc_id=target.id, order=neighbour.order, previous=target.order),
        OrderWrite(doc_id=neighbour.id, order=target.order, previous=neighbour.order),
    )

    entities[index] = target.model_copy(update={"order": neighbour.order})
    entities[neighbour_index] = neighbour.model_copy(update={"order": target.order})
    return ReorderPlan(entities=sort_entities(entities), writes=writes)


def renumber(current: Sequence[E]) -> ReorderPlan[E]:
    """
    Reassign order values 0..n-1 in listing order.

    Clears duplicate or sparse order values. Only entities whose value
    changes get a write.
    """
    ordered = sort_entities(current)
    writes = tuple(
        OrderWrite(doc_id=e.id, order=i, previous=e.order)
        for i, e in enumerate(ordered)
        if e.order != i
    )
    entities = [
        e if e.order == i else e.model_copy(update={"order": i}) for i, e in enumerate(ordered)
    ]
    return ReorderPlan(entities=entities, writes=writes)


class OrderedEntityStore(Generic[E]):
    """
    Ordered view of one scope in the document store.

    Every list call re-reads the scope. Reorders within the scope are
    serialized through a per-scope lock.
    """

    def __init__(
        self,
        store: DocumentStore,
        scope: OrderScope,
        normalize: Callable[[str, Any], E],
        consistency: ConsistencyMode = ConsistencyMode.SEQUENTIAL,
        retry: RetryConfig = RetryConfig(),
        locks: defaultdict[str, asyncio.Lock] | None = None,
        clock: Callable[[], str] = now_iso,
    ):
        """
        Initialize the ordered store.

        Args:
            store: Document store
            scope: Collection (and filter) holding the siblings
            normalize: Decoder from (doc_id, raw document) to entity
            consistency: How swap writes are issued
            retry: Retry policy for each write
            locks: Shared per-scope locks (pass the same mapping to every
                store over the same document store)
            clock: Timestamp source for updatedAt
        """
        self.store = store
        self.scope = scope
        self.normalize = normalize
        self.consistency = consistency
        self.retry = retry
        self._locks = locks if locks is not None else defaultdict(asyncio.Lock)
        self._clock = clock

    async def list(self) -> list[E]:
        """All entities in the scope in canonical order."""
        snapshots = await self.store.query(
            self.scope.collection, where=self.scope.where, order_by=FIELD_ORDER
        )
        return sort_entities([self.normalize(s.id, s.data) for s in snapshots])

    async def next_order(self) -> int:
        """Order value for a new entity: the current scope size."""
        snapshots = await self.store.query(self.scope.collection, where=self.scope.where)
        return len(snapshots)

    async def move(self, current: Sequence[E], target_id: str, direction: Direction) -> list[E]:
        """
        Move an entity one position and persist the swap.

        Args:
            current: The ordered list the caller holds
            target_id: Entity to move
            direction: UP or DOWN

        Returns:
            The reordered list

        Raises:
            PartialReorderError: Sequential mode, first write applied,
                second write failed
        """
        plan = move_adjacent(current, target_id, direction)
        if plan.is_noop:
            return plan.entities
        await self.apply(plan.writes)
        return plan.entities

    async def repair(self) -> list[E]:
        """Re-read the scope and renumber it 0..n-1."""
        plan = renumber(await self.list())
        if not plan.is_noop:
            logger.info(f"Renumbering {len(plan.writes)} entities in {self.scope.key}")
            await self.apply(plan.writes)
        return plan.entities

    async def apply(self, writes: Sequence[OrderWrite]) -> None:
        """
        Persist order writes according to the consistency mode.

        Raises:
            StaleOrderError: Atomic mode, a target no longer holds the order
                value the writes were planned from; nothing is written
            PartialReorderError: Sequential mode, a later write failed
        """
        async with self._locks[self.scope.key]:
            updated_at = self._clock()
            if self.consistency == ConsistencyMode.ATOMIC:
                await self._check_unchanged(writes)
                if self.store.supports_transactions:
                    await self._apply_atomic(writes, updated_at)
                    return
                logger.warning(
                    f"Store has no transactions; reordering {self.scope.key} sequentially"
                )
            await self._apply_sequential(writes, updated_at)

    async def _check_unchanged(self, writes: Sequence[OrderWrite]) -> None:
        """Re-read every target and compare with the order the plan started from."""
        for write in writes:
            snapshot = await with_retry(
                lambda w=write: self.store.get(self.scope.collection, w.doc_id),
                self.retry,
                f"order check {self.scope.collection}/{write.doc_id}",
            )
            found = None if snapshot is None else self.normalize(snapshot.id, snapshot.data).order
            if found != write.previous:
                logger.warning(
                    f"Stale reorder in {self.scope.key}: {write.doc_id} has order {found}, "
                    f"expected {write.previous}"
                )
                raise StaleOrderError(write.doc_id, write.previous, found)

    async def _apply_atomic(self, writes: Sequence[OrderWrite], updated_at: str) -> None:
        batch = [
            SetWrite(
                collection=self.scope.collection,
                doc_id=w.doc_id,
                data=order_patch(w.order, updated_at),
            )
            for w in writes
        ]
        await with_retry(
            lambda: self.store.commit(batch),
            self.retry,
            f"reorder batch in {self.scope.key}",
        )

    async def _apply_sequential(self, writes: Sequence[OrderWrite], updated_at: str) -> None:
        for i, write in enumerate(writes):
            try:
                await with_retry(
                    lambda w=write: self.store.set(
                        self.scope.collection, w.doc_id, order_patch(w.order, updated_at)
                    ),
                    self.retry,
                    f"order write {self.scope.collection}/{write.doc_id}",
                )
            except Exception as e:
                if i == 0:
                    raise
                logger.warning(
                    f"Partial reorder in {self.scope.key}: {writes[i - 1].doc_id} written, "
                    f"{write.doc_id} failed"
                )
                raise PartialReorderError(completed=writes[i - 1], failed=write, cause=e) from e
