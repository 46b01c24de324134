"""
Reference resolver - parse, serialize and resolve rudiment references.

Stored form:
    course:<courseId>:<rudimentId>   -> CourseScopedRef
    anything else                    -> GlobalRef (opaque catalog key)

A catalog key that itself looks like course:<a>:<b> cannot be told apart
from a course-scoped reference. RudimentCatalog refuses such keys.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from chuk_mcp_curriculum.constants import COURSE_REF_PREFIX, REF_SEPARATOR
from chuk_mcp_curriculum.models.curriculum import CourseRudiment, RudimentDisplay
from chuk_mcp_curriculum.models.reference import (
    CourseScopedRef,
    GlobalRef,
    RudimentRef,
    split_course_ref,
)

if TYPE_CHECKING:
    from chuk_mcp_curriculum.references.catalog import RudimentCatalog

logger = logging.getLogger(__name__)

# (course_id, rudiment_id) -> rudiment or None
RudimentLookup = Callable[[str, str], Awaitable[CourseRudiment | None]]


def parse_ref(raw: str) -> RudimentRef:
    """
    Parse a stored reference string.

    Args:
        raw: Stored reference (e.g., 'paradiddle-1', 'course:abc123:rud9')

    Returns:
        CourseScopedRef when raw is exactly 'course:<id>:<id>' with both
        ids non-empty, otherwise GlobalRef wrapping the whole string
    """
    ids = split_course_ref(raw)
    if ids is not None:
        return CourseScopedRef(course_id=ids[0], rudiment_id=ids[1])
    return GlobalRef(catalog_id=raw)


def serialize_ref(ref: RudimentRef) -> str:
    """Stored form of a reference. Inverse of parse_ref."""
    if isinstance(ref, CourseScopedRef):
        return REF_SEPARATOR.join((COURSE_REF_PREFIX, ref.course_id, ref.rudiment_id))
    return ref.catalog_id


class ReferenceResolver:
    """
    Resolves references to display data.

    Global references are answered from the catalog; course-scoped ones
    with a single point read. A missing target resolves to None.
    """

    def __init__(self, catalog: RudimentCatalog, lookup_rudiment: RudimentLookup):
        """
        Initialize the resolver.

        Args:
            catalog: Global rudiment catalog
            lookup_rudiment: Point read of courses/{course_id}/rudiments/{id}
        """
        self.catalog = catalog
        self._lookup_rudiment = lookup_rudiment

    async def resolve(self, ref: RudimentRef) -> RudimentDisplay | None:
        """
        Resolve a reference.

        Args:
            ref: Reference to resolve

        Returns:
            Display data, or None for a dangling reference
        """
        if isinstance(ref, GlobalRef):
            entry = self.catalog.get(ref.catalog_id)
            if entry is None:
                logger.debug(f"Dangling catalog reference: {ref.catalog_id}")
                return None
            return RudimentDisplay(ref=ref, label=entry.label)

        rudiment = await self._lookup_rudiment(ref.course_id, ref.rudiment_id)
        if rudiment is None:
            logger.debug(f"Dangling course reference: {serialize_ref(ref)}")
            return None
        return RudimentDisplay(
            ref=ref,
            label=rudiment.name,
            pattern=rudiment.pattern,
            subdivision=rudiment.subdivision,
        )

    async def resolve_all(
        self, refs: list[RudimentRef]
    ) -> list[tuple[RudimentRef, RudimentDisplay | None]]:
        """Resolve references in order, pairing each with its result."""
        return [(ref, await self.resolve(ref)) for ref in refs]
