"""
Schema normalizer - stored documents <-> canonical entities.

Reads are total: any mapping (partially written, legacy-shaped, or not a
mapping at all) decodes to one canonical entity without raising. Every
supported document layout is a branch here and nowhere else:

    lessons:   rudimentIds: [str]      (current)
               rudimentId: str         (legacy, read-only)
    rudiments: pattern + subdivision   (current)
               pattern only            (legacy, implicit sixteenth grid)

Writes are the inverse. Optional fields with no value are omitted rather
than written as null, so a merge keeps whatever was stored. The one
exception is rudimentIds, which a lesson write always carries so that an
older scalar rudimentId can never come back into effect.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from chuk_mcp_curriculum.core.pattern import Subdivision, normalize_pattern, pattern_to_raw
from chuk_mcp_curriculum.models.curriculum import (
    Course,
    CourseRudiment,
    CourseUpdate,
    Lesson,
    LessonUpdate,
    RudimentUpdate,
)
from chuk_mcp_curriculum.models.reference import RudimentRef
from chuk_mcp_curriculum.references.resolver import parse_ref, serialize_ref

# Stored field names
FIELD_TITLE = "title"
FIELD_DESCRIPTION = "description"
FIELD_BODY = "body"
FIELD_NAME = "name"
FIELD_ORDER = "order"
FIELD_UPDATED_AT = "updatedAt"
FIELD_COURSE_ID = "courseId"
FIELD_RUDIMENT_IDS = "rudimentIds"
FIELD_LEGACY_RUDIMENT_ID = "rudimentId"
FIELD_SUGGESTED_BPM = "suggestedBpm"
FIELD_PATTERN = "pattern"
FIELD_SUBDIVISION = "subdivision"


# Field decoders


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    return raw if isinstance(raw, Mapping) else {}


def _text(value: Any) -> str:
    """String fields: missing is empty, non-strings are stringified."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _finite_number(value: Any) -> int | None:
    # bool is an int subclass but never a stored number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def _order(value: Any) -> int:
    number = _finite_number(value)
    return 0 if number is None else number


def _rudiment_refs(data: Mapping[str, Any]) -> list[RudimentRef]:
    refs = data.get(FIELD_RUDIMENT_IDS)
    if isinstance(refs, list):
        return [parse_ref(item) for item in refs if isinstance(item, str)]

    legacy = data.get(FIELD_LEGACY_RUDIMENT_ID)
    if legacy is not None:
        return [parse_ref(_text(legacy))]

    return []


# Read path


def normalize_course(doc_id: str, raw: Any) -> Course:
    """Decode a courses/{id} document."""
    data = _as_mapping(raw)
    return Course(
        id=doc_id,
        title=_text(data.get(FIELD_TITLE)),
        description=_text(data.get(FIELD_DESCRIPTION)),
        order=_order(data.get(FIELD_ORDER)),
        updated_at=_text(data.get(FIELD_UPDATED_AT)),
    )


def normalize_lesson(doc_id: str, raw: Any, course_id: str = "") -> Lesson:
    """
    Decode a lessons/{id} document.

    Args:
        doc_id: Document ID
        raw: Stored document
        course_id: Course the lesson was queried under, used when the
            document itself has no courseId

    Returns:
        The canonical Lesson
    """
    data = _as_mapping(raw)
    stored_course = data.get(FIELD_COURSE_ID)
    return Lesson(
        id=doc_id,
        course_id=course_id if stored_course is None else _text(stored_course),
        title=_text(data.get(FIELD_TITLE)),
        body=_text(data.get(FIELD_BODY)),
        order=_order(data.get(FIELD_ORDER)),
        rudiment_refs=_rudiment_refs(data),
        suggested_bpm=_finite_number(data.get(FIELD_SUGGESTED_BPM)),
        updated_at=_text(data.get(FIELD_UPDATED_AT)),
    )


def normalize_rudiment(doc_id: str, raw: Any) -> CourseRudiment:
    """Decode a courses/{courseId}/rudiments/{id} document."""
    data = _as_mapping(raw)
    subdivision = Subdivision.parse(data.get(FIELD_SUBDIVISION))
    return CourseRudiment(
        id=doc_id,
        name=_text(data.get(FIELD_NAME)),
        pattern=normalize_pattern(data.get(FIELD_PATTERN), subdivision),
        subdivision=subdivision,
        order=_order(data.get(FIELD_ORDER)),
        updated_at=_text(data.get(FIELD_UPDATED_AT)),
    )


# Write path


def now_iso() -> str:
    """Timestamp stamped into updatedAt on every write."""
    return datetime.now(UTC).isoformat()


def serialize_course(course: Course) -> dict[str, Any]:
    """Full course payload (the document ID is not part of it)."""
    return {
        FIELD_TITLE: course.title,
        FIELD_DESCRIPTION: course.description,
        FIELD_ORDER: course.order,
        FIELD_UPDATED_AT: course.updated_at,
    }


def serialize_course_update(update: CourseUpdate, updated_at: str) -> dict[str, Any]:
    """Merge payload for a partial course update."""
    payload: dict[str, Any] = {}
    if update.title is not None:
        payload[FIELD_TITLE] = update.title
    if update.description is not None:
        payload[FIELD_DESCRIPTION] = update.description
    if update.order is not None:
        payload[FIELD_ORDER] = update.order
    payload[FIELD_UPDATED_AT] = updated_at
    return payload


def serialize_lesson(lesson: Lesson) -> dict[str, Any]:
    """Full lesson payload, including its parent courseId."""
    payload: dict[str, Any] = {
        FIELD_COURSE_ID: lesson.course_id,
        FIELD_TITLE: lesson.title,
        FIELD_BODY: lesson.body,
        FIELD_ORDER: lesson.order,
        FIELD_RUDIMENT_IDS: [serialize_ref(ref) for ref in lesson.rudiment_refs],
    }
    if lesson.suggested_bpm is not None:
        payload[FIELD_SUGGESTED_BPM] = lesson.suggested_bpm
    payload[FIELD_UPDATED_AT] = lesson.updated_at
    return payload


def serialize_lesson_update(update: LessonUpdate, updated_at: str) -> dict[str, Any]:
    """
    Merge payload for a partial lesson update.

    rudiment_refs, when present, is written even if empty. A missing
    suggested_bpm is omitted, which leaves the stored tempo in place.
    """
    payload: dict[str, Any] = {}
    if update.title is not None:
        payload[FIELD_TITLE] = update.title
    if update.body is not None:
        payload[FIELD_BODY] = update.body
    if update.order is not None:
        payload[FIELD_ORDER] = update.order
    if update.rudiment_refs is not None:
        payload[FIELD_RUDIMENT_IDS] = [serialize_ref(ref) for ref in update.rudiment_refs]
    if update.suggested_bpm is not None:
        payload[FIELD_SUGGESTED_BPM] = update.suggested_bpm
    payload[FIELD_UPDATED_AT] = updated_at
    return payload


def serialize_rudiment(rudiment: CourseRudiment) -> dict[str, Any]:
    """Full rudiment payload; the pattern is re-normalized to its grid length."""
    return {
        FIELD_NAME: rudiment.name,
        FIELD_PATTERN: pattern_to_raw(normalize_pattern(rudiment.pattern, rudiment.subdivision)),
        FIELD_SUBDIVISION: rudiment.subdivision.value,
        FIELD_ORDER: rudiment.order,
        FIELD_UPDATED_AT: rudiment.updated_at,
    }


def serialize_rudiment_update(
    update: RudimentUpdate,
    updated_at: str,
    stored_subdivision: Subdivision = Subdivision.SIXTEENTH,
) -> dict[str, Any]:
    """
    Merge payload for a partial rudiment update.

    Args:
        update: Fields to change
        updated_at: Timestamp to stamp
        stored_subdivision: Grid to normalize a pattern against when the
            update does not change the subdivision

    Returns:
        Payload for a merge write
    """
    payload: dict[str, Any] = {}
    subdivision = update.subdivision or stored_subdivision
    if update.name is not None:
        payload[FIELD_NAME] = update.name
    if update.pattern is not None:
        payload[FIELD_PATTERN] = pattern_to_raw(normalize_pattern(update.pattern, subdivision))
    if update.subdivision is not None:
        payload[FIELD_SUBDIVISION] = update.subdivision.value
    if update.order is not None:
        payload[FIELD_ORDER] = update.order
    payload[FIELD_UPDATED_AT] = updated_at
    return payload


def order_patch(order: int, updated_at: str) -> dict[str, Any]:
    """Merge payload that only moves an entity."""
    return {FIELD_ORDER: order, FIELD_UPDATED_AT: updated_at}
