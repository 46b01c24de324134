"""
JSON payloads for tool responses.

References are shown in their stored string form and patterns both as
cell lists and as a readable grid.
"""

from __future__ import annotations

from typing import Any

from chuk_mcp_curriculum.core.pattern import format_pattern, pattern_to_raw
from chuk_mcp_curriculum.models.curriculum import (
    Course,
    CourseRudiment,
    Lesson,
    RudimentDisplay,
)
from chuk_mcp_curriculum.models.reference import RudimentRef
from chuk_mcp_curriculum.references.resolver import serialize_ref


def course_payload(course: Course) -> dict[str, Any]:
    return {
        "id": course.id,
        "title": course.title,
        "description": course.description,
        "order": course.order,
        "updated_at": course.updated_at,
    }


def lesson_payload(lesson: Lesson) -> dict[str, Any]:
    return {
        "id": lesson.id,
        "course_id": lesson.course_id,
        "title": lesson.title,
        "body": lesson.body,
        "order": lesson.order,
        "rudiment_ids": [serialize_ref(ref) for ref in lesson.rudiment_refs],
        "suggested_bpm": lesson.suggested_bpm,
        "updated_at": lesson.updated_at,
    }


def rudiment_payload(rudiment: CourseRudiment) -> dict[str, Any]:
    return {
        "id": rudiment.id,
        "name": rudiment.name,
        "subdivision": rudiment.subdivision.value,
        "pattern": pattern_to_raw(rudiment.pattern),
        "grid": format_pattern(rudiment.pattern),
        "order": rudiment.order,
        "updated_at": rudiment.updated_at,
    }


def resolved_payload(ref: RudimentRef, display: RudimentDisplay | None) -> dict[str, Any]:
    """A resolved reference; dangling references have resolved=False."""
    result: dict[str, Any] = {
        "ref": serialize_ref(ref),
        "kind": ref.kind,
        "resolved": display is not None,
    }
    if display is not None:
        result["label"] = display.label
        if display.pattern is not None:
            result["grid"] = format_pattern(display.pattern)
        if display.subdivision is not None:
            result["subdivision"] = display.subdivision.value
    return result
