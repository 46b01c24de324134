"""
Schema normalization - one decode/encode pair per entity kind.
"""

from chuk_mcp_curriculum.normalization.schema import (
    normalize_course,
    normalize_lesson,
    normalize_rudiment,
    now_iso,
    order_patch,
    serialize_course,
    serialize_course_update,
    serialize_lesson,
    serialize_lesson_update,
    serialize_rudiment,
    serialize_rudiment_update,
)

__all__ = [
    "normalize_course",
    "normalize_lesson",
    "normalize_rudiment",
    "now_iso",
    "order_patch",
    "serialize_course",
    "serialize_course_update",
    "serialize_lesson",
    "serialize_lesson_update",
    "serialize_rudiment",
    "serialize_rudiment_update",
]
