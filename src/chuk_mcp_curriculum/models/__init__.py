"""
Pydantic models for the curriculum.

This module provides:
- Course, Lesson, CourseRudiment: Canonical entities
- GlobalRef, CourseScopedRef: Rudiment references
- CourseUpdate, LessonUpdate, RudimentUpdate: Partial merges
"""

from chuk_mcp_curriculum.models.curriculum import (
    Course,
    CourseRudiment,
    CourseUpdate,
    Lesson,
    LessonUpdate,
    RudimentDisplay,
    RudimentOption,
    RudimentUpdate,
)
from chuk_mcp_curriculum.models.reference import CourseScopedRef, GlobalRef, RudimentRef

__all__ = [
    "Course",
    "CourseRudiment",
    "CourseScopedRef",
    "CourseUpdate",
    "GlobalRef",
    "Lesson",
    "LessonUpdate",
    "RudimentDisplay",
    "RudimentOption",
    "RudimentRef",
    "RudimentUpdate",
]
