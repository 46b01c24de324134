"""
Rudiment references - how a lesson points at a drill.

A reference is either a key into the global rudiment catalog or the
address of a rudiment nested under some course (not necessarily the
lesson's own course). References are pointers by identifier; the
target is looked up at read time and may no longer exist.

Both kinds only accept values that survive a trip through the stored
string form: course and rudiment IDs cannot contain ':', and a catalog
key cannot take the 'course:<id>:<id>' shape.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_curriculum.constants import COURSE_REF_PREFIX, REF_SEPARATOR, ErrorMessages

# A single segment of a course-scoped reference
REF_SEGMENT_PATTERN = rf"^[^{REF_SEPARATOR}]+$"


def split_course_ref(raw: str) -> tuple[str, str] | None:
    """
    Split 'course:<courseId>:<rudimentId>' into its two IDs.

    Returns:
        (course_id, rudiment_id), or None when raw is not exactly three
        segments with the course prefix and two non-empty IDs
    """
    parts = raw.split(REF_SEPARATOR)
    if len(parts) == 3 and parts[0] == COURSE_REF_PREFIX and parts[1] and parts[2]:
        return parts[1], parts[2]
    return None


class GlobalRef(BaseModel):
    """Reference to an entry in the global rudiment catalog."""

    kind: Literal["global"] = "global"
    catalog_id: str = Field(..., description="Catalog key (e.g., 'paradiddle-1')")

    model_config = {"frozen": True}

    @field_validator("catalog_id")
    @classmethod
    def not_course_shaped(cls, v: str) -> str:
        if split_course_ref(v) is not None:
            raise ValueError(ErrorMessages.RESERVED_CATALOG_ID.format(catalog_id=v))
        return v


class CourseScopedRef(BaseModel):
    """Reference to a rudiment stored under courses/{course_id}/rudiments."""

    kind: Literal["course"] = "course"
    course_id: str = Field(
        ..., min_length=1, pattern=REF_SEGMENT_PATTERN, description="Owning course ID"
    )
    rudiment_id: str = Field(
        ..., min_length=1, pattern=REF_SEGMENT_PATTERN, description="Rudiment document ID"
    )

    model_config = {"frozen": True}


RudimentRef = Annotated[GlobalRef | CourseScopedRef, Field(discriminator="kind")]
