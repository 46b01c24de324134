"""
Curriculum entities - the canonical in-memory shapes.

Documents in the store may be partially written or carry older field
layouts; the normalizer turns them into these models. Update models
describe partial merges: a field left as None is not written.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from chuk_mcp_curriculum.core.pattern import PatternCell, Subdivision
from chuk_mcp_curriculum.models.reference import RudimentRef


class Course(BaseModel):
    """A course: top-level container of lessons and rudiments."""

    id: str = Field(..., description="Document ID")
    title: str = Field("", description="Course title")
    description: str = Field("", description="Course description")
    order: int = Field(0, description="Position among all courses")
    updated_at: str = Field("", description="ISO-8601 timestamp of the last write")


class Lesson(BaseModel):
    """A lesson inside one course, optionally pointing at rudiments to practise."""

    id: str = Field(..., description="Document ID")
    course_id: str = Field("", description="Owning course ID (fixed at creation)")
    title: str = Field("", description="Lesson title")
    body: str = Field("", description="Lesson text")
    order: int = Field(0, description="Position within the course")
    rudiment_refs: list[RudimentRef] = Field(
        default_factory=list, description="Rudiments this lesson drills"
    )
    suggested_bpm: int | None = Field(None, description="Suggested practice tempo")
    updated_at: str = Field("", description="ISO-8601 timestamp of the last write")


class CourseRudiment(BaseModel):
    """A sticking pattern owned by one course."""

    id: str = Field(..., description="Document ID")
    name: str = Field("", description="Rudiment name")
    pattern: list[PatternCell] = Field(default_factory=list, description="Pattern cells")
    subdivision: Subdivision = Field(Subdivision.SIXTEENTH, description="Pattern grid")
    order: int = Field(0, description="Position within the course")
    updated_at: str = Field("", description="ISO-8601 timestamp of the last write")


class CourseUpdate(BaseModel):
    """Partial course update."""

    title: str | None = None
    description: str | None = None
    order: int | None = None


class LessonUpdate(BaseModel):
    """
    Partial lesson update.

    The owning course cannot be changed. rudiment_refs, when given, is
    written even if empty; suggested_bpm left as None keeps the stored value.
    """

    title: str | None = None
    body: str | None = None
    order: int | None = None
    rudiment_refs: list[RudimentRef] | None = None
    suggested_bpm: int | None = None


class RudimentUpdate(BaseModel):
    """Partial rudiment update."""

    name: str | None = None
    pattern: list[PatternCell] | None = None
    subdivision: Subdivision | None = None
    order: int | None = None


class RudimentDisplay(BaseModel):
    """What a lesson editor shows for a resolved reference."""

    ref: RudimentRef = Field(..., description="The reference that was resolved")
    label: str = Field(..., description="Display name")
    pattern: list[PatternCell] | None = Field(None, description="Pattern (course rudiments)")
    subdivision: Subdivision | None = Field(None, description="Grid (course rudiments)")


class RudimentOption(BaseModel):
    """One selectable entry in a lesson's rudiment picker."""

    value: str = Field(..., description="Serialized reference")
    label: str = Field(..., description="Display name")
