"""
Tests for CurriculumManager.

Tests cover:
- Course, lesson and rudiment CRUD
- Reordering through the manager
- Rudiment references on lessons
- Rudiment picker options
"""

import pytest

from chuk_mcp_curriculum.core import PatternCell, Subdivision
from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.models import (
    CourseScopedRef,
    CourseUpdate,
    GlobalRef,
    LessonUpdate,
    RudimentUpdate,
)
from chuk_mcp_curriculum.references import parse_ref
from chuk_mcp_curriculum.store import ConsistencyMode, Direction, MemoryDocumentStore

from conftest import FIXED_NOW

L, R, REST = PatternCell.LEFT, PatternCell.RIGHT, PatternCell.REST


class TestCourses:
    """Tests for course operations."""

    @pytest.mark.asyncio
    async def test_create_appends(self, manager: CurriculumManager) -> None:
        """New courses go to the end of the list."""
        first = await manager.create_course("Snare Basics", "Start here")
        second = await manager.create_course("Rudiments")

        assert first.order == 0
        assert second.order == 1
        assert first.updated_at == FIXED_NOW
        assert [c.title for c in await manager.list_courses()] == ["Snare Basics", "Rudiments"]

    @pytest.mark.asyncio
    async def test_get(self, manager: CurriculumManager) -> None:
        """Created courses can be read back."""
        course = await manager.create_course("Snare Basics", "Start here")
        assert await manager.get_course(course.id) == course
        assert await manager.get_course("missing") is None

    @pytest.mark.asyncio
    async def test_update_merges(self, manager: CurriculumManager) -> None:
        """Only given fields change."""
        course = await manager.create_course("Snare Basics", "Start here")
        updated = await manager.update_course(course.id, CourseUpdate(title="Snare I"))
        assert updated.title == "Snare I"
        assert updated.description == "Start here"
        assert updated.order == 0

    @pytest.mark.asyncio
    async def test_move(self, manager: CurriculumManager) -> None:
        """Moving swaps with the neighbour."""
        a = await manager.create_course("A")
        b = await manager.create_course("B")
        c = await manager.create_course("C")

        moved = await manager.move_course(await manager.list_courses(), c.id, Direction.UP)
        assert [x.id for x in moved] == [a.id, c.id, b.id]
        assert [x.id for x in await manager.list_courses()] == [a.id, c.id, b.id]

    @pytest.mark.asyncio
    async def test_delete_does_not_cascade(
        self, manager: CurriculumManager, store: MemoryDocumentStore
    ) -> None:
        """Lessons and rudiments outlive their course."""
        course = await manager.create_course("A")
        await manager.create_lesson(course.id, "L1")
        await manager.create_rudiment(course.id, "R1")

        await manager.delete_course(course.id)
        assert await manager.get_course(course.id) is None
        assert len(await manager.list_lessons(course.id)) == 1
        assert len(await manager.list_rudiments(course.id)) == 1

    @pytest.mark.asyncio
    async def test_atomic_manager(self, store: MemoryDocumentStore, catalog) -> None:
        """Atomic mode reorders through the same API."""
        manager = CurriculumManager(store, catalog=catalog, consistency=ConsistencyMode.ATOMIC)
        a = await manager.create_course("A")
        b = await manager.create_course("B")
        moved = await manager.move_course(await manager.list_courses(), a.id, Direction.DOWN)
        assert [x.id for x in moved] == [b.id, a.id]

    def test_default_catalog(self, store: MemoryDocumentStore) -> None:
        """Without a catalog the bundled one is used."""
        assert "paradiddle-1" in CurriculumManager(store).catalog


class TestLessons:
    """Tests for lesson operations."""

    @pytest.mark.asyncio
    async def test_create_and_list_per_course(self, manager: CurriculumManager) -> None:
        """Lessons are listed per course, each course numbered from 0."""
        await manager.create_lesson("c1", "One")
        await manager.create_lesson("c2", "Other course")
        two = await manager.create_lesson("c1", "Two", suggested_bpm=90)

        assert two.order == 1
        assert two.course_id == "c1"
        lessons = await manager.list_lessons("c1")
        assert [lesson.title for lesson in lessons] == ["One", "Two"]
        assert lessons[1].suggested_bpm == 90

    @pytest.mark.asyncio
    async def test_create_writes_reference_list(
        self, manager: CurriculumManager, store: MemoryDocumentStore
    ) -> None:
        """References are stored as strings."""
        lesson = await manager.create_lesson(
            "c1", "One", rudiment_refs=[parse_ref("paradiddle-1"), parse_ref("course:c1:r1")]
        )
        stored = store.dump()["lessons"][lesson.id]
        assert stored["rudimentIds"] == ["paradiddle-1", "course:c1:r1"]
        assert "suggestedBpm" not in stored

    @pytest.mark.asyncio
    async def test_update_keeps_tempo(self, manager: CurriculumManager) -> None:
        """A missing tempo keeps the stored one; an empty list clears references."""
        lesson = await manager.create_lesson(
            "c1", "One", rudiment_refs=[parse_ref("paradiddle-1")], suggested_bpm=80
        )
        updated = await manager.update_lesson(
            lesson.id, LessonUpdate(title="Uno", rudiment_refs=[])
        )
        assert updated.title == "Uno"
        assert updated.rudiment_refs == []
        assert updated.suggested_bpm == 80
        assert updated.course_id == "c1"

    @pytest.mark.asyncio
    async def test_update_replaces_legacy_reference(self, catalog) -> None:
        """Writing references shadows an old scalar rudimentId."""
        store = MemoryDocumentStore(
            {"lessons": {"l1": {"courseId": "c1", "title": "Old", "rudimentId": "paradiddle-1"}}}
        )
        manager = CurriculumManager(store, catalog=catalog)

        lesson = await manager.get_lesson("l1")
        assert lesson.rudiment_refs == [GlobalRef(catalog_id="paradiddle-1")]

        updated = await manager.update_lesson(
            "l1", LessonUpdate(rudiment_refs=[parse_ref("flam-tap")])
        )
        assert updated.rudiment_refs == [GlobalRef(catalog_id="flam-tap")]

    @pytest.mark.asyncio
    async def test_references_read_back_unchanged(self, manager: CurriculumManager) -> None:
        """Both reference kinds come back from the store as they were written."""
        refs = [
            GlobalRef(catalog_id="paradiddle-1"),
            CourseScopedRef(course_id="other-course", rudiment_id="r1"),
        ]
        lesson = await manager.create_lesson("c1", "One", rudiment_refs=refs)
        assert (await manager.get_lesson(lesson.id)).rudiment_refs == refs

    @pytest.mark.asyncio
    async def test_move_keeps_references(self, manager: CurriculumManager) -> None:
        """Reordering lessons does not drop their references."""
        one = await manager.create_lesson("c1", "One", rudiment_refs=[parse_ref("flam-tap")])
        two = await manager.create_lesson("c1", "Two")

        current = await manager.list_lessons("c1")
        moved = await manager.move_lesson("c1", current, two.id, Direction.UP)
        assert [x.id for x in moved] == [two.id, one.id]

        reread = await manager.get_lesson(one.id)
        assert reread.order == 1
        assert reread.rudiment_refs == [GlobalRef(catalog_id="flam-tap")]

    @pytest.mark.asyncio
    async def test_delete(self, manager: CurriculumManager) -> None:
        """Deleted lessons are gone."""
        lesson = await manager.create_lesson("c1", "One")
        await manager.delete_lesson(lesson.id)
        assert await manager.get_lesson(lesson.id) is None
        assert await manager.list_lessons("c1") == []

    @pytest.mark.asyncio
    async def test_resolve_rudiments(self, manager: CurriculumManager) -> None:
        """Known references resolve; missing ones pair with None."""
        course = await manager.create_course("A")
        rudiment = await manager.create_rudiment(course.id, "Singles", pattern=[R, L])
        ref = CourseScopedRef(course_id=course.id, rudiment_id=rudiment.id)
        lesson = await manager.create_lesson(
            course.id,
            "One",
            rudiment_refs=[parse_ref("paradiddle-1"), ref, parse_ref("no-such-rudiment")],
        )

        resolved = await manager.resolve_lesson_rudiments(lesson)
        labels = [display.label if display else None for _, display in resolved]
        assert labels == ["Paradiddle", "Singles", None]

        await manager.delete_rudiment(course.id, rudiment.id)
        resolved = await manager.resolve_lesson_rudiments(lesson)
        assert resolved[1] == (ref, None)


class TestRudiments:
    """Tests for course rudiment operations."""

    @pytest.mark.asyncio
    async def test_create_pads_pattern(
        self, manager: CurriculumManager, store: MemoryDocumentStore
    ) -> None:
        """The stored pattern is always the full grid."""
        rudiment = await manager.create_rudiment(
            "c1", "Triplets", pattern=[R, L, R], subdivision=Subdivision.EIGHTH_TRIPLET
        )
        assert len(rudiment.pattern) == 24
        stored = store.dump()["courses/c1/rudiments"][rudiment.id]
        assert stored["pattern"] == ["R", "L", "R"] + [""] * 21
        assert stored["subdivision"] == "eighthTriplet"

    @pytest.mark.asyncio
    async def test_subdivision_change_resizes(self, manager: CurriculumManager) -> None:
        """Switching grid keeps the leading cells and fixes the length."""
        rudiment = await manager.create_rudiment("c1", "Singles", pattern=[R, L] * 16)

        triplet = await manager.update_rudiment(
            "c1", rudiment.id, RudimentUpdate(subdivision=Subdivision.EIGHTH_TRIPLET)
        )
        assert triplet.subdivision == Subdivision.EIGHTH_TRIPLET
        assert triplet.pattern == [R, L] * 12

        back = await manager.update_rudiment(
            "c1", rudiment.id, RudimentUpdate(subdivision=Subdivision.SIXTEENTH)
        )
        assert back.pattern == [R, L] * 12 + [REST] * 8

    @pytest.mark.asyncio
    async def test_pattern_update_uses_stored_grid(self, manager: CurriculumManager) -> None:
        """A new pattern alone is fitted to the stored subdivision."""
        rudiment = await manager.create_rudiment(
            "c1", "T", subdivision=Subdivision.EIGHTH_TRIPLET
        )
        updated = await manager.update_rudiment(
            "c1", rudiment.id, RudimentUpdate(name="T2", pattern=[L] * 30)
        )
        assert updated.name == "T2"
        assert updated.pattern == [L] * 24

    @pytest.mark.asyncio
    async def test_move(self, manager: CurriculumManager) -> None:
        """Rudiments reorder within their course."""
        a = await manager.create_rudiment("c1", "A")
        b = await manager.create_rudiment("c1", "B")
        current = await manager.list_rudiments("c1")
        moved = await manager.move_rudiment("c1", current, a.id, Direction.DOWN)
        assert [x.id for x in moved] == [b.id, a.id]

    @pytest.mark.asyncio
    async def test_options(self, manager: CurriculumManager) -> None:
        """Catalog entries first, then the course's own rudiments."""
        a = await manager.create_rudiment("c1", "Singles")
        await manager.create_rudiment("c2", "Elsewhere")

        options = await manager.rudiment_options("c1")
        assert [(o.value, o.label) for o in options] == [
            ("paradiddle-1", "Paradiddle"),
            ("flam-tap", "Flam Tap"),
            (f"course:c1:{a.id}", "Singles"),
        ]
