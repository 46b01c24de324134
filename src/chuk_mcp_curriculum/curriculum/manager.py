"""
Curriculum Manager - courses, lessons and course rudiments.

Provides async operations for listing, creating, updating, deleting and
reordering curriculum entities in a document store. Documents are
decoded by the schema normalizer on every read; nothing is cached.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Sequence
from typing import Any

from chuk_mcp_curriculum.constants import COURSES, LESSONS, course_rudiments_path
from chuk_mcp_curriculum.core.pattern import PatternCell, Subdivision, resize_pattern
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
from chuk_mcp_curriculum.models.reference import CourseScopedRef, RudimentRef
from chuk_mcp_curriculum.normalization.schema import (
    FIELD_COURSE_ID,
    normalize_course,
    normalize_lesson,
    normalize_rudiment,
    now_iso,
    serialize_course,
    serialize_course_update,
    serialize_lesson,
    serialize_lesson_update,
    serialize_rudiment,
    serialize_rudiment_update,
)
from chuk_mcp_curriculum.references.catalog import RudimentCatalog
from chuk_mcp_curriculum.references.resolver import ReferenceResolver, serialize_ref
from chuk_mcp_curriculum.store.documents import DocumentStore
from chuk_mcp_curriculum.store.ordering import (
    ConsistencyMode,
    Direction,
    OrderedEntityStore,
    OrderScope,
)
from chuk_mcp_curriculum.store.retry import RetryConfig, with_retry

logger = logging.getLogger(__name__)


class CurriculumManager:
    """
    Manages curriculum entities in a document store.

    Reorders follow the configured consistency mode; every write is
    retried on transient store failures.
    """

    def __init__(
        self,
        store: DocumentStore,
        catalog: RudimentCatalog | None = None,
        consistency: ConsistencyMode = ConsistencyMode.SEQUENTIAL,
        retry: RetryConfig = RetryConfig(),
        clock: Callable[[], str] = now_iso,
    ):
        """
        Initialize the manager.

        Args:
            store: Document store holding courses, lessons and rudiments
            catalog: Global rudiment catalog (default: bundled catalog)
            consistency: How reorder writes are issued
            retry: Retry policy for writes
            clock: Timestamp source for updatedAt
        """
        self.store = store
        self.catalog = catalog if catalog is not None else RudimentCatalog.default()
        self.consistency = consistency
        self.retry = retry
        self._clock = clock
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self.resolver = ReferenceResolver(self.catalog, self.get_rudiment)

    # Ordered scopes

    def _ordered(
        self, scope: OrderScope, normalize: Callable[[str, Any], Any]
    ) -> OrderedEntityStore[Any]:
        return OrderedEntityStore(
            self.store,
            scope,
            normalize,
            consistency=self.consistency,
            retry=self.retry,
            locks=self._locks,
            clock=self._clock,
        )

    def courses(self) -> OrderedEntityStore[Course]:
        """Ordered store over all courses."""
        return self._ordered(OrderScope(COURSES), normalize_course)

    def lessons(self, course_id: str) -> OrderedEntityStore[Lesson]:
        """Ordered store over the lessons of one course."""
        return self._ordered(
            OrderScope(LESSONS, where=(FIELD_COURSE_ID, course_id)),
            lambda doc_id, raw: normalize_lesson(doc_id, raw, course_id=course_id),
        )

    def rudiments(self, course_id: str) -> OrderedEntityStore[CourseRudiment]:
        """Ordered store over the rudiments of one course."""
        return self._ordered(OrderScope(course_rudiments_path(course_id)), normalize_rudiment)

    async def _write(self, collection: str, doc_id: str, payload: dict[str, Any]) -> None:
        await with_retry(
            lambda: self.store.set(collection, doc_id, payload, merge=True),
            self.retry,
            f"write {collection}/{doc_id}",
        )

    async def _add(self, collection: str, payload: dict[str, Any]) -> str:
        return await with_retry(
            lambda: self.store.add(collection, payload),
            self.retry,
            f"create in {collection}",
        )

    # Courses

    async def list_courses(self) -> list[Course]:
        """All courses in display order."""
        return await self.courses().list()

    async def get_course(self, course_id: str) -> Course | None:
        """
        Get a course by ID.

        Returns:
            The Course or None if not found
        """
        snapshot = await self.store.get(COURSES, course_id)
        if snapshot is None:
            return None
        return normalize_course(snapshot.id, snapshot.data)

    async def create_course(self, title: str, description: str = "") -> Course:
        """
        Create a course at the end of the course list.

        Args:
            title: Course title
            description: Course description

        Returns:
            The created Course
        """
        course = Course(
            id="",
            title=title,
            description=description,
            order=await self.courses().next_order(),
            updated_at=self._clock(),
        )
        doc_id = await self._add(COURSES, serialize_course(course))
        logger.info(f"Created course {doc_id} ({title!r})")
        return course.model_copy(update={"id": doc_id})

    async def update_course(self, course_id: str, update: CourseUpdate) -> Course | None:
        """
        Merge fields into a course.

        Returns:
            The course as stored after the update
        """
        await self._write(COURSES, course_id, serialize_course_update(update, self._clock()))
        return await self.get_course(course_id)

    async def delete_course(self, course_id: str) -> None:
        """Delete a course document. Its lessons and rudiments are left in place."""
        await with_retry(
            lambda: self.store.delete(COURSES, course_id), self.retry, f"delete course {course_id}"
        )
        logger.info(f"Deleted course {course_id}")

    async def move_course(
        self, current: Sequence[Course], course_id: str, direction: Direction
    ) -> list[Course]:
        """Move a course one position in the held list."""
        return await self.courses().move(current, course_id, direction)

    # Lessons

    async def list_lessons(self, course_id: str) -> list[Lesson]:
        """Lessons of a course in display order."""
        return await self.lessons(course_id).list()

    async def get_lesson(self, lesson_id: str) -> Lesson | None:
        """
        Get a lesson by ID.

        Returns:
            The Lesson or None if not found
        """
        snapshot = await self.store.get(LESSONS, lesson_id)
        if snapshot is None:
            return None
        return normalize_lesson(snapshot.id, snapshot.data)

    async def create_lesson(
        self,
        course_id: str,
        title: str,
        body: str = "",
        rudiment_refs: Sequence[RudimentRef] = (),
        suggested_bpm: int | None = None,
    ) -> Lesson:
        """
        Create a lesson at the end of a course.

        Args:
            course_id: Owning course
            title: Lesson title
            body: Lesson text
            rudiment_refs: Rudiments the lesson drills
            suggested_bpm: Optional practice tempo

        Returns:
            The created Lesson
        """
        lesson = Lesson(
            id="",
            course_id=course_id,
            title=title,
            body=body,
            order=await self.lessons(course_id).next_order(),
            rudiment_refs=list(rudiment_refs),
            suggested_bpm=suggested_bpm,
            updated_at=self._clock(),
        )
        doc_id = await self._add(LESSONS, serialize_lesson(lesson))
        logger.info(f"Created lesson {doc_id} in course {course_id}")
        return lesson.model_copy(update={"id": doc_id})

    async def update_lesson(self, lesson_id: str, update: LessonUpdate) -> Lesson | None:
        """
        Merge fields into a lesson. The owning course never changes.

        Returns:
            The lesson as stored after the update
        """
        await self._write(LESSONS, lesson_id, serialize_lesson_update(update, self._clock()))
        return await self.get_lesson(lesson_id)

    async def delete_lesson(self, lesson_id: str) -> None:
        """Delete a lesson."""
        await with_retry(
            lambda: self.store.delete(LESSONS, lesson_id), self.retry, f"delete lesson {lesson_id}"
        )
        logger.info(f"Deleted lesson {lesson_id}")

    async def move_lesson(
        self, course_id: str, current: Sequence[Lesson], lesson_id: str, direction: Direction
    ) -> list[Lesson]:
        """Move a lesson one position within its course."""
        return await self.lessons(course_id).move(current, lesson_id, direction)

    async def resolve_lesson_rudiments(
        self, lesson: Lesson
    ) -> list[tuple[RudimentRef, RudimentDisplay | None]]:
        """
        Resolve every rudiment a lesson points at.

        Dangling references come back paired with None.
        """
        return await self.resolver.resolve_all(lesson.rudiment_refs)

    # Course rudiments

    async def list_rudiments(self, course_id: str) -> list[CourseRudiment]:
        """Rudiments of a course in display order."""
        return await self.rudiments(course_id).list()

    async def get_rudiment(self, course_id: str, rudiment_id: str) -> CourseRudiment | None:
        """
        Get a course rudiment.

        Returns:
            The CourseRudiment or None if not found
        """
        snapshot = await self.store.get(course_rudiments_path(course_id), rudiment_id)
        if snapshot is None:
            return None
        return normalize_rudiment(snapshot.id, snapshot.data)

    async def create_rudiment(
        self,
        course_id: str,
        name: str,
        pattern: Sequence[PatternCell] = (),
        subdivision: Subdivision = Subdivision.SIXTEENTH,
    ) -> CourseRudiment:
        """
        Create a rudiment at the end of a course's rudiment list.

        The pattern is padded or truncated to the subdivision's length.

        Returns:
            The created CourseRudiment
        """
        collection = course_rudiments_path(course_id)
        rudiment = CourseRudiment(
            id="",
            name=name,
            pattern=list(pattern),
            subdivision=subdivision,
            order=await self.rudiments(course_id).next_order(),
            updated_at=self._clock(),
        )
        payload = serialize_rudiment(rudiment)
        doc_id = await self._add(collection, payload)
        logger.info(f"Created rudiment {doc_id} in course {course_id}")
        return normalize_rudiment(doc_id, payload)

    async def update_rudiment(
        self, course_id: str, rudiment_id: str, update: RudimentUpdate
    ) -> CourseRudiment | None:
        """
        Merge fields into a course rudiment.

        A new pattern is normalized against the new subdivision if one is
        given, else the stored one. Changing only the subdivision resizes
        the stored pattern to match.

        Returns:
            The rudiment as stored after the update
        """
        stored = await self.get_rudiment(course_id, rudiment_id)
        stored_subdivision = stored.subdivision if stored else Subdivision.SIXTEENTH

        if update.subdivision is not None and update.pattern is None and stored is not None:
            resized = resize_pattern(stored.pattern, stored.subdivision, update.subdivision)
            update = update.model_copy(update={"pattern": resized})

        payload = serialize_rudiment_update(update, self._clock(), stored_subdivision)
        await self._write(course_rudiments_path(course_id), rudiment_id, payload)
        return await self.get_rudiment(course_id, rudiment_id)

    async def delete_rudiment(self, course_id: str, rudiment_id: str) -> None:
        """Delete a course rudiment. Lessons pointing at it become dangling."""
        await with_retry(
            lambda: self.store.delete(course_rudiments_path(course_id), rudiment_id),
            self.retry,
            f"delete rudiment {rudiment_id}",
        )
        logger.info(f"Deleted rudiment {rudiment_id} from course {course_id}")

    async def move_rudiment(
        self,
        course_id: str,
        current: Sequence[CourseRudiment],
        rudiment_id: str,
        direction: Direction,
    ) -> list[CourseRudiment]:
        """Move a rudiment one position within its course."""
        return await self.rudiments(course_id).move(current, rudiment_id, direction)

    async def rudiment_options(self, course_id: str) -> list[RudimentOption]:
        """
        Rudiments a lesson in this course can point at.

        Global catalog entries first, then the course's own rudiments
        as course-scoped references.
        """
        options = [RudimentOption(value=entry.id, label=entry.label) for entry in self.catalog]
        for rudiment in await self.list_rudiments(course_id):
            ref = CourseScopedRef(course_id=course_id, rudiment_id=rudiment.id)
            options.append(RudimentOption(value=serialize_ref(ref), label=rudiment.name))
        return options
