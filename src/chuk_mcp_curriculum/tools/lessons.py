"""
Lesson tools - MCP tools for the lessons of a course.

Lessons point at rudiments by reference string: a catalog key such as
'paradiddle-1', or 'course:<courseId>:<rudimentId>' for a rudiment
stored under any course.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_curriculum.constants import ErrorMessages, SuccessMessages
from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.models.curriculum import LessonUpdate
from chuk_mcp_curriculum.references.resolver import parse_ref
from chuk_mcp_curriculum.store.ordering import Direction
from chuk_mcp_curriculum.tools.payloads import lesson_payload, resolved_payload

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_lesson_tools(
    mcp: ChukMCPServer,
    manager: CurriculumManager,
) -> dict[str, Any]:
    """
    Register lesson tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The curriculum manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def _not_found(lesson_id: str) -> str:
        message = ErrorMessages.LESSON_NOT_FOUND.format(lesson_id=lesson_id)
        return json.dumps({"status": "error", "message": message})

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_list_lessons(course_id: str) -> str:
        """
        List the lessons of a course in display order.

        Args:
            course_id: Course document ID

        Returns:
            JSON string with the ordered lesson list

        Example:
            curriculum_list_lessons(course_id="abc123")
        """
        try:
            lessons = await manager.list_lessons(course_id)
            return json.dumps(
                {"status": "success", "lessons": [lesson_payload(lesson) for lesson in lessons]}
            )
        except Exception as e:
            logger.exception("Failed to list lessons")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_list_lessons"] = curriculum_list_lessons

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_get_lesson(lesson_id: str) -> str:
        """
        Get a lesson.

        Args:
            lesson_id: Lesson document ID

        Returns:
            JSON string with lesson details

        Example:
            curriculum_get_lesson(lesson_id="l1")
        """
        try:
            lesson = await manager.get_lesson(lesson_id)
            if lesson is None:
                return _not_found(lesson_id)
            return json.dumps({"status": "success", "lesson": lesson_payload(lesson)})
        except Exception as e:
            logger.exception("Failed to get lesson")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_get_lesson"] = curriculum_get_lesson

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_create_lesson(
        course_id: str,
        title: str,
        body: str = "",
        rudiment_ids: list[str] | None = None,
        suggested_bpm: int | None = None,
    ) -> str:
        """
        Create a lesson at the end of a course.

        Args:
            course_id: Owning course
            title: Lesson title
            body: Lesson text
            rudiment_ids: Rudiment references (catalog keys or course:<id>:<id>)
            suggested_bpm: Optional practice tempo

        Returns:
            JSON string with the created lesson

        Example:
            curriculum_create_lesson(
                course_id="abc123",
                title="Paradiddles at 80",
                rudiment_ids=["paradiddle-1", "course:abc123:rud9"],
                suggested_bpm=80
            )
        """
        try:
            lesson = await manager.create_lesson(
                course_id=course_id,
                title=title,
                body=body,
                rudiment_refs=[parse_ref(r) for r in rudiment_ids or []],
                suggested_bpm=suggested_bpm,
            )
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.LESSON_CREATED.format(title=title),
                    "lesson": lesson_payload(lesson),
                }
            )
        except Exception as e:
            logger.exception("Failed to create lesson")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_create_lesson"] = curriculum_create_lesson

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_update_lesson(
        lesson_id: str,
        title: str | None = None,
        body: str | None = None,
        rudiment_ids: list[str] | None = None,
        suggested_bpm: int | None = None,
    ) -> str:
        """
        Update lesson fields. Fields left out keep their stored value.

        Passing rudiment_ids=[] clears the lesson's rudiments. The owning
        course cannot be changed.

        Args:
            lesson_id: Lesson document ID
            title: New title
            body: New text
            rudiment_ids: New rudiment references
            suggested_bpm: New practice tempo

        Returns:
            JSON string with the updated lesson

        Example:
            curriculum_update_lesson(lesson_id="l1", rudiment_ids=["course:abc123:rud9"])
        """
        try:
            if await manager.get_lesson(lesson_id) is None:
                return _not_found(lesson_id)

            refs = [parse_ref(r) for r in rudiment_ids] if rudiment_ids is not None else None

            update = LessonUpdate(
                title=title, body=body, rudiment_refs=refs, suggested_bpm=suggested_bpm
            )
            lesson = await manager.update_lesson(lesson_id, update)
            if lesson is None:
                return _not_found(lesson_id)
            return json.dumps({"status": "success", "lesson": lesson_payload(lesson)})
        except Exception as e:
            logger.exception("Failed to update lesson")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_update_lesson"] = curriculum_update_lesson

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_delete_lesson(lesson_id: str) -> str:
        """
        Delete a lesson.

        Args:
            lesson_id: Lesson document ID

        Returns:
            JSON string with delete result

        Example:
            curriculum_delete_lesson(lesson_id="l1")
        """
        try:
            await manager.delete_lesson(lesson_id)
            return json.dumps(
                {"status": "success", "message": SuccessMessages.DELETED.format(doc_id=lesson_id)}
            )
        except Exception as e:
            logger.exception("Failed to delete lesson")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_delete_lesson"] = curriculum_delete_lesson

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_move_lesson(course_id: str, lesson_id: str, direction: str) -> str:
        """
        Move a lesson one position up or down within its course.

        Args:
            course_id: Course document ID
            lesson_id: Lesson document ID
            direction: 'up' or 'down'

        Returns:
            JSON string with the reordered lesson list

        Example:
            curriculum_move_lesson(course_id="abc123", lesson_id="l2", direction="up")
        """
        try:
            current = await manager.list_lessons(course_id)
            lessons = await manager.move_lesson(
                course_id, current, lesson_id, Direction.parse(direction)
            )
            return json.dumps(
                {"status": "success", "lessons": [lesson_payload(lesson) for lesson in lessons]}
            )
        except Exception as e:
            logger.exception("Failed to move lesson")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_move_lesson"] = curriculum_move_lesson

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_resolve_lesson_rudiments(lesson_id: str) -> str:
        """
        Resolve the rudiments a lesson points at.

        References whose target no longer exists are listed with
        resolved=false.

        Args:
            lesson_id: Lesson document ID

        Returns:
            JSON string with one entry per reference

        Example:
            curriculum_resolve_lesson_rudiments(lesson_id="l1")
        """
        try:
            lesson = await manager.get_lesson(lesson_id)
            if lesson is None:
                return _not_found(lesson_id)
            resolved = await manager.resolve_lesson_rudiments(lesson)
            return json.dumps(
                {
                    "status": "success",
                    "lesson_id": lesson_id,
                    "rudiments": [resolved_payload(ref, display) for ref, display in resolved],
                }
            )
        except Exception as e:
            logger.exception("Failed to resolve lesson rudiments")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_resolve_lesson_rudiments"] = curriculum_resolve_lesson_rudiments

    return tools
