"""
Course tools - MCP tools for the course list.

Tools for listing, editing and reordering courses.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_curriculum.auth import is_admin
from chuk_mcp_curriculum.constants import ErrorMessages, SuccessMessages
from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.models.curriculum import CourseUpdate
from chuk_mcp_curriculum.store.ordering import Direction
from chuk_mcp_curriculum.tools.payloads import course_payload

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_course_tools(
    mcp: ChukMCPServer,
    manager: CurriculumManager,
) -> dict[str, Any]:
    """
    Register course tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The curriculum manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_list_courses() -> str:
        """
        List all courses in display order.

        Returns:
            JSON string with the ordered course list

        Example:
            curriculum_list_courses()
        """
        try:
            courses = await manager.list_courses()
            return json.dumps(
                {"status": "success", "courses": [course_payload(c) for c in courses]}
            )
        except Exception as e:
            logger.exception("Failed to list courses")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_list_courses"] = curriculum_list_courses

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_get_course(course_id: str) -> str:
        """
        Get a course.

        Args:
            course_id: Course document ID

        Returns:
            JSON string with course details

        Example:
            curriculum_get_course(course_id="abc123")
        """
        try:
            course = await manager.get_course(course_id)
            if course is None:
                return json.dumps(
                    {
                        "status": "error",
                        "message": ErrorMessages.COURSE_NOT_FOUND.format(course_id=course_id),
                    }
                )
            return json.dumps({"status": "success", "course": course_payload(course)})
        except Exception as e:
            logger.exception("Failed to get course")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_get_course"] = curriculum_get_course

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_create_course(title: str, description: str = "") -> str:
        """
        Create a course at the end of the course list.

        Args:
            title: Course title
            description: Optional description

        Returns:
            JSON string with the created course

        Example:
            curriculum_create_course(title="Snare Basics", description="Singles and doubles")
        """
        try:
            course = await manager.create_course(title=title, description=description)
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.COURSE_CREATED.format(title=title),
                    "course": course_payload(course),
                }
            )
        except Exception as e:
            logger.exception("Failed to create course")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_create_course"] = curriculum_create_course

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_update_course(
        course_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> str:
        """
        Update course fields. Fields left out keep their stored value.

        Args:
            course_id: Course document ID
            title: New title
            description: New description

        Returns:
            JSON string with the updated course

        Example:
            curriculum_update_course(course_id="abc123", title="Snare Basics I")
        """
        try:
            if await manager.get_course(course_id) is None:
                return json.dumps(
                    {
                        "status": "error",
                        "message": ErrorMessages.COURSE_NOT_FOUND.format(course_id=course_id),
                    }
                )

            course = await manager.update_course(
                course_id, CourseUpdate(title=title, description=description)
            )
            return json.dumps(
                {"status": "success", "course": course_payload(course) if course else None}
            )
        except Exception as e:
            logger.exception("Failed to update course")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_update_course"] = curriculum_update_course

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_delete_course(course_id: str) -> str:
        """
        Delete a course.

        Lessons and rudiments of the course are not deleted.

        Args:
            course_id: Course document ID

        Returns:
            JSON string with delete result

        Example:
            curriculum_delete_course(course_id="abc123")
        """
        try:
            await manager.delete_course(course_id)
            return json.dumps(
                {"status": "success", "message": SuccessMessages.DELETED.format(doc_id=course_id)}
            )
        except Exception as e:
            logger.exception("Failed to delete course")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_delete_course"] = curriculum_delete_course

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_move_course(course_id: str, direction: str) -> str:
        """
        Move a course one position up or down.

        Moving the first course up or the last course down does nothing.

        Args:
            course_id: Course document ID
            direction: 'up' or 'down'

        Returns:
            JSON string with the reordered course list

        Example:
            curriculum_move_course(course_id="abc123", direction="up")
        """
        try:
            current = await manager.list_courses()
            courses = await manager.move_course(current, course_id, Direction.parse(direction))
            return json.dumps(
                {"status": "success", "courses": [course_payload(c) for c in courses]}
            )
        except Exception as e:
            logger.exception("Failed to move course")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_move_course"] = curriculum_move_course

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_check_admin(uid: str) -> str:
        """
        Check whether a user may edit the curriculum.

        Args:
            uid: User ID from the identity provider

        Returns:
            JSON string with is_admin flag

        Example:
            curriculum_check_admin(uid="user-1")
        """
        try:
            allowed = await is_admin(manager.store, uid)
            return json.dumps({"status": "success", "uid": uid, "is_admin": allowed})
        except Exception as e:
            logger.exception("Failed to check admin")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_check_admin"] = curriculum_check_admin

    return tools
