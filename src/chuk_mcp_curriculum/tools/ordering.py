"""
Ordering tools - detect and repair duplicate order values.

A reorder interrupted between its two writes leaves two siblings with the
same order value. These tools find such scopes and renumber them.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.store.ordering import OrderedEntityStore, find_order_conflicts

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)

SCOPES = ("courses", "lessons", "rudiments")


def _scope_store(
    manager: CurriculumManager, scope: str, course_id: str | None
) -> OrderedEntityStore[Any]:
    if scope == "courses":
        return manager.courses()
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope: {scope}. Expected one of {', '.join(SCOPES)}.")
    if not course_id:
        raise ValueError(f"Scope '{scope}' needs a course_id.")
    if scope == "lessons":
        return manager.lessons(course_id)
    return manager.rudiments(course_id)


def register_ordering_tools(
    mcp: ChukMCPServer,
    manager: CurriculumManager,
) -> dict[str, Any]:
    """
    Register ordering maintenance tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The curriculum manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_check_order(scope: str, course_id: str | None = None) -> str:
        """
        Find siblings that share an order value.

        Args:
            scope: 'courses', 'lessons' or 'rudiments'
            course_id: Course document ID (lessons and rudiments)

        Returns:
            JSON string mapping each duplicated order value to its IDs

        Example:
            curriculum_check_order(scope="lessons", course_id="abc123")
        """
        try:
            entities = await _scope_store(manager, scope, course_id).list()
            conflicts = find_order_conflicts(entities)
            return json.dumps(
                {
                    "status": "success",
                    "consistent": not conflicts,
                    "conflicts": {str(order): ids for order, ids in conflicts.items()},
                }
            )
        except Exception as e:
            logger.exception("Failed to check order")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_check_order"] = curriculum_check_order

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_repair_order(scope: str, course_id: str | None = None) -> str:
        """
        Renumber a scope 0..n-1 in its current listing order.

        Args:
            scope: 'courses', 'lessons' or 'rudiments'
            course_id: Course document ID (lessons and rudiments)

        Returns:
            JSON string with the renumbered IDs and orders

        Example:
            curriculum_repair_order(scope="courses")
        """
        try:
            entities = await _scope_store(manager, scope, course_id).repair()
            return json.dumps(
                {
                    "status": "success",
                    "order": [{"id": e.id, "order": e.order} for e in entities],
                }
            )
        except Exception as e:
            logger.exception("Failed to repair order")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_repair_order"] = curriculum_repair_order

    return tools
