"""
Rudiment tools - MCP tools for the rudiments of a course.

Patterns are given as lists of cells: 'L', 'R', or anything else for a
rest. They are padded or truncated to the subdivision's length
(32 for 'sixteenth', 24 for 'eighthTriplet').
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from chuk_mcp_curriculum.compiler.midi import rudiment_to_midi
from chuk_mcp_curriculum.constants import ErrorMessages, SuccessMessages
from chuk_mcp_curriculum.core.pattern import Subdivision, normalize_pattern
from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.models.curriculum import RudimentUpdate
from chuk_mcp_curriculum.store.ordering import Direction
from chuk_mcp_curriculum.tools.payloads import rudiment_payload

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_BPM = 120


def register_rudiment_tools(
    mcp: ChukMCPServer,
    manager: CurriculumManager,
    output_dir: Path,
) -> dict[str, Any]:
    """
    Register rudiment tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The curriculum manager
        output_dir: Directory for MIDI previews

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    def _not_found(course_id: str, rudiment_id: str) -> str:
        message = ErrorMessages.RUDIMENT_NOT_FOUND.format(
            course_id=course_id, rudiment_id=rudiment_id
        )
        return json.dumps({"status": "error", "message": message})

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_list_rudiments(course_id: str) -> str:
        """
        List the rudiments of a course in display order.

        Args:
            course_id: Course document ID

        Returns:
            JSON string with the ordered rudiment list

        Example:
            curriculum_list_rudiments(course_id="abc123")
        """
        try:
            rudiments = await manager.list_rudiments(course_id)
            return json.dumps(
                {"status": "success", "rudiments": [rudiment_payload(r) for r in rudiments]}
            )
        except Exception as e:
            logger.exception("Failed to list rudiments")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_list_rudiments"] = curriculum_list_rudiments

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_get_rudiment(course_id: str, rudiment_id: str) -> str:
        """
        Get a course rudiment.

        Args:
            course_id: Course document ID
            rudiment_id: Rudiment document ID

        Returns:
            JSON string with rudiment details and pattern grid

        Example:
            curriculum_get_rudiment(course_id="abc123", rudiment_id="rud9")
        """
        try:
            rudiment = await manager.get_rudiment(course_id, rudiment_id)
            if rudiment is None:
                return _not_found(course_id, rudiment_id)
            return json.dumps({"status": "success", "rudiment": rudiment_payload(rudiment)})
        except Exception as e:
            logger.exception("Failed to get rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_get_rudiment"] = curriculum_get_rudiment

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_create_rudiment(
        course_id: str,
        name: str,
        pattern: list[str] | None = None,
        subdivision: str = "sixteenth",
    ) -> str:
        """
        Create a rudiment at the end of a course's rudiment list.

        Args:
            course_id: Owning course
            name: Rudiment name
            pattern: Cells ('L', 'R', '' for rest); default all rests
            subdivision: 'sixteenth' (32 cells) or 'eighthTriplet' (24 cells)

        Returns:
            JSON string with the created rudiment

        Example:
            curriculum_create_rudiment(
                course_id="abc123",
                name="Paradiddle",
                pattern=["R", "L", "R", "R", "L", "R", "L", "L"]
            )
        """
        try:
            grid = Subdivision(subdivision)
            rudiment = await manager.create_rudiment(
                course_id=course_id,
                name=name,
                pattern=normalize_pattern(pattern or [], grid),
                subdivision=grid,
            )
            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.RUDIMENT_CREATED.format(name=name),
                    "rudiment": rudiment_payload(rudiment),
                }
            )
        except Exception as e:
            logger.exception("Failed to create rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_create_rudiment"] = curriculum_create_rudiment

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_update_rudiment(
        course_id: str,
        rudiment_id: str,
        name: str | None = None,
        pattern: list[str] | None = None,
        subdivision: str | None = None,
    ) -> str:
        """
        Update rudiment fields. Fields left out keep their stored value.

        Changing only the subdivision pads the stored pattern with rests
        or cuts it to the new length.

        Args:
            course_id: Course document ID
            rudiment_id: Rudiment document ID
            name: New name
            pattern: New cells
            subdivision: New grid ('sixteenth' or 'eighthTriplet')

        Returns:
            JSON string with the updated rudiment

        Example:
            curriculum_update_rudiment(
                course_id="abc123",
                rudiment_id="rud9",
                subdivision="eighthTriplet"
            )
        """
        try:
            stored = await manager.get_rudiment(course_id, rudiment_id)
            if stored is None:
                return _not_found(course_id, rudiment_id)

            grid = Subdivision(subdivision) if subdivision is not None else None
            cells = None
            if pattern is not None:
                cells = normalize_pattern(pattern, grid or stored.subdivision)

            rudiment = await manager.update_rudiment(
                course_id,
                rudiment_id,
                RudimentUpdate(name=name, pattern=cells, subdivision=grid),
            )
            if rudiment is None:
                return _not_found(course_id, rudiment_id)
            return json.dumps({"status": "success", "rudiment": rudiment_payload(rudiment)})
        except Exception as e:
            logger.exception("Failed to update rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_update_rudiment"] = curriculum_update_rudiment

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_delete_rudiment(course_id: str, rudiment_id: str) -> str:
        """
        Delete a course rudiment.

        Lessons that point at it keep the reference; it resolves to nothing.

        Args:
            course_id: Course document ID
            rudiment_id: Rudiment document ID

        Returns:
            JSON string with delete result

        Example:
            curriculum_delete_rudiment(course_id="abc123", rudiment_id="rud9")
        """
        try:
            await manager.delete_rudiment(course_id, rudiment_id)
            return json.dumps(
                {"status": "success", "message": SuccessMessages.DELETED.format(doc_id=rudiment_id)}
            )
        except Exception as e:
            logger.exception("Failed to delete rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_delete_rudiment"] = curriculum_delete_rudiment

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_move_rudiment(course_id: str, rudiment_id: str, direction: str) -> str:
        """
        Move a rudiment one position up or down within its course.

        Args:
            course_id: Course document ID
            rudiment_id: Rudiment document ID
            direction: 'up' or 'down'

        Returns:
            JSON string with the reordered rudiment list

        Example:
            curriculum_move_rudiment(course_id="abc123", rudiment_id="rud9", direction="down")
        """
        try:
            current = await manager.list_rudiments(course_id)
            rudiments = await manager.move_rudiment(
                course_id, current, rudiment_id, Direction.parse(direction)
            )
            return json.dumps(
                {"status": "success", "rudiments": [rudiment_payload(r) for r in rudiments]}
            )
        except Exception as e:
            logger.exception("Failed to move rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_move_rudiment"] = curriculum_move_rudiment

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_rudiment_options(course_id: str) -> str:
        """
        List the rudiments a lesson in this course can point at.

        Global catalog entries come first, then the course's own rudiments
        as 'course:<courseId>:<rudimentId>' references.

        Args:
            course_id: Course document ID

        Returns:
            JSON string with value/label pairs

        Example:
            curriculum_rudiment_options(course_id="abc123")
        """
        try:
            options = await manager.rudiment_options(course_id)
            return json.dumps(
                {"status": "success", "options": [o.model_dump() for o in options]}
            )
        except Exception as e:
            logger.exception("Failed to list rudiment options")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_rudiment_options"] = curriculum_rudiment_options

    @mcp.tool  # type: ignore[arg-type]
    async def curriculum_preview_rudiment(
        course_id: str,
        rudiment_id: str,
        tempo: int | None = None,
        lesson_id: str | None = None,
    ) -> str:
        """
        Render a rudiment to a MIDI file for listening.

        The tempo is taken from the argument, else from the lesson's
        suggested BPM, else 120.

        Args:
            course_id: Course document ID
            rudiment_id: Rudiment document ID
            tempo: Playback tempo in BPM
            lesson_id: Lesson whose suggested BPM to use

        Returns:
            JSON string with the MIDI file path

        Example:
            curriculum_preview_rudiment(course_id="abc123", rudiment_id="rud9", lesson_id="l1")
        """
        try:
            rudiment = await manager.get_rudiment(course_id, rudiment_id)
            if rudiment is None:
                return _not_found(course_id, rudiment_id)

            bpm = tempo
            if bpm is None and lesson_id is not None:
                lesson = await manager.get_lesson(lesson_id)
                if lesson is not None:
                    bpm = lesson.suggested_bpm
            bpm = bpm or DEFAULT_PREVIEW_BPM

            output_dir.mkdir(parents=True, exist_ok=True)
            path = output_dir / f"{course_id}_{rudiment_id}.mid"
            rudiment_to_midi(rudiment, tempo_bpm=bpm).save(str(path))

            return json.dumps(
                {
                    "status": "success",
                    "path": str(path),
                    "tempo": bpm,
                    "subdivision": rudiment.subdivision.value,
                    "cells": len(rudiment.pattern),
                }
            )
        except Exception as e:
            logger.exception("Failed to preview rudiment")
            return json.dumps({"status": "error", "message": str(e)})

    tools["curriculum_preview_rudiment"] = curriculum_preview_rudiment

    return tools
