"""
Tests for MCP tools.

Tests the MCP tool implementations for courses, lessons, rudiments
and order maintenance.
"""

import json
from pathlib import Path

import pytest

from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.store import MemoryDocumentStore
from chuk_mcp_curriculum.tools import (
    register_course_tools,
    register_lesson_tools,
    register_ordering_tools,
    register_rudiment_tools,
)


# Mock MCP server for testing tools
class MockMCPServer:
    """Mock MCP server that just stores registered tools."""

    def __init__(self, name: str):
        self.name = name
        self.tools: dict = {}

    def tool(self, func):
        """Decorator to register a tool."""
        self.tools[func.__name__] = func
        return func


@pytest.fixture
def tools(manager: CurriculumManager, temp_dir: Path) -> dict:
    """Every tool registered against one manager."""
    mcp = MockMCPServer("test")
    register_course_tools(mcp, manager)
    register_lesson_tools(mcp, manager)
    register_rudiment_tools(mcp, manager, temp_dir / "output")
    register_ordering_tools(mcp, manager)
    return mcp.tools


async def call(tools: dict, tool_name: str, /, **kwargs) -> dict:
    return json.loads(await tools[tool_name](**kwargs))


class TestRegistration:
    """Tests for tool registration."""

    def test_returns_tool_dicts(self, manager: CurriculumManager, temp_dir: Path) -> None:
        """Each register function returns its tools by name."""
        mcp = MockMCPServer("test")
        courses = register_course_tools(mcp, manager)
        rudiments = register_rudiment_tools(mcp, manager, temp_dir)
        assert "curriculum_move_course" in courses
        assert "curriculum_preview_rudiment" in rudiments
        assert set(courses) | set(rudiments) == set(mcp.tools)


class TestCourseTools:
    """Tests for course tools."""

    @pytest.mark.asyncio
    async def test_create_and_list(self, tools: dict) -> None:
        """Created courses are listed in order."""
        created = await call(tools, "curriculum_create_course", title="Snare Basics")
        assert created["status"] == "success"
        assert created["course"]["order"] == 0

        await call(tools, "curriculum_create_course", title="Rudiments")
        listed = await call(tools, "curriculum_list_courses")
        assert [c["title"] for c in listed["courses"]] == ["Snare Basics", "Rudiments"]

    @pytest.mark.asyncio
    async def test_get_missing(self, tools: dict) -> None:
        """Unknown courses are reported."""
        result = await call(tools, "curriculum_get_course", course_id="nope")
        assert result["status"] == "error"
        assert "not found" in result["message"]

    @pytest.mark.asyncio
    async def test_update_missing_does_not_create(
        self, tools: dict, store: MemoryDocumentStore
    ) -> None:
        """Updating an unknown course is an error, not an upsert."""
        result = await call(tools, "curriculum_update_course", course_id="nope", title="X")
        assert result["status"] == "error"
        assert "courses" not in store.dump()

    @pytest.mark.asyncio
    async def test_update(self, tools: dict) -> None:
        """Given fields change."""
        created = await call(tools, "curriculum_create_course", title="A", description="D")
        result = await call(
            tools, "curriculum_update_course", course_id=created["course"]["id"], title="B"
        )
        assert result["course"]["title"] == "B"
        assert result["course"]["description"] == "D"

    @pytest.mark.asyncio
    async def test_move(self, tools: dict) -> None:
        """Moving returns the new order."""
        a = (await call(tools, "curriculum_create_course", title="A"))["course"]["id"]
        b = (await call(tools, "curriculum_create_course", title="B"))["course"]["id"]

        result = await call(tools, "curriculum_move_course", course_id=b, direction="up")
        assert [c["id"] for c in result["courses"]] == [b, a]

    @pytest.mark.asyncio
    async def test_move_invalid_direction(self, tools: dict) -> None:
        """Bad directions are reported."""
        result = await call(tools, "curriculum_move_course", course_id="x", direction="left")
        assert result["status"] == "error"
        assert "Invalid direction" in result["message"]

    @pytest.mark.asyncio
    async def test_delete(self, tools: dict) -> None:
        """Deleted courses disappear from the list."""
        created = await call(tools, "curriculum_create_course", title="A")
        await call(tools, "curriculum_delete_course", course_id=created["course"]["id"])
        assert (await call(tools, "curriculum_list_courses"))["courses"] == []

    @pytest.mark.asyncio
    async def test_check_admin(self, tools: dict, store: MemoryDocumentStore) -> None:
        """Admin flag comes from admins/{uid}."""
        await store.set("admins", "alice", {"role": "admin"})
        assert (await call(tools, "curriculum_check_admin", uid="alice"))["is_admin"] is True
        assert (await call(tools, "curriculum_check_admin", uid="bob"))["is_admin"] is False


class TestLessonTools:
    """Tests for lesson tools."""

    @pytest.mark.asyncio
    async def test_create_and_resolve(self, tools: dict) -> None:
        """Lesson references resolve, dangling ones are flagged."""
        rudiment = await call(
            tools,
            "curriculum_create_rudiment",
            course_id="c1",
            name="Singles",
            pattern=["R", "L", "R", "L"],
        )
        rudiment_ref = f"course:c1:{rudiment['rudiment']['id']}"

        lesson = await call(
            tools,
            "curriculum_create_lesson",
            course_id="c1",
            title="Warm-up",
            rudiment_ids=["paradiddle-1", rudiment_ref, "gone"],
            suggested_bpm=80,
        )
        assert lesson["lesson"]["rudiment_ids"] == ["paradiddle-1", rudiment_ref, "gone"]

        result = await call(
            tools, "curriculum_resolve_lesson_rudiments", lesson_id=lesson["lesson"]["id"]
        )
        entries = result["rudiments"]
        assert [e["resolved"] for e in entries] == [True, True, False]
        assert entries[0]["kind"] == "global"
        assert entries[1]["kind"] == "course"
        assert entries[1]["grid"].startswith("RLRL ")

    @pytest.mark.asyncio
    async def test_update_clears_references(self, tools: dict) -> None:
        """An empty list clears references; tempo is kept."""
        lesson = await call(
            tools,
            "curriculum_create_lesson",
            course_id="c1",
            title="One",
            rudiment_ids=["paradiddle-1"],
            suggested_bpm=80,
        )
        result = await call(
            tools,
            "curriculum_update_lesson",
            lesson_id=lesson["lesson"]["id"],
            rudiment_ids=[],
        )
        assert result["lesson"]["rudiment_ids"] == []
        assert result["lesson"]["suggested_bpm"] == 80

    @pytest.mark.asyncio
    async def test_update_missing(self, tools: dict) -> None:
        """Unknown lessons are reported."""
        result = await call(tools, "curriculum_update_lesson", lesson_id="nope", title="X")
        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_list_and_move(self, tools: dict) -> None:
        """Lessons reorder within their course."""
        one = await call(tools, "curriculum_create_lesson", course_id="c1", title="One")
        two = await call(tools, "curriculum_create_lesson", course_id="c1", title="Two")

        result = await call(
            tools,
            "curriculum_move_lesson",
            course_id="c1",
            lesson_id=one["lesson"]["id"],
            direction="down",
        )
        assert [x["title"] for x in result["lessons"]] == ["Two", "One"]

        listed = await call(tools, "curriculum_list_lessons", course_id="c1")
        assert [x["id"] for x in listed["lessons"]] == [
            two["lesson"]["id"],
            one["lesson"]["id"],
        ]


class TestRudimentTools:
    """Tests for rudiment tools."""

    @pytest.mark.asyncio
    async def test_create_pads_pattern(self, tools: dict) -> None:
        """Patterns are fitted to the subdivision."""
        result = await call(
            tools,
            "curriculum_create_rudiment",
            course_id="c1",
            name="Triplets",
            pattern=["R", "L", "x"],
            subdivision="eighthTriplet",
        )
        rudiment = result["rudiment"]
        assert len(rudiment["pattern"]) == 24
        assert rudiment["pattern"][:3] == ["R", "L", ""]
        assert rudiment["subdivision"] == "eighthTriplet"

    @pytest.mark.asyncio
    async def test_create_bad_subdivision(self, tools: dict) -> None:
        """Unknown subdivisions are rejected on input."""
        result = await call(
            tools, "curriculum_create_rudiment", course_id="c1", name="X", subdivision="quarter"
        )
        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_update_subdivision(self, tools: dict) -> None:
        """Changing grid resizes the stored pattern."""
        created = await call(
            tools, "curriculum_create_rudiment", course_id="c1", name="S", pattern=["R"] * 32
        )
        result = await call(
            tools,
            "curriculum_update_rudiment",
            course_id="c1",
            rudiment_id=created["rudiment"]["id"],
            subdivision="eighthTriplet",
        )
        assert result["rudiment"]["pattern"] == ["R"] * 24

    @pytest.mark.asyncio
    async def test_get_missing(self, tools: dict) -> None:
        """Unknown rudiments are reported."""
        result = await call(tools, "curriculum_get_rudiment", course_id="c1", rudiment_id="x")
        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_options(self, tools: dict) -> None:
        """Options list catalog entries before course rudiments."""
        created = await call(tools, "curriculum_create_rudiment", course_id="c1", name="S")
        result = await call(tools, "curriculum_rudiment_options", course_id="c1")
        values = [o["value"] for o in result["options"]]
        assert values == ["paradiddle-1", "flam-tap", f"course:c1:{created['rudiment']['id']}"]

    @pytest.mark.asyncio
    async def test_preview_uses_lesson_tempo(self, tools: dict) -> None:
        """Preview writes a MIDI file at the lesson's tempo."""
        created = await call(
            tools, "curriculum_create_rudiment", course_id="c1", name="S", pattern=["R", "L"]
        )
        lesson = await call(
            tools, "curriculum_create_lesson", course_id="c1", title="L", suggested_bpm=72
        )
        result = await call(
            tools,
            "curriculum_preview_rudiment",
            course_id="c1",
            rudiment_id=created["rudiment"]["id"],
            lesson_id=lesson["lesson"]["id"],
        )
        assert result["status"] == "success"
        assert result["tempo"] == 72
        assert Path(result["path"]).exists()

    @pytest.mark.asyncio
    async def test_preview_default_tempo(self, tools: dict) -> None:
        """Without a tempo or lesson the preview plays at 120."""
        created = await call(tools, "curriculum_create_rudiment", course_id="c1", name="S")
        result = await call(
            tools,
            "curriculum_preview_rudiment",
            course_id="c1",
            rudiment_id=created["rudiment"]["id"],
        )
        assert result["tempo"] == 120
        assert result["cells"] == 32


class TestOrderingTools:
    """Tests for order maintenance tools."""

    @pytest.mark.asyncio
    async def test_check_and_repair(self, tools: dict, store: MemoryDocumentStore) -> None:
        """Duplicates are found and renumbered."""
        for doc_id, order in (("a", 0), ("b", 0), ("c", 5)):
            await store.set("courses/c1/rudiments", doc_id, {"name": doc_id, "order": order})

        check = await call(tools, "curriculum_check_order", scope="rudiments", course_id="c1")
        assert check["consistent"] is False
        assert check["conflicts"] == {"0": ["a", "b"]}

        repair = await call(tools, "curriculum_repair_order", scope="rudiments", course_id="c1")
        assert repair["order"] == [
            {"id": "a", "order": 0},
            {"id": "b", "order": 1},
            {"id": "c", "order": 2},
        ]

        check = await call(tools, "curriculum_check_order", scope="rudiments", course_id="c1")
        assert check["consistent"] is True

    @pytest.mark.asyncio
    async def test_scope_needs_course(self, tools: dict) -> None:
        """Lesson and rudiment scopes need a course."""
        result = await call(tools, "curriculum_check_order", scope="lessons")
        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_unknown_scope(self, tools: dict) -> None:
        """Unknown scopes are rejected."""
        result = await call(tools, "curriculum_check_order", scope="admins")
        assert result["status"] == "error"
        assert "Unknown scope" in result["message"]
