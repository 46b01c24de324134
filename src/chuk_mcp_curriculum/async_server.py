#!/usr/bin/env python3
"""
Async Curriculum MCP Server using chuk-mcp-server

This server provides MCP tools for editing a drumming curriculum:
courses, the lessons in each course, and the rudiments (sticking
patterns) a course defines for its lessons to drill.

The server provides tools for:
- Listing, creating, editing and reordering courses and lessons
- Course rudiments on sixteenth and eighth-triplet grids
- Resolving lesson rudiment references (global catalog or course)
- MIDI previews of rudiments
- Detecting and repairing duplicate order values
"""

import logging
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.references import DEFAULT_CATALOG_PATH, RudimentCatalog
from chuk_mcp_curriculum.store import YamlDocumentStore
from chuk_mcp_curriculum.tools import (
    register_course_tools,
    register_lesson_tools,
    register_ordering_tools,
    register_rudiment_tools,
)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("chuk-mcp-curriculum")

# Paths - use standard project structure
BASE_PATH = Path.cwd()
DATA_DIR = BASE_PATH / "curriculum"
OUTPUT_DIR = BASE_PATH / "output"
PROJECT_CATALOG_PATH = BASE_PATH / "catalog.yaml"
CATALOG_PATH = PROJECT_CATALOG_PATH if PROJECT_CATALOG_PATH.exists() else DEFAULT_CATALOG_PATH

# Create manager
document_store = YamlDocumentStore(DATA_DIR)
curriculum_manager = CurriculumManager(
    document_store,
    catalog=RudimentCatalog.from_yaml(CATALOG_PATH),
)

# Register all tools
course_tools = register_course_tools(mcp, curriculum_manager)
lesson_tools = register_lesson_tools(mcp, curriculum_manager)
rudiment_tools = register_rudiment_tools(mcp, curriculum_manager, OUTPUT_DIR)
ordering_tools = register_ordering_tools(mcp, curriculum_manager)

# Export tool functions for direct access
curriculum_list_courses = course_tools["curriculum_list_courses"]
curriculum_get_course = course_tools["curriculum_get_course"]
curriculum_create_course = course_tools["curriculum_create_course"]
curriculum_update_course = course_tools["curriculum_update_course"]
curriculum_delete_course = course_tools["curriculum_delete_course"]
curriculum_move_course = course_tools["curriculum_move_course"]
curriculum_check_admin = course_tools["curriculum_check_admin"]

curriculum_list_lessons = lesson_tools["curriculum_list_lessons"]
curriculum_get_lesson = lesson_tools["curriculum_get_lesson"]
curriculum_create_lesson = lesson_tools["curriculum_create_lesson"]
curriculum_update_lesson = lesson_tools["curriculum_update_lesson"]
curriculum_delete_lesson = lesson_tools["curriculum_delete_lesson"]
curriculum_move_lesson = lesson_tools["curriculum_move_lesson"]
curriculum_resolve_lesson_rudiments = lesson_tools["curriculum_resolve_lesson_rudiments"]

curriculum_list_rudiments = rudiment_tools["curriculum_list_rudiments"]
curriculum_get_rudiment = rudiment_tools["curriculum_get_rudiment"]
curriculum_create_rudiment = rudiment_tools["curriculum_create_rudiment"]
curriculum_update_rudiment = rudiment_tools["curriculum_update_rudiment"]
curriculum_delete_rudiment = rudiment_tools["curriculum_delete_rudiment"]
curriculum_move_rudiment = rudiment_tools["curriculum_move_rudiment"]
curriculum_rudiment_options = rudiment_tools["curriculum_rudiment_options"]
curriculum_preview_rudiment = rudiment_tools["curriculum_preview_rudiment"]

curriculum_check_order = ordering_tools["curriculum_check_order"]
curriculum_repair_order = ordering_tools["curriculum_repair_order"]

logger.info("CHUK Curriculum MCP Server initialized")
logger.info(f"  Data dir: {DATA_DIR}")
logger.info(f"  Catalog: {CATALOG_PATH} ({len(curriculum_manager.catalog)} rudiments)")
logger.info(f"  Output dir: {OUTPUT_DIR}")
