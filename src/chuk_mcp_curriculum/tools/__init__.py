"""
MCP tool implementations.

Tools are organized by domain:
- courses - Course list and admin check
- lessons - Lessons of a course and their rudiment references
- rudiments - Course rudiments, reference options and MIDI preview
- ordering - Duplicate order detection and repair
"""

from chuk_mcp_curriculum.tools.courses import register_course_tools
from chuk_mcp_curriculum.tools.lessons import register_lesson_tools
from chuk_mcp_curriculum.tools.ordering import register_ordering_tools
from chuk_mcp_curriculum.tools.rudiments import register_rudiment_tools

__all__ = [
    "register_course_tools",
    "register_lesson_tools",
    "register_ordering_tools",
    "register_rudiment_tools",
]
