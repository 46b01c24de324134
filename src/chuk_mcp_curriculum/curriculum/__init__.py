"""
Curriculum management - the admin editor's operations.
"""

from chuk_mcp_curriculum.curriculum.manager import CurriculumManager

__all__ = ["CurriculumManager"]
