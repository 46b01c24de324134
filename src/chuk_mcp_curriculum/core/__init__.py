"""
Core pattern primitives.

- Subdivision: The rhythmic grid (sixteenth, eighth triplet)
- PatternCell: Left, right or rest
- normalize_pattern: Fixed-length pattern codec
"""

from chuk_mcp_curriculum.core.pattern import (
    PATTERN_LENGTHS,
    PatternCell,
    Subdivision,
    format_pattern,
    normalize_pattern,
    pattern_length,
    pattern_to_raw,
    resize_pattern,
)

__all__ = [
    "PATTERN_LENGTHS",
    "PatternCell",
    "Subdivision",
    "format_pattern",
    "normalize_pattern",
    "pattern_length",
    "pattern_to_raw",
    "resize_pattern",
]
