"""
Pattern primitives - Subdivision, PatternCell and the fixed-length codec.

A rudiment pattern is a grid of cells on a rhythmic subdivision.
The subdivision alone decides how many cells the grid has:

    sixteenth      -> 32 cells (two bars of sixteenth notes)
    eighthTriplet  -> 24 cells (two bars of eighth-note triplets)

Any combination of hits and rests is legal.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any


class Subdivision(str, Enum):
    """Rhythmic grid a pattern is drawn on."""

    SIXTEENTH = "sixteenth"
    EIGHTH_TRIPLET = "eighthTriplet"

    @classmethod
    def parse(cls, value: Any) -> Subdivision:
        """
        Read a stored subdivision value.

        Anything other than the eighth-triplet literal is a sixteenth grid,
        which is what documents written before subdivisions existed used.
        """
        if value == cls.EIGHTH_TRIPLET.value:
            return cls.EIGHTH_TRIPLET
        return cls.SIXTEENTH


class PatternCell(str, Enum):
    """One cell of a pattern: left hand, right hand or rest."""

    REST = ""
    LEFT = "L"
    RIGHT = "R"

    @classmethod
    def parse(cls, value: Any) -> PatternCell:
        """Map a stored cell to a PatternCell. Only exact 'L' / 'R' are hits."""
        if isinstance(value, str):
            if value == "L":
                return cls.LEFT
            if value == "R":
                return cls.RIGHT
        return cls.REST

    def __str__(self) -> str:
        return self.value or "·"


PATTERN_LENGTHS: dict[Subdivision, int] = {
    Subdivision.SIXTEENTH: 32,
    Subdivision.EIGHTH_TRIPLET: 24,
}


def pattern_length(subdivision: Subdivision) -> int:
    """Number of cells a pattern on this subdivision holds."""
    return PATTERN_LENGTHS[subdivision]


def normalize_pattern(raw: Sequence[Any] | None, subdivision: Subdivision) -> list[PatternCell]:
    """
    Normalize raw pattern data to exactly pattern_length(subdivision) cells.

    Cells past the grid length are dropped, missing cells are rests.
    Total over any input: never raises.

    Args:
        raw: Stored cells (any values; only 'L' and 'R' count as hits)
        subdivision: Grid the pattern is drawn on

    Returns:
        List of PatternCell with the exact grid length
    """
    length = pattern_length(subdivision)
    cells = list(raw) if isinstance(raw, Sequence) and not isinstance(raw, str) else []
    return [
        PatternCell.parse(cells[i]) if i < len(cells) else PatternCell.REST for i in range(length)
    ]


def resize_pattern(
    pattern: Sequence[Any], old: Subdivision, new: Subdivision
) -> list[PatternCell]:
    """
    Move a pattern onto another subdivision.

    Growing pads with rests at the end, shrinking keeps the leading cells.
    """
    current = normalize_pattern(pattern, old)
    return normalize_pattern(current, new)


def pattern_to_raw(pattern: Sequence[PatternCell]) -> list[str]:
    """Stored form of a pattern: list of 'L' / 'R' / ''."""
    return [cell.value for cell in pattern]


def format_pattern(pattern: Sequence[PatternCell], group: int = 4) -> str:
    """Human-readable grid, e.g. 'RLRR LRLL ...'."""
    cells = [str(cell) for cell in pattern]
    groups = ["".join(cells[i : i + group]) for i in range(0, len(cells), group)]
    return " ".join(groups)
