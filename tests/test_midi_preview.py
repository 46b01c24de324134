"""
MIDI preview tests.

Tests cover:
- Pattern to note events
- Track length covering the whole grid
- Writing and reading back a file
"""

from pathlib import Path

import pytest
from mido import MidiFile

from chuk_mcp_curriculum.compiler import (
    DRUM_CHANNEL,
    SNARE_NOTE,
    TICKS_PER_BEAT,
    MidiEvent,
    cell_ticks,
    events_to_midi,
    pattern_to_events,
    rudiment_to_midi,
)
from chuk_mcp_curriculum.core import PatternCell, Subdivision
from chuk_mcp_curriculum.models import CourseRudiment

L, R, REST = PatternCell.LEFT, PatternCell.RIGHT, PatternCell.REST


class TestMidiEvent:
    """Test MidiEvent dataclass."""

    def test_defaults_to_drum_channel(self) -> None:
        """Events go to the GM drum channel."""
        event = MidiEvent(pitch=SNARE_NOTE, start_ticks=0, duration_ticks=60, velocity=100)
        assert event.channel == DRUM_CHANNEL

    def test_validation(self) -> None:
        """Ranges are checked."""
        with pytest.raises(ValueError, match="Pitch must be 0-127"):
            MidiEvent(pitch=128, start_ticks=0, duration_ticks=60, velocity=100)
        with pytest.raises(ValueError, match="Start ticks must be >= 0"):
            MidiEvent(pitch=38, start_ticks=-1, duration_ticks=60, velocity=100)


class TestPatternToEvents:
    """Tests for pattern_to_events."""

    def test_cell_ticks(self) -> None:
        """Sixteenths are a quarter beat, triplets a third."""
        assert cell_ticks(Subdivision.SIXTEENTH) == TICKS_PER_BEAT // 4
        assert cell_ticks(Subdivision.EIGHTH_TRIPLET) == TICKS_PER_BEAT // 3

    def test_hits_and_rests(self) -> None:
        """Only hits produce events, at their grid position."""
        events = pattern_to_events([R, REST, L], Subdivision.SIXTEENTH)
        assert [e.start_ticks for e in events] == [0, 240]
        assert all(e.pitch == SNARE_NOTE for e in events)

    def test_hands_have_different_velocity(self) -> None:
        """Right and left hands are distinguishable."""
        right, left = pattern_to_events([R, L], Subdivision.SIXTEENTH)
        assert right.velocity > left.velocity

    def test_long_pattern_truncated(self) -> None:
        """Cells past the grid are not rendered."""
        events = pattern_to_events([R] * 40, Subdivision.EIGHTH_TRIPLET)
        assert len(events) == 24


class TestRudimentToMidi:
    """Tests for rudiment_to_midi."""

    @pytest.mark.parametrize("subdivision", list(Subdivision))
    def test_track_covers_grid(self, subdivision: Subdivision) -> None:
        """Trailing rests still count towards the track length."""
        rudiment = CourseRudiment(id="r1", name="One", pattern=[R], subdivision=subdivision)
        mid = rudiment_to_midi(rudiment)
        total = sum(msg.time for msg in mid.tracks[0])
        # both grids are two bars of 4/4
        assert total == 8 * TICKS_PER_BEAT

    def test_tempo(self) -> None:
        """The tempo meta message matches the BPM."""
        rudiment = CourseRudiment(id="r1", name="One", pattern=[R, L])
        mid = rudiment_to_midi(rudiment, tempo_bpm=60)
        tempos = [msg.tempo for msg in mid.tracks[0] if msg.type == "set_tempo"]
        assert tempos == [1_000_000]

    def test_invalid_tempo(self) -> None:
        """Tempo must be positive."""
        with pytest.raises(ValueError, match="Tempo must be positive"):
            events_to_midi([], tempo_bpm=0)

    def test_save_and_load(self, temp_dir: Path) -> None:
        """The file reads back with the same notes."""
        rudiment = CourseRudiment(id="r1", name="Paradiddle", pattern=[R, L, R, R, L, R, L, L])
        path = temp_dir / "paradiddle.mid"
        rudiment_to_midi(rudiment).save(str(path))

        loaded = MidiFile(str(path))
        notes = [msg for msg in loaded.tracks[0] if msg.type == "note_on"]
        assert len(notes) == 8
        assert all(msg.channel == DRUM_CHANNEL for msg in notes)
