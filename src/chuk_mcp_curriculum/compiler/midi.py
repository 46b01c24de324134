"""
MIDI preview - render a rudiment pattern to a drum track.

Uses mido. Rendering is deterministic: same pattern and tempo, same file.
Each cell lasts one grid step (a sixteenth or an eighth triplet); hits
are snare strokes on the GM drum channel, rests are silent.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from mido import Message, MetaMessage, MidiFile, MidiTrack

from chuk_mcp_curriculum.core.pattern import (
    PatternCell,
    Subdivision,
    normalize_pattern,
    pattern_length,
)
from chuk_mcp_curriculum.models.curriculum import CourseRudiment

# Standard ticks per beat (quarter note)
TICKS_PER_BEAT = 480

# GM Drum channel (0-indexed, so 9 = channel 10)
DRUM_CHANNEL = 9

# GM acoustic snare
SNARE_NOTE = 38

# Leading hand slightly louder so stickings are audible
HAND_VELOCITY: dict[PatternCell, int] = {
    PatternCell.RIGHT: 100,
    PatternCell.LEFT: 88,
}

# Cells per quarter note
CELLS_PER_BEAT: dict[Subdivision, int] = {
    Subdivision.SIXTEENTH: 4,
    Subdivision.EIGHTH_TRIPLET: 3,
}


@dataclass(frozen=True)
class MidiEvent:
    """
    A single MIDI note event.

    All times are in ticks (absolute from start of track).
    """

    pitch: int
    start_ticks: int
    duration_ticks: int
    velocity: int
    channel: int = DRUM_CHANNEL

    def __post_init__(self) -> None:
        """Validate MIDI ranges."""
        if not 0 <= self.pitch <= 127:
            raise ValueError(f"Pitch must be 0-127, got {self.pitch}")
        if not 0 <= self.velocity <= 127:
            raise ValueError(f"Velocity must be 0-127, got {self.velocity}")
        if not 0 <= self.channel <= 15:
            raise ValueError(f"Channel must be 0-15, got {self.channel}")
        if self.start_ticks < 0:
            raise ValueError(f"Start ticks must be >= 0, got {self.start_ticks}")
        if self.duration_ticks < 0:
            raise ValueError(f"Duration ticks must be >= 0, got {self.duration_ticks}")


def cell_ticks(subdivision: Subdivision, ticks_per_beat: int = TICKS_PER_BEAT) -> int:
    """Length of one pattern cell in ticks."""
    return ticks_per_beat // CELLS_PER_BEAT[subdivision]


def pattern_to_events(
    pattern: Sequence[PatternCell],
    subdivision: Subdivision,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> list[MidiEvent]:
    """
    Convert a pattern to note events.

    The pattern is normalized to its grid length first.
    """
    step = cell_ticks(subdivision, ticks_per_beat)
    events = []
    for i, cell in enumerate(normalize_pattern(pattern, subdivision)):
        if cell == PatternCell.REST:
            continue
        events.append(
            MidiEvent(
                pitch=SNARE_NOTE,
                start_ticks=i * step,
                duration_ticks=step // 2,
                velocity=HAND_VELOCITY[cell],
            )
        )
    return events


def events_to_midi(
    events: Sequence[MidiEvent],
    tempo_bpm: int = 120,
    ticks_per_beat: int = TICKS_PER_BEAT,
    end_ticks: int | None = None,
) -> MidiFile:
    """
    Convert a sequence of MidiEvents to a MidiFile.

    Args:
        events: Sequence of MidiEvent objects
        tempo_bpm: Tempo in beats per minute
        ticks_per_beat: Resolution (default 480)
        end_ticks: Place end-of-track here (keeps trailing rests)

    Returns:
        A mido MidiFile ready to be saved
    """
    if tempo_bpm <= 0:
        raise ValueError(f"Tempo must be positive, got {tempo_bpm}")

    mid = MidiFile(ticks_per_beat=ticks_per_beat)
    track = MidiTrack()
    mid.tracks.append(track)

    # Set tempo (microseconds per beat)
    track.append(MetaMessage("set_tempo", tempo=int(60_000_000 / tempo_bpm), time=0))

    messages: list[tuple[int, Message]] = []
    for event in events:
        messages.append(
            (
                event.start_ticks,
                Message(
                    "note_on",
                    channel=event.channel,
                    note=event.pitch,
                    velocity=event.velocity,
                    time=0,
                ),
            )
        )
        messages.append(
            (
                event.start_ticks + event.duration_ticks,
                Message("note_off", channel=event.channel, note=event.pitch, velocity=0, time=0),
            )
        )

    # note_off before note_on at the same tick
    messages.sort(key=lambda x: (x[0], x[1].type != "note_off"))

    current_time = 0
    for abs_time, msg in messages:
        msg.time = abs_time - current_time
        track.append(msg)
        current_time = abs_time

    tail = max(0, end_ticks - current_time) if end_ticks is not None else 0
    track.append(MetaMessage("end_of_track", time=tail))

    return mid


def rudiment_to_midi(
    rudiment: CourseRudiment,
    tempo_bpm: int = 120,
    ticks_per_beat: int = TICKS_PER_BEAT,
) -> MidiFile:
    """
    Render a course rudiment as a one-track MIDI preview.

    Args:
        rudiment: Rudiment to render
        tempo_bpm: Playback tempo (a lesson's suggested BPM, typically)
        ticks_per_beat: Resolution

    Returns:
        A mido MidiFile covering the whole grid, trailing rests included
    """
    events = pattern_to_events(rudiment.pattern, rudiment.subdivision, ticks_per_beat)
    total = pattern_length(rudiment.subdivision) * cell_ticks(rudiment.subdivision, ticks_per_beat)
    return events_to_midi(
        events, tempo_bpm=tempo_bpm, ticks_per_beat=ticks_per_beat, end_ticks=total
    )
