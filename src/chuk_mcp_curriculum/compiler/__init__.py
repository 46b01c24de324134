"""
MIDI preview of rudiment patterns.
"""

from chuk_mcp_curriculum.compiler.midi import (
    DRUM_CHANNEL,
    SNARE_NOTE,
    TICKS_PER_BEAT,
    MidiEvent,
    cell_ticks,
    events_to_midi,
    pattern_to_events,
    rudiment_to_midi,
)

__all__ = [
    "DRUM_CHANNEL",
    "SNARE_NOTE",
    "TICKS_PER_BEAT",
    "MidiEvent",
    "cell_ticks",
    "events_to_midi",
    "pattern_to_events",
    "rudiment_to_midi",
]
