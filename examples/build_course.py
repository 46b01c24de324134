#!/usr/bin/env python3
"""
Example: Build a small course and preview its rudiments.

This demonstrates the curriculum manager end to end: courses, lessons
pointing at global and course rudiments, reordering, and MIDI previews.

Usage:
    python examples/build_course.py
    # Creates: examples/output/curriculum/  (YAML documents)
    #          examples/output/*.mid        (rudiment previews)
"""

import asyncio
from pathlib import Path

from chuk_mcp_curriculum.compiler import rudiment_to_midi
from chuk_mcp_curriculum.core import Subdivision, format_pattern, normalize_pattern
from chuk_mcp_curriculum.curriculum import CurriculumManager
from chuk_mcp_curriculum.models import CourseScopedRef
from chuk_mcp_curriculum.references import parse_ref, serialize_ref
from chuk_mcp_curriculum.store import Direction, YamlDocumentStore


async def main() -> None:
    """Build the example course."""
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    manager = CurriculumManager(YamlDocumentStore(output_dir / "curriculum"))

    print("Creating course...")
    course = await manager.create_course("Snare Foundations", "Singles, doubles and triplets")

    singles = await manager.create_rudiment(
        course.id,
        "Single Strokes",
        pattern=normalize_pattern(["R", "L"] * 16, Subdivision.SIXTEENTH),
    )
    triplets = await manager.create_rudiment(
        course.id,
        "Triplet Singles",
        pattern=normalize_pattern(["R", "L", "R", "L", "R", "L"], Subdivision.EIGHTH_TRIPLET),
        subdivision=Subdivision.EIGHTH_TRIPLET,
    )
    for rudiment in (singles, triplets):
        print(f"  {rudiment.name:<16} {format_pattern(rudiment.pattern)}")

    print("\nCreating lessons...")
    singles_ref = CourseScopedRef(course_id=course.id, rudiment_id=singles.id)
    await manager.create_lesson(
        course.id,
        "Warm-up",
        rudiment_refs=[singles_ref, parse_ref("paradiddle-1")],
        suggested_bpm=70,
    )
    await manager.create_lesson(course.id, "Reading", body="Quarter notes only.")

    # Put the reading lesson first
    lessons = await manager.list_lessons(course.id)
    lessons = await manager.move_lesson(course.id, lessons, lessons[1].id, Direction.UP)
    for lesson in lessons:
        refs = ", ".join(serialize_ref(ref) for ref in lesson.rudiment_refs) or "-"
        print(f"  {lesson.order}. {lesson.title} [{refs}]")

    print("\nResolving warm-up rudiments...")
    warm_up = lessons[1]
    for ref, display in await manager.resolve_lesson_rudiments(warm_up):
        label = display.label if display else "(missing)"
        print(f"  {serialize_ref(ref)} -> {label}")

    print("\nWriting previews...")
    for rudiment in (singles, triplets):
        path = output_dir / f"{rudiment.name.lower().replace(' ', '_')}.mid"
        rudiment_to_midi(rudiment, tempo_bpm=warm_up.suggested_bpm or 120).save(str(path))
        print(f"  Created: {path}")

    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(main())
