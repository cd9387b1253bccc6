#!/usr/bin/env python3
"""
Example: Playing a drill in the terminal.

Draws a note as text (its staff position and ledger lines), reads the
answer from stdin and keeps score. Feedback waits for Enter instead of a
timer.

Usage:
    python examples/play_in_terminal.py [profile] [rounds]
"""

import sys
from pathlib import Path

from staff_drill.constants import Phase
from staff_drill.profiles import ProfileLoader
from staff_drill.session import ManualScheduler, QuizController


def describe(controller: QuizController) -> str:
    geometry = controller.geometry
    pitch = controller.current_pitch
    ledgers = f", {geometry.ledger_count} ledger line(s)" if geometry.ledger_count else ""
    return (
        f"{pitch.clef.value} clef: note at y={geometry.note_y:g}{ledgers}, "
        f"stem {geometry.stem_direction.value}"
    )


def main() -> None:
    """Run one session in the terminal."""
    profile_name = sys.argv[1] if len(sys.argv) > 1 else "grand-staff"
    rounds = int(sys.argv[2]) if len(sys.argv) > 2 else 10

    library_path = Path(__file__).parent.parent / "src/staff_drill/profiles/library"
    loader = ProfileLoader(library_path=library_path)

    profile = loader.get_profile(profile_name)
    if not profile:
        print(f"Unknown profile: {profile_name}")
        print("Available:", ", ".join(p.name for p in loader.list_profiles()))
        return

    print(f"Staff Drill: {profile.name}")
    print("=" * 40)
    print(profile.description.strip())
    print()

    controller = QuizController(
        profile, total_rounds=rounds, scheduler=ManualScheduler(), auto_advance=False
    )

    while not controller.state.is_finished:
        print(f"Round {controller.round}/{rounds}  Score: {controller.score}")
        print(f"  {describe(controller)}")

        answer = input("  Your answer: ")
        state = controller.submit(answer)
        if state.phase != Phase.FEEDBACK:
            continue

        print(f"  {state.feedback_message} ({state.history[-1].pitch})")
        input("  Press Enter for the next note...")
        controller.advance()
        print()

    result = controller.summary()
    print(result)
    print(f"Accuracy: {result.accuracy:.0%}")


if __name__ == "__main__":
    main()
