"""
Pitch primitives - Letter and Pitch.

These are the foundational types for the layout engine.
Letter is the diatonic ordinal (C=0 .. B=6), independent of accidentals.
Pitch is a letter in a concrete octave, tagged with the clef it is shown on
and the label a student must type to answer it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from staff_drill.constants import Clef, ErrorMessages

_PITCH_PATTERN = re.compile(r"^\s*([A-Ga-g])\s*(-?\d+)\s*$")


class Letter(IntEnum):
    """
    The 7 diatonic letter names (0-6).

    One unit is one diatonic step, which is half a line gap on the staff.
    """

    C = 0
    D = 1
    E = 2
    F = 3
    G = 4
    A = 5
    B = 6

    @classmethod
    def parse(cls, name: str) -> Letter:
        """Parse a letter from a string like 'C' or 'g'."""
        key = name.strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise ValueError(ErrorMessages.UNKNOWN_LETTER.format(letter=name)) from None


@dataclass(frozen=True)
class Pitch:
    """
    A letter in a concrete octave, shown on a given clef.

    Octaves use scientific pitch notation (C4 = middle C).
    display_label is the canonical answer string; for letter drills it is
    the letter name, for fingering drills a label such as "G2".

    Immutable and hashable.
    """

    letter: Letter
    octave: int
    clef: Clef = Clef.TREBLE
    display_label: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "letter", Letter(self.letter))
        object.__setattr__(self, "clef", Clef(self.clef))
        # Answers are compared upper-cased, so labels are stored that way too
        label = self.display_label.strip().upper() or self.letter.name
        object.__setattr__(self, "display_label", label)

    @property
    def diatonic_value(self) -> int:
        """Absolute diatonic position: octave * 7 + letter ordinal."""
        return self.octave * 7 + int(self.letter)

    @property
    def name(self) -> str:
        """Scientific pitch name, e.g. 'C4'."""
        return f"{self.letter.name}{self.octave}"

    def steps_from(self, other: Pitch) -> int:
        """Signed number of diatonic steps from another pitch up to this one."""
        return self.diatonic_value - other.diatonic_value

    def same_note(self, other: Pitch) -> bool:
        """True if both pitches sit on the same staff position and clef."""
        return self.diatonic_value == other.diatonic_value and self.clef == other.clef

    @classmethod
    def parse(
        cls,
        text: str,
        clef: Clef | str = Clef.TREBLE,
        display_label: str = "",
    ) -> Pitch:
        """
        Parse a pitch from scientific notation like 'C4' or 'g3'.

        Args:
            text: Letter followed by octave number
            clef: Clef the pitch is shown on
            display_label: Answer label (defaults to the letter name)

        Returns:
            The parsed Pitch
        """
        match = _PITCH_PATTERN.match(text)
        if match is None:
            raise ValueError(ErrorMessages.UNKNOWN_PITCH.format(text=text))
        letter = Letter.parse(match.group(1))
        return cls(
            letter=letter,
            octave=int(match.group(2)),
            clef=Clef(clef),
            display_label=display_label,
        )

    def __str__(self) -> str:
        if self.display_label == self.letter.name:
            return f"{self.name} ({self.clef.value})"
        return f"{self.name} ({self.clef.value}, {self.display_label})"
