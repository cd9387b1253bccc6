"""
Range profile models - which pitches a drill may ask for.

A RangeProfile is a named, closed, clef-tagged pitch domain plus the rules
a session needs to drill it:
- how a pitch is sampled from the domain
- how long a typed answer may be
- how the staff is laid out
- how long feedback stays up before the next round

Two variants exist:
- RegisterProfile: octave bands of letters per clef (letter drills)
- FixedSetProfile: an explicit list of labelled pitches (fingering drills)
"""

from __future__ import annotations

import random
from abc import abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, Field

from staff_drill.constants import (
    CORRECT_ADVANCE_DELAY,
    WRONG_ADVANCE_DELAY,
    Clef,
    SamplingMode,
)
from staff_drill.core.layout import COMPACT_LAYOUT, LayoutConfig
from staff_drill.core.pitch import Letter, Pitch


class ProfileError(ValueError):
    """Raised when a profile or session configuration is unusable."""


class TimingConfig(BaseModel):
    """Auto-advance delays in seconds."""

    correct_delay: float = Field(
        default=CORRECT_ADVANCE_DELAY,
        gt=0,
        description="Delay after a correct answer",
    )
    wrong_delay: float = Field(
        default=WRONG_ADVANCE_DELAY,
        gt=0,
        description="Delay after a wrong answer, long enough to study the reveal",
    )

    model_config = {"frozen": True}


class RangeProfile(BaseModel):
    """
    Base for all drill profiles.

    Subclasses define the domain and the sampling rule. Everything a
    session needs beyond that lives here.
    """

    name: str = Field(..., description="Profile name (e.g., 'grand-staff')")
    description: str = Field("", description="Human-readable description")
    max_input_length: int = Field(1, ge=1, description="Longest answer the input accepts")
    auto_advance: bool = Field(True, description="Advance automatically after feedback")
    timing: TimingConfig = Field(default_factory=TimingConfig)
    layout: LayoutConfig = Field(default=COMPACT_LAYOUT, description="Staff layout")

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @abstractmethod
    def domain(self) -> list[Pitch]:
        """Every pitch this profile can generate, in a stable order."""

    @abstractmethod
    def generate(self, rng: random.Random) -> Pitch:
        """Draw one pitch from the domain."""

    @property
    def clefs(self) -> list[Clef]:
        """Clefs used by the domain, in first-seen order."""
        seen: list[Clef] = []
        for pitch in self.domain():
            if pitch.clef not in seen:
                seen.append(pitch.clef)
        return seen

    def contains(self, pitch: Pitch) -> bool:
        """Return True if the pitch (with its label) belongs to the domain."""
        return pitch in self.domain()

    def labels(self) -> list[str]:
        """Distinct answer labels, in domain order."""
        result: list[str] = []
        for pitch in self.domain():
            if pitch.display_label not in result:
                result.append(pitch.display_label)
        return result


class RegisterProfile(RangeProfile):
    """
    Letter bands per clef and octave.

    Answers are bare letter names.

    Example:
        RegisterProfile(
            name="treble-only",
            registers={Clef.TREBLE: {4: tuple(Letter), 5: (Letter.C,)}},
        )
    """

    kind: Literal["register"] = "register"
    registers: dict[Clef, dict[int, tuple[Letter, ...]]] = Field(
        default_factory=dict,
        description="Clef -> octave -> allowed letters",
    )
    sampling: SamplingMode = Field(
        SamplingMode.BY_PITCH,
        description="Uniform over pitches, or octave first then letter",
    )

    def pitches_for(self, clef: Clef) -> list[Pitch]:
        """Every pitch of one clef, low to high."""
        bands = self.registers.get(clef, {})
        return [
            Pitch(letter, octave, clef)
            for octave in sorted(bands)
            for letter in sorted(bands[octave])
        ]

    def domain(self) -> list[Pitch]:
        result: list[Pitch] = []
        for clef in self.registers:
            result.extend(self.pitches_for(clef))
        return result

    def generate(self, rng: random.Random) -> Pitch:
        clef = rng.choice(list(self.registers))

        if self.sampling == SamplingMode.BY_OCTAVE:
            bands = self.registers[clef]
            octave = rng.choice(sorted(bands))
            letter = rng.choice(sorted(bands[octave]))
            return Pitch(letter, octave, clef)

        return rng.choice(self.pitches_for(clef))

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-friendly dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "kind": self.kind,
            "sampling": self.sampling.value,
            "max_input_length": self.max_input_length,
            "auto_advance": self.auto_advance,
            "timing": self.timing.model_dump(),
            "registers": {
                clef.value: {
                    octave: [letter.name for letter in letters]
                    for octave, letters in sorted(bands.items())
                }
                for clef, bands in self.registers.items()
            },
        }


class FixedSetProfile(RangeProfile):
    """
    An explicit list of labelled pitches.

    Sampling is uniform over the entries, so a pitch listed twice under
    two labels (e.g. D4 as "G4" and as open "D") is drawn twice as often.
    """

    kind: Literal["fixed"] = "fixed"
    entries: tuple[Pitch, ...] = Field(default=(), description="Labelled pitches")

    def domain(self) -> list[Pitch]:
        return list(self.entries)

    def generate(self, rng: random.Random) -> Pitch:
        return self.entries[rng.randrange(len(self.entries))]

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-friendly dictionary."""
        return {
            "name": self.name,
            "description": self.description,
            "kind": self.kind,
            "max_input_length": self.max_input_length,
            "auto_advance": self.auto_advance,
            "timing": self.timing.model_dump(),
            "entries": [
                {"pitch": p.name, "clef": p.clef.value, "label": p.display_label}
                for p in self.entries
            ],
        }


def generate_pitch(profile: RangeProfile, rng: random.Random | None = None) -> Pitch:
    """
    Draw a pitch from a profile.

    Args:
        profile: The profile to sample
        rng: Random source (a fresh unseeded one if omitted)

    Returns:
        A Pitch from the profile's domain
    """
    return profile.generate(rng or random.Random())


class ProfileMetadata(BaseModel):
    """Lightweight metadata for listing profiles."""

    name: str
    description: str
    kind: str
    clefs: list[Clef]
    domain_size: int
    max_input_length: int
    auto_advance: bool

    model_config = {"frozen": True}

    @classmethod
    def from_profile(cls, profile: RegisterProfile | FixedSetProfile) -> ProfileMetadata:
        """Create metadata from a profile."""
        return cls(
            name=profile.name,
            description=profile.description,
            kind=profile.kind,
            clefs=profile.clefs,
            domain_size=len(profile.domain()),
            max_input_length=profile.max_input_length,
            auto_advance=profile.auto_advance,
        )
