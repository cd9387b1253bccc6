"""
Staff layout primitives - LayoutConfig, StaffGeometry, compute_geometry.

The layout engine maps a Pitch onto staff coordinates. The mapping is a pure
function: the same pitch and layout always give the same geometry.

Coordinates grow downward (screen convention), so a higher pitch has a
smaller y. One diatonic step moves the note half a line gap.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from staff_drill.constants import Clef, StemDirection, StemSide
from staff_drill.core.pitch import Letter, Pitch

# Pitch sitting on the bottom staff line for each clef
BOTTOM_REFERENCE: dict[Clef, Pitch] = {
    Clef.TREBLE: Pitch(Letter.E, 4, Clef.TREBLE),
    Clef.BASS: Pitch(Letter.G, 2, Clef.BASS),
}


@dataclass(frozen=True)
class LayoutConfig:
    """
    Static drawing parameters for one staff.

    stem_down_octave is the octave from which stems flip to point down,
    per clef. It is a per-instrument convention rather than a rule derived
    from the staff midpoint; a clef missing from the map never flips.
    """

    line_gap: float = 10.0
    staff_top: float = 80.0
    width: float = 200.0
    height: float = 200.0
    stem_length: float = 30.0
    line_count: int = 5
    bottom_reference: dict[Clef, Pitch] = field(default_factory=lambda: dict(BOTTOM_REFERENCE))
    stem_down_octave: dict[Clef, int] = field(
        default_factory=lambda: {Clef.TREBLE: 5, Clef.BASS: 3}
    )

    def __post_init__(self) -> None:
        if self.line_count < 1:
            raise ValueError(f"line_count must be positive, got {self.line_count}")
        if self.line_gap <= 0:
            raise ValueError(f"line_gap must be positive, got {self.line_gap}")

    def __hash__(self) -> int:
        return hash(
            (
                self.line_gap,
                self.staff_top,
                self.width,
                self.height,
                self.stem_length,
                self.line_count,
                tuple(sorted(self.bottom_reference.items())),
                tuple(sorted(self.stem_down_octave.items())),
            )
        )

    @property
    def staff_bottom(self) -> float:
        """Y of the bottom staff line."""
        return self.staff_top + (self.line_count - 1) * self.line_gap

    @property
    def line_ys(self) -> tuple[float, ...]:
        """Y of every staff line, top to bottom."""
        return tuple(self.staff_top + i * self.line_gap for i in range(self.line_count))

    @property
    def step_height(self) -> float:
        """Vertical distance of one diatonic step."""
        return self.line_gap / 2

    def clef_symbol_y(self, clef: Clef) -> float:
        """
        Y the clef glyph is centred on.

        The treble clef curls around the G line (second from bottom),
        the bass clef sits on the F line (second from top).
        """
        if clef == Clef.TREBLE:
            return self.staff_bottom - self.line_gap
        return self.staff_top + self.line_gap

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "width": self.width,
            "height": self.height,
            "line_gap": self.line_gap,
            "line_count": self.line_count,
            "staff_top": self.staff_top,
            "staff_bottom": self.staff_bottom,
            "line_ys": list(self.line_ys),
            "stem_length": self.stem_length,
        }


# Small staff used by the two-clef letter drill
COMPACT_LAYOUT = LayoutConfig()

# Large single-staff layout used by the violin drills
LARGE_LAYOUT = LayoutConfig(
    line_gap=20.0,
    staff_top=160.0,
    width=400.0,
    height=400.0,
    stem_length=60.0,
    stem_down_octave={Clef.TREBLE: 5},
)


@dataclass(frozen=True)
class StaffGeometry:
    """
    Computed drawing positions for one pitch on one staff.

    ledger_ys lists the marks below the staff first (nearest the staff
    first), then the marks above the staff (nearest first). A pitch never
    needs marks on both sides.
    """

    note_y: float
    ledger_ys: tuple[float, ...]
    stem_side: StemSide
    stem_direction: StemDirection
    stem_length: float
    clef_symbol_y: float

    @property
    def ledger_count(self) -> int:
        """Number of ledger lines needed."""
        return len(self.ledger_ys)

    @property
    def stem_end_y(self) -> float:
        """Y of the free end of the stem."""
        if self.stem_direction == StemDirection.DOWN:
            return self.note_y + self.stem_length
        return self.note_y - self.stem_length

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "note_y": self.note_y,
            "ledger_ys": list(self.ledger_ys),
            "stem_side": self.stem_side.value,
            "stem_direction": self.stem_direction.value,
            "stem_length": self.stem_length,
            "stem_end_y": self.stem_end_y,
            "clef_symbol_y": self.clef_symbol_y,
        }


def step_diff(pitch: Pitch, layout: LayoutConfig) -> int:
    """Diatonic steps from the clef's bottom line up to the pitch."""
    return pitch.steps_from(layout.bottom_reference[pitch.clef])


def note_y(pitch: Pitch, layout: LayoutConfig) -> float:
    """Y of the note head centre."""
    return layout.staff_bottom - step_diff(pitch, layout) * layout.step_height


def ledger_ys(y: float, layout: LayoutConfig) -> tuple[float, ...]:
    """
    Ledger line positions needed to reach a note at y.

    One mark per line gap from the nearest outer staff line out to and
    including the note's own line. Notes inside the staff get none.
    """
    marks: list[float] = []

    # Below the staff
    k = 1
    while layout.staff_bottom + k * layout.line_gap <= y:
        marks.append(layout.staff_bottom + k * layout.line_gap)
        k += 1

    # Above the staff
    k = 1
    while layout.staff_top - k * layout.line_gap >= y:
        marks.append(layout.staff_top - k * layout.line_gap)
        k += 1

    return tuple(marks)


def stem_direction(pitch: Pitch, layout: LayoutConfig) -> StemDirection:
    """Stem points down once the pitch reaches the clef's flip octave."""
    threshold = layout.stem_down_octave.get(pitch.clef)
    if threshold is not None and pitch.octave >= threshold:
        return StemDirection.DOWN
    return StemDirection.UP


def compute_geometry(pitch: Pitch, layout: LayoutConfig) -> StaffGeometry:
    """
    Map a pitch onto staff coordinates.

    Args:
        pitch: The pitch to place
        layout: Staff drawing parameters

    Returns:
        StaffGeometry with note, ledger, stem and clef positions

    Example:
        >>> g = compute_geometry(Pitch(Letter.C, 4), COMPACT_LAYOUT)
        >>> g.note_y, g.ledger_ys
        (130.0, (130.0,))
    """
    y = note_y(pitch, layout)
    direction = stem_direction(pitch, layout)
    side = StemSide.LEFT if direction == StemDirection.DOWN else StemSide.RIGHT

    return StaffGeometry(
        note_y=y,
        ledger_ys=ledger_ys(y, layout),
        stem_side=side,
        stem_direction=direction,
        stem_length=layout.stem_length,
        clef_symbol_y=layout.clef_symbol_y(pitch.clef),
    )
