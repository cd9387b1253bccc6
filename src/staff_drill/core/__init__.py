"""
Core notation primitives - the layout engine.

These are the pure, stateless pieces everything else composes on:
- Letter: The 7 diatonic letter names (0-6)
- Pitch: Letter + octave + clef + answer label
- LayoutConfig: Static staff drawing parameters
- StaffGeometry: Note, ledger, stem and clef positions for one pitch
- compute_geometry: Pitch + LayoutConfig -> StaffGeometry
"""

from staff_drill.core.layout import (
    BOTTOM_REFERENCE,
    COMPACT_LAYOUT,
    LARGE_LAYOUT,
    LayoutConfig,
    StaffGeometry,
    compute_geometry,
)
from staff_drill.core.pitch import Letter, Pitch

__all__ = [
    # Pitch
    "Letter",
    "Pitch",
    # Layout
    "BOTTOM_REFERENCE",
    "COMPACT_LAYOUT",
    "LARGE_LAYOUT",
    "LayoutConfig",
    "StaffGeometry",
    "compute_geometry",
]
