"""
Staff Drill - note-reading practice on a music staff.

A randomly chosen pitch is placed on a treble or bass staff and the student
types its name. The package is split into:
- core: the pitch model and staff layout engine (pure functions)
- models: pydantic models for profiles and session state
- profiles: the YAML profile library, loader and validator
- session: the quiz state machine, its controller and session manager
- tools: MCP tools exposing sessions to a presentation layer
"""

from staff_drill.core import LayoutConfig, Letter, Pitch, StaffGeometry, compute_geometry
from staff_drill.models import RangeProfile, SessionState, generate_pitch
from staff_drill.session import QuizController, advance, create_session, restart, submit_answer

__version__ = "0.1.0"

__all__ = [
    "LayoutConfig",
    "Letter",
    "Pitch",
    "QuizController",
    "RangeProfile",
    "SessionState",
    "StaffGeometry",
    "advance",
    "compute_geometry",
    "create_session",
    "generate_pitch",
    "restart",
    "submit_answer",
]
