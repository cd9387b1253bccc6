"""
Constants and enums for the drill system.

No magic strings - use enums for constrained values.
"""

from enum import Enum


class Clef(str, Enum):
    """Staff clefs supported by the layout engine."""

    TREBLE = "treble"
    BASS = "bass"


class Phase(str, Enum):
    """Quiz session phases."""

    GUESSING = "guessing"  # Awaiting input
    FEEDBACK = "feedback"  # Showing the result of the last answer
    FINISHED = "finished"  # Round counter exhausted


class FeedbackKind(str, Enum):
    """Outcome shown while in the feedback phase."""

    NONE = "none"
    CORRECT = "correct"
    WRONG = "wrong"


class StemSide(str, Enum):
    """Side of the note head the stem is attached to."""

    LEFT = "left"
    RIGHT = "right"


class StemDirection(str, Enum):
    """Direction the stem extends from the note head."""

    UP = "up"
    DOWN = "down"


class SamplingMode(str, Enum):
    """How a register profile draws a pitch from its domain."""

    BY_OCTAVE = "by_octave"  # Octave first, then a letter within it
    BY_PITCH = "by_pitch"  # Uniform over every pitch of the chosen clef


# Session defaults
DEFAULT_TOTAL_ROUNDS = 10

# Auto-advance delays (seconds)
CORRECT_ADVANCE_DELAY = 0.5
WRONG_ADVANCE_DELAY = 3.0


class ErrorMessages:
    """Standardized error messages."""

    SESSION_NOT_FOUND = "Session '{name}' not found."
    SESSION_EXISTS = "Session '{name}' already exists."
    PROFILE_NOT_FOUND = "Profile '{name}' not found."
    INVALID_ROUNDS = "Invalid total_rounds: {rounds}. Must be at least 1."
    INVALID_PROFILE = "Profile '{name}' is invalid: {issues}"
    UNKNOWN_LETTER = "Unknown note letter: '{letter}'."
    UNKNOWN_PITCH = "Cannot parse pitch: '{text}'. Expected format like 'C4'."


class SuccessMessages:
    """Standardized success messages."""

    SESSION_STARTED = "Started session '{name}' with profile '{profile}'."
    SESSION_ENDED = "Ended session '{name}'."
    CORRECT = "Correct!"
    WRONG = "Wrong! It was {expected}"
