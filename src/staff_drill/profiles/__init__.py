"""
Profile system - the pitch domains a drill can ask for.

Built-in profiles:
- grand-staff: letter names on treble (C4-A5) and bass (E2-C4)
- violin-range: letter names on treble, G3-C6
- violin-fingering: string + finger labels for first position
"""

from staff_drill.profiles.loader import ProfileLoader, parse_profile
from staff_drill.profiles.validator import (
    ProfileValidator,
    ValidationIssue,
    ValidationResult,
    ValidationSeverity,
    validate_profile,
)

__all__ = [
    "ProfileLoader",
    "ProfileValidator",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSeverity",
    "parse_profile",
    "validate_profile",
]
