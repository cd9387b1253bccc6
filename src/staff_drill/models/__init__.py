"""
Pydantic models for the drill system.

This module provides:
- RangeProfile: Base for pitch domains (RegisterProfile, FixedSetProfile)
- TimingConfig: Auto-advance delays
- ProfileMetadata: Lightweight listing info
- SessionState: Immutable snapshot of one drill session
- AnswerRecord: One finished round
- SessionSummary: Result shown when a session finishes
"""

from staff_drill.models.profile import (
    FixedSetProfile,
    ProfileError,
    ProfileMetadata,
    RangeProfile,
    RegisterProfile,
    TimingConfig,
    generate_pitch,
)
from staff_drill.models.session import AnswerRecord, SessionState, SessionSummary

__all__ = [
    "AnswerRecord",
    "FixedSetProfile",
    "ProfileError",
    "ProfileMetadata",
    "RangeProfile",
    "RegisterProfile",
    "SessionState",
    "SessionSummary",
    "TimingConfig",
    "generate_pitch",
]
