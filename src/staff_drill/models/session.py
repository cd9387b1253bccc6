"""
Session models - the quiz state machine's data.

SessionState is an immutable snapshot. Transitions never mutate it;
they return a new snapshot with an incremented generation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from staff_drill.constants import FeedbackKind, Phase, SuccessMessages
from staff_drill.core.pitch import Pitch


class AnswerRecord(BaseModel):
    """One finished round: what was asked and what was typed."""

    round: int = Field(..., ge=1)
    pitch: str = Field(..., description="Scientific pitch name, e.g. 'C4'")
    expected: str = Field(..., description="Label the student had to type")
    given: str | None = Field(None, description="Submitted answer (None if skipped)")
    correct: bool | None = Field(None, description="None if the round was skipped")

    model_config = {"frozen": True}


class SessionState(BaseModel):
    """
    Snapshot of one drill session.

    generation increases on every state change; a timer scheduled against
    one generation is stale once the state has moved on.
    """

    profile_name: str
    total_rounds: int = Field(..., ge=1)
    max_input_length: int = Field(1, ge=1)
    round: int = Field(1, ge=1)
    score: int = Field(0, ge=0)
    current_pitch: Pitch
    user_input: str = ""
    phase: Phase = Phase.GUESSING
    feedback_kind: FeedbackKind = FeedbackKind.NONE
    expected_label: str | None = None
    reveal: str | None = None
    generation: int = 0
    history: tuple[AnswerRecord, ...] = ()

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_counters(self) -> SessionState:
        """Round and score stay within their bounds."""
        if self.round > self.total_rounds:
            raise ValueError(f"round {self.round} exceeds total_rounds {self.total_rounds}")
        if self.score > self.round:
            raise ValueError(f"score {self.score} exceeds round {self.round}")
        return self

    def evolve(self, **changes: Any) -> SessionState:
        """Copy with changes applied and the generation bumped."""
        changes.setdefault("generation", self.generation + 1)
        return self.model_copy(update=changes)

    @property
    def is_finished(self) -> bool:
        return self.phase == Phase.FINISHED

    @property
    def is_last_round(self) -> bool:
        return self.round >= self.total_rounds

    @property
    def feedback_message(self) -> str | None:
        """Text shown during feedback, or None outside it."""
        if self.feedback_kind == FeedbackKind.CORRECT:
            return SuccessMessages.CORRECT
        if self.feedback_kind == FeedbackKind.WRONG:
            return SuccessMessages.WRONG.format(expected=self.expected_label)
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        pitch = self.current_pitch
        return {
            "profile": self.profile_name,
            "round": self.round,
            "total_rounds": self.total_rounds,
            "score": self.score,
            "phase": self.phase.value,
            "feedback": self.feedback_kind.value,
            "feedback_message": self.feedback_message,
            "expected_label": self.expected_label,
            "reveal": self.reveal,
            "user_input": self.user_input,
            "max_input_length": self.max_input_length,
            "pitch": {
                "clef": pitch.clef.value,
                # The answer stays hidden while the student is guessing
                "name": pitch.name if self.phase != Phase.GUESSING else None,
            },
        }


class SessionSummary(BaseModel):
    """Result of a session, shown when it finishes."""

    score: int
    total_rounds: int
    rounds_played: int
    correct: int
    wrong: int
    skipped: int

    model_config = {"frozen": True}

    @property
    def accuracy(self) -> float:
        """Fraction of answered rounds that were correct."""
        answered = self.correct + self.wrong
        return self.correct / answered if answered else 0.0

    def __str__(self) -> str:
        return f"Final Score: {self.score} / {self.total_rounds}"
