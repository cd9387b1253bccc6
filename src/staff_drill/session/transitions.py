"""
Session transitions - the quiz state machine as pure functions.

Each transition takes a SessionState and returns the next one. Calling a
transition where it does not apply (submitting outside the guessing phase,
advancing a finished session) is a no-op: the same state object comes back
unchanged and the call is logged at DEBUG.

    guessing --submit--> feedback --advance--> guessing | finished
        ^                                              |
        +------------------- restart ------------------+
"""

from __future__ import annotations

import logging
import random

from staff_drill.constants import DEFAULT_TOTAL_ROUNDS, ErrorMessages, FeedbackKind, Phase
from staff_drill.models.profile import ProfileError, RangeProfile
from staff_drill.models.session import AnswerRecord, SessionState, SessionSummary
from staff_drill.profiles.validator import validate_profile

logger = logging.getLogger(__name__)


def normalize_answer(raw: str) -> str:
    """Trim and upper-case a typed answer."""
    return raw.strip().upper()


def create_session(
    profile: RangeProfile,
    total_rounds: int = DEFAULT_TOTAL_ROUNDS,
    rng: random.Random | None = None,
) -> SessionState:
    """
    Start a new session on round 1 with a fresh pitch.

    Args:
        profile: Profile to draw pitches from
        total_rounds: Number of rounds before the session finishes
        rng: Random source (a fresh unseeded one if omitted)

    Returns:
        The initial SessionState

    Raises:
        ProfileError: If total_rounds is not positive or the profile is invalid
    """
    if total_rounds <= 0:
        raise ProfileError(ErrorMessages.INVALID_ROUNDS.format(rounds=total_rounds))

    result = validate_profile(profile)
    if not result.is_valid:
        issues = "; ".join(issue.message for issue in result.errors)
        raise ProfileError(ErrorMessages.INVALID_PROFILE.format(name=profile.name, issues=issues))

    rng = rng or random.Random()
    return SessionState(
        profile_name=profile.name,
        total_rounds=total_rounds,
        max_input_length=profile.max_input_length,
        current_pitch=profile.generate(rng),
    )


def enter_text(state: SessionState, text: str) -> SessionState:
    """
    Append typed characters to the input buffer.

    Characters are upper-cased, whitespace is dropped and the buffer never
    grows past max_input_length. Ignored outside the guessing phase.
    """
    if state.phase != Phase.GUESSING:
        logger.debug("Ignoring input in phase %s", state.phase.value)
        return state

    room = state.max_input_length - len(state.user_input)
    added = "".join(text.split()).upper()[: max(room, 0)]
    if not added:
        return state
    return state.evolve(user_input=state.user_input + added)


def erase(state: SessionState) -> SessionState:
    """Remove the last buffered character. Ignored outside guessing."""
    if state.phase != Phase.GUESSING or not state.user_input:
        return state
    return state.evolve(user_input=state.user_input[:-1])


def submit_answer(state: SessionState, raw: str | None = None) -> SessionState:
    """
    Score an answer against the current pitch's label.

    Args:
        state: Current state (must be guessing)
        raw: Answer text; defaults to the buffered input

    Returns:
        Feedback state, or the same state for a blank answer or wrong phase
    """
    if state.phase != Phase.GUESSING:
        logger.debug("Ignoring submit in phase %s", state.phase.value)
        return state

    answer = normalize_answer(state.user_input if raw is None else raw)
    if not answer:
        # Blank answers are ignored and leave the buffer as it was
        return state

    pitch = state.current_pitch
    correct = answer == pitch.display_label
    record = AnswerRecord(
        round=state.round,
        pitch=pitch.name,
        expected=pitch.display_label,
        given=answer,
        correct=correct,
    )

    if correct:
        return state.evolve(
            score=state.score + 1,
            phase=Phase.FEEDBACK,
            feedback_kind=FeedbackKind.CORRECT,
            expected_label=None,
            reveal=None,
            user_input="",
            history=(*state.history, record),
        )

    return state.evolve(
        phase=Phase.FEEDBACK,
        feedback_kind=FeedbackKind.WRONG,
        expected_label=pitch.display_label,
        reveal=pitch.name,
        user_input="",
        history=(*state.history, record),
    )


def advance(
    state: SessionState,
    profile: RangeProfile,
    rng: random.Random | None = None,
) -> SessionState:
    """
    Move to the next round, or finish after the last one.

    Advancing straight from guessing skips the round; it is recorded in the
    history with no answer.
    """
    if state.phase == Phase.FINISHED:
        logger.debug("Ignoring advance on a finished session")
        return state

    history = state.history
    if state.phase == Phase.GUESSING:
        pitch = state.current_pitch
        history = (
            *history,
            AnswerRecord(round=state.round, pitch=pitch.name, expected=pitch.display_label),
        )

    if state.is_last_round:
        return state.evolve(
            phase=Phase.FINISHED,
            feedback_kind=FeedbackKind.NONE,
            expected_label=None,
            reveal=None,
            user_input="",
            history=history,
        )

    rng = rng or random.Random()
    return state.evolve(
        round=state.round + 1,
        current_pitch=profile.generate(rng),
        phase=Phase.GUESSING,
        feedback_kind=FeedbackKind.NONE,
        expected_label=None,
        reveal=None,
        user_input="",
        history=history,
    )


def restart(
    state: SessionState,
    profile: RangeProfile,
    rng: random.Random | None = None,
) -> SessionState:
    """Start over on round 1 with score 0. Valid from any phase."""
    rng = rng or random.Random()
    return state.evolve(
        profile_name=profile.name,
        max_input_length=profile.max_input_length,
        round=1,
        score=0,
        current_pitch=profile.generate(rng),
        phase=Phase.GUESSING,
        feedback_kind=FeedbackKind.NONE,
        expected_label=None,
        reveal=None,
        user_input="",
        history=(),
    )


def summary(state: SessionState) -> SessionSummary:
    """Tally the rounds played so far."""
    correct = sum(1 for r in state.history if r.correct is True)
    wrong = sum(1 for r in state.history if r.correct is False)
    skipped = sum(1 for r in state.history if r.correct is None)
    return SessionSummary(
        score=state.score,
        total_rounds=state.total_rounds,
        rounds_played=len(state.history),
        correct=correct,
        wrong=wrong,
        skipped=skipped,
    )
