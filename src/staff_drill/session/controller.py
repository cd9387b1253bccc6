"""
Quiz Controller - the single owner of a running drill session.

Wraps the pure transitions with the parts that need an owner:
- the random source
- the auto-advance timer after feedback
- listeners that redraw when the state changes
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from staff_drill.constants import DEFAULT_TOTAL_ROUNDS, FeedbackKind, Phase
from staff_drill.core.layout import StaffGeometry, compute_geometry
from staff_drill.core.pitch import Pitch
from staff_drill.models.profile import RangeProfile
from staff_drill.models.session import SessionState, SessionSummary
from staff_drill.session import transitions
from staff_drill.session.timer import AsyncioScheduler, Scheduler, TimerHandle

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class QuizController:
    """
    Drives one session through its rounds.

    After an answer the controller schedules an advance: quickly after a
    correct answer, slowly after a wrong one so the reveal can be read.
    The scheduled advance remembers the state generation it was scheduled
    for and does nothing if the state has moved on by the time it fires.
    """

    def __init__(
        self,
        profile: RangeProfile,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        auto_advance: bool | None = None,
    ):
        """
        Initialize the controller and start round 1.

        Args:
            profile: Profile to draw pitches from
            total_rounds: Rounds before the session finishes
            scheduler: Timer source (asyncio loop if omitted)
            rng: Random source
            auto_advance: Override the profile's auto_advance setting

        Raises:
            ProfileError: If the configuration is unusable
        """
        self.profile = profile
        self.scheduler = scheduler or AsyncioScheduler()
        self.rng = rng or random.Random()
        self.auto_advance = profile.auto_advance if auto_advance is None else auto_advance
        self._listeners: list[StateListener] = []
        self._pending: TimerHandle | None = None
        self._pending_generation: int | None = None
        self._state = transitions.create_session(profile, total_rounds, self.rng)

    # Read accessors

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def round(self) -> int:
        return self._state.round

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def feedback_kind(self) -> FeedbackKind:
        return self._state.feedback_kind

    @property
    def current_pitch(self) -> Pitch:
        return self._state.current_pitch

    @property
    def user_input(self) -> str:
        return self._state.user_input

    @property
    def geometry(self) -> StaffGeometry:
        """Staff positions for the current pitch."""
        return compute_geometry(self._state.current_pitch, self.profile.layout)

    @property
    def has_pending_advance(self) -> bool:
        return self._pending is not None

    def summary(self) -> SessionSummary:
        return transitions.summary(self._state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call listener with the new state after every change.

        Returns:
            A function that removes the listener; safe to call more than
            once and after close()
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Input events

    def type_text(self, text: str) -> SessionState:
        """Append keystrokes to the answer buffer."""
        return self._apply(transitions.enter_text(self._state, text))

    def backspace(self) -> SessionState:
        return self._apply(transitions.erase(self._state))

    def submit(self, raw: str | None = None) -> SessionState:
        """Score the buffered (or given) answer and schedule the next round."""
        state = self._apply(transitions.submit_answer(self._state, raw))
        if state.phase == Phase.FEEDBACK and self.auto_advance and self._pending is None:
            self._schedule_advance(state)
        return state

    def advance(self) -> SessionState:
        """Go to the next round now (the manual "next" button)."""
        self._cancel_pending()
        return self._apply(transitions.advance(self._state, self.profile, self.rng))

    def restart(self) -> SessionState:
        """Start over from round 1, dropping any pending advance."""
        self._cancel_pending()
        return self._apply(transitions.restart(self._state, self.profile, self.rng))

    def close(self) -> None:
        """Cancel pending timers and drop listeners."""
        self._cancel_pending()
        self._listeners.clear()

    # Internals

    def _apply(self, new_state: SessionState) -> SessionState:
        if new_state is self._state:
            return new_state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def _schedule_advance(self, state: SessionState) -> None:
        if state.feedback_kind == FeedbackKind.CORRECT:
            delay = self.profile.timing.correct_delay
        else:
            delay = self.profile.timing.wrong_delay

        logger.debug(
            "Scheduling advance in %.2fs (round %d, generation %d)",
            delay,
            state.round,
            state.generation,
        )
        self._pending = self.scheduler.call_later(delay, self._on_timer, state.generation)
        self._pending_generation = state.generation

    def _on_timer(self, generation: int) -> None:
        if generation == self._pending_generation:
            # The handle that fired is the one we hold
            self._pending = None
            self._pending_generation = None

        if generation != self._state.generation or self._state.phase != Phase.FEEDBACK:
            logger.debug(
                "Dropping stale advance (scheduled for generation %d, now %d)",
                generation,
                self._state.generation,
            )
            return
        self._apply(transitions.advance(self._state, self.profile, self.rng))

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
            self._pending_generation = None
