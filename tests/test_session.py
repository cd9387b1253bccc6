"""
Tests for quiz sessions.

Tests cover:
- Pure transitions (create, type, submit, advance, restart, summary)
- QuizController auto-advance timing and stale timers
- SessionManager operations
"""

import asyncio
import random

import pytest

from staff_drill.constants import FeedbackKind, Phase
from staff_drill.core import Letter, Pitch
from staff_drill.models import FixedSetProfile, ProfileError, TimingConfig
from staff_drill.profiles import ProfileLoader
from staff_drill.session import (
    AsyncioScheduler,
    ManualScheduler,
    QuizController,
    SessionManager,
    advance,
    create_session,
    enter_text,
    erase,
    restart,
    submit_answer,
    summary,
)


def wrong_letter(label: str) -> str:
    """Some letter answer that does not match label."""
    return next(letter.name for letter in Letter if letter.name != label)


class TestCreateSession:
    """Tests for create_session."""

    def test_initial_state(self, grand_staff, rng: random.Random) -> None:
        state = create_session(grand_staff, 10, rng)
        assert state.round == 1
        assert state.score == 0
        assert state.phase == Phase.GUESSING
        assert state.feedback_kind == FeedbackKind.NONE
        assert state.user_input == ""
        assert state.total_rounds == 10
        assert grand_staff.contains(state.current_pitch)

    def test_default_rounds(self, grand_staff) -> None:
        assert create_session(grand_staff).total_rounds == 10

    def test_zero_rounds_fails_fast(self, grand_staff) -> None:
        with pytest.raises(ProfileError):
            create_session(grand_staff, 0)

    def test_empty_profile_fails_fast(self) -> None:
        with pytest.raises(ProfileError):
            create_session(FixedSetProfile(name="empty"))

    def test_unanswerable_profile_fails_fast(self) -> None:
        profile = FixedSetProfile(
            name="short-input",
            entries=(Pitch(Letter.B, 3, display_label="G2"),),
        )
        with pytest.raises(ProfileError, match="LABEL_TOO_LONG|longer"):
            create_session(profile)


class TestInput:
    """Tests for the answer buffer."""

    def test_upper_cases(self, middle_c_only) -> None:
        state = enter_text(create_session(middle_c_only), "c")
        assert state.user_input == "C"

    def test_max_length(self, middle_c_only, violin_fingering) -> None:
        state = enter_text(create_session(middle_c_only), "cd")
        assert state.user_input == "C"

        state = enter_text(create_session(violin_fingering), "g")
        state = enter_text(state, "2x")
        assert state.user_input == "G2"

    def test_full_buffer_is_unchanged(self, middle_c_only) -> None:
        state = enter_text(create_session(middle_c_only), "c")
        assert enter_text(state, "d") is state

    def test_whitespace_dropped(self, violin_fingering) -> None:
        state = enter_text(create_session(violin_fingering), " g 2 ")
        assert state.user_input == "G2"

    def test_erase(self, violin_fingering) -> None:
        state = enter_text(create_session(violin_fingering), "g2")
        assert erase(state).user_input == "G"
        empty = create_session(violin_fingering)
        assert erase(empty) is empty

    def test_ignored_outside_guessing(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only), "c")
        assert enter_text(state, "d") is state
        assert erase(state) is state


class TestSubmitAnswer:
    """Tests for submit_answer."""

    def test_correct_answer(self, grand_staff, rng: random.Random) -> None:
        """Lower-case 'c' against C4 scores a point."""
        state = create_session(grand_staff, 10, rng).model_copy(
            update={"current_pitch": Pitch(Letter.C, 4)}
        )
        state = submit_answer(state, "c")
        assert state.phase == Phase.FEEDBACK
        assert state.feedback_kind == FeedbackKind.CORRECT
        assert state.score == 1
        assert state.feedback_message == "Correct!"

    def test_wrong_answer(self, grand_staff, rng: random.Random) -> None:
        """'d' against C4 reveals the expected label."""
        state = create_session(grand_staff, 10, rng).model_copy(
            update={"current_pitch": Pitch(Letter.C, 4)}
        )
        state = submit_answer(state, "d")
        assert state.phase == Phase.FEEDBACK
        assert state.feedback_kind == FeedbackKind.WRONG
        assert state.expected_label == "C"
        assert state.reveal == "C4"
        assert state.score == 0
        assert state.feedback_message == "Wrong! It was C"

    def test_uses_buffer_by_default(self, middle_c_only) -> None:
        state = enter_text(create_session(middle_c_only), "c")
        state = submit_answer(state)
        assert state.feedback_kind == FeedbackKind.CORRECT
        assert state.user_input == ""

    def test_trims_input(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only), "  c ")
        assert state.feedback_kind == FeedbackKind.CORRECT

    def test_blank_is_noop(self, middle_c_only) -> None:
        """Blank answers change nothing, including the buffer."""
        state = create_session(middle_c_only)
        assert submit_answer(state, "   ") is state
        assert submit_answer(state, "") is state
        assert submit_answer(state) is state

    def test_blank_keeps_buffer(self, violin_fingering) -> None:
        state = enter_text(create_session(violin_fingering), "g")
        assert submit_answer(state, " ") is state
        assert state.user_input == "G"

    def test_submit_in_feedback_is_noop(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only), "c")
        assert submit_answer(state, "c") is state
        assert state.score == 1

    def test_fingering_label_must_match_exactly(self) -> None:
        """'g2' matches G2; 'g' does not."""
        profile = FixedSetProfile(
            name="g2",
            max_input_length=2,
            entries=(Pitch(Letter.B, 3, display_label="G2"),),
        )
        state = create_session(profile)
        assert state.current_pitch.display_label == "G2"

        assert submit_answer(state, "g2").feedback_kind == FeedbackKind.CORRECT
        assert submit_answer(state, "g").feedback_kind == FeedbackKind.WRONG
        assert submit_answer(state, "G2").score == 1

    def test_history_records_answer(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only), "e")
        record = state.history[-1]
        assert record.round == 1
        assert record.pitch == "C4"
        assert record.expected == "C"
        assert record.given == "E"
        assert record.correct is False

    def test_generation_increases(self, middle_c_only) -> None:
        state = create_session(middle_c_only)
        assert submit_answer(state, "c").generation > state.generation


class TestAdvance:
    """Tests for advance and restart."""

    def test_next_round(self, grand_staff, rng: random.Random) -> None:
        state = submit_answer(create_session(grand_staff, 10, rng), "C")
        state = advance(state, grand_staff, rng)
        assert state.round == 2
        assert state.phase == Phase.GUESSING
        assert state.feedback_kind == FeedbackKind.NONE
        assert state.expected_label is None
        assert state.user_input == ""
        assert grand_staff.contains(state.current_pitch)

    def test_score_kept_after_advance(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only), "c")
        state = advance(state, middle_c_only)
        assert state.round == 2
        assert state.score == 1

    def test_rounds_to_finished(self, grand_staff, rng: random.Random) -> None:
        """total_rounds - 1 advances reach the last round; one more finishes."""
        state = create_session(grand_staff, 10, rng)
        for _ in range(9):
            state = advance(state, grand_staff, rng)
        assert state.round == 10
        assert state.phase == Phase.GUESSING

        state = advance(state, grand_staff, rng)
        assert state.phase == Phase.FINISHED
        assert state.round == 10

    def test_advance_when_finished_is_noop(self, middle_c_only) -> None:
        state = advance(create_session(middle_c_only, 1), middle_c_only)
        assert state.phase == Phase.FINISHED
        assert state.is_finished
        assert advance(state, middle_c_only) is state

    def test_is_finished_only_at_end(self, middle_c_only) -> None:
        state = create_session(middle_c_only, 2)
        assert not state.is_finished
        state = advance(submit_answer(state, "c"), middle_c_only)
        assert not state.is_finished
        assert advance(state, middle_c_only).is_finished

    def test_skip_recorded(self, middle_c_only) -> None:
        state = advance(create_session(middle_c_only), middle_c_only)
        record = state.history[-1]
        assert record.given is None
        assert record.correct is None

    def test_score_never_decreases(self, grand_staff, rng: random.Random) -> None:
        """Score moves by exactly one, only on a match."""
        state = create_session(grand_staff, 50, rng)
        while state.phase != Phase.FINISHED:
            label = state.current_pitch.display_label
            answer = label if rng.random() < 0.5 else wrong_letter(label)
            before = state.score
            state = submit_answer(state, answer)
            assert state.score == before + (1 if answer == label else 0)
            state = advance(state, grand_staff, rng)
        assert state.score == sum(1 for r in state.history if r.correct)

    def test_restart(self, middle_c_only) -> None:
        state = submit_answer(create_session(middle_c_only, 3), "c")
        state = advance(advance(state, middle_c_only), middle_c_only)
        state = restart(state, middle_c_only)
        assert state.round == 1
        assert state.score == 0
        assert state.phase == Phase.GUESSING
        assert state.history == ()

    def test_restart_from_feedback(self, middle_c_only) -> None:
        state = restart(submit_answer(create_session(middle_c_only), "d"), middle_c_only)
        assert state.phase == Phase.GUESSING
        assert state.feedback_kind == FeedbackKind.NONE
        assert state.expected_label is None

    def test_summary(self, middle_c_only) -> None:
        state = create_session(middle_c_only, 3)
        state = advance(submit_answer(state, "c"), middle_c_only)
        state = advance(submit_answer(state, "d"), middle_c_only)
        state = advance(state, middle_c_only)

        result = summary(state)
        assert state.phase == Phase.FINISHED
        assert result.score == 1
        assert result.correct == 1
        assert result.wrong == 1
        assert result.skipped == 1
        assert result.accuracy == 0.5
        assert str(result) == "Final Score: 1 / 3"


class TestQuizController:
    """Tests for QuizController timing and ownership."""

    def test_accessors(self, middle_c_only, scheduler: ManualScheduler) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        assert controller.round == 1
        assert controller.score == 0
        assert controller.phase == Phase.GUESSING
        assert controller.feedback_kind == FeedbackKind.NONE
        assert controller.current_pitch.name == "C4"
        assert controller.user_input == ""
        assert controller.geometry.note_y == 130

    def test_correct_advances_after_short_delay(
        self, middle_c_only, scheduler: ManualScheduler
    ) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        controller.type_text("c")
        controller.submit()
        assert controller.phase == Phase.FEEDBACK
        assert controller.has_pending_advance

        scheduler.advance(0.4)
        assert controller.phase == Phase.FEEDBACK

        scheduler.advance(0.1)
        assert controller.phase == Phase.GUESSING
        assert controller.round == 2
        assert controller.score == 1
        assert not controller.has_pending_advance

    def test_wrong_waits_longer(self, middle_c_only, scheduler: ManualScheduler) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        controller.submit("d")

        scheduler.advance(0.5)
        assert controller.phase == Phase.FEEDBACK
        assert controller.state.expected_label == "C"

        scheduler.advance(2.5)
        assert controller.phase == Phase.GUESSING
        assert controller.round == 2
        assert controller.score == 0

    def test_restart_invalidates_pending_advance(
        self, grand_staff, scheduler: ManualScheduler, rng: random.Random
    ) -> None:
        """A restart before the long timer fires keeps the new session at round 1."""
        controller = QuizController(grand_staff, scheduler=scheduler, rng=rng, auto_advance=True)
        controller.submit(wrong_letter(controller.current_pitch.display_label))
        assert controller.feedback_kind == FeedbackKind.WRONG

        controller.restart()
        # Fire the old timer even though it was cancelled
        scheduler.fire_all()
        scheduler.advance(10)

        assert controller.round == 1
        assert controller.score == 0
        assert controller.phase == Phase.GUESSING

    def test_manual_advance_invalidates_pending(
        self, middle_c_only, scheduler: ManualScheduler
    ) -> None:
        """The timer firing after a manual next is ignored."""
        controller = QuizController(middle_c_only, scheduler=scheduler)
        controller.submit("c")
        controller.advance()
        assert controller.round == 2

        scheduler.fire_all()
        assert controller.round == 2
        assert controller.phase == Phase.GUESSING

    def test_manual_profile_has_no_timer(self, grand_staff, scheduler: ManualScheduler) -> None:
        controller = QuizController(grand_staff, scheduler=scheduler)
        controller.submit("c")
        assert controller.phase == Phase.FEEDBACK
        assert not scheduler.pending

        controller.advance()
        assert controller.round == 2

    def test_finishes_after_last_round(self, middle_c_only, scheduler: ManualScheduler) -> None:
        controller = QuizController(middle_c_only, total_rounds=2, scheduler=scheduler)
        controller.submit("c")
        scheduler.advance(0.5)
        controller.submit("c")
        scheduler.advance(0.5)

        assert controller.phase == Phase.FINISHED
        assert controller.round == 2
        assert controller.summary().score == 2

    def test_listeners(self, middle_c_only, scheduler: ManualScheduler) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        seen = []
        unsubscribe = controller.subscribe(seen.append)

        controller.type_text("c")
        controller.submit(" ")  # ignored, no notification
        controller.submit()
        assert [s.phase for s in seen] == [Phase.GUESSING, Phase.FEEDBACK]

        unsubscribe()
        scheduler.advance(0.5)
        assert len(seen) == 2

    def test_close_cancels_timer(self, middle_c_only, scheduler: ManualScheduler) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        controller.submit("c")
        controller.close()
        assert not scheduler.pending
        assert not controller.has_pending_advance

    def test_unsubscribe_after_close(self, middle_c_only, scheduler: ManualScheduler) -> None:
        """Unsubscribing is safe after close and when repeated."""
        controller = QuizController(middle_c_only, scheduler=scheduler)
        unsubscribe = controller.subscribe(lambda state: None)
        controller.close()
        unsubscribe()
        unsubscribe()

    def test_unsubscribe_twice_keeps_other_listeners(
        self, middle_c_only, scheduler: ManualScheduler
    ) -> None:
        controller = QuizController(middle_c_only, scheduler=scheduler)
        seen = []
        unsubscribe = controller.subscribe(lambda state: None)
        controller.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        controller.type_text("c")
        assert len(seen) == 1

    def test_stale_timer_clears_pending(self, middle_c_only, scheduler: ManualScheduler) -> None:
        """A timer that fires after the state moved on still releases its handle."""
        controller = QuizController(middle_c_only, scheduler=scheduler)
        controller.submit("c")
        assert controller.has_pending_advance

        # Move the state on without going through advance/restart
        controller._state = controller.state.evolve()
        scheduler.advance(0.5)

        assert not controller.has_pending_advance
        assert controller.round == 1
        assert controller.phase == Phase.FEEDBACK

    def test_bad_config(self, middle_c_only, scheduler: ManualScheduler) -> None:
        with pytest.raises(ProfileError):
            QuizController(middle_c_only, total_rounds=-1, scheduler=scheduler)

    @pytest.mark.asyncio
    async def test_asyncio_scheduler(self) -> None:
        """Auto-advance runs on the event loop."""
        profile = FixedSetProfile(
            name="quick",
            entries=(Pitch(Letter.C, 4),),
            timing=TimingConfig(correct_delay=0.01, wrong_delay=0.02),
        )
        controller = QuizController(profile, scheduler=AsyncioScheduler())
        controller.submit("c")
        assert controller.phase == Phase.FEEDBACK

        await asyncio.sleep(0.1)
        assert controller.round == 2
        assert controller.phase == Phase.GUESSING


class TestSessionManager:
    """Tests for SessionManager."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        controller = await manager.create("practice", "violin-fingering")
        assert await manager.get("practice") is controller
        assert controller.state.profile_name == "violin-fingering"
        assert controller.state.max_input_length == 2

    @pytest.mark.asyncio
    async def test_duplicate_name(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        await manager.create("practice", "grand-staff")
        with pytest.raises(ValueError):
            await manager.create("practice", "grand-staff")

    @pytest.mark.asyncio
    async def test_unknown_profile(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        with pytest.raises(ValueError):
            await manager.create("practice", "nonexistent")

    @pytest.mark.asyncio
    async def test_unknown_session(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        assert await manager.get("missing") is None
        with pytest.raises(ValueError):
            await manager.submit("missing", "C")

    @pytest.mark.asyncio
    async def test_list_sessions(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        await manager.create("one", "grand-staff")
        await manager.create("two", "violin-range", total_rounds=5)

        sessions = {s.name: s for s in await manager.list_sessions()}
        assert set(sessions) == {"one", "two"}
        assert sessions["two"].total_rounds == 5
        assert sessions["one"].phase == "guessing"

    @pytest.mark.asyncio
    async def test_play_through(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        controller = await manager.create("practice", "violin-fingering", total_rounds=2)

        await manager.type_text("practice", controller.current_pitch.display_label.lower())
        state = await manager.submit("practice")
        assert state.feedback_kind == FeedbackKind.CORRECT

        scheduler.advance(0.5)
        assert controller.round == 2

        await manager.advance("practice")
        assert controller.phase == Phase.FINISHED

        state = await manager.restart("practice")
        assert state.round == 1
        assert state.score == 0

    @pytest.mark.asyncio
    async def test_delete_cancels_timer(self, loader: ProfileLoader, scheduler: ManualScheduler):
        manager = SessionManager(loader, scheduler=scheduler)
        await manager.create("practice", "violin-range")
        await manager.submit("practice", "X")
        assert scheduler.pending

        assert await manager.delete("practice") is True
        assert not scheduler.pending
        assert await manager.delete("practice") is False
