"""
Session Manager - handles named drill sessions.

Provides async operations for starting, looking up, driving and ending
sessions. Sessions live in memory only; scores are not kept once a
session ends.
"""

from __future__ import annotations

import random
from datetime import UTC, datetime

from staff_drill.constants import DEFAULT_TOTAL_ROUNDS, ErrorMessages
from staff_drill.models.session import SessionState
from staff_drill.profiles.loader import ProfileLoader
from staff_drill.session.controller import QuizController
from staff_drill.session.timer import Scheduler


class SessionMetadata:
    """Lightweight metadata for listing sessions."""

    def __init__(
        self,
        name: str,
        profile: str,
        round: int,
        total_rounds: int,
        score: int,
        phase: str,
        started: datetime,
    ):
        self.name = name
        self.profile = profile
        self.round = round
        self.total_rounds = total_rounds
        self.score = score
        self.phase = phase
        self.started = started

    def __repr__(self) -> str:
        return f"SessionMetadata({self.name!r}, {self.profile}, {self.round}/{self.total_rounds})"


class SessionManager:
    """
    Manages running drill sessions by name.

    Each session is owned by one QuizController; the manager only keeps
    track of them and forwards events.
    """

    def __init__(
        self,
        loader: ProfileLoader,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the manager.

        Args:
            loader: Where profiles are looked up by name
            scheduler: Timer source shared by all controllers
            rng: Random source shared by all controllers
        """
        self.loader = loader
        self.scheduler = scheduler
        self.rng = rng
        self._sessions: dict[str, QuizController] = {}
        self._started: dict[str, datetime] = {}

    async def create(
        self,
        name: str,
        profile: str,
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        auto_advance: bool | None = None,
    ) -> QuizController:
        """
        Start a new session.

        Args:
            name: Session name
            profile: Profile name (e.g., 'grand-staff')
            total_rounds: Rounds before the session finishes
            auto_advance: Override the profile's auto_advance setting

        Returns:
            The controller for the new session
        """
        if name in self._sessions:
            raise ValueError(ErrorMessages.SESSION_EXISTS.format(name=name))

        range_profile = self.loader.get_profile(profile)
        if range_profile is None:
            raise ValueError(ErrorMessages.PROFILE_NOT_FOUND.format(name=profile))

        controller = QuizController(
            range_profile,
            total_rounds=total_rounds,
            scheduler=self.scheduler,
            rng=self.rng,
            auto_advance=auto_advance,
        )
        self._sessions[name] = controller
        self._started[name] = datetime.now(UTC)
        return controller

    async def get(self, name: str) -> QuizController | None:
        """
        Get a session by name.

        Args:
            name: Session name

        Returns:
            The controller or None if not found
        """
        return self._sessions.get(name)

    async def require(self, name: str) -> QuizController:
        """Get a session by name, raising ValueError if it does not exist."""
        controller = await self.get(name)
        if controller is None:
            raise ValueError(ErrorMessages.SESSION_NOT_FOUND.format(name=name))
        return controller

    async def list_sessions(self) -> list[SessionMetadata]:
        """
        List all running sessions, most recently started first.

        Returns:
            List of session metadata
        """
        result = []
        for name, controller in self._sessions.items():
            state = controller.state
            result.append(
                SessionMetadata(
                    name=name,
                    profile=state.profile_name,
                    round=state.round,
                    total_rounds=state.total_rounds,
                    score=state.score,
                    phase=state.phase.value,
                    started=self._started[name],
                )
            )
        return sorted(result, key=lambda m: m.started, reverse=True)

    async def delete(self, name: str) -> bool:
        """
        End a session and cancel its pending timer.

        Args:
            name: Session name

        Returns:
            True if deleted, False if not found
        """
        controller = self._sessions.pop(name, None)
        if controller is None:
            return False
        controller.close()
        self._started.pop(name, None)
        return True

    # Convenience methods for session events

    async def type_text(self, name: str, text: str) -> SessionState:
        """Append keystrokes to a session's answer buffer."""
        controller = await self.require(name)
        return controller.type_text(text)

    async def submit(self, name: str, answer: str | None = None) -> SessionState:
        """Submit an answer (or the buffered input) to a session."""
        controller = await self.require(name)
        return controller.submit(answer)

    async def advance(self, name: str) -> SessionState:
        """Move a session to its next round."""
        controller = await self.require(name)
        return controller.advance()

    async def restart(self, name: str) -> SessionState:
        """Restart a session from round 1."""
        controller = await self.require(name)
        return controller.restart()
