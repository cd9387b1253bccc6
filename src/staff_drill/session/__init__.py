"""
Quiz sessions - the drill state machine.

This module provides:
- transitions: Pure functions from one SessionState to the next
- QuizController: Owns a session, its random source and its advance timer
- SessionManager: Named sessions for the tool surface
- Schedulers: asyncio-backed and manual timer sources
"""

from staff_drill.session.controller import QuizController
from staff_drill.session.manager import SessionManager, SessionMetadata
from staff_drill.session.timer import AsyncioScheduler, ManualScheduler, Scheduler
from staff_drill.session.transitions import (
    advance,
    create_session,
    enter_text,
    erase,
    normalize_answer,
    restart,
    submit_answer,
    summary,
)

__all__ = [
    "AsyncioScheduler",
    "ManualScheduler",
    "QuizController",
    "Scheduler",
    "SessionManager",
    "SessionMetadata",
    "advance",
    "create_session",
    "enter_text",
    "erase",
    "normalize_answer",
    "restart",
    "submit_answer",
    "summary",
]
