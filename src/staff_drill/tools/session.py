"""
Session tools - MCP tools for playing a drill.

Tools for starting sessions, typing and submitting answers, and moving
between rounds. Every session payload carries the staff geometry, so a
renderer can draw the current note without knowing the pitch model.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from staff_drill.constants import DEFAULT_TOTAL_ROUNDS, FeedbackKind, SuccessMessages
from staff_drill.session import QuizController, SessionManager

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def session_payload(name: str, controller: QuizController) -> dict[str, Any]:
    """Build the JSON body describing a session and its staff."""
    state = controller.state
    payload: dict[str, Any] = {
        "name": name,
        **state.to_dict(),
        "pending_advance": controller.has_pending_advance,
        "geometry": controller.geometry.to_dict(),
        "layout": controller.profile.layout.to_dict(),
    }
    if state.is_finished:
        result = controller.summary()
        payload["summary"] = {
            **result.model_dump(),
            "accuracy": result.accuracy,
            "message": str(result),
        }
    return payload


def register_session_tools(
    mcp: ChukMCPServer,
    manager: SessionManager,
) -> dict[str, Any]:
    """
    Register session tools with the MCP server.

    Args:
        mcp: The MCP server instance
        manager: The session manager

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}

    @mcp.tool  # type: ignore[arg-type]
    async def drill_start_session(
        name: str,
        profile: str = "grand-staff",
        total_rounds: int = DEFAULT_TOTAL_ROUNDS,
        auto_advance: bool | None = None,
    ) -> str:
        """
        Start a new drill session.

        Draws the first note and returns where to draw it.

        Args:
            name: Unique name for the session
            profile: Profile name ('grand-staff', 'violin-range', 'violin-fingering')
            total_rounds: Number of rounds (default: 10)
            auto_advance: Override whether feedback advances on its own

        Returns:
            JSON string with the session state and staff geometry

        Example:
            drill_start_session(name="practice", profile="violin-fingering")
        """
        try:
            controller = await manager.create(
                name=name,
                profile=profile,
                total_rounds=total_rounds,
                auto_advance=auto_advance,
            )
            logger.info(SuccessMessages.SESSION_STARTED.format(name=name, profile=profile))

            return json.dumps({"status": "success", "session": session_payload(name, controller)})
        except Exception as e:
            logger.exception("Failed to start session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_start_session"] = drill_start_session

    @mcp.tool  # type: ignore[arg-type]
    async def drill_get_session(name: str) -> str:
        """
        Get the current state of a session.

        Args:
            name: Session name

        Returns:
            JSON string with the session state and staff geometry

        Example:
            drill_get_session(name="practice")
        """
        try:
            controller = await manager.get(name)
            if controller is None:
                return json.dumps({"status": "error", "message": f"Session not found: {name}"})

            return json.dumps({"status": "success", "session": session_payload(name, controller)})
        except Exception as e:
            logger.exception("Failed to get session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_get_session"] = drill_get_session

    @mcp.tool  # type: ignore[arg-type]
    async def drill_list_sessions() -> str:
        """
        List running sessions.

        Returns:
            JSON string with list of session summaries

        Example:
            drill_list_sessions()
        """
        try:
            sessions = await manager.list_sessions()

            return json.dumps(
                {
                    "status": "success",
                    "sessions": [
                        {
                            "name": s.name,
                            "profile": s.profile,
                            "round": s.round,
                            "total_rounds": s.total_rounds,
                            "score": s.score,
                            "phase": s.phase,
                            "started": s.started.isoformat(),
                        }
                        for s in sessions
                    ],
                    "count": len(sessions),
                }
            )
        except Exception as e:
            logger.exception("Failed to list sessions")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_list_sessions"] = drill_list_sessions

    @mcp.tool  # type: ignore[arg-type]
    async def drill_type(name: str, text: str) -> str:
        """
        Type characters into the answer box.

        Characters are upper-cased and cut off at the profile's input length.
        Ignored unless the session is waiting for an answer.

        Args:
            name: Session name
            text: Characters to append

        Returns:
            JSON string with the session state

        Example:
            drill_type(name="practice", text="g")
        """
        try:
            await manager.type_text(name, text)
            controller = await manager.require(name)

            return json.dumps({"status": "success", "session": session_payload(name, controller)})
        except Exception as e:
            logger.exception("Failed to type into session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_type"] = drill_type

    @mcp.tool  # type: ignore[arg-type]
    async def drill_submit_answer(name: str, answer: str | None = None) -> str:
        """
        Submit an answer for the current note.

        Without an answer, the typed input is submitted. Blank answers are
        ignored. Matching is case-insensitive.

        Args:
            name: Session name
            answer: Answer text (e.g., 'C' or 'G2')

        Returns:
            JSON string with the feedback and session state

        Example:
            drill_submit_answer(name="practice", answer="g2")
        """
        try:
            before = (await manager.require(name)).state
            state = await manager.submit(name, answer)
            controller = await manager.require(name)
            accepted = state is not before

            return json.dumps(
                {
                    "status": "success",
                    "accepted": accepted,
                    "correct": state.feedback_kind == FeedbackKind.CORRECT if accepted else None,
                    "session": session_payload(name, controller),
                }
            )
        except Exception as e:
            logger.exception("Failed to submit answer")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_submit_answer"] = drill_submit_answer

    @mcp.tool  # type: ignore[arg-type]
    async def drill_advance(name: str) -> str:
        """
        Go to the next note (the "next" button).

        From the last round, this finishes the session and reports the
        final score.

        Args:
            name: Session name

        Returns:
            JSON string with the session state

        Example:
            drill_advance(name="practice")
        """
        try:
            await manager.advance(name)
            controller = await manager.require(name)

            return json.dumps({"status": "success", "session": session_payload(name, controller)})
        except Exception as e:
            logger.exception("Failed to advance session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_advance"] = drill_advance

    @mcp.tool  # type: ignore[arg-type]
    async def drill_restart(name: str) -> str:
        """
        Start a session over from round 1 with score 0.

        Args:
            name: Session name

        Returns:
            JSON string with the session state

        Example:
            drill_restart(name="practice")
        """
        try:
            await manager.restart(name)
            controller = await manager.require(name)

            return json.dumps({"status": "success", "session": session_payload(name, controller)})
        except Exception as e:
            logger.exception("Failed to restart session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_restart"] = drill_restart

    @mcp.tool  # type: ignore[arg-type]
    async def drill_end_session(name: str) -> str:
        """
        End a session and discard it.

        Args:
            name: Session name

        Returns:
            JSON string with the final summary

        Example:
            drill_end_session(name="practice")
        """
        try:
            controller = await manager.require(name)
            result = controller.summary()
            await manager.delete(name)

            return json.dumps(
                {
                    "status": "success",
                    "message": SuccessMessages.SESSION_ENDED.format(name=name),
                    "summary": {**result.model_dump(), "accuracy": result.accuracy},
                }
            )
        except Exception as e:
            logger.exception("Failed to end session")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_end_session"] = drill_end_session

    return tools
