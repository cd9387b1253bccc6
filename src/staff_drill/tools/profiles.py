"""
Profile tools - MCP tools for discovering drill profiles.

Tools for listing, describing and validating profiles, and for previewing
how a pitch lands on the staff.
"""

from __future__ import annotations

import json
import logging
import random
from typing import TYPE_CHECKING, Any

from staff_drill.constants import Clef
from staff_drill.core.layout import compute_geometry
from staff_drill.core.pitch import Pitch
from staff_drill.profiles import ProfileLoader, validate_profile

if TYPE_CHECKING:
    from chuk_mcp_server import ChukMCPServer

logger = logging.getLogger(__name__)


def register_profile_tools(
    mcp: ChukMCPServer,
    loader: ProfileLoader,
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """
    Register profile tools with the MCP server.

    Args:
        mcp: The MCP server instance
        loader: The profile loader
        rng: Random source for previews

    Returns:
        Dictionary of registered tool functions
    """
    tools: dict[str, Any] = {}
    preview_rng = rng or random.Random()

    @mcp.tool  # type: ignore[arg-type]
    async def drill_list_profiles() -> str:
        """
        List available drill profiles.

        Returns all profiles from the library and project with
        basic metadata.

        Returns:
            JSON string with list of profile summaries

        Example:
            drill_list_profiles()
        """
        try:
            profiles = loader.list_profiles()

            return json.dumps(
                {
                    "status": "success",
                    "profiles": [
                        {
                            "name": p.name,
                            "description": p.description,
                            "kind": p.kind,
                            "clefs": [c.value for c in p.clefs],
                            "pitches": p.domain_size,
                            "max_input_length": p.max_input_length,
                            "auto_advance": p.auto_advance,
                        }
                        for p in profiles
                    ],
                    "count": len(profiles),
                }
            )
        except Exception as e:
            logger.exception("Failed to list profiles")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_list_profiles"] = drill_list_profiles

    @mcp.tool  # type: ignore[arg-type]
    async def drill_describe_profile(name: str) -> str:
        """
        Get detailed information about a profile.

        Returns the full pitch domain with answer labels, timing, layout
        and any validation issues.

        Args:
            name: Profile name

        Returns:
            JSON string with profile details

        Example:
            drill_describe_profile(name="violin-fingering")
        """
        try:
            profile = loader.get_profile(name)
            if profile is None:
                return json.dumps({"status": "error", "message": f"Profile not found: {name}"})

            validation = validate_profile(profile)

            return json.dumps(
                {
                    "status": "success",
                    "profile": {
                        "name": profile.name,
                        "description": profile.description,
                        "kind": profile.kind,
                        "max_input_length": profile.max_input_length,
                        "auto_advance": profile.auto_advance,
                        "timing": profile.timing.model_dump(),
                        "layout": profile.layout.to_dict(),
                        "domain": [
                            {
                                "pitch": p.name,
                                "clef": p.clef.value,
                                "label": p.display_label,
                            }
                            for p in profile.domain()
                        ],
                    },
                    "valid": validation.is_valid,
                    "issues": [
                        {
                            "severity": i.severity.value,
                            "code": i.code,
                            "message": i.message,
                        }
                        for i in validation.issues
                    ],
                }
            )
        except Exception as e:
            logger.exception("Failed to describe profile")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_describe_profile"] = drill_describe_profile

    @mcp.tool  # type: ignore[arg-type]
    async def drill_preview_pitch(
        profile: str,
        pitch: str | None = None,
        clef: str | None = None,
    ) -> str:
        """
        Show where a pitch sits on a profile's staff.

        Without a pitch, draws a random one from the profile.

        Args:
            profile: Profile name (its layout is used)
            pitch: Optional pitch in scientific notation (e.g., 'C4')
            clef: Clef for an explicit pitch ('treble' or 'bass', default treble)

        Returns:
            JSON string with the pitch and its staff geometry

        Example:
            drill_preview_pitch(profile="grand-staff", pitch="E2", clef="bass")
        """
        try:
            range_profile = loader.get_profile(profile)
            if range_profile is None:
                return json.dumps({"status": "error", "message": f"Profile not found: {profile}"})

            if pitch is None:
                chosen = range_profile.generate(preview_rng)
            else:
                chosen = Pitch.parse(pitch, clef=Clef(clef or Clef.TREBLE.value))

            geometry = compute_geometry(chosen, range_profile.layout)

            return json.dumps(
                {
                    "status": "success",
                    "pitch": {
                        "name": chosen.name,
                        "clef": chosen.clef.value,
                        "label": chosen.display_label,
                        "in_profile": any(p.same_note(chosen) for p in range_profile.domain()),
                    },
                    "geometry": geometry.to_dict(),
                    "layout": range_profile.layout.to_dict(),
                }
            )
        except Exception as e:
            logger.exception("Failed to preview pitch")
            return json.dumps({"status": "error", "message": str(e)})

    tools["drill_preview_pitch"] = drill_preview_pitch

    return tools
