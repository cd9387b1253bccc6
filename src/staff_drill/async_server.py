#!/usr/bin/env python3
"""
Async Staff Drill MCP Server using chuk-mcp-server

This server provides MCP tools for note-reading drills: a note is placed on
a staff, the student types its name, and the session keeps score over a
fixed number of rounds.

The server provides tools for:
- Discovering drill profiles (letter drills, violin fingering drills)
- Previewing where a pitch lands on the staff
- Starting, playing, restarting and ending drill sessions
"""

import logging
import os
from pathlib import Path

from chuk_mcp_server import ChukMCPServer

from staff_drill.profiles import ProfileLoader
from staff_drill.session import SessionManager
from staff_drill.tools import register_profile_tools, register_session_tools

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the MCP server instance
mcp = ChukMCPServer("staff-drill")

# Project profiles come from ./profiles unless STAFF_DRILL_PROFILES_DIR is set
PROFILES_DIR = Path(os.environ.get("STAFF_DRILL_PROFILES_DIR", Path.cwd() / "profiles"))
LIBRARY_PATH = Path(__file__).parent / "profiles" / "library"

# Create managers
profile_loader = ProfileLoader(
    library_path=LIBRARY_PATH,
    project_path=PROFILES_DIR,
)
session_manager = SessionManager(profile_loader)

# Register all tools
profile_tools = register_profile_tools(mcp, profile_loader)
session_tools = register_session_tools(mcp, session_manager)

# Export tool functions for direct access
drill_list_profiles = profile_tools["drill_list_profiles"]
drill_describe_profile = profile_tools["drill_describe_profile"]
drill_preview_pitch = profile_tools["drill_preview_pitch"]

drill_start_session = session_tools["drill_start_session"]
drill_get_session = session_tools["drill_get_session"]
drill_list_sessions = session_tools["drill_list_sessions"]
drill_type = session_tools["drill_type"]
drill_submit_answer = session_tools["drill_submit_answer"]
drill_advance = session_tools["drill_advance"]
drill_restart = session_tools["drill_restart"]
drill_end_session = session_tools["drill_end_session"]

logger.info("Staff Drill MCP Server initialized")
logger.info("  Library path: %s", LIBRARY_PATH)
logger.info("  Project profiles dir: %s", PROFILES_DIR)
