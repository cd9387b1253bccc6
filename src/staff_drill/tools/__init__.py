"""
MCP tool implementations.

Tools are organized by domain:
- profiles - Profile discovery and staff previews
- session - Playing a drill session
"""

from staff_drill.tools.profiles import register_profile_tools
from staff_drill.tools.session import register_session_tools

__all__ = [
    "register_profile_tools",
    "register_session_tools",
]
