"""
Side-effect-free renderers turning one validated component into GeneratedFile records.
"""

from plugins_mcp.generators.agent import generate_agent, generate_agents
from plugins_mcp.generators.command import generate_command, generate_commands
from plugins_mcp.generators.hooks import generate_hooks
from plugins_mcp.generators.manifest import generate_plugin_manifest
from plugins_mcp.generators.mcp_server import generate_mcp_server
from plugins_mcp.generators.skill import generate_skill, generate_skills

__all__: list[str] = [
    "generate_agent",
    "generate_agents",
    "generate_command",
    "generate_commands",
    "generate_hooks",
    "generate_mcp_server",
    "generate_plugin_manifest",
    "generate_skill",
    "generate_skills",
]
