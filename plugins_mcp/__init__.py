"""
plugins_mcp: FastMCP stdio server package for inspecting and scaffolding Claude Code plugins.

This package provides the server entrypoint, readers for the local plugin installation
registry, and the generators that render new plugin directories (manifest, skills,
commands, agents, hooks and a TypeScript MCP server project).
"""

__version__: str = "0.1.0"

# Server name and root logger name; module loggers are children of it.
SERVER_NAME: str = "ClaudePlugins"


def version() -> str:
    return __version__


__all__: list[str] = ["SERVER_NAME", "__version__", "version"]
