"""
Package entry point for launching the plugins_mcp server module.

This allows running:
  - python -m plugins_mcp            -> invokes plugins_mcp.server CLI
  - python -m plugins_mcp.server     -> also available directly via the server module

The entry point delegates to plugins_mcp.server.cli_main() which supports both
CLI inspection/scaffolding modes and starting the stdio MCP server.
"""

from plugins_mcp.server import cli_main


def main() -> None:
    cli_main()


if __name__ == "__main__":
    main()
