"""
plugins_mcp.paths

Locations of the Claude Code installation state read by the server.

Environment (optional):
- CLAUDE_DIR: override the Claude configuration root (default: ~/.claude)
- CLAUDE_PLUGINS_REGISTRY: override the installed plugins registry file
  (default: <CLAUDE_DIR>/plugins/installed_plugins.json)
- CLAUDE_USER_SKILLS_DIR: override the user skills directory (default: <CLAUDE_DIR>/skills)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_CLAUDE_DIR = Path.home() / ".claude"


@dataclass(frozen=True)
class ClaudePaths:
    claude_dir: Path
    plugins_registry: Path
    user_skills_dir: Path


def _resolve_claude_dir() -> Path:
    """
    function_purpose: Resolve the Claude configuration root from environment or default location.
    """
    env_dir = os.environ.get("CLAUDE_DIR")
    return Path(env_dir).expanduser().resolve() if env_dir else DEFAULT_CLAUDE_DIR


def resolve_claude_paths() -> ClaudePaths:
    """
    function_purpose: Build the set of installation paths, honouring environment overrides.

    Resolved on every call so tests and long-running servers pick up changes to the environment.
    """
    claude_dir = _resolve_claude_dir()
    registry_env = os.environ.get("CLAUDE_PLUGINS_REGISTRY")
    user_skills_env = os.environ.get("CLAUDE_USER_SKILLS_DIR")
    return ClaudePaths(
        claude_dir=claude_dir,
        plugins_registry=(
            Path(registry_env).expanduser().resolve()
            if registry_env
            else claude_dir / "plugins" / "installed_plugins.json"
        ),
        user_skills_dir=(
            Path(user_skills_env).expanduser().resolve()
            if user_skills_env
            else claude_dir / "skills"
        ),
    )
