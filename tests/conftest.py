from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from plugins_mcp.models import PluginSpec
from plugins_mcp.paths import ClaudePaths


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def build_claude_dir(root: Path) -> ClaudePaths:
    """
    Lay out a small Claude installation:

    - plugin "weather-tools" (MCP server "weather", skill "forecast")
    - plugin "git-helpers" (no plugin.json, bare .mcp.json map with server "git")
    - user skill "release-notes" without frontmatter
    """
    claude_dir = root / ".claude"
    cache = claude_dir / "plugins" / "cache"
    weather = cache / "weather-tools"
    git = cache / "git-helpers"

    registry = {
        "version": 2,
        "plugins": {
            "weather-tools@community": [
                {
                    "scope": "user",
                    "installPath": str(weather),
                    "version": "1.2.0",
                    "installedAt": "2026-01-01T00:00:00Z",
                    "lastUpdated": "2026-02-01T00:00:00Z",
                },
                {
                    "scope": "user",
                    "installPath": str(cache / "weather-tools-old"),
                    "version": "1.0.0",
                    "installedAt": "2025-01-01T00:00:00Z",
                    "lastUpdated": "2025-01-01T00:00:00Z",
                },
            ],
            "git-helpers@community": [
                {
                    "scope": "project",
                    "installPath": str(git),
                    "version": "0.3.0",
                    "installedAt": "2026-01-05T00:00:00Z",
                    "lastUpdated": "2026-01-05T00:00:00Z",
                }
            ],
        },
    }
    _write(claude_dir / "plugins" / "installed_plugins.json", json.dumps(registry))

    _write(
        weather / ".claude-plugin" / "plugin.json",
        json.dumps(
            {
                "name": "weather-tools",
                "description": "Forecasts and alerts",
                "keywords": ["weather", "forecast"],
                "author": {"name": "Ada"},
            }
        ),
    )
    _write(
        weather / ".mcp.json",
        json.dumps(
            {"mcpServers": {"weather": {"command": "node", "args": ["dist/index.js"]}}}
        ),
    )
    _write(
        weather / "skills" / "forecast" / "SKILL.md",
        "---\nname: forecast\ndescription: Read a weather forecast\n---\n\n"
        "Use the barometer readings to predict rain.\n",
    )

    _write(
        git / ".mcp.json",
        json.dumps({"git": {"type": "http", "url": "http://localhost:9000/mcp"}}),
    )

    _write(
        claude_dir / "skills" / "release-notes" / "SKILL.md",
        "# Release notes writer\n\nSummarize merged pull requests.\n",
    )

    return ClaudePaths(
        claude_dir=claude_dir,
        plugins_registry=claude_dir / "plugins" / "installed_plugins.json",
        user_skills_dir=claude_dir / "skills",
    )


@pytest.fixture
def claude_paths(tmp_path: Path) -> ClaudePaths:
    return build_claude_dir(tmp_path)


@pytest.fixture
def empty_claude_paths(tmp_path: Path) -> ClaudePaths:
    claude_dir = tmp_path / "empty-claude"
    return ClaudePaths(
        claude_dir=claude_dir,
        plugins_registry=claude_dir / "plugins" / "installed_plugins.json",
        user_skills_dir=claude_dir / "skills",
    )


@pytest.fixture
def make_spec(tmp_path: Path) -> Callable[..., PluginSpec]:
    """Build a PluginSpec writing under tmp_path/out; keyword overrides use wire (camelCase) keys."""

    def _make(**overrides: Any) -> PluginSpec:
        data: dict[str, Any] = {
            "name": "my-plugin",
            "description": "Does useful things",
            "outputPath": str(tmp_path / "out"),
            "components": {},
        }
        data.update(overrides)
        return PluginSpec.model_validate(data)

    return _make
