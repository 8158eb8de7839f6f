"""
plugins_mcp.conflicts

Naming-collision checks run before a plugin is scaffolded. Every check runs, so a
single report lists all problems at once.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from plugins_mcp.models import (
    ConflictEntry,
    McpServerConfig,
    PluginSpec,
    ResolvedPlugin,
    SkillInfo,
)


class ConflictError(Exception):
    """Scaffolding was rejected because the plugin collides with installed state."""

    def __init__(self, plugin_name: str, conflicts: list[ConflictEntry]):
        self.plugin_name = plugin_name
        self.conflicts = conflicts
        super().__init__(format_conflicts(plugin_name, conflicts))


def check_conflicts(
    spec: PluginSpec,
    *,
    plugins: list[ResolvedPlugin],
    mcp_servers: list[McpServerConfig] | None = None,
    skills: list[SkillInfo] | None = None,
    path_exists: Callable[[Path], bool] = os.path.exists,
) -> list[ConflictEntry]:
    """
    function_purpose: Report collisions between a new plugin and the installation state.

    Checks (all executed):
    1. plugin name vs installed plugin names
    2. MCP server name vs servers exposed by installed plugins (if the spec has an MCP component)
    3. each new skill name vs plugin and user skills (if the spec has skills)
    4. `<output_path>/<name>` already exists

    An empty result means generation may proceed.
    """
    conflicts: list[ConflictEntry] = []

    existing_plugin = next((p for p in plugins if p.name == spec.name), None)
    if existing_plugin:
        conflicts.append(
            ConflictEntry(
                kind="plugin",
                name=spec.name,
                detail=(
                    f'Plugin "{spec.name}" already installed at {existing_plugin.install_path}'
                ),
            )
        )

    mcp = spec.components.mcp
    if mcp is not None:
        existing_server = next(
            (s for s in mcp_servers or [] if s.server_name == mcp.server_name), None
        )
        if existing_server:
            conflicts.append(
                ConflictEntry(
                    kind="mcp-server",
                    name=mcp.server_name,
                    detail=(
                        f'MCP server "{mcp.server_name}" already exists in plugin '
                        f'"{existing_server.source_plugin_name}"'
                    ),
                )
            )

    for skill in spec.components.skills or []:
        existing_skill = next((s for s in skills or [] if s.name == skill.name), None)
        if existing_skill:
            where = (
                f'plugin "{existing_skill.source_plugin_name}"'
                if existing_skill.source == "plugin"
                else "user skills"
            )
            conflicts.append(
                ConflictEntry(
                    kind="skill",
                    name=skill.name,
                    detail=(
                        f'Skill "{skill.name}" already exists in {where} '
                        f"at {existing_skill.file_path}"
                    ),
                )
            )

    output_dir = spec.plugin_path
    if path_exists(output_dir):
        conflicts.append(
            ConflictEntry(
                kind="output-path",
                name=str(output_dir),
                detail=f'Output directory "{output_dir}" already exists',
            )
        )

    return conflicts


def format_conflicts(plugin_name: str, conflicts: list[ConflictEntry]) -> str:
    details = "\n".join(f"- [{c.kind}] {c.detail}" for c in conflicts)
    return (
        f'Cannot scaffold plugin "{plugin_name}" due to conflicts:\n{details}\n\n'
        "Rename the conflicting components or remove existing ones first."
    )
