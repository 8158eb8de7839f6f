"""
plugins_mcp.scaffold

Plugin scaffolding pipeline:

    checking-conflicts -> generating -> writing | serializing -> done
                  \\-> rejected (conflicts found; nothing generated or written)

Generation is a pure function of the validated PluginSpec. The only I/O is reading the
installation state for the conflict check and, in write mode, writing the files.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

from plugins_mcp import SERVER_NAME
from plugins_mcp.conflicts import ConflictError, check_conflicts
from plugins_mcp.generators import (
    generate_agents,
    generate_commands,
    generate_hooks,
    generate_mcp_server,
    generate_plugin_manifest,
    generate_skills,
)
from plugins_mcp.models import ConflictEntry, GeneratedFile, PluginSpec
from plugins_mcp.paths import ClaudePaths, resolve_claude_paths
from plugins_mcp.readers import read_all_skills, read_installed_plugins, read_mcp_servers


logger = logging.getLogger(f"{SERVER_NAME}.scaffold")

Writer = Callable[[Path, list[GeneratedFile]], None]


class ScaffoldState(str, Enum):
    CHECKING_CONFLICTS = "checking-conflicts"
    GENERATING = "generating"
    WRITING = "writing"
    SERIALIZING = "serializing"
    DONE = "done"
    REJECTED = "rejected"


def write_files_to_disk(base_path: Path, files: list[GeneratedFile]) -> None:
    """
    function_purpose: Write generated files below base_path, creating parent directories.

    Existing files are overwritten. Hook scripts are made executable. Errors propagate and
    files written before the failure are left in place.
    """
    for f in files:
        target = base_path / f.relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w", encoding="utf-8", newline="\n") as fh:
            _ = fh.write(f.content)
        if f.content.startswith("#!"):
            os.chmod(target, 0o755)


def find_conflicts(spec: PluginSpec, paths: ClaudePaths) -> list[ConflictEntry]:
    """
    function_purpose: Load the installation state a spec needs and run the conflict checks.

    MCP servers are only read when the spec has an MCP component, skills only when it has skills.
    """
    plugins = read_installed_plugins(paths)
    components = spec.components
    return check_conflicts(
        spec,
        plugins=plugins,
        mcp_servers=read_mcp_servers(plugins) if components.mcp is not None else None,
        skills=read_all_skills(plugins, paths) if components.skills else None,
    )


def generate_plugin_files(spec: PluginSpec) -> list[GeneratedFile]:
    """
    function_purpose: Render the manifest and every present component, in a fixed order.

    Order: manifest, MCP server project, skills, commands, agents, hooks.
    """
    components = spec.components
    files = [generate_plugin_manifest(spec)]
    if components.mcp is not None:
        files.extend(generate_mcp_server(spec.name, components.mcp))
    if components.skills:
        files.extend(generate_skills(components.skills))
    if components.commands:
        files.extend(generate_commands(components.commands))
    if components.agents:
        files.extend(generate_agents(components.agents))
    if components.hooks is not None:
        files.extend(generate_hooks(components.hooks))

    seen: set[str] = set()
    for f in files:
        if f.relative_path in seen:
            raise ValueError(f"duplicate generated path: {f.relative_path}")
        seen.add(f.relative_path)
    return files


def _component_counts(spec: PluginSpec) -> dict[str, Any]:
    components = spec.components
    return {
        "manifest": True,
        "mcp": components.mcp is not None,
        "skills": len(components.skills or []),
        "commands": len(components.commands or []),
        "agents": len(components.agents or []),
        "hooks": components.hooks is not None,
    }


def scaffold_plugin(
    spec: PluginSpec,
    paths: ClaudePaths | None = None,
    writer: Writer = write_files_to_disk,
) -> dict[str, Any]:
    """
    function_purpose: Run the full pipeline for one plugin specification.

    Returns:
    - write mode (spec.write_to_disk=True): {status: "created", plugin_path, file_count, files,
      components, next_steps}
    - dry run: {status: "generated", plugin_path, files: [{relative_path, content}]}

    Raises:
    - ConflictError when the plugin collides with installed state (nothing is generated)
    - OSError from the writer in write mode
    """
    paths = paths or resolve_claude_paths()
    plugin_path = spec.plugin_path

    state = ScaffoldState.CHECKING_CONFLICTS
    logger.info("Scaffolding plugin '%s' (%s)", spec.name, state.value)
    conflicts = find_conflicts(spec, paths)
    if conflicts:
        state = ScaffoldState.REJECTED
        logger.warning(
            "Plugin '%s' %s: %d conflict(s)", spec.name, state.value, len(conflicts)
        )
        raise ConflictError(spec.name, conflicts)

    state = ScaffoldState.GENERATING
    files = generate_plugin_files(spec)
    logger.info("Generated %d file(s) for plugin '%s'", len(files), spec.name)

    if spec.write_to_disk:
        state = ScaffoldState.WRITING
        writer(plugin_path, files)
        payload: dict[str, Any] = {
            "status": "created",
            "plugin_path": str(plugin_path),
            "file_count": len(files),
            "files": [f.relative_path for f in files],
            "components": _component_counts(spec),
            "next_steps": (
                [f"cd {plugin_path}", "npm install", "npm run build"]
                if spec.components.mcp is not None
                else []
            ),
        }
    else:
        state = ScaffoldState.SERIALIZING
        payload = {
            "status": "generated",
            "plugin_path": str(plugin_path),
            "files": [
                {"relative_path": f.relative_path, "content": f.content} for f in files
            ],
        }

    logger.info("Plugin '%s' %s -> %s", spec.name, state.value, ScaffoldState.DONE.value)
    return payload


def files_from_payload(payload: dict[str, Any]) -> list[GeneratedFile]:
    """Rebuild the file list from a dry-run payload (or its parsed JSON form)."""
    return [
        GeneratedFile(relative_path=entry["relative_path"], content=entry["content"])
        for entry in payload.get("files", [])
    ]
