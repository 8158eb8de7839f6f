"""
plugins_mcp.readers

Read-only views of the Claude Code installation state:

- installed plugins (plugins/installed_plugins.json + each plugin's .claude-plugin/plugin.json)
- MCP servers declared by installed plugins (.mcp.json)
- skills shipped by plugins (<install>/skills/*/SKILL.md) and user skills (~/.claude/skills)

The installation directory is often partially populated or being modified by another
process, so missing or malformed files are treated as absent: `_read_json` returns None
and the entry is skipped. Nothing here raises for bad installation data.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from plugins_mcp import SERVER_NAME
from plugins_mcp.frontmatter import parse_frontmatter
from plugins_mcp.models import McpServerConfig, ResolvedPlugin, SkillInfo, SkillSource
from plugins_mcp.paths import ClaudePaths


logger = logging.getLogger(f"{SERVER_NAME}.readers")

SKILL_FILE = "SKILL.md"


def _read_json(path: Path) -> Any | None:
    """
    function_purpose: Load a JSON file, returning None when it is missing or unreadable.

    Callers skip the entry; partial installation state is expected.
    """
    if not path.is_file():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("Ignoring unreadable JSON file %s: %s", str(path), exc)
        return None


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _has_skill_dirs(skills_dir: Path) -> bool:
    try:
        return any(p.is_dir() for p in skills_dir.iterdir())
    except OSError:
        return False


# --- Plugins ---
def read_installed_plugins(paths: ClaudePaths) -> list[ResolvedPlugin]:
    """
    function_purpose: Resolve every plugin in the registry against its plugin.json metadata.

    Only the first entry per registry key (the active version) is considered.
    """
    registry = _read_json(paths.plugins_registry)
    if not isinstance(registry, dict) or not isinstance(registry.get("plugins"), dict):
        return []

    plugins: list[ResolvedPlugin] = []
    for registry_key, entries in registry["plugins"].items():
        if not isinstance(entries, list) or not entries:
            continue
        entry = entries[0]
        if not isinstance(entry, dict) or not isinstance(entry.get("installPath"), str):
            continue

        install_path = Path(entry["installPath"])
        default_name = registry_key.split("@")[0]
        metadata = _read_json(install_path / ".claude-plugin" / "plugin.json")
        if not isinstance(metadata, dict):
            metadata = {}

        author = metadata.get("author")
        keywords = metadata.get("keywords")
        plugins.append(
            ResolvedPlugin(
                registry_key=registry_key,
                name=_str_or_none(metadata.get("name")) or default_name,
                version=str(entry.get("version", "")),
                description=_str_or_none(metadata.get("description")) or "",
                install_path=install_path,
                scope=str(entry.get("scope", "")),
                installed_at=str(entry.get("installedAt", "")),
                last_updated=str(entry.get("lastUpdated", "")),
                author=author if isinstance(author, dict) else None,
                homepage=_str_or_none(metadata.get("homepage")),
                repository=_str_or_none(metadata.get("repository")),
                license=_str_or_none(metadata.get("license")),
                keywords=keywords if isinstance(keywords, list) else None,
                has_mcp_config=(install_path / ".mcp.json").is_file(),
                has_skills=_has_skill_dirs(install_path / "skills"),
            )
        )
    return plugins


# --- MCP servers ---
def _normalize_mcp_json(raw: dict[str, Any]) -> dict[str, Any]:
    """Accept both `{"mcpServers": {...}}` and a bare `{name: config}` mapping."""
    servers = raw.get("mcpServers")
    if isinstance(servers, dict):
        return servers
    return raw


def read_mcp_servers(plugins: list[ResolvedPlugin]) -> list[McpServerConfig]:
    servers: list[McpServerConfig] = []
    for plugin in plugins:
        raw = _read_json(plugin.install_path / ".mcp.json")
        if not isinstance(raw, dict):
            continue
        for server_name, config in _normalize_mcp_json(raw).items():
            if not isinstance(config, dict):
                continue
            servers.append(
                McpServerConfig(
                    server_name=server_name,
                    source_plugin=plugin.registry_key,
                    source_plugin_name=plugin.name,
                    command=_str_or_none(config.get("command")),
                    args=config.get("args") if isinstance(config.get("args"), list) else None,
                    env=config.get("env") if isinstance(config.get("env"), dict) else None,
                    cwd=_str_or_none(config.get("cwd")),
                    type=_str_or_none(config.get("type")),
                    url=_str_or_none(config.get("url")),
                    headers=(
                        config.get("headers") if isinstance(config.get("headers"), dict) else None
                    ),
                )
            )
    return servers


# --- Skills ---
def _iter_skill_dirs(skills_dir: Path) -> list[Path]:
    try:
        return sorted(p for p in skills_dir.iterdir() if p.is_dir())
    except OSError:
        return []


def _read_skill_dir(
    skill_dir: Path,
    source: SkillSource,
    plugin: ResolvedPlugin | None = None,
) -> SkillInfo | None:
    skill_path = skill_dir / SKILL_FILE
    if not skill_path.is_file():
        return None
    try:
        text = skill_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable skill %s: %s", str(skill_path), exc)
        return None

    parsed = parse_frontmatter(text, skill_dir.name)
    return SkillInfo(
        name=parsed["name"],
        description=parsed["description"] or "",
        source=source,
        file_path=skill_path,
        directory_name=skill_dir.name,
        source_plugin=plugin.registry_key if plugin else None,
        source_plugin_name=plugin.name if plugin else None,
    )


def read_all_skills(plugins: list[ResolvedPlugin], paths: ClaudePaths) -> list[SkillInfo]:
    """
    function_purpose: Discover plugin-owned skills followed by user skills.
    """
    skills: list[SkillInfo] = []
    for plugin in plugins:
        for skill_dir in _iter_skill_dirs(plugin.install_path / "skills"):
            info = _read_skill_dir(skill_dir, "plugin", plugin)
            if info:
                skills.append(info)

    for skill_dir in _iter_skill_dirs(paths.user_skills_dir):
        info = _read_skill_dir(skill_dir, "user")
        if info:
            skills.append(info)
    return skills


def read_skill_content(file_path: Path) -> str:
    return file_path.read_text(encoding="utf-8")
