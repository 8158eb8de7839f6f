"""
plugins_mcp.server

FastMCP stdio server exposing the local Claude Code plugin installation (plugins, their MCP
servers and skills) as MCP tools, plus a scaffolding tool that generates new plugins.

Server-level documentation:
- Purpose: Let MCP-aware clients inspect what is installed and create new plugin directories.
- Why use it:
  * List installed plugins with metadata and MCP/skill status
  * List MCP servers contributed by plugins and fetch their full configuration
  * List, read and search skills from plugins and the user skills directory
  * Scaffold a new plugin (manifest, skills, commands, agents, hooks, TypeScript MCP server)
    after checking for naming conflicts with what is already installed
- Transport: STDIO by default (ideal for clients that spawn the server process)
- Logging: Console (stderr) + rotating file logs

Environment (optional):
- CLAUDE_DIR: Claude configuration root (default: ~/.claude)
- CLAUDE_PLUGINS_REGISTRY: installed plugins registry (default: <CLAUDE_DIR>/plugins/installed_plugins.json)
- CLAUDE_USER_SKILLS_DIR: user skills directory (default: <CLAUDE_DIR>/skills)
- LOG_FILE: override log file path (default: <repo_root>/logs/plugins_mcp_server.log)

Usage:
- As a script:
  python -m plugins_mcp.server        # starts stdio server
  python -m plugins_mcp.server --help # CLI for inspection/scaffolding without starting server

- As a module within MCP client config (stdio):
  command: python
  args: ["-m", "plugins_mcp.server"]

Package: plugins_mcp
Entry point: python -m plugins_mcp.server
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Literal

import yaml
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from plugins_mcp import SERVER_NAME, version
from plugins_mcp.conflicts import ConflictError
from plugins_mcp.models import Author, Components, PluginSpec, SkillInfo
from plugins_mcp.paths import ClaudePaths, resolve_claude_paths
from plugins_mcp.readers import (
    read_all_skills,
    read_installed_plugins,
    read_mcp_servers,
    read_skill_content,
)
from plugins_mcp.scaffold import scaffold_plugin as run_scaffold


# --- Paths & constants ---
REPO_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_LOG_DIR = REPO_ROOT / "logs"
DEFAULT_LOG_FILE = DEFAULT_LOG_DIR / "plugins_mcp_server.log"

SourceFilter = Literal["all", "plugin", "user"]


# --- Logging setup ---
def configure_logging() -> logging.Logger:
    """
    function_purpose: Configure application-wide logging to both console and rotating file.

    - Creates logs directory if needed.
    - Sets formatter and levels.
    - Returns the configured root logger for reuse; repeated calls do not add handlers.
    """
    logger = logging.getLogger(SERVER_NAME)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)

    log_file_env = os.environ.get("LOG_FILE")
    log_file = Path(log_file_env) if log_file_env else DEFAULT_LOG_FILE
    log_file.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"
    )

    # Console handler writes to stderr; stdout carries the stdio transport.
    sh = logging.StreamHandler()
    sh.setLevel(logging.INFO)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    # Rotating file handler (5 files, 5MB each)
    fh = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    fh.setLevel(logging.INFO)
    fh.setFormatter(formatter)
    logger.addHandler(fh)

    logger.info("Logging initialized. File: %s", str(log_file))
    return logger


# --- Installation queries ---
def plugin_summaries(paths: ClaudePaths) -> list[dict[str, Any]]:
    return [
        {
            "name": p.name,
            "version": p.version,
            "description": p.description,
            "registry_key": p.registry_key,
            "scope": p.scope,
            "keywords": p.keywords,
            "has_mcp_config": p.has_mcp_config,
            "has_skills": p.has_skills,
        }
        for p in read_installed_plugins(paths)
    ]


def mcp_summaries(paths: ClaudePaths) -> list[dict[str, Any]]:
    return [
        {
            "server_name": s.server_name,
            "source_plugin_name": s.source_plugin_name,
            "transport": s.transport,
            "command": s.command,
            "url": s.url,
        }
        for s in read_mcp_servers(read_installed_plugins(paths))
    ]


def find_mcp_server(paths: ClaudePaths, server_name: str) -> dict[str, Any]:
    """
    function_purpose: Full configuration of one MCP server contributed by an installed plugin.

    Raises ValueError when no installed plugin declares the server.
    """
    for server in read_mcp_servers(read_installed_plugins(paths)):
        if server.server_name == server_name:
            return asdict(server)
    raise ValueError(
        f"MCP server '{server_name}' not found. Use list_mcps to see available servers."
    )


def _filter_source(skills: list[SkillInfo], source: str | None) -> list[SkillInfo]:
    if not source or source == "all":
        return skills
    return [s for s in skills if s.source == source]


def _skill_brief(skill: SkillInfo) -> dict[str, Any]:
    return {
        "name": skill.name,
        "description": skill.description,
        "source": skill.source,
        "source_plugin_name": skill.source_plugin_name,
        "directory_name": skill.directory_name,
    }


def skill_summaries(paths: ClaudePaths, source: SourceFilter = "all") -> list[dict[str, Any]]:
    skills = read_all_skills(read_installed_plugins(paths), paths)
    return [_skill_brief(s) for s in _filter_source(skills, source)]


def get_skill_detail(
    paths: ClaudePaths, name: str, source: Literal["plugin", "user"] | None = None
) -> dict[str, Any]:
    """
    function_purpose: Retrieve the full SKILL.md of a skill, matched by name or directory name.

    The first match wins (plugin skills are listed before user skills); pass `source`
    to disambiguate.
    """
    skills = read_all_skills(read_installed_plugins(paths), paths)
    matches = [
        s for s in _filter_source(skills, source) if name in (s.name, s.directory_name)
    ]
    if not matches:
        raise ValueError(f"skill '{name}' not found. Use list_skills to see available skills.")

    skill = matches[0]
    try:
        content = read_skill_content(skill.file_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ValueError(f"skill '{name}' could not be read: {exc}") from exc
    return {**_skill_brief(skill), "content": content}


def search_skill_index(
    paths: ClaudePaths, query: str, source: SourceFilter = "all"
) -> list[dict[str, Any]]:
    """
    function_purpose: Case-insensitive substring search across skill name, description and content.

    Each match reports which of the three fields contained the query in `matched_in`.
    Skills whose file cannot be read are matched on name and description only.
    """
    q = (query or "").strip().lower()
    results: list[dict[str, Any]] = []
    if not q:
        return results

    skills = read_all_skills(read_installed_plugins(paths), paths)
    for skill in _filter_source(skills, source):
        matched_in: list[str] = []
        if q in skill.name.lower():
            matched_in.append("name")
        if q in skill.description.lower():
            matched_in.append("description")
        try:
            if q in read_skill_content(skill.file_path).lower():
                matched_in.append("content")
        except (OSError, UnicodeDecodeError) as exc:
            logging.getLogger(SERVER_NAME).debug(
                "Searching skill %s by name and description only: %s", str(skill.file_path), exc
            )
        if matched_in:
            results.append({**_skill_brief(skill), "matched_in": matched_in})
    return results


# --- Markdown formatting ---
def _plugins_markdown(plugins: list[dict[str, Any]]) -> str:
    if not plugins:
        return "# Installed Plugins\n\nNo plugins installed.\n"
    lines = ["# Installed Plugins\n\n"]
    for p in plugins:
        lines.append(f"## {p['name']} ({p['version']})\n")
        if p.get("description"):
            lines.append(f"{p['description']}\n\n")
        lines.append(f"**Registry key:** `{p['registry_key']}`  \n")
        lines.append(f"**Scope:** {p['scope']}  \n")
        if p.get("keywords"):
            lines.append(f"**Keywords:** {', '.join(p['keywords'])}  \n")
        lines.append(
            f"**MCP config:** {'yes' if p['has_mcp_config'] else 'no'}  \n"
            f"**Skills:** {'yes' if p['has_skills'] else 'no'}  \n\n"
        )
    return "".join(lines)


def _mcps_markdown(servers: list[dict[str, Any]]) -> str:
    if not servers:
        return "# MCP Servers\n\nNo MCP servers configured by installed plugins.\n"
    lines = ["# MCP Servers\n\n"]
    lines.append("| Server | Plugin | Transport | Command / URL |\n")
    lines.append("|--------|--------|-----------|---------------|\n")
    for s in servers:
        target = s.get("command") or s.get("url") or ""
        lines.append(
            f"| {s['server_name']} | {s['source_plugin_name']} | {s['transport']} | `{target}` |\n"
        )
    return "".join(lines)


def _skills_markdown(title: str, skills: list[dict[str, Any]]) -> str:
    if not skills:
        return f"# {title}\n\nNo skills found.\n"
    lines = [f"# {title}\n\n", f"Found {len(skills)} skill(s):\n\n"]
    for s in skills:
        origin = (
            f"plugin `{s['source_plugin_name']}`" if s["source"] == "plugin" else "user skills"
        )
        lines.append(f"## {s['name']}\n")
        if s.get("description"):
            lines.append(f"{s['description']}\n\n")
        lines.append(f"**Source:** {origin}  \n")
        if s.get("matched_in"):
            lines.append(f"**Matched in:** {', '.join(s['matched_in'])}  \n")
        lines.append("\n")
    return "".join(lines)


def _server_description() -> str:
    """
    function_purpose: Provide a server-level description that clients can display.
    """
    return (
        "ClaudePlugins MCP Server: inspects installed Claude Code plugins (their MCP servers "
        "and skills) and scaffolds new plugins after checking for naming conflicts."
    )


mcp = FastMCP(
    SERVER_NAME,
    instructions=(
        "ClaudePlugins MCP Server\n"
        "\n"
        "Purpose:\n"
        "- Inspect the local Claude Code plugin installation and scaffold new plugins.\n"
        "\n"
        "Exposed tools:\n"
        "- plugin_server_info(): server name, description, installation paths, transport\n"
        "- list_plugins(markdown_output?): installed plugins with MCP/skill status\n"
        "- list_mcps(markdown_output?): MCP servers configured by installed plugins\n"
        "- get_mcp_details(server_name): full configuration of one MCP server\n"
        "- list_skills(source?, markdown_output?): plugin and user skills\n"
        "- get_skill_content(name, source?): full SKILL.md of one skill\n"
        "- search_skills(query, source?, markdown_output?): keyword search over skills\n"
        "- scaffold_plugin(name, description, output_path, components, author?, write_to_disk?):\n"
        "  generate a plugin directory; fails with an itemized list when the plugin name, MCP\n"
        "  server name, a skill name or the output directory already exists\n"
        "\n"
        "Scaffolding:\n"
        "- components may contain: mcp (server_name, transport, tools), skills, commands, agents,\n"
        "  hooks (sessionStart, preToolUse, ... -> list of hook entries)\n"
        "- write_to_disk=False returns every generated file (path + content) without writing\n"
        "- Nothing is installed or registered; install the generated plugin separately.\n"
        "\n"
        "Environment configuration:\n"
        "- CLAUDE_DIR               : Claude configuration root (default: ~/.claude)\n"
        "- CLAUDE_PLUGINS_REGISTRY  : installed plugins registry file\n"
        "- CLAUDE_USER_SKILLS_DIR   : user skills directory\n"
        "- LOG_FILE                 : override rotating log file path\n"
    ),
)


@mcp.tool
def plugin_server_info() -> dict[str, Any]:
    """
    function_purpose: Return server-level documentation and the installation paths in use.

    Returns:
    - name, version, description, claude_dir, plugins_registry, user_skills_dir, transport
    """
    paths = resolve_claude_paths()
    return {
        "name": SERVER_NAME,
        "version": version(),
        "description": _server_description(),
        "claude_dir": str(paths.claude_dir),
        "plugins_registry": str(paths.plugins_registry),
        "user_skills_dir": str(paths.user_skills_dir),
        "transport": "stdio",
    }


@mcp.tool
def list_plugins(markdown_output: bool = False) -> list[dict[str, Any]] | str:
    """
    function_purpose: List all installed Claude Code plugins with their metadata.

    Returns name, version, description, registry_key, scope, keywords, has_mcp_config and
    has_skills per plugin, or a markdown catalog when markdown_output=True.
    """
    plugins = plugin_summaries(resolve_claude_paths())
    return _plugins_markdown(plugins) if markdown_output else plugins


@mcp.tool
def list_mcps(markdown_output: bool = False) -> list[dict[str, Any]] | str:
    """
    function_purpose: List all MCP servers configured by installed plugins.

    Returns server_name, source_plugin_name, transport (stdio/http), command and url.
    """
    servers = mcp_summaries(resolve_claude_paths())
    return _mcps_markdown(servers) if markdown_output else servers


@mcp.tool
def get_mcp_details(server_name: str) -> dict[str, Any]:
    """
    function_purpose: Get full configuration details for a specific MCP server.

    Returns command, args, env, cwd, type, url and headers along with the source plugin.
    """
    return find_mcp_server(resolve_claude_paths(), server_name)


@mcp.tool
def list_skills(
    source: SourceFilter = "all", markdown_output: bool = False
) -> list[dict[str, Any]] | str:
    """
    function_purpose: List skills from installed plugins and the user skills directory.

    Args:
    - source: "plugin", "user" or "all" (default)
    - markdown_output: return a markdown listing instead of JSON
    """
    skills = skill_summaries(resolve_claude_paths(), source)
    return _skills_markdown("Available Skills", skills) if markdown_output else skills


@mcp.tool
def get_skill_content(
    name: str, source: Literal["plugin", "user"] | None = None
) -> dict[str, Any]:
    """
    function_purpose: Get the full content of a specific skill by name.

    Args:
    - name: skill name or directory name
    - source: "plugin" or "user" to disambiguate when both define the same name
    """
    return get_skill_detail(resolve_claude_paths(), name, source)


@mcp.tool
def search_skills(
    query: str, source: SourceFilter = "all", markdown_output: bool = False
) -> list[dict[str, Any]] | str:
    """
    function_purpose: Search skills by keyword across name, description, and content.

    Returns brief matches with a matched_in list naming the fields that contained the query.
    """
    results = search_skill_index(resolve_claude_paths(), query, source)
    if markdown_output:
        return _skills_markdown(f"Search Results for '{query}'", results)
    return results


@mcp.tool
def scaffold_plugin(
    name: str,
    description: str,
    output_path: str,
    components: Components,
    author: Author | None = None,
    write_to_disk: bool = True,
) -> dict[str, Any]:
    """
    function_purpose: Generate a new Claude Code plugin directory at <output_path>/<name>.

    Description:
    - Checks the plugin name, MCP server name, skill names and output directory against the
      current installation; any conflict aborts the call before anything is generated.
    - Renders .claude-plugin/plugin.json plus the requested components.

    Args:
    - name: str               Plugin name (kebab-case)
    - description: str        What the plugin does
    - output_path: str        Directory in which the plugin folder is created (absolute path)
    - components: Components  mcp, skills, commands, agents, hooks (each optional)
    - author: Author | None   Optional {name, email?, url?}
    - write_to_disk: bool     Write files (default) or return them as JSON

    Returns:
    - write_to_disk=True: status "created", plugin_path, file_count, files, components, next_steps
    - write_to_disk=False: status "generated", plugin_path, files [{relative_path, content}]
    """
    spec = PluginSpec(
        name=name,
        description=description,
        output_path=output_path,
        components=components,
        author=author,
        write_to_disk=write_to_disk,
    )
    try:
        return run_scaffold(spec, resolve_claude_paths())
    except ConflictError as exc:
        raise ToolError(str(exc)) from exc


# --- Entry points ---
def run() -> None:
    """
    function_purpose: Entry point to start the MCP stdio server.

    - Configures logging
    - Runs FastMCP stdio server
    """
    logger = configure_logging()
    paths = resolve_claude_paths()
    logger.info("Server starting with claude_dir=%s", str(paths.claude_dir))
    mcp.run()  # stdio transport by default


def load_plugin_spec(spec_file: Path, dry_run: bool = False) -> PluginSpec:
    """
    function_purpose: Load a PluginSpec from a YAML or JSON file.

    dry_run forces write_to_disk=False.
    """
    data = yaml.safe_load(spec_file.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{spec_file} must contain a mapping")
    spec = PluginSpec.model_validate(data)
    if dry_run:
        spec = spec.model_copy(update={"write_to_disk": False})
    return spec


def cli_main() -> None:
    """
    function_purpose: CLI for inspecting the installation or scaffolding without starting the server.

    Usage:
      python -m plugins_mcp.server --list-plugins
      python -m plugins_mcp.server --list-mcps
      python -m plugins_mcp.server --mcp <SERVER_NAME>
      python -m plugins_mcp.server --list-skills [--source plugin|user|all]
      python -m plugins_mcp.server --skill <NAME> [--source plugin|user]
      python -m plugins_mcp.server --search "<QUERY>" [--source plugin|user|all]
      python -m plugins_mcp.server --scaffold <SPEC_FILE> [--dry-run]
    """
    import argparse
    import json

    from pydantic import ValidationError

    logger = configure_logging()
    paths = resolve_claude_paths()

    parser = argparse.ArgumentParser(
        prog="plugins_mcp.server",
        description="Inspect installed Claude Code plugins, scaffold new ones, or start the stdio MCP server.",
    )
    parser.add_argument(
        "--list-plugins", action="store_true", help="List installed plugins and exit"
    )
    parser.add_argument(
        "--list-mcps", action="store_true", help="List MCP servers from installed plugins"
    )
    parser.add_argument("--mcp", metavar="SERVER_NAME", help="Show one MCP server's config")
    parser.add_argument(
        "--list-skills", action="store_true", help="List plugin and user skills"
    )
    parser.add_argument("--skill", metavar="NAME", help="Show the full content of a skill")
    parser.add_argument("--search", metavar="QUERY", help="Search skills by keyword")
    parser.add_argument(
        "--source",
        choices=["all", "plugin", "user"],
        default=None,
        help="Restrict skill listing/search/lookup to one source",
    )
    parser.add_argument(
        "--scaffold",
        metavar="SPEC_FILE",
        type=Path,
        help="Scaffold a plugin from a YAML/JSON specification file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --scaffold: print generated files instead of writing them",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Start MCP stdio server (default when no flags used)",
    )

    args = parser.parse_args()

    def _print(payload: Any) -> None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))

    if args.list_plugins:
        logger.info("Listing plugins...")
        _print(plugin_summaries(paths))
        return

    if args.list_mcps:
        logger.info("Listing MCP servers...")
        _print(mcp_summaries(paths))
        return

    if args.mcp:
        logger.info("Detail for MCP server: %s", args.mcp)
        try:
            _print(find_mcp_server(paths, args.mcp))
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
        return

    if args.list_skills:
        logger.info("Listing skills...")
        _print(skill_summaries(paths, args.source or "all"))
        return

    if args.skill:
        logger.info("Content for skill: %s", args.skill)
        source = args.source if args.source in ("plugin", "user") else None
        try:
            _print(get_skill_detail(paths, args.skill, source))
        except ValueError as exc:
            parser.exit(1, f"{exc}\n")
        return

    if args.search:
        logger.info("Search query: %s", args.search)
        _print(search_skill_index(paths, args.search, args.source or "all"))
        return

    if args.scaffold:
        logger.info("Scaffolding from spec file: %s", str(args.scaffold))
        try:
            spec = load_plugin_spec(args.scaffold, dry_run=args.dry_run)
        except (OSError, ValueError, yaml.YAMLError, ValidationError) as exc:
            parser.exit(2, f"Invalid plugin specification: {exc}\n")
        try:
            _print(run_scaffold(spec, paths))
        except ConflictError as exc:
            parser.exit(1, f"{exc}\n")
        return

    # Default: start server
    run()


if __name__ == "__main__":
    cli_main()
