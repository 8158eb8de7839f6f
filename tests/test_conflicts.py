from __future__ import annotations

from pathlib import Path

import pytest

from plugins_mcp.conflicts import ConflictError, check_conflicts, format_conflicts
from plugins_mcp.models import ConflictEntry
from plugins_mcp.paths import ClaudePaths
from plugins_mcp.readers import read_all_skills, read_installed_plugins, read_mcp_servers


@pytest.fixture
def installed(claude_paths: ClaudePaths) -> dict:
    plugins = read_installed_plugins(claude_paths)
    return {
        "plugins": plugins,
        "mcp_servers": read_mcp_servers(plugins),
        "skills": read_all_skills(plugins, claude_paths),
    }


def test_clean_spec_has_no_conflicts(make_spec, installed: dict) -> None:
    spec = make_spec(
        components={
            "mcp": {"serverName": "fresh", "tools": [{"name": "t", "description": "d"}]},
            "skills": [{"name": "new-skill", "description": "d", "content": "c"}],
        }
    )
    assert check_conflicts(spec, **installed) == []


def test_every_check_runs(make_spec, installed: dict, tmp_path: Path) -> None:
    (tmp_path / "out" / "weather-tools").mkdir(parents=True)
    spec = make_spec(
        name="weather-tools",
        components={
            "mcp": {"serverName": "git", "tools": [{"name": "t", "description": "d"}]},
            "skills": [
                {"name": "forecast", "description": "d", "content": "c"},
                {"name": "release-notes", "description": "d", "content": "c"},
            ],
        },
    )
    conflicts = check_conflicts(spec, **installed)
    assert [(c.kind, c.name) for c in conflicts] == [
        ("plugin", "weather-tools"),
        ("mcp-server", "git"),
        ("skill", "forecast"),
        ("skill", "release-notes"),
        ("output-path", str(tmp_path / "out" / "weather-tools")),
    ]
    assert conflicts[1].detail == 'MCP server "git" already exists in plugin "git-helpers"'
    assert 'in plugin "weather-tools"' in conflicts[2].detail
    assert "already exists in user skills at" in conflicts[3].detail


def test_server_and_skill_checks_need_components(make_spec, installed: dict) -> None:
    spec = make_spec(name="fresh")
    assert check_conflicts(spec, **installed) == []


def test_output_path_check_uses_injected_probe(make_spec) -> None:
    seen: list[Path] = []

    def exists(path: Path) -> bool:
        seen.append(path)
        return True

    spec = make_spec()
    conflicts = check_conflicts(spec, plugins=[], path_exists=exists)
    assert seen == [spec.plugin_path]
    assert [c.kind for c in conflicts] == ["output-path"]


def test_conflict_error_message_lists_every_conflict() -> None:
    conflicts = [
        ConflictEntry(kind="plugin", name="p", detail='Plugin "p" already installed at /x'),
        ConflictEntry(kind="skill", name="s", detail='Skill "s" already exists in user skills'),
    ]
    err = ConflictError("p", conflicts)
    assert err.conflicts == conflicts
    assert str(err) == format_conflicts("p", conflicts)
    assert str(err).splitlines()[:3] == [
        'Cannot scaffold plugin "p" due to conflicts:',
        '- [plugin] Plugin "p" already installed at /x',
        '- [skill] Skill "s" already exists in user skills',
    ]
    assert str(err).endswith("Rename the conflicting components or remove existing ones first.")
