"""
plugins_mcp.generators.hooks

Render `hooks/hooks.json` plus one stub script per distinct command hook.
"""

from __future__ import annotations

from typing import Any

from plugins_mcp.generators.common import PLUGIN_ROOT, render_json
from plugins_mcp.models import GeneratedFile, HookEntry, HooksComponent
from plugins_mcp.naming import to_script_name


# Spec attribute -> Claude Code event name. Output follows this order.
EVENT_NAMES: dict[str, str] = {
    "session_start": "SessionStart",
    "session_end": "SessionEnd",
    "pre_tool_use": "PreToolUse",
    "post_tool_use": "PostToolUse",
    "stop": "Stop",
    "subagent_stop": "SubagentStop",
    "user_prompt_submit": "UserPromptSubmit",
    "pre_compact": "PreCompact",
    "notification": "Notification",
}

HOOKS_JSON_PATH = "hooks/hooks.json"
DEFAULT_SCRIPT_COMMAND = "hook"

SCRIPT_STUB = "\n".join(
    [
        "#!/usr/bin/env bash",
        "set -euo pipefail",
        "",
        "# Hook receives JSON on stdin with session context",
        "# Output JSON to stdout for hook response",
        "# Exit 0 = success, Exit 2 = blocking error",
        "",
        "# TODO: Implement hook logic",
        """echo '{"continue": true}'""",
        "",
    ]
)


def script_name_for(entry: HookEntry) -> str:
    return to_script_name(entry.command or DEFAULT_SCRIPT_COMMAND)


def build_hook_entry(entry: HookEntry) -> dict[str, Any]:
    inner: dict[str, Any] = {"type": entry.type}
    if entry.type == "command":
        inner["command"] = f"{PLUGIN_ROOT}/hooks/{script_name_for(entry)}"
    else:
        inner["prompt"] = entry.prompt or ""
    inner["timeout"] = entry.timeout
    if entry.run_async is not None:
        inner["async"] = entry.run_async

    result: dict[str, Any] = {}
    if entry.matcher:
        result["matcher"] = entry.matcher
    result["hooks"] = [inner]
    return result


def generate_hooks(hooks: HooksComponent) -> list[GeneratedFile]:
    """
    function_purpose: Render the consolidated hooks document and its script stubs.

    - Each event with at least one entry maps to the ordered list of its entries.
    - Every command hook references `${CLAUDE_PLUGIN_ROOT}/hooks/<script>`; scripts are
      emitted once per derived name, in order of first reference.
    """
    events: dict[str, list[dict[str, Any]]] = {}
    script_names: dict[str, None] = {}

    for attr, event_name in EVENT_NAMES.items():
        entries: list[HookEntry] | None = getattr(hooks, attr)
        if not entries:
            continue
        events[event_name] = [build_hook_entry(e) for e in entries]
        for entry in entries:
            if entry.type == "command":
                script_names.setdefault(script_name_for(entry))

    files = [
        GeneratedFile(relative_path=HOOKS_JSON_PATH, content=render_json({"hooks": events}))
    ]
    files.extend(
        GeneratedFile(relative_path=f"hooks/{name}", content=SCRIPT_STUB)
        for name in script_names
    )
    return files
