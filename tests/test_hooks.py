from __future__ import annotations

import json

from plugins_mcp.generators import generate_hooks
from plugins_mcp.generators.hooks import SCRIPT_STUB
from plugins_mcp.models import HooksComponent


def _hooks_doc(hooks: HooksComponent) -> dict:
    files = generate_hooks(hooks)
    assert files[0].relative_path == "hooks/hooks.json"
    return json.loads(files[0].content)


def test_shared_command_produces_one_script() -> None:
    hooks = HooksComponent.model_validate(
        {
            "preToolUse": [{"matcher": "Bash", "command": "validate-bash"}],
            "postToolUse": [{"command": "validate-bash"}],
        }
    )
    files = generate_hooks(hooks)
    assert [f.relative_path for f in files] == ["hooks/hooks.json", "hooks/validate-bash.sh"]
    assert files[1].content == SCRIPT_STUB
    assert files[1].content.startswith("#!/usr/bin/env bash\n")

    doc = json.loads(files[0].content)
    command = "${CLAUDE_PLUGIN_ROOT}/hooks/validate-bash.sh"
    assert doc["hooks"]["PreToolUse"] == [
        {"matcher": "Bash", "hooks": [{"type": "command", "command": command, "timeout": 60}]}
    ]
    assert doc["hooks"]["PostToolUse"] == [
        {"hooks": [{"type": "command", "command": command, "timeout": 60}]}
    ]


def test_prompt_hooks_have_no_script() -> None:
    hooks = HooksComponent.model_validate(
        {"stop": [{"type": "prompt", "prompt": "Did you run the tests?", "timeout": 30}]}
    )
    files = generate_hooks(hooks)
    assert len(files) == 1
    assert json.loads(files[0].content)["hooks"]["Stop"] == [
        {"hooks": [{"type": "prompt", "prompt": "Did you run the tests?", "timeout": 30}]}
    ]


def test_async_flag_and_default_script_name() -> None:
    doc = _hooks_doc(
        HooksComponent.model_validate({"sessionStart": [{"async": True}, {"async": False}]})
    )
    entries = doc["hooks"]["SessionStart"]
    assert entries[0]["hooks"][0]["async"] is True
    assert entries[1]["hooks"][0]["async"] is False
    assert entries[0]["hooks"][0]["command"].endswith("/hooks/hook.sh")


def test_events_follow_fixed_order_and_empty_events_are_skipped() -> None:
    doc = _hooks_doc(
        HooksComponent.model_validate(
            {
                "notification": [{"command": "notify"}],
                "userPromptSubmit": [{"command": "check-prompt"}],
                "sessionStart": [{"command": "init"}],
                "stop": [],
            }
        )
    )
    assert list(doc["hooks"]) == ["SessionStart", "UserPromptSubmit", "Notification"]


def test_empty_hooks_component_still_renders_document() -> None:
    files = generate_hooks(HooksComponent())
    assert len(files) == 1
    assert json.loads(files[0].content) == {"hooks": {}}


def test_script_extension_is_kept() -> None:
    files = generate_hooks(
        HooksComponent.model_validate({"preCompact": [{"command": "save state.py"}]})
    )
    assert [f.relative_path for f in files][1:] == ["hooks/save-state.py"]
