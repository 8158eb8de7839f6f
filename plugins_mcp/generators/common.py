"""Shared rendering helpers for the generators."""

from __future__ import annotations

import json
from typing import Any


# Placeholder Claude Code expands to the installed plugin's directory.
PLUGIN_ROOT = "${CLAUDE_PLUGIN_ROOT}"


def render_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def js_literal(value: Any) -> str:
    """Render a JSON value as a JavaScript/TypeScript literal."""
    return json.dumps(value, ensure_ascii=False)
