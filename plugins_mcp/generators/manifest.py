from __future__ import annotations

from typing import Any

from plugins_mcp.generators.common import render_json
from plugins_mcp.models import GeneratedFile, PluginSpec


MANIFEST_PATH = ".claude-plugin/plugin.json"
PLUGIN_VERSION = "1.0.0"


def generate_plugin_manifest(spec: PluginSpec) -> GeneratedFile:
    """
    function_purpose: Render `.claude-plugin/plugin.json` for the scaffolded plugin.

    Component keys point at the fixed locations the other generators write to and are
    only present when the corresponding component is generated.
    """
    components = spec.components
    manifest: dict[str, Any] = {
        "name": spec.name,
        "description": spec.description,
        "version": PLUGIN_VERSION,
    }
    if spec.author:
        manifest["author"] = spec.author.model_dump(exclude_none=True)
    if components.skills:
        manifest["skills"] = "./skills/"
    if components.commands:
        manifest["commands"] = "./commands/"
    if components.hooks is not None:
        manifest["hooks"] = "./hooks/hooks.json"
    if components.mcp is not None:
        manifest["mcpServers"] = "./.mcp.json"

    return GeneratedFile(relative_path=MANIFEST_PATH, content=render_json(manifest))
