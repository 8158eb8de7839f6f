from __future__ import annotations

from plugins_mcp.frontmatter import (
    append_yaml_field,
    format_yaml_list,
    render_frontmatter_document,
)
from plugins_mcp.models import CommandComponent, GeneratedFile


def generate_command(command: CommandComponent) -> GeneratedFile:
    """Render `commands/<name>.md`; the command name comes from the file name."""
    fields: list[str] = []
    append_yaml_field(fields, "description", command.description)
    append_yaml_field(fields, "argument-hint", command.argument_hint)
    if command.allowed_tools:
        fields.append(f"allowed-tools: {format_yaml_list(command.allowed_tools)}")
    append_yaml_field(fields, "model", command.model)
    if command.disable_model_invocation:
        fields.append("disable-model-invocation: true")

    return GeneratedFile(
        relative_path=f"commands/{command.name}.md",
        content=render_frontmatter_document(fields, command.body),
    )


def generate_commands(commands: list[CommandComponent]) -> list[GeneratedFile]:
    return [generate_command(c) for c in commands]
