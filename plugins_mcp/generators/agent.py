from __future__ import annotations

from plugins_mcp.frontmatter import (
    append_yaml_field,
    format_yaml_list,
    render_frontmatter_document,
)
from plugins_mcp.models import AgentComponent, GeneratedFile


def generate_agent(agent: AgentComponent) -> GeneratedFile:
    fields: list[str] = []
    append_yaml_field(fields, "name", agent.name)
    append_yaml_field(fields, "description", agent.description)
    append_yaml_field(fields, "model", agent.model)
    append_yaml_field(fields, "color", agent.color)
    if agent.tools:
        fields.append(f"tools: {format_yaml_list(agent.tools)}")

    return GeneratedFile(
        relative_path=f"agents/{agent.name}.md",
        content=render_frontmatter_document(fields, agent.system_prompt),
    )


def generate_agents(agents: list[AgentComponent]) -> list[GeneratedFile]:
    return [generate_agent(a) for a in agents]
