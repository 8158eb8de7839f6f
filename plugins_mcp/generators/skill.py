from __future__ import annotations

from plugins_mcp.frontmatter import append_yaml_field, render_frontmatter_document
from plugins_mcp.models import GeneratedFile, SkillComponent


def generate_skill(skill: SkillComponent) -> GeneratedFile:
    fields: list[str] = []
    append_yaml_field(fields, "name", skill.name)
    append_yaml_field(fields, "description", skill.description)
    append_yaml_field(fields, "version", skill.version)

    return GeneratedFile(
        relative_path=f"skills/{skill.name}/SKILL.md",
        content=render_frontmatter_document(fields, skill.content),
    )


def generate_skills(skills: list[SkillComponent]) -> list[GeneratedFile]:
    return [generate_skill(s) for s in skills]
