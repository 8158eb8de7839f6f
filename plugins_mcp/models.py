"""
plugins_mcp.models

Data model for the plugins MCP server.

- Scaffold input: pydantic models validated once at the tool/CLI boundary. They accept
  both the camelCase keys used on the wire (outputPath, systemPrompt, ...) and the
  snake_case attribute names, and are frozen once constructed.
- Generated output: GeneratedFile and ConflictEntry value types.
- Installation state: read-only projections produced by plugins_mcp.readers.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from plugins_mcp.naming import is_identifier_start, to_field_name, to_snake_case


KEBAB_CASE_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"
AGENT_NAME_PATTERN = r"^[a-z0-9][a-z0-9-]{1,48}[a-z0-9]$"

ConflictKind = Literal["plugin", "mcp-server", "skill", "output-path"]
SkillSource = Literal["plugin", "user"]


class SpecModel(BaseModel):
    """Base for scaffold input models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )


# --- MCP tool parameters (discriminated on "type") ---
class _BaseParameter(SpecModel):
    name: str = Field(description="Parameter name")
    description: str = Field(description="What this parameter does")
    required: bool = Field(True, description="Whether this parameter is required")


class StringParameter(_BaseParameter):
    type: Literal["string"]
    default_value: str | None = None


class NumberParameter(_BaseParameter):
    type: Literal["number"]
    # Strings are accepted and parsed as numbers when the schema is rendered.
    default_value: float | str | None = None

    @field_validator("default_value")
    @classmethod
    def _numeric_text(cls, value: float | str | None) -> float | str | None:
        if isinstance(value, str):
            try:
                float(value)
            except ValueError:
                raise ValueError(f"default value '{value}' is not a number") from None
        return value


class BooleanParameter(_BaseParameter):
    type: Literal["boolean"]
    # "true" / "1" strings are accepted and read as True when rendered.
    default_value: bool | str | None = None


class EnumParameter(_BaseParameter):
    type: Literal["enum"]
    enum_values: list[str] = Field(description="Allowed values")
    default_value: str | None = Field(None, description="Must be one of enum_values")

    @model_validator(mode="after")
    def _default_in_values(self) -> EnumParameter:
        if self.default_value is not None and self.default_value not in self.enum_values:
            raise ValueError(
                f"default value '{self.default_value}' is not one of {self.enum_values}"
            )
        return self


ToolParameter = Annotated[
    Union[StringParameter, NumberParameter, BooleanParameter, EnumParameter],
    Field(discriminator="type"),
]


class ToolSpec(SpecModel):
    name: str = Field(description="Tool name; normalized to snake_case on the wire")
    description: str = Field(description="What the tool does")
    parameters: list[ToolParameter] | None = None

    @model_validator(mode="after")
    def _usable_symbols(self) -> ToolSpec:
        # Generated TypeScript identifiers must start with a letter.
        if not is_identifier_start(to_snake_case(self.name)):
            raise ValueError(f"tool name '{self.name}' must start with a letter")
        fields = [to_field_name(p.name) for p in self.parameters or []]
        invalid = [
            p.name
            for p, f in zip(self.parameters or [], fields)
            if not is_identifier_start(f)
        ]
        if invalid:
            raise ValueError(
                f"tool '{self.name}' has parameter names that are not identifiers: "
                f"{', '.join(repr(n) for n in invalid)}"
            )
        duplicates = _duplicates(fields)
        if duplicates:
            raise ValueError(
                f"tool '{self.name}' declares duplicate parameters: {', '.join(duplicates)}"
            )
        return self


class McpComponent(SpecModel):
    server_name: str = Field(description="MCP server name")
    tools: list[ToolSpec] = Field(min_length=1, description="Tools the server exposes")
    transport: Literal["stdio", "http"] = "stdio"


# --- Markdown components ---
class SkillComponent(SpecModel):
    name: str = Field(pattern=KEBAB_CASE_PATTERN)
    description: str
    version: str = "0.1.0"
    content: str = Field(description="Skill body (markdown)")


class CommandComponent(SpecModel):
    name: str = Field(pattern=KEBAB_CASE_PATTERN)
    description: str
    argument_hint: str | None = None
    allowed_tools: list[str] | None = None
    model: Literal["sonnet", "opus", "haiku"] | None = None
    disable_model_invocation: bool | None = None
    body: str


class AgentComponent(SpecModel):
    name: str = Field(pattern=AGENT_NAME_PATTERN)
    description: str
    model: Literal["inherit", "sonnet", "opus", "haiku"] = "inherit"
    color: Literal["blue", "cyan", "green", "yellow", "magenta", "red"] = "blue"
    tools: list[str] | None = None
    system_prompt: str


# --- Hooks ---
class HookEntry(SpecModel):
    matcher: str | None = None
    type: Literal["command", "prompt"] = "command"
    command: str | None = None
    prompt: str | None = None
    timeout: int = 60
    run_async: bool | None = Field(None, alias="async")


class HooksComponent(SpecModel):
    session_start: list[HookEntry] | None = None
    session_end: list[HookEntry] | None = None
    pre_tool_use: list[HookEntry] | None = None
    post_tool_use: list[HookEntry] | None = None
    stop: list[HookEntry] | None = None
    subagent_stop: list[HookEntry] | None = None
    user_prompt_submit: list[HookEntry] | None = None
    pre_compact: list[HookEntry] | None = None
    notification: list[HookEntry] | None = None


class Components(SpecModel):
    mcp: McpComponent | None = None
    skills: list[SkillComponent] | None = None
    commands: list[CommandComponent] | None = None
    agents: list[AgentComponent] | None = None
    hooks: HooksComponent | None = None

    @model_validator(mode="after")
    def _unique_names(self) -> Components:
        checks = [
            ("skill", [s.name for s in self.skills or []]),
            ("command", [c.name for c in self.commands or []]),
            ("agent", [a.name for a in self.agents or []]),
            ("tool", [to_snake_case(t.name) for t in self.mcp.tools] if self.mcp else []),
        ]
        for kind, names in checks:
            duplicates = _duplicates(names)
            if duplicates:
                raise ValueError(f"duplicate {kind} names: {', '.join(duplicates)}")
        return self


class Author(SpecModel):
    name: str
    email: str | None = None
    url: str | None = None


class PluginSpec(SpecModel):
    name: str = Field(pattern=KEBAB_CASE_PATTERN, description="Plugin name (kebab-case)")
    description: str
    author: Author | None = None
    output_path: str = Field(description="Directory the plugin folder is created in")
    write_to_disk: bool = True
    components: Components = Field(default_factory=Components)

    @property
    def plugin_path(self) -> Path:
        return Path(self.output_path).expanduser() / self.name


def _duplicates(names: list[str]) -> list[str]:
    seen: set[str] = set()
    dups: list[str] = []
    for name in names:
        if name in seen and name not in dups:
            dups.append(name)
        seen.add(name)
    return dups


# --- Generated output ---
@dataclass(frozen=True)
class GeneratedFile:
    relative_path: str
    content: str


@dataclass(frozen=True)
class ConflictEntry:
    kind: ConflictKind
    name: str
    detail: str


# --- Installation state (read-only projections) ---
@dataclass
class ResolvedPlugin:
    registry_key: str
    name: str
    version: str
    description: str
    install_path: Path
    scope: str
    installed_at: str = ""
    last_updated: str = ""
    author: dict[str, Any] | None = None
    homepage: str | None = None
    repository: str | None = None
    license: str | None = None
    keywords: list[str] | None = None
    has_mcp_config: bool = False
    has_skills: bool = False


@dataclass
class McpServerConfig:
    server_name: str
    source_plugin: str
    source_plugin_name: str
    command: str | None = None
    args: list[str] | None = None
    env: dict[str, str] | None = None
    cwd: str | None = None
    type: str | None = None
    url: str | None = None
    headers: dict[str, str] | None = None

    @property
    def transport(self) -> str:
        return "stdio" if self.command else "http"


@dataclass
class SkillInfo:
    name: str
    description: str
    source: SkillSource
    file_path: Path
    directory_name: str
    source_plugin: str | None = None
    source_plugin_name: str | None = None
