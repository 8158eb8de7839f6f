"""
plugins_mcp.frontmatter

YAML frontmatter helpers for markdown documents (SKILL.md, agents, commands).

Writing: values are emitted bare when they contain nothing YAML-significant,
double-quoted when they do, and as a literal block scalar when they span lines, so that
`yaml.safe_load` of the rendered frontmatter yields the original strings.

Reading: a lenient parser for skills found on disk; documents without (valid)
frontmatter still produce a name and a description.
"""

from __future__ import annotations

import re
from typing import Any

import yaml


_NEEDS_QUOTING = re.compile(r"[:{}\[\],&*?|>!%#@`\"'\n\r]")
# Line breaks other than \n and characters a YAML reader rejects; only double quotes carry them.
_NEEDS_ESCAPE = re.compile(r"[\r\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\u2028\u2029\ufffe\uffff]")
_ESCAPED_CHARS = re.compile(
    r'[\\"\n\t\r\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\u2028\u2029\ufffe\uffff]'
)
_HEADING = re.compile(r"^#+\s+(.+)")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\x85": "\\N",
    "\u2028": "\\L",
    "\u2029": "\\P",
}


def _escape_char(match: re.Match[str]) -> str:
    char = match.group(0)
    if char in _ESCAPES:
        return _ESCAPES[char]
    code = ord(char)
    return f"\\x{code:02x}" if code < 0x100 else f"\\u{code:04x}"


def escape_yaml_string(value: str) -> str:
    """Escape a string for use inside double quotes."""
    return _ESCAPED_CHARS.sub(_escape_char, value)


def _reads_back_as_itself(value: str) -> bool:
    try:
        return yaml.safe_load(value) == value
    except yaml.YAMLError:
        return False


def _block_scalar(value: str) -> str:
    content = value.rstrip("\n")
    trailing = len(value) - len(content)
    chomp = "-" if trailing == 0 else ("" if trailing == 1 else "+")
    # Keep chomping writes the extra line breaks as empty lines.
    lines = (content + "\n" * max(trailing - 1, 0)).split("\n")
    indent = "2" if content.lstrip("\n").startswith(" ") else ""
    body = "\n".join(f"  {line}" if line else "" for line in lines)
    return f"|{indent}{chomp}\n{body}"


def format_yaml_value(value: str) -> str:
    """
    function_purpose: Format a scalar for use as a frontmatter value.

    - Multi-line strings use a literal block scalar, each line indented two spaces. The
      chomping indicator keeps trailing newlines (`|-` none, `|` one, `|+` more) and an
      indentation indicator is added when the first line starts with a space.
    - Strings with YAML-significant characters, or that would load as something other than
      the same string (`true`, `""`, ` padded`), are double-quoted
    - Anything else is emitted bare
    """
    if _NEEDS_ESCAPE.search(value) or (value and not value.strip("\n")):
        return f'"{escape_yaml_string(value)}"'
    if "\n" in value:
        return _block_scalar(value)
    if _NEEDS_QUOTING.search(value) or not _reads_back_as_itself(value):
        return f'"{escape_yaml_string(value)}"'
    return value


def format_yaml_list(values: list[str]) -> str:
    """Inline flow sequence of double-quoted strings, e.g. `["Read", "Grep"]`."""
    return "[" + ", ".join(f'"{escape_yaml_string(v)}"' for v in values) + "]"


def append_yaml_field(lines: list[str], key: str, value: str | None) -> None:
    if value is None:
        return
    lines.append(f"{key}: {format_yaml_value(value)}")


def render_frontmatter_document(fields: list[str], body: str) -> str:
    """Assemble `---`, the field lines, `---`, a blank line, and the body."""
    return "\n".join(["---", *fields, "---"]) + f"\n\n{body}\n"


# --- Reading ---
def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    function_purpose: Parse YAML frontmatter delimited by '---' lines, followed by markdown body.

    Returns a (frontmatter_dict, body_text) tuple. Raises ValueError when the document has
    no frontmatter block or it does not parse to a mapping.
    """
    lines = text.lstrip().splitlines(keepends=False)
    if not lines or lines[0].strip() != "---":
        raise ValueError("document must begin with a '---' line for YAML frontmatter")

    fm_lines: list[str] = []
    idx = 1
    while idx < len(lines) and lines[idx].rstrip() != "---":
        fm_lines.append(lines[idx])
        idx += 1

    if idx >= len(lines) or lines[idx].rstrip() != "---":
        raise ValueError("YAML frontmatter must end with a '---' line")

    try:
        fm = yaml.safe_load("\n".join(fm_lines)) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML frontmatter: {exc}") from exc
    if not isinstance(fm, dict):
        raise ValueError("YAML frontmatter must parse to a mapping")
    return fm, "\n".join(lines[idx + 1 :]).strip()


def parse_frontmatter(text: str, directory_name: str) -> dict[str, Any]:
    """
    function_purpose: Extract {name, description, body} from a skill document.

    - name falls back to the skill's directory name
    - without usable frontmatter, the description is the first heading or first text line
    """
    try:
        fm, body = split_frontmatter(text)
    except ValueError:
        return {
            "name": directory_name,
            "description": _first_line_description(text),
            "body": text,
        }

    name = fm.get("name")
    description = fm.get("description")
    return {
        "name": str(name) if name else directory_name,
        "description": str(description) if description is not None else None,
        "body": body,
    }


def _first_line_description(text: str) -> str | None:
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        heading = _HEADING.match(stripped)
        if heading:
            return heading.group(1).strip()
        return stripped
    return None
