"""
plugins_mcp.naming

Identifier case conversions shared by the generators.

Every generated file that refers to a tool (schema name, handler name, module path,
wire-level tool id) derives its symbol from the same functions here, so a tool named
`get-weather` is `get_weather` / `GetWeather` everywhere. Parameter fields keep the
capitals they were declared with (`maxResults`, `max-results` -> `maxResults`).
"""

from __future__ import annotations

import re


_NON_ALNUM_RUN = re.compile(r"[^a-zA-Z0-9]+")
_SEGMENT_SEPARATORS = re.compile(r"[-_]+")
_SCRIPT_UNSAFE = re.compile(r"[^a-zA-Z0-9-]+")
_DASH_RUN = re.compile(r"-{2,}")
_SCRIPT_EXTENSIONS = (".sh", ".py")
_IDENTIFIER_START = re.compile(r"[a-zA-Z]")


def to_snake_case(name: str) -> str:
    """Lowercase and collapse each run of non-alphanumerics into one underscore."""
    return _NON_ALNUM_RUN.sub("_", name).strip("_").lower()


def to_pascal_case(name: str) -> str:
    """Split on `-`/`_` runs and capitalize the first character of each segment."""
    return "".join(s[:1].upper() + s[1:] for s in _SEGMENT_SEPARATORS.split(name))


def to_camel_case(name: str) -> str:
    pascal = to_pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def to_field_name(name: str) -> str:
    """camelCase property name; existing capitals are kept, other characters separate words."""
    return to_camel_case(_NON_ALNUM_RUN.sub("_", name).strip("_"))


def is_identifier_start(symbol: str) -> bool:
    return _IDENTIFIER_START.match(symbol) is not None


def to_script_name(command: str) -> str:
    """
    function_purpose: Derive a filesystem-safe hook script file name from raw command text.

    - An existing `.sh` / `.py` extension is kept; anything else gets `.sh` appended.
    - The stem is reduced to letters, digits and single dashes.
    - Identical command text always yields the identical name.
    """
    stem, ext = command.strip(), ".sh"
    for candidate in _SCRIPT_EXTENSIONS:
        if stem.endswith(candidate):
            stem, ext = stem[: -len(candidate)], candidate
            break
    stem = _DASH_RUN.sub("-", _SCRIPT_UNSAFE.sub("-", stem)).strip("-")
    return f"{stem or 'hook'}{ext}"
