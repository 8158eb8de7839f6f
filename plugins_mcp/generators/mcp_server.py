"""
plugins_mcp.generators.mcp_server

Render a small TypeScript MCP server project for a plugin's MCP component:

- package.json           SDK + zod dependencies, build/start scripts
- tsconfig.json          strict compiler settings
- .mcp.json              how Claude Code connects (stdio spawn or http url)
- src/types.ts           one zod `<Tool>Input` schema per tool
- src/index.ts           server construction and tool registration
- src/tools/<tool>.ts    one handler stub per tool

All cross-file symbols for a tool come from `_symbols()`, so schema, handler, module
path and wire id always agree.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from plugins_mcp.generators.common import PLUGIN_ROOT, js_literal, render_json
from plugins_mcp.models import (
    BooleanParameter,
    GeneratedFile,
    McpComponent,
    NumberParameter,
    ToolParameter,
    ToolSpec,
)
from plugins_mcp.naming import to_field_name, to_pascal_case, to_snake_case


SDK_VERSION = "^1.12.1"
ZOD_VERSION = "^3.24.0"
HTTP_URL = "https://localhost:3000/mcp"


class _ToolSymbols(NamedTuple):
    tool_id: str
    schema: str
    handler: str
    params_type: str
    module: str


def _symbols(tool: ToolSpec) -> _ToolSymbols:
    snake = to_snake_case(tool.name)
    pascal = to_pascal_case(snake)
    return _ToolSymbols(
        tool_id=snake,
        schema=f"{pascal}Input",
        handler=f"handle{pascal}",
        params_type=f"{pascal}Params",
        module=f"tools/{snake}",
    )


def _field_name(param: ToolParameter) -> str:
    return to_field_name(param.name)


def _has_params(tool: ToolSpec) -> bool:
    return bool(tool.parameters)


# --- package.json / tsconfig.json / .mcp.json ---
def generate_package_json(plugin_name: str) -> GeneratedFile:
    pkg = {
        "name": plugin_name,
        "version": "1.0.0",
        "description": f"MCP server for {plugin_name}",
        "type": "module",
        "main": "dist/index.js",
        "scripts": {
            "build": "tsc",
            "start": "node dist/index.js",
            "dev": "tsc --watch",
        },
        "dependencies": {
            "@modelcontextprotocol/sdk": SDK_VERSION,
            "zod": ZOD_VERSION,
        },
        "devDependencies": {
            "@types/node": "^22.0.0",
            "typescript": "^5.7.0",
        },
    }
    return GeneratedFile(relative_path="package.json", content=render_json(pkg))


def generate_tsconfig() -> GeneratedFile:
    config = {
        "compilerOptions": {
            "target": "ES2022",
            "module": "Node16",
            "moduleResolution": "Node16",
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "resolveJsonModule": True,
            "declaration": True,
            "sourceMap": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist"],
    }
    return GeneratedFile(relative_path="tsconfig.json", content=render_json(config))


def generate_mcp_json(mcp: McpComponent) -> GeneratedFile:
    server: dict[str, Any]
    if mcp.transport == "stdio":
        server = {"command": "node", "args": [f"{PLUGIN_ROOT}/dist/index.js"]}
    else:
        server = {"type": "http", "url": HTTP_URL}
    return GeneratedFile(
        relative_path=".mcp.json",
        content=render_json({"mcpServers": {mcp.server_name: server}}),
    )


# --- src/types.ts ---
def _zod_type(param: ToolParameter) -> str:
    if param.type == "number":
        return "z.number()"
    if param.type == "boolean":
        return "z.boolean()"
    if param.type == "enum" and param.enum_values:
        return f"z.enum([{', '.join(js_literal(v) for v in param.enum_values)}])"
    return "z.string()"


def _coerce_default(param: ToolParameter) -> Any:
    """Numbers are parsed from their text form, booleans read "true"/"1" as true."""
    value = param.default_value
    if isinstance(param, NumberParameter):
        number = float(value)
        return int(number) if number.is_integer() else number
    if isinstance(param, BooleanParameter):
        if isinstance(value, bool):
            return value
        return str(value) in ("true", "1")
    return value


def _zod_field(param: ToolParameter) -> str:
    field = _zod_type(param)
    if not param.required:
        field += ".optional()"
    if param.default_value is not None:
        field += f".default({js_literal(_coerce_default(param))})"
    field += f".describe({js_literal(param.description)})"
    return field


def generate_types_file(tools: list[ToolSpec]) -> GeneratedFile:
    lines = ['import { z } from "zod";', ""]
    for tool in tools:
        schema = _symbols(tool).schema
        if not _has_params(tool):
            lines.append(f"export const {schema} = z.object({{}});")
        else:
            lines.append(f"export const {schema} = z.object({{")
            for param in tool.parameters:
                lines.append(f"  {_field_name(param)}: {_zod_field(param)},")
            lines.append("});")
        lines.append("")
    return GeneratedFile(relative_path="src/types.ts", content="\n".join(lines))


# --- src/tools/<tool>.ts ---
def generate_tool_handler(tool: ToolSpec) -> GeneratedFile:
    sym = _symbols(tool)
    lines: list[str] = []
    if _has_params(tool):
        lines += [
            'import { z } from "zod";',
            f'import {{ {sym.schema} }} from "../types.js";',
            "",
            f"type {sym.params_type} = z.infer<typeof {sym.schema}>;",
            "",
            f"export async function {sym.handler}(params: {sym.params_type}) {{",
        ]
    else:
        lines.append(f"export async function {sym.handler}() {{")

    lines += [
        "  // TODO: Implement tool logic",
        f"  const result = {{ status: \"ok\", tool: {js_literal(sym.tool_id)} }};",
        "",
        "  return {",
        '    content: [{ type: "text" as const, text: JSON.stringify(result, null, 2) }],',
        "  };",
        "}",
        "",
    ]
    return GeneratedFile(relative_path=f"src/{sym.module}.ts", content="\n".join(lines))


# --- src/index.ts ---
def generate_index_file(plugin_name: str, mcp: McpComponent) -> GeneratedFile:
    lines = [
        'import { McpServer } from "@modelcontextprotocol/sdk/server/mcp.js";',
        'import { StdioServerTransport } from "@modelcontextprotocol/sdk/server/stdio.js";',
    ]
    schemas = [_symbols(t).schema for t in mcp.tools if _has_params(t)]
    if schemas:
        lines.append(f'import {{ {", ".join(schemas)} }} from "./types.js";')
    for tool in mcp.tools:
        sym = _symbols(tool)
        lines.append(f'import {{ {sym.handler} }} from "./{sym.module}.js";')

    lines += [
        "",
        "const server = new McpServer({",
        f"  name: {js_literal(plugin_name)},",
        '  version: "1.0.0",',
        "});",
        "",
    ]

    for tool in mcp.tools:
        sym = _symbols(tool)
        lines += [
            "server.tool(",
            f"  {js_literal(sym.tool_id)},",
            f"  {js_literal(tool.description)},",
        ]
        if _has_params(tool):
            lines += [
                f"  {sym.schema}.shape,",
                f"  async (params) => {sym.handler}(params),",
            ]
        else:
            lines += ["  {},", f"  async () => {sym.handler}(),"]
        lines += [");", ""]

    lines += [
        "const transport = new StdioServerTransport();",
        "await server.connect(transport);",
        "",
    ]
    return GeneratedFile(relative_path="src/index.ts", content="\n".join(lines))


def generate_mcp_server(plugin_name: str, mcp: McpComponent) -> list[GeneratedFile]:
    files = [
        generate_package_json(plugin_name),
        generate_tsconfig(),
        generate_mcp_json(mcp),
        generate_types_file(mcp.tools),
        generate_index_file(plugin_name, mcp),
    ]
    files.extend(generate_tool_handler(tool) for tool in mcp.tools)
    return files
