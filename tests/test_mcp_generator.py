from __future__ import annotations

import json

import pytest

from plugins_mcp.generators import generate_mcp_server
from plugins_mcp.models import McpComponent


def _files(mcp: dict, plugin_name: str = "weather-plugin") -> dict[str, str]:
    generated = generate_mcp_server(plugin_name, McpComponent.model_validate(mcp))
    return {f.relative_path: f.content for f in generated}


@pytest.fixture
def weather_mcp() -> dict:
    return {
        "serverName": "weather",
        "tools": [
            {
                "name": "get-weather",
                "description": "Current weather for a city",
                "parameters": [
                    {"name": "city", "type": "string", "description": "City name"},
                    {
                        "name": "unit",
                        "type": "enum",
                        "description": "Temperature unit",
                        "enumValues": ["c", "f"],
                        "required": False,
                        "defaultValue": "c",
                    },
                ],
            },
            {"name": "list_alerts", "description": "Active alerts"},
        ],
    }


def test_project_file_order(weather_mcp: dict) -> None:
    generated = generate_mcp_server("weather-plugin", McpComponent.model_validate(weather_mcp))
    assert [f.relative_path for f in generated] == [
        "package.json",
        "tsconfig.json",
        ".mcp.json",
        "src/types.ts",
        "src/index.ts",
        "src/tools/get_weather.ts",
        "src/tools/list_alerts.ts",
    ]


def test_tool_symbols_agree_across_files(weather_mcp: dict) -> None:
    files = _files(weather_mcp)
    types_ts = files["src/types.ts"]
    index_ts = files["src/index.ts"]
    handler_ts = files["src/tools/get_weather.ts"]

    assert "export const GetWeatherInput = z.object({" in types_ts
    assert '  city: z.string().describe("City name"),' in types_ts
    assert (
        '  unit: z.enum(["c", "f"]).optional().default("c").describe("Temperature unit"),'
        in types_ts
    )
    assert "export const ListAlertsInput = z.object({});" in types_ts

    assert "export async function handleGetWeather(params: GetWeatherParams) {" in handler_ts
    assert 'import { GetWeatherInput } from "../types.js";' in handler_ts
    assert "export async function handleListAlerts() {" in files["src/tools/list_alerts.ts"]

    assert 'import { GetWeatherInput } from "./types.js";' in index_ts
    assert 'import { handleGetWeather } from "./tools/get_weather.js";' in index_ts
    assert 'import { handleListAlerts } from "./tools/list_alerts.js";' in index_ts
    assert '  "get_weather",\n  "Current weather for a city",\n  GetWeatherInput.shape,' in index_ts
    assert '  "list_alerts",\n  "Active alerts",\n  {},\n  async () => handleListAlerts(),' in index_ts
    assert index_ts.index('"get_weather"') < index_ts.index('"list_alerts"')


def test_server_is_named_after_plugin(weather_mcp: dict) -> None:
    files = _files(weather_mcp)
    assert 'name: "weather-plugin",' in files["src/index.ts"]
    package = json.loads(files["package.json"])
    assert package["name"] == "weather-plugin"
    assert set(package["dependencies"]) == {"@modelcontextprotocol/sdk", "zod"}
    assert json.loads(files["tsconfig.json"])["compilerOptions"]["strict"] is True


def test_stdio_connection(weather_mcp: dict) -> None:
    assert json.loads(_files(weather_mcp)[".mcp.json"]) == {
        "mcpServers": {
            "weather": {"command": "node", "args": ["${CLAUDE_PLUGIN_ROOT}/dist/index.js"]}
        }
    }


def test_http_connection(weather_mcp: dict) -> None:
    weather_mcp["transport"] = "http"
    assert json.loads(_files(weather_mcp)[".mcp.json"]) == {
        "mcpServers": {"weather": {"type": "http", "url": "https://localhost:3000/mcp"}}
    }


@pytest.mark.parametrize(
    ("param", "expected"),
    [
        ({"type": "number", "defaultValue": "5"}, "z.number().default(5)"),
        ({"type": "number", "defaultValue": 2.5}, "z.number().default(2.5)"),
        ({"type": "boolean", "defaultValue": "1"}, "z.boolean().default(true)"),
        ({"type": "boolean", "defaultValue": "yes"}, "z.boolean().default(false)"),
        ({"type": "boolean", "defaultValue": True}, "z.boolean().default(true)"),
        ({"type": "string", "required": False}, "z.string().optional().describe"),
    ],
)
def test_parameter_defaults_are_coerced(param: dict, expected: str) -> None:
    mcp = {
        "serverName": "s",
        "tools": [
            {
                "name": "t",
                "description": "d",
                "parameters": [{"name": "value", "description": "v", **param}],
            }
        ],
    }
    assert f"  value: {expected}" in _files(mcp)["src/types.ts"]


def test_parameter_names_become_camel_case_fields() -> None:
    mcp = {
        "serverName": "s",
        "tools": [
            {
                "name": "Search Docs",
                "description": "d",
                "parameters": [{"name": "max-results", "type": "number", "description": "n"}],
            }
        ],
    }
    files = _files(mcp)
    assert "src/tools/search_docs.ts" in files
    assert "export const SearchDocsInput = z.object({" in files["src/types.ts"]
    assert "  maxResults: z.number()" in files["src/types.ts"]


def test_declared_camel_case_parameter_names_are_kept() -> None:
    mcp = {
        "serverName": "s",
        "tools": [
            {
                "name": "search",
                "description": "d",
                "parameters": [
                    {"name": "maxResults", "type": "number", "description": "n"},
                    {"name": "page_size", "type": "number", "description": "p"},
                    {"name": "Sort Order", "type": "string", "description": "o"},
                ],
            }
        ],
    }
    types_ts = _files(mcp)["src/types.ts"]
    assert "  maxResults: z.number()" in types_ts
    assert "  pageSize: z.number()" in types_ts
    assert "  sortOrder: z.string()" in types_ts
    assert "maxresults" not in types_ts
