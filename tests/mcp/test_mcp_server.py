"""
Tests for the traefik-hub MCP server.

This module covers tool registration, dispatch and configuration loading.
"""

import pytest

from traefik_hub.exceptions import ConfigurationError
from traefik_hub_mcp import server
from traefik_hub_mcp.config import MCPConfig

TOOL_NAMES = [
    "traefik_status", "list_routers", "list_services", "list_middlewares", "get_router",
    "list_containers", "container_logs", "restart_container", "check_health",
    "doctor",
    "generate_labels", "add_middleware", "list_middleware_types", "check_setup",
    "start_traefik", "stop_traefik", "create_network", "init_stack",
    "get_cors", "update_cors",
]


@pytest.fixture(autouse=True)
def reset_config():
    server.set_config(None)
    yield
    server.set_config(None)


@pytest.fixture
def mcp_config(config_dir, hub_dir):
    return MCPConfig(config_dir=config_dir, hub_dir=hub_dir)


class TestToolRegistration:
    @pytest.mark.asyncio
    async def test_list_tools(self):
        tools = await server.list_tools()

        assert [tool.name for tool in tools] == TOOL_NAMES

    @pytest.mark.asyncio
    async def test_required_arguments_declared(self):
        tools = {tool.name: tool for tool in await server.list_tools()}

        assert tools["generate_labels"].inputSchema["required"] == ["name", "domain", "port"]
        assert tools["add_middleware"].inputSchema["required"] == ["name", "type", "config"]
        assert tools["container_logs"].inputSchema["properties"]["tail"]["default"] == 50
        assert "required" not in tools["update_cors"].inputSchema


class TestCallTool:
    @pytest.mark.asyncio
    async def test_returns_text_content(self, mcp_config):
        server.set_config(mcp_config)

        result = await server.call_tool("list_middleware_types", {})

        assert len(result) == 1
        assert result[0].type == "text"
        assert result[0].text.startswith("# Available Traefik Middleware Types")

    @pytest.mark.asyncio
    async def test_unknown_tool(self, mcp_config):
        server.set_config(mcp_config)

        result = await server.call_tool("deploy_everything", {})

        assert result[0].text == "Unknown tool: deploy_everything"

    @pytest.mark.asyncio
    async def test_none_arguments(self, mcp_config):
        server.set_config(mcp_config)

        result = await server.call_tool("get_cors", None)

        assert result[0].text.startswith("# CORS Configuration (cors-dev)")

    @pytest.mark.asyncio
    async def test_missing_env_reported_as_text(self, monkeypatch):
        monkeypatch.delenv("TRAEFIK_CONFIG_DIR", raising=False)
        monkeypatch.delenv("TRAEFIK_HUB_DIR", raising=False)

        result = await server.call_tool("doctor", {})

        assert result[0].text == "Error: Required env var TRAEFIK_CONFIG_DIR, TRAEFIK_HUB_DIR is not set"

    @pytest.mark.asyncio
    async def test_unexpected_errors_reported_as_text(self, mcp_config, monkeypatch):
        server.set_config(mcp_config)

        async def boom(name, arguments, config):
            raise RuntimeError("socket closed")

        monkeypatch.setattr(server, "dispatch", boom)

        result = await server.call_tool("doctor", {})

        assert result[0].text == "Error: socket closed"


class TestMCPConfig:
    def test_defaults(self, config_dir, hub_dir):
        config = MCPConfig(config_dir=config_dir, hub_dir=hub_dir)

        assert config.api_url == "http://localhost:8080"
        assert config.timeout == 300
        assert config.verbose is False
        assert config.middlewares_path == config_dir / "dynamic" / "middlewares.yml"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("TRAEFIK_CONFIG_DIR", "/srv/traefik-hub/traefik")
        monkeypatch.setenv("TRAEFIK_HUB_DIR", "/srv/traefik-hub")
        monkeypatch.setenv("TRAEFIK_API_URL", "http://localhost:9090/")
        monkeypatch.setenv("TRAEFIK_HUB_TIMEOUT", "600")
        monkeypatch.setenv("TRAEFIK_HUB_VERBOSE", "true")

        config = MCPConfig.from_env()

        assert config.to_dict() == {
            "config_dir": "/srv/traefik-hub/traefik",
            "hub_dir": "/srv/traefik-hub",
            "api_url": "http://localhost:9090",
            "timeout": 600,
            "verbose": True,
        }

    def test_from_env_missing(self, monkeypatch):
        monkeypatch.setenv("TRAEFIK_CONFIG_DIR", "/srv/traefik-hub/traefik")
        monkeypatch.delenv("TRAEFIK_HUB_DIR", raising=False)

        with pytest.raises(ConfigurationError) as exc_info:
            MCPConfig.from_env()

        assert exc_info.value.error_code == "missing_env"
        assert exc_info.value.details == {"missing": ["TRAEFIK_HUB_DIR"]}

    def test_get_config_loads_once(self, monkeypatch):
        monkeypatch.setenv("TRAEFIK_CONFIG_DIR", "/srv/traefik-hub/traefik")
        monkeypatch.setenv("TRAEFIK_HUB_DIR", "/srv/traefik-hub")

        first = server.get_config()
        monkeypatch.setenv("TRAEFIK_HUB_DIR", "/elsewhere")

        assert server.get_config() is first


def test_cli_main_exits_on_missing_env(monkeypatch):
    monkeypatch.delenv("TRAEFIK_CONFIG_DIR", raising=False)
    monkeypatch.delenv("TRAEFIK_HUB_DIR", raising=False)
    monkeypatch.setattr("traefik_hub_mcp.server.set_mcp_mode", lambda enabled: None)

    with pytest.raises(SystemExit) as exc_info:
        server.cli_main()

    assert exc_info.value.code == 1
