"""
Main MCP server implementation for traefik-hub.

This module provides the MCP server that exposes the Traefik stack tools
through the Model Context Protocol, letting AI assistants inspect routing,
manage containers, edit middlewares and diagnose the local proxy setup.
"""

import asyncio
from typing import List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from traefik_hub.config.settings import SERVER_NAME, TRAEFIK_NETWORK
from traefik_hub.exceptions import ConfigurationError
from traefik_hub.utils.logging import error_exit, log_info, set_mcp_mode, set_verbose

from .config import MCPConfig
from .tools.config_tools import ConfigTools
from .tools.container_tools import ContainerTools
from .tools.stack_tools import StackTools
from .tools.traefik_tools import TraefikTools


# Global server instance
server = Server(SERVER_NAME)

# Loaded from the environment on first use
_config: Optional[MCPConfig] = None


def get_config() -> MCPConfig:
    """Return the process configuration, loading it from the environment once."""
    global _config
    if _config is None:
        _config = MCPConfig.from_env()
    return _config


def set_config(config: Optional[MCPConfig]) -> None:
    global _config
    _config = config


NO_ARGS = {"type": "object", "properties": {}, "required": []}

PROVIDER_FILTER = {
    "type": "object",
    "properties": {
        "provider": {"type": "string", "description": "Filter by provider"}
    }
}

CONTAINER_NAME = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "description": "Container name"}
    },
    "required": ["name"]
}


@server.list_tools()
async def list_tools() -> List[Tool]:
    """List available MCP tools."""
    return [
        # Traefik API
        Tool(
            name="traefik_status",
            description="Get Traefik overview - version and component counts",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="list_routers",
            description="List all HTTP routers with their rules and status",
            inputSchema=PROVIDER_FILTER
        ),
        Tool(
            name="list_services",
            description="List all HTTP services registered in Traefik",
            inputSchema=PROVIDER_FILTER
        ),
        Tool(
            name="list_middlewares",
            description="List all HTTP middlewares",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="get_router",
            description="Get details of a specific router",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Router name (e.g., myapp@docker)"}
                },
                "required": ["name"]
            }
        ),
        # Containers
        Tool(
            name="list_containers",
            description=f"List Docker containers on {TRAEFIK_NETWORK} network",
            inputSchema={"type": "object", "properties": {}}
        ),
        Tool(
            name="container_logs",
            description="Get logs from a Docker container",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Container name"},
                    "tail": {"type": "number", "description": "Lines to return", "default": 50}
                },
                "required": ["name"]
            }
        ),
        Tool(
            name="restart_container",
            description="Restart a Docker container",
            inputSchema=CONTAINER_NAME
        ),
        Tool(
            name="check_health",
            description="Check if a domain is responding",
            inputSchema={
                "type": "object",
                "properties": {
                    "domain": {"type": "string", "description": "Domain (e.g., baby.localhost)"}
                },
                "required": ["domain"]
            }
        ),
        # Diagnostics
        Tool(
            name="doctor",
            description="Comprehensive health check of the Traefik stack - checks Docker, network, container, API, ports, and config",
            inputSchema=NO_ARGS
        ),
        # Configuration
        Tool(
            name="generate_labels",
            description="Generate docker-compose traefik labels for a new project",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Project/router name (e.g., myapp)"},
                    "domain": {"type": "string", "description": "Domain to use (e.g., myapp.localhost)"},
                    "port": {"type": "number", "description": "Internal container port"},
                    "middlewares": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Optional array of middleware names (e.g., secure-headers@file)"
                    }
                },
                "required": ["name", "domain", "port"]
            }
        ),
        Tool(
            name="add_middleware",
            description="Add a new middleware to traefik/dynamic/middlewares.yml (Traefik hot-reloads automatically)",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Middleware name"},
                    "type": {"type": "string", "description": "Middleware type (headers, rateLimit, stripPrefix, etc.)"},
                    "config": {"type": "object", "description": "Configuration object for the middleware type"}
                },
                "required": ["name", "type", "config"]
            }
        ),
        Tool(
            name="list_middleware_types",
            description="Show available middleware types with example configurations",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="check_setup",
            description="Verify MCP configuration - checks that env vars and paths are correctly set",
            inputSchema=NO_ARGS
        ),
        # Stack lifecycle
        Tool(
            name="start_traefik",
            description="Start the Traefik stack (docker compose up -d). Requires Docker running.",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="stop_traefik",
            description="Stop the Traefik stack (docker compose down). Requires Docker running.",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="create_network",
            description=f"Create the {TRAEFIK_NETWORK} Docker network. Requires Docker running.",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="init_stack",
            description="Initialize Traefik stack from scratch - creates network and starts containers. Requires Docker running.",
            inputSchema=NO_ARGS
        ),
        # CORS
        Tool(
            name="get_cors",
            description="Show current CORS configuration (allowed origins from cors-dev middleware)",
            inputSchema=NO_ARGS
        ),
        Tool(
            name="update_cors",
            description="Add or remove origins from the cors-dev middleware",
            inputSchema={
                "type": "object",
                "properties": {
                    "add": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Origins to add (e.g., http://myapp.localhost)"
                    },
                    "remove": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Origins to remove"
                    }
                }
            }
        ),
    ]


async def dispatch(name: str, arguments: dict, config: MCPConfig) -> str:
    """Route a tool call to its handler and return the text result."""
    if name in ("traefik_status", "list_routers", "list_services", "list_middlewares", "get_router"):
        traefik_tools = TraefikTools(config)
        if name == "traefik_status":
            return await traefik_tools.traefik_status(arguments)
        elif name == "list_routers":
            return await traefik_tools.list_routers(arguments)
        elif name == "list_services":
            return await traefik_tools.list_services(arguments)
        elif name == "list_middlewares":
            return await traefik_tools.list_middlewares(arguments)
        return await traefik_tools.get_router(arguments)

    if name in ("list_containers", "container_logs", "restart_container", "check_health"):
        container_tools = ContainerTools(config)
        if name == "list_containers":
            return await container_tools.list_containers(arguments)
        elif name == "container_logs":
            return await container_tools.container_logs(arguments)
        elif name == "restart_container":
            return await container_tools.restart_container(arguments)
        return await container_tools.check_health(arguments)

    if name in ("doctor", "check_setup", "start_traefik", "stop_traefik", "create_network", "init_stack"):
        stack_tools = StackTools(config)
        if name == "doctor":
            return await stack_tools.doctor_report(arguments)
        elif name == "check_setup":
            return await stack_tools.check_setup(arguments)
        elif name == "start_traefik":
            return await stack_tools.start_traefik(arguments)
        elif name == "stop_traefik":
            return await stack_tools.stop_traefik(arguments)
        elif name == "create_network":
            return await stack_tools.create_network(arguments)
        return await stack_tools.init_stack(arguments)

    if name in ("generate_labels", "add_middleware", "list_middleware_types", "get_cors", "update_cors"):
        config_tools = ConfigTools(config)
        if name == "generate_labels":
            return await config_tools.generate_labels(arguments)
        elif name == "add_middleware":
            return await config_tools.add_middleware(arguments)
        elif name == "list_middleware_types":
            return await config_tools.list_middleware_types(arguments)
        elif name == "get_cors":
            return await config_tools.get_cors(arguments)
        return await config_tools.update_cors(arguments)

    return f"Unknown tool: {name}"


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> List[TextContent]:
    """Handle tool calls."""
    log_info(f"Tool call: {name}")
    try:
        text = await dispatch(name, arguments or {}, get_config())
    except Exception as e:
        text = f"Error: {e}"
    return [TextContent(type="text", text=text)]


async def main():
    """Main entry point for the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def cli_main():
    """CLI entry point for the MCP server."""
    set_mcp_mode(True)
    try:
        config = get_config()
    except ConfigurationError as e:
        error_exit(str(e))
    set_verbose(config.verbose)
    asyncio.run(main())


if __name__ == "__main__":
    cli_main()
