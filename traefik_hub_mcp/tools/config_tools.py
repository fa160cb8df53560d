"""
MCP tools for Traefik configuration: labels and dynamic middlewares.
"""

from typing import Any, Dict

from traefik_hub.core.labels import generate_labels, get_middleware_types
from traefik_hub.exceptions import MiddlewareConfigError


class ConfigTools:
    """MCP tools for compose labels and the dynamic middleware file."""

    def __init__(self, config, middleware_file=None):
        """Initialize config tools."""
        self.config = config
        self.middleware_file = middleware_file or config.middleware_file()

    async def generate_labels(self, arguments: Dict[str, Any]) -> str:
        """Compose labels routing a new service through Traefik."""
        missing = [key for key in ("name", "domain", "port") if arguments.get(key) in (None, "")]
        if missing:
            return f"Error: {', '.join(missing)} is required"
        return generate_labels(
            arguments["name"],
            arguments["domain"],
            int(arguments["port"]),
            arguments.get("middlewares"),
        )

    async def add_middleware(self, arguments: Dict[str, Any]) -> str:
        """Add a middleware to dynamic/middlewares.yml."""
        name = arguments.get("name")
        middleware_type = arguments.get("type")
        if not name or not middleware_type:
            return "Error: name and type are required"
        try:
            return self.middleware_file.add_middleware(name, middleware_type, arguments.get("config") or {})
        except MiddlewareConfigError as e:
            return f"Error: {e}"

    async def list_middleware_types(self, arguments: Dict[str, Any]) -> str:
        return get_middleware_types()

    async def get_cors(self, arguments: Dict[str, Any]) -> str:
        return self.middleware_file.describe_cors()

    async def update_cors(self, arguments: Dict[str, Any]) -> str:
        try:
            return self.middleware_file.update_cors(arguments.get("add"), arguments.get("remove"))
        except MiddlewareConfigError as e:
            return f"Error: {e}"
