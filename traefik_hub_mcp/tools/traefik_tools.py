"""
MCP tools for the Traefik management API.

Read-only views of Traefik's routing state rendered as markdown tables.
"""

from typing import Any, Dict

from traefik_hub.config.settings import DASHBOARD_URL
from traefik_hub.core.traefik_api import http_total
from traefik_hub.exceptions import TraefikApiError


class TraefikTools:
    """MCP tools for querying Traefik."""

    def __init__(self, config, api=None):
        """Initialize Traefik tools."""
        self.config = config
        self.api = api or config.traefik_api()

    async def traefik_status(self, arguments: Dict[str, Any]) -> str:
        """Version and component counts."""
        try:
            overview = self.api.overview()
            version = self.api.version()
        except TraefikApiError as e:
            return f"Error: {e}"

        return f"""# Traefik Status

**Version**: {version.get("Version") or "unknown"}

| Component | Count |
|-----------|-------|
| Routers | {http_total(overview, "routers")} |
| Services | {http_total(overview, "services")} |
| Middlewares | {http_total(overview, "middlewares")} |

**Dashboard**: {DASHBOARD_URL}"""

    async def list_routers(self, arguments: Dict[str, Any]) -> str:
        """List HTTP routers, optionally filtered by provider."""
        try:
            routers = self.api.routers(arguments.get("provider"))
        except TraefikApiError as e:
            return f"Error: {e}"
        if not routers:
            return "No routers found."

        lines = ["# HTTP Routers\n", "| Name | Rule | Service | Status |", "|------|------|---------|--------|"]
        for r in routers:
            lines.append(f"| {r.get('name')} | `{r.get('rule')}` | {r.get('service')} | {r.get('status')} |")
        return "\n".join(lines)

    async def list_services(self, arguments: Dict[str, Any]) -> str:
        """List HTTP services, optionally filtered by provider."""
        try:
            services = self.api.services(arguments.get("provider"))
        except TraefikApiError as e:
            return f"Error: {e}"
        if not services:
            return "No services found."

        lines = ["# HTTP Services\n", "| Name | Type | Status |", "|------|------|--------|"]
        for s in services:
            lines.append(f"| {s.get('name')} | {s.get('type')} | {s.get('status')} |")
        return "\n".join(lines)

    async def list_middlewares(self, arguments: Dict[str, Any]) -> str:
        """List HTTP middlewares."""
        try:
            middlewares = self.api.middlewares()
        except TraefikApiError as e:
            return f"Error: {e}"
        if not middlewares:
            return "No middlewares found."

        lines = ["# HTTP Middlewares\n", "| Name | Type | Provider |", "|------|------|----------|"]
        for m in middlewares:
            lines.append(f"| {m.get('name')} | {m.get('type')} | {m.get('provider')} |")
        return "\n".join(lines)

    async def get_router(self, arguments: Dict[str, Any]) -> str:
        """Details of one router."""
        name = arguments.get("name")
        if not name:
            return "Error: name is required"
        try:
            router = self.api.router(name)
        except TraefikApiError as e:
            return f"Error: {e}"

        return f"""# Router: {name}

**Status**: {router.get("status")}
**Provider**: {router.get("provider")}
**Rule**: `{router.get("rule")}`
**Service**: {router.get("service")}
**EntryPoints**: {", ".join(router.get("entryPoints") or []) or "none"}
**Middlewares**: {", ".join(router.get("middlewares") or []) or "none"}"""
