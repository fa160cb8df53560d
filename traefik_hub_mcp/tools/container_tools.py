"""
MCP tools for containers on the shared Traefik network.
"""

from typing import Any, Dict

from traefik_hub.config.settings import HEALTH_CHECK_TIMEOUT, TRAEFIK_NETWORK
from traefik_hub.core.http_client import HttpProbeError
from traefik_hub.exceptions import ContainerNotFoundError, NetworkNotFoundError


class ContainerTools:
    """MCP tools for container inspection and control."""

    def __init__(self, config, docker_manager=None, http=None):
        """Initialize container tools."""
        self.config = config
        self.docker = docker_manager or config.docker_manager()
        self.http = http or config.http_client()

    async def list_containers(self, arguments: Dict[str, Any]) -> str:
        """Containers attached to the traefik-public network."""
        try:
            members = self.docker.network_members(TRAEFIK_NETWORK)
        except NetworkNotFoundError:
            return f"Network '{TRAEFIK_NETWORK}' not found. Start Traefik first."
        if not members:
            return f"No containers on {TRAEFIK_NETWORK} network."

        lines = [f"# Containers on {TRAEFIK_NETWORK}\n", "| Name | IPv4 |", "|------|------|"]
        for member in members:
            lines.append(f"| {member['name']} | {member['ipv4']} |")
        return "\n".join(lines)

    async def container_logs(self, arguments: Dict[str, Any]) -> str:
        """Recent logs of a container."""
        name = arguments.get("name")
        if not name:
            return "Error: name is required"
        tail = int(arguments.get("tail") or 50)
        try:
            logs = self.docker.container_logs(name, tail=tail)
        except ContainerNotFoundError:
            return f"Container '{name}' not found."
        return f"# Logs: {name}\n\n```\n{logs}\n```"

    async def restart_container(self, arguments: Dict[str, Any]) -> str:
        """Restart a container."""
        name = arguments.get("name")
        if not name:
            return "Error: name is required"
        try:
            self.docker.restart_container(name)
        except ContainerNotFoundError:
            return f"Container '{name}' not found."
        return f"Container '{name}' restarted."

    async def check_health(self, arguments: Dict[str, Any]) -> str:
        """Check whether a domain routed by Traefik responds."""
        domain = arguments.get("domain")
        if not domain:
            return "Error: domain is required"
        try:
            response = self.http.get(f"http://{domain}", timeout=HEALTH_CHECK_TIMEOUT)
        except HttpProbeError:
            return f"# Health: {domain}\n\n**Status**: unreachable"
        status = "healthy" if response.status_code < 500 else "unhealthy"
        return f"# Health: {domain}\n\n**Status**: {status}\n**HTTP**: {response.status_code}"
