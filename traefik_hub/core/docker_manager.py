"""
Docker management for traefik-hub.

This module provides the container runtime operations the tools need: daemon
ping, running container listing with published ports, the shared network,
container logs and restarts, and docker compose lifecycle for the stack.
"""

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import docker
from docker.errors import APIError, NotFound

from ..config.settings import (
    COMPOSE_FILE,
    DEFAULT_COMMAND_TIMEOUT,
    TRAEFIK_NETWORK,
    get_compose_command,
)
from ..exceptions import ContainerNotFoundError, NetworkNotFoundError, PrerequisiteError
from ..utils.logging import log_error, log_info, log_success


@dataclass(frozen=True)
class PortBinding:
    """One container port and, when published, its host side."""

    bind_address: str
    container_port: int
    host_port: Optional[int] = None


@dataclass(frozen=True)
class ContainerInfo:
    """A running container as seen by the health check."""

    name: str
    image: str
    ports: List[PortBinding] = field(default_factory=list)


def parse_port_bindings(ports: Optional[Dict[str, Any]]) -> List[PortBinding]:
    """Flatten Docker's ``{"5432/tcp": [{"HostIp": ..., "HostPort": ...}]}`` map."""
    bindings = []
    for key, published in (ports or {}).items():
        container_port = int(str(key).split("/")[0])
        if not published:
            bindings.append(PortBinding(bind_address="", container_port=container_port))
            continue
        for entry in published:
            host_port = entry.get("HostPort")
            bindings.append(PortBinding(
                bind_address=entry.get("HostIp") or "",
                container_port=container_port,
                host_port=int(host_port) if host_port else None,
            ))
    return bindings


class DockerManager:
    """Manages Docker operations for the Traefik stack."""

    def __init__(self, hub_dir: Optional[Path] = None, timeout: int = DEFAULT_COMMAND_TIMEOUT,
                 client: Optional[docker.DockerClient] = None):
        """Initialize Docker manager.

        Args:
            hub_dir: Stack directory holding docker-compose.yml.
            timeout: Timeout in seconds for docker compose commands.
            client: Docker client to use. Created from the environment on first use.
        """
        self.hub_dir = Path(hub_dir) if hub_dir else None
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> docker.DockerClient:
        if self._client is None:
            self._client = docker.from_env()
        return self._client

    def ping(self) -> bool:
        """Ping the Docker daemon. Raises if it cannot be reached."""
        return self.client.ping()

    def is_running(self) -> bool:
        """Check if the Docker daemon is reachable."""
        try:
            return bool(self.ping())
        except Exception as e:
            log_info(f"Docker ping failed: {e}")
            return False

    def list_containers(self) -> List[ContainerInfo]:
        """List running containers with their image and published ports."""
        containers = []
        # A container removed between listing and inspection is skipped.
        for container in self.client.containers.list(ignore_removed=True):
            attrs = container.attrs or {}
            image = (attrs.get("Config") or {}).get("Image") or ""
            if not image and container.image is not None and container.image.tags:
                image = container.image.tags[0]
            ports = (attrs.get("NetworkSettings") or {}).get("Ports")
            containers.append(ContainerInfo(
                name=container.name,
                image=image,
                ports=parse_port_bindings(ports),
            ))
        return containers

    def get_network(self, name: str = TRAEFIK_NETWORK):
        """Return the Docker network object for ``name``."""
        try:
            return self.client.networks.get(name)
        except NotFound as e:
            raise NetworkNotFoundError(f"Network '{name}' not found", error_code="network_not_found") from e

    def network_members(self, name: str = TRAEFIK_NETWORK) -> List[Dict[str, str]]:
        """Containers attached to a network as ``{"name", "ipv4"}`` dicts."""
        network = self.get_network(name)
        members = []
        for member in ((network.attrs or {}).get("Containers") or {}).values():
            members.append({
                "name": member.get("Name", ""),
                "ipv4": (member.get("IPv4Address") or "").split("/")[0],
            })
        return members

    def create_network(self, name: str = TRAEFIK_NETWORK) -> bool:
        """Create a bridge network.

        Returns:
            True if the network was created, False if it already existed.
        """
        if self.client.networks.list(names=[name]):
            log_info(f"Network {name} already exists")
            return False
        try:
            self.client.networks.create(name, driver="bridge")
        except APIError as e:
            if "already exists" in str(e):
                return False
            log_error(f"Failed to create network {name}: {e}")
            raise
        log_success(f"Network {name} created")
        return True

    def _get_container(self, name: str):
        try:
            return self.client.containers.get(name)
        except NotFound as e:
            raise ContainerNotFoundError(f"Container '{name}' not found.", error_code="container_not_found") from e

    def container_logs(self, name: str, tail: int = 50) -> str:
        """Return the last ``tail`` log lines of a container, with timestamps."""
        container = self._get_container(name)
        logs = container.logs(stdout=True, stderr=True, tail=tail, timestamps=True)
        if isinstance(logs, bytes):
            logs = logs.decode("utf-8", errors="replace")
        return logs

    def restart_container(self, name: str) -> None:
        """Restart a container by name."""
        self._get_container(name).restart()
        log_success(f"Container {name} restarted")

    def check_prerequisites(self) -> None:
        """Ensure Docker is reachable and the stack directory has a compose file."""
        if not self.is_running():
            raise PrerequisiteError("Docker daemon not running. Start Docker Desktop first.")
        if self.hub_dir is None or not (self.hub_dir / COMPOSE_FILE).is_file():
            raise PrerequisiteError(
                f"{COMPOSE_FILE} not found at {self.hub_dir}. Check TRAEFIK_HUB_DIR env var."
            )

    def _run_compose(self, *args: str) -> subprocess.CompletedProcess:
        cmd = get_compose_command().split() + list(args)
        log_info(f"Running {' '.join(cmd)} in {self.hub_dir}")
        return subprocess.run(
            cmd,
            cwd=self.hub_dir,
            capture_output=True,
            text=True,
            check=True,
            timeout=self.timeout,
        )

    def compose_up(self) -> subprocess.CompletedProcess:
        """Start the stack with ``docker compose up -d``."""
        return self._run_compose("up", "-d")

    def compose_down(self) -> subprocess.CompletedProcess:
        """Stop the stack with ``docker compose down``."""
        return self._run_compose("down")
