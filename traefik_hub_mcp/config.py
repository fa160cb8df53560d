"""
Configuration management for the traefik-hub MCP server.

Values are read once from the environment at start-up and stay fixed for
the life of the process.
"""

import os
from pathlib import Path
from typing import Optional

from traefik_hub.config.settings import (
    DEFAULT_API_URL,
    DEFAULT_COMMAND_TIMEOUT,
    ENV_API_URL,
    ENV_CONFIG_DIR,
    ENV_HUB_DIR,
    ENV_TIMEOUT,
    ENV_VERBOSE,
    middlewares_path,
)
from traefik_hub.core.docker_manager import DockerManager
from traefik_hub.core.doctor import StackDoctor
from traefik_hub.core.http_client import HttpClient
from traefik_hub.core.middlewares import MiddlewareFile
from traefik_hub.core.traefik_api import TraefikAPI
from traefik_hub.exceptions import ConfigurationError


class MCPConfig:
    """Configuration for the traefik-hub MCP server."""

    def __init__(
        self,
        config_dir: Path,
        hub_dir: Path,
        api_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_COMMAND_TIMEOUT,
        verbose: bool = False
    ):
        """Initialize MCP configuration.

        Args:
            config_dir: Traefik config directory (traefik.yml, dynamic/middlewares.yml).
            hub_dir: Stack directory containing docker-compose.yml.
            api_url: Base URL of the Traefik management API.
            timeout: docker compose command timeout in seconds.
            verbose: Enable verbose logging.
        """
        self.config_dir = Path(config_dir)
        self.hub_dir = Path(hub_dir)
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.verbose = verbose

    @property
    def middlewares_path(self) -> Path:
        return middlewares_path(self.config_dir)

    def docker_manager(self) -> DockerManager:
        return DockerManager(hub_dir=self.hub_dir, timeout=self.timeout)

    def traefik_api(self) -> TraefikAPI:
        return TraefikAPI(self.api_url)

    def http_client(self) -> HttpClient:
        return HttpClient()

    def middleware_file(self) -> MiddlewareFile:
        return MiddlewareFile(self.middlewares_path)

    def stack_doctor(self, docker_manager: Optional[DockerManager] = None) -> StackDoctor:
        return StackDoctor(
            runtime=docker_manager or self.docker_manager(),
            http=self.http_client(),
            api=self.traefik_api(),
            api_url=self.api_url,
            config_dir=self.config_dir,
        )

    @classmethod
    def from_env(cls) -> "MCPConfig":
        """Create configuration from environment variables.

        Raises:
            ConfigurationError: if TRAEFIK_CONFIG_DIR or TRAEFIK_HUB_DIR is unset.
        """
        missing = [name for name in (ENV_CONFIG_DIR, ENV_HUB_DIR) if not os.getenv(name)]
        if missing:
            raise ConfigurationError(
                f"Required env var {', '.join(missing)} is not set",
                error_code="missing_env",
                details={"missing": missing},
            )
        timeout = int(os.getenv(ENV_TIMEOUT, str(DEFAULT_COMMAND_TIMEOUT)))
        verbose = os.getenv(ENV_VERBOSE, "false").lower() == "true"

        return cls(
            config_dir=Path(os.environ[ENV_CONFIG_DIR]),
            hub_dir=Path(os.environ[ENV_HUB_DIR]),
            api_url=os.getenv(ENV_API_URL) or DEFAULT_API_URL,
            timeout=timeout,
            verbose=verbose
        )

    def to_dict(self) -> dict:
        """Convert configuration to dictionary."""
        return {
            "config_dir": str(self.config_dir),
            "hub_dir": str(self.hub_dir),
            "api_url": self.api_url,
            "timeout": self.timeout,
            "verbose": self.verbose,
        }
