"""
MCP tools for the Traefik stack lifecycle and diagnostics.

This module covers the health check (doctor), the configuration check and
starting, stopping and bootstrapping the stack with docker compose.
"""

import asyncio
import subprocess
from typing import Any, Dict

from traefik_hub.config.settings import (
    DASHBOARD_URL,
    ENV_CONFIG_DIR,
    ENV_HUB_DIR,
    HEALTH_CHECK_TIMEOUT,
    INIT_SETTLE_SECONDS,
    TRAEFIK_NETWORK,
    env_or_none,
)
from traefik_hub.core.doctor import read_text
from traefik_hub.core.http_client import HttpProbeError
from traefik_hub.core.setup_check import check_setup_config, format_setup_check_results
from traefik_hub.exceptions import PrerequisiteError


def _command_error(error: Exception) -> str:
    if isinstance(error, subprocess.CalledProcessError):
        return (error.stderr or error.stdout or str(error)).strip()
    return str(error)


class StackTools:
    """MCP tools for managing the Traefik stack."""

    def __init__(self, config, docker_manager=None, http=None, doctor=None):
        """Initialize stack tools."""
        self.config = config
        self.docker = docker_manager or config.docker_manager()
        self.http = http or config.http_client()
        self.doctor = doctor or config.stack_doctor(self.docker)

    async def doctor_report(self, arguments: Dict[str, Any]) -> str:
        """Run the full stack health check."""
        return self.doctor.run_diagnostics().render()

    async def check_setup(self, arguments: Dict[str, Any]) -> str:
        """Verify the env vars and paths the server was started with."""
        checks, all_ok = check_setup_config(
            hub_dir=env_or_none(ENV_HUB_DIR),
            config_dir=env_or_none(ENV_CONFIG_DIR),
            api_url=self.config.api_url,
            default_hub_dir=str(self.config.hub_dir),
            default_config_dir=str(self.config.config_dir),
            read_file=read_text,
        )
        return format_setup_check_results(checks, all_ok)

    async def start_traefik(self, arguments: Dict[str, Any]) -> str:
        """docker compose up -d in the stack directory."""
        try:
            self.docker.check_prerequisites()
        except PrerequisiteError as e:
            return f"# Cannot Start\n\n{e}"
        try:
            result = self.docker.compose_up()
        except (subprocess.SubprocessError, OSError) as e:
            return f"Failed to start: {_command_error(e)}"

        text = f"# Traefik Started\n\n{result.stdout or 'Started successfully.'}\n"
        if result.stderr:
            text += f"\nWarnings:\n{result.stderr}"
        return text

    async def stop_traefik(self, arguments: Dict[str, Any]) -> str:
        """docker compose down in the stack directory."""
        try:
            self.docker.check_prerequisites()
        except PrerequisiteError as e:
            return f"# Cannot Stop\n\n{e}"
        try:
            result = self.docker.compose_down()
        except (subprocess.SubprocessError, OSError) as e:
            return f"Failed to stop: {_command_error(e)}"
        return f"# Traefik Stopped\n\n{result.stdout or 'Stopped successfully.'}"

    async def create_network(self, arguments: Dict[str, Any]) -> str:
        """Create the shared traefik-public network."""
        try:
            created = self.docker.create_network(TRAEFIK_NETWORK)
        except Exception as e:
            return f"Failed: {e}"
        if created:
            return f"Network '{TRAEFIK_NETWORK}' created."
        return f"Network '{TRAEFIK_NETWORK}' already exists."

    async def init_stack(self, arguments: Dict[str, Any]) -> str:
        """Bootstrap the stack: network, containers, then an API check."""
        steps = ["# Initializing Traefik Stack\n"]

        if not self.docker.is_running():
            steps.append("✗ Docker daemon not running - start Docker first")
            return "\n".join(steps)
        steps.append("✓ Docker daemon running")

        try:
            if self.docker.create_network(TRAEFIK_NETWORK):
                steps.append(f"✓ Created {TRAEFIK_NETWORK} network")
            else:
                steps.append(f"✓ {TRAEFIK_NETWORK} network exists")
        except Exception as e:
            steps.append(f"✗ Network creation failed: {e}")

        try:
            self.docker.compose_up()
        except (subprocess.SubprocessError, OSError) as e:
            steps.append(f"✗ Failed to start: {_command_error(e)}")
            return "\n".join(steps)
        steps.append("✓ Traefik containers started")

        await asyncio.sleep(INIT_SETTLE_SECONDS)
        try:
            response = self.http.get(f"{self.config.api_url}/api/overview", timeout=HEALTH_CHECK_TIMEOUT,
                                     follow_redirects=True)
        except HttpProbeError:
            steps.append("⚠ Traefik started but API not responding yet - wait a few seconds")
        else:
            if response.ok:
                steps.append("✓ Traefik API responding")
                steps.append(f"\n**Stack ready!** Dashboard: {DASHBOARD_URL}")
            else:
                steps.append(f"⚠ Traefik started but API returned HTTP {response.status_code}")

        return "\n".join(steps)
