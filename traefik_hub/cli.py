"""
Click CLI for traefik-hub.

Runs the same diagnostics the MCP tools expose from a terminal, and starts
the MCP server.
"""

import sys
from pathlib import Path

import click

from .config.settings import (
    DEFAULT_API_URL,
    ENV_API_URL,
    ENV_CONFIG_DIR,
    ENV_HUB_DIR,
    env_or_none,
)
from .core.docker_manager import DockerManager
from .core.doctor import CheckStatus, StackDoctor, read_text
from .core.http_client import HttpClient
from .core.setup_check import check_setup_config, format_setup_check_results
from .core.traefik_api import TraefikAPI, http_total
from .exceptions import TraefikApiError
from .utils.logging import log_error, set_verbose, show_version

CONFIG_DIR_OPTION = click.option(
    "--config-dir", envvar=ENV_CONFIG_DIR, required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Traefik config directory (traefik.yml, dynamic/middlewares.yml).",
)
API_URL_OPTION = click.option(
    "--api-url", envvar=ENV_API_URL, default=DEFAULT_API_URL, show_default=True,
    help="Traefik management API base URL.",
)


@click.group()
@click.option("--verbose", is_flag=True, help="Show info and warning messages.")
def cli(verbose: bool):
    """traefik-hub: tools for a local Traefik stack."""
    set_verbose(verbose)


@cli.command()
@CONFIG_DIR_OPTION
@API_URL_OPTION
def doctor(config_dir: Path, api_url: str):
    """Run the stack health check."""
    api_url = api_url.rstrip("/")
    stack_doctor = StackDoctor(
        runtime=DockerManager(),
        http=HttpClient(),
        api=TraefikAPI(api_url),
        api_url=api_url,
        config_dir=config_dir,
    )
    report = stack_doctor.run_diagnostics()
    click.echo(report.render())
    if report.overall is CheckStatus.FAIL:
        sys.exit(1)


@cli.command("check-setup")
@API_URL_OPTION
def check_setup(api_url: str):
    """Verify TRAEFIK_HUB_DIR and TRAEFIK_CONFIG_DIR."""
    hub_dir = env_or_none(ENV_HUB_DIR)
    config_dir = env_or_none(ENV_CONFIG_DIR)
    checks, all_ok = check_setup_config(
        hub_dir=hub_dir,
        config_dir=config_dir,
        api_url=api_url,
        default_hub_dir=hub_dir or str(Path.cwd()),
        default_config_dir=config_dir or str(Path.cwd() / "traefik"),
        read_file=read_text,
    )
    click.echo(format_setup_check_results(checks, all_ok))
    if not all_ok:
        sys.exit(1)


@cli.command()
@API_URL_OPTION
def status(api_url: str):
    """Show Traefik version and component counts."""
    api = TraefikAPI(api_url)
    try:
        overview = api.overview()
        version = api.version()
    except TraefikApiError as e:
        log_error(str(e))
        sys.exit(1)
    click.echo(f"Traefik {version.get('Version') or 'unknown'}")
    for component in ("routers", "services", "middlewares"):
        click.echo(f"  {component}: {http_total(overview, component)}")


@cli.command()
def serve():
    """Run the MCP server over stdio."""
    from traefik_hub_mcp.server import cli_main

    cli_main()


@cli.command()
def version():
    """Show version information."""
    show_version()


def main():
    cli()


if __name__ == "__main__":
    main()
