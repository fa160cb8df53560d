"""
Setup verification for the MCP configuration.

Checks that the stack and config directories the server was started with
point at real files, so a misconfigured client gets a clear fix instead of
confusing tool errors.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from ..config.settings import (
    COMPOSE_FILE,
    ENV_API_URL,
    ENV_CONFIG_DIR,
    ENV_HUB_DIR,
    STATIC_CONFIG_FILE,
)


@dataclass(frozen=True)
class SetupCheck:
    name: str
    ok: bool
    value: Optional[str] = None
    is_default: bool = False
    error: Optional[str] = None


def _check_dir(name: str, configured: Optional[str], default: str, marker: str,
               read_file: Callable[[Path], str], invalid_error: str) -> SetupCheck:
    directory = configured or default
    try:
        read_file(Path(directory) / marker)
    except (OSError, UnicodeDecodeError):
        if not configured:
            return SetupCheck(name, False, error="not set and default path invalid")
        return SetupCheck(name, False, error=invalid_error)
    return SetupCheck(name, True, value=directory, is_default=not configured)


def check_setup_config(hub_dir: Optional[str], config_dir: Optional[str], api_url: str,
                       default_hub_dir: str, default_config_dir: str,
                       read_file: Callable[[Path], str]) -> Tuple[List[SetupCheck], bool]:
    """Validate the configured directories.

    Args:
        hub_dir: TRAEFIK_HUB_DIR as set in the environment, or None.
        config_dir: TRAEFIK_CONFIG_DIR as set in the environment, or None.
        api_url: Traefik API base URL in use.
        default_hub_dir: Stack directory used when hub_dir is unset.
        default_config_dir: Config directory used when config_dir is unset.
        read_file: Reader raising OSError for missing files.

    Returns:
        The individual checks and whether all of them passed.
    """
    checks = [
        _check_dir(ENV_HUB_DIR, hub_dir, default_hub_dir, COMPOSE_FILE, read_file,
                   f"invalid - {COMPOSE_FILE} not found at {hub_dir}"),
        _check_dir(ENV_CONFIG_DIR, config_dir, default_config_dir, STATIC_CONFIG_FILE, read_file,
                   f"invalid - {STATIC_CONFIG_FILE} not found"),
        # Informational only
        SetupCheck(ENV_API_URL, True, value=api_url),
    ]
    return checks, all(check.ok for check in checks)


def format_setup_check_results(checks: List[SetupCheck], all_ok: bool) -> str:
    """Render setup checks as markdown."""
    lines = ["# MCP Configuration Check\n"]
    for check in checks:
        if check.ok:
            suffix = " (default)" if check.is_default else ""
            lines.append(f"✓ {check.name}: {check.value}{suffix}")
        else:
            lines.append(f"✗ {check.name} {check.error}")

    if all_ok:
        lines.append("\n**Configuration OK!**")
    else:
        lines.extend([
            "\n**Setup required.** Add to your MCP client config:",
            "```json",
            '"env": {',
            f'  "{ENV_HUB_DIR}": "/path/to/traefik-hub",',
            f'  "{ENV_CONFIG_DIR}": "/path/to/traefik-hub/traefik",',
            f'  "{ENV_API_URL}": "http://localhost:8080"',
            "}",
            "```",
        ])
    return "\n".join(lines)
