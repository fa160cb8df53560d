"""
Logging and output utilities for traefik-hub.

This module provides colored output and logging functionality shared by the
CLI and the MCP server. Output goes to stderr so the MCP stdio stream is
never polluted.
"""

from rich.console import Console
from rich.panel import Panel

# Initialize console for colored output
console = Console(stderr=True)

# Global verbose mode flag
_verbose_mode = False

# Global MCP mode flag - when True, keep chatter off the console
_mcp_mode = False


class Colors:
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"


def set_verbose(enabled: bool) -> None:
    """Set verbose mode for logging output."""
    global _verbose_mode
    _verbose_mode = enabled


def set_mcp_mode(enabled: bool) -> None:
    """Set MCP mode - when enabled, success and error chatter is suppressed."""
    global _mcp_mode
    _mcp_mode = enabled


def log_info(message: str) -> None:
    """Log an info message (only shown in verbose mode)."""
    if _verbose_mode:
        console.print(f"[{Colors.BLUE}][INFO][/{Colors.BLUE}] {message}")


def log_success(message: str) -> None:
    """Log a success message."""
    if not _mcp_mode:
        console.print(f"[{Colors.GREEN}][SUCCESS][/{Colors.GREEN}] {message}")


def log_warning(message: str) -> None:
    """Log a warning message (only shown in verbose mode)."""
    if _verbose_mode:
        console.print(f"[{Colors.YELLOW}][WARNING][/{Colors.YELLOW}] {message}")


def log_error(message: str) -> None:
    """Log an error message."""
    if not _mcp_mode:
        console.print(f"[{Colors.RED}][ERROR][/{Colors.RED}] {message}")


def show_version() -> None:
    """Show version information."""
    from traefik_hub.config.settings import VERSION

    console.print(Panel(f"traefik-hub v{VERSION}\n\nTools for a local Traefik stack",
                        title="traefik-hub", border_style=Colors.BLUE))


def error_exit(message: str, exit_code: int = 1) -> None:
    """Log an error and exit."""
    # Always reported, even in MCP mode: this runs before the server starts.
    console.print(f"[{Colors.RED}][ERROR][/{Colors.RED}] {message}")
    raise SystemExit(exit_code)
