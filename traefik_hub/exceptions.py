"""
Custom exception hierarchy for traefik-hub.

Core layers raise these so the MCP tools and the CLI can turn structured
failures into user-facing text without duplicating logging or exit logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class TraefikHubError(Exception):
    """Base exception carrying structured error metadata."""

    message: str
    error_code: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    exit_code: int = 1

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


class PrerequisiteError(TraefikHubError):
    """Raised when Docker or the stack directory is not usable."""


class ConfigurationError(TraefikHubError):
    """Raised when required environment configuration is missing."""


class TraefikApiError(TraefikHubError):
    """Raised when the Traefik management API fails or is unreachable."""


class MiddlewareConfigError(TraefikHubError):
    """Raised when the dynamic middleware file cannot be read, parsed or updated."""


class ContainerNotFoundError(TraefikHubError):
    """Raised when a named container does not exist."""


class NetworkNotFoundError(TraefikHubError):
    """Raised when a named Docker network does not exist."""
