"""
Configuration settings for traefik-hub.

This module contains the constants describing the single stack topology the
tools operate on: one Traefik proxy, one shared network and one config
directory pair.
"""

import os
from pathlib import Path
from typing import Optional

# Version information
VERSION = "0.1.0"
SERVER_NAME = "traefik-hub-mcp"

# Environment variable names
ENV_API_URL = "TRAEFIK_API_URL"
ENV_CONFIG_DIR = "TRAEFIK_CONFIG_DIR"
ENV_HUB_DIR = "TRAEFIK_HUB_DIR"
ENV_TIMEOUT = "TRAEFIK_HUB_TIMEOUT"
ENV_VERBOSE = "TRAEFIK_HUB_VERBOSE"

DEFAULT_API_URL = "http://localhost:8080"
DEFAULT_COMMAND_TIMEOUT = 300

# Stack topology
TRAEFIK_NETWORK = "traefik-public"
TRAEFIK_IDENTIFIER = "traefik"
DASHBOARD_HOST = "traefik.localhost"
DASHBOARD_URL = f"http://{DASHBOARD_HOST}"
ENTRY_PORT = 80

# Files inside the stack and config directories
COMPOSE_FILE = "docker-compose.yml"
STATIC_CONFIG_FILE = "traefik.yml"
MIDDLEWARES_FILE = "dynamic/middlewares.yml"
CORS_MIDDLEWARE = "cors-dev"

# Timeouts (seconds)
PROBE_TIMEOUT = 3
HEALTH_CHECK_TIMEOUT = 5
INIT_SETTLE_SECONDS = 2

# Images treated as databases when looking for exposed host ports
DATABASE_IMAGE_PATTERNS = (
    "postgres", "postgresql", "mysql", "mariadb",
    "mongo", "mongodb", "redis", "memcached",
    "cassandra", "couchdb", "influxdb", "elasticsearch",
    "mssql", "sqlserver",
)

# Bind addresses only reachable from the host itself
LOOPBACK_ADDRESSES = frozenset({"127.0.0.1", "::1", "localhost", ""})


def get_compose_command() -> str:
    """Return the docker compose invocation."""
    return "docker compose"


def middlewares_path(config_dir: Path) -> Path:
    """Path of the dynamic middleware file inside a config directory."""
    return Path(config_dir) / MIDDLEWARES_FILE


def env_or_none(name: str) -> Optional[str]:
    """Read an environment variable, treating empty strings as unset."""
    value = os.getenv(name)
    return value or None
