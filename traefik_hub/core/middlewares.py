"""
Dynamic middleware configuration for traefik-hub.

Edits ``dynamic/middlewares.yml``, the file provider config Traefik watches
and hot-reloads. The pure functions work on YAML text and plain lists so they
can be tested without touching disk; :class:`MiddlewareFile` handles reading,
writing and the markdown shown to the caller.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from ..config.settings import CORS_MIDDLEWARE
from ..exceptions import MiddlewareConfigError
from ..utils.logging import log_info, log_success


@dataclass(frozen=True)
class MiddlewareAddition:
    """Result of adding a middleware: the new file body and the added snippet."""

    new_content: str
    added_yaml: str


def dump_yaml(data: Any) -> str:
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def add_middleware_to_config(content: str, name: str, middleware_type: str,
                             config: Dict[str, Any]) -> MiddlewareAddition:
    """Add ``name`` as a ``middleware_type`` middleware to the YAML in ``content``.

    Raises:
        MiddlewareConfigError: if the YAML cannot be parsed or the name is taken.
    """
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise MiddlewareConfigError("Could not parse middlewares.yml") from e
    if not isinstance(data, dict):
        raise MiddlewareConfigError("Could not parse middlewares.yml")

    http = data.setdefault("http", {}) or {}
    data["http"] = http
    middlewares = http.setdefault("middlewares", {}) or {}
    http["middlewares"] = middlewares

    if middlewares.get(name):
        raise MiddlewareConfigError(
            f"Middleware '{name}' already exists. Remove it first or use a different name.",
            error_code="middleware_exists",
        )

    middlewares[name] = {middleware_type: config}
    return MiddlewareAddition(
        new_content=dump_yaml(data),
        added_yaml=dump_yaml({name: {middleware_type: config}}).strip(),
    )


def update_cors_origins(current: Iterable[str], add: Optional[Iterable[str]] = None,
                        remove: Optional[Iterable[str]] = None) -> Tuple[List[str], List[str]]:
    """Apply additions then removals to an origin list.

    Returns:
        The new origin list and the ``+ origin`` / ``- origin`` change lines.
    """
    origins = list(current)
    changes = []
    for origin in add or []:
        if origin not in origins:
            origins.append(origin)
            changes.append(f"+ {origin}")
    for origin in remove or []:
        if origin in origins:
            origins.remove(origin)
            changes.append(f"- {origin}")
    return origins, changes


def get_cors_headers(data: Any) -> Optional[Dict[str, Any]]:
    """Return the ``headers`` block of the cors-dev middleware, if present."""
    if not isinstance(data, dict):
        return None
    middleware = ((data.get("http") or {}).get("middlewares") or {}).get(CORS_MIDDLEWARE) or {}
    headers = middleware.get("headers")
    return headers if isinstance(headers, dict) else None


class MiddlewareFile:
    """The dynamic middleware file of the stack."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise MiddlewareConfigError(f"Could not read {self.path}") from e

    def write(self, content: str) -> None:
        try:
            self.path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise MiddlewareConfigError(f"Could not write to {self.path}") from e
        log_info(f"Wrote {self.path}")

    def load(self) -> Dict[str, Any]:
        try:
            return yaml.safe_load(self.read()) or {}
        except yaml.YAMLError as e:
            raise MiddlewareConfigError("Could not parse middlewares.yml") from e

    def add_middleware(self, name: str, middleware_type: str, config: Dict[str, Any]) -> str:
        """Add a middleware and describe how to use it."""
        addition = add_middleware_to_config(self.read(), name, middleware_type, config)
        self.write(addition.new_content)
        log_success(f"Middleware {name} added")
        return (
            "# Middleware Added\n\n"
            f"Added `{name}` to middlewares.yml:\n\n"
            f"```yaml\n{addition.added_yaml}\n```\n\n"
            "Traefik will hot-reload this automatically.\n\n"
            "**Usage in docker-compose labels:**\n"
            f"```\ntraefik.http.routers.myapp.middlewares={name}@file\n```"
        )

    def describe_cors(self) -> str:
        """Summarize the cors-dev middleware."""
        try:
            headers = get_cors_headers(self.load())
        except MiddlewareConfigError:
            return "Error: Could not read middlewares.yml"
        if headers is None:
            return f"No {CORS_MIDDLEWARE} middleware found."

        origins = headers.get("accessControlAllowOriginList") or []
        methods = headers.get("accessControlAllowMethods") or []

        text = f"# CORS Configuration ({CORS_MIDDLEWARE})\n\n**Allowed Origins:**\n"
        text += "\n".join(f"- {o}" for o in origins) if origins else "- (none configured)"
        text += "\n\n**Allowed Methods:**\n"
        text += ", ".join(methods) or "(none)"
        text += f"\n\n**Usage:** Add `{CORS_MIDDLEWARE}@file` to router middlewares"
        return text

    def update_cors(self, add: Optional[List[str]] = None, remove: Optional[List[str]] = None) -> str:
        """Add or remove allowed origins of the cors-dev middleware."""
        try:
            data = self.load()
        except MiddlewareConfigError:
            return "Error: Could not read middlewares.yml"
        headers = get_cors_headers(data)
        if headers is None:
            return f"Error: {CORS_MIDDLEWARE} middleware not found in middlewares.yml"

        origins, changes = update_cors_origins(headers.get("accessControlAllowOriginList") or [], add, remove)
        if not changes:
            return "No changes made (origins already in desired state)."

        headers["accessControlAllowOriginList"] = origins
        self.write(dump_yaml(data))

        text = "# CORS Updated\n\n**Changes:**\n"
        text += "\n".join(f"`{c}`" for c in changes)
        text += "\n\n**Current allowed origins:**\n"
        text += "\n".join(f"- {o}" for o in origins)
        text += "\n\nTraefik will hot-reload automatically."
        return text
