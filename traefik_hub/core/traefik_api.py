"""
Traefik management API client.

Wraps the read-only endpoints of Traefik's API (``/api/overview``,
``/api/http/routers`` and friends) used by the MCP tools and the doctor.
"""

from typing import Any, Dict, List, Optional

import requests

from ..config.settings import DEFAULT_API_URL
from ..exceptions import TraefikApiError
from ..utils.logging import log_info


class TraefikAPI:
    """Client for the Traefik management API."""

    def __init__(self, base_url: str = DEFAULT_API_URL, timeout: Optional[float] = 10,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def get(self, endpoint: str, timeout: Optional[float] = None) -> Any:
        """GET ``/api/<endpoint>`` and return the decoded JSON body."""
        url = f"{self.base_url}/api/{endpoint}"
        log_info(f"Traefik API request: {url}")
        try:
            response = self.session.get(url, timeout=timeout or self.timeout)
        except requests.exceptions.RequestException as e:
            raise TraefikApiError(
                f"Traefik API not reachable at {self.base_url}: {e}",
                error_code="unreachable",
            ) from e
        if not response.ok:
            raise TraefikApiError(
                f"Traefik API error: {response.status_code}",
                error_code="http_error",
                details={"status_code": response.status_code, "endpoint": endpoint},
            )
        try:
            return response.json()
        except ValueError as e:
            raise TraefikApiError(f"Traefik API returned invalid JSON for {endpoint}") from e

    def overview(self, timeout: Optional[float] = None) -> Dict[str, Any]:
        return self.get("overview", timeout=timeout) or {}

    def version(self) -> Dict[str, Any]:
        return self.get("version") or {}

    def routers(self, provider: Optional[str] = None) -> List[Dict[str, Any]]:
        return _filter_provider(self.get("http/routers") or [], provider)

    def services(self, provider: Optional[str] = None) -> List[Dict[str, Any]]:
        return _filter_provider(self.get("http/services") or [], provider)

    def middlewares(self) -> List[Dict[str, Any]]:
        return self.get("http/middlewares") or []

    def router(self, name: str) -> Dict[str, Any]:
        return self.get(f"http/routers/{name}") or {}


def _filter_provider(items: List[Dict[str, Any]], provider: Optional[str]) -> List[Dict[str, Any]]:
    if not provider:
        return items
    return [item for item in items if item.get("provider") == provider]


def http_total(overview: Dict[str, Any], component: str) -> int:
    """Read ``http.<component>.total`` from an overview payload, defaulting to 0."""
    return ((overview.get("http") or {}).get(component) or {}).get("total") or 0
