"""
Pytest configuration and fixtures for traefik-hub tests.

The fakes below stand in for Docker, HTTP and the Traefik API so every test
runs without a daemon, a network or a real proxy.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union

import pytest

from traefik_hub.core.docker_manager import ContainerInfo, PortBinding
from traefik_hub.core.doctor import StackDoctor
from traefik_hub.core.http_client import REFUSED, HttpProbeError, HttpResponse
from traefik_hub.exceptions import NetworkNotFoundError

API_URL = "http://localhost:8080"
TRAEFIK_CONTAINER = ContainerInfo(
    name="traefik",
    image="traefik:v3.1",
    ports=[PortBinding("0.0.0.0", 80, 80), PortBinding("0.0.0.0", 8080, 8080)],
)


class FakeRuntime:
    """In-memory container runtime."""

    def __init__(self, reachable: bool = True, network: bool = True,
                 containers: Optional[List[ContainerInfo]] = None,
                 list_error: Optional[Exception] = None):
        self.reachable = reachable
        self.network = network
        self.containers = [TRAEFIK_CONTAINER] if containers is None else containers
        self.list_error = list_error
        self.calls: List[str] = []

    def ping(self) -> bool:
        self.calls.append("ping")
        if not self.reachable:
            raise ConnectionError("Docker not running")
        return True

    def get_network(self, name: str):
        self.calls.append("get_network")
        if not self.network:
            raise NetworkNotFoundError(f"Network '{name}' not found")
        return object()

    def list_containers(self) -> List[ContainerInfo]:
        self.calls.append("list_containers")
        if self.list_error is not None:
            raise self.list_error
        return list(self.containers)


class FakeHttp:
    """HTTP client answering from a url -> status (or error kind) table.

    Unknown URLs behave like a refused connection. ``redirects`` maps a URL
    to its ``Location`` target; it answers 301 unless redirects are followed.
    """

    def __init__(self, responses: Optional[Dict[str, Union[int, str]]] = None,
                 redirects: Optional[Dict[str, str]] = None):
        self.responses = responses or {}
        self.redirects = redirects or {}
        self.requests: List[tuple] = []
        self.followed: List[str] = []

    def get(self, url: str, timeout: float, follow_redirects: bool = False) -> HttpResponse:
        self.requests.append((url, timeout))
        if follow_redirects:
            self.followed.append(url)
        if url in self.redirects:
            if not follow_redirects:
                return HttpResponse(status_code=301)
            url = self.redirects[url]
        outcome = self.responses.get(url, REFUSED)
        if isinstance(outcome, str):
            raise HttpProbeError(url, outcome)
        return HttpResponse(status_code=outcome)


class FakeApi:
    """Traefik API client returning a fixed overview."""

    def __init__(self, overview: Optional[dict] = None, error: Optional[Exception] = None):
        self._overview = overview if overview is not None else {
            "http": {"routers": {"total": 4}, "services": {"total": 3}, "middlewares": {"total": 2}}
        }
        self.error = error

    def overview(self, timeout=None) -> dict:
        if self.error is not None:
            raise self.error
        return self._overview


def healthy_responses() -> Dict[str, int]:
    return {
        f"{API_URL}/api/overview": 200,
        "http://localhost:80": 404,
        "http://traefik.localhost": 200,
    }


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A Traefik config directory with both well-known files."""
    directory = tmp_path / "traefik"
    (directory / "dynamic").mkdir(parents=True)
    (directory / "traefik.yml").write_text("api:\n  dashboard: true\n")
    (directory / "dynamic" / "middlewares.yml").write_text(
        "http:\n"
        "  middlewares:\n"
        "    cors-dev:\n"
        "      headers:\n"
        "        accessControlAllowMethods:\n"
        "          - GET\n"
        "          - POST\n"
        "        accessControlAllowOriginList:\n"
        "          - http://app.localhost\n"
    )
    return directory


@pytest.fixture
def hub_dir(tmp_path: Path) -> Path:
    """A stack directory with a compose file."""
    directory = tmp_path / "traefik-hub"
    directory.mkdir()
    (directory / "docker-compose.yml").write_text("services:\n  traefik:\n    image: traefik:v3.1\n")
    return directory


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp(healthy_responses())


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def make_doctor(config_dir):
    """Factory for a StackDoctor over fakes; defaults describe a healthy stack."""

    def _make(runtime=None, http=None, api=None, config_dir_override=None) -> StackDoctor:
        return StackDoctor(
            runtime=runtime or FakeRuntime(),
            http=http or FakeHttp(healthy_responses()),
            api=api or FakeApi(),
            api_url=API_URL,
            config_dir=config_dir_override or config_dir,
        )

    return _make
