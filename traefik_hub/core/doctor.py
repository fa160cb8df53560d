"""
Stack health check ("doctor") for traefik-hub.

The doctor runs a fixed, ordered list of probes against Docker, the shared
network, the Traefik container, the management API, port 80, the dashboard,
the config directory and the database containers. Each probe contacts one
external system and resolves to ok, warn or fail with a remediation tip. The
probes are independent: a failing probe never skips or alters later ones, and
nothing a probe raises escapes ``run_diagnostics``.

Probes are plain data (:class:`Probe`) evaluated by one generic runner, so
tests can swap in fakes for every collaborator.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from ..config.settings import (
    DASHBOARD_HOST,
    DASHBOARD_URL,
    DATABASE_IMAGE_PATTERNS,
    ENTRY_PORT,
    LOOPBACK_ADDRESSES,
    MIDDLEWARES_FILE,
    PROBE_TIMEOUT,
    STATIC_CONFIG_FILE,
    TRAEFIK_IDENTIFIER,
    TRAEFIK_NETWORK,
)
from ..utils.logging import log_info, log_warning
from .docker_manager import ContainerInfo
from .http_client import REFUSED, HttpProbeError
from .traefik_api import http_total


class CheckStatus(str, Enum):
    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


GLYPHS = {
    CheckStatus.OK: "✓",
    CheckStatus.WARN: "⚠",
    CheckStatus.FAIL: "✗",
}


@dataclass(frozen=True)
class CheckResult:
    """Outcome of one probe."""

    name: str
    status: CheckStatus
    detail: Optional[str] = None
    tip: Optional[str] = None

    def render(self) -> str:
        line = f"{GLYPHS[self.status]} **{self.name}**"
        if self.detail:
            line += f" - {self.detail}"
        if self.status is not CheckStatus.OK and self.tip:
            line += f"\n  └─ Tip: {self.tip}"
        return line


class ProbeFailure(Exception):
    """Raised by a probe action whose check did not pass."""

    def __init__(self, status: CheckStatus = CheckStatus.FAIL, detail: Optional[str] = None,
                 tip: Optional[str] = None):
        super().__init__(detail or tip or status.value)
        self.status = status
        self.detail = detail
        self.tip = tip


class ProbeOmitted(Exception):
    """Raised by a best-effort probe that could not evaluate its condition."""


@dataclass(frozen=True)
class Probe:
    """One diagnostic unit.

    ``action`` returns an optional detail string when the check passes and
    raises :class:`ProbeFailure` for a warn/fail verdict or
    :class:`ProbeOmitted` to drop the probe from the report. Any other error
    resolves to fail with ``failure_tip``.
    """

    name: str
    order: int
    action: Callable[[], Optional[str]]
    failure_tip: Optional[str] = None

    def run(self) -> Optional[CheckResult]:
        try:
            detail = self.action()
        except ProbeOmitted as e:
            log_info(f"Probe '{self.name}' omitted: {e}")
            return None
        except ProbeFailure as e:
            # An explicit detail replaces the generic tip.
            tip = e.tip if e.tip is not None else (self.failure_tip if e.detail is None else None)
            return CheckResult(self.name, e.status, e.detail, tip)
        except Exception as e:
            log_info(f"Probe '{self.name}' failed: {e}")
            return CheckResult(self.name, CheckStatus.FAIL, tip=self.failure_tip)
        return CheckResult(self.name, CheckStatus.OK, detail)


@dataclass(frozen=True)
class DiagnosticReport:
    """Ordered probe results and the derived overall verdict."""

    results: Tuple[CheckResult, ...]

    @property
    def overall(self) -> CheckStatus:
        statuses = {result.status for result in self.results}
        if CheckStatus.FAIL in statuses:
            return CheckStatus.FAIL
        if CheckStatus.WARN in statuses:
            return CheckStatus.WARN
        return CheckStatus.OK

    def render(self) -> str:
        lines = ["# Traefik Stack Health Check\n"]
        lines.extend(result.render() for result in self.results)
        lines.append("")
        overall = self.overall
        if overall is CheckStatus.FAIL:
            lines.append("**Some checks failed.** See tips above.")
        elif overall is CheckStatus.WARN:
            lines.append("**All checks passed with warnings.** See tips above.")
        else:
            lines.append("**All checks passed!**")
        return "\n".join(lines)


def run_probes(probes: Iterable[Probe]) -> DiagnosticReport:
    """Run every probe once, in declaration order."""
    results = []
    for probe in sorted(probes, key=lambda p: p.order):
        result = probe.run()
        if result is not None:
            results.append(result)
    return DiagnosticReport(tuple(results))


def is_database_image(image: str) -> bool:
    """Case-insensitive match against the known database image names."""
    lower_image = image.lower()
    return any(pattern in lower_image for pattern in DATABASE_IMAGE_PATTERNS)


def is_loopback(address: str) -> bool:
    return address in LOOPBACK_ADDRESSES


def find_exposed_databases(containers: Sequence[ContainerInfo]) -> List[str]:
    """Describe database containers that publish ports beyond loopback.

    Each entry reads ``name (image) - ports: host:container[, ...]``.
    """
    exposed = []
    for container in containers:
        if not is_database_image(container.image):
            continue
        ports = [p for p in container.ports if p.host_port and not is_loopback(p.bind_address)]
        if ports:
            port_list = ", ".join(f"{p.host_port}:{p.container_port}" for p in ports)
            exposed.append(f"{container.name} ({container.image}) - ports: {port_list}")
    return exposed


def read_text(path: Path) -> str:
    """Default file reader for the config probe."""
    return Path(path).read_text(encoding="utf-8")


class StackDoctor:
    """Builds and runs the stack probes against injected collaborators."""

    def __init__(self, runtime, http, api, api_url: str, config_dir: Path,
                 read_file: Callable[[Path], str] = read_text,
                 network_name: str = TRAEFIK_NETWORK, entry_port: int = ENTRY_PORT,
                 dashboard_url: str = DASHBOARD_URL, timeout: float = PROBE_TIMEOUT):
        self.runtime = runtime
        self.http = http
        self.api = api
        self.api_url = api_url
        self.config_dir = Path(config_dir)
        self.read_file = read_file
        self.network_name = network_name
        self.entry_port = entry_port
        self.dashboard_url = dashboard_url
        self.timeout = timeout

    def probes(self) -> List[Probe]:
        """The fixed probe sequence."""
        return [
            Probe("Docker daemon", 1, self._check_runtime,
                  "Start Docker Desktop or docker daemon"),
            Probe(f"{self.network_name} network", 2, self._check_network,
                  f"Run: docker network create {self.network_name}"),
            Probe("Traefik container", 3, self._check_proxy_container,
                  "Could not list containers"),
            Probe("Traefik API", 4, self._check_api,
                  f"API not responding at {self.api_url}"),
            Probe(f"Port {self.entry_port}", 5, self._check_entry_port,
                  f"Port {self.entry_port} not listening - Traefik may not be running"),
            Probe(f"Dashboard ({DASHBOARD_HOST})", 6, self._check_dashboard,
                  "Dashboard not accessible - check Traefik config"),
            Probe("Config files", 7, self._check_config_files,
                  f"Config not found at {self.config_dir}"),
            Probe("Active routes", 8, self._check_routes,
                  "Could not fetch from Traefik API"),
            Probe("Database ports", 9, self._check_database_ports),
        ]

    def run_diagnostics(self) -> DiagnosticReport:
        report = run_probes(self.probes())
        if report.overall is not CheckStatus.OK:
            log_warning(f"Stack health check finished with status {report.overall.value}")
        return report

    def _check_runtime(self) -> None:
        self.runtime.ping()

    def _check_network(self) -> None:
        self.runtime.get_network(self.network_name)

    def _check_proxy_container(self) -> str:
        for container in self.runtime.list_containers():
            if TRAEFIK_IDENTIFIER in container.name or TRAEFIK_IDENTIFIER in container.image:
                return container.name
        raise ProbeFailure(tip="Run: cd traefik-hub && docker compose up -d")

    def _check_api(self) -> str:
        response = self.http.get(f"{self.api_url}/api/overview", timeout=self.timeout, follow_redirects=True)
        if not response.ok:
            raise ProbeFailure(detail=f"HTTP {response.status_code}")
        return self.api_url

    def _check_entry_port(self) -> str:
        try:
            response = self.http.get(f"http://localhost:{self.entry_port}", timeout=self.timeout)
        except HttpProbeError as e:
            if e.kind == REFUSED:
                raise
            # Something accepted the connection before it was reset or timed out.
            return "Listening (connection reset/timeout is ok)"
        return f"HTTP {response.status_code}"

    def _check_dashboard(self) -> None:
        response = self.http.get(self.dashboard_url, timeout=self.timeout, follow_redirects=True)
        if not response.ok:
            raise ProbeFailure(detail=f"HTTP {response.status_code}",
                               tip="Dashboard not accessible - check Traefik config")

    def _check_config_files(self) -> str:
        self.read_file(self.config_dir / STATIC_CONFIG_FILE)
        self.read_file(self.config_dir / MIDDLEWARES_FILE)
        return str(self.config_dir)

    def _check_routes(self) -> str:
        overview = self.api.overview(timeout=self.timeout)
        return f"{http_total(overview, 'routers')} routers, {http_total(overview, 'services')} services"

    def _check_database_ports(self) -> str:
        try:
            containers = self.runtime.list_containers()
        except Exception as e:
            raise ProbeOmitted(f"container listing failed: {e}") from e
        exposed = find_exposed_databases(containers)
        if exposed:
            raise ProbeFailure(
                CheckStatus.WARN,
                detail=f"{len(exposed)} database(s) with exposed ports: {'; '.join(exposed)}",
                tip="Consider removing host port mappings. Use `docker compose exec` instead.",
            )
        return "No databases with exposed host ports"
