"""
HTTP probe client for traefik-hub.

Thin wrapper around requests used by the health check and the doctor. Failed
requests raise HttpProbeError with a typed kind so callers can tell a refused
connection (nothing listening) from a timeout or reset (something listening).
"""

import errno
from dataclasses import dataclass
from typing import Optional

import requests

from ..utils.logging import log_info

REFUSED = "refused"
TIMEOUT = "timeout"
RESET = "reset"
OTHER = "other"


@dataclass(frozen=True)
class HttpResponse:
    """Status of a completed HTTP request."""

    status_code: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpProbeError(Exception):
    """A request that did not produce an HTTP response."""

    def __init__(self, url: str, kind: str, cause: Optional[BaseException] = None):
        super().__init__(f"Request to {url} failed ({kind}): {cause}")
        self.url = url
        self.kind = kind
        self.cause = cause


def _iter_causes(exc: BaseException):
    """Walk an exception and everything it wraps.

    requests wraps urllib3 errors, which wrap the socket error, through a mix
    of ``__cause__``, ``__context__``, ``.reason`` and positional args.
    """
    seen = set()
    pending = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        pending.append(current.__cause__)
        pending.append(current.__context__)
        reason = getattr(current, "reason", None)
        if isinstance(reason, BaseException):
            pending.append(reason)
        pending.extend(arg for arg in getattr(current, "args", ()) if isinstance(arg, BaseException))


def classify_error(exc: BaseException) -> str:
    """Map a request failure onto refused, timeout, reset or other."""
    causes = list(_iter_causes(exc))
    for cause in causes:
        if isinstance(cause, ConnectionRefusedError):
            return REFUSED
        if isinstance(cause, OSError) and cause.errno == errno.ECONNREFUSED:
            return REFUSED
    for cause in causes:
        if isinstance(cause, ConnectionResetError):
            return RESET
        if isinstance(cause, (requests.exceptions.Timeout, TimeoutError)):
            return TIMEOUT
    return OTHER


class HttpClient:
    """Issues bare GET requests with a bounded timeout."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def get(self, url: str, timeout: float, follow_redirects: bool = False) -> HttpResponse:
        """GET a URL, returning its status or raising HttpProbeError.

        With ``follow_redirects`` the status is that of the final response, and a
        redirect target that cannot be reached raises like the original URL would.
        """
        try:
            response = self.session.get(url, timeout=timeout, allow_redirects=follow_redirects)
        except requests.exceptions.RequestException as e:
            kind = classify_error(e)
            log_info(f"GET {url} failed: {kind}")
            raise HttpProbeError(url, kind, e) from e
        return HttpResponse(status_code=response.status_code)
