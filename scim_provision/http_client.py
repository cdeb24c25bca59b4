"""Thin HTTP abstraction for talking to the provisioning service.

Every call goes through ``SCIMClient.request()``, which sends a JSON body,
decodes a JSON response and raises ``TransportError`` for anything that is
not a 2xx status.

Key behaviors:
- Automatic 429 Too Many Requests retry with Retry-After header support
- Bearer token and HTTP Basic authentication
- TLS options: skip verification, custom CA bundle
- Proxy support
- One-shot extra headers per request (method override, vendor media types)
- ``redact_auth()`` helper for safe logging of headers
"""

import base64
import json
import logging
import time
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)

# Retry policy for 429 Too Many Requests (RFC 6585)
_MAX_RETRIES = 3
_DEFAULT_RETRY_AFTER = 2  # seconds, used when Retry-After header is missing


class TransportError(Exception):
    """A network failure or a non-2xx response from the service."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class SCIMResponse:
    """Normalized HTTP response wrapper."""

    def __init__(self, status_code: int, headers: Dict[str, str], body: str):
        self.status_code = status_code
        self.headers = headers
        self.body = body
        self._json = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Parse and cache the response body as JSON."""
        if self._json is None:
            self._json = json.loads(self.body) if self.body else None
        return self._json

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        lower = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lower:
                return v
        return None

    def error_detail(self) -> str:
        """Best-effort human-readable reason taken from an error body."""
        try:
            data = self.json()
        except ValueError:
            data = None
        if isinstance(data, dict):
            for key in ("detail", "message", "errors"):
                if data.get(key):
                    return str(data[key])
        return self.body.strip()


class SCIMClient:
    """HTTP client for the provisioning service.

    Supports bearer token and basic auth, TLS configuration, proxy routing,
    and automatic retry on 429 responses.

    Args:
        base_url:       Root URL of the API (e.g. ``https://tenant.example.com/SAAS/jersey/manager/api``)
        token:          Bearer token for authentication
        username:       Username for HTTP Basic authentication
        password:       Password for HTTP Basic authentication
        tls_no_verify:  Skip TLS certificate verification (for self-signed certs)
        timeout:        Per-request timeout in seconds
        proxy:          HTTP/HTTPS proxy URL
        ca_bundle:      Path to custom CA certificate bundle file
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        tls_no_verify: bool = False,
        timeout: int = 30,
        proxy: Optional[str] = None,
        ca_bundle: Optional[str] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.username = username
        self.password = password
        self.tls_no_verify = tls_no_verify
        self.timeout = timeout
        self.proxy = proxy
        self.ca_bundle = ca_bundle

    # -- Public API ----------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        payload: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (``None`` if empty).

        Raises:
            TransportError: on connection failures, non-2xx statuses, or a
                2xx body that is not valid JSON.
        """
        try:
            resp = self._request(method, path, payload, params, extra_headers)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        if not resp.ok:
            detail = resp.error_detail() or "no response body"
            raise TransportError(
                f"HTTP {resp.status_code}: {detail}",
                status_code=resp.status_code,
                body=resp.body,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(
                f"invalid JSON in response to {method} {path}: {exc}",
                status_code=resp.status_code,
                body=resp.body,
            ) from exc

    # -- Internals -----------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """Build the default request headers with auth credentials."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        elif self.username and self.password:
            creds = base64.b64encode(f"{self.username}:{self.password}".encode()).decode()
            headers["Authorization"] = f"Basic {creds}"
        if extra:
            headers.update(extra)
        return headers

    def _send_options(self, headers: Dict[str, str], payload: Optional[Any],
                      params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Keyword arguments for ``requests.request`` from the client settings."""
        options: Dict[str, Any] = {"headers": headers, "timeout": self.timeout}
        options["verify"] = self.ca_bundle or not self.tls_no_verify
        if self.proxy:
            options["proxies"] = {"http": self.proxy, "https": self.proxy}
        if params:
            options["params"] = params
        if payload is not None:
            # Serialized by hand so a vendor Content-Type is not overwritten
            options["data"] = json.dumps(payload).encode("utf-8")
        return options

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> SCIMResponse:
        """Send one logical request, waiting out up to ``_MAX_RETRIES`` throttles.

        A 429 answer is retried after its ``Retry-After`` delay.  Once the
        retries are spent the last 429 is returned to the caller as is.
        """
        url = self._url(path)
        headers = self._build_headers(extra_headers)
        options = self._send_options(headers, payload, params)
        logger.debug("%s %s params=%s headers=%s", method, url, params, redact_auth(headers))

        retries_left = _MAX_RETRIES
        while True:
            raw = requests.request(method, url, **options)
            resp = SCIMResponse(raw.status_code, dict(raw.headers), raw.text)
            logger.debug("-> %s (%d bytes)", resp.status_code, len(resp.body))
            if resp.status_code != 429 or retries_left == 0:
                return resp
            retries_left -= 1
            delay = _retry_delay(resp.header("Retry-After"))
            logger.debug("throttled, %d retries left, waiting %.1fs", retries_left, delay)
            time.sleep(delay)


def _retry_delay(header_value: Optional[str]) -> float:
    """Seconds to wait before retrying a throttled request.

    Only the delta-seconds form of ``Retry-After`` is understood.  Anything
    else falls back to ``_DEFAULT_RETRY_AFTER``; zero means retry at once.
    """
    try:
        return max(0.0, float(header_value)) if header_value else _DEFAULT_RETRY_AFTER
    except ValueError:
        return _DEFAULT_RETRY_AFTER


def redact_auth(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` safe for logs: any Authorization value is masked."""
    return {
        key: "***REDACTED***" if key.lower() == "authorization" else value
        for key, value in headers.items()
    }
