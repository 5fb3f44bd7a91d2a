"""Blocking vCloud Director REST client."""

from __future__ import annotations

import time
from typing import Callable, Optional

import httpx

from vcd_shared.constants import (
    ACCEPT_TEMPLATE,
    AUTH_HEADER,
    DEFAULT_API_VERSION,
    DEFAULT_PATH,
    DEFAULT_SCHEME,
)
from vcd_shared.hrefs import make_href

from .errors import Unauthorized, VcloudConnectionError, VcloudDirectorError, error_for_status
from .logging_config import log
from .messages import VcloudResponse
from .utils import ensure_list
from .xml_hash import to_hash


class VcloudDirectorClient:
    """Authenticated client for the vCloud Director REST API."""

    def __init__(
        self,
        host: str,
        username: str | None = None,
        password: str | None = None,
        api_version: str = DEFAULT_API_VERSION,
        scheme: str = DEFAULT_SCHEME,
        path: str = DEFAULT_PATH,
        verify_tls: bool = True,
        timeout: float = 10,
        retry_limit: int = 4,
        retry_interval: float = 0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            host: API host, optionally with ``:port``.
            username: Login name in ``user@org`` form.
            password: Login password.
            api_version: vCloud API version sent in the ``Accept`` header.
            scheme: ``https`` or ``http``.
            path: API root path on the host.
            verify_tls: Verify the server certificate.
            timeout: Per-request timeout in seconds.
            retry_limit: Total attempts for idempotent requests on transport errors.
            retry_interval: Seconds to wait between attempts.
            transport: Optional httpx transport (used by tests).
        """
        self.host = host
        self.username = username
        self.password = password
        self.api_version = str(api_version)
        self.scheme = scheme
        self.path = path
        self.verify_tls = verify_tls
        self.timeout = timeout
        self.retry_limit = max(1, int(retry_limit))
        self.retry_interval = float(retry_interval)
        self.token: Optional[str] = None
        self._http = httpx.Client(
            base_url=self.base_url,
            verify=verify_tls,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: dict, transport: httpx.BaseTransport | None = None) -> "VcloudDirectorClient":
        """Build a client from the settings returned by ``config.client_settings``.

        Raises:
            ValueError: If no host is configured.
        """
        if not settings.get("host"):
            raise ValueError("vcloud_director.host is not configured")
        return cls(
            host=settings["host"],
            username=settings.get("username"),
            password=settings.get("password"),
            api_version=settings.get("api_version", DEFAULT_API_VERSION),
            scheme=settings.get("scheme", DEFAULT_SCHEME),
            path=settings.get("path", DEFAULT_PATH),
            verify_tls=settings.get("verify_tls", True),
            timeout=settings.get("timeout", 10),
            retry_limit=settings.get("retry_limit", 4),
            retry_interval=settings.get("retry_interval", 0),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return make_href(self.host, "", scheme=self.scheme, path=self.path)

    def make_href(self, rel: str) -> str:
        """Return the absolute href of a resource path relative to the API root."""
        return make_href(self.host, rel, scheme=self.scheme, path=self.path)

    def get_vapp(self, vapp_id: str) -> VcloudResponse:
        """Retrieve a vApp or VM.

        ``Children/Vm`` is always a list in the returned body, whether the vApp
        holds no VM, one VM or several.

        Args:
            vapp_id: Object identifier of the vApp or VM.

        Returns:
            VcloudResponse: Parsed response.
        """
        response = self.request("GET", f"vApp/{vapp_id}", expects=200, idempotent=True)
        ensure_list(response.body, "Children", "Vm")
        return response

    def login(self) -> VcloudResponse:
        """Open a session and store its authorization token.

        Returns:
            VcloudResponse: Parsed ``Session`` document.

        Raises:
            Unauthorized: If the credentials are rejected or no token is returned.
        """
        resp = self._send("POST", "sessions", auth=(self.username or "", self.password or ""))
        self._check(resp, 200)
        token = resp.headers.get(AUTH_HEADER)
        if not token:
            raise Unauthorized("Login response did not include a session token", status=resp.status_code)
        self.token = token
        log.info("Logged in to %s as %s (API %s)", self.host, self.username, self.api_version)
        return VcloudResponse(status=resp.status_code, headers=dict(resp.headers), body=to_hash(resp.content))

    def logout(self) -> None:
        """Delete the current session; does nothing when not logged in."""
        if self.token is None:
            return
        try:
            resp = self._send("DELETE", "session")
            self._check(resp, 204)
            log.info("Logged out of %s", self.host)
        finally:
            self.token = None

    def request(
        self,
        method: str,
        path: str,
        expects: int | tuple = 200,
        idempotent: bool = False,
        parser: Callable[[bytes], dict] | None = to_hash,
        headers: dict | None = None,
    ) -> VcloudResponse:
        """Send an authenticated request and parse the response.

        Args:
            method: HTTP method.
            path: Path relative to the API root.
            expects: Expected status code(s); anything else raises.
            idempotent: Retry transport failures up to ``retry_limit`` attempts.
            parser: Body parser; ``None`` leaves the body empty.
            headers: Extra request headers.

        Returns:
            VcloudResponse: Status, headers and parsed body.

        Raises:
            VcloudDirectorError: Mapped from an unexpected HTTP status.
            VcloudConnectionError: If the endpoint cannot be reached.
        """
        if self.token is None:
            self.login()
        resp = self._send(method, path, idempotent=idempotent, headers=headers)
        self._check(resp, expects)
        body = parser(resp.content) if parser is not None else {}
        return VcloudResponse(status=resp.status_code, headers=dict(resp.headers), body=body)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "VcloudDirectorClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.logout()
        finally:
            self.close()

    def _default_headers(self) -> dict:
        headers = {"Accept": ACCEPT_TEMPLATE.format(version=self.api_version)}
        if self.token:
            headers[AUTH_HEADER] = self.token
        return headers

    def _send(self, method: str, path: str, idempotent: bool = False, headers: dict | None = None, **kwargs) -> httpx.Response:
        """Send a request, retrying transport errors for idempotent calls.

        Raises:
            VcloudConnectionError: When every attempt fails to reach the server.
        """
        merged = self._default_headers()
        merged.update(headers or {})
        attempts = self.retry_limit if idempotent else 1
        last_exc: httpx.TransportError | None = None
        for attempt in range(1, attempts + 1):
            log.debug("%s %s%s (attempt %d/%d)", method, self.base_url, path, attempt, attempts)
            try:
                return self._http.request(method, path, headers=merged, **kwargs)
            except httpx.TransportError as exc:
                last_exc = exc
                if attempt < attempts:
                    log.warning("%s %s failed (%s); retrying", method, path, exc)
                    if self.retry_interval:
                        time.sleep(self.retry_interval)

        raise VcloudConnectionError(
            f"Failed to reach {self.base_url}{path} after {attempts} attempt(s) "
            f"(verify_tls={self.verify_tls}, timeout={self.timeout}s): {last_exc}"
        ) from last_exc

    @staticmethod
    def _check(resp: httpx.Response, expects: int | tuple) -> None:
        expected = expects if isinstance(expects, tuple) else (expects,)
        if resp.status_code in expected:
            return
        raise _error_from_response(resp)


def _error_from_response(resp: httpx.Response) -> VcloudDirectorError:
    """Build the mapped exception for an unexpected response.

    The vCloud ``Error`` document carries ``message`` and error code attributes;
    when the body is missing or not XML the HTTP reason phrase is used.

    Args:
        resp: Failed HTTP response.

    Returns:
        VcloudDirectorError: Instance of the subclass matching the status.
    """
    details: dict = {}
    if resp.content:
        try:
            details = to_hash(resp.content)
        except ValueError:
            details = {}
    message = details.get("message") or resp.reason_phrase or f"HTTP {resp.status_code}"
    error_cls = error_for_status(resp.status_code)
    log.debug("Request failed with %s: %s", resp.status_code, message)
    return error_cls(
        message,
        status=resp.status_code,
        major_error_code=details.get("majorErrorCode"),
        minor_error_code=details.get("minorErrorCode"),
        vendor_specific_error_code=details.get("vendorSpecificErrorCode"),
    )
