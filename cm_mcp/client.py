"""
Async Cloudera Manager REST client.

Every call opens a fresh httpx.AsyncClient: no pooling, no retries, no caching
beyond the resolved API version. Path segments built from caller input are
percent-encoded, never interpolated raw.

Version handling:
  - A pinned CLDR_CM_API_VERSION starts the client Resolved.
  - Otherwise the first resource call must go through resolve_version(),
    which asks GET {base}/api/version once and caches the answer for the
    lifetime of the client.

TLS verification and timeouts are carried by TransportOptions and only
affect the client they are handed to.
"""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from typing import Any, Sequence
from urllib.parse import quote

import httpx

from cm_mcp.config import DEFAULT_TIMEOUT, Config, load_config_from_env
from cm_mcp.errors import (
    CmError,
    ProtocolError,
    StateError,
    UpstreamError,
    ValidationError,
)

SERVICE_ACTIONS = ("start", "stop", "restart")
VIEWS = ("summary", "full")

_VERSION_RE = re.compile(r"^v\d+$", re.IGNORECASE)


# ---------------------------------------------------------------------------
# Transport configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TransportOptions:
    verify_ssl: bool = True
    timeout: float = DEFAULT_TIMEOUT
    # Injected httpx transport, e.g. httpx.MockTransport in tests.
    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def from_config(cls, cfg: Config) -> "TransportOptions":
        return cls(verify_ssl=cfg.verify_ssl, timeout=cfg.timeout)


# ---------------------------------------------------------------------------
# Version state
# ---------------------------------------------------------------------------

class Unresolved:
    """No API version known yet; only resolve_version() is usable."""

    def __repr__(self) -> str:
        return "Unresolved()"


@dataclass(frozen=True)
class Resolved:
    version: str


UNRESOLVED = Unresolved()


def _seg(value: str) -> str:
    return quote(str(value), safe="")


def _require_name(value: Any, label: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} is required")
    return value


def _require_view(view: str | None) -> str | None:
    if view is not None and view not in VIEWS:
        raise ValidationError(f"view must be one of {list(VIEWS)}, got {view!r}")
    return view


def _as_int(value: Any) -> int | None:
    # 10.0 goes out as "10".
    return None if value is None else int(value)


def _unquote(text: str) -> str:
    text = text.strip()
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class ClouderaManagerClient:
    def __init__(self, cfg: Config, transport: TransportOptions | None = None) -> None:
        self._cfg = cfg
        self._transport = transport or TransportOptions.from_config(cfg)
        self._state: Unresolved | Resolved = (
            Resolved(cfg.api_version) if cfg.api_version else UNRESOLVED
        )
        self._resolve_lock = asyncio.Lock()

    @property
    def base_url(self) -> str:
        return self._cfg.base_url

    @property
    def version(self) -> str | None:
        """The cached API version, or None while unresolved."""
        if isinstance(self._state, Resolved):
            return self._state.version
        return None

    def api_base(self) -> str:
        if not isinstance(self._state, Resolved):
            raise StateError("API version not resolved yet")
        return f"{self._cfg.base_url}/api/{self._state.version}"

    async def resolve_version(self) -> str:
        """Return the API version, asking Cloudera Manager only on first use."""
        if isinstance(self._state, Resolved):
            return self._state.version

        async with self._resolve_lock:
            # A concurrent caller may have finished discovery while we waited.
            if isinstance(self._state, Resolved):
                return self._state.version

            res = await self._send("GET", f"{self._cfg.base_url}/api/version")
            if not res.is_success:
                raise ProtocolError(
                    f"Failed to get API version: {res.status_code} {res.reason_phrase}"
                )
            text = res.text
            version = _unquote(text)
            if not _VERSION_RE.match(version):
                raise ProtocolError(f"Unexpected version format from /api/version: {text}")
            self._state = Resolved(version)
            return version

    # -- HTTP plumbing -----------------------------------------------------

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            auth=httpx.BasicAuth(self._cfg.username, self._cfg.password),
            headers={"Accept": "application/json"},
            verify=self._transport.verify_ssl,
            timeout=self._transport.timeout,
            transport=self._transport.transport,
        ) as http:
            return await http.request(method, url, params=params, json=json)

    async def _request(
        self,
        op: str,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.api_base()}{path}"
        query = {k: v for k, v in (params or {}).items() if v is not None}
        res = await self._send(method, url, params=query or None, json=json)
        _assert_ok(res, op)
        if not res.content:
            return None
        try:
            return res.json()
        except ValueError:
            content_type = res.headers.get("content-type", "unknown content type")
            raise ProtocolError(f"{op} returned a non-JSON response ({content_type})") from None

    # -- Resource operations -----------------------------------------------

    async def get_api_info(self) -> dict[str, str]:
        version = await self.resolve_version()
        return {"version": version, "baseUrl": self._cfg.base_url}

    async def list_clusters(self, view: str | None = None) -> Any:
        return await self._request(
            "listClusters", "GET", "/clusters", params={"view": _require_view(view)}
        )

    async def list_services(self, cluster: str, view: str | None = None) -> Any:
        cluster = _require_name(cluster, "clusterName")
        return await self._request(
            "listServices",
            "GET",
            f"/clusters/{_seg(cluster)}/services",
            params={"view": _require_view(view)},
        )

    async def service_command(self, cluster: str, service: str, action: str) -> Any:
        cluster = _require_name(cluster, "clusterName")
        service = _require_name(service, "serviceName")
        if action not in SERVICE_ACTIONS:
            raise ValidationError(f"action must be one of {list(SERVICE_ACTIONS)}, got {action!r}")
        return await self._request(
            f"serviceCommand:{action}",
            "POST",
            f"/clusters/{_seg(cluster)}/services/{_seg(service)}/commands/{action}",
        )

    async def get_command(self, command_id: int) -> Any:
        if (
            isinstance(command_id, bool)
            or not isinstance(command_id, (int, float))
            or int(command_id) != command_id
        ):
            raise ValidationError(f"command id must be an integer, got {command_id!r}")
        return await self._request("getCommand", "GET", f"/commands/{int(command_id)}")

    async def list_cluster_commands(
        self,
        cluster: str,
        *,
        view: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Any:
        cluster = _require_name(cluster, "clusterName")
        return await self._request(
            "listClusterCommands",
            "GET",
            f"/clusters/{_seg(cluster)}/commands",
            params={"view": _require_view(view), "limit": _as_int(limit), "offset": _as_int(offset)},
        )

    async def list_service_commands(
        self,
        cluster: str,
        service: str,
        *,
        view: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> Any:
        cluster = _require_name(cluster, "clusterName")
        service = _require_name(service, "serviceName")
        return await self._request(
            "listServiceCommands",
            "GET",
            f"/clusters/{_seg(cluster)}/services/{_seg(service)}/commands",
            params={"view": _require_view(view), "limit": _as_int(limit), "offset": _as_int(offset)},
        )

    async def list_parcels(self, cluster: str, view: str | None = None) -> Any:
        cluster = _require_name(cluster, "clusterName")
        return await self._request(
            "listParcels",
            "GET",
            f"/clusters/{_seg(cluster)}/parcels",
            params={"view": _require_view(view)},
        )

    async def get_parcels_usage(self, cluster: str) -> Any:
        cluster = _require_name(cluster, "clusterName")
        return await self._request(
            "getParcelsUsage", "GET", f"/clusters/{_seg(cluster)}/parcels/usage"
        )

    async def inspect_hosts(self, host_ids: Sequence[str] | None = None) -> Any:
        body = None
        if host_ids is not None:
            ids = list(host_ids)
            if not ids or any(not isinstance(h, str) or not h.strip() for h in ids):
                raise ValidationError("hostIds must be a non-empty list of host ids")
            body = {"items": ids}
        return await self._request("inspectHosts", "POST", "/cm/commands/inspectHosts", json=body)


def _assert_ok(res: httpx.Response, op: str) -> None:
    if res.is_success:
        return
    # Error context is best-effort: an unreadable body is dropped, not raised.
    try:
        body = res.text or None
    except (httpx.StreamError, UnicodeDecodeError, LookupError):
        body = None
    raise UpstreamError(op, res.status_code, res.reason_phrase, body)


# ---------------------------------------------------------------------------
# Error enrichment
# ---------------------------------------------------------------------------

_STATUS_HINTS = {
    401: "Authentication failed. Check CLDR_CM_USERNAME and CLDR_CM_PASSWORD.",
    403: "The API user lacks the Cloudera Manager role required for this operation.",
    404: (
        "Resource not found. Cluster and service names are case-sensitive; "
        "list them first with cm_read_list_clusters / cm_read_list_services."
    ),
}


def describe_error(exc: Exception) -> str:
    """Prepend an actionable hint to common upstream and transport failures."""
    if isinstance(exc, UpstreamError):
        hint = _STATUS_HINTS.get(exc.status_code)
        return f"{hint}\n\n{exc}" if hint else str(exc)
    if isinstance(exc, CmError):
        return str(exc)
    if isinstance(exc, httpx.TimeoutException):
        return f"Request to Cloudera Manager timed out. Raise CLDR_CM_TIMEOUT if the server is slow.\n\n{exc!r}"
    if isinstance(exc, httpx.ConnectError):
        if "CERTIFICATE_VERIFY_FAILED" in str(exc):
            return (
                "TLS certificate verification failed. For lab clusters with self-signed "
                f"certificates set CLDR_CM_VERIFY_SSL=false.\n\n{exc}"
            )
        return f"Cannot reach Cloudera Manager. Check CLDR_CM_BASE_URL and that the server is up.\n\n{exc}"
    return str(exc) or repr(exc)


# Failures a tool handler turns into an error result instead of raising.
CLIENT_ERRORS = (CmError, httpx.HTTPError)


# ---------------------------------------------------------------------------
# Shared process client
# ---------------------------------------------------------------------------

_client: ClouderaManagerClient | None = None


def get_client() -> ClouderaManagerClient:
    """Return the process-wide client, building it from the environment on first use."""
    global _client
    if _client is None:
        _client = ClouderaManagerClient(load_config_from_env())
    return _client


def set_client(client: ClouderaManagerClient | None) -> None:
    global _client
    _client = client
