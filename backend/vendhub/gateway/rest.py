"""PostgREST gateway for the hosted backend (endpoint URL + API key)."""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import httpx

from vendhub.core.exceptions import BackendError
from vendhub.gateway.base import Embed, Filters, Gateway, Row

logger = logging.getLogger(__name__)


def _select_clause(columns: Tuple[str, ...], embed: Tuple[Embed, ...]) -> str:
    """
    Build the PostgREST select parameter.

    Example: ("*", [machine_categories(name, icon)]) -> "*,machine_categories(name,icon)"
    """
    parts = list(columns) or ["*"]
    for e in embed:
        parts.append(f"{e.table}({_select_clause(e.columns, e.embed)})")
    return ",".join(parts)


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return "eq." + ("true" if value else "false")
    return f"eq.{value}"


def _parse_count(content_range: Optional[str]) -> int:
    # "0-24/3573" or "*/0"
    if not content_range or "/" not in content_range:
        raise BackendError("Backend did not return a row count", code="PGRST_COUNT")
    total = content_range.rsplit("/", 1)[1]
    if total == "*":
        raise BackendError("Backend did not return an exact row count", code="PGRST_COUNT")
    return int(total)


class RestGateway(Gateway):
    """
    Gateway over the hosted backend's REST interface.

    Requests carry the API key; when bound to a user's access token
    (with_token) that token is sent as the bearer so row level policies
    apply to the caller instead of the anonymous role.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        access_token: Optional[str] = None,
        timeout: float = 30.0,
    ):
        self._url = url.rstrip("/")
        self._api_key = api_key
        self._access_token = access_token
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def with_token(self, access_token: Optional[str]) -> "RestGateway":
        """Same backend and connection pool, authorized as the given user."""
        gw = RestGateway(self._url, self._api_key, client=self._client, access_token=access_token)
        gw._owns_client = False
        return gw

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._access_token or self._api_key}",
            "Accept": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    @staticmethod
    def _filter_params(filters: Optional[Filters]) -> List[Tuple[str, str]]:
        return [(name, _filter_value(value)) for name, value in (filters or {}).items()]

    async def _request(
        self,
        method: str,
        table: str,
        params: List[Tuple[str, str]],
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        url = f"{self._url}/rest/v1/{table}"
        try:
            resp = await self._client.request(method, url, params=params, json=json, headers=self._headers(prefer))
        except httpx.TimeoutException as e:
            logger.error("Backend request timed out: %s %s", method, table)
            raise BackendError(f"Network timeout: {e}", code="NETWORK_ERROR") from e
        except httpx.TransportError as e:
            logger.error("Backend request failed: %s %s: %s", method, table, e)
            raise BackendError(f"Network error: {e}", code="NETWORK_ERROR") from e
        if resp.status_code >= 400:
            raise self._error_from(resp)
        return resp

    @staticmethod
    def _error_from(resp: httpx.Response) -> BackendError:
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or resp.text or f"HTTP {resp.status_code}"
        details: Dict[str, Any] = {"status": resp.status_code}
        for key in ("details", "hint"):
            if body.get(key):
                details[key] = body[key]
        logger.warning("Backend error %s: %s", resp.status_code, message)
        return BackendError(message, code=body.get("code") or str(resp.status_code), details=details)

    async def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order: Optional[str] = None,
        descending: bool = False,
        embed: Tuple[Embed, ...] = (),
    ) -> List[Row]:
        params = [("select", _select_clause((), embed))]
        params += self._filter_params(filters)
        if order:
            params.append(("order", f"{order}.{'desc' if descending else 'asc'}"))
        resp = await self._request("GET", table, params)
        return resp.json() or []

    async def get(self, table: str, row_id: str, embed: Tuple[Embed, ...] = ()) -> Optional[Row]:
        params = [("select", _select_clause((), embed)), ("id", _filter_value(row_id)), ("limit", "1")]
        rows = (await self._request("GET", table, params)).json()
        return rows[0] if rows else None

    async def count(self, table: str, filters: Optional[Filters] = None) -> int:
        params = [("select", "id")] + self._filter_params(filters)
        resp = await self._request("HEAD", table, params, prefer="count=exact")
        return _parse_count(resp.headers.get("content-range"))

    async def insert(self, table: str, values: Mapping[str, Any]) -> Row:
        resp = await self._request(
            "POST", table, [("select", "*")], json=dict(values), prefer="return=representation"
        )
        rows = resp.json()
        if not rows:
            # Insert allowed but the row is not visible to the caller
            raise BackendError(
                f"Inserted row in {table} is not readable: permission denied by policy", code="42501"
            )
        return rows[0]

    async def update(self, table: str, row_id: str, values: Mapping[str, Any]) -> Optional[Row]:
        if not values:
            return await self.get(table, row_id)
        resp = await self._request(
            "PATCH",
            table,
            [("id", _filter_value(row_id)), ("select", "*")],
            json=dict(values),
            prefer="return=representation",
        )
        rows = resp.json()
        return rows[0] if rows else None

    async def delete(self, table: str, row_id: str) -> int:
        resp = await self._request(
            "DELETE",
            table,
            [("id", _filter_value(row_id)), ("select", "id")],
            prefer="return=representation",
        )
        return len(resp.json() or [])

    async def ping(self) -> None:
        await self.count("machine_categories")

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
