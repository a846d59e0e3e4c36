from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from console.config import LOGS_PAGE_SIZE, REQUEST_TIMEOUT_SECONDS, dlog
from console.errors import NetworkError, UnexpectedShapeError
from console.models import FreezeRequest, LogPage, StatsSnapshot
from console.session import SessionContext


def _decode(resp: requests.Response) -> Optional[Dict[str, Any]]:
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else {"data": data}


class AuthenticatedClient:
    """Thin wrapper around requests that attaches the session's bearer token.

    The token is read from the SessionContext on every send, so sign-in and
    sign-out take effect on the next request without rebuilding the client.
    Call sites never set Authorization themselves.
    """

    def __init__(
        self,
        *,
        base_url: str,
        session: SessionContext,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        http: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._session = session
        self._timeout = timeout
        self._http = http or requests.Session()

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._session.token if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        authenticated: bool = True,
    ) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        headers = self._headers(authenticated)
        dlog(
            "backend_request",
            {"method": method, "url": url, "params": params, "bearer": "Authorization" in headers},
        )
        try:
            resp = self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            raise NetworkError(f"Request timed out after {self._timeout:g}s") from e
        except requests.RequestException as e:
            raise NetworkError(f"Could not reach server: {e}") from e

        data = _decode(resp)
        if resp.status_code >= 400:
            message = (data or {}).get("message") or f"Request failed with status {resp.status_code}"
            raise NetworkError(str(message), status=resp.status_code, body=data)
        if data is None:
            raise UnexpectedShapeError(
                f"Invalid JSON from {path} (status {resp.status_code})", status=resp.status_code
            )

        dlog("backend_response", {"url": url, "status": resp.status_code, "keys": sorted(data.keys())})
        return data

    async def request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        """Run `send` on a worker thread so the event loop stays responsive."""
        return await asyncio.to_thread(self.send, method, path, **kwargs)


class AdminApi:
    """Backend admin endpoints consumed by the console."""

    def __init__(self, client: AuthenticatedClient) -> None:
        self.client = client

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self.client.request(
            "POST",
            "/api/admin/login",
            json={"email": email, "password": password},
            authenticated=False,
        )

    async def stats(self) -> StatsSnapshot:
        data = await self.client.request("GET", "/api/admin/stats")
        return StatsSnapshot.from_payload(data)

    async def logs(self, page: int, limit: int = LOGS_PAGE_SIZE) -> LogPage:
        data = await self.client.request("GET", "/api/admin/logs", params={"page": page, "limit": limit})
        return LogPage.from_payload(data, requested_page=page)

    async def freeze(self, req: FreezeRequest) -> Dict[str, Any]:
        path = f"/api/admin/freeze/{quote(req.targetIdentifier, safe='')}"
        return await self.client.request("POST", path, json=req.body())
