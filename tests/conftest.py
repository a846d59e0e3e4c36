import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from console.client import AdminApi, AuthenticatedClient
from console.ports import RecordingNavigator
from console.session import SessionContext, SessionStore
from console.webui.state import ToastFeed


BACKEND_URL = "http://backend.test"


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


@dataclass
class Call:
    method: str
    path: str
    params: Optional[Dict[str, Any]]
    json: Optional[Dict[str, Any]]
    headers: Dict[str, str]
    timeout: Optional[float]


def log_entries(page: int, count: int = 5) -> List[Dict[str, Any]]:
    return [
        {
            "_id": f"p{page}-{i}",
            "message": f"event {i} on page {page}",
            "meta": {"page": page, "i": i},
            "createdAt": "2025-01-01T10:00:00Z",
        }
        for i in range(count)
    ]


class FakeBackend:
    """Stands in for requests.Session; routes keyed by (method, path or path prefix)."""

    def __init__(self) -> None:
        self.base_url = BACKEND_URL
        self.calls: List[Call] = []
        self.log_pages = 5
        self.stats = {
            "totalUsers": 12,
            "totalInvoices": 40,
            "totalReceipts": 31,
            "totalTransactions": 77,
            "totalTransactionVolume": 1250000,
        }
        self._lock = threading.Lock()
        self.routes: Dict[Tuple[str, str], Callable[..., Any]] = {
            ("POST", "/api/admin/login"): self._login,
            ("GET", "/api/admin/stats"): lambda **kw: {"success": True, "stats": dict(self.stats)},
            ("GET", "/api/admin/logs"): self._logs,
            ("POST", "/api/admin/freeze/"): self._freeze,
        }

    def _login(self, json=None, **kw):
        if json == {"email": "a@b.com", "password": "x"}:
            return {"token": "T1"}
        return FakeResponse(401, {"message": "Invalid credentials"})

    def _logs(self, params=None, **kw):
        page = int(params["page"])
        return {"success": True, "logs": log_entries(page), "page": page, "pages": self.log_pages}

    def _freeze(self, path=None, json=None, **kw):
        verb = "frozen" if json["freeze"] else "unfrozen"
        return {"success": True, "message": f"User {verb}"}

    def route(self, method: str, path: str, handler: Callable[..., Any]) -> None:
        self.routes[(method, path)] = handler

    def _find(self, method: str, path: str):
        if (method, path) in self.routes:
            return self.routes[(method, path)]
        for (m, p), handler in self.routes.items():
            if m == method and p.endswith("/") and path.startswith(p):
                return handler
        return None

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = url[len(self.base_url):]
        with self._lock:
            self.calls.append(Call(method, path, params, json, dict(headers or {}), timeout))
        handler = self._find(method, path)
        if handler is None:
            return FakeResponse(404, {"message": "Not found"})
        result = handler(path=path, params=params, json=json, headers=headers)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(200, result)

    def calls_to(self, method: str, path: str) -> List[Call]:
        with self._lock:
            return [c for c in self.calls if c.method == method and c.path.startswith(path)]

    def log_pages_requested(self) -> List[int]:
        return [int(c.params["page"]) for c in self.calls_to("GET", "/api/admin/logs")]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def session():
    return SessionContext(SessionStore())


@pytest.fixture
def client(backend, session):
    return AuthenticatedClient(base_url=backend.base_url, session=session, http=backend)


@pytest.fixture
def api(client):
    return AdminApi(client)


@pytest.fixture
def toasts():
    return ToastFeed()


@pytest.fixture
def navigator():
    return RecordingNavigator()
