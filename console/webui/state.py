from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List

from console.client import AdminApi, AuthenticatedClient
from console.config import ConsoleSettings, dlog
from console.dashboard import OperationsDashboard
from console.gate import SessionGate
from console.ports import NOTIFY_KINDS, RecordingNavigator
from console.session import SessionContext, SessionStore


@dataclass
class Toast:
    ts: float
    kind: str
    message: str


class ToastFeed:
    """In-memory ring buffer of notifications, drained by the dashboard page."""

    def __init__(self, max_toasts: int = 50) -> None:
        self.max_toasts = max_toasts
        self.toasts: List[Toast] = []

    def notify(self, kind: str, message: str) -> None:
        if kind not in NOTIFY_KINDS:
            kind = "info"
        self.toasts.append(Toast(ts=time.time(), kind=kind, message=message))
        if len(self.toasts) > self.max_toasts:
            self.toasts = self.toasts[-self.max_toasts :]
        dlog(f"notify_{kind}", message)

    def drain(self) -> List[Dict[str, Any]]:
        out = [{"ts": t.ts, "kind": t.kind, "message": t.message} for t in self.toasts]
        self.toasts = []
        return out


@dataclass
class ConsoleRuntimeState:
    start_time: float
    settings: ConsoleSettings
    session: SessionContext
    client: AuthenticatedClient
    gate: SessionGate
    dashboard: OperationsDashboard
    navigator: RecordingNavigator
    toasts: ToastFeed = field(default_factory=ToastFeed)


def init_console_state(settings: ConsoleSettings, *, poll_interval: float | None = None) -> ConsoleRuntimeState:
    """Wire one operator session: store, client, gate and dashboard."""
    store = SessionStore(path=settings.session_file)
    store.load()
    session = SessionContext(store)
    client = AuthenticatedClient(base_url=settings.backend_url, session=session)
    api = AdminApi(client)
    navigator = RecordingNavigator()
    toasts = ToastFeed()
    dashboard_kwargs: Dict[str, Any] = {}
    if poll_interval is not None:
        dashboard_kwargs["poll_interval"] = poll_interval
    return ConsoleRuntimeState(
        start_time=time.time(),
        settings=settings,
        session=session,
        client=client,
        gate=SessionGate(api, session, navigator),
        dashboard=OperationsDashboard(api, session, toasts, navigator, **dashboard_kwargs),
        navigator=navigator,
        toasts=toasts,
    )
