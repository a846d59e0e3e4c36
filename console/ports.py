from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from console.config import dlog


NOTIFY_KINDS = ("success", "error", "warning", "info")


class Notifier(Protocol):
    def notify(self, kind: str, message: str) -> None: ...


class Navigator(Protocol):
    def replace(self, route: str) -> None: ...

    def assign(self, route: str) -> None: ...


class RecordingNavigator:
    """Keeps the last navigation request until the web layer takes it."""

    def __init__(self) -> None:
        self.history: List[Tuple[str, str]] = []
        self.pending: Optional[Tuple[str, str]] = None

    def replace(self, route: str) -> None:
        self._record("replace", route)

    def assign(self, route: str) -> None:
        self._record("assign", route)

    def _record(self, mode: str, route: str) -> None:
        self.history.append((mode, route))
        self.pending = (mode, route)
        dlog("navigate", {"mode": mode, "route": route})

    def take(self) -> Optional[str]:
        pending, self.pending = self.pending, None
        return pending[1] if pending else None
