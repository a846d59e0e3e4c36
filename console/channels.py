from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ChannelStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class Channel:
    """Lifecycle of one independent unit of async dashboard state.

    Every fetch takes a ticket. The newest operator-triggered ticket always
    applies its result. Background tickets (polls) apply only when no newer
    operator fetch has been issued or is still loading, and never behind a
    result that was already applied.
    """

    name: str
    status: ChannelStatus = ChannelStatus.IDLE
    error: Optional[str] = None
    issued: int = 0
    latest: int = 0
    latest_pending: bool = False
    applied: int = 0
    in_flight: int = 0

    def begin(self, background: bool = False) -> int:
        self.issued += 1
        self.in_flight += 1
        self.status = ChannelStatus.LOADING
        if not background:
            self.latest = self.issued
            self.latest_pending = True
        return self.issued

    def is_current(self, ticket: int) -> bool:
        if ticket == self.latest:
            return True
        return ticket > self.latest and not self.latest_pending and ticket > self.applied

    def end(self, ticket: int) -> None:
        self.in_flight = max(0, self.in_flight - 1)
        if ticket == self.latest:
            self.latest_pending = False

    def succeed(self, ticket: int) -> bool:
        if not self.is_current(ticket):
            return False
        self.applied = max(self.applied, ticket)
        self.status = ChannelStatus.LOADED
        self.error = None
        return True

    def fail(self, ticket: int, message: str) -> bool:
        if not self.is_current(ticket):
            return False
        self.applied = max(self.applied, ticket)
        self.status = ChannelStatus.ERROR
        self.error = message
        return True

    def invalidate(self) -> None:
        """Make every outstanding ticket stale."""
        self.issued += 1
        self.latest = self.issued
        self.latest_pending = False
        if self.status == ChannelStatus.LOADING:
            self.status = ChannelStatus.IDLE

    @property
    def loading(self) -> bool:
        return self.in_flight > 0

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "error": self.error, "loading": self.loading}
