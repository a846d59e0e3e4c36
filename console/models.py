from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from console.errors import UnexpectedShapeError


Number = Union[int, float]

STAT_FIELDS = (
    "totalUsers",
    "totalInvoices",
    "totalReceipts",
    "totalTransactions",
    "totalTransactionVolume",
)


def _count(raw: Dict[str, Any], name: str) -> Number:
    value = raw.get(name)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise UnexpectedShapeError(f"Stats field {name!r} is not a number: {value!r}")
        if math.isfinite(value) and value.is_integer():
            value = int(value)
    if isinstance(value, float) and not math.isfinite(value):
        raise UnexpectedShapeError(f"Stats field {name!r} is not finite: {value!r}")
    if value < 0:
        raise UnexpectedShapeError(f"Stats field {name!r} is negative: {value!r}")
    return value


def format_naira(value: Optional[Number]) -> str:
    if value is None:
        return "₦0"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int):
        return f"₦{value:,}"
    return f"₦{value:,.2f}"


@dataclass(frozen=True)
class StatsSnapshot:
    totalUsers: Number = 0
    totalInvoices: Number = 0
    totalReceipts: Number = 0
    totalTransactions: Number = 0
    totalTransactionVolume: Number = 0

    @classmethod
    def from_payload(cls, data: Any) -> "StatsSnapshot":
        if not isinstance(data, dict) or not data.get("success"):
            raise UnexpectedShapeError("Invalid stats format", body=data if isinstance(data, dict) else None)
        stats = data.get("stats")
        if not isinstance(stats, dict):
            raise UnexpectedShapeError("Stats response has no 'stats' object", body=data)
        return cls(**{name: _count(stats, name) for name in STAT_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {name: getattr(self, name) for name in STAT_FIELDS}
        out["totalTransactionVolumeDisplay"] = format_naira(self.totalTransactionVolume)
        return out


@dataclass(frozen=True)
class LogEntry:
    id: Optional[str]
    message: str
    meta: Dict[str, Any] = field(default_factory=dict)
    createdAt: Optional[str] = None

    @classmethod
    def from_payload(cls, raw: Any) -> "LogEntry":
        if not isinstance(raw, dict):
            raise UnexpectedShapeError(f"Log entry is not an object: {raw!r}")
        ident = raw.get("_id", raw.get("id"))
        meta = raw.get("meta")
        return cls(
            id=str(ident) if ident is not None else None,
            message=str(raw.get("message") or ""),
            meta=meta if isinstance(meta, dict) else {},
            createdAt=raw.get("createdAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "message": self.message, "meta": self.meta, "createdAt": self.createdAt}


@dataclass(frozen=True)
class LogPage:
    entries: List[LogEntry]
    page: int
    pages: int

    @classmethod
    def from_payload(cls, data: Any, requested_page: int) -> "LogPage":
        """Adopt the server's pagination, falling back to the requested page."""
        if not isinstance(data, dict) or not data.get("success"):
            raise UnexpectedShapeError("Unexpected logs response", body=data if isinstance(data, dict) else None)
        raw_logs = data.get("logs") or []
        if not isinstance(raw_logs, list):
            raise UnexpectedShapeError("Logs response 'logs' is not a list", body=data)
        try:
            page = int(data.get("page") or requested_page)
            pages = int(data.get("pages") or 1)
        except (TypeError, ValueError):
            raise UnexpectedShapeError("Logs response has non-numeric pagination", body=data)
        pages = max(1, pages)
        page = min(max(1, page), pages)
        return cls(entries=[LogEntry.from_payload(r) for r in raw_logs], page=page, pages=pages)


@dataclass(frozen=True)
class FreezeRequest:
    targetIdentifier: str
    freeze: bool

    @property
    def reason(self) -> str:
        return "Frozen by admin via dashboard" if self.freeze else "Unfrozen by admin"

    def body(self) -> Dict[str, Any]:
        return {"freeze": self.freeze, "reason": self.reason}
