from __future__ import annotations

import os
import json
import sys
from dataclasses import dataclass
from typing import Optional


# Debug flag: default off. Enable via CLI arg "--console-debug" or env CONSOLE_DEBUG=1.
DEBUG = "--console-debug" in sys.argv or os.environ.get("CONSOLE_DEBUG") == "1"

SESSION_KEY = "adminToken"
LOGS_PAGE_SIZE = 20
POLL_INTERVAL_SECONDS = 5.0
REQUEST_TIMEOUT_SECONDS = 15.0

LOGIN_ROUTE = "/"
DASHBOARD_ROUTE = "/admindashboard"

DEFAULT_BACKEND_URL = "http://localhost:5050"


def _printable(data) -> str:
    try:
        return data if isinstance(data, str) else json.dumps(data, indent=2, ensure_ascii=False, default=str)
    except Exception:
        return str(data)


def dlog(label: str, data):
    if not DEBUG:
        return
    print(f"[console-debug] {label}: {_printable(data)}")


def elog(label: str, data):
    """Failure record; printed regardless of the debug flag."""
    print(f"[console-error] {label}: {_printable(data)}", file=sys.stderr)


@dataclass(frozen=True)
class ConsoleSettings:
    backend_url: str
    session_file: Optional[str] = None


def load_console_settings() -> ConsoleSettings:
    """Read console settings from env."""
    backend_url = (os.environ.get("CONSOLE_BACKEND_URL") or "").strip() or DEFAULT_BACKEND_URL
    session_file = (os.environ.get("CONSOLE_SESSION_FILE") or "").strip() or None
    settings = ConsoleSettings(backend_url=backend_url.rstrip("/"), session_file=session_file)
    dlog("console_settings", {"backend_url": settings.backend_url, "session_file": settings.session_file})
    return settings
