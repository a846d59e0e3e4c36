from __future__ import annotations

import os
import json
import tempfile
from typing import Dict, Optional

from console.config import SESSION_KEY, dlog


SESSION_SCHEMA_VERSION = 1


class SessionStore:
    """Key-value persistence slot, optionally mirrored to a JSON file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path
        self.values: Dict[str, str] = {}

    def load(self) -> None:
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r") as f:
                raw = json.load(f)
        except Exception as e:
            dlog("session_load_error", f"Could not read session store: {e}")
            return

        version = raw.get("version") or 1
        if version != SESSION_SCHEMA_VERSION:
            dlog("session_load_skip", f"Incompatible session store version: {version}")
            return
        values = raw.get("values") or {}
        self.values = {str(k): str(v) for k, v in values.items() if v is not None}

    def save(self) -> None:
        if not self.path:
            return
        payload = {"version": SESSION_SCHEMA_VERSION, "values": self.values}
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with tempfile.NamedTemporaryFile("w", delete=False, dir=os.path.dirname(self.path) or ".") as tmp:
                json.dump(payload, tmp)
                tmp.flush()
                os.fsync(tmp.fileno())
                temp_name = tmp.name
            os.replace(temp_name, self.path)
        except Exception as e:
            dlog("session_save_error", str(e))

    def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.save()

    def remove(self, key: str) -> None:
        if key in self.values:
            del self.values[key]
            self.save()


class SessionContext:
    """The operator's session, passed explicitly to every component.

    Only the login path writes the token and only sign-out removes it; every
    request reads it through here.
    """

    def __init__(self, store: SessionStore, key: str = SESSION_KEY) -> None:
        self.store = store
        self.key = key

    @property
    def token(self) -> Optional[str]:
        return self.store.get(self.key) or None

    @property
    def authenticated(self) -> bool:
        return self.token is not None

    def begin(self, token: str) -> None:
        self.store.set(self.key, token)
        dlog("session_begin", {"key": self.key})

    def end(self) -> None:
        self.store.remove(self.key)
        dlog("session_end", {"key": self.key})
