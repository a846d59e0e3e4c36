from __future__ import annotations

from typing import Callable, Dict, Any

from fastapi import HTTPException, status

from console.session import SessionContext


def require_session(session: SessionContext) -> Callable[[], Dict[str, Any]]:
    """Dependency for the dashboard JSON APIs; 401 when no token is stored."""

    def dependency() -> Dict[str, Any]:
        if not session.authenticated:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not signed in",
            )
        return {"session_key": session.key}

    return dependency


def public_session_status(session: SessionContext) -> Dict[str, Any]:
    """Redacted view suitable for the health endpoint."""
    return {
        "signed_in": session.authenticated,
        "session_key": session.key,
        "persisted": bool(session.store.path),
    }
