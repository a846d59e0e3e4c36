from __future__ import annotations

from typing import Any, Dict, Optional


class ConsoleError(Exception):
    """Base class for failures surfaced to the operator."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthError(ConsoleError):
    """Missing or rejected credentials on the login form."""


class ValidationError(ConsoleError):
    """A required field was empty; no request was sent."""


class NetworkError(ConsoleError):
    """Timeout, connection failure or a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def message_from_body(self, default: str) -> str:
        """Server-provided `message` when the body carries one, else `default`."""
        if isinstance(self.body, dict):
            msg = self.body.get("message")
            if isinstance(msg, str) and msg.strip():
                return msg
        return default


class UnexpectedShapeError(NetworkError):
    """A response decoded fine but lacked the fields the console needs."""
