from __future__ import annotations

from typing import Optional

from console.client import AdminApi
from console.config import DASHBOARD_ROUTE, dlog, elog
from console.errors import AuthError, NetworkError, UnexpectedShapeError
from console.ports import Navigator
from console.session import SessionContext


class SessionGate:
    """Credential form: one login request per submit, token persisted on success."""

    def __init__(self, api: AdminApi, session: SessionContext, navigator: Navigator) -> None:
        self.api = api
        self.session = session
        self.navigator = navigator
        self.email = ""
        self.password = ""
        self.busy = False
        self.error: Optional[str] = None

    async def submit(self, email: Optional[str] = None, password: Optional[str] = None) -> bool:
        if self.busy:
            return False
        if email is not None:
            self.email = email
        if password is not None:
            self.password = password

        self.busy = True
        self.error = None
        try:
            dlog("login_submit", {"email": self.email})
            try:
                data = await self.api.login(self.email, self.password)
            except UnexpectedShapeError as e:
                raise AuthError("Login failed") from e
            except NetworkError as e:
                raise AuthError(e.message_from_body(e.message if e.status is None else "Login failed")) from e
            token = data.get("token")
            if not isinstance(token, str) or not token:
                elog("login_unexpected_response", {"keys": sorted(data.keys())})
                message = data.get("message")
                raise AuthError(message if isinstance(message, str) and message.strip() else "Login failed")

            self.session.begin(token)
            self.password = ""
            self.navigator.replace(DASHBOARD_ROUTE)
            return True
        except AuthError as e:
            elog("login_error", e.message)
            self.error = e.message
            return False
        finally:
            self.busy = False
