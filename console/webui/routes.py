from __future__ import annotations

import time
from typing import Dict, Any

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse

from console.config import DASHBOARD_ROUTE, LOGIN_ROUTE
from console.webui.auth import public_session_status, require_session
from console.webui.state import ConsoleRuntimeState
from console.webui.templates import DASHBOARD_HTML, render_login


def _dashboard_payload(state: ConsoleRuntimeState) -> Dict[str, Any]:
    return {
        "status": "ok",
        "dashboard": state.dashboard.snapshot(),
        "toasts": state.toasts.drain(),
    }


def create_console_router(state: ConsoleRuntimeState) -> APIRouter:
    """Login page, dashboard page, and the JSON APIs the dashboard page calls."""
    router = APIRouter()

    @router.get(LOGIN_ROUTE, response_class=HTMLResponse, include_in_schema=False)
    async def login_page():
        if state.session.authenticated:
            return RedirectResponse(url=DASHBOARD_ROUTE, status_code=303)
        return HTMLResponse(content=render_login(error=state.gate.error, email=state.gate.email))

    @router.post("/login", include_in_schema=False)
    async def login_submit(email: str = Form(""), password: str = Form("")):
        ok = await state.gate.submit(email=email, password=password)
        target = state.navigator.take()
        if ok and target:
            return RedirectResponse(url=target, status_code=303)
        return HTMLResponse(
            content=render_login(error=state.gate.error, email=state.gate.email),
            status_code=401 if state.gate.error else 200,
        )

    @router.post("/signout", include_in_schema=False)
    async def sign_out():
        await state.dashboard.sign_out()
        return RedirectResponse(url=state.navigator.take() or LOGIN_ROUTE, status_code=303)

    @router.get(DASHBOARD_ROUTE, response_class=HTMLResponse, include_in_schema=False)
    async def dashboard_page():
        if not state.session.authenticated:
            return RedirectResponse(url=LOGIN_ROUTE, status_code=303)
        await state.dashboard.activate()
        return HTMLResponse(content=DASHBOARD_HTML)

    @router.get("/health")
    async def health():
        return {
            "status": "ok",
            "uptime_seconds": int(time.time() - state.start_time),
            "backend_url": state.settings.backend_url,
            "session": public_session_status(state.session),
            "dashboard_active": state.dashboard.active,
        }

    api = APIRouter(prefix=f"{DASHBOARD_ROUTE}/api", dependencies=[Depends(require_session(state.session))])

    @api.get("/state")
    async def dashboard_state():
        if not state.dashboard.active:
            await state.dashboard.activate()
        return _dashboard_payload(state)

    @api.post("/logs/prev")
    async def logs_prev():
        updated = await state.dashboard.go_prev()
        return {**_dashboard_payload(state), "updated": updated}

    @api.post("/logs/next")
    async def logs_next():
        updated = await state.dashboard.go_next()
        return {**_dashboard_payload(state), "updated": updated}

    @api.post("/logs/refresh")
    async def logs_refresh():
        updated = await state.dashboard.refresh_logs()
        return {**_dashboard_payload(state), "updated": updated}

    @api.post("/freeze")
    async def freeze(payload: dict):
        identifier = str((payload or {}).get("identifier") or "")
        freeze_flag = bool((payload or {}).get("freeze", True))
        applied = await state.dashboard.freeze(identifier, freeze=freeze_flag)
        return {**_dashboard_payload(state), "applied": applied}

    router.include_router(api)
    return router
