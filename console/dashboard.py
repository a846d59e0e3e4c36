from __future__ import annotations

import asyncio
from typing import Any, Coroutine, Dict, List, Optional, Set

from console.channels import Channel
from console.client import AdminApi
from console.config import LOGIN_ROUTE, LOGS_PAGE_SIZE, POLL_INTERVAL_SECONDS, dlog, elog
from console.errors import ConsoleError, NetworkError, UnexpectedShapeError, ValidationError
from console.models import FreezeRequest, LogEntry, StatsSnapshot
from console.ports import Navigator, Notifier
from console.session import SessionContext


class OperationsDashboard:
    """Stats, paginated activity logs with polling, and account freeze controls.

    Each channel catches its own failures; nothing raised by the backend
    escapes these methods. Once deactivated, no further fetches are issued
    until the dashboard is activated again.
    """

    def __init__(
        self,
        api: AdminApi,
        session: SessionContext,
        notifier: Notifier,
        navigator: Navigator,
        *,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        page_size: int = LOGS_PAGE_SIZE,
    ) -> None:
        self.api = api
        self.session = session
        self.notifier = notifier
        self.navigator = navigator
        self.poll_interval = poll_interval
        self.page_size = page_size

        self.stats = StatsSnapshot()
        self.stats_channel = Channel("stats")

        self.logs: List[LogEntry] = []
        self.page = 1
        self.pages = 1
        self.logs_channel = Channel("logs")

        self.identifier = ""
        self.freezing = False
        self.last_freeze_message: Optional[str] = None

        self.active = False
        self.closed = False
        self.poll_ticks = 0
        self._poll_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    # ---------- lifecycle ----------
    async def activate(self) -> None:
        if self.active:
            return
        self.active = True
        self.closed = False
        dlog("dashboard_activate", {"poll_interval": self.poll_interval})
        self._poll_task = asyncio.create_task(self._poll())
        await asyncio.gather(self.load_stats(), self.load_logs(1))

    async def deactivate(self) -> None:
        self.active = False
        self.closed = True
        pending: List[asyncio.Task] = list(self._tasks)
        if self._poll_task is not None:
            pending.append(self._poll_task)
            self._poll_task = None
        for task in pending:
            task.cancel()
        self.stats_channel.invalidate()
        self.logs_channel.invalidate()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        dlog("dashboard_deactivate", {"cancelled": len(pending), "poll_ticks": self.poll_ticks})

    async def _poll(self) -> None:
        while self.active:
            await asyncio.sleep(self.poll_interval)
            if not self.active:
                return
            self.poll_ticks += 1
            if self.logs_channel.loading:
                dlog("poll_skipped", {"page": self.page, "tick": self.poll_ticks})
                continue
            # The tick does not wait for its fetch; the interval stays fixed.
            self._spawn(self.load_logs(self.page, background=True))

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ---------- stats channel ----------
    async def load_stats(self) -> bool:
        if self.closed:
            return False
        ticket = self.stats_channel.begin()
        try:
            snapshot = await self.api.stats()
        except UnexpectedShapeError as e:
            elog("stats_unexpected_response", e.body or e.message)
            self._stats_failed(ticket, e.message)
            return False
        except ConsoleError as e:
            elog("stats_error", e.message)
            self._stats_failed(ticket, e.message)
            return False
        except Exception as e:
            elog("stats_error", repr(e))
            self._stats_failed(ticket, str(e))
            return False
        finally:
            self.stats_channel.end(ticket)

        if not self.stats_channel.succeed(ticket):
            dlog("stats_superseded", {"ticket": ticket})
            return False
        self.stats = snapshot
        return True

    def _stats_failed(self, ticket: int, message: str) -> None:
        if self.stats_channel.fail(ticket, message):
            self.notifier.notify("error", "Failed to load stats")

    # ---------- logs channel ----------
    async def load_logs(self, page: int = 1, background: bool = False) -> bool:
        if self.closed:
            return False
        ticket = self.logs_channel.begin(background=background)
        try:
            result = await self.api.logs(page, self.page_size)
        except UnexpectedShapeError as e:
            elog("logs_unexpected_response", e.body or e.message)
            self.logs_channel.fail(ticket, e.message)
            return False
        except ConsoleError as e:
            elog("logs_error", e.message)
            self.logs_channel.fail(ticket, e.message)
            return False
        except Exception as e:
            elog("logs_error", repr(e))
            self.logs_channel.fail(ticket, str(e))
            return False
        finally:
            self.logs_channel.end(ticket)

        if not self.logs_channel.succeed(ticket):
            dlog("logs_superseded", {"ticket": ticket, "page": page})
            return False
        self.logs = list(result.entries)
        self.page = result.page
        self.pages = result.pages
        return True

    async def go_prev(self) -> bool:
        if self.page <= 1:
            return False
        return await self.load_logs(self.page - 1)

    async def go_next(self) -> bool:
        if self.page >= self.pages:
            return False
        return await self.load_logs(self.page + 1)

    async def refresh_logs(self) -> bool:
        return await self.load_logs(1)

    # ---------- freeze channel ----------
    def _freeze_target(self, identifier: Optional[str]) -> str:
        if identifier is not None:
            self.identifier = identifier
        target = (self.identifier or "").strip()
        if not target:
            raise ValidationError("Enter User ID")
        return target

    async def freeze(self, identifier: Optional[str] = None, freeze: bool = True) -> bool:
        if self.freezing or self.closed:
            return False
        try:
            target = self._freeze_target(identifier)
        except ValidationError as e:
            self.notifier.notify("warning", e.message)
            return False

        self.freezing = True
        try:
            try:
                data = await self.api.freeze(FreezeRequest(targetIdentifier=target, freeze=freeze))
            except NetworkError as e:
                elog("freeze_error", {"target": target, "status": e.status, "error": e.message})
                self._freeze_done("error", e.message_from_body("Server error"))
                return False

            if not data.get("success"):
                self._freeze_done("error", str(data.get("message") or "Action failed"))
                return False

            self._freeze_done("success", str(data.get("message") or ("User frozen" if freeze else "User unfrozen")))
            await asyncio.gather(self.load_stats(), self.load_logs(self.page))
            return True
        finally:
            self.freezing = False

    def _freeze_done(self, kind: str, message: str) -> None:
        self.last_freeze_message = message
        self.notifier.notify(kind, message)

    # ---------- session ----------
    async def sign_out(self) -> None:
        await self.deactivate()
        self.session.end()
        self.navigator.assign(LOGIN_ROUTE)

    def snapshot(self) -> Dict[str, Any]:
        return {
            "active": self.active,
            "stats": self.stats.to_dict(),
            "statsChannel": self.stats_channel.to_dict(),
            "logs": [entry.to_dict() for entry in self.logs],
            "page": self.page,
            "pages": self.pages,
            "limit": self.page_size,
            "logsChannel": self.logs_channel.to_dict(),
            "freeze": {
                "working": self.freezing,
                "identifier": self.identifier,
                "lastMessage": self.last_freeze_message,
            },
            "pollTicks": self.poll_ticks,
        }
