import asyncio
import itertools
import threading
import time

import requests

from console.channels import ChannelStatus
from console.dashboard import OperationsDashboard

from conftest import FakeResponse, log_entries


def make_dashboard(api, session, toasts, navigator, **kwargs):
    session.begin("T1")
    kwargs.setdefault("poll_interval", 60)
    return OperationsDashboard(api, session, toasts, navigator, **kwargs)


def test_activate_loads_stats_and_first_page(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)

    async def scenario():
        await dash.activate()
        await dash.deactivate()

    asyncio.run(scenario())
    assert dash.stats.totalUsers == 12
    assert dash.stats_channel.status == ChannelStatus.LOADED
    assert (dash.page, dash.pages, len(dash.logs)) == (1, 5, 5)
    assert backend.log_pages_requested() == [1]
    assert all(c.headers["Authorization"] == "Bearer T1" for c in backend.calls)


def test_logs_page_three_scenario(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.load_logs(3)) is True
    assert backend.calls[-1].params == {"page": 3, "limit": 20}
    assert (dash.page, dash.pages) == (3, 5)
    assert len(dash.logs) == 5


def test_server_is_source_of_truth_for_pagination(api, backend, session, toasts, navigator):
    backend.route(
        "GET",
        "/api/admin/logs",
        lambda params=None, **kw: {"success": True, "logs": [], "page": 2, "pages": 2},
    )
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(4))
    assert (dash.page, dash.pages) == (2, 2)


def test_page_clamped_into_reported_range(api, backend, session, toasts, navigator):
    backend.route(
        "GET",
        "/api/admin/logs",
        lambda params=None, **kw: {"success": True, "logs": [], "page": 9, "pages": 0},
    )
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(9))
    assert (dash.page, dash.pages) == (1, 1)


def test_go_prev_at_first_page_issues_nothing(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.go_prev()) is False
    assert backend.calls == []


def test_go_next_at_last_page_issues_nothing(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(5))
    before = len(backend.calls)
    assert asyncio.run(dash.go_next()) is False
    assert len(backend.calls) == before


def test_go_next_requests_exactly_following_page(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(2))
    asyncio.run(dash.go_next())
    assert backend.log_pages_requested() == [2, 3]
    assert dash.page == 3
    asyncio.run(dash.go_prev())
    assert backend.log_pages_requested() == [2, 3, 2]


def test_refresh_converges_to_same_page(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.refresh_logs())
    first = (list(dash.logs), dash.page, dash.pages)
    asyncio.run(dash.refresh_logs())
    asyncio.run(dash.refresh_logs())
    assert (list(dash.logs), dash.page, dash.pages) == first


def test_logs_failure_keeps_last_page_without_toast(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(2))
    backend.route("GET", "/api/admin/logs", lambda **kw: requests.ConnectionError("down"))
    assert asyncio.run(dash.load_logs(3)) is False
    assert dash.page == 2
    assert len(dash.logs) == 5
    assert dash.logs_channel.status == ChannelStatus.ERROR
    assert toasts.drain() == []


def test_unsuccessful_logs_response_is_error(api, backend, session, toasts, navigator):
    backend.route("GET", "/api/admin/logs", lambda **kw: {"success": False})
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.load_logs(1)) is False
    assert dash.logs_channel.status == ChannelStatus.ERROR


def test_stats_failure_notifies(api, backend, session, toasts, navigator):
    backend.route("GET", "/api/admin/stats", lambda **kw: FakeResponse(500, {"message": "boom"}))
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.load_stats()) is False
    assert dash.stats_channel.status == ChannelStatus.ERROR
    assert [(t["kind"], t["message"]) for t in toasts.drain()] == [("error", "Failed to load stats")]


def test_stale_logs_response_is_discarded(api, backend, session, toasts, navigator):
    release = threading.Event()

    def logs(params=None, **kw):
        page = int(params["page"])
        if page == 2:
            release.wait(timeout=2)
        return {"success": True, "logs": log_entries(page), "page": page, "pages": 5}

    backend.route("GET", "/api/admin/logs", logs)
    dash = make_dashboard(api, session, toasts, navigator)

    async def scenario():
        slow = asyncio.create_task(dash.load_logs(2))
        await asyncio.sleep(0.05)
        fast = await dash.load_logs(3)
        release.set()
        return fast, await slow

    fast, slow = asyncio.run(scenario())
    assert (fast, slow) == (True, False)
    assert dash.page == 3
    assert dash.logs[0].id == "p3-0"


def test_freeze_with_blank_identifier_sends_nothing(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.freeze("   ", freeze=True)) is False
    assert asyncio.run(dash.freeze("", freeze=False)) is False
    assert backend.calls == []
    assert [t["message"] for t in toasts.drain()] == ["Enter User ID", "Enter User ID"]


def test_freeze_success_refreshes_stats_and_current_page(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_logs(3))
    backend.calls.clear()

    assert asyncio.run(dash.freeze("  jane@example.com ", freeze=True)) is True

    freeze_calls = backend.calls_to("POST", "/api/admin/freeze/")
    assert [c.path for c in freeze_calls] == ["/api/admin/freeze/jane%40example.com"]
    assert freeze_calls[0].json == {"freeze": True, "reason": "Frozen by admin via dashboard"}
    assert len(backend.calls_to("GET", "/api/admin/stats")) == 1
    assert backend.log_pages_requested() == [3]
    assert [(t["kind"], t["message"]) for t in toasts.drain()] == [("success", "User frozen")]
    assert dash.freezing is False


def test_unfreeze_reason(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.freeze("42", freeze=False))
    call = backend.calls_to("POST", "/api/admin/freeze/")[0]
    assert call.json == {"freeze": False, "reason": "Unfrozen by admin"}


def test_freeze_rejected_does_not_refresh(api, backend, session, toasts, navigator):
    backend.route("POST", "/api/admin/freeze/", lambda **kw: {"success": False})
    dash = make_dashboard(api, session, toasts, navigator)
    assert asyncio.run(dash.freeze("jane@example.com")) is False
    assert backend.calls_to("GET", "/api/admin/stats") == []
    assert backend.calls_to("GET", "/api/admin/logs") == []
    assert [(t["kind"], t["message"]) for t in toasts.drain()] == [("error", "Action failed")]


def test_freeze_http_error_uses_server_message(api, backend, session, toasts, navigator):
    backend.route("POST", "/api/admin/freeze/", lambda **kw: FakeResponse(404, {"message": "User not found"}))
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.freeze("ghost@example.com"))
    assert toasts.drain()[0]["message"] == "User not found"


def test_freeze_transport_error_uses_fallback(api, backend, session, toasts, navigator):
    backend.route("POST", "/api/admin/freeze/", lambda **kw: requests.Timeout("slow"))
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.freeze("jane@example.com"))
    assert toasts.drain()[0]["message"] == "Server error"


def test_poll_refetches_current_page(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator, poll_interval=0.05)

    async def scenario():
        await dash.activate()
        await dash.go_next()
        await asyncio.sleep(0.3)
        await dash.deactivate()

    asyncio.run(scenario())
    pages = backend.log_pages_requested()
    assert pages[0] == 1
    assert pages[-1] == 2
    assert dash.poll_ticks >= 2
    assert pages.count(2) >= 3
    assert dash.page == 2


def test_deactivate_stops_all_fetches(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator, poll_interval=0.02)

    async def scenario():
        await dash.activate()
        await asyncio.sleep(0.1)
        await dash.deactivate()
        count = len(backend.calls)
        ticks = dash.poll_ticks
        await asyncio.sleep(0.15)
        return count, ticks

    count, ticks = asyncio.run(scenario())
    assert ticks >= 1
    assert len(backend.calls) == count
    assert dash.poll_ticks == ticks
    assert dash.active is False
    assert asyncio.run(dash.load_logs(1)) is False


def test_sign_out_clears_session_and_navigates(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator, poll_interval=0.02)

    async def scenario():
        await dash.activate()
        await dash.sign_out()

    asyncio.run(scenario())
    assert session.token is None
    assert navigator.history == [("assign", "/")]
    assert dash.active is False


def test_snapshot_formats_volume(api, backend, session, toasts, navigator):
    dash = make_dashboard(api, session, toasts, navigator)
    asyncio.run(dash.load_stats())
    snap = dash.snapshot()
    assert snap["stats"]["totalTransactionVolumeDisplay"] == "₦1,250,000"
    assert snap["statsChannel"]["status"] == "loaded"
    assert snap["freeze"]["working"] is False


def test_poll_tick_does_not_override_navigation(api, backend, session, toasts, navigator):
    def logs(params=None, **kw):
        page = int(params["page"])
        if page == 2:
            time.sleep(0.3)
        return {"success": True, "logs": log_entries(page), "page": page, "pages": 5}

    backend.route("GET", "/api/admin/logs", logs)
    dash = make_dashboard(api, session, toasts, navigator, poll_interval=0.1)

    async def scenario():
        await dash.activate()
        moved = await dash.go_next()
        await dash.deactivate()
        return moved

    assert asyncio.run(scenario()) is True
    assert dash.page == 2
    assert dash.logs[0].id == "p2-0"


def test_slow_backend_still_refreshes_logs(api, backend, session, toasts, navigator):
    serial = itertools.count()

    def logs(params=None, **kw):
        n = next(serial)
        time.sleep(0.15)
        return {"success": True, "logs": [{"_id": f"r{n}", "message": "tick"}], "page": 1, "pages": 1}

    backend.route("GET", "/api/admin/logs", logs)
    dash = make_dashboard(api, session, toasts, navigator, poll_interval=0.05)

    async def scenario():
        await dash.activate()
        await asyncio.sleep(0.8)
        await dash.deactivate()

    asyncio.run(scenario())
    assert int(dash.logs[0].id[1:]) > 0
    assert dash.logs_channel.status == ChannelStatus.LOADED
    assert len(backend.calls_to("GET", "/api/admin/logs")) < dash.poll_ticks


def test_deactivate_discards_fetch_in_progress(api, backend, session, toasts, navigator):
    release = threading.Event()

    def logs(params=None, **kw):
        page = int(params["page"])
        if page == 2:
            release.wait(timeout=2)
        return {"success": True, "logs": log_entries(page), "page": page, "pages": 5}

    backend.route("GET", "/api/admin/logs", logs)
    dash = make_dashboard(api, session, toasts, navigator)

    async def scenario():
        await dash.activate()
        moving = asyncio.create_task(dash.go_next())
        await asyncio.sleep(0.05)
        await dash.deactivate()
        release.set()
        return await moving

    assert asyncio.run(scenario()) is False
    assert dash.page == 1
    assert dash.logs[0].id == "p1-0"
