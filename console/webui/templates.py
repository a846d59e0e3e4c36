"""Static HTML templates for the login page (/) and the dashboard (/admindashboard)."""

import html
from typing import Optional

_STYLE = r"""
  <style>
    :root {
      --bg: #050b15;
      --panel: #0f1629;
      --panel-2: #111b31;
      --text: #e8eef7;
      --muted: #9cb3d3;
      --accent: #0046a5;
      --accent-2: #00b86b;
      --danger: #ff6b6b;
      --warn: #f7c266;
      --success: #4ade80;
      --border: rgba(255, 255, 255, 0.06);
      --shadow: 0 14px 48px rgba(0, 0, 0, 0.4);
      --card-radius: 14px;
      --font: "Inter", "Manrope", "Segoe UI", system-ui, -apple-system, sans-serif;
    }
    * { box-sizing: border-box; }
    body {
      margin: 0;
      font-family: var(--font);
      background: radial-gradient(circle at 10% 10%, rgba(0,70,165,0.12), transparent 35%),
                  radial-gradient(circle at 90% 20%, rgba(0,184,107,0.08), transparent 30%),
                  var(--bg);
      color: var(--text);
      min-height: 100vh;
    }
    .page { max-width: 1200px; margin: 0 auto; padding: 28px 22px 48px; }
    header {
      display: flex;
      align-items: center;
      justify-content: space-between;
      gap: 14px;
      margin-bottom: 18px;
    }
    header h1 { margin: 0; font-size: 22px; }
    .tagline { color: var(--muted); font-size: 13px; margin: 4px 0 0; }
    .cards { display: grid; gap: 12px; grid-template-columns: repeat(auto-fit, minmax(180px, 1fr)); }
    .grid { display: grid; gap: 16px; grid-template-columns: 1fr 2fr; margin-top: 16px; }
    .card, section {
      background: linear-gradient(160deg, var(--panel), var(--panel-2));
      border: 1px solid var(--border);
      border-radius: var(--card-radius);
      padding: 16px;
      box-shadow: var(--shadow);
    }
    .card h3 { margin: 0 0 8px; font-size: 14px; color: var(--muted); }
    .card .value { font-size: 24px; font-weight: 700; }
    section h2 { margin: 0 0 4px; font-size: 17px; }
    section p.lead { margin: 0 0 12px; color: var(--muted); font-size: 13px; }
    label { display: flex; flex-direction: column; gap: 6px; font-size: 13px; color: var(--muted); }
    input {
      background: rgba(255,255,255,0.04);
      border: 1px solid var(--border);
      border-radius: 12px;
      padding: 10px 12px;
      color: var(--text);
      font-size: 14px;
    }
    button {
      background: linear-gradient(135deg, var(--accent), var(--accent-2));
      border: none;
      color: #fff;
      font-weight: 700;
      padding: 12px 14px;
      border-radius: 12px;
      cursor: pointer;
      box-shadow: var(--shadow);
    }
    button:disabled { opacity: 0.6; cursor: not-allowed; }
    button.ghost { background: rgba(255,255,255,0.04); color: var(--text); border: 1px solid var(--border); box-shadow: none; }
    button.danger { background: var(--danger); }
    button.ok { background: var(--accent-2); }
    .actions { display: flex; gap: 6px; flex-wrap: wrap; align-items: center; }
    .muted { color: var(--muted); }
    .banner { padding: 10px 12px; border-radius: 12px; margin-bottom: 12px; text-align: center; }
    .banner.error { background: rgba(255,107,107,0.12); color: var(--danger); border: 1px solid rgba(255,107,107,0.3); }
    .badge { padding: 4px 8px; border-radius: 8px; background: rgba(255,255,255,0.06); font-size: 12px; color: var(--muted); }
    .log-list { height: 24rem; overflow-y: auto; border: 1px solid var(--border); border-radius: 12px; padding: 8px; }
    .log-line { display: flex; justify-content: space-between; gap: 8px; padding: 8px 0; border-bottom: 1px solid var(--border); }
    .log-line:last-child { border-bottom: none; }
    .log-meta { font-size: 12px; color: var(--muted); margin-top: 4px; word-break: break-all; }
    .log-ts { font-size: 12px; color: var(--muted); white-space: nowrap; }
    .toast {
      position: fixed;
      top: 18px;
      right: 18px;
      padding: 14px 16px;
      border-radius: 12px;
      background: rgba(15,22,41,0.95);
      border: 1px solid var(--border);
      color: var(--text);
      box-shadow: var(--shadow);
      min-width: 220px;
      display: none;
      z-index: 100;
    }
    .toast.show { display: block; }
    .toast.error { border-color: rgba(255,107,107,0.5); }
    .toast.warning { border-color: rgba(247,194,102,0.5); }
    .toast.success { border-color: rgba(74,222,128,0.5); }
    .login { min-height: 100vh; display: grid; place-items: center; padding: 16px; }
    .login form { display: grid; gap: 12px; width: 100%; max-width: 380px; }
    @media (max-width: 720px) {
      .grid { grid-template-columns: 1fr; }
      header { flex-direction: column; align-items: flex-start; }
    }
  </style>
"""

LOGIN_HTML = r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>QuickInvoice NG Admin</title>
""" + _STYLE + r"""
</head>
<body>
  <div class="login">
    <section style="width:100%; max-width:420px;">
      <h2 style="text-align:center;">QuickInvoice NG</h2>
      <p class="lead" style="text-align:center;">Admin Access Panel</p>
      __ERROR__
      <form method="post" action="/login" id="login-form">
        <label>Email
          <input type="email" name="email" value="__EMAIL__" required />
        </label>
        <label>Password
          <input type="password" name="password" required />
        </label>
        <button type="submit" id="login-btn">Login</button>
      </form>
    </section>
  </div>
  <script>
    document.getElementById("login-form").addEventListener("submit", () => {
      const btn = document.getElementById("login-btn");
      btn.disabled = true;
      btn.textContent = "Signing In...";
    });
  </script>
</body>
</html>
"""


def render_login(error: Optional[str] = None, email: Optional[str] = None) -> str:
    banner = f'<div class="banner error">{html.escape(error)}</div>' if error else ""
    return LOGIN_HTML.replace("__ERROR__", banner).replace("__EMAIL__", html.escape(email or "", quote=True))


DASHBOARD_HTML = r"""
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>QuickInvoice NG Admin Dashboard</title>
""" + _STYLE + r"""
</head>
<body>
  <div class="page">
    <header>
      <div>
        <h1>QuickInvoice NG Admin Dashboard</h1>
        <p class="tagline">Overview &amp; user moderation</p>
      </div>
      <div class="actions">
        <span class="badge">Admin</span>
        <form method="post" action="/signout" style="margin:0;">
          <button class="ghost" type="submit">Sign Out</button>
        </form>
      </div>
    </header>

    <div class="cards">
      <div class="card"><h3>Total Users</h3><div class="value" id="stat-users">…</div></div>
      <div class="card"><h3>Total Invoices</h3><div class="value" id="stat-invoices">…</div></div>
      <div class="card"><h3>Total Receipts</h3><div class="value" id="stat-receipts">…</div></div>
      <div class="card"><h3>Total Transactions</h3><div class="value" id="stat-transactions">…</div></div>
      <div class="card"><h3>Transaction Volume</h3><div class="value" id="stat-volume">…</div></div>
    </div>

    <div class="grid">
      <section id="freeze">
        <h2>Freeze / Unfreeze User</h2>
        <p class="lead">Provide the <strong>User Email</strong> to freeze or unfreeze a user account.</p>
        <label>User Email
          <input id="freeze-identifier" placeholder="e.g. johndoe@example.com" />
        </label>
        <div class="actions" style="margin-top:12px;">
          <button class="danger" id="freeze-btn">Freeze User</button>
          <button class="ok" id="unfreeze-btn">Unfreeze User</button>
        </div>
        <p class="muted" style="font-size:12px;">Tip: Freezing blocks login. Active sessions will be terminated (server-side).</p>
      </section>

      <section id="logs">
        <div class="actions" style="justify-content: space-between;">
          <div>
            <h2>Activity Logs</h2>
            <p class="lead">Recent actions &amp; admin logs (live)</p>
          </div>
          <button class="ghost" id="logs-refresh">Refresh</button>
        </div>
        <div class="log-list" id="logs-container"></div>
        <div class="actions" style="justify-content: space-between; margin-top:12px;">
          <div class="muted" id="logs-pager">Page 1 of 1</div>
          <div class="actions">
            <button class="ghost" id="logs-prev">Prev</button>
            <button class="ghost" id="logs-next">Next</button>
          </div>
        </div>
      </section>
    </div>
  </div>

  <div class="toast" id="toast"></div>

  <script>
    const POLL_MS = 5000;

    const api = {
      async json(url, opts = {}) {
        const res = await fetch(url, {
          credentials: "include",
          headers: { "Content-Type": "application/json" },
          ...opts,
        });
        if (res.status === 401) {
          window.location.href = "/";
          return null;
        }
        if (!res.ok) {
          const detail = await res.text();
          throw new Error(detail || ("Request failed: " + res.status));
        }
        const text = await res.text();
        return text ? JSON.parse(text) : {};
      },
      state() { return this.json("/admindashboard/api/state"); },
      prev() { return this.json("/admindashboard/api/logs/prev", { method: "POST" }); },
      next() { return this.json("/admindashboard/api/logs/next", { method: "POST" }); },
      refresh() { return this.json("/admindashboard/api/logs/refresh", { method: "POST" }); },
      freeze(identifier, freeze) {
        return this.json("/admindashboard/api/freeze", {
          method: "POST",
          body: JSON.stringify({ identifier, freeze }),
        });
      },
    };

    function escapeHtml(s) {
      return String(s).replace(/[&<>"']/g, (c) => ({ "&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;", "'": "&#39;" }[c]));
    }
    function fmtDate(ts) {
      if (!ts) return "—";
      return new Date(ts).toLocaleString();
    }
    function showToast(kind, msg) {
      const el = document.getElementById("toast");
      el.className = "toast show " + kind;
      el.textContent = msg;
      setTimeout(() => el.classList.remove("show"), 3200);
    }

    function render(payload) {
      if (!payload) return;
      const d = payload.dashboard;
      const statsLoading = d.statsChannel.loading;
      const s = d.stats;
      document.getElementById("stat-users").textContent = statsLoading ? "…" : (s.totalUsers ?? 0);
      document.getElementById("stat-invoices").textContent = statsLoading ? "…" : (s.totalInvoices ?? 0);
      document.getElementById("stat-receipts").textContent = statsLoading ? "…" : (s.totalReceipts ?? 0);
      document.getElementById("stat-transactions").textContent = statsLoading ? "…" : (s.totalTransactions ?? 0);
      document.getElementById("stat-volume").textContent = statsLoading ? "…" : s.totalTransactionVolumeDisplay;

      const container = document.getElementById("logs-container");
      if (d.logsChannel.loading && d.logs.length === 0) {
        container.innerHTML = `<div class="muted" style="text-align:center; padding:40px 0;">Loading logs…</div>`;
      } else if (d.logs.length === 0) {
        container.innerHTML = `<div class="muted" style="text-align:center; padding:40px 0;">No logs yet.</div>`;
      } else {
        container.innerHTML = d.logs.map((log) => `
          <div class="log-line">
            <div>
              <div>${escapeHtml(log.message)}</div>
              <div class="log-meta">${escapeHtml(JSON.stringify(log.meta || {}))}</div>
            </div>
            <div class="log-ts">${escapeHtml(fmtDate(log.createdAt))}</div>
          </div>`).join("");
      }
      document.getElementById("logs-pager").textContent = `Page ${d.page} of ${d.pages}`;

      const working = d.freeze.working;
      document.getElementById("freeze-btn").disabled = working;
      document.getElementById("unfreeze-btn").disabled = working;
      document.getElementById("freeze-btn").textContent = working ? "Working..." : "Freeze User";
      document.getElementById("unfreeze-btn").textContent = working ? "Working..." : "Unfreeze User";

      (payload.toasts || []).forEach((t) => showToast(t.kind, t.message));
    }

    async function run(action) {
      try {
        render(await action());
      } catch (e) {
        console.error(e);
        showToast("error", e.message);
      }
    }

    document.getElementById("logs-prev").addEventListener("click", () => run(() => api.prev()));
    document.getElementById("logs-next").addEventListener("click", () => run(() => api.next()));
    document.getElementById("logs-refresh").addEventListener("click", () => run(() => api.refresh()));
    document.getElementById("freeze-btn").addEventListener("click", () => {
      run(() => api.freeze(document.getElementById("freeze-identifier").value, true));
    });
    document.getElementById("unfreeze-btn").addEventListener("click", () => {
      run(() => api.freeze(document.getElementById("freeze-identifier").value, false));
    });

    // Initial load + polling; the server polls the backend on the same interval.
    run(() => api.state());
    setInterval(() => run(() => api.state()), POLL_MS);
  </script>
</body>
</html>
"""
