from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from console.config import ConsoleSettings, dlog, load_console_settings
from console.webui.routes import create_console_router
from console.webui.state import ConsoleRuntimeState, init_console_state


def create_app(settings: ConsoleSettings | None = None, state: ConsoleRuntimeState | None = None) -> FastAPI:
    """Build the console app; the dashboard is torn down on shutdown."""
    if state is None:
        state = init_console_state(settings or load_console_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        dlog("console_start", {"backend_url": state.settings.backend_url})
        yield
        await state.dashboard.deactivate()

    app = FastAPI(title="QuickInvoice Admin Console", lifespan=lifespan)
    app.state.console = state
    app.include_router(create_console_router(state))
    return app


load_dotenv()
app = create_app()


if __name__ == "__main__":
    # Convenience for local runs: python invoice_admin_console.py --console-debug
    import os

    import uvicorn

    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "18100"))
    uvicorn.run("invoice_admin_console:app", host=host, port=port, reload=False)
