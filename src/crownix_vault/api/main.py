# Crownix Vault - Local Backend
#
# FastAPI app the desktop frontend talks to over loopback. Vault routes
# require the per-process session token; /api/health does not.

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core import EventSeverity, EventType, get_audit_logger
from .security import initialize_session_token
from .vault_routes import router as vault_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Mint the session token on startup; audit start/stop."""
    initialize_session_token()
    get_audit_logger().log_event(
        event_type=EventType.SYSTEM_START,
        severity=EventSeverity.INFO,
        message="Crownix Vault backend started",
        details={"version": __version__},
    )
    yield
    get_audit_logger().log_event(
        event_type=EventType.SYSTEM_STOP,
        severity=EventSeverity.INFO,
        message="Crownix Vault backend stopped",
    )


app = FastAPI(
    title="Crownix Vault API",
    description="Local persistence backend for the Crownix Vault desktop app",
    version=__version__,
    lifespan=lifespan,
)

# Desktop webview and Vite dev server only
_allowed_origins = [
    "http://localhost:1420", "http://127.0.0.1:1420",
    "http://localhost:5173", "http://127.0.0.1:5173",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(vault_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


def start_api_server(host: str = "127.0.0.1", port: int = 8000):
    """
    Start FastAPI server.

    Args:
        host: Host to bind to (default: localhost only)
        port: Port to listen on
    """
    uvicorn.run(app, host=host, port=port, log_level="info")
