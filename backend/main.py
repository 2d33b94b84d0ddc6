"""
Plate Layout Web Backend
FastAPI application serving the randomized plate layout API
"""

import asyncio
import logging
import sys
import os
from contextlib import asynccontextmanager

# Configure logging to show info from backend and core modules
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%H:%M:%S",
)

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Ensure project root is in path so core/ imports work
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.config import (
    CORS_ORIGINS, SESSION_HEADER, SESSION_MAX_AGE, SESSION_CLEANUP_INTERVAL, API_VERSION,
)
from backend.dependencies import find_session_id
from backend.sessions import create_session, cleanup_expired_sessions, clear_sessions

from backend.routers import config_routes, project, layout

logger = logging.getLogger("backend.session")


async def _session_cleanup_loop():
    """Periodically clean expired sessions"""
    while True:
        await asyncio.sleep(SESSION_CLEANUP_INTERVAL)
        removed = cleanup_expired_sessions(SESSION_MAX_AGE)
        if removed:
            logger.info(f"[SESSION] Cleaned {removed} expired session(s)")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown tasks"""
    task = asyncio.create_task(_session_cleanup_loop())
    yield
    task.cancel()
    clear_sessions()


app = FastAPI(
    title="Plate Layout API",
    description="Randomized, balanced assignment of factorial treatments to multi-well plates",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[SESSION_HEADER],
)


@app.middleware("http")
async def auto_session_middleware(request: Request, call_next):
    """Auto-create a session for API requests that carry none"""
    if find_session_id(request):
        return await call_next(request)

    # Read-only config and health endpoints never need a session
    path = request.url.path
    if path.startswith("/api/") and not path.startswith(("/api/config", "/api/health")):
        session_id = create_session()
        request.state.new_session_id = session_id
        logger.info(f"[SESSION] New session {session_id[:8]} for {path}")

    response: Response = await call_next(request)

    if hasattr(request.state, "new_session_id"):
        response.headers[SESSION_HEADER] = request.state.new_session_id

    return response


app.include_router(config_routes.router, prefix="/api/config", tags=["Config"])
app.include_router(project.router, prefix="/api/project", tags=["Project"])
app.include_router(layout.router, prefix="/api/layout", tags=["Layout"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": API_VERSION}


# Serve static frontend if build directory exists (Docker/production)
STATIC_DIR = os.path.join(PROJECT_ROOT, "frontend", "build")
if os.path.isdir(STATIC_DIR):
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="frontend")
