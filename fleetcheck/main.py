# fleetcheck/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers that answer with a toast,
the storage mount and all routers.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from fleetcheck.routers import (
    auth, checklists, damages, dashboard, escalation, fuel, layout, realtime, users, vehicles,
)
from fleetcheck.database import create_tables, SessionLocal
from fleetcheck.config import settings
from fleetcheck.services.realtime import hub
from fleetcheck.services.seed_service import seed_demo_data
from fleetcheck.utils.errors import FleetError
from fleetcheck.utils.logger import get_logger
from fleetcheck.utils.toast import Toast
import os
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="FleetCheck API",
    description="Fleet management: vehicle checklists, damage reports, fuel logs.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (the web client is served from another origin) ─────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Platform key check, active only when the platform is configured.
    Docs and uploaded files stay open; the realtime socket is not HTTP and
    authenticates with its token instead.
    """
    open_paths = {"/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if (path in self.open_paths or path.startswith(settings.STORAGE_PUBLIC_URL)
                or request.method == "OPTIONS"):
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.IS_CONFIGURED:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Exception Handlers ───────────────────────────────────────────────────────
def error_toast(request: Request, message: str) -> dict:
    """Queue an error toast on the caller's session (if resolved) and return it."""
    ctx = getattr(request.state, "fleet_session", None)
    if ctx is not None:
        return ctx.toast(message, "error")
    return Toast(message=message, type="error").as_dict()


@app.exception_handler(FleetError)
async def fleet_error_handler(request: Request, exc: FleetError):
    logger.info(f"[{type(exc).__name__}] {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "toast": error_toast(request, exc.message)},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.url.path}: {exc}", exc_info=True)
    message = f"Database error: {exc.__class__.__name__}"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": message, "toast": error_toast(request, message)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(auth.router,       prefix="/api/v1", tags=["🔐 Auth"])
app.include_router(layout.router,     prefix="/api/v1", tags=["🧭 Layout"])
app.include_router(dashboard.router,  prefix="/api/v1", tags=["📊 Dashboard"])
app.include_router(vehicles.router,   prefix="/api/v1", tags=["🚗 Vehicles"])
app.include_router(checklists.router, prefix="/api/v1", tags=["📋 Checklists"])
app.include_router(damages.router,    prefix="/api/v1", tags=["🚨 Damages"])
app.include_router(escalation.router, prefix="/api/v1", tags=["⏰ Escalation"])
app.include_router(fuel.router,       prefix="/api/v1", tags=["⛽ Fuel"])
app.include_router(users.router,      prefix="/api/v1", tags=["👥 Users"])
app.include_router(realtime.router,   prefix="/api/v1", tags=["📡 Realtime"])

# ── Uploaded files (vehicle photos, damage photos, avatars) ──────────────────
os.makedirs(settings.STORAGE_DIR, exist_ok=True)
app.mount(settings.STORAGE_PUBLIC_URL, StaticFiles(directory=settings.STORAGE_DIR), name="storage")


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 FleetCheck Backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    if not settings.IS_CONFIGURED:
        logger.warning("⚠️  DATABASE_URL / API_KEY not set — running in demo mode (in-memory data)")
        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()
    hub.bind_loop(asyncio.get_running_loop())
    logger.info("📡 Realtime change hub ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 FleetCheck Backend shutting down...")
