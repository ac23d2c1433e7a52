# app/main.py
"""
FastAPI application entry point.
Spot AI webhook receiver: request logging, global error handler, routers,
and the ingestion gateway wired to the job store on startup.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.routers import webhook, health
from app.database import SessionLocal, create_tables
from app.config import settings
from app.services.ingestion_gateway import IngestionGateway
from app.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Spot AI Webhook Receiver",
    description="Receives Spot AI alerts and queues them in spot_jobs exactly once per event.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"ok": False},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(webhook.router, tags=["📡 Spot Webhook"])
app.include_router(health.router,  tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Spot webhook receiver starting up...")
    app.state.gateway = IngestionGateway(SessionLocal)
    # Store outages surface as webhook 500s; /healthz must still come up
    try:
        create_tables()
        logger.info("✅ spot_jobs table ready")
    except SQLAlchemyError as e:
        logger.error(f"❌ Could not create spot_jobs at startup: {e}", exc_info=True)
    logger.info(f"🔒 DB TLS: {'on' if settings.DB_SSL_ENABLED else 'off'}")
    logger.info(f"🌐 Webhook receiver listening on {settings.HOST}:{settings.PORT}")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Spot webhook receiver shutting down...")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
