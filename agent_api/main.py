import logging
from datetime import datetime, timezone
from enum import Enum

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from agent_api.chat.routes import router as chat_router
from agent_api.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

SERVICE_NAME = "AI Agent API"
VERSION = "1.0.0"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNKNOWN = "unknown"


app = FastAPI(
    title=SERVICE_NAME,
    version=VERSION,
    docs_url="/docs" if settings.environment == "dev" else None,
    redoc_url="/redoc" if settings.environment == "dev" else None,
)


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------


@app.exception_handler(Exception)
async def _on_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s: %s", request.url.path, exc, exc_info=True)
    message = "Internal Server Error" if settings.environment == "prod" else str(exc)
    return JSONResponse({"error": message}, status_code=500)


@app.exception_handler(StarletteHTTPException)
async def _on_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse({"error": "Not Found", "path": request.url.path}, status_code=404)
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

app.include_router(chat_router)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/health")
async def health() -> dict:
    return {"status": HealthStatus.HEALTHY, "timestamp": _now_iso()}


@app.get("/health/detailed")
async def health_detailed() -> JSONResponse:
    checks = {"server": HealthStatus.HEALTHY.value}
    healthy = all(status == HealthStatus.HEALTHY for status in checks.values())
    return JSONResponse(
        {
            "status": (HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY).value,
            "checks": checks,
            "timestamp": _now_iso(),
        },
        status_code=200 if healthy else 503,
    )


@app.get("/")
async def root() -> dict:
    return {
        "name": SERVICE_NAME,
        "version": VERSION,
        "description": "Chat agent with human-in-the-loop approval over SSE",
        "endpoints": {
            "health": "/health",
            "chat": "/chat",
            "chatApprove": "/chat/approve",
            "chatReject": "/chat/reject",
            "docs": "/docs",
            "openapi": "/openapi.json",
        },
    }


def serve() -> None:
    """Console entry point: run the API with uvicorn."""
    import uvicorn

    logger.info("Starting %s: port=%s environment=%s", SERVICE_NAME, settings.port, settings.environment)
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
