import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from kostnotify.config import settings
from kostnotify.database import async_session, engine
from kostnotify.dependencies import get_dispatcher, get_telegram
from kostnotify.exceptions import StorageError, UnknownEventType
from kostnotify.middleware import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from kostnotify.redis import redis
from kostnotify.routers import notifications, telegram

API_VERSION = "0.1.0"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    channels = get_dispatcher().adapters
    logger.info(
        "Starting %s notifications (channels: %s, telegram %s)",
        settings.app_name,
        ", ".join(sorted(channels)),
        "configured" if get_telegram().configured else "not configured",
    )
    yield
    await engine.dispose()
    await redis.aclose()


app = FastAPI(
    title="Kost Manager Notifications",
    description="Deliver rental and payment notifications by email, in-app and Telegram.",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.debug else None,
)

_cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()] or ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=_cors_origins != ["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)
app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


def _error(status_code: int, message, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": status_code, "message": message, **extra}},
    )


# --- Exception Handlers ---


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return _error(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": list(err.get("loc", ())), "msg": str(err.get("msg")), "type": err.get("type")}
        for err in exc.errors()
    ]
    return _error(422, "Validation error", details=details)


@app.exception_handler(UnknownEventType)
async def unknown_event_handler(request: Request, exc: UnknownEventType):
    return _error(400, str(exc))


@app.exception_handler(StorageError)
@app.exception_handler(SQLAlchemyError)
async def storage_exception_handler(request: Request, exc: Exception):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error(503, "Storage unavailable")


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


# --- Routes ---

api_v1 = APIRouter(prefix="/v1")
api_v1.include_router(telegram.router)
api_v1.include_router(notifications.router)
app.include_router(api_v1)

# Bot updates arrive unversioned, at the URL registered with setWebhook
app.include_router(telegram.public_router)


@app.get("/", summary="API root")
async def root():
    return {"name": settings.app_name, "status": "ok", "version": API_VERSION}


@app.get("/health", summary="Health check")
async def health_ping():
    checks = {}

    try:
        async with async_session() as session:
            await session.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as exc:
        logger.warning("Health check: database unavailable: %s", exc)
        checks["database"] = "unavailable"

    try:
        await redis.ping()
        checks["redis"] = "ok"
    except Exception as exc:
        logger.warning("Health check: redis unavailable: %s", exc)
        checks["redis"] = "unavailable"

    adapters = get_dispatcher().adapters
    checks["telegram"] = "configured" if get_telegram().configured else "not_configured"
    checks["mail"] = "configured" if getattr(adapters.get("mail"), "provider", None) else "not_configured"

    degraded = "unavailable" in (checks["database"], checks["redis"])
    return {
        "status": "degraded" if degraded else "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": API_VERSION,
        "checks": checks,
    }
