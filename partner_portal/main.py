from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import TimeoutError as SQLAlchemyTimeoutError
from partner_portal.api.v1.routes import router as api_router
from partner_portal.core.config import get_settings, parse_cors_origins
import logging
import time
from urllib.parse import urlparse
from partner_portal.core.database import Base, engine, SessionLocal
from partner_portal.core.errors import PortalError
from partner_portal.core.logging import configure_logging
from partner_portal.middlewares.rate_limit import limiter
from partner_portal.services.permissions import seed_permissions
from partner_portal.services.roles import seed_default_roles


settings = get_settings()

configure_logging()

app = FastAPI(title=settings.app_name)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
_started_at = time.time()


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logging.getLogger(__name__).error("%s on %s %s", exc.message, request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyTimeoutError)
async def sqlalchemy_timeout_handler(request, exc):
    logging.getLogger(__name__).warning("Database pool timeout on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Service is busy. Please retry in a moment."},
    )

configured_origins = parse_cors_origins(settings.cors_origins or "")
def _origin_from_url(raw: str) -> str | None:
    text = str(raw or "").strip()
    if not text:
        return None
    parsed = urlparse(text)
    if parsed.scheme and parsed.netloc:
        return f"{parsed.scheme}://{parsed.netloc}"
    return None


frontend_origin = _origin_from_url(settings.frontend_base_url)
allow_origins = list(dict.fromkeys(configured_origins + ([frontend_origin] if frontend_origin else [])))

logging.getLogger(__name__).info("CORS allow_origins=%s", allow_origins)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix=settings.api_v1_prefix)


def _seed_catalog() -> None:
    if not settings.seed_on_startup:
        return

    logger = logging.getLogger(__name__)
    db = SessionLocal()
    try:
        permissions = seed_permissions(db)
        roles = seed_default_roles(db)
        logger.info("Startup seed: permissions=%s roles=%s", permissions["message"], roles["message"])
    except Exception as exc:
        db.rollback()
        logger.warning("Startup seed failed: %s", exc)
    finally:
        db.close()


@app.on_event("startup")
def ensure_tables():
    if not settings.auto_create_tables:
        _seed_catalog()
        return

    # Optional local fallback for fresh environments.
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as exc:
        logging.getLogger(__name__).warning(
            "DB unavailable on startup, skipping table creation: %s",
            exc,
        )
    _seed_catalog()

@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    # Liveness: process is up.
    return {
        "status": "ok",
        "uptime_seconds": int(max(0, time.time() - _started_at)),
        "service": settings.app_name,
    }


@app.get("/readyz")
def readyz():
    # Readiness: database is reachable.
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        return {
            "status": "ready",
            "uptime_seconds": int(max(0, time.time() - _started_at)),
        }
    except Exception as exc:
        logging.getLogger(__name__).warning("Readiness DB check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "detail": "database_unavailable"},
        )
    finally:
        db.close()
