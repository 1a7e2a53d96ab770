import importlib.util
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from urllib.parse import urlparse
from partner_portal.core.config import get_settings, normalize_database_url


class Base(DeclarativeBase):
    pass


settings = get_settings()
logger = logging.getLogger(__name__)


def _resolve_database_url(database_url: str) -> str:
    database_url = normalize_database_url(database_url)
    if not database_url.startswith("postgresql://"):
        return database_url
    has_psycopg2 = importlib.util.find_spec("psycopg2") is not None
    has_psycopg3 = importlib.util.find_spec("psycopg") is not None
    if not has_psycopg2 and has_psycopg3:
        return database_url.replace("postgresql://", "postgresql+psycopg://", 1)
    return database_url


def _build_connect_args(database_url: str) -> dict:
    parsed = urlparse(database_url)
    if parsed.scheme.startswith("sqlite"):
        return {"check_same_thread": False}
    if not parsed.scheme.startswith("postgresql"):
        return {}

    connect_args = {
        "keepalives": 1,
        "keepalives_idle": 30,
        "keepalives_interval": 10,
        "keepalives_count": 5,
    }
    local_hosts = {"localhost", "127.0.0.1", "db"}
    if parsed.hostname not in local_hosts:
        connect_args["sslmode"] = "require"
    return connect_args


def _build_pool_kwargs(database_url: str) -> dict:
    if not database_url.startswith("postgresql"):
        return {}

    configured_pool_size = int(settings.db_pool_size)
    configured_max_overflow = int(settings.db_max_overflow)
    configured_pool_timeout = int(settings.db_pool_timeout)

    # Settlement and dashboard requests hold a connection for the whole request.
    pool_size = max(5, configured_pool_size)
    max_overflow = max(5, configured_max_overflow)
    pool_timeout = max(8, configured_pool_timeout)

    if (
        pool_size != configured_pool_size
        or max_overflow != configured_max_overflow
        or pool_timeout != configured_pool_timeout
    ):
        logger.warning(
            "Adjusted DB pool settings: pool_size %s->%s, max_overflow %s->%s, pool_timeout %s->%s",
            configured_pool_size,
            pool_size,
            configured_max_overflow,
            max_overflow,
            configured_pool_timeout,
            pool_timeout,
        )

    return {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "pool_recycle": settings.db_pool_recycle,
        "pool_size": pool_size,
        "max_overflow": max_overflow,
        "pool_timeout": pool_timeout,
        "pool_use_lifo": True,
    }


database_url = _resolve_database_url(settings.database_url)

engine = create_engine(
    database_url,
    **_build_pool_kwargs(database_url),
    connect_args=_build_connect_args(database_url),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
