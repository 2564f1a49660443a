from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine

from backend.settings import get_settings

logger = logging.getLogger(__name__)

ASYNC_DRIVER_PREFIXES = (
    ("sqlite://", "sqlite+aiosqlite://"),
    ("postgres://", "postgresql+asyncpg://"),
    ("postgresql://", "postgresql+asyncpg://"),
    ("postgresql+psycopg2://", "postgresql+asyncpg://"),
)
DROPPED_QUERY_KEYS = {"channel_binding", "ssl"}
LOCAL_HOSTS = {"localhost", "127.0.0.1"}


def _with_async_driver(url: str) -> str:
    for prefix, replacement in ASYNC_DRIVER_PREFIXES:
        if url.startswith(prefix):
            return replacement + url[len(prefix) :]
    return url


def _rewrite_ssl_query(url: str) -> str:
    # asyncpg understands ssl=true, not libpq's sslmode.
    parsed = urlparse(url)
    items = parse_qsl(parsed.query, keep_blank_values=True)
    wants_ssl = any(key == "sslmode" for key, _ in items)
    kept = [(key, value) for key, value in items if key != "sslmode" and key not in DROPPED_QUERY_KEYS]
    if wants_ssl:
        kept.append(("ssl", "true"))
    return urlunparse(parsed._replace(query=urlencode(kept)))


def _normalize_database_url(database_url: str) -> str:
    url = _with_async_driver(str(database_url or "").strip())
    if not url or _is_sqlite(url):
        return url
    try:
        return _rewrite_ssl_query(url)
    except ValueError:
        logger.debug("Failed to rewrite database URL query.")
        return url


def _is_sqlite(db_url: str) -> bool:
    return db_url.startswith("sqlite")


def _connect_args(db_url: str) -> dict:
    try:
        host = urlparse(db_url).hostname or ""
    except ValueError:
        logger.debug("Failed to parse database URL for SSL hint.")
        return {}
    if host and host not in LOCAL_HOSTS:
        return {"ssl": True}
    return {}


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker | None = None


def get_engine() -> AsyncEngine:
    global _engine
    if _engine is None:
        db_url = _normalize_database_url(get_settings().database_url)
        if _is_sqlite(db_url):
            _engine = create_async_engine(db_url, future=True)
        else:
            _engine = create_async_engine(
                db_url,
                connect_args=_connect_args(db_url),
                pool_pre_ping=True,
                future=True,
                pool_size=20,
                max_overflow=10,
            )
        logger.info("Database engine ready (%s)", urlparse(db_url).scheme)
    return _engine


def get_sessionmaker() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(get_engine(), expire_on_commit=False)
    return _session_factory


async def dispose_engine() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
