from backend.db import _connect_args, _normalize_database_url


def test_postgres_urls_use_asyncpg_and_ssl_flag():
    url = _normalize_database_url("postgres://u:p@db.example.com/app?sslmode=require&channel_binding=prefer")
    assert url == "postgresql+asyncpg://u:p@db.example.com/app?ssl=true"


def test_sqlite_urls_use_aiosqlite():
    assert _normalize_database_url("sqlite:///tmp/gantt.db") == "sqlite+aiosqlite:///tmp/gantt.db"
    assert _normalize_database_url("sqlite+aiosqlite:///tmp/gantt.db") == "sqlite+aiosqlite:///tmp/gantt.db"
    assert _normalize_database_url("") == ""


def test_ssl_only_for_remote_hosts():
    assert _connect_args("postgresql+asyncpg://u@localhost/app") == {}
    assert _connect_args("postgresql+asyncpg://u@db.example.com/app") == {"ssl": True}
