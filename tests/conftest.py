from __future__ import annotations

import asyncio
import os
from pathlib import Path
from urllib.parse import unquote, urlsplit

import asyncpg
import pytest

from contest_store.catalog.repository import Store
from contest_store.core import db

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "config" / "database-definition.sql"


class FakeStatement:
    def __init__(self, conn: "FakeConnection", sql: str) -> None:
        self.conn = conn
        self.sql = sql
        self._status: str | None = None

    async def fetch(self, *args):
        index = len(self.conn.executed)
        self.conn.executed.append(args)
        if index in self.conn.fail_at:
            raise asyncpg.InterfaceError(f"row {index} rejected")
        self._status = self.conn.statuses[index] if index < len(self.conn.statuses) else "INSERT 0 1"
        return []

    def get_statusmsg(self) -> str | None:
        return self._status


class FakeConnection:
    """
    Stands in for asyncpg.Connection. Records every executed row.
    """

    def __init__(self) -> None:
        self.executed: list[tuple] = []
        self.prepared: list[str] = []
        self.connect_calls: list[dict] = []
        self.statuses: list[str] = []
        self.fail_at: set[int] = set()
        self.prepare_error: Exception | None = None
        self.fetch_error: Exception | None = None
        self.rows: list[dict] = []
        self.closed = False

    async def prepare(self, sql: str) -> FakeStatement:
        if self.prepare_error is not None:
            raise self.prepare_error
        self.prepared.append(sql)
        return FakeStatement(self, sql)

    async def fetch(self, sql: str):
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.rows

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_conn(monkeypatch: pytest.MonkeyPatch) -> FakeConnection:
    conn = FakeConnection()

    async def fake_connect(dsn: str | None = None, **kwargs):
        conn.connect_calls.append({"dsn": dsn, **kwargs})
        return conn

    monkeypatch.setattr(db.asyncpg, "connect", fake_connect)
    return conn


@pytest.fixture
def store() -> Store:
    return Store("kenkoooo", "pass", "localhost", "test")


def _test_database_url() -> str:
    return os.environ.get("TEST_DATABASE_URL", "").strip()


async def _apply_schema(url: str) -> None:
    conn = await asyncpg.connect(dsn=url, ssl=False)
    try:
        await conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    finally:
        await conn.close()


@pytest.fixture
def pg_url() -> str:
    """
    Fresh schema on the database named by TEST_DATABASE_URL.
    """
    url = _test_database_url()
    if not url:
        pytest.skip("TEST_DATABASE_URL is not set.")
    asyncio.run(_apply_schema(url))
    return url


@pytest.fixture
def pg_store(pg_url: str) -> Store:
    parts = urlsplit(pg_url)
    host = parts.hostname or "localhost"
    if parts.port:
        host = f"{host}:{parts.port}"
    return Store(
        unquote(parts.username or ""),
        unquote(parts.password or ""),
        host,
        parts.path.lstrip("/"),
    )
