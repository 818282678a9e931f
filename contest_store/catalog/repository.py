"""
Catalog persistence (raw SQL).

Each write prepares one statement and executes it once per row, outside any
transaction. A failing row aborts the rest of the batch but everything written
before it stays committed; all three write paths are idempotent, so callers
can retry a failed batch in full.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import asyncpg

from contest_store.core import db

from .schemas import Contest, Problem, Submission

logger = logging.getLogger(__name__)


INSERT_SUBMISSION_SQL = """
    INSERT INTO submissions (
        id,
        epoch_second,
        problem_id,
        contest_id,
        user_id,
        language,
        point,
        length,
        result,
        execution_time
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
    ON CONFLICT (id) DO UPDATE SET user_id = $5
"""

INSERT_CONTEST_SQL = """
    INSERT INTO contests (id, start_epoch_second, duration_second, title, rate_change)
    VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (id) DO NOTHING
"""

INSERT_PROBLEM_SQL = """
    INSERT INTO problems (id, contest_id, title)
    VALUES ($1, $2, $3)
    ON CONFLICT (id) DO NOTHING
"""

SELECT_CONTESTS_SQL = """
    SELECT id, start_epoch_second, duration_second, title, rate_change
    FROM contests
"""

SELECT_PROBLEMS_SQL = """
    SELECT id, contest_id, title
    FROM problems
"""


class Store:
    """
    Connection-holding client for the contests/problems/submissions tables.

    Nothing is opened at construction; every method connects, does its work
    and disconnects.
    """

    def __init__(self, user: str, password: str, host: str, database: str) -> None:
        self.settings = db.ConnectionSettings(
            user=user,
            password=password,
            host=host,
            database=database,
        )

    @classmethod
    def from_env(cls) -> "Store":
        settings = db.settings_from_env()
        return cls(settings.user, settings.password, settings.host, settings.database)

    async def insert_submissions(self, submissions: Sequence[Submission]) -> list[int]:
        """
        Upsert submissions. On id conflict only `user_id` is overwritten.
        """
        records = [
            (
                s.id,
                s.epoch_second,
                s.problem_id,
                s.contest_id,
                s.user_id,
                s.language,
                s.point,
                s.length,
                s.result,
                s.execution_time,
            )
            for s in submissions
        ]
        return await self._write_batch("submissions", INSERT_SUBMISSION_SQL, records)

    async def insert_contests(self, contests: Sequence[Contest]) -> list[int]:
        records = [
            (c.id, c.start_epoch_second, c.duration_second, c.title, c.rate_change)
            for c in contests
        ]
        return await self._write_batch("contests", INSERT_CONTEST_SQL, records)

    async def insert_problems(self, problems: Sequence[Problem]) -> list[int]:
        records = [(p.id, p.contest_id, p.title) for p in problems]
        return await self._write_batch("problems", INSERT_PROBLEM_SQL, records)

    async def get_contests(self) -> list[Contest]:
        rows = await self._fetch_all("contests", SELECT_CONTESTS_SQL)
        return [
            Contest(
                id=row["id"],
                start_epoch_second=row["start_epoch_second"],
                duration_second=row["duration_second"],
                title=row["title"],
                rate_change=row["rate_change"],
            )
            for row in rows
        ]

    async def get_problems(self) -> list[Problem]:
        rows = await self._fetch_all("problems", SELECT_PROBLEMS_SQL)
        return [
            Problem(
                id=row["id"],
                contest_id=row["contest_id"],
                title=row["title"],
            )
            for row in rows
        ]

    async def _write_batch(self, table: str, sql: str, records: list[tuple[Any, ...]]) -> list[int]:
        """
        Execute `sql` once per record and return the affected-row count of each.
        """
        if not records:
            return []

        applied: list[int] = []
        async with db.connect(self.settings) as conn:
            try:
                statement = await conn.prepare(sql)
            except db.DRIVER_ERRORS as exc:
                logger.error("prepare_failed table=%s error=%s", table, db.describe_error(exc))
                raise db.StoreError(db.describe_error(exc)) from exc

            for index, args in enumerate(records):
                try:
                    await statement.fetch(*args)
                except db.DRIVER_ERRORS as exc:
                    logger.error(
                        "row_failed table=%s index=%s applied=%s error=%s",
                        table,
                        index,
                        len(applied),
                        db.describe_error(exc),
                    )
                    raise db.StoreError(
                        db.describe_error(exc),
                        failed_index=index,
                        applied=applied,
                    ) from exc
                applied.append(db.rows_affected(statement.get_statusmsg()))

        logger.info("batch_written table=%s rows=%s affected=%s", table, len(records), sum(applied))
        return applied

    async def _fetch_all(self, table: str, sql: str) -> list[asyncpg.Record]:
        async with db.connect(self.settings) as conn:
            try:
                rows = await conn.fetch(sql)
            except db.DRIVER_ERRORS as exc:
                logger.error("scan_failed table=%s error=%s", table, db.describe_error(exc))
                raise db.StoreError(db.describe_error(exc)) from exc
        logger.info("scan_done table=%s rows=%s", table, len(rows))
        return rows
