"""
Catalog "service layer".

Sits between the FastAPI router and the Store: calls the Store and turns a
`StoreError` into an HTTP 502 that tells the caller how far a batch got.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from fastapi import HTTPException

from contest_store.core import db

from .repository import Store
from .schemas import Contest, Problem, Submission


@lru_cache(maxsize=1)
def get_store() -> Store:
    """
    FastAPI dependency. Settings are read from the environment once per process.
    """
    return Store.from_env()


def _store_failure(exc: db.StoreError) -> HTTPException:
    detail: dict = {"error": str(exc)}
    if exc.failed_index is not None:
        # Rows before failed_index are committed; the rest were not attempted.
        detail["failed_index"] = exc.failed_index
        detail["applied"] = len(exc.applied)
    return HTTPException(status_code=502, detail=detail)


def _write_response(affected: list[int]) -> dict:
    return {"affected": affected, "count": len(affected)}


async def write_contests(store: Store, contests: Sequence[Contest]) -> dict:
    try:
        affected = await store.insert_contests(contests)
    except db.StoreError as exc:
        raise _store_failure(exc) from exc
    return _write_response(affected)


async def write_problems(store: Store, problems: Sequence[Problem]) -> dict:
    try:
        affected = await store.insert_problems(problems)
    except db.StoreError as exc:
        raise _store_failure(exc) from exc
    return _write_response(affected)


async def write_submissions(store: Store, submissions: Sequence[Submission]) -> dict:
    try:
        affected = await store.insert_submissions(submissions)
    except db.StoreError as exc:
        raise _store_failure(exc) from exc
    return _write_response(affected)


async def list_contests(store: Store) -> list[dict]:
    try:
        contests = await store.get_contests()
    except db.StoreError as exc:
        raise _store_failure(exc) from exc
    return [contest.model_dump() for contest in contests]


async def list_problems(store: Store) -> list[dict]:
    try:
        problems = await store.get_problems()
    except db.StoreError as exc:
        raise _store_failure(exc) from exc
    return [problem.model_dump() for problem in problems]
