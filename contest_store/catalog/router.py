"""
Catalog API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import schemas, service
from .repository import Store

router = APIRouter()


@router.get("/contests")
async def get_contests(store: Store = Depends(service.get_store)) -> dict:
    contests = await service.list_contests(store)
    return {"contests": contests, "count": len(contests)}


@router.get("/problems")
async def get_problems(store: Store = Depends(service.get_store)) -> dict:
    problems = await service.list_problems(store)
    return {"problems": problems, "count": len(problems)}


@router.post("/contests")
async def post_contests(
    request: schemas.ContestBatch,
    store: Store = Depends(service.get_store),
) -> dict:
    """
    Insert-or-ignore: contests whose id already exists are left untouched.
    """
    return await service.write_contests(store, request.contests)


@router.post("/problems")
async def post_problems(
    request: schemas.ProblemBatch,
    store: Store = Depends(service.get_store),
) -> dict:
    """
    Insert-or-ignore: problems whose id already exists are left untouched.
    """
    return await service.write_problems(store, request.problems)


@router.post("/submissions")
async def post_submissions(
    request: schemas.SubmissionBatch,
    store: Store = Depends(service.get_store),
) -> dict:
    """
    Upsert submissions; an existing id only has its user_id rewritten.

    Not transactional: on a 502, rows before `failed_index` are already stored.
    """
    return await service.write_submissions(store, request.submissions)
