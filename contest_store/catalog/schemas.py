"""
Pydantic records for contests, problems and submissions.
"""

from __future__ import annotations

from pydantic import BaseModel


class Contest(BaseModel):
    id: str
    start_epoch_second: int
    duration_second: int
    title: str
    rate_change: str


class Problem(BaseModel):
    id: str
    contest_id: str
    title: str


class Submission(BaseModel):
    id: int
    epoch_second: int
    problem_id: str
    contest_id: str
    user_id: str
    language: str
    point: float
    length: int
    result: str
    # Milliseconds; the judge omits timing for some verdicts (e.g. CE).
    execution_time: int | None = None


class ContestBatch(BaseModel):
    contests: list[Contest]


class ProblemBatch(BaseModel):
    problems: list[Problem]


class SubmissionBatch(BaseModel):
    submissions: list[Submission]
