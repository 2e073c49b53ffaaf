"""Pydantic models for the JSON health document."""

from __future__ import annotations

from pydantic import BaseModel

from depstatus.health.models import CheckResult


class TargetOut(BaseModel):
    name: str
    importance: str


class CheckResultOut(BaseModel):
    target: TargetOut
    status: str
    error: str | None = None
    duration: int | None = None  # nanoseconds, omitted when zero

    @classmethod
    def from_result(cls, result: CheckResult) -> CheckResultOut:
        return cls(
            target=TargetOut(
                name=result.target.name,
                importance=result.target.importance.value,
            ),
            status=result.status.value,
            error=result.error,
            duration=int(result.duration * 1_000_000_000) or None,
        )


class ErrorOut(BaseModel):
    error: str
