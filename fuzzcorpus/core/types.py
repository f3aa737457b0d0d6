"""Shared types used across the corpus core."""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExecutionSummary(BaseModel):
    """What the execution layer reports about one run of the target."""

    model_config = ConfigDict(frozen=True)

    fingerprint: str
    coverage_size: int = Field(default=0, ge=0)
    runtime: float = Field(default=0.0, ge=0)

    @field_validator("runtime")
    @classmethod
    def _finite_runtime(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("runtime must be finite")
        return v


@dataclass
class CorpusStats:
    """Point-in-time snapshot of corpus aggregates and counters."""

    size: int = 0
    total_score: float = 0.0
    total_execution_time: float = 0.0
    total_branch_coverage: int = 0
    avg_runtime: float = 0.0
    avg_coverage: float = 0.0
    literal_count: int = 0
    inserts: int = 0
    replacements: int = 0
    picks: int = 0

    def to_dict(self) -> dict[str, float | int]:
        return {
            "size": self.size,
            "total_score": round(self.total_score, 6),
            "total_execution_time": round(self.total_execution_time, 6),
            "total_branch_coverage": self.total_branch_coverage,
            "avg_runtime": round(self.avg_runtime, 6),
            "avg_coverage": round(self.avg_coverage, 6),
            "literal_count": self.literal_count,
            "inserts": self.inserts,
            "replacements": self.replacements,
            "picks": self.picks,
        }
