"""Fuzz inputs and their default fitness function.

An input is an opaque byte payload plus the ``ExecutionSummary`` the
execution layer produced for it. The corpus never looks inside the payload;
it only needs ``summary`` and ``score(avg_runtime, avg_coverage)``, so any
object matching the ``Input`` protocol can be stored.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from fuzzcorpus.core.config import CorpusSettings, get_settings
from fuzzcorpus.core.errors import from_validation_error
from fuzzcorpus.core.types import ExecutionSummary


@runtime_checkable
class Input(Protocol):
    """Anything the corpus can store."""

    summary: ExecutionSummary

    def score(self, avg_runtime: float, avg_coverage: float) -> float: ...


def fingerprint(payload: bytes) -> str:
    """Content-derived identifier for a payload."""
    return hashlib.sha256(payload).hexdigest()


def default_score(
    summary: ExecutionSummary,
    avg_runtime: float,
    avg_coverage: float,
    *,
    settings: CorpusSettings | None = None,
    speed_cap: float | None = None,
    epsilon: float | None = None,
) -> float:
    """Coverage relative to the population, boosted for faster-than-average runs.

    Speed factor is capped so a trivially fast input cannot dominate sampling.
    With no population averages yet, the speed factor is neutral (1.0).
    Explicit ``speed_cap`` / ``epsilon`` win over ``settings``, which falls
    back to the process-wide settings.
    """
    settings = settings or get_settings()
    cap = speed_cap if speed_cap is not None else settings.score_speed_cap
    eps = epsilon if epsilon is not None else settings.score_runtime_epsilon

    if summary.coverage_size == 0:
        return 0.0

    coverage_factor = summary.coverage_size / max(avg_coverage, 1.0)

    speed_factor = 1.0
    if avg_runtime > 0:
        speed_factor = min(cap, avg_runtime / max(summary.runtime, eps))

    return coverage_factor * speed_factor


@dataclass
class FuzzInput:
    """A test input owned by the corpus once accepted."""

    payload: bytes
    summary: ExecutionSummary
    settings: CorpusSettings | None = field(default=None, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        payload: bytes,
        *,
        coverage_size: int,
        runtime: float,
        settings: CorpusSettings | None = None,
    ) -> FuzzInput:
        """Create an input from raw execution results, fingerprinting the payload."""
        try:
            summary = ExecutionSummary(
                fingerprint=fingerprint(payload),
                coverage_size=coverage_size,
                runtime=runtime,
            )
        except ValidationError as exc:
            raise from_validation_error(exc) from exc
        return cls(payload=payload, summary=summary, settings=settings)

    @property
    def fingerprint(self) -> str:
        return self.summary.fingerprint

    def score(self, avg_runtime: float, avg_coverage: float) -> float:
        return default_score(self.summary, avg_runtime, avg_coverage, settings=self.settings)


class _ZeroInput(FuzzInput):
    """Sentinel handed out when the corpus has nothing to offer."""

    def score(self, avg_runtime: float, avg_coverage: float) -> float:
        return 0.0

    def __bool__(self) -> bool:
        return False


# Callers must treat this as "no seed available".
ZERO_INPUT: FuzzInput = _ZeroInput(
    payload=b"",
    summary=ExecutionSummary(fingerprint="", coverage_size=0, runtime=0.0),
)
