"""Score evaluation against corpus-wide averages."""

from __future__ import annotations

import math

from fuzzcorpus.core.errors import InvalidInputError
from fuzzcorpus.fuzzer.inputs import Input


def population_averages(
    total_execution_time: float,
    total_branch_coverage: int,
    size: int,
) -> tuple[float, float]:
    """Mean runtime and mean coverage; zero for an empty population."""
    denom = max(1, size)
    return total_execution_time / denom, total_branch_coverage / denom


class ScoreEvaluator:
    """Turns an input into a scalar fitness relative to the population.

    Holds no state of its own: the averages are passed in on every call, so
    hypothetical inputs can be scored without touching the corpus.
    """

    def score(self, inp: Input, avg_runtime: float, avg_coverage: float) -> float:
        """Finite fitness, clamped at zero so running totals never decrease."""
        value = float(inp.score(avg_runtime, avg_coverage))
        if not math.isfinite(value):
            raise InvalidInputError(
                f"Non-finite score {value!r} for input {inp.summary.fingerprint!r}",
                details=[{"field": "score", "value": repr(value)}],
            )
        return max(0.0, value)

    @staticmethod
    def validate(inp: Input) -> None:
        """Reject summaries that would corrupt the running aggregates."""
        summary = inp.summary
        errors = []
        if summary.coverage_size < 0:
            errors.append({"field": "coverage_size", "value": summary.coverage_size})
        if not math.isfinite(summary.runtime) or summary.runtime < 0:
            errors.append({"field": "runtime", "value": summary.runtime})
        if errors:
            raise InvalidInputError(
                f"Invalid execution summary for input {summary.fingerprint!r}",
                details=errors,
            )
