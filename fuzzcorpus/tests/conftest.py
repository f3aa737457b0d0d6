"""Shared fixtures for the fuzzcorpus test suite."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable
from unittest.mock import MagicMock

import pytest

from fuzzcorpus.core.config import CorpusSettings
from fuzzcorpus.core.types import ExecutionSummary
from fuzzcorpus.fuzzer.corpus import Corpus
from fuzzcorpus.fuzzer.inputs import FuzzInput


@dataclass
class ScriptedInput:
    """Input whose score is a caller-supplied function of its summary."""

    summary: ExecutionSummary
    score_fn: Callable[[ExecutionSummary, float, float], float]
    payload: bytes = b""

    def score(self, avg_runtime: float, avg_coverage: float) -> float:
        return self.score_fn(self.summary, avg_runtime, avg_coverage)


def coverage_minus_runtime(summary: ExecutionSummary, _rt: float, _cov: float) -> float:
    return summary.coverage_size - summary.runtime


# ── Settings ─────────────────────────────────────────────────────────────────


@pytest.fixture
def settings() -> CorpusSettings:
    """Settings with a fixed seed, independent of the environment."""
    return CorpusSettings(rng_seed=1234, sampling_strategy="bisect", verify_on_upsert=False)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


# ── Corpus ───────────────────────────────────────────────────────────────────


@pytest.fixture
def literal_sink() -> MagicMock:
    """Stand-in for the mutation engine's literal ingestion."""
    return MagicMock(name="mutator")


@pytest.fixture
def corpus(settings: CorpusSettings, rng: random.Random, literal_sink: MagicMock) -> Corpus:
    return Corpus(literal_sink=literal_sink, rng=rng, settings=settings)


@pytest.fixture
def make_input():
    """Build a ScriptedInput; default score is coverage minus runtime."""

    def fn(
        fp: str,
        coverage: int = 0,
        runtime: float = 0.0,
        score: Callable[[ExecutionSummary, float, float], float] | float | None = None,
    ) -> ScriptedInput:
        if score is None:
            score_fn = coverage_minus_runtime
        elif callable(score):
            score_fn = score
        else:
            fixed = float(score)
            score_fn = lambda _s, _rt, _cov: fixed  # noqa: E731
        summary = ExecutionSummary(fingerprint=fp, coverage_size=coverage, runtime=runtime)
        return ScriptedInput(summary=summary, score_fn=score_fn, payload=fp.encode())

    return fn


@pytest.fixture
def fuzz_input():
    """Build a real FuzzInput from a payload."""

    def fn(payload: bytes, coverage: int = 10, runtime: float = 0.01) -> FuzzInput:
        return FuzzInput.build(payload, coverage_size=coverage, runtime=runtime)

    return fn
