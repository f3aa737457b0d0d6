"""Deduplicated, score-weighted corpus of fuzz inputs.

Owns four pieces of shared state for one fuzzing run:
  - Dedup index     : fingerprint → the single surviving input
  - Sampling index  : running score totals for proportional seed picks
  - Score evaluation: fitness against population averages
  - Literal registry: forwards newly discovered constants to the mutators

Driver flow:
  1. ``is_interested_in(candidate)`` before producing an expensive report
  2. ``upsert(candidate)`` to commit an accepted input
  3. ``pick_weighted()`` to pull the next seed to mutate

Every public operation takes the same lock, so the aggregates and the running
totals always move together.
"""

from __future__ import annotations

import logging
import math
import random
import threading
import uuid
from dataclasses import dataclass
from typing import Iterator, Sequence

from fuzzcorpus.core.config import CorpusSettings, get_settings
from fuzzcorpus.core.errors import CorpusInvariantError
from fuzzcorpus.core.types import CorpusStats
from fuzzcorpus.fuzzer.inputs import ZERO_INPUT, FuzzInput, Input
from fuzzcorpus.fuzzer.literals import LiteralRegistry, LiteralSink
from fuzzcorpus.fuzzer.mutation_engine import MutationDictionary
from fuzzcorpus.fuzzer.sampling import SamplingIndex, Strategy
from fuzzcorpus.fuzzer.scoring import ScoreEvaluator, population_averages

logger = logging.getLogger(__name__)

_TOLERANCE = 1e-6


@dataclass
class CorpusEntry:
    """A stored input and the sampling slot that holds it."""

    input: Input
    index_in_running: int
    score: float


class Corpus:
    """The corpus-management core of a coverage-guided fuzzer."""

    def __init__(
        self,
        *,
        literal_sink: LiteralSink | None = None,
        rng: random.Random | None = None,
        strategy: Strategy | None = None,
        settings: CorpusSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.corpus_id = uuid.uuid4().hex[:12]
        self._rng = rng or random.Random(self.settings.rng_seed)
        self._lock = threading.RLock()

        self._store: dict[str, CorpusEntry] = {}
        self._running: SamplingIndex[Input] = SamplingIndex(
            strategy or self.settings.sampling_strategy
        )
        self._evaluator = ScoreEvaluator()

        if literal_sink is None:
            literal_sink = MutationDictionary(
                self.settings.dictionary_max_size,
                self.settings.dictionary_trim_to,
            )
        self.mutator: LiteralSink = literal_sink
        self._literals = LiteralRegistry(self.mutator)

        self.total_score: float = 0.0
        self.total_execution_time: float = 0.0
        self.total_branch_coverage: int = 0

        self._inserts = 0
        self._replacements = 0
        self._picks = 0

    # ── Size & enumeration ───────────────────────────────────────────────

    def size(self) -> int:
        """Number of distinct fingerprints stored."""
        with self._lock:
            return len(self._running)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, fingerprint: object) -> bool:
        with self._lock:
            return fingerprint in self._store

    def __iter__(self) -> Iterator[Input]:
        return iter(self.get_all_inputs())

    def get(self, fingerprint: str) -> Input | None:
        with self._lock:
            entry = self._store.get(fingerprint)
            return entry.input if entry else None

    def get_all_inputs(self) -> _InputsView:
        """Every stored input, in sampling order.

        Returns a lazy view; each iteration walks a snapshot taken when the
        iteration starts, so the view can be iterated again.
        """
        return _InputsView(self)

    def _snapshot(self) -> list[Input]:
        with self._lock:
            return list(self._running)

    # ── Scoring ──────────────────────────────────────────────────────────

    def averages(self) -> tuple[float, float]:
        """(mean runtime, mean coverage) over stored inputs; zeros when empty."""
        with self._lock:
            return population_averages(
                self.total_execution_time,
                self.total_branch_coverage,
                len(self._running),
            )

    def score_input(self, inp: Input) -> float:
        """Score ``inp`` against the current population averages, without storing it."""
        with self._lock:
            avg_runtime, avg_coverage = self.averages()
            return self._evaluator.score(inp, avg_runtime, avg_coverage)

    def build_input(self, payload: bytes, *, coverage_size: int, runtime: float) -> FuzzInput:
        """A ``FuzzInput`` scored with this corpus's settings."""
        return FuzzInput.build(
            payload,
            coverage_size=coverage_size,
            runtime=runtime,
            settings=self.settings,
        )

    # ── Admission & commit ───────────────────────────────────────────────

    def is_interested_in(self, candidate: Input) -> bool:
        """Whether ``candidate`` would be worth a full report.

        True for an unseen fingerprint, or when the candidate outscores the
        stored input with that fingerprint under the same current averages.
        """
        with self._lock:
            self._evaluator.validate(candidate)
            existing = self._store.get(candidate.summary.fingerprint)
            score = self.score_input(candidate)
            if existing is None:
                return True
            return score > self.score_input(existing.input)

    def upsert(self, inp: Input) -> None:
        """Store ``inp``, replacing any input with the same fingerprint."""
        with self._lock:
            self._evaluator.validate(inp)
            summary = inp.summary
            score = self.score_input(inp)
            existing = self._store.get(summary.fingerprint)

            if existing is not None:
                old = existing.input.summary
                self.total_branch_coverage += summary.coverage_size - old.coverage_size
                self.total_execution_time += summary.runtime - old.runtime

                delta = score - existing.score
                index = existing.index_in_running
                self._running.replace(index, inp, delta, score)
                self.total_score += delta
                self._replacements += 1
                logger.debug(
                    "Replaced input %s (score %.4f -> %.4f)",
                    summary.fingerprint[:16],
                    existing.score,
                    score,
                    extra={"corpus_id": self.corpus_id, "fingerprint": summary.fingerprint, "score_delta": delta},
                )
            else:
                index = self._running.append(inp, score)
                self.total_branch_coverage += summary.coverage_size
                self.total_execution_time += summary.runtime
                self.total_score += score
                self._inserts += 1
                logger.debug(
                    "Added input %s (score %.4f, corpus size %d)",
                    summary.fingerprint[:16],
                    score,
                    len(self._running),
                    extra={"corpus_id": self.corpus_id, "fingerprint": summary.fingerprint, "score": score},
                )

            self._store[summary.fingerprint] = CorpusEntry(
                input=inp,
                index_in_running=index,
                score=score,
            )

            if self.settings.verify_on_upsert:
                self.verify()

    # ── Sampling ─────────────────────────────────────────────────────────

    def pick_weighted(self) -> Input:
        """An input drawn with probability proportional to its score.

        Returns ``ZERO_INPUT`` when the corpus is empty.
        """
        with self._lock:
            if not len(self._running):
                return ZERO_INPUT
            self._picks += 1
            return self._running.pick(self._rng)

    def select(self, target: float) -> Input:
        """The input a draw of exactly ``target`` would return."""
        with self._lock:
            if not len(self._running):
                return ZERO_INPUT
            return self._running.select(target)

    def running_scores(self) -> list[float]:
        with self._lock:
            return self._running.running_scores()

    # ── Literals ─────────────────────────────────────────────────────────

    def found_literals(self, literals: Sequence[str]) -> list[str]:
        """Forward the literals not seen before to the mutation engine."""
        with self._lock:
            return self._literals.found_literals(literals)

    @property
    def literals(self) -> frozenset[str]:
        with self._lock:
            return self._literals.literals

    # ── Telemetry ────────────────────────────────────────────────────────

    def get_stats(self) -> CorpusStats:
        with self._lock:
            avg_runtime, avg_coverage = self.averages()
            return CorpusStats(
                size=len(self._running),
                total_score=self.total_score,
                total_execution_time=self.total_execution_time,
                total_branch_coverage=self.total_branch_coverage,
                avg_runtime=avg_runtime,
                avg_coverage=avg_coverage,
                literal_count=len(self._literals),
                inserts=self._inserts,
                replacements=self._replacements,
                picks=self._picks,
            )

    def verify(self) -> None:
        """Recompute aggregates and running totals from scratch.

        Raises:
            CorpusInvariantError: when any stored value drifted.
        """
        with self._lock:
            problems: list[dict[str, object]] = []

            expected_running = 0.0
            expected_time = 0.0
            expected_coverage = 0
            running = self._running.running_scores()

            for index, inp in enumerate(self._running):
                fp = inp.summary.fingerprint
                entry = self._store.get(fp)
                if entry is None or entry.input is not inp or entry.index_in_running != index:
                    problems.append({"field": "index_in_running", "fingerprint": fp, "slot": index})
                    continue
                expected_running += entry.score
                expected_time += inp.summary.runtime
                expected_coverage += inp.summary.coverage_size
                if not _close(running[index], expected_running):
                    problems.append(
                        {"field": "running_score", "slot": index, "actual": running[index], "expected": expected_running}
                    )
                if index and running[index] < running[index - 1]:
                    problems.append({"field": "running_score", "slot": index, "reason": "decreasing"})

            if len(self._store) != len(running):
                problems.append({"field": "size", "store": len(self._store), "running": len(running)})
            if not _close(self.total_score, expected_running):
                problems.append({"field": "total_score", "actual": self.total_score, "expected": expected_running})
            if running and not _close(running[-1], self.total_score):
                problems.append({"field": "total_score", "actual": self.total_score, "last_running": running[-1]})
            if not _close(self.total_execution_time, expected_time):
                problems.append(
                    {"field": "total_execution_time", "actual": self.total_execution_time, "expected": expected_time}
                )
            if self.total_branch_coverage != expected_coverage:
                problems.append(
                    {"field": "total_branch_coverage", "actual": self.total_branch_coverage, "expected": expected_coverage}
                )

            if problems:
                logger.error(
                    "Corpus invariants violated: %d problem(s)",
                    len(problems),
                    extra={"corpus_id": self.corpus_id},
                )
                raise CorpusInvariantError(
                    f"Corpus invariants violated: {len(problems)} problem(s)",
                    details=problems,
                )


class _InputsView:
    """Restartable, lazily-evaluated enumeration of a corpus's inputs."""

    def __init__(self, corpus: Corpus) -> None:
        self._corpus = corpus

    def __iter__(self) -> Iterator[Input]:
        yield from self._corpus._snapshot()

    def __len__(self) -> int:
        return self._corpus.size()


def _close(a: float, b: float) -> bool:
    return math.isclose(a, b, rel_tol=_TOLERANCE, abs_tol=_TOLERANCE)
