"""Forwarding cache for constant values discovered while fuzzing."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence

logger = logging.getLogger(__name__)


class LiteralSink(Protocol):
    """The mutation engine's literal-ingestion interface."""

    def add_literals(self, literals: Sequence[str]) -> None: ...


class LiteralRegistry:
    """Remembers every literal seen in this run and forwards only new ones.

    The set only grows. Forwarding preserves the order of the filtered batch.
    """

    def __init__(self, sink: LiteralSink) -> None:
        self.sink = sink
        self._seen: set[str] = set()

    def __contains__(self, literal: object) -> bool:
        return literal in self._seen

    def __len__(self) -> int:
        return len(self._seen)

    @property
    def literals(self) -> frozenset[str]:
        return frozenset(self._seen)

    def found_literals(self, candidates: Iterable[str]) -> list[str]:
        """Register ``candidates``; returns the literals forwarded to the sink."""
        fresh: list[str] = []
        for literal in candidates:
            if literal in self._seen:
                continue
            self._seen.add(literal)
            fresh.append(literal)

        if not fresh:
            return fresh

        self.sink.add_literals(fresh)
        logger.debug(
            "Forwarded %d new literal(s) to mutation engine",
            len(fresh),
            extra={"literal_count": len(self._seen)},
        )
        return fresh
