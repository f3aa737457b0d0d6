"""Mutation-engine side of literal ingestion.

The byte-level mutators live outside the corpus core. What lives here is the
dictionary they draw learned constants from: literal strings found while
fuzzing are pushed in by the corpus and handed back to mutators at random.
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from fuzzcorpus.core.config import get_settings

logger = logging.getLogger(__name__)


class MutationDictionary:
    """Bounded dictionary of learned interesting values.

    When the dictionary grows past ``max_size`` it keeps only the most recent
    ``trim_to`` entries.
    """

    def __init__(self, max_size: int | None = None, trim_to: int | None = None) -> None:
        settings = get_settings()
        self.max_size = max_size if max_size is not None else settings.dictionary_max_size
        self.trim_to = trim_to if trim_to is not None else settings.dictionary_trim_to
        if self.trim_to > self.max_size:
            raise ValueError("trim_to must not exceed max_size")
        self._dictionary: list[str] = []

    def __len__(self) -> int:
        return len(self._dictionary)

    @property
    def entries(self) -> list[str]:
        return list(self._dictionary)

    def add_literals(self, literals: Sequence[str]) -> None:
        """Add values to the mutation dictionary (learned from execution)."""
        self._dictionary.extend(literals)
        if len(self._dictionary) > self.max_size:
            dropped = len(self._dictionary) - self.trim_to
            self._dictionary = self._dictionary[-self.trim_to:]
            logger.debug("Mutation dictionary trimmed, dropped %d oldest entries", dropped)

    def choice(self, rng: random.Random) -> str | None:
        """Pick a dictionary value for a mutator, or None when empty."""
        if not self._dictionary:
            return None
        return rng.choice(self._dictionary)
