"""Tests for the literal registry and the mutation dictionary sink."""

from __future__ import annotations

import random
from unittest.mock import MagicMock

import pytest

from fuzzcorpus.fuzzer.literals import LiteralRegistry
from fuzzcorpus.fuzzer.mutation_engine import MutationDictionary


class TestLiteralRegistry:
    """Only genuinely new literals reach the mutation engine."""

    def test_forwards_new_literals(self):
        sink = MagicMock()
        registry = LiteralRegistry(sink)

        forwarded = registry.found_literals(["a", "b"])

        assert forwarded == ["a", "b"]
        sink.add_literals.assert_called_once_with(["a", "b"])
        assert registry.literals == frozenset({"a", "b"})

    def test_second_call_is_idempotent(self):
        sink = MagicMock()
        registry = LiteralRegistry(sink)

        registry.found_literals(["a", "b"])
        forwarded = registry.found_literals(["a", "b"])

        assert forwarded == []
        assert sink.add_literals.call_count == 1
        assert registry.literals == frozenset({"a", "b"})

    def test_forwards_only_the_difference_in_order(self):
        sink = MagicMock()
        registry = LiteralRegistry(sink)
        registry.found_literals(["b"])

        registry.found_literals(["z", "b", "a", "y"])

        sink.add_literals.assert_called_with(["z", "a", "y"])

    def test_duplicates_within_a_batch_forwarded_once(self):
        sink = MagicMock()
        registry = LiteralRegistry(sink)
        registry.found_literals(["x", "x", "y", "x"])
        sink.add_literals.assert_called_once_with(["x", "y"])
        assert len(registry) == 2

    def test_empty_batch_does_not_forward(self):
        sink = MagicMock()
        LiteralRegistry(sink).found_literals([])
        sink.add_literals.assert_not_called()

    def test_accepts_any_iterable(self):
        sink = MagicMock()
        registry = LiteralRegistry(sink)
        registry.found_literals(s for s in ("k1", "k2"))
        assert "k1" in registry
        assert "k3" not in registry

    def test_literals_view_is_immutable(self):
        registry = LiteralRegistry(MagicMock())
        registry.found_literals(["a"])
        view = registry.literals
        registry.found_literals(["b"])
        assert view == frozenset({"a"})


class TestMutationDictionary:
    """Bounded literal dictionary consumed by mutators."""

    def test_add_and_choice(self):
        dictionary = MutationDictionary(max_size=10, trim_to=5)
        dictionary.add_literals(["GET", "POST"])
        assert len(dictionary) == 2
        assert dictionary.choice(random.Random(0)) in {"GET", "POST"}

    def test_choice_on_empty(self):
        assert MutationDictionary(max_size=10, trim_to=5).choice(random.Random(0)) is None

    def test_trims_to_most_recent(self):
        dictionary = MutationDictionary(max_size=4, trim_to=2)
        dictionary.add_literals(["a", "b", "c"])
        dictionary.add_literals(["d", "e"])
        assert dictionary.entries == ["d", "e"]

    def test_trim_bound_validation(self):
        with pytest.raises(ValueError):
            MutationDictionary(max_size=2, trim_to=5)
