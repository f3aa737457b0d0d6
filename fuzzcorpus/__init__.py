"""Corpus-management core for coverage-guided fuzzers."""

from fuzzcorpus.fuzzer.corpus import Corpus, CorpusEntry
from fuzzcorpus.fuzzer.inputs import ZERO_INPUT, FuzzInput, Input, fingerprint

__all__ = ["Corpus", "CorpusEntry", "FuzzInput", "Input", "ZERO_INPUT", "fingerprint"]
__version__ = "0.1.0"
