"""Corpus management for coverage-guided fuzzing.

Implements:
  - Fingerprint deduplication with score-based replacement
  - Admission filtering before expensive reporting
  - Score-proportional seed selection over running totals
  - Literal forwarding to the mutation dictionary
"""
