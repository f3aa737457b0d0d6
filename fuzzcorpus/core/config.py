"""Core configuration for the fuzzcorpus engine."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CorpusSettings(BaseSettings):
    """Corpus settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FUZZCORPUS_",
        case_sensitive=False,
        extra="ignore",
    )

    # ── App ──────────────────────────────────────────────────────────────
    app_env: Literal["development", "staging", "production"] = "development"
    log_level: str = "INFO"

    # ── Sampling ─────────────────────────────────────────────────────────
    rng_seed: int | None = None
    sampling_strategy: Literal["linear", "bisect"] = "bisect"

    # ── Scoring ──────────────────────────────────────────────────────────
    score_speed_cap: float = Field(default=3.0, gt=0)
    score_runtime_epsilon: float = Field(default=1e-6, gt=0)

    # ── Mutation dictionary ──────────────────────────────────────────────
    dictionary_max_size: int = Field(default=5_000, gt=0)
    dictionary_trim_to: int = Field(default=3_000, gt=0)

    # ── Debugging ────────────────────────────────────────────────────────
    verify_on_upsert: bool = False


@lru_cache
def get_settings() -> CorpusSettings:
    """Return cached settings singleton."""
    return CorpusSettings()
