"""
Match engine configuration.

Read from the environment (and a local .env file) once at startup.
"""

import json
import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .logic.constants import MAX_LIMIT, RECENCY_LOOKBACK_DAYS, DEFAULT_POOL_LIMIT
from .logic.errors import ConfigurationError

load_dotenv()


class EngineSettings(BaseModel):
    signal_weights: Optional[Dict[str, float]] = None
    recency_lookback_days: int = Field(default=RECENCY_LOOKBACK_DAYS, gt=0)
    max_workers: Optional[int] = Field(default=None, gt=0)
    deadline_ms: Optional[float] = Field(default=None, ge=0)
    max_limit: int = Field(default=MAX_LIMIT, gt=0)
    min_score: float = Field(default=0.0, ge=0.0, le=100.0)
    pool_limit: int = Field(default=DEFAULT_POOL_LIMIT, gt=0)

    class Config:
        frozen = True


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _parse_weights(raw: Optional[str]) -> Optional[Dict[str, float]]:
    if raw is None:
        return None
    try:
        weights = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"MATCH_ENGINE_SIGNAL_WEIGHTS is not valid JSON: {e}") from e
    if not isinstance(weights, dict):
        raise ConfigurationError("MATCH_ENGINE_SIGNAL_WEIGHTS must be a JSON object")
    return weights


def load_settings() -> EngineSettings:
    """
    Build EngineSettings from the environment.

    Raises:
        ConfigurationError: on malformed values
    """
    values = {
        "signal_weights": _parse_weights(_env("MATCH_ENGINE_SIGNAL_WEIGHTS")),
        "recency_lookback_days": _env("MATCH_ENGINE_RECENCY_LOOKBACK_DAYS"),
        "max_workers": _env("MATCH_ENGINE_MAX_WORKERS"),
        "deadline_ms": _env("MATCH_ENGINE_DEADLINE_MS"),
        "max_limit": _env("MATCH_ENGINE_MAX_LIMIT"),
        "min_score": _env("MATCH_ENGINE_MIN_SCORE"),
        "pool_limit": _env("MATCH_ENGINE_POOL_LIMIT"),
    }
    try:
        return EngineSettings(**{k: v for k, v in values.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid match engine configuration: {e}") from e
