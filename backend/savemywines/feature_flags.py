"""
Feature flags for SaveMyWines.

Uses pydantic-settings for typed, environment-variable-backed flags.

Toggle via env vars: FEATURE_PARALLEL_SCAN=true
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class FeatureFlags(BaseSettings):
    """Feature flags backed by environment variables."""

    # Upload and annotate concurrently on the in-memory bytes
    feature_parallel_scan: bool = False

    model_config = {
        "env_prefix": "",
        "case_sensitive": False,
    }


@lru_cache()
def get_feature_flags() -> FeatureFlags:
    """Cached singleton. Use FastAPI Depends() for injection."""
    return FeatureFlags()
