"""
Configuration module.

Handles environment variables and engine settings.
"""

from relevance_engine.config.config import (
    APP_ENV,
    DEBUG,
    DEFAULT_MAX_TRENDS,
    EXPLORATION_RATIO,
    BREAKING_MAX_ITEMS,
    BREAKING_MIN_SCORE,
    ENABLE_BREAKING_CARVEOUT,
    ENABLE_EXPLORATION,
    DECISION_TOP_N,
    REPORT_OUTPUT_DIR,
    is_production,
    validate_config,
    print_config_summary,
)

__all__ = [
    "APP_ENV",
    "DEBUG",
    "DEFAULT_MAX_TRENDS",
    "EXPLORATION_RATIO",
    "BREAKING_MAX_ITEMS",
    "BREAKING_MIN_SCORE",
    "ENABLE_BREAKING_CARVEOUT",
    "ENABLE_EXPLORATION",
    "DECISION_TOP_N",
    "REPORT_OUTPUT_DIR",
    "is_production",
    "validate_config",
    "print_config_summary",
]
