"""
Configuration module for the Trend Relevance Engine.

Loads environment variables from .env file and exposes them as typed configuration values.
Uses python-dotenv for loading and provides safe defaults where appropriate.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file from project root
# The .env file should be in the root directory (parent of relevance_engine/)
_project_root = Path(__file__).parent.parent.parent
_env_path = _project_root / ".env"
load_dotenv(_env_path)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


# =============================================================================
# Application Environment
# =============================================================================

# Application environment: "development", "staging", or "production"
APP_ENV: str = os.getenv("APP_ENV", "development")

# Enable debug mode for verbose output
DEBUG: bool = _env_bool("DEBUG", "false")


# =============================================================================
# Selection Configuration
# =============================================================================

# Maximum number of trends surfaced per organization
DEFAULT_MAX_TRENDS: int = int(os.getenv("DEFAULT_MAX_TRENDS", "10"))

# Share of the selection reserved for untried-but-declared topics
EXPLORATION_RATIO: float = float(os.getenv("EXPLORATION_RATIO", "0.2"))

# Breaking-news carve-out: at most this many items, each scoring at least BREAKING_MIN_SCORE
BREAKING_MAX_ITEMS: int = int(os.getenv("BREAKING_MAX_ITEMS", "3"))
BREAKING_MIN_SCORE: int = int(os.getenv("BREAKING_MIN_SCORE", "40"))

ENABLE_BREAKING_CARVEOUT: bool = _env_bool("ENABLE_BREAKING_CARVEOUT", "true")
ENABLE_EXPLORATION: bool = _env_bool("ENABLE_EXPLORATION", "true")


# =============================================================================
# Pipeline Configuration
# =============================================================================

# How many of the most relevant trends get a decision-grade score
DECISION_TOP_N: int = int(os.getenv("DECISION_TOP_N", "5"))

# Where Markdown reports are written
REPORT_OUTPUT_DIR: str = os.getenv("REPORT_OUTPUT_DIR", "reports")


# =============================================================================
# Helper Functions
# =============================================================================

def is_production() -> bool:
    """Check if running in production environment."""
    return APP_ENV == "production"


def validate_config() -> list[str]:
    """
    Validate configuration values.

    Returns:
        List of invalid configuration keys with explanations (empty if all valid).
    """
    errors = []

    if APP_ENV not in ("development", "staging", "production"):
        errors.append(f"APP_ENV must be development, staging or production, got {APP_ENV!r}")

    if is_production() and DEBUG:
        errors.append("DEBUG must be disabled in production")

    if DEFAULT_MAX_TRENDS < 1:
        errors.append("DEFAULT_MAX_TRENDS must be at least 1")

    if not (0.0 <= EXPLORATION_RATIO <= 1.0):
        errors.append("EXPLORATION_RATIO must be between 0.0 and 1.0")

    if BREAKING_MAX_ITEMS < 0:
        errors.append("BREAKING_MAX_ITEMS cannot be negative")

    if not (0 <= BREAKING_MIN_SCORE <= 100):
        errors.append("BREAKING_MIN_SCORE must be between 0 and 100")

    if DECISION_TOP_N < 0:
        errors.append("DECISION_TOP_N cannot be negative")

    return errors


def print_config_summary() -> None:
    """Print a summary of current configuration."""
    print(f"  APP_ENV: {APP_ENV}")
    print(f"  DEBUG: {DEBUG}")
    print(f"  DEFAULT_MAX_TRENDS: {DEFAULT_MAX_TRENDS}")
    print(f"  EXPLORATION_RATIO: {EXPLORATION_RATIO}")
    print(f"  BREAKING_MAX_ITEMS: {BREAKING_MAX_ITEMS}")
    print(f"  BREAKING_MIN_SCORE: {BREAKING_MIN_SCORE}")
    print(f"  ENABLE_BREAKING_CARVEOUT: {ENABLE_BREAKING_CARVEOUT}")
    print(f"  ENABLE_EXPLORATION: {ENABLE_EXPLORATION}")
    print(f"  DECISION_TOP_N: {DECISION_TOP_N}")
    print(f"  REPORT_OUTPUT_DIR: {REPORT_OUTPUT_DIR}")
