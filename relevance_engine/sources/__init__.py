"""
Batch sources module.

Contains the source abstraction and the JSON file implementation.
"""

from relevance_engine.sources.base import (
    BatchLoadError,
    BatchSource,
    OrganizationContext,
    TrendBatch,
    classify_untagged_trends,
)
from relevance_engine.sources.json_file import JsonFileSource

__all__ = [
    "BatchLoadError",
    "BatchSource",
    "OrganizationContext",
    "TrendBatch",
    "classify_untagged_trends",
    "JsonFileSource",
]
