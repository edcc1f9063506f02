"""
JSON file batch source.

Reads a batch shaped like:

    {
        "trends": [{"id": "t1", "title": "...", "domains": ["Healthcare"]}],
        "organizations": [
            {"profile": {...}, "watchlist": [...], "affinities": [...],
             "interest_topics": [...], "interest_entities": [...]}
        ]
    }
"""

import json
from pathlib import Path

from relevance_engine.sources.base import (
    BatchLoadError,
    BatchSource,
    TrendBatch,
    classify_untagged_trends,
)


class JsonFileSource(BatchSource):
    """
    Loads a trend batch from a JSON file on disk.

    Usage:
        source = JsonFileSource("batches/2024-01-15.json")
        batch = source.load()
    """

    def __init__(self, path, classify_untagged: bool = False):
        """
        Initialize the source.

        Args:
            path: Path to the JSON batch file.
            classify_untagged: Tag trends without domains by keyword matching.
        """
        self.path = Path(path)
        self.classify_untagged = classify_untagged

    @property
    def name(self) -> str:
        return "json_file"

    def load(self) -> TrendBatch:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise BatchLoadError(f"Batch file not found: {self.path}") from e
        except json.JSONDecodeError as e:
            raise BatchLoadError(f"Invalid JSON in {self.path}: {e}") from e
        except OSError as e:
            raise BatchLoadError(f"Cannot read {self.path}: {e}") from e

        try:
            batch = TrendBatch.from_dict(data)
        except ValueError as e:
            raise BatchLoadError(f"Malformed batch in {self.path}: {e}") from e

        if self.classify_untagged:
            batch.trends = classify_untagged_trends(batch.trends)

        return batch
