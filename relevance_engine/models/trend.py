"""
Trend signal data model.

Defines the TrendSignal dataclass representing a single detected topical event
as delivered by the upstream ingestion/classification pipeline. Trend signals are
immutable: the scoring engine reads them and never changes them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class GeoLevel(str, Enum):
    """How specific a trend's geography is."""
    LOCAL = "local"
    STATE = "state"
    NATIONAL = "national"
    INTERNATIONAL = "international"


@dataclass(frozen=True)
class SourceSample:
    """One source type that reported a trend, with how many mentions it had."""
    type: str
    count: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "SourceSample":
        return cls(type=str(data["type"]), count=int(data.get("count") or 1))


def _as_tuple(values) -> tuple:
    if not values:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class TrendSignal:
    """
    An immutable fact describing a detected topical event.

    Attributes:
        id: Stable identifier from the ingestion pipeline.
        title: Human-readable event title.
        domains: Matched policy-domain tags (e.g. "Healthcare").
        geographies: Geography tags (e.g. "US", "TX").
        geo_level: How specific the geography is.
        politicians: People mentioned in the coverage.
        organizations: Organizations mentioned in the coverage.
        legislation: Bills and laws mentioned in the coverage.
        context_terms: Free-text terms describing the event.
        is_breaking: Whether the event was flagged as breaking news.
        confidence: Classifier confidence (never negative).

    The remaining optional fields carry momentum data consumed by the
    decision scorer: velocity (% above baseline), mentions, sentiment
    (-1..1), sentiment_change, alert_type, sources, actionable_score and
    detected_at.
    """

    # Required fields
    id: str
    title: str

    # Classification tags
    domains: tuple = ()
    geographies: tuple = ()
    geo_level: GeoLevel = GeoLevel.NATIONAL
    politicians: tuple = ()
    organizations: tuple = ()
    legislation: tuple = ()
    context_terms: tuple = ()
    is_breaking: bool = False
    confidence: float = 0.0

    # Momentum signals
    velocity: Optional[float] = None
    mentions: Optional[int] = None
    sentiment: Optional[float] = None
    sentiment_change: Optional[float] = None
    alert_type: str = "trending"
    sources: tuple = field(default_factory=tuple)
    actionable_score: Optional[float] = None
    detected_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize sequences through object.__setattr__
        for name in ("domains", "geographies", "politicians", "organizations",
                     "legislation", "context_terms", "sources"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))
        if not isinstance(self.geo_level, GeoLevel):
            object.__setattr__(self, "geo_level", GeoLevel(self.geo_level))
        self.validate()

    def validate(self) -> None:
        """
        Validate that required fields are present and valid.

        Raises:
            ValueError: If validation fails.
        """
        errors = []

        if not self.id or not str(self.id).strip():
            errors.append("id is required and cannot be empty")

        if not self.title or not self.title.strip():
            errors.append("title is required and cannot be empty")

        if self.confidence < 0:
            errors.append(f"confidence cannot be negative, got {self.confidence}")

        if errors:
            raise ValueError(f"TrendSignal validation failed: {'; '.join(errors)}")

    @property
    def mentioned_entities(self) -> tuple:
        """All people, organizations and legislation named by the trend."""
        return self.politicians + self.organizations + self.legislation

    @property
    def searchable_text(self) -> str:
        """Title and context terms joined for text matching."""
        return " ".join((self.title,) + self.context_terms)

    def to_dict(self) -> dict:
        """
        Convert to a JSON-compatible dictionary.

        Returns:
            Dictionary representation of this trend.
        """
        return {
            "id": self.id,
            "title": self.title,
            "domains": list(self.domains),
            "geographies": list(self.geographies),
            "geo_level": self.geo_level.value,
            "politicians": list(self.politicians),
            "organizations": list(self.organizations),
            "legislation": list(self.legislation),
            "context_terms": list(self.context_terms),
            "is_breaking": self.is_breaking,
            "confidence": self.confidence,
            "velocity": self.velocity,
            "mentions": self.mentions,
            "sentiment": self.sentiment,
            "sentiment_change": self.sentiment_change,
            "alert_type": self.alert_type,
            "sources": [{"type": s.type, "count": s.count} for s in self.sources],
            "actionable_score": self.actionable_score,
            "detected_at": self.detected_at.isoformat() if self.detected_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TrendSignal":
        """
        Create a TrendSignal from a dictionary (e.g., a JSON batch).

        Unknown keys are ignored. ISO strings in detected_at are parsed.

        Args:
            data: Dictionary with TrendSignal fields.

        Returns:
            New TrendSignal instance.
        """
        data = data.copy()

        detected_at = data.get("detected_at")
        if detected_at and isinstance(detected_at, str):
            data["detected_at"] = datetime.fromisoformat(detected_at)

        data["sources"] = tuple(
            s if isinstance(s, SourceSample) else SourceSample.from_dict(s)
            for s in data.get("sources") or []
        )

        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})

    def __str__(self) -> str:
        return f"[{self.id}] {self.title}"
