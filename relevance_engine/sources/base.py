"""
Base source abstraction for the Trend Relevance Engine.

A batch source supplies one batch of trend signals together with the
organizations they should be scored for.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Optional

from relevance_engine.models.organization import (
    InterestEntity,
    InterestTopic,
    OrganizationProfile,
    TopicAffinity,
    WatchlistEntity,
)
from relevance_engine.models.trend import TrendSignal
from relevance_engine.scoring.domains import match_domains
from relevance_engine.scoring.relevance import AlertPreferences


class BatchLoadError(Exception):
    """Raised when a batch cannot be read or parsed."""
    pass


@dataclass
class OrganizationContext:
    """Everything the engine knows about one organization for a batch."""
    profile: OrganizationProfile
    watchlist: list[WatchlistEntity] = field(default_factory=list)
    affinities: list[TopicAffinity] = field(default_factory=list)
    interest_topics: list[InterestTopic] = field(default_factory=list)
    interest_entities: list[InterestEntity] = field(default_factory=list)
    alert_preferences: Optional[AlertPreferences] = None

    @property
    def organization_id(self) -> str:
        return self.profile.organization_id

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationContext":
        prefs = data.get("alert_preferences")
        return cls(
            profile=OrganizationProfile.from_dict(data.get("profile") or {}),
            watchlist=[WatchlistEntity.from_dict(w) for w in data.get("watchlist") or []],
            affinities=[TopicAffinity.from_dict(a) for a in data.get("affinities") or []],
            interest_topics=[InterestTopic.from_dict(t) for t in data.get("interest_topics") or []],
            interest_entities=[InterestEntity.from_dict(e) for e in data.get("interest_entities") or []],
            alert_preferences=AlertPreferences(**prefs) if prefs else None,
        )


@dataclass
class TrendBatch:
    """One batch of trends and the organizations to score them for."""
    trends: list[TrendSignal] = field(default_factory=list)
    organizations: list[OrganizationContext] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "TrendBatch":
        """
        Build a batch from its JSON shape.

        Raises:
            ValueError: If a trend or organization entry is malformed.
        """
        if not isinstance(data, dict):
            raise ValueError("batch must be a JSON object")

        trends = []
        for index, raw in enumerate(data.get("trends") or []):
            try:
                trends.append(TrendSignal.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"trend #{index}: {e}") from e

        organizations = []
        for index, raw in enumerate(data.get("organizations") or []):
            try:
                organizations.append(OrganizationContext.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"organization #{index}: {e}") from e

        return cls(trends=trends, organizations=organizations)


def classify_untagged_trends(trends: list[TrendSignal]) -> list[TrendSignal]:
    """
    Tag trends that arrived without domains using keyword matching.

    Trends that already carry domain tags are returned unchanged.
    """
    classified = []
    for trend in trends:
        if not trend.domains:
            found = match_domains(trend.searchable_text)
            if found:
                trend = replace(trend, domains=tuple(found))
        classified.append(trend)
    return classified


class BatchSource(ABC):
    """
    Abstract base class for all batch sources.

    Attributes:
        name: Unique identifier for this source (e.g., "json_file").
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Return the unique name identifier for this source.

        Should be lowercase, no spaces (e.g., "json_file").
        """
        pass

    @abstractmethod
    def load(self) -> TrendBatch:
        """
        Load one batch.

        Returns:
            TrendBatch with trends and organization contexts.

        Raises:
            BatchLoadError: If the batch cannot be read or parsed.
        """
        pass

    def __str__(self) -> str:
        return f"BatchSource({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
