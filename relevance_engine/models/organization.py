"""
Organization data models.

An organization declares what it cares about (profile), which entities it
tracks (watchlist), and carries topic affinities learned from its campaign
history. All of these are read-only snapshots supplied per scoring call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from relevance_engine.models.trend import GeoLevel


# Minimum historical uses before a topic counts as proven
PROVEN_TOPIC_MIN_USES: int = 2


class AffinitySource(str, Enum):
    """Where a topic affinity came from."""
    LEARNED_OUTCOME = "learned_outcome"
    SELF_DECLARED = "self_declared"
    ADMIN_OVERRIDE = "admin_override"


@dataclass
class OrganizationProfile:
    """
    Declared interests of one organization.

    Attributes:
        organization_id: Stable organization identifier.
        display_name: Name used in reports.
        org_type: Category such as "labor" or "climate".
        mission_summary: Free-text mission statement.
        focus_areas: Ordered focus areas, matched against trend text.
        key_issues: Ordered key issues.
        policy_domains: Declared policy domains (the primary filter).
        geographies: Declared geographies.
        geo_sensitivity: Optional override of the geography scope of interest.
    """
    organization_id: str = ""
    display_name: str = ""
    org_type: str = ""
    mission_summary: str = ""
    focus_areas: list[str] = field(default_factory=list)
    key_issues: list[str] = field(default_factory=list)
    policy_domains: list[str] = field(default_factory=list)
    geographies: list[str] = field(default_factory=list)
    geo_sensitivity: Optional[GeoLevel] = None

    def __post_init__(self) -> None:
        if self.geo_sensitivity is not None and not isinstance(self.geo_sensitivity, GeoLevel):
            self.geo_sensitivity = GeoLevel(self.geo_sensitivity)

    @property
    def label(self) -> str:
        return self.display_name or self.organization_id or "organization"

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "display_name": self.display_name,
            "org_type": self.org_type,
            "mission_summary": self.mission_summary,
            "focus_areas": list(self.focus_areas),
            "key_issues": list(self.key_issues),
            "policy_domains": list(self.policy_domains),
            "geographies": list(self.geographies),
            "geo_sensitivity": self.geo_sensitivity.value if self.geo_sensitivity else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OrganizationProfile":
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in (data or {}).items() if k in known and v is not None})


@dataclass(frozen=True)
class WatchlistEntity:
    """An entity the organization explicitly tracks."""
    name: str
    entity_type: str = "organization"
    is_active: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "WatchlistEntity":
        return cls(
            name=data["name"],
            entity_type=data.get("entity_type") or "organization",
            is_active=bool(data.get("is_active", True)),
        )


@dataclass(frozen=True)
class TopicAffinity:
    """
    A learned preference for a topic.

    Attributes:
        topic: Topic label, usually a policy domain.
        affinity_score: Normalized affinity in [0, 1] (clamped on creation).
        times_used: How many times the organization acted on this topic.
        avg_performance: Average historical performance metric.
        source: Provenance of the affinity.
    """
    topic: str
    affinity_score: float = 0.0
    times_used: int = 0
    avg_performance: float = 0.0
    source: AffinitySource = AffinitySource.LEARNED_OUTCOME

    def __post_init__(self) -> None:
        object.__setattr__(self, "affinity_score", max(0.0, min(1.0, float(self.affinity_score))))
        if not isinstance(self.source, AffinitySource):
            object.__setattr__(self, "source", AffinitySource(self.source))

    @property
    def is_proven(self) -> bool:
        """A topic is proven once it has been used at least twice."""
        return self.times_used >= PROVEN_TOPIC_MIN_USES

    @classmethod
    def from_dict(cls, data: dict) -> "TopicAffinity":
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known and v is not None})


@dataclass(frozen=True)
class InterestTopic:
    """A weighted topic of interest (decision scorer fallback input)."""
    topic: str
    weight: float = 0.5
    source: str = AffinitySource.SELF_DECLARED.value

    @classmethod
    def from_dict(cls, data: dict) -> "InterestTopic":
        return cls(
            topic=data["topic"],
            weight=float(data.get("weight", 0.5)),
            source=data.get("source") or AffinitySource.SELF_DECLARED.value,
        )


@dataclass(frozen=True)
class InterestEntity:
    """An allow- or deny-listed entity."""
    entity_name: str
    rule_type: str = "allow"
    reason: Optional[str] = None

    def __post_init__(self) -> None:
        if self.rule_type not in ("allow", "deny"):
            raise ValueError(f"rule_type must be 'allow' or 'deny', got {self.rule_type!r}")

    @classmethod
    def from_dict(cls, data: dict) -> "InterestEntity":
        return cls(
            entity_name=data["entity_name"],
            rule_type=data.get("rule_type") or "allow",
            reason=data.get("reason"),
        )
