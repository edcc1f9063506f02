"""
Data models module.

Defines trend signals, organization context and scoring results.
"""

from relevance_engine.models.trend import GeoLevel, SourceSample, TrendSignal
from relevance_engine.models.organization import (
    PROVEN_TOPIC_MIN_USES,
    AffinitySource,
    InterestEntity,
    InterestTopic,
    OrganizationProfile,
    TopicAffinity,
    WatchlistEntity,
)
from relevance_engine.models.results import (
    DecisionScoreResult,
    DecisionTier,
    PriorityBucket,
    RelevanceFlag,
    RelevanceResult,
    ScoredTrend,
    clamp_score,
    round_half_up,
)

__all__ = [
    "GeoLevel",
    "SourceSample",
    "TrendSignal",
    "PROVEN_TOPIC_MIN_USES",
    "AffinitySource",
    "InterestEntity",
    "InterestTopic",
    "OrganizationProfile",
    "TopicAffinity",
    "WatchlistEntity",
    "DecisionScoreResult",
    "DecisionTier",
    "PriorityBucket",
    "RelevanceFlag",
    "RelevanceResult",
    "ScoredTrend",
    "clamp_score",
    "round_half_up",
]
