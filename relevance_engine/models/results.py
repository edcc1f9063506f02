"""
Scoring result data structures.

RelevanceResult and DecisionScoreResult are ephemeral: they are computed fresh
for every call and never persisted by the engine. Both carry human-readable
evidence strings for the reporting layer.
"""

import math
from dataclasses import dataclass, field
from enum import Enum

from relevance_engine.models.trend import TrendSignal


class RelevanceFlag(str, Enum):
    """Categorical markers attached to a relevance result."""
    NEW_OPPORTUNITY = "new_opportunity"
    PROVEN_TOPIC = "proven_topic"
    WATCHLIST_MATCH = "watchlist_match"
    BREAKING = "breaking"


class PriorityBucket(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DecisionTier(str, Enum):
    """Action readiness, consumed by outreach automation as a gate."""
    ACT_NOW = "act_now"
    CONSIDER = "consider"
    WATCH = "watch"


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (round() rounds half to even)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp a score to the [0, 100] range."""
    return max(0, min(100, round_half_up(value)))


@dataclass
class RelevanceResult:
    """
    Fit between one trend and one organization.

    Attributes:
        score: Relevance score (0 to 100).
        reasons: One explanation per contributing factor, in scoring order.
        flags: Categorical flags raised while scoring.
        matched_domains: Declared domains that the trend is tagged with.
        matched_watchlist: Watchlist entity names that matched the trend.
        priority: Bucket derived from the score.
    """
    score: int = 0
    reasons: list[str] = field(default_factory=list)
    flags: frozenset = frozenset()
    matched_domains: list[str] = field(default_factory=list)
    matched_watchlist: list[str] = field(default_factory=list)
    priority: PriorityBucket = PriorityBucket.LOW

    def has_flag(self, flag: RelevanceFlag) -> bool:
        return flag in self.flags

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "reasons": list(self.reasons),
            "flags": sorted(f.value for f in self.flags),
            "matched_domains": list(self.matched_domains),
            "matched_watchlist": list(self.matched_watchlist),
            "priority": self.priority.value,
        }


@dataclass
class DecisionScoreResult:
    """
    Decision-grade scores for one trend.

    Sub-scores are each 0 to 100. Risk is inverted: higher means safer.
    """
    opportunity_score: int
    fit_score: int
    risk_score: int
    confidence_score: int
    decision_score: int
    tier: DecisionTier
    signals: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "decision_score": self.decision_score,
            "opportunity_score": self.opportunity_score,
            "fit_score": self.fit_score,
            "risk_score": self.risk_score,
            "confidence_score": self.confidence_score,
            "tier": self.tier.value,
            "signals": {k: list(v) for k, v in self.signals.items()},
        }


@dataclass(frozen=True)
class ScoredTrend:
    """A trend together with its relevance result for one organization."""
    trend: TrendSignal
    relevance: RelevanceResult

    @property
    def id(self) -> str:
        return self.trend.id

    @property
    def score(self) -> int:
        return self.relevance.score

    def has_flag(self, flag: RelevanceFlag) -> bool:
        return self.relevance.has_flag(flag)

    def to_dict(self) -> dict:
        return {"trend": self.trend.to_dict(), "relevance": self.relevance.to_dict()}
