"""
Decision-grade scoring for trends that may trigger action.

Computes four sub-scores and a weighted composite:
- opportunity: why now? (velocity, volume, sentiment shift, recency)
- fit: why you? (reuses the relevance result when one is supplied)
- risk: compliance and reputational safety (inverted - higher is safer)
- confidence: reliability of the underlying signal

The tier requires the composite AND the risk AND the confidence gates to
pass. Volume or momentum alone can never reach act_now.

All functions are pure; "now" is injectable for recency calculations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from relevance_engine.models.organization import (
    InterestEntity,
    InterestTopic,
    OrganizationProfile,
)
from relevance_engine.models.results import (
    DecisionScoreResult,
    DecisionTier,
    RelevanceResult,
    clamp_score,
    round_half_up,
)
from relevance_engine.models.trend import SourceSample, TrendSignal
from relevance_engine.scoring.matching import entity_matches, text_contains


# =============================================================================
# Scoring Configuration
# =============================================================================

# Composite weights (sum to 1.0)
WEIGHT_OPPORTUNITY: float = 0.30
WEIGHT_FIT: float = 0.35
WEIGHT_RISK: float = 0.20
WEIGHT_CONFIDENCE: float = 0.15

RISK_BASELINE: int = 85
CONFIDENCE_BASELINE: int = 50

ACT_NOW_MIN_DECISION: int = 65
ACT_NOW_MIN_RISK: int = 50
ACT_NOW_MIN_CONFIDENCE: int = 40
CONSIDER_MIN_DECISION: int = 40
CONSIDER_MIN_RISK: int = 30

CONTROVERSIAL_ALERT_TYPES: frozenset = frozenset({"controversy", "opposition"})

SENSITIVE_TOPICS: tuple = (
    "abortion", "gun", "firearms", "second amendment", "2a",
    "lgbtq", "transgender", "immigration", "border",
    "death", "killed", "violence", "terrorism", "attack",
    "scandal", "corruption", "fraud", "lawsuit", "indictment",
    "sex", "sexual", "assault", "harassment",
    "race", "racism", "racist", "white supremacy", "antisemit",
)

# Thresholds consumed by downstream action layers
DEFAULT_THRESHOLDS: dict[str, int] = {
    "min_decision_score": 50,
    "min_opportunity_for_safe_variant": 60,
    "max_risk_for_urgency_variant": 70,
    "min_confidence_for_ai": 40,
}


# =============================================================================
# Input Data Structure
# =============================================================================

@dataclass
class DecisionInput:
    """
    Signals describing one trend for decision scoring.

    Attributes:
        entity_name: Name or title of the trending entity/event.
        entity_type: Optional entity category.
        alert_type: Alert category ("trending", "controversy", "opposition", ...).
        velocity: Percent above baseline.
        sentiment: Current sentiment (-1 to 1).
        sentiment_change: Change in sentiment (-2 to 2).
        mentions: Mention volume.
        topics: Topic labels attached to the trend.
        actionable_score: Externally supplied actionability score (0-100).
        relevance: Relevance result for the organization (preferred fit source).
        sources: Source samples that reported the trend.
        age_hours: Hours since detection. Takes precedence over detected_at.
        detected_at: Detection timestamp, aged against the injected "now".
    """
    entity_name: str
    entity_type: Optional[str] = None
    alert_type: str = "trending"
    velocity: Optional[float] = None
    sentiment: Optional[float] = None
    sentiment_change: Optional[float] = None
    mentions: Optional[int] = None
    topics: list[str] = field(default_factory=list)
    actionable_score: Optional[float] = None
    relevance: Optional[RelevanceResult] = None
    sources: list[SourceSample] = field(default_factory=list)
    age_hours: Optional[float] = None
    detected_at: Optional[datetime] = None

    @classmethod
    def from_trend(cls, trend: TrendSignal, relevance: Optional[RelevanceResult] = None) -> "DecisionInput":
        """Build decision input from a trend signal and its relevance result."""
        return cls(
            entity_name=trend.title,
            alert_type=trend.alert_type,
            velocity=trend.velocity,
            sentiment=trend.sentiment,
            sentiment_change=trend.sentiment_change,
            mentions=trend.mentions,
            topics=list(trend.domains) + list(trend.context_terms),
            actionable_score=trend.actionable_score,
            relevance=relevance,
            sources=list(trend.sources),
            detected_at=trend.detected_at,
        )


def as_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime. Naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_age_hours(signal: DecisionInput, now: Optional[datetime] = None) -> Optional[float]:
    """
    Hours since the signal was detected, or None when unknown.

    Naive and aware timestamps may be mixed; naive ones are read as UTC.
    Future timestamps count as zero hours old.
    """
    if signal.age_hours is not None:
        return max(0.0, signal.age_hours)

    if signal.detected_at is None:
        return None

    if now is None:
        now = datetime.now(timezone.utc)

    age = (as_utc(now) - as_utc(signal.detected_at)).total_seconds() / 3600
    return max(0.0, age)


# =============================================================================
# Sub-score Functions
# =============================================================================

def opportunity_points(signal: DecisionInput, age_hours: Optional[float]) -> tuple[float, list[str]]:
    """
    Unrounded opportunity points (capped at 100) and their signals.

    Four independent, individually capped components:

    - velocity above baseline: up to 40 pts
    - mention volume: up to 30 pts
    - sentiment shift: up to 20 pts
    - recency: up to 10 pts
    """
    score = 0.0
    signals: list[str] = []

    velocity = signal.velocity
    if velocity is not None:
        if velocity >= 200:
            score += 40
            signals.append(f"Velocity spike: {velocity:.0f}% above baseline")
        elif velocity >= 100:
            score += 30
            signals.append(f"High velocity: {velocity:.0f}% above baseline")
        elif velocity >= 50:
            score += 20
            signals.append(f"Moderate velocity: {velocity:.0f}% above baseline")
        elif velocity > 0:
            score += 10
            signals.append(f"Trending: {velocity:.0f}% velocity")

    mentions = signal.mentions
    if mentions is not None:
        if mentions >= 1000:
            score += 30
            signals.append(f"High volume: {mentions:,} mentions")
        elif mentions >= 500:
            score += 20
            signals.append(f"Moderate volume: {mentions:,} mentions")
        elif mentions >= 100:
            score += 10
            signals.append(f"Growing: {mentions:,} mentions")

    change = signal.sentiment_change
    if change is not None and abs(change) > 0.2:
        score += min(abs(change) * 40, 20)
        direction = "positive" if change > 0 else "negative"
        signals.append(f"Sentiment shift: {direction} ({change * 100:.0f}%)")

    if age_hours is not None:
        if age_hours <= 2:
            score += 10
            signals.append("Breaking: Less than 2 hours old")
        elif age_hours <= 6:
            score += 7
            signals.append("Fresh: Less than 6 hours old")
        elif age_hours <= 24:
            score += 3

    return min(score, 100.0), signals


def compute_opportunity(signal: DecisionInput, age_hours: Optional[float]) -> tuple[int, list[str]]:
    """Why now? The rounded opportunity sub-score."""
    points, signals = opportunity_points(signal, age_hours)
    return clamp_score(points), signals


def compute_fit(
    signal: DecisionInput,
    profile: Optional[OrganizationProfile],
    interest_topics: Sequence[InterestTopic],
    interest_entities: Sequence[InterestEntity],
) -> tuple[int, list[str]]:
    """
    Why you? Prefers the supplied relevance result.

    The fallback only runs when no relevance result is available; it is a
    simplified text overlap, not a second copy of the relevance weighting.
    """
    if signal.relevance is not None:
        return clamp_score(signal.relevance.score), list(signal.relevance.reasons)

    score = 0
    signals: list[str] = []
    topics = signal.topics
    name = signal.entity_name

    matched_topics = [
        it for it in interest_topics
        if any(text_contains(t, it.topic) or text_contains(it.topic, t) for t in topics)
        or text_contains(name, it.topic)
    ]
    if matched_topics:
        max_weight = max(t.weight for t in matched_topics)
        score += round_half_up(max_weight * 60)
        signals.append(f"Topics: {', '.join(t.topic for t in matched_topics[:3])}")

    allowed = next(
        (e for e in interest_entities
         if e.rule_type == "allow" and entity_matches(e.entity_name, name)),
        None,
    )
    if allowed:
        score += 25
        signals.append(f"Tracked entity: {allowed.entity_name}")

    if profile is not None:
        focus = list(profile.focus_areas) + list(profile.key_issues)
        matched = [
            fa for fa in focus
            if any(text_contains(t, fa) for t in topics) or text_contains(name, fa)
        ]
        if matched:
            score += min(len(matched) * 10, 30)
            signals.append(f"Mission alignment: {', '.join(matched[:2])}")

    return clamp_score(score), signals


def compute_risk(signal: DecisionInput) -> tuple[int, list[str]]:
    """
    Safety level, starting from 85 and deducting for risk factors.

    A sensitive topic deducts once no matter how many keywords hit.
    """
    score = RISK_BASELINE
    flags: list[str] = []

    all_text = " ".join([signal.entity_name] + list(signal.topics)).lower()
    sensitive = next((s for s in SENSITIVE_TOPICS if s in all_text), None)
    if sensitive:
        score -= 15
        flags.append(f"Sensitive topic: {sensitive}")

    if signal.alert_type in CONTROVERSIAL_ALERT_TYPES:
        score -= 10
        flags.append("Controversial alert type")

    if signal.sentiment is not None and signal.sentiment < -0.5:
        score -= 10
        flags.append("Strong negative sentiment")

    if not flags:
        flags.append("No significant risk factors detected")

    return clamp_score(score), flags


def compute_confidence(signal: DecisionInput, age_hours: Optional[float]) -> tuple[int, list[str]]:
    """Signal reliability, starting from a neutral 50."""
    score = CONFIDENCE_BASELINE
    signals: list[str] = []

    if signal.sources:
        source_types = {s.type for s in signal.sources}
        if len(source_types) >= 3:
            score += 25
            signals.append(f"Multi-source: {len(source_types)} source types")
        elif len(source_types) == 2:
            score += 15
            signals.append(f"Confirmed: {len(source_types)} source types")

        total = sum(s.count or 1 for s in signal.sources)
        if total >= 10:
            score += 15
            signals.append(f"Source volume: {total} reports")
        elif total >= 5:
            score += 10
            signals.append(f"Source volume: {total} reports")

    if signal.actionable_score is not None and signal.actionable_score >= 70:
        score += 10
        signals.append(f"High actionable score: {signal.actionable_score:g}")

    if age_hours is not None and age_hours <= 24:
        score += 10
        signals.append("Recent data (< 24h)")

    return clamp_score(score), signals


def compute_composite(opportunity: float, fit: int, risk: int, confidence: int) -> int:
    """
    Weighted composite: opportunity 30%, fit 35%, risk 20%, confidence 15%.

    Opportunity may be passed unrounded so that fractional sentiment-shift
    points are only rounded once, in the composite.
    """
    return clamp_score(
        opportunity * WEIGHT_OPPORTUNITY
        + fit * WEIGHT_FIT
        + risk * WEIGHT_RISK
        + confidence * WEIGHT_CONFIDENCE
    )


def determine_tier(decision_score: int, risk_score: int, confidence_score: int) -> DecisionTier:
    """
    Map scores to an action tier.

    act_now needs all three gates (composite >= 65, risk >= 50,
    confidence >= 40); consider needs composite >= 40 and risk >= 30.
    """
    if (decision_score >= ACT_NOW_MIN_DECISION
            and risk_score >= ACT_NOW_MIN_RISK
            and confidence_score >= ACT_NOW_MIN_CONFIDENCE):
        return DecisionTier.ACT_NOW
    if decision_score >= CONSIDER_MIN_DECISION and risk_score >= CONSIDER_MIN_RISK:
        return DecisionTier.CONSIDER
    return DecisionTier.WATCH


# =============================================================================
# Main Scoring Function
# =============================================================================

def score_decision(
    signal: DecisionInput,
    profile: Optional[OrganizationProfile] = None,
    interest_topics: Optional[Sequence[InterestTopic]] = None,
    interest_entities: Optional[Sequence[InterestEntity]] = None,
    now: Optional[datetime] = None,
) -> DecisionScoreResult:
    """
    Compute decision-grade scores for one trend.

    This is a pure function - it does not modify its inputs.

    Args:
        signal: Decision input (see DecisionInput.from_trend).
        profile: Organization profile, used by the fit fallback.
        interest_topics: Weighted topics, used by the fit fallback.
        interest_entities: Allow/deny entities, used by the fit fallback.
        now: Current time for recency (for testing). Defaults to the current time.

    Returns:
        DecisionScoreResult with sub-scores, composite, tier and signals.
    """
    age_hours = resolve_age_hours(signal, now)

    opportunity_raw, opportunity_signals = opportunity_points(signal, age_hours)
    opportunity = clamp_score(opportunity_raw)
    fit, fit_signals = compute_fit(
        signal, profile, list(interest_topics or []), list(interest_entities or [])
    )
    risk, risk_signals = compute_risk(signal)
    confidence, confidence_signals = compute_confidence(signal, age_hours)

    decision = compute_composite(opportunity_raw, fit, risk, confidence)

    return DecisionScoreResult(
        opportunity_score=opportunity,
        fit_score=fit,
        risk_score=risk,
        confidence_score=confidence,
        decision_score=decision,
        tier=determine_tier(decision, risk, confidence),
        signals={
            "opportunity": opportunity_signals,
            "fit": fit_signals,
            "risk": risk_signals,
            "confidence": confidence_signals,
        },
    )
