"""
Per-organization relevance scoring.

Computes a 0-100 fit score between one trend signal and one organization.
Each factor has its own cap, so no single factor can dominate:

    Policy domain overlap   up to 35 pts
    Focus area text match   up to 20 pts
    Watchlist entities      up to 15 pts
    Learned affinity        up to 20 pts
    Exploration bonus       flat 10 pts
    Geography               +5 pts
    Breaking news           +5 pts (only once already relevant)

Learned affinity is capped well below the declared-profile factors so that
campaign history never outweighs what the organization says it cares about.
The exploration bonus pushes back against the feedback loop that would
otherwise bury declared interests the organization has never acted on.

All functions are pure and deterministic.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from relevance_engine.models.organization import (
    InterestEntity,
    OrganizationProfile,
    TopicAffinity,
    WatchlistEntity,
)
from relevance_engine.models.results import (
    PriorityBucket,
    RelevanceFlag,
    RelevanceResult,
    ScoredTrend,
    clamp_score,
    round_half_up,
)
from relevance_engine.models.trend import GeoLevel, TrendSignal
from relevance_engine.scoring.matching import entity_matches, same_label, text_contains


# =============================================================================
# Scoring Configuration
# =============================================================================

DOMAIN_POINTS_EACH: int = 12
DOMAIN_POINTS_CAP: int = 35

FOCUS_POINTS_EACH: int = 10
FOCUS_POINTS_CAP: int = 20

WATCHLIST_POINTS_EACH: int = 8
WATCHLIST_POINTS_CAP: int = 15

AFFINITY_MULTIPLIER: int = 25
AFFINITY_POINTS_CAP: int = 20

EXPLORATION_BONUS: int = 10
GEOGRAPHY_BONUS: int = 5

BREAKING_BONUS: int = 5
# Breaking news only boosts trends that are already this relevant
BREAKING_MIN_RUNNING_SCORE: int = 20

HIGH_PRIORITY_MIN: int = 55
MEDIUM_PRIORITY_MIN: int = 30

NO_MATCH_REASON = "No declared interests matched"


# =============================================================================
# Factor Functions
# =============================================================================

def match_policy_domains(trend: TrendSignal, profile: OrganizationProfile) -> list[str]:
    """
    Declared domains the trend is tagged with.

    Comparison is case-insensitive and exact. Results use the organization's
    spelling, in declaration order, without duplicates.
    """
    matched = []
    for declared in profile.policy_domains:
        if any(same_label(declared, d) for d in trend.domains):
            if not any(same_label(declared, m) for m in matched):
                matched.append(declared)
    return matched


def match_focus_areas(trend: TrendSignal, profile: OrganizationProfile) -> list[str]:
    """Focus areas found as substrings of the trend title or context terms."""
    text = trend.searchable_text
    return [fa for fa in profile.focus_areas if text_contains(text, fa)]


def match_watchlist(trend: TrendSignal, watchlist: Sequence[WatchlistEntity]) -> list[str]:
    """
    Active watchlist names matching anything the trend mentions.

    Matching is bidirectional on word boundaries, against politicians,
    organizations, legislation and context terms.
    """
    candidates = trend.mentioned_entities + trend.context_terms
    matched = []
    for entity in watchlist:
        if not entity.is_active:
            continue
        if any(entity_matches(entity.name, c) for c in candidates):
            matched.append(entity.name)
    return matched


def match_affinities(trend: TrendSignal, affinities: Sequence[TopicAffinity]) -> list[TopicAffinity]:
    """Affinities whose topic is a trend domain or appears inside a context term."""
    matched = []
    for affinity in affinities:
        if any(same_label(affinity.topic, d) for d in trend.domains):
            matched.append(affinity)
        elif any(text_contains(term, affinity.topic) for term in trend.context_terms):
            matched.append(affinity)
    return matched


def compute_affinity_points(matched: Sequence[TopicAffinity]) -> int:
    """
    Points from learned affinity.

    Uses the average affinity of all matches, not the maximum: a single
    historically strong topic must not swamp the score.
    """
    if not matched:
        return 0
    avg = sum(a.affinity_score for a in matched) / len(matched)
    return min(round_half_up(avg * AFFINITY_MULTIPLIER), AFFINITY_POINTS_CAP)


def times_used(topic: str, affinities: Sequence[TopicAffinity]) -> int:
    """Historical uses of a topic (zero when there is no affinity record)."""
    uses = [a.times_used for a in affinities if same_label(a.topic, topic)]
    return max(uses) if uses else 0


def find_untried_domains(matched_domains: Sequence[str], affinities: Sequence[TopicAffinity]) -> list[str]:
    """
    Overlapping domains the organization has declared but rarely used.

    Only meaningful once there is a learning history: with no affinity
    records at all there is no feedback loop to counteract, so nothing
    qualifies.
    """
    if not affinities:
        return []
    return [d for d in matched_domains if times_used(d, affinities) < 2]


def geography_matches(trend: TrendSignal, profile: OrganizationProfile) -> Optional[str]:
    """
    Describe the geography match, or None when there is none.

    Matches when declared geographies overlap the trend's, or when the
    trend is national and the organization asked for national scope.
    """
    overlap = [g for g in profile.geographies if any(same_label(g, t) for t in trend.geographies)]
    if overlap:
        return ", ".join(overlap)
    if trend.geo_level == GeoLevel.NATIONAL and profile.geo_sensitivity == GeoLevel.NATIONAL:
        return "national scope"
    return None


def priority_for_score(score: int) -> PriorityBucket:
    """Bucket a relevance score: >=55 high, >=30 medium, else low."""
    if score >= HIGH_PRIORITY_MIN:
        return PriorityBucket.HIGH
    if score >= MEDIUM_PRIORITY_MIN:
        return PriorityBucket.MEDIUM
    return PriorityBucket.LOW


# =============================================================================
# Main Scoring Function
# =============================================================================

def score_relevance(
    trend: TrendSignal,
    profile: Optional[OrganizationProfile],
    watchlist: Optional[Sequence[WatchlistEntity]] = None,
    affinities: Optional[Sequence[TopicAffinity]] = None,
) -> RelevanceResult:
    """
    Score how relevant a trend is to one organization.

    Missing profile fields, an empty watchlist or no affinities simply
    contribute nothing. Every contributing factor appends one reason string
    with its point delta, in the order the factors are evaluated.

    This is a pure function - it does not modify its inputs.

    Args:
        trend: The trend signal to score.
        profile: Declared interests of the organization.
        watchlist: Entities the organization tracks.
        affinities: Learned topic affinities.

    Returns:
        RelevanceResult with score (0-100), reasons, flags and matches.

    Example:
        >>> trend = TrendSignal(id="t1", title="Hospital closures", domains=("Healthcare",))
        >>> profile = OrganizationProfile(policy_domains=["Healthcare", "Education"])
        >>> score_relevance(trend, profile).score
        12
    """
    profile = profile or OrganizationProfile()
    watchlist = list(watchlist or [])
    affinities = list(affinities or [])

    score = 0
    reasons: list[str] = []
    flags: set = set()

    # 1. Policy domain overlap
    matched_domains = match_policy_domains(trend, profile)
    if matched_domains:
        points = min(len(matched_domains) * DOMAIN_POINTS_EACH, DOMAIN_POINTS_CAP)
        score += points
        reasons.append(f"Policy domain match: {', '.join(matched_domains)} (+{points} pts)")

    # 2. Focus areas
    matched_focus = match_focus_areas(trend, profile)
    if matched_focus:
        points = min(len(matched_focus) * FOCUS_POINTS_EACH, FOCUS_POINTS_CAP)
        score += points
        reasons.append(f"Focus area match: {', '.join(matched_focus)} (+{points} pts)")

    # 3. Watchlist
    matched_watchlist = match_watchlist(trend, watchlist)
    if matched_watchlist:
        points = min(len(matched_watchlist) * WATCHLIST_POINTS_EACH, WATCHLIST_POINTS_CAP)
        score += points
        flags.add(RelevanceFlag.WATCHLIST_MATCH)
        reasons.append(f"Watchlist match: {', '.join(matched_watchlist)} (+{points} pts)")

    # 4. Learned affinity
    matched_affinities = match_affinities(trend, affinities)
    affinity_points = compute_affinity_points(matched_affinities)
    if affinity_points > 0:
        score += affinity_points
        topics = ", ".join(a.topic for a in matched_affinities)
        reasons.append(f"Learned affinity: {topics} (+{affinity_points} pts)")
    if any(a.is_proven for a in matched_affinities):
        flags.add(RelevanceFlag.PROVEN_TOPIC)

    # 5. Exploration bonus
    untried = find_untried_domains(matched_domains, affinities)
    if untried:
        score += EXPLORATION_BONUS
        flags.add(RelevanceFlag.NEW_OPPORTUNITY)
        reasons.append(
            f"New opportunity: {', '.join(untried)} declared but rarely used (+{EXPLORATION_BONUS} pts)"
        )

    # 6. Geography
    geo_match = geography_matches(trend, profile)
    if geo_match:
        score += GEOGRAPHY_BONUS
        reasons.append(f"Geographic relevance: {geo_match} (+{GEOGRAPHY_BONUS} pts)")

    # 7. Breaking news, only for trends that are already relevant
    if trend.is_breaking and score >= BREAKING_MIN_RUNNING_SCORE:
        score += BREAKING_BONUS
        flags.add(RelevanceFlag.BREAKING)
        reasons.append(f"Breaking news (+{BREAKING_BONUS} pts)")

    final_score = clamp_score(score)

    if not reasons:
        reasons.append(NO_MATCH_REASON)

    return RelevanceResult(
        score=final_score,
        reasons=reasons,
        flags=frozenset(flags),
        matched_domains=matched_domains,
        matched_watchlist=matched_watchlist,
        priority=priority_for_score(final_score),
    )


def score_trends(
    trends: Sequence[TrendSignal],
    profile: Optional[OrganizationProfile],
    watchlist: Optional[Sequence[WatchlistEntity]] = None,
    affinities: Optional[Sequence[TopicAffinity]] = None,
) -> list[ScoredTrend]:
    """
    Score a batch of trends for one organization, preserving input order.
    """
    return [
        ScoredTrend(trend=trend, relevance=score_relevance(trend, profile, watchlist, affinities))
        for trend in trends
    ]


# =============================================================================
# Threshold Filtering
# =============================================================================

@dataclass
class AlertPreferences:
    """Minimum scores an organization wants before it is alerted."""
    min_relevance_score: int = 0
    min_urgency_score: int = 0


def passes_thresholds(
    relevance_score: float,
    urgency_score: float,
    preferences: Optional[AlertPreferences],
) -> tuple[bool, Optional[str]]:
    """
    Check a trend against an organization's alert thresholds.

    Returns:
        (passes, reason) where reason explains a failure and is None otherwise.
    """
    if preferences is None:
        return True, None

    if relevance_score < preferences.min_relevance_score:
        return False, (
            f"Relevance score {relevance_score} below threshold {preferences.min_relevance_score}"
        )

    if urgency_score < preferences.min_urgency_score:
        return False, (
            f"Urgency score {urgency_score} below threshold {preferences.min_urgency_score}"
        )

    return True, None


# =============================================================================
# Deny List
# =============================================================================

@dataclass(frozen=True)
class BlockedTrend:
    """A trend excluded for an organization because it names a deny-listed entity."""
    trend: TrendSignal
    entity: InterestEntity

    @property
    def reason(self) -> str:
        reason = f'Blocked: "{self.entity.entity_name}" is on deny list'
        if self.entity.reason:
            reason += f" ({self.entity.reason})"
        return reason

    def to_dict(self) -> dict:
        return {
            "trend_id": self.trend.id,
            "title": self.trend.title,
            "entity_name": self.entity.entity_name,
            "reason": self.reason,
        }


def find_blocking_entity(
    trend: TrendSignal,
    interest_entities: Optional[Sequence[InterestEntity]],
) -> Optional[InterestEntity]:
    """
    First deny-listed entity named by the trend, or None.

    The title and every mentioned entity are checked on word boundaries,
    so a deny rule for "ICE" does not block a trend about "justice".
    """
    for entity in interest_entities or []:
        if entity.rule_type != "deny":
            continue
        if entity_matches(entity.entity_name, trend.title):
            return entity
        if any(entity_matches(entity.entity_name, m) for m in trend.mentioned_entities):
            return entity
    return None


def partition_blocked(
    trends: Sequence[TrendSignal],
    interest_entities: Optional[Sequence[InterestEntity]],
) -> tuple[list[TrendSignal], list[BlockedTrend]]:
    """
    Split a batch into allowed trends and deny-listed ones.

    Both lists keep input order. Blocked trends are a hard exclusion: they
    are never decision-scored or selected.
    """
    allowed: list[TrendSignal] = []
    blocked: list[BlockedTrend] = []
    for trend in trends:
        entity = find_blocking_entity(trend, interest_entities)
        if entity is None:
            allowed.append(trend)
        else:
            blocked.append(BlockedTrend(trend=trend, entity=entity))
    return allowed, blocked
