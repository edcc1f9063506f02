"""
Tests for per-organization relevance scoring.

Validates per-factor caps, flags, reason strings, priority buckets,
bounds and determinism.
"""

import copy
import pytest

from relevance_engine.models import (
    GeoLevel,
    InterestEntity,
    OrganizationProfile,
    PriorityBucket,
    RelevanceFlag,
    TopicAffinity,
    TrendSignal,
    WatchlistEntity,
)
from relevance_engine.scoring.domains import POLICY_DOMAINS
from relevance_engine.scoring.relevance import (
    AFFINITY_POINTS_CAP,
    AlertPreferences,
    compute_affinity_points,
    find_blocking_entity,
    partition_blocked,
    passes_thresholds,
    priority_for_score,
    score_relevance,
    score_trends,
)
from tests.test_config import EXPECTED, MESSAGES


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def healthcare_trend():
    return TrendSignal(id="t-health", title="Hospital closures spread", domains=("Healthcare",))


@pytest.fixture
def two_domain_profile():
    return OrganizationProfile(organization_id="org-1", policy_domains=["Healthcare", "Education"])


# =============================================================================
# Scenarios
# =============================================================================

@pytest.mark.scoring
class TestScenarios:
    """End-to-end scoring scenarios."""

    def test_clean_domain_match(self, healthcare_trend, two_domain_profile):
        """
        GIVEN: A trend tagged Healthcare and an org declaring Healthcare and Education
        WHEN: The trend is scored with no watchlist or affinity data
        THEN: Score is 12 with exactly one policy domain reason
        """
        result = score_relevance(healthcare_trend, two_domain_profile)

        assert result.score == EXPECTED["relevance"]["clean_match_score"]
        assert result.reasons == ["Policy domain match: Healthcare (+12 pts)"]
        assert result.flags == frozenset()
        assert result.matched_domains == ["Healthcare"]
        assert result.priority == PriorityBucket.LOW

    def test_exploration_bonus_for_unused_declared_domain(self):
        """
        GIVEN: An org declaring Environment with zero prior uses of it
        WHEN: A trend tagged Environment is scored
        THEN: NEW_OPPORTUNITY is set and 10 points are added to the 12-point match
        """
        trend = TrendSignal(id="t-env", title="Wildfire smoke alerts", domains=("Environment",))
        profile = OrganizationProfile(policy_domains=["Environment"])
        affinities = [TopicAffinity(topic="Environment", affinity_score=0.0, times_used=0)]

        result = score_relevance(trend, profile, affinities=affinities)

        assert result.score == EXPECTED["relevance"]["exploration_score"]
        assert result.has_flag(RelevanceFlag.NEW_OPPORTUNITY)
        assert result.reasons == [
            "Policy domain match: Environment (+12 pts)",
            "New opportunity: Environment declared but rarely used (+10 pts)",
        ]

    def test_exploration_bonus_when_history_is_elsewhere(self):
        """An org with history only in other topics gets the bonus for an untried domain."""
        trend = TrendSignal(id="t-env", title="Wildfire smoke alerts", domains=("Environment",))
        profile = OrganizationProfile(policy_domains=["Environment", "Healthcare"])
        affinities = [TopicAffinity(topic="Healthcare", affinity_score=0.8, times_used=9)]

        result = score_relevance(trend, profile, affinities=affinities)

        assert result.score == 22
        assert result.has_flag(RelevanceFlag.NEW_OPPORTUNITY)

    def test_no_exploration_bonus_for_well_used_domain(self):
        trend = TrendSignal(id="t-env", title="Wildfire smoke alerts", domains=("Environment",))
        profile = OrganizationProfile(policy_domains=["Environment"])
        affinities = [TopicAffinity(topic="Environment", affinity_score=0.0, times_used=2)]

        result = score_relevance(trend, profile, affinities=affinities)

        assert result.score == 12
        assert not result.has_flag(RelevanceFlag.NEW_OPPORTUNITY)

    def test_no_declared_interests_matched(self):
        trend = TrendSignal(id="t1", title="Local bake sale", domains=("Technology",))
        profile = OrganizationProfile(policy_domains=["Healthcare"])

        result = score_relevance(trend, profile)

        assert result.score == 0
        assert result.reasons == [MESSAGES["no_match_reason"]]
        assert result.priority == PriorityBucket.LOW

    def test_missing_profile_scores_zero(self, healthcare_trend):
        assert score_relevance(healthcare_trend, None).score == 0


# =============================================================================
# Factor Tests
# =============================================================================

@pytest.mark.scoring
class TestFactorCaps:
    """Each factor is capped independently."""

    def test_domain_points_capped_at_35(self):
        domains = ("Healthcare", "Education", "Housing", "Environment")
        trend = TrendSignal(id="t1", title="Omnibus bill", domains=domains)
        profile = OrganizationProfile(policy_domains=list(domains))

        result = score_relevance(trend, profile)

        assert result.score == 35
        assert result.reasons[0].endswith("(+35 pts)")

    def test_domain_match_is_case_insensitive(self):
        trend = TrendSignal(id="t1", title="x", domains=("healthcare",))
        profile = OrganizationProfile(policy_domains=["Healthcare"])

        assert score_relevance(trend, profile).matched_domains == ["Healthcare"]

    def test_focus_area_points_capped_at_20(self):
        trend = TrendSignal(
            id="t1",
            title="Rural health clinics and hospital mergers",
            context_terms=("medicaid",),
        )
        profile = OrganizationProfile(focus_areas=["hospital", "rural health", "medicaid"])

        result = score_relevance(trend, profile)

        assert result.score == 20
        assert result.reasons == ["Focus area match: hospital, rural health, medicaid (+20 pts)"]

    def test_watchlist_uses_word_boundaries(self):
        trend = TrendSignal(
            id="t1",
            title="Sentencing reform hearing",
            politicians=("Warren",),
            context_terms=("criminal justice",),
        )
        watchlist = [
            WatchlistEntity(name="Elizabeth Warren", entity_type="politician"),
            WatchlistEntity(name="ICE", entity_type="agency"),
        ]

        result = score_relevance(trend, OrganizationProfile(), watchlist=watchlist)

        assert result.score == 8
        assert result.matched_watchlist == ["Elizabeth Warren"]
        assert result.has_flag(RelevanceFlag.WATCHLIST_MATCH)

    def test_watchlist_capped_at_15_and_inactive_ignored(self):
        trend = TrendSignal(
            id="t1",
            title="Coalition letter",
            organizations=("AFL-CIO", "SEIU", "Sierra Club"),
        )
        watchlist = [
            WatchlistEntity(name="AFL-CIO"),
            WatchlistEntity(name="SEIU"),
            WatchlistEntity(name="Sierra Club", is_active=False),
        ]

        result = score_relevance(trend, OrganizationProfile(), watchlist=watchlist)

        assert result.score == 15
        assert result.matched_watchlist == ["AFL-CIO", "SEIU"]

    def test_affinity_uses_average_not_max(self):
        trend = TrendSignal(id="t1", title="x", domains=("Healthcare", "Education"))
        affinities = [
            TopicAffinity(topic="Healthcare", affinity_score=1.0, times_used=5),
            TopicAffinity(topic="Education", affinity_score=0.2, times_used=5),
        ]

        result = score_relevance(trend, OrganizationProfile(), affinities=affinities)

        # avg 0.6 * 25 = 15; a max-based score would be 20
        assert result.score == 15
        assert result.has_flag(RelevanceFlag.PROVEN_TOPIC)
        assert result.reasons == ["Learned affinity: Healthcare, Education (+15 pts)"]

    def test_affinity_matches_context_terms(self):
        trend = TrendSignal(id="t1", title="x", context_terms=("climate change policy",))
        affinities = [TopicAffinity(topic="climate change", affinity_score=0.4, times_used=1)]

        result = score_relevance(trend, OrganizationProfile(), affinities=affinities)

        assert result.score == 10
        assert not result.has_flag(RelevanceFlag.PROVEN_TOPIC)

    def test_compute_affinity_points_capped(self):
        matched = [TopicAffinity(topic="A", affinity_score=1.0)]
        assert compute_affinity_points(matched) == AFFINITY_POINTS_CAP
        assert compute_affinity_points([]) == 0

    def test_history_cannot_outweigh_declared_intent(self):
        """
        GIVEN: Affinity 1.0 on every topic and no declared domains
        WHEN: A multi-domain trend is scored
        THEN: Affinity plus exploration contribute at most 20 points
        """
        affinities = [
            TopicAffinity(topic=d, affinity_score=1.0, times_used=i % 3)
            for i, d in enumerate(POLICY_DOMAINS)
        ]
        trend = TrendSignal(id="t1", title="x", domains=("Healthcare", "Education", "Housing"))

        result = score_relevance(trend, OrganizationProfile(policy_domains=[]), affinities=affinities)

        assert result.score <= EXPECTED["relevance"]["affinity_ceiling"]
        assert not result.has_flag(RelevanceFlag.NEW_OPPORTUNITY)


@pytest.mark.scoring
class TestModifiers:
    """Geography and breaking news modifiers."""

    def test_geography_overlap(self):
        trend = TrendSignal(id="t1", title="x", geographies=("tx",), geo_level=GeoLevel.STATE)
        profile = OrganizationProfile(geographies=["TX"])

        result = score_relevance(trend, profile)

        assert result.score == 5
        assert result.reasons == ["Geographic relevance: TX (+5 pts)"]

    def test_national_scope_override(self):
        trend = TrendSignal(id="t1", title="x", geo_level=GeoLevel.NATIONAL)
        profile = OrganizationProfile(geo_sensitivity=GeoLevel.NATIONAL)

        assert score_relevance(trend, profile).score == 5

    def test_national_trend_without_override_gets_nothing(self):
        trend = TrendSignal(id="t1", title="x", geo_level=GeoLevel.NATIONAL)
        assert score_relevance(trend, OrganizationProfile()).score == 0

    def test_breaking_bonus_for_relevant_trend(self):
        trend = TrendSignal(id="t1", title="x", domains=("Healthcare", "Education"), is_breaking=True)
        profile = OrganizationProfile(policy_domains=["Healthcare", "Education"])

        result = score_relevance(trend, profile)

        assert result.score == 29
        assert result.has_flag(RelevanceFlag.BREAKING)
        assert result.reasons[-1] == "Breaking news (+5 pts)"

    def test_breaking_ignored_below_running_threshold(self, two_domain_profile):
        trend = TrendSignal(id="t1", title="x", domains=("Healthcare",), is_breaking=True)

        result = score_relevance(trend, two_domain_profile)

        assert result.score == 12
        assert not result.has_flag(RelevanceFlag.BREAKING)


@pytest.mark.scoring
class TestBoundsAndDeterminism:
    """Scores stay in range and never depend on hidden state."""

    def test_score_clamped_to_100(self):
        trend = TrendSignal(
            id="t1",
            title="Rural hospital medicaid cuts",
            domains=("Healthcare", "Education", "Housing"),
            geographies=("OH",),
            politicians=("Elizabeth Warren", "Sherrod Brown"),
            is_breaking=True,
        )
        profile = OrganizationProfile(
            focus_areas=["rural hospital", "medicaid"],
            policy_domains=["Healthcare", "Education", "Housing"],
            geographies=["OH"],
        )
        watchlist = [WatchlistEntity(name="Warren"), WatchlistEntity(name="Sherrod Brown")]
        affinities = [TopicAffinity(topic="Healthcare", affinity_score=1.0, times_used=0)]

        result = score_relevance(trend, profile, watchlist, affinities)

        assert result.score == 100
        assert result.priority == PriorityBucket.HIGH
        assert len(result.reasons) == 7

    def test_identical_inputs_identical_outputs(self, healthcare_trend, two_domain_profile):
        first = score_relevance(healthcare_trend, two_domain_profile)
        second = score_relevance(healthcare_trend, two_domain_profile)
        assert first.to_dict() == second.to_dict()

    def test_inputs_not_mutated(self, healthcare_trend, two_domain_profile):
        before = copy.deepcopy(two_domain_profile)
        score_relevance(healthcare_trend, two_domain_profile)
        assert two_domain_profile == before

    @pytest.mark.parametrize("score,bucket", [
        (0, PriorityBucket.LOW),
        (29, PriorityBucket.LOW),
        (30, PriorityBucket.MEDIUM),
        (54, PriorityBucket.MEDIUM),
        (55, PriorityBucket.HIGH),
        (100, PriorityBucket.HIGH),
    ])
    def test_priority_buckets(self, score, bucket):
        assert priority_for_score(score) == bucket

    def test_score_trends_preserves_order(self, two_domain_profile):
        trends = [
            TrendSignal(id="a", title="x"),
            TrendSignal(id="b", title="y", domains=("Healthcare",)),
        ]
        scored = score_trends(trends, two_domain_profile)
        assert [st.id for st in scored] == ["a", "b"]
        assert [st.score for st in scored] == [0, 12]


class TestAlertThresholds:
    """Tests for the alert threshold gate."""

    def test_no_preferences_passes(self):
        assert passes_thresholds(10, 10, None) == (True, None)

    def test_relevance_below_threshold(self):
        passes, reason = passes_thresholds(15, 80, AlertPreferences(min_relevance_score=20))
        assert not passes
        assert reason == "Relevance score 15 below threshold 20"

    def test_urgency_below_threshold(self):
        prefs = AlertPreferences(min_relevance_score=10, min_urgency_score=50)
        passes, reason = passes_thresholds(40, 30, prefs)
        assert not passes
        assert reason == "Urgency score 30 below threshold 50"

    def test_both_above_threshold(self):
        prefs = AlertPreferences(min_relevance_score=10, min_urgency_score=50)
        assert passes_thresholds(40, 60, prefs) == (True, None)


class TestDenyList:
    """Deny-listed entities hard-block a trend for the organization."""

    @pytest.fixture
    def entities(self):
        return [
            InterestEntity(entity_name="Elizabeth Warren", rule_type="allow"),
            InterestEntity(entity_name="ICE", rule_type="deny", reason="coalition policy"),
            InterestEntity(entity_name="Acme Health", rule_type="deny"),
        ]

    def test_title_match_blocks(self, entities):
        trend = TrendSignal(id="t1", title="ICE raids spark protests")

        entity = find_blocking_entity(trend, entities)

        assert entity.entity_name == "ICE"

    def test_mentioned_entity_blocks(self, entities):
        trend = TrendSignal(id="t1", title="Insurer merger approved", organizations=("Acme Health Inc",))
        assert find_blocking_entity(trend, entities).entity_name == "Acme Health"

    def test_word_boundaries_respected(self, entities):
        trend = TrendSignal(id="t1", title="Justice department reviews merger")
        assert find_blocking_entity(trend, entities) is None

    def test_allow_rules_never_block(self, entities):
        trend = TrendSignal(id="t1", title="Elizabeth Warren unveils plan", politicians=("Elizabeth Warren",))
        assert find_blocking_entity(trend, entities) is None

    def test_no_entities(self):
        assert find_blocking_entity(TrendSignal(id="t1", title="ICE raids"), None) is None

    def test_partition_keeps_order_and_reasons(self, entities):
        """
        GIVEN: Three trends, two naming deny-listed entities
        WHEN: The batch is partitioned
        THEN: Allowed and blocked keep input order and blocked carry the reason
        """
        trends = [
            TrendSignal(id="a", title="ICE raids spark protests"),
            TrendSignal(id="b", title="School budgets cut"),
            TrendSignal(id="c", title="Acme Health layoffs"),
        ]

        allowed, blocked = partition_blocked(trends, entities)

        assert [t.id for t in allowed] == ["b"]
        assert [b.trend.id for b in blocked] == ["a", "c"]
        assert blocked[0].reason == 'Blocked: "ICE" is on deny list (coalition policy)'
        assert blocked[1].reason == 'Blocked: "Acme Health" is on deny list'
        assert blocked[1].to_dict() == {
            "trend_id": "c",
            "title": "Acme Health layoffs",
            "entity_name": "Acme Health",
            "reason": 'Blocked: "Acme Health" is on deny list',
        }
