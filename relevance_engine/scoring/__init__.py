"""
Scoring module.

Relevance scoring, decision-grade scoring and policy domain classification.
"""

from relevance_engine.scoring.domains import (
    POLICY_DOMAINS,
    POLICY_DOMAIN_KEYWORDS,
    GENERIC_THREAT_INDICATORS,
    matches_domain,
    match_domains,
    detect_threats,
    get_all_keywords,
)

from relevance_engine.scoring.relevance import (
    AlertPreferences,
    BlockedTrend,
    find_blocking_entity,
    partition_blocked,
    passes_thresholds,
    priority_for_score,
    score_relevance,
    score_trends,
)

from relevance_engine.scoring.decision import (
    DEFAULT_THRESHOLDS,
    DecisionInput,
    determine_tier,
    score_decision,
)

from relevance_engine.scoring.org_types import (
    ORG_TYPES,
    default_topics_for_org_type,
)

__all__ = [
    # Domain configuration
    "POLICY_DOMAINS",
    "POLICY_DOMAIN_KEYWORDS",
    "GENERIC_THREAT_INDICATORS",
    "matches_domain",
    "match_domains",
    "detect_threats",
    "get_all_keywords",
    # Relevance
    "AlertPreferences",
    "BlockedTrend",
    "find_blocking_entity",
    "partition_blocked",
    "passes_thresholds",
    "priority_for_score",
    "score_relevance",
    "score_trends",
    # Decision
    "DEFAULT_THRESHOLDS",
    "DecisionInput",
    "determine_tier",
    "score_decision",
    # Organization types
    "ORG_TYPES",
    "default_topics_for_org_type",
]
