"""
Diversity metrics for a final selection.

Pure aggregation used by reports and audit tooling to check that a
selection did not collapse onto a few domains.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Optional, Sequence

from relevance_engine.models.results import RelevanceFlag, ScoredTrend, clamp_score
from relevance_engine.scoring.matching import label_key, same_label


COVERAGE_WEIGHT: float = 0.5
EXPLORATION_WEIGHT: float = 0.2
BALANCE_WEIGHT: float = 0.3

# Exploration ratio at which the exploration component is saturated
TARGET_EXPLORATION_RATIO: float = 0.2


@dataclass
class DiversityMetrics:
    """Aggregate diversity statistics for one selection."""
    total_trends: int = 0
    unique_domains: int = 0
    domains_represented: list[str] = field(default_factory=list)
    domains_missing: list[str] = field(default_factory=list)
    new_opportunity_count: int = 0
    proven_topic_count: int = 0
    diversity_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _unique_labels(labels: Sequence[str]) -> list[str]:
    unique: list[str] = []
    for label in labels:
        if label and not any(same_label(label, u) for u in unique):
            unique.append(label)
    return unique


def coverage_ratio(represented: int, declared: int) -> float:
    """Share of declared domains represented; 1.0 when nothing is declared."""
    if declared == 0:
        return 1.0
    return represented / declared


def balance_score(per_domain_counts: Sequence[int]) -> float:
    """
    Evenness of per-domain counts: 1 is perfectly even, 0 total imbalance.

    1.0 when there are no declared domains; 0.0 when no domain has any trend.
    """
    if not per_domain_counts:
        return 1.0
    highest = max(per_domain_counts)
    if highest == 0:
        return 0.0
    return 1 - (highest - min(per_domain_counts)) / highest


def compute_diversity_metrics(
    selected: Sequence[ScoredTrend],
    declared_domains: Optional[Sequence[str]],
) -> DiversityMetrics:
    """
    Audit a final selection against the organization's declared domains.

    Args:
        selected: The selector output.
        declared_domains: The organization's declared policy domains.

    Returns:
        DiversityMetrics. An empty selection yields zeroed counts.
    """
    declared = _unique_labels(declared_domains or [])

    domain_counter: Counter = Counter()
    for scored in selected:
        keys = {label_key(d) for d in scored.trend.domains}
        keys.discard("")
        for key in keys:
            domain_counter[key] += 1

    per_domain = [domain_counter[label_key(d)] for d in declared]
    represented = [d for d, n in zip(declared, per_domain) if n > 0]
    missing = [d for d, n in zip(declared, per_domain) if n == 0]

    total = len(selected)
    new_opportunities = sum(1 for st in selected if st.has_flag(RelevanceFlag.NEW_OPPORTUNITY))
    proven = sum(1 for st in selected if st.has_flag(RelevanceFlag.PROVEN_TOPIC))

    exploration_ratio = new_opportunities / total if total else 0.0
    exploration_component = min(exploration_ratio / TARGET_EXPLORATION_RATIO, 1.0)

    score = 100 * (
        coverage_ratio(len(represented), len(declared)) * COVERAGE_WEIGHT
        + exploration_component * EXPLORATION_WEIGHT
        + balance_score(per_domain) * BALANCE_WEIGHT
    )

    return DiversityMetrics(
        total_trends=total,
        unique_domains=len(domain_counter),
        domains_represented=represented,
        domains_missing=missing,
        new_opportunity_count=new_opportunities,
        proven_topic_count=proven,
        diversity_score=clamp_score(score),
    )
