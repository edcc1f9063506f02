"""
Diversity-constrained trend selection.

A pure top-K by score collapses onto one or two dominant domains. The
selector prevents that by running an ordered chain of strategies before
the greedy fill:

    1. breaking     - up to 3 breaking trends scoring >= 40 (if enabled)
    2. coverage     - the best trend for each declared domain not yet covered
    3. exploration  - up to floor(max_count * 0.2) new-opportunity trends (if enabled)
    4. fill         - remaining slots by descending score

The output is finally stable-sorted by score descending.
"""

import math
from dataclasses import dataclass, field
from typing import Optional, Sequence

from relevance_engine.models.organization import OrganizationProfile
from relevance_engine.models.results import ScoredTrend
from relevance_engine.selection.strategies import (
    BreakingNewsStrategy,
    DomainCoverageStrategy,
    ExplorationStrategy,
    FillStrategy,
    SelectionState,
    SelectionStrategy,
)


@dataclass
class SelectorConfig:
    """Configuration for the diversity selector."""
    enable_breaking: bool = True
    breaking_max_items: int = 3
    breaking_min_score: int = 40
    enable_exploration: bool = True
    exploration_ratio: float = 0.2

    @classmethod
    def from_settings(cls) -> "SelectorConfig":
        """Build a selector config from the current environment settings."""
        from relevance_engine.config import config as settings

        return cls(
            enable_breaking=settings.ENABLE_BREAKING_CARVEOUT,
            breaking_max_items=settings.BREAKING_MAX_ITEMS,
            breaking_min_score=settings.BREAKING_MIN_SCORE,
            enable_exploration=settings.ENABLE_EXPLORATION,
            exploration_ratio=settings.EXPLORATION_RATIO,
        )


@dataclass
class SelectionResult:
    """Selected trends plus what the selector could not satisfy."""
    selected: list[ScoredTrend] = field(default_factory=list)
    uncovered_domains: list[str] = field(default_factory=list)
    phase_counts: dict[str, int] = field(default_factory=dict)

    @property
    def ids(self) -> list[str]:
        return [st.id for st in self.selected]

    def to_dict(self) -> dict:
        return {
            "selected": [st.to_dict() for st in self.selected],
            "uncovered_domains": list(self.uncovered_domains),
            "phase_counts": dict(self.phase_counts),
        }


def dedupe_by_id(scored_trends: Sequence[ScoredTrend]) -> list[ScoredTrend]:
    """Drop repeated trend ids, keeping the first occurrence."""
    seen: set[str] = set()
    unique = []
    for scored in scored_trends:
        if scored.id in seen:
            continue
        seen.add(scored.id)
        unique.append(scored)
    return unique


def rank_by_score(scored_trends: Sequence[ScoredTrend]) -> list[ScoredTrend]:
    """Sort by score descending; ties keep input order."""
    return sorted(scored_trends, key=lambda st: st.score, reverse=True)


class DiversitySelector:
    """
    Runs the selection strategy chain for one organization.

    Example:
        >>> selector = DiversitySelector(SelectorConfig(enable_breaking=False))
        >>> result = selector.select(scored, profile, max_count=10)
        >>> result.uncovered_domains
        ['Housing']
    """

    def __init__(self, config: Optional[SelectorConfig] = None):
        self.config = config or SelectorConfig()

    def exploration_quota(self, max_count: int) -> int:
        return int(math.floor(max_count * self.config.exploration_ratio))

    def build_chain(self, profile: Optional[OrganizationProfile], max_count: int) -> list[SelectionStrategy]:
        """Build the ordered list of strategies for one run."""
        declared = list(profile.policy_domains) if profile else []

        chain: list[SelectionStrategy] = []
        if self.config.enable_breaking:
            chain.append(BreakingNewsStrategy(
                max_items=self.config.breaking_max_items,
                min_score=self.config.breaking_min_score,
            ))
        chain.append(DomainCoverageStrategy(declared))
        if self.config.enable_exploration:
            chain.append(ExplorationStrategy(self.exploration_quota(max_count)))
        chain.append(FillStrategy())
        return chain

    def select(
        self,
        scored_trends: Sequence[ScoredTrend],
        profile: Optional[OrganizationProfile],
        max_count: int,
    ) -> SelectionResult:
        """
        Select at most max_count trends with no repeated ids.

        Args:
            scored_trends: The complete scored batch for one organization.
            profile: Organization whose declared domains must be covered.
            max_count: Maximum number of trends to return.

        Returns:
            SelectionResult with the selection sorted by score descending.
        """
        if max_count <= 0 or not scored_trends:
            return SelectionResult()

        state = SelectionState(rank_by_score(dedupe_by_id(scored_trends)), max_count)
        for strategy in self.build_chain(profile, max_count):
            strategy.apply(state)

        return SelectionResult(
            selected=rank_by_score(state.selected),
            uncovered_domains=state.uncovered_domains,
            phase_counts=state.phase_counts,
        )


def select_diverse_trends(
    scored_trends: Sequence[ScoredTrend],
    profile: Optional[OrganizationProfile],
    max_count: int,
    config: Optional[SelectorConfig] = None,
) -> list[ScoredTrend]:
    """
    Reduce a scored batch to a diversified recommendation set.

    Convenience wrapper around DiversitySelector.select().
    """
    return DiversitySelector(config).select(scored_trends, profile, max_count).selected
