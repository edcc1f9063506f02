"""
Selection strategies for the diversity selector.

Each strategy is one phase of the selection chain. Strategies share a
SelectionState: they take candidates from its remaining pool (already ranked
by score, ties in input order) and stop as soon as the state is full.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from relevance_engine.models.results import RelevanceFlag, ScoredTrend
from relevance_engine.scoring.matching import same_label


class SelectionState:
    """
    Mutable working set for one selection run.

    Attributes:
        max_count: Hard limit on the number of selected trends.
        selected: Trends picked so far, in pick order.
        uncovered_domains: Declared domains no candidate could cover.
        phase_counts: Number of trends each strategy contributed.
    """

    def __init__(self, ranked: Sequence[ScoredTrend], max_count: int):
        self.max_count = max_count
        self.selected: list[ScoredTrend] = []
        self.uncovered_domains: list[str] = []
        self.phase_counts: dict[str, int] = {}
        self._ranked = list(ranked)
        self._selected_ids: set[str] = set()

    @property
    def is_full(self) -> bool:
        return len(self.selected) >= self.max_count

    def remaining(self) -> list[ScoredTrend]:
        """Unselected candidates, best first."""
        return [st for st in self._ranked if st.id not in self._selected_ids]

    def add(self, scored: ScoredTrend, phase: str) -> bool:
        """Select a trend. Returns False when full or already selected."""
        if self.is_full or scored.id in self._selected_ids:
            return False
        self.selected.append(scored)
        self._selected_ids.add(scored.id)
        self.phase_counts[phase] = self.phase_counts.get(phase, 0) + 1
        return True

    def covers_domain(self, domain: str) -> bool:
        """Check whether any selected trend is tagged with the domain."""
        return any(_tagged_with(st, domain) for st in self.selected)


def _tagged_with(scored: ScoredTrend, domain: str) -> bool:
    return any(same_label(domain, d) for d in scored.trend.domains)


class SelectionStrategy(ABC):
    """
    Abstract base class for one selection phase.

    Attributes:
        name: Unique identifier for this phase (e.g., "breaking", "coverage").
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique name identifier for this phase."""
        pass

    @abstractmethod
    def apply(self, state: SelectionState) -> None:
        """
        Pick trends from the remaining pool into the state.

        Implementations must respect state.is_full and never pick a trend
        that is already selected.
        """
        pass

    def __str__(self) -> str:
        return f"SelectionStrategy({self.name})"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class BreakingNewsStrategy(SelectionStrategy):
    """Carve out room for breaking news regardless of domain coverage."""

    def __init__(self, max_items: int = 3, min_score: int = 40):
        self.max_items = max_items
        self.min_score = min_score

    @property
    def name(self) -> str:
        return "breaking"

    def apply(self, state: SelectionState) -> None:
        taken = 0
        for scored in state.remaining():
            if state.is_full or taken >= self.max_items:
                break
            if scored.has_flag(RelevanceFlag.BREAKING) and scored.score >= self.min_score:
                if state.add(scored, self.name):
                    taken += 1


class DomainCoverageStrategy(SelectionStrategy):
    """
    Guarantee one trend per declared domain where a candidate exists.

    Domains are visited in declaration order. A domain with no candidate is
    recorded on the state as uncovered; that is reported, not an error.
    """

    def __init__(self, declared_domains: Sequence[str]):
        unique: list[str] = []
        for domain in declared_domains:
            if domain and not any(same_label(domain, u) for u in unique):
                unique.append(domain)
        self.declared_domains = unique

    @property
    def name(self) -> str:
        return "coverage"

    def apply(self, state: SelectionState) -> None:
        for domain in self.declared_domains:
            if state.covers_domain(domain):
                continue
            if state.is_full:
                state.uncovered_domains.append(domain)
                continue
            best = next((st for st in state.remaining() if _tagged_with(st, domain)), None)
            if best is None:
                state.uncovered_domains.append(domain)
            else:
                state.add(best, self.name)


class ExplorationStrategy(SelectionStrategy):
    """Reserve a quota for new-opportunity trends the organization has not tried."""

    def __init__(self, quota: int):
        self.quota = max(0, quota)

    @property
    def name(self) -> str:
        return "exploration"

    def apply(self, state: SelectionState) -> None:
        taken = 0
        for scored in state.remaining():
            if state.is_full or taken >= self.quota:
                break
            if scored.has_flag(RelevanceFlag.NEW_OPPORTUNITY):
                if state.add(scored, self.name):
                    taken += 1


class FillStrategy(SelectionStrategy):
    """Fill the remaining slots strictly by descending score."""

    @property
    def name(self) -> str:
        return "fill"

    def apply(self, state: SelectionState) -> None:
        for scored in state.remaining():
            if state.is_full:
                break
            state.add(scored, self.name)
