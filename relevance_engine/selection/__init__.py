"""
Selection module.

Diversity-constrained selection and the metrics that audit it.
"""

from relevance_engine.selection.strategies import (
    BreakingNewsStrategy,
    DomainCoverageStrategy,
    ExplorationStrategy,
    FillStrategy,
    SelectionState,
    SelectionStrategy,
)
from relevance_engine.selection.selector import (
    DiversitySelector,
    SelectionResult,
    SelectorConfig,
    select_diverse_trends,
)
from relevance_engine.selection.metrics import DiversityMetrics, compute_diversity_metrics

__all__ = [
    "BreakingNewsStrategy",
    "DomainCoverageStrategy",
    "ExplorationStrategy",
    "FillStrategy",
    "SelectionState",
    "SelectionStrategy",
    "DiversitySelector",
    "SelectionResult",
    "SelectorConfig",
    "select_diverse_trends",
    "DiversityMetrics",
    "compute_diversity_metrics",
]
