"""
Trend Relevance Pipeline - Core execution logic.

This module orchestrates the complete pipeline:

    Batch → Relevance → Decision → Selection → Metrics → Report → Summary

Steps:
1. Load a batch of trends and organization contexts from a source
2. For each organization, set aside deny-listed trends and score the rest
3. Decision-score the most relevant trends for action readiness
4. Select a diversified subset and audit it with diversity metrics
5. Write one Markdown report per organization
6. Print execution summary

Design principles:
- Error isolation: one organization failing doesn't stop the others
- Deterministic: identical batches (and "now") give identical results
- CLI flexibility: all settings overridable via arguments
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import traceback

from relevance_engine.config import (
    DECISION_TOP_N,
    DEFAULT_MAX_TRENDS,
    REPORT_OUTPUT_DIR,
)
from relevance_engine.models.results import DecisionScoreResult, ScoredTrend
from relevance_engine.models.trend import TrendSignal
from relevance_engine.report import ReportConfig, ReportGenerator, ReportResult
from relevance_engine.scoring.decision import DecisionInput, score_decision
from relevance_engine.scoring.org_types import default_topics_for_org_type
from relevance_engine.scoring.relevance import (
    BlockedTrend,
    partition_blocked,
    passes_thresholds,
    score_trends,
)
from relevance_engine.selection.metrics import DiversityMetrics, compute_diversity_metrics
from relevance_engine.selection.selector import DiversitySelector, SelectorConfig, rank_by_score
from relevance_engine.sources.base import BatchLoadError, BatchSource, OrganizationContext, TrendBatch


# =============================================================================
# Pipeline Result Data Structures
# =============================================================================

@dataclass
class DecisionEntry:
    """Decision score for one top trend, with its alert threshold outcome."""
    scored: ScoredTrend
    decision: DecisionScoreResult
    passes_alert: bool = True
    alert_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "trend_id": self.scored.id,
            "title": self.scored.trend.title,
            "relevance_score": self.scored.score,
            "decision": self.decision.to_dict(),
            "passes_alert": self.passes_alert,
            "alert_reason": self.alert_reason,
        }


@dataclass
class OrganizationResult:
    """Result of running the pipeline for a single organization."""
    organization_id: str
    display_name: str = ""
    success: bool = True
    error: Optional[str] = None
    duration_ms: float = 0.0

    declared_domains: list[str] = field(default_factory=list)
    trends_scored: int = 0
    blocked: list[BlockedTrend] = field(default_factory=list)
    selected: list[ScoredTrend] = field(default_factory=list)
    uncovered_domains: list[str] = field(default_factory=list)
    decisions: list[DecisionEntry] = field(default_factory=list)
    metrics: Optional[DiversityMetrics] = None

    # Report result (None when skipped or failed before reporting)
    report_result: Optional[ReportResult] = None

    @property
    def label(self) -> str:
        return self.display_name or self.organization_id

    def to_dict(self) -> dict:
        return {
            "organization_id": self.organization_id,
            "display_name": self.display_name,
            "success": self.success,
            "error": self.error,
            "trends_scored": self.trends_scored,
            "blocked": [b.to_dict() for b in self.blocked],
            "selected": [st.to_dict() for st in self.selected],
            "uncovered_domains": list(self.uncovered_domains),
            "decisions": [d.to_dict() for d in self.decisions],
            "metrics": self.metrics.to_dict() if self.metrics else None,
            "report_path": self.report_result.filepath if self.report_result else None,
        }


@dataclass
class PipelineResult:
    """Complete result of a pipeline execution."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    source_name: Optional[str] = None

    trends_loaded: int = 0
    organization_results: list[OrganizationResult] = field(default_factory=list)

    # Errors outside any single organization (e.g., the batch failed to load)
    errors: list[str] = field(default_factory=list)

    @property
    def organizations_succeeded(self) -> int:
        """Number of organizations processed successfully."""
        return sum(1 for r in self.organization_results if r.success)

    @property
    def organizations_failed(self) -> int:
        """Number of organizations that failed."""
        return sum(1 for r in self.organization_results if not r.success)

    @property
    def all_failed(self) -> bool:
        """True when nothing useful was produced."""
        if self.errors:
            return True
        return bool(self.organization_results) and self.organizations_succeeded == 0

    @property
    def duration_seconds(self) -> float:
        """Total pipeline duration in seconds."""
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "duration_seconds": self.duration_seconds,
            "source": self.source_name,
            "trends_loaded": self.trends_loaded,
            "organizations": [r.to_dict() for r in self.organization_results],
            "errors": list(self.errors),
        }

    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "PIPELINE EXECUTION SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Duration: {self.duration_seconds:.2f}s",
            f"Source:   {self.source_name or '(in-memory)'}",
            f"Trends:   {self.trends_loaded}",
            "",
            "Organizations:",
        ]

        for org in self.organization_results:
            status = "✓" if org.success else "✗"
            if org.success:
                diversity = org.metrics.diversity_score if org.metrics else 0
                lines.append(
                    f"  {status} {org.label}: {len(org.selected)} selected of "
                    f"{org.trends_scored} (diversity {diversity}, {org.duration_ms:.0f}ms)"
                )
                if org.blocked:
                    lines.append(f"      Blocked: {len(org.blocked)} (deny list)")
                if org.uncovered_domains:
                    lines.append(f"      Uncovered: {', '.join(org.uncovered_domains)}")
                if org.report_result and org.report_result.success and org.report_result.filepath:
                    lines.append(f"      Report: {org.report_result.filepath}")
            else:
                lines.append(f"  {status} {org.label}: failed")
                lines.append(f"      Error: {org.error}")

        if not self.organization_results:
            lines.append("  (none)")

        if self.errors:
            lines.extend([
                "",
                "Errors:",
            ])
            for error in self.errors[:5]:  # Show first 5
                lines.append(f"  - {error}")

        lines.append("=" * 60)
        return "\n".join(lines)


# =============================================================================
# Pipeline Configuration
# =============================================================================

@dataclass
class PipelineConfig:
    """
    Configuration for a pipeline run.

    CLI arguments override config file defaults.
    """
    max_trends: int = DEFAULT_MAX_TRENDS
    decision_top_n: int = DECISION_TOP_N
    selector: SelectorConfig = field(default_factory=SelectorConfig.from_settings)
    report_output_dir: str = REPORT_OUTPUT_DIR
    skip_report: bool = False
    verbose: bool = False

    # Reference time for recency scoring (None = current time)
    now: Optional[datetime] = None

    @classmethod
    def from_args(cls, args) -> "PipelineConfig":
        """Create config from argparse namespace."""
        selector = SelectorConfig.from_settings()
        if getattr(args, "no_breaking", False):
            selector.enable_breaking = False
        if getattr(args, "no_exploration", False):
            selector.enable_exploration = False

        max_trends = getattr(args, "max_trends", None)
        decision_top = getattr(args, "decision_top", None)
        output_dir = getattr(args, "output_dir", None)

        return cls(
            max_trends=max_trends if max_trends is not None else DEFAULT_MAX_TRENDS,
            decision_top_n=decision_top if decision_top is not None else DECISION_TOP_N,
            selector=selector,
            report_output_dir=output_dir or REPORT_OUTPUT_DIR,
            skip_report=getattr(args, "skip_report", False),
            verbose=getattr(args, "verbose", False),
        )


# =============================================================================
# Pipeline Class
# =============================================================================

class RelevancePipeline:
    """
    Main pipeline for scoring, selecting and reporting trends per organization.

    Usage:
        config = PipelineConfig(max_trends=10, skip_report=True)
        pipeline = RelevancePipeline(config)
        result = pipeline.run(batch)
        print(result.to_summary())

    The pipeline:
    1. Scores the whole batch for each organization
    2. Decision-scores the top trends
    3. Selects a diversified subset and computes its metrics
    4. Writes a report (unless skipped)
    5. Returns comprehensive result
    """

    def __init__(self, config: PipelineConfig = None):
        """
        Initialize the pipeline.

        Args:
            config: Pipeline configuration. Defaults to PipelineConfig().
        """
        self.config = config or PipelineConfig()
        self._selector = DiversitySelector(self.config.selector)

    def _log(self, prefix: str, message: str) -> None:
        if self.config.verbose:
            print(f"[{prefix}] {message}")

    def _decide(self, scored: list[ScoredTrend], context: OrganizationContext) -> list[DecisionEntry]:
        """
        Decision-score the most relevant trends.

        Args:
            scored: All scored trends for the organization.
            context: Organization context (fallback inputs and alert preferences).

        Returns:
            One DecisionEntry per top trend, most relevant first.
        """
        top = rank_by_score(scored)[:max(0, self.config.decision_top_n)]
        interest_topics = context.interest_topics or default_topics_for_org_type(context.profile.org_type)

        entries = []
        for st in top:
            decision = score_decision(
                DecisionInput.from_trend(st.trend, st.relevance),
                profile=context.profile,
                interest_topics=interest_topics,
                interest_entities=context.interest_entities,
                now=self.config.now,
            )
            passes, reason = passes_thresholds(
                st.score, decision.decision_score, context.alert_preferences
            )
            entries.append(DecisionEntry(st, decision, passes_alert=passes, alert_reason=reason))
        return entries

    def _write_report(self, org_result: OrganizationResult) -> ReportResult:
        report_config = ReportConfig(output_dir=self.config.report_output_dir)
        return ReportGenerator(report_config).generate(org_result, date=self.config.now)

    def process_organization(
        self,
        trends: list[TrendSignal],
        context: OrganizationContext,
    ) -> OrganizationResult:
        """
        Run all stages for one organization with error isolation.

        Args:
            trends: The complete batch of trends.
            context: The organization to score them for.

        Returns:
            OrganizationResult with success/failure status.
        """
        profile = context.profile
        prefix = context.organization_id or "organization"
        org_result = OrganizationResult(
            organization_id=context.organization_id,
            display_name=profile.display_name,
            declared_domains=list(profile.policy_domains),
        )
        start_time = datetime.now()

        try:
            allowed, org_result.blocked = partition_blocked(trends, context.interest_entities)
            if org_result.blocked:
                self._log(prefix, f"Blocked {len(org_result.blocked)} trends on the deny list")

            scored = score_trends(allowed, profile, context.watchlist, context.affinities)
            org_result.trends_scored = len(scored)
            self._log(prefix, f"Scored {len(scored)} trends")

            org_result.decisions = self._decide(scored, context)
            self._log(prefix, f"Decision-scored {len(org_result.decisions)} trends")

            selection = self._selector.select(scored, profile, self.config.max_trends)
            org_result.selected = selection.selected
            org_result.uncovered_domains = selection.uncovered_domains
            self._log(prefix, f"Selected {len(selection.selected)} of {len(scored)} trends")
            if selection.uncovered_domains:
                self._log(prefix, f"Uncovered domains: {', '.join(selection.uncovered_domains)}")

            org_result.metrics = compute_diversity_metrics(selection.selected, profile.policy_domains)
            self._log(prefix, f"Diversity score {org_result.metrics.diversity_score}")

            if not self.config.skip_report:
                org_result.report_result = self._write_report(org_result)
                if org_result.report_result.success:
                    self._log(prefix, f"Report written to {org_result.report_result.filepath}")
                else:
                    self._log(prefix, f"Report failed: {org_result.report_result.error}")

        except Exception as e:
            org_result.success = False
            org_result.error = f"{type(e).__name__}: {str(e)}"
            if self.config.verbose:
                org_result.error += f"\n{traceback.format_exc()}"

        org_result.duration_ms = (datetime.now() - start_time).total_seconds() * 1000
        return org_result

    def run(self, batch: TrendBatch) -> PipelineResult:
        """
        Execute the pipeline for every organization in a batch.

        Args:
            batch: Trends and organization contexts.

        Returns:
            PipelineResult with execution details.
        """
        result = PipelineResult(started_at=datetime.now(), trends_loaded=len(batch.trends))

        if self.config.verbose:
            print(f"Processing {len(batch.trends)} trends for {len(batch.organizations)} organizations")

        for context in batch.organizations:
            result.organization_results.append(self.process_organization(batch.trends, context))

        result.finished_at = datetime.now()
        return result

    def run_source(self, source: BatchSource) -> PipelineResult:
        """
        Load a batch from a source and run the pipeline on it.

        A batch that cannot be loaded is recorded in the result errors.
        """
        try:
            batch = source.load()
        except BatchLoadError as e:
            result = PipelineResult(started_at=datetime.now(), source_name=source.name)
            result.errors.append(f"Batch load failed: {str(e)}")
            result.finished_at = datetime.now()
            return result

        if self.config.verbose:
            print(f"[{source.name}] Loaded {len(batch.trends)} trends")

        result = self.run(batch)
        result.source_name = source.name
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def run_pipeline(
    batch: TrendBatch,
    max_trends: int = None,
    decision_top_n: int = None,
    selector: SelectorConfig = None,
    report_output_dir: str = None,
    skip_report: bool = False,
    verbose: bool = False,
    now: datetime = None,
) -> PipelineResult:
    """
    Run the pipeline with specified options.

    Convenience function for programmatic use.

    Args:
        batch: Trends and organization contexts.
        max_trends: Max trends selected per organization (default: config value).
        decision_top_n: Trends decision-scored per organization (default: config value).
        selector: Selector configuration (default: from settings).
        report_output_dir: Directory for reports (default: config value).
        skip_report: If True, skip report generation.
        verbose: If True, print detailed progress.
        now: Reference time for recency scoring.

    Returns:
        PipelineResult with execution details.
    """
    config = PipelineConfig(
        max_trends=max_trends if max_trends is not None else DEFAULT_MAX_TRENDS,
        decision_top_n=decision_top_n if decision_top_n is not None else DECISION_TOP_N,
        selector=selector or SelectorConfig.from_settings(),
        report_output_dir=report_output_dir or REPORT_OUTPUT_DIR,
        skip_report=skip_report,
        verbose=verbose,
        now=now,
    )

    pipeline = RelevancePipeline(config)
    return pipeline.run(batch)
