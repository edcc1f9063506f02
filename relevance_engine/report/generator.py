"""
Report Generator for the Trend Relevance Engine.

Renders one organization's pipeline result as a Markdown report:
summary, diversity audit, decision tiers, deny-listed trends and the
selected trends grouped by policy domain with the reasons each one was
scored the way it was.

Output: reports/YYYY-MM-DD-<organization_id>.md
"""

import re
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from relevance_engine.models.results import DecisionTier, RelevanceFlag, ScoredTrend

if TYPE_CHECKING:
    from relevance_engine.pipeline import DecisionEntry, OrganizationResult


UNTAGGED_GROUP = "_untagged"

TIER_HEADINGS = {
    DecisionTier.ACT_NOW: "🚨 Act Now",
    DecisionTier.CONSIDER: "🤔 Consider",
    DecisionTier.WATCH: "👀 Watch",
}

FLAG_BADGES = {
    RelevanceFlag.BREAKING: "`breaking`",
    RelevanceFlag.NEW_OPPORTUNITY: "`new-opportunity`",
    RelevanceFlag.PROVEN_TOPIC: "`proven-topic`",
    RelevanceFlag.WATCHLIST_MATCH: "`watchlist`",
}


# =============================================================================
# Report Configuration
# =============================================================================

@dataclass
class ReportConfig:
    """
    Configuration for report generation.

    Attributes:
        output_dir: Directory to write report files.
        include_untagged: Whether to list selected trends with no domain tags.
        max_reasons: Maximum reasons shown per trend (0 = all).
    """
    output_dir: str = "reports"
    include_untagged: bool = True
    max_reasons: int = 0


# =============================================================================
# Report Result
# =============================================================================

@dataclass
class ReportResult:
    """
    Result of report generation.

    Attributes:
        success: Whether the report was generated successfully.
        filepath: Path to the generated report file.
        trends_included: Number of selected trends in the report.
        domains_covered: Domains that have a section in the report.
        error: Error message if generation failed.
    """
    success: bool
    filepath: Optional[str] = None
    trends_included: int = 0
    domains_covered: list[str] = field(default_factory=list)
    error: Optional[str] = None


# =============================================================================
# Report Generator
# =============================================================================

class ReportGenerator:
    """
    Generates per-organization report files from pipeline results.

    Usage:
        generator = ReportGenerator(ReportConfig(output_dir="reports"))
        result = generator.generate(org_result)
        print(f"Report saved to: {result.filepath}")
    """

    def __init__(self, config: ReportConfig = None):
        self.config = config or ReportConfig()

    def generate(self, result: "OrganizationResult", date: datetime = None) -> ReportResult:
        """
        Generate and write the report for one organization.

        Args:
            result: The organization's pipeline result.
            date: Date for the report filename. Defaults to today.

        Returns:
            ReportResult with success status and file path.
        """
        if date is None:
            date = datetime.now()

        try:
            grouped = self._group_by_domain(result.selected)
            content = self._generate_markdown(result, grouped, date)
            filepath = self._write_file(content, result.organization_id, date)

            return ReportResult(
                success=True,
                filepath=str(filepath),
                trends_included=len(result.selected),
                domains_covered=[d for d in grouped if d != UNTAGGED_GROUP],
            )

        except OSError as e:
            return ReportResult(
                success=False,
                error=str(e),
            )

    def _group_by_domain(self, selected: list[ScoredTrend]) -> dict[str, list[ScoredTrend]]:
        """
        Group selected trends by domain tag.

        Trends with several domains appear in several groups. Groups keep the
        selection order, which is already by descending score.
        """
        grouped: dict[str, list[ScoredTrend]] = defaultdict(list)

        for st in selected:
            if st.trend.domains:
                for domain in st.trend.domains:
                    grouped[domain].append(st)
            elif self.config.include_untagged:
                grouped[UNTAGGED_GROUP].append(st)

        return dict(grouped)

    def _generate_markdown(
        self,
        result: "OrganizationResult",
        grouped: dict[str, list[ScoredTrend]],
        date: datetime,
    ) -> str:
        lines = []

        # Header
        lines.append(f"# Trend Relevance Report - {result.label} - {date.strftime('%Y-%m-%d')}")
        lines.append("")
        lines.append(f"*Generated on {date.strftime('%B %d, %Y at %H:%M')}*")
        lines.append("")

        lines.extend(self._generate_summary(result))
        lines.extend(self._generate_diversity(result))
        lines.extend(self._generate_decisions(result.decisions))
        lines.extend(self._generate_blocked(result))
        lines.extend(self._generate_domain_sections(grouped))

        # Footer
        lines.append("---")
        lines.append("")
        lines.append("*Generated by Trend Relevance Engine*")
        lines.append("")

        return "\n".join(lines)

    def _generate_summary(self, result: "OrganizationResult") -> list[str]:
        """Generate the summary section."""
        lines = ["## 📊 Summary", ""]

        lines.append(f"- **Trends scored:** {result.trends_scored}")
        lines.append(f"- **Trends selected:** {len(result.selected)}")
        if result.blocked:
            lines.append(f"- **Trends blocked:** {len(result.blocked)}")

        if result.selected:
            top = result.selected[0]
            lines.append(f"- **Top trend:** {top.trend.title} (score: {top.score})")
            scores = [st.score for st in result.selected]
            avg = sum(scores) / len(scores)
            lines.append(f"- **Score range:** {min(scores)} - {max(scores)} (avg: {avg:.1f})")

        lines.append("")
        return lines

    def _generate_diversity(self, result: "OrganizationResult") -> list[str]:
        """Generate the diversity audit section."""
        metrics = result.metrics
        if metrics is None:
            return []

        lines = ["## 🧭 Diversity", ""]
        lines.append(f"- **Diversity score:** {metrics.diversity_score}/100")
        lines.append(f"- **Unique domains:** {metrics.unique_domains}")
        lines.append(f"- **Domains represented:** {', '.join(metrics.domains_represented) or '(none)'}")
        if metrics.domains_missing:
            lines.append(f"- **Domains missing:** {', '.join(metrics.domains_missing)}")
        lines.append(f"- **New opportunities:** {metrics.new_opportunity_count}")
        lines.append(f"- **Proven topics:** {metrics.proven_topic_count}")
        if result.uncovered_domains:
            lines.append(f"- **No candidate trend for:** {', '.join(result.uncovered_domains)}")
        lines.append("")
        return lines

    def _generate_decisions(self, decisions: list["DecisionEntry"]) -> list[str]:
        """Generate decision tier sections, most urgent tier first."""
        if not decisions:
            return []

        lines = ["## 🎯 Decisions", ""]
        for tier in (DecisionTier.ACT_NOW, DecisionTier.CONSIDER, DecisionTier.WATCH):
            entries = [d for d in decisions if d.decision.tier == tier]
            if not entries:
                continue

            lines.append(f"### {TIER_HEADINGS[tier]}")
            lines.append("")
            for entry in entries:
                d = entry.decision
                lines.append(
                    f"- **[{d.decision_score}]** {entry.scored.trend.title} "
                    f"(opportunity {d.opportunity_score}, fit {d.fit_score}, "
                    f"risk {d.risk_score}, confidence {d.confidence_score})"
                )
                risk_flags = d.signals.get("risk", [])
                if risk_flags:
                    lines.append(f"  - Risk: {'; '.join(risk_flags)}")
                if not entry.passes_alert:
                    lines.append(f"  - Not alerted: {entry.alert_reason}")
            lines.append("")

        return lines

    def _generate_blocked(self, result: "OrganizationResult") -> list[str]:
        """List trends excluded by the deny list."""
        if not result.blocked:
            return []

        lines = ["## ⛔ Blocked", ""]
        for blocked in result.blocked:
            lines.append(f"- {blocked.trend.title}: {blocked.reason}")
        lines.append("")
        return lines

    def _generate_domain_sections(self, grouped: dict[str, list[ScoredTrend]]) -> list[str]:
        """Generate one section per domain, untagged trends last."""
        lines = []

        order = sorted(grouped.keys(), key=lambda d: (d == UNTAGGED_GROUP, d.lower()))
        for domain in order:
            if domain == UNTAGGED_GROUP:
                lines.append("## 📁 Other Trends")
            else:
                lines.append(f"## 📌 {domain}")
            lines.append("")

            for st in grouped[domain]:
                lines.extend(self._format_trend(st))

            lines.append("")

        return lines

    def _format_trend(self, st: ScoredTrend) -> list[str]:
        """Format a single selected trend as Markdown."""
        lines = [f"### **[{st.score}]** {st.trend.title}", ""]

        badges = [badge for flag, badge in FLAG_BADGES.items() if st.has_flag(flag)]
        meta = [f"`{st.relevance.priority.value}`"] + badges
        lines.append(" ".join(meta))
        lines.append("")

        reasons = st.relevance.reasons
        if self.config.max_reasons > 0:
            reasons = reasons[:self.config.max_reasons]
        for reason in reasons:
            lines.append(f"- {reason}")
        lines.append("")

        return lines

    def _write_file(self, content: str, organization_id: str, date: datetime) -> Path:
        """
        Write report content to file.

        Returns:
            Path to written file.
        """
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        filepath = output_dir / report_filename(organization_id, date)
        filepath.write_text(content, encoding="utf-8")

        return filepath


# =============================================================================
# Convenience Functions
# =============================================================================

def report_filename(organization_id: str, date: datetime) -> str:
    """Filename for an organization's report: YYYY-MM-DD-<organization_id>.md"""
    slug = re.sub(r"[^A-Za-z0-9_-]+", "-", organization_id or "").strip("-") or "organization"
    return f"{date.strftime('%Y-%m-%d')}-{slug}.md"


def generate_report_content(result: "OrganizationResult", date: datetime = None) -> str:
    """
    Generate report content without writing to file.

    Useful for previewing or sending via other channels.

    Args:
        result: The organization's pipeline result.
        date: Date for the report header.

    Returns:
        Markdown content string.
    """
    if date is None:
        date = datetime.now()

    generator = ReportGenerator()
    grouped = generator._group_by_domain(result.selected)
    return generator._generate_markdown(result, grouped, date)
