"""
Report module.

Generates per-organization Markdown reports from pipeline results.
"""

from relevance_engine.report.generator import (
    ReportGenerator,
    ReportConfig,
    ReportResult,
    generate_report_content,
    report_filename,
)

__all__ = [
    "ReportGenerator",
    "ReportConfig",
    "ReportResult",
    "generate_report_content",
    "report_filename",
]
