"""
Report generation for cross-tabulation results.

This module renders contingency tables as captioned table artifacts, holds
the per-variable report sections and writes them into a Markdown report.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

import pandas as pd

from src.crosstabs.plotting import ChartArtifact
from src.crosstabs.statistical_tests import IndependenceTestResult, TestFailure
from src.crosstabs.tabulation import ContingencyTable

logger = logging.getLogger(__name__)


class SectionStatus(Enum):
    COMPLETE = "complete"
    SKIPPED = "skipped"
    TEST_FAILED = "test_failed"


@dataclass
class TableArtifact:
    """A contingency table ready for display."""

    caption: str
    values: pd.DataFrame

    @property
    def row_labels(self) -> list:
        return list(self.values.index)

    @property
    def column_labels(self) -> list:
        return list(self.values.columns)

    def to_markdown(self) -> str:
        """Render as a Markdown table followed by its caption."""
        table = self.values.to_markdown(floatfmt=".1f")
        return f"{table}\n\n*{self.caption}*"


@dataclass
class ReportSection:
    """Output for one explanatory variable."""

    variable: str
    label: str
    status: SectionStatus
    target_label: str = None
    table: TableArtifact = None
    chart: ChartArtifact = None
    test_result: IndependenceTestResult | TestFailure = None
    notice: str = None
    plot_path: str = None

    @property
    def p_value(self):
        if isinstance(self.test_result, IndependenceTestResult):
            return self.test_result.p_value
        return None


def render_table(table: ContingencyTable, explanatory_label: str, target_label: str) -> TableArtifact:
    """
    Wrap a contingency table with its caption.

    Parameters
    ----------
    table : ContingencyTable
        Row-normalized percentages.
    explanatory_label, target_label : str
        Display labels of the row and column variables.

    Returns
    -------
    TableArtifact
    """
    return TableArtifact(
        caption=f"{explanatory_label} vs {target_label} cross-tabulation",
        values=table.percentages.copy(),
    )


def format_test_result(result) -> str:
    """Plain-text summary of an independence test or its failure."""
    if isinstance(result, TestFailure):
        return f"Error running Chi-squared test: {result.message}"

    lines = [
        result.method,
        f"X-squared = {result.statistic:.4f}, df = {result.dof}, p-value = {result.p_value:.4g}",
    ]
    if result.caveat:
        lines.append(f"Warning: {result.caveat}")
    return "\n".join(lines)


def get_summary_stats(sections: list[ReportSection], alpha: float = 0.05) -> dict:
    """
    Count sections by outcome.

    Parameters
    ----------
    sections : list of ReportSection
        Sections from generate_cross_tabulation_report().
    alpha : float, optional
        Significance level. Defaults to 0.05.

    Returns
    -------
    dict
        Counts of complete, skipped, failed and significant sections.
    """
    complete = [s for s in sections if s.status == SectionStatus.COMPLETE]
    significant = [s for s in complete if s.p_value is not None and s.p_value < alpha]

    return {
        "total_variables": len(sections),
        "complete": len(complete),
        "skipped": sum(s.status == SectionStatus.SKIPPED for s in sections),
        "test_failed": sum(s.status == SectionStatus.TEST_FAILED for s in sections),
        "significant": len(significant),
    }


def generate_markdown_report(
    sections: list[ReportSection], target_label: str, output_path: str, alpha: float = 0.05
) -> str:
    """
    Generate a Markdown report from report sections.

    Parameters
    ----------
    sections : list of ReportSection
        Sections in the order the explanatory variables were supplied.
    target_label : str
        Display label of the target variable.
    output_path : str
        Path to save the Markdown report.
    alpha : float, optional
        Significance level used in the summary. Defaults to 0.05.

    Returns
    -------
    str
        Path to the generated report.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    stats = get_summary_stats(sections, alpha=alpha)
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    lines = []

    # Header
    lines.append(f"# Cross-tabulation Report: {target_label}")
    lines.append("")
    lines.append(f"**Generated:** {timestamp}")
    lines.append("")

    # Summary section
    lines.append("## Summary")
    lines.append("")
    lines.append(f"- **Explanatory variables:** {stats['total_variables']}")
    lines.append(f"- **Complete:** {stats['complete']}")
    lines.append(f"- **Skipped (no data):** {stats['skipped']}")
    lines.append(f"- **Test failed:** {stats['test_failed']}")
    lines.append(f"- **Significant (p < {alpha}):** {stats['significant']}")
    lines.append("")

    # Overview table
    lines.append("## Results Overview")
    lines.append("")
    lines.append("| Variable | Label | Chi-sq p-value | Status |")
    lines.append("|:---------|:------|:---------------|:-------|")

    for s in sections:
        p_value = f"{s.p_value:.4f}" if s.p_value is not None else "-"
        lines.append(f"| {s.variable} | {s.label} | {p_value} | {s.status.value} |")

    lines.append("")

    # Detailed results section
    lines.append("## Detailed Results")
    lines.append("")

    for s in sections:
        lines.append(f"### {s.label.upper()}")
        lines.append("")

        if s.status == SectionStatus.SKIPPED:
            lines.append(f"**Skipped:** {s.notice}")
            lines.append("")
            lines.append("---")
            lines.append("")
            continue

        lines.append(f"#### Cross-tabulation ({s.label} vs. {target_label})")
        lines.append("")
        lines.append(s.table.to_markdown())
        lines.append("")

        if s.plot_path:
            # Relative to the report location
            plot_rel_path = Path(s.plot_path).name
            lines.append(f"![{s.chart.title}](figures/{plot_rel_path})")
            lines.append("")

        lines.append(f"#### Chi-squared test ({s.label} vs. {target_label})")
        lines.append("")
        lines.append("```")
        lines.append(format_test_result(s.test_result))
        lines.append("```")
        lines.append("")
        if s.notice:
            lines.append(f"*{s.notice}*")
            lines.append("")
        lines.append("---")
        lines.append("")

    # Write report
    report_content = "\n".join(lines)
    output_path.write_text(report_content, encoding="utf-8")

    logger.info(f"Report generated: {output_path}")
    return str(output_path)
