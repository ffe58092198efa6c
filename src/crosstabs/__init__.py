"""Cross-tabulation and independence-test reports for survey data."""

from src.crosstabs.config import ReportConfig, ReportOptions
from src.crosstabs.errors import ConfigurationError
from src.crosstabs.labels import reference_key, resolve_label
from src.crosstabs.palettes import gradient_palette, resolve_colors
from src.crosstabs.pipeline import generate_cross_tabulation_report
from src.crosstabs.plotting import ChartArtifact, plot_chart, render_chart
from src.crosstabs.report import (
    ReportSection,
    SectionStatus,
    TableArtifact,
    generate_markdown_report,
    render_table,
)
from src.crosstabs.statistical_tests import IndependenceTestResult, TestFailure, test_independence
from src.crosstabs.tabulation import ContingencyTable, EmptyTable, tabulate

__all__ = [
    # Main pipeline
    "generate_cross_tabulation_report",
    # Configuration
    "ReportOptions",
    "ReportConfig",
    "ConfigurationError",
    # Components
    "resolve_label",
    "reference_key",
    "tabulate",
    "ContingencyTable",
    "EmptyTable",
    "render_table",
    "TableArtifact",
    "render_chart",
    "ChartArtifact",
    "plot_chart",
    "gradient_palette",
    "resolve_colors",
    "test_independence",
    "IndependenceTestResult",
    "TestFailure",
    # Report generation
    "ReportSection",
    "SectionStatus",
    "generate_markdown_report",
]
