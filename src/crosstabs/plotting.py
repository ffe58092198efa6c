import logging
from dataclasses import dataclass

import matplotlib.pyplot as plt
import numpy as np

from src.crosstabs.config.options import DEFAULT_XLABEL, default_palette
from src.crosstabs.palettes import resolve_colors
from src.crosstabs.tabulation import ContingencyTable

logger = logging.getLogger(__name__)


@dataclass
class ChartArtifact:
    """Specification of a horizontal stacked bar chart."""

    title: str
    xlabel: str
    ylabel: str
    groups: list  # explanatory categories, bottom to top
    series: list  # target categories, one color each
    values: np.ndarray  # shape (len(groups), len(series))
    colors: list
    orientation: str = "horizontal"


def render_chart(
    table: ContingencyTable,
    explanatory_label: str,
    target_label: str,
    title_suffix: str = "",
    xlabel: str = DEFAULT_XLABEL,
    ylabel_suffix: str = "",
    palette=None,
) -> ChartArtifact:
    """
    Build the bar chart specification for a contingency table.

    Explanatory categories are drawn in reverse order so the last category
    sits nearest the origin and the first one on top.

    Parameters
    ----------
    table : ContingencyTable
        Row-normalized percentages.
    explanatory_label, target_label : str
        Display labels.
    title_suffix : str, optional
        Appended to the title "{explanatory} by {target}".
    xlabel : str, optional
        X-axis label. Defaults to "proportion".
    ylabel_suffix : str, optional
        Appended to the explanatory label on the Y axis.
    palette : sequence of str or callable, optional
        Colors for the target categories. Defaults to a light-to-dark gradient.

    Returns
    -------
    ChartArtifact
    """
    if palette is None:
        palette = default_palette()

    reversed_rows = table.percentages.iloc[::-1]

    return ChartArtifact(
        title=f"{explanatory_label} by {target_label}{title_suffix}",
        xlabel=xlabel,
        ylabel=f"{explanatory_label}{ylabel_suffix}",
        groups=list(reversed_rows.index),
        series=list(reversed_rows.columns),
        values=reversed_rows.to_numpy(dtype=float),
        colors=resolve_colors(palette, len(reversed_rows.columns)),
    )


def _plot_stacked_bars(ax, chart: ChartArtifact):
    """
    Draw one horizontal bar per group with one segment per series.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axes object to plot on.
    chart : ChartArtifact
        Chart to draw.
    """
    positions = np.arange(len(chart.groups))
    left = np.zeros(len(chart.groups))

    for j, (series_label, color) in enumerate(zip(chart.series, chart.colors, strict=True)):
        widths = chart.values[:, j]
        ax.barh(positions, widths, left=left, color=color, label=str(series_label))
        left += widths

    ax.set_yticks(positions)
    ax.set_yticklabels([str(g) for g in chart.groups])
    ax.set_title(chart.title)
    ax.set_xlabel(chart.xlabel)
    ax.set_ylabel(chart.ylabel)
    ax.legend(loc="center left", bbox_to_anchor=(1.0, 0.5))


def plot_chart(chart: ChartArtifact, save_path: str = None):
    """
    Plot a chart artifact with matplotlib.

    Parameters
    ----------
    chart : ChartArtifact
        Chart to draw.
    save_path : str, optional
        Path to save the plot image. If None, displays the plot interactively.

    Raises
    ------
    RuntimeError
        If the chart has nothing to draw.
    """
    if len(chart.groups) == 0 or len(chart.series) == 0:
        raise RuntimeError(f"Nothing to plot for chart '{chart.title}'")

    height = max(3, 0.6 * len(chart.groups) + 1.5)
    fig, ax = plt.subplots(figsize=(8, height))

    _plot_stacked_bars(ax, chart)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches="tight")
        plt.close(fig)
        logger.info(f"Plot saved to {save_path}")
    else:
        plt.show()
