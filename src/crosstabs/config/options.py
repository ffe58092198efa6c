"""Report options and their defaults."""

import os
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from src.crosstabs.palettes import gradient_palette

# Defaults (can be overridden via environment variables)
DEFAULT_XLABEL = os.getenv("CROSSTABS_XLABEL", "proportion")
DEFAULT_PALETTE_START = os.getenv("CROSSTABS_PALETTE_START", "lightblue")
DEFAULT_PALETTE_END = os.getenv("CROSSTABS_PALETTE_END", "darkblue")


def default_palette() -> Callable[[int], list[str]]:
    """Light-to-dark two-point gradient."""
    return gradient_palette(DEFAULT_PALETTE_START, DEFAULT_PALETTE_END)


@dataclass
class ReportOptions:
    """Options for generate_cross_tabulation_report()."""

    # Sequence of colors (cycled) or function n -> n colors
    palette: Sequence[str] | Callable[[int], Sequence[str]] = field(default_factory=default_palette)
    title_suffix: str = ""
    xlabel: str = DEFAULT_XLABEL
    ylabel_suffix: str = ""
    label_dictionary: Mapping[str, str] = field(default_factory=dict)
