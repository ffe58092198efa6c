import logging
from collections.abc import Callable, Sequence
from itertools import cycle, islice

from matplotlib.colors import LinearSegmentedColormap, to_hex

from src.crosstabs.errors import ConfigurationError

logger = logging.getLogger(__name__)


def gradient_palette(start: str = "lightblue", end: str = "darkblue") -> Callable[[int], list[str]]:
    """
    Build a color generator interpolating between two colors.

    Parameters
    ----------
    start, end : str
        Any matplotlib color specification.

    Returns
    -------
    callable
        Function n -> list of n hex colors, from start to end.
    """
    cmap = LinearSegmentedColormap.from_list(f"{start}_to_{end}", [start, end])

    def palette(n: int) -> list[str]:
        if n <= 0:
            return []
        if n == 1:
            return [to_hex(cmap(0.0))]
        return [to_hex(cmap(i / (n - 1))) for i in range(n)]

    return palette


def validate_palette(palette):
    """
    Check that a palette is a color sequence or a color generator.

    Raises
    ------
    ConfigurationError
        If palette is neither a non-empty sequence of color strings nor a callable.
    """
    if callable(palette) or isinstance(palette, str):
        return
    if isinstance(palette, Sequence) and len(palette) > 0 and all(isinstance(c, str) for c in palette):
        return
    raise ConfigurationError(
        "Invalid palette: must be a sequence of colors or a function returning n colors"
    )


def resolve_colors(palette, n: int) -> list[str]:
    """
    Assign one color per target category.

    Parameters
    ----------
    palette : sequence of str or callable
        Fixed colors are cycled when there are more categories than colors;
        a callable is asked for exactly n colors.
    n : int
        Number of target categories.

    Returns
    -------
    list of str
        n colors.
    """
    validate_palette(palette)

    if isinstance(palette, str):
        colors = [palette]
    elif callable(palette):
        try:
            colors = list(palette(n))
        except Exception as e:
            raise ConfigurationError(f"Palette function failed: {e}") from e
        if len(colors) != n:
            logger.warning(f"Palette returned {len(colors)} colors for {n} categories, recycling")
        if not colors:
            raise ConfigurationError("Palette function returned no colors")
    else:
        colors = list(palette)

    return list(islice(cycle(colors), n))
