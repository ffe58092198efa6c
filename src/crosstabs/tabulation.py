import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from src.crosstabs.errors import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class ContingencyTable:
    """Row-normalized cross-tabulation of an explanatory against a target variable."""

    percentages: pd.DataFrame
    counts: pd.DataFrame
    n_observations: int

    @property
    def row_labels(self) -> list:
        return list(self.percentages.index)

    @property
    def column_labels(self) -> list:
        return list(self.percentages.columns)


@dataclass(frozen=True)
class EmptyTable:
    """Signals that no jointly non-missing observation was left to tabulate."""

    n_dropped: int = 0


def round_half_up(value, decimals: int = 1) -> float:
    """Round a number half away from zero, e.g. 12.25 -> 12.3."""
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _category_order(values: pd.Series) -> list:
    """Observed categories in declared order for categoricals, sorted otherwise."""
    observed = set(values.unique())
    if isinstance(values.dtype, pd.CategoricalDtype):
        return [c for c in values.cat.categories if c in observed]
    try:
        return sorted(observed)
    except TypeError:
        # Mixed types (e.g. 1 and "1") have no natural order
        return sorted(observed, key=str)


def drop_missing_pairs(explanatory_values, target_values):
    """
    Align two categorical sequences and drop pairs with a missing side.

    Parameters
    ----------
    explanatory_values, target_values : array-like
        Equal-length sequences.

    Returns
    -------
    tuple of pd.Series
        The retained explanatory and target values, plus the number of
        dropped pairs.

    Raises
    ------
    ConfigurationError
        If the sequences differ in length.
    """
    x = pd.Series(explanatory_values).reset_index(drop=True)
    y = pd.Series(target_values).reset_index(drop=True)

    if len(x) != len(y):
        raise ConfigurationError(
            f"Explanatory and target values must have equal length (got {len(x)} and {len(y)})"
        )

    keep = x.notna() & y.notna()
    return x[keep], y[keep], int((~keep).sum())


def count_table(x: pd.Series, y: pd.Series) -> pd.DataFrame:
    """Joint frequency counts with rows and columns in category order."""
    counts = pd.crosstab(x.astype(object), y.astype(object))
    counts = counts.reindex(index=_category_order(x), columns=_category_order(y), fill_value=0)
    counts.index.name = None
    counts.columns.name = None
    return counts


def tabulate(explanatory_values, target_values):
    """
    Build a row-normalized percentage contingency table.

    Parameters
    ----------
    explanatory_values : array-like
        Categories for the table rows.
    target_values : array-like
        Categories for the table columns, same length as explanatory_values.

    Returns
    -------
    ContingencyTable or EmptyTable
        EmptyTable when no pair without missing values remains.
    """
    x, y, n_dropped = drop_missing_pairs(explanatory_values, target_values)

    if n_dropped:
        logger.debug(f"Dropped {n_dropped} pair(s) with missing values")

    if len(x) == 0:
        return EmptyTable(n_dropped=n_dropped)

    counts = count_table(x, y)
    row_totals = counts.sum(axis=1)
    percentages = counts.div(row_totals, axis=0) * 100
    percentages = percentages.apply(lambda col: col.map(round_half_up))

    return ContingencyTable(percentages=percentages, counts=counts, n_observations=len(x))
