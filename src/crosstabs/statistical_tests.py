import logging
from dataclasses import dataclass

import numpy as np
from scipy.stats import chi2_contingency

from src.crosstabs.tabulation import count_table, drop_missing_pairs

logger = logging.getLogger(__name__)

APPROXIMATION_CAVEAT = "Chi-squared approximation may be incorrect"


@dataclass
class IndependenceTestResult:
    """Outcome of a chi-squared test of independence."""

    statistic: float
    dof: int
    p_value: float
    method: str
    n_observations: int
    expected: np.ndarray
    caveat: str = None


@dataclass
class TestFailure:
    """The independence test could not be computed."""

    __test__ = False  # not a pytest test class

    message: str


def chi_square_independence_test(observed, correction: bool = True) -> IndependenceTestResult:
    """
    Pearson's chi-squared test on a two-way table of counts.

    Parameters
    ----------
    observed : array-like
        Table of raw counts with at least two rows and two columns.
    correction : bool, optional
        Apply Yates' continuity correction to 2x2 tables. Defaults to True.

    Returns
    -------
    IndependenceTestResult

    Raises
    ------
    ValueError
        If the table has fewer than two rows or columns, or scipy rejects it.
    """
    observed = np.asarray(observed)
    if observed.ndim != 2:
        raise ValueError("observed must be a two-way table")
    if observed.shape[0] < 2 or observed.shape[1] < 2:
        raise ValueError(
            f"'x' and 'y' must have at least 2 levels (table is {observed.shape[0]}x{observed.shape[1]})"
        )

    result = chi2_contingency(observed, correction=correction)
    expected = result.expected_freq

    yates = correction and result.dof == 1
    method = "Pearson's Chi-squared test"
    if yates:
        method += " with Yates' continuity correction"

    caveat = APPROXIMATION_CAVEAT if (expected < 5).any() else None

    return IndependenceTestResult(
        statistic=float(result.statistic),
        dof=int(result.dof),
        p_value=float(result.pvalue),
        method=method,
        n_observations=int(observed.sum()),
        expected=expected,
        caveat=caveat,
    )


def test_independence(explanatory_values, target_values):
    """
    Test independence of two categorical sequences.

    Missing pairs are dropped before counting. Any problem with the data is
    returned as a TestFailure instead of being raised.

    Parameters
    ----------
    explanatory_values, target_values : array-like
        Equal-length categorical sequences.

    Returns
    -------
    IndependenceTestResult or TestFailure
    """
    try:
        x, y, _ = drop_missing_pairs(explanatory_values, target_values)
        if len(x) == 0:
            raise ValueError("no observations without missing values")
        result = chi_square_independence_test(count_table(x, y).values)
    except Exception as e:
        logger.debug(f"Chi-squared test failed: {e}")
        return TestFailure(message=str(e))

    logger.debug(
        f"{result.method}: statistic={result.statistic:.4f}, dof={result.dof}, pvalue={result.p_value:.4f}"
    )
    return result


# Keep pytest from collecting the public API as a test function
test_independence.__test__ = False
