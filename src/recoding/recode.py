"""
Recoding helpers for questionnaire responses.

Each helper takes the raw answers of one question and returns a new,
analysis-ready variable. Frequency tables of the old and new values are
logged at DEBUG level so recodes can be checked by eye.
"""

import logging

import pandas as pd

logger = logging.getLogger(__name__)


def _log_frequencies(title, values):
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"{title}:\n{pd.Series(values).value_counts(dropna=False).to_string()}")


def dummy_code_binary(values, reverse: bool = False, choices=(1, 2)) -> pd.Series:
    """
    Convert a two-choice question to a 0/1 dummy variable.

    Parameters
    ----------
    values : array-like
        Raw answers.
    reverse : bool, optional
        If False, the first choice becomes 1 and the second 0. If True, the
        first choice becomes 0 and the second 1. Defaults to False.
    choices : tuple, optional
        Codes of the first and second choice. Defaults to (1, 2).

    Returns
    -------
    pd.Series
        Nullable Int64 series; any other answer is missing.
    """
    if len(choices) != 2:
        raise ValueError("choices must hold exactly two codes")

    old = pd.Series(values)
    first, second = choices
    mapping = {first: 0, second: 1} if reverse else {first: 1, second: 0}

    new = old.map(mapping).astype("Int64")

    _log_frequencies("Crosstable of the old variable", old)
    _log_frequencies("Crosstable of the new variable", new)
    return new


def reverse_scale(values, dont_know=None) -> pd.Series:
    """
    Reverse an ordinal scale.

    The distinct valid answers, sorted ascending, are mapped to n, n-1, ..., 1.
    Missing answers and "don't know" codes become missing.

    Parameters
    ----------
    values : array-like
        Raw ordinal answers, e.g. 1..5.
    dont_know : scalar or list, optional
        Code(s) for "don't know" and similar non-substantive answers.

    Returns
    -------
    pd.Series
        Nullable Int64 series.

    Examples
    --------
    >>> reverse_scale([1, 2, 3, 5], dont_know=5).tolist()
    [3, 2, 1, <NA>]
    """
    old = pd.Series(values)

    if dont_know is None:
        excluded = []
    elif isinstance(dont_know, (list, tuple, set)):
        excluded = list(dont_know)
    else:
        excluded = [dont_know]

    alternatives = sorted(v for v in old.dropna().unique() if v not in excluded)
    logger.debug(f"Alternatives of the old variable without DK: {alternatives}")

    n = len(alternatives)
    mapping = {alt: n - i for i, alt in enumerate(alternatives)}
    logger.debug(f"Alternatives of the new variable: {list(mapping.values())}")

    new = old.map(mapping).astype("Int64")

    _log_frequencies("Crosstable of the old variable", old)
    _log_frequencies("Crosstable of the new variable", new)
    return new


def split_multiple_answers(values, sep: str = ",", prefix: str = None) -> pd.DataFrame:
    """
    Split multi-answer responses into 0/1 indicator columns.

    Parameters
    ----------
    values : array-like
        Strings such as "1,3,4" listing the selected options.
    sep : str, optional
        Separator between options. Defaults to ",".
    prefix : str, optional
        Column name prefix, "{prefix}_{option}". Defaults to the series name
        when it has one.

    Returns
    -------
    pd.DataFrame
        One nullable Int64 column per option, sorted by option; rows with a
        missing answer stay missing.
    """
    old = pd.Series(values)
    if prefix is None and old.name is not None:
        prefix = str(old.name)

    answered = old.notna()
    tokens = old[answered].astype(str).str.split(sep).map(
        lambda parts: sorted({p.strip() for p in parts if p.strip()})
    )

    options = sorted({opt for parts in tokens for opt in parts})
    columns = {}
    for opt in options:
        name = f"{prefix}_{opt}" if prefix else opt
        column = pd.Series(pd.NA, index=old.index, dtype="Int64")
        column[answered] = tokens.map(lambda parts, opt=opt: int(opt in parts))
        columns[name] = column

    new = pd.DataFrame(columns, index=old.index)

    _log_frequencies("Crosstable of the old variable", old)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Selections per option:\n{new.sum().to_string()}")
    return new
