import logging
from pathlib import Path

import pandas as pd

from src.crosstabs.errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_dataset(path) -> pd.DataFrame:
    """
    Read a survey dataset from CSV, Excel or Parquet.

    Parameters
    ----------
    path : str or Path
        File to read; the format is chosen by suffix.

    Returns
    -------
    pd.DataFrame

    Raises
    ------
    ConfigurationError
        If the file does not exist or the suffix is not supported.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Dataset file does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".xlsx", ".xls"):
        df = pd.read_excel(path)
    elif suffix == ".parquet":
        df = pd.read_parquet(path)
    else:
        raise ConfigurationError(f"Unsupported dataset format '{suffix}': {path}")

    logger.info(f"Loaded {len(df)} rows and {len(df.columns)} columns from {path.name}")
    return df


def apply_category_orders(df: pd.DataFrame, orders: dict) -> pd.DataFrame:
    """
    Declare the answer order of categorical columns.

    Parameters
    ----------
    df : pd.DataFrame
        Survey data. Not modified.
    orders : dict
        {column: [category, ...]} in display order.

    Returns
    -------
    pd.DataFrame
        Copy with the listed columns converted to ordered Categoricals. Values
        outside the declared order become missing.

    Raises
    ------
    ConfigurationError
        If a listed column does not exist.
    """
    out = df.copy()

    for column, categories in (orders or {}).items():
        if column not in out.columns:
            raise ConfigurationError(f"Cannot order unknown column '{column}'")

        declared = out[column].isin(list(categories))
        n_lost = int((~declared & out[column].notna()).sum())
        values = out[column].where(declared)
        ordered = pd.Categorical(values, categories=list(categories), ordered=True)
        if n_lost > 0:
            logger.warning(
                f"{n_lost} value(s) of '{column}' are not in the declared order and were set to missing"
            )
        out[column] = ordered

    return out
