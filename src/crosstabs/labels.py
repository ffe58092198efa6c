import logging
import re

import pandas as pd

logger = logging.getLogger(__name__)

# df["col"] / df['col']
_BRACKET_PATTERN = re.compile(r"""^[^\[\]]*\[\s*(['"])(?P<member>.+?)\1\s*\]$""")


def reference_key(reference):
    """
    Reduce a variable reference to the bare column name.

    Parameters
    ----------
    reference : str or pd.Series
        Column name, qualified name ("df.gender", "df$gender", 'df["gender"]')
        or a named Series.

    Returns
    -------
    str
        The bare name. The reference is only inspected syntactically.
    """
    if isinstance(reference, pd.Series):
        return str(reference.name)

    reference = str(reference).strip()

    match = _BRACKET_PATTERN.match(reference)
    if match:
        return match.group("member")

    for separator in ("$", "."):
        if separator in reference:
            member = reference.rsplit(separator, 1)[1]
            if member:
                return member

    return reference


def resolve_label(reference, label_dictionary=None) -> str:
    """
    Map a variable reference to its display label.

    Parameters
    ----------
    reference : str or pd.Series
        Variable reference, see reference_key().
    label_dictionary : dict, optional
        {original_name: display_label}. Missing keys fall back to the name.

    Returns
    -------
    str
        Display label.
    """
    labels = label_dictionary or {}

    if isinstance(reference, str) and reference in labels:
        return labels[reference]

    key = reference_key(reference)
    label = labels.get(key, key)
    logger.debug(f"Resolved reference {reference!r} to label {label!r}")
    return label
