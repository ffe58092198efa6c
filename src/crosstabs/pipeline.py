import logging

import pandas as pd

from src.crosstabs.config.options import ReportOptions
from src.crosstabs.errors import ConfigurationError
from src.crosstabs.labels import reference_key, resolve_label
from src.crosstabs.palettes import validate_palette
from src.crosstabs.plotting import render_chart
from src.crosstabs.report import ReportSection, SectionStatus, render_table
from src.crosstabs.statistical_tests import TestFailure, test_independence
from src.crosstabs.tabulation import EmptyTable, tabulate

logger = logging.getLogger(__name__)


def _lookup(dataset: pd.DataFrame, reference):
    """
    Find the column a reference points to.

    Returns
    -------
    tuple
        (column name, values)

    Raises
    ------
    ConfigurationError
        If the column does not exist or a Series is unnamed or has the
        wrong length.
    """
    if isinstance(reference, pd.Series):
        if reference.name is None:
            raise ConfigurationError("Series references must be named, e.g. df['gender']")
        if len(reference) != len(dataset):
            raise ConfigurationError(
                f"Series '{reference.name}' has {len(reference)} values, dataset has {len(dataset)} rows"
            )
        return reference_key(reference), reference.reset_index(drop=True)

    if reference in dataset.columns:
        return reference, dataset[reference].reset_index(drop=True)

    key = reference_key(reference)
    if key not in dataset.columns:
        raise ConfigurationError(f"Column '{key}' (from reference {reference!r}) not found in dataset")
    return key, dataset[key].reset_index(drop=True)


def _label_for(reference, column: str, labels) -> str:
    # Exact column names are not split on "." or "$"
    if isinstance(reference, str) and reference == column:
        return labels.get(column, column)
    return resolve_label(reference, labels)


def generate_cross_tabulation_report(
    dataset, target_reference, explanatory_references, options: ReportOptions = None
) -> list[ReportSection]:
    """
    Cross-tabulate a target variable against each explanatory variable.

    For every explanatory variable, in the order supplied, computes the
    row-normalized contingency table, the table and chart artifacts and a
    chi-squared test of independence. Variables without any jointly
    non-missing observation produce a skip section; failed tests produce a
    section carrying the failure. Neither stops the batch.

    Parameters
    ----------
    dataset : pd.DataFrame
        Survey data. Not modified.
    target_reference : str or pd.Series
        Target variable (column name, qualified name or named Series).
    explanatory_references : list
        Explanatory variables, same forms as target_reference.
    options : ReportOptions, optional
        Palette, title/axis texts and label dictionary.

    Returns
    -------
    list of ReportSection
        One section per explanatory variable, in supplied order.

    Raises
    ------
    ConfigurationError
        If the dataset is not a DataFrame, no explanatory variable is given,
        the palette is invalid or a referenced column does not exist.
    """
    options = options or ReportOptions()

    if not isinstance(dataset, pd.DataFrame):
        raise ConfigurationError(f"dataset must be a pandas DataFrame, got {type(dataset).__name__}")
    if explanatory_references is None or len(explanatory_references) == 0:
        raise ConfigurationError(
            "No explanatory variables provided for analysis. Please specify at least one."
        )
    validate_palette(options.palette)

    labels = dict(options.label_dictionary or {})

    target_column, target_values = _lookup(dataset, target_reference)
    target_label = _label_for(target_reference, target_column, labels)

    # Resolve every column before any per-variable work
    explanatory = [(ref, *_lookup(dataset, ref)) for ref in explanatory_references]

    logger.info(f"Cross-tabulating '{target_label}' against {len(explanatory)} variable(s)")

    sections = []

    for reference, column, values in explanatory:
        label = _label_for(reference, column, labels)
        logger.info(f"Processing: {label}")

        table = tabulate(values, target_values)

        if isinstance(table, EmptyTable):
            notice = (
                f"Skipping analysis for '{label}' due to no non-missing data for crosstabulation."
            )
            logger.warning(notice)
            sections.append(
                ReportSection(
                    variable=column,
                    label=label,
                    status=SectionStatus.SKIPPED,
                    target_label=target_label,
                    notice=notice,
                )
            )
            continue

        table_artifact = render_table(table, label, target_label)
        chart = render_chart(
            table,
            label,
            target_label,
            title_suffix=options.title_suffix,
            xlabel=options.xlabel,
            ylabel_suffix=options.ylabel_suffix,
            palette=options.palette,
        )

        result = test_independence(values, target_values)

        if isinstance(result, TestFailure):
            status = SectionStatus.TEST_FAILED
            notice = "This might be due to insufficient non-missing data or other data issues."
            logger.warning(f"Chi-squared test failed for '{label}': {result.message}")
        else:
            status = SectionStatus.COMPLETE
            notice = None
            logger.debug(f"'{label}': p-value={result.p_value:.4f}")

        sections.append(
            ReportSection(
                variable=column,
                label=label,
                status=status,
                target_label=target_label,
                table=table_artifact,
                chart=chart,
                test_result=result,
                notice=notice,
            )
        )

    return sections
