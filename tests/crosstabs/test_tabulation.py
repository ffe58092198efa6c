"""Unit tests for src.crosstabs.tabulation."""

import numpy as np
import pandas as pd
import pytest

from src.crosstabs.errors import ConfigurationError
from src.crosstabs.tabulation import ContingencyTable, EmptyTable, round_half_up, tabulate

# ─────────────────────────────────────────────────────────────────────────────
# Tests for round_half_up
# ─────────────────────────────────────────────────────────────────────────────


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (12.25, 12.3),
            (0.05, 0.1),
            (100 * 2 / 3, 66.7),
            (100 / 3, 33.3),
            (50.0, 50.0),
            (0.0, 0.0),
        ],
    )
    def test_rounds_to_one_decimal(self, value, expected):
        assert round_half_up(value) == expected


# ─────────────────────────────────────────────────────────────────────────────
# Tests for tabulate
# ─────────────────────────────────────────────────────────────────────────────


class TestTabulate:
    def test_row_percentages(self):
        x = ["a", "a", "b", "b", "b"]
        y = ["yes", "no", "yes", "yes", "no"]

        table = tabulate(x, y)

        assert isinstance(table, ContingencyTable)
        assert table.row_labels == ["a", "b"]
        assert table.column_labels == ["no", "yes"]
        assert table.percentages.loc["a"].tolist() == [50.0, 50.0]
        assert table.percentages.loc["b"].tolist() == [33.3, 66.7]
        assert table.counts.loc["b"].tolist() == [1, 2]
        assert table.n_observations == 5

    def test_drops_pairs_with_missing_values(self):
        x = ["a", None, "b", "a"]
        y = ["yes", "no", np.nan, "no"]

        table = tabulate(x, y)

        assert table.row_labels == ["a"]
        assert table.column_labels == ["no", "yes"]
        assert table.n_observations == 2

    def test_no_joint_observation_returns_empty_table(self):
        result = tabulate([None, "a"], ["x", None])

        assert isinstance(result, EmptyTable)
        assert result.n_dropped == 2

    def test_empty_input_returns_empty_table(self):
        assert isinstance(tabulate([], []), EmptyTable)

    def test_all_missing_column_returns_empty_table(self):
        x = pd.Series([np.nan] * 4)
        y = pd.Series(["u", "v", "u", "v"])
        assert isinstance(tabulate(x, y), EmptyTable)

    def test_natural_sort_order(self):
        x = [3, 1, 2, 1, 3]
        y = ["z", "x", "y", "x", "x"]

        table = tabulate(x, y)

        assert table.row_labels == [1, 2, 3]
        assert table.column_labels == ["x", "y", "z"]

    def test_declared_categorical_order(self):
        x = pd.Categorical(
            ["low", "high", "mid", "high"], categories=["low", "mid", "high", "unused"], ordered=True
        )
        y = ["no", "yes", "yes", "no"]

        table = tabulate(x, y)

        assert table.row_labels == ["low", "mid", "high"]

    def test_order_is_stable(self):
        rng = np.random.default_rng(0)
        x = rng.choice(["c", "a", "b"], size=50)
        y = rng.choice(["q", "p"], size=50)

        first = tabulate(x, y)
        second = tabulate(list(x), list(y))

        pd.testing.assert_frame_equal(first.percentages, second.percentages)

    def test_raises_for_unequal_lengths(self):
        with pytest.raises(ConfigurationError, match="equal length"):
            tabulate(["a", "b"], ["x"])

    def test_does_not_modify_inputs(self):
        x = pd.Series(["a", None, "b"])
        y = pd.Series(["u", "v", None])
        x_before, y_before = x.copy(), y.copy()

        tabulate(x, y)

        pd.testing.assert_series_equal(x, x_before)
        pd.testing.assert_series_equal(y, y_before)

    @pytest.mark.parametrize("seed", range(10))
    def test_rows_sum_to_100(self, seed):
        rng = np.random.default_rng(seed)
        x = pd.Series(rng.choice(["a", "b", "c", "d"], size=200)).where(rng.random(200) > 0.1)
        y = pd.Series(rng.choice(["low", "mid", "high"], size=200)).where(rng.random(200) > 0.1)

        table = tabulate(x, y)

        # each cell is off by at most half a rounding step
        bound = 0.05 * len(table.column_labels)
        row_sums = table.percentages.sum(axis=1)
        assert ((row_sums - 100).abs() <= bound + 1e-9).all()

    @pytest.mark.parametrize("seed", range(10))
    def test_rows_sum_to_100_for_two_target_categories(self, seed):
        rng = np.random.default_rng(seed)
        x = pd.Series(rng.choice(["a", "b", "c"], size=150))
        y = pd.Series(rng.choice(["yes", "no"], size=150))

        table = tabulate(x, y)

        row_sums = table.percentages.sum(axis=1)
        assert ((row_sums - 100).abs() <= 0.1 + 1e-9).all()

    def test_many_target_categories_can_exceed_one_decimal(self):
        table = tabulate(["a"] * 6, list("uvwxyz"))

        assert table.percentages.loc["a"].tolist() == [16.7] * 6
        assert table.percentages.sum(axis=1).round(1).tolist() == [100.2]
