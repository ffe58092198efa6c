"""Tests for palettes module."""

import pytest
from matplotlib.colors import to_hex

from src.crosstabs.errors import ConfigurationError
from src.crosstabs.palettes import gradient_palette, resolve_colors, validate_palette


class TestGradientPalette:
    def test_returns_requested_number_of_colors(self):
        palette = gradient_palette("lightblue", "darkblue")
        assert len(palette(5)) == 5

    def test_runs_from_start_to_end(self):
        colors = gradient_palette("lightblue", "darkblue")(3)
        assert colors[0] == to_hex("lightblue")
        assert colors[-1] == to_hex("darkblue")

    def test_single_color_is_start(self):
        assert gradient_palette("lightblue", "darkblue")(1) == [to_hex("lightblue")]

    def test_zero_colors(self):
        assert gradient_palette()(0) == []


class TestResolveColors:
    def test_fixed_palette_cycles(self):
        assert resolve_colors(["c1", "c2"], 4) == ["c1", "c2", "c1", "c2"]

    def test_fixed_palette_truncates(self):
        assert resolve_colors(["red", "green", "blue"], 2) == ["red", "green"]

    def test_generator_is_called_with_number_of_categories(self):
        calls = []

        def palette(n):
            calls.append(n)
            return [f"#00000{i}" for i in range(n)]

        colors = resolve_colors(palette, 3)

        assert calls == [3]
        assert colors == ["#000000", "#000001", "#000002"]

    def test_single_color_string(self):
        assert resolve_colors("grey", 3) == ["grey", "grey", "grey"]

    def test_generator_returning_nothing_raises(self):
        with pytest.raises(ConfigurationError, match="no colors"):
            resolve_colors(lambda n: [], 2)

    def test_generator_returning_too_few_colors_recycles(self, caplog):
        colors = resolve_colors(lambda n: ["red"], 3)

        assert colors == ["red", "red", "red"]
        assert "Palette returned 1 colors for 3 categories" in caplog.text

    def test_failing_generator_raises_configuration_error(self):
        def broken(n):
            raise RuntimeError("boom")

        with pytest.raises(ConfigurationError, match="Palette function failed: boom"):
            resolve_colors(broken, 2)


class TestValidatePalette:
    @pytest.mark.parametrize("palette", [42, [], [1, 2], None, {"a": 1}])
    def test_invalid_palette_raises(self, palette):
        with pytest.raises(ConfigurationError, match="Invalid palette"):
            validate_palette(palette)

    @pytest.mark.parametrize("palette", [["red"], ("red", "blue"), "red", gradient_palette()])
    def test_valid_palette_passes(self, palette):
        validate_palette(palette)
