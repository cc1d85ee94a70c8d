import pytest

from inkmark.utils.colors import BLACK, parse_color, parse_color_or_black, to_normalized_rgb


class TestParseColor:

    @pytest.mark.parametrize("value, expected", [
        ("#ff0000", (255, 0, 0, 1.0)),
        ("#F00", (255, 0, 0, 1.0)),
        ("3b82f6", (59, 130, 246, 1.0)),
        ("rgb(1, 2, 3)", (1, 2, 3, 1.0)),
        ("rgba(255, 255, 0, 0.4)", (255, 255, 0, 0.4)),
    ])
    def test_valid(self, value, expected):
        assert parse_color(value) == expected

    def test_hex_with_alpha(self):
        r, g, b, alpha = parse_color("#00000080")
        assert (r, g, b) == (0, 0, 0)
        assert alpha == pytest.approx(128 / 255)

    @pytest.mark.parametrize("value", [
        None, "", "red", "#12", "#gggggg", "rgb(1, 2)", "rgb(300, 0, 0)",
        "rgba(0, 0, 0, 2)", "rgb(a, b, c)",
    ])
    def test_malformed(self, value):
        assert parse_color(value) is None


class TestFallbacks:

    def test_malformed_becomes_black(self):
        assert parse_color_or_black("nonsense") == BLACK

    def test_normalized_rgb(self):
        assert to_normalized_rgb("#ff0000") == (1.0, 0.0, 0.0)
        assert to_normalized_rgb(None) == (0.0, 0.0, 0.0)
