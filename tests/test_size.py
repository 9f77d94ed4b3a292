"""Tests for image size normalization."""

import pytest

from markdown_enclave.size import normalize_size


class TestNormalizeSize:
    """Tests for normalize_size function."""

    @pytest.mark.parametrize(
        "size, expected",
        [
            ("100", "100px"),
            ("120px", "120px"),
            ("10rem", "10rem"),
            ("50%", "50%"),
            ("px", "auto"),
            ("rem", "auto"),
            ("%", "auto"),
            ("", "auto"),
            ("100em", "100px"),
            ("abc", "auto"),
            ("0", "auto"),
        ],
    )
    def test_normalizes(self, size, expected):
        assert normalize_size(size) == expected

    def test_zero_with_unit_is_auto(self):
        """A zero size is auto even with a supported unit."""
        assert normalize_size("0px") == "auto"

    def test_supported_unit_keeps_original_text(self):
        """Strings ending in a supported unit are returned untouched."""
        assert normalize_size(" 12.5rem") == " 12.5rem"

    def test_uses_first_number(self):
        """Only the first run of digits is kept for unknown units."""
        assert normalize_size("30 by 40") == "30px"

    def test_none_is_auto(self):
        assert normalize_size(None) == "auto"
