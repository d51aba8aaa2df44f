"""Tests for the parameter parsing and text helpers."""

import pytest

pytestmark = pytest.mark.unit

from datafilter.contracts import ContractError
from datafilter.utils import (
    format_number,
    is_numeric,
    match_mask,
    normalize_charset,
    parse_bound,
    parse_flag,
    parse_loose_float,
    parse_loose_int,
    parse_size,
    split_csv,
    split_list,
    urlize,
)


class TestParseSize:
    """Sizes with binary units."""

    @pytest.mark.parametrize("value,expected", [
        (None, None), ("", None), (3, 3), (2.9, 2), ("3", 3), ("2K", 2048),
        ("2 kb", 2048), ("1.5MiB", 1572864), ("1G", 1024 ** 3),
    ])
    def test_valid(self, value, expected):
        """Numbers and unit suffixes."""
        assert parse_size(value) == expected

    @pytest.mark.parametrize("value", [-1, True, "ten", "3X", float("inf"), [3]])
    def test_invalid(self, value):
        """Negative, boolean and unreadable sizes are contract errors."""
        with pytest.raises(ContractError, match="Bad size"):
            parse_size(value)


class TestLooseNumbers:
    """Forgiving numeric conversions."""

    @pytest.mark.parametrize("value,expected", [
        ("10", 10), ("-0", 0), ("0x1f", 31), ("017", 15), ("3.99", 3), ("1,000", 1000), (7.5, 7),
    ])
    def test_int(self, value, expected):
        """Decimal, hex, octal and float text."""
        assert parse_loose_int(value) == expected

    @pytest.mark.parametrize("value", ["", "abc", "1,00", "0x", None, float("inf")])
    def test_int_refused(self, value):
        """Unreadable values give None."""
        assert parse_loose_int(value) is None

    @pytest.mark.parametrize("value,expected", [("1e-3", 0.001), ("-.5", -0.5), ("12,345.5", 12345.5), (3, 3.0)])
    def test_float(self, value, expected):
        """Decimal text with optional thousands separators."""
        assert parse_loose_float(value) == expected

    @pytest.mark.parametrize("value", ["nan", "1e999", "1.2.3", True])
    def test_float_refused(self, value):
        """Non finite and unreadable values give None."""
        assert parse_loose_float(value) is None

    def test_is_numeric(self):
        """Numbers and decimal text, never booleans."""
        assert is_numeric(3) and is_numeric(" 2.5 ")
        assert not is_numeric(True) and not is_numeric("0x10")

    def test_format_number(self):
        """Integral floats lose their '.0'."""
        assert format_number(49.0) == "49"
        assert format_number(2.3522) == "2.3522"


class TestContractParameters:
    """Bounds, flags and lists."""

    def test_bound_conversion(self):
        """Text bounds are converted only when allowed."""
        assert parse_bound("10", "max", int, convert=True) == 10
        assert parse_bound(2.5, "min", float, convert=False) == 2.5
        assert parse_bound(None, "min", int, convert=False) is None
        with pytest.raises(ContractError, match="'max'"):
            parse_bound("10", "max", int, convert=False)

    @pytest.mark.parametrize("value,expected", [(True, True), (0, False), ("Yes", True), ("off", False)])
    def test_flags(self, value, expected):
        """Native and literal booleans."""
        assert parse_flag(value, "clamp") is expected

    def test_bad_flag(self):
        """Unknown literals are contract errors."""
        with pytest.raises(ContractError, match="'clamp'"):
            parse_flag("maybe", "clamp")

    def test_split_list(self):
        """Strings split on commas, sequences are copied."""
        assert split_list(" a, b ,c", "values") == ["a", "b", "c"]
        assert split_list((1, 2), "values") == [1, 2]
        assert split_list(None, "values") is None
        with pytest.raises(ContractError):
            split_list(3, "values")

    def test_split_csv_quotes(self):
        """Quoted elements keep their commas."""
        assert split_csv('"enum; values: a, b", int') == ["enum; values: a, b", "int"]


class TestText:
    """Slugs, masks and charsets."""

    @pytest.mark.parametrize("text,expected", [
        ("123 à côté", "123-a-cote"),
        ("Hello, World!", "hello-world"),
        ("snake_case+plus", "snake-case-plus"),
        ("---", "-"),
        ("", ""),
    ])
    def test_urlize(self, text, expected):
        """Transliteration and dash collapsing."""
        assert urlize(text) == expected

    def test_urlize_keeps_underscores(self):
        """Underscores may be kept."""
        assert urlize("snake_case", avoid_underscores=False) == "snake_case"

    def test_match_mask(self):
        """Masks are searched, not anchored."""
        assert match_mask("[0-9]", "abc1")
        assert not match_mask("^[0-9]+$", "abc1")
        with pytest.raises(ContractError):
            match_mask("[", "abc")

    @pytest.mark.parametrize("name,expected", [("UTF8", "utf-8"), ("latin1", "iso8859-1"), ("US-ASCII", "ascii")])
    def test_normalize_charset(self, name, expected):
        """Charset names map to codec names."""
        assert normalize_charset(name) == expected
