"""Tests for the contract string parser."""

import pytest

pytestmark = pytest.mark.unit

from datafilter.contracts import ContractError
from datafilter.engine.parser import normalize_params, parse_contract


class TestParseType:
    """The type segment."""

    def test_type_only(self):
        """A bare type token is a contract."""
        assert parse_contract("int") == {"type": "int"}

    def test_type_is_trimmed(self):
        """Whitespace around the type is ignored."""
        assert parse_contract("  ?int|string  ") == {"type": "?int|string"}

    def test_trailing_semicolons_are_ignored(self):
        """Empty parameter segments are skipped."""
        assert parse_contract("int;") == {"type": "int"}
        assert parse_contract("int; ;") == {"type": "int"}


class TestParseParameters:
    """Key/value parameter segments."""

    def test_parameters_are_trimmed_strings(self):
        """Values are kept as strings, keys and values trimmed."""
        result = parse_contract("int ; min : 1 ; max: 10")
        assert result == {"type": "int", "min": "1", "max": "10"}

    def test_quoted_value_keeps_semicolon(self):
        """A quoted value may contain semicolons."""
        result = parse_contract('string; maxLen: 3; default: "a;b"')
        assert result == {"type": "string", "maxLen": "3", "default": "a;b"}

    def test_quoted_value_keeps_whitespace(self):
        """Quoted content is kept verbatim."""
        assert parse_contract('string; default: "  a  "')["default"] == "  a  "

    def test_quoted_escapes(self):
        """Escaped quotes and backslashes inside quotes."""
        result = parse_contract(r'string; default: "say \"hi\" \\o/"')
        assert result["default"] == 'say "hi" \\o/'

    def test_unquoted_escaped_semicolon(self):
        """A backslash escapes a semicolon in unquoted values."""
        assert parse_contract(r"string; mask: a\;b; maxLen: 2") == {
            "type": "string",
            "mask": "a;b",
            "maxLen": "2",
        }

    def test_value_may_contain_colons(self):
        """Only the first colon separates the key."""
        assert parse_contract("time; format: %H:%M")["format"] == "%H:%M"

    def test_keys_are_normalized(self):
        """maxlen, max_len and MAXLEN all become maxLen."""
        assert "maxLen" in parse_contract("string; maxlen: 3")
        assert "maxLen" in parse_contract("string; max_len: 3")
        assert "minLen" in parse_contract("string; MINLEN: 3")
        assert "inFormat" in parse_contract("date; informat: %d/%m/%Y")


class TestParseErrors:
    """Malformed contract strings are contract errors."""

    def test_unterminated_quote(self):
        """The parser never silently drops input."""
        with pytest.raises(ContractError, match="unterminated quote"):
            parse_contract('string; default: "abc')

    def test_parameter_without_colon(self):
        """A non-empty segment must be a key/value pair."""
        with pytest.raises(ContractError, match="missing ':'"):
            parse_contract("int; min")

    def test_empty_parameter_name(self):
        """A value without a key is refused."""
        with pytest.raises(ContractError, match="empty name"):
            parse_contract("int; : 3")


class TestNormalizeParams:
    """Parameter name normalization of structured contracts."""

    def test_known_names_are_canonical(self):
        """Length and format names are normalized, others untouched."""
        result = normalize_params({"MAXLEN": 3, "min_len": 1, "outformat": "%Y", "Other": 1})
        assert result == {"maxLen": 3, "minLen": 1, "outFormat": "%Y", "Other": 1}

    def test_input_is_not_mutated(self):
        """A new mapping is returned."""
        contract = {"type": "string", "max_len": 3}
        normalize_params(contract)
        assert contract == {"type": "string", "max_len": 3}
