"""Tests for the list, assoc and json validators."""

import json

import pytest

pytestmark = pytest.mark.unit

from datafilter.contracts import ContractError, ValidationError


class TestList:
    """Sequences, element contracts and positional contracts."""

    def test_tuple_becomes_list(self, data_filter):
        """Tuples are accepted in both modes."""
        assert data_filter.process((1, 2), "list", strict=True) == [1, 2]

    def test_loose_iterables(self, data_filter):
        """Loose mode reads other iterables, but not text or mappings."""
        assert data_filter.process(iter([1, 2]), "list") == [1, 2]
        with pytest.raises(ValidationError, match="not a list"):
            data_filter.process("ab", "list")
        with pytest.raises(ValidationError, match="not a list"):
            data_filter.process({"a": 1}, "list")

    def test_array_alias(self, data_filter):
        """array is another name for list."""
        assert data_filter.process(["x"], "array") == ["x"]

    def test_element_contract(self, data_filter):
        """Every element is validated."""
        assert data_filter.process(["1", 2.5], {"type": "list", "contract": "int"}) == [1, 2]

    def test_bad_element_uses_default(self, data_filter):
        """A refused element fails the list, which falls back on the default."""
        contract = {"type": "list", "contract": "int", "default": []}
        assert data_filter.process(["x"], contract) == []

    def test_bad_element_without_default(self, data_filter):
        """The index of the refused element is reported."""
        with pytest.raises(ValidationError, match="element 1"):
            data_filter.process([1, "x"], {"type": "list", "contract": "int"})

    def test_length_bounds(self, data_filter):
        """Loose mode truncates, strict mode refuses."""
        assert data_filter.process([1, 2, 3], "list; maxLen: 2") == [1, 2]
        with pytest.raises(ValidationError, match="too long"):
            data_filter.process([1, 2, 3], "list; maxLen: 2", strict=True)
        with pytest.raises(ValidationError, match="too short"):
            data_filter.process([1], "list; minLen: 2")

    def test_positional_contracts(self, data_filter):
        """values holds one contract per element."""
        contract = 'list; values: "int", "string; maxLen: 2"'
        assert data_filter.process(["1", "abc"], contract) == [1, "ab"]

    def test_positional_extra_elements(self, data_filter):
        """Loose mode drops extra elements, strict mode refuses them."""
        contract = {"type": "list", "values": ["int", "int"]}
        assert data_filter.process([1, 2, 3], contract) == [1, 2]
        with pytest.raises(ValidationError, match="number of elements"):
            data_filter.process([1, 2, 3], contract, strict=True)

    def test_positional_missing_elements_strict(self, data_filter):
        """Strict mode requires every positional element."""
        with pytest.raises(ValidationError, match="number of elements"):
            data_filter.process([1], {"type": "list", "values": ["int", "int"]}, strict=True)

    def test_positional_rest(self, data_filter):
        """'...' keeps the remaining elements as they are."""
        contract = {"type": "list", "values": ["int", "..."]}
        assert data_filter.process(["1", "a", None], contract, strict=False) == [1, "a", None]
        assert data_filter.process([1, "a", None], contract, strict=True) == [1, "a", None]

    def test_bad_values_parameter(self, data_filter):
        """values must be text or a sequence."""
        with pytest.raises(ContractError):
            data_filter.process([1], {"type": "list", "values": 3})


class TestAssoc:
    """Records with declared keys."""

    def test_keys_string(self, data_filter):
        """Comma-separated key names."""
        assert data_filter.process({"a": 1, "b": 2, "c": 3}, "assoc; keys: \"a, b\"") == {"a": 1, "b": 2}

    def test_missing_mandatory_key(self, data_filter):
        """Declared keys are mandatory."""
        with pytest.raises(ValidationError, match="mandatory key 'b'"):
            data_filter.process({"a": 1}, {"a": "int", "b": "int"})

    def test_missing_key_uses_record_default(self, data_filter):
        """A missing key falls back on the record default."""
        contract = {"type": "assoc", "keys": {"a": "int"}, "default": {"a": 0}}
        assert data_filter.process({}, contract) == {"a": 0}

    def test_optional_key_suffix(self, data_filter):
        """'?' makes a key optional."""
        assert data_filter.process({"a": 1}, {"a": "int", "b?": "int"}) == {"a": 1}
        assert data_filter.process({"a": 1, "b": "2"}, {"a": "int", "b?": "int"}) == {"a": 1, "b": 2}

    def test_mandatory_parameter(self, data_filter):
        """mandatory: false in the field contract makes it optional."""
        contract = {"a": "int", "b": {"type": "int", "mandatory": False}}
        assert data_filter.process({"a": 1}, contract) == {"a": 1}

    def test_optional_key_counts_as_declared(self, data_filter):
        """An optional key present in strict mode is not an extra key."""
        assert data_filter.process({"a": 1, "b": 2}, {"a": "int", "b?": "int"}, strict=True) == {"a": 1, "b": 2}

    def test_nested_error_propagates(self, data_filter):
        """A refused field fails the whole record, default or not."""
        contract = {"type": "assoc", "keys": {"id": "int"}, "default": {"id": 0}}
        with pytest.raises(ValidationError):
            data_filter.process({"id": "x"}, contract)

    def test_not_a_mapping(self, data_filter):
        """Lists are not records."""
        with pytest.raises(ValidationError, match="not an associative array"):
            data_filter.process([1], {"a": "int"})

    def test_wildcard_value(self, data_filter):
        """A '...' field contract also keeps undeclared keys."""
        assert data_filter.process({"a": 1, "z": 2}, {"a": "int", "rest": "..."}, strict=True) == {"a": 1, "z": 2}

    def test_unicode_ellipsis_wildcard(self, data_filter):
        """The single-character ellipsis is a wildcard too."""
        assert data_filter.process({"a": 1, "z": 2}, ["a", "…"], strict=True) == {"a": 1, "z": 2}

    def test_wildcard_contract_refuses(self, data_filter):
        """Undeclared values are checked against the wildcard contract."""
        with pytest.raises(ValidationError):
            data_filter.process({"a": 1, "z": "x"}, {"a": "int", "...": "int"})

    def test_missing_keys_parameter(self, data_filter):
        """A record contract needs keys."""
        with pytest.raises(ContractError, match="without sub-keys"):
            data_filter.process({}, {"type": "assoc"})

    def test_nested_records(self, data_filter):
        """Records nest."""
        contract = {"user": {"name": "string", "tags": {"type": "list", "contract": "slug"}}}
        data = {"user": {"name": "Ann", "tags": ["Hello World"]}}
        assert data_filter.process(data, contract) == {"user": {"name": "Ann", "tags": ["hello-world"]}}


class TestJson:
    """JSON documents."""

    def test_plain_document(self, data_filter):
        """The text is kept and the decoded data is the output."""
        result = data_filter.validate('{"a": [1, 2]}', "json")
        assert result.value == '{"a": [1, 2]}'
        assert result.output == {"a": [1, 2]}

    def test_invalid_document(self, data_filter):
        """Broken JSON is refused."""
        with pytest.raises(ValidationError, match="valid JSON"):
            data_filter.process("{a:", "json")

    @pytest.mark.parametrize("value", ["NaN", "[Infinity]", '{"a": -Infinity}'])
    def test_non_standard_constants(self, data_filter, value):
        """NaN and Infinity are not JSON."""
        with pytest.raises(ValidationError, match="valid JSON"):
            data_filter.process(value, "json")

    def test_not_text(self, data_filter):
        """Only text is JSON."""
        with pytest.raises(ValidationError):
            data_filter.process({"a": 1}, "json")

    def test_size_bounds(self, data_filter):
        """minLen/maxLen bound the encoded size in bytes."""
        with pytest.raises(ValidationError, match="size"):
            data_filter.process('"é"', "json; maxLen: 3")

    def test_contract_reencodes(self, data_filter):
        """A transformed payload is encoded again."""
        result = data_filter.validate('{"name": "Café au lait", "n": "3"}', {
            "type": "json", "contract": {"name": "slug", "n": "int"},
        })
        assert json.loads(result.value) == {"name": "cafe-au-lait", "n": 3}
        assert result.output == {"name": "cafe-au-lait", "n": 3}

    def test_contract_refusal_uses_default(self, data_filter):
        """A refused payload falls back on the default document."""
        contract = {"type": "json", "contract": {"n": "=int"}, "default": '{"n": 0}'}
        assert data_filter.process('{"n": "x"}', contract) == '{"n": 0}'
