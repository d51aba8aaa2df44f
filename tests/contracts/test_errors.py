"""Tests for the error taxonomy and the require() helper."""

import pytest

pytestmark = pytest.mark.unit

from datafilter.contracts import ContractError, ValidationError, require


class TestErrorTaxonomy:
    """The two error kinds are distinct and never confused."""

    def test_contract_error_is_runtime_error(self):
        """Contract errors are programmer errors."""
        assert issubclass(ContractError, RuntimeError)
        assert not issubclass(ContractError, ValueError)

    def test_validation_error_is_value_error(self):
        """Validation errors are data errors."""
        assert issubclass(ValidationError, ValueError)
        assert not issubclass(ValidationError, ContractError)

    def test_errors_carry_message(self):
        """Both kinds keep their human-readable message."""
        assert str(ContractError("bad schema")) == "bad schema"
        assert str(ValidationError("bad data")) == "bad data"


class TestRequire:
    """require() raises ContractError on false conditions."""

    def test_require_passes_on_true(self):
        """A true condition does nothing."""
        require(True, "never raised")

    def test_require_raises_contract_error(self):
        """A false condition raises with the given message."""
        with pytest.raises(ContractError, match="Enum without values"):
            require(False, "Enum without values.")
