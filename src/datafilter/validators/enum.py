"""Enumeration validator."""

from typing import Any, Mapping

from datafilter.contracts import require
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import split_list
from datafilter.validators.base import Validator

__all__ = ['EnumValidator']


class EnumValidator(Validator):
    """Membership test against the ``values`` parameter.

    Values are compared exactly: no case folding and no type coercion
    (``1`` is not a member of ``["1"]``, ``True`` is not a member of
    ``[1]``).
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        values = split_list(contract.get("values"), "values")
        require(bool(values), "Enum without values.")
        if any(type(member) is type(data) and member == data for member in values):
            return ValidationResult(data, data)
        return self.fallback(contract, ctx, f"Data doesn't respect contract (bad enum value '{data}').")
