"""Scalar validators: null, bool, int, float and string."""

import logging
from typing import Any, Mapping

from datafilter.contracts import ContractError
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import (
    is_number,
    match_mask,
    normalize_charset,
    parse_bound,
    parse_flag,
    parse_loose_float,
    parse_loose_int,
    parse_size,
    split_list,
)
from datafilter.validators.base import Validator

__all__ = ['NullValidator', 'BoolValidator', 'IntValidator', 'FloatValidator', 'StringValidator']

logger = logging.getLogger(__name__)

_FALSE_STRINGS = {"", "0", "false", "no", "off"}


def _truthy(data: Any) -> bool:
    """Loose truth value; "false", "no", "off" and "0" strings are false."""
    if isinstance(data, str):
        return data.strip().lower() not in _FALSE_STRINGS
    return bool(data)


class NullValidator(Validator):
    """Accepts None only."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if data is None:
            return ValidationResult(None, None)
        default = contract.get("default")
        if default is not None:
            if ctx.inline and default == "null":
                return ValidationResult(None, None)
            raise ContractError("Bad contract 'default' value.")
        return self.fallback(contract, ctx, "Data is not null.")


class BoolValidator(Validator):
    """Boolean values, and the ``true``/``false`` literal types.

    With a ``const`` parameter the validator only accepts that literal:
    strictly the same boolean, or loosely any value with the same truth
    value.
    """

    def coerce_default(self, default: Any, ctx: CallContext) -> Any:
        if isinstance(default, str) and default.strip().lower() in ("true", "false"):
            return default.strip().lower() == "true"
        return default

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        const = contract.get("const")
        if const is not None:
            expected = parse_flag(const, "const")
            if data is not None:
                if ctx.strict and data is expected:
                    return ValidationResult(expected, expected)
                if not ctx.strict and _truthy(data) == expected:
                    return ValidationResult(expected, expected)
            return self.fallback(contract, ctx, f"Data is not {str(expected).lower()}.")

        if isinstance(data, bool):
            return ValidationResult(data, data)
        if data is None or ctx.strict:
            return self.fallback(contract, ctx, "Data is not boolean.")
        value = _truthy(data)
        return ValidationResult(value, value)


class IntValidator(Validator):
    """Integer values, optionally bounded by ``min``/``max``.

    Loose mode converts booleans, floats and numeric strings, then clamps
    the value into the bounds (unless ``clamp`` is false, as for ports).
    Strict mode only accepts real integers within bounds.
    """

    def coerce_default(self, default: Any, ctx: CallContext) -> Any:
        if isinstance(default, str):
            number = parse_loose_int(default)
            if number is not None:
                return number
        return default

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        strict = ctx.strict
        convert = ctx.inline or not strict
        minimum = parse_bound(contract.get("min"), "min", int, convert)
        maximum = parse_bound(contract.get("max"), "max", int, convert)
        clamp = parse_flag(contract.get("clamp", True), "clamp")

        if not strict:
            if isinstance(data, bool):
                data = int(data)
            elif isinstance(data, (float, str)):
                data = parse_loose_int(data)
        if not isinstance(data, int) or isinstance(data, bool):
            return self.fallback(contract, ctx, "Data doesn't respect contract (can't cast to int).")

        if (minimum is not None and data < minimum) or (maximum is not None and data > maximum):
            if strict or not clamp:
                return self.fallback(contract, ctx, "Data doesn't respect contract (out of range integer).")
            if minimum is not None:
                data = max(data, minimum)
            if maximum is not None:
                data = min(data, maximum)
        return ValidationResult(data, data)


class FloatValidator(Validator):
    """Float values, optionally bounded by ``min``/``max``.

    Same policy as :class:`IntValidator`; strict mode requires a float
    (an int is refused).
    """

    def coerce_default(self, default: Any, ctx: CallContext) -> Any:
        if isinstance(default, str):
            number = parse_loose_float(default)
            if number is not None:
                return number
        return default

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        strict = ctx.strict
        convert = ctx.inline or not strict
        minimum = parse_bound(contract.get("min"), "min", float, convert)
        maximum = parse_bound(contract.get("max"), "max", float, convert)
        clamp = parse_flag(contract.get("clamp", True), "clamp")

        if not strict:
            if isinstance(data, bool):
                data = float(data)
            elif is_number(data) or isinstance(data, str):
                data = parse_loose_float(data)
        if not isinstance(data, float):
            return self.fallback(contract, ctx, "Data doesn't respect contract (can't cast to float).")

        if (minimum is not None and data < minimum) or (maximum is not None and data > maximum):
            if strict or not clamp:
                return self.fallback(contract, ctx, "Data doesn't respect contract (out of range float).")
            if minimum is not None:
                data = max(data, minimum)
            if maximum is not None:
                data = min(data, maximum)
        return ValidationResult(data, data)


class StringValidator(Validator):
    """Text values.

    Parameters: ``minLen``, ``maxLen`` (truncation in loose mode),
    ``mask`` and ``charset``. A charset list restricts the characters to
    the repertoire of one of the given charsets; in loose mode characters
    outside the first charset are replaced with '?'.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        mask = contract.get("mask")
        charsets = split_list(contract.get("charset"), "charset")
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))

        if ctx.strict:
            if not isinstance(data, str):
                return self.fallback(contract, ctx, "Data doesn't respect contract (not a string).")
            if max_len is not None and len(data) > max_len:
                return self.fallback(contract, ctx, "Data doesn't respect contract (string too long).")
        else:
            if isinstance(data, bool):
                data = "true" if data else "false"
            elif is_number(data):
                data = str(data)
            elif not isinstance(data, str):
                return self.fallback(contract, ctx, "Data doesn't respect contract (can't cast to string).")
            if max_len is not None:
                data = data[:max_len]
        if min_len is not None and len(data) < min_len:
            return self.fallback(contract, ctx, "Data doesn't respect contract (string too short).")

        if charsets:
            targets = [normalize_charset(name) for name in charsets if name]
            if targets and not any(self._fits(data, charset) for charset in targets):
                if ctx.strict:
                    return self.fallback(
                        contract, ctx,
                        f"Data doesn't respect contract (charset mismatch: expected one of [{', '.join(charsets)}]).",
                    )
                data = data.encode(targets[0], errors="replace").decode(targets[0])

        if mask and not match_mask(mask, data):
            return self.fallback(contract, ctx, "Data doesn't respect contract (string doesn't match the given mask).")
        return ValidationResult(data, data)

    @staticmethod
    def _fits(text: str, charset: str) -> bool:
        try:
            text.encode(charset)
        except UnicodeEncodeError:
            return False
        return True
