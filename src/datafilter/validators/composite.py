"""Composite validators: lists, records and JSON payloads.

These validators recurse into the orchestrator (through
:meth:`CallContext.process`) to validate nested values.
"""

import json
import logging
from collections.abc import Iterable, Mapping as MappingABC
from typing import Any, Mapping

from datafilter.contracts import ContractError, ValidationError, require
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import parse_size, split_csv
from datafilter.validators.base import Validator

__all__ = ['ListValidator', 'AssocValidator', 'JsonValidator', 'WILDCARDS']

logger = logging.getLogger(__name__)

# Entries of a record contract absorbing the undeclared keys.
WILDCARDS = ("...", "…")

_REST_MARKER = "..."


def _refuse_constant(name: str) -> Any:
    # NaN and Infinity are Python extensions, not JSON
    raise ValueError(f"Invalid JSON constant {name!r}.")


class ListValidator(Validator):
    """Ordered sequences.

    Parameters
    ----------
    minLen, maxLen
        Bounds on the number of elements. Loose mode truncates long lists.
    contract
        Contract applied to every element.
    values
        Positional contracts, one per element (a comma-separated string
        or a sequence). A ``...`` entry accepts the remaining elements as
        they are. Loose mode drops the elements beyond the last contract;
        strict mode requires the exact number of elements.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        strict = ctx.strict
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        subcontract = contract.get("contract")
        values = contract.get("values")

        if isinstance(data, (list, tuple)):
            data = list(data)
        elif not strict and isinstance(data, Iterable) and not isinstance(data, (str, bytes, bytearray, MappingABC)):
            data = list(data)
        else:
            return self.fallback(contract, ctx, "Data doesn't respect contract (not a list).")

        if max_len is not None and len(data) > max_len:
            if strict:
                return self.fallback(contract, ctx, "Data size doesn't respect the contract (list too long).")
            data = data[:max_len]
        if min_len is not None and len(data) < min_len:
            return self.fallback(contract, ctx, "Data size doesn't respect the contract (list too short).")

        if values:
            return self._validate_positional(data, values, contract, ctx)
        if subcontract is None:
            return ValidationResult(data, data)

        result = []
        for index, item in enumerate(data):
            try:
                result.append(ctx.process(item, subcontract).value)
            except ValidationError:
                return self.fallback(contract, ctx, f"Data doesn't respect contract (bad value for element {index}).")
        return ValidationResult(result, result)

    def _validate_positional(self, data: list, values: Any, contract: Mapping[str, Any],
                             ctx: CallContext) -> ValidationResult:
        if isinstance(values, str):
            values = split_csv(values)
        elif not isinstance(values, (list, tuple)):
            raise ContractError("Bad contract 'values' parameter.")

        result = []
        rest = False
        for index, item in enumerate(data):
            if index >= len(values):
                if ctx.strict:
                    return self.fallback(contract, ctx, "Data doesn't respect contract (bad number of elements in list).")
                break
            sub = values[index].strip() if isinstance(values[index], str) else values[index]
            if sub == _REST_MARKER:
                rest = True
                result.extend(data[index:])
                break
            try:
                result.append(ctx.process(item, sub).value)
            except ValidationError:
                return self.fallback(contract, ctx, f"Data doesn't respect contract (bad value for element {index}).")

        if ctx.strict and not rest and len(data) != len(values):
            return self.fallback(contract, ctx, "Data doesn't respect contract (bad number of elements in list).")
        return ValidationResult(result, result)


class AssocValidator(Validator):
    """String-keyed records.

    The ``keys`` parameter declares the fields: a comma-separated string or
    a sequence of names (values kept as they are), or a mapping from name
    to sub-contract. A name ending with ``?`` is optional; a sub-contract
    mapping may also carry ``mandatory: false``. A ``...`` entry (as a name,
    or as a sub-contract) keeps the undeclared keys, validating them
    against its sub-contract when one is given.

    In strict mode, undeclared keys are refused unless a wildcard is
    present. Optional keys count as declared even when absent.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        keys = contract.get("keys")
        if isinstance(keys, str):
            keys = [name.strip() for name in keys.split(",") if name.strip()]
        elif keys is not None and not isinstance(keys, (list, tuple, MappingABC)):
            raise ContractError("Bad contract 'keys' parameter.")
        require(bool(keys), "Associative array without sub-keys contract.")

        if not isinstance(data, MappingABC):
            return self.fallback(contract, ctx, "Data doesn't respect contract (not an associative array).")

        entries = keys.items() if isinstance(keys, MappingABC) else ((name, None) for name in keys)
        declared = set()
        output = {}
        wildcard = False
        wildcard_contract = None
        for name, subcontract in entries:
            if not isinstance(name, str):
                raise ContractError("Bad contract 'keys' parameter.")
            if name in WILDCARDS:
                wildcard = True
                if not (isinstance(subcontract, str) and subcontract in WILDCARDS):
                    wildcard_contract = subcontract
                continue
            if isinstance(subcontract, str) and subcontract in WILDCARDS:
                wildcard = True
                continue

            mandatory = True
            if name.endswith("?"):
                name = name[:-1]
                mandatory = False
            if isinstance(subcontract, MappingABC) and "mandatory" in subcontract:
                subcontract = dict(subcontract)
                mandatory = mandatory and bool(subcontract.pop("mandatory"))
            declared.add(name)

            if name not in data:
                if not mandatory:
                    continue
                return self.fallback(contract, ctx, f"Data doesn't respect contract (mandatory key '{name}').")
            output[name] = ctx.process(data[name], subcontract).value

        extra = [name for name in data if name not in declared]
        if wildcard:
            for name in extra:
                if wildcard_contract:
                    output[name] = ctx.process(data[name], wildcard_contract).value
                else:
                    output[name] = data[name]
        elif extra and ctx.strict:
            return self.fallback(
                contract, ctx, f"Data doesn't respect contract (extra keys '{', '.join(map(str, extra))}')."
            )
        return ValidationResult(output, output)


class JsonValidator(Validator):
    """JSON documents given as text.

    The value is the JSON text itself, re-encoded when the ``contract``
    parameter transformed the decoded data. The decoded (and validated)
    data is available as the result output.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        subcontract = contract.get("contract")

        if not isinstance(data, str) or not data:
            return self.fallback(contract, ctx, "Data is not a valid JSON string.")
        size = len(data.encode("utf-8"))
        if (min_len is not None and size < min_len) or (max_len is not None and size > max_len):
            return self.fallback(contract, ctx, "JSON data size doesn't respect minLen/maxLen.")
        try:
            decoded = json.loads(data, parse_constant=_refuse_constant)
        except ValueError:
            return self.fallback(contract, ctx, "Data is not a valid JSON string.")
        if not subcontract:
            return ValidationResult(data, decoded)

        try:
            validated = ctx.process(decoded, subcontract).value
        except ValidationError as exc:
            return self.fallback(contract, ctx, str(exc))
        if validated != decoded:
            data = json.dumps(validated, ensure_ascii=False)
        return ValidationResult(data, validated)
