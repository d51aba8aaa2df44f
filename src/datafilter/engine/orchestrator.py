"""DataFilter: the validation entry point.

Drives one validation call: normalizes the contract, expands type unions
and aliases, dispatches to the validators and applies the union retry
policy.

Error policy
------------
- ``ContractError`` (malformed contract) aborts the call at once. It is
  never caught to try another union member and never replaced by a
  default value.
- ``ValidationError`` (data mismatch) is remembered, and the next union
  member is tried. The last one is raised when every member failed.
"""

import logging
import threading
from typing import Any, List, Mapping, Optional, Tuple

from datafilter.contracts import ContractError, ValidationError, require
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.engine.parser import normalize_params, parse_contract
from datafilter.engine.registry import AliasTemplate, Registry
from datafilter.schemas import InternalConfig, ParamConfig, resolve_config
from datafilter.utils import parse_flag

__all__ = ['DataFilter', 'process', 'validate', 'register_alias', 'get_default_filter']

logger = logging.getLogger(__name__)

NULL_TYPE = "null"
LOOSE_MARKER = "~"
STRICT_MARKER = "="
NULLABLE_MARKER = "?"


def _expand_type(type_spec: Any) -> Tuple[List[str], Optional[bool], bool]:
    """Split a type expression into its union members.

    Returns
    -------
    tokens : list of str
        Union members in declaration order; ``null`` is spelled in lower
        case and put first when the ``?`` marker is used.
    mode : bool or None
        True for the ``=`` marker, False for ``~``, None without marker.
    nullable : bool
        True if ``null`` is a member of the union.
    """
    if isinstance(type_spec, (list, tuple)):
        require(all(isinstance(item, str) for item in type_spec), f"Bad contract type {type_spec!r}.")
        text = "|".join(type_spec)
    elif isinstance(type_spec, str):
        text = type_spec
    else:
        raise ContractError(f"Bad contract type {type_spec!r}.")

    text = text.strip()
    mode = None
    if text[:1] in (LOOSE_MARKER, STRICT_MARKER):
        mode = text[0] == STRICT_MARKER
        text = text[1:].lstrip()
    nullable = text.startswith(NULLABLE_MARKER)
    if nullable:
        text = text[1:]

    tokens = [token.strip() for token in text.split("|")]
    require(all(tokens), f"Bad contract type '{type_spec}' (empty type).")
    tokens = [NULL_TYPE if token.lower() == NULL_TYPE else token for token in tokens]
    if NULL_TYPE in tokens:
        nullable = True
    elif nullable:
        tokens.insert(0, NULL_TYPE)
    return tokens, mode, nullable


class DataFilter:
    """Validates and coerces data against contracts.

    Parameters
    ----------
    config : InternalConfig, optional
        Runtime configuration (ambient strictness, recursion limit,
        application aliases). Defaults to the built-in parameters.
    registry : Registry, optional
        Type registry. A new one is created when not given; the aliases
        of the configuration are registered on it.

    Examples
    --------
    >>> data_filter = DataFilter()
    >>> data_filter.process("abcdef", "string; maxLen: 3")
    'abc'
    >>> data_filter.process(150, {"type": "int", "min": 0, "max": 100})
    100
    >>> data_filter.process(None, "?int") is None
    True
    """

    def __init__(self, config: Optional[InternalConfig] = None, registry: Optional[Registry] = None):
        self.config = config if config is not None else resolve_config(ParamConfig())
        self.registry = registry if registry is not None else Registry()
        if self.config.aliases:
            self.registry.register(dict(self.config.aliases))

    def process(self, data: Any, contract: Any, strict: Optional[bool] = None) -> Any:
        """Validate data and return the filtered value.

        Parameters
        ----------
        data : any
            Input value.
        contract : str, Mapping, sequence or None
            Contract string, structured contract, or list of record keys.
        strict : bool, optional
            Ambient coercion mode; defaults to the configured one.

        Raises
        ------
        ContractError
            If the contract is malformed.
        ValidationError
            If the data doesn't respect the contract.
        """
        return self.validate(data, contract, strict).value

    def validate(self, data: Any, contract: Any, strict: Optional[bool] = None) -> ValidationResult:
        """Like :meth:`process`, returning the value and its metadata."""
        ctx = CallContext(filter=self, strict=self.config.strict if strict is None else bool(strict))
        return self._process(data, contract, ctx)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def _process(self, data: Any, contract: Any, ctx: CallContext) -> ValidationResult:
        if ctx.depth > self.config.max_depth:
            raise ContractError(f"Contract too deeply nested (more than {self.config.max_depth} levels).")

        if contract is None or (isinstance(contract, str) and not contract.strip()):
            return ValidationResult(data)
        if isinstance(contract, str):
            return self._process(data, parse_contract(contract), ctx.evolve(inline=True))
        if isinstance(contract, (list, tuple)):
            contract = {"type": "assoc", "keys": list(contract)}
        elif not isinstance(contract, Mapping):
            raise ContractError(f"Bad contract {contract!r}.")
        if not contract:
            return ValidationResult(data)
        if "type" not in contract:
            contract = {"type": "assoc", "keys": dict(contract)}
        contract = normalize_params(contract)
        type_spec = contract.get("type")
        if type_spec is None or type_spec == "":
            return ValidationResult(data)

        tokens, mode, nullable = _expand_type(type_spec)
        if mode is not None:
            strict = mode
        elif contract.get("strict") is not None:
            strict = parse_flag(contract["strict"], "strict")
        else:
            strict = ctx.strict
        logger.debug("Resolving %r against types %s (strict=%s)", data, tokens, strict)

        default = contract.get("default")
        if data is None:
            members = [token for token in tokens if token != NULL_TYPE]
            inline_null = ctx.inline and nullable and default == "null"
            if default is not None and members and not inline_null:
                # every member rejects None and falls back on the default
                return self._try_members(data, members, contract, ctx, strict)
            if nullable:
                return ValidationResult(None)
        elif len(tokens) > 1:
            # a default is handled by the other members
            tokens = [token for token in tokens if token != NULL_TYPE]
        return self._try_members(data, tokens, contract, ctx, strict)

    def _try_members(self, data: Any, tokens: List[str], contract: Mapping[str, Any],
                     ctx: CallContext, strict: bool) -> ValidationResult:
        last_error = None
        for token in tokens:
            try:
                return self._attempt(data, token, contract, ctx, strict)
            except ValidationError as exc:
                logger.debug("Type '%s' rejected the data: %s", token, exc)
                last_error = exc
        if last_error is not None:
            raise last_error
        raise ValidationError("Data doesn't validate the contract.")

    def _attempt(self, data: Any, token: str, contract: Mapping[str, Any],
                 ctx: CallContext, strict: bool) -> ValidationResult:
        entry = self.registry.lookup(token)
        if isinstance(entry, AliasTemplate):
            if token in ctx.aliases:
                raise ContractError(f"Alias cycle detected on type '{token}'.")
            params = {
                key: value for key, value in contract.items()
                if key not in ("type", "strict") and value is not None
            }
            merged = {**entry.contract, **params, "type": entry.contract["type"]}
            logger.debug("Expanding alias '%s' to %r", token, merged)
            child = ctx.evolve(
                strict=strict,
                inline=ctx.inline or entry.inline,
                depth=ctx.depth + 1,
                aliases=ctx.aliases | {token},
            )
            return self._process(data, merged, child)

        validator = self.registry.get_validator(token)
        return validator.validate(data, contract, ctx.evolve(strict=strict, current_type=token))


# ----------------------------------------------------------------------
# Shared default filter
# ----------------------------------------------------------------------

_default_filter: Optional[DataFilter] = None
_default_lock = threading.Lock()


def get_default_filter() -> DataFilter:
    """Process-wide filter used by the module-level functions."""
    global _default_filter
    if _default_filter is None:
        with _default_lock:
            if _default_filter is None:
                _default_filter = DataFilter()
    return _default_filter


def process(data: Any, contract: Any, strict: Optional[bool] = None) -> Any:
    """Validate data with the default filter; see :meth:`DataFilter.process`."""
    return get_default_filter().process(data, contract, strict)


def validate(data: Any, contract: Any, strict: Optional[bool] = None) -> ValidationResult:
    """Validate data with the default filter; see :meth:`DataFilter.validate`."""
    return get_default_filter().validate(data, contract, strict)


def register_alias(token: Any, target: Any = None) -> None:
    """Register an alias on the default filter's registry."""
    get_default_filter().registry.register(token, target)
