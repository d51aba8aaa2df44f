"""Validation engine: contract parser, type registry and orchestrator."""

from datafilter.engine.context import CallContext, ValidationResult
from datafilter.engine.parser import normalize_params, parse_contract
from datafilter.engine.registry import AliasTemplate, Registry
from datafilter.engine.orchestrator import DataFilter, process, register_alias, validate

__all__ = [
    'CallContext',
    'ValidationResult',
    'parse_contract',
    'normalize_params',
    'AliasTemplate',
    'Registry',
    'DataFilter',
    'process',
    'validate',
    'register_alias',
]
