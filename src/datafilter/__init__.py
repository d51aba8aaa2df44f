"""datafilter: declarative data-contract validation and coercion.

Validates untrusted values (API payloads, configuration entries) against
contracts written as compact strings or nested mappings, and returns
normalized values.

    >>> from datafilter import process
    >>> process("abcdef", "string; maxLen: 3")
    'abc'
    >>> process({"id": "12", "name": "x"}, {"id": "int", "name": "string"})
    {'id': 12, 'name': 'x'}
"""

__version__ = "0.1.0"

from datafilter.contracts import ContractError, ValidationError
from datafilter.engine import (
    DataFilter,
    Registry,
    ValidationResult,
    parse_contract,
    process,
    register_alias,
    validate,
)
from datafilter.validators import Validator

__all__ = [
    'DataFilter',
    'Registry',
    'Validator',
    'ValidationResult',
    'ContractError',
    'ValidationError',
    'parse_contract',
    'process',
    'validate',
    'register_alias',
]
