"""Failure contracts: the two-tier error taxonomy of the engine.

Contract errors fail immediately and loudly: a malformed schema is a
programmer error and must surface. Validation errors are the normal way a
value is refused, and are handled by the orchestrator (union members,
default values) before reaching the caller.

Key principle:
- Pydantic validates engine configuration
- ContractError reports broken contracts
- ValidationError reports rejected data
"""

from datafilter.contracts.failure import ContractError, ValidationError
from datafilter.contracts.base import require

__all__ = [
    "ContractError",
    "ValidationError",
    "require",
]
