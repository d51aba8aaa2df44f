"""Failure taxonomy for contract-driven filtering.

Two error kinds, never interchangeable. Callers branch on the exception
class, not on the message text.
"""


class ContractError(RuntimeError):
    """Raised when a contract is malformed.

    This indicates a bug in the code that authored the contract, not bad
    input data: unknown type token, missing required parameter (enum without
    ``values``, hash without ``algo``...), parameter of the wrong shape.

    Key distinction:
    - ContractError: schema authoring bug (programmer error, always fatal)
    - ValidationError: the value does not satisfy the contract (recoverable)

    A ContractError is never swallowed by union resolution and never masked
    by a ``default`` value.
    """
    pass


class ValidationError(ValueError):
    """Raised when input data does not satisfy a contract.

    Recoverable: the orchestrator catches it to try the next member of a
    union type or to fall back on the contract's ``default`` value. It only
    reaches the caller once every alternative is exhausted.
    """
    pass
