"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for schema
checks. It does not look at input data, only at the contract itself.
"""

from datafilter.contracts.failure import ContractError


def require(condition: bool, message: str) -> None:
    """Enforce a contract well-formedness rule.

    Called by validators before looking at the input value, to check the
    parameters they were given. It is fail-fast: no recovery, no fallback,
    no silence.

    Parameters
    ----------
    condition : bool
        The rule that must hold. If False, ContractError is raised.

    message : str
        Error message explaining what is wrong with the contract.

    Raises
    ------
    ContractError
        If condition is False. This indicates a bug in the contract.

    Examples
    --------
    >>> require(values, "Enum without values.")
    >>> require(isinstance(keys, (list, dict)), "Bad contract 'keys' parameter.")
    """
    if not condition:
        raise ContractError(message)
