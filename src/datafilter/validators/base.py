"""Base class for type validators.

Every supported type is implemented by a stateless Validator subclass. One
instance per class is created by the registry and shared by every call,
possibly from several threads: validators must never keep per-call state on
``self``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from datafilter.contracts import ValidationError
from datafilter.engine.context import CallContext, ValidationResult

__all__ = ['Validator']

logger = logging.getLogger(__name__)


class Validator(ABC):
    """Strategy validating and coercing one value against one type.

    Subclasses implement :meth:`validate`. When the value is refused they
    call :meth:`fallback`, which applies the shared default-value policy.
    """

    @abstractmethod
    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        """Validate data against a resolved contract.

        Parameters
        ----------
        data : any
            Input value.
        contract : Mapping
            Structured contract of the current node (``type`` plus
            parameters). Never modified.
        ctx : CallContext
            Strictness, inline flag, current type token and recursion
            handle.

        Returns
        -------
        ValidationResult
            Filtered value and optional metadata.

        Raises
        ------
        ContractError
            If the contract parameters are malformed.
        ValidationError
            If the data doesn't respect the contract and no default applies.
        """

    def coerce_default(self, default: Any, ctx: CallContext) -> Any:
        """Convert a default read from a contract string to a native value."""
        return default

    def fallback(self, contract: Mapping[str, Any], ctx: CallContext, message: str) -> ValidationResult:
        """Return the validated default value, or raise ValidationError.

        The default is validated against the same contract with its
        ``default`` cleared, so a bad default fails instead of looping.
        """
        default = contract.get("default")
        if default is None:
            raise ValidationError(message)
        logger.debug("%s: %s Falling back on default value %r", ctx.current_type, message, default)
        if ctx.inline:
            default = self.coerce_default(default, ctx)
        return self.validate(default, {**contract, "default": None}, ctx)
