"""Per-call state shared between the orchestrator and the validators."""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from datafilter.engine.orchestrator import DataFilter

__all__ = ['ValidationResult', 'CallContext']


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a successful validation.

    Attributes
    ----------
    value : any
        The filtered value, guaranteed to satisfy the contract.
    output : any
        Optional metadata computed while validating, independent from the
        value: date components, URL parts, detected MIME type, decoded
        JSON, coordinate pair...
    """
    value: Any
    output: Any = None


@dataclass(frozen=True)
class CallContext:
    """Immutable state of one node of a validation call.

    A new context is derived for every recursion step, never modified.

    Attributes
    ----------
    filter : DataFilter
        Orchestrator driving the call; composite validators recurse
        through it.
    strict : bool
        Coercion mode of the current contract node.
    inline : bool
        True when the contract came from the string syntax, so default
        literals like "3" or "true" must be read as native values.
    current_type : str
        Type token being validated (lets one validator serve several
        tokens).
    depth : int
        Recursion depth, bounded by the configured ``max_depth``.
    aliases : frozenset
        Alias tokens already expanded on this node, to detect alias cycles.
    """
    filter: "DataFilter"
    strict: bool = False
    inline: bool = False
    current_type: str = ""
    depth: int = 0
    aliases: FrozenSet[str] = field(default_factory=frozenset)

    def evolve(self, **changes) -> "CallContext":
        """Copy of this context with some attributes changed."""
        return replace(self, **changes)

    def process(self, data: Any, contract: Any, strict: Optional[bool] = None) -> ValidationResult:
        """Validate a nested value (list element, record field, JSON payload).

        The nested contract inherits the current strictness unless told
        otherwise, starts a fresh alias history and goes one level deeper.
        """
        child = replace(
            self,
            strict=self.strict if strict is None else strict,
            inline=False,
            current_type="",
            depth=self.depth + 1,
            aliases=frozenset(),
        )
        return self.filter._process(data, contract, child)
