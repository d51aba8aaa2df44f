"""InternalConfig: Authoritative runtime configuration.

This is the only config schema that runtime code sees. It is fully
validated and immutable; defaults and coercion live in the other schemas.
"""

from pydantic import ConfigDict, Field

from datafilter.schemas.base import DataFilterBaseModel
from datafilter.schemas.param import AliasTarget, LogLevel


class InternalLoggingConfig(DataFilterBaseModel):
    """Runtime logging configuration."""
    level: LogLevel


class InternalConfig(DataFilterBaseModel):
    """Authoritative runtime configuration.

    Usage
    -----
    The filter reads fields directly:

        data_filter = DataFilter(config)
        data_filter.config.max_depth  # NOT .get()
    """

    strict: bool
    max_depth: int = Field(ge=1, le=1000)
    aliases: dict[str, AliasTarget]
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
