"""ParamConfig: Built-in defaults for the filtering engine.

Every tunable parameter has its default here. Runtime code never reads
ParamConfig directly: it only receives InternalConfig.
"""

from typing import Any, Literal, Union

from pydantic import Field

from datafilter.schemas.base import DataFilterBaseModel

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Alias target in a configuration: contract string, template mapping, or
# list of record keys.
AliasTarget = Union[str, dict[str, Any], list[Any]]


class LoggingConfig(DataFilterBaseModel):
    """Logging configuration."""
    level: LogLevel = "WARNING"


class ParamConfig(DataFilterBaseModel):
    """Complete configuration with all defaults.

    Usage
    -----
    This config is the base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    strict: bool = Field(False, description="Ambient coercion mode")
    max_depth: int = Field(64, ge=1, le=1000, description="Maximum contract nesting depth")
    aliases: dict[str, AliasTarget] = Field(default_factory=dict, description="Application type aliases")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
