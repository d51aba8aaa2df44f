"""Pydantic configuration schemas for datafilter.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Built-in defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line overrides
"""

from datafilter.schemas.resolve import resolve_config
from datafilter.schemas.internal import InternalConfig
from datafilter.schemas.param import ParamConfig
from datafilter.schemas.user import UserConfig
from datafilter.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
