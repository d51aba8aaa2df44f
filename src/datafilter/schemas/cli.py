"""CLIConfig: Command-line overrides.

Handles the options parsed by argparse in ``datafilter.cli``.
"""

from typing import Optional

from datafilter.schemas.base import DataFilterBaseModel
from datafilter.schemas.param import LogLevel


class CLIConfig(DataFilterBaseModel):
    """Command-line configuration overrides.

    Highest priority in config resolution.

    Usage
    -----
        cli_cfg = CLIConfig(strict=True, log_level="DEBUG")
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    strict: Optional[bool] = None
    log_level: Optional[LogLevel] = None

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}
        if self.strict is not None:
            overrides["strict"] = self.strict
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        return overrides
