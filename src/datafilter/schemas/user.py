"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with uppercase
aliases (STRICT -> strict, LOG_LEVEL -> log_level) and word booleans
("yes", "off").

UserConfig is intentionally minimal: users only specify what they want
to override from the defaults.
"""

from typing import Optional

from pydantic import Field, field_validator

from datafilter.schemas.base import DataFilterBaseModel
from datafilter.schemas.param import AliasTarget, LogLevel

_TRUE_WORDS = {"true", "yes", "on", "1", "y"}
_FALSE_WORDS = {"false", "no", "off", "0", "n", ""}


class UserLoggingConfig(DataFilterBaseModel):
    """User-facing logging config."""
    level: Optional[LogLevel] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v


class UserConfig(DataFilterBaseModel):
    """User-facing configuration schema.

    Usage
    -----
        user_cfg = UserConfig(
            STRICT="yes",
            ALIASES={"percent": "int; min: 0; max: 100"},
        )

        internal = resolve_config(param_cfg, user_cfg)
    """

    strict: Optional[bool] = Field(None, alias="STRICT")
    max_depth: Optional[int] = Field(None, alias="MAX_DEPTH")
    aliases: Optional[dict[str, AliasTarget]] = Field(None, alias="ALIASES")
    log_level: Optional[LogLevel] = Field(None, alias="LOG_LEVEL")

    # Nested override (advanced users)
    logging: Optional[UserLoggingConfig] = None

    model_config = DataFilterBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("strict", mode="before")
    @classmethod
    def coerce_word_boolean(cls, v):
        """Accept yes/no and on/off words for booleans."""
        if isinstance(v, str):
            word = v.strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
            raise ValueError(f"'{v}' is not a boolean word")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept level names in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.strict is not None:
            overrides["strict"] = self.strict
        if self.max_depth is not None:
            overrides["max_depth"] = self.max_depth
        if self.aliases is not None:
            overrides["aliases"] = dict(self.aliases)

        # Logging section
        logging_cfg = {}
        if self.log_level is not None:
            logging_cfg["level"] = self.log_level

        # Merge with explicit logging config
        if self.logging is not None:
            logging_cfg.update(self.logging.model_dump(exclude_none=True))

        if logging_cfg:
            overrides["logging"] = logging_cfg

        return overrides
