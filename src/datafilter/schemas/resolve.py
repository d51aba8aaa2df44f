"""Configuration resolution.

``resolve_config()`` is the single entrypoint: it layers the built-in
parameters, the user file and the command-line options, then validates the
result as a frozen InternalConfig.

Precedence (highest to lowest):
1. CLIConfig (command-line overrides)
2. UserConfig (user file)
3. ParamConfig (defaults)
"""

from typing import Optional, Type, TypeVar, Union

from pydantic import BaseModel

from datafilter.schemas.cli import CLIConfig
from datafilter.schemas.internal import InternalConfig
from datafilter.schemas.param import ParamConfig
from datafilter.schemas.user import UserConfig

ModelT = TypeVar("ModelT", bound=BaseModel)


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Merge override dictionaries into a copy of ``base``.

    Nested dictionaries present on both sides are merged recursively, any
    other value is replaced. The inputs are left untouched.

    Examples
    --------
    >>> deep_merge({"a": 1, "b": {"c": 2, "d": 3}}, {"b": {"d": 4}}, {"e": 5})
    {'a': 1, 'b': {'c': 2, 'd': 4}, 'e': 5}
    """
    merged = dict(base)
    for layer in overrides:
        for key, value in layer.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = deep_merge(current, value)
            else:
                merged[key] = value
    return merged


def _as_model(model: Type[ModelT], value: Optional[Union[dict, ModelT]]) -> ModelT:
    """Validate a raw layer into its schema; None and {} give the empty layer."""
    if isinstance(value, model):
        return value
    if not value:
        return model()
    return model.model_validate(value)


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Build the runtime configuration.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Complete defaults. Required.
    user_cfg : dict or UserConfig, optional
        User file overrides.
    cli_cfg : dict or CLIConfig, optional
        Command-line overrides.

    Returns
    -------
    InternalConfig
        Validated, immutable configuration.

    Raises
    ------
    pydantic.ValidationError
        If a layer, or the merged result, is invalid.

    Notes
    -----
    Alias tables are merged per alias: a user alias replaces the default
    alias of the same name instead of being merged into its template.

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), UserConfig(STRICT="on"))
    >>> config.strict, config.max_depth
    (True, 64)
    """
    param = _as_model(ParamConfig, param_cfg)
    user = _as_model(UserConfig, user_cfg)
    cli = _as_model(CLIConfig, cli_cfg)

    base = param.model_dump()
    user_layer = user.to_internal_overrides()
    aliases = {**base.pop("aliases"), **user_layer.pop("aliases", {})}

    merged = deep_merge(base, user_layer, cli.to_internal_overrides())
    merged["aliases"] = aliases
    return InternalConfig.model_validate(merged)
