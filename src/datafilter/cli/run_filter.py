"""Command-line runner: filters a JSON document through a contract.

Usage::

    datafilter "int; min: 0; max: 100" value.json
    echo '{"id": "12"}' | datafilter '{"id": "int"}' --strict
    datafilter "list; contract: email" emails.json --config user_config.py -v

The contract is a contract string, or a JSON structured contract when it
starts with ``{`` or ``[``. The input is read from the INPUT file, or from
stdin when INPUT is absent or ``-``. The filtered value is written as JSON
to stdout.

Exit codes: 0 on success, 1 when the data doesn't respect the contract
(or is not JSON), 2 when the contract or the configuration is malformed.
"""

import argparse
import base64
import importlib.util
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError as ConfigValidationError

from datafilter import __version__
from datafilter.contracts import ContractError, ValidationError
from datafilter.engine import DataFilter
from datafilter.schemas import CLIConfig, InternalConfig, ParamConfig, UserConfig, resolve_config

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_DATA = 1
EXIT_BAD_CONTRACT = 2


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("datafilter_user_config", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def setup_logging(level: str) -> None:
    """Configure the root logger to write on stderr at the given level."""
    log_level = getattr(logging, level.upper(), logging.WARNING)
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Clear existing handlers and add a console one
    root = logging.getLogger()
    root.setLevel(log_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    root.addHandler(ch)


def build_config(config_path: Optional[str] = None,
                 cli_args: Optional[Dict[str, Any]] = None) -> InternalConfig:
    """Resolve the runtime configuration (Param < User < CLI).

    Parameters
    ----------
    config_path : str, optional
        Path to a user config Python file.
    cli_args : dict, optional
        Command-line overrides (``strict``, ``log_level``); None values
        are ignored.
    """
    param_cfg = ParamConfig()
    user_cfg = None
    if config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(config_path))
    cli_dict = {k: v for k, v in (cli_args or {}).items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict)
    return resolve_config(param_cfg, user_cfg, cli_cfg)


def parse_contract_argument(text: str) -> Any:
    """Read a command-line contract: JSON structure or contract string."""
    stripped = text.strip()
    if stripped[:1] in ("{", "["):
        try:
            return json.loads(stripped)
        except ValueError as exc:
            raise ContractError(f"Bad JSON contract ({exc}).") from None
    return text


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return str(value)


def run_filter(contract: str, input_text: str, config: InternalConfig) -> str:
    """Filter a JSON document and return the result as JSON text.

    Raises
    ------
    ContractError
        If the contract is malformed.
    ValidationError
        If the input is not JSON or doesn't respect the contract.
    """
    try:
        data = json.loads(input_text)
    except ValueError as exc:
        raise ValidationError(f"Input is not valid JSON ({exc}).") from None

    data_filter = DataFilter(config)
    value = data_filter.process(data, parse_contract_argument(contract))
    return json.dumps(value, ensure_ascii=False, default=_json_default)


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="datafilter",
        description="Validate and normalize a JSON document against a data contract",
    )
    parser.add_argument("contract", help="Contract string, or JSON structured contract")
    parser.add_argument("input", nargs="?", default="-", help="JSON input file (default: stdin)")
    parser.add_argument("--config", help="Path to user config file")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--strict", dest="strict", action="store_const", const=True, help="Strict mode")
    mode.add_argument("--loose", dest="strict", action="store_const", const=False, help="Loose mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    args = parser.parse_args(argv)

    try:
        config = build_config(args.config, {
            "strict": args.strict,
            "log_level": "DEBUG" if args.verbose else None,
        })
    except (ConfigValidationError, FileNotFoundError, ValueError) as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_BAD_CONTRACT
    setup_logging(config.logging.level)

    if args.input == "-":
        input_text = sys.stdin.read()
    else:
        try:
            input_text = Path(args.input).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Cannot read input %s: %s", args.input, exc)
            print(f"Input error: {exc}", file=sys.stderr)
            return EXIT_INVALID_DATA

    try:
        output = run_filter(args.contract, input_text, config)
    except ContractError as exc:
        logger.error("Bad contract: %s", exc)
        print(f"Contract error: {exc}", file=sys.stderr)
        return EXIT_BAD_CONTRACT
    except ValidationError as exc:
        logger.info("Data rejected: %s", exc)
        print(f"Validation error: {exc}", file=sys.stderr)
        return EXIT_INVALID_DATA

    print(output)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
