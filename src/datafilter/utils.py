"""Utility functions shared by the type validators.

Centralized helper functions for:
- Size parsing ("10K", "2M") for minLen/maxLen parameters
- Loose numeric parsing (hex, octal, thousands separators)
- Comma-separated parameter lists
- Slug generation and charset handling

These utilities keep the validators small and give a single definition of
operations like "numeric string" or "size" across the engine.
"""

import codecs
import csv
import math
import re
import unicodedata
import logging
from typing import Any, Optional, Union

from datafilter.contracts import ContractError

__all__ = [
    'parse_size',
    'is_number',
    'is_numeric',
    'parse_loose_int',
    'parse_loose_float',
    'parse_bound',
    'parse_flag',
    'split_list',
    'split_csv',
    'urlize',
    'match_mask',
    'normalize_charset',
    'format_number',
]

logger = logging.getLogger(__name__)

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmgt]?)(?:i?b)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"": 0, "k": 1, "m": 2, "g": 3, "t": 4}

_INT_DEC_RE = re.compile(r"^[+-]?(?:0|[1-9]\d*)$")
_INT_HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
_INT_OCT_RE = re.compile(r"^0[0-7]+$")
_FLOAT_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_FLOAT_THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(?:,\d{3})+(?:\.\d*)?(?:[eE][+-]?\d+)?$")

_TRUE_LITERALS = {"true", "1", "yes", "on"}
_FALSE_LITERALS = {"false", "0", "no", "off", ""}


# ============================================================================
# SIZE AND NUMBER PARSING
# ============================================================================

def parse_size(value: Any) -> Optional[int]:
    """Parse a length/size parameter.

    Sizes are either plain numbers or human-readable strings with a binary
    unit suffix. Units are powers of 1024, with optional "B"/"iB" suffix.

    Parameters
    ----------
    value : int, float, str or None
        Raw parameter value, as found in the contract.

    Returns
    -------
    int or None
        Size in units (characters, bytes or elements), None if the
        parameter is absent.

    Raises
    ------
    ContractError
        If the value is negative, a boolean, or an unparsable string.

    Examples
    --------
    >>> parse_size("3")
    3
    >>> parse_size("2K")
    2048
    >>> parse_size("1.5MiB")
    1572864
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ContractError(f"Bad size value '{value}'.")
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            raise ContractError(f"Bad size value '{value}'.")
        return int(value)
    if isinstance(value, str):
        match = _SIZE_RE.match(value)
        if match is None:
            raise ContractError(f"Bad size value '{value}'.")
        number, unit = match.groups()
        return int(float(number) * (1024 ** _SIZE_UNITS[unit.lower()]))
    raise ContractError(f"Bad size value '{value}'.")


def is_number(value: Any) -> bool:
    """True for int and float values, excluding booleans."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_numeric(value: Any) -> bool:
    """True for numbers and for strings holding a decimal number."""
    if is_number(value):
        return True
    if isinstance(value, str):
        return bool(_FLOAT_RE.match(value.strip()))
    return False


def parse_loose_int(value: Any) -> Optional[int]:
    """Convert a value to int the forgiving way.

    Accepts decimal strings, hexadecimal ("0x1A") and octal ("012") strings,
    and float strings with optional thousands separators ("1,234.5"), which
    are truncated. Surrounding whitespace is ignored.

    Returns None when the value can't be read as an integer.
    """
    if is_number(value):
        if isinstance(value, float):
            return int(value) if math.isfinite(value) else None
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if _INT_HEX_RE.match(text):
        return int(text, 16)
    if _INT_OCT_RE.match(text):
        return int(text, 8)
    if _INT_DEC_RE.match(text):
        return int(text)
    number = parse_loose_float(text)
    if number is None:
        return None
    return int(number)


def parse_loose_float(value: Any) -> Optional[float]:
    """Convert a value to float the forgiving way.

    Accepts numbers and decimal strings, with optional thousands
    separators. Infinite and NaN values are refused.
    """
    if is_number(value):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if _FLOAT_THOUSANDS_RE.match(text):
            text = text.replace(",", "")
        elif not _FLOAT_RE.match(text):
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_bound(value: Any, name: str, kind: type, convert: bool) -> Optional[Union[int, float]]:
    """Read a numeric ``min``/``max`` contract parameter.

    Parameters
    ----------
    value : any
        Raw parameter value.
    name : str
        Parameter name, for the error message.
    kind : type
        ``int`` or ``float``: target type of the bound.
    convert : bool
        If True (inline or loose contracts), numeric strings are converted.
        Otherwise the bound must already be a number.

    Raises
    ------
    ContractError
        If the bound is not numeric.
    """
    if value is None or value == "":
        return None
    if is_number(value):
        return kind(value)
    if convert and isinstance(value, str):
        number = parse_loose_float(value)
        if number is not None:
            return kind(number)
    raise ContractError(f"Bad contract '{name}' parameter.")


def parse_flag(value: Any, name: str) -> bool:
    """Read a boolean contract parameter given natively or as a DSL literal."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_LITERALS:
            return True
        if text in _FALSE_LITERALS:
            return False
    raise ContractError(f"Bad contract '{name}' parameter.")


def format_number(value: float) -> str:
    """Shortest text form of a float, without a trailing '.0'."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


# ============================================================================
# LIST PARAMETERS
# ============================================================================

def split_list(value: Any, name: str) -> Optional[list]:
    """Normalize a list parameter.

    Strings are split on commas and trimmed; lists and tuples are copied.
    Returns None when the parameter is absent.

    Raises
    ------
    ContractError
        For any other parameter type.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return [item.strip() for item in value.split(",")]
    if isinstance(value, (list, tuple)):
        return list(value)
    raise ContractError(f"Bad contract '{name}' parameter.")


def split_csv(value: str) -> list:
    """Split a comma-separated list honoring double quotes.

    Used for lists of sub-contracts, where an element may itself contain
    commas (``'"enum; values: a, b", int'``).
    """
    rows = list(csv.reader([value], skipinitialspace=True, escapechar="\\"))
    if not rows:
        return []
    return [item.strip() for item in rows[0]]


# ============================================================================
# TEXT UTILITIES
# ============================================================================

def urlize(text: Optional[str], avoid_underscores: bool = True) -> str:
    """Transform a text into a URL-compatible slug.

    Letters are transliterated to ASCII, every other character becomes a
    dash, runs of dashes are collapsed and the result is lower-cased.

    Examples
    --------
    >>> urlize("123 à côté")
    '123-a-cote'
    >>> urlize("Hello, World!")
    'hello-world'
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9\-_ +]", " ", text)
    text = re.sub(r"\s+", " ", text)
    text = text.replace(" ", "-")
    if avoid_underscores:
        text = text.replace("_", "-")
    text = text.replace("+", "-")
    text = re.sub(r"-+", "-", text)
    text = text.lower().strip("-_").strip()
    return text or "-"


def match_mask(mask: str, text: str) -> bool:
    """Search a ``mask`` regular expression in a text (not anchored).

    Raises
    ------
    ContractError
        If the mask is not a valid regular expression.
    """
    try:
        return re.search(mask, text) is not None
    except re.error as exc:
        raise ContractError(f"Bad contract 'mask' parameter ({exc}).") from None


def normalize_charset(name: str) -> str:
    """Canonical codec name for a charset ("latin1" -> "iso8859-1").

    Raises
    ------
    ContractError
        If Python doesn't know the charset.
    """
    name = name.strip().lower()
    if name == "us-ascii":
        name = "ascii"
    try:
        return codecs.lookup(name).name
    except LookupError:
        raise ContractError(f"Unknown charset '{name}'.") from None
