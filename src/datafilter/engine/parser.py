"""Contract string parser.

Turns the compact contract syntax into a structured contract::

    "string; minLen: 3; mask: \"^[a-z]+$\""
    -> {"type": "string", "minLen": "3", "mask": "^[a-z]+$"}

Grammar: ``<type>[;<key>:<value>]*``. Values are read literally (``\\;``
escapes a semicolon) or between double quotes (``\\"`` and ``\\\\``
escapes). Values are never converted: validators decide how to read them.
"""

import logging
from typing import Any, Mapping

from datafilter.contracts import ContractError, require

__all__ = ['parse_contract', 'normalize_params']

logger = logging.getLogger(__name__)

# Parameter names accepted in any case, with or without underscores.
CANONICAL_PARAMS = {
    "minlen": "minLen",
    "maxlen": "maxLen",
    "informat": "inFormat",
    "outformat": "outFormat",
}


def _canonical_name(name: str) -> str:
    return CANONICAL_PARAMS.get(name.replace("_", "").lower(), name)


def normalize_params(contract: Mapping[str, Any]) -> dict:
    """Return a copy of a structured contract with canonical parameter names.

    ``maxlen``, ``max_len`` and ``MAXLEN`` all become ``maxLen``. Other
    names are kept untouched.
    """
    return {_canonical_name(key): value for key, value in contract.items()}


def parse_contract(text: str) -> dict:
    """Parse a contract string.

    Parameters
    ----------
    text : str
        Contract in the compact syntax, e.g. ``"int; min: 0; max: 10"``.

    Returns
    -------
    dict
        Structured contract. The type segment is stored under ``type``,
        every parameter under its canonical name, values as strings.

    Raises
    ------
    ContractError
        On an unterminated quote, a parameter without ':' or an empty
        parameter name.

    Examples
    --------
    >>> parse_contract("int")
    {'type': 'int'}
    >>> parse_contract('string; maxLen: 3; default: "a;b"')
    {'type': 'string', 'maxLen': '3', 'default': 'a;b'}
    """
    head, sep, rest = text.partition(";")
    result = {"type": head.strip()}
    if not sep:
        return result

    length = len(rest)
    pos = 0
    while pos < length:
        # parameter name
        colon = rest.find(":", pos)
        semicolon = rest.find(";", pos)
        if colon == -1 or (semicolon != -1 and semicolon < colon):
            segment = rest[pos:semicolon if semicolon != -1 else length]
            require(not segment.strip(), f"Bad contract parameter '{segment.strip()}' (missing ':').")
            pos = length if semicolon == -1 else semicolon + 1
            continue
        name = rest[pos:colon].strip()
        require(bool(name), "Bad contract parameter (empty name).")
        value, pos = _read_value(rest, colon + 1)
        result[_canonical_name(name)] = value

    logger.debug("Parsed contract %r -> %r", text, result)
    return result


def _read_value(text: str, pos: int) -> tuple:
    """Read one parameter value starting at ``pos``.

    Returns the value and the position following its terminating ';'.
    Whitespace outside quotes is trimmed; quoted text is kept verbatim.
    """
    chunks = []
    pending = []  # unquoted text not yet committed
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == ";":
            pos += 1
            break
        if char == "\\" and pos + 1 < length and text[pos + 1] in ";\\":
            pending.append(text[pos + 1])
            pos += 2
            continue
        if char == '"':
            chunks.append(("raw", "".join(pending)))
            pending = []
            quoted, pos = _read_quoted(text, pos + 1)
            chunks.append(("quoted", quoted))
            continue
        pending.append(char)
        pos += 1
    chunks.append(("raw", "".join(pending)))

    # trim leading/trailing whitespace of unquoted parts only
    while chunks and chunks[0][0] == "raw" and not chunks[0][1].strip():
        chunks.pop(0)
    while chunks and chunks[-1][0] == "raw" and not chunks[-1][1].strip():
        chunks.pop()
    if chunks and chunks[0][0] == "raw":
        chunks[0] = ("raw", chunks[0][1].lstrip())
    if chunks and chunks[-1][0] == "raw":
        chunks[-1] = ("raw", chunks[-1][1].rstrip())
    return "".join(chunk for _, chunk in chunks), pos


def _read_quoted(text: str, pos: int) -> tuple:
    """Read a double-quoted string whose opening quote precedes ``pos``."""
    buffer = []
    length = len(text)
    while pos < length:
        char = text[pos]
        if char == "\\" and pos + 1 < length:
            following = text[pos + 1]
            if following in '"\\':
                buffer.append(following)
            else:
                buffer.append(char + following)
            pos += 2
            continue
        if char == '"':
            return "".join(buffer), pos + 1
        buffer.append(char)
        pos += 1
    raise ContractError("Bad contract string (unterminated quote).")
