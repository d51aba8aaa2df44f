"""Binary content and base64 validators.

Content sniffing is done in memory: the MIME type is guessed from magic
numbers by ``filetype``, the charset of text content by
``charset-normalizer`` when it is neither ASCII nor UTF-8.
"""

import base64
import binascii
import logging
import re
from typing import Any, Mapping, Optional, Tuple

import filetype
from charset_normalizer import from_bytes

from datafilter.contracts import ValidationError
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import normalize_charset, parse_size, split_list
from datafilter.validators.base import Validator

__all__ = ['BinaryValidator', 'Base64Validator', 'sniff']

logger = logging.getLogger(__name__)

BINARY_CHARSET = "binary"
DEFAULT_MIME = "application/octet-stream"
TEXT_MIME = "text/plain"

_WHITESPACE_RE = re.compile(r"\s+")


def _detect_charset(data: bytes) -> Optional[str]:
    for charset in ("ascii", "utf-8"):
        try:
            data.decode(charset)
        except UnicodeDecodeError:
            continue
        return charset
    best = from_bytes(data).best()
    if best is None:
        return None
    return normalize_charset(best.encoding)


def sniff(data: bytes) -> Tuple[str, str]:
    """Guess the MIME type and charset of a buffer.

    Returns
    -------
    tuple of str
        ``(mime, charset)``. Recognized binary formats have the
        ``"binary"`` charset; text without a known magic number is
        ``text/plain``; anything else is ``application/octet-stream``.

    Examples
    --------
    >>> sniff(b"GIF89a\\x01\\x00\\x01\\x00")
    ('image/gif', 'binary')
    >>> sniff(b"hello")
    ('text/plain', 'ascii')
    """
    kind = filetype.guess(data)
    if kind is not None:
        return kind.mime, BINARY_CHARSET
    charset = _detect_charset(data)
    if charset is None:
        return DEFAULT_MIME, BINARY_CHARSET
    return TEXT_MIME, charset


def _mime_matches(detected: str, accepted: str) -> bool:
    """``image`` accepts ``image/gif``; ``image/gif`` only accepts itself."""
    accepted = accepted.strip().lower()
    return detected == accepted or detected.startswith(accepted + "/")


class BinaryValidator(Validator):
    """Raw binary content (bytes, or text read as UTF-8).

    Parameters
    ----------
    minLen, maxLen
        Byte length bounds; loose mode truncates long buffers.
    mime
        Accepted MIME types or top-level types (``image``).
    charset
        Accepted charsets for text content. In loose mode, text in another
        charset is converted to the first one.

    The value is the buffer; the output is a dictionary with the
    ``binary``, ``mime`` and ``charset`` keys.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        mimes = split_list(contract.get("mime"), "mime")
        charsets = split_list(contract.get("charset"), "charset")
        targets = [normalize_charset(name) for name in charsets or () if name]

        if isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, bytearray):
            data = bytes(data)
        elif not isinstance(data, bytes):
            return self.fallback(contract, ctx, "Data is not a binary string.")
        if not data:
            return self.fallback(contract, ctx, "Binary data is empty.")

        if max_len is not None and len(data) > max_len:
            if ctx.strict:
                return self.fallback(contract, ctx, "Data size doesn't respect the contract.")
            data = data[:max_len]
        if min_len is not None and len(data) < min_len:
            return self.fallback(contract, ctx, "Data size doesn't respect the contract.")

        mime, charset = sniff(data)
        logger.debug("Binary content sniffed as %s (charset %s)", mime, charset)
        if mimes and not any(_mime_matches(mime, accepted) for accepted in mimes if accepted):
            return self.fallback(contract, ctx, f"Data doesn't respect contract (bad MIME type '{mime}').")

        if targets and charset != BINARY_CHARSET and charset not in targets:
            if ctx.strict:
                return self.fallback(
                    contract, ctx,
                    f"Data doesn't respect contract (charset mismatch: expected one of "
                    f"[{', '.join(charsets)}], got '{charset}').",
                )
            data = data.decode(charset, errors="replace").encode(targets[0], errors="replace")
            charset = targets[0]

        return ValidationResult(data, {"binary": data, "mime": mime, "charset": charset})


class Base64Validator(Validator):
    """Base64-encoded content.

    Strict mode requires the canonical encoding. Loose mode tolerates
    whitespace, missing padding and the URL-safe alphabet. ``minLen`` and
    ``maxLen`` bound the decoded size; the ``mime`` check is delegated to
    the binary validator.

    The value is the encoded text; the output is the binary validator's
    output for the decoded content.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        mimes = split_list(contract.get("mime"), "mime")

        if not isinstance(data, str) or not data:
            return self.fallback(contract, ctx, "Data is not a valid base64 string.")
        decoded = self._decode(data, ctx.strict)
        if decoded is None:
            return self.fallback(contract, ctx, "Data is not a valid base64 string.")
        if (min_len is not None and len(decoded) < min_len) or (max_len is not None and len(decoded) > max_len):
            return self.fallback(contract, ctx, "Data size doesn't respect the contract.")

        binary = ctx.filter.registry.get_validator("binary")
        binary_contract = {"type": "binary", "mime": mimes} if mimes else {"type": "binary"}
        try:
            result = binary.validate(decoded, binary_contract, ctx.evolve(strict=False, current_type="binary"))
        except ValidationError as exc:
            return self.fallback(contract, ctx, str(exc))
        return ValidationResult(data, result.output)

    @staticmethod
    def _decode(text: str, strict: bool) -> Optional[bytes]:
        try:
            if strict:
                decoded = base64.b64decode(text, validate=True)
                return decoded if base64.b64encode(decoded).decode("ascii") == text else None
            text = _WHITESPACE_RE.sub("", text).replace("-", "+").replace("_", "/")
            text += "=" * (-len(text) % 4)
            return base64.b64decode(text, validate=True)
        except (binascii.Error, ValueError):
            return None
