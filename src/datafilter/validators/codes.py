"""Fixed-format code validators.

UUIDs, ISBN and EAN numbers, hash digests, hex colors, phone numbers and
slugs: regex or checksum checks, no recursion.
"""

import hashlib
import logging
import re
import uuid
import zlib
from typing import Any, Mapping

from datafilter.contracts import ContractError, require
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import is_number, match_mask, parse_size, split_list, urlize
from datafilter.validators.base import Validator

__all__ = [
    'UuidValidator',
    'IsbnValidator',
    'EanValidator',
    'HashValidator',
    'ColorValidator',
    'PhoneValidator',
    'SlugValidator',
]

logger = logging.getLogger(__name__)

_UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")
_COLOR_RE = re.compile(r"^#?(?:[0-9a-fA-F]{3}){1,2}$")
_PHONE_RES = (
    re.compile(r"^00\d{1,15}$"),
    re.compile(r"^\+\d{1,15}$"),
    re.compile(r"^\d{1,15}$"),
)
_PHONE_SEPARATORS = str.maketrans("", "", " -.()")
_SLUG_RE = re.compile(r"^[a-z0-9-]+$")


class UuidValidator(Validator):
    """UUIDs, returned in the lower-case hyphenated form.

    Strict mode only accepts the hyphenated form; loose mode accepts every
    form :class:`uuid.UUID` reads (braces, URN, no hyphens). The output is
    the UUID version.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if not isinstance(data, str):
            return self.fallback(contract, ctx, "Data is not a valid UUID (not a string).")
        if ctx.strict and not _UUID_RE.match(data):
            return self.fallback(contract, ctx, "Data is not a valid UUID.")
        try:
            value = uuid.UUID(data.strip())
        except ValueError:
            return self.fallback(contract, ctx, "Data is not a valid UUID.")
        return ValidationResult(str(value), value.version)


class IsbnValidator(Validator):
    """ISBN-10 and ISBN-13 numbers; separators are removed."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if not isinstance(data, str):
            return self.fallback(contract, ctx, "Data is not a valid ISBN.")
        code = re.sub(r"[^0-9X]", "", data.upper())
        if len(code) == 10:
            if "X" in code[:9]:
                return self.fallback(contract, ctx, "Data is not a valid ISBN-10.")
            total = sum(int(digit) * (10 - index) for index, digit in enumerate(code[:9]))
            check = (11 - total % 11) % 11
            if code[9] != ("X" if check == 10 else str(check)):
                return self.fallback(contract, ctx, "Data is not a valid ISBN-10.")
        elif len(code) == 13:
            if "X" in code:
                return self.fallback(contract, ctx, "Data is not a valid ISBN-13.")
            total = sum(int(digit) * (1 if index % 2 == 0 else 3) for index, digit in enumerate(code[:12]))
            if code[12] != str((10 - total % 10) % 10):
                return self.fallback(contract, ctx, "Data is not a valid ISBN-13.")
        else:
            return self.fallback(contract, ctx, "Data is not a valid ISBN.")
        return ValidationResult(code, code)


class EanValidator(Validator):
    """EAN-8 and EAN-13 barcodes, given as text or as an integer."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if isinstance(data, bool) or not isinstance(data, (str, int)):
            return self.fallback(contract, ctx, "Data is not a valid EAN.")
        code = re.sub(r"[^0-9]", "", str(data))
        if len(code) not in (8, 13):
            return self.fallback(contract, ctx, "Data is not a valid EAN.")
        # weights start with 3 for EAN-8 and with 1 for EAN-13
        heavy = 1 if len(code) == 13 else 0
        total = sum(int(digit) * (3 if index % 2 == heavy else 1) for index, digit in enumerate(code[:-1]))
        if code[-1] != str((10 - total % 10) % 10):
            return self.fallback(contract, ctx, "Data is not a valid EAN.")
        return ValidationResult(code, code)


class HashValidator(Validator):
    """Hexadecimal digests.

    ``algo`` lists the accepted algorithms (any fixed-size ``hashlib``
    algorithm, plus ``crc32``). The digest must have the length of one of
    them; when ``source`` is given, it must also be the digest of that
    text.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        algorithms = split_list(contract.get("algo"), "algo")
        require(bool(algorithms) and all(algorithms), "Empty hash algorithm.")
        source = contract.get("source")
        lengths = {algo: self._digest_length(algo) for algo in algorithms}

        if not isinstance(data, str) or not _HEX_RE.match(data):
            return self.fallback(
                contract, ctx, "Data doesn't respect contract (not a valid non-empty hexadecimal string)."
            )
        for algo in algorithms:
            if len(data) != lengths[algo]:
                continue
            if not source:
                return ValidationResult(data, algo)
            if self._digest(algo, str(source)) == data.lower():
                return ValidationResult(data, algo)
        return self.fallback(contract, ctx, "Data doesn't respect any given contract.")

    @staticmethod
    def _hashlib_name(algo: str) -> str:
        return algo.strip().lower().replace("-", "_")

    def _digest_length(self, algo: str) -> int:
        name = self._hashlib_name(algo)
        if name == "crc32":
            return 8
        try:
            hasher = hashlib.new(name)
        except (ValueError, TypeError):
            raise ContractError(f"Unknown hash algorithm '{algo}'.") from None
        if name.startswith("shake"):
            raise ContractError(f"Unknown hash algorithm '{algo}' (variable length).")
        return hasher.digest_size * 2

    def _digest(self, algo: str, source: str) -> str:
        name = self._hashlib_name(algo)
        if name == "crc32":
            return f"{zlib.crc32(source.encode('utf-8')):08x}"
        return hashlib.new(name, source.encode("utf-8")).hexdigest()


class ColorValidator(Validator):
    """Hex colors, normalized to the ``#rrggbb`` lower-case form."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if not isinstance(data, str) or not _COLOR_RE.match(data):
            return self.fallback(contract, ctx, "Data is not a valid hex color.")
        digits = data.lstrip("#").lower()
        if len(digits) == 3:
            digits = "".join(char * 2 for char in digits)
        color = f"#{digits}"
        return ValidationResult(color, color)


class PhoneValidator(Validator):
    """Phone numbers: up to 15 digits, optional ``+`` or ``00`` prefix.

    Spaces, dashes, dots and parentheses are ignored. Strict mode returns
    the cleaned number, loose mode the number as given. The output is
    always the cleaned number.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if isinstance(data, bool) or not (isinstance(data, str) or is_number(data)):
            return self.fallback(contract, ctx, "Data is not a valid phone number.")
        text = str(data).strip()
        clean = text.translate(_PHONE_SEPARATORS)
        if not any(pattern.match(clean) for pattern in _PHONE_RES):
            return self.fallback(contract, ctx, "Data is not a valid phone number.")
        return ValidationResult(clean if ctx.strict else text, clean)


class SlugValidator(Validator):
    """URL slugs (``[a-z0-9-]+``).

    Loose mode turns any text into a slug (accents transliterated, other
    characters replaced with dashes); strict mode requires a slug.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        mask = contract.get("mask")

        if not isinstance(data, str):
            if ctx.strict or not is_number(data):
                return self.fallback(contract, ctx, "Data is not a string.")
            data = str(data)
        if max_len is not None and len(data) > max_len:
            if ctx.strict:
                return self.fallback(contract, ctx, "Data doesn't respect contract (slug too long).")
            data = data[:max_len]
        if min_len is not None and len(data) < min_len:
            return self.fallback(contract, ctx, "Data doesn't respect contract (slug too short).")
        if mask and not match_mask(mask, data):
            return self.fallback(contract, ctx, "Data doesn't respect contract (slug doesn't match the given mask).")

        slug = urlize(data)
        if not ctx.strict:
            data = slug
        if not _SLUG_RE.match(data):
            return self.fallback(contract, ctx, "Data is not a valid slug.")
        return ValidationResult(data, slug)
