"""Date, time and date-time validators.

Formats use the ``strftime`` syntax. Input may be a text in the input
format or a Unix timestamp (number or numeric string, read as UTC). A
numeric string matching the input format exactly is read as a date, so
all-digit formats such as ``%Y%m%d`` keep working.

In loose mode, a text with overflowing fields is normalized the calendar
way: ``2026-02-30`` becomes ``2026-03-02`` and ``18:65:44`` becomes
``19:05:44``. Overflow is computed with ``dateutil.relativedelta``.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from dateutil.relativedelta import relativedelta

from datafilter.contracts import ContractError
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import is_number, is_numeric
from datafilter.validators.base import Validator

__all__ = ['DateTimeValidator', 'DateValidator', 'TimeValidator']

logger = logging.getLogger(__name__)

# strftime directive -> (field, pattern) for the overflow-tolerant parser
_OVERFLOW_FIELDS = {
    "Y": ("year", r"\d{4}"),
    "m": ("month", r"\d{1,2}"),
    "d": ("day", r"\d{1,2}"),
    "H": ("hour", r"\d{1,2}"),
    "M": ("minute", r"\d{1,2}"),
    "S": ("second", r"\d{1,2}"),
    "f": ("micro", r"\d{1,6}"),
}


def _overflow_pattern(fmt: str) -> Optional[re.Pattern]:
    """Regular expression reading the numeric fields of a format.

    Returns None if the format uses a directive other than the numeric
    ones of ``_OVERFLOW_FIELDS``.
    """
    parts = []
    seen = set()
    pos = 0
    while pos < len(fmt):
        char = fmt[pos]
        if char != "%":
            parts.append(re.escape(char))
            pos += 1
            continue
        directive = fmt[pos + 1:pos + 2]
        pos += 2
        if directive == "%":
            parts.append("%")
            continue
        if directive not in _OVERFLOW_FIELDS or directive in seen:
            return None
        seen.add(directive)
        field, pattern = _OVERFLOW_FIELDS[directive]
        parts.append(f"(?P<{field}>{pattern})")
    return re.compile("^" + "".join(parts) + "$")


def _parse_overflowing(text: str, fmt: str) -> Optional[datetime]:
    pattern = _overflow_pattern(fmt)
    if pattern is None:
        return None
    match = pattern.match(text)
    if match is None:
        return None
    fields = {name: int(value) for name, value in match.groupdict().items()}
    micro = match.group("micro") if "micro" in fields else None
    try:
        base = datetime(fields.get("year", 1900), 1, 1)
        return base + relativedelta(
            months=fields.get("month", 1) - 1,
            days=fields.get("day", 1) - 1,
            hours=fields.get("hour", 0),
            minutes=fields.get("minute", 0),
            seconds=fields.get("second", 0),
            microseconds=int(micro.ljust(6, "0")) if micro else 0,
        )
    except (ValueError, OverflowError):
        return None


def _from_timestamp(value: Any) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (ValueError, OverflowError, OSError):
        return None


def _as_utc(value: datetime) -> datetime:
    """Naive values are read as UTC."""
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


class DateTimeValidator(Validator):
    """Date-time values.

    Parameters
    ----------
    format
        Input and output format.
    inFormat, outFormat
        Input (also used for ``min``/``max``) and output formats,
        overriding ``format``.
    min, max
        Bounds, clamped in loose mode and enforced in strict mode.

    The result output holds the date components: ``iso``, ``timestamp``,
    ``timezone``, ``offset``, ``year``, ``month``, ``day``, ``hour``,
    ``minute``, ``second``, ``micro``.
    """

    DEFAULT_FORMAT = "%Y-%m-%d %H:%M:%S"
    LABEL = "date/time"

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        fmt = contract.get("format") or self.DEFAULT_FORMAT
        in_format = contract.get("inFormat") or fmt
        out_format = contract.get("outFormat") or fmt
        minimum = self._parse_bound(contract.get("min"), in_format, "Min")
        maximum = self._parse_bound(contract.get("max"), in_format, "Max")

        if isinstance(data, bool) or not (is_number(data) or isinstance(data, str)):
            return self.fallback(
                contract, ctx, f"Data is not a valid {self.LABEL} (not a string or a number)."
            )
        if is_number(data):
            value = _from_timestamp(data)
        elif is_numeric(data):
            # all-digit formats ("%Y%m%d") win over timestamps
            value = self._parse_text(data, in_format, True) or _from_timestamp(data)
        else:
            value = self._parse_text(data, in_format, ctx.strict)
        if value is None:
            return self.fallback(contract, ctx, f"Data is not a valid {self.LABEL}, or bad input format.")

        if minimum is not None and _as_utc(value) < _as_utc(minimum):
            if ctx.strict:
                return self.fallback(contract, ctx, f"Data doesn't respect contract ({self.LABEL} too early).")
            value = minimum
        if maximum is not None and _as_utc(value) > _as_utc(maximum):
            if ctx.strict:
                return self.fallback(contract, ctx, f"Data doesn't respect contract ({self.LABEL} too late).")
            value = maximum

        return ValidationResult(value.strftime(out_format), self._components(value))

    @staticmethod
    def _parse_text(text: str, fmt: str, strict: bool) -> Optional[datetime]:
        try:
            value = datetime.strptime(text, fmt)
        except ValueError:
            if strict:
                return None
            logger.debug("Reading %r with overflowing fields (format %r)", text, fmt)
            return _parse_overflowing(text.strip(), fmt)
        if strict and value.strftime(fmt) != text:
            return None
        return value

    def _parse_bound(self, bound: Any, fmt: str, label: str) -> Optional[datetime]:
        if bound is None or bound == "":
            return None
        if is_number(bound):
            value = _from_timestamp(bound)
        elif isinstance(bound, str):
            try:
                value = datetime.strptime(bound, fmt)
            except ValueError:
                value = None
        else:
            value = None
        if value is None:
            raise ContractError(f"{label} value is not a valid {self.LABEL}, or bad input format.")
        return value

    @staticmethod
    def _components(value: datetime) -> dict:
        offset = value.utcoffset()
        return {
            "iso": value.isoformat(timespec="milliseconds"),
            "timestamp": int(_as_utc(value).timestamp()),
            "timezone": value.tzname(),
            "offset": int(offset.total_seconds()) if offset is not None else 0,
            "year": value.year,
            "month": value.month,
            "day": value.day,
            "hour": value.hour,
            "minute": value.minute,
            "second": value.second,
            "micro": value.microsecond,
        }


class DateValidator(DateTimeValidator):
    """Dates (``%Y-%m-%d`` by default)."""

    DEFAULT_FORMAT = "%Y-%m-%d"
    LABEL = "date"


class TimeValidator(DateTimeValidator):
    """Times of day (``%H:%M:%S`` by default)."""

    DEFAULT_FORMAT = "%H:%M:%S"
    LABEL = "time"
