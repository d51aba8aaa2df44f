"""Geographic coordinates validator."""

import re
from typing import Any, Mapping, Optional, Tuple

from datafilter.contracts import ContractError
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import format_number
from datafilter.validators.base import Validator

__all__ = ['GeoValidator']

_COORDINATES_RE = re.compile(
    r"^[-+]?(?:[1-8]?\d(?:\.\d+)?|90(?:\.0+)?),\s*"
    r"[-+]?(?:180(?:\.0+)?|(?:1[0-7]\d|[1-9]?\d)(?:\.\d+)?)$"
)


def _parse(text: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(text, str):
        return None
    text = text.strip()
    if not _COORDINATES_RE.match(text):
        return None
    lat, lon = text.split(",")
    return float(lat), float(lon)


class GeoValidator(Validator):
    """``"latitude, longitude"`` strings.

    ``min`` is the south-west corner and ``max`` the north-east corner of
    the accepted area, both in the same syntax. Loose mode moves outside
    points to the nearest edge. The output is the ``(lat, lon)`` pair.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        south_west = self._corner(contract, "min")
        north_east = self._corner(contract, "max")

        point = _parse(data)
        if point is None:
            return self.fallback(contract, ctx, "Data is not a valid geo coordinates string.")
        lat, lon = point

        if south_west is not None and (lat < south_west[0] or lon < south_west[1]):
            if ctx.strict:
                return self.fallback(contract, ctx, "Data doesn't respect contract (geo coordinates too low).")
            lat, lon = max(lat, south_west[0]), max(lon, south_west[1])
        if north_east is not None and (lat > north_east[0] or lon > north_east[1]):
            if ctx.strict:
                return self.fallback(contract, ctx, "Data doesn't respect contract (geo coordinates too high).")
            lat, lon = min(lat, north_east[0]), min(lon, north_east[1])

        return ValidationResult(f"{format_number(lat)}, {format_number(lon)}", (lat, lon))

    @staticmethod
    def _corner(contract: Mapping[str, Any], name: str) -> Optional[Tuple[float, float]]:
        value = contract.get(name)
        if value is None or value == "":
            return None
        corner = _parse(value)
        if corner is None:
            raise ContractError(f"Bad contract '{name}' parameter.")
        return corner
