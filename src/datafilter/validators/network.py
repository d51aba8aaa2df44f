"""Network-related validators: email addresses, URLs, IP and MAC addresses.

Syntax checks of email addresses and URLs are delegated to pydantic, which
already ships well-tested validators for both.
"""

import ipaddress
import logging
import re
from typing import Any, Mapping
from urllib.parse import urlsplit

from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.networks import validate_email

from datafilter.contracts import ContractError
from datafilter.engine.context import CallContext, ValidationResult
from datafilter.utils import is_number, match_mask, parse_size, split_list
from datafilter.validators.base import Validator

__all__ = ['EmailValidator', 'UrlValidator', 'IpValidator', 'MacValidator', 'URL_COMPONENTS']

logger = logging.getLogger(__name__)

# URL parameters restricting a component to a list of allowed values.
URL_COMPONENTS = ('scheme', 'host', 'domain', 'port', 'user', 'pass', 'path', 'query', 'fragment')

_URL_ADAPTER = TypeAdapter(AnyUrl)

_MAC_PATTERNS = (
    re.compile(r"^[0-9a-fA-F]{2}(?::[0-9a-fA-F]{2}){5}$"),
    re.compile(r"^[0-9a-fA-F]{2}(?:-[0-9a-fA-F]{2}){5}$"),
    re.compile(r"^[0-9a-fA-F]{4}(?:\.[0-9a-fA-F]{4}){2}$"),
)


class EmailValidator(Validator):
    """Email addresses, normalized by ``email-validator``."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        mask = contract.get("mask")
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))

        # the "Name <address>" form is not an address
        if not isinstance(data, str) or "<" in data:
            return self.fallback(contract, ctx, "Data is not a valid email address.")
        try:
            _, email = validate_email(data.strip())
        except ValueError:
            return self.fallback(contract, ctx, "Data is not a valid email address.")

        if mask and not match_mask(mask, email):
            return self.fallback(contract, ctx, "Data doesn't respect contract (email doesn't match the given mask).")
        if min_len is not None and len(email) < min_len:
            return self.fallback(contract, ctx, "Data doesn't respect contract (string too short).")
        if max_len is not None and len(email) > max_len:
            return self.fallback(contract, ctx, "Data doesn't respect contract (string too long).")
        return ValidationResult(email, email)


class UrlValidator(Validator):
    """Absolute URLs with a scheme and a host.

    Besides ``minLen``/``maxLen`` and ``mask``, every URL component
    (``scheme``, ``host``, ``domain``, ``port``, ``user``, ``pass``,
    ``path``, ``query``, ``fragment``) may be restricted to a list of
    allowed values. ``domain`` is the host's last two labels.

    The result output holds the URL components.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        mask = contract.get("mask")
        min_len = parse_size(contract.get("minLen"))
        max_len = parse_size(contract.get("maxLen"))
        allowed = {}
        for name in URL_COMPONENTS:
            value = contract.get(name)
            if is_number(value):
                value = [value]
            values = split_list(value, name)
            if values is not None:
                allowed[name] = [str(value).strip() for value in values]

        if not isinstance(data, str):
            return self.fallback(contract, ctx, "Data is not a string.")
        if max_len is not None and len(data) > max_len:
            if ctx.strict:
                return self.fallback(contract, ctx, f"URL is too long ({len(data)} for a maximum of {max_len}).")
            data = data[:max_len]
        if min_len is not None and len(data) < min_len:
            return self.fallback(contract, ctx, "Data doesn't respect contract (URL too short).")
        if mask and not match_mask(mask, data):
            return self.fallback(contract, ctx, "Data doesn't respect contract (URL doesn't match the given mask).")

        try:
            url = _URL_ADAPTER.validate_python(data)
        except PydanticValidationError:
            return self.fallback(contract, ctx, "Data is not a valid URL.")
        if not url.host or any(char.isspace() for char in data):
            return self.fallback(contract, ctx, "Data is not a valid URL.")

        try:
            components = self._components(data)
        except ValueError:
            return self.fallback(contract, ctx, "Data is not a valid URL.")
        for name, values in allowed.items():
            component = components[name]
            if component is None or str(component) not in values:
                return self.fallback(contract, ctx, f"Data doesn't respect contract (bad URL {name}).")
        return ValidationResult(data, components)

    @staticmethod
    def _components(url: str) -> dict:
        parts = urlsplit(url)
        host = parts.hostname
        domain = host
        if host and host.count(".") >= 1 and not host.replace(".", "").isdigit():
            domain = ".".join(host.split(".")[-2:])
        return {
            "scheme": parts.scheme or None,
            "host": host,
            "domain": domain,
            "port": parts.port,
            "user": parts.username,
            "pass": parts.password,
            "path": parts.path or None,
            "query": parts.query or None,
            "fragment": parts.fragment or None,
        }


class IpValidator(Validator):
    """IPv4 and IPv6 addresses.

    The ``version`` parameter (4 or 6, set by the ``ipv4``/``ipv6``
    aliases) restricts the address family. The output is the detected
    version.
    """

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        version = contract.get("version")
        if version is not None:
            if str(version).strip() not in ("4", "6"):
                raise ContractError(f"Bad contract 'version' parameter '{version}'.")
            version = int(str(version).strip())

        message = "Data is not a valid IP address." if version is None else f"Data is not a valid IPv{version} address."
        if not isinstance(data, str):
            return self.fallback(contract, ctx, message)
        try:
            address = ipaddress.ip_address(data)
        except ValueError:
            return self.fallback(contract, ctx, message)
        if version is not None and address.version != version:
            return self.fallback(contract, ctx, message)
        return ValidationResult(data, address.version)


class MacValidator(Validator):
    """MAC addresses (``01:23:45:67:89:ab``, ``01-23-...`` or ``0123.4567.89ab``)."""

    def validate(self, data: Any, contract: Mapping[str, Any], ctx: CallContext) -> ValidationResult:
        if isinstance(data, str) and any(pattern.match(data) for pattern in _MAC_PATTERNS):
            return ValidationResult(data, data)
        return self.fallback(contract, ctx, "Data is not a valid MAC address.")
