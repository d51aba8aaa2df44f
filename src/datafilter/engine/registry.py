"""Type registry: maps type tokens to validators and contract templates.

A token resolves either to a :class:`Validator` subclass, or to an
:class:`AliasTemplate`, a contract used as a parametrized macro (``md5``
is ``{type: hash, algo: md5}``).

Reads go through an immutable snapshot of the alias table and never take
a lock. Registrations publish a new table (copy-on-write) under a lock,
which also guards the creation of validator instances.
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from datafilter.contracts import ContractError, require
from datafilter.engine.parser import normalize_params, parse_contract
from datafilter.validators import (
    AssocValidator,
    Base64Validator,
    BinaryValidator,
    BoolValidator,
    ColorValidator,
    DateTimeValidator,
    DateValidator,
    EanValidator,
    EmailValidator,
    EnumValidator,
    FloatValidator,
    GeoValidator,
    HashValidator,
    IntValidator,
    IpValidator,
    IsbnValidator,
    JsonValidator,
    ListValidator,
    MacValidator,
    NullValidator,
    PhoneValidator,
    SlugValidator,
    StringValidator,
    TimeValidator,
    UrlValidator,
    UuidValidator,
    Validator,
)

__all__ = ['Registry', 'AliasTemplate', 'BUILTIN_VALIDATORS', 'BUILTIN_TEMPLATES']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AliasTemplate:
    """Contract template an alias expands to.

    Attributes
    ----------
    contract : Mapping
        Template contract; always has a ``type``.
    inline : bool
        True if the template was written in the string syntax, so its
        literal defaults are read like those of inline contracts.
    """
    contract: Mapping[str, Any]
    inline: bool = False


BUILTIN_VALIDATORS = {
    "null": NullValidator,
    "bool": BoolValidator,
    "int": IntValidator,
    "float": FloatValidator,
    "string": StringValidator,
    "email": EmailValidator,
    "url": UrlValidator,
    "enum": EnumValidator,
    "list": ListValidator,
    "assoc": AssocValidator,
    "json": JsonValidator,
    "date": DateValidator,
    "time": TimeValidator,
    "datetime": DateTimeValidator,
    "uuid": UuidValidator,
    "isbn": IsbnValidator,
    "ean": EanValidator,
    "ip": IpValidator,
    "mac": MacValidator,
    "slug": SlugValidator,
    "base64": Base64Validator,
    "binary": BinaryValidator,
    "color": ColorValidator,
    "geo": GeoValidator,
    "phone": PhoneValidator,
    "hash": HashValidator,
}

BUILTIN_TEMPLATES = {
    "array": {"type": "list"},
    "true": {"type": "bool", "const": True},
    "false": {"type": "bool", "const": False},
    "port": {"type": "int", "min": 1, "max": 65535, "clamp": False},
    "ipv4": {"type": "ip", "version": 4},
    "ipv6": {"type": "ip", "version": 6},
    "md5": {"type": "hash", "algo": "md5"},
    "sha1": {"type": "hash", "algo": "sha1"},
    "sha256": {"type": "hash", "algo": "sha256"},
    "sha512": {"type": "hash", "algo": "sha512"},
}

Target = Union[type, Mapping[str, Any], str, AliasTemplate]


class Registry:
    """Alias table and validator instance cache.

    Parameters
    ----------
    aliases : Mapping, optional
        Extra aliases registered on top of the built-in ones.
    factory : callable, optional
        Called with a validator class to build its instance, for
        validators needing extra dependencies. Defaults to the bare
        constructor.

    Examples
    --------
    >>> registry = Registry()
    >>> registry.register("percent", {"type": "int", "min": 0, "max": 100})
    >>> registry.lookup("percent").contract["max"]
    100
    """

    def __init__(self, aliases: Optional[Mapping[str, Any]] = None,
                 factory: Optional[Callable[[type], Validator]] = None):
        self._lock = threading.Lock()
        self._factory = factory
        self._instances: Dict[type, Validator] = {}
        table: Dict[str, Any] = dict(BUILTIN_VALIDATORS)
        for token, template in BUILTIN_TEMPLATES.items():
            table[token] = AliasTemplate(MappingProxyType(dict(template)))
        self._aliases = MappingProxyType(table)
        if aliases:
            self.register(aliases)
        logger.info("Registry initialized with %d type tokens", len(self._aliases))

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, token: Union[str, Mapping[str, Target]], target: Optional[Target] = None) -> None:
        """Register one alias, or a mapping of aliases.

        Parameters
        ----------
        token : str or Mapping
            Alias token, or a mapping from tokens to targets.
        target : type, Mapping or str
            A :class:`Validator` subclass, a contract template mapping, or
            a contract string. A mapping without ``type`` is a record
            template.

        Raises
        ------
        ContractError
            If a token or a target is malformed.
        """
        if isinstance(token, Mapping):
            require(target is None, "register() takes either a mapping of aliases or a token and a target.")
            entries = {name: self._make_entry(name, value) for name, value in token.items()}
        else:
            entries = {token: self._make_entry(token, target)}

        with self._lock:
            table = dict(self._aliases)
            table.update(entries)
            self._aliases = MappingProxyType(table)
        for name, entry in entries.items():
            kind = entry.__name__ if isinstance(entry, type) else f"template {dict(entry.contract)!r}"
            logger.info("Registered type alias '%s' -> %s", name, kind)

    @staticmethod
    def _make_entry(token: Any, target: Any) -> Union[type, AliasTemplate]:
        require(isinstance(token, str) and bool(token.strip()), f"Bad alias token {token!r}.")
        require(
            not any(char in token for char in "|?~=;") and token.strip() == token,
            f"Bad alias token '{token}'.",
        )
        if isinstance(target, type):
            require(issubclass(target, Validator), f"Alias '{token}' target is not a Validator subclass.")
            return target
        if isinstance(target, AliasTemplate):
            return target
        inline = False
        if isinstance(target, str):
            target = parse_contract(target)
            inline = True
        elif isinstance(target, (list, tuple)):
            target = {"type": "assoc", "keys": list(target)}
        if not isinstance(target, Mapping):
            raise ContractError(f"Bad target for alias '{token}'.")
        contract = normalize_params(target)
        if not contract.get("type"):
            contract = {"type": "assoc", "keys": dict(target)}
        return AliasTemplate(MappingProxyType(contract), inline)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __contains__(self, token: str) -> bool:
        return token in self._aliases

    @property
    def tokens(self) -> frozenset:
        """All registered type tokens."""
        return frozenset(self._aliases)

    def lookup(self, token: str) -> Union[type, AliasTemplate]:
        """Return the validator class or template registered for a token.

        Raises
        ------
        ContractError
            If the token is unknown.
        """
        entry = self._aliases.get(token)
        if entry is None:
            raise ContractError(f"Unknown type '{token}'.")
        return entry

    def get_validator(self, token: str) -> Validator:
        """Return the shared validator instance for a token.

        Instances are built on first use, through the factory when one is
        set, then cached for the registry's lifetime.

        Raises
        ------
        ContractError
            If the token is unknown, is a template, or the factory didn't
            return a Validator.
        """
        entry = self.lookup(token)
        if isinstance(entry, AliasTemplate):
            raise ContractError(f"Type '{token}' is an alias, not a validator.")
        instance = self._instances.get(entry)
        if instance is not None:
            return instance
        with self._lock:
            instance = self._instances.get(entry)
            if instance is None:
                instance = self._factory(entry) if self._factory is not None else entry()
                if not isinstance(instance, Validator):
                    raise ContractError(f"Object built for type '{token}' is not a Validator.")
                self._instances[entry] = instance
                logger.debug("Created validator %s for type '%s'", entry.__name__, token)
        return instance
