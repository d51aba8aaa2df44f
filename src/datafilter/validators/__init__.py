"""Type validators.

One stateless :class:`Validator` subclass per supported type. Instances are
created and cached by the registry, and shared between calls.
"""

from .base import Validator
from .binary import Base64Validator, BinaryValidator
from .codes import (
    ColorValidator,
    EanValidator,
    HashValidator,
    IsbnValidator,
    PhoneValidator,
    SlugValidator,
    UuidValidator,
)
from .composite import AssocValidator, JsonValidator, ListValidator
from .enum import EnumValidator
from .geo import GeoValidator
from .network import EmailValidator, IpValidator, MacValidator, UrlValidator
from .scalar import BoolValidator, FloatValidator, IntValidator, NullValidator, StringValidator
from .temporal import DateTimeValidator, DateValidator, TimeValidator

__all__ = [
    'Validator',
    'NullValidator',
    'BoolValidator',
    'IntValidator',
    'FloatValidator',
    'StringValidator',
    'EmailValidator',
    'UrlValidator',
    'EnumValidator',
    'ListValidator',
    'AssocValidator',
    'JsonValidator',
    'DateTimeValidator',
    'DateValidator',
    'TimeValidator',
    'UuidValidator',
    'IsbnValidator',
    'EanValidator',
    'IpValidator',
    'MacValidator',
    'SlugValidator',
    'Base64Validator',
    'BinaryValidator',
    'ColorValidator',
    'GeoValidator',
    'PhoneValidator',
    'HashValidator',
]
