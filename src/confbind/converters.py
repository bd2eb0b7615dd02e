"""String-to-value conversion for declared parameter types.

Built-in conversions cover the integral types (``int`` and the fixed-width
types in :mod:`confbind.primitives`), ``float`` and ``Float32``, ``bool``,
``Char``, ``str``, enumerations, and the aggregate types ``list``, ``tuple``,
``set``, ``frozenset`` and ``dict`` whose elements are converted recursively.

A :class:`ConverterRegistry` maps raw types to custom converters. A custom
converter registered for a raw type is always preferred over the built-in
conversion for that type::

    >>> registry = ConverterRegistry({Path: lambda raw_type, type_arguments, text: Path(text)})
    >>> registry.convert(Path, "/etc/app")
"""

import collections.abc
import enum
import re
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from confbind.errors import UnsupportedTypeConversionError
from confbind.primitives import INTEGRAL_TYPES, Char, Float32
from confbind.type_token import TypeToken

__all__ = [
    "Converter",
    "ConverterRegistry",
    "decode_integer",
    "parse_float",
    "parse_bool",
    "parse_enum",
]

Converter = Callable[[type, tuple, str], Any]
"""A custom converter: ``(raw_type, type_arguments, text) -> value``.

``type_arguments`` is the tuple of :class:`~confbind.type_token.TypeToken` for
the declared type's actual type arguments, empty for non-generic types.
"""

_ELEMENT_SPLIT_REGEX = re.compile(r"\s*,\s*")
_KEY_VALUE_SPLIT_REGEX = re.compile(r"\s*:\s*")

_DIGITS = {
    16: re.compile(r"[0-9a-fA-F]+"),
    10: re.compile(r"[0-9]+"),
    8: re.compile(r"[0-7]+"),
}
_FLOAT_LITERAL = re.compile(r"[+-]?(NaN|Infinity|([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?)")


def _require_text(text: str, type_name: str):
    if not text:
        raise ValueError(f"Cannot convert an empty value to type {type_name}")


def decode_integer(text: str) -> int:
    """Parse an integral literal with an optional sign and radix prefix.

    ``0x``, ``0X`` and ``#`` select hexadecimal, a leading ``0`` selects octal,
    anything else is decimal.

    Example:
        >>> decode_integer("0x1F"), decode_integer("017"), decode_integer("-42")
        (31, 15, -42)
    """
    _require_text(text, "int")

    sign, digits = 1, text
    if digits[0] in "+-":
        sign, digits = (-1 if digits[0] == "-" else 1), digits[1:]

    if digits[:2] in ("0x", "0X"):
        radix, digits = 16, digits[2:]
    elif digits.startswith("#"):
        radix, digits = 16, digits[1:]
    elif digits.startswith("0") and len(digits) > 1:
        radix, digits = 8, digits[1:]
    else:
        radix = 10

    if not _DIGITS[radix].fullmatch(digits):
        raise ValueError(f"'{text}' is not a valid integral literal")
    return sign * int(digits, radix)


def parse_float(text: str) -> float:
    """Parse a decimal or scientific floating-point literal, independent of locale."""
    _require_text(text, "float")
    if not _FLOAT_LITERAL.fullmatch(text):
        raise ValueError(f"'{text}' is not a valid floating-point literal")
    return float(text.replace("Infinity", "inf"))


def parse_bool(text: str) -> bool:
    _require_text(text, "bool")
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"'{text}' is not a valid boolean literal, expected 'true' or 'false'")


def parse_enum(enum_type: type, text: str) -> enum.Enum:
    """Return the member of ``enum_type`` whose name equals ``text`` exactly."""
    _require_text(text, enum_type.__name__)
    member = enum_type.__members__.get(text)
    if member is None:
        raise ValueError(
            f"'{text}' is not a member of {enum_type.__name__}, "
            f"expected one of {list(enum_type.__members__)}"
        )
    return member


def _to_char(text: str) -> Char:
    return Char(text)


def _split_elements(text: str) -> list[str]:
    text = text.strip()
    return _ELEMENT_SPLIT_REGEX.split(text) if text else []


def _element_tokens(token: TypeToken) -> tuple:
    return token.type_arguments or (TypeToken.of(str),)


def _to_collection(registry: "ConverterRegistry", token: TypeToken, text: str) -> Any:
    element_token = _element_tokens(token)[0]
    factory = _COLLECTION_FACTORIES[token.raw_type]
    return factory(registry.convert(element_token, element) for element in _split_elements(text))


def _to_tuple(registry: "ConverterRegistry", token: TypeToken, text: str) -> tuple:
    elements = _split_elements(text)
    element_tokens = _element_tokens(token)
    if len(element_tokens) == 2 and element_tokens[1] is Ellipsis:
        element_tokens = (element_tokens[0],) * len(elements)
    elif not token.type_arguments:
        element_tokens = element_tokens * len(elements)
    elif len(element_tokens) != len(elements):
        raise ValueError(
            f"{token.name} expects {len(element_tokens)} elements, {len(elements)} given"
        )
    return tuple(
        registry.convert(element_token, element)
        for element_token, element in zip(element_tokens, elements)
    )


def _to_dict(registry: "ConverterRegistry", token: TypeToken, text: str) -> dict:
    key_token, value_token = token.type_arguments or (TypeToken.of(str), TypeToken.of(str))
    converted = {}
    for entry in _split_elements(text):
        if not entry:
            continue
        pair = _KEY_VALUE_SPLIT_REGEX.split(entry)
        if len(pair) != 2:
            raise ValueError(f"Maps support only key:value pairs, '{entry}' given")
        converted[registry.convert(key_token, pair[0])] = registry.convert(value_token, pair[1])
    return converted


_COLLECTION_FACTORIES = {
    list: list,
    set: set,
    frozenset: frozenset,
    collections.abc.Sequence: tuple,
    collections.abc.Collection: tuple,
    collections.abc.Set: frozenset,
}

_BUILTIN_CONVERTERS: dict[type, Callable[["ConverterRegistry", TypeToken, str], Any]] = {
    **{
        integral_type: lambda registry, token, text: token.raw_type(decode_integer(text))
        for integral_type in INTEGRAL_TYPES
    },
    float: lambda registry, token, text: parse_float(text),
    Float32: lambda registry, token, text: Float32(parse_float(text)),
    bool: lambda registry, token, text: parse_bool(text),
    str: lambda registry, token, text: text,
    Char: lambda registry, token, text: _to_char(text),
    tuple: _to_tuple,
    dict: _to_dict,
    collections.abc.Mapping: _to_dict,
    **{collection_type: _to_collection for collection_type in _COLLECTION_FACTORIES},
}


class ConverterRegistry:
    """An immutable table of custom converters, layered over the built-in conversions.

    Registries are assembled once during setup and then shared, read-only, by any
    number of binds. Use :meth:`extend` to derive a registry with more converters.

    Args:
        converters: Mapping of raw types to custom converters. A custom converter
            takes priority over the built-in conversion for exactly that raw type.
    """

    def __init__(self, converters: Optional[Mapping[type, Converter]] = None):
        self._converters = MappingProxyType(dict(converters or {}))

    @property
    def converters(self) -> Mapping[type, Converter]:
        return self._converters

    def extend(self, converters: Mapping[type, Converter]) -> "ConverterRegistry":
        """Return a new registry with ``converters`` added, replacing any for the same raw types."""
        return ConverterRegistry({**self._converters, **converters})

    def convert(self, declared_type: Any, text: str) -> Any:
        """Convert ``text`` to a value of ``declared_type``.

        Args:
            declared_type: A declared type (``int``, ``list[Color]``...) or a
                :class:`~confbind.type_token.TypeToken` describing one.
            text: The raw configuration literal.

        Returns:
            The converted value.

        Raises:
            UnsupportedTypeConversionError: If neither a custom nor a built-in
                converter handles the declared type's raw type.
            ValueError: If ``text`` is not a valid literal for a built-in conversion.
                Custom converters may raise any exception.
        """
        token = declared_type if isinstance(declared_type, TypeToken) else TypeToken.of(declared_type)

        custom = self._converters.get(token.raw_type)
        if custom is not None:
            return custom(token.raw_type, token.type_arguments, text)

        builtin = _BUILTIN_CONVERTERS.get(token.raw_type)
        if builtin is not None:
            return builtin(self, token, text)

        if issubclass(token.raw_type, enum.Enum):
            return parse_enum(token.raw_type, text)

        raise UnsupportedTypeConversionError(token.declared_type or token.raw_type)
